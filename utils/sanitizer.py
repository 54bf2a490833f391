"""
Input Sanitization Module

Cleans user-supplied and imported text before it is stored in the catalog.
"""

import re

from constants import MAX_LENGTHS

_CONTROL_CHARS = re.compile(r'[\x00-\x1f\x7f-\x9f]')
# Same as above but keeps tab and newline for multi-line fields
_CONTROL_CHARS_MULTILINE = re.compile(r'[\x00-\x08\x0b-\x1f\x7f-\x9f]')


def sanitize_name(name, max_length=None, default=''):
    """
    Sanitize a display name for safe storage.

    Args:
        name: The name to sanitize (can be None or a non-string cell value)
        max_length: Maximum allowed length (default MAX_LENGTHS['name'])
        default: Returned when nothing is left after cleaning

    Returns:
        Sanitized single-line name
    """
    if max_length is None:
        max_length = MAX_LENGTHS['name']

    if name is None:
        return default

    if not isinstance(name, str):
        name = str(name)

    # Remove control characters and null bytes
    name = _CONTROL_CHARS.sub('', name)

    # Collapse multiple spaces
    name = re.sub(r'\s+', ' ', name).strip()

    # Truncate if too long
    if len(name) > max_length:
        name = name[:max_length-3] + '...'

    if not name:
        return default

    return name


def sanitize_text(text, max_length=10000):
    """
    Sanitize free text such as descriptions or preparation steps.

    Preserves newlines for formatting.

    Args:
        text: The text to sanitize (can be None)
        max_length: Maximum allowed length (default 10000)

    Returns:
        Sanitized string, truncated if necessary
    """
    if text is None:
        return ''

    if not isinstance(text, str):
        text = str(text)

    text = _CONTROL_CHARS_MULTILINE.sub('', text).strip()

    if len(text) > max_length:
        text = text[:max_length] + '\n...(truncated)'

    return text
