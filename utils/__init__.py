# Utility modules for the costing app
from .sanitizer import sanitize_name, sanitize_text
