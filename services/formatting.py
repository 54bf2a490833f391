"""
Display Formatting

Currency and quantity formatting for shopping lists and exports.
"""

from babel.numbers import format_currency as babel_format_currency
from babel.numbers import format_decimal

from .numbers import normalize_number

LOCALE = 'es_CL'
CURRENCY = 'CLP'


def format_currency(value, currency=CURRENCY, locale=LOCALE):
    """Format an amount as whole currency units, e.g. "$1.235". Missing values show as "–"."""
    amount = normalize_number(value, None)
    if amount is None:
        return '–'
    return babel_format_currency(round(amount), currency, format='¤#,##0',
                                 locale=locale, currency_digits=False)


def format_quantity(value, locale=LOCALE):
    """Format a quantity with at most one decimal."""
    qty = normalize_number(value, None)
    if qty is None:
        return '0'
    return format_decimal(qty, format='#,##0.#', locale=locale)
