"""
Numeric Normalization

Coerces loosely typed form, spreadsheet and catalog values into finite
floats so a bad field degrades to a zero cost instead of an exception.
"""

import math


def normalize_number(value, default=0.0):
    """
    Parse value as a finite float, falling back to default.

    None, blank strings, unparseable values, NaN and infinities all
    return default. Never raises.
    """
    if value is None:
        return default
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return default
    try:
        result = float(value)
    except (ValueError, TypeError, OverflowError):
        return default
    if not math.isfinite(result):
        return default
    return result


def derive_unit_cost(package_cost, package_qty):
    """Cost of one unit of a package: package_cost / package_qty, or 0 for empty packages."""
    cost = normalize_number(package_cost, 0.0)
    qty = normalize_number(package_qty, 0.0)
    if qty > 0:
        return cost / qty
    return 0.0
