"""
Constants Package

Defaults, validation limits and seed data for the costing application.
"""

from .units import (
    DEFAULT_INGREDIENT_UNIT,
    DEFAULT_SUPPLY_UNIT,
    NO_SUPPLIER,
)

from .costing import (
    DEFAULT_ENERGY_COST,
    DEFAULT_ENERGY_FORMULA,
    DEFAULT_BASE_YIELD,
    FORMULA_VARIABLES,
    ENERGY_COST_SETTING,
)

from .validation import (
    ALLOWED_IMPORT_EXTENSIONS,
    MAX_LENGTHS,
    MAX_FORMULA_LENGTH,
)

__all__ = [
    # Units
    'DEFAULT_INGREDIENT_UNIT',
    'DEFAULT_SUPPLY_UNIT',
    'NO_SUPPLIER',
    # Costing
    'DEFAULT_ENERGY_COST',
    'DEFAULT_ENERGY_FORMULA',
    'DEFAULT_BASE_YIELD',
    'FORMULA_VARIABLES',
    'ENERGY_COST_SETTING',
    # Validation
    'ALLOWED_IMPORT_EXTENSIONS',
    'MAX_LENGTHS',
    'MAX_FORMULA_LENGTH',
]
