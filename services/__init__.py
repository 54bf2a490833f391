"""
Services Package

Business logic modules for the costing application.

The catalog repository (services.catalog) and the workbook serializer
(services.spreadsheet) are imported from their modules directly, since
they depend on the models and on pandas respectively.
"""

from .numbers import (
    normalize_number,
    derive_unit_cost,
)

from .energy import (
    FormulaError,
    compile_formula,
    compute_energy,
    default_energy,
    validate_formula,
)

from .cost import (
    required_quantity,
    effective_energy_cost,
    calculate_recipe_cost,
)

from .shopping import (
    Selection,
    SelectionList,
    consolidate,
    group_by_supplier,
    top_cost_items,
    shopping_list_csv,
)

from .formatting import (
    format_currency,
    format_quantity,
)

__all__ = [
    # Numbers
    'normalize_number',
    'derive_unit_cost',
    # Energy
    'FormulaError',
    'compile_formula',
    'compute_energy',
    'default_energy',
    'validate_formula',
    # Cost
    'required_quantity',
    'effective_energy_cost',
    'calculate_recipe_cost',
    # Shopping
    'Selection',
    'SelectionList',
    'consolidate',
    'group_by_supplier',
    'top_cost_items',
    'shopping_list_csv',
    # Formatting
    'format_currency',
    'format_quantity',
]
