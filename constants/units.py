"""
Unit Constants

Display units and labels used when an item leaves a field blank.
"""

# Unit shown for ingredient quantities when none was recorded
DEFAULT_INGREDIENT_UNIT = 'g'

# Unit shown for supply quantities when none was recorded
DEFAULT_SUPPLY_UNIT = 'unidad'

# Supplier label for ingredients without one (shopping list grouping)
NO_SUPPLIER = 'Sin proveedor'
