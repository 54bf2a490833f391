"""
Validation Constants

Limits applied to user input before it reaches the catalog.
"""

# Spreadsheet formats accepted by the import endpoint
ALLOWED_IMPORT_EXTENSIONS = {'xlsx'}

# Longest energy formula accepted; longer input is rejected before parsing
MAX_FORMULA_LENGTH = 200

# Maximum field lengths for security
MAX_LENGTHS = {
    'name': 200,
    'unit': 20,
    'supplier': 100,
    'description': 2000,
    'steps': 50000,
}
