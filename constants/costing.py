"""
Costing Constants

Defaults for recipe yield and the equipment energy model.
"""

# Currency per kWh used when equipment has no rate of its own
DEFAULT_ENERGY_COST = 230.0

# kWh consumed by equipment rated `power` watts running `time` hours
DEFAULT_ENERGY_FORMULA = '(power/1000) * time'

# Units a recipe yields when no valid base yield was given
DEFAULT_BASE_YIELD = 1.0

# Names an energy formula may reference, mapped to the value they read.
# potenciaWatts/tiempoHoras come from workbooks written by the older tool.
FORMULA_VARIABLES = {
    'power': 'power',
    'time': 'time',
    'potenciaWatts': 'power',
    'tiempoHoras': 'time',
}

# Settings key holding the global energy unit cost
ENERGY_COST_SETTING = 'energy_cost'
