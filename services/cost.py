"""
Cost Calculation Service

Functions for costing a single recipe at a requested number of units.

Everything here is a pure function over the objects it is given. Links
are the recipe's RecipeIngredient / RecipeSupply / RecipeEquipment rows
(or anything with the same attributes); a link whose catalog item has
been deleted is skipped.
"""

from constants import DEFAULT_ENERGY_COST, DEFAULT_INGREDIENT_UNIT, DEFAULT_SUPPLY_UNIT
from .energy import compute_energy
from .numbers import normalize_number


def required_quantity(base_quantity, base_yield, requested_units):
    """
    Scale a per-batch quantity to the requested units.

    required = base_quantity * (requested_units / base_yield), or 0 when
    the recipe has no usable yield.
    """
    base_yield = normalize_number(base_yield, 0.0)
    if base_yield <= 0:
        return 0.0
    return normalize_number(base_quantity, 0.0) * (normalize_number(requested_units, 0.0) / base_yield)


def effective_energy_cost(equipment, global_energy_cost=DEFAULT_ENERGY_COST):
    """Energy unit cost for equipment: its own rate when set and positive, else the global rate."""
    own_cost = normalize_number(getattr(equipment, 'energy_cost', None), None)
    if own_cost is not None and own_cost > 0:
        return own_cost
    return normalize_number(global_energy_cost, DEFAULT_ENERGY_COST)


def empty_breakdown(requested_units=0.0, base_yield=0.0):
    """Cost breakdown with no rows and all totals at zero."""
    return {
        'requested_units': requested_units,
        'base_yield': base_yield,
        'ingredient_rows': [],
        'supply_rows': [],
        'equipment_rows': [],
        'total_ingredients': 0.0,
        'total_supplies': 0.0,
        'total_energy': 0.0,
        'total': 0.0,
        'unit_cost': 0.0,
    }


def calculate_recipe_cost(recipe, ingredient_links, supply_links, equipment_links,
                          requested_units, global_energy_cost=DEFAULT_ENERGY_COST):
    """
    Calculate what it costs to produce `requested_units` of a recipe.

    Ingredient and supply quantities are stored per batch of the recipe's
    base yield and scale linearly with the requested units. Equipment
    hours are taken as recorded on the link; they do not scale.

    Args:
        recipe: Recipe (or None) providing base_yield
        ingredient_links: iterable of links with .ingredient and .quantity
        supply_links: iterable of links with .supply and .quantity
        equipment_links: iterable of links with .equipment and .hours
        requested_units: Units to produce
        global_energy_cost: Currency per kWh for equipment without its own rate

    Returns:
        dict with the row lists, category subtotals, total and unit_cost.
        An absent recipe, zero requested units or zero base yield give an
        all-zero breakdown.
    """
    units = normalize_number(requested_units, 0.0)
    base_yield = normalize_number(recipe.base_yield, 0.0) if recipe is not None else 0.0

    result = empty_breakdown(units, base_yield)
    if recipe is None or units <= 0 or base_yield <= 0:
        return result

    for link in ingredient_links or []:
        ingredient = link.ingredient
        if ingredient is None:
            continue  # Skip if ingredient was deleted

        required = required_quantity(link.quantity, base_yield, units)
        cost = required * normalize_number(ingredient.unit_cost, 0.0)
        result['total_ingredients'] += cost
        result['ingredient_rows'].append({
            'name': ingredient.name,
            'qty': required,
            'unit': ingredient.unit or DEFAULT_INGREDIENT_UNIT,
            'cost': cost,
        })

    for link in supply_links or []:
        supply = link.supply
        if supply is None:
            continue

        required = required_quantity(link.quantity, base_yield, units)
        cost = required * normalize_number(supply.unit_cost, 0.0)
        result['total_supplies'] += cost
        result['supply_rows'].append({
            'name': supply.name,
            'qty': required,
            'unit': supply.package_unit or DEFAULT_SUPPLY_UNIT,
            'cost': cost,
        })

    for link in equipment_links or []:
        equipment = link.equipment
        if equipment is None:
            continue

        hours = normalize_number(link.hours, 0.0)
        kwh = compute_energy(equipment.power_watts, hours, equipment.formula)
        cost = kwh * effective_energy_cost(equipment, global_energy_cost)
        result['total_energy'] += cost
        result['equipment_rows'].append({
            'name': equipment.name,
            'hours': hours,
            'kwh': kwh,
            'cost': cost,
        })

    result['total'] = result['total_ingredients'] + result['total_supplies'] + result['total_energy']
    result['unit_cost'] = result['total'] / units
    return result
