"""
Shopping List Service

Consolidates several selected recipes into one shopping list and
exports it.
"""

import csv
import io

from constants import DEFAULT_ENERGY_COST, DEFAULT_INGREDIENT_UNIT, DEFAULT_SUPPLY_UNIT, NO_SUPPLIER
from .cost import calculate_recipe_cost, effective_energy_cost
from .energy import default_energy
from .formatting import format_quantity
from .numbers import normalize_number

CSV_HEADER = ['Categoría', 'Proveedor', 'Ítem', 'Cantidad Necesaria', 'Unidad', 'Costo Estimado']


class Selection:
    """A recipe picked for the shopping list, produced `multiplier` times its base yield."""

    def __init__(self, recipe, multiplier=1):
        self.recipe = recipe
        self.multiplier = multiplier

    def __repr__(self):
        return f"Selection({self.recipe!r}, {self.multiplier!r})"


class SelectionList:
    """
    Ordered list of (recipe_id, multiplier) picks.

    Adding a recipe that is already listed bumps its multiplier instead of
    listing it twice. Stored as plain pairs so it fits in the session cookie.
    """

    def __init__(self, pairs=None):
        self._items = []
        for recipe_id, multiplier in pairs or []:
            self.set_multiplier(recipe_id, multiplier, create=True)

    @classmethod
    def from_pairs(cls, pairs):
        return cls(pairs)

    def pairs(self):
        return [[recipe_id, multiplier] for recipe_id, multiplier in self._items]

    def _index(self, recipe_id):
        for i, (existing_id, _) in enumerate(self._items):
            if existing_id == recipe_id:
                return i
        return None

    def add(self, recipe_id):
        """Add a recipe once more. Returns its new multiplier."""
        i = self._index(recipe_id)
        if i is None:
            self._items.append((recipe_id, 1))
            return 1
        multiplier = self._items[i][1] + 1
        self._items[i] = (recipe_id, multiplier)
        return multiplier

    def set_multiplier(self, recipe_id, value, create=False):
        """
        Set how many batches of a recipe to produce (at least 1).

        Returns False when the recipe is not listed and `create` is off.
        """
        multiplier = max(1, normalize_number(value, 1))
        if multiplier == int(multiplier):
            multiplier = int(multiplier)
        i = self._index(recipe_id)
        if i is None:
            if not create:
                return False
            self._items.append((recipe_id, multiplier))
        else:
            self._items[i] = (recipe_id, multiplier)
        return True

    def remove(self, recipe_id):
        """Drop a recipe from the list. Returns False if it was not listed."""
        i = self._index(recipe_id)
        if i is None:
            return False
        del self._items[i]
        return True

    def clear(self):
        self._items = []

    def __iter__(self):
        return iter(self._items)

    def __len__(self):
        return len(self._items)

    def __contains__(self, recipe_id):
        return self._index(recipe_id) is not None


def _recipe_yield(recipe):
    # Recipes without a usable yield count as producing one unit per batch
    base_yield = normalize_number(recipe.base_yield, 0.0)
    return base_yield if base_yield > 0 else 1.0


def consolidate(selections, global_energy_cost=DEFAULT_ENERGY_COST):
    """
    Generate a consolidated shopping list from selected recipes.

    Each selection produces `multiplier * base_yield` units. Usage of the
    same ingredient, supply or equipment across recipes is merged into
    one row keyed by the item's id. Equipment hours scale with the
    multiplier and are costed at (power/1000) * hours kWh.

    Args:
        selections: iterable of Selection
        global_energy_cost: Currency per kWh for equipment without its own rate

    Returns:
        dict shaped like calculate_recipe_cost() plus total_units,
        recipe_count and a per-recipe breakdown.
    """
    ingredients = {}
    supplies = {}
    equipment_usage = {}
    total_units = 0.0
    breakdown = []

    for selection in selections:
        recipe = selection.recipe
        multiplier = normalize_number(selection.multiplier, 1)
        base_yield = _recipe_yield(recipe)
        recipe_units = multiplier * base_yield
        total_units += recipe_units

        for link in recipe.ingredients:
            ingredient = link.ingredient
            if ingredient is None:
                continue  # Skip if ingredient was deleted

            qty = (normalize_number(link.quantity, 0.0) / base_yield) * recipe_units
            cost = qty * normalize_number(ingredient.unit_cost, 0.0)

            if ingredient.id in ingredients:
                ingredients[ingredient.id]['qty'] += qty
                ingredients[ingredient.id]['cost'] += cost
            else:
                ingredients[ingredient.id] = {
                    'ingredient_id': ingredient.id,
                    'name': ingredient.name,
                    'supplier': ingredient.supplier or NO_SUPPLIER,
                    'qty': qty,
                    'unit': ingredient.unit or DEFAULT_INGREDIENT_UNIT,
                    'cost': cost,
                }

        for link in recipe.supplies:
            supply = link.supply
            if supply is None:
                continue

            qty = (normalize_number(link.quantity, 0.0) / base_yield) * recipe_units
            cost = qty * normalize_number(supply.unit_cost, 0.0)

            if supply.id in supplies:
                supplies[supply.id]['qty'] += qty
                supplies[supply.id]['cost'] += cost
            else:
                supplies[supply.id] = {
                    'supply_id': supply.id,
                    'name': supply.name,
                    'qty': qty,
                    'unit': supply.package_unit or DEFAULT_SUPPLY_UNIT,
                    'cost': cost,
                }

        for link in recipe.equipment:
            equipment = link.equipment
            if equipment is None:
                continue

            hours = normalize_number(link.hours, 0.0) * multiplier
            power = normalize_number(equipment.power_watts, 0.0)
            cost = default_energy(power, hours) * effective_energy_cost(equipment, global_energy_cost)

            if equipment.id in equipment_usage:
                equipment_usage[equipment.id]['hours'] += hours
                equipment_usage[equipment.id]['cost'] += cost
            else:
                equipment_usage[equipment.id] = {
                    'equipment_id': equipment.id,
                    'name': equipment.name,
                    'power': power,
                    'hours': hours,
                    'cost': cost,
                }

        recipe_result = calculate_recipe_cost(
            recipe, recipe.ingredients, recipe.supplies, recipe.equipment,
            recipe_units, global_energy_cost,
        )
        breakdown.append({
            'recipe_id': recipe.id,
            'name': recipe.name,
            'multiplier': multiplier,
            **recipe_result,
        })

    ingredient_rows = list(ingredients.values())
    supply_rows = list(supplies.values())
    equipment_rows = [
        {
            'equipment_id': item['equipment_id'],
            'name': item['name'],
            'hours': item['hours'],
            'kwh': default_energy(item['power'], item['hours']),
            'cost': item['cost'],
        }
        for item in equipment_usage.values()
    ]

    total_ingredients = sum(row['cost'] for row in ingredient_rows)
    total_supplies = sum(row['cost'] for row in supply_rows)
    total_energy = sum(row['cost'] for row in equipment_rows)
    total = total_ingredients + total_supplies + total_energy

    return {
        'ingredient_rows': ingredient_rows,
        'supply_rows': supply_rows,
        'equipment_rows': equipment_rows,
        'total_ingredients': total_ingredients,
        'total_supplies': total_supplies,
        'total_energy': total_energy,
        'total': total,
        'unit_cost': total / total_units if total_units > 0 else 0.0,
        'total_units': total_units,
        'recipe_count': len(breakdown),
        'breakdown': breakdown,
    }


def group_by_supplier(rows):
    """Group ingredient rows by supplier, keeping first-seen supplier order."""
    grouped = {}
    for row in rows:
        grouped.setdefault(row.get('supplier') or NO_SUPPLIER, []).append(row)
    return grouped


def top_cost_items(result, limit=10):
    """
    Rank every row of a consolidated result by cost.

    Each item carries its category and its share of the overall total.
    """
    total = result.get('total') or 0.0
    items = []
    for category, key in (('ingredient', 'ingredient_rows'),
                          ('supply', 'supply_rows'),
                          ('energy', 'equipment_rows')):
        for row in result.get(key, []):
            items.append({
                'name': row['name'],
                'category': category,
                'cost': row['cost'],
                'share': row['cost'] / total if total > 0 else 0.0,
            })
    items.sort(key=lambda x: x['cost'], reverse=True)
    return items[:limit]


def _whole_cost(cost):
    return f"{normalize_number(cost, 0.0):.0f}"


def shopping_list_csv(result, include_ingredients=True, include_supplies=True,
                      include_energy=True, by_supplier=False):
    """
    Render a consolidated shopping list as CSV text.

    Returns an empty string when no selected category has rows.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator='\n')
    writer.writerow(CSV_HEADER)
    written = 0

    ingredient_rows = result.get('ingredient_rows', [])
    if include_ingredients and ingredient_rows:
        if by_supplier:
            for supplier, rows in group_by_supplier(ingredient_rows).items():
                writer.writerow(['Proveedor', supplier, '', '', '', ''])
                for row in rows:
                    writer.writerow(['Ingrediente', supplier, row['name'], format_quantity(row['qty']),
                                     row['unit'], _whole_cost(row['cost'])])
                    written += 1
                writer.writerow([])
        else:
            for row in ingredient_rows:
                writer.writerow(['Ingrediente', row.get('supplier') or NO_SUPPLIER, row['name'],
                                 format_quantity(row['qty']), row['unit'], _whole_cost(row['cost'])])
                written += 1

    if include_supplies:
        for row in result.get('supply_rows', []):
            writer.writerow(['Insumo', '', row['name'], format_quantity(row['qty']),
                             row['unit'], _whole_cost(row['cost'])])
            written += 1

    if include_energy:
        for row in result.get('equipment_rows', []):
            usage = f"{format_quantity(row['hours'])} h ({format_quantity(row['kwh'])} kWh)"
            writer.writerow(['Energía', '', row['name'], usage, '', _whole_cost(row['cost'])])
            written += 1

    if not written:
        return ''
    return buffer.getvalue()
