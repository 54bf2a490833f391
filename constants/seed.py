"""
Seed Data

Starter catalog loaded by ``flask seed``: a handful of ingredients with
their suppliers, packaging, the oven, and two recipes wired to them.
"""

# (name, package grams, package cost, supplier)
_INGREDIENTS = [
    ('Harina floja', 25000, 18445, 'La estampa'),
    ('Azúcar', 1000, 1000, ''),
    ('Azúcar morena', 1000, 1700, 'La vega'),
    ('Mantequilla sin sal', 250, 2500, 'La vega'),
    ('Huevos', 1500, 7000, 'Don Héctor'),
    ('Miel', 1000, 4900, 'La vega'),
    ('Polvos de hornear', 1000, 3200, 'La vega'),
    ('Nueces', 1000, 8500, 'La vega'),
]

# (name, package units, package cost)
_SUPPLIES = [
    ('Caja torta', 1, 1800),
    ('Bolsa celofán 30x40', 100, 5800),
    ('Capsula pan de pascua', 20, 3200),
]

# (name, watts)
_EQUIPMENT = [
    ('Horno', 2770),
    ('Batidora pedestal', 800),
]

_RECIPES = [
    {
        'name': 'Cupcakes de vainilla',
        'description': 'Cupcakes esponjosos de vainilla clásica.',
        'base_yield': 12,
        'oven_minutes': 20,
        'oven_temperature': 180,
        'steps': '1) Batir mantequilla con azúcar.\n2) Agregar huevos.\n3) Incorporar harina.\n4) Hornear.',
        'ingredients': [('Harina floja', 200), ('Azúcar', 150), ('Mantequilla sin sal', 120), ('Huevos', 3)],
        'supplies': [('Caja torta', 1)],
        'equipment': [('Horno', 20 / 60)],
    },
    {
        'name': 'Pan de pascua',
        'description': 'Pan de pascua tradicional de 1 kg',
        'base_yield': 1,
        'oven_minutes': 90,
        'oven_temperature': 180,
        'steps': '1) Batir mantequilla con azúcar.\n2) Agregar huevos y miel.\n3) Incorporar secos y frutos.\n4) Hornear.',
        'ingredients': [('Mantequilla sin sal', 112.45), ('Azúcar morena', 112.45), ('Harina floja', 240.96),
                        ('Huevos', 168.67), ('Miel', 32.13), ('Polvos de hornear', 8.03), ('Nueces', 51.41)],
        'supplies': [('Capsula pan de pascua', 1), ('Bolsa celofán 30x40', 1)],
        'equipment': [('Batidora pedestal', 0.25), ('Horno', 1.5)],
    },
]


def seed_snapshot():
    """Build the starter catalog as a snapshot for CatalogRepository.restore()."""
    ingredients = [
        {'id': i, 'name': name, 'unit': 'g', 'package_qty': qty, 'package_unit': 'g',
         'package_cost': cost, 'supplier': supplier}
        for i, (name, qty, cost, supplier) in enumerate(_INGREDIENTS, start=1)
    ]
    supplies = [
        {'id': i, 'name': name, 'package_qty': qty, 'package_unit': 'unidad', 'package_cost': cost}
        for i, (name, qty, cost) in enumerate(_SUPPLIES, start=1)
    ]
    equipment = [
        {'id': i, 'name': name, 'power_watts': watts, 'energy_cost': None}
        for i, (name, watts) in enumerate(_EQUIPMENT, start=1)
    ]

    ingredient_ids = {item['name']: item['id'] for item in ingredients}
    supply_ids = {item['name']: item['id'] for item in supplies}
    equipment_ids = {item['name']: item['id'] for item in equipment}

    recipes = []
    recipe_ingredients = []
    recipe_supplies = []
    recipe_equipment = []
    for recipe_id, data in enumerate(_RECIPES, start=1):
        recipe = {key: value for key, value in data.items()
                  if key not in ('ingredients', 'supplies', 'equipment')}
        recipes.append({'id': recipe_id, **recipe})
        for name, qty in data['ingredients']:
            recipe_ingredients.append({'id': len(recipe_ingredients) + 1, 'recipe_id': recipe_id,
                                       'ingredient_id': ingredient_ids[name], 'quantity': qty})
        for name, qty in data['supplies']:
            recipe_supplies.append({'id': len(recipe_supplies) + 1, 'recipe_id': recipe_id,
                                    'supply_id': supply_ids[name], 'quantity': qty})
        for name, hours in data['equipment']:
            recipe_equipment.append({'id': len(recipe_equipment) + 1, 'recipe_id': recipe_id,
                                     'equipment_id': equipment_ids[name], 'hours': hours})

    return {
        'ingredients': ingredients,
        'supplies': supplies,
        'equipment': equipment,
        'recipes': recipes,
        'recipe_ingredients': recipe_ingredients,
        'recipe_supplies': recipe_supplies,
        'recipe_equipment': recipe_equipment,
        'energy_cost': 230,
    }
