import pytest

from models import Equipment, RecipeIngredient
from services.cost import calculate_recipe_cost, effective_energy_cost, required_quantity


def cost_of(recipe, units, global_energy_cost=230):
    return calculate_recipe_cost(recipe, recipe.ingredients, recipe.supplies, recipe.equipment,
                                 units, global_energy_cost)


def test_required_quantity_scales_linearly():
    assert required_quantity(200, 12, 12) == 200
    assert required_quantity(200, 12, 24) == 400
    assert required_quantity(200, 12, 48) == 2 * required_quantity(200, 12, 24)
    assert required_quantity(200, 12, 6) == 100


def test_required_quantity_without_yield():
    assert required_quantity(200, 0, 24) == 0.0
    assert required_quantity(200, None, 24) == 0.0


def test_cupcakes_for_24_units(flour, make_recipe):
    cupcakes = make_recipe(1, 'Cupcakes', 12, ingredients=[(flour, 200)])

    result = cost_of(cupcakes, 24)

    assert result['ingredient_rows'] == [{'name': 'Flour', 'qty': 400.0, 'unit': 'g', 'cost': 400.0}]
    assert result['total_ingredients'] == pytest.approx(400)
    assert result['total_supplies'] == 0
    assert result['total_energy'] == 0
    assert result['total'] == pytest.approx(400)
    assert result['unit_cost'] == pytest.approx(16.67, abs=0.01)
    assert result['requested_units'] == 24
    assert result['base_yield'] == 12


def test_supplies_scale_with_units(box, make_recipe):
    cake = make_recipe(1, 'Cake', 12, supplies=[(box, 1)])

    result = cost_of(cake, 24)

    assert result['supply_rows'] == [{'name': 'Cake box', 'qty': 2.0, 'unit': 'unidad', 'cost': 1000.0}]
    assert result['total'] == pytest.approx(1000)


def test_equipment_uses_global_energy_cost(oven, make_recipe):
    bread = make_recipe(1, 'Bread', 1, equipment=[(oven, 1.5)])

    result = cost_of(bread, 1, global_energy_cost=230)

    row = result['equipment_rows'][0]
    assert row['kwh'] == pytest.approx(3.0)
    assert row['cost'] == pytest.approx(690)
    assert result['total_energy'] == pytest.approx(690)


def test_equipment_hours_do_not_scale_with_units(oven, make_recipe):
    bread = make_recipe(1, 'Bread', 1, equipment=[(oven, 1.5)])

    result = cost_of(bread, 10)

    assert result['equipment_rows'][0]['hours'] == 1.5
    assert result['total_energy'] == pytest.approx(690)
    assert result['unit_cost'] == pytest.approx(69)


def test_equipment_own_energy_cost_wins(oven, make_recipe):
    oven.energy_cost = 100
    bread = make_recipe(1, 'Bread', 1, equipment=[(oven, 1.5)])

    assert cost_of(bread, 1)['total_energy'] == pytest.approx(300)


@pytest.mark.parametrize('own_cost', [None, 0, -5])
def test_effective_energy_cost_falls_back_to_global(own_cost):
    equipment = Equipment(name='Mixer', power_watts=800, energy_cost=own_cost)
    assert effective_energy_cost(equipment, 150) == 150


def test_invalid_global_energy_cost_uses_default():
    equipment = Equipment(name='Mixer', power_watts=800)
    assert effective_energy_cost(equipment, 'abc') == 230


def test_equipment_formula_applies(make_recipe):
    mixer = Equipment(id=2)
    mixer.apply({'name': 'Mixer', 'power_watts': 800, 'formula': '(power/1000) * time * 0.5'})
    dough = make_recipe(1, 'Dough', 1, equipment=[(mixer, 2)])

    result = cost_of(dough, 1, global_energy_cost=100)

    assert result['equipment_rows'][0]['kwh'] == pytest.approx(0.8)
    assert result['total_energy'] == pytest.approx(80)


def test_all_categories_add_up(flour, box, oven, make_recipe):
    cake = make_recipe(1, 'Cake', 12, ingredients=[(flour, 200)], supplies=[(box, 1)], equipment=[(oven, 1.5)])

    result = cost_of(cake, 12)

    assert result['total'] == pytest.approx(200 + 500 + 690)
    assert result['unit_cost'] == pytest.approx((200 + 500 + 690) / 12)


def test_deleted_ingredient_is_skipped(flour, make_recipe):
    cake = make_recipe(1, 'Cake', 12, ingredients=[(flour, 200)])
    cake.ingredients.append(RecipeIngredient(quantity=50))

    result = cost_of(cake, 12)

    assert len(result['ingredient_rows']) == 1
    assert result['total'] == pytest.approx(200)


@pytest.mark.parametrize('units', [0, -3, None, 'abc'])
def test_no_units_gives_zero_result(flour, oven, make_recipe, units):
    cake = make_recipe(1, 'Cake', 12, ingredients=[(flour, 200)], equipment=[(oven, 1)])

    result = cost_of(cake, units)

    assert result['total'] == 0
    assert result['unit_cost'] == 0
    assert result['ingredient_rows'] == []
    assert result['equipment_rows'] == []


def test_zero_yield_gives_zero_result(flour, make_recipe):
    cake = make_recipe(1, 'Cake', 0, ingredients=[(flour, 200)])

    result = cost_of(cake, 24)

    assert result['total'] == 0
    assert result['unit_cost'] == 0
    assert result['ingredient_rows'] == []


def test_missing_recipe_gives_zero_result():
    result = calculate_recipe_cost(None, [], [], [], 10)
    assert result['total'] == 0
    assert result['base_yield'] == 0
