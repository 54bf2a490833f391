import pytest

from constants.seed import seed_snapshot
from models import db, Equipment, Ingredient, Recipe, RecipeEquipment, RecipeIngredient, RecipeSupply, Supply
from services.catalog import CatalogRepository, NotFoundError, coerce_id
from services.shopping import SelectionList


def add_recipe_with_links(repo):
    flour = repo.upsert(Ingredient, {'name': 'Flour', 'package_qty': 1000, 'package_cost': 1000})
    box = repo.upsert(Supply, {'name': 'Box', 'package_qty': 10, 'package_cost': 5000})
    oven = repo.upsert(Equipment, {'name': 'Oven', 'power_watts': 2000})
    cake = repo.upsert(Recipe, {'name': 'Cake', 'base_yield': 12})
    repo.upsert(RecipeIngredient, {'recipe_id': cake, 'ingredient_id': flour, 'quantity': 200})
    repo.upsert(RecipeSupply, {'recipe_id': cake, 'supply_id': box, 'quantity': 1})
    repo.upsert(RecipeEquipment, {'recipe_id': cake, 'equipment_id': oven, 'hours': 1})
    return cake, flour, box, oven


@pytest.mark.parametrize('value,expected', [
    (3, 3), ('3', 3), (3.0, 3), (0, None), (-1, None), (2.5, None), ('x', None), (None, None),
])
def test_coerce_id(value, expected):
    assert coerce_id(value) == expected


def test_upsert_derives_unit_cost(repo):
    item_id = repo.upsert(Ingredient, {'name': '  Flour ', 'package_qty': 1000, 'package_cost': 1200})

    flour = repo.get(Ingredient, item_id)
    assert flour.name == 'Flour'
    assert flour.unit == 'g'
    assert flour.unit_cost == pytest.approx(1.2)

    repo.upsert(Ingredient, {'id': item_id, 'name': 'Flour', 'package_qty': 0, 'package_cost': 1200})
    assert repo.get(Ingredient, item_id).unit_cost == 0


def test_upsert_with_unknown_id_creates_it(repo):
    assert repo.upsert(Supply, {'id': 40, 'name': 'Bag'}) == 40
    assert repo.get(Supply, 40).package_unit == 'unidad'


def test_list_keeps_insertion_order(repo):
    for name in ('Sugar', 'Butter', 'Almonds'):
        repo.upsert(Ingredient, {'name': name})
    assert [item.name for item in repo.list(Ingredient)] == ['Sugar', 'Butter', 'Almonds']


def test_require_unknown_raises(repo):
    with pytest.raises(NotFoundError):
        repo.require(Recipe, 99)
    assert repo.get(Recipe, 'nope') is None


def test_deleting_item_removes_its_links(repo):
    cake, flour, _, _ = add_recipe_with_links(repo)

    assert repo.delete(Ingredient, flour)

    assert repo.links_for_recipe(RecipeIngredient, cake) == []
    assert len(repo.links_for_recipe(RecipeSupply, cake)) == 1
    assert not repo.delete(Ingredient, flour)


def test_deleting_recipe_removes_all_links(repo):
    cake, _, _, _ = add_recipe_with_links(repo)

    repo.delete(Recipe, cake)

    assert repo.list(RecipeIngredient) == []
    assert repo.list(RecipeSupply) == []
    assert repo.list(RecipeEquipment) == []
    assert len(repo.list(Ingredient)) == 1


def test_link_to_unknown_item_is_rejected(repo):
    cake = repo.upsert(Recipe, {'name': 'Cake'})

    with pytest.raises(NotFoundError):
        repo.upsert(RecipeIngredient, {'recipe_id': cake, 'ingredient_id': 5, 'quantity': 1})
    with pytest.raises(ValueError):
        repo.upsert(RecipeIngredient, {'recipe_id': cake, 'quantity': 1})
    assert repo.list(RecipeIngredient) == []


def test_link_partial_update_keeps_references(repo):
    cake, flour, _, _ = add_recipe_with_links(repo)
    link = repo.links_for_recipe(RecipeIngredient, cake)[0]

    repo.upsert(RecipeIngredient, {'id': link.id, 'quantity': 250})

    link = repo.get(RecipeIngredient, link.id)
    assert link.quantity == 250
    assert link.ingredient_id == flour


def test_recipe_links_follow_the_recipe(repo):
    cake, _, _, _ = add_recipe_with_links(repo)
    recipe = repo.get(Recipe, cake)

    data = recipe.to_dict(include_links=True)

    assert data['ingredients'][0]['quantity'] == 200
    assert data['equipment'][0]['hours'] == 1


def test_global_energy_cost(repo):
    assert repo.get_global_energy_cost() == 230
    assert repo.set_global_energy_cost('150') == 150
    assert repo.get_global_energy_cost() == 150
    assert repo.set_global_energy_cost('abc') == 230


def test_repository_default_energy_cost(app):
    assert CatalogRepository(db.session, 180).get_global_energy_cost() == 180


def test_selections_drop_unknown_recipes(repo):
    cake, _, _, _ = add_recipe_with_links(repo)

    selections = repo.selections(SelectionList([[99, 1], [cake, 3]]))

    assert len(selections) == 1
    assert selections[0].recipe.name == 'Cake'
    assert selections[0].multiplier == 3


def test_snapshot_round_trip(repo):
    add_recipe_with_links(repo)
    repo.set_global_energy_cost(200)
    before = repo.snapshot()

    repo.restore(before)

    assert repo.snapshot() == before
    assert before['energy_cost'] == 200
    assert len(before['recipe_ingredients']) == 1


def test_restore_replaces_catalog(repo):
    add_recipe_with_links(repo)

    repo.restore(seed_snapshot())

    assert [r.name for r in repo.list(Recipe)] == ['Cupcakes de vainilla', 'Pan de pascua']
    assert len(repo.list(Ingredient)) == 8
    cupcakes = repo.get(Recipe, 1)
    assert [link.ingredient.name for link in cupcakes.ingredients][:2] == ['Harina floja', 'Azúcar']
    assert repo.get_global_energy_cost() == 230


def test_failed_restore_leaves_catalog_untouched(repo):
    add_recipe_with_links(repo)
    before = repo.snapshot()

    with pytest.raises(AttributeError):
        repo.restore({'ingredients': [None]})

    assert repo.snapshot() == before


def test_restore_drops_dangling_links(repo, caplog):
    snapshot = seed_snapshot()
    snapshot['recipe_ingredients'].append({'id': 99, 'recipe_id': 1, 'ingredient_id': 500, 'quantity': 1})
    snapshot['recipe_supplies'].append({'id': 99, 'recipe_id': 42, 'supply_id': 1, 'quantity': 1})

    repo.restore(snapshot)

    assert len(repo.list(RecipeIngredient)) == len(seed_snapshot()['recipe_ingredients'])
    assert len(repo.list(RecipeSupply)) == len(seed_snapshot()['recipe_supplies'])
    assert 'Dropped 2 recipe links' in caplog.text


def test_list_search_ignores_case(repo):
    for name in ('Azúcar', 'Azúcar morena', 'Harina'):
        repo.upsert(Ingredient, {'name': name})

    assert [i.name for i in repo.list(Ingredient, search='AZÚCAR')] == ['Azúcar', 'Azúcar morena']
    assert len(repo.list(Ingredient, search='  ')) == 3


def test_restore_logs_rows_loaded(repo, caplog):
    snapshot = seed_snapshot()
    snapshot['recipe_ingredients'].append({'id': 99, 'recipe_id': 1, 'ingredient_id': 500, 'quantity': 1})
    links = (len(snapshot['recipe_ingredients']) - 1 + len(snapshot['recipe_supplies'])
             + len(snapshot['recipe_equipment']))

    with caplog.at_level('INFO', logger='services.catalog'):
        repo.restore(snapshot)

    assert f'8 ingredients, 3 supplies, 2 equipment, 2 recipes, {links} recipe links' in caplog.text
