import os

import pytest

os.environ['FLASK_ENV'] = 'testing'

from app import app as flask_app  # noqa: E402
from models import (  # noqa: E402
    db,
    Equipment,
    Ingredient,
    Recipe,
    RecipeEquipment,
    RecipeIngredient,
    RecipeSupply,
    Supply,
)
from services.catalog import CatalogRepository  # noqa: E402


@pytest.fixture
def app():
    flask_app.config['TESTING'] = True
    with flask_app.app_context():
        db.create_all()
        yield flask_app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def repo(app):
    return CatalogRepository(db.session)


@pytest.fixture
def flour():
    """1000 g for 1000: unit cost 1.0 per gram."""
    item = Ingredient(id=1)
    item.apply({'name': 'Flour', 'unit': 'g', 'package_qty': 1000, 'package_cost': 1000,
                'supplier': 'La estampa'})
    return item


@pytest.fixture
def sugar():
    item = Ingredient(id=2)
    item.apply({'name': 'Sugar', 'unit': 'g', 'package_qty': 500, 'package_cost': 1000})
    return item


@pytest.fixture
def box():
    item = Supply(id=1)
    item.apply({'name': 'Cake box', 'package_qty': 10, 'package_cost': 5000})
    return item


@pytest.fixture
def oven():
    item = Equipment(id=1)
    item.apply({'name': 'Oven', 'power_watts': 2000})
    return item


def _make_recipe(id, name, base_yield, ingredients=(), supplies=(), equipment=()):
    """Build an unsaved recipe with links: ingredients/supplies as (item, qty), equipment as (item, hours)."""
    recipe = Recipe(id=id)
    recipe.apply({'name': name, 'base_yield': base_yield})
    recipe.ingredients = [RecipeIngredient(ingredient=item, quantity=qty) for item, qty in ingredients]
    recipe.supplies = [RecipeSupply(supply=item, quantity=qty) for item, qty in supplies]
    recipe.equipment = [RecipeEquipment(equipment=item, hours=hours) for item, hours in equipment]
    return recipe


@pytest.fixture
def make_recipe():
    return _make_recipe
