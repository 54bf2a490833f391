"""
Recipe Models

Contains the Recipe model and the three link tables that record which
ingredients, supplies and equipment a recipe uses per batch.
"""

from constants import DEFAULT_BASE_YIELD, MAX_LENGTHS
from services.numbers import normalize_number
from utils.sanitizer import sanitize_name, sanitize_text
from .base import db


class Recipe(db.Model):
    """Recipe whose component quantities are defined for `base_yield` units."""
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False, index=True)
    description = db.Column(db.Text, default='')
    base_yield = db.Column(db.Float, default=DEFAULT_BASE_YIELD)
    oven_minutes = db.Column(db.Float, nullable=True)
    oven_temperature = db.Column(db.Float, nullable=True)
    steps = db.Column(db.Text, default='')

    ingredients = db.relationship('RecipeIngredient', back_populates='recipe',
                                  cascade='all, delete-orphan', order_by='RecipeIngredient.id')
    supplies = db.relationship('RecipeSupply', back_populates='recipe',
                               cascade='all, delete-orphan', order_by='RecipeSupply.id')
    equipment = db.relationship('RecipeEquipment', back_populates='recipe',
                                cascade='all, delete-orphan', order_by='RecipeEquipment.id')

    def apply(self, payload):
        self.name = sanitize_name(payload.get('name'))
        self.description = sanitize_text(payload.get('description'), MAX_LENGTHS['description'])
        self.base_yield = normalize_number(payload.get('base_yield'), DEFAULT_BASE_YIELD)
        self.oven_minutes = normalize_number(payload.get('oven_minutes'), None)
        self.oven_temperature = normalize_number(payload.get('oven_temperature'), None)
        self.steps = sanitize_text(payload.get('steps'), MAX_LENGTHS['steps'])

    def to_dict(self, include_links=False):
        data = {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'base_yield': self.base_yield,
            'oven_minutes': self.oven_minutes,
            'oven_temperature': self.oven_temperature,
            'steps': self.steps,
        }
        if include_links:
            data['ingredients'] = [link.to_dict() for link in self.ingredients]
            data['supplies'] = [link.to_dict() for link in self.supplies]
            data['equipment'] = [link.to_dict() for link in self.equipment]
        return data


class RecipeIngredient(db.Model):
    """Ingredient quantity needed for one batch of the recipe's base yield."""
    id = db.Column(db.Integer, primary_key=True)
    recipe_id = db.Column(db.Integer, db.ForeignKey('recipe.id', ondelete='CASCADE'), nullable=False, index=True)
    ingredient_id = db.Column(db.Integer, db.ForeignKey('ingredient.id', ondelete='CASCADE'), nullable=False, index=True)
    quantity = db.Column(db.Float, default=0.0)
    recipe = db.relationship('Recipe', back_populates='ingredients')
    ingredient = db.relationship('Ingredient', back_populates='links')

    def apply(self, payload):
        if 'recipe_id' in payload:
            self.recipe_id = payload['recipe_id']
        if 'ingredient_id' in payload:
            self.ingredient_id = payload['ingredient_id']
        if 'quantity' in payload or self.quantity is None:
            self.quantity = normalize_number(payload.get('quantity'), 0.0)

    def to_dict(self):
        return {
            'id': self.id,
            'recipe_id': self.recipe_id,
            'ingredient_id': self.ingredient_id,
            'quantity': self.quantity,
        }


class RecipeSupply(db.Model):
    """Supply quantity needed for one batch of the recipe's base yield."""
    id = db.Column(db.Integer, primary_key=True)
    recipe_id = db.Column(db.Integer, db.ForeignKey('recipe.id', ondelete='CASCADE'), nullable=False, index=True)
    supply_id = db.Column(db.Integer, db.ForeignKey('supply.id', ondelete='CASCADE'), nullable=False, index=True)
    quantity = db.Column(db.Float, default=0.0)
    recipe = db.relationship('Recipe', back_populates='supplies')
    supply = db.relationship('Supply', back_populates='links')

    def apply(self, payload):
        if 'recipe_id' in payload:
            self.recipe_id = payload['recipe_id']
        if 'supply_id' in payload:
            self.supply_id = payload['supply_id']
        if 'quantity' in payload or self.quantity is None:
            self.quantity = normalize_number(payload.get('quantity'), 0.0)

    def to_dict(self):
        return {
            'id': self.id,
            'recipe_id': self.recipe_id,
            'supply_id': self.supply_id,
            'quantity': self.quantity,
        }


class RecipeEquipment(db.Model):
    """Hours an appliance runs for one batch. Not scaled by requested units."""
    id = db.Column(db.Integer, primary_key=True)
    recipe_id = db.Column(db.Integer, db.ForeignKey('recipe.id', ondelete='CASCADE'), nullable=False, index=True)
    equipment_id = db.Column(db.Integer, db.ForeignKey('equipment.id', ondelete='CASCADE'), nullable=False, index=True)
    hours = db.Column(db.Float, default=0.0)
    recipe = db.relationship('Recipe', back_populates='equipment')
    equipment = db.relationship('Equipment', back_populates='links')

    def apply(self, payload):
        if 'recipe_id' in payload:
            self.recipe_id = payload['recipe_id']
        if 'equipment_id' in payload:
            self.equipment_id = payload['equipment_id']
        if 'hours' in payload or self.hours is None:
            self.hours = normalize_number(payload.get('hours'), 0.0)

    def to_dict(self):
        return {
            'id': self.id,
            'recipe_id': self.recipe_id,
            'equipment_id': self.equipment_id,
            'hours': self.hours,
        }
