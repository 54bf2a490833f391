"""
Models Package

Exports all database models and the db instance for use throughout the application.
"""

from .base import db

from .ingredient import Ingredient, Supply
from .equipment import Equipment
from .recipe import Recipe, RecipeIngredient, RecipeSupply, RecipeEquipment
from .settings import Settings

__all__ = [
    'db',
    'Ingredient',
    'Supply',
    'Equipment',
    'Recipe',
    'RecipeIngredient',
    'RecipeSupply',
    'RecipeEquipment',
    'Settings',
]
