"""
Ingredient and Supply Models

Catalog items bought in packages. Both store the package they are bought
in and derive the cost of a single unit from it on every write.
"""

from constants import DEFAULT_INGREDIENT_UNIT, DEFAULT_SUPPLY_UNIT, MAX_LENGTHS
from services.numbers import derive_unit_cost, normalize_number
from utils.sanitizer import sanitize_name
from .base import db


class Ingredient(db.Model):
    """
    Ingredient measured in `unit` and bought as a package.

    unit_cost = package_cost / package_qty (0 for an empty package). It is
    recomputed by apply() and never set on its own.
    """
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False, index=True)
    unit = db.Column(db.String(20), default=DEFAULT_INGREDIENT_UNIT)

    # Package as purchased, e.g. 1000 g for 1000
    package_qty = db.Column(db.Float, default=0.0)
    package_unit = db.Column(db.String(20), default='')
    package_cost = db.Column(db.Float, default=0.0)

    # Derived: cost per one `unit`
    unit_cost = db.Column(db.Float, default=0.0)

    supplier = db.Column(db.String(100), default='')

    links = db.relationship('RecipeIngredient', back_populates='ingredient',
                            cascade='all, delete-orphan')

    def apply(self, payload):
        """Update fields from a plain record and re-derive unit_cost."""
        self.name = sanitize_name(payload.get('name'))
        self.unit = sanitize_name(payload.get('unit'), MAX_LENGTHS['unit'], default=DEFAULT_INGREDIENT_UNIT)
        self.package_qty = normalize_number(payload.get('package_qty'), 0.0)
        self.package_unit = sanitize_name(payload.get('package_unit'), MAX_LENGTHS['unit'])
        self.package_cost = normalize_number(payload.get('package_cost'), 0.0)
        self.unit_cost = derive_unit_cost(self.package_cost, self.package_qty)
        self.supplier = sanitize_name(payload.get('supplier'), MAX_LENGTHS['supplier'])

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'unit': self.unit,
            'package_qty': self.package_qty,
            'package_unit': self.package_unit,
            'package_cost': self.package_cost,
            'unit_cost': self.unit_cost,
            'supplier': self.supplier,
        }


class Supply(db.Model):
    """Packaging and consumables (boxes, bags, stickers) bought by the package."""
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False, index=True)
    package_qty = db.Column(db.Float, default=0.0)
    package_unit = db.Column(db.String(20), default=DEFAULT_SUPPLY_UNIT)
    package_cost = db.Column(db.Float, default=0.0)
    unit_cost = db.Column(db.Float, default=0.0)

    links = db.relationship('RecipeSupply', back_populates='supply',
                            cascade='all, delete-orphan')

    def apply(self, payload):
        """Update fields from a plain record and re-derive unit_cost."""
        self.name = sanitize_name(payload.get('name'))
        self.package_qty = normalize_number(payload.get('package_qty'), 0.0)
        self.package_unit = sanitize_name(payload.get('package_unit'), MAX_LENGTHS['unit'],
                                          default=DEFAULT_SUPPLY_UNIT)
        self.package_cost = normalize_number(payload.get('package_cost'), 0.0)
        self.unit_cost = derive_unit_cost(self.package_cost, self.package_qty)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'package_qty': self.package_qty,
            'package_unit': self.package_unit,
            'package_cost': self.package_cost,
            'unit_cost': self.unit_cost,
        }
