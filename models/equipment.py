"""
Equipment Model

Appliances whose electricity use is charged to the recipes that use them.
"""

from constants import DEFAULT_ENERGY_FORMULA
from services.numbers import normalize_number
from utils.sanitizer import sanitize_name
from .base import db


class Equipment(db.Model):
    """
    Appliance rated `power_watts`.

    energy_cost is this item's own price per kWh; None means the global
    rate applies. formula computes kWh from power (W) and time (h).
    """
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False, index=True)
    power_watts = db.Column(db.Float, default=0.0)
    energy_cost = db.Column(db.Float, nullable=True)
    formula = db.Column(db.String(200), default=DEFAULT_ENERGY_FORMULA)

    links = db.relationship('RecipeEquipment', back_populates='equipment',
                            cascade='all, delete-orphan')

    def apply(self, payload):
        self.name = sanitize_name(payload.get('name'))
        self.power_watts = normalize_number(payload.get('power_watts'), 0.0)
        self.energy_cost = normalize_number(payload.get('energy_cost'), None)
        formula = payload.get('formula')
        self.formula = formula.strip() if isinstance(formula, str) and formula.strip() else DEFAULT_ENERGY_FORMULA

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'power_watts': self.power_watts,
            'energy_cost': self.energy_cost,
            'formula': self.formula,
        }
