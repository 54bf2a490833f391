"""
Catalog Repository

Single point of access to the ingredient, supply, equipment and recipe
catalog. Every mutation runs inside one transaction: it either commits
as a whole or is rolled back, leaving the previous catalog untouched.
"""

import logging
from contextlib import contextmanager

from constants import DEFAULT_ENERGY_COST, ENERGY_COST_SETTING
from models import (
    Equipment,
    Ingredient,
    Recipe,
    RecipeEquipment,
    RecipeIngredient,
    RecipeSupply,
    Settings,
    Supply,
)
from .numbers import normalize_number
from .shopping import Selection

logger = logging.getLogger(__name__)

CATALOG_MODELS = (Ingredient, Supply, Equipment, Recipe)
LINK_MODELS = (RecipeIngredient, RecipeSupply, RecipeEquipment)

# Foreign keys a link must point at, with the model each one references
LINK_PARENTS = {
    RecipeIngredient: (('recipe_id', Recipe), ('ingredient_id', Ingredient)),
    RecipeSupply: (('recipe_id', Recipe), ('supply_id', Supply)),
    RecipeEquipment: (('recipe_id', Recipe), ('equipment_id', Equipment)),
}

# Snapshot collection name for each model
SNAPSHOT_KEYS = {
    Ingredient: 'ingredients',
    Supply: 'supplies',
    Equipment: 'equipment',
    Recipe: 'recipes',
    RecipeIngredient: 'recipe_ingredients',
    RecipeSupply: 'recipe_supplies',
    RecipeEquipment: 'recipe_equipment',
}


class NotFoundError(LookupError):
    """Raised when a referenced catalog row does not exist."""

    def __init__(self, model, identity):
        super().__init__(f"{model.__name__} {identity!r} not found")
        self.model = model
        self.identity = identity


def coerce_id(value):
    """Return value as a positive integer id, or None."""
    number = normalize_number(value, None)
    if number is None or number <= 0 or number != int(number):
        return None
    return int(number)


class CatalogRepository:
    """
    CRUD access to the catalog over a SQLAlchemy session.

    Lists come back in insertion order. Deleting an item removes every
    recipe link that uses it; deleting a recipe removes all of its links.
    """

    def __init__(self, session, default_energy_cost=DEFAULT_ENERGY_COST):
        self.session = session
        self.default_energy_cost = default_energy_cost

    @contextmanager
    def transaction(self):
        try:
            yield self.session
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

    # -- catalog items and recipes --

    def list(self, model, search=None):
        """Rows in insertion order, optionally only those whose name contains `search` (any case)."""
        items = self.session.query(model).order_by(model.id).all()
        term = (search or '').strip().casefold()
        if not term:
            return items
        return [item for item in items if term in (item.name or '').casefold()]

    def get(self, model, identity):
        identity = coerce_id(identity)
        if identity is None:
            return None
        return self.session.get(model, identity)

    def require(self, model, identity):
        item = self.get(model, identity)
        if item is None:
            raise NotFoundError(model, identity)
        return item

    def upsert(self, model, payload):
        """
        Create or update a row from a plain record.

        An id in the payload updates that row, or creates it under that id
        if it does not exist yet. Returns the row's id.
        """
        payload = dict(payload)
        identity = coerce_id(payload.get('id'))
        with self.transaction():
            if model in LINK_PARENTS:
                self._check_parents(model, payload, creating=self.get(model, identity) is None)

            item = self.session.get(model, identity) if identity is not None else None
            if item is None:
                item = model(id=identity)
                self.session.add(item)
            item.apply(payload)
            self.session.flush()
            return item.id

    def _check_parents(self, model, payload, creating):
        for key, parent in LINK_PARENTS[model]:
            if key not in payload:
                if creating:
                    raise ValueError(f"{model.__name__} needs {key}")
                continue
            payload[key] = self.require(parent, payload[key]).id

    def delete(self, model, identity):
        """Delete a row and its dependent links. Returns False if it did not exist."""
        item = self.get(model, identity)
        if item is None:
            return False
        with self.transaction():
            self.session.delete(item)
        return True

    def links_for_recipe(self, model, recipe_id):
        """Links of one kind (RecipeIngredient, RecipeSupply, RecipeEquipment) for a recipe."""
        return (self.session.query(model)
                .filter_by(recipe_id=recipe_id)
                .order_by(model.id)
                .all())

    # -- settings --

    def get_global_energy_cost(self):
        setting = self.session.query(Settings).filter_by(key=ENERGY_COST_SETTING).first()
        if setting is None:
            return self.default_energy_cost
        return normalize_number(setting.value, self.default_energy_cost)

    def set_global_energy_cost(self, value):
        cost = normalize_number(value, self.default_energy_cost)
        with self.transaction():
            self._store_energy_cost(cost)
        return cost

    def _store_energy_cost(self, cost):
        setting = self.session.query(Settings).filter_by(key=ENERGY_COST_SETTING).first()
        if setting is None:
            setting = Settings(key=ENERGY_COST_SETTING)
            self.session.add(setting)
        setting.value = repr(float(cost))

    # -- selections --

    def selections(self, selection_list):
        """Resolve (recipe_id, multiplier) pairs to Selections, dropping unknown recipes."""
        selections = []
        for recipe_id, multiplier in selection_list:
            recipe = self.get(Recipe, recipe_id)
            if recipe is None:
                continue
            selections.append(Selection(recipe, multiplier))
        return selections

    # -- snapshots --

    def snapshot(self):
        """Full catalog as plain records: seven collections plus the energy cost."""
        snapshot = {key: [item.to_dict() for item in self.list(model)]
                    for model, key in SNAPSHOT_KEYS.items()}
        snapshot['energy_cost'] = self.get_global_energy_cost()
        return snapshot

    def restore(self, snapshot):
        """
        Replace the whole catalog with a snapshot.

        Links pointing at rows missing from the snapshot are dropped. On
        any error nothing is changed.
        """
        with self.transaction():
            for model in CATALOG_MODELS:
                for item in self.session.query(model).all():
                    self.session.delete(item)
            self.session.flush()

            present = {}
            for model in CATALOG_MODELS:
                present[model] = set()
                for record in snapshot.get(SNAPSHOT_KEYS[model]) or []:
                    item = model(id=coerce_id(record.get('id')))
                    item.apply(record)
                    self.session.add(item)
                    self.session.flush()
                    present[model].add(item.id)

            dropped = 0
            kept = 0
            for model in LINK_MODELS:
                for record in snapshot.get(SNAPSHOT_KEYS[model]) or []:
                    parents = LINK_PARENTS[model]
                    if any(coerce_id(record.get(key)) not in present[parent] for key, parent in parents):
                        dropped += 1
                        continue
                    link = model(id=coerce_id(record.get('id')))
                    link.apply({**record, **{key: coerce_id(record.get(key)) for key, _ in parents}})
                    self.session.add(link)
                    kept += 1
            self.session.flush()

            self._store_energy_cost(normalize_number(snapshot.get('energy_cost'), self.default_energy_cost))

        if dropped:
            logger.warning("Dropped %d recipe links referencing missing items", dropped)
        logger.info("Catalog restored: %s, %d recipe links", ', '.join(
            f"{len(present[model])} {SNAPSHOT_KEYS[model]}" for model in CATALOG_MODELS), kept)
