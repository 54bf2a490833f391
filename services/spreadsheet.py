"""
Spreadsheet Serializer

Exports the full catalog snapshot to an .xlsx workbook and reads it back.

Sheet and column names follow the workbook layout the bakery already
uses. Recipe links are written as one flat "Receta_Detalle" sheet that
refers to recipes and items by name; on import those names are matched
after trimming and lowercasing.
"""

import io
import logging

import pandas as pd

from constants import (
    DEFAULT_BASE_YIELD,
    DEFAULT_ENERGY_COST,
    DEFAULT_ENERGY_FORMULA,
    DEFAULT_INGREDIENT_UNIT,
    DEFAULT_SUPPLY_UNIT,
)
from .numbers import derive_unit_cost, normalize_number

logger = logging.getLogger(__name__)

SHEET_INGREDIENTS = 'Ingredientes'
SHEET_SUPPLIES = 'Insumos'
SHEET_EQUIPMENT = 'Equipos'
SHEET_RECIPES = 'Recetas'
SHEET_DETAIL = 'Receta_Detalle'
SHEET_CONFIG = 'Config'

ENERGY_COST_KEY = 'CostoKwhGlobal'

# Column header -> record field, per sheet
INGREDIENT_COLUMNS = {
    'ID': 'id',
    'Nombre': 'name',
    'Unidad Medida': 'unit',
    'Costo Paquete': 'package_cost',
    'Cantidad Paquete': 'package_qty',
    'Unidad Paquete': 'package_unit',
    'Proveedor': 'supplier',
}
SUPPLY_COLUMNS = {
    'ID': 'id',
    'Nombre': 'name',
    'Unidad': 'package_unit',
    'Costo Paquete': 'package_cost',
    'Cantidad Paquete': 'package_qty',
}
EQUIPMENT_COLUMNS = {
    'ID': 'id',
    'Nombre': 'name',
    'Potencia (Watts)': 'power_watts',
    'Costo KWh': 'energy_cost',
    'Fórmula': 'formula',
}
RECIPE_COLUMNS = {
    'ID': 'id',
    'Nombre': 'name',
    'Rendimiento': 'base_yield',
    'Tiempo Horno (min)': 'oven_minutes',
    'Temp Horno (C)': 'oven_temperature',
    'Descripción': 'description',
    'Pasos': 'steps',
}
DETAIL_COLUMNS = ['Nombre Receta', 'Tipo', 'Nombre Item', 'Cantidad']
CONFIG_COLUMNS = ['Clave', 'Valor']

# Detail "Tipo" labels written on export
TYPE_INGREDIENT = 'Ingrediente'
TYPE_SUPPLY = 'Insumo'
TYPE_EQUIPMENT = 'Equipo'


class SpreadsheetError(ValueError):
    """Raised when a workbook cannot be read."""


def normalize_name(name):
    """Key used to match names across sheets: trimmed and lowercased."""
    if _blank(name):
        return ''
    return str(name).strip().lower()


def _blank(value):
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _text(value, default=''):
    return default if _blank(value) else str(value).strip()


# ============================================
# EXPORT
# ============================================

def _frame(records, columns):
    rows = [{header: record.get(field) for header, field in columns.items()} for record in records]
    return pd.DataFrame(rows, columns=list(columns))


def _detail_rows(snapshot):
    recipe_names = {r['id']: r['name'] for r in snapshot.get('recipes', [])}
    ingredient_names = {i['id']: i['name'] for i in snapshot.get('ingredients', [])}
    supply_names = {s['id']: s['name'] for s in snapshot.get('supplies', [])}
    equipment_names = {e['id']: e['name'] for e in snapshot.get('equipment', [])}

    rows = []
    for link in snapshot.get('recipe_ingredients', []):
        rows.append([recipe_names.get(link['recipe_id'], str(link['recipe_id'])), TYPE_INGREDIENT,
                     ingredient_names.get(link['ingredient_id'], str(link['ingredient_id'])), link['quantity']])
    for link in snapshot.get('recipe_supplies', []):
        rows.append([recipe_names.get(link['recipe_id'], str(link['recipe_id'])), TYPE_SUPPLY,
                     supply_names.get(link['supply_id'], str(link['supply_id'])), link['quantity']])
    for link in snapshot.get('recipe_equipment', []):
        # "Cantidad" holds hours for equipment rows
        rows.append([recipe_names.get(link['recipe_id'], str(link['recipe_id'])), TYPE_EQUIPMENT,
                     equipment_names.get(link['equipment_id'], str(link['equipment_id'])), link['hours']])

    rows.sort(key=lambda row: row[0].casefold())
    return rows


def export_workbook(snapshot):
    """Write a catalog snapshot to .xlsx and return the file contents."""
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine='openpyxl') as writer:
        _frame(snapshot.get('ingredients', []), INGREDIENT_COLUMNS).to_excel(
            writer, sheet_name=SHEET_INGREDIENTS, index=False)
        _frame(snapshot.get('supplies', []), SUPPLY_COLUMNS).to_excel(
            writer, sheet_name=SHEET_SUPPLIES, index=False)
        _frame(snapshot.get('equipment', []), EQUIPMENT_COLUMNS).to_excel(
            writer, sheet_name=SHEET_EQUIPMENT, index=False)
        _frame(snapshot.get('recipes', []), RECIPE_COLUMNS).to_excel(
            writer, sheet_name=SHEET_RECIPES, index=False)
        pd.DataFrame(_detail_rows(snapshot), columns=DETAIL_COLUMNS).to_excel(
            writer, sheet_name=SHEET_DETAIL, index=False)
        pd.DataFrame([[ENERGY_COST_KEY, snapshot.get('energy_cost', DEFAULT_ENERGY_COST)]],
                     columns=CONFIG_COLUMNS).to_excel(writer, sheet_name=SHEET_CONFIG, index=False)
    return buffer.getvalue()


# ============================================
# IMPORT
# ============================================

def _rows(sheets, name, columns=None):
    """Sheet rows as dicts; with `columns`, headers are renamed to record fields."""
    frame = sheets.get(name)
    if frame is None:
        return []
    records = frame.to_dict('records')
    if columns is None:
        return records
    return [{field: row.get(header) for header, field in columns.items()} for row in records]


def _assign_ids(records):
    """Keep valid, unique ids from the sheet; number the rest after the highest one."""
    used = set()
    for record in records:
        identity = normalize_number(record.get('id'), None)
        if identity is not None and identity > 0 and identity == int(identity) and int(identity) not in used:
            record['id'] = int(identity)
            used.add(record['id'])
        else:
            record['id'] = None
    next_id = max(used, default=0) + 1
    for record in records:
        if record['id'] is None:
            record['id'] = next_id
            next_id += 1
    return records


def _named(rows):
    return [row for row in rows if _text(row.get('name'))]


def import_workbook(source):
    """
    Read a workbook written by export_workbook() into a catalog snapshot.

    Rows without a name are skipped and unit costs are derived again from
    the package columns. Detail rows whose recipe or item name is unknown
    are dropped.

    Args:
        source: Path or binary file-like object

    Raises:
        SpreadsheetError: if the file is not a readable workbook.
    """
    try:
        sheets = pd.read_excel(source, sheet_name=None, dtype=object, engine='openpyxl')
    except Exception as e:
        raise SpreadsheetError(f"Could not read workbook: {e}") from e

    snapshot = {
        'ingredients': [],
        'supplies': [],
        'equipment': [],
        'recipes': [],
        'recipe_ingredients': [],
        'recipe_supplies': [],
        'recipe_equipment': [],
        'energy_cost': DEFAULT_ENERGY_COST,
    }

    for row in _rows(sheets, SHEET_CONFIG):
        if _text(row.get('Clave')) == ENERGY_COST_KEY:
            snapshot['energy_cost'] = normalize_number(row.get('Valor'), DEFAULT_ENERGY_COST)

    for row in _assign_ids(_named(_rows(sheets, SHEET_INGREDIENTS, INGREDIENT_COLUMNS))):
        package_qty = normalize_number(row['package_qty'], 0.0)
        package_cost = normalize_number(row['package_cost'], 0.0)
        snapshot['ingredients'].append({
            'id': row['id'],
            'name': _text(row['name']),
            'unit': _text(row['unit'], DEFAULT_INGREDIENT_UNIT),
            'package_qty': package_qty,
            'package_unit': _text(row['package_unit']),
            'package_cost': package_cost,
            'unit_cost': derive_unit_cost(package_cost, package_qty),
            'supplier': _text(row['supplier']),
        })

    for row in _assign_ids(_named(_rows(sheets, SHEET_SUPPLIES, SUPPLY_COLUMNS))):
        package_qty = normalize_number(row['package_qty'], 0.0)
        package_cost = normalize_number(row['package_cost'], 0.0)
        snapshot['supplies'].append({
            'id': row['id'],
            'name': _text(row['name']),
            'package_qty': package_qty,
            'package_unit': _text(row['package_unit'], DEFAULT_SUPPLY_UNIT),
            'package_cost': package_cost,
            'unit_cost': derive_unit_cost(package_cost, package_qty),
        })

    for row in _assign_ids(_named(_rows(sheets, SHEET_EQUIPMENT, EQUIPMENT_COLUMNS))):
        snapshot['equipment'].append({
            'id': row['id'],
            'name': _text(row['name']),
            'power_watts': normalize_number(row['power_watts'], 0.0),
            'energy_cost': None if _blank(row['energy_cost']) else normalize_number(row['energy_cost'], 0.0),
            'formula': _text(row['formula'], DEFAULT_ENERGY_FORMULA),
        })

    for row in _assign_ids(_named(_rows(sheets, SHEET_RECIPES, RECIPE_COLUMNS))):
        snapshot['recipes'].append({
            'id': row['id'],
            'name': _text(row['name']),
            'base_yield': normalize_number(row['base_yield'], DEFAULT_BASE_YIELD),
            'oven_minutes': normalize_number(row['oven_minutes'], None),
            'oven_temperature': normalize_number(row['oven_temperature'], None),
            'description': _text(row['description']),
            'steps': _text(row['steps']),
        })

    recipe_ids = {normalize_name(r['name']): r['id'] for r in snapshot['recipes']}
    ingredient_ids = {normalize_name(i['name']): i['id'] for i in snapshot['ingredients']}
    supply_ids = {normalize_name(s['name']): s['id'] for s in snapshot['supplies']}
    equipment_ids = {normalize_name(e['name']): e['id'] for e in snapshot['equipment']}

    skipped = 0
    for row in _rows(sheets, SHEET_DETAIL):
        recipe_id = recipe_ids.get(normalize_name(row.get('Nombre Receta')))
        kind = normalize_name(row.get('Tipo'))
        item_name = normalize_name(row.get('Nombre Item'))
        amount = normalize_number(row.get('Cantidad'), 0.0)

        if recipe_id is None:
            skipped += 1
            continue

        if 'ingrediente' in kind and item_name in ingredient_ids:
            links = snapshot['recipe_ingredients']
            links.append({'id': len(links) + 1, 'recipe_id': recipe_id,
                          'ingredient_id': ingredient_ids[item_name], 'quantity': amount})
        elif 'insumo' in kind and item_name in supply_ids:
            links = snapshot['recipe_supplies']
            links.append({'id': len(links) + 1, 'recipe_id': recipe_id,
                          'supply_id': supply_ids[item_name], 'quantity': amount})
        elif ('equipo' in kind or 'electro' in kind) and item_name in equipment_ids:
            links = snapshot['recipe_equipment']
            links.append({'id': len(links) + 1, 'recipe_id': recipe_id,
                          'equipment_id': equipment_ids[item_name], 'hours': amount})
        else:
            skipped += 1

    if skipped:
        logger.warning("Skipped %d detail rows with unknown recipe, type or item", skipped)
    logger.info("Workbook read: %d ingredients, %d supplies, %d equipment, %d recipes",
                len(snapshot['ingredients']), len(snapshot['supplies']),
                len(snapshot['equipment']), len(snapshot['recipes']))
    return snapshot
