import io
import logging
from datetime import date

import click
from flask import Flask, Response, jsonify, request, send_file, session
from flask_migrate import Migrate

from config import get_config
from constants.seed import seed_snapshot
from models import (
    db,
    Equipment,
    Ingredient,
    Recipe,
    RecipeEquipment,
    RecipeIngredient,
    RecipeSupply,
    Supply,
)
from services import (
    SelectionList,
    calculate_recipe_cost,
    consolidate,
    shopping_list_csv,
    top_cost_items,
    validate_formula,
)
from services.catalog import CatalogRepository, NotFoundError
from services.spreadsheet import SpreadsheetError, export_workbook, import_workbook

app = Flask(__name__)
app.config.from_object(get_config())

db.init_app(app)
migrate = Migrate(app, db)

logging.basicConfig(level=app.config['LOG_LEVEL'],
                    format="%(asctime)s %(levelname)s %(name)s %(message)s")
logger = logging.getLogger(__name__)

# URL segment -> catalog model
CATALOG_KINDS = {
    'ingredients': Ingredient,
    'supplies': Supply,
    'equipment': Equipment,
    'recipes': Recipe,
}

# URL segment under /api/recipes/<id>/ -> link model
LINK_KINDS = {
    'ingredients': RecipeIngredient,
    'supplies': RecipeSupply,
    'equipment': RecipeEquipment,
}

SELECTION_KEY = 'selection'


def ok(payload, status=200):
    return jsonify(payload), status


def err(code="BAD_REQUEST", message="bad request", status=400):
    return jsonify({"error": {"code": code, "message": message}}), status


def repository():
    return CatalogRepository(db.session, app.config['DEFAULT_ENERGY_COST'])


def json_body():
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def load_selection():
    return SelectionList.from_pairs(session.get(SELECTION_KEY, []))


def save_selection(selection):
    session[SELECTION_KEY] = selection.pairs()


def allowed_file(filename):
    return '.' in filename and filename.rsplit('.', 1)[1].lower() in app.config['ALLOWED_IMPORT_EXTENSIONS']


@app.errorhandler(NotFoundError)
def handle_not_found(e):
    return err("NOT_FOUND", str(e), 404)


@app.errorhandler(413)
def handle_too_large(e):
    return err("TOO_LARGE", "Upload exceeds the maximum allowed size", 413)


# ============================================
# ROUTES - CATALOG
# ============================================

@app.route('/api/<any(ingredients, supplies, equipment, recipes):kind>')
def catalog_list(kind):
    items = repository().list(CATALOG_KINDS[kind], search=request.args.get('q'))
    return ok([item.to_dict() for item in items])


@app.route('/api/<any(ingredients, supplies, equipment, recipes):kind>/<int:id>')
def catalog_get(kind, id):
    item = repository().require(CATALOG_KINDS[kind], id)
    if kind == 'recipes':
        return ok(item.to_dict(include_links=True))
    return ok(item.to_dict())


@app.route('/api/<any(ingredients, supplies, equipment, recipes):kind>', methods=['POST'])
@app.route('/api/<any(ingredients, supplies, equipment, recipes):kind>/<int:id>', methods=['PUT'])
def catalog_save(kind, id=None):
    payload = json_body()
    if id is not None:
        payload['id'] = id
    else:
        # POST always creates
        payload.pop('id', None)

    if not str(payload.get('name') or '').strip():
        return err("VALIDATION", "Name is required")

    if kind == 'equipment' and payload.get('formula'):
        problem = validate_formula(payload['formula'])
        if problem:
            return err("INVALID_FORMULA", problem)

    item_id = repository().upsert(CATALOG_KINDS[kind], payload)
    logger.info("Saved %s %s", kind, item_id)
    return ok({'id': item_id}, 200 if id is not None else 201)


@app.route('/api/<any(ingredients, supplies, equipment, recipes):kind>/<int:id>', methods=['DELETE'])
def catalog_delete(kind, id):
    if not repository().delete(CATALOG_KINDS[kind], id):
        return err("NOT_FOUND", f"No {kind} with id {id}", 404)
    if kind == 'recipes':
        selection = load_selection()
        if selection.remove(id):
            save_selection(selection)
    return ok({'deleted': id})


# ============================================
# ROUTES - RECIPE LINKS
# ============================================

@app.route('/api/recipes/<int:recipe_id>/<any(ingredients, supplies, equipment):kind>')
def recipe_links(recipe_id, kind):
    repo = repository()
    repo.require(Recipe, recipe_id)
    links = repo.links_for_recipe(LINK_KINDS[kind], recipe_id)
    return ok([link.to_dict() for link in links])


@app.route('/api/recipes/<int:recipe_id>/<any(ingredients, supplies, equipment):kind>', methods=['POST'])
@app.route('/api/recipes/<int:recipe_id>/<any(ingredients, supplies, equipment):kind>/<int:link_id>',
           methods=['PUT'])
def recipe_link_save(recipe_id, kind, link_id=None):
    repo = repository()
    model = LINK_KINDS[kind]
    payload = json_body()
    payload['recipe_id'] = recipe_id

    if link_id is not None:
        link = repo.require(model, link_id)
        if link.recipe_id != recipe_id:
            return err("NOT_FOUND", f"Link {link_id} does not belong to recipe {recipe_id}", 404)
        payload['id'] = link_id
    else:
        payload.pop('id', None)

    try:
        saved_id = repo.upsert(model, payload)
    except ValueError as e:
        return err("VALIDATION", str(e))
    return ok({'id': saved_id}, 200 if link_id is not None else 201)


@app.route('/api/recipes/<int:recipe_id>/<any(ingredients, supplies, equipment):kind>/<int:link_id>',
           methods=['DELETE'])
def recipe_link_delete(recipe_id, kind, link_id):
    repo = repository()
    link = repo.require(LINK_KINDS[kind], link_id)
    if link.recipe_id != recipe_id:
        return err("NOT_FOUND", f"Link {link_id} does not belong to recipe {recipe_id}", 404)
    repo.delete(LINK_KINDS[kind], link_id)
    return ok({'deleted': link_id})


@app.route('/api/recipes/<int:id>/cost', methods=['POST'])
def recipe_cost(id):
    repo = repository()
    recipe = repo.require(Recipe, id)
    units = json_body().get('units', recipe.base_yield)
    result = calculate_recipe_cost(
        recipe, recipe.ingredients, recipe.supplies, recipe.equipment,
        units, repo.get_global_energy_cost(),
    )
    return ok(result)


# ============================================
# ROUTES - SETTINGS
# ============================================

@app.route('/api/settings/energy-cost')
def energy_cost_get():
    return ok({'energy_cost': repository().get_global_energy_cost()})


@app.route('/api/settings/energy-cost', methods=['PUT'])
def energy_cost_set():
    cost = repository().set_global_energy_cost(json_body().get('energy_cost'))
    return ok({'energy_cost': cost})


# ============================================
# ROUTES - SHOPPING SELECTION
# ============================================

@app.route('/api/selection')
def selection_list():
    repo = repository()
    items = [
        {
            'recipe_id': s.recipe.id,
            'name': s.recipe.name,
            'base_yield': s.recipe.base_yield,
            'multiplier': s.multiplier,
        }
        for s in repo.selections(load_selection())
    ]
    return ok(items)


@app.route('/api/selection/<int:recipe_id>', methods=['POST'])
def selection_add(recipe_id):
    repository().require(Recipe, recipe_id)
    selection = load_selection()
    multiplier = selection.add(recipe_id)
    save_selection(selection)
    return ok({'recipe_id': recipe_id, 'multiplier': multiplier})


@app.route('/api/selection/<int:recipe_id>', methods=['PUT'])
def selection_update(recipe_id):
    selection = load_selection()
    if not selection.set_multiplier(recipe_id, json_body().get('multiplier')):
        return err("NOT_FOUND", f"Recipe {recipe_id} is not selected", 404)
    save_selection(selection)
    return ok({'recipe_id': recipe_id, 'multiplier': dict(selection)[recipe_id]})


@app.route('/api/selection/<int:recipe_id>', methods=['DELETE'])
def selection_remove(recipe_id):
    selection = load_selection()
    if not selection.remove(recipe_id):
        return err("NOT_FOUND", f"Recipe {recipe_id} is not selected", 404)
    save_selection(selection)
    return ok({'removed': recipe_id})


def _consolidated():
    repo = repository()
    selections = repo.selections(load_selection())
    if not selections:
        return None
    return consolidate(selections, repo.get_global_energy_cost())


@app.route('/api/selection/calculate', methods=['POST'])
def selection_calculate():
    result = _consolidated()
    if result is None:
        return err("EMPTY_SELECTION", "Add at least one recipe to the list")
    result['top_items'] = top_cost_items(result)
    return ok(result)


def _flag(name, default=True):
    value = request.args.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


@app.route('/api/selection/export.csv')
def selection_export_csv():
    result = _consolidated()
    if result is None:
        return err("EMPTY_SELECTION", "Nothing to export, add recipes first")

    text = shopping_list_csv(
        result,
        include_ingredients=_flag('ingredients'),
        include_supplies=_flag('supplies'),
        include_energy=_flag('energy'),
        by_supplier=_flag('by_supplier', default=False),
    )
    if not text:
        return err("EMPTY_EXPORT", "No rows in the selected categories")

    filename = f"lista_compras_{date.today().isoformat()}.csv"
    return Response(
        '\ufeff' + text,
        mimetype='text/csv; charset=utf-8',
        headers={'Content-Disposition': f'attachment; filename={filename}'},
    )


# ============================================
# ROUTES - IMPORT / EXPORT
# ============================================

@app.route('/api/snapshot')
def snapshot_get():
    return ok(repository().snapshot())


@app.route('/api/export')
def catalog_export():
    data = export_workbook(repository().snapshot())
    return send_file(
        io.BytesIO(data),
        mimetype='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
        as_attachment=True,
        download_name='bakery_catalog.xlsx',
    )


@app.route('/api/import', methods=['POST'])
def catalog_import():
    upload = request.files.get('file')
    if upload is None or not upload.filename:
        return err("VALIDATION", "No workbook selected")
    if not allowed_file(upload.filename):
        return err("VALIDATION", "Invalid file type. Use an .xlsx workbook.")

    try:
        snapshot = import_workbook(io.BytesIO(upload.read()))
    except SpreadsheetError as e:
        logger.warning("Rejected workbook %s: %s", upload.filename, e)
        return err("INVALID_WORKBOOK", str(e))

    repository().restore(snapshot)
    session.pop(SELECTION_KEY, None)
    return ok({
        'ingredients': len(snapshot['ingredients']),
        'supplies': len(snapshot['supplies']),
        'equipment': len(snapshot['equipment']),
        'recipes': len(snapshot['recipes']),
    })


# ============================================
# CLI
# ============================================

def init_db():
    with app.app_context():
        db.create_all()


@app.cli.command('init-db')
def init_db_command():
    """Create database tables."""
    init_db()
    click.echo('Database initialized.')


@app.cli.command('seed')
def seed_command():
    """Replace the catalog with the starter data."""
    db.create_all()
    repository().restore(seed_snapshot())
    click.echo('Starter catalog loaded.')


if __name__ == '__main__':
    init_db()
    # host='0.0.0.0' allows access from other devices on the network
    app.run(debug=True, host='0.0.0.0', port=5000, use_reloader=False)
