"""
Student Parking Registration Portal (Flask, SQLite key-value store)
- Spot selector, registration form and confirmation for students
- Admin console behind a static password
- Minimal UI (Bootstrap CDN)

How to run:
  pip install -e .
  python -m parking_portal
Then open http://127.0.0.1:5000

The admin password lives in parking_portal/data/config.json
"""

from __future__ import annotations
import hmac
import io
import json
import logging
import os
import sqlite3
import uuid
from datetime import datetime, timezone
from functools import wraps

from flask import (Flask, Response, flash, g, jsonify, redirect, render_template_string,
                   request, send_file, session, url_for)
from jinja2 import DictLoader
from werkzeug.exceptions import BadRequest, NotFound

from .inventory import InventoryCache, SpotStats, load_admin_config, spot_stats
from .models import SCHEDULES, GradeLevel, Registration, Selection, SpotHalf, SpotType, now_iso
from .state import ParkingState, StoredValueError
from .storage import SHARED_NAMESPACE, SQLiteStore, init_db
from .templates import (ADMIN_DASHBOARD_HTML, ADMIN_LOGIN_HTML, ADMIN_RESET_HTML, BASE_HTML,
                        CONFIRMATION_HTML, FORM_HTML, PARKING_HTML)
from .validation import FIELDS, validate_field, validate_form

APP_TITLE = "Student Parking Portal"
DATA_DIR = os.path.join(os.path.dirname(__file__), "data")

app = Flask(__name__)
app.config.from_mapping(
    SECRET_KEY="change-this-in-production",
    DB_PATH=os.path.join(os.path.dirname(__file__), "parking.db"),
    INVENTORY_PATH=os.path.join(DATA_DIR, "parkingData.json"),
    ADMIN_CONFIG_PATH=os.path.join(DATA_DIR, "config.json"),
    DEFAULT_LOT="Lot A",
)
# FLASK_SECRET_KEY, FLASK_DB_PATH, ... override the defaults
app.config.from_prefixed_env()

# Setup logger
logger = logging.getLogger('parking_portal')
logger.setLevel(logging.INFO)
handler = logging.StreamHandler()
formatter = logging.Formatter(
    '\x1b[30;1m%(asctime)s\x1b[0m %(levelname)-8s\x1b[0m \x1b[35m%(name)s\x1b[0m %(message)s',
    '%Y-%m-%d %H:%M:%S')
handler.setFormatter(formatter)
logger.addHandler(handler)

# ---------------------------- DB Helpers ---------------------------- #

def get_db():
    if "db" not in g:
        g.db = sqlite3.connect(app.config["DB_PATH"])
        init_db(g.db)
    return g.db

@app.teardown_appcontext
def close_db(exception):
    db = g.pop("db", None)
    if db is not None:
        db.close()

# ---------------------------- State Helpers ---------------------------- #

def get_inventory_cache() -> InventoryCache:
    cache = app.extensions.get("parking_inventory")
    if cache is None or cache.path != app.config["INVENTORY_PATH"]:
        cache = InventoryCache(app.config["INVENTORY_PATH"])
        app.extensions["parking_inventory"] = cache
    return cache

def client_id() -> str:
    """Identifies this browser; its keys live in their own namespace"""
    if "client_id" not in session:
        session["client_id"] = uuid.uuid4().hex
        session.permanent = True
    return session["client_id"]

def get_state() -> ParkingState:
    if "state" not in g:
        db = get_db()
        g.state = ParkingState(SQLiteStore(db, f"client:{client_id()}"),
                               SQLiteStore(db, SHARED_NAMESPACE),
                               get_inventory_cache())
    return g.state

def load_inventory_or_flash():
    result = get_state().inventory()
    if not result.ok:
        flash(result.error, "danger")
    return result.value

# ---------------------------- Auth Utils ---------------------------- #

def admin_required(f):
    @wraps(f)
    def wrapper(*args, **kwargs):
        if get_state().get_admin_session() is None:
            flash("Please log in first.", "warning")
            return redirect(url_for("admin"))
        return f(*args, **kwargs)
    return wrapper

def confirmed(*fields: str) -> bool:
    """Whether the user answered yes to every named confirmation prompt"""
    return all(request.form.get(name) == "yes" for name in fields or ("confirmed",))

# ---------------------------- Templates ---------------------------- #

app.jinja_loader = DictLoader({
    'base.html': BASE_HTML,
})

@app.context_processor
def inject_globals():
    return dict(app_title=APP_TITLE)

# ---------------------------- Spot Selector ---------------------------- #

@app.route('/')
def index():
    state = get_state()
    inventory = load_inventory_or_flash()
    lot_name = request.args.get('lot') or app.config['DEFAULT_LOT']
    lot = inventory.get_lot(lot_name)
    if lot is None and inventory:
        flash(f"Lot not found: {lot_name}", "danger")
        lot = next(iter(inventory.lots.values()))
    selection = state.restore_selection()
    stats = spot_stats(inventory, lot) if lot is not None else SpotStats()
    return render_template_string(PARKING_HTML, inventory=inventory, lot=lot, stats=stats,
                                  selection=selection, halves=list(SpotHalf))

@app.route('/parking/select', methods=['POST'])
def select_spot():
    state = get_state()
    inventory = load_inventory_or_flash()
    lot_name = request.form.get('lot', '')
    lot = inventory.get_lot(lot_name)
    spot = lot.find_spot(request.form.get('spot_id', '')) if lot is not None else None
    if spot is None:
        flash("Parking spot not found.", "danger")
        return redirect(url_for('index', lot=lot_name or None))
    if spot.is_taken:
        flash(f"Spot {spot.id} is already taken. Please choose another spot.", "warning")
        return redirect(url_for('index', lot=lot.name))

    match spot.type:
        case SpotType.SHARED:
            try:
                half = SpotHalf(request.form.get('half', ''))
            except ValueError:
                flash("Please choose half A or B of a shared spot.", "warning")
                return redirect(url_for('index', lot=lot.name))
            selection = Selection(spot.id, lot.name, spot.type, half)
        case SpotType.SOLO:
            selection = Selection(spot.id, lot.name, spot.type)

    state.set_selection(selection)
    flash(f"Selected {selection.label(short=True)}", "success")
    return redirect(url_for('index', lot=lot.name))

@app.route('/parking/clear', methods=['POST'])
def clear_selection():
    get_state().clear_selection()
    flash("Selection cleared.", "info")
    return redirect(url_for('index', lot=request.form.get('lot') or None))

# ---------------------------- Registration ---------------------------- #

NO_SELECTION_ERROR = "No parking spot selected. Please go back to select a spot first."
CORRUPT_SELECTION_ERROR = "Error retrieving your selected spot. Please go back and select again."

@app.route('/register', methods=['GET', 'POST'])
def register():
    state = get_state()
    try:
        selection = state.get_selection()
        blocking_error = NO_SELECTION_ERROR if selection is None else None
    except StoredValueError:
        selection = None
        blocking_error = CORRUPT_SELECTION_ERROR

    if selection is None:
        if request.method == 'POST':
            logger.error("Registration submitted without a selected spot")
            blocking_error = "Please select a parking spot first."
        return render_template_string(FORM_HTML, blocking_error=blocking_error)

    form = {}
    errors, invalid = [], set()
    if request.method == 'POST':
        form = request.form
        errors, invalid = validate_form(form, selection.type)
        if not errors:
            registration = Registration.create(form, selection)
            state.submit_registration(registration)
            return redirect(url_for('confirmation'))
        logger.warning("Form errors: %s", errors)

    return render_template_string(FORM_HTML, blocking_error=None, selection=selection, form=form,
                                  errors=errors, invalid=invalid, grades=list(GradeLevel),
                                  schedules=SCHEDULES)

@app.route('/api/validate', methods=['POST'])
def api_validate():
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or data.get('field') not in FIELDS:
        raise BadRequest("Expected a JSON object with a known 'field'.")
    value = data.get('value')
    value = '' if value is None else str(value)
    return jsonify(field=data['field'], valid=validate_field(data['field'], value))

# ---------------------------- Confirmation ---------------------------- #

@app.route('/confirmation')
def confirmation():
    registration = get_state().get_current_registration()
    return render_template_string(CONFIRMATION_HTML, registration=registration)

@app.route('/confirmation/summary.txt')
def confirmation_summary():
    registration = get_state().get_current_registration()
    if registration is None:
        raise NotFound("No registration found. Please complete the registration form first.")
    return Response(registration.summary(), mimetype='text/plain')

# ---------------------------- Admin ---------------------------- #

def render_login(login_error: str | None = None):
    return render_template_string(ADMIN_LOGIN_HTML, login_error=login_error)

@app.route('/admin')
def admin():
    state = get_state()
    if state.get_admin_session() is None:
        return render_login()

    inventory = load_inventory_or_flash()
    registrations = state.indexed_registrations()
    lot_filter = request.args.get('lot', '')
    spot_rows = [(lot, spot) for lot, spot in inventory.all_spots()
                 if not lot_filter or lot.name == lot_filter]
    return render_template_string(ADMIN_DASHBOARD_HTML, inventory=inventory,
                                  registrations=registrations, stats=spot_stats(inventory),
                                  spot_rows=spot_rows, lot_filter=lot_filter)

@app.route('/admin/login', methods=['POST'])
def admin_login():
    password = request.form.get('password', '').strip()
    if not password:
        logger.warning("Login attempt with empty password")
        return render_login("Please enter a password.")

    result = load_admin_config(app.config['ADMIN_CONFIG_PATH'])
    if not result.ok:
        return render_login(result.error)

    if not hmac.compare_digest(password.encode(), result.value.admin_password.encode()):
        logger.warning("Admin login failed - incorrect password")
        return render_login("Invalid password. Please try again.")

    get_state().start_admin_session()
    flash("Welcome back!", "success")
    return redirect(url_for('admin'))

@app.route('/admin/logout', methods=['POST'])
def admin_logout():
    if not confirmed():
        return redirect(url_for('admin'))
    get_state().end_admin_session()
    flash("You have been logged out.", "success")
    return redirect(url_for('admin'))

@app.route('/admin/refresh', methods=['POST'])
@admin_required
def admin_refresh():
    result = get_state().reload_inventory()
    if not result.ok:
        flash(result.error, "danger")
    else:
        flash("Dashboard refreshed", "success")
    return redirect(url_for('admin'))

@app.route('/admin/registrations/<int:index>/remove', methods=['POST'])
@admin_required
def admin_remove_registration(index: int):
    if not confirmed():
        return redirect(url_for('admin'))
    state = get_state()
    registration = state.get_registration(index)
    if registration is None:
        flash("Registration not found.", "danger")
        return redirect(url_for('admin'))
    expected = request.form.get('reference_id')
    if expected and registration.reference_id != expected:
        flash("The registration list has changed. Please refresh and try again.", "warning")
        return redirect(url_for('admin'))
    removed = state.remove_registration(index)
    flash(f"Registration for {removed.full_name} removed.", "success")
    return redirect(url_for('admin'))

@app.route('/admin/registrations/<int:index>/summary.txt')
@admin_required
def admin_registration_summary(index: int):
    registration = get_state().get_registration(index)
    if registration is None:
        raise NotFound("Registration not found.")
    return Response(registration.summary(), mimetype='text/plain')

@app.route('/admin/spots/<lot_key>/<spot_id>/clear', methods=['POST'])
@admin_required
def admin_clear_spot(lot_key: str, spot_id: str):
    lot_filter = request.form.get('lot') or None
    if not confirmed():
        return redirect(url_for('admin', lot=lot_filter))
    try:
        get_state().clear_spot(lot_key, spot_id)
    except KeyError:
        raise NotFound(f"Spot {spot_id} not found in {lot_key}.")
    flash(f"Spot {spot_id} cleared", "success")
    return redirect(url_for('admin', lot=lot_filter))

@app.route('/admin/reset', methods=['POST'])
@admin_required
def admin_reset():
    state = get_state()
    step = request.form.get('step', '1')
    if step == '1' and confirmed():
        return render_template_string(ADMIN_RESET_HTML,
                                      registration_count=len(state.load_registrations()))
    if step == '2' and confirmed('confirmed', 'confirmed_again'):
        state.reset_all()
        flash("All data has been reset", "success")
    return redirect(url_for('admin'))

@app.route('/admin/export')
@admin_required
def admin_export():
    state = get_state()
    inventory = state.inventory().value
    submissions = state.export_entries()
    stats = spot_stats(inventory)
    export = {
        "exportDate": now_iso(),
        "parkingData": inventory.to_dict(),
        "studentSubmissions": submissions,
        "statistics": {
            "totalRegistrations": len(submissions),
            "exportedSpots": stats.total,
            "totalSpots": stats.total,
            "availableSpots": stats.available,
            "takenSpots": stats.taken,
        },
    }
    payload = json.dumps(export, indent=2).encode("utf-8")
    filename = f"mhs-parking-data-{datetime.now(timezone.utc).date().isoformat()}.json"
    logger.info("Exported %i registrations", len(submissions))
    return send_file(io.BytesIO(payload), mimetype="application/json",
                     as_attachment=True, download_name=filename)
