# ==============================================================================
# payhub/main/routes.py
# ------------------------------------------------------------------------------
# Defines the HTTP API: public payout lookups, billing cycles and walker
# feedback, plus the admin endpoints for snapshots, feedback and settings.
# ==============================================================================

import os
import hmac
import json
from datetime import datetime
from functools import wraps
from flask import request, current_app, session, jsonify
from werkzeug.utils import secure_filename
from sqlalchemy.exc import SQLAlchemyError

from payhub import db, __version__
from payhub.main import bp
from payhub.models import PayoutSheet, WalkerFeedback, AppSetting, TRUE_WORDS, FALSE_WORDS
from payhub.payout.schema import COLUMN_MAPPINGS, WIRE_NAMES
from payhub.payout.cycles import (all_months_in_year, recent_months_window,
                                  billing_cycle_for_date, parse_cycle_id)
from payhub.payout.resolver import resolve_payout, LookupFailure
from payhub.payout.settings import load_payout_settings, CYCLE_WINDOWS
from payhub.payout.validator import validate_payout_file
from payhub.sheets import SheetsClient, SheetFetchError
from payhub.main.forms import AdminLoginForm, AppSettingForm, FeedbackForm, PayoutSheetUploadForm
from payhub.main.utils import allowed_file, request_param, lookup_payload, lookup_response

MISSING_PARAMS_ERROR = 'Missing required parameters: spreadsheetId and feid are required'
TEST_FEID = 'TEST_FEID'

# --- Helper Functions ---

def admin_required(f):
    """Decorator to protect admin routes with session-based authentication."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not session.get('admin_logged_in'):
            return jsonify({'error': 'Admin login required.'}), 401
        return f(*args, **kwargs)
    return decorated_function

def _sheet_id_param():
    """The tab's gid from the request, or None when it is absent or blank."""
    sheet_id = request_param('sheetId')
    if sheet_id is None or not sheet_id.strip():
        return None
    if not sheet_id.strip().isdigit():
        raise ValueError('sheetId must be a non-negative integer')
    return sheet_id.strip()

# --- Public Payout API ---

@bp.route('/api/payout', methods=['GET', 'POST'])
def api_payout():
    """
    Looks up a walker's payout in a live Google Sheet.

    sheetId is the tab's gid (the number after '#gid=' in the tab URL), not its
    position in the workbook. It defaults to the gid in spreadsheetId when that
    is a full URL, and to 0 (the first tab) otherwise.
    """
    try:
        spreadsheet_id = request_param('spreadsheetId')
        feid = request_param('feid')

        if not spreadsheet_id or not feid or not feid.strip():
            return lookup_response({'error': MISSING_PARAMS_ERROR})

        try:
            sheet_id = _sheet_id_param()
        except ValueError as e:
            return lookup_response({'error': str(e)})

        client = SheetsClient.from_config(current_app.config)
        try:
            snapshot = client.fetch_snapshot(spreadsheet_id, sheet_id)
        except SheetFetchError as e:
            current_app.logger.error(f"Sheet fetch failed for FEID '{feid.strip()}': {e}", exc_info=True)
            return lookup_response({'error': f'Failed to fetch data: {e}'})

        return lookup_response(lookup_payload(snapshot, feid, load_payout_settings()))

    except Exception as e:
        current_app.logger.error(f"Unexpected error in payout lookup: {e}", exc_info=True)
        return lookup_response({'error': f'Internal server error: {e}'})

@bp.route('/api/cycles/<cycle_id>/payout', methods=['GET', 'POST'])
def api_cycle_payout(cycle_id):
    """Looks up a walker's payout in the latest snapshot uploaded for a billing cycle."""
    try:
        feid = request_param('feid')
        if not feid or not feid.strip():
            return lookup_response({'error': 'Missing required parameter: feid is required'})

        try:
            cycle = parse_cycle_id(cycle_id)
        except ValueError as e:
            return lookup_response({'error': str(e)})

        sheet = PayoutSheet.latest_for_cycle(cycle.cycle_id)
        if sheet is None:
            return lookup_response({'error': f'No payout sheet has been uploaded for {cycle.label}'})

        payload = lookup_payload(sheet.snapshot, feid, load_payout_settings())
        if 'error' not in payload:
            payload['cycle'] = cycle.to_dict()
            payload['sheetId'] = sheet.id
        return lookup_response(payload)

    except Exception as e:
        current_app.logger.error(f"Unexpected error in cycle payout lookup for {cycle_id}: {e}", exc_info=True)
        return lookup_response({'error': f'Internal server error: {e}'})

@bp.route('/api/billing-cycles')
def api_billing_cycles():
    """Lists selectable billing cycles for a year."""
    settings = load_payout_settings()
    today = datetime.utcnow().date()

    raw_year = request.args.get('year')
    try:
        year = int(raw_year) if raw_year else today.year
    except ValueError:
        return jsonify({'error': f"Invalid year '{raw_year}'"}), 400

    window = request.args.get('window') or settings.default_cycle_window
    if window not in CYCLE_WINDOWS:
        return jsonify({'error': f"window must be one of: {', '.join(CYCLE_WINDOWS)}"}), 400

    cycles = all_months_in_year(year) if window == 'all' else recent_months_window(year)
    return jsonify({
        'year': year,
        'window': window,
        'cycles': [cycle.to_dict() for cycle in cycles],
        'current': billing_cycle_for_date(today).to_dict()
    })

@bp.route('/api/feedback', methods=['POST'])
def api_feedback():
    """Records a walker's confirmation of, or concern about, a payout."""
    settings = load_payout_settings()
    form = FeedbackForm(concern_categories=settings.concern_categories)
    if not form.validate_on_submit():
        return jsonify({'error': 'Invalid feedback', 'fields': form.error_list()}), 400

    satisfied = form.satisfied.data == 'yes'
    feedback = WalkerFeedback(
        feid=form.feid.data.strip(),
        cycle_id=form.cycle_id.data,
        satisfied=satisfied,
        description=(form.description.data or '').strip() or None,
        total_payout=form.total_payout.data
    )
    feedback.concern_categories = [] if satisfied else form.concerns.data

    try:
        db.session.add(feedback)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Could not store feedback for FEID '{feedback.feid}': {e}", exc_info=True)
        return jsonify({'error': 'Feedback could not be saved. Please try again later.'}), 500

    current_app.logger.info(f"Feedback {feedback.id} recorded for FEID '{feedback.feid}' "
                            f"({feedback.cycle_id}): {'satisfied' if satisfied else 'concern raised'}")
    message = ('Your satisfaction has been recorded successfully' if satisfied
               else 'Your concerns have been forwarded for review')
    return jsonify({'status': 'recorded', 'id': feedback.id, 'message': message}), 201

@bp.route('/api/health')
def api_health():
    return jsonify({'status': 'ok', 'timestamp': datetime.utcnow().isoformat() + 'Z'})

@bp.route('/api/info')
def api_info():
    """Describes the service and the sheet layout it expects."""
    settings = load_payout_settings()
    return jsonify({
        'name': 'Walker Pay Hub',
        'version': __version__,
        'columnMappings': {header: WIRE_NAMES[name] for header, name in COLUMN_MAPPINGS.items()},
        'sheetId': 'The tab gid from the sheet URL (#gid=...), not the tab position. Defaults to 0.',
        'concernCategories': [{'id': cid, 'label': label} for cid, label in settings.concern_categories],
        'cycleWindows': list(CYCLE_WINDOWS),
        'timestamp': datetime.utcnow().isoformat() + 'Z'
    })

@bp.route('/api/test-connection', methods=['GET', 'POST'])
def api_test_connection():
    """
    Checks that a spreadsheet can be read and has an FEID column, by looking up
    a placeholder FEID. A 'not found' answer counts as a working connection.
    """
    spreadsheet_id = request_param('spreadsheetId')
    if not spreadsheet_id:
        return lookup_response({'success': False, 'error': 'Spreadsheet ID is required for testing'})
    try:
        sheet_id = _sheet_id_param()
        snapshot = SheetsClient.from_config(current_app.config).fetch_snapshot(spreadsheet_id, sheet_id)
    except (ValueError, SheetFetchError) as e:
        current_app.logger.warning(f"Connection test failed: {e}")
        return lookup_response({'success': False, 'error': str(e)})

    record, failure = resolve_payout(snapshot, TEST_FEID, load_payout_settings())
    if record is not None or failure in (LookupFailure.IDENTIFIER_NOT_FOUND, LookupFailure.DUPLICATE_IDENTIFIER):
        return lookup_response({'success': True, 'message': 'API connection successful',
                                'rowCount': max(len(snapshot) - 1, 0)})
    return lookup_response({'success': False, 'error': failure.message})

# --- Admin API ---

@bp.route('/admin/login', methods=['POST'])
def admin_login():
    """Handles admin login."""
    form = AdminLoginForm()
    if not form.validate_on_submit():
        return jsonify({'error': 'Invalid login', 'fields': form.error_list()}), 400
    expected = current_app.config.get('ADMIN_PASSWORD', '')
    if hmac.compare_digest(form.password.data.encode(), expected.encode()):
        session['admin_logged_in'] = True
        current_app.logger.info('Admin logged in.')
        return jsonify({'status': 'logged_in'})
    current_app.logger.warning('Rejected admin login attempt.')
    return jsonify({'error': 'Invalid password.'}), 401

@bp.route('/admin/logout', methods=['POST'])
def admin_logout():
    """Handles admin logout."""
    session.pop('admin_logged_in', None)
    return jsonify({'status': 'logged_out'})

@bp.route('/admin/sheets', methods=['GET'])
@admin_required
def list_sheets():
    """Lists uploaded payout snapshots, newest first."""
    query = PayoutSheet.query
    if request.args.get('cycle_id'):
        query = query.filter_by(cycle_id=request.args['cycle_id'])
    sheets = query.order_by(PayoutSheet.upload_timestamp.desc(), PayoutSheet.id.desc()).all()
    return jsonify({'sheets': [sheet.to_dict() for sheet in sheets]})

@bp.route('/admin/sheets', methods=['POST'])
@admin_required
def upload_sheet():
    """Validates and stores an uploaded payout snapshot for a billing cycle."""
    form = PayoutSheetUploadForm()
    if not form.validate_on_submit():
        return jsonify({'error': 'Invalid upload', 'fields': form.error_list()}), 400

    file = form.file.data
    if not allowed_file(file.filename):
        return jsonify({'error': 'File type not allowed. Please upload an .xlsx file.'}), 400

    cycle = parse_cycle_id(form.cycle_id.data)
    filename = secure_filename(file.filename)
    stored_name = f"{datetime.utcnow():%Y%m%d%H%M%S}_{cycle.cycle_id}_{filename}"
    filepath = os.path.join(current_app.config['UPLOAD_FOLDER'], stored_name)
    os.makedirs(current_app.config['UPLOAD_FOLDER'], exist_ok=True)
    file.save(filepath)

    snapshot, errors = validate_payout_file(filepath, load_payout_settings())
    if errors:
        current_app.logger.warning(f"Rejected payout sheet '{filename}' for {cycle.cycle_id}: {len(errors)} problem(s)")
        return jsonify({'error': 'Validation failed', 'errors': errors}), 400

    try:
        sheet = PayoutSheet(
            filename=filename,
            cycle_id=cycle.cycle_id,
            cycle_label=cycle.label,
            upload_timestamp=datetime.utcnow(),
            row_count=len(snapshot) - 1,
            rows_json=json.dumps(snapshot, default=str, ensure_ascii=False)
        )
        db.session.add(sheet)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Storing payout sheet failed: {e}", exc_info=True)
        return jsonify({'error': f'The sheet could not be saved: {e}'}), 500

    current_app.logger.info(f"Stored payout sheet {sheet.id} ('{filename}') for {cycle.label}, {sheet.row_count} rows")
    return jsonify(sheet.to_dict()), 201

@bp.route('/admin/sheets/<int:sheet_id>/delete', methods=['POST'])
@admin_required
def delete_sheet(sheet_id):
    sheet = db.get_or_404(PayoutSheet, sheet_id)
    db.session.delete(sheet)
    db.session.commit()
    current_app.logger.info(f"Deleted payout sheet {sheet_id}")
    return jsonify({'status': 'deleted', 'id': sheet_id})

@bp.route('/admin/feedback')
@admin_required
def list_feedback():
    """Lists walker feedback, optionally for one cycle or one kind of response."""
    query = WalkerFeedback.query
    if request.args.get('cycle_id'):
        query = query.filter_by(cycle_id=request.args['cycle_id'])
    satisfied = request.args.get('satisfied')
    if satisfied in ('yes', 'no'):
        query = query.filter_by(satisfied=(satisfied == 'yes'))
    entries = query.order_by(WalkerFeedback.created_at.desc(), WalkerFeedback.id.desc()).all()
    return jsonify({'feedback': [entry.to_dict() for entry in entries]})

@bp.route('/admin/settings', methods=['GET'])
@admin_required
def admin_settings():
    settings = AppSetting.query.order_by(AppSetting.key).all()
    return jsonify({'settings': [setting.to_dict() for setting in settings]})

@bp.route('/admin/settings/<int:setting_id>', methods=['POST'])
@admin_required
def edit_setting(setting_id):
    setting = db.get_or_404(AppSetting, setting_id)
    form = AppSettingForm()
    if not form.validate_on_submit():
        return jsonify({'error': 'Invalid value', 'fields': form.error_list()}), 400

    new_value = form.value.data
    if setting.value_type == 'json':
        try:
            new_value = json.dumps(json.loads(new_value), ensure_ascii=False)
        except json.JSONDecodeError:
            return jsonify({'error': f"The value for '{setting.key}' is not valid JSON."}), 400
    elif setting.value_type in ('int', 'float'):
        try:
            (int if setting.value_type == 'int' else float)(new_value)
        except ValueError:
            return jsonify({'error': f"The value for '{setting.key}' must be a number."}), 400
    elif setting.value_type == 'bool':
        if new_value.strip().lower() not in TRUE_WORDS + FALSE_WORDS:
            return jsonify({'error': f"The value for '{setting.key}' must be one of: "
                                     f"{', '.join(TRUE_WORDS + FALSE_WORDS)}."}), 400

    setting.value = new_value
    db.session.commit()
    current_app.logger.info(f"Setting {setting.key} changed to {new_value!r}")
    return jsonify(setting.to_dict())
