# ==============================================================================
# payhub/main/utils.py
# ------------------------------------------------------------------------------
# Request and response helpers shared by the route handlers.
# ==============================================================================
import os
from flask import current_app, jsonify, request

from payhub.payout.resolver import resolve_payout

def allowed_file(filename):
    """Checks if the file extension is allowed based on the app config."""
    return '.' in filename and \
           os.path.splitext(filename)[1].lower() in current_app.config['ALLOWED_EXTENSIONS']

def request_param(name):
    """A parameter from the query string, a form body, or a JSON body, in that order."""
    value = request.values.get(name)
    if value is None and request.is_json:
        body = request.get_json(silent=True)
        if isinstance(body, dict):
            value = body.get(name)
    if value is None:
        return None
    return str(value)

def lookup_response(payload):
    """
    Payout lookups always answer HTTP 200; failures are reported in an
    'error' key of the body.
    """
    return jsonify(payload), 200

def lookup_payload(snapshot, feid, settings):
    """Runs the resolver and turns its result into the response body."""
    record, failure = resolve_payout(snapshot, feid, settings)
    if failure is not None:
        current_app.logger.info(f"Payout lookup for FEID '{feid.strip()}' failed: {failure.message}")
        return {'error': failure.message}
    current_app.logger.info(f"Payout lookup for FEID '{feid.strip()}' resolved: total {record.total_payout:,.2f}")
    return record.to_dict()
