"""
LPN Lock Module Routes
Single POST command endpoint used by the lock/unlock page
"""
from flask import Blueprint, request, jsonify
import logging

from manhattan_integration import ManhattanIntegration
from modules.lpn_lock.models import BATCH_ACTIONS, BatchValidationError, OrgSession
from modules.lpn_lock.services import LPNLockService
from telemetry import track_event

lpn_lock_bp = Blueprint('lpn_lock', __name__, url_prefix='/api')

NON_POST_METHODS = ['GET', 'PUT', 'PATCH', 'DELETE']


def get_request_data():
    """Get JSON object from request; anything else is treated as empty"""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def current_session(data):
    """OrgSession from the bearer header, or None when no token was sent"""
    return OrgSession.from_authorization(data.get('org'), request.headers.get('Authorization'))


def no_token_response():
    return jsonify({'error': 'No token'}), 401


@lpn_lock_bp.route('/validate', methods=['POST'] + NON_POST_METHODS)
def validate():
    """Dispatch on the 'action' field of the JSON body"""
    logging.info(f"[API] {request.method} {request.path}")
    if request.method != 'POST':
        return jsonify({'error': 'Method not allowed'}), 405

    data = get_request_data()
    action = data.get('action')

    try:
        if action == 'app_opened':
            return jsonify({'success': True})

        if action == 'ha-track':
            track_event(data.get('event_name'), data.get('metadata') or {})
            return jsonify({'success': True})

        if action == 'auth':
            return authenticate(data)

        if action == 'get-codes':
            return get_codes(data)

        if action in BATCH_ACTIONS:
            return run_batch(action, data)

        return jsonify({'success': False, 'error': 'Unknown action'}), 400

    except Exception as e:
        logging.exception(f"Error handling action {action}: {str(e)}")
        return jsonify({'success': False, 'error': str(e)}), 500


def authenticate(data):
    org = (data.get('org') or '').strip()
    if not org:
        return jsonify({'success': False, 'error': 'ORG required'}), 400

    token = ManhattanIntegration().get_token(org)
    if not token:
        return jsonify({'success': False, 'error': 'Auth failed'})
    return jsonify({'success': True, 'token': token})


def get_codes(data):
    session = current_session(data)
    if session is None:
        return no_token_response()

    codes = ManhattanIntegration().list_condition_codes(session.token, session.org)
    return jsonify({'codes': codes})


def run_batch(action, data):
    session = current_session(data)
    if session is None:
        return no_token_response()

    try:
        batch = LPNLockService(ManhattanIntegration()).run(
            action, session, data.get('lpn'), data.get('code') or None)
    except BatchValidationError as e:
        logging.warning(f"⚠️ {action} batch rejected: {str(e)}")
        return jsonify({'success': False, 'error': str(e)}), 400

    return jsonify(batch.to_dict())
