"""Client preferences: module settings, currency, notifications, tenancy."""

from flask import Blueprint, current_app, jsonify, request
from flask_login import current_user, logout_user
from lifehub.currency import CURRENCIES, preferred_currency, set_preferred_currency
from lifehub.errors import NotFoundError, ValidationError
from lifehub.notifications import drain_notifications
from lifehub.settings import AppSettings
from lifehub.tenancy.store import SessionStore

preferences_bp = Blueprint('preferences', __name__, url_prefix='/api')


def module_enabled(module):
    return AppSettings(SessionStore()).is_enabled(module)


def require_module(blueprint, module):
    """Answer 404 for every route of blueprint while module is disabled."""

    @blueprint.before_request
    def check_module():
        if not module_enabled(module):
            raise NotFoundError(f"The {module.replace('_', ' ')} module is disabled")


@preferences_bp.route('/settings', methods=['GET'])
def get_settings():
    return jsonify(AppSettings(SessionStore()).to_dict()), 200


@preferences_bp.route('/settings/apps/<module>/toggle', methods=['POST'])
def toggle_module(module):
    """
    Enable or disable an optional module.

    Changing the module set signs the session out so navigation is rebuilt
    on the next login.

    Returns:
        200: New settings and signed_out flag
        404: Unknown module
    """
    settings = AppSettings(SessionStore())
    try:
        data = settings.toggle(module)
    except KeyError:
        raise NotFoundError(f"Unknown module '{module}'")

    signed_out = current_user.is_authenticated
    if signed_out:
        current_app.logger.info(f"User {current_user.id} signed out after toggling {module}")
        logout_user()
    return jsonify({'settings': data, 'signed_out': signed_out}), 200


@preferences_bp.route('/currency', methods=['GET'])
def get_currency():
    currency = preferred_currency(SessionStore())
    return jsonify({
        'currency': currency._asdict(),
        'available': [c._asdict() for c in CURRENCIES]
    }), 200


@preferences_bp.route('/currency', methods=['PUT'])
def update_currency():
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    currency = set_preferred_currency(SessionStore(), data.get('code'))
    if currency is None:
        raise ValidationError(f"Unsupported currency '{data.get('code')}'", field='code')
    return jsonify({'currency': currency._asdict()}), 200


@preferences_bp.route('/notifications', methods=['GET'])
def get_notifications():
    """Pop queued success and error notifications."""
    return jsonify({'notifications': drain_notifications()}), 200
