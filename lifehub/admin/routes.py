"""Administrator pages and endpoints."""

from flask import Blueprint, current_app, jsonify
from flask_login import current_user
from lifehub.auth.guards import require_role
from lifehub.crud import json_body
from lifehub.errors import NotFoundError, ValidationError
from lifehub.extensions import db
from lifehub.models.role import UserRole
from lifehub.models.show import Episode, Show
from lifehub.models.user import User
from lifehub.resources.roles import ADMIN, RoleService
from lifehub.tasks.episode_import import CSV_HEADERS, check_headers, import_episodes_task

admin_bp = Blueprint('admin', __name__)


@admin_bp.route('/admin', methods=['GET'])
@require_role(ADMIN)
def dashboard():
    """
    Admin overview.

    Returns:
        200: Catalog and user counts
        403: Signed in without the admin role
    """
    return jsonify({
        'users': User.query.count(),
        'admins': UserRole.query.filter_by(role=ADMIN).count(),
        'shows': Show.query.count(),
        'episodes': Episode.query.count()
    }), 200


@admin_bp.route('/admin/users', methods=['GET'])
@require_role(ADMIN)
def users_page():
    users = User.query.order_by(User.created_at.desc()).all()
    return jsonify({
        'users': [
            {**user.to_dict(), 'roles': sorted(RoleService.roles_for(user.id))}
            for user in users
        ]
    }), 200


@admin_bp.route('/api/admin/users/<user_id>/roles', methods=['POST'])
@require_role(ADMIN)
def grant_role(user_id):
    """
    Grant a role to a user.

    Request Body:
        {"role": "admin"}

    Returns:
        200: Role granted (or already held)
        400: Role missing
        404: Unknown user
    """
    role = (json_body().get('role') or '').strip()
    if not role:
        raise ValidationError('role is required', field='role')
    if db.session.get(User, user_id) is None:
        raise NotFoundError('User not found')

    created = RoleService.assign(user_id, role)
    current_app.logger.info(f"User {current_user.id} granted '{role}' to user {user_id}")
    return jsonify({
        'user_id': user_id,
        'role': role,
        'created': created,
        'roles': sorted(RoleService.roles_for(user_id))
    }), 200


@admin_bp.route('/api/admin/episodes/import', methods=['POST'])
@require_role(ADMIN)
def import_episodes():
    """
    Queue a CSV episode import.

    Request Body:
        {"csv": "Show,Episode,Title,Air Date\\n..."}

    Returns:
        202: Import queued with task id
        400: Missing CSV or wrong header row
    """
    csv_text = json_body().get('csv')
    if not csv_text or not isinstance(csv_text, str):
        raise ValidationError('csv is required', field='csv')
    if check_headers(csv_text) is None:
        raise ValidationError(
            f"CSV headers must be: {', '.join(CSV_HEADERS)}", field='csv'
        )

    task = import_episodes_task.delay(csv_text, current_user.id)
    current_app.logger.info(f"Queued episode import {task.id} for user {current_user.id}")
    return jsonify({'message': 'Import queued', 'task_id': task.id}), 202
