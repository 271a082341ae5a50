"""Route guards for authenticated and role-restricted views."""

import logging
from enum import Enum
from functools import wraps
from flask import jsonify
from flask_login import current_user
from lifehub.extensions import login_manager
from lifehub.resources.roles import RoleService

logger = logging.getLogger(__name__)

NOT_PERMITTED_MESSAGE = 'You are not permitted to view this page.'


class GuardState(Enum):
    LOADING = 'loading'
    DENIED_UNAUTHENTICATED = 'denied_unauthenticated'
    DENIED_UNAUTHORIZED = 'denied_unauthorized'
    ALLOWED = 'allowed'


def evaluate_guard(user, roles=None, required_role=None, session_pending=False):
    """
    Decide what a guarded view should render.

    Args:
        user: The session user, or None when there is no session
        roles: Role names of the user; None while the lookup is pending
        required_role: Role the view needs, or None for any signed-in user
        session_pending: True while the session itself is still resolving

    Returns:
        GuardState
    """
    if session_pending:
        return GuardState.LOADING
    if user is None or not user.is_authenticated:
        return GuardState.DENIED_UNAUTHENTICATED
    if required_role is None:
        return GuardState.ALLOWED
    if roles is None:
        return GuardState.LOADING
    if required_role in roles:
        return GuardState.ALLOWED
    return GuardState.DENIED_UNAUTHORIZED


def render_guard_state(state):
    """Response for every state other than ALLOWED."""
    if state is GuardState.DENIED_UNAUTHENTICATED:
        return login_manager.unauthorized()
    if state is GuardState.DENIED_UNAUTHORIZED:
        return jsonify({'error': NOT_PERMITTED_MESSAGE}), 403
    return jsonify({'status': 'loading'}), 202


def require_auth(view):
    """Redirect (or 401 for API calls) when there is no session."""

    @wraps(view)
    def wrapped(*args, **kwargs):
        state = evaluate_guard(current_user)
        if state is not GuardState.ALLOWED:
            return render_guard_state(state)
        return view(*args, **kwargs)

    return wrapped


def require_role(role):
    """
    Only render the view for users holding role.

    Roles are re-read from the database on every request. A signed-in user
    without the role gets an inline 403 notice, never a redirect.
    """

    def decorator(view):
        @wraps(view)
        def wrapped(*args, **kwargs):
            roles = RoleService.roles_for(current_user.id) if current_user.is_authenticated else None
            state = evaluate_guard(current_user, roles, role)
            if state is GuardState.DENIED_UNAUTHORIZED:
                logger.warning(f"SECURITY: user {current_user.id} lacks role '{role}'")
            if state is not GuardState.ALLOWED:
                return render_guard_state(state)
            return view(*args, **kwargs)

        return wrapped

    return decorator
