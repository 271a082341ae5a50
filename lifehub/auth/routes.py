"""Authentication routes."""

from urllib.parse import urlsplit
from flask import Blueprint, current_app, jsonify, redirect, request
from flask_login import current_user, login_url, login_user, logout_user
from sqlalchemy.exc import IntegrityError
from lifehub.auth.guards import require_auth
from lifehub.errors import AccessError, ValidationError
from lifehub.extensions import db, login_manager
from lifehub.models.user import User
from lifehub.resources.roles import ADMIN, RoleService

auth_bp = Blueprint('auth', __name__)

MIN_PASSWORD_LENGTH = 8


def safe_next(target):
    """Keep post-login redirects on this site."""
    if not target:
        return None
    parts = urlsplit(target)
    if parts.scheme or parts.netloc or not target.startswith('/') or target.startswith('//'):
        return None
    return target


@login_manager.unauthorized_handler
def unauthorized():
    """
    Pages redirect to the sign-in route keeping the original location;
    API calls get a 401.
    """
    if request.path.startswith('/api/'):
        return jsonify({'error': 'Authentication required'}), 401
    return redirect(login_url('auth.login', next_url=request.url))


def _credentials():
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or not data.get('email') or not data.get('password'):
        raise ValidationError('Email and password required')
    for field in ('email', 'password'):
        if not isinstance(data[field], str):
            raise ValidationError(f'{field} must be a string', field=field)
    return data


def _create_user(data):
    email = data['email'].strip().lower()
    if not isinstance(data.get('display_name') or '', str):
        raise ValidationError('display_name must be a string', field='display_name')
    if len(data['password']) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f'Password must be at least {MIN_PASSWORD_LENGTH} characters', field='password'
        )
    if User.query.filter_by(email=email).first():
        raise ValidationError('Email already registered', field='email')

    user = User(email=email, display_name=data.get('display_name'), is_active=True)
    user.set_password(data['password'])
    db.session.add(user)
    try:
        db.session.flush()
    except IntegrityError:
        db.session.rollback()
        raise ValidationError('Email already registered', field='email')
    return user


@auth_bp.route('/login', methods=['GET'])
def login_prompt():
    """
    Sign-in prompt.

    Query Args:
        next: Path to return to after a successful login
    """
    return jsonify({
        'message': 'Please log in to access this page.',
        'next': safe_next(request.args.get('next'))
    }), 200


@auth_bp.route('/login', methods=['POST'])
def login():
    """
    Authenticate user and create session.

    Request Body:
        {
            "email": "user@example.com",
            "password": "password123",
            "next": "/finance/wallets"
        }

    Returns:
        200: Login successful with user info and redirect target
        400: Missing credentials
        401: Invalid credentials
        403: Account disabled
    """
    data = _credentials()

    user = User.query.filter_by(email=data['email'].strip().lower()).first()

    if not user or not user.check_password(data['password']):
        return jsonify({'error': 'Invalid credentials'}), 401

    if not user.is_active:
        return jsonify({'error': 'Account disabled'}), 403

    login_user(user)
    current_app.logger.info(f"User {user.id} logged in")

    target = safe_next(data.get('next')) or safe_next(request.args.get('next')) or '/'
    return jsonify({
        'message': 'Login successful',
        'user': user.to_dict(),
        'redirect': target
    }), 200


@auth_bp.route('/api/auth/signup', methods=['POST'])
def signup():
    """
    Register a user and sign them in.

    Returns:
        201: Account created
        400: Missing fields, short password or email taken
    """
    user = _create_user(_credentials())
    db.session.commit()
    login_user(user)
    return jsonify({'message': 'Signup successful', 'user': user.to_dict()}), 201


@auth_bp.route('/api/auth/admin/signup', methods=['POST'])
def admin_signup():
    """
    Register an administrator.

    Request Body:
        email, password and the configured admin signup code

    Returns:
        201: Account created with the admin role
        403: Admin signup disabled or wrong code
    """
    data = _credentials()
    expected = current_app.config.get('ADMIN_SIGNUP_CODE')
    if not expected:
        raise AccessError('Admin signup is disabled')
    if data.get('code') != expected:
        current_app.logger.warning(f"SECURITY: bad admin signup code for {data.get('email')}")
        raise AccessError('Invalid admin signup code')

    user = _create_user(data)
    db.session.commit()
    RoleService.assign(user.id, ADMIN)
    login_user(user)
    return jsonify({'message': 'Admin signup successful', 'user': user.to_dict()}), 201


@auth_bp.route('/api/auth/logout', methods=['POST'])
@require_auth
def logout():
    """
    End user session.

    Returns:
        200: Logout successful
    """
    logout_user()
    return jsonify({'message': 'Logout successful'}), 200


@auth_bp.route('/api/auth/me', methods=['GET'])
@require_auth
def get_current_user():
    """
    Get current authenticated user information with roles.

    Returns:
        200: Current user info
    """
    data = current_user.to_dict()
    data['roles'] = sorted(RoleService.roles_for(current_user.id))
    return jsonify(data), 200
