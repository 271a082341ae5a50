"""Authentication tests."""

from conftest import PASSWORD
from lifehub.extensions import db as _db
from lifehub.models.user import User
from lifehub.resources.roles import RoleService


def test_login_success(client, user1):
    """Test successful login."""
    response = client.post('/login', json={
        'email': 'user1@example.com',
        'password': PASSWORD
    })

    assert response.status_code == 200
    data = response.get_json()
    assert data['message'] == 'Login successful'
    assert data['user']['email'] == 'user1@example.com'
    assert data['redirect'] == '/'


def test_login_returns_to_requested_page(client, user1):
    response = client.post('/login?next=/finance/wallets', json={
        'email': 'user1@example.com',
        'password': PASSWORD
    })

    assert response.status_code == 200
    assert response.get_json()['redirect'] == '/finance/wallets'


def test_login_ignores_offsite_next(client, user1):
    response = client.post('/login', json={
        'email': 'user1@example.com',
        'password': PASSWORD,
        'next': 'https://evil.example.com/'
    })

    assert response.get_json()['redirect'] == '/'


def test_login_invalid_credentials(client, user1):
    """Test login with invalid password."""
    response = client.post('/login', json={
        'email': 'user1@example.com',
        'password': 'wrongpassword'
    })

    assert response.status_code == 401
    data = response.get_json()
    assert 'error' in data


def test_login_missing_fields(client):
    """Test login with missing fields."""
    response = client.post('/login', json={
        'email': 'user1@example.com'
    })

    assert response.status_code == 400
    data = response.get_json()
    assert 'error' in data


def test_login_rejects_non_string_credentials(client, user1):
    """Test login with a number where the email should be."""
    response = client.post('/login', json={'email': 5, 'password': PASSWORD})

    assert response.status_code == 400
    assert response.get_json()['field'] == 'email'


def test_signup_rejects_non_string_password(client):
    response = client.post('/api/auth/signup', json={
        'email': 'new@example.com', 'password': 12345678
    })

    assert response.status_code == 400
    assert response.get_json()['field'] == 'password'


def test_login_inactive_user(app, client, user1):
    """Test login with deactivated account."""
    with app.app_context():
        User.query.filter_by(id=user1.id).update({'is_active': False})
        _db.session.commit()

    response = client.post('/login', json={
        'email': 'user1@example.com',
        'password': PASSWORD
    })

    assert response.status_code == 403
    data = response.get_json()
    assert 'disabled' in data['error'].lower()


def test_login_prompt_keeps_next(client):
    response = client.get('/login?next=/tv-shows')

    assert response.status_code == 200
    assert response.get_json()['next'] == '/tv-shows'


def test_signup_creates_and_signs_in(client):
    response = client.post('/api/auth/signup', json={
        'email': 'New@Example.com',
        'password': 'long-enough-password'
    })

    assert response.status_code == 201
    assert response.get_json()['user']['email'] == 'new@example.com'

    response = client.get('/api/auth/me')
    assert response.status_code == 200
    assert response.get_json()['roles'] == []


def test_signup_rejects_short_password(client):
    response = client.post('/api/auth/signup', json={
        'email': 'short@example.com',
        'password': 'short'
    })

    assert response.status_code == 400
    assert response.get_json()['field'] == 'password'


def test_signup_rejects_duplicate_email(client, user1):
    response = client.post('/api/auth/signup', json={
        'email': 'user1@example.com',
        'password': 'another-password'
    })

    assert response.status_code == 400
    assert response.get_json()['field'] == 'email'


def test_admin_signup_requires_code(client):
    response = client.post('/api/auth/admin/signup', json={
        'email': 'boss@example.com',
        'password': 'long-enough-password',
        'code': 'wrong'
    })

    assert response.status_code == 403


def test_admin_signup_grants_admin_role(app, client):
    response = client.post('/api/auth/admin/signup', json={
        'email': 'boss@example.com',
        'password': 'long-enough-password',
        'code': 'let-me-in'
    })

    assert response.status_code == 201
    user_id = response.get_json()['user']['id']
    with app.app_context():
        assert RoleService.is_admin(user_id)

    assert client.get('/api/auth/me').get_json()['roles'] == ['admin']


def test_logout(authenticated_client1):
    """Test logout."""
    response = authenticated_client1.post('/api/auth/logout')

    assert response.status_code == 200
    data = response.get_json()
    assert data['message'] == 'Logout successful'

    assert authenticated_client1.get('/api/auth/me').status_code == 401


def test_get_current_user(authenticated_client1, user1):
    """Test getting current user info."""
    response = authenticated_client1.get('/api/auth/me')

    assert response.status_code == 200
    data = response.get_json()
    assert data['email'] == 'user1@example.com'
    assert data['id'] == user1.id


def test_get_current_user_unauthorized(client):
    """Test getting current user without authentication."""
    response = client.get('/api/auth/me')
    assert response.status_code == 401
