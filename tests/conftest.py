"""Pytest configuration and fixtures."""

from collections import namedtuple
import pytest
from lifehub import create_app
from lifehub.config import Config
from lifehub.extensions import db as _db, query_cache
from lifehub.models.organization import Organization, OrganizationMember
from lifehub.models.role import UserRole
from lifehub.models.user import User
from lifehub.notifications import RecordingNotifier
from lifehub.tenancy.store import MemoryStore
from lifehub.tenancy.context import TenancyContext

PASSWORD = 'password123'

Account = namedtuple('Account', ['id', 'email'])


class TestConfig(Config):
    """Test configuration."""
    TESTING = True
    SECRET_KEY = 'test-secret-key'
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SQLALCHEMY_ENGINE_OPTIONS = {}
    WTF_CSRF_ENABLED = False
    ADMIN_SIGNUP_CODE = 'let-me-in'
    QUERY_CACHE_TTL = 0

    # Run Celery tasks in process
    CELERY_TASK_ALWAYS_EAGER = True
    CELERY_TASK_EAGER_PROPAGATES = True
    CELERY_BROKER_URL = 'memory://'
    CELERY_RESULT_BACKEND = 'cache+memory://'


@pytest.fixture(scope='function')
def app():
    """
    Create and configure Flask app for testing.

    The app context is not held open while the test runs, so every request
    made by a test client gets its own context (and its own flask.g).
    """
    app = create_app(TestConfig)

    with app.app_context():
        _db.create_all()

    yield app

    with app.app_context():
        _db.session.remove()
        _db.drop_all()
    query_cache.clear()


@pytest.fixture(scope='function')
def db(app):
    """Provide database inside an app context, for service-level tests."""
    with app.app_context():
        yield _db


@pytest.fixture(scope='function')
def client(app):
    return app.test_client()


@pytest.fixture(scope='function')
def client2(app):
    return app.test_client()


def create_user(app, email, roles=()):
    with app.app_context():
        user = User(email=email, is_active=True)
        user.set_password(PASSWORD)
        _db.session.add(user)
        _db.session.flush()
        for role in roles:
            _db.session.add(UserRole(user_id=user.id, role=role))
        _db.session.commit()
        return Account(user.id, user.email)


def create_organization(app, name, owner, members=()):
    with app.app_context():
        org = Organization(name=name, creator_id=owner.id)
        _db.session.add(org)
        _db.session.flush()
        _db.session.add(OrganizationMember(organization_id=org.id, user_id=owner.id, role='owner'))
        for member in members:
            _db.session.add(
                OrganizationMember(organization_id=org.id, user_id=member.id, role='member')
            )
        _db.session.commit()
        return org.id


def login(client, account):
    response = client.post('/login', json={'email': account.email, 'password': PASSWORD})
    assert response.status_code == 200
    return client


@pytest.fixture(scope='function')
def user1(app):
    return create_user(app, 'user1@example.com')


@pytest.fixture(scope='function')
def user2(app):
    return create_user(app, 'user2@example.com')


@pytest.fixture(scope='function')
def admin(app):
    return create_user(app, 'admin@example.com', roles=('admin',))


@pytest.fixture(scope='function')
def shared_org(app, user1, user2):
    """Organization owned by user1 with user2 as a member."""
    return create_organization(app, 'Household', user1, members=(user2,))


@pytest.fixture(scope='function')
def private_org(app, user2):
    """Organization user1 does not belong to."""
    return create_organization(app, 'Side Business', user2)


@pytest.fixture(scope='function')
def authenticated_client1(client, user1):
    return login(client, user1)


@pytest.fixture(scope='function')
def authenticated_client2(client2, user2):
    return login(client2, user2)


@pytest.fixture(scope='function')
def admin_client(client, admin):
    return login(client, admin)


@pytest.fixture(scope='function')
def make_service(db):
    """
    Build a service outside a request with a memory-backed tenancy.

    Usage:
        service = make_service(WalletService, user1)
        service = make_service(WalletService, user1, organization_id=org_id)
    """

    def factory(service_class, account, organization_id=None, store=None, notifier=None):
        tenancy = TenancyContext(store if store is not None else MemoryStore())
        if organization_id is not None:
            tenancy.set_current(db.session.get(Organization, organization_id))
        user = db.session.get(User, account.id) if account is not None else None
        return service_class(tenancy, user, query_cache, notifier or RecordingNotifier())

    return factory
