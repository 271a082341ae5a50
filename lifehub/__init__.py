"""Flask application factory."""

import logging
from flask import Flask, has_app_context
from sqlalchemy import event
from sqlalchemy.engine import Engine
from lifehub.config import Config
from lifehub.errors import register_error_handlers
from lifehub.extensions import db, login_manager, celery, query_cache


@event.listens_for(Engine, 'connect')
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE CASCADE unless foreign keys are switched on
    if type(dbapi_connection).__module__.startswith('sqlite3'):
        cursor = dbapi_connection.cursor()
        cursor.execute('PRAGMA foreign_keys=ON')
        cursor.close()


def create_app(config_class=Config):
    """Create and configure Flask application."""
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))
    logging.getLogger('lifehub').setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    # Initialize extensions
    db.init_app(app)
    login_manager.init_app(app)
    query_cache.init_app(app)
    register_error_handlers(app)

    # Configure Celery
    celery.conf.update(
        broker_url=app.config['CELERY_BROKER_URL'],
        result_backend=app.config['CELERY_RESULT_BACKEND'],
        task_serializer=app.config['CELERY_TASK_SERIALIZER'],
        result_serializer=app.config['CELERY_RESULT_SERIALIZER'],
        accept_content=app.config['CELERY_ACCEPT_CONTENT'],
        timezone=app.config['CELERY_TIMEZONE'],
        enable_utc=app.config['CELERY_ENABLE_UTC'],
        task_always_eager=app.config['CELERY_TASK_ALWAYS_EAGER'],
        task_eager_propagates=app.config['CELERY_TASK_EAGER_PROPAGATES'],
    )

    # Celery context task to work with Flask app context; eager tasks run
    # inside the calling request's context
    class ContextTask(celery.Task):
        def __call__(self, *args, **kwargs):
            if has_app_context():
                return self.run(*args, **kwargs)
            with app.app_context():
                return self.run(*args, **kwargs)

    celery.Task = ContextTask

    # Services register their mutation kinds on import
    from lifehub.cache.invalidation import validate_graph
    from lifehub.resources import registered_mutation_kinds

    validate_graph(mutated_kinds=registered_mutation_kinds())

    # Register blueprints
    from lifehub.auth.routes import auth_bp
    from lifehub.preferences.routes import preferences_bp
    from lifehub.organizations.routes import organizations_bp
    from lifehub.finance.routes import finance_bp
    from lifehub.finance.pages import finance_pages_bp
    from lifehub.tv_shows.routes import tv_shows_bp
    from lifehub.tv_shows.pages import tv_shows_pages_bp
    from lifehub.admin.routes import admin_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(preferences_bp)
    app.register_blueprint(organizations_bp)
    app.register_blueprint(finance_bp)
    app.register_blueprint(finance_pages_bp)
    app.register_blueprint(tv_shows_bp)
    app.register_blueprint(tv_shows_pages_bp)
    app.register_blueprint(admin_bp)

    from lifehub.cli import register_commands
    register_commands(app)

    # Health check endpoint
    @app.route('/health')
    def health():
        return {'status': 'ok'}, 200

    return app
