"""Error taxonomy shared by services, routes and background jobs."""

from flask import jsonify


class LifehubError(Exception):
    """Base class for errors that are reported to the user verbatim."""

    status_code = 500

    def __init__(self, message):
        super().__init__(message)
        self.message = message

    def to_dict(self):
        return {'error': self.message}


class AuthError(LifehubError):
    """No session, or an invalid one, on an operation that requires it."""

    status_code = 401


class ValidationError(LifehubError):
    """Malformed or incomplete payload caught before submission."""

    status_code = 400

    def __init__(self, message, field=None):
        super().__init__(message)
        self.field = field

    def to_dict(self):
        data = super().to_dict()
        if self.field:
            data['field'] = self.field
        return data


class AccessError(LifehubError):
    """Rejected by a permission or row-level policy."""

    status_code = 403


class NotFoundError(LifehubError):
    """Referenced id is absent from the active scope."""

    status_code = 404


class TransientNetworkError(LifehubError):
    """The database request failed to complete."""

    status_code = 503


class ConfigurationError(Exception):
    """Raised at startup when declared wiring is inconsistent."""


def register_error_handlers(app):
    """Render domain errors as JSON bodies with their status code."""

    @app.errorhandler(LifehubError)
    def handle_lifehub_error(error):
        if error.status_code >= 500:
            app.logger.error(f"{type(error).__name__}: {error.message}")
        return jsonify(error.to_dict()), error.status_code
