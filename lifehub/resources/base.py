"""Shared fetch/create/update/delete logic for tenancy-scoped resources."""

import logging
from datetime import date, datetime
from flask_login import current_user
from sqlalchemy.exc import IntegrityError, OperationalError
from lifehub.extensions import db, query_cache
from lifehub.cache.invalidation import dependents_of
from lifehub.errors import (
    LifehubError,
    AuthError,
    AccessError,
    TransientNetworkError,
    ValidationError,
)
from lifehub.models.organization import OrganizationMember
from lifehub.notifications import FlashNotifier, RecordingNotifier
from lifehub.tenancy.context import current_tenancy

logger = logging.getLogger(__name__)

# mutation kind -> service class, checked against the invalidation graph at startup
SERVICE_REGISTRY = {}


def registered_mutation_kinds():
    return set(SERVICE_REGISTRY)


class ResourceService:
    """
    Base class binding one acting user and one tenancy to a resource.

    Collaborators are injected so the same service runs inside a request
    (session-backed tenancy, flash notifications) or in tests and jobs
    (memory-backed tenancy, recording notifier).

    Subclasses set:
        kind: cache kind of the fetched collection
        mutation_kind: key in the invalidation graph (defaults to kind)
        label: human name used in notifications
    """

    kind = None
    mutation_kind = None
    label = 'Resource'
    read_only = False

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        mutation_kind = cls.__dict__.get('mutation_kind') or cls.__dict__.get('kind')
        if mutation_kind and not cls.__dict__.get('read_only', False):
            SERVICE_REGISTRY[mutation_kind] = cls

    def __init__(self, tenancy, user, cache=None, notifier=None):
        self.tenancy = tenancy
        self.user = user
        self.cache = query_cache if cache is None else cache
        self.notifier = notifier or RecordingNotifier()

    @classmethod
    def for_request(cls, **kwargs):
        """Build the service for the current request's user and tenancy."""
        return cls(
            current_tenancy(),
            current_user._get_current_object(),
            query_cache,
            FlashNotifier(),
            **kwargs
        )

    @property
    def is_authenticated(self):
        return self.user is not None and self.user.is_authenticated

    @property
    def user_id(self):
        return self.user.id if self.is_authenticated else None

    def require_user(self):
        if not self.is_authenticated:
            raise ValidationError('User not authenticated')

    def check_access(self):
        """
        Row-level policy for organization tenancy: the actor must be a member.

        Raises:
            AccessError: If the selected organization does not list the user
        """
        if self.tenancy.is_personal_mode:
            return None
        organization_id = self.tenancy.organization_id
        member = OrganizationMember.query.filter_by(
            organization_id=organization_id,
            user_id=self.user_id
        ).first()
        if member is None:
            logger.warning(
                f"SECURITY: user {self.user_id} is not a member of organization {organization_id}"
            )
            raise AccessError('You do not have access to this organization')
        return member

    def cache_key(self, *params):
        return (self.kind, self.user_id, self.tenancy.tenancy_id) + tuple(params)

    def cached(self, params, fetch):
        """Serve a collection through the query cache."""
        return self.cache.get_or_fetch(self.cache_key(*params), lambda: self.run_query(fetch))

    def run_query(self, fetch):
        try:
            return fetch()
        except OperationalError as e:
            db.session.rollback()
            logger.error(f"Query for {self.kind} failed: {e}")
            raise TransientNetworkError(f"Could not load {self.kind}. Please try again.") from e

    def invalidate(self):
        targets = dependents_of(self.mutation_kind or self.kind)
        self.cache.invalidate_many(targets)
        logger.debug(f"{self.label} mutation invalidated {targets}")

    def mutate(self, action, operation):
        """
        Run a write, commit it, then invalidate and notify.

        A failed write is rolled back, reported once and re-raised; the cache
        is left untouched. Field-level validation errors are returned inline
        and are not sent to the notification surface.
        """
        try:
            result = operation()
            db.session.commit()
        except IntegrityError as e:
            db.session.rollback()
            error = ValidationError(self.integrity_message(e))
            self.report_failure(action, error)
            raise error from e
        except OperationalError as e:
            db.session.rollback()
            error = TransientNetworkError(f"Could not {action} {self.label.lower()}. Please try again.")
            self.report_failure(action, error)
            raise error from e
        except LifehubError as e:
            db.session.rollback()
            if not getattr(e, 'field', None):
                self.report_failure(action, e)
            raise

        self.invalidate()
        self.notifier.success(f"{self.label} {action}d successfully")
        return result

    def report_failure(self, action, error):
        logger.error(f"{self.label} {action} failed for user {self.user_id}: {error.message}")
        self.notifier.error(f"Error {action[:-1]}ing {self.label.lower()}", error.message)

    def integrity_message(self, error):
        return f"{self.label} conflicts with an existing record"


class ScopedResourceService(ResourceService):
    """
    Resource partitioned by organization_id.

    Fetches filter by the active tenancy; creates inject user_id and
    organization_id; updates and deletes only reach rows inside the active
    scope.
    """

    model = None
    writable_fields = ()
    required_fields = ()

    def ordering(self):
        return (self.model.created_at.desc(),)

    def fetch_query(self, *params):
        return self.model.scoped_query(self.tenancy, self.user_id)

    def list(self, *params):
        """
        Return the scoped collection as dictionaries.

        Unauthenticated callers get an empty list rather than an error.
        Membership is checked on every call, cached or not.
        """
        if not self.is_authenticated:
            return []
        self.run_query(self.check_access)

        def fetch():
            query = self.fetch_query(*params).order_by(*self.ordering())
            return [record.to_dict() for record in query.all()]

        return self.cached(params, fetch)

    def get(self, id):
        """Return one record of the active scope or raise NotFoundError."""
        if not self.is_authenticated:
            raise AuthError('User not authenticated')

        def fetch():
            self.check_access()
            return self.model.get_for_scope(id, self.tenancy, self.user_id).to_dict()

        return self.run_query(fetch)

    def create(self, payload):
        def operation():
            self.require_user()
            data = self.clean(payload, partial=False)
            self.check_access()
            record = self.model(
                **data,
                user_id=self.user_id,
                organization_id=self.tenancy.organization_id
            )
            self.before_create(record)
            db.session.add(record)
            db.session.flush()
            self.after_write(record)
            return record.to_dict()

        return self.mutate('create', operation)

    def update(self, id, attributes):
        def operation():
            self.require_user()
            data = self.clean(attributes, partial=True)
            self.check_access()
            record = self.model.get_for_scope(id, self.tenancy, self.user_id)
            self.check_owner(record)
            previous = self.snapshot_for_update(record)
            for key, value in data.items():
                setattr(record, key, value)
            self.before_update(record, data)
            db.session.flush()
            self.after_write(record, previous)
            return record.to_dict()

        return self.mutate('update', operation)

    def delete(self, id):
        def operation():
            self.require_user()
            self.check_access()
            record = self.model.get_for_scope(id, self.tenancy, self.user_id)
            self.check_owner(record)
            previous = self.snapshot_for_update(record)
            db.session.delete(record)
            db.session.flush()
            self.after_delete(previous)
            return None

        return self.mutate('delete', operation)

    def check_owner(self, record):
        """Inside a shared organization only the creator or an owner may modify a row."""
        if record.user_id == self.user_id:
            return
        member = self.check_access()
        if member is None or member.role != 'owner':
            raise AccessError(f"Only the creator can modify this {self.label.lower()}")

    def clean(self, payload, partial):
        """
        Validate and coerce a client payload.

        Identity and audit fields are dropped on create; on update an attempt
        to move the row to another owner or tenancy is rejected.
        """
        if not isinstance(payload, dict):
            raise ValidationError('Request body must be a JSON object')

        data = {}
        for key, value in payload.items():
            if key in self.model.PROTECTED_FIELDS:
                if partial and key in ('id', 'organization_id', 'user_id'):
                    raise ValidationError(f"{key} cannot be changed", field=key)
                continue
            if key not in self.writable_fields:
                raise ValidationError(f"Unknown field '{key}'", field=key)
            data[key] = self.coerce(key, value)

        if not partial:
            for field in self.required_fields:
                if data.get(field) in (None, ''):
                    raise ValidationError(f"{field} is required", field=field)

        self.validate(data, partial)
        return data

    def coerce(self, key, value):
        if value is None:
            return None
        column = self.model.__table__.columns[key]
        try:
            if isinstance(column.type, db.DateTime):
                return value if isinstance(value, datetime) else datetime.fromisoformat(value)
            if isinstance(column.type, db.Date):
                return value if isinstance(value, date) else date.fromisoformat(value)
            if isinstance(column.type, db.Float):
                return float(value)
            if isinstance(column.type, db.Integer):
                return int(value)
            if isinstance(column.type, db.Boolean):
                if not isinstance(value, bool):
                    raise ValueError(value)
                return value
            if isinstance(column.type, db.String):
                if not isinstance(value, str):
                    raise ValueError(value)
                return value
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid value for {key}", field=key) from None
        return value

    # Hooks

    def validate(self, data, partial):
        pass

    def before_create(self, record):
        pass

    def before_update(self, record, data):
        pass

    def snapshot_for_update(self, record):
        return None

    def after_write(self, record, previous=None):
        pass

    def after_delete(self, previous):
        pass
