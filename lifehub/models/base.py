"""Base model classes with tenancy scoping."""

import uuid
from datetime import datetime, timezone
from sqlalchemy.orm import declared_attr
from lifehub.extensions import db
from lifehub.errors import NotFoundError


def new_id():
    """Server-assigned primary key."""
    return str(uuid.uuid4())


def utcnow():
    return datetime.now(timezone.utc).replace(tzinfo=None)


def isoformat(value):
    return value.isoformat() if value else None


class TimestampMixin:
    """Server-assigned audit fields."""

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)


class TenantScopedMixin(TimestampMixin):
    """
    Mixin for resources partitioned by tenancy.

    A row created in personal mode has organization_id NULL; a row created
    while an organization is selected carries that organization's id. The
    partition is fixed at creation time.

    Usage:
        wallets = Wallet.scoped_query(tenancy, current_user.id).all()
        wallet = Wallet.get_for_scope(wallet_id, tenancy, current_user.id)
    """

    # Fields the client may never set on create or update
    PROTECTED_FIELDS = frozenset({'id', 'user_id', 'organization_id', 'created_at', 'updated_at'})

    # Rows stay visible only to their owner even inside an organization
    owner_scoped = False

    @declared_attr
    def organization_id(cls):
        return db.Column(
            db.String(36),
            db.ForeignKey('organizations.id', ondelete='CASCADE'),
            nullable=True,
            index=True
        )

    @declared_attr
    def user_id(cls):
        return db.Column(
            db.String(36),
            db.ForeignKey('users.id', ondelete='CASCADE'),
            nullable=False,
            index=True
        )

    @classmethod
    def scoped_query(cls, tenancy, user_id):
        """
        Query filtered to the active tenancy.

        Personal mode always restricts to the owner, since personal rows of
        other users share the same NULL partition.
        """
        query = cls.query.filter(tenancy.scope_criteria(cls))
        if tenancy.is_personal_mode or cls.owner_scoped:
            query = query.filter(cls.user_id == user_id)
        return query

    @classmethod
    def get_for_scope(cls, id, tenancy, user_id):
        """
        Get record by ID within the active tenancy.

        Raises:
            NotFoundError: If the row is absent or belongs to another scope
        """
        record = cls.scoped_query(tenancy, user_id).filter(cls.id == id).first()
        if not record:
            raise NotFoundError(f"{cls.__name__} not found")
        return record
