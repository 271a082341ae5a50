"""Current tenancy selection: personal mode or one organization."""

import json
import logging
from dataclasses import dataclass, asdict
from typing import Optional

logger = logging.getLogger(__name__)

PERSONAL_ID = 'personal'

# Store keys
ORGANIZATION_ID_KEY = 'current_organization_id'
ORGANIZATION_SNAPSHOT_KEY = 'current_organization'


class _Personal:
    """Sentinel for personal mode."""

    id = None

    def __repr__(self):
        return 'PERSONAL'

    def __bool__(self):
        return False


PERSONAL = _Personal()


@dataclass(frozen=True)
class OrganizationSnapshot:
    """Serializable copy of the selected organization."""

    id: str
    name: str
    description: Optional[str] = None
    creator_id: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data):
        if not isinstance(data, dict):
            raise TypeError('Organization snapshot must be an object')
        if not data.get('id') or not data.get('name'):
            raise ValueError('Organization snapshot requires id and name')
        fields = cls.__dataclass_fields__
        return cls(**{key: value for key, value in data.items() if key in fields})

    @classmethod
    def coerce(cls, organization):
        """Build a snapshot from a model, a dict or another snapshot."""
        if isinstance(organization, cls):
            return organization
        if isinstance(organization, dict):
            return cls.from_dict(organization)
        return cls.from_dict(organization.to_dict())

    def to_dict(self):
        return asdict(self)


class TenancyContext:
    """
    The tenancy every scoped query and write is made against.

    The selection is restored from the store on construction and written
    back on every change. Restoring never consults the database; a stale
    organization is rejected later by the membership check of the first
    scoped query.

    Usage:
        tenancy = TenancyContext(SessionStore())
        tenancy.set_current(organization)
        Wallet.query.filter(tenancy.scope_criteria(Wallet))
    """

    def __init__(self, store):
        self._store = store
        self._current = PERSONAL
        self._restore()

    def _restore(self):
        marker = self._store.get(ORGANIZATION_ID_KEY)
        if not marker or marker == PERSONAL_ID:
            self._current = PERSONAL
            return

        raw = self._store.get(ORGANIZATION_SNAPSHOT_KEY)
        try:
            snapshot = OrganizationSnapshot.from_dict(json.loads(raw))
            if snapshot.id != marker:
                raise ValueError(f"Snapshot id {snapshot.id} does not match marker {marker}")
        except (TypeError, ValueError) as e:
            logger.warning(f"Discarding persisted organization selection: {e}")
            self._store.remove(ORGANIZATION_SNAPSHOT_KEY)
            self._store.remove(ORGANIZATION_ID_KEY)
            self._current = PERSONAL
            return

        self._current = snapshot

    def get_current(self):
        """Return PERSONAL or the selected OrganizationSnapshot."""
        return self._current

    def set_current(self, organization):
        """
        Select an organization, or personal mode when given None.

        Args:
            organization: None, PERSONAL, an Organization model, a dict or
                an OrganizationSnapshot
        """
        if organization is None or organization is PERSONAL:
            self._current = PERSONAL
            self._store.set(ORGANIZATION_ID_KEY, PERSONAL_ID)
            self._store.remove(ORGANIZATION_SNAPSHOT_KEY)
            return self._current

        snapshot = OrganizationSnapshot.coerce(organization)
        self._current = snapshot
        self._store.set(ORGANIZATION_ID_KEY, snapshot.id)
        self._store.set(ORGANIZATION_SNAPSHOT_KEY, json.dumps(snapshot.to_dict()))
        return self._current

    @property
    def is_personal_mode(self):
        return self._current is PERSONAL

    @property
    def organization_id(self):
        """Value written to organization_id on create: None in personal mode."""
        return self._current.id

    @property
    def tenancy_id(self):
        """Cache-key component identifying the tenancy."""
        return PERSONAL_ID if self.is_personal_mode else self._current.id

    def scope_criteria(self, model):
        """Exactly one partition filter for the model's organization_id."""
        if self.is_personal_mode:
            return model.organization_id.is_(None)
        return model.organization_id == self._current.id

    def to_dict(self):
        return {
            'tenancy_id': self.tenancy_id,
            'mode': 'personal' if self.is_personal_mode else 'organization',
            'organization': None if self.is_personal_mode else self._current.to_dict()
        }

    def __repr__(self):
        return f'<TenancyContext {self.tenancy_id}>'


def current_tenancy():
    """Tenancy of the current request, restored from the session once."""
    from flask import g
    from lifehub.tenancy.store import SessionStore

    if 'tenancy' not in g:
        g.tenancy = TenancyContext(SessionStore())
    return g.tenancy
