"""Tenancy selection and its persistence adapters."""

from lifehub.tenancy.context import (
    PERSONAL,
    PERSONAL_ID,
    ORGANIZATION_ID_KEY,
    ORGANIZATION_SNAPSHOT_KEY,
    OrganizationSnapshot,
    TenancyContext,
    current_tenancy,
)
from lifehub.tenancy.store import StateStore, MemoryStore, SessionStore

__all__ = [
    'PERSONAL', 'PERSONAL_ID', 'ORGANIZATION_ID_KEY', 'ORGANIZATION_SNAPSHOT_KEY',
    'OrganizationSnapshot', 'TenancyContext', 'current_tenancy',
    'StateStore', 'MemoryStore', 'SessionStore',
]
