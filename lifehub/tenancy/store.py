"""Key-value adapters for per-client persisted state."""

from abc import ABC, abstractmethod


class StateStore(ABC):
    """
    Minimal key-value interface for state that survives between requests.

    Values are strings; callers serialize anything richer themselves.
    """

    @abstractmethod
    def get(self, key):
        """Return the stored value or None."""

    @abstractmethod
    def set(self, key, value):
        """Store value under key."""

    @abstractmethod
    def remove(self, key):
        """Delete key if present."""


class MemoryStore(StateStore):
    """Dictionary-backed store for tests and scripts."""

    def __init__(self, initial=None):
        self.data = dict(initial or {})

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value):
        self.data[key] = value

    def remove(self, key):
        self.data.pop(key, None)

    def __contains__(self, key):
        return key in self.data


class SessionStore(StateStore):
    """Store backed by the Flask session cookie of the current client."""

    def __init__(self, session=None):
        if session is None:
            from flask import session
        self.session = session

    def get(self, key):
        return self.session.get(key)

    def set(self, key, value):
        self.session[key] = value

    def remove(self, key):
        self.session.pop(key, None)

    def __contains__(self, key):
        return key in self.session
