"""Process-local cache of fetched resource collections."""

import logging
import threading
import time

logger = logging.getLogger(__name__)


class QueryCache:
    """
    Caches query results under composite keys.

    Keys are tuples of ``(kind, user_id, tenancy_id, *params)``. Invalidation
    works on the kind alone, so invalidating ``wallets`` drops the cached
    wallets of every user and every tenancy.

    Every invalidation bumps a generation counter. A fetch that was started
    before an invalidation of its kind (or of its tenancy) returns its result
    to the caller but does not store it.

    Usage:
        wallets = query_cache.get_or_fetch(
            ('wallets', user.id, tenancy.tenancy_id),
            lambda: Wallet.query.filter(...).all()
        )
        query_cache.invalidate('wallets')
    """

    def __init__(self, app=None, ttl=60, clock=time.monotonic):
        self.ttl = ttl
        self._clock = clock
        self._entries = {}
        self._kind_generations = {}
        self._tenancy_generations = {}
        self._epoch = 0
        self._lock = threading.Lock()
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        self.ttl = app.config.get('QUERY_CACHE_TTL', self.ttl)
        self.clear()
        app.extensions['query_cache'] = self

    def get_or_fetch(self, key, fetch):
        """
        Return the cached value for key, calling fetch() on a miss.

        A fetch that raises leaves the cache untouched.
        """
        key = tuple(key)
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and not self._expired(entry):
                return entry[1]
            generation = self._generation(key)

        value = fetch()

        with self._lock:
            if self._generation(key) == generation:
                self._entries[key] = (self._clock(), value)
            else:
                logger.debug(f"Discarded result for {key[0]} invalidated during fetch")
        return value

    def peek(self, key):
        """Return the cached value without fetching, or None."""
        with self._lock:
            entry = self._entries.get(tuple(key))
            if entry is None or self._expired(entry):
                return None
            return entry[1]

    def invalidate(self, kind):
        """Drop every entry of the given kind regardless of user or tenancy."""
        with self._lock:
            self._kind_generations[kind] = self._kind_generations.get(kind, 0) + 1
            stale = [key for key in self._entries if key[0] == kind]
            for key in stale:
                del self._entries[key]
        logger.debug(f"Invalidated {len(stale)} cached '{kind}' entries")
        return len(stale)

    def invalidate_many(self, kinds):
        return sum(self.invalidate(kind) for kind in kinds)

    def invalidate_tenancy(self, tenancy_id):
        """Drop every entry fetched under tenancy_id, whatever its kind."""
        with self._lock:
            self._tenancy_generations[tenancy_id] = self._tenancy_generations.get(tenancy_id, 0) + 1
            stale = [key for key in self._entries if len(key) > 2 and key[2] == tenancy_id]
            for key in stale:
                del self._entries[key]
        logger.debug(f"Invalidated {len(stale)} cached entries of tenancy {tenancy_id}")
        return len(stale)

    def kinds(self):
        with self._lock:
            return {key[0] for key in self._entries}

    def clear(self):
        with self._lock:
            self._epoch += 1
            self._entries.clear()

    def _generation(self, key):
        tenancy_id = key[2] if len(key) > 2 else None
        return (
            self._epoch,
            self._kind_generations.get(key[0], 0),
            self._tenancy_generations.get(tenancy_id, 0),
        )

    def _expired(self, entry):
        if not self.ttl:
            return False
        return self._clock() - entry[0] > self.ttl
