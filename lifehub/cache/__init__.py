"""Query cache and invalidation graph."""

from lifehub.cache.query_cache import QueryCache
from lifehub.cache.invalidation import (
    CACHE_KINDS,
    INVALIDATION_GRAPH,
    dependents_of,
    validate_graph,
)

__all__ = ['QueryCache', 'CACHE_KINDS', 'INVALIDATION_GRAPH', 'dependents_of', 'validate_graph']
