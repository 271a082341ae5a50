"""Declared dependencies between mutated resources and cached collections."""

from lifehub.errors import ConfigurationError

# Collections that can be cached.
CACHE_KINDS = frozenset({
    'organizations',
    'wallets',
    'categories',
    'transactions',
    'budgets',
    'loans',
    'universes',
    'universe-shows',
    'universe-episodes',
    'transfers',
    'credits',
    'credit-payments',
    'user-shows',
})

# Mutated resource kind -> cached kinds to drop after a successful write.
# Wallet balances are derived from transactions and transfers, and a
# credit's remaining amount from its payments, hence the extra edges.
INVALIDATION_GRAPH = {
    'organizations': ('organizations',),
    'wallets': ('wallets',),
    'categories': ('categories',),
    'transactions': ('transactions', 'wallets'),
    'budgets': ('budgets',),
    'loans': ('loans',),
    'universes': ('universes',),
    'universe-shows': ('universe-shows', 'universe-episodes'),
    'episode-status': ('universe-episodes',),
    'episodes': ('universe-episodes',),
    'transfers': ('transfers', 'wallets'),
    'credits': ('credits', 'credit-payments'),
    'credit-payments': ('credit-payments', 'credits'),
    'user-shows': ('user-shows',),
}


def dependents_of(kind, graph=None):
    """Return the cache kinds invalidated by a mutation of kind."""
    graph = INVALIDATION_GRAPH if graph is None else graph
    try:
        return graph[kind]
    except KeyError:
        raise ConfigurationError(f"No invalidation declared for '{kind}'") from None


def validate_graph(graph=None, cache_kinds=None, mutated_kinds=()):
    """
    Check the graph against the known cache kinds.

    Raises:
        ConfigurationError: If an edge targets an unknown cache kind, or a
            mutating service declares a kind that has no entry in the graph.
    """
    graph = INVALIDATION_GRAPH if graph is None else graph
    cache_kinds = CACHE_KINDS if cache_kinds is None else cache_kinds

    for source, targets in graph.items():
        if not targets:
            raise ConfigurationError(f"'{source}' invalidates nothing")
        unknown = set(targets) - set(cache_kinds)
        if unknown:
            raise ConfigurationError(
                f"'{source}' invalidates unknown cache kinds: {sorted(unknown)}"
            )

    missing = set(mutated_kinds) - set(graph)
    if missing:
        raise ConfigurationError(
            f"Services mutate kinds with no declared invalidation: {sorted(missing)}"
        )
    return True
