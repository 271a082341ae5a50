"""Query cache and invalidation graph tests."""

import pytest
from lifehub.cache import QueryCache
from lifehub.cache.invalidation import (
    CACHE_KINDS,
    INVALIDATION_GRAPH,
    dependents_of,
    validate_graph,
)
from lifehub.errors import ConfigurationError
from lifehub.resources import registered_mutation_kinds


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class TestQueryCache:

    def test_fetches_once_until_invalidated(self):
        cache = QueryCache()
        calls = []

        def fetch():
            calls.append(1)
            return ['wallet']

        assert cache.get_or_fetch(('wallets', 'u1', 'personal'), fetch) == ['wallet']
        assert cache.get_or_fetch(('wallets', 'u1', 'personal'), fetch) == ['wallet']
        assert len(calls) == 1

        cache.invalidate('wallets')
        cache.get_or_fetch(('wallets', 'u1', 'personal'), fetch)
        assert len(calls) == 2

    def test_invalidate_drops_kind_for_every_user_and_tenancy(self):
        cache = QueryCache()
        cache.get_or_fetch(('wallets', 'u1', 'personal'), lambda: [])
        cache.get_or_fetch(('wallets', 'u2', 'org-1'), lambda: [])
        cache.get_or_fetch(('categories', 'u1', 'personal'), lambda: [])

        assert cache.invalidate('wallets') == 2
        assert cache.kinds() == {'categories'}

    def test_failed_fetch_is_not_cached(self):
        cache = QueryCache()

        def failing():
            raise RuntimeError('down')

        with pytest.raises(RuntimeError):
            cache.get_or_fetch(('loans', 'u1', 'personal'), failing)
        assert cache.peek(('loans', 'u1', 'personal')) is None

    def test_entries_expire_after_ttl(self):
        clock = FakeClock()
        cache = QueryCache(ttl=60, clock=clock)
        cache.get_or_fetch(('budgets', 'u1', 'personal', 1, 2024), lambda: ['b'])

        clock.now = 30
        assert cache.peek(('budgets', 'u1', 'personal', 1, 2024)) == ['b']

        clock.now = 61
        assert cache.peek(('budgets', 'u1', 'personal', 1, 2024)) is None

    def test_zero_ttl_never_expires(self):
        clock = FakeClock()
        cache = QueryCache(ttl=0, clock=clock)
        cache.get_or_fetch(('universes', 'public'), lambda: ['u'])

        clock.now = 10 ** 6
        assert cache.peek(('universes', 'public')) == ['u']

    def test_invalidation_during_fetch_discards_result(self):
        cache = QueryCache()
        key = ('wallets', 'u1', 'personal')

        def fetch():
            # A write commits and invalidates while this read is in flight
            cache.invalidate('wallets')
            return ['stale']

        assert cache.get_or_fetch(key, fetch) == ['stale']
        assert cache.peek(key) is None
        assert cache.get_or_fetch(key, lambda: ['fresh']) == ['fresh']
        assert cache.peek(key) == ['fresh']

    def test_invalidation_of_other_kind_keeps_result(self):
        cache = QueryCache()
        key = ('wallets', 'u1', 'personal')

        def fetch():
            cache.invalidate('categories')
            return ['wallet']

        cache.get_or_fetch(key, fetch)
        assert cache.peek(key) == ['wallet']

    def test_invalidate_tenancy_drops_every_kind_of_that_tenancy(self):
        cache = QueryCache()
        cache.get_or_fetch(('wallets', 'u1', 'org-1'), lambda: [])
        cache.get_or_fetch(('categories', 'u2', 'org-1'), lambda: [])
        cache.get_or_fetch(('categories', 'u1', 'personal'), lambda: [])
        cache.get_or_fetch(('universes', 'public'), lambda: [])

        assert cache.invalidate_tenancy('org-1') == 2
        assert cache.peek(('categories', 'u1', 'personal')) == []
        assert cache.peek(('universes', 'public')) == []

    def test_tenancy_invalidation_during_fetch_discards_result(self):
        cache = QueryCache()
        key = ('categories', 'u2', 'org-1')

        def fetch():
            cache.invalidate_tenancy('org-1')
            return ['gone']

        cache.get_or_fetch(key, fetch)
        assert cache.peek(key) is None


class TestInvalidationGraph:

    def test_transactions_invalidate_wallets(self):
        assert set(dependents_of('transactions')) == {'transactions', 'wallets'}

    def test_categories_invalidate_only_categories(self):
        assert dependents_of('categories') == ('categories',)

    def test_episode_status_invalidates_universe_episodes(self):
        assert dependents_of('episode-status') == ('universe-episodes',)

    def test_transfers_invalidate_wallets(self):
        assert set(dependents_of('transfers')) == {'transfers', 'wallets'}

    def test_credits_and_payments_invalidate_each_other(self):
        assert set(dependents_of('credits')) == {'credits', 'credit-payments'}
        assert set(dependents_of('credit-payments')) == {'credit-payments', 'credits'}

    def test_episode_import_invalidates_universe_episodes(self):
        assert dependents_of('episodes') == ('universe-episodes',)

    def test_unknown_kind_is_a_configuration_error(self):
        with pytest.raises(ConfigurationError):
            dependents_of('spaceships')

    def test_declared_graph_is_valid(self):
        assert validate_graph(mutated_kinds=registered_mutation_kinds())

    def test_every_mutating_service_is_declared(self):
        assert registered_mutation_kinds() <= set(INVALIDATION_GRAPH)

    def test_unknown_target_is_rejected(self):
        with pytest.raises(ConfigurationError):
            validate_graph({'wallets': ('wallets', 'ledgers')}, CACHE_KINDS)

    def test_empty_target_list_is_rejected(self):
        with pytest.raises(ConfigurationError):
            validate_graph({'wallets': ()}, CACHE_KINDS)

    def test_undeclared_mutation_kind_is_rejected(self):
        with pytest.raises(ConfigurationError):
            validate_graph(INVALIDATION_GRAPH, CACHE_KINDS, mutated_kinds={'ledgers'})
