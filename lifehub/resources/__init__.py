"""Tenancy-scoped resource services."""

from lifehub.resources.base import (
    SERVICE_REGISTRY,
    ResourceService,
    ScopedResourceService,
    registered_mutation_kinds,
)
from lifehub.resources.organizations import OrganizationService
from lifehub.resources.wallets import WalletService
from lifehub.resources.categories import CategoryService
from lifehub.resources.transactions import TransactionService
from lifehub.resources.budgets import BudgetService
from lifehub.resources.loans import LoanService
from lifehub.resources.universes import UniverseService, UniverseShowService
from lifehub.resources.episodes import EpisodeStatusService, UniverseEpisodeService
from lifehub.resources.roles import RoleService
from lifehub.resources.transfers import TransferService
from lifehub.resources.credits import CreditService, CreditPaymentService
from lifehub.resources.user_shows import UserShowService

__all__ = [
    'SERVICE_REGISTRY', 'ResourceService', 'ScopedResourceService', 'registered_mutation_kinds',
    'OrganizationService', 'WalletService', 'CategoryService', 'TransactionService',
    'BudgetService', 'LoanService', 'UniverseService', 'UniverseShowService',
    'EpisodeStatusService', 'UniverseEpisodeService', 'RoleService',
    'TransferService', 'CreditService', 'CreditPaymentService', 'UserShowService',
]
