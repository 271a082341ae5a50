"""Database models package."""

from lifehub.models.organization import Organization, OrganizationMember
from lifehub.models.user import User
from lifehub.models.role import UserRole
from lifehub.models.wallet import Wallet
from lifehub.models.category import Category
from lifehub.models.transaction import Transaction
from lifehub.models.budget import Budget
from lifehub.models.loan import Loan
from lifehub.models.universe import Universe
from lifehub.models.show import Show, Episode, ShowUniverse
from lifehub.models.episode_status import UserEpisodeStatus
from lifehub.models.transfer import Transfer
from lifehub.models.credit import Credit, CreditPayment
from lifehub.models.tracking import UserShowTracking

__all__ = [
    'Organization', 'OrganizationMember', 'User', 'UserRole',
    'Wallet', 'Category', 'Transaction', 'Budget', 'Loan',
    'Universe', 'Show', 'Episode', 'ShowUniverse', 'UserEpisodeStatus',
    'Transfer', 'Credit', 'CreditPayment', 'UserShowTracking',
]
