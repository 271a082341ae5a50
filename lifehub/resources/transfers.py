"""Transfer service; writes move the balance of both wallets."""

from lifehub.errors import ValidationError
from lifehub.models.transfer import Transfer
from lifehub.models.wallet import Wallet
from lifehub.resources.base import ScopedResourceService

INSUFFICIENT_BALANCE = 'Insufficient balance in source wallet'


class TransferService(ScopedResourceService):
    """
    Wallet-to-wallet transfers of the acting user.

    Both wallets are recalculated after every write; the source wallet must
    not go below zero because of the transfer.
    """

    kind = 'transfers'
    label = 'Transfer'
    model = Transfer
    writable_fields = ('from_wallet_id', 'to_wallet_id', 'amount', 'date', 'description')
    required_fields = ('from_wallet_id', 'to_wallet_id', 'amount', 'date')

    def ordering(self):
        return (Transfer.date.desc(), Transfer.created_at.desc())

    def validate(self, data, partial):
        if 'amount' in data and (data['amount'] is None or data['amount'] <= 0):
            raise ValidationError('amount must be greater than zero', field='amount')

    def before_create(self, record):
        record.status = 'completed'
        self._check_wallets(record)

    def before_update(self, record, data):
        self._check_wallets(record)

    def snapshot_for_update(self, record):
        return {record.from_wallet_id, record.to_wallet_id}

    def after_write(self, record, previous=None):
        balances = self._recalculate(
            {record.from_wallet_id, record.to_wallet_id} | (previous or set())
        )
        if balances[record.from_wallet_id] < 0:
            raise ValidationError(INSUFFICIENT_BALANCE, field='amount')

    def after_delete(self, previous):
        self._recalculate(previous)

    def _check_wallets(self, record):
        if record.from_wallet_id == record.to_wallet_id:
            raise ValidationError('Choose two different wallets', field='to_wallet_id')
        for field in ('from_wallet_id', 'to_wallet_id'):
            wallet = Wallet.scoped_query(self.tenancy, self.user_id).filter(
                Wallet.id == getattr(record, field)
            ).first()
            if wallet is None:
                raise ValidationError('Wallet not found', field=field)

    def _recalculate(self, wallet_ids):
        """Recalculate the wallets and return their new balances by id."""
        balances = {}
        for wallet in Wallet.query.filter(Wallet.id.in_(wallet_ids - {None})).all():
            balances[wallet.id] = wallet.recalculate_balance()
        return balances
