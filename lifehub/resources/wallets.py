"""Wallet service."""

from flask import current_app
from lifehub.currency import DEFAULT_CURRENCY, get_currency
from lifehub.errors import ValidationError
from lifehub.models.transfer import Transfer
from lifehub.models.wallet import Wallet
from lifehub.resources.base import ScopedResourceService


class WalletService(ScopedResourceService):
    """Wallets of the acting user in the active tenancy."""

    kind = 'wallets'
    label = 'Wallet'
    model = Wallet
    writable_fields = ('name', 'currency', 'initial_balance')
    required_fields = ('name',)

    def validate(self, data, partial):
        code = data.get('currency')
        if code is not None:
            currency = get_currency(code)
            if currency is None:
                raise ValidationError(f"Unsupported currency '{code}'", field='currency')
            data['currency'] = currency.code

    def before_create(self, record):
        if not record.currency:
            record.currency = current_app.config.get('DEFAULT_CURRENCY', DEFAULT_CURRENCY.code)
        record.initial_balance = record.initial_balance or 0.0
        record.balance = record.initial_balance

    def after_write(self, record, previous=None):
        record.recalculate_balance()

    def snapshot_for_update(self, record):
        """Wallets on the other side of this wallet's transfers."""
        rows = Transfer.query.with_entities(Transfer.from_wallet_id, Transfer.to_wallet_id).filter(
            (Transfer.from_wallet_id == record.id) | (Transfer.to_wallet_id == record.id)
        ).all()
        return {row.from_wallet_id for row in rows} | {row.to_wallet_id for row in rows}

    def after_delete(self, previous):
        # Transfers of the deleted wallet went with it in the database cascade
        for wallet in Wallet.query.filter(Wallet.id.in_(previous)).all():
            wallet.recalculate_balance()
