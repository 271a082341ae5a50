"""Transaction service; writes also move wallet balances."""

from lifehub.errors import ValidationError
from lifehub.models.category import Category
from lifehub.models.transaction import Transaction, TRANSACTION_TYPES
from lifehub.models.wallet import Wallet
from lifehub.resources.base import ScopedResourceService


class TransactionService(ScopedResourceService):
    """
    Income and expense records.

    Every successful write recalculates the balance of each wallet it
    touched, which is why the invalidation graph drops cached wallets too.
    """

    kind = 'transactions'
    label = 'Transaction'
    model = Transaction
    writable_fields = ('reason', 'type', 'income', 'expense', 'wallet_id', 'category_id', 'date')
    required_fields = ('reason', 'type', 'wallet_id', 'date')

    def ordering(self):
        return (Transaction.date.desc(), Transaction.created_at.desc())

    def fetch_query(self, wallet_id=None):
        query = super().fetch_query()
        if wallet_id:
            query = query.filter(Transaction.wallet_id == wallet_id)
        return query

    def list_for_wallet(self, wallet_id):
        return self.list(wallet_id)

    def validate(self, data, partial):
        if 'type' in data and data['type'] not in TRANSACTION_TYPES:
            raise ValidationError(
                f"type must be one of: {', '.join(TRANSACTION_TYPES)}", field='type'
            )
        for field in ('income', 'expense'):
            if data.get(field) is not None and data[field] < 0:
                raise ValidationError(f"{field} cannot be negative", field=field)
        if data.get('category_id') == '':
            data['category_id'] = None

    def before_create(self, record):
        self._check_references(record)
        self._apply_type(record)

    def before_update(self, record, data):
        self._check_references(record)
        self._apply_type(record)

    def snapshot_for_update(self, record):
        return record.wallet_id

    def after_write(self, record, previous=None):
        wallet_ids = {record.wallet_id, previous} - {None}
        self._recalculate(wallet_ids)

    def after_delete(self, previous):
        self._recalculate({previous} - {None})

    def _apply_type(self, record):
        """Keep only the amount column matching the type; it must be set."""
        if record.type == 'income':
            record.expense = None
            if not record.income:
                raise ValidationError('income is required for income transactions', field='income')
        else:
            record.income = None
            if not record.expense:
                raise ValidationError('expense is required for expense transactions', field='expense')

    def _check_references(self, record):
        # Referenced rows must be visible in the same scope as the transaction
        wallet = Wallet.scoped_query(self.tenancy, self.user_id).filter(
            Wallet.id == record.wallet_id
        ).first()
        if wallet is None:
            raise ValidationError('Wallet not found', field='wallet_id')
        if record.category_id:
            category = Category.scoped_query(self.tenancy, self.user_id).filter(
                Category.id == record.category_id
            ).first()
            if category is None:
                raise ValidationError('Category not found', field='category_id')

    def _recalculate(self, wallet_ids):
        for wallet in Wallet.query.filter(Wallet.id.in_(wallet_ids)).all():
            wallet.recalculate_balance()
