"""Transaction model."""

from lifehub.extensions import db
from lifehub.models.base import TenantScopedMixin, new_id, isoformat

TRANSACTION_TYPES = ('income', 'expense')


class Transaction(db.Model, TenantScopedMixin):
    """
    Income or expense booked against a wallet.

    Writes change the owning wallet's balance, so cached wallets are
    invalidated together with cached transactions.
    """

    __tablename__ = 'transactions'

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    reason = db.Column(db.String(255), nullable=False)
    type = db.Column(db.String(10), nullable=False)  # income, expense
    income = db.Column(db.Float, nullable=True)
    expense = db.Column(db.Float, nullable=True)
    date = db.Column(db.Date, nullable=False, index=True)

    wallet_id = db.Column(
        db.String(36),
        db.ForeignKey('wallets.id', ondelete='CASCADE'),
        nullable=False,
        index=True
    )
    category_id = db.Column(
        db.String(36),
        db.ForeignKey('categories.id', ondelete='SET NULL'),
        nullable=True,
        index=True
    )

    wallet = db.relationship('Wallet', back_populates='transactions')
    category = db.relationship('Category')

    def __repr__(self):
        return f'<Transaction {self.type} {self.reason}>'

    def to_dict(self):
        """Convert to dictionary representation."""
        return {
            'id': self.id,
            'reason': self.reason,
            'type': self.type,
            'income': self.income,
            'expense': self.expense,
            'date': isoformat(self.date),
            'wallet_id': self.wallet_id,
            'wallet': {'name': self.wallet.name} if self.wallet else None,
            'category_id': self.category_id,
            'category': {
                'name': self.category.name,
                'color': self.category.color
            } if self.category else None,
            'user_id': self.user_id,
            'organization_id': self.organization_id,
            'created_at': isoformat(self.created_at)
        }
