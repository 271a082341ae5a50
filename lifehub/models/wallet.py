"""Wallet model."""

from lifehub.extensions import db
from lifehub.models.base import TenantScopedMixin, new_id, isoformat


class Wallet(db.Model, TenantScopedMixin):
    """
    A money container owned by one user.

    Wallets stay private to their owner even inside an organization. The
    balance is derived from the wallet's transactions and transfers and is
    recalculated on every write of either.
    """

    __tablename__ = 'wallets'

    owner_scoped = True

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(255), nullable=False)
    currency = db.Column(db.String(3), nullable=False, default='NPR')
    initial_balance = db.Column(db.Float, nullable=False, default=0.0)
    balance = db.Column(db.Float, nullable=False, default=0.0)

    transactions = db.relationship(
        'Transaction',
        back_populates='wallet',
        lazy='dynamic',
        cascade='all, delete-orphan'
    )

    def __repr__(self):
        return f'<Wallet {self.name}>'

    def recalculate_balance(self):
        """
        Set balance to initial_balance plus income minus expense, plus
        transfers in minus transfers out.
        """
        from lifehub.models.transaction import Transaction
        from lifehub.models.transfer import Transfer

        income, expense = db.session.query(
            db.func.coalesce(db.func.sum(Transaction.income), 0.0),
            db.func.coalesce(db.func.sum(Transaction.expense), 0.0),
        ).filter(Transaction.wallet_id == self.id).one()
        transferred_in = db.session.query(
            db.func.coalesce(db.func.sum(Transfer.amount), 0.0)
        ).filter(Transfer.to_wallet_id == self.id).scalar()
        transferred_out = db.session.query(
            db.func.coalesce(db.func.sum(Transfer.amount), 0.0)
        ).filter(Transfer.from_wallet_id == self.id).scalar()
        self.balance = (
            (self.initial_balance or 0.0) + income - expense + transferred_in - transferred_out
        )
        return self.balance

    def to_dict(self):
        """Convert to dictionary representation."""
        return {
            'id': self.id,
            'name': self.name,
            'currency': self.currency,
            'initial_balance': self.initial_balance,
            'balance': self.balance,
            'user_id': self.user_id,
            'organization_id': self.organization_id,
            'created_at': isoformat(self.created_at)
        }
