"""Transfer model."""

from lifehub.extensions import db
from lifehub.models.base import TenantScopedMixin, new_id, isoformat


class Transfer(db.Model, TenantScopedMixin):
    """
    Money moved from one wallet to another.

    Transfers count towards the balance of both wallets, so like wallets
    they stay private to their owner inside an organization.
    """

    __tablename__ = 'transfers'

    owner_scoped = True

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    from_wallet_id = db.Column(
        db.String(36),
        db.ForeignKey('wallets.id', ondelete='CASCADE'),
        nullable=False,
        index=True
    )
    to_wallet_id = db.Column(
        db.String(36),
        db.ForeignKey('wallets.id', ondelete='CASCADE'),
        nullable=False,
        index=True
    )
    amount = db.Column(db.Float, nullable=False)
    date = db.Column(db.Date, nullable=False, index=True)
    description = db.Column(db.Text, nullable=True)
    status = db.Column(db.String(20), nullable=False, default='completed')

    from_wallet = db.relationship('Wallet', foreign_keys=[from_wallet_id])
    to_wallet = db.relationship('Wallet', foreign_keys=[to_wallet_id])

    def __repr__(self):
        return f'<Transfer {self.amount} {self.from_wallet_id} -> {self.to_wallet_id}>'

    def to_dict(self):
        """Convert to dictionary representation."""
        return {
            'id': self.id,
            'from_wallet_id': self.from_wallet_id,
            'to_wallet_id': self.to_wallet_id,
            'from_wallet': {'name': self.from_wallet.name} if self.from_wallet else None,
            'to_wallet': {'name': self.to_wallet.name} if self.to_wallet else None,
            'amount': self.amount,
            'date': isoformat(self.date),
            'description': self.description,
            'status': self.status,
            'user_id': self.user_id,
            'organization_id': self.organization_id,
            'created_at': isoformat(self.created_at),
            'updated_at': isoformat(self.updated_at)
        }
