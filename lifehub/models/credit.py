"""Credit models: money owed to the user and the payments received."""

from lifehub.extensions import db
from lifehub.models.base import TenantScopedMixin, TimestampMixin, new_id, isoformat


class Credit(db.Model, TenantScopedMixin):
    """
    Money someone owes the user.

    remaining_amount goes down as payments are recorded and back up when a
    payment is deleted.
    """

    __tablename__ = 'credits'

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(255), nullable=False)
    person = db.Column(db.String(255), nullable=False)
    phone = db.Column(db.String(50), nullable=True)
    email = db.Column(db.String(255), nullable=True)
    total_amount = db.Column(db.Float, nullable=False)
    remaining_amount = db.Column(db.Float, nullable=False)
    description = db.Column(db.Text, nullable=True)

    payments = db.relationship(
        'CreditPayment',
        back_populates='credit',
        lazy='dynamic',
        cascade='all, delete-orphan'
    )

    def __repr__(self):
        return f'<Credit {self.name}>'

    def to_dict(self):
        """Convert to dictionary representation."""
        return {
            'id': self.id,
            'name': self.name,
            'person': self.person,
            'phone': self.phone,
            'email': self.email,
            'total_amount': self.total_amount,
            'remaining_amount': self.remaining_amount,
            'description': self.description,
            'user_id': self.user_id,
            'organization_id': self.organization_id,
            'created_at': isoformat(self.created_at),
            'updated_at': isoformat(self.updated_at)
        }


class CreditPayment(db.Model, TimestampMixin):
    """A payment received against a credit; scoped through its credit."""

    __tablename__ = 'credit_payments'

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    credit_id = db.Column(
        db.String(36),
        db.ForeignKey('credits.id', ondelete='CASCADE'),
        nullable=False,
        index=True
    )
    amount = db.Column(db.Float, nullable=False)
    payment_date = db.Column(db.Date, nullable=False)
    description = db.Column(db.Text, nullable=True)

    credit = db.relationship('Credit', back_populates='payments')

    def to_dict(self):
        return {
            'id': self.id,
            'credit_id': self.credit_id,
            'amount': self.amount,
            'payment_date': isoformat(self.payment_date),
            'description': self.description,
            'created_at': isoformat(self.created_at)
        }
