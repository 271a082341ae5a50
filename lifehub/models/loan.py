"""Loan model."""

from lifehub.extensions import db
from lifehub.models.base import TenantScopedMixin, new_id, isoformat

LOAN_TYPES = ('Personal', 'Mortgage', 'Car', 'Student', 'Business', 'Other')
LOAN_STATUSES = ('active', 'paid_off', 'defaulted')


class Loan(db.Model, TenantScopedMixin):
    """Money lent or borrowed, tracked until paid off."""

    __tablename__ = 'loans'

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(255), nullable=False)
    type = db.Column(db.String(20), nullable=False)
    amount = db.Column(db.Float, nullable=False)
    remaining_amount = db.Column(db.Float, nullable=False)
    status = db.Column(db.String(20), nullable=False, default='active')
    person = db.Column(db.String(255), nullable=True)
    description = db.Column(db.Text, nullable=True)

    def __repr__(self):
        return f'<Loan {self.name}>'

    def to_dict(self):
        """Convert to dictionary representation."""
        return {
            'id': self.id,
            'name': self.name,
            'type': self.type,
            'amount': self.amount,
            'remaining_amount': self.remaining_amount,
            'status': self.status,
            'person': self.person,
            'description': self.description,
            'user_id': self.user_id,
            'organization_id': self.organization_id,
            'created_at': isoformat(self.created_at),
            'updated_at': isoformat(self.updated_at)
        }
