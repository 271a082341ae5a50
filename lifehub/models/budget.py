"""Budget model."""

from lifehub.extensions import db
from lifehub.models.base import TenantScopedMixin, new_id, isoformat


class Budget(db.Model, TenantScopedMixin):
    """Monthly spending limit, optionally tied to a category."""

    __tablename__ = 'budgets'
    __table_args__ = (
        db.UniqueConstraint(
            'user_id', 'organization_id', 'category_id', 'month', 'year',
            name='uq_budget_period'
        ),
    )

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    category_id = db.Column(
        db.String(36),
        db.ForeignKey('categories.id', ondelete='CASCADE'),
        nullable=True,
        index=True
    )
    amount = db.Column(db.Float, nullable=False)
    month = db.Column(db.Integer, nullable=False)
    year = db.Column(db.Integer, nullable=False)

    category = db.relationship('Category')

    def __repr__(self):
        return f'<Budget {self.year}-{self.month:02d} {self.amount}>'

    def to_dict(self):
        """Convert to dictionary representation."""
        return {
            'id': self.id,
            'category_id': self.category_id,
            'category': {
                'name': self.category.name,
                'color': self.category.color
            } if self.category else None,
            'amount': self.amount,
            'month': self.month,
            'year': self.year,
            'user_id': self.user_id,
            'organization_id': self.organization_id,
            'created_at': isoformat(self.created_at),
            'updated_at': isoformat(self.updated_at)
        }
