"""Category model."""

from lifehub.extensions import db
from lifehub.models.base import TenantScopedMixin, new_id, isoformat


class Category(db.Model, TenantScopedMixin):
    """Transaction category, shared across an organization when scoped to one."""

    __tablename__ = 'categories'

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(255), nullable=False)
    color = db.Column(db.String(20), nullable=False, default='#6b7280')

    def __repr__(self):
        return f'<Category {self.name}>'

    def to_dict(self):
        """Convert to dictionary representation."""
        return {
            'id': self.id,
            'name': self.name,
            'color': self.color,
            'user_id': self.user_id,
            'organization_id': self.organization_id,
            'created_at': isoformat(self.created_at),
            'updated_at': isoformat(self.updated_at)
        }
