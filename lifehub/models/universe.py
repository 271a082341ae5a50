"""Universe model: a user-curated group of shows."""

from lifehub.extensions import db
from lifehub.models.base import TenantScopedMixin, new_id, isoformat


class Universe(db.Model, TenantScopedMixin):
    """
    A collection of shows watched together in air-date order.

    Public universes are listed to everyone; private ones follow the
    tenancy scope of their creator.
    """

    __tablename__ = 'universes'

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    is_public = db.Column(db.Boolean, nullable=False, default=False, index=True)
    slug = db.Column(db.String(255), nullable=True, index=True)

    show_links = db.relationship(
        'ShowUniverse',
        back_populates='universe',
        lazy='dynamic',
        cascade='all, delete-orphan'
    )

    def __repr__(self):
        return f'<Universe {self.name}>'

    def to_dict(self):
        """Convert to dictionary representation."""
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'is_public': self.is_public,
            'slug': self.slug,
            'creator_id': self.user_id,
            'organization_id': self.organization_id,
            'created_at': isoformat(self.created_at),
            'updated_at': isoformat(self.updated_at)
        }
