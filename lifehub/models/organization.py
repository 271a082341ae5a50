"""Organization model for multi-tenant support."""

from lifehub.extensions import db
from lifehub.models.base import TimestampMixin, new_id, isoformat


class Organization(db.Model, TimestampMixin):
    """
    Organization model representing a shared tenancy.

    Users see an organization's resources only while it is selected and only
    if they are members of it.
    """

    __tablename__ = 'organizations'

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(255), nullable=False, index=True)
    description = db.Column(db.Text, nullable=True)
    creator_id = db.Column(
        db.String(36),
        db.ForeignKey('users.id'),
        nullable=False,
        index=True
    )

    # Relationships
    members = db.relationship(
        'OrganizationMember',
        back_populates='organization',
        lazy='dynamic',
        cascade='all, delete-orphan'
    )

    def __repr__(self):
        return f'<Organization {self.name}>'

    def has_member(self, user_id):
        return self.members.filter_by(user_id=user_id).first() is not None

    def is_owner(self, user_id):
        return self.members.filter_by(user_id=user_id, role='owner').first() is not None

    def to_dict(self):
        """Convert to dictionary representation."""
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'creator_id': self.creator_id,
            'created_at': isoformat(self.created_at),
            'updated_at': isoformat(self.updated_at)
        }


class OrganizationMember(db.Model):
    """USER-IN-ORG relationship; the creator is recorded as owner."""

    __tablename__ = 'organization_members'
    __table_args__ = (
        db.UniqueConstraint('organization_id', 'user_id', name='uq_organization_member'),
    )

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    organization_id = db.Column(
        db.String(36),
        db.ForeignKey('organizations.id', ondelete='CASCADE'),
        nullable=False,
        index=True
    )
    user_id = db.Column(
        db.String(36),
        db.ForeignKey('users.id', ondelete='CASCADE'),
        nullable=False,
        index=True
    )
    role = db.Column(db.String(20), nullable=False, default='member')  # owner, member

    organization = db.relationship('Organization', back_populates='members')
    user = db.relationship('User', back_populates='memberships')

    def __repr__(self):
        return f'<OrganizationMember {self.user_id} in {self.organization_id}>'
