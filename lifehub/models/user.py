"""User model with Flask-Login integration."""

from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash
from lifehub.extensions import db
from lifehub.models.base import new_id, utcnow, isoformat


class User(db.Model, UserMixin):
    """
    User model representing application users.

    A user owns personal resources (organization_id NULL) and may belong to
    any number of organizations through OrganizationMember rows.
    """

    __tablename__ = 'users'

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    email = db.Column(db.String(255), nullable=False, unique=True, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    display_name = db.Column(db.String(255), nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    is_active = db.Column(db.Boolean, nullable=False, default=True)

    # Relationships
    memberships = db.relationship(
        'OrganizationMember',
        back_populates='user',
        lazy='dynamic',
        cascade='all, delete-orphan'
    )
    roles = db.relationship(
        'UserRole',
        back_populates='user',
        lazy='dynamic',
        cascade='all, delete-orphan'
    )

    def set_password(self, password):
        """Hash and store password."""
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        """Verify password against hash."""
        return check_password_hash(self.password_hash, password)

    def __repr__(self):
        return f'<User {self.email}>'

    def to_dict(self):
        """Convert to dictionary representation."""
        return {
            'id': self.id,
            'email': self.email,
            'display_name': self.display_name,
            'is_active': self.is_active,
            'created_at': isoformat(self.created_at)
        }
