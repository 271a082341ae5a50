"""Role assignments."""

from lifehub.extensions import db
from lifehub.models.base import new_id, utcnow


class UserRole(db.Model):
    """
    A role granted to a user.

    Rows are inserted explicitly (admin signup, CLI) and never edited in place.
    """

    __tablename__ = 'user_roles'
    __table_args__ = (
        db.UniqueConstraint('user_id', 'role', name='uq_user_role'),
    )

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    user_id = db.Column(
        db.String(36),
        db.ForeignKey('users.id', ondelete='CASCADE'),
        nullable=False,
        index=True
    )
    role = db.Column(db.String(50), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    user = db.relationship('User', back_populates='roles')

    def __repr__(self):
        return f'<UserRole {self.role} for {self.user_id}>'
