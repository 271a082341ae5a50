"""Shows a user follows."""

from lifehub.extensions import db
from lifehub.models.base import new_id, utcnow, isoformat


class UserShowTracking(db.Model):
    """One row per (user, show) on the user's My Shows list."""

    __tablename__ = 'user_show_tracking'
    __table_args__ = (
        db.UniqueConstraint('user_id', 'show_id', name='uq_user_show_tracking'),
    )

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    user_id = db.Column(
        db.String(36),
        db.ForeignKey('users.id', ondelete='CASCADE'),
        nullable=False,
        index=True
    )
    show_id = db.Column(
        db.String(36),
        db.ForeignKey('shows.id', ondelete='CASCADE'),
        nullable=False,
        index=True
    )
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    show = db.relationship('Show')

    def to_dict(self):
        return {
            'id': self.id,
            'show_id': self.show_id,
            'show': self.show.to_dict() if self.show else None,
            'created_at': isoformat(self.created_at)
        }
