"""Per-user episode watch status."""

from lifehub.extensions import db
from lifehub.models.base import new_id, utcnow, isoformat

WATCHED = 'watched'
NOT_WATCHED = 'not_watched'


class UserEpisodeStatus(db.Model):
    """
    Watch status keyed by (user, episode).

    Created on the first toggle and updated in place afterwards; rows are
    never deleted.
    """

    __tablename__ = 'user_episode_status'
    __table_args__ = (
        db.UniqueConstraint('user_id', 'episode_id', name='uq_user_episode_status'),
    )

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    user_id = db.Column(
        db.String(36),
        db.ForeignKey('users.id', ondelete='CASCADE'),
        nullable=False,
        index=True
    )
    episode_id = db.Column(
        db.String(36),
        db.ForeignKey('episodes.id', ondelete='CASCADE'),
        nullable=False,
        index=True
    )
    status = db.Column(db.String(20), nullable=False, default=NOT_WATCHED)
    watched_at = db.Column(db.DateTime, nullable=True)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    @property
    def watched(self):
        return self.status == WATCHED

    def __repr__(self):
        return f'<UserEpisodeStatus {self.episode_id} {self.status}>'

    def to_dict(self):
        return {
            'episode_id': self.episode_id,
            'status': self.status,
            'watched': self.watched,
            'watched_at': isoformat(self.watched_at),
            'updated_at': isoformat(self.updated_at)
        }
