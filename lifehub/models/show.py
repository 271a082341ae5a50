"""Show catalog models."""

from lifehub.extensions import db
from lifehub.models.base import TimestampMixin, new_id, isoformat


class Show(db.Model, TimestampMixin):
    """A TV show in the shared catalog."""

    __tablename__ = 'shows'

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    title = db.Column(db.String(255), nullable=False, unique=True, index=True)
    description = db.Column(db.Text, nullable=True)
    poster_url = db.Column(db.String(512), nullable=True)
    is_public = db.Column(db.Boolean, nullable=False, default=True)
    slug = db.Column(db.String(255), nullable=True, index=True)

    episodes = db.relationship(
        'Episode',
        back_populates='show',
        lazy='dynamic',
        cascade='all, delete-orphan'
    )

    def __repr__(self):
        return f'<Show {self.title}>'

    def to_dict(self):
        """Convert to dictionary representation."""
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'poster_url': self.poster_url,
            'is_public': self.is_public,
            'slug': self.slug
        }


class Episode(db.Model):
    """A single episode of a show."""

    __tablename__ = 'episodes'

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    show_id = db.Column(
        db.String(36),
        db.ForeignKey('shows.id', ondelete='CASCADE'),
        nullable=False,
        index=True
    )
    title = db.Column(db.String(255), nullable=False)
    season_number = db.Column(db.Integer, nullable=False, default=1)
    episode_number = db.Column(db.Integer, nullable=False, default=1)
    air_date = db.Column(db.Date, nullable=True)

    show = db.relationship('Show', back_populates='episodes')

    def __repr__(self):
        return f'<Episode S{self.season_number:02d}E{self.episode_number:02d} {self.title}>'


class ShowUniverse(db.Model):
    """Membership of a show in a universe."""

    __tablename__ = 'show_universes'
    __table_args__ = (
        db.UniqueConstraint('show_id', 'universe_id', name='uq_show_universe'),
    )

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    show_id = db.Column(
        db.String(36),
        db.ForeignKey('shows.id', ondelete='CASCADE'),
        nullable=False,
        index=True
    )
    universe_id = db.Column(
        db.String(36),
        db.ForeignKey('universes.id', ondelete='CASCADE'),
        nullable=False,
        index=True
    )

    show = db.relationship('Show')
    universe = db.relationship('Universe', back_populates='show_links')

    def to_dict(self):
        return {
            'id': self.id,
            'show_id': self.show_id,
            'universe_id': self.universe_id,
            'show': self.show.to_dict() if self.show else None
        }
