"""Episode watch status and the per-universe episode listing."""

import logging
from sqlalchemy.dialects import postgresql, sqlite
from lifehub.errors import AuthError, ConfigurationError, NotFoundError
from lifehub.extensions import db
from lifehub.models.base import isoformat, new_id, utcnow
from lifehub.models.episode_status import NOT_WATCHED, WATCHED, UserEpisodeStatus
from lifehub.models.show import Episode, Show, ShowUniverse
from lifehub.resources.base import ResourceService
from lifehub.resources.universes import readable_universe

logger = logging.getLogger(__name__)

# Watch status lookups are chunked to keep IN clauses bounded
STATUS_BATCH_SIZE = 1000

_INSERT_BY_DIALECT = {
    'postgresql': postgresql.insert,
    'sqlite': sqlite.insert,
}


def episode_sort_key(item):
    """Unwatched first, then air date (undated last), season, episode."""
    air_date = item['air_date']
    return (
        item['watched'],
        air_date is None,
        air_date or '',
        item['season_number'],
        item['episode_number'],
    )


class EpisodeStatusService(ResourceService):
    """Flips an episode between watched and not watched for the acting user."""

    mutation_kind = 'episode-status'
    label = 'Episode status'

    def toggle(self, episode_id, current_status):
        """
        Set the episode to the opposite of current_status.

        The write is a single INSERT ... ON CONFLICT DO UPDATE on
        (user_id, episode_id), so concurrent toggles cannot produce
        duplicate rows.

        Returns:
            dict: episode_id, watched and watched_at after the write
        """

        def operation():
            if not self.is_authenticated:
                raise AuthError('User not authenticated')
            if db.session.get(Episode, episode_id) is None:
                raise NotFoundError('Episode not found')

            watched = not current_status
            now = utcnow()
            values = {
                'status': WATCHED if watched else NOT_WATCHED,
                'watched_at': now if watched else None,
                'updated_at': now,
            }
            self._upsert(episode_id, values)
            logger.info(
                f"Episode {episode_id} marked as {'watched' if watched else 'not watched'} "
                f"by user {self.user_id}"
            )
            return {
                'episode_id': episode_id,
                'watched': watched,
                'watched_at': isoformat(values['watched_at']),
            }

        return self.mutate('update', operation)

    def status_for(self, episode_id):
        if not self.is_authenticated:
            return None
        row = UserEpisodeStatus.query.filter_by(user_id=self.user_id, episode_id=episode_id).first()
        return row.to_dict() if row else None

    def _upsert(self, episode_id, values):
        dialect = db.session.get_bind().dialect.name
        insert = _INSERT_BY_DIALECT.get(dialect)
        if insert is None:
            raise ConfigurationError(f"Episode status upsert is not supported on {dialect}")

        statement = insert(UserEpisodeStatus).values(
            id=new_id(),
            user_id=self.user_id,
            episode_id=episode_id,
            **values
        ).on_conflict_do_update(
            index_elements=['user_id', 'episode_id'],
            set_=values
        )
        db.session.execute(statement)


class UniverseEpisodeService(ResourceService):
    """Aggregate listing of every episode in a universe with watch progress."""

    kind = 'universe-episodes'
    label = 'Universe episodes'
    read_only = True

    def list(self, universe_id):
        if not universe_id:
            return self._result(universe_id, [])
        universe = self.run_query(lambda: readable_universe(universe_id, self))
        return self.cached((universe_id,), lambda: self._build(universe))

    def _build(self, universe):
        universe_id = universe.id
        show_ids = [
            link.show_id
            for link in ShowUniverse.query.filter_by(universe_id=universe.id).all()
        ]
        if not show_ids:
            return self._result(universe_id, [])

        episodes = Episode.query.filter(Episode.show_id.in_(show_ids)).all()
        shows = {show.id: show for show in Show.query.filter(Show.id.in_(show_ids)).all()}
        statuses = self._watched_statuses([episode.id for episode in episodes])

        items = []
        for episode in episodes:
            status = statuses.get(episode.id)
            show = shows.get(episode.show_id)
            items.append({
                'id': episode.id,
                'title': episode.title,
                'season_number': episode.season_number,
                'episode_number': episode.episode_number,
                'air_date': isoformat(episode.air_date),
                'show_id': episode.show_id,
                'watched': status is not None,
                'watched_at': isoformat(status.watched_at) if status else None,
                'show': {'id': show.id, 'title': show.title, 'slug': show.slug} if show else None,
            })
        items.sort(key=episode_sort_key)
        return self._result(universe_id, items)

    def _watched_statuses(self, episode_ids):
        if not self.is_authenticated or not episode_ids:
            return {}
        statuses = {}
        for start in range(0, len(episode_ids), STATUS_BATCH_SIZE):
            batch = episode_ids[start:start + STATUS_BATCH_SIZE]
            rows = UserEpisodeStatus.query.filter(
                UserEpisodeStatus.user_id == self.user_id,
                UserEpisodeStatus.episode_id.in_(batch),
                UserEpisodeStatus.status == WATCHED
            ).all()
            statuses.update({row.episode_id: row for row in rows})
        return statuses

    @staticmethod
    def _result(universe_id, episodes):
        return {
            'universe_id': universe_id,
            'episodes': episodes,
            'total': len(episodes),
            'watched': sum(1 for episode in episodes if episode['watched']),
        }
