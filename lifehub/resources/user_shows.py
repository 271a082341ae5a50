"""My Shows: catalog shows a user tracks, with watch progress."""

from lifehub.errors import AuthError, NotFoundError
from lifehub.extensions import db
from lifehub.models.episode_status import WATCHED, UserEpisodeStatus
from lifehub.models.show import Episode, Show
from lifehub.models.tracking import UserShowTracking
from lifehub.resources.base import ResourceService

NOT_STARTED = 'not_started'
WATCHING = 'watching'
COMPLETED = 'completed'


def progress_status(total, watched):
    if watched == 0:
        return NOT_STARTED
    if watched >= total:
        return COMPLETED
    return WATCHING


class UserShowService(ResourceService):
    """
    Tracked shows of the acting user.

    Only the tracked show list goes through the query cache. Episode counts
    are read on every call, so toggling an episode never leaves progress
    stale.
    """

    kind = 'user-shows'
    label = 'Tracked show'

    def list(self):
        if not self.is_authenticated:
            return []

        def fetch():
            rows = UserShowTracking.query.filter_by(user_id=self.user_id).join(Show).order_by(
                Show.title.asc()
            ).all()
            return [row.show.to_dict() for row in rows]

        shows = self.cached((), fetch)
        return self.run_query(lambda: self._with_progress(shows))

    def is_tracking(self, show_id):
        if not self.is_authenticated:
            return False
        return UserShowTracking.query.filter_by(
            user_id=self.user_id, show_id=show_id
        ).first() is not None

    def track(self, show_id):
        def operation():
            if not self.is_authenticated:
                raise AuthError('You must be logged in to track shows')
            show = db.session.get(Show, show_id)
            if show is None:
                raise NotFoundError('Show not found')
            row = UserShowTracking(user_id=self.user_id, show_id=show.id)
            db.session.add(row)
            db.session.flush()
            return row.to_dict()

        return self.mutate('create', operation)

    def untrack(self, show_id):
        def operation():
            if not self.is_authenticated:
                raise AuthError('You must be logged in to track shows')
            row = UserShowTracking.query.filter_by(user_id=self.user_id, show_id=show_id).first()
            if row is None:
                raise NotFoundError('Show is not on your list')
            db.session.delete(row)
            db.session.flush()
            return None

        return self.mutate('delete', operation)

    def integrity_message(self, error):
        return 'Show is already on your list'

    def _with_progress(self, shows):
        show_ids = [show['id'] for show in shows]
        if not show_ids:
            return []
        totals = dict(
            db.session.query(Episode.show_id, db.func.count(Episode.id))
            .filter(Episode.show_id.in_(show_ids))
            .group_by(Episode.show_id)
            .all()
        )
        watched = dict(
            db.session.query(Episode.show_id, db.func.count(UserEpisodeStatus.id))
            .join(UserEpisodeStatus, UserEpisodeStatus.episode_id == Episode.id)
            .filter(
                Episode.show_id.in_(show_ids),
                UserEpisodeStatus.user_id == self.user_id,
                UserEpisodeStatus.status == WATCHED
            )
            .group_by(Episode.show_id)
            .all()
        )
        result = []
        for show in shows:
            total = totals.get(show['id'], 0)
            seen = watched.get(show['id'], 0)
            result.append({
                **show,
                'total_episodes': total,
                'watched_episodes': seen,
                'status': progress_status(total, seen),
            })
        return result
