"""Episode CSV import Celery task with authorization re-validation."""

import csv
import io
import logging
import re
from datetime import date
from sqlalchemy.exc import OperationalError
from lifehub.cache.invalidation import dependents_of
from lifehub.extensions import celery, db, query_cache
from lifehub.models.show import Episode, Show
from lifehub.models.user import User
from lifehub.resources.roles import ADMIN, RoleService

logger = logging.getLogger(__name__)

CSV_HEADERS = ('Show', 'Episode', 'Title', 'Air Date')

EPISODE_CODE = re.compile(r'S?(\d{1,2})[Ex](\d{1,2})|(\d{1,2})x(\d{1,2})', re.IGNORECASE)

# Mutation kind of catalog episode writes in the invalidation graph
EPISODES_KIND = 'episodes'


class AuthorizationError(Exception):
    """Raised when background job authorization fails."""
    pass


def check_headers(csv_text):
    """
    Return the header row if it matches CSV_HEADERS, else None.
    """
    reader = csv.reader(io.StringIO(csv_text))
    header = next(reader, None)
    if header is None:
        return None
    header = tuple(column.strip() for column in header)
    return header if header == CSV_HEADERS else None


def parse_episode_code(code):
    """
    Season and episode numbers from codes like S01E02, s1e2 or 1x2.

    Unparseable codes fall back to season 1, episode 1.
    """
    match = EPISODE_CODE.search(code or '')
    if not match:
        return 1, 1
    season = match.group(1) or match.group(3)
    episode = match.group(2) or match.group(4)
    return int(season), int(episode)


def parse_air_date(value):
    try:
        return date.fromisoformat(value.strip()) if value and value.strip() else None
    except ValueError:
        return None


def import_rows(csv_text):
    """
    Create shows and episodes from CSV text.

    Episodes already in the catalog (same show, season and episode number)
    are skipped, so importing the same file twice adds nothing.

    Returns:
        dict: imported, skipped and failed counts, and 1-based CSV line
            numbers of rejected rows (the header is line 1)
    """
    reader = csv.DictReader(io.StringIO(csv_text), skipinitialspace=True)
    shows = {}
    existing = {}
    imported = 0
    skipped = 0
    failed_rows = []

    for i, row in enumerate(reader):
        title = (row.get('Title') or '').strip()
        show_title = (row.get('Show') or '').strip()
        if not show_title or not title:
            failed_rows.append(i + 2)
            continue

        show = shows.get(show_title)
        if show is None:
            show = Show.query.filter_by(title=show_title).first()
            if show is None:
                show = Show(title=show_title)
                db.session.add(show)
                db.session.flush()
                logger.info(f"Created show {show_title}")
            shows[show_title] = show
            existing[show.id] = {
                (episode.season_number, episode.episode_number)
                for episode in Episode.query.filter_by(show_id=show.id).all()
            }

        season, number = parse_episode_code(row.get('Episode'))
        if (season, number) in existing[show.id]:
            skipped += 1
            continue
        existing[show.id].add((season, number))

        db.session.add(Episode(
            show_id=show.id,
            title=title,
            season_number=season,
            episode_number=number,
            air_date=parse_air_date(row.get('Air Date'))
        ))
        imported += 1

    db.session.commit()
    return {
        'imported': imported,
        'skipped': skipped,
        'failed': len(failed_rows),
        'failed_rows': failed_rows
    }


@celery.task(bind=True, max_retries=3)
def import_episodes_task(self, csv_text, user_id):
    """
    Import episodes with authorization re-validation.

    The requesting user must still exist, still be active and still hold
    the admin role when the job runs; the check made by the endpoint is
    not trusted.

    Args:
        csv_text: CSV with the columns Show, Episode, Title, Air Date
        user_id: Admin who queued the import

    Returns:
        dict: Import result

    Raises:
        AuthorizationError: If any authorization check fails
    """
    logger.info(f"Importing episodes for user {user_id}")

    try:
        user = db.session.get(User, user_id)
        if not user:
            logger.error(f"SECURITY: User {user_id} no longer exists")
            raise AuthorizationError("Requesting user no longer exists")

        if not user.is_active:
            logger.error(f"SECURITY: User {user_id} is no longer active")
            raise AuthorizationError("User account disabled")

        if not RoleService.has_role(user_id, ADMIN):
            logger.error(f"SECURITY: User {user_id} no longer holds the admin role")
            raise AuthorizationError("User is not an administrator")

        result = import_rows(csv_text)
        query_cache.invalidate_many(dependents_of(EPISODES_KIND))

        logger.info(
            f"Imported {result['imported']} episodes, skipped {result['skipped']}, "
            f"{result['failed']} rows failed"
        )
        return {'status': 'success', **result}

    except AuthorizationError as e:
        # Don't retry authorization failures
        logger.error(f"Authorization error for episode import by {user_id}: {e}")
        raise

    except OperationalError as e:
        db.session.rollback()
        logger.error(f"Error importing episodes for {user_id}: {e}", exc_info=True)
        raise self.retry(exc=e, countdown=60 * (self.request.retries + 1))
