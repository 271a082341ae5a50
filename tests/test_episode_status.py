"""Episode watch status and universe listing tests."""

from datetime import date
import pytest
from lifehub.errors import AuthError, NotFoundError, ValidationError
from lifehub.extensions import db as _db, query_cache
from lifehub.models.episode_status import UserEpisodeStatus
from lifehub.models.show import Episode, Show
from lifehub.resources import (
    EpisodeStatusService,
    UniverseEpisodeService,
    UniverseService,
    UniverseShowService,
    UserShowService,
)
from lifehub.resources.episodes import episode_sort_key


def add_show(title, episodes):
    show = Show(title=title)
    _db.session.add(show)
    _db.session.flush()
    ids = []
    for season, number, air_date in episodes:
        episode = Episode(
            show_id=show.id,
            title=f'{title} {season}x{number}',
            season_number=season,
            episode_number=number,
            air_date=air_date
        )
        _db.session.add(episode)
        _db.session.flush()
        ids.append(episode.id)
    _db.session.commit()
    return show.id, ids


@pytest.fixture
def universe(make_service, user1, db):
    """Universe of user1 with two shows whose episodes interleave by air date."""
    universe = make_service(UniverseService, user1).create({'name': 'Arrowverse'})
    arrow, arrow_episodes = add_show('Arrow', [
        (1, 1, date(2012, 10, 10)),
        (1, 2, date(2012, 10, 17)),
    ])
    flash, flash_episodes = add_show('Flash', [
        (1, 1, date(2014, 10, 7)),
        (1, 2, None),
    ])
    links = make_service(UniverseShowService, user1)
    links.add_show(universe['id'], arrow)
    links.add_show(universe['id'], flash)
    return {
        'id': universe['id'],
        'episodes': arrow_episodes + flash_episodes,
        'shows': [arrow, flash],
    }


class TestToggle:

    def test_toggle_twice_restores_state(self, make_service, user1, universe):
        service = make_service(EpisodeStatusService, user1)
        episode_id = universe['episodes'][0]

        first = service.toggle(episode_id, False)
        assert first['watched'] is True
        assert first['watched_at'] is not None

        second = service.toggle(episode_id, first['watched'])
        assert second['watched'] is False
        assert second['watched_at'] is None

    def test_repeated_toggles_keep_one_row(self, make_service, user1, universe, db):
        service = make_service(EpisodeStatusService, user1)
        episode_id = universe['episodes'][0]

        for current in (False, True, False, False):
            service.toggle(episode_id, current)

        rows = UserEpisodeStatus.query.filter_by(user_id=user1.id, episode_id=episode_id).all()
        assert len(rows) == 1
        assert rows[0].watched

    def test_status_is_per_user(self, make_service, user1, user2, universe):
        episode_id = universe['episodes'][0]
        make_service(EpisodeStatusService, user1).toggle(episode_id, False)

        assert make_service(EpisodeStatusService, user2).status_for(episode_id) is None
        assert make_service(EpisodeStatusService, user1).status_for(episode_id)['watched']

    def test_unknown_episode(self, make_service, user1, db):
        with pytest.raises(NotFoundError):
            make_service(EpisodeStatusService, user1).toggle('missing', False)

    def test_requires_session(self, make_service, universe):
        with pytest.raises(AuthError):
            make_service(EpisodeStatusService, None).toggle(universe['episodes'][0], False)

    def test_toggle_invalidates_universe_episodes(self, make_service, user1, universe):
        listing = make_service(UniverseEpisodeService, user1)
        assert listing.list(universe['id'])['watched'] == 0
        assert 'universe-episodes' in query_cache.kinds()

        make_service(EpisodeStatusService, user1).toggle(universe['episodes'][0], False)

        assert 'universe-episodes' not in query_cache.kinds()
        assert listing.list(universe['id'])['watched'] == 1


class TestUniverseEpisodes:

    def test_sorted_by_air_date_with_undated_last(self, make_service, user1, universe):
        episodes = make_service(UniverseEpisodeService, user1).list(universe['id'])['episodes']

        assert [e['air_date'] for e in episodes] == ['2012-10-10', '2012-10-17', '2014-10-07', None]
        assert episodes[0]['show']['title'] == 'Arrow'

    def test_watched_episodes_move_to_the_end(self, make_service, user1, universe):
        first = universe['episodes'][0]
        make_service(EpisodeStatusService, user1).toggle(first, False)

        listing = make_service(UniverseEpisodeService, user1).list(universe['id'])

        assert listing['episodes'][-1]['id'] == first
        assert listing['episodes'][-1]['watched'] is True
        assert listing['total'] == 4
        assert listing['watched'] == 1

    def test_empty_universe_id(self, make_service, user1, db):
        listing = make_service(UniverseEpisodeService, user1).list(None)

        assert listing == {'universe_id': None, 'episodes': [], 'total': 0, 'watched': 0}

    def test_private_universe_hidden_from_others(self, make_service, user2, universe):
        with pytest.raises(NotFoundError):
            make_service(UniverseEpisodeService, user2).list(universe['id'])

    def test_public_universe_visible_without_session(self, make_service, user1, universe):
        make_service(UniverseService, user1).update(universe['id'], {'is_public': True})

        listing = make_service(UniverseEpisodeService, None).list(universe['id'])

        assert listing['total'] == 4
        assert listing['watched'] == 0

    def test_removing_show_invalidates_listing(self, make_service, user1, universe):
        listing = make_service(UniverseEpisodeService, user1)
        assert listing.list(universe['id'])['total'] == 4

        links = make_service(UniverseShowService, user1)
        flash_link = [link for link in links.list(universe['id']) if link['show']['title'] == 'Flash'][0]
        links.remove_show(universe['id'], flash_link['id'])

        assert listing.list(universe['id'])['total'] == 2

    def test_duplicate_show_link(self, make_service, user1, universe):
        with pytest.raises(ValidationError, match='already part'):
            make_service(UniverseShowService, user1).add_show(universe['id'], universe['shows'][0])

    def test_sort_key_orders_season_and_episode_on_same_day(self):
        items = [
            {'watched': False, 'air_date': '2020-01-01', 'season_number': 1, 'episode_number': 2},
            {'watched': False, 'air_date': '2020-01-01', 'season_number': 1, 'episode_number': 1},
        ]

        assert [i['episode_number'] for i in sorted(items, key=episode_sort_key)] == [1, 2]


class TestUserShows:

    def test_progress_is_read_fresh(self, make_service, user1, universe):
        arrow, flash = universe['shows']
        tracking = make_service(UserShowService, user1)
        tracking.track(arrow)
        tracking.track(flash)

        shows = {show['title']: show for show in tracking.list()}
        assert shows['Arrow']['status'] == 'not_started'
        assert shows['Arrow']['total_episodes'] == 2

        toggles = make_service(EpisodeStatusService, user1)
        toggles.toggle(universe['episodes'][0], False)
        assert {s['title']: s['status'] for s in tracking.list()}['Arrow'] == 'watching'

        toggles.toggle(universe['episodes'][1], False)
        shows = {show['title']: show for show in tracking.list()}
        assert shows['Arrow']['status'] == 'completed'
        assert shows['Arrow']['watched_episodes'] == 2
        assert shows['Flash']['status'] == 'not_started'

    def test_tracking_twice_is_rejected(self, make_service, user1, universe):
        tracking = make_service(UserShowService, user1)
        tracking.track(universe['shows'][0])

        with pytest.raises(ValidationError, match='already on your list'):
            tracking.track(universe['shows'][0])

    def test_untrack(self, make_service, user1, universe):
        tracking = make_service(UserShowService, user1)
        tracking.track(universe['shows'][0])
        assert tracking.is_tracking(universe['shows'][0])

        tracking.untrack(universe['shows'][0])

        assert tracking.list() == []
        with pytest.raises(NotFoundError):
            tracking.untrack(universe['shows'][0])

    def test_unknown_show(self, make_service, user1, db):
        with pytest.raises(NotFoundError):
            make_service(UserShowService, user1).track('missing')

    def test_lists_are_per_user(self, make_service, user1, user2, universe):
        make_service(UserShowService, user1).track(universe['shows'][0])

        assert make_service(UserShowService, user2).list() == []


class TestEpisodeRoutes:

    def test_toggle_endpoint(self, app, authenticated_client1):
        with app.app_context():
            _, episodes = add_show('Lost', [(1, 1, date(2004, 9, 22))])

        response = authenticated_client1.post(
            f'/api/tv-shows/episodes/{episodes[0]}/toggle', json={'watched': False}
        )

        assert response.status_code == 200
        assert response.get_json()['watched'] is True

    def test_toggle_rejects_non_boolean(self, authenticated_client1):
        response = authenticated_client1.post(
            '/api/tv-shows/episodes/any/toggle', json={'watched': 'yes'}
        )

        assert response.status_code == 400

    def test_toggle_requires_session(self, client):
        response = client.post('/api/tv-shows/episodes/any/toggle', json={'watched': False})

        assert response.status_code == 401

    def test_public_universes_without_session(self, app, client, user1):
        response = client.get('/api/tv-shows/public/universes')

        assert response.status_code == 200
        assert response.get_json()['universes'] == []

    def test_my_shows_endpoints(self, app, authenticated_client1):
        with app.app_context():
            show_id, _ = add_show('Lost', [(1, 1, date(2004, 9, 22))])

        response = authenticated_client1.post(f'/api/tv-shows/shows/{show_id}/track')
        assert response.status_code == 201
        assert authenticated_client1.get(
            f'/api/tv-shows/shows/{show_id}/track'
        ).get_json()['tracking'] is True

        shows = authenticated_client1.get('/api/tv-shows/my-shows').get_json()['shows']
        assert [(s['title'], s['total_episodes']) for s in shows] == [('Lost', 1)]

        page = authenticated_client1.get('/tv-shows/my-shows').get_json()
        assert page['watching'] == 0

        assert authenticated_client1.delete(
            f'/api/tv-shows/shows/{show_id}/track'
        ).status_code == 200
