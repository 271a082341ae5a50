"""TV shows JSON API: universes, their shows and episode watch status."""

from flask import Blueprint, jsonify
from lifehub.auth.guards import require_auth
from lifehub.crud import json_body, register_resource
from lifehub.errors import ValidationError
from lifehub.models.show import Show
from lifehub.preferences.routes import require_module
from lifehub.resources.episodes import EpisodeStatusService, UniverseEpisodeService
from lifehub.resources.universes import UniverseService, UniverseShowService
from lifehub.resources.user_shows import UserShowService

tv_shows_bp = Blueprint('tv_shows', __name__, url_prefix='/api/tv-shows')
require_module(tv_shows_bp, 'tv_shows')

register_resource(tv_shows_bp, UniverseService, '/universes', 'universes', 'universe')


@tv_shows_bp.route('/public/universes', methods=['GET'])
def public_universes():
    """
    Public universes, available without a session.

    Returns:
        200: List of public universes
    """
    return jsonify({'universes': UniverseService.for_request().public_universes()}), 200


@tv_shows_bp.route('/universes/<universe_id>/episodes', methods=['GET'])
def universe_episodes(universe_id):
    """
    Every episode of the universe's shows with the caller's watch status.

    Public universes can be read without a session; nothing is marked
    watched in that case.

    Returns:
        200: {"universe_id", "episodes", "total", "watched"}
        404: Universe not visible to the caller
    """
    return jsonify(UniverseEpisodeService.for_request().list(universe_id)), 200


@tv_shows_bp.route('/universes/<universe_id>/shows', methods=['GET'])
def universe_shows(universe_id):
    return jsonify({'shows': UniverseShowService.for_request().list(universe_id)}), 200


@tv_shows_bp.route('/universes/<universe_id>/shows', methods=['POST'])
@require_auth
def add_universe_show(universe_id):
    """
    Link a catalog show to a universe.

    Request Body:
        {"show_id": "<id>"}

    Returns:
        201: Link created
        400: Show missing or already linked
        404: Universe outside the active tenancy
    """
    show_id = json_body().get('show_id')
    if not show_id:
        raise ValidationError('show_id is required', field='show_id')
    link = UniverseShowService.for_request().add_show(universe_id, show_id)
    return jsonify({'message': 'Show added to universe', 'link': link}), 201


@tv_shows_bp.route('/universes/<universe_id>/shows/<link_id>', methods=['DELETE'])
@require_auth
def remove_universe_show(universe_id, link_id):
    UniverseShowService.for_request().remove_show(universe_id, link_id)
    return jsonify({'message': 'Show removed from universe'}), 200


@tv_shows_bp.route('/shows', methods=['GET'])
def list_shows():
    """Shared show catalog."""
    shows = Show.query.filter(Show.is_public.is_(True)).order_by(Show.title.asc()).all()
    return jsonify({'shows': [show.to_dict() for show in shows]}), 200


@tv_shows_bp.route('/my-shows', methods=['GET'])
@require_auth
def my_shows():
    """
    Shows the caller tracks, with episode progress.

    Returns:
        200: {"shows": [{..., "total_episodes", "watched_episodes", "status"}]}
    """
    return jsonify({'shows': UserShowService.for_request().list()}), 200


@tv_shows_bp.route('/shows/<show_id>/track', methods=['GET'])
@require_auth
def tracking_status(show_id):
    return jsonify({
        'show_id': show_id,
        'tracking': UserShowService.for_request().is_tracking(show_id)
    }), 200


@tv_shows_bp.route('/shows/<show_id>/track', methods=['POST'])
@require_auth
def track_show(show_id):
    """
    Add a catalog show to My Shows.

    Returns:
        201: Show tracked
        400: Already tracked
        404: Unknown show
    """
    tracked = UserShowService.for_request().track(show_id)
    return jsonify({'message': 'Show added to your list', 'tracking': tracked}), 201


@tv_shows_bp.route('/shows/<show_id>/track', methods=['DELETE'])
@require_auth
def untrack_show(show_id):
    UserShowService.for_request().untrack(show_id)
    return jsonify({'message': 'Show removed from your list'}), 200


@tv_shows_bp.route('/episodes/<episode_id>/toggle', methods=['POST'])
@require_auth
def toggle_episode(episode_id):
    """
    Flip the watch status of an episode.

    Request Body:
        {"watched": <current status>}

    Returns:
        200: {"episode_id", "watched", "watched_at"} after the toggle
        404: Unknown episode
    """
    current = json_body().get('watched', False)
    if not isinstance(current, bool):
        raise ValidationError('watched must be a boolean', field='watched')
    return jsonify(EpisodeStatusService.for_request().toggle(episode_id, current)), 200


@tv_shows_bp.route('/episodes/<episode_id>/status', methods=['GET'])
@require_auth
def episode_status(episode_id):
    status = EpisodeStatusService.for_request().status_for(episode_id)
    return jsonify({'episode_id': episode_id, 'status': status}), 200
