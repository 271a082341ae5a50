"""TV shows page view models."""

from flask import Blueprint, jsonify
from lifehub.auth.guards import require_auth
from lifehub.preferences.routes import require_module
from lifehub.resources.episodes import UniverseEpisodeService
from lifehub.resources.universes import UniverseService, UniverseShowService
from lifehub.resources.user_shows import UserShowService

tv_shows_pages_bp = Blueprint('tv_shows_pages', __name__, url_prefix='/tv-shows')
require_module(tv_shows_pages_bp, 'tv_shows')


@tv_shows_pages_bp.route('', methods=['GET'])
@require_auth
def dashboard():
    """Universes of the active tenancy alongside the public ones."""
    service = UniverseService.for_request()
    return jsonify({
        'universes': service.list(),
        'public_universes': service.public_universes()
    }), 200


@tv_shows_pages_bp.route('/universes', methods=['GET'])
@require_auth
def universes_page():
    return jsonify({'universes': UniverseService.for_request().list()}), 200


@tv_shows_pages_bp.route('/universe/<id>', methods=['GET'])
@require_auth
def universe_page(id):
    """
    Universe detail with its shows and watch progress.

    Returns:
        200: Universe, shows and episode listing
        404: Universe not visible to the caller
    """
    episodes = UniverseEpisodeService.for_request().list(id)
    shows = UniverseShowService.for_request().list(id)
    progress = round(100 * episodes['watched'] / episodes['total']) if episodes['total'] else 0
    return jsonify({
        'universe_id': id,
        'shows': shows,
        'episodes': episodes['episodes'],
        'total': episodes['total'],
        'watched': episodes['watched'],
        'progress': progress
    }), 200


@tv_shows_pages_bp.route('/my-shows', methods=['GET'])
@require_auth
def my_shows_page():
    shows = UserShowService.for_request().list()
    return jsonify({
        'shows': shows,
        'watching': sum(1 for show in shows if show['status'] == 'watching'),
        'completed': sum(1 for show in shows if show['status'] == 'completed')
    }), 200
