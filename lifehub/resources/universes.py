"""Universe and universe-show services."""

import re
from lifehub.errors import NotFoundError, ValidationError
from lifehub.extensions import db
from lifehub.models.show import Show, ShowUniverse
from lifehub.models.universe import Universe
from lifehub.resources.base import ResourceService, ScopedResourceService


def slugify(value):
    slug = re.sub(r'[^a-z0-9]+', '-', value.lower()).strip('-')
    return slug or None


def visible_universe(universe_id, tenancy, user_id):
    """Public universes are visible to everyone, private ones within scope."""
    universe = db.session.get(Universe, universe_id)
    if universe is not None and universe.is_public:
        return universe
    if user_id is None:
        raise NotFoundError('Universe not found')
    return Universe.get_for_scope(universe_id, tenancy, user_id)


def readable_universe(universe_id, service):
    """
    Universe the service's actor may read right now.

    Membership of the selected organization is checked on every call for
    private universes, so a cached listing is never served after access
    was revoked.
    """
    universe = visible_universe(universe_id, service.tenancy, service.user_id)
    if not universe.is_public:
        service.check_access()
    return universe


class UniverseService(ScopedResourceService):
    kind = 'universes'
    label = 'Universe'
    model = Universe
    writable_fields = ('name', 'description', 'is_public')
    required_fields = ('name',)

    def public_universes(self):
        """Every public universe, regardless of tenancy or session."""

        def fetch():
            query = Universe.query.filter(Universe.is_public.is_(True)).order_by(Universe.name.asc())
            return [universe.to_dict() for universe in query.all()]

        return self.cache.get_or_fetch((self.kind, 'public'), lambda: self.run_query(fetch))

    def before_create(self, record):
        record.slug = slugify(record.name)

    def before_update(self, record, data):
        if 'name' in data:
            record.slug = slugify(record.name)


class UniverseShowService(ResourceService):
    """Shows linked to a universe; changes reshape the episode listing."""

    kind = 'universe-shows'
    label = 'Universe show'

    def list(self, universe_id):
        universe = self.run_query(lambda: readable_universe(universe_id, self))

        def fetch():
            links = universe.show_links.join(Show).order_by(Show.title.asc()).all()
            return [link.to_dict() for link in links]

        return self.cached((universe_id,), fetch)

    def add_show(self, universe_id, show_id):
        def operation():
            self.require_user()
            self.check_access()
            universe = Universe.get_for_scope(universe_id, self.tenancy, self.user_id)
            if db.session.get(Show, show_id) is None:
                raise ValidationError('Show not found', field='show_id')
            link = ShowUniverse(universe_id=universe.id, show_id=show_id)
            db.session.add(link)
            db.session.flush()
            return link.to_dict()

        return self.mutate('create', operation)

    def remove_show(self, universe_id, link_id):
        def operation():
            self.require_user()
            self.check_access()
            universe = Universe.get_for_scope(universe_id, self.tenancy, self.user_id)
            link = universe.show_links.filter(ShowUniverse.id == link_id).first()
            if link is None:
                raise NotFoundError('Show is not part of this universe')
            db.session.delete(link)
            db.session.flush()
            return None

        return self.mutate('delete', operation)

    def integrity_message(self, error):
        return 'Show is already part of this universe'
