"""Organization service: membership-scoped, not tenancy-filtered."""

import logging
from lifehub.errors import AccessError, AuthError, NotFoundError, ValidationError
from lifehub.extensions import db
from lifehub.models.organization import Organization, OrganizationMember
from lifehub.resources.base import ResourceService

logger = logging.getLogger(__name__)


class OrganizationService(ResourceService):
    """
    Organizations the acting user belongs to.

    Creating an organization makes the creator its owner and selects it as
    the active tenancy. Deleting the selected organization falls back to
    personal mode.
    """

    kind = 'organizations'
    label = 'Organization'
    writable_fields = ('name', 'description')

    def _member_query(self):
        return Organization.query.join(OrganizationMember).filter(
            OrganizationMember.user_id == self.user_id
        )

    def list(self):
        if not self.is_authenticated:
            return []

        def fetch():
            query = self._member_query().order_by(Organization.created_at.desc())
            return [organization.to_dict() for organization in query.all()]

        return self.cached((), fetch)

    def get(self, id):
        if not self.is_authenticated:
            raise AuthError('User not authenticated')

        def fetch():
            organization = self._member_query().filter(Organization.id == id).first()
            if organization is None:
                raise NotFoundError('Organization not found')
            return organization.to_dict()

        return self.run_query(fetch)

    def create(self, payload, select=True):
        def operation():
            self.require_user()
            data = self._clean(payload, partial=False)
            organization = Organization(creator_id=self.user_id, **data)
            db.session.add(organization)
            db.session.flush()
            db.session.add(OrganizationMember(
                organization_id=organization.id,
                user_id=self.user_id,
                role='owner'
            ))
            db.session.flush()
            return organization.to_dict()

        result = self.mutate('create', operation)
        if select:
            self.tenancy.set_current(result)
            logger.info(f"User {self.user_id} switched to new organization {result['id']}")
        return result

    def update(self, id, attributes):
        def operation():
            self.require_user()
            data = self._clean(attributes, partial=True)
            organization = self._owned(id)
            for key, value in data.items():
                setattr(organization, key, value)
            db.session.flush()
            return organization.to_dict()

        result = self.mutate('update', operation)
        if self.tenancy.organization_id == result['id']:
            # Keep the persisted snapshot in step with the renamed organization
            self.tenancy.set_current(result)
        return result

    def delete(self, id):
        def operation():
            self.require_user()
            organization = self._owned(id)
            db.session.delete(organization)
            db.session.flush()
            return None

        self.mutate('delete', operation)
        # Scoped rows went with the organization in the database cascade
        self.cache.invalidate_tenancy(id)
        if self.tenancy.organization_id == id:
            self.tenancy.set_current(None)

    def select(self, id):
        """
        Make the organization the active tenancy; None selects personal mode.

        Raises:
            NotFoundError: If the user is not a member of the organization
        """
        if id is None:
            return self.tenancy.set_current(None)
        return self.tenancy.set_current(self.get(id))

    def _owned(self, id):
        organization = self._member_query().filter(Organization.id == id).first()
        if organization is None:
            raise NotFoundError('Organization not found')
        if not organization.is_owner(self.user_id):
            raise AccessError('Only the organization owner can change it')
        return organization

    def _clean(self, payload, partial):
        if not isinstance(payload, dict):
            raise ValidationError('Request body must be a JSON object')
        data = {key: payload[key] for key in self.writable_fields if key in payload}
        for key, value in data.items():
            if value is not None and not isinstance(value, str):
                raise ValidationError(f"{key} must be a string", field=key)
        if not partial or 'name' in data:
            name = (data.get('name') or '').strip()
            if not name:
                raise ValidationError('name is required', field='name')
            data['name'] = name
        return data
