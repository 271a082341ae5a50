"""Organization management and tenancy switching."""

from flask import Blueprint, current_app, jsonify
from flask_login import current_user
from lifehub.auth.guards import require_auth
from lifehub.crud import json_body
from lifehub.errors import ValidationError
from lifehub.resources.organizations import OrganizationService
from lifehub.tenancy.context import PERSONAL_ID, current_tenancy

organizations_bp = Blueprint('organizations', __name__, url_prefix='/api')


@organizations_bp.route('/tenancy', methods=['GET'])
@require_auth
def get_tenancy():
    """
    Active tenancy of the session.

    Returns:
        200: {"tenancy_id": ..., "mode": "personal"|"organization", "organization": {...}|null}
    """
    return jsonify(current_tenancy().to_dict()), 200


@organizations_bp.route('/tenancy', methods=['PUT'])
@require_auth
def switch_tenancy():
    """
    Select personal mode or an organization the user belongs to.

    Request Body:
        {"organization_id": "<id>"} or {"organization_id": "personal"}

    Returns:
        200: New tenancy
        400: organization_id missing
        404: Not a member of the organization
    """
    data = json_body()
    if 'organization_id' not in data:
        raise ValidationError('organization_id is required', field='organization_id')

    organization_id = data['organization_id']
    if organization_id in (None, PERSONAL_ID):
        organization_id = None

    service = OrganizationService.for_request()
    service.select(organization_id)
    current_app.logger.info(
        f"User {current_user.id} switched tenancy to {service.tenancy.tenancy_id}"
    )
    return jsonify(service.tenancy.to_dict()), 200


@organizations_bp.route('/organizations', methods=['GET'])
@require_auth
def list_organizations():
    return jsonify({'organizations': OrganizationService.for_request().list()}), 200


@organizations_bp.route('/organizations', methods=['POST'])
@require_auth
def create_organization():
    """
    Create an organization owned by the current user and switch to it.

    Returns:
        201: Organization created
        400: Name missing
    """
    service = OrganizationService.for_request()
    organization = service.create(json_body())
    return jsonify({
        'message': 'Organization created successfully',
        'organization': organization,
        'tenancy': service.tenancy.to_dict()
    }), 201


@organizations_bp.route('/organizations/<id>', methods=['GET'])
@require_auth
def get_organization(id):
    return jsonify({'organization': OrganizationService.for_request().get(id)}), 200


@organizations_bp.route('/organizations/<id>', methods=['PUT', 'PATCH'])
@require_auth
def update_organization(id):
    organization = OrganizationService.for_request().update(id, json_body())
    return jsonify({
        'message': 'Organization updated successfully',
        'organization': organization
    }), 200


@organizations_bp.route('/organizations/<id>', methods=['DELETE'])
@require_auth
def delete_organization(id):
    """
    Delete an organization owned by the current user.

    Rows scoped to the organization are removed with it. Deleting the
    selected organization switches back to personal mode.
    """
    service = OrganizationService.for_request()
    service.delete(id)
    return jsonify({
        'message': 'Organization deleted successfully',
        'tenancy': service.tenancy.to_dict()
    }), 200
