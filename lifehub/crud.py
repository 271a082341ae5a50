"""JSON collection/item routes shared by the resource blueprints."""

from flask import jsonify, request
from lifehub.auth.guards import require_auth


def json_body():
    return request.get_json(silent=True) or {}


def register_resource(blueprint, service_class, url, plural, singular, list_args=None):
    """
    Add list, create, get, update and delete routes for a scoped service.

    Args:
        blueprint: Blueprint to attach the routes to
        service_class: ScopedResourceService subclass
        url: Collection path relative to the blueprint prefix
        plural: Response key of the collection
        singular: Response key of one record
        list_args: Optional callable reading list filters from request.args

    Returns:
        200: {plural: [...]} or {singular: {...}}
        201: Created record
        400/403/404: Error raised by the service
    """
    endpoint = plural.replace('-', '_')

    def list_view():
        args = list_args() if list_args else ()
        return jsonify({plural: service_class.for_request().list(*args)}), 200

    def create_view():
        record = service_class.for_request().create(json_body())
        return jsonify({
            'message': f'{service_class.label} created successfully',
            singular: record
        }), 201

    def get_view(id):
        return jsonify({singular: service_class.for_request().get(id)}), 200

    def update_view(id):
        record = service_class.for_request().update(id, json_body())
        return jsonify({
            'message': f'{service_class.label} updated successfully',
            singular: record
        }), 200

    def delete_view(id):
        service_class.for_request().delete(id)
        return jsonify({'message': f'{service_class.label} deleted successfully'}), 200

    blueprint.add_url_rule(
        url, f'list_{endpoint}', require_auth(list_view), methods=['GET'])
    blueprint.add_url_rule(
        url, f'create_{endpoint}', require_auth(create_view), methods=['POST'])
    blueprint.add_url_rule(
        f'{url}/<id>', f'get_{endpoint}', require_auth(get_view), methods=['GET'])
    blueprint.add_url_rule(
        f'{url}/<id>', f'update_{endpoint}', require_auth(update_view), methods=['PUT', 'PATCH'])
    blueprint.add_url_rule(
        f'{url}/<id>', f'delete_{endpoint}', require_auth(delete_view), methods=['DELETE'])
