"""
Dashboard Routes - Admin content management API
Every route requires the admin bearer token.
"""

from flask import request, current_app
from errors import NotFoundError
from schemas import EntityKind, validate
from storage import get_storage
from utils.analytics import recent_events
from utils.decorators import admin_required
from utils.responses import serialize, success
from . import dashboard_bp


# -----------------------------
# Messages
# -----------------------------

@dashboard_bp.route('/messages')
@admin_required
def list_messages():
    """All contact messages, newest first"""
    return success(serialize(get_storage().list_contact_messages()))


@dashboard_bp.route('/messages/<message_id>')
@admin_required
def view_message(message_id):
    message = get_storage().get_contact_message(message_id)
    if not message:
        raise NotFoundError('Message not found')
    return success(serialize(message))


@dashboard_bp.route('/messages/<message_id>/read', methods=['PATCH'])
@admin_required
def mark_message_read(message_id):
    message = get_storage().mark_message_as_read(message_id)
    if not message:
        raise NotFoundError('Message not found')
    return success(serialize(message), message='Message marked as read')


@dashboard_bp.route('/messages/<message_id>', methods=['DELETE'])
@admin_required
def delete_message(message_id):
    if not get_storage().delete_contact_message(message_id):
        raise NotFoundError('Message not found')
    current_app.logger.info(f"Deleted contact message {message_id}")
    return success(message='Message deleted')


# -----------------------------
# Page content (singletons)
# -----------------------------

@dashboard_bp.route('/home', methods=['POST', 'PUT'])
@admin_required
def update_home():
    data = validate(EntityKind.HOME_CONTENT, request.get_json(silent=True))
    content = get_storage().upsert_home_content(data)
    current_app.logger.info("Home content updated")
    return success(serialize(content), message='Home content updated')


@dashboard_bp.route('/about', methods=['POST', 'PUT'])
@admin_required
def update_about():
    data = validate(EntityKind.ABOUT_CONTENT, request.get_json(silent=True))
    content = get_storage().upsert_about_content(data)
    current_app.logger.info("About content updated")
    return success(serialize(content), message='About content updated')


# -----------------------------
# Analytics
# -----------------------------

@dashboard_bp.route('/analytics')
@admin_required
def analytics():
    """Summary statistics plus the most recent raw events"""
    storage = get_storage()
    return success({
        'summary': storage.get_analytics_summary(),
        'recentEvents': serialize(recent_events(storage, request.args.get('limit')))
    })


# -----------------------------
# Generic collection CRUD
# -----------------------------

def register_crud_routes(kind, path, label):
    """
    Register list/create/view/update/delete routes for one collection kind.

    Args:
        kind (EntityKind): Collection to expose
        path (str): URL segment under /api/admin
        label (str): Human-readable singular name for messages
    """
    name = kind.value

    def repository():
        return get_storage().repository(kind)

    @admin_required
    def list_records():
        return success(serialize(repository().list()))

    @admin_required
    def create_record():
        data = validate(kind, request.get_json(silent=True))
        record = repository().create(data)
        current_app.logger.info(f"Created {name} record {record['id']}")
        return success(serialize(record), message=f'{label} created', status=201)

    @admin_required
    def view_record(record_id):
        record = repository().get(record_id)
        if not record:
            raise NotFoundError(f'{label} not found')
        return success(serialize(record))

    @admin_required
    def update_record(record_id):
        data = validate(kind, request.get_json(silent=True), partial=True)
        record = repository().update(record_id, data)
        if not record:
            raise NotFoundError(f'{label} not found')
        current_app.logger.info(f"Updated {name} record {record_id}")
        return success(serialize(record), message=f'{label} updated')

    @admin_required
    def delete_record(record_id):
        if not repository().delete(record_id):
            raise NotFoundError(f'{label} not found')
        current_app.logger.info(f"Deleted {name} record {record_id}")
        return success(message=f'{label} deleted')

    dashboard_bp.add_url_rule(f'/{path}', f'list_{name}', list_records, methods=['GET'])
    dashboard_bp.add_url_rule(f'/{path}', f'create_{name}', create_record, methods=['POST'])
    dashboard_bp.add_url_rule(f'/{path}/<record_id>', f'view_{name}', view_record, methods=['GET'])
    dashboard_bp.add_url_rule(f'/{path}/<record_id>', f'update_{name}', update_record,
                              methods=['PATCH', 'PUT'])
    dashboard_bp.add_url_rule(f'/{path}/<record_id>', f'delete_{name}', delete_record,
                              methods=['DELETE'])


register_crud_routes(EntityKind.BLOG_POST, 'blog', 'Blog post')
register_crud_routes(EntityKind.SKILL, 'skills', 'Skill')
register_crud_routes(EntityKind.PROJECT, 'projects', 'Project')
register_crud_routes(EntityKind.CERTIFICATE, 'certificates', 'Certificate')
