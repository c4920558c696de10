"""
Pages Routes - Public site content, contact form and analytics ingestion
"""

from flask import request, current_app
from werkzeug.exceptions import RequestEntityTooLarge
from schemas import EntityKind, validate
from storage import get_storage
from utils.analytics import record_event
from utils.notifications import notify_new_contact_message
from utils.responses import serialize, success, failure
from utils.security import check_rate_limit, log_ip_activity
from . import pages_bp


@pages_bp.route('/home')
def home_content():
    """Hero copy, or null if never set"""
    return success(serialize(get_storage().get_home_content()))


@pages_bp.route('/about')
def about_content():
    """About copy, or null if never set"""
    return success(serialize(get_storage().get_about_content()))


@pages_bp.route('/skills')
def list_skills():
    return success(serialize(get_storage().list_skills()))


@pages_bp.route('/projects')
def list_projects():
    return success(serialize(get_storage().list_projects()))


@pages_bp.route('/certificates')
def list_certificates():
    return success(serialize(get_storage().list_certificates()))


@pages_bp.route('/contact', methods=['POST'])
def contact():
    """Contact form processing - validates and stores the message"""
    payload = request.get_json(silent=True)

    # Honeypot spam protection
    if isinstance(payload, dict) and payload.get('website'):
        log_ip_activity('contact_honeypot')
        return success(message='Message sent successfully', status=201)

    if not check_rate_limit('contact'):
        log_ip_activity('contact_rate_limited')
        return failure('Too many requests. Please try again later.', 429)

    data = validate(EntityKind.CONTACT_MESSAGE, payload)
    message = get_storage().create_contact_message(data)
    current_app.logger.info(f"Contact message saved, message_id: {message['id']}")

    notify_new_contact_message(message)
    return success(serialize(message), message='Message sent successfully', status=201)


@pages_bp.route('/analytics', methods=['POST'])
def track_event():
    """Fire-and-forget visitor event ingestion; always reports success"""
    try:
        payload = request.get_json(silent=True)
    except RequestEntityTooLarge:
        current_app.logger.debug("Analytics event dropped: body too large")
        payload = None
    record_event(get_storage(), payload)
    return success(status=201)
