"""
Utils Package - Centralized utility modules initialization
"""

from .decorators import admin_required
from .responses import serialize, success, failure
from .analytics import summarize, record_event, clamp_limit, recent_events
from .notifications import (
    get_admin_telegram_credentials,
    send_admin_telegram_notification,
    notify_new_contact_message
)
from .security import (
    get_client_ip,
    check_rate_limit,
    log_ip_activity,
    get_admin_secret,
    verify_admin_secret,
    get_bearer_token
)

__all__ = [
    # Decorators
    'admin_required',

    # Responses
    'serialize',
    'success',
    'failure',

    # Analytics
    'summarize',
    'record_event',
    'clamp_limit',
    'recent_events',

    # Notifications
    'get_admin_telegram_credentials',
    'send_admin_telegram_notification',
    'notify_new_contact_message',

    # Security
    'get_client_ip',
    'check_rate_limit',
    'log_ip_activity',
    'get_admin_secret',
    'verify_admin_secret',
    'get_bearer_token'
]
