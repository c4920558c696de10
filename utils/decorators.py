"""
Decorators Module - Authentication and authorization decorators
"""

from functools import wraps
from flask import request
from errors import UnauthorizedError
from .security import get_bearer_token, verify_admin_secret, log_ip_activity


def admin_required(f):
    """Decorator to require the admin bearer token"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not verify_admin_secret(get_bearer_token()):
            log_ip_activity('unauthorized_admin_request', f"{request.method} {request.path}")
            raise UnauthorizedError()
        return f(*args, **kwargs)
    return decorated_function
