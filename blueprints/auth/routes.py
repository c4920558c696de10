"""
Auth Routes - Admin authentication
"""

from flask import request
from utils.responses import success, failure
from utils.security import get_admin_secret, verify_admin_secret, log_ip_activity
from . import auth_bp


@auth_bp.route('/admin/login', methods=['POST'])
def login():
    """Exchange the admin password for the bearer token"""
    payload = request.get_json(silent=True)
    password = payload.get('password') if isinstance(payload, dict) else None

    if verify_admin_secret(password):
        log_ip_activity('admin_login')
        return success(message='Login successful', token=get_admin_secret())

    log_ip_activity('failed_login')
    return failure('Invalid password', 401)
