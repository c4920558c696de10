"""
Auth Blueprint - Admin authentication
Handles: Admin login (shared-secret bearer token)
"""

from flask import Blueprint

auth_bp = Blueprint('auth', __name__, url_prefix='/api')

from . import routes
