"""
Dashboard Blueprint - Admin content management API
Handles: Messages, blog posts, skills, projects, certificates, page content, analytics
"""

from flask import Blueprint

dashboard_bp = Blueprint('dashboard', __name__, url_prefix='/api/admin')

from . import routes
