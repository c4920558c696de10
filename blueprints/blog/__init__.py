"""
Blog Blueprint - Public blog
Handles: Published post listing and post detail by slug
"""

from flask import Blueprint

blog_bp = Blueprint('blog', __name__, url_prefix='/api/blog')

from . import routes
