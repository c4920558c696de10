"""
Pages Blueprint - Public site content
Handles: Home/about copy, skills, projects, certificates, contact form, analytics ingestion
"""

from flask import Blueprint

pages_bp = Blueprint('pages', __name__, url_prefix='/api')

from . import routes
