"""
Portfolio CMS - Application factory

Initializes the Flask application with configuration, storage, blueprints,
error handlers and CLI commands. All route handling is delegated to
blueprints.
"""

import os

import click
from flask import Flask
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException
from werkzeug.middleware.proxy_fix import ProxyFix

from config import get_config
from errors import PortfolioError, ConflictError
from extensions import db
from storage import init_storage, get_storage
from utils.responses import failure

# Import all blueprints
from blueprints.auth import auth_bp
from blueprints.blog import blog_bp
from blueprints.dashboard import dashboard_bp
from blueprints.pages import pages_bp


def create_app(config_name=None, **overrides):
    """
    Application Factory Pattern
    Creates and configures Flask application instance

    Args:
        config_name (str): Configuration environment name (optional)
        **overrides: Config values applied on top of the selected class

    Returns:
        Flask: Configured Flask application instance
    """

    app = Flask(__name__)

    # Load configuration
    app.config.from_object(get_config(config_name))
    app.config.update(overrides)

    app.logger.setLevel(str(app.config.get('LOG_LEVEL') or 'INFO').upper())

    if app.config.get('PROXY_FIX_X_FOR'):
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=app.config['PROXY_FIX_X_FOR'])

    if not app.config.get('ADMIN_PASSWORD'):
        app.logger.warning('ADMIN_PASSWORD is not set; admin login is disabled')

    initialize_extensions(app)
    init_storage(app)
    register_blueprints(app)
    register_error_handlers(app)
    register_hooks(app)
    register_commands(app)

    # Health check route
    @app.route('/health')
    def health_check():
        return {'status': 'ok', 'storage': get_storage().backend_name}, 200

    return app


def initialize_extensions(app):
    """Initialize Flask extensions with the app instance"""
    db.init_app(app)

    if app.config.get('STORAGE_BACKEND', 'database') != 'database':
        return

    # Create tables if they don't exist
    with app.app_context():
        try:
            db.create_all()
            # Verify connection
            db.session.execute(text('SELECT 1'))
            app.logger.info("✓ Database initialized successfully")
        except SQLAlchemyError as e:
            app.logger.error(f"✗ Database initialization failed: {str(e)}")


def register_blueprints(app):
    """Register all application blueprints"""
    app.register_blueprint(auth_bp)
    app.register_blueprint(pages_bp)
    app.register_blueprint(blog_bp)
    app.register_blueprint(dashboard_bp)


def register_error_handlers(app):
    """Map application and HTTP errors onto the JSON envelope"""

    @app.errorhandler(PortfolioError)
    def portfolio_error(e):
        if e.status_code >= 500 and not isinstance(e, ConflictError):
            app.logger.error(f"Server Error: {e.__cause__ or e}")
        return failure(e.message, e.status_code)

    @app.errorhandler(400)
    def bad_request(e):
        return failure('Bad request', 400)

    @app.errorhandler(404)
    def not_found(e):
        return failure('Not found', 404)

    @app.errorhandler(405)
    def method_not_allowed(e):
        return failure('Method not allowed', 405)

    @app.errorhandler(413)
    def payload_too_large(e):
        return failure('Request body is too large', 413)

    @app.errorhandler(Exception)
    def internal_server_error(e):
        if isinstance(e, HTTPException):
            return failure(e.name, e.code)
        app.logger.exception(f"Server Error: {str(e)}")
        return failure(PortfolioError.public_message, 500)


def register_hooks(app):
    """Register request/response hooks"""

    @app.after_request
    def add_security_headers(response):
        """Add security headers to all responses"""
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['X-Frame-Options'] = 'DENY'
        response.headers['Cache-Control'] = 'no-store'
        return response


def register_commands(app):
    """Register CLI commands"""
    from migrations.migrate_json_to_db import import_json_command

    app.cli.add_command(import_json_command)

    @app.cli.command('create-user')
    @click.argument('username')
    @click.password_option()
    @click.option('--admin', is_flag=True, help='Mark the user as an administrator.')
    def create_user_command(username, password, admin):
        """Create a user account."""
        user = get_storage().create_user(username, password, is_admin=admin)
        click.echo(f"  [OK] Created user {user['username']} ({user['id']})")


if __name__ == '__main__':
    env = os.environ.get('FLASK_ENV', 'development')
    app = create_app(env)

    # Run development server
    app.run(
        host='0.0.0.0',
        port=int(os.environ.get('PORT', 5000)),
        debug=(env == 'development')
    )
