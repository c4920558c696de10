import os

PG_VARIABLES = ('PGUSER', 'PGPASSWORD', 'PGHOST', 'PGPORT', 'PGDATABASE')


def database_uri(environ=os.environ, default='sqlite:///portfolio.db'):
    """
    SQLAlchemy URI from DATABASE_URL, else from the PG* variables, else SQLite

    Heroku-style ``postgres://`` URLs are rewritten to ``postgresql://``.
    """
    url = environ.get('DATABASE_URL')
    if not url and all(environ.get(name) for name in PG_VARIABLES):
        user, password, host, port, name = (environ[var] for var in PG_VARIABLES)
        url = f"postgresql://{user}:{password}@{host}:{port}/{name}"

    if url and url.startswith('postgres://'):
        url = 'postgresql://' + url[len('postgres://'):]
    return url or default


class Config:
    """Base configuration"""

    # Admin Settings
    ADMIN_PASSWORD = os.environ.get('ADMIN_PASSWORD')

    # Database Settings
    SQLALCHEMY_DATABASE_URI = database_uri()
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_recycle': 3600,
        'pool_pre_ping': True,
    }
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Storage Settings
    STORAGE_BACKEND = os.environ.get('STORAGE_BACKEND', 'database')  # database, memory
    DATA_FILE = os.environ.get('DATA_FILE')  # JSON file for the memory backend

    # Request Settings
    MAX_CONTENT_LENGTH = 1 * 1024 * 1024  # 1MB
    JSON_AS_ASCII = False
    # Reverse proxies in front of the app; X-Forwarded-For is ignored when 0
    PROXY_FIX_X_FOR = int(os.environ.get('PROXY_FIX_X_FOR', '0'))

    # Contact form rate limiting
    CONTACT_RATE_LIMIT = int(os.environ.get('CONTACT_RATE_LIMIT', '10'))
    CONTACT_RATE_WINDOW = int(os.environ.get('CONTACT_RATE_WINDOW', '60'))

    # Analytics
    ANALYTICS_DEFAULT_LIMIT = 100
    ANALYTICS_MAX_LIMIT = 1000

    # Admin Notification Settings
    ADMIN_TELEGRAM_BOT_TOKEN = os.environ.get('ADMIN_TELEGRAM_BOT_TOKEN')
    ADMIN_TELEGRAM_CHAT_ID = os.environ.get('ADMIN_TELEGRAM_CHAT_ID')

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    TESTING = False
    ADMIN_PASSWORD = Config.ADMIN_PASSWORD or 'admin123'


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False
    TESTING = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_size': 10,
        'pool_recycle': 3600,
        'pool_pre_ping': True,
    }


class TestingConfig(Config):
    """Testing configuration"""
    DEBUG = True
    TESTING = True
    ADMIN_PASSWORD = 'admin123'
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    # For in-memory SQLite during tests, keep engine options empty to avoid
    # passing invalid pool settings like pool_size to SQLite's StaticPool.
    SQLALCHEMY_ENGINE_OPTIONS = {}
    STORAGE_BACKEND = 'database'
    DATA_FILE = None
    ADMIN_TELEGRAM_BOT_TOKEN = None
    ADMIN_TELEGRAM_CHAT_ID = None


# Select configuration based on environment
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}


def get_config(config_name=None):
    """Get configuration by name, falling back to FLASK_ENV"""
    env = config_name or os.environ.get('FLASK_ENV', 'development')
    return config.get(env, config['default'])
