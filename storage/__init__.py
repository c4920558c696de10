"""
Storage Package - Swappable persistence backends behind one interface
"""

from flask import current_app

from .base import Storage
from .database import DatabaseStorage
from .memory import MemoryStorage

BACKENDS = ('database', 'memory')


def init_storage(app):
    """Build the configured storage backend and attach it to the app"""
    backend = app.config.get('STORAGE_BACKEND', 'database')
    if backend == 'memory':
        storage = MemoryStorage(data_file=app.config.get('DATA_FILE'))
    elif backend == 'database':
        storage = DatabaseStorage()
    else:
        raise ValueError(f"Unknown storage backend: {backend} (expected one of {', '.join(BACKENDS)})")

    app.extensions['storage'] = storage
    app.logger.info(f"✓ Storage backend: {storage.backend_name}")
    return storage


def get_storage():
    """Storage attached to the current application"""
    return current_app.extensions['storage']


__all__ = [
    'Storage',
    'DatabaseStorage',
    'MemoryStorage',
    'init_storage',
    'get_storage'
]
