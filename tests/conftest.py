import pytest

from app import create_app
from storage import get_storage

ADMIN_PASSWORD = 'admin123'


@pytest.fixture(params=['database', 'memory'])
def app(request):
    """Testing app, once per storage backend"""
    return create_app('testing', STORAGE_BACKEND=request.param)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def storage(app):
    with app.app_context():
        yield get_storage()


@pytest.fixture
def auth_headers():
    return {'Authorization': f'Bearer {ADMIN_PASSWORD}'}


@pytest.fixture
def blog_payload():
    return {
        'title': 'Building a portfolio API',
        'slug': 'building-a-portfolio-api',
        'excerpt': 'Notes on a tiny content API.',
        'content': 'A long enough body of markdown text to pass the fifty character rule.',
        'tags': ['flask', 'python'],
        'published': True,
    }
