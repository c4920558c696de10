import logging

import pytest

from app import create_app

CONTACT = {'name': 'Ada Lovelace', 'email': 'ada@example.com', 'message': 'I would like to hire you.'}


def test_health(client):
    response = client.get('/health')
    assert response.status_code == 200
    assert response.get_json()['status'] == 'ok'


def test_end_to_end_skill_lifecycle(client):
    response = client.post('/api/admin/login', json={'password': 'admin123'})
    assert response.status_code == 200
    body = response.get_json()
    assert body['success'] is True
    assert body['token'] == 'admin123'

    headers = {'Authorization': f"Bearer {body['token']}"}
    response = client.post('/api/admin/skills', headers=headers,
                           json={'name': 'Go', 'category': 'backend', 'proficiency': 70})
    assert response.status_code == 201
    skill = response.get_json()['data']
    assert skill['name'] == 'Go'
    assert skill['proficiency'] == 70
    assert skill['id']
    assert skill['createdAt'].endswith('Z')

    assert [s['id'] for s in client.get('/api/skills').get_json()['data']] == [skill['id']]

    response = client.delete(f"/api/admin/skills/{skill['id']}", headers=headers)
    assert response.status_code == 200
    assert response.get_json()['success'] is True

    assert client.get('/api/skills').get_json()['data'] == []


def test_login_rejects_wrong_password(client):
    for payload in ({'password': 'wrong'}, {}, None):
        response = client.post('/api/admin/login', json=payload)
        assert response.status_code == 401
        assert response.get_json() == {'success': False, 'message': 'Invalid password'}


ADMIN_CALLS = [
    ('get', '/api/admin/messages', None),
    ('get', '/api/admin/messages/some-id', None),
    ('patch', '/api/admin/messages/some-id/read', None),
    ('delete', '/api/admin/messages/some-id', None),
    ('get', '/api/admin/blog', None),
    ('post', '/api/admin/blog', {'title': 'x'}),
    ('patch', '/api/admin/blog/some-id', {'title': 'xyz'}),
    ('delete', '/api/admin/blog/some-id', None),
    ('post', '/api/admin/skills', {'name': 'Go', 'category': 'backend'}),
    ('put', '/api/admin/skills/some-id', {'name': 'Go'}),
    ('delete', '/api/admin/skills/some-id', None),
    ('post', '/api/admin/projects', {'title': 'abc', 'description': 'long description'}),
    ('delete', '/api/admin/projects/some-id', None),
    ('post', '/api/admin/certificates', {'title': 'abc', 'issuer': 'AWS', 'issueDate': '2024'}),
    ('delete', '/api/admin/certificates/some-id', None),
    ('post', '/api/admin/home', {'heroTitle': 'Hacked'}),
    ('put', '/api/admin/about', {'title': 'Hacked'}),
    ('get', '/api/admin/analytics', None),
]


@pytest.mark.parametrize('headers', [
    {},
    {'Authorization': 'Bearer wrong'},
    {'Authorization': 'admin123'},
    {'Authorization': 'Basic admin123'},
])
def test_admin_routes_require_bearer_token(client, headers):
    for method, url, payload in ADMIN_CALLS:
        response = getattr(client, method)(url, json=payload, headers=headers)
        assert response.status_code == 401, url
        assert response.get_json() == {'success': False, 'message': 'Unauthorized'}

    assert client.get('/api/skills').get_json()['data'] == []
    assert client.get('/api/projects').get_json()['data'] == []
    assert client.get('/api/certificates').get_json()['data'] == []
    assert client.get('/api/home').get_json()['data'] is None
    assert client.get('/api/about').get_json()['data'] is None


def test_unauthorized_create_then_authorized_create(client, auth_headers):
    payload = {'name': 'Go', 'category': 'backend'}
    assert client.post('/api/admin/skills', json=payload).status_code == 401
    assert client.get('/api/skills').get_json()['data'] == []
    assert client.post('/api/admin/skills', json=payload, headers=auth_headers).status_code == 201
    assert len(client.get('/api/skills').get_json()['data']) == 1


def test_contact_form_creates_unread_message(client, auth_headers):
    response = client.post('/api/contact', json=CONTACT)
    assert response.status_code == 201
    body = response.get_json()
    assert body['success'] is True
    assert body['message'] == 'Message sent successfully'
    assert body['data']['isRead'] is False

    messages = client.get('/api/admin/messages', headers=auth_headers).get_json()['data']
    assert len(messages) == 1
    assert messages[0]['email'] == 'ada@example.com'
    assert messages[0]['createdAt']


def test_contact_form_validation_error(client, auth_headers):
    response = client.post('/api/contact', json=dict(CONTACT, email='nope', message='short'))
    assert response.status_code == 400
    body = response.get_json()
    assert body['success'] is False
    assert 'Please enter a valid email address' in body['message']
    assert 'Message must be at least 10 characters' in body['message']

    assert client.get('/api/admin/messages', headers=auth_headers).get_json()['data'] == []


def test_contact_form_rejects_non_json_body(client):
    response = client.post('/api/contact', data='name=Ada', content_type='text/plain')
    assert response.status_code == 400
    assert response.get_json()['success'] is False


def test_contact_honeypot_is_silently_dropped(client, auth_headers):
    response = client.post('/api/contact', json=dict(CONTACT, website='http://spam.example'))
    assert response.status_code == 201
    assert response.get_json()['success'] is True
    assert client.get('/api/admin/messages', headers=auth_headers).get_json()['data'] == []


def test_contact_rate_limit():
    app = create_app('testing', CONTACT_RATE_LIMIT=2)
    client = app.test_client()
    assert client.post('/api/contact', json=CONTACT).status_code == 201
    assert client.post('/api/contact', json=CONTACT).status_code == 201
    response = client.post('/api/contact', json=CONTACT)
    assert response.status_code == 429
    assert response.get_json()['success'] is False


def test_contact_rate_limit_ignores_spoofed_forwarded_for():
    app = create_app('testing', CONTACT_RATE_LIMIT=2)
    client = app.test_client()
    codes = [
        client.post('/api/contact', json=CONTACT,
                    headers={'X-Forwarded-For': f'10.0.0.{i}'}).status_code
        for i in range(5)
    ]
    assert codes == [201, 201, 429, 429, 429]
    assert list(app.extensions['rate_limits']['requests']) == ['127.0.0.1']


def test_forwarded_for_is_trusted_behind_configured_proxy():
    app = create_app('testing', CONTACT_RATE_LIMIT=1, PROXY_FIX_X_FOR=1)
    client = app.test_client()
    for i in range(3):
        response = client.post('/api/contact', json=CONTACT,
                               headers={'X-Forwarded-For': f'10.0.0.{i}'})
        assert response.status_code == 201
    response = client.post('/api/contact', json=CONTACT, headers={'X-Forwarded-For': '10.0.0.0'})
    assert response.status_code == 429


def test_rate_limit_forgets_expired_clients():
    app = create_app('testing', CONTACT_RATE_WINDOW=0)
    client = app.test_client()
    for i in range(5):
        response = client.post('/api/contact', json=CONTACT,
                               environ_base={'REMOTE_ADDR': f'192.168.1.{i}'})
        assert response.status_code == 201
    assert list(app.extensions['rate_limits']['requests']) == ['192.168.1.4']


def test_lowercase_log_level_is_accepted():
    app = create_app('testing', LOG_LEVEL='debug')
    assert app.logger.level == logging.DEBUG


def test_oversized_analytics_event_still_reports_success():
    app = create_app('testing', MAX_CONTENT_LENGTH=64)
    response = app.test_client().post('/api/analytics', data='{"page": "' + 'x' * 200 + '"}',
                                      content_type='application/json')
    assert response.status_code == 201
    assert response.get_json()['success'] is True


def test_message_read_and_delete(client, auth_headers):
    message_id = client.post('/api/contact', json=CONTACT).get_json()['data']['id']

    response = client.get(f'/api/admin/messages/{message_id}', headers=auth_headers)
    assert response.get_json()['data']['message'] == CONTACT['message']

    response = client.patch(f'/api/admin/messages/{message_id}/read', headers=auth_headers)
    assert response.status_code == 200
    assert response.get_json()['data']['isRead'] is True

    assert client.delete(f'/api/admin/messages/{message_id}', headers=auth_headers).status_code == 200
    response = client.delete(f'/api/admin/messages/{message_id}', headers=auth_headers)
    assert response.status_code == 404
    assert response.get_json() == {'success': False, 'message': 'Message not found'}
    assert client.patch(f'/api/admin/messages/{message_id}/read', headers=auth_headers).status_code == 404


def test_public_blog_only_shows_published_posts(client, auth_headers, blog_payload):
    client.post('/api/admin/blog', json=blog_payload, headers=auth_headers)
    draft = dict(blog_payload, slug='secret-draft', published=False)
    draft_id = client.post('/api/admin/blog', json=draft, headers=auth_headers).get_json()['data']['id']

    posts = client.get('/api/blog').get_json()['data']
    assert [p['slug'] for p in posts] == [blog_payload['slug']]
    assert posts[0]['tags'] == ['flask', 'python']

    response = client.get(f"/api/blog/{blog_payload['slug']}")
    assert response.status_code == 200
    assert response.get_json()['data']['title'] == blog_payload['title']

    assert client.get('/api/blog/secret-draft').status_code == 404
    assert client.get('/api/blog/does-not-exist').status_code == 404

    all_posts = client.get('/api/admin/blog', headers=auth_headers).get_json()['data']
    assert len(all_posts) == 2

    response = client.patch(f'/api/admin/blog/{draft_id}', json={'published': True}, headers=auth_headers)
    assert response.status_code == 200
    assert client.get('/api/blog/secret-draft').status_code == 200


def test_blog_invalid_slug_is_not_persisted(client, auth_headers, blog_payload):
    response = client.post('/api/admin/blog', json=dict(blog_payload, slug='Not A Slug'),
                           headers=auth_headers)
    assert response.status_code == 400
    assert 'Slug must be lowercase with hyphens only' in response.get_json()['message']
    assert client.get('/api/admin/blog', headers=auth_headers).get_json()['data'] == []


def test_blog_duplicate_slug_conflict(client, auth_headers, blog_payload):
    assert client.post('/api/admin/blog', json=blog_payload, headers=auth_headers).status_code == 201
    response = client.post('/api/admin/blog', json=blog_payload, headers=auth_headers)
    assert response.status_code == 409
    assert response.get_json() == {
        'success': False,
        'message': 'A blog post with this slug already exists',
    }
    assert len(client.get('/api/admin/blog', headers=auth_headers).get_json()['data']) == 1


def test_update_validates_before_touching_storage(client, auth_headers):
    skill = client.post('/api/admin/skills', json={'name': 'Go', 'category': 'backend'},
                        headers=auth_headers).get_json()['data']

    response = client.patch(f"/api/admin/skills/{skill['id']}", json={'proficiency': 150},
                            headers=auth_headers)
    assert response.status_code == 400

    response = client.put(f"/api/admin/skills/{skill['id']}", json={'proficiency': 80},
                          headers=auth_headers)
    assert response.status_code == 200
    assert response.get_json()['data']['proficiency'] == 80
    assert response.get_json()['data']['name'] == 'Go'

    response = client.patch('/api/admin/skills/missing', json={'proficiency': 80}, headers=auth_headers)
    assert response.status_code == 404
    assert response.get_json()['message'] == 'Skill not found'


def test_project_and_certificate_crud(client, auth_headers):
    project = client.post('/api/admin/projects', headers=auth_headers, json={
        'title': 'Portfolio CMS',
        'description': 'Content API for my site',
        'techStack': ['Python', 'Flask'],
        'category': 'web',
        'githubUrl': 'https://github.com/someone/portfolio',
    }).get_json()['data']
    assert project['techStack'] == ['Python', 'Flask']
    assert project['featured'] is False

    certificate = client.post('/api/admin/certificates', headers=auth_headers, json={
        'title': 'Solutions Architect',
        'issuer': 'AWS',
        'issueDate': '2024-05',
        'credentialUrl': 'https://aws.example.com/cert/123',
    }).get_json()['data']
    assert certificate['expiryDate'] is None

    response = client.get(f"/api/admin/projects/{project['id']}", headers=auth_headers)
    assert response.get_json()['data']['title'] == 'Portfolio CMS'

    updated = client.patch(f"/api/admin/certificates/{certificate['id']}", headers=auth_headers,
                           json={'expiryDate': '2027-05'}).get_json()['data']
    assert updated['expiryDate'] == '2027-05'

    assert len(client.get('/api/projects').get_json()['data']) == 1
    assert len(client.get('/api/certificates').get_json()['data']) == 1

    client.delete(f"/api/admin/projects/{project['id']}", headers=auth_headers)
    assert client.get('/api/projects').get_json()['data'] == []


def test_home_and_about_upsert(client, auth_headers):
    assert client.get('/api/home').get_json() == {'success': True, 'data': None}

    client.post('/api/admin/home', json={'heroTitle': 'Hello', 'ctaText': 'Hire me'},
                headers=auth_headers)
    response = client.put('/api/admin/home', json={'heroTitle': 'Hi', 'heroSubtitle': 'Developer'},
                          headers=auth_headers)
    assert response.status_code == 200

    home = client.get('/api/home').get_json()['data']
    assert home['heroTitle'] == 'Hi'
    assert home['heroSubtitle'] == 'Developer'
    assert home['ctaText'] is None
    assert 'slot' not in home

    client.post('/api/admin/about', json={'title': 'About me', 'bio': 'I build things.'},
                headers=auth_headers)
    about = client.get('/api/about').get_json()['data']
    assert about['bio'] == 'I build things.'


def test_analytics_ingestion_is_fire_and_forget(client, auth_headers):
    events = [
        {'eventType': 'section_view', 'page': '/', 'section': 'home', 'visitorId': 'v1'},
        {'eventType': 'section_view', 'page': '/', 'section': 'about', 'visitorId': 'v1'},
        {'eventType': 'page_view', 'page': '/blog', 'visitorId': 'v2'},
    ]
    for event in events:
        response = client.post('/api/analytics', json=event)
        assert response.status_code == 201
        assert response.get_json()['success'] is True

    for bad in ({'page': '/'}, {}, None):
        response = client.post('/api/analytics', json=bad)
        assert response.status_code == 201
        assert response.get_json()['success'] is True
    response = client.post('/api/analytics', data='{not json', content_type='application/json')
    assert response.status_code == 201

    response = client.get('/api/admin/analytics?limit=2', headers=auth_headers)
    data = response.get_json()['data']
    assert data['summary'] == {
        'totalViews': 3,
        'uniqueVisitors': 2,
        'sectionViews': {'home': 1, 'about': 1},
        'pageViews': {'/': 2, '/blog': 1},
    }
    assert len(data['recentEvents']) == 2
    assert data['recentEvents'][0]['eventType']


def test_unknown_route_and_method_use_envelope(client):
    response = client.get('/api/nothing-here')
    assert response.status_code == 404
    assert response.get_json() == {'success': False, 'message': 'Not found'}

    response = client.delete('/api/skills')
    assert response.status_code == 405
    assert response.get_json()['success'] is False


def test_storage_errors_are_generic(client, auth_headers, monkeypatch):
    from errors import StorageError
    from storage import get_storage

    with client.application.app_context():
        storage = get_storage()

    def broken(*args, **kwargs):
        raise StorageError()

    monkeypatch.setattr(type(storage), 'list_skills', broken)
    response = client.get('/api/skills')
    assert response.status_code == 500
    assert response.get_json() == {'success': False, 'message': 'An error occurred. Please try again.'}


def test_unexpected_errors_are_generic(client, monkeypatch):
    from storage import get_storage

    with client.application.app_context():
        storage = get_storage()

    def broken(*args, **kwargs):
        raise RuntimeError('database password is hunter2')

    monkeypatch.setattr(type(storage), 'list_projects', broken)
    response = client.get('/api/projects')
    assert response.status_code == 500
    assert 'hunter2' not in response.get_data(as_text=True)
