from datetime import datetime

from utils.analytics import record_event, recent_events, summarize

SAMPLE_EVENTS = [
    {'eventType': 'section_view', 'page': '/', 'section': 'home', 'visitorId': 'v1'},
    {'eventType': 'section_view', 'page': '/', 'section': 'about', 'visitorId': 'v1'},
    {'eventType': 'page_view', 'page': '/blog', 'visitorId': 'v2'},
]

EXPECTED_SUMMARY = {
    'totalViews': 3,
    'uniqueVisitors': 2,
    'sectionViews': {'home': 1, 'about': 1},
    'pageViews': {'/': 2, '/blog': 1},
}


def test_summarize_counts_views_visitors_sections_and_pages():
    events = [
        {'page': '/', 'section': 'home', 'visitor_id': 'v1'},
        {'page': '/', 'section': 'about', 'visitor_id': 'v1'},
        {'page': '/blog', 'section': None, 'visitor_id': 'v2'},
    ]
    assert summarize(events) == EXPECTED_SUMMARY


def test_summarize_ignores_empty_visitor_ids():
    events = [
        {'page': '/', 'section': None, 'visitor_id': None},
        {'page': '/', 'section': '', 'visitor_id': ''},
    ]
    assert summarize(events) == {
        'totalViews': 2, 'uniqueVisitors': 0, 'sectionViews': {}, 'pageViews': {'/': 2},
    }


def test_summarize_empty_log():
    assert summarize([]) == {
        'totalViews': 0, 'uniqueVisitors': 0, 'sectionViews': {}, 'pageViews': {},
    }


def test_storage_summary_matches_event_log(storage):
    for event in SAMPLE_EVENTS:
        assert record_event(storage, event) is True

    assert storage.get_analytics_summary() == EXPECTED_SUMMARY
    assert storage.get_analytics_summary() == summarize(storage.events.all())


def test_record_event_swallows_invalid_payloads(storage):
    assert record_event(storage, {'eventType': 'page_view'}) is False
    assert record_event(storage, 'garbage') is False
    assert record_event(storage, None) is False
    assert storage.get_analytics_summary()['totalViews'] == 0


def test_recent_events_newest_first_and_limited(storage):
    for day in range(1, 6):
        storage.create_analytics_event({
            'event_type': 'page_view',
            'page': f'/day-{day}',
            'created_at': datetime(2024, 1, day),
        })

    events = recent_events(storage, 3)
    assert [e['page'] for e in events] == ['/day-5', '/day-4', '/day-3']


def test_recent_events_limit_is_clamped(app, storage):
    for day in range(1, 4):
        storage.create_analytics_event({'event_type': 'page_view', 'page': '/'})

    assert len(recent_events(storage, 0)) == 1
    assert len(recent_events(storage, 'not-a-number')) == 3
    app.config['ANALYTICS_MAX_LIMIT'] = 2
    assert len(recent_events(storage, 50)) == 2
