"""
Analytics Module - Visitor event ingestion and summary statistics
"""

from flask import current_app
from errors import PortfolioError
from schemas import EntityKind, validate


def summarize(events):
    """
    Compute summary statistics over a full event log.

    Args:
        events (iterable): Event records (dicts with page, section, visitor_id)

    Returns:
        dict: totalViews, uniqueVisitors, sectionViews, pageViews
    """
    total = 0
    visitors = set()
    section_views = {}
    page_views = {}

    for event in events:
        total += 1
        if event.get('visitor_id'):
            visitors.add(event['visitor_id'])
        section = event.get('section')
        if section:
            section_views[section] = section_views.get(section, 0) + 1
        page = event.get('page')
        page_views[page] = page_views.get(page, 0) + 1

    return {
        'totalViews': total,
        'uniqueVisitors': len(visitors),
        'sectionViews': section_views,
        'pageViews': page_views
    }


def record_event(storage, payload):
    """
    Validate and append one visitor event. Never raises.

    Returns:
        bool: True if the event was stored
    """
    try:
        data = validate(EntityKind.ANALYTICS_EVENT, payload)
        storage.create_analytics_event(data)
        return True
    except PortfolioError as e:
        current_app.logger.debug(f"Analytics event dropped: {e.message}")
    except Exception as e:
        current_app.logger.warning(f"Analytics event failed: {str(e)}")
    return False


def clamp_limit(raw_limit):
    """Parse a ?limit= value into the configured 1..ANALYTICS_MAX_LIMIT range"""
    default = current_app.config.get('ANALYTICS_DEFAULT_LIMIT', 100)
    maximum = current_app.config.get('ANALYTICS_MAX_LIMIT', 1000)
    try:
        limit = int(raw_limit) if raw_limit is not None else default
    except (TypeError, ValueError):
        limit = default
    return max(1, min(limit, maximum))


def recent_events(storage, limit=None):
    """Most recent events, newest first"""
    return storage.get_analytics_events(clamp_limit(limit))


__all__ = [
    'summarize',
    'record_event',
    'clamp_limit',
    'recent_events'
]
