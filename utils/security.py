"""
Security Module - Admin secret checks, client IP tracking and rate limiting
"""

import hmac
import threading
import time
from flask import request, current_app


def get_client_ip():
    """
    Get real client IP address

    X-Forwarded-For is only honoured through ProxyFix, which create_app
    installs when PROXY_FIX_X_FOR trusted hops are configured.
    """
    return request.remote_addr or 'unknown'


def _rate_limit_state():
    # Per-app so separate app instances (and tests) never share counters
    return current_app.extensions.setdefault('rate_limits', {
        'lock': threading.Lock(),
        'requests': {}  # {ip: [(timestamp, endpoint), ...]}
    })


def _prune(requests_by_ip, current_time, window):
    """Drop expired entries, and IPs left with no history"""
    for ip in list(requests_by_ip):
        history = [(ts, ep) for ts, ep in requests_by_ip[ip] if current_time - ts < window]
        if history:
            requests_by_ip[ip] = history
        else:
            del requests_by_ip[ip]


def check_rate_limit(endpoint='contact'):
    """Check if IP is within rate limit"""
    max_requests = current_app.config.get('CONTACT_RATE_LIMIT', 10)
    window = current_app.config.get('CONTACT_RATE_WINDOW', 60)
    client_ip = get_client_ip()
    current_time = time.time()
    state = _rate_limit_state()

    with state['lock']:
        _prune(state['requests'], current_time, window)
        history = state['requests'].get(client_ip, [])

        endpoint_requests = [ep for ts, ep in history if ep == endpoint]
        if len(endpoint_requests) >= max_requests:
            return False

        state['requests'][client_ip] = history + [(current_time, endpoint)]
        return True


def log_ip_activity(activity_type, details=''):
    """Log IP activity for security tracking"""
    user_agent = request.headers.get('User-Agent', 'Unknown')[:100]
    current_app.logger.info(
        f"[{activity_type}] ip={get_client_ip()} details={details} ua={user_agent}")


def get_admin_secret():
    """Configured admin password, which doubles as the bearer token"""
    return current_app.config.get('ADMIN_PASSWORD')


def verify_admin_secret(candidate):
    """Constant-time comparison of a password or token with the admin secret"""
    secret = get_admin_secret()
    if not secret or not candidate or not isinstance(candidate, str):
        return False
    return hmac.compare_digest(candidate.encode('utf-8'), secret.encode('utf-8'))


def get_bearer_token():
    """Token from an ``Authorization: Bearer <token>`` header, or None"""
    header = request.headers.get('Authorization', '')
    scheme, _, token = header.partition(' ')
    if scheme.lower() != 'bearer' or not token:
        return None
    return token


__all__ = [
    'get_client_ip',
    'check_rate_limit',
    'log_ip_activity',
    'get_admin_secret',
    'verify_admin_secret',
    'get_bearer_token'
]
