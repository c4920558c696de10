"""
Responses Module - Uniform JSON envelope: {success, data?, message?}
"""

from datetime import datetime
from flask import jsonify
from pydantic.alias_generators import to_camel

# Never leave the server
PRIVATE_FIELDS = {'password_hash'}

_UNSET = object()


def _json_value(value):
    if isinstance(value, datetime):
        text = value.isoformat()
        return text + 'Z' if value.tzinfo is None else text
    return value


def serialize(record):
    """Record dict (or list of them) with camelCase keys and ISO timestamps"""
    if record is None:
        return None
    if isinstance(record, list):
        return [serialize(item) for item in record]
    return {
        to_camel(key): _json_value(value)
        for key, value in record.items()
        if key not in PRIVATE_FIELDS
    }


def success(data=_UNSET, message=None, status=200, **extra):
    body = {'success': True}
    if message:
        body['message'] = message
    if data is not _UNSET:
        body['data'] = data
    body.update(extra)
    return jsonify(body), status


def failure(message, status):
    return jsonify({'success': False, 'message': message}), status


__all__ = ['serialize', 'success', 'failure']
