"""
Memory Storage - Dictionary-backed storage with optional JSON file persistence

Every table lives in a dict guarded by one lock, so check-then-write
sequences (slug uniqueness, singleton upserts) are atomic within the
process. When ``data_file`` is set, each write is flushed to disk before
it becomes visible; a failed flush restores the previous table.
"""

import copy
import json
import logging
import os
import threading
import uuid
from datetime import datetime

from errors import ConflictError, StorageError
from schemas import EntityKind, TIMESTAMPED_KINDS
from utils.analytics import summarize
from .base import (
    CONFLICT_MESSAGES, CREATED_AT_KINDS, UNIQUE_FIELDS,
    EventLog, Repository, SingletonRepository, Storage
)

logger = logging.getLogger(__name__)

DATETIME_FIELDS = ('created_at', 'updated_at')


def _encode(record):
    return {
        key: value.isoformat() if isinstance(value, datetime) else value
        for key, value in record.items()
    }


def _decode(record):
    record = dict(record)
    for key in DATETIME_FIELDS:
        if isinstance(record.get(key), str):
            record[key] = datetime.fromisoformat(record[key])
    return record


def _newest_first(records):
    # reversed() keeps later inserts first when timestamps tie
    return sorted(reversed(records), key=lambda r: r['created_at'], reverse=True)


class MemoryRepository(Repository):

    def __init__(self, kind, storage):
        super().__init__(kind)
        self.storage = storage

    @property
    def _table(self):
        return self.storage._tables[self.kind.value]

    def _check_unique(self, record, exclude_id=None):
        for field in UNIQUE_FIELDS.get(self.kind, ()):
            for other in self._table.values():
                if other['id'] != exclude_id and other.get(field) == record.get(field):
                    raise ConflictError(CONFLICT_MESSAGES[self.kind])

    def create(self, data):
        now = datetime.utcnow()
        record = copy.deepcopy(data)
        record['id'] = record.get('id') or str(uuid.uuid4())
        if self.kind in CREATED_AT_KINDS:
            record['created_at'] = record.get('created_at') or now
        if self.kind in TIMESTAMPED_KINDS:
            record['updated_at'] = record.get('updated_at') or now
        if self.kind == EntityKind.CONTACT_MESSAGE:
            record.setdefault('is_read', False)

        with self.storage._lock:
            self._check_unique(record)
            table = dict(self._table)
            table[record['id']] = record
            self.storage._commit(self.kind, table)
        return copy.deepcopy(record)

    def _matching(self, filters):
        return [
            record for record in self._table.values()
            if all(record.get(key) == value for key, value in filters.items())
        ]

    def list(self, **filters):
        with self.storage._lock:
            records = self._matching(filters)
            if self.kind in CREATED_AT_KINDS:
                records = _newest_first(records)
            return copy.deepcopy(records)

    def get(self, record_id):
        with self.storage._lock:
            record = self._table.get(record_id)
            return copy.deepcopy(record) if record else None

    def find_one(self, **filters):
        with self.storage._lock:
            records = self._matching(filters)
            return copy.deepcopy(records[0]) if records else None

    def update(self, record_id, data):
        with self.storage._lock:
            existing = self._table.get(record_id)
            if existing is None:
                return None
            record = dict(existing, **copy.deepcopy(data))
            record['id'] = record_id
            if self.kind in TIMESTAMPED_KINDS:
                record['updated_at'] = datetime.utcnow()
            self._check_unique(record, exclude_id=record_id)
            table = dict(self._table)
            table[record_id] = record
            self.storage._commit(self.kind, table)
            return copy.deepcopy(record)

    def delete(self, record_id):
        with self.storage._lock:
            if record_id not in self._table:
                return False
            table = dict(self._table)
            del table[record_id]
            self.storage._commit(self.kind, table)
            return True


class MemorySingletonRepository(SingletonRepository):

    def __init__(self, kind, storage):
        super().__init__(kind)
        self.storage = storage

    def get(self):
        with self.storage._lock:
            table = self.storage._tables[self.kind.value]
            for record in table.values():
                return copy.deepcopy(record)
            return None

    def upsert(self, data):
        with self.storage._lock:
            table = self.storage._tables[self.kind.value]
            existing = next(iter(table.values()), None)
            if existing:
                record = dict(existing, **copy.deepcopy(data))
            else:
                record = dict(copy.deepcopy(data), id=str(uuid.uuid4()))
            record['updated_at'] = datetime.utcnow()
            self.storage._commit(self.kind, {record['id']: record})
            return copy.deepcopy(record)


class MemoryEventLog(EventLog):

    def __init__(self, storage):
        self.repository = MemoryRepository(EntityKind.ANALYTICS_EVENT, storage)

    def append(self, data):
        return self.repository.create(data)

    def recent(self, limit):
        return self.repository.list()[:limit]

    def all(self):
        return list(reversed(self.repository.list()))

    def summary(self):
        return summarize(self.all())


class MemoryStorage(Storage):
    """In-process storage, optionally persisted to a JSON file"""

    backend_name = 'memory'

    def __init__(self, data_file=None):
        self._lock = threading.RLock()
        self._tables = {kind.value: {} for kind in EntityKind}
        self.data_file = data_file
        self._repositories = {}
        self._singletons = {}
        self._events = MemoryEventLog(self)
        if data_file and os.path.exists(data_file):
            self._load()

    def repository(self, kind):
        kind = EntityKind(kind)
        if kind not in self._repositories:
            self._repositories[kind] = MemoryRepository(kind, self)
        return self._repositories[kind]

    def singleton(self, kind):
        kind = EntityKind(kind)
        if kind not in self._singletons:
            self._singletons[kind] = MemorySingletonRepository(kind, self)
        return self._singletons[kind]

    @property
    def events(self):
        return self._events

    def export(self):
        """Snapshot of every table as lists of records"""
        with self._lock:
            return {
                name: copy.deepcopy(list(table.values()))
                for name, table in self._tables.items()
            }

    def _commit(self, kind, table):
        previous = self._tables[kind.value]
        self._tables[kind.value] = table
        try:
            self._flush()
        except (OSError, TypeError, ValueError) as e:
            self._tables[kind.value] = previous
            logger.error(f"Error saving data to {self.data_file}: {str(e)}")
            raise StorageError() from e

    def _flush(self):
        if not self.data_file:
            return
        payload = {
            name: [_encode(record) for record in table.values()]
            for name, table in self._tables.items()
        }
        directory = os.path.dirname(self.data_file)
        if directory:
            os.makedirs(directory, exist_ok=True)
        tmp_path = f"{self.data_file}.tmp"
        with open(tmp_path, 'w', encoding='utf-8') as file:
            json.dump(payload, file, ensure_ascii=False, indent=2)
        os.replace(tmp_path, self.data_file)

    def _load(self):
        try:
            with open(self.data_file, 'r', encoding='utf-8') as file:
                payload = json.load(file)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Error loading data from {self.data_file}: {str(e)}")
            raise StorageError() from e

        for kind in EntityKind:
            records = [_decode(record) for record in payload.get(kind.value, [])]
            self._tables[kind.value] = {record['id']: record for record in records}
        logger.info(f"Loaded data from {self.data_file}")


__all__ = ['MemoryStorage']
