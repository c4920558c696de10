"""
Database Storage - Flask-SQLAlchemy backed storage

Singleton tables carry a unique ``slot`` column, and upserts go through
``INSERT ... ON CONFLICT (slot) DO UPDATE`` on PostgreSQL and SQLite so
concurrent admin edits can never create a second row.
"""

import uuid
from contextlib import contextmanager
from datetime import datetime

from flask import current_app
from sqlalchemy import distinct, func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from errors import ConflictError, StorageError
from extensions import db
from models import (
    SINGLETON_SLOT, AboutContent, AnalyticsEvent, BlogPost, Certificate,
    ContactMessage, HomeContent, Project, Skill, User
)
from schemas import EntityKind, TIMESTAMPED_KINDS
from .base import (
    CONFLICT_MESSAGES, CREATED_AT_KINDS,
    EventLog, Repository, SingletonRepository, Storage
)

MODELS = {
    EntityKind.USER: User,
    EntityKind.CONTACT_MESSAGE: ContactMessage,
    EntityKind.BLOG_POST: BlogPost,
    EntityKind.ANALYTICS_EVENT: AnalyticsEvent,
    EntityKind.HOME_CONTENT: HomeContent,
    EntityKind.ABOUT_CONTENT: AboutContent,
    EntityKind.SKILL: Skill,
    EntityKind.PROJECT: Project,
    EntityKind.CERTIFICATE: Certificate,
}


def model_to_dict(obj):
    """Convert a model instance to a plain record dict"""
    if obj is None:
        return None
    record = {}
    for column in obj.__table__.columns:
        if column.name == 'slot':
            continue
        value = getattr(obj, column.name)
        record[column.name] = list(value) if isinstance(value, list) else value
    return record


@contextmanager
def transaction(kind, action, commit=True):
    """Commit on success; roll back and translate SQLAlchemy errors"""
    try:
        yield
        if commit:
            db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        current_app.logger.warning(f"Integrity error on {kind.value} {action}: {str(e.orig)}")
        raise ConflictError(CONFLICT_MESSAGES.get(kind)) from e
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Database error on {kind.value} {action}: {str(e)}")
        raise StorageError() from e


class SqlRepository(Repository):

    def __init__(self, kind, model):
        super().__init__(kind)
        self.model = model

    def _query(self, filters):
        query = self.model.query.filter_by(**filters)
        if self.kind in CREATED_AT_KINDS:
            query = query.order_by(self.model.created_at.desc())
        return query

    def create(self, data):
        now = datetime.utcnow()
        values = dict(data)
        if self.kind in CREATED_AT_KINDS:
            values['created_at'] = values.get('created_at') or now
        if self.kind in TIMESTAMPED_KINDS:
            values['updated_at'] = values.get('updated_at') or now

        obj = self.model(**values)
        with transaction(self.kind, 'create'):
            db.session.add(obj)
        current_app.logger.debug(f"Created {self.kind.value} record {obj.id}")
        return model_to_dict(obj)

    def list(self, **filters):
        with transaction(self.kind, 'list', commit=False):
            return [model_to_dict(obj) for obj in self._query(filters).all()]

    def get(self, record_id):
        with transaction(self.kind, 'get', commit=False):
            return model_to_dict(self.model.query.filter_by(id=record_id).first())

    def find_one(self, **filters):
        with transaction(self.kind, 'find', commit=False):
            return model_to_dict(self._query(filters).first())

    def update(self, record_id, data):
        with transaction(self.kind, 'update'):
            obj = self.model.query.filter_by(id=record_id).first()
            if obj is None:
                return None
            for key, value in data.items():
                setattr(obj, key, value)
            if self.kind in TIMESTAMPED_KINDS:
                obj.updated_at = datetime.utcnow()
        return model_to_dict(obj)

    def delete(self, record_id):
        with transaction(self.kind, 'delete'):
            deleted = self.model.query.filter_by(id=record_id).delete()
        return deleted > 0


class SqlSingletonRepository(SingletonRepository):

    def __init__(self, kind, model):
        super().__init__(kind)
        self.model = model

    def get(self):
        with transaction(self.kind, 'get', commit=False):
            return model_to_dict(self.model.query.filter_by(slot=SINGLETON_SLOT).first())

    def upsert(self, data):
        values = dict(data, updated_at=datetime.utcnow())
        dialect = db.session.get_bind().dialect.name

        if dialect == 'postgresql':
            from sqlalchemy.dialects.postgresql import insert
        elif dialect == 'sqlite':
            from sqlalchemy.dialects.sqlite import insert
        else:
            return self._locked_upsert(values)

        stmt = insert(self.model).values(
            id=str(uuid.uuid4()), slot=SINGLETON_SLOT, **values
        ).on_conflict_do_update(index_elements=['slot'], set_=values)
        with transaction(self.kind, 'upsert'):
            db.session.execute(stmt)
        return self.get()

    def _locked_upsert(self, values):
        """Row-locked check-then-write for dialects without ON CONFLICT"""
        try:
            with transaction(self.kind, 'upsert'):
                obj = self.model.query.filter_by(slot=SINGLETON_SLOT).with_for_update().first()
                if obj is None:
                    obj = self.model(slot=SINGLETON_SLOT)
                    db.session.add(obj)
                for key, value in values.items():
                    setattr(obj, key, value)
        except ConflictError:
            # Lost an insert race: the row exists now, so update it
            with transaction(self.kind, 'upsert'):
                obj = self.model.query.filter_by(slot=SINGLETON_SLOT).with_for_update().first()
                for key, value in values.items():
                    setattr(obj, key, value)
        return self.get()


class SqlEventLog(EventLog):

    def __init__(self):
        self.repository = SqlRepository(EntityKind.ANALYTICS_EVENT, AnalyticsEvent)

    def append(self, data):
        return self.repository.create(data)

    def recent(self, limit):
        with transaction(EntityKind.ANALYTICS_EVENT, 'recent', commit=False):
            events = (AnalyticsEvent.query
                      .order_by(AnalyticsEvent.created_at.desc())
                      .limit(limit)
                      .all())
            return [model_to_dict(event) for event in events]

    def all(self):
        with transaction(EntityKind.ANALYTICS_EVENT, 'all', commit=False):
            events = AnalyticsEvent.query.order_by(AnalyticsEvent.created_at.asc()).all()
            return [model_to_dict(event) for event in events]

    def summary(self):
        with transaction(EntityKind.ANALYTICS_EVENT, 'summary', commit=False):
            total = AnalyticsEvent.query.count()
            unique_visitors = db.session.query(
                func.count(distinct(AnalyticsEvent.visitor_id))
            ).filter(
                AnalyticsEvent.visitor_id.isnot(None),
                AnalyticsEvent.visitor_id != ''
            ).scalar()
            section_rows = db.session.query(
                AnalyticsEvent.section, func.count(AnalyticsEvent.id)
            ).filter(
                AnalyticsEvent.section.isnot(None),
                AnalyticsEvent.section != ''
            ).group_by(AnalyticsEvent.section).all()
            page_rows = db.session.query(
                AnalyticsEvent.page, func.count(AnalyticsEvent.id)
            ).group_by(AnalyticsEvent.page).all()

        return {
            'totalViews': total,
            'uniqueVisitors': unique_visitors or 0,
            'sectionViews': {section: count for section, count in section_rows},
            'pageViews': {page: count for page, count in page_rows}
        }


class DatabaseStorage(Storage):
    """Relational storage; requires an application context"""

    backend_name = 'database'

    def __init__(self):
        self._events = SqlEventLog()

    def repository(self, kind):
        kind = EntityKind(kind)
        return SqlRepository(kind, MODELS[kind])

    def singleton(self, kind):
        kind = EntityKind(kind)
        return SqlSingletonRepository(kind, MODELS[kind])

    @property
    def events(self):
        return self._events


__all__ = ['DatabaseStorage', 'MODELS', 'model_to_dict']
