"""
Storage Interface - Backend-neutral CRUD contract

Records cross this boundary as plain dicts keyed by snake_case column
name, with ``datetime`` values for timestamps. Backends implement the
three abstract repository types; ``Storage`` layers the named per-entity
operations used by the routes on top of them.
"""

from abc import ABC, abstractmethod

from werkzeug.security import generate_password_hash

from schemas import EntityKind, validate

# Columns that must stay unique within their collection
UNIQUE_FIELDS = {
    EntityKind.BLOG_POST: ('slug',),
    EntityKind.USER: ('username',),
}

CONFLICT_MESSAGES = {
    EntityKind.BLOG_POST: 'A blog post with this slug already exists',
    EntityKind.USER: 'A user with this username already exists',
}

# Kinds ordered newest-first by creation time
CREATED_AT_KINDS = (
    EntityKind.CONTACT_MESSAGE,
    EntityKind.BLOG_POST,
    EntityKind.ANALYTICS_EVENT,
    EntityKind.SKILL,
    EntityKind.PROJECT,
    EntityKind.CERTIFICATE,
)


class Repository(ABC):
    """CRUD over one independent collection"""

    def __init__(self, kind):
        self.kind = EntityKind(kind)

    @abstractmethod
    def create(self, data):
        """Assign id and timestamps, persist, return the stored record"""

    @abstractmethod
    def list(self, **filters):
        """Records matching all equality filters, newest first"""

    @abstractmethod
    def get(self, record_id):
        """Record by id, or None"""

    @abstractmethod
    def find_one(self, **filters):
        """First record matching all equality filters, or None"""

    @abstractmethod
    def update(self, record_id, data):
        """Merge fields into the record; None if it does not exist"""

    @abstractmethod
    def delete(self, record_id):
        """Hard delete; False if nothing was deleted"""


class SingletonRepository(ABC):
    """At most one row per kind"""

    def __init__(self, kind):
        self.kind = EntityKind(kind)

    @abstractmethod
    def get(self):
        """The sole record, or None"""

    @abstractmethod
    def upsert(self, data):
        """Create the row if absent, otherwise update it in place, atomically"""


class EventLog(ABC):
    """Append-only analytics event log"""

    @abstractmethod
    def append(self, data):
        """Store one event and return it"""

    @abstractmethod
    def recent(self, limit):
        """Most recent ``limit`` events, newest first"""

    @abstractmethod
    def all(self):
        """Every event, oldest first"""

    @abstractmethod
    def summary(self):
        """totalViews, uniqueVisitors, sectionViews and pageViews"""


class Storage(ABC):
    """Facade over one backend's repositories"""

    backend_name = 'abstract'

    @abstractmethod
    def repository(self, kind):
        """Repository for a collection kind"""

    @abstractmethod
    def singleton(self, kind):
        """Repository for a singleton kind"""

    @property
    @abstractmethod
    def events(self):
        """The analytics EventLog"""

    # Contact messages
    def create_contact_message(self, data):
        return self.repository(EntityKind.CONTACT_MESSAGE).create(data)

    def list_contact_messages(self):
        return self.repository(EntityKind.CONTACT_MESSAGE).list()

    def get_contact_message(self, message_id):
        return self.repository(EntityKind.CONTACT_MESSAGE).get(message_id)

    def mark_message_as_read(self, message_id):
        return self.repository(EntityKind.CONTACT_MESSAGE).update(message_id, {'is_read': True})

    def delete_contact_message(self, message_id):
        return self.repository(EntityKind.CONTACT_MESSAGE).delete(message_id)

    # Blog posts
    def create_blog_post(self, data):
        return self.repository(EntityKind.BLOG_POST).create(data)

    def list_blog_posts(self, published_only=False):
        repo = self.repository(EntityKind.BLOG_POST)
        if published_only:
            return repo.list(published=True)
        return repo.list()

    def get_blog_post(self, post_id):
        return self.repository(EntityKind.BLOG_POST).get(post_id)

    def get_blog_post_by_slug(self, slug):
        return self.repository(EntityKind.BLOG_POST).find_one(slug=slug)

    def update_blog_post(self, post_id, data):
        return self.repository(EntityKind.BLOG_POST).update(post_id, data)

    def delete_blog_post(self, post_id):
        return self.repository(EntityKind.BLOG_POST).delete(post_id)

    # Singleton content
    def get_home_content(self):
        return self.singleton(EntityKind.HOME_CONTENT).get()

    def upsert_home_content(self, data):
        return self.singleton(EntityKind.HOME_CONTENT).upsert(data)

    def get_about_content(self):
        return self.singleton(EntityKind.ABOUT_CONTENT).get()

    def upsert_about_content(self, data):
        return self.singleton(EntityKind.ABOUT_CONTENT).upsert(data)

    # Skills, projects, certificates share the generic repository
    def create_skill(self, data):
        return self.repository(EntityKind.SKILL).create(data)

    def list_skills(self):
        return self.repository(EntityKind.SKILL).list()

    def get_skill(self, skill_id):
        return self.repository(EntityKind.SKILL).get(skill_id)

    def update_skill(self, skill_id, data):
        return self.repository(EntityKind.SKILL).update(skill_id, data)

    def delete_skill(self, skill_id):
        return self.repository(EntityKind.SKILL).delete(skill_id)

    def create_project(self, data):
        return self.repository(EntityKind.PROJECT).create(data)

    def list_projects(self):
        return self.repository(EntityKind.PROJECT).list()

    def get_project(self, project_id):
        return self.repository(EntityKind.PROJECT).get(project_id)

    def update_project(self, project_id, data):
        return self.repository(EntityKind.PROJECT).update(project_id, data)

    def delete_project(self, project_id):
        return self.repository(EntityKind.PROJECT).delete(project_id)

    def create_certificate(self, data):
        return self.repository(EntityKind.CERTIFICATE).create(data)

    def list_certificates(self):
        return self.repository(EntityKind.CERTIFICATE).list()

    def get_certificate(self, certificate_id):
        return self.repository(EntityKind.CERTIFICATE).get(certificate_id)

    def update_certificate(self, certificate_id, data):
        return self.repository(EntityKind.CERTIFICATE).update(certificate_id, data)

    def delete_certificate(self, certificate_id):
        return self.repository(EntityKind.CERTIFICATE).delete(certificate_id)

    # Analytics
    def create_analytics_event(self, data):
        return self.events.append(data)

    def get_analytics_events(self, limit=100):
        return self.events.recent(limit)

    def get_analytics_summary(self):
        return self.events.summary()

    # Users
    def create_user(self, username, password, is_admin=False):
        data = validate(EntityKind.USER, {
            'username': username,
            'password': password,
            'isAdmin': is_admin,
        })
        return self.repository(EntityKind.USER).create({
            'username': data['username'],
            'password_hash': generate_password_hash(data['password']),
            'is_admin': data['is_admin'],
        })

    def get_user(self, user_id):
        return self.repository(EntityKind.USER).get(user_id)

    def get_user_by_username(self, username):
        return self.repository(EntityKind.USER).find_one(username=username)


__all__ = [
    'Repository',
    'SingletonRepository',
    'EventLog',
    'Storage',
    'UNIQUE_FIELDS',
    'CONFLICT_MESSAGES',
    'CREATED_AT_KINDS'
]
