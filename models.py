from extensions import db
from datetime import datetime
from sqlalchemy import JSON
import uuid

SINGLETON_SLOT = 'default'


def _uuid():
    return str(uuid.uuid4())


# Custom JSON type that uses JSONB on PostgreSQL and JSON/Text on SQLite
class SafeJSON(db.TypeDecorator):
    impl = JSON
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == 'postgresql':
            from sqlalchemy.dialects.postgresql import JSONB
            return dialect.type_descriptor(JSONB())
        else:
            return dialect.type_descriptor(JSON())


class User(db.Model):
    __tablename__ = 'users'
    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    username = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    is_admin = db.Column(db.Boolean, default=False)


class ContactMessage(db.Model):
    __tablename__ = 'contact_messages'
    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), nullable=False)
    message = db.Column(db.Text, nullable=False)
    is_read = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)


class BlogPost(db.Model):
    __tablename__ = 'blog_posts'
    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    title = db.Column(db.String(255), nullable=False)
    slug = db.Column(db.String(255), unique=True, nullable=False)
    excerpt = db.Column(db.Text, nullable=False)
    content = db.Column(db.Text, nullable=False)
    cover_image = db.Column(db.String(500))
    tags = db.Column(SafeJSON, default=list)
    published = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)


class AnalyticsEvent(db.Model):
    __tablename__ = 'analytics_events'
    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    event_type = db.Column(db.String(100), nullable=False)
    page = db.Column(db.String(500), nullable=False)
    section = db.Column(db.String(255))
    visitor_id = db.Column(db.String(255))
    user_agent = db.Column(db.Text)
    referrer = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    # Index for faster recent-events queries
    __table_args__ = (
        db.Index('idx_analytics_created', 'created_at'),
    )


class HomeContent(db.Model):
    __tablename__ = 'home_content'
    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    # Fixed key; the unique constraint keeps the table to a single row
    slot = db.Column(db.String(16), unique=True, nullable=False, default=SINGLETON_SLOT)
    hero_title = db.Column(db.Text)
    hero_subtitle = db.Column(db.Text)
    cta_text = db.Column(db.Text)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)


class AboutContent(db.Model):
    __tablename__ = 'about_content'
    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    slot = db.Column(db.String(16), unique=True, nullable=False, default=SINGLETON_SLOT)
    title = db.Column(db.Text)
    description = db.Column(db.Text)
    bio = db.Column(db.Text)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)


class Skill(db.Model):
    __tablename__ = 'skills'
    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    name = db.Column(db.String(255), nullable=False)
    icon = db.Column(db.String(100), nullable=False, default='code')
    category = db.Column(db.String(100), nullable=False)
    proficiency = db.Column(db.Integer, default=50, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)


class Project(db.Model):
    __tablename__ = 'projects'
    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False)
    image = db.Column(db.String(500))
    tech_stack = db.Column(SafeJSON, default=list)
    category = db.Column(db.String(100))
    github_url = db.Column(db.String(500))
    live_url = db.Column(db.String(500))
    featured = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)


class Certificate(db.Model):
    __tablename__ = 'certificates'
    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    title = db.Column(db.String(255), nullable=False)
    issuer = db.Column(db.String(255), nullable=False)
    issue_date = db.Column(db.String(50), nullable=False)
    expiry_date = db.Column(db.String(50))
    credential_url = db.Column(db.String(500))
    image = db.Column(db.String(500))
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
