"""
Schemas Module - Entity kinds and payload validation

Each pydantic model declares the accepted creation payload for one entity
kind. Wire names are camelCase (``coverImage``, ``techStack``); validated
data comes back with snake_case keys ready for storage.
"""

import re
from enum import Enum
from typing import List, Optional
from urllib.parse import urlparse

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, Field, create_model, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from errors import ValidationError

SLUG_PATTERN = re.compile(r'^[a-z0-9-]+$')


class EntityKind(str, Enum):
    """Closed set of persisted entity kinds (value = table/collection name)"""
    CONTACT_MESSAGE = 'contact_messages'
    BLOG_POST = 'blog_posts'
    ANALYTICS_EVENT = 'analytics_events'
    HOME_CONTENT = 'home_content'
    ABOUT_CONTENT = 'about_content'
    SKILL = 'skills'
    PROJECT = 'projects'
    CERTIFICATE = 'certificates'
    USER = 'users'


COLLECTION_KINDS = (
    EntityKind.CONTACT_MESSAGE,
    EntityKind.BLOG_POST,
    EntityKind.SKILL,
    EntityKind.PROJECT,
    EntityKind.CERTIFICATE,
    EntityKind.USER,
)
SINGLETON_KINDS = (EntityKind.HOME_CONTENT, EntityKind.ABOUT_CONTENT)

# Kinds whose rows carry an updated_at timestamp refreshed on every write
TIMESTAMPED_KINDS = (
    EntityKind.BLOG_POST,
    EntityKind.PROJECT,
    EntityKind.HOME_CONTENT,
    EntityKind.ABOUT_CONTENT,
)


def _min_length(value, length, message):
    if value is None or len(value.strip()) < length:
        raise ValueError(message)
    return value.strip()


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _check_url(value, message):
    if value is None:
        return None
    parsed = urlparse(value)
    if parsed.scheme not in ('http', 'https') or not parsed.netloc:
        raise ValueError(message)
    return value


class PayloadSchema(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra='ignore',
    )


class ContactMessageSchema(PayloadSchema):
    name: str
    email: str
    message: str

    @field_validator('name')
    @classmethod
    def check_name(cls, value):
        return _min_length(value, 2, 'Name must be at least 2 characters')

    @field_validator('email')
    @classmethod
    def check_email(cls, value):
        value = (value or '').strip()
        try:
            validate_email(value, check_deliverability=False)
        except EmailNotValidError:
            raise ValueError('Please enter a valid email address')
        return value

    @field_validator('message')
    @classmethod
    def check_message(cls, value):
        return _min_length(value, 10, 'Message must be at least 10 characters')


class BlogPostSchema(PayloadSchema):
    title: str
    slug: str
    excerpt: str
    content: str
    cover_image: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    published: bool = False

    @field_validator('title')
    @classmethod
    def check_title(cls, value):
        return _min_length(value, 3, 'Title must be at least 3 characters')

    @field_validator('slug')
    @classmethod
    def check_slug(cls, value):
        if value is None or len(value) < 3:
            raise ValueError('Slug must be at least 3 characters')
        if not SLUG_PATTERN.match(value):
            raise ValueError('Slug must be lowercase with hyphens only')
        return value

    @field_validator('excerpt')
    @classmethod
    def check_excerpt(cls, value):
        return _min_length(value, 10, 'Excerpt must be at least 10 characters')

    @field_validator('content')
    @classmethod
    def check_content(cls, value):
        return _min_length(value, 50, 'Content must be at least 50 characters')

    @field_validator('cover_image', mode='before')
    @classmethod
    def normalize_cover(cls, value):
        return _blank_to_none(value)


class AnalyticsEventSchema(PayloadSchema):
    event_type: str
    page: str
    section: Optional[str] = None
    visitor_id: Optional[str] = None
    user_agent: Optional[str] = None
    referrer: Optional[str] = None

    @field_validator('event_type')
    @classmethod
    def check_event_type(cls, value):
        return _min_length(value, 1, 'Event type is required')

    @field_validator('page')
    @classmethod
    def check_page(cls, value):
        return _min_length(value, 1, 'Page is required')

    @field_validator('section', 'visitor_id', 'user_agent', 'referrer', mode='before')
    @classmethod
    def normalize_optional(cls, value):
        return _blank_to_none(value)


class HomeContentSchema(PayloadSchema):
    hero_title: Optional[str] = None
    hero_subtitle: Optional[str] = None
    cta_text: Optional[str] = None


class AboutContentSchema(PayloadSchema):
    title: Optional[str] = None
    description: Optional[str] = None
    bio: Optional[str] = None


class SkillSchema(PayloadSchema):
    name: str
    icon: str = 'code'
    category: str
    proficiency: int = 50

    @field_validator('name')
    @classmethod
    def check_name(cls, value):
        return _min_length(value, 2, 'Name must be at least 2 characters')

    @field_validator('icon', mode='before')
    @classmethod
    def default_icon(cls, value):
        return _blank_to_none(value) or 'code'

    @field_validator('category')
    @classmethod
    def check_category(cls, value):
        return _min_length(value, 1, 'Category is required')

    @field_validator('proficiency')
    @classmethod
    def check_proficiency(cls, value):
        if value is None or not 0 <= value <= 100:
            raise ValueError('Proficiency must be between 0 and 100')
        return value


class ProjectSchema(PayloadSchema):
    title: str
    description: str
    image: Optional[str] = None
    tech_stack: List[str] = Field(default_factory=list)
    category: Optional[str] = None
    github_url: Optional[str] = None
    live_url: Optional[str] = None
    featured: bool = False

    @field_validator('title')
    @classmethod
    def check_title(cls, value):
        return _min_length(value, 3, 'Title must be at least 3 characters')

    @field_validator('description')
    @classmethod
    def check_description(cls, value):
        return _min_length(value, 10, 'Description must be at least 10 characters')

    @field_validator('image', 'category', 'github_url', 'live_url', mode='before')
    @classmethod
    def normalize_optional(cls, value):
        return _blank_to_none(value)

    @field_validator('github_url')
    @classmethod
    def check_github_url(cls, value):
        return _check_url(value, 'Invalid GitHub URL')

    @field_validator('live_url')
    @classmethod
    def check_live_url(cls, value):
        return _check_url(value, 'Invalid live URL')


class CertificateSchema(PayloadSchema):
    title: str
    issuer: str
    issue_date: str
    expiry_date: Optional[str] = None
    credential_url: Optional[str] = None
    image: Optional[str] = None

    @field_validator('title')
    @classmethod
    def check_title(cls, value):
        return _min_length(value, 3, 'Title must be at least 3 characters')

    @field_validator('issuer')
    @classmethod
    def check_issuer(cls, value):
        return _min_length(value, 2, 'Issuer must be at least 2 characters')

    @field_validator('issue_date')
    @classmethod
    def check_issue_date(cls, value):
        return _min_length(value, 1, 'Issue date is required')

    @field_validator('expiry_date', 'credential_url', 'image', mode='before')
    @classmethod
    def normalize_optional(cls, value):
        return _blank_to_none(value)

    @field_validator('credential_url')
    @classmethod
    def check_credential_url(cls, value):
        return _check_url(value, 'Invalid credential URL')


class UserSchema(PayloadSchema):
    username: str
    password: str
    is_admin: bool = False

    @field_validator('username')
    @classmethod
    def check_username(cls, value):
        return _min_length(value, 3, 'Username must be at least 3 characters')

    @field_validator('password')
    @classmethod
    def check_password(cls, value):
        if not value:
            raise ValueError('Password is required')
        return value


SCHEMAS = {
    EntityKind.CONTACT_MESSAGE: ContactMessageSchema,
    EntityKind.BLOG_POST: BlogPostSchema,
    EntityKind.ANALYTICS_EVENT: AnalyticsEventSchema,
    EntityKind.HOME_CONTENT: HomeContentSchema,
    EntityKind.ABOUT_CONTENT: AboutContentSchema,
    EntityKind.SKILL: SkillSchema,
    EntityKind.PROJECT: ProjectSchema,
    EntityKind.CERTIFICATE: CertificateSchema,
    EntityKind.USER: UserSchema,
}


def _partial_schema(schema):
    """Same validators as ``schema`` with every field optional"""
    fields = {
        name: (Optional[field.annotation], None)
        for name, field in schema.model_fields.items()
    }
    return create_model(f'{schema.__name__}Patch', __base__=schema, **fields)


PARTIAL_SCHEMAS = {kind: _partial_schema(schema) for kind, schema in SCHEMAS.items()}


def format_errors(errors):
    """Collapse pydantic error dicts into one human-readable message"""
    parts = []
    for error in errors:
        if error['type'] == 'value_error':
            message = str(error['ctx']['error'])
        elif error['type'] == 'missing':
            message = 'Required'
        else:
            message = error['msg']
        field = '.'.join(str(part) for part in error['loc'])
        parts.append(f'{message} at "{field}"' if field else message)
    return 'Validation error: ' + '; '.join(parts)


def _is_nullable(field):
    return not field.is_required() and field.default is None


def validate(kind, payload, partial=False):
    """
    Validate a create (or, with ``partial``, update) payload.

    Args:
        kind (EntityKind): Entity kind the payload is for
        payload: Decoded JSON request body
        partial (bool): Only check the supplied fields

    Returns:
        dict: Validated values keyed by snake_case field name

    Raises:
        ValidationError: Payload violates the kind's rules
    """
    kind = EntityKind(kind)
    schema = SCHEMAS[kind]
    if not isinstance(payload, dict):
        raise ValidationError('Validation error: Expected a JSON object')

    model_cls = PARTIAL_SCHEMAS[kind] if partial else schema
    try:
        model = model_cls.model_validate(payload)
    except PydanticValidationError as exc:
        raise ValidationError(format_errors(exc.errors())) from exc

    if not partial:
        return model.model_dump()

    data = model.model_dump(exclude_unset=True)
    for name, value in data.items():
        field = schema.model_fields[name]
        if value is None and not _is_nullable(field):
            raise ValidationError(
                f'Validation error: Expected a value at "{field.alias or name}"')
    return data


__all__ = [
    'EntityKind',
    'COLLECTION_KINDS',
    'SINGLETON_KINDS',
    'TIMESTAMPED_KINDS',
    'SCHEMAS',
    'format_errors',
    'validate'
]
