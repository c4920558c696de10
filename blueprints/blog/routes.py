"""
Blog Routes - Public blog listing and detail
"""

from errors import NotFoundError
from storage import get_storage
from utils.responses import serialize, success
from . import blog_bp


@blog_bp.route('')
def list_posts():
    """Published posts, newest first"""
    return success(serialize(get_storage().list_blog_posts(published_only=True)))


@blog_bp.route('/<slug>')
def post_detail(slug):
    """One published post; drafts are indistinguishable from missing posts"""
    post = get_storage().get_blog_post_by_slug(slug)
    if not post or not post.get('published'):
        raise NotFoundError('Blog post not found')
    return success(serialize(post))
