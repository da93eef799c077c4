"""
Composite forum reads.
"""
import logging
from typing import Optional

from core.exceptions import StorageError

logger = logging.getLogger(__name__)

UNKNOWN_CATEGORY = 'Unknown'


def _author(storage, user_id: int):
    """Resolve an author; a missing or unreadable user degrades to ``None``."""
    try:
        return storage.get_user(user_id)
    except StorageError:
        logger.warning('could not load author %s', user_id, exc_info=True)
        return None


def post_detail(storage, post_id: int) -> Optional[dict]:
    """Post with author, category name and comments; counts one view.

    Returns ``None`` when the post does not exist, in which case no view
    is counted.
    """
    if storage.get_forum_post(post_id) is None:
        return None
    storage.increment_post_view_count(post_id)
    post = storage.get_forum_post(post_id)
    if post is None:
        return None

    try:
        category = storage.get_forum_category(post.category_id)
    except StorageError:
        logger.warning('could not load category %s', post.category_id, exc_info=True)
        category = None

    comments = [
        {'comment': c, 'author': _author(storage, c.user_id)}
        for c in storage.list_forum_comments(post_id)
    ]
    return {
        'post': post,
        'author': _author(storage, post.user_id),
        'category_name': category.name if category else UNKNOWN_CATEGORY,
        'comments': comments,
    }
