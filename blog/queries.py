"""
Read queries behind the home listing.

Two independent round-trips per page view: a count of published posts and a
bounded, newest-first fetch of one page of them with their category joined
in. They are not run inside a shared transaction, so a post published
between the two calls can make the summary total disagree with the page by
one row until the next request.

Database errors are not caught here; they propagate to the view and from
there to Django's request handler.
"""

import logging

from .models import Post

logger = logging.getLogger(__name__)


def published_posts():
    """Base queryset: every post visible on the public listing, newest first."""
    return Post.objects.filter(published=True).order_by('-created_at')


def count_published():
    """Return the number of published posts."""
    return published_posts().count()


def fetch_page(offset, limit):
    """
    Return up to `limit` published posts after skipping `offset` of them.

    select_related('category') pulls the optional category in the same
    query, so rendering the badges costs nothing extra. A post without a
    category comes back with post.category set to None.
    """
    if offset < 0 or limit < 0:
        raise ValueError(f'offset and limit must be non-negative, got {offset!r}, {limit!r}')

    posts = list(
        published_posts()
        .select_related('category')[offset:offset + limit]
    )
    logger.debug("Fetched %d published posts (offset=%d, limit=%d)", len(posts), offset, limit)
    return posts
