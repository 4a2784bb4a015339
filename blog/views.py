"""
Views for the Mini CMS blog.

Provides:
- post_list: the home feed, a paginated grid of published posts

Performance strategy:
- One COUNT query plus one bounded SELECT ... JOIN category per page view.
- The computed page context is cached per page number for
  BLOG_REVALIDATE_SECONDS, so repeat visits inside the window never hit the
  database and may show a slightly stale snapshot.
"""

from django.conf import settings
from django.core.cache import cache
from django.shortcuts import render
from django.views.decorators.http import require_safe

from . import queries
from .pagination import paginate, parse_page_number


def _listing_context(raw_page):
    """Run the count and fetch queries and assemble the template context."""
    page_size = settings.BLOG_POSTS_PER_PAGE
    window = paginate(raw_page, page_size, queries.count_published())
    if window.offset >= window.total_count:
        # Past the last row: nothing to fetch, and huge offsets overflow SQL OFFSET
        posts = []
    else:
        posts = queries.fetch_page(window.offset, page_size)
    return {
        'posts': posts,
        'window': window,
        'current_page': window.current_page,
        'total_pages': window.total_pages,
        'total_count': window.total_count,
        'first_item': window.first_item(len(posts)),
        'last_item': window.last_item(len(posts)),
    }


@require_safe
def post_list(request):
    """
    Home page: published posts, newest first, BLOG_POSTS_PER_PAGE per page.

    The ?page= parameter is never rejected. Garbage or values below 1 show
    page 1; values past the last page show an empty grid.
    """
    raw_page = request.GET.get('page')

    # Key on the normalised page so "abc", "0" and "1" share one entry.
    cache_key = f'post_list|page={parse_page_number(raw_page)}'
    ctx = cache.get(cache_key)
    if ctx is None:
        ctx = _listing_context(raw_page)
        cache.set(cache_key, ctx, timeout=settings.BLOG_REVALIDATE_SECONDS)

    return render(request, 'blog/post_list.html', ctx)
