"""
Template helpers for the post listing.

Usage in templates:
    {% load blog_tags %}
    {% page_nav current_page total_pages %}
"""

from django import template

register = template.Library()


@register.inclusion_tag('blog/includes/pagination.html')
def page_nav(current_page, total_pages):
    """
    Context for the Previous / Next control.

    show is False when everything fits on one page (or there are no posts),
    in which case the template renders nothing at all. Previous is disabled
    on page 1; Next is disabled on the last page and on any page past it.
    """
    return {
        'show': total_pages > 1,
        'current_page': current_page,
        'total_pages': total_pages,
        'previous_page': current_page - 1,
        'next_page': current_page + 1,
        'is_first_page': current_page <= 1,
        'is_last_page': current_page >= total_pages,
    }
