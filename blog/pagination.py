"""
Page-number arithmetic for the post listing.

Turns the untrusted ?page= query value into a safe row offset and a page
count. Nothing here touches the database: the total row count is handed in
by the caller after it has run the count query.

Invalid input never raises. Anything that is missing, non-numeric or below 1
becomes page 1. The upper bound is left open: asking for a page
past the last one gives an offset beyond the data and the fetch simply
returns no rows.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

# Leading-digits integer parse: "3", " 3", "+3", "3abc" and "3.9" all read as 3.
# ASCII digits only; "٣" is not a page number.
_LEADING_INT_RE = re.compile(r'\s*([+-]?)([0-9]+)')

# Longer digit runs all read as this page, which is past the end of any store.
MAX_PAGE_DIGITS = 18
MAX_PAGE = 10 ** MAX_PAGE_DIGITS - 1


def parse_page_number(raw: Optional[str]) -> int:
    """Return the requested page number, or 1 when raw is unusable."""
    if raw is None:
        return 1
    match = _LEADING_INT_RE.match(str(raw))
    if match is None:
        logger.debug("Non-numeric page parameter %r, using page 1", raw)
        return 1
    sign, digits = match.groups()
    digits = digits.lstrip('0') or '0'
    if sign == '-':
        return 1
    if len(digits) > MAX_PAGE_DIGITS:
        logger.debug("Page parameter has %d digits, using page %d", len(digits), MAX_PAGE)
        return MAX_PAGE
    return max(1, int(digits))


def count_pages(total_count: int, page_size: int) -> int:
    """ceil(total_count / page_size); zero rows means zero pages."""
    return -(-total_count // page_size)


@dataclass(frozen=True)
class PageWindow:
    """The slice of the published post list that one request renders."""

    current_page: int
    offset: int
    total_pages: int
    page_size: int
    total_count: int

    @property
    def has_previous(self):
        return self.current_page > 1

    @property
    def has_next(self):
        return self.current_page < self.total_pages

    @property
    def previous_page(self):
        return self.current_page - 1

    @property
    def next_page(self):
        return self.current_page + 1

    def first_item(self, row_count):
        """1-based position of the first row shown, or 0 for an empty page."""
        return self.offset + 1 if row_count else 0

    def last_item(self, row_count):
        """1-based position of the last row shown."""
        return self.offset + row_count


def paginate(raw_page: Optional[str], page_size: int, total_count: int) -> PageWindow:
    """
    Build the PageWindow for a request.

    Args:
        raw_page:    the ?page= value exactly as received (may be None).
        page_size:   rows per page, must be at least 1.
        total_count: number of published posts, from the count query.

    Raises:
        ValueError: page_size < 1 or total_count < 0. These come from
                    settings or the database, never from the visitor.
    """
    if page_size < 1:
        raise ValueError(f'page_size must be a positive integer, got {page_size!r}')
    if total_count < 0:
        raise ValueError(f'total_count must not be negative, got {total_count!r}')

    current_page = parse_page_number(raw_page)
    return PageWindow(
        current_page=current_page,
        offset=(current_page - 1) * page_size,
        total_pages=count_pages(total_count, page_size),
        page_size=page_size,
        total_count=total_count,
    )
