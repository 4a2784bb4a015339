"""
Tests for the blog app.

Covers:
- Pagination arithmetic (page parsing, offset, total pages, no upper clamp)
- Post / Category models (slug generation, SET NULL on category delete)
- Query layer (published-only, newest first, offset/limit, single JOIN)
- page_nav template tag (omitted / disabled / active states)
- Home listing view (end-to-end page scenarios, empty state, caching,
  store failures propagating)
- seed_blog and check_db management commands
"""

import datetime
from io import StringIO
from unittest import mock

from django.core.cache import cache
from django.core.management import call_command
from django.core.management.base import CommandError
from django.db import DatabaseError
from django.test import Client, SimpleTestCase, TestCase, override_settings
from django.urls import reverse
from django.utils import timezone

from . import queries, views
from .models import Category, Post
from .pagination import (
    MAX_PAGE,
    MAX_PAGE_DIGITS,
    PageWindow,
    count_pages,
    paginate,
    parse_page_number,
)
from .templatetags.blog_tags import page_nav

# Use plain static files storage in tests: WhiteNoise's manifest storage
# requires `collectstatic` to have been run.
_TEST_STORAGES = {
    'staticfiles': {'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage'},
}

_TEST_CACHES = {
    'default': {'BACKEND': 'django.core.cache.backends.locmem.LocMemCache'},
}

_BASE_TIME = datetime.datetime(2024, 6, 1, 12, 0, tzinfo=datetime.timezone.utc)


def _make_post(title, published=True, category=None, excerpt='A short summary.',
               created_at=None, **extra):
    """Create a Post and optionally pin its created_at timestamp."""
    post = Post.objects.create(
        title=title,
        excerpt=excerpt,
        content=f'# {title}',
        published=published,
        category=category,
        **extra,
    )
    if created_at is not None:
        # auto_now_add ignores values passed to create(); set it afterwards
        Post.objects.filter(pk=post.pk).update(created_at=created_at)
        post.refresh_from_db()
    return post


def _make_published_series(count, category=None):
    """
    Create `count` published posts, one minute apart.

    Post 1 is the newest, so on the listing post N is the Nth row.
    """
    return [
        _make_post(
            f'Post {i}',
            category=category,
            created_at=_BASE_TIME - datetime.timedelta(minutes=i),
        )
        for i in range(1, count + 1)
    ]


# ---------------------------------------------------------------------------
# Pagination arithmetic
# ---------------------------------------------------------------------------

class ParsePageNumberTest(SimpleTestCase):
    """parse_page_number never raises and never returns less than 1."""

    def test_valid_integers_pass_through(self):
        for raw, expected in [('1', 1), ('3', 3), ('42', 42), (' 7', 7), ('+2', 2)]:
            with self.subTest(raw=raw):
                self.assertEqual(parse_page_number(raw), expected)

    def test_unusable_input_becomes_page_one(self):
        for raw in [None, '', 'abc', '-5', '0', '-0', '   ', 'page2', '\u0663', '-' + '9' * 5000]:
            with self.subTest(raw=raw):
                self.assertEqual(parse_page_number(raw), 1)

    def test_leading_digits_are_used(self):
        """Trailing garbage after the digits is ignored."""
        self.assertEqual(parse_page_number('3abc'), 3)
        self.assertEqual(parse_page_number('4.9'), 4)

    def test_leading_zeros_are_ignored(self):
        self.assertEqual(parse_page_number('00012'), 12)
        self.assertEqual(parse_page_number('0' * 40 + '7'), 7)

    def test_longest_exact_page(self):
        self.assertEqual(parse_page_number('9' * MAX_PAGE_DIGITS), MAX_PAGE)

    def test_huge_numbers_read_as_last_representable_page(self):
        """Very long digit runs never raise, even past int() string limits."""
        for raw in ['9' * 20, '1' + '0' * 30, '9' * 5000]:
            with self.subTest(digits=len(raw)):
                self.assertEqual(parse_page_number(raw), MAX_PAGE)


class PaginateTest(SimpleTestCase):
    """Tests for paginate() and count_pages()."""

    def test_offset_formula(self):
        for page in range(1, 8):
            with self.subTest(page=page):
                window = paginate(str(page), 6, 100)
                self.assertEqual(window.offset, (page - 1) * 6)

    def test_total_pages_rounds_up(self):
        self.assertEqual(count_pages(25, 6), 5)
        self.assertEqual(count_pages(24, 6), 4)
        self.assertEqual(count_pages(1, 6), 1)

    def test_zero_posts_means_zero_pages(self):
        self.assertEqual(paginate(None, 6, 0).total_pages, 0)

    def test_scenario_middle_page(self):
        """25 posts, 6 per page, page 3 → offset 12 of 5 pages."""
        window = paginate('3', 6, 25)
        self.assertEqual(
            (window.current_page, window.offset, window.total_pages),
            (3, 12, 5),
        )

    def test_page_past_the_end_is_not_clamped(self):
        """Asking for page 10 of 5 keeps page 10; the fetch will be empty."""
        window = paginate('10', 6, 25)
        self.assertEqual(
            (window.current_page, window.offset, window.total_pages),
            (10, 54, 5),
        )

    def test_invalid_page_starts_at_zero_offset(self):
        for raw in ['-5', 'abc']:
            with self.subTest(raw=raw):
                window = paginate(raw, 6, 25)
                self.assertEqual((window.current_page, window.offset), (1, 0))

    def test_identical_inputs_give_identical_windows(self):
        self.assertEqual(paginate('2', 6, 25), paginate('2', 6, 25))

    def test_rejects_non_positive_page_size(self):
        with self.assertRaises(ValueError):
            paginate('1', 0, 10)

    def test_rejects_negative_total(self):
        with self.assertRaises(ValueError):
            paginate('1', 6, -1)

    def test_item_range_helpers(self):
        window = paginate('3', 6, 25)
        self.assertEqual(window.first_item(6), 13)
        self.assertEqual(window.last_item(6), 18)
        self.assertEqual(window.first_item(0), 0)

    def test_previous_next_flags(self):
        first = PageWindow(current_page=1, offset=0, total_pages=3, page_size=6, total_count=15)
        last = PageWindow(current_page=3, offset=12, total_pages=3, page_size=6, total_count=15)
        self.assertFalse(first.has_previous)
        self.assertTrue(first.has_next)
        self.assertTrue(last.has_previous)
        self.assertFalse(last.has_next)
        self.assertEqual((last.previous_page, last.next_page), (2, 4))


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------

class CategoryModelTest(TestCase):
    """Test Category model behaviour."""

    def test_slug_auto_generated(self):
        cat = Category.objects.create(name='Web Development')
        self.assertEqual(cat.slug, 'web-development')

    def test_str(self):
        self.assertEqual(str(Category(name='Lifestyle')), 'Lifestyle')

    def test_delete_keeps_posts_and_clears_category(self):
        """Deleting a category nulls the FK instead of cascading."""
        cat = Category.objects.create(name='Technology')
        post = _make_post('Orphan Soon', category=cat)
        cat.delete()
        post.refresh_from_db()
        self.assertIsNone(post.category)
        self.assertTrue(Post.objects.filter(pk=post.pk).exists())


class PostModelTest(TestCase):
    """Test Post model defaults and slug generation."""

    def test_defaults(self):
        post = Post.objects.create(title='Fresh Draft', content='...')
        self.assertFalse(post.published)
        self.assertEqual(post.views, 0)
        self.assertEqual(post.likes, 0)
        self.assertIsNone(post.category)
        self.assertIsNone(post.excerpt)
        self.assertIsNotNone(post.created_at)

    def test_slug_auto_generated(self):
        post = _make_post('Hello Django World')
        self.assertEqual(post.slug, 'hello-django-world')

    def test_duplicate_titles_get_suffixed_slugs(self):
        first = _make_post('Same Title')
        second = _make_post('Same Title')
        third = _make_post('Same Title')
        self.assertEqual(
            [first.slug, second.slug, third.slug],
            ['same-title', 'same-title-1', 'same-title-2'],
        )

    def test_explicit_slug_is_kept(self):
        post = _make_post('Anything', slug='custom-slug')
        self.assertEqual(post.slug, 'custom-slug')

    def test_updated_at_moves_on_save(self):
        post = _make_post('Editable', created_at=_BASE_TIME)
        Post.objects.filter(pk=post.pk).update(updated_at=_BASE_TIME)
        post.refresh_from_db()
        post.title = 'Edited'
        post.save()
        self.assertGreater(post.updated_at, _BASE_TIME)


# ---------------------------------------------------------------------------
# Query layer
# ---------------------------------------------------------------------------

class QueryLayerTest(TestCase):
    """Tests for count_published() and fetch_page()."""

    def setUp(self):
        self.category = Category.objects.create(name='Technology', slug='technology')
        self.published = _make_published_series(8, category=self.category)
        # Drafts are newer than every published post
        self.drafts = [
            _make_post(f'Draft {i}', published=False, created_at=_BASE_TIME + datetime.timedelta(hours=i))
            for i in range(1, 4)
        ]

    def test_count_ignores_drafts(self):
        self.assertEqual(queries.count_published(), 8)

    def test_fetch_never_returns_drafts(self):
        for offset in range(0, 12, 3):
            with self.subTest(offset=offset):
                posts = queries.fetch_page(offset, 3)
                self.assertTrue(all(post.published for post in posts))

    def test_fetch_is_newest_first(self):
        posts = queries.fetch_page(0, 8)
        self.assertEqual([p.title for p in posts], [f'Post {i}' for i in range(1, 9)])
        for newer, older in zip(posts, posts[1:]):
            self.assertGreaterEqual(newer.created_at, older.created_at)

    def test_offset_and_limit(self):
        posts = queries.fetch_page(3, 2)
        self.assertEqual([p.title for p in posts], ['Post 4', 'Post 5'])

    def test_short_last_page(self):
        self.assertEqual(len(queries.fetch_page(6, 6)), 2)

    def test_offset_past_the_end_is_empty(self):
        self.assertEqual(queries.fetch_page(54, 6), [])

    def test_category_is_joined(self):
        """Reading post.category after the fetch costs no extra queries."""
        with self.assertNumQueries(1):
            posts = queries.fetch_page(0, 6)
            names = [p.category.name for p in posts]
        self.assertEqual(set(names), {'Technology'})

    def test_missing_category_is_none(self):
        _make_post('No Category', created_at=_BASE_TIME + datetime.timedelta(days=1))
        newest = queries.fetch_page(0, 1)[0]
        self.assertEqual(newest.title, 'No Category')
        self.assertIsNone(newest.category)

    def test_negative_bounds_rejected(self):
        with self.assertRaises(ValueError):
            queries.fetch_page(-1, 6)
        with self.assertRaises(ValueError):
            queries.fetch_page(0, -6)


# ---------------------------------------------------------------------------
# Template tag
# ---------------------------------------------------------------------------

class PageNavTagTest(SimpleTestCase):
    """Tests for the page_nav inclusion tag context."""

    def test_hidden_for_single_page(self):
        self.assertFalse(page_nav(1, 1)['show'])
        self.assertFalse(page_nav(1, 0)['show'])

    def test_first_page_disables_previous(self):
        ctx = page_nav(1, 5)
        self.assertTrue(ctx['show'])
        self.assertTrue(ctx['is_first_page'])
        self.assertFalse(ctx['is_last_page'])
        self.assertEqual(ctx['next_page'], 2)

    def test_last_page_disables_next(self):
        ctx = page_nav(5, 5)
        self.assertFalse(ctx['is_first_page'])
        self.assertTrue(ctx['is_last_page'])
        self.assertEqual(ctx['previous_page'], 4)

    def test_past_the_end_disables_next(self):
        ctx = page_nav(10, 5)
        self.assertTrue(ctx['is_last_page'])
        self.assertEqual(ctx['previous_page'], 9)


# ---------------------------------------------------------------------------
# Listing view
# ---------------------------------------------------------------------------

@override_settings(
    STORAGES=_TEST_STORAGES,
    CACHES=_TEST_CACHES,
    BLOG_POSTS_PER_PAGE=6,
    BLOG_REVALIDATE_SECONDS=60,
)
class PostListViewTest(TestCase):
    """End-to-end tests for the home listing."""

    def setUp(self):
        self.client = Client()
        self.url = reverse('blog:post_list')
        cache.clear()

    def _titles(self, response):
        return [p.title for p in response.context['posts']]

    def test_home_route(self):
        self.assertEqual(self.url, '/')

    def test_empty_store(self):
        """No posts: zero pages, empty-state message, no navigation."""
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context['total_pages'], 0)
        self.assertContains(response, 'No posts found. Run the seed command to add sample posts.')
        self.assertContains(response, 'python manage.py seed_blog')
        self.assertNotContains(response, 'aria-label="Pagination"')
        self.assertContains(response, 'Mini CMS')

    def test_middle_page(self):
        """25 posts, page 3 → rows 13-18 of 5 pages."""
        _make_published_series(25)
        response = self.client.get(self.url, {'page': '3'})
        self.assertEqual(response.context['current_page'], 3)
        self.assertEqual(response.context['total_pages'], 5)
        self.assertEqual(self._titles(response), [f'Post {i}' for i in range(13, 19)])
        self.assertContains(response, 'Showing 13&ndash;18 of 25 posts')
        self.assertContains(response, 'href="?page=2"')
        self.assertContains(response, 'href="?page=4"')
        self.assertContains(response, 'Page 3 of 5')

    def test_page_past_the_end(self):
        """Page 10 of 5 is not an error: empty grid, Previous still works."""
        _make_published_series(25)
        response = self.client.get(self.url, {'page': '10'})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context['current_page'], 10)
        self.assertEqual(response.context['posts'], [])
        self.assertContains(response, 'No posts on this page.')
        self.assertNotContains(response, 'seed_blog')
        self.assertContains(response, 'href="?page=9"')
        self.assertNotContains(response, 'href="?page=11"')

    def test_invalid_page_shows_first_page(self):
        _make_published_series(8)
        for raw in ['-5', 'abc', '0']:
            with self.subTest(raw=raw):
                response = self.client.get(self.url, {'page': raw})
                self.assertEqual(response.context['current_page'], 1)
                self.assertEqual(self._titles(response), [f'Post {i}' for i in range(1, 7)])

    def test_first_page_disables_previous(self):
        _make_published_series(8)
        response = self.client.get(self.url)
        self.assertContains(response, '<span class="disabled" aria-disabled="true">&larr; Previous</span>')
        self.assertContains(response, 'href="?page=2"')

    def test_last_page_disables_next(self):
        _make_published_series(8)
        response = self.client.get(self.url, {'page': '2'})
        self.assertEqual(self._titles(response), ['Post 7', 'Post 8'])
        self.assertContains(response, 'Showing 7&ndash;8 of 8 posts')
        self.assertContains(response, '<span class="disabled" aria-disabled="true">Next &rarr;</span>')

    def test_single_page_has_no_navigation(self):
        _make_published_series(4)
        response = self.client.get(self.url)
        self.assertContains(response, 'Showing 1&ndash;4 of 4 posts')
        self.assertNotContains(response, 'aria-label="Pagination"')

    def test_singular_summary(self):
        _make_published_series(1)
        response = self.client.get(self.url)
        self.assertContains(response, 'Showing 1&ndash;1 of 1 post<')

    def test_drafts_are_hidden(self):
        _make_published_series(2)
        _make_post('Secret Draft', published=False, created_at=_BASE_TIME + datetime.timedelta(days=1))
        response = self.client.get(self.url)
        self.assertNotContains(response, 'Secret Draft')
        self.assertEqual(response.context['total_count'], 2)

    def test_card_without_category_or_excerpt(self):
        """Optional fields are simply left out of the card."""
        _make_post('Bare Post', excerpt=None, created_at=_BASE_TIME)
        response = self.client.get(self.url)
        self.assertContains(response, 'Bare Post')
        self.assertNotContains(response, 'category-badge"')
        self.assertNotContains(response, 'class="excerpt"')

    def test_card_with_category_and_excerpt(self):
        cat = Category.objects.create(name='Tutorial')
        _make_post(
            'Full Post', category=cat, excerpt='Everything filled in.',
            created_at=datetime.datetime(2024, 1, 15, 9, 30, tzinfo=datetime.timezone.utc),
            views=150, likes=23,
        )
        response = self.client.get(self.url)
        self.assertContains(response, '<span class="category-badge">Tutorial</span>')
        self.assertContains(response, '<p class="excerpt">Everything filled in.</p>')
        self.assertContains(response, 'January 15, 2024')
        self.assertContains(response, '150 views')
        self.assertContains(response, '23 likes')

    def test_two_queries_then_cached(self):
        """First view runs count + fetch; repeats inside the window hit the cache."""
        _make_published_series(3)
        with self.assertNumQueries(2):
            self.client.get(self.url)
        with self.assertNumQueries(0):
            self.client.get(self.url)

    def test_cached_snapshot_is_reused_until_expiry(self):
        _make_published_series(3)
        self.client.get(self.url)
        _make_post('Brand New', created_at=timezone.now())

        response = self.client.get(self.url)
        self.assertNotContains(response, 'Brand New')

        cache.clear()  # window elapsed
        response = self.client.get(self.url)
        self.assertContains(response, 'Brand New')

    def test_equivalent_page_values_share_cache_entry(self):
        _make_published_series(3)
        self.client.get(self.url, {'page': 'abc'})
        with self.assertNumQueries(0):
            self.client.get(self.url, {'page': '1'})

    @override_settings(BLOG_REVALIDATE_SECONDS=45)
    def test_context_cached_for_revalidate_window(self):
        """The entry is keyed by normalised page and expires after the window."""
        _make_published_series(8)
        with mock.patch.object(views, 'cache') as fake_cache:
            fake_cache.get.return_value = None
            self.client.get(self.url, {'page': '2'})
        fake_cache.get.assert_called_once_with('post_list|page=2')
        fake_cache.set.assert_called_once_with('post_list|page=2', mock.ANY, timeout=45)

    def test_huge_page_number_is_an_empty_page(self):
        """A 20-digit page skips the fetch instead of overflowing SQL OFFSET."""
        _make_published_series(8)
        with self.assertNumQueries(1):
            response = self.client.get(self.url, {'page': '9' * 20})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context['posts'], [])
        self.assertContains(response, 'No posts on this page.')

    def test_oversized_page_number_is_an_empty_page(self):
        _make_published_series(8)
        response = self.client.get(self.url, {'page': '9' * 5000})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context['posts'], [])

    def test_empty_store_skips_fetch(self):
        with self.assertNumQueries(1):
            response = self.client.get(self.url)
        self.assertContains(response, 'python manage.py seed_blog')

    def test_store_failure_propagates(self):
        with mock.patch.object(queries, 'count_published', side_effect=DatabaseError('down')):
            with self.assertRaises(DatabaseError):
                self.client.get(self.url)

    def test_post_not_allowed(self):
        response = self.client.post(self.url)
        self.assertEqual(response.status_code, 405)

    def test_head_allowed(self):
        _make_published_series(2)
        response = self.client.head(self.url)
        self.assertEqual(response.status_code, 200)


# ---------------------------------------------------------------------------
# Management commands
# ---------------------------------------------------------------------------

class SeedBlogCommandTest(TestCase):
    """Tests for the seed_blog management command."""

    def _run(self, *args):
        out = StringIO()
        call_command('seed_blog', *args, stdout=out)
        return out.getvalue()

    def test_creates_categories_and_posts(self):
        output = self._run()
        self.assertEqual(Category.objects.count(), 3)
        self.assertEqual(Post.objects.count(), 17)
        self.assertEqual(queries.count_published(), 16)
        self.assertIn('Created: 17', output)

    def test_includes_uncategorised_post_without_excerpt(self):
        self._run()
        bare = Post.objects.get(slug='notes-from-the-editor')
        self.assertIsNone(bare.category)
        self.assertIsNone(bare.excerpt)

    def test_rerun_skips_existing(self):
        self._run()
        output = self._run()
        self.assertEqual(Post.objects.count(), 17)
        self.assertIn('Skipped: 17', output)

    def test_reset_recreates(self):
        self._run()
        Post.objects.filter(slug='building-cms-django').update(views=999)
        output = self._run('--reset')
        self.assertIn('[reset]', output)
        self.assertEqual(Post.objects.get(slug='building-cms-django').views, 234)


class CheckDbCommandTest(TestCase):
    """Tests for the check_db management command."""

    def test_reports_counts_and_sample(self):
        cat = Category.objects.create(name='Technology')
        _make_post('Visible', category=cat, views=5, likes=2)
        _make_post('Hidden', published=False)
        out = StringIO()
        call_command('check_db', stdout=out)
        output = out.getvalue()
        self.assertIn('Categories: 1', output)
        self.assertIn('Posts: 2', output)
        self.assertIn('Published posts: 1', output)
        self.assertIn('Sample post retrieved', output)
        self.assertIn('Database connection successful!', output)

    def test_empty_database_has_no_sample(self):
        out = StringIO()
        call_command('check_db', stdout=out)
        self.assertNotIn('Sample post retrieved', out.getvalue())

    def test_database_error_raises_command_error(self):
        with mock.patch.object(queries, 'count_published', side_effect=DatabaseError('down')):
            with self.assertRaises(CommandError):
                call_command('check_db', stdout=StringIO())
