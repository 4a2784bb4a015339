"""
Management command to seed sample categories and blog posts.

Run this on a fresh database to give the home feed something to page through:
    python manage.py seed_blog
    python manage.py seed_blog --reset   # wipe posts and categories first
"""

from django.core.management.base import BaseCommand
from django.db import transaction

from blog.models import Category, Post


CATEGORIES = [
    ('Technology', 'technology'),
    ('Lifestyle', 'lifestyle'),
    ('Tutorial', 'tutorial'),
]

# (title, slug, excerpt, category_slug, views, likes, published)
POSTS = [
    ('Getting Started with Django', 'getting-started-django',
     'Learn the fundamentals of Django and its batteries-included approach.',
     'technology', 150, 23, True),
    ('Understanding the Django ORM', 'understanding-django-orm',
     'How querysets turn Python method chains into SQL.',
     'technology', 89, 12, True),
    ('Building a CMS with Django', 'building-cms-django',
     'Step-by-step guide to creating your own content management system.',
     'tutorial', 234, 45, True),
    ('The Art of Minimalist Living', 'art-minimalist-living',
     'Discover how less can truly be more in your daily life.',
     'lifestyle', 312, 67, True),
    ('Advanced Python Typing Patterns', 'advanced-python-typing-patterns',
     'Level up your type hints with protocols, generics and overloads.',
     'tutorial', 178, 34, True),
    ('Work-Life Balance in Tech', 'work-life-balance-tech',
     'Tips for maintaining healthy boundaries in the tech industry.',
     'lifestyle', 145, 28, True),
    ('Mastering CSS Grid Layout', 'mastering-css-grid-layout',
     'Complete guide to building complex layouts with CSS Grid.',
     'tutorial', 298, 52, True),
    ('Introduction to Docker Containers', 'introduction-docker-containers',
     'Learn how Docker can simplify your development workflow.',
     'technology', 267, 41, True),
    ('Healthy Cooking on a Budget', 'healthy-cooking-budget',
     "Nutritious meal ideas that won't break the bank.",
     'lifestyle', 423, 89, True),
    ('Template Tags Best Practices', 'template-tags-best-practices',
     'Essential patterns for keeping logic out of your Django templates.',
     'tutorial', 334, 67, True),
    ('Database Optimization Techniques', 'database-optimization-techniques',
     'Speed up your database queries with these proven strategies.',
     'technology', 189, 36, True),
    ('Morning Routines of Successful People', 'morning-routines-successful-people',
     'Start your day right with these proven morning habits.',
     'lifestyle', 512, 102, True),
    ('API Design Best Practices', 'api-design-best-practices',
     'Build HTTP APIs that developers will love to use.',
     'tutorial', 276, 48, True),
    ('Understanding Python Closures', 'understanding-python-closures',
     "Master one of Python's most quietly powerful features.",
     'technology', 401, 73, True),
    ('Digital Detox: Reclaim Your Time', 'digital-detox-reclaim-time',
     'Strategies to reduce screen time and improve mental health.',
     'lifestyle', 387, 94, True),
    # Uncategorised, no excerpt: the card renders without badge or summary
    ('Notes From the Editor', 'notes-from-the-editor',
     None, None, 12, 1, True),
    # Draft: never appears on the listing
    ('Upcoming: Caching Strategies', 'upcoming-caching-strategies',
     'A preview of the next article in the series.',
     'technology', 0, 0, False),
]


def _content_for(title, excerpt):
    """Build a short markdown body for a sample post."""
    body = f'# {title}\n\n'
    if excerpt:
        body += f'{excerpt}\n\n'
    body += '## Overview\n\nThis is sample content created by the seed_blog command.\n'
    return body


class Command(BaseCommand):
    """Seed sample categories and posts into the database."""

    help = 'Seeds sample categories and blog posts. Safe to re-run: skips existing slugs.'

    def add_arguments(self, parser):
        parser.add_argument(
            '--reset',
            action='store_true',
            help='Delete all existing posts and categories before seeding.',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        """Create categories and posts if they do not already exist."""
        if options['reset']:
            deleted_posts, _ = Post.objects.all().delete()
            deleted_categories, _ = Category.objects.all().delete()
            self.stdout.write(
                f'  [reset] Removed {deleted_posts} posts and {deleted_categories} categories'
            )

        categories = {}
        for name, slug in CATEGORIES:
            category, _ = Category.objects.get_or_create(slug=slug, defaults={'name': name})
            categories[slug] = category
        self.stdout.write(f'  [ok]    {len(categories)} categories ready')

        created_count = 0
        skipped_count = 0

        for title, slug, excerpt, category_slug, views, likes, published in POSTS:
            if Post.objects.filter(slug=slug).exists():
                self.stdout.write(f'  [skip]  {title}')
                skipped_count += 1
                continue

            post = Post.objects.create(
                title=title,
                slug=slug,
                excerpt=excerpt,
                content=_content_for(title, excerpt),
                published=published,
                category=categories.get(category_slug),
                views=views,
                likes=likes,
            )

            label = 'new' if published else 'draft'
            self.stdout.write(f'  [{label}]'.ljust(10) + post.title)
            created_count += 1

        self.stdout.write(
            self.style.SUCCESS(
                f'\nDone! Created: {created_count}  |  Skipped: {skipped_count}'
            )
        )
