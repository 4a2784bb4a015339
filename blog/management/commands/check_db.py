"""
Management command to smoke-test the database connection.

Prints row counts and one sample post:
    python manage.py check_db
"""

import logging

from django.core.management.base import BaseCommand, CommandError
from django.db import DatabaseError

from blog import queries
from blog.models import Category, Post

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Report category/post counts and show one post with its category."""

    help = 'Checks the database connection by counting categories and posts.'

    def handle(self, *args, **options):
        self.stdout.write('Testing database connection...\n')

        try:
            category_count = Category.objects.count()
            post_count = Post.objects.count()
            published_count = queries.count_published()
            sample = Post.objects.select_related('category').first()
        except DatabaseError as exc:
            logger.exception("Database check failed")
            raise CommandError(f'Database connection failed: {exc}') from exc

        self.stdout.write(f'  Categories: {category_count}')
        self.stdout.write(f'  Posts: {post_count}')
        self.stdout.write(f'  Published posts: {published_count}')

        if sample is not None:
            self.stdout.write('\n  Sample post retrieved:')
            self.stdout.write(f'    - Title: {sample.title}')
            self.stdout.write(f'    - Slug: {sample.slug}')
            self.stdout.write(f"    - Category: {sample.category.name if sample.category else 'None'}")
            self.stdout.write(f'    - Published: {sample.published}')
            self.stdout.write(f'    - Views: {sample.views}')
            self.stdout.write(f'    - Likes: {sample.likes}')

        self.stdout.write(self.style.SUCCESS('\nDatabase connection successful!'))
