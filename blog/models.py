"""
Models for the Mini CMS blog.

Two tables: Category and Post. A post optionally belongs to one category;
deleting a category leaves its posts in place with no category. Rows are
created by the seed command (or any external authoring process); the
listing page only ever reads them.
"""

import uuid

from django.db import models
from django.utils.text import slugify


class Category(models.Model):
    """A named grouping that posts may optionally belong to."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100, unique=True)
    slug = models.SlugField(max_length=100, unique=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name_plural = 'categories'
        ordering = ['name']

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        """Auto-generate slug from name if not set."""
        if not self.slug:
            self.slug = slugify(self.name)
        super().save(*args, **kwargs)


class Post(models.Model):
    """
    A single blog post.

    Only posts with published=True appear on the home listing. The views
    and likes counters are maintained elsewhere and are display-only here.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # Core content
    title = models.CharField(max_length=200)
    slug = models.SlugField(
        max_length=220,
        unique=True,
        blank=True,
        help_text='URL slug, auto-generated from title if blank.',
    )
    excerpt = models.TextField(
        null=True,
        blank=True,
        help_text='Short summary shown on the listing card.',
    )
    content = models.TextField(help_text='Full post body in markdown.')

    # Publication
    published = models.BooleanField(default=False)

    # Engagement
    views = models.PositiveIntegerField(default=0)
    likes = models.PositiveIntegerField(default=0)

    # Taxonomy
    category = models.ForeignKey(
        Category,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name='posts',
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            # Supports the listing query: published=True ORDER BY created_at DESC
            models.Index(fields=['published', 'created_at'], name='post_published_created_idx'),
        ]

    def __str__(self):
        return self.title

    def save(self, *args, **kwargs):
        """Auto-generate unique slug from title if not already set."""
        if not self.slug:
            base = slugify(self.title)[:210]
            slug = base
            counter = 1
            while Post.objects.filter(slug=slug).exclude(pk=self.pk).exists():
                slug = f"{base}-{counter}"
                counter += 1
            self.slug = slug
        super().save(*args, **kwargs)
