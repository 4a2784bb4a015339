"""
Migration: create Category and Post.

- Category: UUID id, unique name and slug, timestamps
- Post: UUID id, unique slug, optional excerpt, publish flag, engagement
  counters, nullable category FK (SET NULL on delete), timestamps
- Composite index on (published, created_at) for the listing query
"""

import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Category',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=100, unique=True)),
                ('slug', models.SlugField(blank=True, max_length=100, unique=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name_plural': 'categories',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Post',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('title', models.CharField(max_length=200)),
                ('slug', models.SlugField(
                    blank=True, max_length=220, unique=True,
                    help_text='URL slug, auto-generated from title if blank.',
                )),
                ('excerpt', models.TextField(
                    blank=True, null=True,
                    help_text='Short summary shown on the listing card.',
                )),
                ('content', models.TextField(help_text='Full post body in markdown.')),
                ('published', models.BooleanField(default=False)),
                ('views', models.PositiveIntegerField(default=0)),
                ('likes', models.PositiveIntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('category', models.ForeignKey(
                    blank=True, null=True,
                    on_delete=django.db.models.deletion.SET_NULL,
                    related_name='posts', to='blog.category',
                )),
            ],
            options={
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['published', 'created_at'], name='post_published_created_idx'),
                ],
            },
        ),
    ]
