"""
Django settings for Mini CMS, a paginated blog listing.
"""

import os
from pathlib import Path

import dj_database_url

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.environ.get(
    'DJANGO_SECRET_KEY',
    'django-insecure-change-me-in-production'
)

DEBUG = os.environ.get('DJANGO_DEBUG', 'True').lower() in ('true', '1', 'yes')

ALLOWED_HOSTS = os.environ.get('DJANGO_ALLOWED_HOSTS', 'localhost,127.0.0.1').split(',')

CSRF_TRUSTED_ORIGINS = [
    origin.strip()
    for origin in os.environ.get('CSRF_TRUSTED_ORIGINS', '').split(',')
    if origin.strip()
]

# django-debug-toolbar is opt-in: it needs DEBUG and DJANGO_DEBUG_TOOLBAR=true
DEBUG_TOOLBAR = DEBUG and os.environ.get('DJANGO_DEBUG_TOOLBAR', 'False').lower() in ('true', '1', 'yes')

INSTALLED_APPS = [
    'django.contrib.contenttypes',
    'django.contrib.staticfiles',
    # Mini CMS apps
    'blog',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'whitenoise.middleware.WhiteNoiseMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

if DEBUG_TOOLBAR:
    INSTALLED_APPS.insert(0, 'debug_toolbar')
    MIDDLEWARE.insert(0, 'debug_toolbar.middleware.DebugToolbarMiddleware')

INTERNAL_IPS = ['127.0.0.1']  # Required for django-debug-toolbar to work

ROOT_URLCONF = 'minicms.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
            ],
        },
    },
]

WSGI_APPLICATION = 'minicms.wsgi.application'

# Database: DATABASE_URL (e.g. postgres://...) wins; falls back to SQLite locally
DATABASES = {
    'default': dj_database_url.config(
        default=f"sqlite:///{BASE_DIR / 'db.sqlite3'}",
        conn_max_age=600,
    )
}

LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True

STATIC_URL = '/static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'
STATICFILES_DIRS = [BASE_DIR / 'static']
STORAGES = {
    'staticfiles': {
        'BACKEND': 'whitenoise.storage.CompressedManifestStaticFilesStorage',
    },
}

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# ---------------------------------------------------------------------------
# Caching
# ---------------------------------------------------------------------------
# DatabaseCache requires no extra services and works with SQLite and
# PostgreSQL. Run `python manage.py createcachetable` once after setup.
# Swap to Redis or memcached by setting CACHE_BACKEND and CACHE_LOCATION.
CACHES = {
    'default': {
        'BACKEND': os.environ.get(
            'CACHE_BACKEND',
            'django.core.cache.backends.db.DatabaseCache',
        ),
        'LOCATION': os.environ.get('CACHE_LOCATION', 'django_cache'),
    }
}

# ---------------------------------------------------------------------------
# Blog listing
# ---------------------------------------------------------------------------
# Posts per page on the home feed.
BLOG_POSTS_PER_PAGE = int(os.environ.get('BLOG_POSTS_PER_PAGE', '6'))

# Seconds a rendered listing page is reused before the database is queried again.
BLOG_REVALIDATE_SECONDS = int(os.environ.get('BLOG_REVALIDATE_SECONDS', '60'))

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
# Everything goes to the console. django.db.backends stays at WARNING to keep
# query noise out; set it to DEBUG when investigating query counts.
LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'simple': {
            'format': '{levelname} {asctime} {name} {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'simple',
        },
    },
    'loggers': {
        'django.db.backends': {
            'handlers': ['console'],
            'level': 'WARNING',
            'propagate': False,
        },
        'blog': {
            'handlers': ['console'],
            'level': os.environ.get('BLOG_LOG_LEVEL', 'DEBUG' if DEBUG else 'INFO'),
            'propagate': False,
        },
    },
}
