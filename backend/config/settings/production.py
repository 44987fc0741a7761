"""
Production settings.
"""

import structlog

from .base import *  # noqa

DEBUG = False

# Security settings
SECURE_CONTENT_TYPE_NOSNIFF = True
X_FRAME_OPTIONS = "DENY"
SECURE_HSTS_SECONDS = 31536000
SECURE_HSTS_INCLUDE_SUBDOMAINS = True
SECURE_HSTS_PRELOAD = True
SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True

SECRET_KEY = env("DJANGO_SECRET_KEY")  # noqa
FIELD_ENCRYPTION_KEY = env("FIELD_ENCRYPTION_KEY")  # noqa
NATIONAL_ID_HASH_KEY = env("NATIONAL_ID_HASH_KEY")  # noqa

# Database - PostgreSQL in production
DATABASES = {
    "default": env.db("DATABASE_URL"),  # noqa
}
DATABASES["default"]["ATOMIC_REQUESTS"] = True
DATABASES["default"]["CONN_MAX_AGE"] = 600

# Static files
STORAGES = {
    "default": {"BACKEND": "django.core.files.storage.FileSystemStorage"},
    "staticfiles": {"BACKEND": "whitenoise.storage.CompressedManifestStaticFilesStorage"},
}

# Structured JSON logs regardless of LOG_JSON
LOGGING["formatters"]["structlog"]["processor"] = structlog.processors.JSONRenderer()  # noqa
