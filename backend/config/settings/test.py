# config/settings/test.py
"""
Test environment settings.

This file is used exclusively for running tests.
"""
import os

# Service container reads ENVIRONMENT from the process environment
os.environ["ENVIRONMENT"] = "test"

from .base import *  # noqa: E402,F401,F403
from .databases import get_database_config  # noqa: E402

# Force test environment
ENVIRONMENT = "test"

# Load .env.test explicitly
from dotenv import load_dotenv  # noqa: E402

env_test_path = BASE_DIR / ".env.test"
if env_test_path.exists():
    load_dotenv(env_test_path, override=False)

# Test database configuration
DATABASES = {
    "default": get_database_config("test"),
}

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "consulting-tests",
    }
}

# Disable external API calls in tests
OPENROUTER_API_KEY = "test-key"
DEFAULT_LLM_MODEL = "test-model"
STRIPE_SECRET_KEY = ""
STRIPE_PUBLISHABLE_KEY = "pk_test_fake"

# Outgoing mail is captured in django.core.mail.outbox
EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"
DEFAULT_FROM_EMAIL = "Kings Advice <test@kingsadvice.local>"
ADMIN_EMAIL = "admin@test.local"
SITE_URL = "http://testserver"

# Speed up password hashing in tests
PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.MD5PasswordHasher",
]

# Let pytest's caplog see every app logger
LOGGING["loggers"] = {}
