# backend/conftest.py

"""
Pytest configuration and fixtures.
"""
import pytest
from django.core.cache import cache
from django.core.management import call_command

ADMIN_PASSWORD = "correct-horse-battery"


@pytest.fixture(scope="session")
def django_db_setup(django_db_setup, django_db_blocker):
    """Verify test database configuration and run migrations."""
    from django.conf import settings

    # Verify configuration
    db_config = settings.DATABASES["default"]
    assert db_config["ENGINE"] == "django.db.backends.sqlite3"
    assert settings.ENVIRONMENT == "test"

    # Run migrations automatically
    with django_db_blocker.unblock():
        call_command("migrate", "--noinput", verbosity=0)


@pytest.fixture(autouse=True)
def enable_db_access_for_all_tests(db):
    """Automatically enable database access for all tests."""
    pass


@pytest.fixture(autouse=True)
def clear_cache():
    """Throttle and rate limit counters live in the cache."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture(autouse=True)
def services():
    """Fresh fake-backed services for every test."""
    from django.apps import apps

    from apps.infrastructure.config import TEST_CONFIG
    from apps.infrastructure.container import create_services

    app_config = apps.get_app_config("consulting")
    original = app_config.services
    app_config.services = create_services({**TEST_CONFIG, "environment": "test"})

    yield app_config.services

    app_config.services = original


@pytest.fixture
def admin_credential():
    """Stored admin login with a known password."""
    from django.contrib.auth.hashers import make_password

    from apps.consulting.models import AdminCredential

    return AdminCredential.objects.create(
        username="admin", password=make_password(ADMIN_PASSWORD)
    )


@pytest.fixture
def portal_client(admin_credential):
    """APIClient holding a logged-in admin session."""
    from rest_framework.test import APIClient

    client = APIClient()
    response = client.post(
        "/api/admin/login", {"password": ADMIN_PASSWORD}, format="json"
    )
    assert response.status_code == 200
    return client


@pytest.fixture
def outbox(services):
    """FakeEmailSender behind the active notifier."""
    return services.notifier._sender
