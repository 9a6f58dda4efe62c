"""
Database Configuration Module

Provides environment-specific database configurations for Django.
This module can be imported and tested independently of Django.

Supported environments:
- test: In-memory SQLite, rebuilt for every test run
- development: SQLite file, or PostgreSQL when DATABASE_URL is set
- staging: PostgreSQL from DATABASE_URL or DB_* variables
- production: PostgreSQL from DATABASE_URL or DB_* variables, SSL required

Usage:
    from config.settings.databases import get_database_config

    db_config = get_database_config('development')
    DATABASES = {'default': db_config}
"""

import os
from pathlib import Path
from urllib.parse import unquote, urlparse

# Base directory (backend root)
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# ============================================================================
# COMMON DATABASE SETTINGS
# ============================================================================

COMMON_DB_SETTINGS = {
    'ENGINE': 'django.db.backends.postgresql',
    'CONN_MAX_AGE': 60,  # Keep connections for 60 seconds
    'OPTIONS': {
        'connect_timeout': 10,  # Connection timeout in seconds
        'application_name': 'kings-advice',  # Appears in pg_stat_activity
    },
}

POSTGRES_SCHEMES = ('postgres', 'postgresql', 'pgsql')


# ============================================================================
# ENVIRONMENT-SPECIFIC CONFIGURATIONS
# ============================================================================

def get_database_config(environment: str) -> dict:
    """
    Get database configuration for specified environment.

    Args:
        environment: One of 'test', 'development', 'staging', 'production'

    Returns:
        Dictionary with Django database configuration

    Raises:
        ValueError: If environment is not recognized

    Examples:
        >>> config = get_database_config('test')
        >>> config['ENGINE']
        'django.db.backends.sqlite3'
    """
    config_functions = {
        'test': _get_test_config,
        'development': _get_development_config,
        'staging': _get_staging_config,
        'production': _get_production_config,
    }

    if environment not in config_functions:
        valid_envs = ', '.join(config_functions.keys())
        raise ValueError(
            f"Invalid environment '{environment}'. "
            f"Must be one of: {valid_envs}"
        )

    return config_functions[environment]()


def parse_database_url(url: str) -> dict:
    """
    Convert a postgres:// URL into Django database settings.

    Raises:
        ValueError: If the URL scheme is not PostgreSQL or has no database name

    Example:
        >>> parse_database_url('postgres://u:p@db:5432/app')['HOST']
        'db'
    """
    parsed = urlparse(url)

    if parsed.scheme not in POSTGRES_SCHEMES:
        raise ValueError(f"Unsupported DATABASE_URL scheme: {parsed.scheme!r}")

    name = parsed.path.lstrip('/')
    if not name:
        raise ValueError("DATABASE_URL is missing the database name")

    return {
        **COMMON_DB_SETTINGS,
        'NAME': unquote(name),
        'USER': unquote(parsed.username or ''),
        'PASSWORD': unquote(parsed.password or ''),
        'HOST': parsed.hostname or 'localhost',
        'PORT': str(parsed.port or 5432),
        'OPTIONS': {**COMMON_DB_SETTINGS['OPTIONS']},
    }


def _get_test_config() -> dict:
    """
    Test environment configuration.

    In-memory SQLite; pytest-django creates the schema from migrations.
    """
    return {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
        'TEST': {
            'NAME': ':memory:',
        },
    }


def _get_development_config() -> dict:
    """
    Development environment configuration.

    Uses DATABASE_URL when present, otherwise a local SQLite file.
    """
    database_url = os.getenv('DATABASE_URL')
    if database_url:
        return parse_database_url(database_url)

    return {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': BASE_DIR / 'db.sqlite3',
    }


def _get_server_config(environment: str, conn_max_age: int) -> dict:
    """PostgreSQL settings shared by staging and production"""
    database_url = os.getenv('DATABASE_URL')
    if database_url:
        config = parse_database_url(database_url)
    else:
        required_vars = ['DB_NAME', 'DB_USER', 'DB_PASSWORD', 'DB_HOST']
        missing_vars = [var for var in required_vars if not os.getenv(var)]

        if missing_vars:
            raise ValueError(
                f"Missing required environment variables for {environment}: "
                f"{', '.join(missing_vars)} (or set DATABASE_URL)"
            )

        config = {
            **COMMON_DB_SETTINGS,
            'NAME': os.getenv('DB_NAME'),
            'USER': os.getenv('DB_USER'),
            'PASSWORD': os.getenv('DB_PASSWORD'),
            'HOST': os.getenv('DB_HOST'),
            'PORT': os.getenv('DB_PORT', '5432'),
            'OPTIONS': {**COMMON_DB_SETTINGS['OPTIONS']},
        }

    config['CONN_MAX_AGE'] = conn_max_age
    config['OPTIONS']['sslmode'] = os.getenv('DB_SSLMODE', 'require')
    return config


def _get_staging_config() -> dict:
    """
    Staging environment configuration.

    SSL required; credentials from the environment.
    """
    return _get_server_config('staging', conn_max_age=300)


def _get_production_config() -> dict:
    """
    Production environment configuration.

    SSL required; longest connection pooling.
    """
    return _get_server_config('production', conn_max_age=600)


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def get_all_environments() -> list:
    """
    Get list of supported environment names.

    Example:
        get_all_environments()
        ['test', 'development', 'staging', 'production']
    """
    return ['test', 'development', 'staging', 'production']


def validate_environment(environment: str) -> bool:
    """
    Check if environment name is valid.

    Example:
        validate_environment('development')
        True
        validate_environment('invalid')
        False
    """
    return environment in get_all_environments()


def get_connection_info(environment: str) -> dict:
    """
    Get human-readable connection information for an environment.

    Returns:
        Dictionary with connection details (passwords masked)
    """
    config = get_database_config(environment)

    return {
        'environment': environment,
        'engine': config['ENGINE'].rsplit('.', 1)[-1],
        'host': config.get('HOST', 'N/A'),
        'port': config.get('PORT', 'N/A'),
        'database': str(config['NAME']),
        'user': config.get('USER', 'N/A'),
        'password': '***',  # Never expose passwords
        'ssl_mode': config.get('OPTIONS', {}).get('sslmode', 'N/A'),
    }
