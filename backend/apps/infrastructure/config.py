# apps/infrastructure/config.py

"""
Configuration Management

Environment-specific configurations for different deployment contexts.
"""

import os
from typing import Any, Dict


def get_environment() -> str:
    """
    Get current environment from environment variable

    Returns:
        Environment name: 'test', 'development', 'staging', or 'production'
    """
    return os.getenv("ENVIRONMENT", "development")


def get_config() -> Dict[str, Any]:
    """
    Get configuration for current environment

    Returns:
        Configuration dictionary for active environment
    """
    env = get_environment()

    configs = {
        "test": TEST_CONFIG,
        "development": DEVELOPMENT_CONFIG,
        "staging": STAGING_CONFIG,
        "production": PRODUCTION_CONFIG,
    }

    config = dict(configs.get(env, DEVELOPMENT_CONFIG))
    config["environment"] = env  # Add environment name to config

    return config


def _task_workers() -> int:
    try:
        return int(os.getenv("TASK_WORKERS", "4"))
    except ValueError:
        return 4


# ============================================================
# TEST CONFIGURATION
# ============================================================

TEST_CONFIG = {
    "llm": {"type": "fake", "response": "Test advice from fake LLM"},
    "payments": {"type": "fake", "publishable_key": "pk_test_fake"},
    "email": {"type": "fake"},
    "tasks": {"type": "inline"},
    "repositories": {"type": "django"},
    "prompt_version": "v1.0",
    "admin_email": "admin@test.local",
    "site_url": "",
    "resolve_on_submit": False,
}

# ============================================================
# DEVELOPMENT CONFIGURATION
# ============================================================

DEVELOPMENT_CONFIG = {
    "llm": {
        "type": "openrouter",
        "api_key": os.getenv("OPENROUTER_API_KEY", ""),
        "base_url": "https://openrouter.ai/api/v1",
        "model": os.getenv("DEFAULT_LLM_MODEL", "google/gemini-flash-1.5"),
        "temperature": 0.7,
        "max_tokens": 800,
    },
    "payments": {
        "type": "stripe",
        "secret_key": os.getenv("STRIPE_SECRET_KEY", ""),
        "publishable_key": os.getenv("STRIPE_PUBLISHABLE_KEY", ""),
    },
    "email": {"type": "django"},
    "tasks": {"type": "thread", "workers": _task_workers()},
    "repositories": {"type": "django"},
    "prompt_version": "v1.0",
    "admin_email": os.getenv("ADMIN_EMAIL", ""),
    "site_url": os.getenv("SITE_URL", ""),
    "resolve_on_submit": False,
}

# ============================================================
# STAGING CONFIGURATION
# ============================================================

STAGING_CONFIG = {
    **DEVELOPMENT_CONFIG,
    "llm": {
        **DEVELOPMENT_CONFIG["llm"],
        "api_key": os.getenv("OPENROUTER_API_KEY"),
    },
}

# ============================================================
# PRODUCTION CONFIGURATION
# ============================================================

PRODUCTION_CONFIG = {
    "llm": {
        "type": "openrouter",
        "api_key": os.getenv("OPENROUTER_API_KEY"),
        "base_url": "https://openrouter.ai/api/v1",
        "model": os.getenv("DEFAULT_LLM_MODEL", "google/gemini-flash-1.5"),
        "temperature": 0.7,
        "max_tokens": 800,
    },
    "payments": {
        "type": "stripe",
        "secret_key": os.getenv("STRIPE_SECRET_KEY"),
        "publishable_key": os.getenv("STRIPE_PUBLISHABLE_KEY", ""),
    },
    "email": {"type": "django"},
    "tasks": {"type": "thread", "workers": _task_workers()},
    "repositories": {"type": "django"},
    "prompt_version": "v1.0",
    "admin_email": os.getenv("ADMIN_EMAIL", ""),
    "site_url": os.getenv("SITE_URL", ""),
    "resolve_on_submit": False,
}


# ============================================================
# CONFIGURATION HELPERS
# ============================================================


def get_llm_config() -> Dict[str, Any]:
    """Get LLM configuration for current environment"""
    return get_config()["llm"]


def get_payments_config() -> Dict[str, Any]:
    """Get payment gateway configuration for current environment"""
    return get_config()["payments"]


def is_production() -> bool:
    """Check if running in production environment"""
    return get_environment() == "production"


def is_test() -> bool:
    """Check if running in test environment"""
    return get_environment() == "test"


def is_development() -> bool:
    """Check if running in development environment"""
    return get_environment() == "development"
