# apps/core/throttling.py
"""
Django REST Framework Throttle Classes

Custom throttling for the public and admin endpoints.
"""
import logging

from django.conf import settings
from rest_framework.throttling import AnonRateThrottle

from apps.infrastructure.rate_limit import get_rate_limit_config

logger = logging.getLogger(__name__)


class ConfigurableAnonRateThrottle(AnonRateThrottle):
    """
    IP-based throttling with environment-based rates

    Subclasses pick their rate by setting rate_key.
    """

    rate_key = "anon_rate"
    default_rate = "100/min"

    def get_rate(self):
        config = get_rate_limit_config(settings.ENVIRONMENT)
        return config.get(self.rate_key, self.default_rate)

    def allow_request(self, request, view):
        """Check if request is allowed"""
        config = get_rate_limit_config(settings.ENVIRONMENT)

        if not config.get("enabled", True):
            return True  # Rate limiting disabled

        allowed = super().allow_request(request, view)

        if not allowed:
            logger.warning(
                f"Rate limit exceeded for IP {self.get_ident(request)} "
                f"on {request.path}"
            )

        return allowed


class LoginThrottle(ConfigurableAnonRateThrottle):
    """
    Brute force protection for the admin password
    """

    scope = "login"
    rate_key = "login_rate"
    default_rate = "5/min"


class CheckoutThrottle(ConfigurableAnonRateThrottle):
    """
    Limits checkout session creation

    Every checkout writes a request row and calls the payment processor.
    """

    scope = "checkout"
    rate_key = "checkout_rate"
    default_rate = "20/min"
