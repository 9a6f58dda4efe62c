# apps/core/middleware.py
"""
Rate Limiting Middleware

Global per-client request budget with informational headers.
"""
import logging

from django.conf import settings
from django.core.cache import cache
from django.http import JsonResponse
from django.utils.deprecation import MiddlewareMixin

from apps.infrastructure.rate_limit import (
    format_retry_after,
    get_rate_limit_config,
    parse_rate,
)

logger = logging.getLogger(__name__)

PERIOD_SECONDS = {
    "min": 60,
    "minute": 60,
    "hour": 3600,
    "day": 86400,
}


class RateLimitMiddleware(MiddlewareMixin):
    """
    Middleware for global rate limiting

    Tracks requests per IP, or per admin session once logged in.
    """

    sync_capable = True
    async_capable = False

    def __init__(self, get_response):
        super().__init__(get_response)
        self.config = get_rate_limit_config(settings.ENVIRONMENT)
        self.enabled = self.config.get("enabled", True)

    def process_request(self, request):
        """Check rate limits before processing request"""
        if not self.enabled or self._should_skip_rate_limit(request):
            return None

        identifier = self._get_identifier(request)

        if self._is_rate_limited(identifier):
            return self._rate_limit_response(identifier, request)

        self._increment_counter(identifier)
        return None

    def process_response(self, request, response):
        """Add rate limit headers to response"""
        if not self.enabled or self._should_skip_rate_limit(request):
            return response

        rate_info = self._get_rate_info(self._get_identifier(request))

        response["X-RateLimit-Limit"] = rate_info["limit"]
        response["X-RateLimit-Remaining"] = rate_info["remaining"]
        response["X-RateLimit-Reset"] = rate_info["reset"]

        return response

    def _should_skip_rate_limit(self, request):
        skip_paths = [
            "/admin/",
            "/static/",
            "/api/health/",
        ]
        return any(request.path.startswith(path) for path in skip_paths)

    def _get_identifier(self, request):
        """Admin session if present, else client IP"""
        session = getattr(request, "session", None)
        if session is not None and session.get("is_admin"):
            return f"admin:{session.get('admin_id')}"

        x_forwarded_for = request.META.get("HTTP_X_FORWARDED_FOR")
        if x_forwarded_for:
            ip = x_forwarded_for.split(",")[0].strip()
        else:
            ip = request.META.get("REMOTE_ADDR")

        return f"ip:{ip}"

    def _rate_for(self, identifier):
        if identifier.startswith("admin:"):
            return self.config.get("admin_rate", "1000/hour")
        return self.config.get("anon_rate", "100/min")

    def _cache_key(self, identifier, period):
        return f"rate_limit:{identifier}:{period}"

    def _is_rate_limited(self, identifier):
        limit, period = parse_rate(self._rate_for(identifier))
        current_count = cache.get(self._cache_key(identifier, period), 0)
        return current_count >= limit

    def _increment_counter(self, identifier):
        _, period = parse_rate(self._rate_for(identifier))
        cache_key = self._cache_key(identifier, period)

        try:
            current = cache.get(cache_key, 0)
            cache.set(cache_key, current + 1, timeout=PERIOD_SECONDS.get(period, 60))
        except Exception as e:
            logger.error(f"Failed to increment rate limit counter: {e}")

    def _get_rate_info(self, identifier):
        rate_string = self._rate_for(identifier)
        limit, period = parse_rate(rate_string)
        current_count = cache.get(self._cache_key(identifier, period), 0)

        return {
            "limit": limit,
            "remaining": max(0, limit - current_count),
            "reset": format_retry_after(rate_string),
        }

    def _rate_limit_response(self, identifier, request):
        """Return 429 Rate Limited response"""
        rate_string = self._rate_for(identifier)
        retry_after = format_retry_after(rate_string)

        logger.warning(
            f"Rate limit exceeded: {identifier} on {request.path} "
            f"({request.method})"
        )

        response = JsonResponse(
            {
                "error": f"Too many requests. Please try again in {retry_after} seconds.",
                "retry_after": retry_after,
            },
            status=429,
        )

        response["Retry-After"] = str(retry_after)
        response["X-RateLimit-Limit"] = parse_rate(rate_string)[0]
        response["X-RateLimit-Remaining"] = 0
        response["X-RateLimit-Reset"] = retry_after

        return response
