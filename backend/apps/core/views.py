# backend/apps/core/views.py
"""
Core views: API index and health checks
"""
import logging
import time

from django.db import connection
from django.http import JsonResponse
from django.views.decorators.cache import never_cache
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny

from apps.infrastructure.container import get_service_info

logger = logging.getLogger(__name__)

LATENCY_WARNING_MS = 100


def _ping_database() -> float:
    """Run SELECT 1 and return the round trip in milliseconds"""
    start_time = time.time()
    with connection.cursor() as cursor:
        cursor.execute("SELECT 1")
        cursor.fetchone()
    return round((time.time() - start_time) * 1000, 2)


@extend_schema(
    tags=["Health"],
    summary="Database health check",
    description="Check if database connection is healthy and measure latency.",
    responses={
        200: OpenApiTypes.OBJECT,
        503: OpenApiTypes.OBJECT,
    },
)
@api_view(["GET"])
@permission_classes([AllowAny])
@never_cache
def database_health_check(request):
    """
    Database health check for load balancers and monitoring.

    Returns:
        200: {"status": "healthy", "latency_ms": 1.2, "database": "..."}
        503: {"status": "unhealthy", "error": "..."}
    """
    try:
        latency_ms = _ping_database()
    except Exception as e:
        logger.error(f"Database health check failed: {e}", exc_info=True)
        return JsonResponse({"status": "unhealthy", "error": str(e)}, status=503)

    if latency_ms > LATENCY_WARNING_MS:
        logger.warning(
            f"Database health check latency is high: {latency_ms}ms",
            extra={"latency_ms": latency_ms, "threshold_ms": LATENCY_WARNING_MS},
        )

    return JsonResponse(
        {
            "status": "healthy",
            "latency_ms": latency_ms,
            "database": str(connection.settings_dict.get("NAME")),
        }
    )


@extend_schema(
    tags=["Health"],
    summary="Service wiring",
    description="Which LLM, payment, email and task adapters are active. No secrets.",
    responses={200: OpenApiTypes.OBJECT},
)
@api_view(["GET"])
@permission_classes([AllowAny])
@never_cache
def services_health_check(request):
    from apps.consulting.apps import get_services

    services = get_services()
    info = get_service_info(services.config)
    info["payments"]["available"] = services.payment_gateway is not None
    info["llm"]["available"] = services.llm is not None
    return JsonResponse(info)


def api_root(request):
    """API root endpoint showing available endpoints"""
    return JsonResponse(
        {
            "message": "Kings Advice API",
            "version": "1.0",
            "endpoints": {
                "health": "/api/health/db",
                "services": "/api/health/services",
                "requests": "/api/requests",
                "basic_questions": "/api/basic-questions",
                "checkout": "/api/create-checkout-session",
                "admin": "/api/admin/login",
                "schema": "/api/schema/",
            },
        }
    )
