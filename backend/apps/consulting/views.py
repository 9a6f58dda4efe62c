# apps/consulting/views.py
"""
Consulting API views: requests, checkout, knowledge base and admin session
"""
import logging
from uuid import UUID

from django.conf import settings
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from apps.core.throttling import CheckoutThrottle, LoginThrottle
from apps.domain.models import NotFoundError, PaymentProviderError, RequestStatus, Tier

from .apps import get_services
from .auth import (
    IsAdminSession,
    IsAdminSessionOrCreateOnly,
    IsAdminSessionOrReadOnly,
    authenticate_admin,
    end_admin_session,
    is_admin_session,
    start_admin_session,
)
from .serializers import (
    AdminLoginSerializer,
    CannedAnswerSerializer,
    CheckoutSerializer,
    ConsultingRequestSerializer,
    CreateCannedAnswerSerializer,
    SubmitRequestSerializer,
    UpdateCannedAnswerSerializer,
    UpdateRequestSerializer,
)

logger = logging.getLogger(__name__)


def _parse_id(value: str, not_found_message: str) -> UUID:
    """Path ids that are not UUIDs cannot match any row"""
    try:
        return UUID(value)
    except ValueError:
        raise NotFoundError(not_found_message)


# ============================================================
# ADMIN SESSION
# ============================================================

@extend_schema(
    tags=["Admin"],
    summary="Admin login",
    request=AdminLoginSerializer,
    responses={200: OpenApiTypes.OBJECT, 400: OpenApiTypes.OBJECT, 401: OpenApiTypes.OBJECT},
)
@api_view(["POST"])
@permission_classes([AllowAny])
@throttle_classes([LoginThrottle])
def admin_login(request):
    """Start an admin session after checking the password"""
    serializer = AdminLoginSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    admin = authenticate_admin(
        get_services().admin_credentials, serializer.validated_data["password"]
    )
    if admin is None:
        logger.warning(f"Failed admin login from {request.META.get('REMOTE_ADDR')}")
        return Response(
            {"error": "Invalid credentials"}, status=status.HTTP_401_UNAUTHORIZED
        )

    start_admin_session(request, admin)
    logger.info("Admin logged in")

    return Response({"success": True, "message": "Login successful"})


@api_view(["POST"])
@permission_classes([AllowAny])
def admin_logout(request):
    """End the admin session"""
    end_admin_session(request)
    return Response({"success": True})


@api_view(["GET"])
@permission_classes([AllowAny])
def admin_check(request):
    """Report whether the caller holds an admin session"""
    return Response({"isAdmin": is_admin_session(request)})


# ============================================================
# REQUESTS
# ============================================================

@extend_schema(
    tags=["Requests"],
    request=SubmitRequestSerializer,
    responses={200: ConsultingRequestSerializer(many=True), 201: ConsultingRequestSerializer},
)
@api_view(["GET", "POST"])
@permission_classes([IsAdminSessionOrCreateOnly])
def request_list(request):
    """
    GET: all requests, newest first (admin only)
    POST: submit a new pending request
    """
    lifecycle = get_services().lifecycle

    if request.method == "GET":
        requests = lifecycle.list_requests()
        return Response(ConsultingRequestSerializer(requests, many=True).data)

    serializer = SubmitRequestSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    consulting_request = lifecycle.submit_request(
        tier=Tier(data["tier"]),
        customer_name=data["customerName"],
        customer_email=data["customerEmail"],
        description=data["description"],
        amount=data["amount"],
    )

    return Response(
        ConsultingRequestSerializer(consulting_request).data,
        status=status.HTTP_201_CREATED,
    )


@extend_schema(
    tags=["Requests"],
    request=UpdateRequestSerializer,
    responses={200: ConsultingRequestSerializer},
)
@api_view(["GET", "PATCH", "DELETE"])
@permission_classes([IsAdminSessionOrReadOnly])
def request_detail(request, request_id):
    """
    GET: one request (public, by id)
    PATCH: admin status/response update
    DELETE: admin removal
    """
    lifecycle = get_services().lifecycle
    request_id = _parse_id(request_id, "Request not found")

    if request.method == "GET":
        return Response(ConsultingRequestSerializer(lifecycle.get_request(request_id)).data)

    if request.method == "DELETE":
        if not lifecycle.delete_request(request_id):
            return Response(
                {"error": "Request not found"}, status=status.HTTP_404_NOT_FOUND
            )
        return Response({"success": True})

    serializer = UpdateRequestSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    new_status = data.get("status")
    updated = lifecycle.admin_update(
        request_id,
        status=RequestStatus(new_status) if new_status else None,
        response=data.get("response"),
    )

    return Response(ConsultingRequestSerializer(updated).data)


# ============================================================
# KNOWLEDGE BASE
# ============================================================

@extend_schema(
    tags=["Knowledge Base"],
    request=CreateCannedAnswerSerializer,
    responses={200: CannedAnswerSerializer(many=True), 201: CannedAnswerSerializer},
)
@api_view(["GET", "POST"])
@permission_classes([IsAdminSessionOrReadOnly])
def basic_question_list(request):
    """
    GET: all canned answers ordered by topic (public)
    POST: add a canned answer (admin only)
    """
    knowledge_base = get_services().knowledge_base

    if request.method == "GET":
        return Response(CannedAnswerSerializer(knowledge_base.list_entries(), many=True).data)

    serializer = CreateCannedAnswerSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    entry = knowledge_base.create_entry(**serializer.validated_data)
    return Response(CannedAnswerSerializer(entry).data, status=status.HTTP_201_CREATED)


@extend_schema(
    tags=["Knowledge Base"],
    request=UpdateCannedAnswerSerializer,
    responses={200: CannedAnswerSerializer},
)
@api_view(["PATCH", "DELETE"])
@permission_classes([IsAdminSession])
def basic_question_detail(request, entry_id):
    """Edit or remove a canned answer (admin only)"""
    knowledge_base = get_services().knowledge_base
    entry_id = _parse_id(entry_id, "Question not found")

    if request.method == "DELETE":
        if not knowledge_base.delete_entry(entry_id):
            return Response(
                {"error": "Question not found"}, status=status.HTTP_404_NOT_FOUND
            )
        return Response({"success": True})

    serializer = UpdateCannedAnswerSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    entry = knowledge_base.update_entry(entry_id, **serializer.validated_data)
    return Response(CannedAnswerSerializer(entry).data)


# ============================================================
# PAYMENTS
# ============================================================

def _return_url(request) -> str:
    """Page Stripe sends the customer back to"""
    site_url = getattr(settings, "SITE_URL", "")
    if site_url:
        return f"{site_url.rstrip('/')}/payment-complete"
    return request.build_absolute_uri("/payment-complete")


@extend_schema(
    tags=["Payments"],
    request=CheckoutSerializer,
    responses={200: OpenApiTypes.OBJECT, 400: OpenApiTypes.OBJECT},
)
@api_view(["POST"])
@permission_classes([AllowAny])
@throttle_classes([CheckoutThrottle])
def create_checkout_session(request):
    """Create a pending request and an embedded checkout session for it"""
    serializer = CheckoutSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    try:
        checkout = get_services().lifecycle.open_checkout(
            tier=Tier(data["tier"]),
            customer_email=data["customerEmail"],
            customer_name=data["customerName"],
            description=data["description"],
            return_url=_return_url(request),
        )
    except PaymentProviderError as e:
        logger.error(f"Checkout session creation failed: {e}")
        return Response(
            {"error": "Failed to create checkout session"},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return Response(
        {"clientSecret": checkout.client_secret, "requestId": str(checkout.request_id)}
    )


@extend_schema(
    tags=["Payments"],
    summary="Poll checkout session",
    description=(
        "Reports the processor's session status. The first poll after "
        "payment completes resolves the request; instant-tier answers are "
        "returned inline."
    ),
    responses={200: OpenApiTypes.OBJECT},
)
@api_view(["GET"])
@permission_classes([AllowAny])
def session_status(request, session_id):
    """Poll a checkout session and resolve its request once paid"""
    result = get_services().lifecycle.confirm_payment(session_id)
    return Response(result.to_dict())


@api_view(["GET"])
@permission_classes([AllowAny])
def stripe_config(request):
    """Publishable key for the embedded checkout widget"""
    gateway = get_services().payment_gateway
    publishable_key = getattr(gateway, "publishable_key", "") if gateway else ""

    if not publishable_key:
        return Response(
            {"error": "Stripe not configured"},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return Response({"publishableKey": publishable_key})
