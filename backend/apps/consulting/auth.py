# apps/consulting/auth.py
"""
Admin session authentication

The admin portal logs in with a single password; the Django session
carries `admin_id` and `is_admin` afterwards.
"""
import logging

from django.contrib.auth.hashers import check_password
from rest_framework.permissions import SAFE_METHODS, BasePermission

from apps.core.exceptions import AuthenticationRequired

logger = logging.getLogger(__name__)

ADMIN_USERNAME = "admin"


def is_admin_session(request) -> bool:
    return bool(request.session.get("is_admin"))


def authenticate_admin(credentials_repo, password: str):
    """
    Check the admin password against the stored hash

    Returns:
        AdminCredential on success, None otherwise
    """
    admin = credentials_repo.get_by_username(ADMIN_USERNAME)
    if admin is None:
        logger.warning("Admin login attempted but no admin credential exists")
        return None

    if not check_password(password, admin.password_hash):
        return None

    return admin


def start_admin_session(request, admin):
    """Rotate the session key and mark it as admin"""
    request.session.cycle_key()
    request.session["admin_id"] = str(admin.id)
    request.session["is_admin"] = True
    request.session.save()


def end_admin_session(request):
    request.session.flush()


class IsAdminSession(BasePermission):
    """
    Requires a logged-in admin session

    Anonymous callers get 401 Unauthorized.
    """

    def has_permission(self, request, view):
        if is_admin_session(request):
            return True
        raise AuthenticationRequired()


class IsAdminSessionOrReadOnly(IsAdminSession):
    """Public reads, admin-only writes"""

    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return True
        return super().has_permission(request, view)


class IsAdminSessionOrCreateOnly(IsAdminSession):
    """Public creation, admin-only listing"""

    def has_permission(self, request, view):
        if request.method == "POST":
            return True
        return super().has_permission(request, view)
