# backend/apps/consulting/urls.py

"""
Consulting app URLs
"""
from django.urls import path

from . import views

app_name = "consulting"

urlpatterns = [
    # Admin session
    path("admin/login", views.admin_login, name="admin-login"),
    path("admin/logout", views.admin_logout, name="admin-logout"),
    path("admin/check", views.admin_check, name="admin-check"),
    # Requests
    path("requests", views.request_list, name="request-list"),
    path("requests/<str:request_id>", views.request_detail, name="request-detail"),
    # Knowledge base
    path("basic-questions", views.basic_question_list, name="basic-question-list"),
    path(
        "basic-questions/<str:entry_id>",
        views.basic_question_detail,
        name="basic-question-detail",
    ),
    # Payments
    path(
        "create-checkout-session",
        views.create_checkout_session,
        name="create-checkout-session",
    ),
    path("session-status/<str:session_id>", views.session_status, name="session-status"),
    path("stripe-config", views.stripe_config, name="stripe-config"),
]
