# apps/consulting/tests/test_admin_auth.py
"""
Tests for the admin session: login, logout, status check and guarded endpoints
"""
import uuid

import pytest
from rest_framework.test import APIClient

from apps.consulting.models import CannedAnswer, ConsultingRequest
from conftest import ADMIN_PASSWORD


@pytest.fixture
def client():
    return APIClient()


@pytest.mark.django_db
class TestAdminLogin:
    """Test POST /api/admin/login"""

    def test_login_success(self, client, admin_credential):
        response = client.post(
            "/api/admin/login", {"password": ADMIN_PASSWORD}, format="json"
        )

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Login successful"}
        assert client.session["is_admin"] is True
        assert client.session["admin_id"] == str(admin_credential.id)

    def test_login_rotates_session_key(self, client, admin_credential):
        client.get("/api/admin/check")
        session = client.session
        session["visited"] = True
        session.save()
        before = session.session_key

        client.post("/api/admin/login", {"password": ADMIN_PASSWORD}, format="json")

        assert client.session.session_key != before

    def test_wrong_password(self, client, admin_credential):
        response = client.post(
            "/api/admin/login", {"password": "guess"}, format="json"
        )

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid credentials"}
        assert "is_admin" not in client.session

    def test_missing_password(self, client, admin_credential):
        response = client.post("/api/admin/login", {}, format="json")

        assert response.status_code == 400
        assert response.json() == {"error": "Password is required"}

    def test_blank_password(self, client, admin_credential):
        response = client.post("/api/admin/login", {"password": ""}, format="json")

        assert response.status_code == 400

    def test_no_admin_credential(self, client):
        response = client.post(
            "/api/admin/login", {"password": ADMIN_PASSWORD}, format="json"
        )

        assert response.status_code == 401
        assert response.json()["error"] == "Invalid credentials"


@pytest.mark.django_db
class TestAdminSession:
    """Test /api/admin/check and /api/admin/logout"""

    def test_check_anonymous(self, client):
        response = client.get("/api/admin/check")

        assert response.status_code == 200
        assert response.json() == {"isAdmin": False}

    def test_check_logged_in(self, portal_client):
        response = portal_client.get("/api/admin/check")

        assert response.json() == {"isAdmin": True}

    def test_logout_ends_session(self, portal_client):
        response = portal_client.post("/api/admin/logout")

        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert portal_client.get("/api/admin/check").json() == {"isAdmin": False}
        assert portal_client.get("/api/requests").status_code == 401


@pytest.mark.django_db
class TestGuardedEndpoints:
    """Admin-only operations answer 401 and change nothing without a session"""

    @pytest.fixture
    def stored_request(self):
        return ConsultingRequest.objects.create(
            tier="human_expert",
            status="processing",
            customer_name="Ann",
            customer_email="ann@example.com",
            description="Review my plan",
            amount=499,
        )

    @pytest.fixture
    def stored_entry(self):
        return CannedAnswer.objects.create(topic="Pricing", answer="Charge more.")

    def test_list_requests(self, client):
        response = client.get("/api/requests")

        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}

    def test_update_request(self, client, stored_request):
        response = client.patch(
            f"/api/requests/{stored_request.id}",
            {"status": "completed", "response": "Done"},
            format="json",
        )

        assert response.status_code == 401
        stored_request.refresh_from_db()
        assert stored_request.status == "processing"
        assert stored_request.response is None

    def test_delete_request(self, client, stored_request):
        response = client.delete(f"/api/requests/{stored_request.id}")

        assert response.status_code == 401
        assert ConsultingRequest.objects.filter(id=stored_request.id).exists()

    def test_create_canned_answer(self, client):
        response = client.post(
            "/api/basic-questions", {"topic": "Hiring", "answer": "Slowly."}, format="json"
        )

        assert response.status_code == 401
        assert not CannedAnswer.objects.filter(topic="Hiring").exists()

    def test_update_canned_answer(self, client, stored_entry):
        response = client.patch(
            f"/api/basic-questions/{stored_entry.id}", {"answer": "Free!"}, format="json"
        )

        assert response.status_code == 401
        stored_entry.refresh_from_db()
        assert stored_entry.answer == "Charge more."

    def test_delete_canned_answer(self, client, stored_entry):
        response = client.delete(f"/api/basic-questions/{stored_entry.id}")

        assert response.status_code == 401
        assert CannedAnswer.objects.filter(id=stored_entry.id).exists()

    def test_unknown_id_still_401(self, client):
        response = client.delete(f"/api/basic-questions/{uuid.uuid4()}")

        assert response.status_code == 401
