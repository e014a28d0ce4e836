"""HTTP tests for the notification and assistant endpoints."""

import pytest
from fastapi.testclient import TestClient

from common.auth import AuthProvider
from common.database import LocalStorage

import campverse.dependencies as dependencies
from campverse.config import Settings
from campverse.dependencies import (
    init_chatbot_services,
    init_notification_services,
    require_viewer,
    shutdown_services,
)
from campverse.types import Viewer

from api import app


TOKENS = {
    "student-token": {"uid": "stu-cse", "role": "student", "collegeId": "22B81A05C3", "name": "Ravi Kumar"},
    "faculty-token": {"uid": "fac-1", "role": "faculty", "collegeId": "FAC0042", "name": "Dr. Lakshmi Rao"},
    "admin-token": {"uid": "adm-1", "role": "admin", "collegeId": "ADM0001", "name": "Principal Office"},
    "no-role-token": {"uid": "stu-x", "collegeId": "23B81A05A1", "name": "Kiran"},
}


class FakeAuth(AuthProvider):
    """Accepts the tokens above and rejects everything else."""

    async def verify_token(self, token):
        if token not in TOKENS:
            raise ValueError("Invalid token")
        return {**TOKENS[token], "sub": TOKENS[token]["uid"]}


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


# ─────────────────────────────────────────────────────────────────
# Fixtures
# ─────────────────────────────────────────────────────────────────


@pytest.fixture
def client(tmp_path, monkeypatch):
    settings = Settings(ENVIRONMENT="local", LOCAL_STORAGE_DIR=str(tmp_path))
    init_notification_services(settings, storage=LocalStorage(tmp_path))
    init_chatbot_services(settings.model_copy(update={"ASSISTANT_API_URL": None}))
    monkeypatch.setattr(dependencies, "_auth_provider", FakeAuth())

    yield TestClient(app)

    app.dependency_overrides.clear()
    shutdown_services()


def as_viewer(viewer):
    app.dependency_overrides[require_viewer] = lambda: viewer


# ─────────────────────────────────────────────────────────────────
# Authentication
# ─────────────────────────────────────────────────────────────────


class TestAuthentication:
    def test_missing_token(self, client):
        response = client.get("/api/notifications")

        assert response.status_code == 401
        body = response.json()
        assert body["success"] is False
        assert body["error"]["code"] == "AUTH_REQUIRED"

    def test_invalid_token(self, client):
        response = client.get("/api/notifications", headers=bearer("forged"))

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "INVALID_TOKEN"

    def test_token_without_role_is_rejected(self, client):
        response = client.get("/api/notifications", headers=bearer("no-role-token"))

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "INVALID_TOKEN"

    def test_wrong_scheme(self, client):
        response = client.get("/api/notifications", headers={"Authorization": "Basic abc"})

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "INVALID_AUTH_SCHEME"

    def test_valid_token(self, client):
        response = client.get("/api/notifications", headers=bearer("student-token"))

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["notifications"] == []
        assert data["unreadCount"] == 0
        assert data["storage"] == "local"


# ─────────────────────────────────────────────────────────────────
# Notifications
# ─────────────────────────────────────────────────────────────────


class TestNotificationRoutes:
    def test_student_cannot_send(self, client):
        response = client.post(
            "/api/notifications",
            json={"message": "hi", "targetAudience": {"type": "all"}},
            headers=bearer("student-token"),
        )

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "SENDER_ROLE_REQUIRED"

    def test_send_and_receive_with_login_alert(self, client):
        sent = client.post(
            "/api/notifications",
            json={
                "title": "CSE lab moved",
                "message": "Lab 3 moves to block B today.",
                "urgency": "important",
                "category": "academic",
                "targetAudience": {"type": "custom", "branches": ["CSE"]},
            },
            headers=bearer("faculty-token"),
        )

        assert sent.status_code == 201
        notification = sent.json()["data"]["notification"]
        assert notification["id"].startswith("notif_")
        assert notification["postedBy"] == {"name": "Dr. Lakshmi Rao", "role": "faculty", "collegeId": "FAC0042"}
        assert notification["isRead"] is False

        first = client.get("/api/notifications", headers=bearer("student-token")).json()["data"]
        assert [n["id"] for n in first["notifications"]] == [notification["id"]]
        assert first["unreadCount"] == 1
        assert first["alerts"] == [{
            "title": "You have 1 new notification!",
            "description": "Open the notification bell to view them.",
        }]

        second = client.get("/api/notifications", headers=bearer("student-token")).json()["data"]
        assert second["alerts"] == []

    def test_signed_in_student_sees_later_notifications(self, client):
        before = client.get("/api/notifications", headers=bearer("student-token")).json()["data"]
        assert before["notifications"] == []

        sent = client.post(
            "/api/notifications",
            json={"message": "Exam rescheduled", "targetAudience": {"type": "custom", "branches": ["CSE"]}},
            headers=bearer("admin-token"),
        )
        assert sent.status_code == 201

        after = client.get("/api/notifications", headers=bearer("student-token")).json()["data"]
        assert [n["message"] for n in after["notifications"]] == ["Exam rescheduled"]
        assert after["unreadCount"] == 1
        assert len(after["alerts"]) == 1

        count = client.get("/api/notifications/count", headers=bearer("student-token")).json()["data"]
        assert count == {"unread": 1}

    def test_rejects_empty_message(self, client):
        response = client.post(
            "/api/notifications",
            json={"message": "", "targetAudience": {"type": "all"}},
            headers=bearer("admin-token"),
        )

        assert response.status_code == 422

    def test_mark_read_and_count(self, client):
        for title in ("One", "Two", "Three"):
            client.post(
                "/api/notifications",
                json={"title": title, "message": "m", "targetAudience": {"type": "students"}},
                headers=bearer("admin-token"),
            )
        listing = client.get("/api/notifications", headers=bearer("student-token")).json()["data"]
        first_id = listing["notifications"][0]["id"]

        read = client.post(f"/api/notifications/{first_id}/read", headers=bearer("student-token"))
        assert read.json()["data"]["unread"] == 2

        read_all = client.post("/api/notifications/read-all", headers=bearer("student-token")).json()["data"]
        assert read_all["count"] == 3
        assert read_all["unread"] == 0

        count = client.get("/api/notifications/count", headers=bearer("student-token")).json()["data"]
        assert count == {"unread": 0}

    def test_all_is_for_senders_only(self, client):
        client.post(
            "/api/notifications",
            json={"message": "faculty meeting", "targetAudience": {"type": "faculty"}},
            headers=bearer("admin-token"),
        )

        forbidden = client.get("/api/notifications/all", headers=bearer("student-token"))
        allowed = client.get("/api/notifications/all", headers=bearer("faculty-token"))

        assert forbidden.status_code == 403
        assert allowed.json()["data"]["count"] == 1

    def test_delete_is_admin_only(self, client):
        created = client.post(
            "/api/notifications",
            json={"message": "temp", "targetAudience": {"type": "all"}},
            headers=bearer("faculty-token"),
        ).json()["data"]["notification"]

        denied = client.delete(f"/api/notifications/{created['id']}", headers=bearer("faculty-token"))
        deleted = client.delete(f"/api/notifications/{created['id']}", headers=bearer("admin-token"))

        assert denied.status_code == 403
        assert deleted.status_code == 200
        remaining = client.get("/api/notifications/all", headers=bearer("admin-token")).json()["data"]
        assert remaining["count"] == 0

    def test_logout_resets_login_alert(self, client):
        client.post(
            "/api/notifications",
            json={"message": "hello", "targetAudience": {"type": "all"}},
            headers=bearer("admin-token"),
        )
        client.get("/api/notifications", headers=bearer("student-token"))

        logout = client.post("/api/notifications/session/logout", headers=bearer("student-token"))
        again = client.get("/api/notifications", headers=bearer("student-token")).json()["data"]

        assert logout.json()["data"] == {"loggedOut": True}
        assert len(again["alerts"]) == 1

    def test_dependency_override_viewer(self, client):
        as_viewer(Viewer(uid="override", role="admin", college_id="ADM0002", name="Registrar"))

        response = client.post(
            "/api/notifications",
            json={"message": "from override", "targetAudience": {"type": "all"}},
        )

        assert response.status_code == 201
        assert response.json()["data"]["notification"]["postedBy"]["name"] == "Registrar"

    def test_disabled_notifications(self, client):
        dependencies._notification_registry = None

        response = client.get("/api/notifications", headers=bearer("student-token"))

        assert response.status_code == 503
        assert response.json()["error"]["code"] == "NOTIFICATIONS_DISABLED"


# ─────────────────────────────────────────────────────────────────
# Assistant
# ─────────────────────────────────────────────────────────────────


class TestChatbotRoutes:
    def test_guest_conversation(self, client):
        sent = client.post("/api/chatbot/message", json={"message": "How do I pay my fee?"})

        assert sent.status_code == 200
        data = sent.json()["data"]
        assert data["reply"]["isBot"] is True
        assert "Fees" in data["reply"]["content"]
        session_id = data["session"]["sessionId"]
        assert session_id.startswith("chat_")

        client.post("/api/chatbot/message", json={"message": "and grades?", "sessionId": session_id})
        session = client.get("/api/chatbot/session", params={"sessionId": session_id}).json()["data"]
        assert len(session["messages"]) == 4

        ended = client.delete("/api/chatbot/session", params={"sessionId": session_id}).json()["data"]
        assert ended == {"ended": True}

    def test_signed_in_session_follows_viewer(self, client):
        client.post("/api/chatbot/message", json={"message": "coding help"}, headers=bearer("student-token"))

        session = client.get("/api/chatbot/session", headers=bearer("student-token")).json()["data"]

        assert len(session["messages"]) == 2

    def test_invalid_token_is_treated_as_guest(self, client):
        response = client.post("/api/chatbot/message", json={"message": "hi"}, headers=bearer("forged"))

        assert response.status_code == 200

    def test_token_without_role_is_treated_as_guest(self, client):
        response = client.post("/api/chatbot/message", json={"message": "hi"}, headers=bearer("no-role-token"))

        assert response.status_code == 200
        assert response.json()["data"]["session"]["sessionId"].startswith("chat_")

    def test_disabled_chatbot(self, client):
        dependencies._chat_registry = None

        response = client.post("/api/chatbot/message", json={"message": "hi"})

        assert response.status_code == 503
        assert response.json()["error"]["code"] == "CHATBOT_DISABLED"


# ─────────────────────────────────────────────────────────────────
# Health
# ─────────────────────────────────────────────────────────────────


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["status"] == "ok"
        assert data["realtimeDatabase"] is False
