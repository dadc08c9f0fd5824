# /tests/test_api_sessions.py

import pytest
from starlette.websockets import WebSocketDisconnect

from teacherboard.main import app
from teacherboard.models.auth_model import TeacherAccount
from teacherboard.core.exceptions import AuthenticationError
from teacherboard.services.identity_service import claims_to_account, get_identity_provider


class FakeIdentityProvider:
    def verify(self, token):
        if token != "good-google-token":
            raise AuthenticationError("The Google sign-in token could not be verified.")
        return TeacherAccount(uid="google-uid-1", displayName="박선생", email="park@example.com")


@pytest.fixture
def fake_identity():
    app.dependency_overrides[get_identity_provider] = FakeIdentityProvider
    yield
    app.dependency_overrides.pop(get_identity_provider, None)


# --- Auth ---

def test_google_sign_in_issues_a_usable_token(client, fake_identity):
    response = client.post("/api/auth/google", json={"idToken": "good-google-token"})
    assert response.status_code == 200
    token = response.json()["access_token"]

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["uid"] == "google-uid-1"
    assert me.json()["displayName"] == "박선생"


def test_rejected_google_token(client, fake_identity):
    response = client.post("/api/auth/google", json={"idToken": "forged"})
    assert response.status_code == 401


def test_requests_without_a_valid_token_are_rejected(client):
    assert client.get("/api/auth/me").status_code == 401
    assert client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"}).status_code == 401
    assert client.get("/api/sessions/current").status_code == 401


def test_sign_out(client, auth_headers):
    assert client.post("/api/auth/signout", headers=auth_headers).status_code == 204


def test_claims_to_account_prefers_the_firebase_user_id():
    account = claims_to_account({"sub": "google-sub", "user_id": "firebase-uid", "name": "최선생", "picture": "p.png"})
    assert account.uid == "firebase-uid"
    assert account.photoURL == "p.png"
    with pytest.raises(AuthenticationError):
        claims_to_account({"email": "x@example.com"})


# --- Sessions ---

def test_create_and_read_session(client, auth_headers):
    response = client.post("/api/sessions", json={"className": " 3-1 "}, headers=auth_headers)
    assert response.status_code == 201
    session = response.json()
    assert session["className"] == "3-1"
    assert session["teacherName"] == "김선생"
    assert session["isActive"] is True
    assert session["publicUrl"] == f"https://board.example.com/student/{session['sessionCode']}"

    current = client.get("/api/sessions/current", headers=auth_headers).json()
    assert current["sessionCode"] == session["sessionCode"]


def test_blank_class_name_is_rejected(client, auth_headers):
    assert client.post("/api/sessions", json={"className": "   "}, headers=auth_headers).status_code == 422


def test_session_endpoints_before_creation(client, auth_headers):
    assert client.get("/api/sessions/current", headers=auth_headers).status_code == 404
    assert client.put("/api/sessions/current/active", json={"isActive": False}, headers=auth_headers).status_code == 404
    assert client.post("/api/sessions/current/regenerate", headers=auth_headers).status_code == 404
    assert client.patch("/api/sessions/current/settings", json={"allowLinks": False}, headers=auth_headers).status_code == 404


def test_toggle_settings_and_regenerate(client, auth_headers):
    old_code = client.post("/api/sessions", json={"className": "3-1"}, headers=auth_headers).json()["sessionCode"]

    settings = client.patch("/api/sessions/current/settings", json={"allowNotices": False}, headers=auth_headers).json()
    assert settings["allowNotices"] is False
    assert settings["allowLinks"] is True

    inactive = client.put("/api/sessions/current/active", json={"isActive": False}, headers=auth_headers).json()
    assert inactive["isActive"] is False
    assert client.get(f"/public/student/{old_code}").status_code == 404

    client.put("/api/sessions/current/active", json={"isActive": True}, headers=auth_headers)
    regenerated = client.post("/api/sessions/current/regenerate", headers=auth_headers).json()
    new_code = regenerated["sessionCode"]
    assert new_code != old_code
    assert regenerated["publicUrl"].endswith(f"/student/{new_code}")

    assert client.get(f"/public/student/{old_code}").status_code == 404
    view = client.get(f"/public/student/{new_code}").json()
    assert view["session"]["settings"]["allowNotices"] is False


def test_reconcile_reports_nothing_to_repair(client, auth_headers):
    client.post("/api/sessions", json={"className": "3-1"}, headers=auth_headers)
    assert client.post("/api/sessions/current/reconcile", headers=auth_headers).json() == {"repaired": False}


def test_teachers_only_see_their_own_session(client, auth_headers, other_auth_headers):
    client.post("/api/sessions", json={"className": "3-1"}, headers=auth_headers)
    assert client.get("/api/sessions/current", headers=other_auth_headers).status_code == 404


def test_session_subscription_streams_changes(client, auth_headers, teacher_token):
    client.post("/api/sessions", json={"className": "3-1"}, headers=auth_headers)

    with client.websocket_connect(f"/api/sessions/current/subscribe?token={teacher_token}") as websocket:
        initial = websocket.receive_json()
        assert initial["type"] == "session"
        assert initial["payload"]["isActive"] is True

        client.put("/api/sessions/current/active", json={"isActive": False}, headers=auth_headers)

        update = websocket.receive_json()
        assert update["payload"]["isActive"] is False
        assert "teacherId" in update["payload"]


def test_session_subscription_requires_a_token(client):
    with pytest.raises(WebSocketDisconnect):
        with client.websocket_connect("/api/sessions/current/subscribe?token=bad") as websocket:
            websocket.receive_json()
