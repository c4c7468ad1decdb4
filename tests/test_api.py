"""
HTTP-level tests: cookies, bearer auth and error translation.
"""
from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from palette.app import create_app
from palette.services.session_service import REFRESH_TOKEN_COOKIE_NAME


@pytest.fixture()
def client(temp_db):
    with TestClient(create_app()) as test_client:
        yield test_client


def _login(client: TestClient, email: str, social: str = "KAKAO") -> str:
    response = client.post("/api/v1/login", json={"email": email, "socialType": social})
    assert response.status_code == 200, response.text
    return response.json()["accessToken"]


def _auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_login_sets_refresh_cookie(client):
    response = client.post("/api/v1/login", json={"email": "a@example.com", "socialType": "KAKAO"})
    assert response.status_code == 200
    body = response.json()
    assert body["isRegistered"] is False
    assert body["socialTypes"] == ["KAKAO"]

    cookie = response.headers["set-cookie"]
    assert cookie.startswith(f"{REFRESH_TOKEN_COOKIE_NAME}=")
    assert "HttpOnly" in cookie
    assert "SameSite=lax" in cookie or "SameSite=Lax" in cookie
    assert "Path=/" in cookie
    assert "Max-Age=1209600" in cookie
    assert response.headers["x-content-type-options"] == "nosniff"


def test_token_renewal_and_logout(client):
    _login(client, "a@example.com")

    renewed = client.post("/api/v1/token")
    assert renewed.status_code == 200
    assert renewed.json()["accessToken"]

    refresh = client.cookies.get(REFRESH_TOKEN_COOKIE_NAME)
    logout = client.get("/api/v1/logout")
    assert logout.status_code == 204
    assert "Max-Age=0" in logout.headers["set-cookie"]

    client.cookies.set(REFRESH_TOKEN_COOKIE_NAME, refresh)
    rejected = client.post("/api/v1/token")
    assert rejected.status_code == 401
    assert rejected.json()["code"] == "T001"


def test_token_requires_cookie(client):
    response = client.post("/api/v1/token")
    assert response.status_code == 401
    assert response.json()["code"] == "T003"


def test_bearer_required_for_diaries(client):
    assert client.get("/api/v1/diaries").json()["code"] == "T003"
    response = client.get("/api/v1/diaries", headers={"Authorization": "Basic abc"})
    assert response.status_code == 401
    assert response.json()["code"] == "T001"


def test_diary_flow_over_http(client):
    token_a = _login(client, "a@example.com")
    token_b = _login(client, "b@example.com")
    color_id = client.get("/api/v1/colors").json()[0]["id"]

    created = client.post("/api/v1/diaries", json={"colorId": color_id, "title": "ours"}, headers=_auth(token_a))
    assert created.status_code == 201
    code = created.json()["invitationCode"]

    invited = client.post("/api/v1/diaries/invite", json={"invitationCode": code}, headers=_auth(token_b))
    assert invited.status_code == 200
    body = invited.json()
    assert body["adminUser"]["email"] == "a@example.com"
    diary_id = body["diaryId"]

    again = client.post("/api/v1/diaries/invite", json={"invitationCode": code}, headers=_auth(token_b))
    assert again.status_code == 400
    assert again.json()["code"] == "D003"

    history = client.post("/api/v1/histories", json={"diaryId": diary_id}, headers=_auth(token_a))
    assert history.status_code == 201
    history_id = history.json()["historyId"]

    second = client.post("/api/v1/histories", json={"diaryId": diary_id}, headers=_auth(token_a))
    assert second.status_code == 400
    assert second.json()["code"] == "H002"

    diaries = client.get("/api/v1/diaries", headers=_auth(token_b)).json()
    assert len(diaries) == 1
    assert diaries[0]["diaryStatus"] == "START"
    assert diaries[0]["currentHistory"]["id"] == history_id

    assert client.post(f"/api/v1/histories/{history_id}/close", headers=_auth(token_a)).status_code == 204
    assert client.get("/api/v1/diaries", headers=_auth(token_a)).json()[0]["diaryStatus"] == "READY"

    assert client.post(f"/api/v1/diaries/{diary_id}/leave", headers=_auth(token_b)).status_code == 204
    assert client.get("/api/v1/diaries", headers=_auth(token_a)).json()[0]["diaryStatus"] == "DISCARD"


def test_unknown_invitation_code(client):
    token = _login(client, "a@example.com")
    response = client.post("/api/v1/diaries/invite", json={"invitationCode": "ABCDEFGH"}, headers=_auth(token))
    assert response.status_code == 404
    assert response.json()["code"] == "D002"


def test_terms_and_delete_account(client):
    token = _login(client, "a@example.com")
    assert client.patch("/api/v1/user/terms", headers=_auth(token)).status_code == 204

    relogin = client.post("/api/v1/login", json={"email": "a@example.com", "socialType": "KAKAO"})
    assert relogin.json()["isRegistered"] is True
    token = relogin.json()["accessToken"]

    deleted = client.delete("/api/v1/user", headers=_auth(token))
    assert deleted.status_code == 204
    assert "Max-Age=0" in deleted.headers["set-cookie"]

    blocked = client.post("/api/v1/login", json={"email": "a@example.com", "socialType": "KAKAO"})
    assert blocked.status_code == 403
    assert blocked.json()["code"] == "U002"
    assert "set-cookie" not in blocked.headers


def test_login_validation(client):
    response = client.post("/api/v1/login", json={"email": "a@example.com", "socialType": "MYSPACE"})
    assert response.status_code == 400
    assert response.json()["code"] == "V001"
    assert client.post("/api/v1/login", json={"socialType": "KAKAO"}).status_code == 422


def test_history_routes_require_membership(client):
    token_a = _login(client, "a@example.com")
    token_c = _login(client, "c@example.com")
    color_id = client.get("/api/v1/colors").json()[0]["id"]
    assert client.post("/api/v1/diaries", json={"colorId": color_id}, headers=_auth(token_a)).status_code == 201
    diary_id = client.get("/api/v1/diaries", headers=_auth(token_a)).json()[0]["id"]

    outsider = client.post("/api/v1/histories", json={"diaryId": diary_id}, headers=_auth(token_c))
    assert outsider.status_code == 404
    assert outsider.json()["code"] == "D001"

    history_id = client.post("/api/v1/histories", json={"diaryId": diary_id}, headers=_auth(token_a)).json()["historyId"]
    closed = client.post(f"/api/v1/histories/{history_id}/close", headers=_auth(token_c))
    assert closed.status_code == 404
    assert closed.json()["code"] == "D001"
