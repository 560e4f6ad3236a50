from conftest import ADMIN_EMAIL, ADMIN_PASSWORD, ADMIN_USERNAME


def login(client, username=ADMIN_USERNAME, password=ADMIN_PASSWORD):
    return client.post("/api/auth/login", json={"username": username, "password": password})


def test_login_with_bootstrapped_admin(client):
    response = login(client)

    assert response.status_code == 200, response.text
    body = response.json()
    assert body["success"] is True
    assert body["token"]
    assert body["user"]["id"] == 1
    assert body["user"]["username"] == ADMIN_USERNAME
    assert body["user"]["role"] == "admin"
    assert body["user"]["lastLogin"]
    assert "passwordHash" not in body["user"]
    assert "timestamp" in body


def test_login_with_email(client):
    response = login(client, username=ADMIN_EMAIL)
    assert response.status_code == 200


def test_login_wrong_password(client):
    response = login(client, password="wrong-password")

    assert response.status_code == 401
    body = response.json()
    assert body["success"] is False
    assert body["code"] == "INVALID_CREDENTIALS"


def test_login_unknown_user(client):
    response = login(client, username="ghost")
    assert response.status_code == 401
    assert response.json()["code"] == "INVALID_CREDENTIALS"


def test_login_missing_fields(client):
    response = client.post("/api/auth/login", json={"username": "admin"})
    assert response.status_code == 400
    assert response.json()["code"] == "MISSING_CREDENTIALS"

    response = client.post("/api/auth/login", json={})
    assert response.json()["code"] == "MISSING_CREDENTIALS"


def test_me_requires_token(client):
    response = client.get("/api/auth/me")
    assert response.status_code == 401
    assert response.json()["code"] == "NO_TOKEN"

    response = client.get("/api/auth/me", headers={"Authorization": "Bearer garbage"})
    assert response.status_code == 401
    assert response.json()["code"] == "INVALID_TOKEN"


def test_me_returns_profile(client, admin_headers):
    response = client.get("/api/auth/me", headers=admin_headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["username"] == ADMIN_USERNAME
    assert data["email"] == ADMIN_EMAIL


def test_logout_is_acknowledged(client, admin_headers):
    response = client.post("/api/auth/logout", headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["message"] == "Logged out successfully"
    # Stateless tokens keep working until they expire
    assert client.get("/api/auth/me", headers=admin_headers).status_code == 200


def test_change_password_flow(client, admin_headers):
    response = client.post(
        "/api/auth/change-password",
        json={"currentPassword": ADMIN_PASSWORD, "newPassword": "brand-new-pass"},
        headers=admin_headers,
    )
    assert response.status_code == 200, response.text

    assert login(client).status_code == 401
    assert login(client, password="brand-new-pass").status_code == 200


def test_change_password_errors(client, admin_headers):
    url = "/api/auth/change-password"

    response = client.post(url, json={"currentPassword": ADMIN_PASSWORD}, headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["code"] == "MISSING_PASSWORDS"

    # Length is checked before the current password
    response = client.post(url, json={"currentPassword": "wrong", "newPassword": "abc"}, headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["code"] == "PASSWORD_TOO_SHORT"

    response = client.post(url, json={"currentPassword": "wrong", "newPassword": "long-enough"}, headers=admin_headers)
    assert response.status_code == 401
    assert response.json()["code"] == "INVALID_CURRENT_PASSWORD"


def test_change_password_requires_token(client):
    response = client.post(
        "/api/auth/change-password",
        json={"currentPassword": ADMIN_PASSWORD, "newPassword": "brand-new-pass"},
    )
    assert response.status_code == 401
