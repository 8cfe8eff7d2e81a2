"""
Tests for login, logout and the current-user endpoint.
"""

LOGIN_URL = "/api/v1/auth/login"


def test_login_returns_user_and_sets_cookies(client, register):
    register("login@clinicmail.com", "s3cret!", first_name="Lin")
    client.cookies.clear()

    response = client.post(LOGIN_URL, json={"email": "login@clinicmail.com", "password": "s3cret!"})

    assert response.status_code == 200
    data = response.json()
    assert data["email"] == "login@clinicmail.com"
    assert data["first_name"] == "Lin"
    assert "password_hash" not in data
    assert "token_generation" not in data
    assert response.cookies.get("access-token")
    assert response.cookies.get("refresh-token")


def test_login_is_case_insensitive_on_email(client, register):
    register("upper@clinicmail.com", "s3cret!")

    response = client.post(LOGIN_URL, json={"email": "UPPER@clinicmail.com", "password": "s3cret!"})

    assert response.status_code == 200


def test_wrong_password_and_unknown_email_fail_identically(client, register):
    register("known@clinicmail.com", "right")
    client.cookies.clear()

    wrong_password = client.post(LOGIN_URL, json={"email": "known@clinicmail.com", "password": "wrong"})
    unknown_email = client.post(LOGIN_URL, json={"email": "nobody@clinicmail.com", "password": "right"})

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json()
    assert "access-token" not in wrong_password.cookies
    assert "access-token" not in unknown_email.cookies


def test_me_requires_session(client):
    response = client.get("/api/v1/auth/me")

    assert response.status_code == 401


def test_me_returns_current_user(logged_in_client):
    response = logged_in_client.get("/api/v1/auth/me")

    assert response.status_code == 200
    assert response.json()["email"] == "patient@clinicmail.com"


def test_logout_clears_cookies(logged_in_client):
    response = logged_in_client.post("/api/v1/auth/logout")

    assert response.status_code == 200
    assert response.json() is True
    assert logged_in_client.cookies.get("access-token") is None
    assert logged_in_client.cookies.get("refresh-token") is None
    assert logged_in_client.get("/api/v1/auth/me").status_code == 401


def test_logout_does_not_revoke_tokens(client, register):
    response = register("keep@clinicmail.com")
    access_token = response.cookies.get("access-token")

    client.post("/api/v1/auth/logout")
    client.cookies.set("access-token", access_token)

    assert client.get("/api/v1/auth/me").status_code == 200
