API = "/api/v1"
ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "admin123"


def test_default_admin_is_seeded(client, admin_headers):
    me = client.get(f"{API}/auth/me", headers=admin_headers).json()
    assert me["email"] == ADMIN_EMAIL
    assert me["role"] == "admin"


def test_login_rejects_bad_credentials(client):
    resp = client.post(f"{API}/auth/login", json={"email": ADMIN_EMAIL, "password": "wrong"})
    assert resp.status_code == 401
    resp = client.post(f"{API}/auth/login", json={"email": "nobody@example.com", "password": ADMIN_PASSWORD})
    assert resp.status_code == 401


def test_login_is_case_insensitive_on_email(client):
    resp = client.post(f"{API}/auth/login", json={"email": "Admin@Example.com", "password": ADMIN_PASSWORD})
    assert resp.status_code == 200
    body = resp.json()
    assert body["token_type"] == "bearer"
    assert body["user"]["email"] == ADMIN_EMAIL


def test_session_cookie_and_logout(client):
    resp = client.post(f"{API}/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert "helpdesk_session" in resp.cookies
    assert "httponly" in resp.headers["set-cookie"].lower()

    assert client.get(f"{API}/auth/me").status_code == 200
    assert client.get(f"{API}/tickets").status_code == 200

    assert client.post(f"{API}/auth/logout").status_code == 204
    assert client.get(f"{API}/auth/me").status_code == 401


def test_invalid_token_is_rejected(client):
    resp = client.get(f"{API}/auth/me", headers={"Authorization": "Bearer not-a-token"})
    assert resp.status_code == 401


def test_user_roster(client, admin_headers, make_user):
    created, dana = make_user("dana@example.com", name="Dana")
    assert created["role"] == "user"
    assert "createdAt" in created

    users = client.get(f"{API}/users", headers=admin_headers).json()["data"]
    assert {u["email"] for u in users} == {ADMIN_EMAIL, "dana@example.com"}
    assert all("password" not in key.lower() for u in users for key in u)

    assert client.get(f"{API}/users", headers=dana).status_code == 403
    assert client.get(f"{API}/users").status_code == 401


def test_duplicate_email_conflicts(client, admin_headers, make_user):
    make_user("dana@example.com")
    resp = client.post(
        f"{API}/users",
        json={"name": "Dana Again", "email": "DANA@example.com", "password": "secret1"},
        headers=admin_headers,
    )
    assert resp.status_code == 409


def test_role_change_and_password_reset(client, admin_headers, make_user, make_ticket, login):
    user, _ = make_user("dana@example.com")
    url = f"{API}/users/{user['id']}"

    resp = client.patch(url, json={"role": "admin"}, headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["data"]["role"] == "admin"

    resp = client.patch(url, json={"password": "brand-new"}, headers=admin_headers)
    assert resp.status_code == 200
    resp = client.post(f"{API}/auth/login", json={"email": "dana@example.com", "password": "secret1"})
    assert resp.status_code == 401

    dana = login("dana@example.com", "brand-new")
    ticket = make_ticket()
    assert client.delete(f"{API}/tickets/{ticket['id']}", headers=dana).status_code == 204

    assert client.patch(url, json={}, headers=admin_headers).status_code == 400
    assert client.patch(f"{API}/users/missing", json={"role": "user"}, headers=admin_headers).status_code == 404


def test_delete_user(client, admin_headers, make_user):
    user, dana = make_user("dana@example.com")
    admin_id = client.get(f"{API}/auth/me", headers=admin_headers).json()["id"]

    assert client.delete(f"{API}/users/{admin_id}", headers=admin_headers).status_code == 400
    assert client.delete(f"{API}/users/missing", headers=admin_headers).status_code == 404
    assert client.delete(f"{API}/users/{user['id']}", headers=admin_headers).status_code == 204

    # the token outlives the account but no longer authenticates
    assert client.get(f"{API}/auth/me", headers=dana).status_code == 401
