import pytest
from fastapi.testclient import TestClient

from helpdesk.infrastructure.config.settings import Settings
from helpdesk.infrastructure.database.base import Database
from helpdesk.main import create_app

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "admin123"
API = "/api/v1"


def make_settings(tmp_path, **overrides) -> Settings:
    values = dict(
        DATABASE_TYPE="sqlite",
        DATABASE_URL=f"sqlite:///{tmp_path / 'helpdesk.db'}",
        SECRET_KEY="test-secret",
        DEFAULT_ADMIN_NAME="Admin",
        DEFAULT_ADMIN_EMAIL=ADMIN_EMAIL,
        DEFAULT_ADMIN_PASSWORD=ADMIN_PASSWORD,
    )
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture()
def settings(request, tmp_path):
    """App settings; override fields with indirect parametrization."""
    return make_settings(tmp_path, **getattr(request, "param", {}))


@pytest.fixture()
def client(settings):
    with TestClient(create_app(settings)) as client:
        yield client


@pytest.fixture()
def database(tmp_path):
    db = Database(f"sqlite:///{tmp_path / 'use_cases.db'}").init()
    yield db
    db.dispose()


@pytest.fixture()
def session(database):
    db = database.new_session()
    yield db
    db.close()


@pytest.fixture()
def login(client):
    """Log in and return Bearer headers for the account."""
    def _login(email, password) -> dict:
        resp = client.post(f"{API}/auth/login", json={"email": email, "password": password})
        assert resp.status_code == 200, resp.text
        # tests authenticate with explicit headers, not the session cookie
        client.cookies.clear()
        return {"Authorization": f"Bearer {resp.json()['access_token']}"}
    return _login


@pytest.fixture()
def admin_headers(login):
    return login(ADMIN_EMAIL, ADMIN_PASSWORD)


@pytest.fixture()
def make_user(client, admin_headers, login):
    """Create a user through the API and return (user_json, auth_headers)."""
    def _make(email, role="user", password="secret1", name=None):
        resp = client.post(
            f"{API}/users",
            json={"name": name or email.split("@")[0], "email": email, "password": password, "role": role},
            headers=admin_headers,
        )
        assert resp.status_code == 201, resp.text
        return resp.json()["data"], login(email, password)
    return _make


@pytest.fixture()
def make_ticket(client, admin_headers):
    def _make(headers=None, **overrides):
        payload = {
            "title": "Printer jammed",
            "description": "The second floor printer keeps jamming.",
            "reporterName": "Dana Reporter",
            "reporterEmail": "dana@example.com",
        }
        payload.update(overrides)
        resp = client.post(f"{API}/tickets", json=payload, headers=headers or admin_headers)
        assert resp.status_code == 201, resp.text
        return resp.json()
    return _make
