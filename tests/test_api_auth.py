from liquorpos.core.config import settings
from liquorpos.services.seed import SEED_PASSWORD


def test_login_returns_token_and_profile(client):
    response = client.post("/auth/login", json={"username": "cashier", "password": SEED_PASSWORD})
    assert response.status_code == 200
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["expires_in"] == settings.access_token_expire_minutes * 60
    assert body["user"]["role"] == "cashier"


def test_login_accepts_email_key(client):
    response = client.post("/auth/login", json={"email": "manager", "password": SEED_PASSWORD})
    assert response.status_code == 200
    assert response.json()["user"]["username"] == "manager"


def test_token_endpoint_accepts_form_login(client):
    response = client.post("/auth/token", data={"username": "admin", "password": SEED_PASSWORD})
    assert response.status_code == 200
    assert response.json()["access_token"]


def test_wrong_password_is_unauthorized(client):
    response = client.post("/auth/login", json={"username": "admin", "password": "wrong"})
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


def test_repeated_failures_are_throttled(client):
    for _ in range(settings.login_rate_limit_max_attempts):
        assert client.post("/auth/login", json={"username": "admin", "password": "wrong"}).status_code == 401
    response = client.post("/auth/login", json={"username": "admin", "password": SEED_PASSWORD})
    assert response.status_code == 429


def test_me_requires_token(client, cashier_headers):
    assert client.get("/auth/me").status_code == 401
    response = client.get("/auth/me", headers=cashier_headers)
    assert response.status_code == 200
    assert response.json()["name"] == "John Cashier"


def test_me_accepts_cookie_token(client):
    token = client.post("/auth/login", json={"username": "manager", "password": SEED_PASSWORD}).json()["access_token"]
    response = client.get("/auth/me", headers={"Cookie": f"access_token={token}"})
    assert response.json()["username"] == "manager"


def test_login_is_recorded_in_activity_log(client, manager_headers):
    logs = client.get("/settings/activity-logs", headers=manager_headers).json()
    assert logs[0]["action"] == "Login"
    assert logs[0]["user_name"] == "Jane Manager"


def test_user_management_is_admin_only(client, admin_headers, manager_headers):
    assert client.get("/auth/users", headers=manager_headers).status_code == 403

    response = client.get("/auth/users", headers=admin_headers)
    assert response.status_code == 200
    assert {user["username"] for user in response.json()} == {"admin", "manager", "cashier"}


def test_admin_creates_and_removes_user(client, admin_headers):
    payload = {"username": "Mary", "name": "Mary Cashier", "password": "supersecret", "role": "cashier"}
    response = client.post("/auth/users", json=payload, headers=admin_headers)
    assert response.status_code == 201
    created = response.json()
    assert created["username"] == "mary"

    duplicate = client.post("/auth/users", json=payload, headers=admin_headers)
    assert duplicate.status_code == 409

    login = client.post("/auth/login", json={"username": "mary", "password": "supersecret"})
    assert login.status_code == 200

    removed = client.delete(f"/auth/users/{created['id']}", headers=admin_headers)
    assert removed.status_code == 200
    assert client.delete(f"/auth/users/{created['id']}", headers=admin_headers).status_code == 404


def test_admin_cannot_remove_self(client, admin_headers):
    me = client.get("/auth/me", headers=admin_headers).json()
    response = client.delete(f"/auth/users/{me['id']}", headers=admin_headers)
    assert response.status_code == 400
