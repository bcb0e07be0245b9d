"""
Integration tests for /auth endpoints.
"""
from app.db.models.user import User

REGISTER = {"email": "O1@Example.com", "password": "pw123456", "name": "O1", "role": "owner"}


def test_register_sets_session(client, db):
    response = client.post("/auth/register", json=REGISTER)

    assert response.status_code == 201
    user = response.json()["user"]
    assert user["email"] == "o1@example.com"
    assert user["role"] == "owner"
    assert "access" in response.cookies
    assert "refresh" in response.cookies

    me = client.get("/auth/me")
    assert me.json()["user"]["id"] == user["id"]

    stored = db.query(User).filter(User.email == "o1@example.com").first()
    assert stored.password_hash != "pw123456"


def test_register_duplicate_email(client):
    assert client.post("/auth/register", json=REGISTER).status_code == 201
    response = client.post("/auth/register", json=dict(REGISTER, email="o1@example.com", name="Other"))

    assert response.status_code == 409
    assert response.json()["code"] == "email_taken"


def test_register_validation(client):
    short = client.post("/auth/register", json=dict(REGISTER, password="12345"))
    assert short.status_code == 400
    assert short.json()["code"] == "validation_error"

    missing = client.post("/auth/register", json={"email": "x@example.com", "password": "pw123456"})
    assert missing.status_code == 400

    admin = client.post("/auth/register", json=dict(REGISTER, role="admin"))
    assert admin.status_code == 400
    assert admin.json()["code"] == "invalid_role"


def test_login_success(client, owner):
    response = client.post("/auth/login", json={"email": "owner@example.com", "password": "pw123456"})

    assert response.status_code == 200
    assert response.json()["user"] == {
        "id": owner.id,
        "email": "owner@example.com",
        "name": owner.name,
        "role": "owner",
    }
    assert "access" in response.cookies


def test_login_is_case_insensitive_and_accepts_identifier(client, owner, admin):
    assert client.post("/auth/login", json={"email": " OWNER@example.com ", "password": "pw123456"}).status_code == 200
    assert client.post("/auth/login", json={"identifier": "admin", "password": "pw123456"}).status_code == 200


def test_login_wrong_password(client, owner):
    response = client.post("/auth/login", json={"email": "owner@example.com", "password": "wrong-password"})
    assert response.status_code == 401
    assert response.json()["code"] == "invalid_credentials"


def test_login_unknown_user(client):
    response = client.post("/auth/login", json={"email": "nobody@example.com", "password": "pw123456"})
    assert response.status_code == 401


def test_login_missing_fields(client):
    assert client.post("/auth/login", json={"password": "pw123456"}).status_code == 400
    assert client.post("/auth/login", json={"email": "owner@example.com"}).status_code == 400


def test_me_anonymous_and_garbage_cookie(client):
    assert client.get("/auth/me").json() == {"user": None}

    client.cookies.set("access", "garbage")
    client.cookies.set("refresh", "garbage")
    response = client.get("/auth/me")
    assert response.status_code == 200
    assert response.json() == {"user": None}


def test_refresh_rotates_cookies(client, owner, login_as):
    login = login_as("owner@example.com")
    old_access = login.cookies["access"]
    old_refresh = login.cookies["refresh"]

    response = client.post("/auth/refresh")

    assert response.status_code == 200
    assert response.json()["user"]["id"] == owner.id
    assert response.cookies["access"] != old_access
    assert response.cookies["refresh"] != old_refresh


def test_refresh_without_cookie(client):
    response = client.post("/auth/refresh")
    assert response.status_code == 401
    assert response.json()["code"] == "unauthenticated"


def test_logout_clears_session(client, owner, login_as):
    login_as("owner@example.com")
    assert client.get("/auth/me").json()["user"] is not None

    response = client.post("/auth/logout")
    assert response.json() == {"ok": True}
    assert client.get("/auth/me").json() == {"user": None}


def test_deleted_user_loses_session(client, db, owner, login_as):
    login_as("owner@example.com")
    db.delete(owner)
    db.commit()

    assert client.get("/auth/me").json() == {"user": None}
    assert client.get("/users/me").status_code == 401
    assert client.post("/auth/refresh").status_code == 401


def test_profile_update_is_role_specific(client, driver, owner, login_as):
    login_as("driver@example.com")
    response = client.patch("/users/me", json={
        "location": " Kutaisi ",
        "categories": ["C", "CE"],
        "company_name": "ignored for drivers",
    })
    assert response.status_code == 200
    user = response.json()["user"]
    assert user["location"] == "Kutaisi"
    assert user["categories"] == ["C", "CE"]
    assert user["company_name"] is None

    client.post("/auth/logout")
    login_as("owner@example.com")
    response = client.patch("/users/me", json={"company_name": "New Co", "location": "ignored"})
    user = response.json()["user"]
    assert user["company_name"] == "New Co"
    assert user["location"] is None
