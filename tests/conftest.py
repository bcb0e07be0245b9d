"""
Shared fixtures: in-memory SQLite database, TestClient and user factories.

Environment is set before the app is imported so config picks it up.
"""
import os

os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("SECRET_KEY", "truckmatch-test-secret")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.db.base import Base
from app.db.models.user import User
from app.core.auth_dependency import get_db
from app.core.security import hash_password

PASSWORD = "pw123456"

# Setup in-memory SQLite database for testing
TEST_DATABASE_URL = "sqlite:///:memory:"
test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


def override_get_db():
    """Override get_db dependency for testing."""
    db = TestSessionLocal()
    try:
        yield db
    finally:
        db.close()


# Override the database dependency
app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(scope="function", autouse=True)
def setup_db():
    """Create and drop tables for each test."""
    Base.metadata.create_all(bind=test_engine)
    yield
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def db():
    """Provide a database session for tests."""
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    """Fresh client per test so cookies never leak between tests."""
    return TestClient(app)


@pytest.fixture
def make_user(db):
    """Factory creating users directly in the database."""
    def _make_user(email: str, role: str = "owner", password: str = PASSWORD, name: str = None, **fields) -> User:
        user = User(
            email=email,
            password_hash=hash_password(password),
            name=name or email.split("@")[0],
            role=role,
            **fields,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make_user


@pytest.fixture
def owner(make_user):
    return make_user("owner@example.com", role="owner", company_name="Kartli Logistics")


@pytest.fixture
def driver(make_user):
    return make_user("driver@example.com", role="driver", phone="+995 555 000 111")


@pytest.fixture
def admin(make_user):
    return make_user("admin@example.com", role="admin", username="admin")


@pytest.fixture
def login_as(client):
    """Log the test client in; session cookies stay on the client."""
    def _login(email: str, password: str = PASSWORD):
        response = client.post("/auth/login", json={"email": email, "password": password})
        assert response.status_code == 200, response.text
        return response
    return _login
