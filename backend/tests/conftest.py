import os
import tempfile

import pytest

# Settings are read at import time, so the environment must be ready first
_DB_DIR = tempfile.mkdtemp(prefix="ecohub-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_DB_DIR, 'test.db')}"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["ENVIRONMENT"] = "test"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOGIN_RATE_LIMIT"] = "5"
os.environ["LOGIN_RATE_WINDOW_SECONDS"] = "900"

from fastapi.testclient import TestClient  # noqa: E402

from database import Base, SessionLocal, engine  # noqa: E402
from main import app  # noqa: E402
from models.impact import UserImpact  # noqa: E402
from models.users import User  # noqa: E402
from utils.hashing import get_password_hash  # noqa: E402
from utils.rate_limit import login_limiter  # noqa: E402

DEFAULT_PASSWORD = "pass1234"


@pytest.fixture(autouse=True)
def db_setup():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    login_limiter.reset()
    yield
    login_limiter.reset()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def create_user(db):
    def _create(email, role="individual", status="active", name=None, password=DEFAULT_PASSWORD):
        user = User(
            email=email,
            password_hash=get_password_hash(password),
            name=name or email.split("@")[0],
            role=role,
            status=status,
        )
        db.add(user)
        db.flush()
        db.add(UserImpact(user_id=user.id))
        db.commit()
        db.refresh(user)
        return user
    return _create


@pytest.fixture
def admin(create_user):
    return create_user("admin@test.local", role="admin", name="Admin")


@pytest.fixture
def login(client):
    def _login(email, password=DEFAULT_PASSWORD):
        return client.post("/auth/login", json={"email": email, "password": password})
    return _login


@pytest.fixture
def token_for(client, login):
    """Log in and return the bearer headers, leaving no cookie or limiter hits behind."""
    def _token_for(email, password=DEFAULT_PASSWORD):
        resp = login(email, password)
        assert resp.status_code == 200, resp.text
        client.cookies.clear()
        login_limiter.reset()
        return {"Authorization": f"Bearer {resp.json()['token']}"}
    return _token_for


@pytest.fixture
def admin_headers(admin, token_for):
    return token_for(admin.email)


@pytest.fixture
def register(client):
    def _register(email, role="individual", password=DEFAULT_PASSWORD, name="Test User", **extra):
        payload = {"name": name, "email": email, "password": password, "role": role}
        payload.update(extra)
        return client.post("/auth/register", json=payload)
    return _register
