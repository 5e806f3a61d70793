import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

import crud.users as users
from core.rate_limit import RateLimiter, get_rate_limiter
from core.site_settings import SettingsCache, get_settings_cache
from db.database import Base, get_db
from main import app
from models.user import UserRole

SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False}
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

PASSWORD = "Str0ng!Passw0rd"
ADMIN_EMAIL = "kylee@kyleesblog.org"


@pytest.fixture
def test_db():
    Base.metadata.create_all(bind=engine)
    yield  # Run the tests
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db(test_db):
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def settings_cache(test_db):
    return SettingsCache(TestingSessionLocal)


@pytest.fixture
def rate_limiter():
    # never sweep during a test
    return RateLimiter(rng=lambda: 1.0)


@pytest.fixture
def client(test_db, settings_cache, rate_limiter):
    def override_get_db():
        db = None
        try:
            db = TestingSessionLocal()
            yield db
        finally:
            if db:
                db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings_cache] = lambda: settings_cache
    app.dependency_overrides[get_rate_limiter] = lambda: rate_limiter
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    def _make_user(email, role=UserRole.ADMIN, password=PASSWORD, is_active=True, name=None):
        return users.create_user(
            db, email=email, password=password, name=name, role=role, is_active=is_active
        )

    return _make_user


def _sign_in(client: TestClient, email: str, password: str = PASSWORD):
    return client.post("/api/auth/sign-in/email", json={"email": email, "password": password})


@pytest.fixture
def sign_in():
    return _sign_in


@pytest.fixture
def admin(make_user):
    return make_user(ADMIN_EMAIL, role=UserRole.ADMIN, name="Kylee")


@pytest.fixture
def admin_client(client: TestClient, admin):
    response = _sign_in(client, ADMIN_EMAIL)
    assert response.status_code == 200
    return client


@pytest.fixture
def session_factory(test_db):
    return TestingSessionLocal
