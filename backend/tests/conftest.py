import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine

from user_registry.config import Settings
from user_registry.main import create_app
from user_registry.persistence.user_gateway import UserGateway
from user_registry.services.user_service import UserService

TEST_DATABASE_URL = "sqlite:///:memory:"

# ============================================================================
# Test Database Setup with StaticPool
# ============================================================================
# 1. sqlite:///:memory: with StaticPool so every session of one engine shares
#    the same database
# 2. check_same_thread=False required for TestClient/threaded access
# 3. A fresh engine per test, so ids always start at 1
# 4. Tables created explicitly, not relying on app startup


@pytest.fixture(name="engine")
def engine_fixture():
    from user_registry.models.user import User  # noqa: F401

    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture(name="gateway")
def gateway_fixture(engine):
    return UserGateway(engine)


@pytest.fixture(name="service")
def service_fixture(gateway):
    return UserService(gateway)


@pytest.fixture(name="client")
def client_fixture(engine):
    """Provide a test client whose app uses the test engine"""
    app = create_app(settings=Settings(database_url=TEST_DATABASE_URL), engine=engine)

    # Context manager runs startup/shutdown handlers
    with TestClient(app) as client:
        yield client
