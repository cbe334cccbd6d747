from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from user_platform.user_service.config import Settings
from user_platform.user_service.db import build_engine, build_session_factory, init_db
from user_platform.user_service.main import create_app
from user_platform.user_service.passwords import PasswordHasher
from user_platform.user_service.repository import UserRepository
from user_platform.user_service.schemas import TokenClaims
from user_platform.user_service.tokens import ServerSecret, TokenService

TEST_SECRET = "test-secret-key-for-signing-tokens-0123456789"

# Cheap Argon2 parameters keep the suite fast
FAST_ARGON2 = {"time_cost": 1, "memory_cost": 8, "parallelism": 1}


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        SECRET_KEY=TEST_SECRET,
        DATABASE_URL=f"sqlite:///{tmp_path / 'test.db'}",
        ARGON2_TIME_COST=FAST_ARGON2["time_cost"],
        ARGON2_MEMORY_COST=FAST_ARGON2["memory_cost"],
        ARGON2_PARALLELISM=FAST_ARGON2["parallelism"],
    )


@pytest.fixture
def hasher():
    return PasswordHasher(**FAST_ARGON2)


@pytest.fixture
def secret():
    return ServerSecret(TEST_SECRET.encode("utf-8"))


@pytest.fixture
def token_service():
    return TokenService()


@pytest.fixture
def claims():
    return TokenClaims(
        id=1,
        firstname="Ada",
        lastname="Lovelace",
        email="a@b.com",
        created_at=datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc),
    )


@pytest.fixture
def db_session(settings):
    """Session on a fresh SQLite database with the tables created."""
    engine = build_engine(settings)
    init_db(engine)
    session = build_session_factory(engine)()
    yield session
    session.close()
    engine.dispose()


@pytest.fixture
def users(db_session):
    return UserRepository(db_session)


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as c:
        yield c
