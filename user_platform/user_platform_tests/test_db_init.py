"""Tests for database initialization and startup."""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, inspect

from user_platform.user_service.db import check_db_connection, init_db
from user_platform.user_service.errors import StorageUnavailable
from user_platform.user_service.main import create_app

UNREACHABLE_URL = "sqlite:////nonexistent-directory/for/tests/app.db"


def test_init_db_creates_users_table(tmp_path):
    """Test that init_db creates the users table with all required columns."""
    engine = create_engine(f"sqlite:///{tmp_path / 'init.db'}")

    init_db(engine)

    inspector = inspect(engine)
    assert "users" in inspector.get_table_names()

    columns = {col["name"]: col for col in inspector.get_columns("users")}
    for col_name in ["id", "firstname", "lastname", "email", "password", "created_at", "updated_at"]:
        assert col_name in columns, f"Column {col_name} should exist in users table"

    assert columns["password"]["nullable"] is False
    assert columns["updated_at"]["nullable"] is True
    engine.dispose()


def test_users_email_is_unique(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'init.db'}")

    init_db(engine)

    indexes = inspect(engine).get_indexes("users")
    email_index = next(idx for idx in indexes if idx["column_names"] == ["email"])
    assert email_index["unique"]
    engine.dispose()


def test_init_db_unreachable_database():
    engine = create_engine(UNREACHABLE_URL)

    with pytest.raises(StorageUnavailable):
        init_db(engine)


def test_check_db_connection(tmp_path):
    assert check_db_connection(create_engine(f"sqlite:///{tmp_path / 'ok.db'}")) is True
    assert check_db_connection(create_engine(UNREACHABLE_URL)) is False


def test_startup_fails_when_database_unreachable(settings):
    app = create_app(settings.model_copy(update={"DATABASE_URL": UNREACHABLE_URL}))

    with pytest.raises(StorageUnavailable):
        with TestClient(app):
            pass
