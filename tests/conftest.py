"""Shared pytest fixtures."""

import os
from unittest.mock import AsyncMock, MagicMock
from uuid import UUID, uuid4

import pytest
import yaml

# tubeline.asgi builds a module-level app from the environment on import
os.environ.setdefault("SECRET_KEY", "test-secret-key")

from tubeline.config import AuthConfig, DatabaseConfig, MediaConfig, Settings


@pytest.fixture
def temp_app_yaml(tmp_path):
    """Create a temporary app.yaml file for testing."""
    config_path = tmp_path / "app.yaml"

    def _create_config(config: dict):
        with open(config_path, "w") as f:
            yaml.safe_dump(config, f)
        return config_path

    return _create_config


@pytest.fixture
def auth_config():
    return AuthConfig(cookie_secure=False, bcrypt_rounds=4).with_secret_defaults("unit-test-secret")


@pytest.fixture
def settings(tmp_path):
    """Settings pointing at a throwaway SQLite file and media directory."""
    return Settings(
        secret_key="integration-secret",
        db=DatabaseConfig(url=f"sqlite+aiosqlite:///{tmp_path / 'tubeline.db'}"),
        auth=AuthConfig(cookie_secure=False, bcrypt_rounds=4),
        media=MediaConfig(local_path=str(tmp_path / "media")),
    )


def make_result(scalar=None, scalars=None, rows=None, rowcount=None) -> MagicMock:
    """A mock ``Result`` answering the accessors the services use."""
    result = MagicMock()
    result.scalar_one_or_none.return_value = scalar
    result.scalars.return_value.all.return_value = list(scalars or [])
    result.all.return_value = list(rows or [])
    result.rowcount = rowcount
    return result


def make_session(*results) -> AsyncMock:
    """Create a mock AsyncSession whose .execute() returns successive results."""
    session = AsyncMock()
    # session.add is synchronous in SQLAlchemy, so use MagicMock
    session.add = MagicMock()
    session.execute = AsyncMock(side_effect=list(results))
    return session


def make_user(user_id: UUID | None = None, **overrides) -> MagicMock:
    """Create a mock User with realistic public fields."""
    user = MagicMock()
    user.id = user_id or uuid4()
    user.username = overrides.get("username", "ada")
    user.email = overrides.get("email", "ada@x.com")
    user.full_name = overrides.get("full_name", "Ada Lovelace")
    user.avatar = overrides.get("avatar", "/media/aa/bb/avatar.png")
    user.cover_image = overrides.get("cover_image", "")
    user.password_hash = overrides.get("password_hash", "")
    user.refresh_token = overrides.get("refresh_token")
    return user
