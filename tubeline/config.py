import hashlib
import os
import re
from functools import lru_cache
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env file early so env vars are available for YAML interpolation
_env_file = Path(__file__).parent.parent / ".env"
load_dotenv(_env_file)

# Pattern to match $VAR_NAME environment variable references
ENV_VAR_PATTERN = re.compile(r"\$([A-Z_][A-Z0-9_]*)")

CONFIG_PATH_ENV = "TUBELINE_CONFIG"


def interpolate_env_vars(value):
    """Recursively replace $VAR_NAME with os.environ values."""
    if isinstance(value, str):

        def replace(match):
            var = match.group(1)
            val = os.environ.get(var)
            if val is None:
                raise ValueError(f"Environment variable ${var} not set")
            return val

        return ENV_VAR_PATTERN.sub(replace, value)
    elif isinstance(value, dict):
        return {k: interpolate_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [interpolate_env_vars(item) for item in value]
    return value


def get_config_path() -> Path:
    """Path of the YAML config file, overridable via TUBELINE_CONFIG."""
    override = os.environ.get(CONFIG_PATH_ENV)
    if override:
        return Path(override)
    return Path.cwd() / "app.yaml"


def load_app_config() -> dict:
    """Load and parse app.yaml with environment variable interpolation."""
    config_path = get_config_path()

    if not config_path.exists():
        raise FileNotFoundError(f"app.yaml not found at {config_path}")

    with open(config_path, "r") as f:
        config = yaml.safe_load(f) or {}

    return interpolate_env_vars(config)


class DatabaseConfig(BaseModel):
    """Database connection configuration."""

    url: str = "sqlite+aiosqlite:///./tubeline.db"
    pool_size: int = 5
    pool_overflow: int = 10
    pool_timeout: int = 30
    pool_pre_ping: bool = True
    echo: bool = False
    create_all: bool = True


class AuthConfig(BaseModel):
    """Token, cookie and password hashing configuration.

    The token secrets fall back to values derived from ``secret_key`` so a
    deployment only has to provide one secret.
    """

    access_token_secret: str = ""
    refresh_token_secret: str = ""
    access_token_ttl: int = 86400  # 1 day
    refresh_token_ttl: int = 864000  # 10 days
    cookie_secure: bool = True
    bcrypt_rounds: int = 12

    def with_secret_defaults(self, secret_key: str) -> "AuthConfig":
        updates = {}
        if not self.access_token_secret:
            updates["access_token_secret"] = _derive_secret(secret_key, "access")
        if not self.refresh_token_secret:
            updates["refresh_token_secret"] = _derive_secret(secret_key, "refresh")
        return self.model_copy(update=updates) if updates else self


class MediaConfig(BaseModel):
    """Local media store configuration."""

    local_path: str = "./media"
    base_url: str = "/media"
    max_upload_bytes: int = 100 * 1024 * 1024


class LogfireConfig(BaseModel):
    """Optional Pydantic Logfire observability."""

    enabled: bool = False
    service_name: str = "tubeline"
    environment: str = ""
    sample_rate: float = 1.0
    console: bool = False


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Application
    debug: bool = False
    secret_key: str
    cors_origins: list[str] = []

    db: DatabaseConfig = DatabaseConfig()
    auth: AuthConfig = AuthConfig()
    media: MediaConfig = MediaConfig()
    logfire: LogfireConfig = LogfireConfig()

    @property
    def token_config(self) -> AuthConfig:
        """Auth config with token secrets resolved."""
        return self.auth.with_secret_defaults(self.secret_key)


def _derive_secret(secret_key: str, purpose: str) -> str:
    return hashlib.sha256(f"{purpose}:{secret_key}".encode()).hexdigest()


@lru_cache
def get_settings() -> Settings:
    """Load settings from .env and app.yaml."""
    base_settings = Settings()

    try:
        app_config = load_app_config()
    except FileNotFoundError:
        return base_settings

    updates = {}

    if "db" in app_config:
        updates["db"] = DatabaseConfig(**app_config["db"])

    if "auth" in app_config:
        updates["auth"] = AuthConfig(**app_config["auth"])

    if "media" in app_config:
        updates["media"] = MediaConfig(**app_config["media"])

    if "logfire" in app_config:
        updates["logfire"] = LogfireConfig(**app_config["logfire"])

    if "cors_origins" in app_config:
        updates["cors_origins"] = list(app_config["cors_origins"])

    if updates:
        return base_settings.model_copy(update=updates)

    return base_settings
