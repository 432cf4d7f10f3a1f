"""Configuration management for calcul8tr-sync."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Literal

ApiEnvironment = Literal["dev", "prod"]

DEFAULT_SQLITE_PATH = "~/.calcul8tr/sync.db"


@dataclass
class Config:
    """
    Application configuration.

    Loaded from environment variables with sensible defaults.
    """

    # Environment
    api_env: ApiEnvironment = "dev"
    auth_bypass_dev: bool = True

    # Server settings
    host: str = "127.0.0.1"
    port: int = 8000

    # CORS settings
    allowed_origins: list[str] = field(default_factory=list)

    # Storage settings
    storage_backend: str = "memory"  # memory, sqlite
    sqlite_path: str = DEFAULT_SQLITE_PATH
    database_id: str = "calcul8tr"
    entitlements_container_id: str = "entitlements"
    sync_container_id: str = "sync_data"

    @property
    def is_dev(self) -> bool:
        return self.api_env == "dev"

    @classmethod
    def from_env(cls) -> Config:
        """Load configuration from environment variables."""

        def get_str(key: str, default: str) -> str:
            value = os.getenv(key, "").strip()
            return value or default

        def get_bool(key: str, default: bool) -> bool:
            value = os.getenv(key, "").strip()
            if not value:
                return default
            return value.lower() in ("true", "1", "yes")

        def get_int(key: str, default: int) -> int:
            value = os.getenv(key)
            if value is None:
                return default
            try:
                return int(value)
            except ValueError:
                return default

        def get_list(key: str) -> list[str]:
            value = os.getenv(key, "")
            return [s.strip() for s in value.split(",") if s.strip()]

        api_env: ApiEnvironment = "prod" if get_str("API_ENV", "").lower() == "prod" else "dev"

        return cls(
            api_env=api_env,
            auth_bypass_dev=get_bool("AUTH_BYPASS_DEV", api_env == "dev"),
            host=get_str("CALCUL8TR_HOST", "127.0.0.1"),
            port=get_int("CALCUL8TR_PORT", 8000),
            allowed_origins=get_list("ALLOWED_ORIGINS"),
            storage_backend=get_str("CALCUL8TR_STORAGE", "memory").lower(),
            sqlite_path=get_str("CALCUL8TR_SQLITE_PATH", DEFAULT_SQLITE_PATH),
            database_id=get_str("CALCUL8TR_DATABASE_ID", "calcul8tr"),
            entitlements_container_id=get_str(
                "CALCUL8TR_ENTITLEMENTS_CONTAINER_ID", "entitlements"
            ),
            sync_container_id=get_str("CALCUL8TR_SYNC_CONTAINER_ID", "sync_data"),
        )


# Singleton config instance
_config: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config


def reset_config() -> None:
    """Reset the global configuration (useful for testing)."""
    global _config
    _config = None
