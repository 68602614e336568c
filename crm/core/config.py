"""
Configuration helpers for the CRM backend.

Exposes a frozen Settings object built from environment variables (storage
backend, data file, activity log size, demo seeding, timezone) so that
repositories and routers do not read os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
import os

DEFAULT_DATA_FILE = Path(__file__).resolve().parents[1] / "data.json"
STORAGE_BACKENDS = ("json", "sql", "memory")


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    storage_backend: str
    data_file: Path
    database_url: str
    activity_limit: int
    seed_demo_data: bool
    timezone: str
    log_level: str


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _bool(value: str | None, default: bool = False) -> bool:
        if value is None:
            return default
        return value.strip().lower() in {"1", "true", "yes", "on"}

    backend = (os.getenv("CRM_STORAGE_BACKEND") or "json").strip().lower()
    if backend not in STORAGE_BACKENDS:
        backend = "json"

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        storage_backend=backend,
        data_file=Path(os.getenv("CRM_DATA_FILE") or DEFAULT_DATA_FILE),
        database_url=os.getenv("DATABASE_URL", ""),
        activity_limit=max(1, _int(os.getenv("CRM_ACTIVITY_LIMIT", "100"), 100)),
        seed_demo_data=_bool(os.getenv("CRM_SEED_DEMO_DATA"), False),
        timezone=(os.getenv("CRM_TIMEZONE") or "UTC").strip(),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
    )
