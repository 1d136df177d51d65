"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Firebase credentials are optional at load time: without
them the service starts, health answers, and data endpoints report the store
as not configured.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment and .env."""

    # App
    app_name: str = "worker-housing"
    app_version: str = "1.0.0"
    debug: bool = False

    # Firebase / Firestore: use key (env, full JSON string) or path (file).
    firebase_service_account_key: SecretStr | None = None
    firebase_service_account_path: str | None = None
    firestore_timeout_seconds: float = 30.0

    # Collection names
    collection_sites: str = "sites"
    collection_rooms: str = "rooms"
    collection_workers: str = "workers"

    # Live snapshots: how often a subscription re-reads its collection.
    subscription_poll_interval_seconds: float = 2.0

    # CORS
    allowed_origins: str = "http://localhost:3000,http://localhost:8080"

    # Request / middleware
    request_timeout_seconds: float = 60.0
    request_id_header: str = "X-Request-ID"

    # Caller scope: an admin bound to one site sends its id in this header;
    # super admins send none. The user header identifies the caller.
    site_scope_header_name: str = "X-Site-ID"
    user_id_header_name: str = "X-User-ID"

    # Statistics / export
    recent_arrivals_days: int = 30
    recent_workers_limit: int = 5
    export_sheet_name: str = "Workers"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_collections_and_intervals(self) -> "Settings":
        """Reject empty or duplicated collection names and non-positive intervals."""
        names = [self.collection_sites, self.collection_rooms, self.collection_workers]
        if any(not n or "/" in n for n in names):
            raise ValueError(
                "Collection names must be non-empty and must not contain '/'"
            )
        if len(set(names)) != len(names):
            raise ValueError(
                f"Collection names must be distinct, got: {names!r}"
            )
        if self.subscription_poll_interval_seconds <= 0:
            raise ValueError("SUBSCRIPTION_POLL_INTERVAL_SECONDS must be positive")
        if self.recent_arrivals_days < 0:
            raise ValueError("RECENT_ARRIVALS_DAYS must not be negative")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
