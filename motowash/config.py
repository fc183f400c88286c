# motowash/config.py
"""
Application configuration using Pydantic-Settings.
All settings can be overridden via environment variables or .env file.
"""

from pydantic_settings import BaseSettings
from typing import Optional
from zoneinfo import ZoneInfo


class Settings(BaseSettings):
    # ── Database ──────────────────────────────────────────────────────────
    DATABASE_URL: str = "sqlite:///./motowash.db"

    # ── Network ───────────────────────────────────────────────────────────
    BACKEND_IP: str = "0.0.0.0"
    BACKEND_PORT: int = 8080

    # ── Security ──────────────────────────────────────────────────────────
    ADMIN_PASSWORD: str = "CHANGE_ME"        # Shared manager password
    STORE_API_KEY: Optional[str] = None      # Bearer key for /api/data + /api/sync

    # ── Sync ──────────────────────────────────────────────────────────────
    SYNC_BASE_URL: Optional[str] = None      # Empty = write straight to local KV table
    SYNC_TIMEOUT_SECONDS: float = 10.0
    KV_KEY_PREFIX: str = "starwash_"

    # ── Workflow ──────────────────────────────────────────────────────────
    RESET_COMPLETION_ON_UNASSIGN: bool = False   # Clear completionTime when sent back to waiting

    # ── Shop ──────────────────────────────────────────────────────────────
    SHOP_NAME: str = "StarWash"
    SHOP_TIMEZONE: str = "America/Bogota"
    WHATSAPP_COUNTRY_CODE: str = "57"
    HISTORY_LIMIT: int = 50
    NOTIFICATION_BUFFER_SIZE: int = 100

    @property
    def TIMEZONE(self) -> ZoneInfo:
        return ZoneInfo(self.SHOP_TIMEZONE)

    # ── Logging ───────────────────────────────────────────────────────────
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
