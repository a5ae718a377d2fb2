# seatwatch/config.py
"""
Application configuration using Pydantic-Settings.
All settings can be overridden via environment variables or .env file.
"""

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import field_validator
from pydantic_settings import BaseSettings

WEBHOOK_PLACEHOLDER = "YOUR_DISCORD_WEBHOOK_URL_HERE"


class Settings(BaseSettings):
    # ── Endpoints ─────────────────────────────────────────────────────────
    API_URL: str = (
        "https://common-api.sagano.linktivity.io/v1/inventories/2025-11-03/"
        "services/37?product_id=51&base_booking_id="
    )
    BOOK_URL: str = "https://ars-saganokanko.triplabo.jp/activity/zt/LINKTIVITY-YRBTL/"

    # ── Notification ──────────────────────────────────────────────────────
    DISCORD_WEBHOOK_URL: str = WEBHOOK_PLACEHOLDER   # Left as-is → notifications skipped

    # ── Target ────────────────────────────────────────────────────────────
    TARGET_CAR: str = "2号車"
    AVAILABILITY_THRESHOLD: int = 4              # Notify at 4+ arrangeable seats

    # ── Schedule ──────────────────────────────────────────────────────────
    CHECK_INTERVAL_SECONDS: float = 20 * 60      # 20 minutes
    MAX_RUNTIME_SECONDS: float = 5.9 * 60 * 60   # Stay under a 6h job limit
    REQUEST_TIMEOUT_SECONDS: float = 30.0

    # ── Display ───────────────────────────────────────────────────────────
    CHECK_TIMEZONE: str = "Asia/Taipei"

    # ── Logging ───────────────────────────────────────────────────────────
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"

    @field_validator(
        "AVAILABILITY_THRESHOLD",
        "CHECK_INTERVAL_SECONDS",
        "MAX_RUNTIME_SECONDS",
        "REQUEST_TIMEOUT_SECONDS",
    )
    @classmethod
    def _must_be_positive(cls, value):
        if value <= 0:
            raise ValueError("must be greater than zero")
        return value

    @field_validator("CHECK_TIMEZONE")
    @classmethod
    def _must_be_known_zone(cls, value):
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"unknown time zone {value!r}") from e
        return value

    @property
    def webhook_configured(self) -> bool:
        url = self.DISCORD_WEBHOOK_URL.strip()
        return bool(url) and url != WEBHOOK_PLACEHOLDER

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
