from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class KioskSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="KIOSK_", env_file=".env", env_ignore_empty=True, extra="ignore"
    )

    API_URL: str = "http://localhost:8000"
    # Durable local key/value store (device identifier cache)
    STATE_FILE: Path = Path.home() / ".signage-kiosk.json"
    REQUEST_TIMEOUT: float = 10.0

    PING_INTERVAL: float = 10.0
    FORCE_REFRESH_INTERVAL: float = 5.0
    FORCE_REFRESH_WINDOW: float = 30.0

    DETAIL_PANEL_SECONDS: int = 5
    NEWS_SECONDS: int = 15

    GEOLOCATION_TIMEOUT: float = 5.0
    DEFAULT_BATTERY_LEVEL: int = 100

    # Fixed position for kiosks without a GPS receiver
    LATITUDE: float | None = None
    LONGITUDE: float | None = None
    LOCATION_ACCURACY: float | None = None
