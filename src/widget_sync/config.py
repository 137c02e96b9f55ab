from pathlib import Path
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Source hosts offered to community moderators.
WIDGET_DOMAINS: dict[str, str] = {
    "Production": "rhurricane.net",
    "Development": "dev.rhurricane.net",
}


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="WIDGET_SYNC_", extra="ignore"
    )

    APP_NAME: str = "widget-sync"
    VERSION: str = "0.1.0"
    PORT: int = 8787
    ENV: str = "dev"
    # SQLite file holding the cache token and the registered job id.
    DB_PATH: Path = Path("widget_sync.db")

    # Community page the widget lives on.
    COMMUNITY_NAME: str = ""
    WIDGET_NAME: str = "Tropical Summary"
    WIDGET_DOMAIN: Literal["rhurricane.net", "dev.rhurricane.net"] = "rhurricane.net"
    SOURCE_PATH: str = "/api/v1"
    UPDATE_FREQUENCY: int = 1  # minutes

    PLATFORM_API_BASE: str = "https://oauth.reddit.com"
    PLATFORM_TOKEN: str = ""
    USER_AGENT: str = "widget-sync/0.1.0"
    HTTP_TIMEOUT: float = 30.0

    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: Literal["json", "text"] = "json"

    @field_validator("WIDGET_NAME")
    @classmethod
    def _widget_name_required(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Must provide a widget name")
        return value.strip()

    @field_validator("UPDATE_FREQUENCY")
    @classmethod
    def _frequency_in_range(cls, value: int) -> int:
        if value < 1:
            raise ValueError("Frequency must be at least 1")
        if value > 60:
            raise ValueError("Frequency must be at most 60")
        return value

    @property
    def source_url(self) -> str:
        path = self.SOURCE_PATH if self.SOURCE_PATH.startswith("/") else f"/{self.SOURCE_PATH}"
        return f"https://{self.WIDGET_DOMAIN}{path}"


settings = Settings()
