"""Configuration helpers for MyCosmo."""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from mycosmo.credentials import NASA_KEY, NEWS_KEY, CredentialStore

DEFAULT_DATA_ROOT = Path.home() / "mycosmo"


class Settings(BaseModel):
    """Runtime configuration loaded from env vars with sensible defaults."""

    data_dir: Path = Field(default_factory=lambda: DEFAULT_DATA_ROOT)
    db_filename: str = "observations.sqlite3"
    log_level: str = "INFO"
    http_timeout: float = 30.0
    jpeg_quality: int = 80
    nasa_api_key: str | None = None
    news_api_key: str | None = None
    solar_system_api_key: str | None = None
    apod_base_url: str = "https://api.nasa.gov/planetary/apod"
    mars_rover_base_url: str = "https://api.nasa.gov/mars-photos/api/v1/rovers/curiosity/photos"
    news_base_url: str = "https://newsapi.org/v2/everything"
    space_news_base_url: str = "https://api.spaceflightnewsapi.net/v4"
    solar_system_base_url: str = "https://api.le-systeme-solaire.net/rest/bodies"

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_filename

    @property
    def credentials_path(self) -> Path:
        return self.data_dir / "credentials.json"

    def ensure_directories(self) -> None:
        """Create data directories if they are missing."""
        self.data_dir.mkdir(parents=True, exist_ok=True)

    @classmethod
    def load(cls) -> "Settings":
        load_dotenv()
        data_dir = Path(os.environ.get("MYCOSMO_DATA_DIR", DEFAULT_DATA_ROOT))
        credentials = CredentialStore(data_dir / "credentials.json")
        return cls(
            data_dir=data_dir,
            db_filename=os.environ.get("MYCOSMO_DB_FILENAME", "observations.sqlite3"),
            log_level=os.environ.get("MYCOSMO_LOG_LEVEL", "INFO"),
            http_timeout=float(os.environ.get("MYCOSMO_HTTP_TIMEOUT", "30")),
            jpeg_quality=int(os.environ.get("MYCOSMO_JPEG_QUALITY", "80")),
            nasa_api_key=os.environ.get("MYCOSMO_NASA_API_KEY") or credentials.get(NASA_KEY),
            news_api_key=os.environ.get("MYCOSMO_NEWS_API_KEY") or credentials.get(NEWS_KEY),
            solar_system_api_key=os.environ.get("MYCOSMO_SOLAR_SYSTEM_API_KEY"),
            apod_base_url=os.environ.get(
                "MYCOSMO_APOD_URL", "https://api.nasa.gov/planetary/apod"
            ),
            mars_rover_base_url=os.environ.get(
                "MYCOSMO_MARS_ROVER_URL",
                "https://api.nasa.gov/mars-photos/api/v1/rovers/curiosity/photos",
            ),
            news_base_url=os.environ.get("MYCOSMO_NEWS_URL", "https://newsapi.org/v2/everything"),
            space_news_base_url=os.environ.get(
                "MYCOSMO_SPACE_NEWS_URL", "https://api.spaceflightnewsapi.net/v4"
            ),
            solar_system_base_url=os.environ.get(
                "MYCOSMO_SOLAR_SYSTEM_URL", "https://api.le-systeme-solaire.net/rest/bodies"
            ),
        )


def get_settings() -> Settings:
    """Convenience accessor for lazy modules."""
    settings = Settings.load()
    settings.ensure_directories()
    return settings
