"""Mars rover photo fetcher with a one-week date fallback."""

from __future__ import annotations

from datetime import date

import httpx
import structlog

from mycosmo.exceptions import DecodeError, FetchError
from mycosmo.models import RoverPhoto
from mycosmo.settings import Settings
from mycosmo.utils import recent_dates
from .http import decode, get_json

logger = structlog.get_logger(__name__)

DEFAULT_CAMERA = "MAST"
FALLBACK_DAYS = 7
DEMO_KEY = "DEMO_KEY"


class MarsRoverFetcher:
    """Fetches the most recent Curiosity photos, walking back one day at a time."""

    name = "mars-rover"

    def __init__(
        self,
        client: httpx.AsyncClient,
        settings: Settings,
        *,
        camera: str = DEFAULT_CAMERA,
    ) -> None:
        self._client = client
        self._settings = settings
        self._camera = camera

    async def fetch_latest(self, today: date | None = None) -> list[RoverPhoto]:
        """Return photos for the newest day in the past week that has any.

        Every failed or empty day is skipped. When the whole week comes back
        empty the result is an empty list, not an error.
        """
        for day in recent_dates(today or date.today(), FALLBACK_DAYS):
            try:
                photos = await self.fetch_for_date(day)
            except FetchError as exc:
                logger.warning("rover.attempt_failed", earth_date=day.isoformat(), error=str(exc))
                continue
            if photos:
                logger.info("rover.hit", earth_date=day.isoformat(), photos=len(photos))
                return photos
            logger.debug("rover.empty", earth_date=day.isoformat())
        logger.info("rover.exhausted", days=FALLBACK_DAYS + 1)
        return []

    async def fetch_for_date(self, day: date) -> list[RoverPhoto]:
        params = {
            "earth_date": day.isoformat(),
            "camera": self._camera,
            "api_key": self._settings.nasa_api_key or DEMO_KEY,
        }
        payload, _ = await get_json(
            self._client, self.name, self._settings.mars_rover_base_url, params=params
        )
        if not isinstance(payload, dict) or not isinstance(payload.get("photos"), list):
            raise DecodeError(self.name, "response has no photos array")
        return [decode(RoverPhoto, item, self.name) for item in payload["photos"]]
