"""NASA Astronomy Picture of the Day fetcher."""

from __future__ import annotations

import httpx
import structlog

from mycosmo.exceptions import MissingAPIKeyError
from mycosmo.models import DailyPicture
from mycosmo.settings import Settings
from .http import decode, get_json

logger = structlog.get_logger(__name__)

QUOTA_HEADER = "X-RateLimit-Remaining"


class DailyPictureFetcher:
    """Fetches the featured picture of the day. Requires a NASA API key."""

    name = "apod"

    def __init__(self, client: httpx.AsyncClient, settings: Settings) -> None:
        self._client = client
        self._settings = settings

    async def fetch(self) -> DailyPicture:
        picture, _ = await self.fetch_with_quota()
        return picture

    async def fetch_with_quota(self) -> tuple[DailyPicture, int | None]:
        """Return the picture along with the remaining request quota, if reported."""
        params = {"api_key": self._api_key()}
        logger.info("apod.fetch")
        payload, response = await get_json(
            self._client, self.name, self._settings.apod_base_url, params=params
        )
        picture = decode(DailyPicture, payload, self.name)
        return picture, _parse_quota(response)

    async def remaining_requests(self) -> int | None:
        """Best-effort read of the quota header; never raises."""
        if not self._settings.nasa_api_key:
            return None
        try:
            response = await self._client.get(
                self._settings.apod_base_url,
                params={"api_key": self._settings.nasa_api_key},
            )
        except httpx.HTTPError as exc:
            logger.debug("apod.quota_unavailable", error=str(exc))
            return None
        return _parse_quota(response)

    def _api_key(self) -> str:
        if not self._settings.nasa_api_key:
            raise MissingAPIKeyError("NASA")
        return self._settings.nasa_api_key


def _parse_quota(response: httpx.Response) -> int | None:
    raw = response.headers.get(QUOTA_HEADER)
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        return None
