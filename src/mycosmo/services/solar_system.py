"""Solar-system bodies fetcher, enriched with bundled fun facts."""

from __future__ import annotations

import json
from functools import lru_cache
from importlib import resources
from urllib.parse import quote

import httpx
import structlog

from mycosmo.exceptions import DecodeError, FetchError
from mycosmo.models import PlanetData
from mycosmo.settings import Settings
from .http import decode, get_json

logger = structlog.get_logger(__name__)


@lru_cache(maxsize=1)
def load_fun_facts() -> dict[str, list[str]]:
    text = resources.files("mycosmo").joinpath("data/fun_facts.json").read_text(encoding="utf-8")
    return json.loads(text)


class SolarSystemFetcher:
    name = "solar-system"

    def __init__(self, client: httpx.AsyncClient, settings: Settings) -> None:
        self._client = client
        self._settings = settings

    async def fetch_planets(self) -> list[PlanetData]:
        """Return the eight planets ordered by distance from the Sun."""
        params = {"filter[]": "isPlanet,eq,true"}
        payload, _ = await get_json(
            self._client,
            self.name,
            self._settings.solar_system_base_url,
            params=params,
            headers=self._headers(),
        )
        if not isinstance(payload, dict) or not isinstance(payload.get("bodies"), list):
            raise DecodeError(self.name, "response has no bodies array")
        planets = [self._with_facts(decode(PlanetData, body, self.name)) for body in payload["bodies"]]
        planets = [planet for planet in planets if planet.is_planet]
        if not planets:
            raise FetchError(self.name, "no planets returned")
        planets.sort(key=lambda planet: planet.semimajor_axis)
        logger.info("solar_system.loaded", planets=len(planets))
        return planets

    async def fetch_planet(self, body_id: str) -> PlanetData:
        url = f"{self._settings.solar_system_base_url.rstrip('/')}/{quote(body_id)}"
        payload, _ = await get_json(self._client, self.name, url, headers=self._headers())
        return self._with_facts(decode(PlanetData, payload, self.name))

    def _headers(self) -> dict[str, str]:
        if not self._settings.solar_system_api_key:
            return {}
        return {"Authorization": f"Bearer {self._settings.solar_system_api_key}"}

    def _with_facts(self, planet: PlanetData) -> PlanetData:
        facts = load_fun_facts().get(planet.english_name)
        if not facts or planet.fun_facts:
            return planet
        return planet.model_copy(update={"fun_facts": list(facts)})
