"""Per-screen coordinators holding fetch state (result, loading flag, last error).

Every load takes a ticket from its slot. A response is applied only while its
ticket is still the newest one, so a slow stale response never overwrites the
result of a later request. In-flight requests are not cancelled.
"""

from __future__ import annotations

import asyncio
from typing import Generic, Protocol, TypeVar

import structlog

from mycosmo.exceptions import MissingAPIKeyError, MyCosmoError
from mycosmo.models import (
    DailyPicture,
    NewsArticle,
    NewsFilter,
    NewsType,
    PlanetData,
    SpaceNewsArticle,
)

logger = structlog.get_logger(__name__)

T = TypeVar("T")

CONFIGURATION_NEEDED = "configuration_needed"
UNAVAILABLE = "unavailable"


def error_state(error: BaseException | None) -> str | None:
    """Map an error to what the user is shown."""
    if error is None:
        return None
    if isinstance(error, MissingAPIKeyError):
        return CONFIGURATION_NEEDED
    return UNAVAILABLE


class PictureSource(Protocol):
    async def fetch(self) -> DailyPicture:
        ...


class NewsSearchSource(Protocol):
    async def fetch(self, news_filter: NewsFilter = NewsFilter.ALL, page: int = 1) -> list[NewsArticle]:
        ...


class SpaceNewsSource(Protocol):
    async def fetch(self, news_type: NewsType = NewsType.ALL, limit: int = 20) -> list[SpaceNewsArticle]:
        ...


class PlanetSource(Protocol):
    async def fetch_planets(self) -> list[PlanetData]:
        ...

    async def fetch_planet(self, body_id: str) -> PlanetData:
        ...


class LoadSlot(Generic[T]):
    """Latest value, loading flag and error for one piece of screen content."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.value: T | None = None
        self.error: MyCosmoError | None = None
        self.is_loading = False
        self._ticket = 0

    @property
    def ticket(self) -> int:
        return self._ticket

    @property
    def error_state(self) -> str | None:
        return error_state(self.error)

    def begin(self) -> int:
        self._ticket += 1
        self.is_loading = True
        return self._ticket

    def is_current(self, ticket: int) -> bool:
        return ticket == self._ticket

    def resolve(self, ticket: int, value: T) -> bool:
        if not self.is_current(ticket):
            logger.debug("coordinator.stale_result", slot=self.name, ticket=ticket)
            return False
        self.value = value
        self.error = None
        self.is_loading = False
        return True

    def reject(self, ticket: int, error: MyCosmoError, *, clear: bool = False) -> bool:
        if not self.is_current(ticket):
            logger.debug("coordinator.stale_error", slot=self.name, ticket=ticket)
            return False
        logger.warning("coordinator.load_failed", slot=self.name, error=str(error))
        self.error = error
        if clear:
            self.value = None
        self.is_loading = False
        return True


async def _load(slot: LoadSlot[T], fetch, *, clear_on_error: bool = False) -> bool:
    ticket = slot.begin()
    try:
        value = await fetch()
    except MyCosmoError as exc:
        slot.reject(ticket, exc, clear=clear_on_error)
        return False
    return slot.resolve(ticket, value)


class HomeCoordinator:
    """Daily picture plus keyword news with topic filter and paging."""

    def __init__(self, pictures: PictureSource, news: NewsSearchSource) -> None:
        self._pictures = pictures
        self._news = news
        self.picture: LoadSlot[DailyPicture] = LoadSlot("picture")
        self.news: LoadSlot[list[NewsArticle]] = LoadSlot("news")
        self.selected_filter = NewsFilter.ALL
        self.page = 1
        self.is_loading_more = False
        self.more_error: MyCosmoError | None = None

    @property
    def articles(self) -> list[NewsArticle]:
        return self.news.value or []

    async def load_picture(self) -> bool:
        return await _load(self.picture, self._pictures.fetch)

    async def load_news(self) -> bool:
        news_filter = self.selected_filter
        self.page = 1
        return await _load(self.news, lambda: self._news.fetch(news_filter, 1))

    async def change_filter(self, news_filter: NewsFilter) -> bool:
        logger.info("coordinator.filter_changed", filter=news_filter.value)
        self.selected_filter = news_filter
        return await self.load_news()

    async def load_more(self) -> bool:
        """Append the next page. Ignored while a page or a fresh first page is loading."""
        if self.is_loading_more or self.news.is_loading:
            logger.debug("coordinator.load_more_skipped")
            return False
        self.is_loading_more = True
        self.more_error = None
        ticket = self.news.ticket
        next_page = self.page + 1
        try:
            articles = await self._news.fetch(self.selected_filter, next_page)
        except MyCosmoError as exc:
            logger.warning("coordinator.load_more_failed", page=next_page, error=str(exc))
            self.more_error = exc
            return False
        finally:
            self.is_loading_more = False
        if not self.news.is_current(ticket):
            logger.debug("coordinator.stale_page", page=next_page)
            return False
        # Pages are concatenated as-is; the same article may appear twice.
        self.news.value = self.articles + articles
        self.page = next_page
        return True

    async def refresh(self) -> bool:
        """Re-fetch picture and news concurrently.

        The picture is applied first. If it failed, its error is stored and
        the news result is discarded, leaving the previous articles in place.
        """
        news_filter = self.selected_filter
        picture_ticket = self.picture.begin()
        news_ticket = self.news.begin()
        picture_result, news_result = await asyncio.gather(
            self._pictures.fetch(),
            self._news.fetch(news_filter, 1),
            return_exceptions=True,
        )
        for result in (picture_result, news_result):
            if isinstance(result, BaseException) and not isinstance(result, MyCosmoError):
                raise result
        if isinstance(picture_result, MyCosmoError):
            self.picture.reject(picture_ticket, picture_result)
            if self.news.is_current(news_ticket):
                self.news.is_loading = False
            return False
        self.picture.resolve(picture_ticket, picture_result)
        if isinstance(news_result, MyCosmoError):
            self.news.reject(news_ticket, news_result)
            return False
        if self.news.resolve(news_ticket, news_result):
            self.page = 1
        return True


class NewsCoordinator:
    """Daily picture plus categorized space news."""

    def __init__(
        self, pictures: PictureSource, space_news: SpaceNewsSource, *, limit: int = 20
    ) -> None:
        self._pictures = pictures
        self._space_news = space_news
        self.limit = limit
        self.picture: LoadSlot[DailyPicture] = LoadSlot("picture")
        self.news: LoadSlot[list[SpaceNewsArticle]] = LoadSlot("space_news")
        self.selected_type = NewsType.ALL

    @property
    def is_loading(self) -> bool:
        return self.picture.is_loading or self.news.is_loading

    @property
    def articles(self) -> list[SpaceNewsArticle]:
        return self.news.value or []

    async def load_picture(self) -> bool:
        return await _load(self.picture, self._pictures.fetch, clear_on_error=True)

    async def load_news(self) -> bool:
        news_type = self.selected_type
        limit = self.limit
        return await _load(self.news, lambda: self._space_news.fetch(news_type, limit))

    async def change_news_type(self, news_type: NewsType) -> bool:
        """Select a category; choosing the current one again goes back to All."""
        self.selected_type = NewsType.ALL if news_type == self.selected_type else news_type
        logger.info("coordinator.news_type_changed", news_type=self.selected_type.value)
        return await self.load_news()


class SolarSystemCoordinator:
    def __init__(self, source: PlanetSource) -> None:
        self._source = source
        self.planets: LoadSlot[list[PlanetData]] = LoadSlot("planets")
        self.selected: LoadSlot[PlanetData] = LoadSlot("selected_planet")

    async def load_planets(self) -> bool:
        return await _load(self.planets, self._source.fetch_planets)

    async def select_planet(self, body_id: str) -> bool:
        return await _load(self.selected, lambda: self._source.fetch_planet(body_id))

    def find(self, name: str) -> PlanetData | None:
        wanted = name.strip().lower()
        for planet in self.planets.value or []:
            if wanted in {planet.english_name.lower(), planet.name.lower(), planet.id.lower()}:
                return planet
        return None
