"""Service abstractions for the MyCosmo application."""

from .apod import DailyPictureFetcher
from .coordinators import (
    HomeCoordinator,
    LoadSlot,
    NewsCoordinator,
    SolarSystemCoordinator,
    error_state,
)
from .news import NewsSearchFetcher
from .observations import (
    InMemoryObservationStore,
    ObservationService,
    ObservationStore,
    SQLObservationStore,
    apply_filter,
)
from .rover import MarsRoverFetcher
from .solar_system import SolarSystemFetcher
from .space_news import SpaceNewsFetcher

__all__ = [
    "DailyPictureFetcher",
    "MarsRoverFetcher",
    "NewsSearchFetcher",
    "SpaceNewsFetcher",
    "SolarSystemFetcher",
    "HomeCoordinator",
    "NewsCoordinator",
    "SolarSystemCoordinator",
    "LoadSlot",
    "error_state",
    "ObservationStore",
    "SQLObservationStore",
    "InMemoryObservationStore",
    "ObservationService",
    "apply_filter",
]
