"""Core data models used throughout the MyCosmo application."""

from __future__ import annotations

import random
from datetime import datetime
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CelestialBody(str, Enum):
    MERCURY = "Mercury"
    VENUS = "Venus"
    EARTH = "Earth"
    MARS = "Mars"
    JUPITER = "Jupiter"
    SATURN = "Saturn"
    URANUS = "Uranus"
    NEPTUNE = "Neptune"
    OTHER = "Other"

    @property
    def label(self) -> str:
        return self.value


class ObservationCategory(str, Enum):
    ATMOSPHERIC = "Atmospheric"
    GEOLOGICAL = "Geological"
    ASTRONOMICAL = "Astronomical"
    OTHER = "Other"


class ImportanceLevel(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


class NewsFilter(str, Enum):
    """Topic filter for the keyword news search."""

    ALL = "All"
    PLANETS = "Planets"
    ZODIAC = "Zodiac"
    EVENTS = "Events"

    @property
    def search_query(self) -> str:
        return NEWS_FILTER_QUERIES[self]


NEWS_FILTER_QUERIES = {
    NewsFilter.ALL: "astrology OR horoscope OR zodiac",
    NewsFilter.PLANETS: "planets astrology OR mercury venus mars jupiter saturn astrology",
    NewsFilter.ZODIAC: "zodiac signs OR constellation astrology OR horoscope signs",
    NewsFilter.EVENTS: "astrological events OR celestial events OR planetary alignment",
}


class NewsType(str, Enum):
    """Content category served by the Spaceflight News API."""

    ALL = "All"
    ARTICLES = "Articles"
    BLOGS = "Blogs"
    REPORTS = "Reports"
    LAUNCHES = "Launches"

    @property
    def endpoint(self) -> str:
        if self is NewsType.ALL:
            return "articles"
        return self.value.lower()


class DailyPicture(BaseModel):
    """NASA Astronomy Picture of the Day."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    date: str
    explanation: str
    image_url: str = Field(alias="url")
    hd_image_url: str | None = Field(default=None, alias="hdurl")
    media_kind: str = Field(alias="media_type")
    title: str

    @property
    def is_image(self) -> bool:
        return self.media_kind == "image"

    @property
    def best_image_url(self) -> str:
        return self.hd_image_url or self.image_url


class RoverCamera(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int
    name: str
    full_name: str


class Rover(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int
    name: str
    landing_date: str
    launch_date: str
    status: str


class RoverPhoto(BaseModel):
    """A single Mars rover photo record."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int
    sol: int
    camera: RoverCamera
    image_url: str = Field(alias="img_src")
    earth_date: str
    rover: Rover


class NewsSource(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str


class NewsArticle(BaseModel):
    """Article returned by the keyword news search. Identified client-side."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(default_factory=lambda: uuid4().hex)
    title: str
    description: str | None = None
    url: str
    image_url: str | None = Field(default=None, alias="urlToImage")
    published_at: str = Field(alias="publishedAt")
    source: NewsSource

    @property
    def source_name(self) -> str:
        return self.source.name


class SpaceNewsArticle(BaseModel):
    """Article, blog, report or launch entry from the Spaceflight News API."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int
    title: str
    url: str
    image_url: str | None = None
    news_site: str
    summary: str = ""
    published_at: str
    updated_at: str | None = None


class SpaceNewsPage(BaseModel):
    model_config = ConfigDict(frozen=True)

    count: int
    next: str | None = None
    previous: str | None = None
    results: list[SpaceNewsArticle] = Field(default_factory=list)


class Moon(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str | None = Field(default=None, alias="moon")
    rel: str


class Mass(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    value: float = Field(alias="massValue")
    exponent: int = Field(alias="massExponent")


class Volume(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    value: float = Field(alias="volValue")
    exponent: int = Field(alias="volExponent")


class PlanetData(BaseModel):
    """Descriptive record for one body of the solar system."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    name: str
    english_name: str = Field(alias="englishName")
    is_planet: bool = Field(default=True, alias="isPlanet")
    moons: list[Moon] | None = None
    gravity: float = 0.0
    mean_radius: float = Field(default=0.0, alias="meanRadius")
    semimajor_axis: float = Field(default=0.0, alias="semimajorAxis")
    mass: Mass | None = None
    vol: Volume | None = None
    density: float = 0.0
    discovered_by: str | None = Field(default=None, alias="discoveredBy")
    discovery_date: str | None = Field(default=None, alias="discoveryDate")
    alternative_name: str | None = Field(default=None, alias="alternativeName")
    axial_tilt: float = Field(default=0.0, alias="axialTilt")
    avg_temp: float = Field(default=0.0, alias="avgTemp")
    main_anomaly: float = Field(default=0.0, alias="mainAnomaly")
    arg_periapsis: float = Field(default=0.0, alias="argPeriapsis")
    long_asc_node: float = Field(default=0.0, alias="longAscNode")
    body_type: str = Field(default="Planet", alias="bodyType")
    fun_facts: list[str] = Field(default_factory=list)

    @property
    def moon_count(self) -> int:
        return len(self.moons or [])

    @property
    def formatted_radius(self) -> str:
        return f"{int(self.mean_radius)} km"

    @property
    def formatted_temperature(self) -> str:
        return f"{int(self.avg_temp)}°K ({int(self.avg_temp - 273.15)}°C)"

    @property
    def formatted_gravity(self) -> str:
        return f"{self.gravity:.2f} m/s²"

    @property
    def formatted_mass(self) -> str:
        if self.mass is None:
            return "—"
        return f"{self.mass.value:.2f}×10^{self.mass.exponent} kg"

    def random_fun_fact(self, rng: random.Random | None = None) -> str:
        if not self.fun_facts:
            return "No fun facts available"
        return (rng or random).choice(self.fun_facts)


class Observation(BaseModel):
    """A user-authored record of an astronomical sighting."""

    id: str = Field(default_factory=lambda: uuid4().hex)
    title: str
    description: str
    celestial_body: CelestialBody
    custom_body_name: str | None = None
    category: ObservationCategory
    importance: ImportanceLevel
    timestamp: datetime = Field(default_factory=datetime.now)
    primary_image: bytes | None = None
    additional_images: list[bytes] = Field(default_factory=list)

    @field_validator("timestamp")
    @classmethod
    def normalize_timestamp(cls, value: datetime) -> datetime:
        # Stored timestamps are naive local time so they always compare.
        if value.tzinfo is not None:
            return value.astimezone().replace(tzinfo=None)
        return value

    @property
    def display_name(self) -> str:
        if self.celestial_body is CelestialBody.OTHER:
            return self.custom_body_name or "Unknown"
        return self.celestial_body.label

    @property
    def image_count(self) -> int:
        return (1 if self.primary_image else 0) + len(self.additional_images)


class ObservationDraft(BaseModel):
    """Unvalidated form input for a new observation."""

    title: str = ""
    description: str = ""
    celestial_body: CelestialBody = CelestialBody.EARTH
    custom_body_name: str = ""
    category: ObservationCategory = ObservationCategory.OTHER
    importance: ImportanceLevel = ImportanceLevel.MEDIUM
    timestamp: datetime | None = None

    def validation_errors(self) -> dict[str, str]:
        errors: dict[str, str] = {}
        if not self.title.strip():
            errors["title"] = "title is required"
        if not self.description.strip():
            errors["description"] = "description is required"
        if self.celestial_body is CelestialBody.OTHER and not self.custom_body_name.strip():
            errors["custom_body_name"] = "a custom body name is required when the body is Other"
        return errors

    @property
    def is_valid(self) -> bool:
        return not self.validation_errors()


class ObservationFilter(BaseModel):
    """Optional tag matchers; unset fields match everything, set ones are AND-combined."""

    category: ObservationCategory | None = None
    importance: ImportanceLevel | None = None
    celestial_body: CelestialBody | None = None

    @property
    def is_empty(self) -> bool:
        return self.category is None and self.importance is None and self.celestial_body is None

    def matches(self, observation: Observation) -> bool:
        if self.category is not None and observation.category != self.category:
            return False
        if self.importance is not None and observation.importance != self.importance:
            return False
        if self.celestial_body is not None and observation.celestial_body != self.celestial_body:
            return False
        return True
