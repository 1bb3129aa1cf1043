import random

from mycosmo.models import (
    CelestialBody,
    DailyPicture,
    ImportanceLevel,
    NewsFilter,
    NewsType,
    Observation,
    ObservationCategory,
    ObservationDraft,
    PlanetData,
)


def _observation(body: CelestialBody, custom: str | None = None) -> Observation:
    return Observation(
        title="Sighting",
        description="Bright point low in the west",
        celestial_body=body,
        custom_body_name=custom,
        category=ObservationCategory.ASTRONOMICAL,
        importance=ImportanceLevel.LOW,
    )


def test_display_name_uses_enum_label_for_named_bodies() -> None:
    for body in CelestialBody:
        if body is CelestialBody.OTHER:
            continue
        assert _observation(body, custom="ignored").display_name == body.label


def test_display_name_uses_custom_name_for_other() -> None:
    assert _observation(CelestialBody.OTHER, custom="Ceres").display_name == "Ceres"
    assert _observation(CelestialBody.OTHER).display_name == "Unknown"


def test_draft_rejects_other_body_without_custom_name() -> None:
    draft = ObservationDraft(
        title="Jupiter storm",
        description="Great Red Spot looked larger tonight",
        celestial_body=CelestialBody.OTHER,
        custom_body_name="",
    )
    errors = draft.validation_errors()
    assert set(errors) == {"custom_body_name"}
    assert not draft.is_valid


def test_draft_requires_title_and_description() -> None:
    draft = ObservationDraft(title="  ", description="")
    assert set(draft.validation_errors()) == {"title", "description"}


def test_news_filter_keyword_mapping() -> None:
    assert NewsFilter.ALL.search_query == "astrology OR horoscope OR zodiac"
    assert NewsFilter.PLANETS.search_query.startswith("planets astrology OR mercury venus mars")
    assert all(news_filter.search_query for news_filter in NewsFilter)


def test_news_type_endpoints() -> None:
    assert NewsType.ALL.endpoint == "articles"
    assert NewsType.ARTICLES.endpoint == "articles"
    assert NewsType.BLOGS.endpoint == "blogs"
    assert NewsType.REPORTS.endpoint == "reports"
    assert NewsType.LAUNCHES.endpoint == "launches"


def test_daily_picture_decodes_api_field_names() -> None:
    picture = DailyPicture.model_validate(
        {
            "date": "2024-05-10",
            "explanation": "A spiral galaxy.",
            "url": "https://apod.nasa.gov/image.jpg",
            "hdurl": "https://apod.nasa.gov/image_hd.jpg",
            "media_type": "image",
            "title": "M101",
            "service_version": "v1",
        }
    )
    assert picture.image_url.endswith("image.jpg")
    assert picture.best_image_url.endswith("image_hd.jpg")
    assert picture.is_image


def test_planet_formatting_helpers() -> None:
    planet = PlanetData.model_validate(
        {
            "id": "terre",
            "name": "La Terre",
            "englishName": "Earth",
            "isPlanet": True,
            "moons": [{"moon": "La Lune", "rel": "https://example.org/lune"}],
            "gravity": 9.8,
            "meanRadius": 6371.0084,
            "mass": {"massValue": 5.97237, "massExponent": 24},
            "avgTemp": 288,
            "axialTilt": 23.4393,
        }
    )
    assert planet.formatted_radius == "6371 km"
    assert planet.formatted_gravity == "9.80 m/s²"
    assert planet.formatted_mass == "5.97×10^24 kg"
    assert planet.formatted_temperature == "288°K (14°C)"
    assert planet.moon_count == 1
    assert planet.random_fun_fact() == "No fun facts available"

    with_facts = planet.model_copy(update={"fun_facts": ["a", "b"]})
    assert with_facts.random_fun_fact(random.Random(1)) in {"a", "b"}
