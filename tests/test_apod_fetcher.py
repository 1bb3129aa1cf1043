import httpx
import pytest

from mycosmo.exceptions import DecodeError, FetchError, MissingAPIKeyError
from mycosmo.services.apod import DailyPictureFetcher
from mycosmo.settings import Settings

APOD_PAYLOAD = {
    "date": "2024-05-10",
    "explanation": "Aurora over Iceland.",
    "url": "https://apod.nasa.gov/apod/image/aurora.jpg",
    "media_type": "image",
    "title": "Northern Lights",
}


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_missing_key_is_reported_before_any_request(tmp_path) -> None:
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(500)

    settings = Settings(data_dir=tmp_path, nasa_api_key=None)
    async with _client(handler) as client:
        with pytest.raises(MissingAPIKeyError):
            await DailyPictureFetcher(client, settings).fetch()
    assert calls == []


@pytest.mark.asyncio
async def test_fetch_decodes_picture_and_quota(tmp_path) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["api_key"] == "secret"
        return httpx.Response(200, json=APOD_PAYLOAD, headers={"X-RateLimit-Remaining": "42"})

    settings = Settings(data_dir=tmp_path, nasa_api_key="secret")
    async with _client(handler) as client:
        fetcher = DailyPictureFetcher(client, settings)
        picture, remaining = await fetcher.fetch_with_quota()
        assert await fetcher.remaining_requests() == 42

    assert picture.title == "Northern Lights"
    assert picture.hd_image_url is None
    assert picture.best_image_url == APOD_PAYLOAD["url"]
    assert remaining == 42


@pytest.mark.asyncio
async def test_bad_status_is_a_fetch_error(tmp_path) -> None:
    settings = Settings(data_dir=tmp_path, nasa_api_key="secret")
    async with _client(lambda request: httpx.Response(503)) as client:
        with pytest.raises(FetchError) as excinfo:
            await DailyPictureFetcher(client, settings).fetch()
    assert excinfo.value.status_code == 503
    assert not isinstance(excinfo.value, MissingAPIKeyError)


@pytest.mark.asyncio
async def test_malformed_body_is_a_decode_error(tmp_path) -> None:
    settings = Settings(data_dir=tmp_path, nasa_api_key="secret")
    async with _client(lambda request: httpx.Response(200, text="<html>")) as client:
        with pytest.raises(DecodeError):
            await DailyPictureFetcher(client, settings).fetch()

    async with _client(lambda request: httpx.Response(200, json={"title": "x"})) as client:
        with pytest.raises(DecodeError):
            await DailyPictureFetcher(client, settings).fetch()


@pytest.mark.asyncio
async def test_remaining_requests_is_best_effort(tmp_path) -> None:
    def broken(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("offline", request=request)

    settings = Settings(data_dir=tmp_path, nasa_api_key="secret")
    async with _client(broken) as client:
        assert await DailyPictureFetcher(client, settings).remaining_requests() is None

    async with _client(lambda request: httpx.Response(200, json=APOD_PAYLOAD)) as client:
        assert await DailyPictureFetcher(client, settings).remaining_requests() is None

    no_key = Settings(data_dir=tmp_path)
    async with _client(lambda request: httpx.Response(200, json=APOD_PAYLOAD)) as client:
        assert await DailyPictureFetcher(client, no_key).remaining_requests() is None
