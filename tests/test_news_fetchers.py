import httpx
import pytest

from mycosmo.exceptions import DecodeError, FetchError, MissingAPIKeyError
from mycosmo.models import NewsFilter, NewsType
from mycosmo.services.news import NewsSearchFetcher
from mycosmo.services.space_news import SpaceNewsFetcher
from mycosmo.settings import Settings


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def _news_article(title: str) -> dict:
    return {
        "source": {"id": None, "name": "Sky Daily"},
        "author": "A. Writer",
        "title": title,
        "description": None,
        "url": f"https://news.example/{title}",
        "urlToImage": None,
        "publishedAt": "2024-05-10T08:00:00Z",
        "content": "...",
    }


@pytest.mark.asyncio
async def test_news_search_sends_filter_query_and_paging(tmp_path) -> None:
    seen: dict[str, str] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(request.url.params)
        return httpx.Response(200, json={"status": "ok", "articles": [_news_article("eclipse")]})

    settings = Settings(data_dir=tmp_path, news_api_key="news-key")
    async with _client(handler) as client:
        articles = await NewsSearchFetcher(client, settings).fetch(NewsFilter.EVENTS, page=3)

    assert seen["q"] == NewsFilter.EVENTS.search_query
    assert seen["language"] == "en"
    assert seen["sortBy"] == "publishedAt"
    assert seen["pageSize"] == "10"
    assert seen["page"] == "3"
    assert seen["apiKey"] == "news-key"
    assert articles[0].title == "eclipse"
    assert articles[0].source_name == "Sky Daily"
    assert articles[0].id


@pytest.mark.asyncio
async def test_news_search_requires_key(tmp_path) -> None:
    settings = Settings(data_dir=tmp_path)
    async with _client(lambda request: httpx.Response(200, json={"articles": []})) as client:
        with pytest.raises(MissingAPIKeyError):
            await NewsSearchFetcher(client, settings).fetch()


@pytest.mark.asyncio
async def test_news_search_rejects_unexpected_payload(tmp_path) -> None:
    settings = Settings(data_dir=tmp_path, news_api_key="news-key")
    async with _client(lambda request: httpx.Response(200, json={"status": "error"})) as client:
        with pytest.raises(DecodeError):
            await NewsSearchFetcher(client, settings).fetch()


@pytest.mark.asyncio
async def test_space_news_uses_category_path_and_limit(tmp_path) -> None:
    paths: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        paths.append(request.url.path)
        assert request.url.params["limit"] == "5"
        return httpx.Response(
            200,
            json={
                "count": 1,
                "next": None,
                "previous": None,
                "results": [
                    {
                        "id": 101,
                        "title": "Starship flight",
                        "url": "https://spaceflight.example/101",
                        "image_url": "https://spaceflight.example/101.jpg",
                        "news_site": "SpaceNews",
                        "summary": "Another test flight.",
                        "published_at": "2024-05-10T12:00:00Z",
                        "updated_at": "2024-05-10T13:00:00Z",
                    }
                ],
            },
        )

    settings = Settings(data_dir=tmp_path)
    async with _client(handler) as client:
        fetcher = SpaceNewsFetcher(client, settings)
        articles = await fetcher.fetch(NewsType.LAUNCHES, limit=5)
        page = await fetcher.fetch_page(NewsType.ALL, limit=5)

    assert paths == ["/v4/launches/", "/v4/articles/"]
    assert articles[0].id == 101
    assert articles[0].news_site == "SpaceNews"
    assert page.count == 1


@pytest.mark.asyncio
async def test_space_news_bad_status(tmp_path) -> None:
    settings = Settings(data_dir=tmp_path)
    async with _client(lambda request: httpx.Response(404)) as client:
        with pytest.raises(FetchError):
            await SpaceNewsFetcher(client, settings).fetch(NewsType.BLOGS)
