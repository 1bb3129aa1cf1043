from pathlib import Path

from mycosmo.credentials import NASA_KEY, NEWS_KEY, CredentialStore
from mycosmo.settings import Settings


def test_credential_store_set_get_clear(tmp_path) -> None:
    store = CredentialStore(tmp_path / "credentials.json")
    assert store.get(NASA_KEY) is None

    store.set(NASA_KEY, "  abc123 ")
    assert store.get(NASA_KEY) == "abc123"
    assert CredentialStore(store.path).get(NASA_KEY) == "abc123"

    assert store.clear(NASA_KEY) is True
    assert store.clear(NASA_KEY) is False
    assert store.get(NASA_KEY) is None


def test_credential_store_tolerates_corrupt_file(tmp_path) -> None:
    path = tmp_path / "credentials.json"
    path.write_text("{not json", encoding="utf-8")
    assert CredentialStore(path).get(NEWS_KEY) is None


def test_settings_prefer_env_over_stored_keys(tmp_path, monkeypatch) -> None:
    CredentialStore(tmp_path / "credentials.json").set(NASA_KEY, "stored-nasa")
    CredentialStore(tmp_path / "credentials.json").set(NEWS_KEY, "stored-news")
    monkeypatch.setenv("MYCOSMO_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("MYCOSMO_NEWS_API_KEY", "env-news")
    monkeypatch.delenv("MYCOSMO_NASA_API_KEY", raising=False)
    monkeypatch.setenv("MYCOSMO_JPEG_QUALITY", "65")

    settings = Settings.load()

    assert settings.data_dir == Path(tmp_path)
    assert settings.nasa_api_key == "stored-nasa"
    assert settings.news_api_key == "env-news"
    assert settings.jpeg_quality == 65
    assert settings.db_path == tmp_path / "observations.sqlite3"
