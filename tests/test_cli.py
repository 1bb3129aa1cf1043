from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from mycosmo import cli

runner = CliRunner()


@pytest.fixture()
def data_dir(tmp_path, monkeypatch) -> Path:
    target = tmp_path / "mycosmo-data"
    monkeypatch.setenv("MYCOSMO_DATA_DIR", str(target))
    monkeypatch.delenv("MYCOSMO_NASA_API_KEY", raising=False)
    monkeypatch.delenv("MYCOSMO_NEWS_API_KEY", raising=False)
    return target


def test_config_json_flag(data_dir, monkeypatch):
    monkeypatch.setenv("MYCOSMO_DB_FILENAME", "test.sqlite3")
    monkeypatch.setenv("MYCOSMO_NASA_API_KEY", "hidden")

    result = runner.invoke(cli.app, ["config", "--json"])

    assert result.exit_code == 0
    payload = json.loads(result.stdout.strip())
    assert Path(payload["data_dir"]) == data_dir
    assert payload["db_filename"] == "test.sqlite3"
    assert payload["nasa_api_key"] == "****"
    assert payload["news_api_key"] is None


def test_apod_without_key_asks_for_configuration(data_dir):
    result = runner.invoke(cli.app, ["apod"])

    assert result.exit_code == 1
    assert "Configuration needed" in result.stdout


def test_set_and_clear_key(data_dir):
    result = runner.invoke(cli.app, ["set-key", "nasa", "abc"])
    assert result.exit_code == 0
    stored = json.loads((data_dir / "credentials.json").read_text())
    assert stored["nasa_api_key"] == "abc"

    result = runner.invoke(cli.app, ["clear-key", "nasa"])
    assert result.exit_code == 0
    assert "Removed" in result.stdout

    result = runner.invoke(cli.app, ["set-key", "weather", "abc"])
    assert result.exit_code != 0


def test_observation_add_list_delete(data_dir):
    result = runner.invoke(
        cli.app,
        [
            "obs", "add",
            "--title", "Red dot",
            "--description", "Mars near the Moon",
            "--body", "Mars",
            "--category", "Astronomical",
            "--importance", "High",
        ],
    )
    assert result.exit_code == 0, result.stdout
    assert "Saved observation" in result.stdout

    result = runner.invoke(cli.app, ["obs", "list", "--importance", "High"])
    assert result.exit_code == 0
    assert "Red dot" in result.stdout

    result = runner.invoke(cli.app, ["obs", "list", "--importance", "Low"])
    assert "No observations found" in result.stdout

    result = runner.invoke(cli.app, ["obs", "delete", "--index", "1"])
    assert result.exit_code == 0
    assert "Deleted 1" in result.stdout

    result = runner.invoke(cli.app, ["obs", "list"])
    assert "No observations found" in result.stdout


def test_observation_add_rejects_missing_custom_body(data_dir):
    result = runner.invoke(
        cli.app,
        [
            "obs", "add",
            "--title", "Jupiter storm",
            "--description", "Swirls",
            "--body", "Other",
        ],
    )
    assert result.exit_code == 1
    assert "custom_body_name" in result.stdout
