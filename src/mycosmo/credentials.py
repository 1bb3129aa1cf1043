"""Persisted key/value storage for user-supplied API keys."""

from __future__ import annotations

import json
from pathlib import Path

import structlog

logger = structlog.get_logger(__name__)

NASA_KEY = "nasa_api_key"
NEWS_KEY = "news_api_key"


class CredentialStore:
    """Small JSON file holding API keys, read at settings-load time."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str) -> str | None:
        value = self._read().get(key)
        return value or None

    def set(self, key: str, value: str) -> None:
        payload = self._read()
        payload[key] = value.strip()
        self._write(payload)
        logger.info("credentials.saved", key=key)

    def clear(self, key: str) -> bool:
        payload = self._read()
        if key not in payload:
            return False
        del payload[key]
        self._write(payload)
        logger.info("credentials.cleared", key=key)
        return True

    def _read(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            logger.warning("credentials.corrupt", path=str(self._path), error=str(exc))
            return {}
        return payload if isinstance(payload, dict) else {}

    def _write(self, payload: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
