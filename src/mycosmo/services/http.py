"""Shared GET-and-decode helpers used by every content fetcher."""

from __future__ import annotations

from typing import Any, TypeVar

import httpx
import structlog
from pydantic import BaseModel, ValidationError

from mycosmo.exceptions import DecodeError, FetchError

logger = structlog.get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


async def get_json(
    client: httpx.AsyncClient,
    source: str,
    url: str,
    *,
    params: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
    timeout: float | None = None,
) -> tuple[Any, httpx.Response]:
    """Issue one GET, fail hard on non-2xx, and return the decoded JSON body."""
    logger.debug("http.request", source=source, url=url)
    try:
        if timeout is None:
            response = await client.get(url, params=params, headers=headers)
        else:
            response = await client.get(url, params=params, headers=headers, timeout=timeout)
    except httpx.HTTPError as exc:
        logger.warning("http.transport_error", source=source, error=str(exc))
        raise FetchError(source, f"request failed: {exc}") from exc
    if not response.is_success:
        logger.warning("http.bad_status", source=source, status=response.status_code)
        raise FetchError(
            source, f"unexpected status {response.status_code}", status_code=response.status_code
        )
    try:
        payload = response.json()
    except ValueError as exc:
        raise DecodeError(source, f"invalid JSON body: {exc}", status_code=response.status_code) from exc
    return payload, response


def decode(model: type[ModelT], payload: Any, source: str) -> ModelT:
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        logger.warning("http.decode_error", source=source, model=model.__name__)
        raise DecodeError(source, f"payload does not match {model.__name__}: {exc}") from exc
