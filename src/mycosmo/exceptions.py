"""Error types raised by MyCosmo fetchers and the observation form layer."""

from __future__ import annotations


class MyCosmoError(Exception):
    """Base class for all MyCosmo errors."""


class MissingAPIKeyError(MyCosmoError):
    """Raised when a fetcher needs a credential that has not been configured."""

    def __init__(self, service: str) -> None:
        super().__init__(f"No API key configured for {service}.")
        self.service = service


class FetchError(MyCosmoError):
    """Raised when a remote API cannot be reached or answers with a bad status."""

    def __init__(self, source: str, message: str, status_code: int | None = None) -> None:
        super().__init__(f"{source}: {message}")
        self.source = source
        self.status_code = status_code


class DecodeError(FetchError):
    """Raised when a response body does not match the expected payload."""


class ObservationValidationError(MyCosmoError):
    """Raised when an observation draft fails form validation."""

    def __init__(self, errors: dict[str, str]) -> None:
        detail = "; ".join(f"{field}: {reason}" for field, reason in errors.items())
        super().__init__(f"Invalid observation ({detail})")
        self.errors = errors
