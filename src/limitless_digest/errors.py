"""Exception hierarchy for limitless_digest."""

from __future__ import annotations

from typing import Optional


class LimitlessError(Exception):
    pass


class ConfigurationMissing(LimitlessError):
    """A required setting (API key, backfill range, ...) was not supplied."""


class InvalidDate(LimitlessError, ValueError):
    pass


class ApiError(LimitlessError):
    """Base class for failures talking to the lifelogs API."""

    def __init__(self, message: str, status_code: Optional[int]=None, body: Optional[str]=None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class UpstreamUnavailable(ApiError):
    """Retries exhausted on a rate-limit, server or transport error."""


class UpstreamError(ApiError):
    """Non-retryable HTTP status."""


class MalformedResponse(ApiError):
    """A 200 response whose body is not JSON."""
