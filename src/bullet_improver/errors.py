from __future__ import annotations

from typing import Optional


class BulletImproverError(Exception):
    """Base class for failures that are reported to the caller as a single message."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ValidationError(BulletImproverError):
    """Input text is missing, not a string, or blank after trimming."""

    status_code = 400


class ConfigurationError(BulletImproverError):
    """Missing credential or unsupported provider; raised before any network call."""

    status_code = 500


class ProviderError(BulletImproverError):
    """Non-2xx response, empty completion or transport failure from a provider."""

    status_code = 502

    def __init__(self, message: str, upstream_status: Optional[int] = None):
        super().__init__(message)
        self.upstream_status = upstream_status


class PersistenceError(BulletImproverError):
    """Storage insert or query failed. On /improve it is logged only."""

    status_code = 503
