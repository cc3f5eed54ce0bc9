"""
Error taxonomy shared by every provider adapter and the pipeline executor.

Each error carries a machine-readable ``kind``, the HTTP status the API
layer should answer with, and a ``remedy`` hint the front end turns into
a targeted suggestion ("switch provider", "check configuration", ...).
Raw provider payloads go into ``details`` and are only ever logged.
"""

from __future__ import annotations

from typing import Any


class PipelineError(Exception):
    """Base class for every failure the pipeline reports to the caller."""

    kind: str = "internal_error"
    status_code: int = 500
    remedy: str | None = None

    def __init__(
        self,
        message: str,
        *,
        kind: str | None = None,
        status_code: int | None = None,
        remedy: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        if kind is not None:
            self.kind = kind
        if status_code is not None:
            self.status_code = status_code
        if remedy is not None:
            self.remedy = remedy
        self.details = details or {}


class ValidationError(PipelineError):
    """Caller's fault: empty question, unknown model or workflow."""

    kind = "validation_error"
    status_code = 400
    remedy = "rephrase"


class ConfigurationError(PipelineError):
    """Operator's fault: a provider credential is missing."""

    kind = "missing_api_key"
    status_code = 500
    remedy = "check_configuration"


class AuthError(PipelineError):
    """The provider rejected the configured credentials."""

    kind = "invalid_credentials"
    status_code = 401
    remedy = "check_configuration"


class RateLimitError(PipelineError):
    """Quota or rate limit reached upstream."""

    kind = "quota_exceeded"
    status_code = 429
    remedy = "switch_provider"


class UpstreamError(PipelineError):
    """Provider answered with a non-2xx status or an unusable body."""

    kind = "upstream_http_error"
    status_code = 502
    remedy = "retry_later"


class NetworkError(PipelineError):
    """Transport failure or timeout talking to a provider."""

    kind = "network_error"
    status_code = 502
    remedy = "retry_later"
