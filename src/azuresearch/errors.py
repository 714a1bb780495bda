"""Error types raised by the Azure Search committer."""

from __future__ import annotations

from typing import Optional


class CommitterError(RuntimeError):
    """Fatal failure of a batch commit; the current batch is aborted."""


class ConfigError(CommitterError):
    """Required settings are missing or out of range."""


class ValidationError(CommitterError):
    """A field name or document key breaks the Azure Search naming rules."""


class UnsupportedOperationError(CommitterError):
    """An operation is neither an add nor a delete."""


class TransportError(CommitterError):
    """The HTTP request could not be built, sent or read."""


class ResponseError(CommitterError):
    """Azure Search answered with a status other than 200 or 201."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


__all__ = [
    "CommitterError",
    "ConfigError",
    "ValidationError",
    "UnsupportedOperationError",
    "TransportError",
    "ResponseError",
]
