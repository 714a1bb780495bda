"""Azure Search committer: validates, encodes and commits document batches."""

from .committer import AzureSearchCommitter, CommitOutcome
from .config import CommitterSettings, ProxySettings
from .encoder import ArrayFieldRule, BatchEncoder
from .errors import (
    CommitterError,
    ConfigError,
    ResponseError,
    TransportError,
    UnsupportedOperationError,
    ValidationError,
)
from .operations import AddOperation, DeleteOperation

__all__ = [
    "AzureSearchCommitter",
    "CommitOutcome",
    "CommitterSettings",
    "ProxySettings",
    "ArrayFieldRule",
    "BatchEncoder",
    "CommitterError",
    "ConfigError",
    "ResponseError",
    "TransportError",
    "UnsupportedOperationError",
    "ValidationError",
    "AddOperation",
    "DeleteOperation",
]
