"""Commit batches of add/delete operations to an Azure Search index.

The committer owns one pooled CommitClient. It is created on first use (or on
`open()`), reused across batches, discarded on any fatal error and rebuilt on
the next commit. Callers close the committer once, after their last batch.
"""

from __future__ import annotations

import enum
import logging
import threading
from typing import Iterable, List, Optional

import requests

from .client import CommitClient
from .config import MAX_BATCH_SIZE, CommitterSettings
from .encoder import BatchEncoder
from .errors import CommitterError, ConfigError, ResponseError, TransportError
from .operations import CommitOperation

logger = logging.getLogger(__name__)

SUCCESS_STATUSES = (200, 201)


class CommitOutcome(enum.Enum):
    COMMITTED = "committed"
    NOTHING_TO_COMMIT = "nothing_to_commit"
    RESPONSE_ERROR_IGNORED = "response_error_ignored"


def _status_line(response: requests.Response) -> str:
    reason = getattr(response, "reason", None) or ""
    version = getattr(getattr(response, "raw", None), "version", None)
    protocol = f"HTTP/{version // 10}.{version % 10}" if isinstance(version, int) and version > 0 else "HTTP"
    return f"{protocol} {response.status_code} {reason}".rstrip()


class AzureSearchCommitter:
    """Send batches to Azure Search through a lazily built, shared transport."""

    def __init__(self, settings: CommitterSettings) -> None:
        self.settings = settings
        self.encoder = BatchEncoder.from_settings(settings)
        self._client: Optional[CommitClient] = None
        self._in_flight = 0
        self._guard = threading.Condition()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AzureSearchCommitter):
            return NotImplemented
        return self.settings == other.settings

    def __hash__(self) -> int:
        return hash(self.settings)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(settings={self.settings!r})"

    def __enter__(self) -> "AzureSearchCommitter":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def is_open(self) -> bool:
        return self._client is not None

    def _build_client(self) -> CommitClient:
        self.settings.check_complete()
        logger.debug("Azure Search API Version: %s", self.settings.resolved_api_version)
        client = CommitClient(self.settings)
        logger.info("Azure Search REST API Http Client created for %s.", self.settings.index_name)
        return client

    def open(self) -> None:
        """Validate settings and build the transport ahead of the first batch."""

        with self._guard:
            if self._client is None:
                self._client = self._build_client()

    def _acquire_client(self) -> CommitClient:
        with self._guard:
            if self._client is None:
                self._client = self._build_client()
            self._in_flight += 1
            return self._client

    def _release_client(self) -> None:
        with self._guard:
            self._in_flight -= 1
            if self._in_flight == 0:
                self._guard.notify_all()

    def close(self) -> None:
        """Close the transport once no commit is using it. Safe to repeat."""

        with self._guard:
            while self._in_flight:
                self._guard.wait()
            if self._client is None:
                return
            client, self._client = self._client, None
            client.close()
        logger.info("Azure Search REST API Http Client closed.")

    def commit(self, batch: Iterable[CommitOperation]) -> CommitOutcome:
        """Send one batch; raises CommitterError when the batch fails."""

        operations: List[CommitOperation] = list(batch)
        if len(operations) > MAX_BATCH_SIZE:
            raise ConfigError(
                f"Batch of {len(operations)} operations exceeds the maximum of {MAX_BATCH_SIZE}."
            )

        client = self._acquire_client()
        failed = False
        try:
            return self._send(client, operations)
        except CommitterError:
            failed = True
            raise
        except (requests.RequestException, ValueError, TypeError) as exc:
            failed = True
            raise TransportError("Could not commit JSON batch to Azure Search.") from exc
        finally:
            self._release_client()
            if failed:
                self.close()

    def _send(self, client: CommitClient, operations: List[CommitOperation]) -> CommitOutcome:
        logger.info("Sending %d commit operations to Azure Search.", len(operations))
        body = self.encoder.encode_batch(operations)
        if body is None:
            logger.warning("No documents were valid. Nothing committed.")
            return CommitOutcome.NOTHING_TO_COMMIT

        logger.debug("JSON POST:\n%s", body.strip())
        response = client.post(body)
        outcome = self._handle_response(response)
        logger.info("Done sending commit operations to Azure Search.")
        return outcome

    def _handle_response(self, response: requests.Response) -> CommitOutcome:
        body = response.text or ""
        status_line = _status_line(response)
        if response.status_code not in SUCCESS_STATUSES:
            error = f'Invalid HTTP response: "{status_line}". Azure Response: {body}'
            if self.settings.ignore_response_errors:
                logger.error(error)
                return CommitOutcome.RESPONSE_ERROR_IGNORED
            raise ResponseError(error, status_code=response.status_code, body=body)

        logger.debug("Azure Search response status: %s", status_line)
        logger.debug("Azure Search response:\n%s", body)
        return CommitOutcome.COMMITTED


__all__ = ["SUCCESS_STATUSES", "CommitOutcome", "AzureSearchCommitter"]
