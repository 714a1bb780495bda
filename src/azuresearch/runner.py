"""Entry point wiring configuration, operation loading and the Azure Search committer."""

from __future__ import annotations

import logging
import time
from collections import Counter
from typing import List, Optional

from .committer import AzureSearchCommitter, CommitOutcome
from .config import CommitterSettings, parse_args, resolve_settings
from .encoder import BatchEncoder
from .errors import CommitterError
from .operations import iter_batches, load_operations

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _build_committer(settings: CommitterSettings) -> AzureSearchCommitter:
    return AzureSearchCommitter(settings)


def _dry_run(settings: CommitterSettings, batches) -> None:
    encoder = BatchEncoder.from_settings(settings)
    for number, batch in enumerate(batches, start=1):
        body = encoder.encode_batch(batch)
        size = len(body.encode("utf-8")) if body else 0
        logger.info("(dry-run) batch %d: %d operations -> %d bytes", number, len(batch), size)


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point; returns the process exit code."""

    args = parse_args(argv)
    settings = resolve_settings(args)
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)

    if args.input is None or not args.input.is_file():
        logger.error("Operations file not found: %s", args.input)
        return 1
    if settings.commit_batch_size < 1:
        logger.error("Batch size must be at least 1, got %d.", settings.commit_batch_size)
        return 1

    batches = iter_batches(load_operations(args.input), settings.commit_batch_size)
    if args.dry_run:
        try:
            _dry_run(settings, batches)
        except (CommitterError, ValueError) as exc:
            logger.error("Dry run failed: %s", exc)
            return 1
        return 0

    committer = _build_committer(settings)
    outcomes: Counter = Counter()
    started = time.time()
    try:
        for batch in batches:
            outcomes[committer.commit(batch)] += 1
    except CommitterError as exc:
        logger.error("Commit failed: %s", exc)
        return 1
    except ValueError as exc:
        logger.error("Invalid operations in %s: %s", args.input, exc)
        return 1
    finally:
        committer.close()

    logger.info(
        "Done. committed=%d skipped=%d ignored_errors=%d, took %.1fs",
        outcomes[CommitOutcome.COMMITTED],
        outcomes[CommitOutcome.NOTHING_TO_COMMIT],
        outcomes[CommitOutcome.RESPONSE_ERROR_IGNORED],
        time.time() - started,
    )
    return 0


__all__ = ["main"]
