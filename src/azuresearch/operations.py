"""Commit operations handed to the committer, plus helpers to load and batch them."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Union

import ijson

from .errors import UnsupportedOperationError


@dataclass(frozen=True)
class AddOperation:
    """Upload (or replace) one document identified by `reference`."""

    reference: str
    metadata: Dict[str, List[str]] = field(default_factory=dict)


@dataclass(frozen=True)
class DeleteOperation:
    """Remove the document identified by `reference`."""

    reference: str


CommitOperation = Union[AddOperation, DeleteOperation]


def _as_values(value: Any) -> List[str]:
    if isinstance(value, list):
        return [str(item) for item in value]
    return [str(value)]


def operation_from_dict(entry: Dict[str, Any]) -> CommitOperation:
    """Build an operation from one exported JSON entry."""

    action = str(entry.get("action") or "").lower()
    reference = entry.get("reference")
    if not reference or not str(reference).strip():
        raise ValueError(f"Operation has no reference: {entry!r}")
    reference = str(reference)

    if action == "add":
        metadata = {
            str(name): _as_values(value)
            for name, value in (entry.get("metadata") or {}).items()
            if value is not None and value != []
        }
        return AddOperation(reference=reference, metadata=metadata)
    if action == "delete":
        return DeleteOperation(reference=reference)
    raise UnsupportedOperationError(f"Unsupported operation: {action or entry!r}")


def load_operations(path: Path) -> Iterator[CommitOperation]:
    """Stream operations from a file holding a JSON array of entries."""

    with path.open("rb") as handle:
        try:
            for entry in ijson.items(handle, "item", use_float=True):
                if not isinstance(entry, dict):
                    raise ValueError(f"Expected a JSON object per operation in {path}, got {entry!r}")
                yield operation_from_dict(entry)
        except ijson.JSONError as exc:
            raise ValueError(f"Malformed operations file {path}: {exc}") from exc


def iter_batches(operations: Iterable[CommitOperation], size: int) -> Iterator[List[CommitOperation]]:
    """Group operations into lists of at most `size`, preserving order."""

    if size < 1:
        raise ValueError("Batch size must be at least 1.")
    batch: List[CommitOperation] = []
    for op in operations:
        batch.append(op)
        if len(batch) >= size:
            yield batch
            batch = []
    if batch:
        yield batch


__all__ = [
    "AddOperation",
    "DeleteOperation",
    "CommitOperation",
    "operation_from_dict",
    "load_operations",
    "iter_batches",
]
