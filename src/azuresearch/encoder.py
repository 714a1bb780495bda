"""Translate commit operations into the Azure Search batch indexing JSON body."""

from __future__ import annotations

import base64
import json
import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, FrozenSet, List, Optional, Sequence, Union

from .errors import ConfigError, UnsupportedOperationError
from .operations import AddOperation, CommitOperation, DeleteOperation
from .validation import validate_document_key, validate_field_name

if TYPE_CHECKING:  # pragma: no cover
    from .config import CommitterSettings

logger = logging.getLogger(__name__)

ACTION_FIELD = "@search.action"
DEFAULT_TARGET_REFERENCE_FIELD = "id"


def encode_document_key(raw: str) -> str:
    """URL-safe base64 (no padding) of the UTF-8 bytes of `raw`."""

    return base64.urlsafe_b64encode(raw.encode("utf-8")).rstrip(b"=").decode("ascii")


@dataclass(frozen=True)
class ArrayFieldRule:
    """Decide which single-valued fields must still be sent as JSON arrays.

    `pattern` is either a regular expression matched against the whole field
    name (when `regex` is True) or a comma-separated list of field names.
    """

    pattern: str = ""
    regex: bool = False

    @property
    def names(self) -> FrozenSet[str]:
        return frozenset(name.strip() for name in self.pattern.split(",") if name.strip())

    def forces_array(self, field: str) -> bool:
        if not self.pattern or not self.pattern.strip():
            return False
        if self.regex:
            try:
                return re.fullmatch(self.pattern, field) is not None
            except re.error as exc:
                raise ConfigError(f"Invalid array fields pattern: {self.pattern}") from exc
        return field in self.names


def _serialize_values(values: Sequence[str], as_array: bool) -> Union[str, List[str]]:
    if len(values) == 1 and not as_array:
        return values[0]
    return list(values)


class BatchEncoder:
    """Build the `{"value": [...]}` payload for one batch of operations."""

    def __init__(
        self,
        target_reference_field: str = DEFAULT_TARGET_REFERENCE_FIELD,
        disable_reference_encoding: bool = False,
        ignore_validation_errors: bool = False,
        array_field_rule: Optional[ArrayFieldRule] = None,
    ) -> None:
        self.target_reference_field = target_reference_field
        self.disable_reference_encoding = disable_reference_encoding
        self.ignore_validation_errors = ignore_validation_errors
        self.array_field_rule = array_field_rule or ArrayFieldRule()

    @classmethod
    def from_settings(cls, settings: "CommitterSettings") -> "BatchEncoder":
        return cls(
            target_reference_field=settings.target_reference_field,
            disable_reference_encoding=settings.disable_reference_encoding,
            ignore_validation_errors=settings.ignore_validation_errors,
            array_field_rule=settings.array_field_rule,
        )

    def _document_key(self, op: AddOperation) -> str:
        values = op.metadata.get(self.target_reference_field) or []
        doc_id = values[0] if values else ""
        if not doc_id or not doc_id.strip():
            doc_id = op.reference
        return doc_id

    def encode_add(self, op: AddOperation) -> Optional[Dict[str, Any]]:
        """Return the upload document, or None when its key fails validation."""

        doc_id = self._document_key(op)
        if self.disable_reference_encoding:
            if not validate_document_key(doc_id, self.ignore_validation_errors):
                return None
        else:
            doc_id = encode_document_key(doc_id)

        doc: Dict[str, Any] = {ACTION_FIELD: "upload", self.target_reference_field: doc_id}
        for field, values in op.metadata.items():
            # The key field is always emitted first, above.
            if field == self.target_reference_field:
                continue
            if not values:
                continue
            if validate_field_name(field, self.ignore_validation_errors):
                doc[field] = _serialize_values(values, self.array_field_rule.forces_array(field))
        return doc

    def encode_delete(self, op: DeleteOperation) -> Dict[str, Any]:
        return {
            ACTION_FIELD: "delete",
            self.target_reference_field: encode_document_key(op.reference),
        }

    def encode_operation(self, op: CommitOperation) -> Optional[Dict[str, Any]]:
        if isinstance(op, AddOperation):
            return self.encode_add(op)
        if isinstance(op, DeleteOperation):
            return self.encode_delete(op)
        raise UnsupportedOperationError(f"Unsupported operation: {op!r}")

    def encode_batch(self, batch: Sequence[CommitOperation]) -> Optional[str]:
        """Serialize `batch`; returns None when every operation was dropped."""

        docs: List[str] = []
        for op in batch:
            doc = self.encode_operation(op)
            if doc:
                docs.append(json.dumps(doc, separators=(",", ":"), ensure_ascii=False))
        if not docs:
            return None
        return '{"value":[\n' + ",\n".join(docs) + "\n]}\n"


__all__ = [
    "ACTION_FIELD",
    "DEFAULT_TARGET_REFERENCE_FIELD",
    "ArrayFieldRule",
    "BatchEncoder",
    "encode_document_key",
]
