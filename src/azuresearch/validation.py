"""Client-side checks for Azure Search field names and document keys."""

from __future__ import annotations

import logging
import re

from .errors import ValidationError

logger = logging.getLogger(__name__)

RESERVED_FIELD_PREFIX = "azureSearch"
MAX_FIELD_NAME_LENGTH = 128

_FIELD_NAME_RE = re.compile(r"[A-Za-z0-9_]+")
_DOCUMENT_KEY_RE = re.compile(r"[A-Za-z0-9_=\-]+")


def _validation_error(message: str, ignore_errors: bool) -> bool:
    if ignore_errors:
        logger.error(message)
        return False
    raise ValidationError(message)


def validate_field_name(name: str, ignore_errors: bool = False) -> bool:
    """Return True when `name` is a legal Azure Search field name.

    Invalid names are logged and reported as False when `ignore_errors` is
    set, otherwise a ValidationError is raised.
    """

    if name.startswith(RESERVED_FIELD_PREFIX):
        return _validation_error(
            f'Document field cannot begin with "{RESERVED_FIELD_PREFIX}": {name}',
            ignore_errors,
        )
    if not _FIELD_NAME_RE.fullmatch(name):
        return _validation_error(
            "Document field cannot have one or more characters other than "
            f"letters, numbers and underscores: {name}",
            ignore_errors,
        )
    if len(name) > MAX_FIELD_NAME_LENGTH:
        return _validation_error(
            f"Document field cannot be longer than {MAX_FIELD_NAME_LENGTH} characters: {name}",
            ignore_errors,
        )
    return True


def validate_document_key(key: str, ignore_errors: bool = False) -> bool:
    """Return True when `key` can be used as-is as an Azure Search document key."""

    if key.startswith("_"):
        return _validation_error(
            f"Document reference cannot start with an underscore character: {key}",
            ignore_errors,
        )
    if not _DOCUMENT_KEY_RE.fullmatch(key):
        return _validation_error(
            "Document reference cannot have one or more characters other than "
            f"letters, numbers, dashes, underscores, and equal signs: {key}",
            ignore_errors,
        )
    return True


__all__ = [
    "RESERVED_FIELD_PREFIX",
    "MAX_FIELD_NAME_LENGTH",
    "validate_field_name",
    "validate_document_key",
]
