"""Utilities for loading local (gitignored) committer credentials.

The committer reads its defaults from the `azure_search` object of the file:

    {"azure_search": {"endpoint": "...", "api_key": "...", "index_name": "...",
                      "proxy": {"host": "...", "port": 3128}}}
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

DEFAULT_SECRETS_FILENAME = "local_secrets.json"
SECRETS_PATH_ENV = "LOCAL_SECRETS_FILE"


def _default_secrets_path() -> Path:
    root = Path(__file__).resolve().parents[1]
    return root / DEFAULT_SECRETS_FILENAME


def load_local_secrets(path: Optional[str | Path] = None) -> Dict[str, Any]:
    """Load secrets from a JSON file; return {} when missing or unreadable."""

    candidate = path or os.getenv(SECRETS_PATH_ENV) or _default_secrets_path()
    secrets_path = Path(candidate).expanduser()
    if not secrets_path.is_file():
        return {}
    try:
        with secrets_path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def load_secret_section(name: str, path: Optional[str | Path] = None) -> Dict[str, Any]:
    """Return one top-level object of the secrets file, or {} when absent."""

    section = load_local_secrets(path).get(name)
    return section if isinstance(section, dict) else {}


__all__ = [
    "DEFAULT_SECRETS_FILENAME",
    "SECRETS_PATH_ENV",
    "load_local_secrets",
    "load_secret_section",
]
