"""Configuration for committing documents to Azure Search."""

from __future__ import annotations

import argparse
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from src.secrets import load_secret_section

from .encoder import DEFAULT_TARGET_REFERENCE_FIELD, ArrayFieldRule
from .errors import ConfigError

DEFAULT_API_VERSION = "2016-09-01"
MAX_BATCH_SIZE = 1000
DEFAULT_BATCH_SIZE = 100
DEFAULT_TIMEOUT = 90
DEFAULT_PROXY_SCHEME = "http"


@dataclass(frozen=True)
class ProxySettings:
    """Optional forward proxy used for every request to Azure Search."""

    host: Optional[str] = None
    port: Optional[int] = None
    scheme: str = DEFAULT_PROXY_SCHEME
    username: Optional[str] = None
    password: Optional[str] = field(default=None, repr=False)

    def is_set(self) -> bool:
        return bool(self.host and self.host.strip())

    def proxy_url(self) -> Optional[str]:
        if not self.is_set():
            return None
        credentials = ""
        if self.username:
            credentials = quote(self.username, safe="")
            if self.password:
                credentials += ":" + quote(self.password, safe="")
            credentials += "@"
        port = f":{self.port}" if self.port else ""
        return f"{self.scheme or DEFAULT_PROXY_SCHEME}://{credentials}{self.host}{port}"

    def as_requests_proxies(self) -> Dict[str, str]:
        url = self.proxy_url()
        return {"http": url, "https": url} if url else {}


@dataclass(frozen=True)
class CommitterSettings:
    """Resolved settings for one Azure Search committer.

    Equality covers configuration fields only; the HTTP transport built from
    these settings lives on the committer.
    """

    endpoint: Optional[str] = None
    api_key: Optional[str] = field(default=None, repr=False)
    index_name: Optional[str] = None
    api_version: str = DEFAULT_API_VERSION
    target_reference_field: str = DEFAULT_TARGET_REFERENCE_FIELD
    disable_reference_encoding: bool = False
    ignore_validation_errors: bool = False
    ignore_response_errors: bool = False
    use_windows_auth: bool = False
    proxy: ProxySettings = field(default_factory=ProxySettings)
    array_fields: str = ""
    array_fields_regex: bool = False
    commit_batch_size: int = DEFAULT_BATCH_SIZE
    request_timeout: float = DEFAULT_TIMEOUT
    log_level: str = "INFO"

    @property
    def resolved_api_version(self) -> str:
        return self.api_version or DEFAULT_API_VERSION

    @property
    def rest_url(self) -> str:
        endpoint = (self.endpoint or "").rstrip("/")
        return (
            f"{endpoint}/indexes/{self.index_name}/docs/index"
            f"?api-version={self.resolved_api_version}"
        )

    @property
    def array_field_rule(self) -> ArrayFieldRule:
        return ArrayFieldRule(pattern=self.array_fields or "", regex=self.array_fields_regex)

    def check_complete(self) -> None:
        """Raise ConfigError unless the settings can be used to commit."""

        if not self.endpoint or not self.endpoint.strip():
            raise ConfigError("Endpoint is undefined.")
        if not self.api_key or not self.api_key.strip():
            raise ConfigError("API admin key is undefined.")
        if not self.index_name or not self.index_name.strip():
            raise ConfigError("Index name is undefined.")
        if self.commit_batch_size > MAX_BATCH_SIZE:
            raise ConfigError(f"Commit batch size cannot be greater than {MAX_BATCH_SIZE}.")


def _defaults() -> Dict[str, Any]:
    return load_secret_section("azure_search")


def build_arg_parser() -> argparse.ArgumentParser:
    """Return the CLI parser used by the committer entry point."""

    defaults = _defaults()
    proxy = defaults.get("proxy") or {}

    parser = argparse.ArgumentParser(
        description="Commit exported add/delete operations to an Azure Search index.",
    )
    parser.add_argument("--input", type=Path, help="JSON file holding an array of operations.")
    parser.add_argument("--endpoint", default=defaults.get("endpoint"))
    parser.add_argument("--api-key", default=defaults.get("api_key"))
    parser.add_argument("--index-name", default=defaults.get("index_name"))
    parser.add_argument("--api-version", default=defaults.get("api_version", DEFAULT_API_VERSION))
    parser.add_argument(
        "--target-reference-field",
        default=defaults.get("target_reference_field", DEFAULT_TARGET_REFERENCE_FIELD),
    )
    parser.add_argument(
        "--disable-reference-encoding",
        action="store_true",
        default=bool(defaults.get("disable_reference_encoding", False)),
    )
    parser.add_argument(
        "--ignore-validation-errors",
        action="store_true",
        default=bool(defaults.get("ignore_validation_errors", False)),
    )
    parser.add_argument(
        "--ignore-response-errors",
        action="store_true",
        default=bool(defaults.get("ignore_response_errors", False)),
    )
    parser.add_argument(
        "--use-windows-auth",
        action="store_true",
        default=bool(defaults.get("use_windows_auth", False)),
    )
    parser.add_argument("--proxy-host", default=proxy.get("host"))
    parser.add_argument("--proxy-port", type=int, default=proxy.get("port"))
    parser.add_argument("--proxy-scheme", default=proxy.get("scheme", DEFAULT_PROXY_SCHEME))
    parser.add_argument("--proxy-username", default=proxy.get("username"))
    parser.add_argument("--proxy-password", default=proxy.get("password"))
    parser.add_argument("--array-fields", default=defaults.get("array_fields", ""))
    parser.add_argument(
        "--array-fields-regex",
        action="store_true",
        default=bool(defaults.get("array_fields_regex", False)),
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=int(defaults.get("commit_batch_size", DEFAULT_BATCH_SIZE)),
    )
    parser.add_argument("--timeout", type=float, default=float(defaults.get("request_timeout", DEFAULT_TIMEOUT)))
    parser.add_argument("--log-level", default=defaults.get("log_level", "INFO"))
    parser.add_argument("--dry-run", action="store_true")
    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments; accepts argv overrides for testing."""

    parser = build_arg_parser()
    return parser.parse_args(argv)


def resolve_settings(args: Optional[argparse.Namespace] = None) -> CommitterSettings:
    """Return immutable settings built from parsed CLI arguments."""

    args = args or parse_args([])
    return CommitterSettings(
        endpoint=args.endpoint,
        api_key=args.api_key,
        index_name=args.index_name,
        api_version=args.api_version or DEFAULT_API_VERSION,
        target_reference_field=args.target_reference_field or DEFAULT_TARGET_REFERENCE_FIELD,
        disable_reference_encoding=bool(args.disable_reference_encoding),
        ignore_validation_errors=bool(args.ignore_validation_errors),
        ignore_response_errors=bool(args.ignore_response_errors),
        use_windows_auth=bool(args.use_windows_auth),
        proxy=ProxySettings(
            host=args.proxy_host,
            port=args.proxy_port,
            scheme=args.proxy_scheme or DEFAULT_PROXY_SCHEME,
            username=args.proxy_username,
            password=args.proxy_password,
        ),
        array_fields=args.array_fields or "",
        array_fields_regex=bool(args.array_fields_regex),
        commit_batch_size=int(args.batch_size),
        request_timeout=float(args.timeout),
        log_level=str(args.log_level).upper(),
    )


__all__ = [
    "DEFAULT_API_VERSION",
    "MAX_BATCH_SIZE",
    "DEFAULT_BATCH_SIZE",
    "DEFAULT_TIMEOUT",
    "ProxySettings",
    "CommitterSettings",
    "build_arg_parser",
    "parse_args",
    "resolve_settings",
]
