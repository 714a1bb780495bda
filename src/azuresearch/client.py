"""Pooled HTTP transport for the Azure Search batch indexing endpoint."""

from __future__ import annotations

import importlib.util
import logging
import sys

import requests
from requests.adapters import HTTPAdapter

from .config import CommitterSettings

logger = logging.getLogger(__name__)

MAX_CONN_TOTAL = 20
MAX_CONN_PER_ROUTE = 10


def windows_auth_available() -> bool:
    """True when integrated Windows authentication can be used on this host."""

    return sys.platform == "win32" and importlib.util.find_spec("requests_negotiate_sspi") is not None


class CommitClient:
    """Thin wrapper around a requests session bound to one index's REST URL."""

    def __init__(self, settings: CommitterSettings) -> None:
        self.rest_url = settings.rest_url
        self.timeout = settings.request_timeout
        self.session = requests.Session()
        self.session.headers.update(
            {
                "Content-Type": "application/json",
                "api-key": settings.api_key or "",
            }
        )

        # One blocking pool per host caps open connections at MAX_CONN_PER_ROUTE;
        # at most MAX_CONN_TOTAL // MAX_CONN_PER_ROUTE host pools are kept.
        adapter = HTTPAdapter(
            pool_connections=max(1, MAX_CONN_TOTAL // MAX_CONN_PER_ROUTE),
            pool_maxsize=MAX_CONN_PER_ROUTE,
            pool_block=True,
        )
        self.session.mount("https://", adapter)
        self.session.mount("http://", adapter)

        if settings.use_windows_auth and windows_auth_available():
            from requests_negotiate_sspi import HttpNegotiateAuth

            self.session.auth = HttpNegotiateAuth()
            logger.debug("Using integrated Windows authentication.")
        elif settings.proxy.is_set():
            self.session.proxies.update(settings.proxy.as_requests_proxies())
            logger.debug("Using proxy %s:%s", settings.proxy.host, settings.proxy.port)

    def post(self, body: str) -> requests.Response:
        """Send one JSON batch body to the indexing endpoint."""

        return self.session.post(
            self.rest_url,
            data=body.encode("utf-8"),
            timeout=self.timeout,
        )

    def close(self) -> None:
        self.session.close()


__all__ = ["MAX_CONN_TOTAL", "MAX_CONN_PER_ROUTE", "CommitClient", "windows_auth_available"]
