"""Endpoint selection strategies."""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from collections.abc import Iterable
from urllib.parse import urlsplit

from arangodriver.errors import ArangoClientError

_SCHEME_FIXUPS = (
    ("http+tcp://", "http://"),
    ("http+ssl://", "https://"),
    ("tcp://", "http://"),
    ("ssl://", "https://"),
)


def fixup_endpoint_url_scheme(endpoint: str) -> str:
    """Translate arangod style schemes (``tcp://``, ``ssl://``) into HTTP URLs."""
    for prefix, replacement in _SCHEME_FIXUPS:
        if endpoint.startswith(prefix):
            return replacement + endpoint[len(prefix):]
    return endpoint


def is_same_endpoint(a: str, b: str) -> bool:
    """True when both endpoints point at the same host (ports and schemes are ignored)."""
    if a == b:
        return True
    try:
        return urlsplit(a).hostname == urlsplit(b).hostname
    except ValueError:
        return False


class Endpoint(ABC):
    """Strategy that decides which server a request is sent to."""

    @abstractmethod
    def get(self, provided: str | None = None) -> str:
        """Return ``provided`` when given, otherwise the next endpoint to use."""

    @abstractmethod
    def list(self) -> list[str]:
        """All endpoints known to this strategy."""


class RoundRobinEndpoints(Endpoint):
    """Cycle through a fixed list of endpoints."""

    def __init__(self, endpoints: Iterable[str]) -> None:
        self._endpoints = [fixup_endpoint_url_scheme(e).rstrip("/") for e in endpoints]
        self._index = 0
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return f"RoundRobinEndpoints({self._endpoints!r})"

    def get(self, provided: str | None = None) -> str:
        with self._lock:
            if provided:
                return provided
            if not self._endpoints:
                raise ArangoClientError("no endpoints known")
            if self._index >= len(self._endpoints):
                self._index = 0
            endpoint = self._endpoints[self._index]
            self._index += 1
            return endpoint

    def list(self) -> list[str]:
        return list(self._endpoints)


__all__ = [
    "Endpoint",
    "RoundRobinEndpoints",
    "fixup_endpoint_url_scheme",
    "is_same_endpoint",
]
