"""Authentication flows plugged into the httpx client.

Every scheme is an :class:`httpx.Auth`, so the connection can swap it at
runtime without rebuilding the underlying client.
"""

from __future__ import annotations

import base64
import threading
import time
from collections.abc import Generator

import httpx
import orjson
import structlog

from arangodriver.errors import ArangoError, ResponseError

logger = structlog.get_logger(__name__)

# Used when the token carries no readable ``exp`` claim.
JWT_FALLBACK_LIFETIME = 60.0


class BasicAuthentication(httpx.BasicAuth):
    """HTTP basic authentication."""

    def __init__(self, username: str, password: str = "") -> None:
        super().__init__(username, password)
        self.username = username


class HeaderAuthentication(httpx.Auth):
    """Sends a fixed header with every request (e.g. a pre-issued JWT)."""

    def __init__(self, name: str, value: str) -> None:
        self.name = name
        self.value = value

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        request.headers[self.name] = self.value
        yield request


def bearer_authentication(token: str) -> HeaderAuthentication:
    return HeaderAuthentication("Authorization", f"bearer {token}")


def parse_jwt_expiry(token: str) -> float:
    """Return the ``exp`` claim of a JWT as a unix timestamp.

    Raises:
        ValueError: If the token is malformed or carries no ``exp`` claim
    """
    parts = token.split(".")
    if len(parts) < 2:
        raise ValueError("invalid JWT format")
    payload = parts[1] + "=" * (-len(parts[1]) % 4)
    try:
        claims = orjson.loads(base64.urlsafe_b64decode(payload))
    except (ValueError, orjson.JSONDecodeError) as e:
        raise ValueError(f"invalid JWT payload: {e}") from e
    if not isinstance(claims, dict) or "exp" not in claims:
        raise ValueError("JWT carries no exp claim")
    return float(claims["exp"])


class JWTAuthentication(httpx.Auth):
    """Username/password exchanged for a JWT via ``POST /_open/auth``.

    The token is fetched lazily, refreshed once its ``exp`` claim has passed,
    and renewed once when the server still answers 401.
    """

    requires_response_body = True

    def __init__(self, username: str, password: str = "") -> None:
        self.username = username
        self._password = password
        self._token: str | None = None
        self._expiry = 0.0
        self._lock = threading.Lock()

    @property
    def token(self) -> str | None:
        return self._token

    def _expired(self) -> bool:
        return self._token is None or time.time() >= self._expiry

    def _set_token(self, token: str) -> None:
        try:
            expiry = parse_jwt_expiry(token)
        except ValueError as e:
            logger.warning("jwt_expiry_unreadable", error=str(e))
            expiry = time.time() + JWT_FALLBACK_LIFETIME
        with self._lock:
            self._token = token
            self._expiry = expiry

    def _refresh(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        auth_request = httpx.Request(
            "POST",
            request.url.join("/_open/auth"),
            content=orjson.dumps({"username": self.username, "password": self._password}),
            headers={"Content-Type": "application/json", "Accept": "application/json"},
        )
        response = yield auth_request
        if response.status_code != 200:
            try:
                payload = orjson.loads(response.content) if response.content else None
            except orjson.JSONDecodeError:
                payload = None
            raise ArangoError.from_envelope(response.status_code, payload)
        try:
            token = orjson.loads(response.content)["jwt"]
        except (orjson.JSONDecodeError, KeyError, TypeError) as e:
            raise ResponseError(f"unexpected /_open/auth response: {e}") from e
        self._set_token(token)
        logger.debug("jwt_refreshed", username=self.username)

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        if self._expired():
            yield from self._refresh(request)
        request.headers["Authorization"] = f"bearer {self._token}"
        response = yield request

        if response.status_code == 401:
            yield from self._refresh(request)
            request.headers["Authorization"] = f"bearer {self._token}"
            yield request


__all__ = [
    "BasicAuthentication",
    "HeaderAuthentication",
    "JWTAuthentication",
    "bearer_authentication",
    "parse_jwt_expiry",
]
