"""HTTP transport for ArangoDB over TCP or Unix domain sockets.

Protocol note: HTTP/2 requires TLS/ALPN negotiation in standard deployments.
Over Unix domain sockets (UDS) with cleartext HTTP, connections will use
HTTP/1.1 unless the server supports HTTP/2 prior-knowledge (h2c). Network
connections over HTTPS negotiate HTTP/2 via ALPN when ``http2`` is enabled.
"""

from __future__ import annotations

import gzip
import itertools
import zlib
from collections.abc import Iterable
from dataclasses import dataclass, field

import httpx
import structlog

from arangodriver.connection import context
from arangodriver.connection.auth import BasicAuthentication
from arangodriver.connection.base import Connection
from arangodriver.connection.call import new_url
from arangodriver.connection.endpoints import Endpoint, RoundRobinEndpoints
from arangodriver.connection.request import Request, Response
from arangodriver.errors import ArangoConnectionError, InvalidArgumentError

logger = structlog.get_logger(__name__)

PLAIN_TEXT_CONTENT_TYPE = "text/plain"
JSON_CONTENT_TYPE = "application/json"
QUEUE_TIME_HEADER = "x-arango-queue-time-seconds"
DEFAULT_USER_AGENT = "arangodriver/0.1"

_request_ids = itertools.count(1)


@dataclass
class ConnectionConfig:
    """Configuration for :class:`HttpConnection`."""

    endpoints: list[str] = field(default_factory=lambda: ["http://localhost:8529"])
    socket_path: str | None = None  # None = use network endpoints, str = use Unix socket
    username: str | None = None
    password: str | None = None
    auth: httpx.Auth | None = None  # takes precedence over username/password
    connect_timeout: float = 5.0
    read_timeout: float = 30.0
    write_timeout: float = 30.0
    pool_limits: httpx.Limits | None = None
    http2: bool = True
    verify: bool | str = True
    content_type: str = JSON_CONTENT_TYPE
    compression: str | None = None  # "gzip" or "deflate"
    compress_requests: bool = False
    compression_level: int = 6
    user_agent: str = DEFAULT_USER_AGENT


class HttpConnection(Connection):
    """:class:`Connection` backed by a synchronous :class:`httpx.Client`.

    A transport can be injected (``httpx.MockTransport`` in tests, a custom
    ``httpx.HTTPTransport`` in production); otherwise one is built from the
    config, bound to ``socket_path`` when set.
    """

    def __init__(self, config: ConnectionConfig, transport: httpx.BaseTransport | None = None) -> None:
        if config.content_type != JSON_CONTENT_TYPE:
            raise InvalidArgumentError(f"unsupported content type {config.content_type!r}")
        if config.compression not in (None, "gzip", "deflate"):
            raise InvalidArgumentError(f"unsupported compression type {config.compression!r}")

        self._config = config
        self._endpoint: Endpoint = RoundRobinEndpoints(config.endpoints)

        if transport is None:
            if config.socket_path:
                transport = httpx.HTTPTransport(
                    uds=config.socket_path,
                    retries=0,
                    http2=config.http2,
                    verify=config.verify,
                )
            else:
                transport = httpx.HTTPTransport(
                    retries=0,
                    http2=config.http2,
                    verify=config.verify,
                )

        timeout = httpx.Timeout(
            connect=config.connect_timeout,
            read=config.read_timeout,
            write=config.write_timeout,
            pool=config.connect_timeout,
        )

        self._auth: httpx.Auth | None = config.auth
        if self._auth is None and config.username:
            self._auth = BasicAuthentication(config.username, config.password or "")

        client_kwargs: dict = {
            "transport": transport,
            "timeout": timeout,
            "follow_redirects": False,
        }
        if config.pool_limits is not None:
            client_kwargs["limits"] = config.pool_limits
        self._client = httpx.Client(**client_kwargs)

    # ------------------------------------------------------------------
    # Connection interface
    # ------------------------------------------------------------------
    @property
    def config(self) -> ConnectionConfig:
        return self._config

    @property
    def endpoint(self) -> Endpoint:
        return self._endpoint

    def set_endpoint(self, endpoint: Endpoint) -> None:
        self._endpoint = endpoint

    @property
    def authentication(self) -> httpx.Auth | None:
        return self._auth

    def set_authentication(self, auth: httpx.Auth | None) -> None:
        self._auth = auth

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> HttpConnection:
        return self

    def new_request(self, method: str, *url_parts: str, endpoint: str | None = None) -> Request:
        return Request(method, new_url(*url_parts), endpoint=endpoint)

    def do(self, request: Request, allowed_status_codes: Iterable[int] = ()) -> Response:
        allowed = tuple(allowed_status_codes)
        endpoint = self._endpoint.get(request.endpoint)
        http_request = self._build_request(request, endpoint)

        request_id = next(_request_ids)
        logger.debug(
            "arango_request_sent",
            request_id=request_id,
            method=request.method,
            path=request.path,
            endpoint=endpoint,
        )
        try:
            raw = self._client.send(http_request, auth=self._auth)
        except httpx.TransportError as e:
            logger.debug(
                "arango_request_failed",
                request_id=request_id,
                method=request.method,
                path=request.path,
                endpoint=endpoint,
                error=str(e),
            )
            raise ArangoConnectionError(f"{request.method} /{request.path} via {endpoint} failed: {e}") from e

        response = Response(raw, endpoint)
        logger.debug(
            "arango_response_received",
            request_id=request_id,
            status=response.code,
            http_version=raw.http_version,
        )
        if allowed and response.code not in allowed:
            raise response.as_arango_error()
        return response

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _build_request(self, request: Request, endpoint: str) -> httpx.Request:
        headers = dict(request.headers)
        headers.setdefault("accept", JSON_CONTENT_TYPE)
        headers.setdefault("user-agent", self._config.user_agent)

        queue_time = context.queue_time_seconds(default=self._config.read_timeout)
        if queue_time is not None:
            headers.setdefault(QUEUE_TIME_HEADER, f"{queue_time:g}")

        if self._config.compression:
            headers.setdefault("accept-encoding", self._config.compression)

        content = request.encoded_body()
        if content is not None:
            headers.setdefault("content-type", JSON_CONTENT_TYPE)
            if self._config.compress_requests and isinstance(content, bytes):
                content = self._compress(content)
                headers["content-encoding"] = self._config.compression or "gzip"

        url = f"{endpoint.rstrip('/')}/{request.path}"
        if request.fragment:
            url = f"{url}#{request.fragment}"
        return self._client.build_request(
            request.method,
            url,
            params=request.query or None,
            headers=headers,
            content=content,
        )

    def _compress(self, content: bytes) -> bytes:
        if self._config.compression == "deflate":
            return zlib.compress(content, self._config.compression_level)
        return gzip.compress(content, compresslevel=self._config.compression_level)


__all__ = [
    "ConnectionConfig",
    "DEFAULT_USER_AGENT",
    "HttpConnection",
    "JSON_CONTENT_TYPE",
    "PLAIN_TEXT_CONTENT_TYPE",
    "QUEUE_TIME_HEADER",
]
