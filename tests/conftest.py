"""Shared fixtures: an in-memory ArangoDB served through httpx.MockTransport."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import httpx
import orjson
import pytest

from arangodriver.arangodb.client import ArangoClient
from arangodriver.connection.http import ConnectionConfig, HttpConnection

Handler = Callable[[httpx.Request], httpx.Response]


class FakeArango:
    """Routes ``(method, path)`` to canned responses and records every request.

    A route answers with the same response every time, or with the next
    entry of a list of responses. Unrouted requests get a 404 error envelope.
    Routes can be bound to one host to simulate several servers.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str | None, str, str], list[Handler]] = {}
        self.requests: list[httpx.Request] = []

    # ------------------------------------------------------------------
    # Routing
    # ------------------------------------------------------------------
    def add(
        self,
        method: str,
        path: str,
        status: int = 200,
        json: Any = None,
        headers: dict[str, str] | None = None,
        content: bytes | None = None,
        host: str | None = None,
    ) -> FakeArango:
        def handler(request: httpx.Request) -> httpx.Response:
            if content is not None:
                return httpx.Response(status, content=content, headers=headers)
            if json is None:
                return httpx.Response(status, headers=headers)
            return httpx.Response(
                status,
                content=orjson.dumps(json),
                headers={"content-type": "application/json", **(headers or {})},
            )

        return self.add_handler(method, path, handler, host=host)

    def add_handler(self, method: str, path: str, handler: Handler, host: str | None = None) -> FakeArango:
        self.routes.setdefault((host, method.upper(), "/" + path.lstrip("/")), []).append(handler)
        return self

    def add_error(self, method: str, path: str, status: int, error_num: int = 0, message: str = "error",
                  host: str | None = None) -> FakeArango:
        body = {"error": True, "code": status, "errorNum": error_num, "errorMessage": message}
        return self.add(method, path, status, body, host=host)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        for key in ((request.url.host, request.method, path), (None, request.method, path)):
            handlers = self.routes.get(key)
            if handlers:
                handler = handlers.pop(0) if len(handlers) > 1 else handlers[0]
                return handler(request)
        body = {"error": True, "code": 404, "errorNum": 404, "errorMessage": f"no route for {request.method} {path}"}
        return httpx.Response(404, content=orjson.dumps(body), headers={"content-type": "application/json"})

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------
    @property
    def last_request(self) -> httpx.Request:
        assert self.requests, "no request was sent"
        return self.requests[-1]

    def sent(self, method: str, path: str) -> list[httpx.Request]:
        path = "/" + path.lstrip("/")
        return [r for r in self.requests if r.method == method.upper() and r.url.path == path]

    @staticmethod
    def body(request: httpx.Request) -> Any:
        return orjson.loads(request.content) if request.content else None

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def connection(self, endpoints: list[str] | None = None, **options: Any) -> HttpConnection:
        config = ConnectionConfig(endpoints=endpoints or ["http://arangodb:8529"], **options)
        return HttpConnection(config, transport=self.transport())

    def client(self, endpoints: list[str] | None = None, **options: Any) -> ArangoClient:
        return ArangoClient(self.connection(endpoints, **options))


@pytest.fixture
def fake_arango() -> FakeArango:
    return FakeArango()


@pytest.fixture
def client(fake_arango: FakeArango) -> ArangoClient:
    return fake_arango.client()


@pytest.fixture
def db(fake_arango: FakeArango, client: ArangoClient):
    """A database handle for ``testdb`` that skips the existence check."""
    return client.database("testdb", skip_exist_check=True)
