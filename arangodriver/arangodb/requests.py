"""Raw calls for server APIs without a typed wrapper."""

from __future__ import annotations

from typing import Any

from arangodriver.arangodb.base import ApiBase
from arangodriver.connection.base import Connection
from arangodriver.connection.call import RequestModifier, new_url
from arangodriver.connection.request import Response


class ClientRequests(ApiBase):
    """Send arbitrary requests through the client's connection.

    Path parts are joined with ``/``; the response is returned whatever its
    status, so callers decide which codes are acceptable:

        response = client.requests.get("_admin", "echo")
        data = response.expect(200)
    """

    def __init__(self, connection: Connection) -> None:
        self._connection = connection

    def get(self, *path: str, modifiers: tuple[RequestModifier, ...] = ()) -> Response:
        return self._get(new_url(*path), *modifiers)

    def head(self, *path: str, modifiers: tuple[RequestModifier, ...] = ()) -> Response:
        return self._head(new_url(*path), *modifiers)

    def delete(self, *path: str, body: Any = None, modifiers: tuple[RequestModifier, ...] = ()) -> Response:
        return self._delete(new_url(*path), *modifiers, body=body)

    def post(self, *path: str, body: Any = None, modifiers: tuple[RequestModifier, ...] = ()) -> Response:
        return self._post(new_url(*path), body, *modifiers)

    def put(self, *path: str, body: Any = None, modifiers: tuple[RequestModifier, ...] = ()) -> Response:
        return self._put(new_url(*path), body, *modifiers)

    def patch(self, *path: str, body: Any = None, modifiers: tuple[RequestModifier, ...] = ()) -> Response:
        return self._patch(new_url(*path), body, *modifiers)


__all__ = ["ClientRequests"]
