"""Shared plumbing for resource classes: URL building, scoped calls, request options."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, ClassVar

from arangodriver.connection.base import Connection
from arangodriver.connection.call import RequestModifier, call, escape, new_url
from arangodriver.connection.request import Request, Response


class ApiBase:
    """Issues calls through ``_connection``, prefixing every call with ``_modifiers``.

    Database scoped resources set ``_db_name`` so their URLs live under
    ``/_db/{name}``; server wide resources leave it unset.
    """

    _connection: Connection
    _modifiers: tuple[RequestModifier, ...] = ()
    _db_name: str | None = None

    @property
    def connection(self) -> Connection:
        return self._connection

    def _url(self, *parts: str) -> str:
        if self._db_name is None:
            return new_url(*parts)
        return new_url("_db", escape(self._db_name), *parts)

    def _call(self, method: str, url: str, *modifiers: RequestModifier | None, **kwargs: Any) -> Response:
        return call(self._connection, method, url, *self._modifiers, *modifiers, **kwargs)

    def _get(self, url: str, *modifiers: RequestModifier | None, **kwargs: Any) -> Response:
        return self._call("GET", url, *modifiers, **kwargs)

    def _head(self, url: str, *modifiers: RequestModifier | None, **kwargs: Any) -> Response:
        return self._call("HEAD", url, *modifiers, **kwargs)

    def _delete(self, url: str, *modifiers: RequestModifier | None, body: Any = None, **kwargs: Any) -> Response:
        return self._call("DELETE", url, *modifiers, _body(body), **kwargs)

    def _post(self, url: str, body: Any = None, *modifiers: RequestModifier | None, **kwargs: Any) -> Response:
        return self._call("POST", url, *modifiers, _body(body), **kwargs)

    def _put(self, url: str, body: Any = None, *modifiers: RequestModifier | None, **kwargs: Any) -> Response:
        return self._call("PUT", url, *modifiers, _body(body), **kwargs)

    def _patch(self, url: str, body: Any = None, *modifiers: RequestModifier | None, **kwargs: Any) -> Response:
        return self._call("PATCH", url, *modifiers, _body(body), **kwargs)


def _body(body: Any) -> RequestModifier | None:
    if body is None:
        return None

    def modifier(request: Request) -> None:
        request.set_body(body)

    return modifier


@dataclass
class RequestOptions:
    """Options rendered as query parameters and headers of a single call.

    Subclasses list their query parameters in ``_queries`` (attribute name to
    query name) and their headers in ``_headers``. Unset (``None``) values are
    not sent. Instances are request modifiers and can be passed to ``call``.
    """

    _queries: ClassVar[dict[str, str]] = {}
    _headers: ClassVar[dict[str, str]] = {}

    def __call__(self, request: Request) -> None:
        for attr, name in self._queries.items():
            value = getattr(self, attr)
            if value is not None:
                request.add_query(name, value)
        for attr, name in self._headers.items():
            value = getattr(self, attr)
            if value:
                request.add_header(name, str(value))

    def as_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None}


def optional_query(name: str, value: Any) -> RequestModifier | None:
    """Query modifier that is skipped when ``value`` is None."""
    if value is None:
        return None

    def modifier(request: Request) -> None:
        request.add_query(name, value)

    return modifier


__all__ = ["ApiBase", "RequestOptions", "optional_query"]
