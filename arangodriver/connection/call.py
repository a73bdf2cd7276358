"""Helpers to build and send requests in one step.

A modifier is any callable taking the :class:`Request` about to be sent; it
adds headers, query parameters or a body. Call helpers apply modifiers in
order and hand the request to the connection.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any
from urllib.parse import quote

from arangodriver.connection.base import Connection
from arangodriver.connection.request import Request, Response

RequestModifier = Callable[[Request], None]

TRANSACTION_ID_HEADER = "x-arango-trx-id"


def escape(part: str) -> str:
    """Percent-escape a single path segment (database names, keys, ids)."""
    return quote(str(part), safe="")


def new_url(*parts: str) -> str:
    """Join path parts with ``/``, skipping empty parts and duplicate slashes."""
    segments: list[str] = []
    for part in parts:
        segments.extend(s for s in str(part).split("/") if s)
    return "/".join(segments)


def with_body(body: Any) -> RequestModifier:
    def modifier(request: Request) -> None:
        request.set_body(body)

    return modifier


def with_raw_body(content: bytes | Iterable[bytes], content_type: str | None = None) -> RequestModifier:
    def modifier(request: Request) -> None:
        request.set_raw_body(content, content_type)

    return modifier


def with_query(name: str, value: Any) -> RequestModifier:
    def modifier(request: Request) -> None:
        request.add_query(name, value)

    return modifier


def with_header(name: str, value: str) -> RequestModifier:
    def modifier(request: Request) -> None:
        request.add_header(name, value)

    return modifier


def with_transaction_id(transaction_id: str) -> RequestModifier:
    return with_header(TRANSACTION_ID_HEADER, transaction_id)


def with_fragment(fragment: str) -> RequestModifier:
    def modifier(request: Request) -> None:
        request.set_fragment(fragment)

    return modifier


def _body_modifier(body: Any) -> RequestModifier | None:
    # A None body means "no body", not a JSON null.
    return None if body is None else with_body(body)


def call(
    connection: Connection,
    method: str,
    url: str,
    *modifiers: RequestModifier | None,
    allowed_status_codes: Iterable[int] = (),
    endpoint: str | None = None,
) -> Response:
    """Create a request, apply ``modifiers`` in order and send it.

    ``None`` entries in ``modifiers`` are skipped so optional options can be
    passed through without branching at the call site.
    """
    request = connection.new_request(method, url, endpoint=endpoint)
    for modifier in modifiers:
        if modifier is not None:
            modifier(request)
    return connection.do(request, allowed_status_codes)


def call_get(connection: Connection, url: str, *modifiers: RequestModifier | None, **kwargs: Any) -> Response:
    return call(connection, "GET", url, *modifiers, **kwargs)


def call_head(connection: Connection, url: str, *modifiers: RequestModifier | None, **kwargs: Any) -> Response:
    return call(connection, "HEAD", url, *modifiers, **kwargs)


def call_delete(connection: Connection, url: str, *modifiers: RequestModifier | None, **kwargs: Any) -> Response:
    return call(connection, "DELETE", url, *modifiers, **kwargs)


def call_post(
    connection: Connection, url: str, body: Any, *modifiers: RequestModifier | None, **kwargs: Any
) -> Response:
    return call(connection, "POST", url, *modifiers, _body_modifier(body), **kwargs)


def call_put(
    connection: Connection, url: str, body: Any, *modifiers: RequestModifier | None, **kwargs: Any
) -> Response:
    return call(connection, "PUT", url, *modifiers, _body_modifier(body), **kwargs)


def call_patch(
    connection: Connection, url: str, body: Any, *modifiers: RequestModifier | None, **kwargs: Any
) -> Response:
    return call(connection, "PATCH", url, *modifiers, _body_modifier(body), **kwargs)


__all__ = [
    "RequestModifier",
    "TRANSACTION_ID_HEADER",
    "call",
    "call_delete",
    "call_get",
    "call_head",
    "call_patch",
    "call_post",
    "call_put",
    "escape",
    "new_url",
    "with_body",
    "with_fragment",
    "with_header",
    "with_query",
    "with_raw_body",
    "with_transaction_id",
]
