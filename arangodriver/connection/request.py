"""Request and response objects passed through a :class:`Connection`."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Any

import httpx
import orjson

from arangodriver.errors import ArangoError, ResponseError

_NO_BODY = object()


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class Request:
    """A single REST call before it is handed to the transport.

    The path is relative to the endpoint (``_db/foo/_api/document/...``).
    ``endpoint`` pins the call to a specific server; when empty the
    connection picks one.
    """

    def __init__(self, method: str, path: str, endpoint: str | None = None) -> None:
        self.method = method.upper()
        self.path = path
        self.endpoint = endpoint
        self.headers: dict[str, str] = {}
        self.query: list[tuple[str, str]] = []
        self.fragment: str | None = None
        self._body: Any = _NO_BODY
        self._raw_body: bytes | Iterable[bytes] | None = None

    def __repr__(self) -> str:
        return f"Request({self.method} {self.path})"

    # ------------------------------------------------------------------
    # Headers and query parameters
    # ------------------------------------------------------------------
    def add_header(self, name: str, value: str) -> None:
        self.headers[name.lower()] = value

    def get_header(self, name: str) -> str | None:
        return self.headers.get(name.lower())

    def add_query(self, name: str, value: Any) -> None:
        """Append a query parameter; repeated names are kept in order."""
        self.query.append((name, _query_value(value)))

    def set_query(self, name: str, value: Any) -> None:
        """Replace all values of a query parameter with ``value``."""
        self.query = [(k, v) for k, v in self.query if k != name]
        self.add_query(name, value)

    def get_query(self, name: str) -> str | None:
        for key, value in self.query:
            if key == name:
                return value
        return None

    def set_fragment(self, fragment: str) -> None:
        self.fragment = fragment

    # ------------------------------------------------------------------
    # Body
    # ------------------------------------------------------------------
    def set_body(self, body: Any) -> None:
        """Set a JSON body; ``None`` is sent as JSON ``null``."""
        self._body = body
        self._raw_body = None

    def set_raw_body(self, content: bytes | Iterable[bytes], content_type: str | None = None) -> None:
        """Set a pre-encoded body (bytes, or an iterator of byte chunks for streaming)."""
        self._raw_body = content
        self._body = _NO_BODY
        if content_type:
            self.add_header("Content-Type", content_type)

    @property
    def has_body(self) -> bool:
        return self._body is not _NO_BODY or self._raw_body is not None

    @property
    def body(self) -> Any:
        return None if self._body is _NO_BODY else self._body

    def encoded_body(self) -> bytes | Iterable[bytes] | None:
        if self._raw_body is not None:
            return self._raw_body
        if self._body is _NO_BODY:
            return None
        return orjson.dumps(self._body, option=orjson.OPT_NON_STR_KEYS)

    def is_streaming(self) -> bool:
        return self._raw_body is not None and isinstance(self._raw_body, Iterator)


class Response:
    """A received response, bound to the endpoint that served it."""

    def __init__(self, raw: httpx.Response, endpoint: str) -> None:
        self._raw = raw
        self._endpoint = endpoint

    def __repr__(self) -> str:
        return f"Response({self.code} from {self._endpoint})"

    @property
    def code(self) -> int:
        return self._raw.status_code

    @property
    def endpoint(self) -> str:
        return self._endpoint

    @property
    def headers(self) -> httpx.Headers:
        return self._raw.headers

    def header(self, name: str) -> str | None:
        return self._raw.headers.get(name)

    @property
    def content_type(self) -> str:
        return self._raw.headers.get("content-type", "")

    @property
    def content(self) -> bytes:
        return self._raw.content

    @property
    def text(self) -> str:
        return self._raw.text

    def json(self) -> Any:
        """Decode the body with orjson; an empty body decodes to ``None``."""
        if not self._raw.content:
            return None
        try:
            return orjson.loads(self._raw.content)
        except orjson.JSONDecodeError as e:
            raise ResponseError(
                f"failed to decode {self.content_type or 'response'} body "
                f"(status {self.code}) from {self._endpoint}: {e}"
            ) from e

    def as_arango_error(self) -> ArangoError:
        """Build an ArangoError from the envelope, falling back to the status code."""
        try:
            payload = self.json()
        except ResponseError:
            payload = {"message": self._raw.text}
        return ArangoError.from_envelope(self.code, payload)

    def check_status(self, *codes: int) -> None:
        if self.code not in codes:
            raise self.as_arango_error()

    def expect(self, *codes: int) -> Any:
        """Return the decoded body when the status is one of ``codes``.

        Raises:
            ArangoError: For any other status
        """
        self.check_status(*codes)
        return self.json()


__all__ = ["Request", "Response"]
