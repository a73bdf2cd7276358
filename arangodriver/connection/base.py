"""The connection interface every transport and wrapper implements."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable

import httpx

from arangodriver.connection.endpoints import Endpoint
from arangodriver.connection.request import Request, Response


class Connection(ABC):
    """Sends :class:`Request` objects to ArangoDB and returns :class:`Response` objects."""

    @abstractmethod
    def new_request(self, method: str, *url_parts: str, endpoint: str | None = None) -> Request:
        """Create a request for the path made of ``url_parts``."""

    @abstractmethod
    def do(self, request: Request, allowed_status_codes: Iterable[int] = ()) -> Response:
        """Send ``request``.

        Raises:
            ArangoError: If ``allowed_status_codes`` is not empty and the
                response status is not one of them
            ArangoConnectionError: If no response could be received
        """

    @property
    @abstractmethod
    def endpoint(self) -> Endpoint: ...

    @abstractmethod
    def set_endpoint(self, endpoint: Endpoint) -> None: ...

    @property
    @abstractmethod
    def authentication(self) -> httpx.Auth | None: ...

    @abstractmethod
    def set_authentication(self, auth: httpx.Auth | None) -> None: ...

    @abstractmethod
    def close(self) -> None: ...

    def __enter__(self) -> Connection:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class ConnectionWrapper(Connection):
    """Delegates everything to a wrapped connection; subclasses override ``do``."""

    def __init__(self, connection: Connection) -> None:
        self._connection = connection

    @property
    def wrapped(self) -> Connection:
        return self._connection

    def new_request(self, method: str, *url_parts: str, endpoint: str | None = None) -> Request:
        return self._connection.new_request(method, *url_parts, endpoint=endpoint)

    def do(self, request: Request, allowed_status_codes: Iterable[int] = ()) -> Response:
        return self._connection.do(request, allowed_status_codes)

    @property
    def endpoint(self) -> Endpoint:
        return self._connection.endpoint

    def set_endpoint(self, endpoint: Endpoint) -> None:
        self._connection.set_endpoint(endpoint)

    @property
    def authentication(self) -> httpx.Auth | None:
        return self._connection.authentication

    def set_authentication(self, auth: httpx.Auth | None) -> None:
        self._connection.set_authentication(auth)

    def close(self) -> None:
        self._connection.close()


__all__ = ["Connection", "ConnectionWrapper"]
