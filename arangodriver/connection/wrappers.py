"""Connection wrappers adding retry and async job behaviour."""

from __future__ import annotations

from collections.abc import Callable, Iterable

import structlog

from arangodriver.connection import context
from arangodriver.connection.base import Connection, ConnectionWrapper
from arangodriver.connection.call import new_url
from arangodriver.connection.request import Request, Response
from arangodriver.errors import ArangoClientError, ArangoConnectionError, ArangoError, AsyncJobInProgressError

logger = structlog.get_logger(__name__)

ASYNC_HEADER = "x-arango-async"
ASYNC_HEADER_VALUE = "store"
ASYNC_ID_HEADER = "x-arango-async-id"

RetryPredicate = Callable[[Response | None, Exception | None], bool]


class RetryConnection(ConnectionWrapper):
    """Re-sends a request while ``should_retry`` approves of the outcome.

    The request is sent at most ``retries`` times (at least once) and the
    last outcome is returned or raised. Streaming bodies cannot be replayed,
    so requests carrying one are sent only once.
    """

    def __init__(self, connection: Connection, retries: int, should_retry: RetryPredicate) -> None:
        super().__init__(connection)
        self._retries = max(retries, 1)
        self._should_retry = should_retry

    def do(self, request: Request, allowed_status_codes: Iterable[int] = ()) -> Response:
        allowed = tuple(allowed_status_codes)
        attempts = 1 if request.is_streaming() else self._retries

        response: Response | None = None
        error: Exception | None = None
        for attempt in range(1, attempts + 1):
            response, error = None, None
            try:
                response = self._connection.do(request, allowed)
            except (ArangoError, ArangoClientError) as e:
                error = e

            if attempt < attempts and self._should_retry(response, error):
                logger.debug("arango_request_retry", path=request.path, attempt=attempt)
                continue
            break

        if error is not None:
            raise error
        if response is None:
            raise ArangoConnectionError(f"no response received for {request.method} {request.path}")
        return response


def _is_503(response: Response | None, error: Exception | None) -> bool:
    if error is not None:
        return isinstance(error, ArangoError) and error.status_code == 503
    return response is not None and response.code == 503


def retry_on_503(connection: Connection, retries: int) -> RetryConnection:
    """Retry requests answered with ``503 Service Unavailable``."""
    return RetryConnection(connection, retries, _is_503)


class AsyncConnection(ConnectionWrapper):
    """Adds async job support, driven by :mod:`arangodriver.connection.context`.

    Inside ``async_request()`` requests are stored as jobs on the server and
    :class:`AsyncJobInProgressError` carries the job id back. Inside
    ``async_job(job_id)`` the job result is fetched with ``PUT /_api/job/{id}``
    and returned as if it were the response of the original request.
    """

    def do(self, request: Request, allowed_status_codes: Iterable[int] = ()) -> Response:
        job_id = context.async_job_id()
        if job_id is not None:
            job_request = self._connection.new_request("PUT", new_url("_api/job", job_id))
            response = self._connection.do(job_request, allowed_status_codes)
            if response.code == 204 and response.header(ASYNC_ID_HEADER) != job_id:
                raise AsyncJobInProgressError(job_id)
            return response

        if context.is_async_request():
            request.add_header(ASYNC_HEADER, ASYNC_HEADER_VALUE)
            response = self._connection.do(request, (202,))
            async_id = response.header(ASYNC_ID_HEADER)
            if not async_id:
                raise ArangoClientError("missing async key response")
            raise AsyncJobInProgressError(async_id)

        return self._connection.do(request, allowed_status_codes)


__all__ = [
    "ASYNC_HEADER",
    "ASYNC_HEADER_VALUE",
    "ASYNC_ID_HEADER",
    "AsyncConnection",
    "RetryConnection",
    "RetryPredicate",
    "retry_on_503",
]
