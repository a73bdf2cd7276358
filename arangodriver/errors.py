"""Error types and error predicates for the ArangoDB client.

Server-reported failures surface as :class:`ArangoError`, carrying the HTTP
status and the ``errorNum``/``errorMessage`` of the response envelope.
Failures that happen on the client side (bad arguments, broken transport,
undecodable responses) derive from :class:`ArangoClientError`.

The ``is_*`` predicates inspect an exception and every exception on its
``__cause__`` chain, so wrapped errors are still classified correctly.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any

import httpx

# General errors
ERR_NOT_IMPLEMENTED = 9
ERR_FORBIDDEN = 11
ERR_DISABLED = 36

# HTTP errors
ERR_HTTP_FORBIDDEN = 403
ERR_HTTP_INTERNAL = 501

# Internal ArangoDB storage errors
ERR_ARANGO_READ_ONLY = 1004

# External ArangoDB storage errors
ERR_ARANGO_CORRUPTED_DATAFILE = 1100
ERR_ARANGO_ILLEGAL_PARAMETER_FILE = 1101
ERR_ARANGO_CORRUPTED_COLLECTION = 1102
ERR_ARANGO_FILESYSTEM_FULL = 1104
ERR_ARANGO_DATADIR_LOCKED = 1107

# General ArangoDB storage errors
ERR_ARANGO_CONFLICT = 1200
ERR_ARANGO_DOCUMENT_NOT_FOUND = 1202
ERR_ARANGO_DATA_SOURCE_NOT_FOUND = 1203
ERR_ARANGO_ILLEGAL_NAME = 1208
ERR_ARANGO_UNIQUE_CONSTRAINT_VIOLATED = 1210
ERR_ARANGO_DATABASE_NOT_FOUND = 1228
ERR_ARANGO_DATABASE_NAME_INVALID = 1229

# ArangoDB cluster errors
ERR_CLUSTER_REPLICATION_WRITE_CONCERN_NOT_FULFILLED = 1429
ERR_CLUSTER_LEADERSHIP_CHALLENGE_ONGOING = 1495
ERR_CLUSTER_NOT_LEADER = 1496

# User management errors
ERR_USER_DUPLICATE = 1702

_EXTERNAL_STORAGE_ERRORS = (
    ERR_ARANGO_CORRUPTED_DATAFILE,
    ERR_ARANGO_ILLEGAL_PARAMETER_FILE,
    ERR_ARANGO_CORRUPTED_COLLECTION,
    ERR_ARANGO_FILESYSTEM_FULL,
    ERR_ARANGO_DATADIR_LOCKED,
)


class ArangoError(RuntimeError):
    """Raised when the ArangoDB HTTP API reports an error."""

    def __init__(self, status_code: int, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(f"ArangoDB HTTP {status_code}: {message}")
        self.status_code = status_code
        self.error_message = message
        self.details = details or {}

    @property
    def error_num(self) -> int:
        """ArangoDB specific error number (``errorNum``), 0 when absent."""
        try:
            return int(self.details.get("errorNum") or 0)
        except (TypeError, ValueError):
            return 0

    @property
    def timeout(self) -> bool:
        return self.status_code in (408, 504)

    @property
    def temporary(self) -> bool:
        return self.status_code == 503

    @classmethod
    def from_envelope(cls, status_code: int, payload: Any) -> ArangoError:
        """Build an error from an ArangoDB error envelope.

        Args:
            status_code: HTTP status of the response
            payload: Decoded response body (``error``, ``code``, ``errorNum``,
                ``errorMessage``); anything that is not a dict is ignored

        Returns:
            ArangoError describing the failure
        """
        details = payload if isinstance(payload, dict) else {}
        code = details.get("code")
        if not isinstance(code, int) or code == 0:
            code = status_code
        message = details.get("errorMessage") or details.get("message") or f"unexpected status {status_code}"
        return cls(code, str(message), details)


class ArangoClientError(RuntimeError):
    """Raised for failures detected on the client side."""


class InvalidArgumentError(ArangoClientError, ValueError):
    """Raised when a call receives an argument it cannot use."""


class NoMoreDocumentsError(ArangoClientError):
    """Raised when a cursor or result reader is exhausted."""


class ArangoConnectionError(ArangoClientError):
    """Raised when the transport fails before a response is received."""


class ResponseError(ArangoClientError):
    """Raised when a response cannot be decoded or has an unexpected shape."""


class AsyncJobInProgressError(ArangoClientError):
    """Raised when a request has been queued as an async job that is not finished yet."""

    def __init__(self, job_id: str) -> None:
        super().__init__(f"Job with ID {job_id} in progress")
        self.job_id = job_id


def _causes(err: BaseException | None) -> Iterator[BaseException]:
    seen: set[int] = set()
    while err is not None and id(err) not in seen:
        seen.add(id(err))
        yield err
        err = err.__cause__


def _check_cause(err: BaseException | None, check: Callable[[BaseException], bool]) -> bool:
    return any(check(e) for e in _causes(err))


def as_arango_error(err: BaseException | None) -> ArangoError | None:
    """Return the first ArangoError on the cause chain of ``err``, if any."""
    for e in _causes(err):
        if isinstance(e, ArangoError):
            return e
    return None


def is_arango_error_with_code(err: BaseException | None, code: int) -> bool:
    return _check_cause(err, lambda e: isinstance(e, ArangoError) and e.status_code == code)


def is_arango_error_with_error_num(err: BaseException | None, *error_nums: int) -> bool:
    return _check_cause(err, lambda e: isinstance(e, ArangoError) and e.error_num in error_nums)


def is_invalid_request(err: BaseException | None) -> bool:
    return is_arango_error_with_code(err, 400)


def is_unauthorized(err: BaseException | None) -> bool:
    return is_arango_error_with_code(err, 401)


def is_forbidden(err: BaseException | None) -> bool:
    return is_arango_error_with_code(err, 403)


def is_not_found(err: BaseException | None) -> bool:
    return is_arango_error_with_code(err, 404) or is_arango_error_with_error_num(
        err, ERR_ARANGO_DOCUMENT_NOT_FOUND, ERR_ARANGO_DATA_SOURCE_NOT_FOUND
    )


def is_conflict(err: BaseException | None) -> bool:
    return is_arango_error_with_code(err, 409) or is_arango_error_with_error_num(err, ERR_USER_DUPLICATE)


def is_precondition_failed(err: BaseException | None) -> bool:
    return is_arango_error_with_code(err, 412) or is_arango_error_with_error_num(
        err, ERR_ARANGO_CONFLICT, ERR_ARANGO_UNIQUE_CONSTRAINT_VIOLATED
    )


def is_operation_timeout(err: BaseException | None) -> bool:
    """True for server side timeouts (408/504) and transport timeouts."""
    return _check_cause(
        err,
        lambda e: (isinstance(e, ArangoError) and e.timeout) or isinstance(e, httpx.TimeoutException),
    )


def is_no_leader(err: BaseException | None) -> bool:
    """True when a cluster answered 503 because the contacted server is not the leader."""
    return is_arango_error_with_code(err, 503) and is_arango_error_with_error_num(err, ERR_CLUSTER_NOT_LEADER)


def is_no_leader_or_ongoing(err: BaseException | None) -> bool:
    return is_arango_error_with_code(err, 503) and is_arango_error_with_error_num(
        err, ERR_CLUSTER_LEADERSHIP_CHALLENGE_ONGOING, ERR_CLUSTER_NOT_LEADER
    )


def is_external_storage_error(err: BaseException | None) -> bool:
    return is_arango_error_with_error_num(err, *_EXTERNAL_STORAGE_ERRORS)


def is_invalid_argument(err: BaseException | None) -> bool:
    return _check_cause(err, lambda e: isinstance(e, InvalidArgumentError))


def is_no_more_documents(err: BaseException | None) -> bool:
    return _check_cause(err, lambda e: isinstance(e, NoMoreDocumentsError))


def is_async_job_in_progress(err: BaseException | None) -> str | None:
    """Return the job id when ``err`` reports an unfinished async job."""
    for e in _causes(err):
        if isinstance(e, AsyncJobInProgressError):
            return e.job_id
    return None


__all__ = [
    "ArangoClientError",
    "ArangoConnectionError",
    "ArangoError",
    "AsyncJobInProgressError",
    "InvalidArgumentError",
    "NoMoreDocumentsError",
    "ResponseError",
    "as_arango_error",
    "is_arango_error_with_code",
    "is_arango_error_with_error_num",
    "is_async_job_in_progress",
    "is_conflict",
    "is_external_storage_error",
    "is_forbidden",
    "is_invalid_argument",
    "is_invalid_request",
    "is_no_leader",
    "is_no_leader_or_ongoing",
    "is_no_more_documents",
    "is_not_found",
    "is_operation_timeout",
    "is_precondition_failed",
    "is_unauthorized",
]
