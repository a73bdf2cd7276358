"""Per-call request settings carried in context variables.

These mirror what a caller would otherwise thread through every method
signature: running a call as an async job, collecting an async job result,
and bounding server side queueing time.

    with async_request():
        try:
            db.query("FOR d IN docs RETURN d")
        except AsyncJobInProgressError as e:
            job_id = e.job_id

    with async_job(job_id):
        cursor = db.query("FOR d IN docs RETURN d")
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

_async_request: ContextVar[bool] = ContextVar("arango_async_request", default=False)
_async_job_id: ContextVar[str | None] = ContextVar("arango_async_job_id", default=None)
_use_queue_timeout: ContextVar[bool] = ContextVar("arango_use_queue_timeout", default=False)
_max_queue_time: ContextVar[float | None] = ContextVar("arango_max_queue_time", default=None)


@contextmanager
def async_request() -> Iterator[None]:
    """Run calls made in this block as async jobs (``x-arango-async: store``)."""
    token = _async_request.set(True)
    try:
        yield
    finally:
        _async_request.reset(token)


@contextmanager
def async_job(job_id: str) -> Iterator[None]:
    """Fetch the result of ``job_id`` instead of sending calls made in this block."""
    token = _async_job_id.set(job_id)
    try:
        yield
    finally:
        _async_job_id.reset(token)


@contextmanager
def use_queue_timeout(enabled: bool = True) -> Iterator[None]:
    """Send ``x-arango-queue-time-seconds`` derived from the read timeout."""
    token = _use_queue_timeout.set(enabled)
    try:
        yield
    finally:
        _use_queue_timeout.reset(token)


@contextmanager
def max_queue_time(seconds: float) -> Iterator[None]:
    """Send ``x-arango-queue-time-seconds`` with an explicit limit."""
    queue_token = _use_queue_timeout.set(True)
    time_token = _max_queue_time.set(seconds)
    try:
        yield
    finally:
        _max_queue_time.reset(time_token)
        _use_queue_timeout.reset(queue_token)


def is_async_request() -> bool:
    return _async_request.get()


def async_job_id() -> str | None:
    return _async_job_id.get()


def queue_time_seconds(default: float | None = None) -> float | None:
    """Queue time to announce to the server, or ``None`` when disabled."""
    if not _use_queue_timeout.get():
        return None
    explicit = _max_queue_time.get()
    return explicit if explicit is not None else default


__all__ = [
    "async_job",
    "async_job_id",
    "async_request",
    "is_async_request",
    "max_queue_time",
    "queue_time_seconds",
    "use_queue_timeout",
]
