"""Jobs started with ``x-arango-async: store``."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from arangodriver.arangodb.base import ApiBase, optional_query
from arangodriver.connection.call import escape, new_url
from arangodriver.errors import InvalidArgumentError


class AsyncJobStatus(str, Enum):
    DONE = "done"
    PENDING = "pending"


class AsyncJobDeleteType(str, Enum):
    ALL = "all"
    EXPIRED = "expired"


class ClientAsyncJobs(ApiBase):
    """Async job bookkeeping, mixed into :class:`~arangodriver.arangodb.client.ArangoClient`.

    Use :func:`arangodriver.connection.async_request` to start a job and
    :func:`arangodriver.connection.async_job` to fetch its result.
    """

    def async_job_list(self, status: AsyncJobStatus | str, count: int | None = None) -> list[str]:
        """IDs of jobs that are done or still pending."""
        status = AsyncJobStatus(status)
        response = self._get(new_url("_api", "job", status.value), optional_query("count", count))
        return list(response.expect(200) or [])

    def async_job_status(self, job_id: str) -> AsyncJobStatus:
        """Done (200) or pending (204); an unknown job raises a 404 ArangoError."""
        response = self._get(new_url("_api", "job", escape(job_id)))
        if response.code == 200:
            return AsyncJobStatus.DONE
        if response.code == 204:
            return AsyncJobStatus.PENDING
        raise response.as_arango_error()

    def async_job_cancel(self, job_id: str) -> bool:
        data = self._put(new_url("_api", "job", escape(job_id), "cancel")).expect(200) or {}
        return bool(data.get("result", False))

    def async_job_delete(self, kind: AsyncJobDeleteType | str, stamp: datetime | float | None = None) -> bool:
        """Delete the result of one job (``kind`` is its ID), of all jobs, or of expired jobs.

        ``stamp`` is required for ``expired`` and selects jobs created before it.
        """
        if isinstance(kind, AsyncJobDeleteType):
            kind = kind.value
        if not kind:
            raise InvalidArgumentError("job id is empty")
        if kind == AsyncJobDeleteType.EXPIRED.value:
            if stamp is None:
                raise InvalidArgumentError("stamp is required when deleting expired jobs")
            if isinstance(stamp, datetime):
                stamp = stamp.timestamp()
        else:
            stamp = None
        response = self._delete(new_url("_api", "job", escape(kind)), optional_query("stamp", stamp))
        data = response.expect(200) or {}
        return bool(data.get("result", False))


__all__ = ["AsyncJobDeleteType", "AsyncJobStatus", "ClientAsyncJobs"]
