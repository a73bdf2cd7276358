"""Server side AQL cursors."""

from __future__ import annotations

import threading
from collections import deque
from typing import TYPE_CHECKING, Any

from arangodriver.arangodb.meta import DocumentMeta
from arangodriver.arangodb.models import ArangoModel
from arangodriver.connection.call import escape
from arangodriver.errors import NoMoreDocumentsError

if TYPE_CHECKING:
    from arangodriver.arangodb.database import Database


class CursorStats(ArangoModel):
    writes_executed: int | None = None
    writes_ignored: int | None = None
    documents_lookups: int | None = None
    scanned_full: int | None = None
    scanned_index: int | None = None
    cursors_created: int | None = None
    cursors_rearmed: int | None = None
    cache_hits: int | None = None
    cache_misses: int | None = None
    filtered: int | None = None
    http_requests: int | None = None
    full_count: int | None = None
    execution_time: float | None = None
    peak_memory_usage: int | None = None
    intermediate_commits: int | None = None


class Cursor:
    """Iterates the results of an AQL query, fetching batches on demand.

    Follow-up batches are requested from the coordinator that created the
    cursor. Iterating yields the documents; :meth:`read_document` also
    returns their metadata.

        with db.query("FOR d IN docs RETURN d") as cursor:
            for doc in cursor:
                ...
    """

    def __init__(self, db: Database, endpoint: str, data: dict[str, Any]) -> None:
        self._db = db
        self._endpoint = endpoint
        self._lock = threading.Lock()
        self._closed = False
        self._id: str | None = None
        self._batch: deque[Any] = deque()
        self._has_more = False
        self._count: int | None = None
        self._extra: dict[str, Any] = {}
        self._cached = False
        self._load(data)

    def __repr__(self) -> str:
        return f"<Cursor {self._id or '-'} has_more={self.has_more}>"

    def _load(self, data: dict[str, Any]) -> None:
        self._id = data.get("id") or self._id
        self._batch.extend(data.get("result") or [])
        self._has_more = bool(data.get("hasMore"))
        if data.get("count") is not None:
            self._count = int(data["count"])
        if data.get("extra"):
            self._extra = data["extra"]
        self._cached = bool(data.get("cached", self._cached))

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------
    @property
    def id(self) -> str | None:
        return self._id

    @property
    def count(self) -> int | None:
        """Total number of results, only available when the query was run with ``count``."""
        return self._count

    @property
    def has_more(self) -> bool:
        return bool(self._batch) or self._has_more

    @property
    def cached(self) -> bool:
        return self._cached

    @property
    def extra(self) -> dict[str, Any]:
        return self._extra

    @property
    def statistics(self) -> CursorStats:
        return CursorStats.model_validate(self._extra.get("stats") or {})

    @property
    def warnings(self) -> list[dict[str, Any]]:
        return list(self._extra.get("warnings") or [])

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------
    def read_document(self) -> tuple[DocumentMeta, Any]:
        """Return the next result with its document metadata.

        Raises:
            NoMoreDocumentsError: When the cursor is exhausted or closed
        """
        with self._lock:
            if self._closed:
                raise NoMoreDocumentsError("cursor is closed")
            if not self._batch:
                self._fetch_next_batch()
            item = self._batch.popleft()
        meta = DocumentMeta.model_validate(item) if isinstance(item, dict) else DocumentMeta()
        return meta, item

    def _fetch_next_batch(self) -> None:
        if not self._has_more or not self._id:
            raise NoMoreDocumentsError("no more documents")
        response = self._db._post(
            self._db._url("_api", "cursor", escape(self._id)),
            endpoint=self._endpoint,
        )
        self._load(response.expect(200) or {})
        if not self._batch:
            raise NoMoreDocumentsError("no more documents")

    def __iter__(self) -> Cursor:
        return self

    def __next__(self) -> Any:
        try:
            return self.read_document()[1]
        except NoMoreDocumentsError:
            raise StopIteration from None

    def batch(self) -> list[Any]:
        """Drain and return the results already received, without fetching more."""
        with self._lock:
            items = list(self._batch)
            self._batch.clear()
        return items

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def close(self) -> None:
        """Release the server side cursor; calling it again is a no-op."""
        with self._lock:
            if self._closed:
                return
            if self._id and self._has_more:
                response = self._db._delete(
                    self._db._url("_api", "cursor", escape(self._id)),
                    endpoint=self._endpoint,
                )
                # 404: the server already dropped the cursor (expired ttl)
                if response.code not in (202, 404):
                    raise response.as_arango_error()
            self._closed = True
            self._has_more = False
            self._batch.clear()

    def __enter__(self) -> Cursor:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


__all__ = ["Cursor", "CursorStats"]
