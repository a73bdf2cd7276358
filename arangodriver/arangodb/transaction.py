"""Stream transactions and JavaScript transactions."""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import TYPE_CHECKING, Any, TypeVar

import structlog

from arangodriver.arangodb.base import ApiBase
from arangodriver.arangodb.meta import HEADER_DIRTY_READS
from arangodriver.arangodb.models import ArangoModel, dump_options
from arangodriver.connection.call import with_header
from arangodriver.errors import ArangoError, InvalidArgumentError

if TYPE_CHECKING:
    from arangodriver.arangodb.database import Transaction

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class TransactionStatus(str, Enum):
    RUNNING = "running"
    COMMITTED = "committed"
    ABORTED = "aborted"


class TransactionCollections(ArangoModel):
    read: list[str] | None = None
    write: list[str] | None = None
    exclusive: list[str] | None = None


class BeginTransactionOptions(ArangoModel):
    wait_for_sync: bool | None = None
    allow_implicit: bool | None = None
    lock_timeout: float | None = None
    max_transaction_size: int | None = None
    skip_fast_lock_round: bool | None = None
    allow_dirty_reads: bool | None = None


class JavaScriptTransactionOptions(ArangoModel):
    wait_for_sync: bool | None = None
    allow_implicit: bool | None = None
    lock_timeout: float | None = None
    max_transaction_size: int | None = None


class DatabaseTransactions(ApiBase):
    """Transaction management, mixed into :class:`~arangodriver.arangodb.database.Database`."""

    def begin_transaction(
        self,
        collections: TransactionCollections | dict[str, Any],
        options: BeginTransactionOptions | dict[str, Any] | None = None,
    ) -> Transaction:
        """Start a stream transaction and return a database view bound to it."""
        body = dump_options(options)
        dirty_reads = None
        if body.pop("allowDirtyReads", None):
            dirty_reads = with_header(HEADER_DIRTY_READS, "true")
        body["collections"] = dump_options(collections)
        response = self._post(self._url("_api", "transaction", "begin"), body, dirty_reads)
        data = response.expect(201) or {}
        transaction_id = (data.get("result") or {}).get("id")
        if not transaction_id:
            raise ArangoError(response.code, "transaction id missing from response", data)
        logger.debug("transaction_started", transaction_id=transaction_id, database=self._db_name)
        return self.transaction(transaction_id)

    def list_transactions(self, *statuses: TransactionStatus | str) -> list[Transaction]:
        """Running stream transactions, optionally filtered by state."""
        wanted = {TransactionStatus(s).value for s in statuses} or {s.value for s in TransactionStatus}
        data = self._get(self._url("_api", "transaction")).expect(200) or {}
        return [
            self.transaction(t["id"])
            for t in data.get("transactions") or []
            if t.get("state") in wanted
        ]

    def with_transaction(
        self,
        collections: TransactionCollections | dict[str, Any],
        fn: Callable[[Transaction], T],
        options: BeginTransactionOptions | dict[str, Any] | None = None,
    ) -> T:
        """Run ``fn`` inside a stream transaction.

        The transaction is committed when ``fn`` returns and aborted when it
        raises; the original exception is re-raised after the abort.
        """
        trx = self.begin_transaction(collections, options)
        try:
            result = fn(trx)
        except BaseException:
            try:
                trx.abort()
            except ArangoError as abort_error:
                logger.warning("transaction_abort_failed", transaction_id=trx.id, error=str(abort_error))
            raise
        trx.commit()
        return result

    def js_transaction(
        self,
        action: str,
        collections: TransactionCollections | dict[str, Any],
        params: Any = None,
        options: JavaScriptTransactionOptions | dict[str, Any] | None = None,
    ) -> Any:
        """Execute a server side JavaScript transaction and return its result."""
        if not action:
            raise InvalidArgumentError("transaction action is empty")
        body = {**dump_options(options), "action": action, "collections": dump_options(collections)}
        if params is not None:
            body["params"] = params
        data = self._post(self._url("_api", "transaction"), body).expect(200) or {}
        return data.get("result")


__all__ = [
    "BeginTransactionOptions",
    "DatabaseTransactions",
    "JavaScriptTransactionOptions",
    "TransactionCollections",
    "TransactionStatus",
]
