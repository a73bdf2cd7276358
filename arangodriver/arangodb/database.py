"""A database and the stream-transaction view of it."""

from __future__ import annotations

from typing import TYPE_CHECKING

from arangodriver.arangodb.analyzers import DatabaseAnalyzers
from arangodriver.arangodb.collection import DatabaseCollections
from arangodriver.arangodb.graph import DatabaseGraphs
from arangodriver.arangodb.models import ArangoModel
from arangodriver.arangodb.query import DatabaseQuery
from arangodriver.arangodb.transaction import DatabaseTransactions, TransactionStatus
from arangodriver.arangodb.views import DatabaseViews
from arangodriver.connection.call import (
    RequestModifier,
    call_delete,
    call_get,
    call_put,
    escape,
    new_url,
    with_transaction_id,
)
from arangodriver.errors import InvalidArgumentError

if TYPE_CHECKING:
    from arangodriver.arangodb.client import ArangoClient


class DatabaseInfo(ArangoModel):
    name: str
    id: str | None = None
    path: str | None = None
    is_system: bool | None = None
    sharding: str | None = None
    replication_factor: int | str | None = None
    write_concern: int | None = None
    replication_version: str | None = None


class Database(
    DatabaseCollections,
    DatabaseQuery,
    DatabaseTransactions,
    DatabaseGraphs,
    DatabaseViews,
    DatabaseAnalyzers,
):
    """A database on the server.

    All database scoped calls go to ``/_db/{name}/...`` and carry the
    database's request modifiers.
    """

    def __init__(self, client: ArangoClient, name: str, *modifiers: RequestModifier) -> None:
        if not name:
            raise InvalidArgumentError("database name is empty")
        self.client = client
        self.name = name
        self._connection = client.connection
        self._modifiers = tuple(modifiers)
        self._db_name = name

    def __repr__(self) -> str:
        return f"<Database {self.name}>"

    def info(self) -> DatabaseInfo:
        data = self._get(self._url("_api", "database", "current")).expect(200) or {}
        return DatabaseInfo.model_validate(data.get("result") or {})

    def remove(self) -> None:
        """Drop this database; must be issued against ``_system``."""
        url = new_url("_db", "_system", "_api", "database", escape(self.name))
        self._delete(url).check_status(200)

    def transaction(self, transaction_id: str) -> Transaction:
        """Bind to an existing stream transaction without contacting the server."""
        if not transaction_id:
            raise InvalidArgumentError("transaction id is empty")
        return Transaction(self, transaction_id)


class Transaction(Database):
    """A database view whose calls all run inside one stream transaction.

        trx = db.begin_transaction({"write": ["accounts"]})
        trx.collection("accounts").create_document({"balance": 10})
        trx.commit()
    """

    def __init__(self, db: Database, transaction_id: str) -> None:
        super().__init__(db.client, db.name, *db._modifiers, with_transaction_id(transaction_id))
        self._id = transaction_id

    def __repr__(self) -> str:
        return f"<Transaction {self._id} on {self.name}>"

    @property
    def id(self) -> str:
        return self._id

    def _transaction_url(self) -> str:
        return self._url("_api", "transaction", escape(self._id))

    # Status, commit and abort address the transaction by URL and are sent
    # without the transaction header.
    def status(self) -> TransactionStatus:
        data = call_get(self._connection, self._transaction_url()).expect(200) or {}
        return TransactionStatus((data.get("result") or {}).get("status"))

    def commit(self) -> None:
        call_put(self._connection, self._transaction_url(), None).check_status(200)

    def abort(self) -> None:
        call_delete(self._connection, self._transaction_url()).check_status(200)


__all__ = ["Database", "DatabaseInfo", "Transaction"]
