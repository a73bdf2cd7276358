"""Database management on the client."""

from __future__ import annotations

from enum import Enum
from typing import Any

from arangodriver.arangodb.base import ApiBase
from arangodriver.arangodb.database import Database
from arangodriver.arangodb.models import ArangoModel, dump_options
from arangodriver.connection.call import escape, new_url
from arangodriver.errors import ArangoError, InvalidArgumentError, is_not_found


class DatabaseSharding(str, Enum):
    FLEXIBLE = ""
    SINGLE = "single"


class DatabaseReplicationVersion(str, Enum):
    ONE = "1"
    TWO = "2"


class CreateDatabaseUserOptions(ArangoModel):
    user: str
    passwd: str | None = None
    active: bool | None = None
    extra: dict[str, Any] | None = None


class CreateDatabaseDefaultOptions(ArangoModel):
    replication_factor: int | str | None = None
    write_concern: int | None = None
    sharding: DatabaseSharding | None = None
    replication_version: DatabaseReplicationVersion | None = None


class CreateDatabaseOptions(ArangoModel):
    users: list[CreateDatabaseUserOptions] | None = None
    options: CreateDatabaseDefaultOptions | None = None


def _system_url(*parts: str) -> str:
    return new_url("_db", "_system", "_api", "database", *parts)


class ClientDatabases(ApiBase):
    """Database access, mixed into :class:`~arangodriver.arangodb.client.ArangoClient`."""

    def database(self, name: str, skip_exist_check: bool = False) -> Database:
        """Return the database ``name``.

        Unless ``skip_exist_check`` is set the server is asked first, so a
        missing database raises a 404 :class:`ArangoError` here rather than on
        first use.
        """
        if not name:
            raise InvalidArgumentError("database name is empty")
        if not skip_exist_check:
            self._get(new_url("_db", escape(name), "_api", "database", "current")).check_status(200)
        return Database(self, name)  # type: ignore[arg-type]

    def database_exists(self, name: str) -> bool:
        try:
            self.database(name)
        except ArangoError as e:
            if is_not_found(e):
                return False
            raise
        return True

    def _databases(self, url: str) -> list[Database]:
        data = self._get(url).expect(200) or {}
        return [Database(self, name) for name in data.get("result") or []]  # type: ignore[arg-type]

    def databases(self) -> list[Database]:
        """All databases on the server; requires access to ``_system``."""
        return self._databases(_system_url())

    def accessible_databases(self) -> list[Database]:
        """Databases the current user can access."""
        return self._databases(_system_url("user"))

    def create_database(
        self, name: str, options: CreateDatabaseOptions | dict[str, Any] | None = None
    ) -> Database:
        if not name:
            raise InvalidArgumentError("database name is empty")
        body = {**dump_options(options), "name": name}
        self._post(_system_url(), body).check_status(201)
        return Database(self, name)  # type: ignore[arg-type]


__all__ = [
    "ClientDatabases",
    "CreateDatabaseDefaultOptions",
    "CreateDatabaseOptions",
    "CreateDatabaseUserOptions",
    "DatabaseReplicationVersion",
    "DatabaseSharding",
]
