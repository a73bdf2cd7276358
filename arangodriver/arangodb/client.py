"""The client entry point."""

from __future__ import annotations

from typing import TYPE_CHECKING

from arangodriver.arangodb.admin import ClientAdmin
from arangodriver.arangodb.async_jobs import ClientAsyncJobs
from arangodriver.arangodb.backup import ClientBackup
from arangodriver.arangodb.cluster import ClientAdminCluster
from arangodriver.arangodb.databases import ClientDatabases
from arangodriver.arangodb.replication import ClientReplication
from arangodriver.arangodb.requests import ClientRequests
from arangodriver.arangodb.server_info import ClientServerInfo
from arangodriver.arangodb.tasks import ClientTasks
from arangodriver.arangodb.users import ClientUsers
from arangodriver.connection.base import Connection

if TYPE_CHECKING:
    from arangodriver.agency.client import AgencyClient


class ArangoClient(
    ClientDatabases,
    ClientUsers,
    ClientServerInfo,
    ClientAdmin,
    ClientAdminCluster,
    ClientBackup,
    ClientReplication,
    ClientTasks,
    ClientAsyncJobs,
):
    """Server wide API bound to one connection.

        client = ArangoClient(HttpConnection(ConnectionConfig(endpoints=["http://localhost:8529"])))
        db = client.database("_system")
        print(client.version().version)
    """

    def __init__(self, connection: Connection) -> None:
        self._connection = connection
        self._modifiers = ()
        self._db_name = None
        self._agency: AgencyClient | None = None
        self._requests: ClientRequests | None = None

    def __repr__(self) -> str:
        return f"<ArangoClient {self._connection.endpoint!r}>"

    @property
    def agency(self) -> AgencyClient:
        """Agency access through the same connection (the endpoints must be agents)."""
        if self._agency is None:
            from arangodriver.agency.client import AgencyClient

            self._agency = AgencyClient(self._connection)
        return self._agency

    @property
    def requests(self) -> ClientRequests:
        if self._requests is None:
            self._requests = ClientRequests(self._connection)
        return self._requests

    def close(self) -> None:
        self._connection.close()

    def __enter__(self) -> ArangoClient:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


__all__ = ["ArangoClient"]
