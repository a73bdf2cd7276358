"""Cluster administration through ``/_admin/cluster``."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any

from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_pascal

from arangodriver.arangodb.base import ApiBase
from arangodriver.arangodb.models import ArangoModel, dump_options
from arangodriver.connection.call import escape, new_url, with_query
from arangodriver.errors import InvalidArgumentError

if TYPE_CHECKING:
    from arangodriver.arangodb.collection import Collection

REBALANCE_PLAN_VERSION = 1


class ServerStatus(str, Enum):
    GOOD = "GOOD"
    BAD = "BAD"
    FAILED = "FAILED"


class ServerSyncStatus(str, Enum):
    UNKNOWN = "UNKNOWN"
    UNDEFINED = "UNDEFINED"
    STARTUP = "STARTUP"
    STOPPING = "STOPPING"
    STOPPED = "STOPPED"
    SERVING = "SERVING"
    SHUTDOWN = "SHUTDOWN"


class DBServerMaintenanceMode(str, Enum):
    NORMAL = "normal"
    MAINTENANCE = "maintenance"


class ServerHealth(ArangoModel):
    """Health of one server; the server reports these keys in PascalCase."""

    model_config = ConfigDict(alias_generator=to_pascal)

    endpoint: str | None = None
    last_heartbeat_acked: str | None = None
    last_heartbeat_sent: str | None = None
    last_heartbeat_status: str | None = None
    role: str | None = None
    short_name: str | None = None
    status: str | None = None
    can_be_deleted: bool | None = None
    host_id: str | None = Field(default=None, alias="Host")
    version: str | None = None
    engine: str | None = None
    sync_status: str | None = None
    advertised_endpoint: str | None = None
    leader: str | None = None
    leading: bool | None = None


class ClusterHealth(ArangoModel):
    cluster_id: str | None = Field(default=None, alias="ClusterId")
    health: dict[str, ServerHealth] = Field(default_factory=dict, alias="Health")

    def servers_with_role(self, role: str) -> dict[str, ServerHealth]:
        return {sid: h for sid, h in self.health.items() if h.role == role}


class NumberOfServers(ArangoModel):
    number_of_coordinators: int | None = None
    number_of_db_servers: int | None = Field(default=None, alias="numberOfDBServers")
    cleaned_servers: list[str] = Field(default_factory=list)


class DatabaseInventory(ArangoModel):
    properties: dict[str, Any] | None = None
    collections: list[dict[str, Any]] = Field(default_factory=list)
    views: list[dict[str, Any]] = Field(default_factory=list)
    state: dict[str, Any] | None = None
    tick: str | None = None

    def collection_by_name(self, name: str) -> dict[str, Any] | None:
        for collection in self.collections:
            if (collection.get("parameters") or {}).get("name") == name:
                return collection
        return None


class DBServerMaintenance(ArangoModel):
    mode: str | None = None
    until: str | None = None


class RebalanceMove(ArangoModel):
    from_: str = Field(alias="from")
    to: str
    shard: str
    collection: str
    is_leader: bool = Field(alias="isLeader")


class RebalanceOptions(ArangoModel):
    database_exclude_list: list[str] | None = None
    exclude_system_collections: bool | None = None
    leader_changes: bool | None = None
    maximum_number_of_moves: int | None = None
    move_followers: bool | None = None
    move_leaders: bool | None = None
    pi_factor: float | None = Field(default=None, alias="piFactor")


class ClientAdminCluster(ApiBase):
    """Cluster administration, mixed into :class:`~arangodriver.arangodb.client.ArangoClient`."""

    def cluster_health(self) -> ClusterHealth:
        return ClusterHealth.model_validate(self._get(new_url("_admin", "cluster", "health")).expect(200))

    def database_inventory(self, db: str) -> DatabaseInventory:
        url = new_url("_db", escape(db), "_api", "replication", "clusterInventory")
        return DatabaseInventory.model_validate(self._get(url).expect(200))

    def _cluster_job(self, url: str, body: Any, *codes: int) -> str:
        data = self._post(url, body).expect(*codes) or {}
        return str(data.get("id", ""))

    def move_shard(self, collection: Collection, shard: str, from_server: str, to_server: str) -> str:
        """Start moving ``shard`` of ``collection`` between DB-Servers; returns the agency job ID."""
        body = {
            "database": collection.database.name,
            "collection": collection.name,
            "shard": shard,
            "fromServer": from_server,
            "toServer": to_server,
        }
        return self._cluster_job(new_url("_admin", "cluster", "moveShard"), body, 202)

    def clean_out_server(self, server_id: str) -> str:
        """Start moving all shards off ``server_id``; returns the agency job ID."""
        return self._cluster_job(new_url("_admin", "cluster", "cleanOutServer"), {"server": server_id}, 200, 202)

    def resign_server(self, server_id: str) -> str:
        """Make ``server_id`` give up all shard leaderships; returns the agency job ID."""
        return self._cluster_job(new_url("_admin", "cluster", "resignLeadership"), {"server": server_id}, 200, 202)

    def number_of_servers(self) -> NumberOfServers:
        data = self._get(new_url("_admin", "cluster", "numberOfServers")).expect(200)
        return NumberOfServers.model_validate(data)

    def is_cleaned_out(self, server_id: str) -> bool:
        return server_id in self.number_of_servers().cleaned_servers

    def remove_server(self, server_id: str) -> None:
        """Remove a failed, cleaned out server from the cluster."""
        self._post(new_url("_admin", "cluster", "removeServer"), server_id).check_status(200, 202)

    def cluster_statistics(self, db_server: str) -> dict[str, Any]:
        if not db_server:
            raise InvalidArgumentError("db_server is empty")
        response = self._get(new_url("_admin", "cluster", "statistics"), with_query("DBserver", db_server))
        return dict(response.expect(200) or {})

    def dbserver_maintenance(self, db_server: str) -> DBServerMaintenance:
        if not db_server:
            raise InvalidArgumentError("db_server is empty")
        data = self._get(new_url("_admin", "cluster", "maintenance", escape(db_server))).expect(200) or {}
        return DBServerMaintenance.model_validate(data.get("result") or {})

    def set_dbserver_maintenance(
        self, db_server: str, mode: DBServerMaintenanceMode | str, timeout: int | None = None
    ) -> None:
        """Put a DB-Server into (or out of) maintenance; ``timeout`` is in seconds."""
        if not db_server:
            raise InvalidArgumentError("db_server is empty")
        body: dict[str, Any] = {"mode": DBServerMaintenanceMode(mode).value}
        if timeout is not None:
            body["timeout"] = timeout
        self._put(new_url("_admin", "cluster", "maintenance", escape(db_server)), body).check_status(200)

    def set_cluster_maintenance(self, mode: str) -> None:
        """Toggle supervision maintenance: ``on``, ``off`` or a duration in seconds."""
        if not mode:
            raise InvalidArgumentError("mode is empty")
        self._put(new_url("_admin", "cluster", "maintenance"), mode).check_status(200)

    # ------------------------------------------------------------------
    # Shard rebalancing
    # ------------------------------------------------------------------
    def cluster_rebalance(self) -> dict[str, Any]:
        """Current shard distribution imbalance."""
        data = self._get(new_url("_admin", "cluster", "rebalance")).expect(200) or {}
        return dict(data.get("result") or {})

    def compute_cluster_rebalance(self, options: RebalanceOptions | dict[str, Any] | None = None) -> list[RebalanceMove]:
        """Compute, without executing, the shard moves that would balance the cluster."""
        body = {"version": REBALANCE_PLAN_VERSION, **dump_options(options)}
        data = self._post(new_url("_admin", "cluster", "rebalance"), body).expect(200) or {}
        return [RebalanceMove.model_validate(m) for m in (data.get("result") or {}).get("moves") or []]

    def execute_cluster_rebalance(self, moves: list[RebalanceMove | dict[str, Any]]) -> None:
        body = {"version": REBALANCE_PLAN_VERSION, "moves": [dump_options(m) for m in moves]}
        self._post(new_url("_admin", "cluster", "rebalance", "execute"), body).check_status(200, 202)


__all__ = [
    "ClientAdminCluster",
    "ClusterHealth",
    "DBServerMaintenance",
    "DBServerMaintenanceMode",
    "DatabaseInventory",
    "NumberOfServers",
    "RebalanceMove",
    "RebalanceOptions",
    "ServerHealth",
    "ServerStatus",
    "ServerSyncStatus",
]
