"""Replication batches, inventory, logger, applier and write-ahead log."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from arangodriver.arangodb.base import ApiBase, optional_query
from arangodriver.arangodb.models import ArangoModel, dump_options
from arangodriver.arangodb.server_info import ServerRole
from arangodriver.connection.call import RequestModifier, escape, new_url
from arangodriver.errors import InvalidArgumentError


class ReplicationBatch(ArangoModel):
    id: str
    last_tick: str | None = None
    state: dict[str, Any] | None = None


class LoggerState(ArangoModel):
    state: dict[str, Any] | None = None
    server: dict[str, Any] | None = None
    clients: list[dict[str, Any]] = Field(default_factory=list)


class ApplierConfig(ArangoModel):
    endpoint: str | None = None
    database: str | None = None
    username: str | None = None
    password: str | None = None
    max_connect_retries: int | None = None
    connect_timeout: float | None = None
    request_timeout: float | None = None
    chunk_size: int | None = None
    auto_start: bool | None = None
    adaptive_polling: bool | None = None
    include_system: bool | None = None
    require_from_present: bool | None = None
    verbose: bool | None = None
    incremental: bool | None = None
    restrict_type: str | None = None
    restrict_collections: list[str] | None = None
    connection_retry_wait_time: float | None = None
    initial_sync_max_wait_time: float | None = None
    idle_min_wait_time: float | None = None
    idle_max_wait_time: float | None = None
    auto_resync: bool | None = None
    auto_resync_retries: int | None = None
    max_packet_size: int | None = None


class ApplierState(ArangoModel):
    state: dict[str, Any] | None = None
    server: dict[str, Any] | None = None
    endpoint: str | None = None
    database: str | None = None


class WALRange(ArangoModel):
    time: str | None = None
    datafiles: dict[str, Any] | None = None
    tick_min: str | None = None
    tick_max: str | None = None
    server: dict[str, Any] | None = None


class ClientReplication(ApiBase):
    """Replication calls, mixed into :class:`~arangodriver.arangodb.client.ArangoClient`.

    Coordinators forward batch and inventory calls to one DB-Server, so
    ``db_server`` is required there.
    """

    def _replication_url(self, db: str, *parts: str) -> str:
        return new_url("_db", escape(db), "_api", "replication", *parts)

    def _db_server_query(self, db_server: str | None, action: str) -> RequestModifier | None:
        if self.server_role() == ServerRole.COORDINATOR:
            if not db_server:
                raise InvalidArgumentError(f"db_server must be specified to {action} on a coordinator")
            return optional_query("DBserver", db_server)
        return None

    # ------------------------------------------------------------------
    # Batches
    # ------------------------------------------------------------------
    def create_batch(
        self, db: str, ttl: int, db_server: str | None = None, state: bool | None = None
    ) -> ReplicationBatch:
        """Create a dump batch that keeps WAL and snapshot for ``ttl`` seconds."""
        response = self._post(
            self._replication_url(db, "batch"),
            {"ttl": ttl},
            optional_query("state", state),
            self._db_server_query(db_server, "create a batch"),
        )
        return ReplicationBatch.model_validate(response.expect(200))

    def extend_batch(self, db: str, batch_id: str, ttl: int, db_server: str | None = None) -> None:
        response = self._put(
            self._replication_url(db, "batch", escape(batch_id)),
            {"ttl": ttl},
            self._db_server_query(db_server, "extend a batch"),
        )
        response.check_status(204)

    def delete_batch(self, db: str, batch_id: str, db_server: str | None = None) -> None:
        response = self._delete(
            self._replication_url(db, "batch", escape(batch_id)),
            self._db_server_query(db_server, "delete a batch"),
        )
        response.check_status(204)

    def inventory(
        self,
        db: str,
        batch_id: str,
        include_system: bool = False,
        db_server: str | None = None,
        collection: str | None = None,
        global_: bool = False,
    ) -> dict[str, Any]:
        if not batch_id:
            raise InvalidArgumentError("batch_id must be specified when querying inventory")
        response = self._get(
            self._replication_url(db, "inventory"),
            optional_query("includeSystem", include_system),
            optional_query("global", global_),
            optional_query("batchId", batch_id),
            optional_query("collection", collection),
            self._db_server_query(db_server, "query the inventory"),
        )
        return dict(response.expect(200) or {})

    # ------------------------------------------------------------------
    # Logger
    # ------------------------------------------------------------------
    def logger_state(self, db: str, db_server: str | None = None) -> LoggerState:
        response = self._get(
            self._replication_url(db, "logger-state"), self._db_server_query(db_server, "read the logger state")
        )
        return LoggerState.model_validate(response.expect(200))

    def logger_first_tick(self, db: str) -> str:
        data = self._get(self._replication_url(db, "logger-first-tick")).expect(200) or {}
        return str(data.get("firstTick", ""))

    def logger_tick_ranges(self, db: str) -> list[dict[str, Any]]:
        return list(self._get(self._replication_url(db, "logger-tick-ranges")).expect(200) or [])

    # ------------------------------------------------------------------
    # Applier
    # ------------------------------------------------------------------
    def applier_config(self, db: str, global_: bool | None = None) -> ApplierConfig:
        response = self._get(self._replication_url(db, "applier-config"), optional_query("global", global_))
        return ApplierConfig.model_validate(response.expect(200))

    def set_applier_config(
        self, db: str, config: ApplierConfig | dict[str, Any], global_: bool | None = None
    ) -> ApplierConfig:
        response = self._put(
            self._replication_url(db, "applier-config"), dump_options(config), optional_query("global", global_)
        )
        return ApplierConfig.model_validate(response.expect(200))

    def applier_state(self, db: str, global_: bool | None = None) -> ApplierState:
        response = self._get(self._replication_url(db, "applier-state"), optional_query("global", global_))
        return ApplierState.model_validate(response.expect(200))

    def _applier_action(self, db: str, action: str, *modifiers: RequestModifier | None) -> ApplierState:
        if self.server_role() == ServerRole.COORDINATOR:
            raise InvalidArgumentError(f"replication {action} is not supported on coordinators")
        response = self._put(self._replication_url(db, action), None, *modifiers)
        return ApplierState.model_validate(response.expect(200))

    def start_applier(self, db: str, from_tick: str | None = None, global_: bool | None = None) -> ApplierState:
        return self._applier_action(
            db, "applier-start", optional_query("global", global_), optional_query("from", from_tick or None)
        )

    def stop_applier(self, db: str, global_: bool | None = None) -> ApplierState:
        return self._applier_action(db, "applier-stop", optional_query("global", global_))

    # ------------------------------------------------------------------
    # Server id and write-ahead log
    # ------------------------------------------------------------------
    def replication_server_id(self, db: str = "_system") -> str:
        data = self._get(self._replication_url(db, "server-id")).expect(200) or {}
        return str(data.get("serverId", ""))

    def wal_range(self, db: str = "_system") -> WALRange:
        return WALRange.model_validate(self._get(new_url("_db", escape(db), "_api", "wal", "range")).expect(200))

    def wal_last_tick(self, db: str = "_system") -> dict[str, Any]:
        return dict(self._get(new_url("_db", escape(db), "_api", "wal", "lastTick")).expect(200) or {})


__all__ = [
    "ApplierConfig",
    "ApplierState",
    "ClientReplication",
    "LoggerState",
    "ReplicationBatch",
    "WALRange",
]
