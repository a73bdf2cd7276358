"""Server administration: mode, availability, status, logs, license, metrics and shutdown."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar

from pydantic import Field

from arangodriver.arangodb.base import ApiBase, RequestOptions, optional_query
from arangodriver.arangodb.models import ArangoModel
from arangodriver.connection.call import escape, new_url, with_header
from arangodriver.connection.http import PLAIN_TEXT_CONTENT_TYPE


class ServerMode(str, Enum):
    DEFAULT = "default"
    READ_ONLY = "readonly"


class ServerStatus(ArangoModel):
    server: str | None = None
    version: str | None = None
    pid: int | None = None
    license: str | None = None
    mode: str | None = None
    operation_mode: str | None = None
    foxx_api: bool | None = None
    host: str | None = None
    hostname: str | None = None
    server_info: dict[str, Any] | None = None
    coordinator: dict[str, Any] | None = None
    agency: dict[str, Any] | None = None


class LogMessage(ArangoModel):
    id: int
    topic: str | None = None
    level: str | None = None
    date: str | None = None
    message: str = ""


class LogEntries(ArangoModel):
    total: int = 0
    messages: list[LogMessage] = Field(default_factory=list)


class License(ArangoModel):
    features: dict[str, Any] | None = None
    license: str | None = None
    status: str | None = None  # "good", "expiring", "expired", "read-only"
    version: int | None = None
    hash: str | None = None


@dataclass
class LogEntriesOptions(RequestOptions):
    """Filters for :meth:`ClientAdmin.logs`; ``upto`` and ``level`` are exclusive."""

    upto: str | None = None
    level: str | None = None
    start: int | None = None
    size: int | None = None
    offset: int | None = None
    search: str | None = None
    sort: str | None = None
    server_id: str | None = None

    _queries: ClassVar[dict[str, str]] = {
        "upto": "upto",
        "level": "level",
        "start": "start",
        "size": "size",
        "offset": "offset",
        "search": "search",
        "sort": "sort",
        "server_id": "serverId",
    }


class ClientAdmin(ApiBase):
    """Administration calls, mixed into :class:`~arangodriver.arangodb.client.ArangoClient`."""

    def server_mode(self) -> ServerMode:
        data = self._get(new_url("_admin", "server", "mode")).expect(200) or {}
        return ServerMode(data.get("mode", ServerMode.DEFAULT.value))

    def set_server_mode(self, mode: ServerMode | str) -> None:
        body = {"mode": ServerMode(mode).value}
        self._put(new_url("_admin", "server", "mode"), body).check_status(200)

    def check_availability(self, endpoint: str | None = None) -> None:
        """Raise unless the server at ``endpoint`` (default: the next one) is available.

        A server in read-only mode or a passive follower answers 503.
        """
        self._get(new_url("_admin", "server", "availability"), endpoint=endpoint).check_status(200)

    def system_time(self, db: str = "_system") -> float:
        data = self._get(new_url("_db", escape(db), "_admin", "time")).expect(200) or {}
        return float(data.get("time", 0.0))

    def server_status(self, db: str = "_system") -> ServerStatus:
        return ServerStatus.model_validate(self._get(new_url("_db", escape(db), "_admin", "status")).expect(200))

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    def log_levels(self, server_id: str | None = None) -> dict[str, str]:
        response = self._get(new_url("_admin", "log", "level"), optional_query("serverId", server_id))
        return dict(response.expect(200) or {})

    def set_log_levels(self, levels: dict[str, str], server_id: str | None = None) -> dict[str, str]:
        """Change log levels per topic (``{"queries": "debug"}``); returns the new levels."""
        response = self._put(new_url("_admin", "log", "level"), levels, optional_query("serverId", server_id))
        return dict(response.expect(200) or {})

    def reset_log_levels(self, server_id: str | None = None) -> dict[str, str]:
        response = self._delete(new_url("_admin", "log", "level"), optional_query("serverId", server_id))
        return dict(response.expect(200) or {})

    def logs(self, options: LogEntriesOptions | None = None) -> LogEntries:
        response = self._get(new_url("_admin", "log", "entries"), options)
        return LogEntries.model_validate(response.expect(200))

    # ------------------------------------------------------------------
    # License
    # ------------------------------------------------------------------
    def license(self) -> License:
        return License.model_validate(self._get(new_url("_admin", "license")).expect(200))

    def set_license(self, license_key: str, force: bool = False) -> None:
        response = self._put(
            new_url("_admin", "license"), license_key, optional_query("force", True if force else None)
        )
        response.check_status(201)

    # ------------------------------------------------------------------
    # Metrics and shutdown
    # ------------------------------------------------------------------
    def metrics(self, db: str = "_system", server_id: str | None = None) -> bytes:
        """Prometheus text exposition of the server metrics."""
        response = self._get(
            new_url("_db", escape(db), "_admin", "metrics", "v2"),
            optional_query("serverId", server_id),
            with_header("accept", PLAIN_TEXT_CONTENT_TYPE),
        )
        response.check_status(200)
        return response.content

    def shutdown(self, soft: bool = False) -> None:
        """Shut the server down; ``soft`` waits for ongoing work (coordinators only)."""
        response = self._delete(new_url("_admin", "shutdown"), optional_query("soft", True if soft else None))
        response.check_status(200)

    def compact_databases(self, change_level: bool = False, compact_bottom_most_level: bool = False) -> dict[str, Any]:
        body = {"changeLevel": change_level, "compactBottomMostLevel": compact_bottom_most_level}
        return dict(self._put(new_url("_admin", "compact"), body).expect(200) or {})


__all__ = [
    "ClientAdmin",
    "License",
    "LogEntries",
    "LogEntriesOptions",
    "LogMessage",
    "ServerMode",
    "ServerStatus",
]
