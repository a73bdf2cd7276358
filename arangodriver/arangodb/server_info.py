"""Server version, role and cluster endpoint discovery."""

from __future__ import annotations

import re
from enum import Enum
from functools import total_ordering
from typing import Any

from pydantic import Field, field_validator

from arangodriver.arangodb.base import ApiBase
from arangodriver.arangodb.models import ArangoModel
from arangodriver.connection.call import with_query
from arangodriver.connection.endpoints import RoundRobinEndpoints
from arangodriver.errors import ArangoClientError

_VERSION_RE = re.compile(r"^(\d+)(?:\.(\d+))?(?:\.(\d+))?(.*)$")


@total_ordering
class Version:
    """Comparable ``major.minor.sub`` server version; suffixes such as ``-rc.1`` are kept but ignored."""

    def __init__(self, value: str) -> None:
        self.raw = value
        match = _VERSION_RE.match(value.strip()) if value else None
        if match is None:
            self.major, self.minor, self.sub, self.suffix = 0, 0, 0, ""
        else:
            self.major = int(match.group(1))
            self.minor = int(match.group(2) or 0)
            self.sub = int(match.group(3) or 0)
            self.suffix = match.group(4) or ""

    def __repr__(self) -> str:
        return f"Version({self.raw!r})"

    def __str__(self) -> str:
        return self.raw

    def _key(self) -> tuple[int, int, int]:
        return self.major, self.minor, self.sub

    def __eq__(self, other: object) -> bool:
        if isinstance(other, str):
            other = Version(other)
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() == other._key()

    def __lt__(self, other: Version | str) -> bool:
        if isinstance(other, str):
            other = Version(other)
        return self._key() < other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def major_minor(self) -> str:
        return f"{self.major}.{self.minor}"


class VersionInfo(ArangoModel):
    server: str | None = None
    version: str = ""
    license: str | None = None
    details: dict[str, Any] = Field(default_factory=dict)

    @field_validator("details", mode="before")
    @classmethod
    def _none_details(cls, value: Any) -> Any:
        return value or {}

    @property
    def parsed_version(self) -> Version:
        return Version(self.version)

    def major_minor(self) -> str:
        return self.parsed_version.major_minor()

    def is_enterprise(self) -> bool:
        return self.license == "enterprise"

    def __str__(self) -> str:
        result = f"{self.server}, version {self.version}, license {self.license}"
        if self.details:
            lines = sorted(f"{k}: {v}" for k, v in self.details.items())
            result += "\n" + "\n".join(lines)
        return result


class ServerRole(str, Enum):
    SINGLE = "Single"
    SINGLE_ACTIVE = "SingleActive"
    SINGLE_PASSIVE = "SinglePassive"
    DBSERVER = "DBServer"
    COORDINATOR = "Coordinator"
    AGENT = "Agent"
    UNDEFINED = "Undefined"


class ClientServerInfo(ApiBase):
    """Server information, mixed into :class:`~arangodriver.arangodb.client.ArangoClient`."""

    def version(self, details: bool = False) -> VersionInfo:
        response = self._get(self._url("_api", "version"), with_query("details", details) if details else None)
        return VersionInfo.model_validate(response.expect(200))

    def server_role(self) -> ServerRole:
        """Role of the server this connection talks to.

        A single server in resilient (active failover) mode is reported as
        active when it answers availability checks and as passive otherwise.
        """
        data = self._get(self._url("_admin", "server", "role")).expect(200) or {}
        role = data.get("role")
        if role == "SINGLE":
            if data.get("mode") != "resilient":
                return ServerRole.SINGLE
            availability = self._get(self._url("_admin", "server", "availability"))
            if availability.code == 200:
                return ServerRole.SINGLE_ACTIVE
            if availability.code == 503:
                return ServerRole.SINGLE_PASSIVE
            raise availability.as_arango_error()
        return {
            "PRIMARY": ServerRole.DBSERVER,
            "COORDINATOR": ServerRole.COORDINATOR,
            "AGENT": ServerRole.AGENT,
        }.get(role, ServerRole.UNDEFINED)

    def server_id(self) -> str:
        """ID of the server (cluster deployments only)."""
        data = self._get(self._url("_admin", "server", "id")).expect(200) or {}
        return data.get("id", "")

    def cluster_endpoints(self) -> list[str]:
        """Endpoints of all coordinators in the cluster."""
        data = self._get(self._url("_api", "cluster", "endpoints")).expect(200) or {}
        return [e["endpoint"] for e in data.get("endpoints") or [] if e.get("endpoint")]

    def synchronize_endpoints(self) -> list[str]:
        """Replace the connection's endpoints with the cluster's coordinators."""
        endpoints = self.cluster_endpoints()
        if not endpoints:
            raise ArangoClientError("cluster reported no endpoints")
        self._connection.set_endpoint(RoundRobinEndpoints(endpoints))
        return self._connection.endpoint.list()


__all__ = ["ClientServerInfo", "ServerRole", "Version", "VersionInfo"]
