"""
Client Configuration
====================

Connection settings for ``ArangoClient`` loaded from (highest priority first)
explicit overrides, ``ARANGO_*`` environment variables and a YAML file.

Example YAML:

    endpoints:
      - http://db1:8529
      - http://db2:8529
    database: analytics
    username: root
    password: secret
    retries_on_503: 3
"""

import os
from pathlib import Path
from typing import Any, Literal
from urllib.parse import urlsplit

import structlog
from pydantic import Field

from arangodriver.arangodb.client import ArangoClient
from arangodriver.connection.auth import BasicAuthentication, JWTAuthentication, bearer_authentication
from arangodriver.connection.base import Connection
from arangodriver.connection.endpoints import fixup_endpoint_url_scheme
from arangodriver.connection.http import DEFAULT_USER_AGENT, JSON_CONTENT_TYPE, ConnectionConfig, HttpConnection
from arangodriver.connection.wrappers import retry_on_503

from .config_base import BaseConfig, ConfigValidationError

logger = structlog.get_logger(__name__)

SUPPORTED_SCHEMES = ("http", "https")

# Environment variable -> (field, converter)
ENV_VARS: dict[str, tuple[str, Any]] = {
    "ARANGO_ENDPOINTS": ("endpoints", lambda v: [e.strip() for e in v.split(",") if e.strip()]),
    "ARANGO_DATABASE": ("database", str),
    "ARANGO_USERNAME": ("username", str),
    "ARANGO_PASSWORD": ("password", str),
    "ARANGO_JWT": ("jwt", str),
    "ARANGO_SOCKET": ("socket_path", str),
    "ARANGO_AUTH": ("auth_type", lambda v: v.strip().lower()),
    "ARANGO_CONNECT_TIMEOUT": ("connect_timeout", float),
    "ARANGO_READ_TIMEOUT": ("read_timeout", float),
    "ARANGO_WRITE_TIMEOUT": ("write_timeout", float),
    "ARANGO_RETRIES": ("retries_on_503", int),
    "ARANGO_USER_AGENT": ("user_agent", str),
}


class ClientConfig(BaseConfig):
    """
    Settings needed to reach an ArangoDB deployment.

    Covers endpoints or a Unix socket, authentication, timeouts and
    the 503 retry policy.
    """

    endpoints: list[str] = Field(
        default_factory=lambda: ["http://localhost:8529"],
        description="Server endpoints, used round robin"
    )

    database: str = Field(
        default="_system",
        min_length=1,
        description="Database used by commands that need one"
    )

    username: str = Field(
        default="root",
        description="Database username"
    )

    password: str = Field(
        default="",
        exclude=True,  # Never serialized
        description="Database password"
    )

    jwt: str | None = Field(
        default=None,
        exclude=True,
        description="Pre-issued JWT, sent as a bearer token"
    )

    auth_type: Literal["basic", "jwt", "none"] = Field(
        default="basic",
        description="Authentication scheme"
    )

    socket_path: str | None = Field(
        default=None,
        description="Unix domain socket; endpoints then only provide the Host header"
    )

    http2: bool = Field(default=True, description="Negotiate HTTP/2 where possible")

    verify: bool | str = Field(
        default=True,
        description="TLS verification: a flag or a CA bundle path"
    )

    connect_timeout: float = Field(default=5.0, description="Connect timeout in seconds")
    read_timeout: float = Field(default=30.0, description="Read timeout in seconds")
    write_timeout: float = Field(default=30.0, description="Write timeout in seconds")

    retries_on_503: int = Field(
        default=0,
        ge=0,
        description="Retries for requests answered with 503 Service Unavailable"
    )

    content_type: str = Field(default=JSON_CONTENT_TYPE, description="Request body content type")

    user_agent: str = Field(default=DEFAULT_USER_AGENT, description="User-Agent header sent with every request")

    def validate_semantics(self) -> list[str]:
        """
        Validate client configuration semantics.

        Returns:
            List of validation errors
        """
        errors = []

        if not self.endpoints:
            errors.append("At least one endpoint is required")
        for endpoint in self.endpoints:
            scheme = urlsplit(fixup_endpoint_url_scheme(endpoint)).scheme
            if scheme not in SUPPORTED_SCHEMES:
                errors.append(f"Unsupported endpoint scheme in {endpoint!r}")

        if self.auth_type != "none" and not self.jwt and not self.username:
            errors.append(f"Username is required for {self.auth_type} authentication")
        if self.auth_type == "jwt" and not self.jwt and not self.password:
            errors.append("Password is required to obtain a JWT")

        for name in ("connect_timeout", "read_timeout", "write_timeout"):
            if getattr(self, name) <= 0:
                errors.append(f"{name} must be positive, got {getattr(self, name)}")

        return errors

    def authentication(self):
        """httpx auth matching ``auth_type``, or None."""
        if self.auth_type == "none":
            return None
        if self.jwt:
            return bearer_authentication(self.jwt)
        if self.auth_type == "jwt":
            return JWTAuthentication(self.username, self.password)
        return BasicAuthentication(self.username, self.password)

    def connection_config(self) -> ConnectionConfig:
        return ConnectionConfig(
            endpoints=list(self.endpoints),
            socket_path=self.socket_path,
            auth=self.authentication(),
            connect_timeout=self.connect_timeout,
            read_timeout=self.read_timeout,
            write_timeout=self.write_timeout,
            http2=self.http2,
            verify=self.verify,
            content_type=self.content_type,
            user_agent=self.user_agent,
        )


def _from_environment() -> dict[str, Any]:
    values: dict[str, Any] = {}
    for var, (field_name, convert) in ENV_VARS.items():
        raw = os.environ.get(var)
        if raw is None or raw == "":
            continue
        try:
            values[field_name] = convert(raw)
        except ValueError as e:
            raise ConfigValidationError(f"Invalid value for {var}", [str(e)]) from e
    return values


def load_config(path: str | Path | None = None, **overrides) -> ClientConfig:
    """
    Load client configuration.

    Args:
        path: Optional YAML file with ClientConfig fields
        **overrides: Field values taking precedence over everything else

    Returns:
        Validated ClientConfig

    Raises:
        ConfigError: If the file cannot be read or is not a mapping
        ConfigValidationError: If the merged configuration is invalid
    """
    data: dict[str, Any] = {}
    if path is not None:
        data.update(ClientConfig.read_file(path))
        data.setdefault("source", str(path))
    data.update(_from_environment())
    data.update({k: v for k, v in overrides.items() if v is not None})

    config = ClientConfig.from_dict(data)
    logger.debug(
        "client_config_loaded",
        source=config.source,
        endpoints=config.endpoints,
        auth_type=config.auth_type,
    )
    return config


def build_connection(config: ClientConfig) -> Connection:
    """Build an HTTP connection, wrapped in a 503 retry when configured."""
    connection: Connection = HttpConnection(config.connection_config())
    if config.retries_on_503 > 0:
        connection = retry_on_503(connection, config.retries_on_503)
    return connection


def new_client(config: ClientConfig | None = None) -> ArangoClient:
    """Create an ArangoClient from ``config`` (loaded from the environment when omitted)."""
    return ArangoClient(build_connection(config or load_config()))
