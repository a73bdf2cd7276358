"""
arangodriver
============

Synchronous client for the ArangoDB HTTP API.

    from arangodriver import ArangoClient, ConnectionConfig, HttpConnection

    client = ArangoClient(HttpConnection(ConnectionConfig(endpoints=["http://localhost:8529"])))
    db = client.database("_system")
    with db.query("FOR c IN @@col RETURN c", {"@col": "users"}) as cursor:
        for doc in cursor:
            print(doc)

Subpackages:
- connection: transport, endpoints, authentication, request context
- arangodb: typed resource API (client, databases, collections, graphs, ...)
- agency: agency key store, health checks and a distributed lock
- config: client settings from YAML and environment
- logging: structlog setup for applications
- cli: the arangoctl command line tool
"""

from arangodriver.arangodb import ArangoClient, Collection, Cursor, Database, Graph, Transaction
from arangodriver.connection import (
    BasicAuthentication,
    Connection,
    ConnectionConfig,
    HttpConnection,
    JWTAuthentication,
    RoundRobinEndpoints,
    async_request,
)
from arangodriver.errors import (
    ArangoClientError,
    ArangoError,
    InvalidArgumentError,
    is_conflict,
    is_not_found,
    is_precondition_failed,
)

__version__ = "0.1.0"

__all__ = [
    "ArangoClient",
    "ArangoClientError",
    "ArangoError",
    "BasicAuthentication",
    "Collection",
    "Connection",
    "ConnectionConfig",
    "Cursor",
    "Database",
    "Graph",
    "HttpConnection",
    "InvalidArgumentError",
    "JWTAuthentication",
    "RoundRobinEndpoints",
    "Transaction",
    "async_request",
    "is_conflict",
    "is_not_found",
    "is_precondition_failed",
]
