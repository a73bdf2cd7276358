"""
ArangoDB Resource API
=====================

Typed calls for server wide resources (``ArangoClient``) and for everything
scoped to one database (``Database`` and the collections, graphs, views,
analyzers and transactions reached from it).
"""

from .analyzers import Analyzer, AnalyzerDefinition
from .async_jobs import AsyncJobDeleteType, AsyncJobStatus
from .backup import BackupCreateOptions, TransferMonitor, TransferType
from .base import RequestOptions
from .client import ArangoClient
from .cluster import ClusterHealth, DBServerMaintenanceMode, RebalanceMove, RebalanceOptions
from .collection import Collection, CollectionType, CreateCollectionProperties
from .cursor import Cursor
from .database import Database, DatabaseInfo, Transaction
from .databases import CreateDatabaseOptions
from .documents import (
    DocumentCreateOptions,
    DocumentDeleteOptions,
    DocumentReadOptions,
    DocumentReplaceOptions,
    DocumentUpdateOptions,
    ImportOptions,
    OverwriteMode,
)
from .graph import EdgeCollection, EdgeDefinition, Graph, GraphDefinition, VertexCollection
from .indexes import IndexType
from .meta import DocumentMeta
from .models import ArangoModel
from .query import QueryOptions
from .server_info import ServerRole, Version, VersionInfo
from .tasks import Task, TaskOptions
from .transaction import BeginTransactionOptions, TransactionCollections, TransactionStatus
from .users import Grant, User, UserOptions
from .views import ArangoSearchView, SearchAliasView, View, ViewType

__all__ = [
    "Analyzer",
    "AnalyzerDefinition",
    "ArangoClient",
    "ArangoModel",
    "ArangoSearchView",
    "AsyncJobDeleteType",
    "AsyncJobStatus",
    "BackupCreateOptions",
    "BeginTransactionOptions",
    "ClusterHealth",
    "Collection",
    "CollectionType",
    "CreateCollectionProperties",
    "CreateDatabaseOptions",
    "Cursor",
    "DBServerMaintenanceMode",
    "Database",
    "DatabaseInfo",
    "DocumentCreateOptions",
    "DocumentDeleteOptions",
    "DocumentMeta",
    "DocumentReadOptions",
    "DocumentReplaceOptions",
    "DocumentUpdateOptions",
    "EdgeCollection",
    "EdgeDefinition",
    "Grant",
    "Graph",
    "GraphDefinition",
    "ImportOptions",
    "IndexType",
    "OverwriteMode",
    "QueryOptions",
    "RebalanceMove",
    "RebalanceOptions",
    "RequestOptions",
    "SearchAliasView",
    "ServerRole",
    "Task",
    "TaskOptions",
    "Transaction",
    "TransactionCollections",
    "TransactionStatus",
    "TransferMonitor",
    "TransferType",
    "User",
    "UserOptions",
    "Version",
    "VersionInfo",
    "VertexCollection",
    "View",
    "ViewType",
]
