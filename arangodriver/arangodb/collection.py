"""Collections: properties, maintenance, and the database level collection API."""

from __future__ import annotations

from enum import IntEnum
from typing import TYPE_CHECKING, Any

from pydantic import Field

from arangodriver.arangodb.base import ApiBase, optional_query
from arangodriver.arangodb.documents import CollectionDocuments
from arangodriver.arangodb.indexes import CollectionIndexes
from arangodriver.arangodb.models import ArangoModel, dump_options
from arangodriver.connection.call import escape, with_query
from arangodriver.errors import ArangoError, InvalidArgumentError, is_not_found

if TYPE_CHECKING:
    from arangodriver.arangodb.database import Database

REPLICATION_FACTOR_SATELLITE = "satellite"


class CollectionType(IntEnum):
    DOCUMENT = 2
    EDGE = 3


class CollectionStatus(IntEnum):
    NEW_BORN = 1
    UNLOADED = 2
    LOADED = 3
    UNLOADING = 4
    DELETED = 5
    LOADING = 6


class KeyOptions(ArangoModel):
    type: str | None = None  # "traditional", "autoincrement", "uuid", "padded"
    allow_user_keys: bool | None = None
    increment: int | None = None
    offset: int | None = None


class ComputedValue(ArangoModel):
    name: str
    expression: str
    compute_on: list[str] | None = None
    overwrite: bool = False
    keep_null: bool | None = None
    fail_on_warning: bool | None = None


class CollectionSchema(ArangoModel):
    rule: dict[str, Any]
    level: str = "strict"  # "none", "new", "moderate", "strict"
    message: str | None = None


class CollectionInfo(ArangoModel):
    id: str | None = None
    name: str | None = None
    status: int | None = None
    type: int | None = None
    is_system: bool | None = None
    globally_unique_id: str | None = None


class CollectionProperties(CollectionInfo):
    cache_enabled: bool | None = None
    key_options: KeyOptions | None = None
    number_of_shards: int | None = None
    sharding_strategy: str | None = None
    shard_keys: list[str] | None = None
    replication_factor: int | str | None = None
    write_concern: int | None = None
    wait_for_sync: bool | None = None
    smart_join_attribute: str | None = None
    distribute_shards_like: str | None = None
    sync_by_revision: bool | None = None
    collection_schema: CollectionSchema | None = Field(default=None, alias="schema")
    computed_values: list[ComputedValue] | None = None

    def is_satellite(self) -> bool:
        return self.replication_factor == REPLICATION_FACTOR_SATELLITE


class CollectionShards(CollectionProperties):
    shards: dict[str, list[str]] | None = None
    status_string: str | None = None


class CreateCollectionProperties(ArangoModel):
    type: CollectionType | None = None
    wait_for_sync: bool | None = None
    is_system: bool | None = None
    cache_enabled: bool | None = None
    key_options: KeyOptions | None = None
    number_of_shards: int | None = None
    sharding_strategy: str | None = None
    shard_keys: list[str] | None = None
    replication_factor: int | str | None = None
    write_concern: int | None = None
    distribute_shards_like: str | None = None
    smart_join_attribute: str | None = None
    smart_graph_attribute: str | None = None
    is_smart: bool | None = None
    is_disjoint: bool | None = None
    sync_by_revision: bool | None = None
    collection_schema: CollectionSchema | None = Field(default=None, alias="schema")
    computed_values: list[ComputedValue] | None = None


class SetCollectionPropertiesOptions(ArangoModel):
    wait_for_sync: bool | None = None
    cache_enabled: bool | None = None
    replication_factor: int | str | None = None
    write_concern: int | None = None
    collection_schema: CollectionSchema | None = Field(default=None, alias="schema")
    computed_values: list[ComputedValue] | None = None


class CollectionChecksum(ArangoModel):
    checksum: str
    revision: str | None = None


class Collection(CollectionDocuments, CollectionIndexes, ApiBase):
    """A collection inside a database.

    Calls inherit the request modifiers of the database they were obtained
    from, so a collection taken from a stream transaction takes part in it.
    """

    def __init__(self, db: Database, name: str) -> None:
        self._db = db
        self.name = name
        self._connection = db.connection
        self._modifiers = db._modifiers
        self._db_name = db.name

    def __repr__(self) -> str:
        return f"<Collection {self._db_name}/{self.name}>"

    @property
    def database(self) -> Database:
        return self._db

    def _collection_url(self, *parts: str) -> str:
        return self._url("_api", "collection", escape(self.name), *parts)

    def info(self) -> CollectionInfo:
        return CollectionInfo.model_validate(self._get(self._collection_url()).expect(200))

    def properties(self) -> CollectionProperties:
        return CollectionProperties.model_validate(self._get(self._collection_url("properties")).expect(200))

    def set_properties(self, options: SetCollectionPropertiesOptions | dict[str, Any]) -> CollectionProperties:
        response = self._put(self._collection_url("properties"), dump_options(options))
        return CollectionProperties.model_validate(response.expect(200))

    def count(self) -> int:
        data = self._get(self._collection_url("count")).expect(200) or {}
        return int(data.get("count", 0))

    def figures(self, details: bool = False) -> dict[str, Any]:
        response = self._get(self._collection_url("figures"), with_query("details", details))
        return (response.expect(200) or {}).get("figures", {})

    def revision(self) -> str:
        return (self._get(self._collection_url("revision")).expect(200) or {}).get("revision", "")

    def checksum(self, with_revisions: bool = False, with_data: bool = False) -> CollectionChecksum:
        response = self._get(
            self._collection_url("checksum"),
            with_query("withRevisions", with_revisions),
            with_query("withData", with_data),
        )
        return CollectionChecksum.model_validate(response.expect(200))

    def shards(self, details: bool = False) -> CollectionShards:
        response = self._get(self._collection_url("shards"), with_query("details", details))
        return CollectionShards.model_validate(response.expect(200))

    def truncate(self) -> None:
        self._put(self._collection_url("truncate")).check_status(200)

    def compact(self) -> CollectionInfo:
        return CollectionInfo.model_validate(self._put(self._collection_url("compact")).expect(200))

    def load_indexes_into_memory(self) -> bool:
        data = self._put(self._collection_url("loadIndexesIntoMemory")).expect(200) or {}
        return bool(data.get("result", False))

    def rename(self, new_name: str) -> Collection:
        """Rename the collection (single server only); returns the renamed collection."""
        if not new_name:
            raise InvalidArgumentError("new collection name is empty")
        self._put(self._collection_url("rename"), {"name": new_name}).check_status(200)
        return Collection(self._db, new_name)

    def remove(self, is_system: bool = False) -> None:
        response = self._delete(self._collection_url(), optional_query("isSystem", True if is_system else None))
        response.check_status(200)


class DatabaseCollections(ApiBase):
    """Collection management, mixed into :class:`~arangodriver.arangodb.database.Database`."""

    def collection(self, name: str) -> Collection:
        """Return the collection ``name``, raising a 404 ArangoError when it does not exist."""
        self._get(self._url("_api", "collection", escape(name))).check_status(200)
        return Collection(self, name)  # type: ignore[arg-type]

    def collection_exists(self, name: str) -> bool:
        try:
            self.collection(name)
        except ArangoError as e:
            if is_not_found(e):
                return False
            raise
        return True

    def collections(self, exclude_system: bool = False) -> list[Collection]:
        response = self._get(self._url("_api", "collection"), with_query("excludeSystem", exclude_system))
        data = response.expect(200) or {}
        return [Collection(self, info["name"]) for info in data.get("result", [])]  # type: ignore[arg-type]

    def collection_infos(self, exclude_system: bool = False) -> list[CollectionInfo]:
        response = self._get(self._url("_api", "collection"), with_query("excludeSystem", exclude_system))
        return [CollectionInfo.model_validate(i) for i in (response.expect(200) or {}).get("result", [])]

    def create_collection(
        self,
        name: str,
        properties: CreateCollectionProperties | dict[str, Any] | None = None,
        enforce_replication_factor: bool | None = None,
        wait_for_sync_replication: bool | None = None,
    ) -> Collection:
        if not name:
            raise InvalidArgumentError("collection name is empty")
        body = {**dump_options(properties), "name": name}
        response = self._post(
            self._url("_api", "collection"),
            body,
            optional_query("enforceReplicationFactor", enforce_replication_factor),
            optional_query("waitForSyncReplication", wait_for_sync_replication),
        )
        response.check_status(200)
        return Collection(self, name)  # type: ignore[arg-type]


__all__ = [
    "Collection",
    "CollectionChecksum",
    "CollectionInfo",
    "CollectionProperties",
    "CollectionSchema",
    "CollectionShards",
    "CollectionStatus",
    "CollectionType",
    "ComputedValue",
    "CreateCollectionProperties",
    "DatabaseCollections",
    "KeyOptions",
    "REPLICATION_FACTOR_SATELLITE",
    "SetCollectionPropertiesOptions",
]
