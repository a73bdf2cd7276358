"""Index management for a collection."""

from __future__ import annotations

from enum import Enum
from typing import Any

from arangodriver.arangodb.base import ApiBase
from arangodriver.arangodb.models import ArangoModel, dump_options
from arangodriver.connection.call import escape, with_query
from arangodriver.errors import ArangoError, InvalidArgumentError, is_not_found


class IndexType(str, Enum):
    PRIMARY = "primary"
    EDGE = "edge"
    PERSISTENT = "persistent"
    GEO = "geo"
    TTL = "ttl"
    ZKD = "zkd"
    MDI = "mdi"
    MDI_PREFIXED = "mdi-prefixed"
    INVERTED = "inverted"
    VECTOR = "vector"


class IndexResponse(ArangoModel):
    """Index definition as returned by the server; type specific keys are kept as extras."""

    id: str | None = None
    name: str | None = None
    type: str | None = None
    fields: list[Any] | None = None
    unique: bool | None = None
    sparse: bool | None = None
    is_newly_created: bool | None = None
    estimates: bool | None = None
    selectivity_estimate: float | None = None
    deduplicate: bool | None = None
    cache_enabled: bool | None = None
    stored_values: list[Any] | None = None
    expire_after: int | None = None
    geo_json: bool | None = None
    legacy_polygons: bool | None = None
    in_background: bool | None = None


class PersistentIndexOptions(ArangoModel):
    name: str | None = None
    unique: bool | None = None
    sparse: bool | None = None
    deduplicate: bool | None = None
    estimates: bool | None = None
    cache_enabled: bool | None = None
    stored_values: list[str] | None = None
    in_background: bool | None = None


class GeoIndexOptions(ArangoModel):
    name: str | None = None
    geo_json: bool | None = None
    legacy_polygons: bool | None = None
    in_background: bool | None = None


class TTLIndexOptions(ArangoModel):
    name: str | None = None
    in_background: bool | None = None


class MDIIndexOptions(ArangoModel):
    name: str | None = None
    field_value_types: str = "double"
    unique: bool | None = None
    sparse: bool | None = None
    estimates: bool | None = None
    stored_values: list[str] | None = None
    prefix_fields: list[str] | None = None
    in_background: bool | None = None


class InvertedIndexOptions(ArangoModel):
    """Options of an inverted index; ``fields`` entries are names or field objects."""

    name: str | None = None
    fields: list[str | dict[str, Any]] | None = None
    analyzer: str | None = None
    features: list[str] | None = None
    include_all_fields: bool | None = None
    track_list_positions: bool | None = None
    search_field: bool | None = None
    primary_sort: dict[str, Any] | None = None
    stored_values: list[dict[str, Any]] | None = None
    parallelism: int | None = None
    cleanup_interval_step: int | None = None
    commit_interval_msec: int | None = None
    consolidation_interval_msec: int | None = None
    consolidation_policy: dict[str, Any] | None = None
    in_background: bool | None = None


class CollectionIndexes(ApiBase):
    """Index operations, mixed into :class:`~arangodriver.arangodb.collection.Collection`.

    ``ensure_*`` calls are idempotent: they return ``(index, created)`` where
    ``created`` is False when an identical index already existed.
    """

    name: str

    def indexes(self) -> list[IndexResponse]:
        response = self._get(self._url("_api", "index"), with_query("collection", self.name))
        data = response.expect(200) or {}
        return [IndexResponse.model_validate(i) for i in data.get("indexes", [])]

    def index(self, name: str) -> IndexResponse:
        response = self._get(self._url("_api", "index", escape(self.name), escape(name)))
        return IndexResponse.model_validate(response.expect(200))

    def index_exists(self, name: str) -> bool:
        try:
            self.index(name)
        except ArangoError as e:
            if is_not_found(e):
                return False
            raise
        return True

    def _ensure_index(self, body: dict[str, Any]) -> tuple[IndexResponse, bool]:
        response = self._post(self._url("_api", "index"), body, with_query("collection", self.name))
        data = response.expect(200, 201)
        return IndexResponse.model_validate(data), response.code == 201

    def ensure_persistent_index(
        self, fields: list[str], options: PersistentIndexOptions | dict[str, Any] | None = None
    ) -> tuple[IndexResponse, bool]:
        if not fields:
            raise InvalidArgumentError("persistent index needs at least one field")
        return self._ensure_index({"type": IndexType.PERSISTENT.value, "fields": fields, **dump_options(options)})

    def ensure_geo_index(
        self, fields: list[str], options: GeoIndexOptions | dict[str, Any] | None = None
    ) -> tuple[IndexResponse, bool]:
        if not 1 <= len(fields) <= 2:
            raise InvalidArgumentError("geo index needs one or two fields")
        return self._ensure_index({"type": IndexType.GEO.value, "fields": fields, **dump_options(options)})

    def ensure_ttl_index(
        self, fields: list[str], expire_after: int, options: TTLIndexOptions | dict[str, Any] | None = None
    ) -> tuple[IndexResponse, bool]:
        if len(fields) != 1:
            raise InvalidArgumentError("ttl index needs exactly one field")
        body = {"type": IndexType.TTL.value, "fields": fields, "expireAfter": expire_after}
        return self._ensure_index({**body, **dump_options(options)})

    def ensure_mdi_index(
        self, fields: list[str], options: MDIIndexOptions | dict[str, Any] | None = None
    ) -> tuple[IndexResponse, bool]:
        """Multi-dimensional index; becomes ``mdi-prefixed`` when prefix fields are given."""
        body = dump_options(options or MDIIndexOptions())
        body.setdefault("fieldValueTypes", "double")
        index_type = IndexType.MDI_PREFIXED if body.get("prefixFields") else IndexType.MDI
        return self._ensure_index({"type": index_type.value, "fields": fields, **body})

    def ensure_zkd_index(
        self, fields: list[str], options: MDIIndexOptions | dict[str, Any] | None = None
    ) -> tuple[IndexResponse, bool]:
        body = dump_options(options or MDIIndexOptions())
        body.setdefault("fieldValueTypes", "double")
        return self._ensure_index({"type": IndexType.ZKD.value, "fields": fields, **body})

    def ensure_inverted_index(
        self, options: InvertedIndexOptions | dict[str, Any]
    ) -> tuple[IndexResponse, bool]:
        body = dump_options(options)
        if not body.get("fields"):
            raise InvalidArgumentError("inverted index needs at least one field")
        return self._ensure_index({"type": IndexType.INVERTED.value, **body})

    def delete_index(self, name: str) -> str:
        """Drop an index by name; returns the dropped index id."""
        response = self._delete(self._url("_api", "index", escape(self.name), escape(name)))
        return (response.expect(200) or {}).get("id", "")

    def delete_index_by_id(self, index_id: str) -> str:
        """Drop an index by its full ID (e.g. "collection/12345")."""
        collection, _, ident = index_id.partition("/")
        if not ident:
            collection, ident = self.name, collection
        response = self._delete(self._url("_api", "index", escape(collection), escape(ident)))
        return (response.expect(200) or {}).get("id", "")


__all__ = [
    "CollectionIndexes",
    "GeoIndexOptions",
    "IndexResponse",
    "IndexType",
    "InvertedIndexOptions",
    "MDIIndexOptions",
    "PersistentIndexOptions",
    "TTLIndexOptions",
]
