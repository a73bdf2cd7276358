"""ArangoSearch and search-alias views."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any

from arangodriver.arangodb.base import ApiBase
from arangodriver.arangodb.models import ArangoModel, dump_options
from arangodriver.connection.call import escape
from arangodriver.errors import ArangoError, InvalidArgumentError, is_not_found

if TYPE_CHECKING:
    from arangodriver.arangodb.database import Database


class ViewType(str, Enum):
    ARANGOSEARCH = "arangosearch"
    SEARCH_ALIAS = "search-alias"


class SearchAliasOperation(str, Enum):
    ADD = "add"
    DELETE = "del"


class ConsolidationPolicy(ArangoModel):
    type: str | None = None  # "bytes_accum" or "tier"
    threshold: float | None = None
    min_score: int | None = None
    segments_min: int | None = None
    segments_max: int | None = None
    segments_bytes_max: int | None = None
    segments_bytes_floor: int | None = None


class PrimarySortEntry(ArangoModel):
    field: str
    asc: bool | None = None


class StoredValue(ArangoModel):
    fields: list[str]
    compression: str | None = None
    cache: bool | None = None


class ArangoSearchLink(ArangoModel):
    """Per-collection (or per-field) link of an ArangoSearch view."""

    analyzers: list[str] | None = None
    fields: dict[str, ArangoSearchLink] | None = None
    nested: dict[str, ArangoSearchLink] | None = None
    include_all_fields: bool | None = None
    track_list_positions: bool | None = None
    store_values: str | None = None  # "none" or "id"
    in_background: bool | None = None
    cache: bool | None = None


class ArangoSearchViewProperties(ArangoModel):
    id: str | None = None
    name: str | None = None
    type: str | None = None
    cleanup_interval_step: int | None = None
    consolidation_interval_msec: int | None = None
    commit_interval_msec: int | None = None
    consolidation_policy: ConsolidationPolicy | None = None
    writebuffer_idle: int | None = None
    writebuffer_active: int | None = None
    writebuffer_size_max: int | None = None
    links: dict[str, ArangoSearchLink] | None = None
    optimize_top_k: list[str] | None = None
    primary_sort: list[PrimarySortEntry] | None = None
    primary_sort_compression: str | None = None
    primary_sort_cache: bool | None = None
    primary_key_cache: bool | None = None
    stored_values: list[StoredValue] | None = None


class SearchAliasIndex(ArangoModel):
    collection: str
    index: str
    operation: SearchAliasOperation | None = None


class SearchAliasViewProperties(ArangoModel):
    id: str | None = None
    name: str | None = None
    type: str | None = None
    indexes: list[SearchAliasIndex] | None = None


class View(ApiBase):
    def __init__(self, db: Database, name: str, view_type: str) -> None:
        self._db = db
        self.name = name
        self.type = view_type
        self._connection = db.connection
        self._modifiers = db._modifiers
        self._db_name = db.name

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name} ({self.type})>"

    def _view_url(self, *parts: str) -> str:
        return self._url("_api", "view", escape(self.name), *parts)

    def rename(self, new_name: str) -> None:
        """Rename the view (single server only); the instance follows the new name."""
        if not new_name:
            raise InvalidArgumentError("new view name is empty")
        self._put(self._view_url("rename"), {"name": new_name}).check_status(200)
        self.name = new_name

    def remove(self) -> None:
        self._delete(self._view_url()).check_status(200)


class ArangoSearchView(View):
    def properties(self) -> ArangoSearchViewProperties:
        return ArangoSearchViewProperties.model_validate(self._get(self._view_url("properties")).expect(200))

    def set_properties(self, properties: ArangoSearchViewProperties | dict[str, Any]) -> ArangoSearchViewProperties:
        response = self._put(self._view_url("properties"), dump_options(properties))
        return ArangoSearchViewProperties.model_validate(response.expect(200))

    def update_properties(
        self, properties: ArangoSearchViewProperties | dict[str, Any]
    ) -> ArangoSearchViewProperties:
        response = self._patch(self._view_url("properties"), dump_options(properties))
        return ArangoSearchViewProperties.model_validate(response.expect(200))


class SearchAliasView(View):
    def properties(self) -> SearchAliasViewProperties:
        return SearchAliasViewProperties.model_validate(self._get(self._view_url("properties")).expect(200))

    def replace_properties(self, properties: SearchAliasViewProperties | dict[str, Any]) -> SearchAliasViewProperties:
        response = self._put(self._view_url("properties"), dump_options(properties))
        return SearchAliasViewProperties.model_validate(response.expect(200))

    def update_properties(self, properties: SearchAliasViewProperties | dict[str, Any]) -> SearchAliasViewProperties:
        """Add or remove indexes; each entry's ``operation`` is ``add`` or ``del``."""
        response = self._patch(self._view_url("properties"), dump_options(properties))
        return SearchAliasViewProperties.model_validate(response.expect(200))


def _new_view(db: Database, data: dict[str, Any]) -> View:
    name, view_type = data.get("name", ""), data.get("type", "")
    if view_type == ViewType.SEARCH_ALIAS.value:
        return SearchAliasView(db, name, view_type)
    if view_type == ViewType.ARANGOSEARCH.value:
        return ArangoSearchView(db, name, view_type)
    return View(db, name, view_type)


class DatabaseViews(ApiBase):
    """View management, mixed into :class:`~arangodriver.arangodb.database.Database`."""

    def view(self, name: str) -> View:
        data = self._get(self._url("_api", "view", escape(name))).expect(200) or {}
        return _new_view(self, data)  # type: ignore[arg-type]

    def view_exists(self, name: str) -> bool:
        try:
            self.view(name)
        except ArangoError as e:
            if is_not_found(e):
                return False
            raise
        return True

    def views(self) -> list[View]:
        data = self._get(self._url("_api", "view")).expect(200) or {}
        return [_new_view(self, v) for v in data.get("result") or []]  # type: ignore[arg-type]

    def _create_view(self, name: str, view_type: ViewType, properties: dict[str, Any]) -> View:
        if not name:
            raise InvalidArgumentError("view name is empty")
        body = {**properties, "name": name, "type": view_type.value}
        data = self._post(self._url("_api", "view"), body).expect(201) or {}
        return _new_view(self, {"name": name, "type": view_type.value, **data})  # type: ignore[arg-type]

    def create_arangosearch_view(
        self, name: str, properties: ArangoSearchViewProperties | dict[str, Any] | None = None
    ) -> ArangoSearchView:
        return self._create_view(name, ViewType.ARANGOSEARCH, dump_options(properties))  # type: ignore[return-value]

    def create_search_alias_view(
        self, name: str, properties: SearchAliasViewProperties | dict[str, Any] | None = None
    ) -> SearchAliasView:
        return self._create_view(name, ViewType.SEARCH_ALIAS, dump_options(properties))  # type: ignore[return-value]


__all__ = [
    "ArangoSearchLink",
    "ArangoSearchView",
    "ArangoSearchViewProperties",
    "ConsolidationPolicy",
    "DatabaseViews",
    "PrimarySortEntry",
    "SearchAliasIndex",
    "SearchAliasOperation",
    "SearchAliasView",
    "SearchAliasViewProperties",
    "StoredValue",
    "View",
    "ViewType",
]
