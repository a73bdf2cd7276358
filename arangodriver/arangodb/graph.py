"""Named graphs managed through the ``/_api/gharial`` API."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar

from pydantic import Field

from arangodriver.arangodb.base import ApiBase, RequestOptions, optional_query
from arangodriver.arangodb.meta import (
    HEADER_IF_MATCH,
    QUERY_KEEP_NULL,
    QUERY_RETURN_NEW,
    QUERY_RETURN_OLD,
    QUERY_WAIT_FOR_SYNC,
    DocumentMetaWithOldRev,
    document_key,
)
from arangodriver.arangodb.models import ArangoModel
from arangodriver.connection.call import escape
from arangodriver.errors import ArangoError, InvalidArgumentError, is_not_found

if TYPE_CHECKING:
    from arangodriver.arangodb.database import Database

SATELLITE_GRAPH = "satellite"


class EdgeDefinition(ArangoModel):
    collection: str
    from_: list[str] = Field(default_factory=list, alias="from")
    to: list[str] = Field(default_factory=list)


class GraphDefinition(ArangoModel):
    name: str | None = None
    edge_definitions: list[EdgeDefinition] = Field(default_factory=list)
    orphan_collections: list[str] = Field(default_factory=list)
    is_smart: bool | None = None
    is_satellite: bool | None = None
    is_disjoint: bool | None = None
    smart_graph_attribute: str | None = None
    number_of_shards: int | None = None
    replication_factor: int | str | None = None
    write_concern: int | None = None


class CreateGraphOptions(ArangoModel):
    satellites: list[str] | None = None
    wait_for_sync: bool | None = Field(default=None, exclude=True)


class GraphElementResponse(DocumentMetaWithOldRev):
    """Metadata of a written vertex or edge plus ``new``/``old`` when requested."""

    new: dict[str, Any] | None = None
    old: dict[str, Any] | None = None


@dataclass
class GraphElementOptions(RequestOptions):
    """Query parameters and headers accepted by vertex and edge writes."""

    wait_for_sync: bool | None = None
    return_new: bool | None = None
    return_old: bool | None = None
    keep_null: bool | None = None
    if_match: str | None = None

    _queries: ClassVar[dict[str, str]] = {
        "wait_for_sync": QUERY_WAIT_FOR_SYNC,
        "return_new": QUERY_RETURN_NEW,
        "return_old": QUERY_RETURN_OLD,
        "keep_null": QUERY_KEEP_NULL,
    }
    _headers: ClassVar[dict[str, str]] = {"if_match": HEADER_IF_MATCH}


class _GraphElements(ApiBase):
    """Shared vertex/edge CRUD; subclasses set ``_kind`` to ``vertex`` or ``edge``."""

    _kind: ClassVar[str]

    def __init__(self, graph: Graph, name: str) -> None:
        self.graph = graph
        self.name = name
        self._connection = graph.connection
        self._modifiers = graph._modifiers
        self._db_name = graph._db_name

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.graph.name}/{self.name}>"

    def _element_url(self, key: str | None = None) -> str:
        parts = ["_api", "gharial", escape(self.graph.name), self._kind, escape(self.name)]
        if key is not None:
            parts.append(escape(document_key(key)))
        return self._url(*parts)

    def _result(self, data: dict[str, Any] | None) -> GraphElementResponse:
        data = data or {}
        result = GraphElementResponse.model_validate(data.get(self._kind) or {})
        result.new = data.get("new")
        result.old = data.get("old")
        return result

    def _read(self, key: str, if_match: str | None = None) -> dict[str, Any]:
        response = self._get(self._element_url(key), GraphElementOptions(if_match=if_match))
        return (response.expect(200) or {}).get(self._kind) or {}

    def _create(self, document: dict[str, Any], options: GraphElementOptions | None) -> GraphElementResponse:
        response = self._post(self._element_url(), document, options)
        return self._result(response.expect(201, 202))

    def _update(self, key: str, patch: dict[str, Any], options: GraphElementOptions | None) -> GraphElementResponse:
        response = self._patch(self._element_url(key), patch, options)
        return self._result(response.expect(200, 202))

    def _replace(self, key: str, document: dict[str, Any], options: GraphElementOptions | None) -> GraphElementResponse:
        response = self._put(self._element_url(key), document, options)
        return self._result(response.expect(200, 202))

    def _remove(self, key: str, options: GraphElementOptions | None) -> GraphElementResponse:
        response = self._delete(self._element_url(key), options)
        data = response.expect(200, 202) or {}
        result = GraphElementResponse.model_validate({"_key": document_key(key)})
        result.old = data.get("old")
        return result


class VertexCollection(_GraphElements):
    _kind = "vertex"

    def read_vertex(self, key: str, if_match: str | None = None) -> dict[str, Any]:
        return self._read(key, if_match)

    def create_vertex(
        self, vertex: dict[str, Any], options: GraphElementOptions | None = None
    ) -> GraphElementResponse:
        return self._create(vertex, options)

    def update_vertex(
        self, key: str, patch: dict[str, Any], options: GraphElementOptions | None = None
    ) -> GraphElementResponse:
        return self._update(key, patch, options)

    def replace_vertex(
        self, key: str, vertex: dict[str, Any], options: GraphElementOptions | None = None
    ) -> GraphElementResponse:
        return self._replace(key, vertex, options)

    def delete_vertex(self, key: str, options: GraphElementOptions | None = None) -> GraphElementResponse:
        return self._remove(key, options)


class EdgeCollection(_GraphElements):
    _kind = "edge"

    def read_edge(self, key: str, if_match: str | None = None) -> dict[str, Any]:
        return self._read(key, if_match)

    def create_edge(self, edge: dict[str, Any], options: GraphElementOptions | None = None) -> GraphElementResponse:
        """Insert an edge; ``edge`` must carry ``_from`` and ``_to``."""
        if not edge.get("_from") or not edge.get("_to"):
            raise InvalidArgumentError("edge needs _from and _to")
        return self._create(edge, options)

    def update_edge(
        self, key: str, patch: dict[str, Any], options: GraphElementOptions | None = None
    ) -> GraphElementResponse:
        return self._update(key, patch, options)

    def replace_edge(
        self, key: str, edge: dict[str, Any], options: GraphElementOptions | None = None
    ) -> GraphElementResponse:
        return self._replace(key, edge, options)

    def delete_edge(self, key: str, options: GraphElementOptions | None = None) -> GraphElementResponse:
        return self._remove(key, options)


class Graph(ApiBase):
    """A named graph.

    The definition captured when the graph was loaded is exposed through
    properties; changes to vertex collections and edge definitions refresh
    it from the server response.
    """

    def __init__(self, db: Database, definition: GraphDefinition) -> None:
        self._db = db
        self._definition = definition
        self._connection = db.connection
        self._modifiers = db._modifiers
        self._db_name = db.name

    def __repr__(self) -> str:
        return f"<Graph {self.name}>"

    @property
    def name(self) -> str:
        return self._definition.name or ""

    @property
    def definition(self) -> GraphDefinition:
        return self._definition

    @property
    def orphan_collections(self) -> list[str]:
        return self._definition.orphan_collections

    @property
    def is_smart(self) -> bool:
        return bool(self._definition.is_smart)

    @property
    def is_satellite(self) -> bool:
        return bool(self._definition.is_satellite) or self._definition.replication_factor == SATELLITE_GRAPH

    @property
    def is_disjoint(self) -> bool:
        return bool(self._definition.is_disjoint)

    @property
    def smart_graph_attribute(self) -> str | None:
        return self._definition.smart_graph_attribute

    def _graph_url(self, *parts: str) -> str:
        return self._url("_api", "gharial", escape(self.name), *parts)

    def _refresh(self, data: dict[str, Any] | None) -> None:
        graph = (data or {}).get("graph")
        if graph:
            self._definition = GraphDefinition.model_validate(graph)

    def remove(self, drop_collections: bool = False) -> None:
        response = self._delete(
            self._graph_url(), optional_query("dropCollections", True if drop_collections else None)
        )
        response.check_status(200, 202)

    # ------------------------------------------------------------------
    # Vertex collections
    # ------------------------------------------------------------------
    def _vertex_collection_names(self) -> list[str]:
        data = self._get(self._graph_url("vertex")).expect(200) or {}
        return list(data.get("collections") or [])

    def vertex_collection(self, name: str) -> VertexCollection:
        if name not in self._vertex_collection_names():
            raise ArangoError(404, f"vertex collection '{name}' not found in graph '{self.name}'")
        return VertexCollection(self, name)

    def vertex_collection_exists(self, name: str) -> bool:
        return name in self._vertex_collection_names()

    def vertex_collections(self) -> list[VertexCollection]:
        return [VertexCollection(self, name) for name in self._vertex_collection_names()]

    def create_vertex_collection(self, name: str, satellites: list[str] | None = None) -> VertexCollection:
        body: dict[str, Any] = {"collection": name}
        if satellites:
            body["options"] = {"satellites": satellites}
        self._refresh(self._post(self._graph_url("vertex"), body).expect(201, 202))
        return VertexCollection(self, name)

    def delete_vertex_collection(self, name: str, drop_collection: bool = False) -> None:
        response = self._delete(
            self._graph_url("vertex", escape(name)),
            optional_query("dropCollection", True if drop_collection else None),
        )
        self._refresh(response.expect(200, 202))

    # ------------------------------------------------------------------
    # Edge definitions
    # ------------------------------------------------------------------
    def _edge_collection_names(self) -> list[str]:
        data = self._get(self._graph_url("edge")).expect(200) or {}
        return list(data.get("collections") or [])

    def edge_definition(self, collection: str) -> EdgeCollection:
        if collection not in self._edge_collection_names():
            raise ArangoError(404, f"edge definition '{collection}' not found in graph '{self.name}'")
        return EdgeCollection(self, collection)

    def edge_definition_exists(self, collection: str) -> bool:
        return collection in self._edge_collection_names()

    def edge_definitions(self) -> list[EdgeCollection]:
        return [EdgeCollection(self, name) for name in self._edge_collection_names()]

    def create_edge_definition(
        self,
        collection: str,
        from_: list[str],
        to: list[str],
        satellites: list[str] | None = None,
    ) -> EdgeCollection:
        body = EdgeDefinition(collection=collection, from_=from_, to=to).to_body()
        if satellites:
            body["options"] = {"satellites": satellites}
        self._refresh(self._post(self._graph_url("edge"), body).expect(201, 202))
        return EdgeCollection(self, collection)

    def replace_edge_definition(
        self,
        collection: str,
        from_: list[str],
        to: list[str],
        satellites: list[str] | None = None,
        wait_for_sync: bool | None = None,
        drop_collections: bool | None = None,
    ) -> EdgeCollection:
        body = EdgeDefinition(collection=collection, from_=from_, to=to).to_body()
        if satellites:
            body["options"] = {"satellites": satellites}
        response = self._put(
            self._graph_url("edge", escape(collection)),
            body,
            optional_query(QUERY_WAIT_FOR_SYNC, wait_for_sync),
            optional_query("dropCollections", drop_collections),
        )
        self._refresh(response.expect(201, 202))
        return EdgeCollection(self, collection)

    def delete_edge_definition(
        self, collection: str, drop_collections: bool | None = None, wait_for_sync: bool | None = None
    ) -> None:
        response = self._delete(
            self._graph_url("edge", escape(collection)),
            optional_query("dropCollections", drop_collections),
            optional_query(QUERY_WAIT_FOR_SYNC, wait_for_sync),
        )
        self._refresh(response.expect(201, 202))


class DatabaseGraphs(ApiBase):
    """Graph management, mixed into :class:`~arangodriver.arangodb.database.Database`."""

    def graph(self, name: str) -> Graph:
        data = self._get(self._url("_api", "gharial", escape(name))).expect(200) or {}
        return Graph(self, GraphDefinition.model_validate(data.get("graph") or {"name": name}))  # type: ignore[arg-type]

    def graph_exists(self, name: str) -> bool:
        try:
            self.graph(name)
        except ArangoError as e:
            if is_not_found(e):
                return False
            raise
        return True

    def graphs(self) -> list[Graph]:
        data = self._get(self._url("_api", "gharial")).expect(200) or {}
        return [Graph(self, GraphDefinition.model_validate(g)) for g in data.get("graphs") or []]  # type: ignore[arg-type]

    def create_graph(
        self,
        name: str,
        definition: GraphDefinition | dict[str, Any] | None = None,
        options: CreateGraphOptions | dict[str, Any] | None = None,
    ) -> Graph:
        """Create a named graph.

        Smart, disjoint and sharding attributes of ``definition`` are sent in
        the request's ``options`` object, as the server expects them there.
        """
        if not name:
            raise InvalidArgumentError("graph name is empty")
        if isinstance(definition, dict):
            definition = GraphDefinition.model_validate(definition)
        if isinstance(options, dict):
            options = CreateGraphOptions.model_validate(options)

        body: dict[str, Any] = {"name": name}
        if definition is not None:
            if definition.edge_definitions:
                body["edgeDefinitions"] = [e.to_body() for e in definition.edge_definitions]
            if definition.orphan_collections:
                body["orphanCollections"] = definition.orphan_collections
            if definition.is_smart:
                body["isSmart"] = True
            extra = {
                "isDisjoint": definition.is_disjoint or None,
                "smartGraphAttribute": definition.smart_graph_attribute,
                "numberOfShards": definition.number_of_shards,
                "replicationFactor": definition.replication_factor,
                "writeConcern": definition.write_concern,
            }
            body["options"] = {k: v for k, v in extra.items() if v is not None}
        wait_for_sync = None
        if options is not None:
            wait_for_sync = options.wait_for_sync
            body.setdefault("options", {}).update(options.to_body())

        response = self._post(
            self._url("_api", "gharial"), body, optional_query(QUERY_WAIT_FOR_SYNC, wait_for_sync)
        )
        data = response.expect(201, 202) or {}
        return Graph(self, GraphDefinition.model_validate(data.get("graph") or {"name": name}))  # type: ignore[arg-type]


__all__ = [
    "CreateGraphOptions",
    "DatabaseGraphs",
    "EdgeCollection",
    "EdgeDefinition",
    "Graph",
    "GraphDefinition",
    "GraphElementOptions",
    "GraphElementResponse",
    "SATELLITE_GRAPH",
    "VertexCollection",
]
