"""Unit tests for arangodriver.arangodb.graph module."""

import pytest

from arangodriver.arangodb.graph import (
    CreateGraphOptions,
    EdgeDefinition,
    GraphDefinition,
    GraphElementOptions,
)
from arangodriver.errors import ArangoError, InvalidArgumentError

GHARIAL = "/_db/testdb/_api/gharial"
SOCIAL = {
    "name": "social",
    "edgeDefinitions": [{"collection": "knows", "from": ["people"], "to": ["people"]}],
    "orphanCollections": [],
}


@pytest.fixture
def graph(fake_arango, db):
    fake_arango.add("GET", f"{GHARIAL}/social", json={"graph": SOCIAL})
    return db.graph("social")


class TestDatabaseGraphs:
    """Tests for graph management."""

    def test_graph(self, graph) -> None:
        assert graph.name == "social"
        assert graph.definition.edge_definitions[0].from_ == ["people"]
        assert not graph.is_smart

    def test_graph_exists(self, fake_arango, db) -> None:
        fake_arango.add_error("GET", f"{GHARIAL}/nope", 404, error_num=1924)
        assert not db.graph_exists("nope")

    def test_graphs(self, fake_arango, db) -> None:
        fake_arango.add("GET", GHARIAL, json={"graphs": [SOCIAL, {"name": "sat", "replicationFactor": "satellite"}]})
        graphs = db.graphs()
        assert [g.name for g in graphs] == ["social", "sat"]
        assert graphs[1].is_satellite

    def test_create_graph(self, fake_arango, db) -> None:
        fake_arango.add("POST", GHARIAL, status=202, json={"graph": {**SOCIAL, "isSmart": True}})
        definition = GraphDefinition(
            edge_definitions=[EdgeDefinition(collection="knows", from_=["people"], to=["people"])],
            is_smart=True,
            smart_graph_attribute="region",
            number_of_shards=3,
        )

        graph = db.create_graph("social", definition, CreateGraphOptions(satellites=["countries"], wait_for_sync=True))

        assert graph.is_smart
        request = fake_arango.last_request
        assert fake_arango.body(request) == {
            "name": "social",
            "edgeDefinitions": [{"collection": "knows", "from": ["people"], "to": ["people"]}],
            "isSmart": True,
            "options": {"smartGraphAttribute": "region", "numberOfShards": 3, "satellites": ["countries"]},
        }
        assert request.url.params["waitForSync"] == "true"

    def test_create_graph_requires_name(self, db) -> None:
        with pytest.raises(InvalidArgumentError):
            db.create_graph("")

    def test_remove_graph(self, fake_arango, graph) -> None:
        fake_arango.add("DELETE", f"{GHARIAL}/social", status=202, json={"removed": True})
        graph.remove(drop_collections=True)
        assert fake_arango.last_request.url.params["dropCollections"] == "true"


class TestGraphCollections:
    """Tests for vertex collections and edge definitions of a graph."""

    def test_vertex_collections(self, fake_arango, graph) -> None:
        fake_arango.add("GET", f"{GHARIAL}/social/vertex", json={"collections": ["people"]})
        assert [v.name for v in graph.vertex_collections()] == ["people"]
        assert graph.vertex_collection_exists("people")
        with pytest.raises(ArangoError) as excinfo:
            graph.vertex_collection("cities")
        assert excinfo.value.status_code == 404

    def test_create_vertex_collection_refreshes_definition(self, fake_arango, graph) -> None:
        fake_arango.add(
            "POST", f"{GHARIAL}/social/vertex", status=202, json={"graph": {**SOCIAL, "orphanCollections": ["cities"]}}
        )
        graph.create_vertex_collection("cities", satellites=["countries"])
        assert graph.orphan_collections == ["cities"]
        assert fake_arango.body(fake_arango.last_request) == {
            "collection": "cities",
            "options": {"satellites": ["countries"]},
        }

    def test_delete_vertex_collection(self, fake_arango, graph) -> None:
        fake_arango.add("DELETE", f"{GHARIAL}/social/vertex/cities", status=202, json={"graph": SOCIAL})
        graph.delete_vertex_collection("cities", drop_collection=True)
        assert fake_arango.last_request.url.params["dropCollection"] == "true"

    def test_edge_definitions(self, fake_arango, graph) -> None:
        fake_arango.add("GET", f"{GHARIAL}/social/edge", json={"collections": ["knows"]})
        assert graph.edge_definition_exists("knows")
        assert graph.edge_definition("knows").name == "knows"
        with pytest.raises(ArangoError):
            graph.edge_definition("likes")

    def test_create_edge_definition(self, fake_arango, graph) -> None:
        fake_arango.add("POST", f"{GHARIAL}/social/edge", status=202, json={"graph": SOCIAL})
        graph.create_edge_definition("likes", ["people"], ["posts"])
        assert fake_arango.body(fake_arango.last_request) == {"collection": "likes", "from": ["people"], "to": ["posts"]}

    def test_replace_edge_definition(self, fake_arango, graph) -> None:
        fake_arango.add("PUT", f"{GHARIAL}/social/edge/knows", status=202, json={"graph": SOCIAL})
        graph.replace_edge_definition("knows", ["people"], ["robots"], drop_collections=False)
        assert fake_arango.last_request.url.params["dropCollections"] == "false"

    def test_delete_edge_definition(self, fake_arango, graph) -> None:
        fake_arango.add("DELETE", f"{GHARIAL}/social/edge/knows", status=202, json={"graph": SOCIAL})
        graph.delete_edge_definition("knows", wait_for_sync=True)
        assert fake_arango.last_request.url.params["waitForSync"] == "true"


class TestGraphElements:
    """Tests for vertex and edge CRUD."""

    def test_vertex_crud(self, fake_arango, graph) -> None:
        fake_arango.add("GET", f"{GHARIAL}/social/vertex", json={"collections": ["people"]})
        base = f"{GHARIAL}/social/vertex/people"
        fake_arango.add("POST", base, status=202, json={"vertex": {"_key": "alice", "_rev": "_1"}, "new": {"age": 3}})
        fake_arango.add("GET", f"{base}/alice", json={"vertex": {"_key": "alice", "age": 3}})
        fake_arango.add("PATCH", f"{base}/alice", json={"vertex": {"_key": "alice", "_rev": "_2", "_oldRev": "_1"}})
        fake_arango.add("DELETE", f"{base}/alice", json={"removed": True, "old": {"age": 4}})
        people = graph.vertex_collection("people")

        created = people.create_vertex({"_key": "alice", "age": 3}, GraphElementOptions(return_new=True))
        assert created.key == "alice"
        assert created.new == {"age": 3}
        assert fake_arango.last_request.url.params["returnNew"] == "true"

        assert people.read_vertex("alice")["age"] == 3
        assert people.update_vertex("people/alice", {"age": 4}).old_rev == "_1"
        removed = people.delete_vertex("alice", GraphElementOptions(if_match="_2"))
        assert removed.key == "alice"
        assert removed.old == {"age": 4}
        assert fake_arango.last_request.headers["if-match"] == "_2"

    def test_edge_requires_endpoints(self, fake_arango, graph) -> None:
        fake_arango.add("GET", f"{GHARIAL}/social/edge", json={"collections": ["knows"]})
        knows = graph.edge_definition("knows")
        with pytest.raises(InvalidArgumentError):
            knows.create_edge({"_from": "people/a"})

    def test_edge_crud(self, fake_arango, graph) -> None:
        fake_arango.add("GET", f"{GHARIAL}/social/edge", json={"collections": ["knows"]})
        base = f"{GHARIAL}/social/edge/knows"
        fake_arango.add("POST", base, status=201, json={"edge": {"_key": "e1", "_id": "knows/e1"}})
        fake_arango.add("PUT", f"{base}/e1", json={"edge": {"_key": "e1", "_rev": "_2"}})
        knows = graph.edge_definition("knows")

        assert knows.create_edge({"_from": "people/a", "_to": "people/b"}).id == "knows/e1"
        assert knows.replace_edge("e1", {"_from": "people/a", "_to": "people/c"}).rev == "_2"
