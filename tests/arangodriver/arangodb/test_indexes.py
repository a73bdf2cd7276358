"""Unit tests for arangodriver.arangodb.indexes module."""

import pytest

from arangodriver.arangodb.indexes import InvertedIndexOptions, MDIIndexOptions, PersistentIndexOptions
from arangodriver.errors import InvalidArgumentError

INDEX = "/_db/testdb/_api/index"


@pytest.fixture
def collection(fake_arango, db):
    fake_arango.add("GET", "/_db/testdb/_api/collection/docs", json={"name": "docs"})
    return db.collection("docs")


class TestCollectionIndexes:
    """Tests for index management."""

    def test_indexes(self, fake_arango, collection) -> None:
        fake_arango.add(
            "GET",
            INDEX,
            json={"indexes": [{"id": "docs/0", "type": "primary", "fields": ["_key"], "selectivityEstimate": 1}]},
        )
        indexes = collection.indexes()
        assert indexes[0].type == "primary"
        assert indexes[0].selectivity_estimate == 1
        assert fake_arango.last_request.url.params["collection"] == "docs"

    def test_index_exists(self, fake_arango, collection) -> None:
        fake_arango.add("GET", f"{INDEX}/docs/by_name", json={"id": "docs/12", "name": "by_name"})
        fake_arango.add_error("GET", f"{INDEX}/docs/missing", 404, error_num=1212)
        assert collection.index_exists("by_name")
        assert not collection.index_exists("missing")

    def test_ensure_persistent_index_created(self, fake_arango, collection) -> None:
        fake_arango.add("POST", INDEX, status=201, json={"id": "docs/12", "type": "persistent", "isNewlyCreated": True})
        index, created = collection.ensure_persistent_index(["name"], PersistentIndexOptions(unique=True))
        assert created
        assert index.id == "docs/12"
        assert fake_arango.body(fake_arango.last_request) == {"type": "persistent", "fields": ["name"], "unique": True}

    def test_ensure_existing_index(self, fake_arango, collection) -> None:
        fake_arango.add("POST", INDEX, status=200, json={"id": "docs/12", "type": "persistent"})
        _, created = collection.ensure_persistent_index(["name"])
        assert not created

    def test_persistent_index_needs_fields(self, collection) -> None:
        with pytest.raises(InvalidArgumentError):
            collection.ensure_persistent_index([])

    def test_geo_index_field_count(self, collection) -> None:
        with pytest.raises(InvalidArgumentError):
            collection.ensure_geo_index(["a", "b", "c"])

    def test_ttl_index(self, fake_arango, collection) -> None:
        fake_arango.add("POST", INDEX, status=201, json={"id": "docs/13", "type": "ttl", "expireAfter": 60})
        index, _ = collection.ensure_ttl_index(["createdAt"], 60)
        assert index.expire_after == 60
        assert fake_arango.body(fake_arango.last_request)["expireAfter"] == 60

    def test_mdi_prefixed_index(self, fake_arango, collection) -> None:
        fake_arango.add("POST", INDEX, status=201, json={"id": "docs/14", "type": "mdi-prefixed"})
        collection.ensure_mdi_index(["x", "y"], MDIIndexOptions(prefix_fields=["tenant"]))
        body = fake_arango.body(fake_arango.last_request)
        assert body["type"] == "mdi-prefixed"
        assert body["fieldValueTypes"] == "double"
        assert body["prefixFields"] == ["tenant"]

    def test_zkd_index(self, fake_arango, collection) -> None:
        fake_arango.add("POST", INDEX, json={"id": "docs/16", "type": "zkd"})
        index, created = collection.ensure_zkd_index(["x", "y"])
        assert not created
        body = fake_arango.body(fake_arango.last_request)
        assert body == {"type": "zkd", "fields": ["x", "y"], "fieldValueTypes": "double"}

    def test_inverted_index_needs_fields(self, collection) -> None:
        with pytest.raises(InvalidArgumentError):
            collection.ensure_inverted_index(InvertedIndexOptions(name="inv"))

    def test_delete_index(self, fake_arango, collection) -> None:
        fake_arango.add("DELETE", f"{INDEX}/docs/by_name", json={"id": "docs/12"})
        assert collection.delete_index("by_name") == "docs/12"

    def test_delete_index_by_id(self, fake_arango, collection) -> None:
        fake_arango.add("DELETE", f"{INDEX}/other/77", json={"id": "other/77"})
        fake_arango.add("DELETE", f"{INDEX}/docs/12", json={"id": "docs/12"})
        assert collection.delete_index_by_id("other/77") == "other/77"
        assert collection.delete_index_by_id("12") == "docs/12"
