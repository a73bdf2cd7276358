"""Unit tests for arangodriver.arangodb.views module."""

import pytest

from arangodriver.arangodb.views import (
    ArangoSearchLink,
    ArangoSearchView,
    ArangoSearchViewProperties,
    SearchAliasIndex,
    SearchAliasOperation,
    SearchAliasView,
    SearchAliasViewProperties,
    View,
)
from arangodriver.errors import InvalidArgumentError

VIEW = "/_db/testdb/_api/view"


class TestDatabaseViews:
    """Tests for view management."""

    def test_view_type_selects_class(self, fake_arango, db) -> None:
        fake_arango.add("GET", f"{VIEW}/search", json={"name": "search", "type": "arangosearch"})
        fake_arango.add("GET", f"{VIEW}/alias", json={"name": "alias", "type": "search-alias"})
        fake_arango.add("GET", f"{VIEW}/odd", json={"name": "odd", "type": "future"})
        assert isinstance(db.view("search"), ArangoSearchView)
        assert isinstance(db.view("alias"), SearchAliasView)
        odd = db.view("odd")
        assert type(odd) is View
        assert odd.type == "future"

    def test_view_exists(self, fake_arango, db) -> None:
        fake_arango.add_error("GET", f"{VIEW}/nope", 404, error_num=1203)
        assert not db.view_exists("nope")

    def test_views(self, fake_arango, db) -> None:
        fake_arango.add("GET", VIEW, json={"result": [{"name": "a", "type": "arangosearch"}]})
        assert [v.name for v in db.views()] == ["a"]

    def test_create_arangosearch_view(self, fake_arango, db) -> None:
        fake_arango.add("POST", VIEW, status=201, json={"id": "1", "name": "search", "type": "arangosearch"})
        properties = ArangoSearchViewProperties(
            links={"docs": ArangoSearchLink(analyzers=["text_en"], include_all_fields=True)},
            commit_interval_msec=500,
        )

        view = db.create_arangosearch_view("search", properties)

        assert isinstance(view, ArangoSearchView)
        assert fake_arango.body(fake_arango.last_request) == {
            "name": "search",
            "type": "arangosearch",
            "commitIntervalMsec": 500,
            "links": {"docs": {"analyzers": ["text_en"], "includeAllFields": True}},
        }

    def test_create_search_alias_view(self, fake_arango, db) -> None:
        fake_arango.add("POST", VIEW, status=201, json={"name": "alias", "type": "search-alias"})
        properties = SearchAliasViewProperties(indexes=[SearchAliasIndex(collection="docs", index="inv")])
        assert isinstance(db.create_search_alias_view("alias", properties), SearchAliasView)
        assert fake_arango.body(fake_arango.last_request)["indexes"] == [{"collection": "docs", "index": "inv"}]

    def test_create_view_requires_name(self, db) -> None:
        with pytest.raises(InvalidArgumentError):
            db.create_arangosearch_view("")


class TestViews:
    """Tests for view handles."""

    def test_arangosearch_properties(self, fake_arango, db) -> None:
        view = ArangoSearchView(db, "search", "arangosearch")
        fake_arango.add(
            "GET",
            f"{VIEW}/search/properties",
            json={"name": "search", "consolidationPolicy": {"type": "tier", "segmentsMin": 1}, "primarySort": []},
        )
        fake_arango.add("PATCH", f"{VIEW}/search/properties", json={"name": "search", "cleanupIntervalStep": 4})
        properties = view.properties()
        assert properties.consolidation_policy.segments_min == 1
        assert view.update_properties({"cleanupIntervalStep": 4}).cleanup_interval_step == 4

    def test_search_alias_update(self, fake_arango, db) -> None:
        view = SearchAliasView(db, "alias", "search-alias")
        fake_arango.add("PATCH", f"{VIEW}/alias/properties", json={"name": "alias", "indexes": []})
        properties = SearchAliasViewProperties(
            indexes=[SearchAliasIndex(collection="docs", index="inv", operation=SearchAliasOperation.DELETE)]
        )
        view.update_properties(properties)
        assert fake_arango.body(fake_arango.last_request) == {
            "indexes": [{"collection": "docs", "index": "inv", "operation": "del"}]
        }

    def test_rename_and_remove(self, fake_arango, db) -> None:
        view = View(db, "old", "arangosearch")
        fake_arango.add("PUT", f"{VIEW}/old/rename", json={"name": "new"})
        fake_arango.add("DELETE", f"{VIEW}/new", json={"result": True})
        view.rename("new")
        assert view.name == "new"
        view.remove()
        assert fake_arango.last_request.url.path == f"{VIEW}/new"
