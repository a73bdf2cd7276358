"""Unit tests for arangodriver.arangodb.query module."""

import pytest

from arangodriver.arangodb.query import (
    ExplainQueryOptions,
    QueryCacheProperties,
    QueryOptions,
    QuerySubOptions,
    QueryTracking,
)
from arangodriver.errors import ArangoError, InvalidArgumentError

API = "/_db/testdb/_api"


class TestQuery:
    """Tests for running AQL queries."""

    def test_query_body(self, fake_arango, db) -> None:
        fake_arango.add("POST", f"{API}/cursor", status=201, json={"result": [1], "hasMore": False, "count": 1})
        options = QueryOptions(count=True, batch_size=100, options=QuerySubOptions(full_count=True, max_runtime=5.0))

        cursor = db.query("FOR d IN @@c RETURN d", {"@c": "docs"}, options)

        assert list(cursor) == [1]
        assert fake_arango.body(fake_arango.last_request) == {
            "query": "FOR d IN @@c RETURN d",
            "bindVars": {"@c": "docs"},
            "count": True,
            "batchSize": 100,
            "options": {"fullCount": True, "maxRuntime": 5.0},
        }

    def test_options_as_dict(self, fake_arango, db) -> None:
        fake_arango.add("POST", f"{API}/cursor", status=201, json={"result": []})
        db.query("RETURN 1", options={"batchSize": 2, "allowDirtyReads": True})
        request = fake_arango.last_request
        assert fake_arango.body(request) == {"query": "RETURN 1", "batchSize": 2}
        assert request.headers["x-arango-allow-dirty-read"] == "true"

    def test_empty_query_is_rejected(self, db) -> None:
        with pytest.raises(InvalidArgumentError):
            db.query("")

    def test_query_error(self, fake_arango, db) -> None:
        fake_arango.add_error("POST", f"{API}/cursor", 400, error_num=1501, message="syntax error")
        with pytest.raises(ArangoError) as excinfo:
            db.query("FOR")
        assert excinfo.value.error_num == 1501

    def test_query_all_collects_batches(self, fake_arango, db) -> None:
        fake_arango.add("POST", f"{API}/cursor", status=201, json={"id": "9", "result": [1, 2], "hasMore": True})
        fake_arango.add("POST", f"{API}/cursor/9", json={"id": "9", "result": [3], "hasMore": False})
        assert db.query_all("FOR i IN 1..3 RETURN i", batch_size=2) == [1, 2, 3]
        assert fake_arango.sent("DELETE", f"{API}/cursor/9") == []

    def test_validate_query(self, fake_arango, db) -> None:
        fake_arango.add("POST", f"{API}/query", json={"bindVars": ["x"], "collections": ["docs"]})
        validation = db.validate_query("FOR d IN docs FILTER d.x == @x RETURN d")
        assert validation.bind_vars == ["x"]
        assert validation.collections == ["docs"]

    def test_explain_query(self, fake_arango, db) -> None:
        fake_arango.add("POST", f"{API}/explain", json={"plan": {"nodes": []}, "cacheable": True})
        result = db.explain_query("RETURN 1", options=ExplainQueryOptions(all_plans=False))
        assert result.cacheable is True
        assert fake_arango.body(fake_arango.last_request) == {"query": "RETURN 1", "options": {"allPlans": False}}


class TestQueryAdministration:
    """Tests for running and slow query management."""

    def test_running_queries(self, fake_arango, db) -> None:
        fake_arango.add("GET", f"{API}/query/current", json=[{"id": "12", "query": "RETURN SLEEP(10)", "runTime": 2.5}])
        queries = db.running_queries(all_databases=True)
        assert queries[0].run_time == 2.5
        assert fake_arango.last_request.url.params["all"] == "true"

    def test_slow_queries_and_clear(self, fake_arango, db) -> None:
        fake_arango.add("GET", f"{API}/query/slow", json=[])
        fake_arango.add("DELETE", f"{API}/query/slow", json={"error": False})
        assert db.slow_queries() == []
        db.clear_slow_queries()
        assert "all" not in fake_arango.last_request.url.params

    def test_kill_query(self, fake_arango, db) -> None:
        fake_arango.add("DELETE", f"{API}/query/12", json={"error": False})
        db.kill_query("12")

    def test_query_tracking(self, fake_arango, db) -> None:
        fake_arango.add("PUT", f"{API}/query/properties", json={"enabled": True, "maxSlowQueries": 64})
        tracking = db.set_query_tracking(QueryTracking(max_slow_queries=64))
        assert tracking.max_slow_queries == 64
        assert fake_arango.body(fake_arango.last_request) == {"maxSlowQueries": 64}

    def test_query_cache(self, fake_arango, db) -> None:
        fake_arango.add("PUT", f"{API}/query-cache/properties", json={"mode": "demand", "maxResults": 128})
        fake_arango.add("GET", f"{API}/query-cache/entries", json=[{"hash": "1"}])
        fake_arango.add("DELETE", f"{API}/query-cache", json={"error": False})
        assert db.set_query_cache_properties(QueryCacheProperties(mode="demand")).max_results == 128
        assert db.query_cache_entries() == [{"hash": "1"}]
        db.clear_query_cache()


class TestUserFunctions:
    """Tests for user defined AQL functions."""

    def test_create_user_function(self, fake_arango, db) -> None:
        fake_arango.add("POST", f"{API}/aqlfunction", status=201, json={"isNewlyCreated": True})
        assert db.create_user_function("myfn::double", "function (x) { return 2 * x; }", is_deterministic=True)
        assert fake_arango.body(fake_arango.last_request) == {
            "name": "myfn::double",
            "code": "function (x) { return 2 * x; }",
            "isDeterministic": True,
        }

    def test_replace_user_function(self, fake_arango, db) -> None:
        fake_arango.add("POST", f"{API}/aqlfunction", status=200, json={"isNewlyCreated": False})
        assert not db.create_user_function("myfn::double", "function (x) { return x; }")

    def test_user_functions(self, fake_arango, db) -> None:
        fake_arango.add("GET", f"{API}/aqlfunction", json={"result": [{"name": "myfn::double", "code": "x"}]})
        functions = db.user_functions(namespace="myfn")
        assert functions[0].name == "myfn::double"
        assert fake_arango.last_request.url.params["namespace"] == "myfn"

    def test_delete_user_function_group(self, fake_arango, db) -> None:
        fake_arango.add("DELETE", f"{API}/aqlfunction/myfn", json={"deletedCount": 3})
        assert db.delete_user_function("myfn", group=True) == 3
