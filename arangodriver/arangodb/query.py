"""AQL queries, query administration, the query cache and user defined functions."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from arangodriver.arangodb.base import ApiBase, optional_query
from arangodriver.arangodb.cursor import Cursor
from arangodriver.arangodb.meta import HEADER_DIRTY_READS
from arangodriver.arangodb.models import ArangoModel, dump_options
from arangodriver.connection.call import escape, with_header
from arangodriver.errors import InvalidArgumentError


class QuerySubOptions(ArangoModel):
    """The ``options`` object of a cursor request."""

    full_count: bool | None = None
    fill_block_cache: bool | None = None
    intermediate_commit_count: int | None = None
    intermediate_commit_size: int | None = None
    max_runtime: float | None = None
    max_plans: int | None = None
    max_transaction_size: int | None = None
    max_warning_count: int | None = None
    fail_on_warning: bool | None = None
    max_nodes_per_callstack: int | None = None
    optimizer: dict[str, Any] | None = None
    profile: int | bool | None = None
    satellite_sync_wait: float | None = None
    skip_inaccessible_collections: bool | None = None
    spill_over_threshold_memory_usage: int | None = None
    spill_over_threshold_num_rows: int | None = None
    stream: bool | None = None
    allow_retry: bool | None = None
    shard_ids: list[str] | None = None
    use_plan_cache: bool | None = None


class QueryOptions(ArangoModel):
    """Top level cursor request options.

    ``allow_dirty_reads`` is not part of the body; it is sent as the
    ``x-arango-allow-dirty-read`` header.
    """

    count: bool | None = None
    batch_size: int | None = None
    cache: bool | None = None
    memory_limit: int | None = None
    ttl: float | None = None
    options: QuerySubOptions | None = None
    allow_dirty_reads: bool | None = Field(default=None, exclude=True)


class ExplainQueryOptions(ArangoModel):
    all_plans: bool | None = None
    max_number_of_plans: int | None = None
    optimizer: dict[str, Any] | None = None


class ExplainQueryResult(ArangoModel):
    plan: dict[str, Any] | None = None
    plans: list[dict[str, Any]] | None = None
    warnings: list[dict[str, Any]] | None = None
    stats: dict[str, Any] | None = None
    cacheable: bool | None = None


class QueryValidation(ArangoModel):
    bind_vars: list[str] = Field(default_factory=list)
    collections: list[str] = Field(default_factory=list)
    ast: list[dict[str, Any]] | None = None


class RunningQuery(ArangoModel):
    id: str
    database: str | None = None
    user: str | None = None
    query: str | None = None
    bind_vars: dict[str, Any] | None = None
    started: str | None = None
    run_time: float | None = None
    peak_memory_usage: int | None = None
    state: str | None = None
    stream: bool | None = None


class QueryTracking(ArangoModel):
    enabled: bool | None = None
    track_slow_queries: bool | None = None
    track_bind_vars: bool | None = None
    max_slow_queries: int | None = None
    slow_query_threshold: float | None = None
    slow_streaming_query_threshold: float | None = None
    max_query_string_length: int | None = None


class QueryCacheProperties(ArangoModel):
    mode: str | None = None  # "off", "on", "demand"
    max_results: int | None = None
    max_results_size: int | None = None
    max_entry_size: int | None = None
    include_system: bool | None = None


class UserFunction(ArangoModel):
    name: str
    code: str
    is_deterministic: bool | None = None


class DatabaseQuery(ApiBase):
    """AQL access, mixed into :class:`~arangodriver.arangodb.database.Database`."""

    def query(
        self,
        aql: str,
        bind_vars: dict[str, Any] | None = None,
        options: QueryOptions | dict[str, Any] | None = None,
    ) -> Cursor:
        """Run an AQL query and return a cursor over its results."""
        if not aql:
            raise InvalidArgumentError("query is empty")
        if isinstance(options, dict):
            options = QueryOptions.model_validate(options)

        body: dict[str, Any] = {"query": aql, **dump_options(options)}
        if bind_vars:
            body["bindVars"] = bind_vars

        dirty_reads = None
        if options is not None and options.allow_dirty_reads is not None:
            dirty_reads = with_header(HEADER_DIRTY_READS, "true" if options.allow_dirty_reads else "false")

        response = self._post(self._url("_api", "cursor"), body, dirty_reads)
        return Cursor(self, response.endpoint, response.expect(201) or {})  # type: ignore[arg-type]

    def query_all(self, aql: str, bind_vars: dict[str, Any] | None = None, batch_size: int = 1000) -> list[Any]:
        """Execute an AQL query and return the full result set."""
        with self.query(aql, bind_vars, QueryOptions(batch_size=batch_size)) as cursor:
            return list(cursor)

    def validate_query(self, aql: str) -> QueryValidation:
        response = self._post(self._url("_api", "query"), {"query": aql})
        return QueryValidation.model_validate(response.expect(200))

    def explain_query(
        self,
        aql: str,
        bind_vars: dict[str, Any] | None = None,
        options: ExplainQueryOptions | dict[str, Any] | None = None,
    ) -> ExplainQueryResult:
        body: dict[str, Any] = {"query": aql}
        if bind_vars:
            body["bindVars"] = bind_vars
        if options is not None:
            body["options"] = dump_options(options)
        response = self._post(self._url("_api", "explain"), body)
        return ExplainQueryResult.model_validate(response.expect(200))

    def optimizer_rules(self) -> list[dict[str, Any]]:
        return self._get(self._url("_api", "query", "rules")).expect(200) or []

    # ------------------------------------------------------------------
    # Running and slow queries
    # ------------------------------------------------------------------
    def running_queries(self, all_databases: bool | None = None) -> list[RunningQuery]:
        response = self._get(self._url("_api", "query", "current"), optional_query("all", all_databases))
        return [RunningQuery.model_validate(q) for q in response.expect(200) or []]

    def slow_queries(self, all_databases: bool | None = None) -> list[RunningQuery]:
        response = self._get(self._url("_api", "query", "slow"), optional_query("all", all_databases))
        return [RunningQuery.model_validate(q) for q in response.expect(200) or []]

    def clear_slow_queries(self, all_databases: bool | None = None) -> None:
        response = self._delete(self._url("_api", "query", "slow"), optional_query("all", all_databases))
        response.check_status(200)

    def kill_query(self, query_id: str, all_databases: bool | None = None) -> None:
        response = self._delete(
            self._url("_api", "query", escape(query_id)), optional_query("all", all_databases)
        )
        response.check_status(200)

    def query_tracking(self) -> QueryTracking:
        return QueryTracking.model_validate(self._get(self._url("_api", "query", "properties")).expect(200))

    def set_query_tracking(self, options: QueryTracking | dict[str, Any]) -> QueryTracking:
        response = self._put(self._url("_api", "query", "properties"), dump_options(options))
        return QueryTracking.model_validate(response.expect(200))

    # ------------------------------------------------------------------
    # Query results cache
    # ------------------------------------------------------------------
    def query_cache_properties(self) -> QueryCacheProperties:
        response = self._get(self._url("_api", "query-cache", "properties"))
        return QueryCacheProperties.model_validate(response.expect(200))

    def set_query_cache_properties(self, options: QueryCacheProperties | dict[str, Any]) -> QueryCacheProperties:
        response = self._put(self._url("_api", "query-cache", "properties"), dump_options(options))
        return QueryCacheProperties.model_validate(response.expect(200))

    def query_cache_entries(self) -> list[dict[str, Any]]:
        return self._get(self._url("_api", "query-cache", "entries")).expect(200) or []

    def clear_query_cache(self) -> None:
        self._delete(self._url("_api", "query-cache")).check_status(200)

    # ------------------------------------------------------------------
    # User defined AQL functions
    # ------------------------------------------------------------------
    def user_functions(self, namespace: str | None = None) -> list[UserFunction]:
        response = self._get(self._url("_api", "aqlfunction"), optional_query("namespace", namespace))
        data = response.expect(200) or {}
        return [UserFunction.model_validate(f) for f in data.get("result", [])]

    def create_user_function(self, name: str, code: str, is_deterministic: bool | None = None) -> bool:
        """Register an AQL function; returns True when it was newly created."""
        body = UserFunction(name=name, code=code, is_deterministic=is_deterministic).to_body()
        response = self._post(self._url("_api", "aqlfunction"), body)
        response.check_status(200, 201)
        return response.code == 201

    def delete_user_function(self, name: str, group: bool | None = None) -> int:
        """Remove a function (or a namespace when ``group``); returns the number deleted."""
        response = self._delete(self._url("_api", "aqlfunction", escape(name)), optional_query("group", group))
        return int((response.expect(200) or {}).get("deletedCount", 0))


__all__ = [
    "DatabaseQuery",
    "ExplainQueryOptions",
    "ExplainQueryResult",
    "QueryCacheProperties",
    "QueryOptions",
    "QuerySubOptions",
    "QueryTracking",
    "QueryValidation",
    "RunningQuery",
    "UserFunction",
]
