"""AQL query command for arangoctl."""

from __future__ import annotations

import orjson

from arangodriver.arangodb.query import QueryOptions
from arangodriver.cli import config as cli_config
from arangodriver.cli.output import CLIResponse, ErrorCode, error_response, progress, success_response


def run_query(
    aql: str,
    bind: str | None,
    batch_size: int | None,
    database: str | None,
    start_time: float,
) -> CLIResponse:
    """Run an AQL query and return every result.

    Args:
        aql: Query text
        bind: Bind parameters as a JSON object
        batch_size: Cursor batch size
        database: Database name (default: the configured database)
        start_time: Start time for duration calculation

    Returns:
        CLIResponse with the results and the query statistics
    """
    bind_vars = None
    if bind:
        try:
            bind_vars = orjson.loads(bind)
        except orjson.JSONDecodeError as e:
            return error_response("query", ErrorCode.INVALID_ARGUMENT, f"--bind is not valid JSON: {e}",
                                  start_time=start_time)
        if not isinstance(bind_vars, dict):
            return error_response("query", ErrorCode.INVALID_ARGUMENT, "--bind must be a JSON object",
                                  start_time=start_time)

    config = cli_config.get_config()
    client = cli_config.get_client()
    db_name = database or config.database
    try:
        db = client.database(db_name, skip_exist_check=True)
        results = []
        with db.query(aql, bind_vars, QueryOptions(batch_size=batch_size, count=True)) as cursor:
            for document in cursor:
                results.append(document)
                if len(results) % 10_000 == 0:
                    progress(f"Read {len(results):,} results")
            stats = cursor.statistics.model_dump(mode="json", exclude_none=True)
    finally:
        client.close()

    return success_response(
        "query",
        {"results": results, "stats": stats},
        start_time=start_time,
        database=db_name,
    )
