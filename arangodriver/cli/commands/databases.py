"""Database and collection commands for arangoctl."""

from __future__ import annotations

from arangodriver.cli import config as cli_config
from arangodriver.cli.output import CLIResponse, progress, success_response

# =============================================================================
# Databases
# =============================================================================


def list_databases(start_time: float) -> CLIResponse:
    client = cli_config.get_client()
    try:
        names = sorted(db.name for db in client.databases())
    finally:
        client.close()
    return success_response("db.list", names, start_time=start_time)


def create_database(name: str, start_time: float) -> CLIResponse:
    client = cli_config.get_client()
    try:
        progress(f"Creating database {name}")
        client.create_database(name)
    finally:
        client.close()
    return success_response("db.create", {"name": name, "created": True}, start_time=start_time)


def drop_database(name: str, start_time: float) -> CLIResponse:
    client = cli_config.get_client()
    try:
        progress(f"Dropping database {name}")
        client.database(name, skip_exist_check=True).remove()
    finally:
        client.close()
    return success_response("db.drop", {"name": name, "dropped": True}, start_time=start_time)


# =============================================================================
# Collections
# =============================================================================


def list_collections(database: str | None, include_system: bool, start_time: float) -> CLIResponse:
    """List collections of a database.

    Args:
        database: Database name (default: the configured database)
        include_system: Also list system collections
        start_time: Start time for duration calculation

    Returns:
        CLIResponse with name, type and status per collection
    """
    config = cli_config.get_config()
    client = cli_config.get_client()
    db_name = database or config.database
    try:
        db = client.database(db_name)
        infos = db.collection_infos(exclude_system=not include_system)
    finally:
        client.close()

    data = [
        {"name": info.name, "type": info.type, "status": info.status, "is_system": info.is_system}
        for info in sorted(infos, key=lambda i: i.name or "")
    ]
    return success_response("collection.list", data, start_time=start_time, database=db_name)


def count_collection(name: str, database: str | None, start_time: float) -> CLIResponse:
    config = cli_config.get_config()
    client = cli_config.get_client()
    db_name = database or config.database
    try:
        count = client.database(db_name).collection(name).count()
    finally:
        client.close()
    return success_response(
        "collection.count", {"name": name, "count": count}, start_time=start_time, database=db_name
    )
