"""arangoctl - Main entry point.

Command line access to an ArangoDB deployment through arangodriver.
All commands print a JSON envelope on stdout; progress goes to stderr.

Server:
    arangoctl version                    # Server version and license
    arangoctl cluster health             # Health of every cluster server

Databases and collections:
    arangoctl db list                    # List databases
    arangoctl db create NAME             # Create a database
    arangoctl db drop NAME               # Drop a database
    arangoctl collection list            # List collections
    arangoctl collection count NAME      # Number of documents in a collection

Queries:
    arangoctl query "FOR d IN docs RETURN d" --bind '{"x": 1}'

Agency:
    arangoctl agency read arango/Plan/Version
    arangoctl agency health http://agent1:8531 http://agent2:8531 http://agent3:8531
"""

from __future__ import annotations

from pathlib import Path

import typer

from arangodriver.cli import config as cli_config
from arangodriver.cli.decorators import cli_command
from arangodriver.cli.output import (
    CLIResponse,
    ErrorCode,
    error_response,
    print_response,
)
from arangodriver.logging import LogManager

# Note: rich_markup_mode=None disables rich help formatting to avoid
# typer/click compatibility issues with Parameter.make_metavar()
app = typer.Typer(
    name="arangoctl",
    help="ArangoDB command line client - JSON output for scripts and operators.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode=None,
)


@app.callback()
def main(
    config: Path = typer.Option(
        None, "--config", "-c", help="YAML file with client settings (ARANGO_* variables override it)"
    ),
    log_level: str = typer.Option("WARNING", "--log-level", "-l", help="Log level (DEBUG, INFO, WARNING, ERROR)"),
    log_to_file: bool = typer.Option(False, "--log-to-file", help="Also write rotating log files"),
) -> None:
    """ArangoDB command line client - JSON output for scripts and operators."""
    try:
        LogManager.setup(log_level, log_to_file=log_to_file)
    except ValueError as e:
        print_response(error_response("arangoctl", ErrorCode.CONFIG_ERROR, str(e)))
        raise typer.Exit(1) from None
    cli_config.set_config_path(config)


# =============================================================================
# Subcommand Groups
# =============================================================================

db_app = typer.Typer(
    name="db",
    help="List, create and drop databases.",
    no_args_is_help=True,
    rich_markup_mode=None,
)
app.add_typer(db_app, name="db")

collection_app = typer.Typer(
    name="collection",
    help="Inspect collections of a database.",
    no_args_is_help=True,
    rich_markup_mode=None,
)
app.add_typer(collection_app, name="collection")

agency_app = typer.Typer(
    name="agency",
    help="Read agency keys and check agent health.",
    no_args_is_help=True,
    rich_markup_mode=None,
)
app.add_typer(agency_app, name="agency")

cluster_app = typer.Typer(
    name="cluster",
    help="Cluster administration.",
    no_args_is_help=True,
    rich_markup_mode=None,
)
app.add_typer(cluster_app, name="cluster")


# =============================================================================
# Server Commands
# =============================================================================


@app.command("version")
@cli_command("version", ErrorCode.SERVER_ERROR)
def version(
    details: bool = typer.Option(False, "--details", "-d", help="Include build details"),
    start_time: float = typer.Option(0.0, hidden=True),  # Injected by decorator
) -> CLIResponse:
    """Show server version, edition and license."""
    from arangodriver.cli.commands.server import show_version

    return show_version(details, start_time)


@app.command("query")
@cli_command("query", ErrorCode.QUERY_FAILED)
def query(
    aql: str = typer.Argument(..., help="AQL query", metavar="AQL"),
    bind: str = typer.Option(None, "--bind", "-b", help="Bind parameters as a JSON object"),
    batch_size: int = typer.Option(None, "--batch-size", "-n", help="Cursor batch size"),
    database: str = typer.Option(None, "--database", "-D", help="Database (default: from config)"),
    start_time: float = typer.Option(0.0, hidden=True),  # Injected by decorator
) -> CLIResponse:
    """Run an AQL query and print all results."""
    from arangodriver.cli.commands.query import run_query

    return run_query(aql, bind, batch_size, database, start_time)


# =============================================================================
# Database Commands
# =============================================================================


@db_app.command("list")
@cli_command("db.list", ErrorCode.DATABASE_ERROR)
def db_list(
    start_time: float = typer.Option(0.0, hidden=True),  # Injected by decorator
) -> CLIResponse:
    """List all databases."""
    from arangodriver.cli.commands.databases import list_databases

    return list_databases(start_time)


@db_app.command("create")
@cli_command("db.create", ErrorCode.DATABASE_ERROR)
def db_create(
    name: str = typer.Argument(..., help="Database name", metavar="NAME"),
    start_time: float = typer.Option(0.0, hidden=True),  # Injected by decorator
) -> CLIResponse:
    """Create a database."""
    from arangodriver.cli.commands.databases import create_database

    return create_database(name, start_time)


@db_app.command("drop")
@cli_command("db.drop", ErrorCode.DATABASE_ERROR)
def db_drop(
    name: str = typer.Argument(..., help="Database name", metavar="NAME"),
    start_time: float = typer.Option(0.0, hidden=True),  # Injected by decorator
) -> CLIResponse:
    """Drop a database and all its data."""
    from arangodriver.cli.commands.databases import drop_database

    return drop_database(name, start_time)


# =============================================================================
# Collection Commands
# =============================================================================


@collection_app.command("list")
@cli_command("collection.list", ErrorCode.DATABASE_ERROR)
def collection_list(
    database: str = typer.Option(None, "--database", "-D", help="Database (default: from config)"),
    include_system: bool = typer.Option(False, "--system", help="Include system collections"),
    start_time: float = typer.Option(0.0, hidden=True),  # Injected by decorator
) -> CLIResponse:
    """List collections of a database."""
    from arangodriver.cli.commands.databases import list_collections

    return list_collections(database, include_system, start_time)


@collection_app.command("count")
@cli_command("collection.count", ErrorCode.DATABASE_ERROR)
def collection_count(
    name: str = typer.Argument(..., help="Collection name", metavar="NAME"),
    database: str = typer.Option(None, "--database", "-D", help="Database (default: from config)"),
    start_time: float = typer.Option(0.0, hidden=True),  # Injected by decorator
) -> CLIResponse:
    """Count the documents of a collection."""
    from arangodriver.cli.commands.databases import count_collection

    return count_collection(name, database, start_time)


# =============================================================================
# Agency Commands
# =============================================================================


@agency_app.command("read")
@cli_command("agency.read", ErrorCode.AGENCY_ERROR)
def agency_read(
    key: str = typer.Argument(..., help="Key path, e.g. arango/Plan/Version", metavar="KEY"),
    start_time: float = typer.Option(0.0, hidden=True),  # Injected by decorator
) -> CLIResponse:
    """Read an agency key (the configured endpoints must be agents)."""
    from arangodriver.cli.commands.agency import read_key

    return read_key(key, start_time)


@agency_app.command("health")
@cli_command("agency.health", ErrorCode.AGENCY_ERROR)
def agency_health(
    endpoints: list[str] = typer.Argument(..., help="One endpoint per agent", metavar="ENDPOINT..."),
    allow_no_leader: bool = typer.Option(False, "--allow-no-leader", help="Accept an agency without leader"),
    start_time: float = typer.Option(0.0, hidden=True),  # Injected by decorator
) -> CLIResponse:
    """Check that all agents respond and agree on a single leader."""
    from arangodriver.cli.commands.agency import agents_health

    return agents_health(endpoints, allow_no_leader, start_time)


# =============================================================================
# Cluster Commands
# =============================================================================


@cluster_app.command("health")
@cli_command("cluster.health", ErrorCode.CLUSTER_ERROR)
def cluster_health(
    start_time: float = typer.Option(0.0, hidden=True),  # Injected by decorator
) -> CLIResponse:
    """Show the health of every server in the cluster."""
    from arangodriver.cli.commands.server import cluster_health as read_cluster_health

    return read_cluster_health(start_time)


if __name__ == "__main__":
    app()
