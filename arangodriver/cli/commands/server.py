"""Server and cluster commands for arangoctl."""

from __future__ import annotations

from arangodriver.cli import config as cli_config
from arangodriver.cli.output import CLIResponse, progress, success_response


def show_version(details: bool, start_time: float) -> CLIResponse:
    client = cli_config.get_client()
    try:
        info = client.version(details=details)
    finally:
        client.close()
    data = info.model_dump(mode="json", exclude_none=True)
    data["enterprise"] = info.is_enterprise()
    return success_response("version", data, start_time=start_time)


def cluster_health(start_time: float) -> CLIResponse:
    """Report the health of every server known to the cluster.

    Args:
        start_time: Start time for duration calculation

    Returns:
        CLIResponse with one entry per server ID
    """
    client = cli_config.get_client()
    try:
        progress("Reading cluster health")
        health = client.cluster_health()
    finally:
        client.close()

    servers = {
        server_id: entry.model_dump(mode="json", exclude_none=True)
        for server_id, entry in health.health.items()
    }
    unhealthy = sorted(sid for sid, entry in health.health.items() if entry.status not in (None, "GOOD"))
    return success_response(
        "cluster.health",
        {"cluster_id": health.cluster_id, "servers": servers, "unhealthy": unhealthy},
        start_time=start_time,
        count=len(servers),
    )
