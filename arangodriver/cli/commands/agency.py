"""Agency commands for arangoctl."""

from __future__ import annotations

from dataclasses import asdict

from arangodriver.agency import Key
from arangodriver.agency.errors import AgencyHealthError
from arangodriver.agency.health import check_agent_statuses, probe_agents
from arangodriver.cli import config as cli_config
from arangodriver.cli.output import CLIResponse, ErrorCode, error_response, progress, success_response


def read_key(key: str, start_time: float) -> CLIResponse:
    client = cli_config.get_client()
    try:
        value = client.agency.read_key(Key(key))
    finally:
        client.close()
    return success_response("agency.read", {"key": Key(key).full_key, "value": value}, start_time=start_time)


def agents_health(endpoints: list[str], allow_no_leader: bool, start_time: float) -> CLIResponse:
    """Check that the given agents agree on one leader.

    Args:
        endpoints: One endpoint per agent
        allow_no_leader: Accept an agency that has no leader right now
        start_time: Start time for duration calculation

    Returns:
        CLIResponse with per-agent status, or an AGENCY_ERROR response
    """
    clients = cli_config.get_agency_clients(endpoints)
    try:
        progress(f"Probing {len(clients)} agents")
        statuses = probe_agents(clients)
    finally:
        for client in clients:
            client.connection.close()

    agents = [asdict(status) for status in statuses]
    try:
        check_agent_statuses(statuses, allow_no_leader=allow_no_leader)
    except AgencyHealthError as e:
        return error_response(
            "agency.health",
            ErrorCode.AGENCY_ERROR,
            str(e),
            details={"agents": agents},
            start_time=start_time,
        )
    return success_response("agency.health", {"healthy": True, "agents": agents}, start_time=start_time)
