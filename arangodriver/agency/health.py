"""Agency health check across all agents."""

from __future__ import annotations

from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

import structlog

from arangodriver.agency.client import AgencyClient
from arangodriver.agency.errors import AgencyHealthError, KeyNotFoundError
from arangodriver.connection.endpoints import is_same_endpoint
from arangodriver.errors import ArangoClientError, ArangoError

logger = structlog.get_logger(__name__)

# Reading a key that never exists: the leader answers, followers redirect.
PROBE_KEY = ("does-not-exist-70ddb948-59ea-52f3-9a19-baaca18de7ae",)


@dataclass
class AgentStatus:
    endpoint: str
    is_responding: bool = False
    is_leader: bool = False
    leader_endpoint: str = ""


def _endpoint_string(client: AgencyClient) -> str:
    return ",".join(client.connection.endpoint.list())


def probe_agent(client: AgencyClient) -> AgentStatus:
    """Classify one agent as leader, follower or not responding.

    Redirects are not followed: a follower answering 307 is responding, and
    its ``Location`` names the leader even when that address is unreachable.
    """
    status = AgentStatus(endpoint=_endpoint_string(client))
    try:
        client.read_key(PROBE_KEY, follow_redirects=False)
    except KeyNotFoundError:
        pass
    except ArangoError as e:
        if e.status_code != 307:
            logger.warning("agent_not_responding", endpoint=status.endpoint, error=str(e))
            return status
        status.is_responding = True
        status.leader_endpoint = e.details.get("location", "")
        return status
    except ArangoClientError as e:
        logger.warning("agent_not_responding", endpoint=status.endpoint, error=str(e))
        return status

    status.is_responding = True
    status.is_leader = True
    status.leader_endpoint = status.endpoint
    return status


def are_agents_healthy(
    clients: Sequence[AgencyClient],
    allow_no_leader: bool = False,
    allow_different_leader_endpoints: bool = False,
) -> None:
    """Check that exactly one agent leads and all others point to it.

    Every client should be connected to a single agent. The agents are
    probed concurrently.

    Args:
        clients: One client per agent
        allow_no_leader: Accept any number of leaders other than one
            (e.g. during an election)
        allow_different_leader_endpoints: Accept disagreeing leader endpoints,
            as seen while agency endpoints are updated

    Raises:
        AgencyHealthError: When an agent does not respond or the agents disagree
    """
    check_agent_statuses(
        probe_agents(clients),
        allow_no_leader=allow_no_leader,
        allow_different_leader_endpoints=allow_different_leader_endpoints,
    )


def probe_agents(clients: Sequence[AgencyClient]) -> list[AgentStatus]:
    """Probe all agents concurrently, in the order of ``clients``."""
    if not clients:
        return []
    with ThreadPoolExecutor(max_workers=len(clients)) as pool:
        return list(pool.map(probe_agent, clients))


def check_agent_statuses(
    statuses: Sequence[AgentStatus],
    allow_no_leader: bool = False,
    allow_different_leader_endpoints: bool = False,
) -> None:
    """Raise AgencyHealthError unless ``statuses`` describe a healthy agency."""
    if not statuses:
        return
    leaders = 0
    for index, status in enumerate(statuses):
        if not status.is_responding:
            raise AgencyHealthError(f"Agent {status.endpoint} is not responding")
        if status.is_leader:
            leaders += 1
        if index > 0 and not allow_different_leader_endpoints:
            if not is_same_endpoint(statuses[index - 1].leader_endpoint, status.leader_endpoint):
                raise AgencyHealthError("Not all agents report the same leader endpoint")

    if leaders != 1 and not allow_no_leader:
        raise AgencyHealthError(f"Unexpected number of agency leaders: {leaders}")


__all__ = [
    "AgentStatus",
    "PROBE_KEY",
    "are_agents_healthy",
    "check_agent_statuses",
    "probe_agent",
    "probe_agents",
]
