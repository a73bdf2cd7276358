"""Configuration handling for arangoctl.

The global ``--config`` option is remembered here; commands build their
client from it on demand. Override priority (highest wins):
  1. Environment variables (ARANGO_*)
  2. YAML config file given with --config
"""

from __future__ import annotations

from pathlib import Path

from arangodriver.agency import AgencyClient
from arangodriver.arangodb.client import ArangoClient
from arangodriver.config import ClientConfig, build_connection, load_config, new_client

_state: dict[str, Path | None] = {"config_path": None}


def set_config_path(path: Path | None) -> None:
    _state["config_path"] = path


def get_config() -> ClientConfig:
    return load_config(_state["config_path"])


def get_client() -> ArangoClient:
    return new_client(get_config())


def get_agency_clients(endpoints: list[str]) -> list[AgencyClient]:
    """One agency client per agent endpoint, sharing the configured credentials."""
    config = get_config()
    return [
        AgencyClient(build_connection(config.model_copy(update={"endpoints": [endpoint]})))
        for endpoint in endpoints
    ]
