"""Agency write transactions."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from arangodriver.agency.operations import Condition, KeyChange, create_full_key
from arangodriver.errors import InvalidArgumentError

DEFAULT_CLIENT_ID = "arangodriver"


class AgencyTransaction:
    """Key changes and preconditions applied atomically by the agency.

    The agency accepts one precondition per key. Transient transactions are
    written to ``/_api/agency/transient`` and skip the replicated log.
    """

    def __init__(self, client_id: str | None = DEFAULT_CLIENT_ID, transient: bool = False) -> None:
        self.client_id = client_id
        self.transient = transient
        self.keys: list[KeyChange] = []
        self.conditions: dict[str, Condition] = {}

    def __repr__(self) -> str:
        return f"<AgencyTransaction keys={len(self.keys)} conditions={len(self.conditions)}>"

    def add_key(self, change: KeyChange) -> AgencyTransaction:
        self.keys.append(change)
        return self

    def add_condition(self, key: Sequence[str], condition: Condition) -> AgencyTransaction:
        return self.add_condition_by_full_key(create_full_key(key), condition)

    def add_condition_by_full_key(self, full_key: str, condition: Condition) -> AgencyTransaction:
        if full_key in self.conditions:
            raise InvalidArgumentError("too many conditions")
        self.conditions[full_key] = condition
        return self

    def to_body(self) -> list[list[Any]]:
        """Request body for ``/_api/agency/write``: ``[[changes, conditions, clientId]]``."""
        changes = {change.full_key: change.to_update() for change in self.keys}
        conditions = {key: condition.to_condition() for key, condition in self.conditions.items()}
        entry: list[Any] = [changes, conditions]
        if self.client_id:
            entry.append(self.client_id)
        return [entry]


__all__ = ["AgencyTransaction", "DEFAULT_CLIENT_ID"]
