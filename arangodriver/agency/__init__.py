"""Agency access: key reads and writes, health checks and a distributed lock."""

from arangodriver.agency.client import AgencyClient
from arangodriver.agency.errors import (
    AgencyHealthError,
    AlreadyLockedError,
    KeyNotFoundError,
    NotLockedError,
    is_already_locked,
    is_key_not_found,
    is_not_locked,
)
from arangodriver.agency.health import AgentStatus, are_agents_healthy
from arangodriver.agency.lock import Lock
from arangodriver.agency.operations import (
    Condition,
    ConditionIfEqual,
    ConditionIfNotEqual,
    ConditionIsArray,
    ConditionOldEmpty,
    Key,
    KeyArrayErase,
    KeyArrayPush,
    KeyArrayReplace,
    KeyChange,
    KeyDelete,
    KeyObserve,
    KeySet,
)
from arangodriver.agency.transaction import AgencyTransaction

__all__ = [
    "AgencyClient",
    "AgencyHealthError",
    "AgencyTransaction",
    "AgentStatus",
    "AlreadyLockedError",
    "Condition",
    "ConditionIfEqual",
    "ConditionIfNotEqual",
    "ConditionIsArray",
    "ConditionOldEmpty",
    "Key",
    "KeyArrayErase",
    "KeyArrayPush",
    "KeyArrayReplace",
    "KeyChange",
    "KeyDelete",
    "KeyNotFoundError",
    "KeyObserve",
    "KeySet",
    "Lock",
    "NotLockedError",
    "are_agents_healthy",
    "is_already_locked",
    "is_key_not_found",
    "is_not_locked",
]
