"""Agency keys, key changes and write preconditions.

A write transaction is a list of key changes plus at most one precondition
per key. Both render to the JSON shapes the agency expects:

    {"/arango/Plan/x": {"op": "set", "new": 1, "ttl": 30}}
    {"/arango/Plan/x": {"oldEmpty": true}}
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Any, ClassVar


class Key(tuple):
    """Path of a key in the agency tree, e.g. ``Key(["arango", "Plan"])``."""

    def __new__(cls, elements=()):
        if isinstance(elements, str):
            elements = [e for e in elements.split("/") if e]
        return super().__new__(cls, elements)

    def create_sub_key(self, *elements: str) -> Key:
        return Key([*self, *elements])

    @property
    def full_key(self) -> str:
        return create_full_key(self)

    def __str__(self) -> str:
        return self.full_key


def create_full_key(key) -> str:
    return "/" + "/".join(key)


def _ttl_seconds(ttl: timedelta | float | None) -> int:
    if ttl is None:
        return 0
    return int(ttl.total_seconds() if isinstance(ttl, timedelta) else ttl)


# ----------------------------------------------------------------------
# Key changers
# ----------------------------------------------------------------------
@dataclass
class KeyChange:
    """A single operation on a key; subclasses set ``operation``."""

    operation: ClassVar[str] = ""

    key: Key

    def __post_init__(self) -> None:
        self.key = Key(self.key)

    @property
    def full_key(self) -> str:
        return create_full_key(self.key)

    def to_update(self) -> dict[str, Any]:
        return {"op": self.operation}


@dataclass
class KeySet(KeyChange):
    operation: ClassVar[str] = "set"

    value: Any = None
    ttl: timedelta | float | None = None

    def to_update(self) -> dict[str, Any]:
        update = super().to_update()
        if self.value is not None:
            update["new"] = self.value
        seconds = _ttl_seconds(self.ttl)
        if seconds:
            update["ttl"] = seconds
        return update


@dataclass
class KeyDelete(KeyChange):
    operation: ClassVar[str] = "delete"


@dataclass
class KeyArrayPush(KeyChange):
    operation: ClassVar[str] = "push"

    value: Any = None

    def to_update(self) -> dict[str, Any]:
        return {**super().to_update(), "new": self.value}


@dataclass
class KeyArrayErase(KeyChange):
    operation: ClassVar[str] = "erase"

    value: Any = None

    def to_update(self) -> dict[str, Any]:
        return {**super().to_update(), "val": self.value}


@dataclass
class KeyArrayReplace(KeyChange):
    operation: ClassVar[str] = "replace"

    old_value: Any = None
    new_value: Any = None

    def to_update(self) -> dict[str, Any]:
        return {**super().to_update(), "val": self.old_value, "new": self.new_value}


@dataclass
class KeyObserve(KeyChange):
    """Register (or with ``observe=False`` remove) a change callback URL."""

    url: str = ""
    observe: bool = True

    def to_update(self) -> dict[str, Any]:
        return {"op": "observe" if self.observe else "unobserve", "url": self.url}


# ----------------------------------------------------------------------
# Conditions
# ----------------------------------------------------------------------
@dataclass
class Condition:
    name: ClassVar[str] = ""

    value: Any

    def to_condition(self) -> dict[str, Any]:
        return {self.name: self.value}


@dataclass
class ConditionIfEqual(Condition):
    name: ClassVar[str] = "old"


@dataclass
class ConditionIfNotEqual(Condition):
    name: ClassVar[str] = "oldNot"


@dataclass
class ConditionOldEmpty(Condition):
    name: ClassVar[str] = "oldEmpty"

    value: bool = True


@dataclass
class ConditionIsArray(Condition):
    name: ClassVar[str] = "isArray"

    value: bool = True


__all__ = [
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
    "KeyObserve",
    "KeySet",
    "create_full_key",
]
