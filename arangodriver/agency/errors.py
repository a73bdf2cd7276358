"""Errors raised by agency reads, health checks and locks."""

from __future__ import annotations

from collections.abc import Sequence

from arangodriver.errors import ArangoClientError, _check_cause


class KeyNotFoundError(ArangoClientError):
    """Raised when a read walks into a key that does not exist."""

    def __init__(self, key: Sequence[str]) -> None:
        self.key = list(key)
        super().__init__(f"Key '{'/'.join(self.key)}' not found")


class AgencyHealthError(ArangoClientError):
    """Raised when the agents do not agree on exactly one responding leader."""


class AlreadyLockedError(ArangoClientError):
    """Raised when a lock is held, by this instance or by someone else."""


class NotLockedError(ArangoClientError):
    """Raised when releasing a lock that is not held."""


def is_key_not_found(err: BaseException | None) -> bool:
    return _check_cause(err, lambda e: isinstance(e, KeyNotFoundError))


def is_already_locked(err: BaseException | None) -> bool:
    return _check_cause(err, lambda e: isinstance(e, AlreadyLockedError))


def is_not_locked(err: BaseException | None) -> bool:
    return _check_cause(err, lambda e: isinstance(e, NotLockedError))


__all__ = [
    "AgencyHealthError",
    "AlreadyLockedError",
    "KeyNotFoundError",
    "NotLockedError",
    "is_already_locked",
    "is_key_not_found",
    "is_not_locked",
]
