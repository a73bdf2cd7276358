"""Reads and writes against the agency key/value store."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import timedelta
from typing import Any

import structlog

from arangodriver.agency.errors import KeyNotFoundError
from arangodriver.agency.operations import (
    Condition,
    ConditionIfEqual,
    ConditionOldEmpty,
    Key,
    KeyDelete,
    KeyObserve,
    KeySet,
    create_full_key,
)
from arangodriver.agency.transaction import AgencyTransaction
from arangodriver.connection.base import Connection
from arangodriver.connection.call import call_post, new_url
from arangodriver.connection.endpoints import RoundRobinEndpoints, fixup_endpoint_url_scheme
from arangodriver.errors import ArangoClientError, ArangoError, ResponseError

logger = structlog.get_logger(__name__)

MAX_REDIRECTS = 10

_READ_STATUS_CODES = (200, 201, 202, 307)
_WRITE_STATUS_CODES = (200, 201, 202, 412)


class AgencyClient:
    """Client for an agency, reached through a connection to one or more agents.

    Followers answer reads with ``307 Temporary Redirect``; the client then
    switches its connection to the leader named in ``Location`` and retries.
    """

    def __init__(self, connection: Connection) -> None:
        self._connection = connection

    def __repr__(self) -> str:
        return f"<AgencyClient {self._connection.endpoint!r}>"

    @property
    def connection(self) -> Connection:
        return self._connection

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def read_key(self, key: Sequence[str], follow_redirects: bool = True) -> Any:
        """Read the value stored at ``key``.

        Args:
            key: Path of the key, e.g. ``["arango", "Plan", "Version"]``
            follow_redirects: Switch to the leader on a 307. When False the
                redirect is raised as ``ArangoError(307)`` with the leader
                endpoint in ``details["location"]`` and the connection is kept

        Returns:
            Decoded JSON value of the key

        Raises:
            KeyNotFoundError: When an element of the path does not exist
            ArangoError: On a redirect without ``Location`` or an error status
        """
        key = Key(key)
        full_key = create_full_key(key)
        for _ in range(MAX_REDIRECTS + 1):
            try:
                response = call_post(
                    self._connection,
                    new_url("_api", "agency", "read"),
                    [[full_key]],
                    allowed_status_codes=_READ_STATUS_CODES,
                )
            except ArangoError as e:
                logger.error("agency_read_failed", key=full_key, status=e.status_code, error=str(e))
                raise

            if response.code != 307:
                return _unwrap(key, response.json())

            location = response.header("Location")
            if not location:
                logger.error("agency_redirect_without_location", key=full_key)
                raise ArangoError(307, "agency redirect without Location header")
            leader = fixup_endpoint_url_scheme(_endpoint_of(location))
            if not follow_redirects:
                raise ArangoError(307, f"agency redirect to {leader}", {"location": leader})
            logger.debug("agency_redirect", key=full_key, location=location, leader=leader)
            self._connection.set_endpoint(RoundRobinEndpoints([leader]))

        raise ArangoClientError(f"too many agency redirects reading {full_key}")

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    def write_transaction(self, transaction: AgencyTransaction) -> None:
        """Apply ``transaction``; a failed precondition raises ``ArangoError(412)``."""
        path = "transient" if transaction.transient else "write"
        url = new_url("_api", "agency", path)
        try:
            response = call_post(
                self._connection, url, transaction.to_body(), allowed_status_codes=_WRITE_STATUS_CODES
            )
        except ArangoError as e:
            logger.error("agency_write_failed", url=url, status=e.status_code, error=str(e))
            raise

        data = response.json() or {}
        results = data.get("results") if isinstance(data, dict) else None
        if not results:
            raise ArangoError(412, "agency precondition failed")
        if len(results) != 1:
            raise ResponseError(f"expected 1 agency write result, got {len(results)}")
        if results[0] == 0:
            raise ArangoError(412, "agency precondition failed")

    def write_key(
        self,
        key: Sequence[str],
        value: Any,
        ttl: timedelta | None = None,
        condition: Condition | None = None,
    ) -> None:
        transaction = AgencyTransaction().add_key(KeySet(key, value, ttl))
        if condition is not None:
            transaction.add_condition(key, condition)
        self.write_transaction(transaction)

    def write_key_if_empty(self, key: Sequence[str], value: Any, ttl: timedelta | None = None) -> None:
        self.write_key(key, value, ttl, ConditionOldEmpty(True))

    def write_key_if_equal_to(
        self, key: Sequence[str], new_value: Any, old_value: Any, ttl: timedelta | None = None
    ) -> None:
        self.write_key(key, new_value, ttl, ConditionIfEqual(old_value))

    def remove_key(self, key: Sequence[str], condition: Condition | None = None) -> None:
        transaction = AgencyTransaction().add_key(KeyDelete(key))
        if condition is not None:
            transaction.add_condition(key, condition)
        self.write_transaction(transaction)

    def remove_key_if_equal_to(self, key: Sequence[str], old_value: Any) -> None:
        self.remove_key(key, ConditionIfEqual(old_value))

    def register_change_callback(self, key: Sequence[str], callback_url: str) -> None:
        """Ask the agency to POST to ``callback_url`` whenever ``key`` changes."""
        self.write_transaction(AgencyTransaction().add_key(KeyObserve(key, callback_url)))

    def unregister_change_callback(self, key: Sequence[str], callback_url: str) -> None:
        self.write_transaction(AgencyTransaction().add_key(KeyObserve(key, callback_url, observe=False)))


def _endpoint_of(location: str) -> str:
    # Location carries the full URL of the request on the leader.
    scheme, sep, rest = location.partition("://")
    if not sep:
        return location
    return f"{scheme}://{rest.split('/', 1)[0]}"


def _unwrap(key: Key, data: Any) -> Any:
    if not isinstance(data, list) or len(data) != 1:
        count = len(data) if isinstance(data, list) else 0
        raise ResponseError(f"agency read: expected 1 element, got {count}")
    current = data[0]
    for index, element in enumerate(key):
        if not isinstance(current, dict):
            raise ArangoClientError(f"data is not an object at key {create_full_key(key[:index])}")
        if element not in current:
            raise KeyNotFoundError(key[: index + 1])
        current = current[element]
    return current


__all__ = ["AgencyClient", "MAX_REDIRECTS"]
