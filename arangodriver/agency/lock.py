"""Distributed lock stored as an agency key with a TTL."""

from __future__ import annotations

import secrets
import threading
from collections.abc import Sequence
from datetime import timedelta
from typing import Any

import structlog

from arangodriver.agency.client import AgencyClient
from arangodriver.agency.errors import AlreadyLockedError, NotLockedError
from arangodriver.agency.operations import Key
from arangodriver.errors import is_precondition_failed

MIN_LOCK_TTL = timedelta(seconds=5)
DEFAULT_LOCK_TTL = timedelta(seconds=30)
RENEW_RETRY_DELAY = 1.0


class Lock:
    """Exclusive lock on an agency key.

    While held, a daemon thread rewrites the key every ``ttl / 2`` so it does
    not expire. When the key is taken over by someone else the lock notices
    on its next renewal and marks itself unlocked.

        with Lock(client.agency, ["myapp", "leader"]) as lock:
            do_exclusive_work()
    """

    def __init__(
        self,
        agency: AgencyClient,
        key: Sequence[str],
        lock_id: str | None = None,
        ttl: timedelta = DEFAULT_LOCK_TTL,
        logger: Any = None,
    ) -> None:
        self._agency = agency
        self.key = Key(key)
        self.id = lock_id or secrets.token_hex(16)
        self.ttl = max(ttl, MIN_LOCK_TTL)
        self._logger = logger or structlog.get_logger(__name__).bind(lock_key=self.key.full_key, lock_id=self.id)
        self._mutex = threading.Lock()
        self._locked = False
        self._stop: threading.Event | None = None
        self._renewer: threading.Thread | None = None

    def __repr__(self) -> str:
        return f"<Lock {self.key.full_key} id={self.id} locked={self.is_locked()}>"

    def is_locked(self) -> bool:
        with self._mutex:
            return self._locked

    def lock(self) -> None:
        """Acquire the lock and start renewing it.

        Raises:
            AlreadyLockedError: When this lock or another holder has the key
        """
        with self._mutex:
            if self._locked:
                raise AlreadyLockedError(f"lock {self.key.full_key} is already held by this instance")
            try:
                self._agency.write_key_if_empty(self.key, self.id, self.ttl)
            except Exception as e:
                if is_precondition_failed(e):
                    raise AlreadyLockedError(f"lock {self.key.full_key} is held by another owner") from e
                raise
            self._locked = True
            self._stop = threading.Event()
            self._renewer = threading.Thread(
                target=self._renew_loop, args=(self._stop,), name=f"lock-renew-{self.id[:8]}", daemon=True
            )
            self._renewer.start()
        self._logger.debug("lock_acquired")

    def unlock(self) -> None:
        """Release the lock.

        Raises:
            NotLockedError: When the lock is not held
        """
        with self._mutex:
            if not self._locked:
                raise NotLockedError(f"lock {self.key.full_key} is not held")
            self._agency.remove_key_if_equal_to(self.key, self.id)
            self._locked = False
            stop, renewer = self._stop, self._renewer
            self._stop = self._renewer = None
        if stop is not None:
            stop.set()
        if renewer is not None and renewer is not threading.current_thread():
            renewer.join(timeout=self.ttl.total_seconds())
        self._logger.debug("lock_released")

    def _renew_loop(self, stop: threading.Event) -> None:
        delay = self.ttl.total_seconds() / 2
        while not stop.wait(delay):
            try:
                self._agency.write_key_if_equal_to(self.key, self.id, self.id, self.ttl)
                delay = self.ttl.total_seconds() / 2
            except Exception as e:
                if is_precondition_failed(e):
                    self._logger.warning("lock_lost", error=str(e))
                    with self._mutex:
                        if self._stop is stop:
                            self._locked = False
                            self._stop = self._renewer = None
                    return
                self._logger.error("lock_renew_failed", error=str(e))
                delay = RENEW_RETRY_DELAY

    def __enter__(self) -> Lock:
        self.lock()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self.is_locked():
            self.unlock()


__all__ = ["DEFAULT_LOCK_TTL", "Lock", "MIN_LOCK_TTL"]
