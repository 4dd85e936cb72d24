"""
In-memory brute-force login throttle.

Counts failed login attempts per client identifier (usually an IP address).
Once an identifier reaches ``max_failed_attempts`` it is blocked until
``block_duration`` has passed since its most recent failure, or until a
successful login clears it.

State lives in the process only; it is not shared between workers. Timers
run on the asyncio event loop, so all mutations happen on the loop thread
and same-identifier operations are serialized. Each entry also carries a
monotonic deadline, so records expire even when no loop is running.

Usage::

    throttle = LoginThrottle()

    if not throttle.is_allowed(client_ip):
        ...  # reject
    if credentials_ok:
        throttle.successful_attempt(client_ip)
    else:
        throttle.failed_attempt(client_ip)
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from datetime import timedelta

logger = logging.getLogger(__name__)

DEFAULT_MAX_FAILED_ATTEMPTS = 5
DEFAULT_BLOCK_DURATION = timedelta(minutes=15)


@dataclass
class ThrottleEntry:
    """Failed-attempt record for one identifier."""

    identifier: str
    failure_count: int = 0
    pending_reset: asyncio.TimerHandle | None = None
    reset_at: float = 0.0  # time.monotonic() deadline

    def expired(self, now: float | None = None) -> bool:
        return (time.monotonic() if now is None else now) >= self.reset_at

    def cancel_reset(self) -> None:
        if self.pending_reset is not None:
            self.pending_reset.cancel()
            self.pending_reset = None


class LoginThrottle:
    """Blocks identifiers after repeated failed login attempts."""

    def __init__(
        self,
        max_failed_attempts: int = DEFAULT_MAX_FAILED_ATTEMPTS,
        block_duration: timedelta = DEFAULT_BLOCK_DURATION,
        store: dict[str, ThrottleEntry] | None = None,
    ) -> None:
        """
        Args:
            max_failed_attempts: Failures after which an identifier is blocked
            block_duration: Time after the most recent failure at which the
                identifier's record is forgotten
            store: Mapping of identifier to entry; a new dict when omitted
        """
        self._max_failed_attempts = max_failed_attempts
        self._block_duration = block_duration
        self._store: dict[str, ThrottleEntry] = store if store is not None else {}

    # ── Public API ────────────────────────────────────────────────────────────

    @property
    def max_failed_attempts(self) -> int:
        return self._max_failed_attempts

    @property
    def block_duration(self) -> timedelta:
        return self._block_duration

    def is_allowed(self, identifier: str) -> bool:
        """Return False if *identifier* has reached the failure threshold."""
        entry = self._live_entry(identifier)
        return entry is None or entry.failure_count < self._max_failed_attempts

    def failed_attempt(self, identifier: str) -> int:
        """
        Register a failed login for *identifier*.

        The pending reset is cancelled and rescheduled, so the record expires
        ``block_duration`` after this failure. Outside a running event loop
        no timer is scheduled and the record expires lazily on next access.

        Returns the failure count after the increment.
        """
        entry = self._live_entry(identifier)
        if entry is None:
            entry = ThrottleEntry(identifier=identifier)
            self._store[identifier] = entry

        entry.failure_count += 1
        entry.cancel_reset()
        entry.reset_at = time.monotonic() + self._block_duration.total_seconds()
        self._schedule_reset(entry)

        if entry.failure_count == self._max_failed_attempts:
            logger.warning(
                "login_throttle: %s blocked after %d failed attempts for %s",
                identifier,
                entry.failure_count,
                self._block_duration,
            )
        else:
            logger.debug(
                "login_throttle: %s failed attempt %d/%d",
                identifier,
                entry.failure_count,
                self._max_failed_attempts,
            )
        return entry.failure_count

    def successful_attempt(self, identifier: str) -> None:
        """Clear the record of *identifier* and cancel its pending reset."""
        entry = self._store.pop(identifier, None)
        if entry is None:
            return
        entry.cancel_reset()
        logger.debug("login_throttle: %s cleared after successful login", identifier)

    def failure_count(self, identifier: str) -> int:
        entry = self._live_entry(identifier)
        return entry.failure_count if entry else 0

    def remaining_attempts(self, identifier: str) -> int:
        """Failures *identifier* may still make before being blocked."""
        return max(self._max_failed_attempts - self.failure_count(identifier), 0)

    def clear(self) -> None:
        """Cancel all pending resets and forget every identifier."""
        for entry in self._store.values():
            entry.cancel_reset()
        self._store.clear()

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._store

    # ── Internal helpers ──────────────────────────────────────────────────────

    def _live_entry(self, identifier: str) -> ThrottleEntry | None:
        entry = self._store.get(identifier)
        if entry is not None and entry.expired():
            self._forget(identifier, entry)
            return None
        return entry

    def _schedule_reset(self, entry: ThrottleEntry) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        entry.pending_reset = loop.call_later(
            self._block_duration.total_seconds(), self._reset, entry.identifier, entry
        )

    def _forget(self, identifier: str, entry: ThrottleEntry) -> None:
        del self._store[identifier]
        entry.cancel_reset()
        logger.debug("login_throttle: %s reset after %s", identifier, self._block_duration)

    def _reset(self, identifier: str, entry: ThrottleEntry) -> None:
        """Timer callback: forget *identifier* once its window has elapsed."""
        if self._store.get(identifier) is not entry:
            return
        entry.pending_reset = None
        self._forget(identifier, entry)
