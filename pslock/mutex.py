"""A Redis-backed mutex that waits for release notifications over pub/sub."""

from __future__ import annotations

import random
import time
from collections.abc import Callable

import redis

LOCK_PREFIX = "distributed_lock:"
UNLOCK_MESSAGE = "unlock"

MIN_RETRY_DELAY_MS = 50
MAX_RETRY_DELAY_MS = 250

DEFAULT_EXPIRY = 8.0
DEFAULT_PATIENT = 8.0
DEFAULT_TRIES = 32

DelayFunc = Callable[[int], float]


class LockError(Exception):
    """Raised when the lock cannot be taken or released."""


class LockTimeout(LockError):
    """Raised when the lock was not obtained within the patience window."""

    def __init__(self, message: str = "lock acquisition timeout") -> None:
        super().__init__(message)


def default_delay(tries: int) -> float:
    """Return a random delay in seconds, from 50 ms up to (not including) 250 ms."""
    return random.randrange(MIN_RETRY_DELAY_MS, MAX_RETRY_DELAY_MS) / 1000


class Mutex:
    """A distributed lock stored under a Redis key.

    Durations (``expiry``, ``patient`` and the values returned by
    ``delay_func``) are in seconds.
    """

    def __init__(
        self,
        client: redis.Redis,
        key: str,
        name: str | None = None,
        expiry: float = DEFAULT_EXPIRY,
        patient: float = DEFAULT_PATIENT,
        tries: int = DEFAULT_TRIES,
        delay_func: DelayFunc = default_delay,
    ) -> None:
        self.client = client
        self.key = key
        self.name = key if name is None else name
        self.expiry = expiry
        self.patient = patient
        self.tries = tries
        self.delay_func = delay_func

    @property
    def lock_key(self) -> str:
        """The Redis key (and pub/sub channel) that guards this mutex."""
        return LOCK_PREFIX + self.key

    def __repr__(self) -> str:
        return f"{type(self).__name__}(key={self.key!r}, name={self.name!r})"

    def lock(self) -> None:
        """Acquire the lock, waiting up to ``patient`` seconds if it is held."""
        self._acquire(None)

    def unlock(self) -> None:
        """Release the lock and notify waiters."""
        try:
            self.client.delete(self.lock_key)
        except redis.RedisError as err:
            raise LockError(f"failed to release lock: {err}") from err
        try:
            self.client.publish(self.lock_key, UNLOCK_MESSAGE)
        except redis.RedisError as err:
            raise LockError(f"failed to publish unlock message: {err}") from err

    def __enter__(self) -> Mutex:
        self.lock()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.unlock()

    def _try_set(self) -> bool:
        options = {"px": int(self.expiry * 1000)} if self.expiry > 0 else {}
        return bool(self.client.set(self.lock_key, "1", nx=True, **options))

    def _acquire(self, outer_deadline: float | None) -> None:
        try:
            acquired = self._try_set()
        except redis.RedisError as err:
            raise LockError(f"failed to acquire lock: {err}") from err
        if not acquired:
            self._wait(outer_deadline)

    def _wait(self, outer_deadline: float | None) -> None:
        pubsub = self.client.pubsub()
        try:
            try:
                pubsub.subscribe(self.lock_key)
            except redis.RedisError as err:
                print(f"sub error: {err}")
                return
            deadline = time.monotonic() + self.patient
            if outer_deadline is not None:
                deadline = min(deadline, outer_deadline)
            notified = self._poll(pubsub, deadline)
        finally:
            pubsub.close()
        if notified:
            self._acquire(deadline)

    def _poll(self, pubsub, deadline: float) -> bool:
        """Retry until the lock is set or a release is announced.

        Returns True when a release notification arrived, False when polling
        finished (the lock was set or the retries ran out).
        """
        for attempt in range(self.tries):
            if attempt == self.tries - 1:
                return False
            poll_at = time.monotonic() + self.delay_func(attempt)
            if self._await_message(pubsub, min(poll_at, deadline)):
                return True
            if time.monotonic() >= deadline:
                raise LockTimeout()
            try:
                if self._try_set():
                    return False
            except redis.RedisError:
                pass
        # With no retries at all only a notification or the deadline ends the wait.
        if self._await_message(pubsub, deadline):
            return True
        raise LockTimeout()

    @staticmethod
    def _await_message(pubsub, until: float) -> bool:
        while (remaining := until - time.monotonic()) > 0:
            message = pubsub.get_message(ignore_subscribe_messages=True, timeout=remaining)
            if message and message.get("type") == "message":
                return True
        return False