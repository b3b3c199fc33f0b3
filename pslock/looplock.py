"""Mutexes that wait for a held lock by polling alone, without pub/sub."""

from __future__ import annotations

import time
from typing import Any

import redis

from pslock.locker import PSLock
from pslock.mutex import LockError, LockTimeout, Mutex

_UNSET: Any = object()


class LoopMutex(Mutex):
    """A distributed lock that retries ``SET NX`` until it succeeds or gives up.

    As with :class:`~pslock.mutex.Mutex`, running out of retries ends the wait
    without an error; only the patience window raises :class:`LockTimeout`.
    """

    def lock(self) -> None:
        """Acquire the lock, polling for up to ``patient`` seconds if it is held."""
        try:
            if self._try_set():
                return
        except redis.RedisError as err:
            raise LockError(f"failed to acquire lock: {err}") from err

        deadline = time.monotonic() + self.patient
        for attempt in range(self.tries):
            if attempt == self.tries - 1:
                return
            poll_at = time.monotonic() + self.delay_func(attempt)
            if poll_at >= deadline:
                self._sleep_until(deadline)
                raise LockTimeout()
            self._sleep_until(poll_at)
            try:
                if self._try_set():
                    return
            except redis.RedisError:
                pass
        # Without any retries only the deadline ends the wait.
        self._sleep_until(deadline)
        raise LockTimeout()

    @staticmethod
    def _sleep_until(moment: float) -> None:
        remaining = moment - time.monotonic()
        if remaining > 0:
            time.sleep(remaining)


class LoopLock(PSLock):
    """Creates polling mutexes on a Redis client; the client is pinged on creation."""

    mutex_class = LoopMutex

    def __init__(self, client: redis.Redis) -> None:
        super().__init__(client)

    def new_mutex(
        self,
        key: str,
        *,
        name: Any = _UNSET,
        expiry: Any = _UNSET,
        tries: Any = _UNSET,
        retry_delay: Any = _UNSET,
        delay_func: Any = _UNSET,
    ) -> LoopMutex:
        """Return a new polling mutex for ``key``; unset options keep their defaults."""
        options = {
            option: value
            for option, value in (
                ("name", name),
                ("expiry", expiry),
                ("tries", tries),
                ("retry_delay", retry_delay),
                ("delay_func", delay_func),
            )
            if value is not _UNSET
        }
        return super().new_mutex(key, **options)