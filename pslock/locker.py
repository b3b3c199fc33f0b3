"""Factory for Redis-backed mutexes sharing one client."""

from __future__ import annotations

import redis

from pslock.mutex import (
    DEFAULT_EXPIRY,
    DEFAULT_TRIES,
    DelayFunc,
    Mutex,
    default_delay,
)


def _fixed_delay(seconds: float) -> DelayFunc:
    """Build a delay function that waits ``seconds`` before every retry."""
    return lambda tries: seconds


class PSLock:
    """Creates mutexes on a Redis client; the client is pinged on creation.

    Subclasses choose the kind of mutex they hand out through ``mutex_class``.
    """

    mutex_class: type[Mutex] = Mutex

    def __init__(self, client: redis.Redis) -> None:
        client.ping()
        self.client = client

    def new_mutex(
        self,
        key: str,
        *,
        name: str | None = None,
        expiry: float = DEFAULT_EXPIRY,
        tries: int = DEFAULT_TRIES,
        retry_delay: float | None = None,
        delay_func: DelayFunc | None = None,
    ) -> Mutex:
        """Return a mutex guarding ``key``.

        ``retry_delay`` fixes the wait between retries; ``delay_func`` computes
        it from the retry index. The default is random, 50 ms to 250 ms.
        """
        if retry_delay is not None and delay_func is not None:
            raise ValueError("retry_delay and delay_func are mutually exclusive")
        if retry_delay is not None:
            delay_func = _fixed_delay(retry_delay)
        return self.mutex_class(
            self.client,
            key,
            name=name,
            expiry=expiry,
            tries=tries,
            delay_func=delay_func or default_delay,
        )