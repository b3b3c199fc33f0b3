"""Factory for pub/sub-notified mutexes under the weak-lock name."""

from __future__ import annotations

from typing import Any

import redis

from pslock.locker import PSLock
from pslock.mutex import Mutex

_UNSET: Any = object()


class WeakLock(PSLock):
    """Creates pub/sub-notified mutexes; the client is pinged on creation."""

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
    ) -> Mutex:
        """Return a new mutex for ``key``; unset options keep their defaults."""
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