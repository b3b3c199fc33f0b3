"""Take a named lock, do some work while holding it, then release it."""

from __future__ import annotations

import argparse
import sys
import time

import redis

from pslock.locker import PSLock
from pslock.mutex import LockError

LOCK_NAME = "test-lock"


def run(client: redis.Redis, work_seconds: float = 2.0) -> None:
    """Hold the example lock for ``work_seconds`` seconds."""
    mutex = PSLock(client).new_mutex(LOCK_NAME)
    try:
        mutex.lock()
    except LockError as err:
        raise LockError(f"Failed to acquire lock: {err}") from err

    print("Lock acquired, doing some work...")
    time.sleep(work_seconds)

    try:
        mutex.unlock()
    except LockError as err:
        raise LockError(f"Failed to release lock: {err}") from err
    print("Lock released successfully")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Acquire and release a Redis lock.")
    parser.add_argument("--host", default="localhost")
    parser.add_argument("--port", type=int, default=6379)
    parser.add_argument("--work", type=float, default=2.0, help="seconds to hold the lock")
    args = parser.parse_args(argv)

    client = redis.Redis(host=args.host, port=args.port)
    try:
        run(client, args.work)
    except LockError as err:
        print(err, file=sys.stderr)
        return 1
    finally:
        client.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())