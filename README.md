# pslock

Distributed mutexes backed by Redis.

A lock is the Redis key `distributed_lock:<key>`, set to `"1"` with `SET NX`
and an expiry. When the key is already held, a waiter retries at intervals
until its patience runs out. The publish/subscribe flavour also subscribes to
a channel named after the key; releasing a lock deletes the key and publishes
an `unlock` message there, so subscribed waiters try again at once.

Three factories are provided, each pinging the Redis server when created:

- `pslock.locker.PSLock` hands out `pslock.mutex.Mutex`: publish/subscribe
  wake-ups plus polling retries.
- `pslock.weaklock.WeakLock` hands out the same `Mutex` under a separate name.
- `pslock.looplock.LoopLock` hands out `pslock.looplock.LoopMutex`: polling
  retries only, no subscription.

## Installation

```
pip install pslock
```

## Usage

```python
import redis

from pslock.locker import PSLock
from pslock.mutex import LockError, LockTimeout

client = redis.Redis(host="localhost", port=6379)
locker = PSLock(client)  # pings the server; raises if it is unreachable

mutex = locker.new_mutex("test-lock")
mutex.lock()
try:
    ...  # critical section
finally:
    mutex.unlock()

# or as a context manager: lock() on entry, unlock() on exit
with locker.new_mutex("test-lock", expiry=3.0, tries=5, retry_delay=0.1):
    ...
```

Options accepted by `new_mutex` (keyword only, durations in seconds):

| option        | default                          | meaning                                       |
|---------------|----------------------------------|-----------------------------------------------|
| `name`        | the key                          | display name of the mutex (`mutex.name`)      |
| `expiry`      | 8                                | lifetime of the lock key; 0 or less: none     |
| `tries`       | 32                               | number of polling attempts while waiting      |
| `retry_delay` | random, 0.05 up to 0.25          | fixed wait between attempts                   |
| `delay_func`  | `pslock.mutex.default_delay`     | `f(attempt) -> seconds`                       |

`retry_delay` and `delay_func` cannot be given together (`ValueError`).

The patience window is 8 seconds. To change it, build a `Mutex` (or
`LoopMutex`) directly: `Mutex(client, key, name=None, expiry=8.0, patient=8.0,
tries=32, delay_func=default_delay)`. The Redis key is available as
`mutex.lock_key`.

### Errors and waiting behaviour

- A Redis failure on the first `SET NX`, on delete or on publish raises
  `pslock.mutex.LockError` (message starting `failed to acquire lock`,
  `failed to release lock` or `failed to publish unlock message`).
- When the patience window ends before the lock is taken, `lock()` raises
  `pslock.mutex.LockTimeout`, a subclass of `LockError`.
- When the retries run out before the window ends, `lock()` returns without
  an error even if the last attempt did not take the key. The same holds when
  subscribing fails: `sub error: ...` is printed and `lock()` returns. Callers
  who need certainty should check the key themselves.
- Redis errors during retries are ignored and the next attempt follows.

### What it does not do

- `unlock()` deletes the key unconditionally; there is no owner token, so any
  holder of a mutex on the same key can release it.
- There is no lock renewal; a lock held past its expiry lapses.
- Only the synchronous `redis.Redis` client is supported.

## Example command

With a Redis server reachable (by default on `localhost:6379`):

```
pslock-example
```

It acquires `test-lock` through `PSLock`, prints
`Lock acquired, doing some work...`, holds the lock for two seconds, releases
it and prints `Lock released successfully`. Options: `--host`, `--port` and
`--work` (seconds to hold the lock). A lock failure is printed to standard
error and the command exits with status 1. The same flow is available in code
as `pslock.example.run(client, work_seconds=2.0)`.

## Tests

```
pip install -e ".[test]"
pytest
```