import threading
from unittest import mock

import pytest
import redis

from pslock.example import main, run
from pslock.mutex import LockError


class FakePubSub:
    def subscribe(self, *channels):
        pass

    def get_message(self, ignore_subscribe_messages=False, timeout=0.0):
        return None

    def close(self):
        pass


class FakeRedis:
    def __init__(self, fail_ping=False, fail_set=False, fail_delete=False):
        self.guard = threading.Lock()
        self.store = {}
        self.published = []
        self.closed = False
        self.fail_ping = fail_ping
        self.fail_set = fail_set
        self.fail_delete = fail_delete

    def ping(self):
        if self.fail_ping:
            raise redis.ConnectionError("connection refused")
        return True

    def set(self, name, value, nx=False, px=None):
        if self.fail_set:
            raise redis.ConnectionError("connection lost")
        with self.guard:
            if nx and name in self.store:
                return None
            self.store[name] = value
            return True

    def delete(self, *names):
        if self.fail_delete:
            raise redis.ConnectionError("connection lost")
        with self.guard:
            return sum(self.store.pop(n, None) is not None for n in names)

    def publish(self, channel, message):
        self.published.append((channel, message))
        return 0

    def pubsub(self):
        return FakePubSub()

    def close(self):
        self.closed = True


def test_run_takes_and_releases_lock(capsys):
    fake = FakeRedis()
    run(fake, 0)
    out = capsys.readouterr().out
    assert out == "Lock acquired, doing some work...\nLock released successfully\n"
    assert fake.store == {}
    assert fake.published == [("distributed_lock:test-lock", "unlock")]


def test_run_reports_acquire_failure():
    with pytest.raises(LockError, match="^Failed to acquire lock: failed to acquire lock"):
        run(FakeRedis(fail_set=True), 0)


def test_run_reports_release_failure():
    with pytest.raises(LockError, match="^Failed to release lock: failed to release lock"):
        run(FakeRedis(fail_delete=True), 0)


def test_main_success_closes_client(capsys):
    fake = FakeRedis()
    with mock.patch("pslock.example.redis.Redis", return_value=fake) as factory:
        code = main(["--work", "0", "--port", "6380"])
    assert code == 0
    assert factory.call_args.kwargs == {"host": "localhost", "port": 6380}
    assert fake.closed
    assert "Lock released successfully" in capsys.readouterr().out


def test_main_failure_returns_one(capsys):
    fake = FakeRedis(fail_set=True)
    with mock.patch("pslock.example.redis.Redis", return_value=fake):
        code = main(["--work", "0"])
    assert code == 1
    assert fake.closed
    assert "Failed to acquire lock" in capsys.readouterr().err


def test_main_ping_failure_propagates():
    fake = FakeRedis(fail_ping=True)
    with mock.patch("pslock.example.redis.Redis", return_value=fake):
        with pytest.raises(redis.ConnectionError):
            main(["--work", "0"])
    assert fake.closed