"""Distributed mutexes on Redis: SET NX locks with pub/sub wake-ups or polling."""

__version__ = "0.1.0"