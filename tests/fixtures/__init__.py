"""
Test fixtures package for gateway tests.

Usage:
    from fixtures import make_config, RecordingDispatcher

    def test_something():
        config = make_config("password", "abc123")
"""

from .common import (
    EMPTY_KEY_VECTOR,
    HASH_SECRET,
    HASH_VECTORS,
    BrokenDispatcher,
    RecordingDispatcher,
    RecordingExecutor,
    RecordingNotifier,
    make_config,
)

__all__ = [
    "EMPTY_KEY_VECTOR",
    "HASH_SECRET",
    "HASH_VECTORS",
    "BrokenDispatcher",
    "RecordingDispatcher",
    "RecordingExecutor",
    "RecordingNotifier",
    "make_config",
]
