"""Per-instrument locks serializing ledger mutations within a process."""

import threading
from collections.abc import Iterator
from contextlib import contextmanager

from models import instrument_key


class InstrumentLockRegistry:
    """Hands out one lock per normalized instrument name.

    Locks are created on first use and kept for the life of the process;
    the set of traded instruments is small. Cross-process exclusion is
    left to the storage transaction.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}

    def lock_for(self, instrument: str) -> threading.Lock:
        key = instrument_key(instrument)
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock

    @contextmanager
    def hold(self, instrument: str) -> Iterator[None]:
        """Hold the lock for ``instrument`` for the duration of the block."""
        with self.lock_for(instrument):
            yield

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)


# Shared by every OrderExecutionService built in this process.
instrument_locks = InstrumentLockRegistry()
