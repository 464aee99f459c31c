"""
Per-slot mutual exclusion for booking allocation.

Each (court_id, booking_date, start_time) key maps to its own lock, so two
requests for the same slot serialize while requests for different slots
never wait on each other. Entries are reference counted and dropped when
the last holder or waiter leaves, keeping the map bounded by the number of
slots currently being allocated.

The lock only covers this process. Across processes the partial unique
index on confirmed bookings is what rejects the second writer.
"""

import logging
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator, Optional

from ...config import SLOT_LOCK_TIMEOUT_SECONDS
from ...errors import SlotConflictError

logger = logging.getLogger(__name__)

SlotKey = tuple[int, str, int]


@dataclass
class SlotReservation:
    """Token proving the holder owns a slot's critical section"""

    key: SlotKey
    acquired_at: float
    released: bool = False


@dataclass
class _SlotLock:
    lock: threading.Lock = field(default_factory=threading.Lock)
    users: int = 0


class SlotLockRegistry:
    """Map of slot keys to locks, created on demand"""

    def __init__(self, timeout: float = SLOT_LOCK_TIMEOUT_SECONDS):
        self.timeout = timeout
        self._guard = threading.Lock()
        self._locks: dict[SlotKey, _SlotLock] = {}

    def _checkout(self, key: SlotKey) -> _SlotLock:
        with self._guard:
            entry = self._locks.get(key)
            if entry is None:
                entry = _SlotLock()
                self._locks[key] = entry
            entry.users += 1
            return entry

    def _checkin(self, key: SlotKey, entry: _SlotLock) -> None:
        with self._guard:
            entry.users -= 1
            if entry.users == 0:
                self._locks.pop(key, None)

    def active_keys(self) -> list[SlotKey]:
        """Keys currently held or waited on"""
        with self._guard:
            return list(self._locks)

    @contextmanager
    def reserve(self, key: SlotKey, timeout: Optional[float] = None) -> Iterator[SlotReservation]:
        """
        Hold the slot's lock for the duration of the block.

        Raises:
            SlotConflictError: If another request keeps the slot longer than
                ``timeout`` seconds
        """
        wait = self.timeout if timeout is None else timeout
        entry = self._checkout(key)
        try:
            if not entry.lock.acquire(timeout=wait):
                logger.warning(f"⚠️ Timed out after {wait}s waiting for slot {key}")
                raise SlotConflictError(*key)

            reservation = SlotReservation(key=key, acquired_at=time.monotonic())
            try:
                yield reservation
            finally:
                reservation.released = True
                entry.lock.release()
        finally:
            self._checkin(key, entry)


# Shared by every allocator in this process
slot_locks = SlotLockRegistry()
