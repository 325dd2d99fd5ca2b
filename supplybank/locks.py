"""
Storage location locks: serialize commits per (organization, location).

The negative-stock check is read-then-write, so two commits against the
same location must not interleave. Inside one process this registry of
re-entrant locks does it; across processes the ledger also takes row
locks with select_for_update() on databases that support them.

Usage:
    with location_locks((org_id, source_id), (org_id, destination_id)):
        ...  # at most one thread per location in here
"""

import logging
import threading
from contextlib import contextmanager

from supplybank.conf import supplybank_settings
from supplybank.exceptions import InventoryError

logger = logging.getLogger('supplybank')

LockKey = tuple[int, int]

_registry_lock = threading.Lock()
_locks: dict[LockKey, threading.RLock] = {}


def _lock_for(key: LockKey):
    with _registry_lock:
        lock = _locks.get(key)
        if lock is None:
            lock = _locks[key] = threading.RLock()
        return lock


@contextmanager
def location_locks(*keys: LockKey, timeout: float | None = None):
    """
    Hold the locks of every given (organization_id, location_id).

    Locks are taken in sorted order so two transfers in opposite
    directions cannot deadlock.

    Raises:
        InventoryError('LOCK_TIMEOUT'): If a lock is not acquired in time
    """
    if timeout is None:
        timeout = supplybank_settings.LOCK_TIMEOUT_SECONDS

    acquired = []
    try:
        for key in sorted(set(keys)):
            lock = _lock_for(key)
            if not lock.acquire(timeout=timeout):
                logger.error(
                    "inventory.lock_timeout",
                    extra={"organization_id": key[0], "storage_location_id": key[1]},
                )
                raise InventoryError(
                    'LOCK_TIMEOUT',
                    organization_id=key[0],
                    storage_location_id=key[1],
                )
            acquired.append(lock)
        yield
    finally:
        for lock in reversed(acquired):
            lock.release()
