# SPDX-License-Identifier: GPL-2.0-or-later
"""ChangeLog singleton staging writes to a single exclusive device channel."""
import asyncio
import logging
import weakref
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set, Tuple

from qtpy.QtCore import QObject, Signal

import storage
from .changes import PendingChange, NO_BASELINE


FAILURE_ABORT = "abort"
FAILURE_CONTINUE = "continue"
FAILURE_POLICIES = (FAILURE_ABORT, FAILURE_CONTINUE)


class DeviceChannel:
    """Process-wide exclusive access to the device.

    asyncio locks are bound to the loop that first waits on them, so one lock
    is kept per running event loop.
    """

    _locks = weakref.WeakKeyDictionary()

    @classmethod
    def lock(cls) -> asyncio.Lock:
        loop = asyncio.get_running_loop()
        lock = cls._locks.get(loop)
        if lock is None:
            lock = asyncio.Lock()
            cls._locks[loop] = lock
        return lock


class CommitError(Exception):

    def __init__(self, result: 'CommitResult'):
        super().__init__("failed to write {} to the device".format(
            ", ".join(str(address) for address in sorted(result.failed, key=str))))
        self.result = result


@dataclass
class CommitResult:
    """Outcome of a commit, or of a write made in instant mode.

    errors maps each failed address to the exception raised by its write, or
    to None when the write reported failure by returning False.
    """
    committed: Set[Tuple] = field(default_factory=set)
    failed: Set[Tuple] = field(default_factory=set)
    skipped: Set[Tuple] = field(default_factory=set)
    errors: Dict[Tuple, Optional[BaseException]] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed and not self.skipped

    def raise_for_failure(self) -> None:
        if not self.ok:
            raise CommitError(self)


class ChangeLog(QObject):
    """Ordered, deduplicated journal of pending device writes.

    Every address holds at most one pending change. Queueing the same
    address again replaces the value to write but keeps the baseline from
    the first edit, so revert() goes back to the pre-session value.

    Two modes:
    - instant=False (default): changes wait for commit()
    - instant=True: queue() writes straight away and the log stays empty
    """

    changed = Signal()
    pending_count_changed = Signal(int)
    instant_changed = Signal(bool)
    committed = Signal(set)  # addresses written by a commit
    commit_failed = Signal(set)  # addresses whose write failed
    values_restored = Signal(set)  # addresses restored by revert

    _instance: Optional['ChangeLog'] = None

    @classmethod
    def instance(cls) -> 'ChangeLog':
        """Get the singleton instance."""
        if cls._instance is None:
            cls._instance = cls.from_settings()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Drop the singleton (call on device disconnect)."""
        if cls._instance is not None:
            cls._instance.clear_all()
            cls._instance = None

    @classmethod
    def from_settings(cls) -> 'ChangeLog':
        timeout = storage.get_float("change_log/write_timeout", 0.0)
        return cls(instant=storage.get_bool("change_log/instant", False),
                   failure_policy=storage.get("change_log/failure_policy", FAILURE_ABORT),
                   write_timeout=timeout if timeout > 0 else None)

    def __init__(self, instant=False, failure_policy=FAILURE_ABORT, write_timeout=None):
        super().__init__()
        if failure_policy not in FAILURE_POLICIES:
            raise ValueError("unknown failure policy {!r}".format(failure_policy))
        self._pending: Dict[Tuple, PendingChange] = {}
        self._instant = bool(instant)
        self.failure_policy = failure_policy
        self.write_timeout = write_timeout
        self._prev_count = 0

    @property
    def instant(self) -> bool:
        return self._instant

    @instant.setter
    def instant(self, value: bool) -> None:
        self.set_instant(value)

    def set_instant(self, value: bool) -> None:
        """Switch instant mode; changes already pending stay queued for commit()."""
        value = bool(value)
        if value == self._instant:
            return
        self._instant = value
        self.instant_changed.emit(value)
        self._emit_state_changes()

    async def queue(self, address: Tuple, apply, new_value: Any, baseline: Any = NO_BASELINE,
                    **meta) -> Optional[CommitResult]:
        """Stage a write of new_value to address.

        In instant mode the change is staged and written once the channel is
        free, and its CommitResult is returned; a failed write stays queued.
        Otherwise returns None.
        """
        change = PendingChange(address, new_value, baseline, apply, meta)
        if not self._instant:
            self._stage(change)
            self._emit_state_changes()
            return None

        result = CommitResult()
        async with DeviceChannel.lock():
            change = self._stage(change)
            await self._write_change(change, result)
        self._finish(result)
        return result

    def _stage(self, change: PendingChange) -> PendingChange:
        existing = self._pending.get(change.key())
        if existing is not None:
            existing.merge(change)
            return existing
        self._pending[change.key()] = change
        return change

    async def commit(self) -> CommitResult:
        """Write all pending changes in the order they were queued.

        Writes never overlap. With the "abort" policy the first failure stops
        the batch and leaves the failed and unattempted changes queued; with
        "continue" every change is attempted and only failures stay queued.
        """
        result = CommitResult()
        if not self._pending:
            return result

        async with DeviceChannel.lock():
            batch = list(self._pending.values())
            for pos, change in enumerate(batch):
                if await self._write_change(change, result):
                    continue
                if self.failure_policy == FAILURE_ABORT:
                    result.skipped = {c.address for c in batch[pos + 1:]}
                    break

        logging.info("commit: %d written, %d failed, %d skipped",
                     len(result.committed), len(result.failed), len(result.skipped))
        self._finish(result)
        return result

    async def _write_change(self, change: PendingChange, result: CommitResult) -> bool:
        """ Performs one write, caller must hold the channel lock """
        value = change.new_value
        error = None
        try:
            if self.write_timeout:
                ret = await asyncio.wait_for(change.write(), self.write_timeout)
            else:
                ret = await change.write()
            success = ret is not False
        except asyncio.TimeoutError as e:
            logging.warning("write to %s timed out after %ss", change.address, self.write_timeout)
            success = False
            error = e
        except Exception as e:
            logging.warning("write to %s failed: %s", change.address, e)
            success = False
            error = e

        if not success:
            if error is None:
                logging.warning("write to %s was rejected by the device", change.address)
            result.failed.add(change.address)
            result.errors[change.address] = error
            return False

        result.committed.add(change.address)
        # a newer value queued while this write was in flight stays pending
        if self._pending.get(change.key()) is change and change.new_value == value:
            del self._pending[change.key()]
        return True

    def _finish(self, result: CommitResult) -> None:
        if result.committed:
            self.committed.emit(set(result.committed))
        if result.failed:
            self.commit_failed.emit(set(result.failed))
        self._emit_state_changes()

    def revert(self, restore) -> Set[Tuple]:
        """Restore every pending address to its baseline and drop all changes.

        restore(address, baseline) puts the externally held state back; it is
        called newest change first. No device writes happen.
        """
        restored = set()
        for change in reversed(list(self._pending.values())):
            if not change.has_baseline:
                logging.warning("revert: no baseline recorded for %s, leaving it unchanged", change.address)
                continue
            restore(change.address, change.baseline_value)
            restored.add(change.address)

        self.clear_all()
        if restored:
            self.values_restored.emit(restored)
        return restored

    def clear_all(self) -> None:
        """Drop all pending changes without writing or restoring anything."""
        self._pending.clear()
        self._emit_state_changes()

    def get_pending_count(self) -> int:
        return len(self._pending)

    def get_pending_changes(self) -> List[PendingChange]:
        """Pending changes in the order they were first queued."""
        return list(self._pending.values())

    def get_pending_value(self, address: Tuple) -> Optional[Any]:
        """Get the pending value for an address, or None if not modified."""
        change = self._pending.get(address)
        if change is None:
            return None
        return change.new_value

    def is_modified(self, address: Tuple) -> bool:
        return address in self._pending

    def get_modified_addresses(self) -> Set[Tuple]:
        """Addresses with a pending change, e.g. for highlighting edited keys."""
        return set(self._pending.keys())

    def _emit_state_changes(self) -> None:
        count = len(self._pending)
        if count != self._prev_count:
            self._prev_count = count
            self.pending_count_changed.emit(count)
        self.changed.emit()
