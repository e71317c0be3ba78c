# SPDX-License-Identifier: GPL-2.0-or-later
"""Pending changes waiting to be written to the device."""
from typing import Any, Awaitable, Callable, Dict, Tuple


class _NoBaseline:
    """Marker for a change queued without knowing the value it replaces."""

    def __repr__(self):
        return "NO_BASELINE"

    def __bool__(self):
        return False


NO_BASELINE = _NoBaseline()

# async apply(address, value) -> bool | None; a False return or an exception is a failed write
Apply = Callable[[Tuple, Any], Awaitable[Any]]


def keymap_address(layer: int, row: int, col: int) -> Tuple:
    return ('keymap', layer, row, col)


def combo_address(index: int, slot: int) -> Tuple:
    return ('combo', index, slot)


def tap_dance_address(index: int, slot: int) -> Tuple:
    return ('tap_dance', index, slot)


def alt_repeat_address(index: int, slot: int) -> Tuple:
    return ('alt_repeat_key', index, slot)


def leader_address(index: int, slot: int) -> Tuple:
    return ('leader', index, slot)


def override_address(index: int, slot: int) -> Tuple:
    return ('key_override', index, slot)


def macro_address(index: int) -> Tuple:
    return ('macro', index)


def layer_name_address(layer: int) -> Tuple:
    return ('layer_name', layer)


class PendingChange:
    """One address worth of uncommitted state.

    baseline_value is the value the address held before the first queued
    edit; it is never replaced by later edits to the same address.
    """

    def __init__(self, address: Tuple, new_value: Any, baseline_value: Any, apply: Apply,
                 meta: Dict[str, Any] = None):
        self.address = address
        self.new_value = new_value
        self.baseline_value = baseline_value
        self.apply = apply
        self.meta = dict(meta or {})

    @property
    def has_baseline(self) -> bool:
        return self.baseline_value is not NO_BASELINE

    def key(self) -> Tuple:
        return self.address

    def merge(self, other: 'PendingChange') -> bool:
        """Merge a later change to the same address into this one.

        new_value, apply and meta follow the later change. A baseline is only
        adopted when this change was queued without one.
        """
        if other.address != self.address:
            return False
        self.new_value = other.new_value
        self.apply = other.apply
        self.meta.update(other.meta)
        if not self.has_baseline and other.has_baseline:
            self.baseline_value = other.baseline_value
        return True

    def write(self) -> Awaitable[Any]:
        """Start writing the current new_value; the value is bound at call time."""
        return self.apply(self.address, self.new_value)

    def __repr__(self):
        return f"PendingChange({self.address}, {self.baseline_value!r}->{self.new_value!r})"
