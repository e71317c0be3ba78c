# SPDX-License-Identifier: GPL-2.0-or-later
"""Staging, committing and reverting device writes."""
from .change_log import (
    ChangeLog,
    CommitError,
    CommitResult,
    DeviceChannel,
    FAILURE_ABORT,
    FAILURE_CONTINUE,
)
from .changes import (
    NO_BASELINE,
    PendingChange,
    keymap_address,
    combo_address,
    tap_dance_address,
    alt_repeat_address,
    leader_address,
    override_address,
    macro_address,
    layer_name_address,
)

__all__ = [
    'ChangeLog',
    'CommitError',
    'CommitResult',
    'DeviceChannel',
    'FAILURE_ABORT',
    'FAILURE_CONTINUE',
    'NO_BASELINE',
    'PendingChange',
    'keymap_address',
    'combo_address',
    'tap_dance_address',
    'alt_repeat_address',
    'leader_address',
    'override_address',
    'macro_address',
    'layer_name_address',
]
