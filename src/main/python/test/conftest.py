# SPDX-License-Identifier: GPL-2.0-or-later
"""Pytest configuration - runs before any tests."""
import pytest

import storage
from change_manager import ChangeLog


class FakeDevice:
    """Records writes instead of talking to a keyboard.

    Addresses in `failing` raise OSError, addresses in `rejecting` return
    False, the way a device reports a failed write.
    """

    def __init__(self):
        self.writes = []
        self.failing = set()
        self.rejecting = set()

    async def write(self, address, value):
        self.writes.append((address, value))
        if address in self.failing:
            raise OSError("failed to communicate with the device")
        if address in self.rejecting:
            return False
        return True


@pytest.fixture(autouse=True)
def settings(tmp_path):
    """Keep settings written by tests out of the user's real configuration."""
    path = tmp_path / "settings.ini"
    storage.init(path)
    return path


@pytest.fixture(autouse=True)
def fresh_change_log():
    ChangeLog.reset()
    yield
    ChangeLog.reset()


@pytest.fixture
def device():
    return FakeDevice()
