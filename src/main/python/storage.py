# SPDX-License-Identifier: GPL-2.0-or-later
"""Settings persistence on top of QSettings."""
from PyQt5.QtCore import QSettings

_settings = QSettings("KeybindSync", "KeybindSync")


def init(path=None):
    """Switch to an INI file at path; None goes back to the per-user default store."""
    global _settings
    if path is None:
        _settings = QSettings("KeybindSync", "KeybindSync")
    else:
        _settings = QSettings(str(path), QSettings.IniFormat)


def get(key, default=None):
    return _settings.value(key, default)


def set(key, value):
    _settings.setValue(key, value)


def sync():
    _settings.sync()


# INI files hand every value back as a string
def get_bool(key, default=False):
    value = get(key, None)
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def get_int(key, default=0):
    value = get(key, None)
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def get_float(key, default=0.0):
    value = get(key, None)
    try:
        return float(value)
    except (TypeError, ValueError):
        return default
