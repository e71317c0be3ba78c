# SPDX-License-Identifier: GPL-2.0-or-later
import logging
import os
import pathlib
from logging.handlers import RotatingFileHandler

from qtpy.QtCore import QStandardPaths

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(module)s:%(lineno)d - %(message)s"
LOG_NAME = "keybind-sync.log"


def init_logger(directory=None):
    """ Logs to stderr and to a rotating file, by default in the app's local data directory """
    logging.basicConfig(level=logging.INFO)
    if directory is None:
        directory = QStandardPaths.writableLocation(QStandardPaths.AppLocalDataLocation)
    pathlib.Path(directory).mkdir(parents=True, exist_ok=True)
    path = os.path.join(directory, LOG_NAME)
    handler = RotatingFileHandler(path, maxBytes=5 * 1024 * 1024, backupCount=5)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logging.getLogger().addHandler(handler)
    return handler


def format_keycode(value):
    """ 0x1A04-style text for numeric keycodes, anything else as is """
    if isinstance(value, int) and not isinstance(value, bool):
        return "0x{:04X}".format(value)
    return str(value)
