# SPDX-License-Identifier: GPL-2.0-or-later
"""Keymap state as read from the keyboard: layer x row x col -> 16-bit keycode."""
import copy

from keycodes.keycodes import KC_NO


class KeymapSnapshot:
    """Read-only view of a keymap.

    Positions that were never filled in hold KC_NO.
    """

    def __init__(self, layers, rows, cols, values=None, layer_names=None):
        self.layers = layers
        self.rows = rows
        self.cols = cols
        self._values = {}
        self._layer_names = dict(layer_names or {})
        for (layer, row, col), value in (values or {}).items():
            self._check(layer, row, col)
            self._values[(layer, row, col)] = value

    @classmethod
    def from_layers(cls, layers, layer_names=None):
        """ Builds a snapshot from nested lists, layers[layer][row][col] """
        rows = len(layers[0]) if layers else 0
        cols = len(layers[0][0]) if rows else 0
        values = {}
        for l, layer in enumerate(layers):
            for r, row in enumerate(layer):
                for c, value in enumerate(row):
                    values[(l, r, c)] = value
        return cls(len(layers), rows, cols, values, layer_names)

    @property
    def layer_count(self):
        return self.layers

    def _check(self, layer, row, col):
        if not (0 <= layer < self.layers and 0 <= row < self.rows and 0 <= col < self.cols):
            raise IndexError("keymap position ({}, {}, {}) out of range for {}x{}x{} keymap".format(
                layer, row, col, self.layers, self.rows, self.cols))

    def get(self, layer, row, col):
        self._check(layer, row, col)
        return self._values.get((layer, row, col), KC_NO)

    def positions(self):
        for layer in range(self.layers):
            for row in range(self.rows):
                for col in range(self.cols):
                    yield layer, row, col

    def layer_name(self, layer):
        if not 0 <= layer < self.layers:
            raise IndexError("layer {} out of range".format(layer))
        return self._layer_names.get(layer, "")

    def with_value(self, layer, row, col, value):
        """ Returns a copy with one position changed """
        self._check(layer, row, col)
        snapshot = copy.copy(self)
        snapshot._values = dict(self._values)
        snapshot._values[(layer, row, col)] = value
        return snapshot

    def snapshot(self):
        return KeymapSnapshot(self.layers, self.rows, self.cols, self._values, self._layer_names)

    def __eq__(self, other):
        if not isinstance(other, KeymapSnapshot):
            return NotImplemented
        return (self.layers, self.rows, self.cols) == (other.layers, other.rows, other.cols) and \
            all(self.get(*pos) == other.get(*pos) for pos in self.positions())


class MutableKeymap(KeymapSnapshot):
    """The keymap copy the application edits; the device is only written through the change log."""

    def set(self, layer, row, col, value):
        self._check(layer, row, col)
        self._values[(layer, row, col)] = value

    def set_layer_name(self, layer, name):
        if not 0 <= layer < self.layers:
            raise IndexError("layer {} out of range".format(layer))
        self._layer_names[layer] = name
