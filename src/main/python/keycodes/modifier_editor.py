# SPDX-License-Identifier: GPL-2.0-or-later
from keycodes.descriptors import Modded, ModTap, OneShotMod, Plain, Blank, Transparent, modifier_kind
from keycodes.modifiers import modifier_label


class ModifierEditor:
    """Active modifier selection of the key picker.

    The state is seeded from the key being edited: selecting a key bound to
    LSFT_T(KC_A) shows Shift as active in tap mode, selecting a plain key
    clears everything.
    """

    def __init__(self, codec, right=False):
        self.codec = codec
        self.mods = frozenset()
        self.kind = None
        self.right = right

    def select(self, current_wire):
        descriptor = self.codec.decode(current_wire)
        kind = modifier_kind(descriptor)
        if kind is None:
            self.mods = frozenset()
            self.kind = None
        else:
            self.mods = descriptor.mods
            self.kind = kind
            self.right = descriptor.right
        return descriptor

    @property
    def active(self):
        return bool(self.mods)

    def toggle(self, mod):
        if mod in self.mods:
            self.mods = self.mods - {mod}
        else:
            self.mods = self.mods | {mod}

        if not self.mods:
            self.kind = None
        elif self.kind is None:
            self.kind = Modded

    def set_kind(self, kind):
        if kind not in (Modded, ModTap):
            raise ValueError("modifier kind must be Modded or ModTap, got {!r}".format(kind))
        self.kind = kind

    def set_right(self, right):
        self.right = bool(right)

    def clear(self):
        self.mods = frozenset()
        self.kind = None

    def wrap(self, base):
        """ Combines a picked base key with the active modifiers """
        descriptor = base if not isinstance(base, (int, str)) else self.codec.decode(base)
        if isinstance(descriptor, (Blank, Transparent)) or not self.mods:
            return descriptor
        if not isinstance(descriptor, Plain):
            return descriptor
        return (self.kind or Modded)(self.mods, descriptor.base, self.right)

    def one_shot(self):
        if not self.mods:
            return None
        return OneShotMod(self.mods, self.right)

    def apply_to(self, current_wire):
        """ Wire form of the active modifiers applied onto the value an address holds """
        if not self.mods:
            return None
        return self.codec.recompose(current_wire, self.mods, self.kind or Modded, self.right)

    def label(self):
        label = modifier_label(self.mods)
        if label and self.kind is ModTap:
            return label + " (tap)"
        return label
