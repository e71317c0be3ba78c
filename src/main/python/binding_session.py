# SPDX-License-Identifier: GPL-2.0-or-later
import logging

import storage
from change_manager import (
    keymap_address, combo_address, tap_dance_address, alt_repeat_address, leader_address, override_address,
    macro_address, layer_name_address,
)
from keycodes.codec import KeycodeCodec
from keycodes.descriptors import WireForm
from keycodes.modifier_editor import ModifierEditor
from protocol.features import FeatureTables
from util import format_keycode


class BindingSession:
    """Assigns keycodes to the selected keymap position or feature slot.

    Every assignment updates the local keymap/feature state right away and
    queues the device write on the change log with the value the address
    held before, so a later revert() can put it back.
    """

    def __init__(self, keymap, features, change_log, device, codec=None):
        self.keymap = keymap
        self.features = features if features is not None else FeatureTables()
        self.change_log = change_log
        self.device = device
        self.codec = codec or KeycodeCodec.for_keyboard(keymap, self.features)
        self.editor = ModifierEditor(self.codec, right=storage.get_bool("editor/right_hand_mods", False))
        self.target = None

    def select_key(self, layer, row, col):
        return self._select(keymap_address(layer, row, col))

    def select_combo(self, index, slot):
        return self._select(combo_address(index, slot))

    def select_tap_dance(self, index, slot):
        return self._select(tap_dance_address(index, slot))

    def select_alt_repeat_key(self, index, slot):
        return self._select(alt_repeat_address(index, slot))

    def select_leader(self, index, slot):
        return self._select(leader_address(index, slot))

    def select_override(self, index, slot):
        """ Slot 0 is the trigger key, slot 1 the replacement """
        return self._select(override_address(index, slot))

    def _select(self, address):
        descriptor = self.editor.select(self.current_value(address))
        self.target = address
        return descriptor

    def current_value(self, address):
        if address[0] == 'keymap':
            return self.keymap.get(*address[1:])
        if address[0] == 'layer_name':
            return self.keymap.layer_name(address[1])
        return self.features.get(address)

    def _store(self, address, value):
        if address[0] == 'keymap':
            self.keymap.set(*address[1:], value)
        elif address[0] == 'layer_name':
            self.keymap.set_layer_name(address[1], value)
        else:
            self.features.set(address, value)

    def _decode(self, value):
        if isinstance(value, WireForm):
            return self.codec.decode(value.code if value.code is not None else value.text)
        if isinstance(value, (int, str)):
            return self.codec.decode(value)
        return value

    async def assign(self, value, subsection="full"):
        """Assign a descriptor or wire value to the selected address.

        subsection "full" replaces the whole binding, wrapping it with the
        active modifiers; "inner" only swaps the tapped key of an LT, mod-tap
        or modifier-wrapped binding. Returns the change log result, or None
        when nothing was written.
        """
        if self.target is None:
            raise RuntimeError("no key selected")
        current = self.current_value(self.target)

        if subsection == "inner":
            form = self.codec.replace_tap_key(current, self._decode(value))
        elif subsection == "full":
            form = self.codec.encode(self.editor.wrap(self._decode(value)))
        else:
            raise ValueError("unknown subsection {!r}".format(subsection))

        if form is None:
            logging.warning("assign: %r cannot be encoded, keeping %s at %s",
                            value, format_keycode(current), self.target)
            return None
        result = await self._queue(self.target, form)
        self.editor.clear()
        return result

    async def assign_modifiers(self):
        """ Re-wraps the base key of the selected address with the active modifiers """
        if self.target is None:
            raise RuntimeError("no key selected")
        form = self.editor.apply_to(self.current_value(self.target))
        if form is None:
            logging.warning("assign_modifiers: nothing to apply at %s", self.target)
            return None
        return await self._queue(self.target, form)

    async def assign_one_shot(self):
        if self.target is None:
            raise RuntimeError("no key selected")
        descriptor = self.editor.one_shot()
        if descriptor is None:
            logging.warning("assign_one_shot: no modifiers selected")
            return None
        return await self._queue(self.target, self.codec.encode(descriptor))

    async def _queue(self, address, form):
        if address[0] == 'keymap':
            if form.code is None:
                logging.warning("%s has no numeric keycode, cannot place it at %s", form.text, address)
                return None
            value = form.code
        else:
            value = form.text
        return await self._write(address, value)

    async def _write(self, address, value):
        baseline = self.current_value(address)
        self._store(address, value)
        return await self.change_log.queue(address, self.device.write, value, baseline=baseline)

    async def rename_layer(self, layer, name):
        return await self._write(layer_name_address(layer), name)

    async def set_macro(self, index, macro):
        return await self._write(macro_address(index), macro)

    async def commit(self):
        return await self.change_log.commit()

    def revert(self):
        """ Puts every pending address back to its baseline; no device writes """
        restored = self.change_log.revert(self._store)
        if self.target is not None:
            self.editor.select(self.current_value(self.target))
        return restored
