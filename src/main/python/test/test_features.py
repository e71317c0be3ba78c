# SPDX-License-Identifier: GPL-2.0-or-later
"""Tests for keymap snapshots and feature table entries."""
import struct

import pytest

from keycodes.codec import KeycodeCodec
from protocol.features import (
    ComboEntry, TapDanceEntry, AltRepeatKeyEntry, LeaderSequenceEntry, KeyOverrideEntry, MacroEntry, FeatureTables,
    ENABLED, ALT_REPEAT_ENABLED, KEY_OVERRIDE_ENABLED, KEY_OVERRIDE_ONE_MOD, pack_macros, unpack_macros,
)
from protocol.keymap import KeymapSnapshot, MutableKeymap


@pytest.fixture
def codec():
    return KeycodeCodec()


class TestKeymap:

    def test_defaults_to_kc_no(self):
        keymap = KeymapSnapshot(2, 3, 4)
        assert keymap.get(1, 2, 3) == 0
        assert keymap.layer_count == 2
        assert len(list(keymap.positions())) == 24

    def test_out_of_range(self):
        keymap = KeymapSnapshot(2, 3, 4)
        with pytest.raises(IndexError):
            keymap.get(2, 0, 0)
        with pytest.raises(IndexError):
            keymap.get(0, 3, 0)
        with pytest.raises(IndexError):
            KeymapSnapshot(1, 1, 1, {(0, 0, 1): 4})

    def test_with_value_copies(self):
        keymap = KeymapSnapshot.from_layers([[[0x04, 0x05]]])
        changed = keymap.with_value(0, 0, 1, 0x06)
        assert keymap.get(0, 0, 1) == 0x05
        assert changed.get(0, 0, 1) == 0x06

    def test_mutable(self):
        keymap = MutableKeymap.from_layers([[[0x04]], [[0x05]]], layer_names={0: "Base"})
        snapshot = keymap.snapshot()
        keymap.set(1, 0, 0, 0x06)
        keymap.set_layer_name(1, "Nav")

        assert keymap.get(1, 0, 0) == 0x06
        assert snapshot.get(1, 0, 0) == 0x05
        assert keymap.layer_name(0) == "Base"
        assert keymap.layer_name(1) == "Nav"
        assert snapshot.layer_name(1) == ""
        assert snapshot != keymap


class TestCombo:

    def test_pack(self, codec):
        entry = ComboEntry(("KC_A", "KC_B", "KC_NO", "KC_NO"), "KC_ESC", ENABLED | 50)
        assert entry.pack(codec) == struct.pack("<HHHHHH", 0x04, 0x05, 0, 0, 0x29, 0x8032)

    def test_unpack(self, codec):
        data = struct.pack("<HHHHHH", 0x04, 0x2129, 0, 0, 0x5221, 0x8000)
        entry = ComboEntry.unpack(data, codec)
        assert entry.keys == ("KC_A", "LCTL_T(KC_ESCAPE)", "KC_NO", "KC_NO")
        assert entry.output == "MO(1)"
        assert entry.enabled
        assert entry.term == 0

    def test_slots(self):
        entry = ComboEntry().with_slot(1, "KC_B").with_slot(4, "KC_C")
        assert entry.slot(1) == "KC_B"
        assert entry.output == "KC_C"
        with pytest.raises(IndexError):
            entry.with_slot(5, "KC_A")

    def test_enabled(self):
        entry = ComboEntry(options=40).with_enabled(True)
        assert entry.enabled
        assert entry.term == 40
        assert not entry.with_enabled(False).enabled

    def test_unpackable_value(self, codec):
        with pytest.raises(ValueError):
            ComboEntry(output="COMBO(1)").pack(codec)

    def test_short_data(self, codec):
        with pytest.raises(ValueError):
            ComboEntry.unpack(b"\x00" * 11, codec)


class TestTapDance:

    def test_pack_unpack(self, codec):
        entry = TapDanceEntry("KC_A", "KC_LCTL", "KC_B", "MO(1)", ENABLED | 200)
        data = entry.pack(codec)
        assert len(data) == 10
        assert data == struct.pack("<HHHHH", 0x04, 0xE0, 0x05, 0x5221, 0x80C8)

        unpacked = TapDanceEntry.unpack(data, codec)
        assert unpacked.on_hold == "KC_LCTRL"
        assert unpacked.enabled
        assert unpacked.term == 200

    def test_slots(self):
        entry = TapDanceEntry().with_slot(3, "KC_Z")
        assert entry.on_tap_hold == "KC_Z"
        assert entry.slot(3) == "KC_Z"
        with pytest.raises(IndexError):
            entry.with_slot(4, "KC_A")


class TestAltRepeatKey:

    def test_pack_unpack(self, codec):
        entry = AltRepeatKeyEntry("KC_LEFT", "KC_RIGHT", 0x02, ALT_REPEAT_ENABLED)
        data = entry.pack(codec)
        assert data == struct.pack("<HHBB", 0x50, 0x4F, 0x02, 0x08)
        assert AltRepeatKeyEntry.unpack(data, codec) == entry
        assert entry.enabled

    def test_enabled_keeps_other_options(self):
        entry = AltRepeatKeyEntry(options=0x03).with_enabled(True)
        assert entry.options == 0x0B
        assert entry.with_enabled(False).options == 0x03


class TestLeader:

    def test_pack_unpack(self, codec):
        entry = LeaderSequenceEntry(("KC_A", "KC_B", "KC_NO", "KC_NO", "KC_NO"), "LCTL(KC_C)", ENABLED)
        data = entry.pack(codec)
        assert data == struct.pack("<HHHHHHH", 0x04, 0x05, 0, 0, 0, 0x0106, 0x8000)
        assert LeaderSequenceEntry.unpack(data, codec) == entry
        assert entry.keys == ["KC_A", "KC_B"]

    def test_slots(self):
        entry = LeaderSequenceEntry().with_slot(0, "KC_A").with_slot(5, "KC_B")
        assert entry.sequence[0] == "KC_A"
        assert entry.output == "KC_B"


class TestKeyOverride:

    def test_pack(self, codec):
        entry = KeyOverrideEntry("KC_BSPC", "KC_DEL", 0x0003, 0x02, 0x01, 0x02, KEY_OVERRIDE_ENABLED)
        data = entry.pack(codec)
        assert len(data) == 10
        assert data == struct.pack("<HHHBBBB", 0x2A, 0x4C, 0x0003, 0x02, 0x01, 0x02, 0x80)

    def test_unpack(self, codec):
        data = struct.pack("<HHHBBBB", 0x2A, 0x0204, 0x0001, 0x02, 0, 0x02, 0x80 | KEY_OVERRIDE_ONE_MOD)
        entry = KeyOverrideEntry.unpack(data, codec)
        assert entry.trigger == "KC_BSPACE"
        assert entry.replacement == "LSFT(KC_A)"
        assert entry.layers == 0x0001
        assert entry.suppressed_mods == 0x02
        assert entry.enabled
        assert entry.active_on(0)
        assert not entry.active_on(1)

    def test_defaults_to_all_layers(self):
        entry = KeyOverrideEntry()
        assert all(entry.active_on(layer) for layer in range(16))
        assert not entry.enabled

    def test_slots(self):
        entry = KeyOverrideEntry().with_slot(0, "KC_A").with_slot(1, "KC_B")
        assert (entry.slot(0), entry.slot(1)) == ("KC_A", "KC_B")
        assert entry.trigger == "KC_A"
        with pytest.raises(IndexError):
            entry.with_slot(2, "KC_C")

    def test_enabled_keeps_other_options(self):
        entry = KeyOverrideEntry(options=KEY_OVERRIDE_ONE_MOD).with_enabled(True)
        assert entry.options == 0x88
        assert entry.with_enabled(False).options == KEY_OVERRIDE_ONE_MOD

    def test_short_data(self, codec):
        with pytest.raises(ValueError):
            KeyOverrideEntry.unpack(b"\x00" * 9, codec)


class TestMacro:

    def test_pack(self, codec):
        macro = MacroEntry((("text", "hi"), ("tap", "KC_A"), ("down", "KC_LSFT"), ("up", "KC_LSFT"),
                            ("delay", 300)))
        assert macro.pack(codec) == (b"hi" + b"\x01\x01\x04" + b"\x01\x02\xE1" + b"\x01\x03\xE1" +
                                     b"\x01\x04" + bytes([300 % 255 + 1, 300 // 255 + 1]))

    def test_extended_keycodes(self, codec):
        macro = MacroEntry((("tap", "LCTL(KC_A)"), ("tap", "LSFT(KC_NO)")))
        data = macro.pack(codec)
        assert data == b"\x01\x05\x04\x01" + b"\x01\x05\x02\xFF"
        assert b"\x00" not in data
        assert MacroEntry.unpack(data, codec).actions == (("tap", "LCTL(KC_A)"), ("tap", "LSFT(KC_NO)"))

    def test_unpack(self, codec):
        data = b"ab\x01\x04\x02\x01\x01\x01\x29cd"
        assert MacroEntry.unpack(data, codec).actions == (
            ("text", "ab"), ("delay", 1), ("tap", "KC_ESCAPE"), ("text", "cd"))

    def test_invalid(self, codec):
        with pytest.raises(ValueError):
            MacroEntry((("tap", "KC_NO"),)).pack(codec)
        with pytest.raises(ValueError):
            MacroEntry((("wiggle", 1),)).pack(codec)
        with pytest.raises(ValueError):
            MacroEntry.unpack(b"\x01\x09", codec)
        with pytest.raises(ValueError):
            MacroEntry.unpack(b"\x01\x05\x04", codec)

    def test_buffer(self, codec):
        macros = [MacroEntry((("text", "a"),)), MacroEntry(), MacroEntry((("tap", "KC_B"),))]
        data = pack_macros(macros, codec)
        assert data == b"a\x00\x00\x01\x01\x05\x00"
        assert unpack_macros(data, codec, 4) == macros + [MacroEntry()]

    def test_with_slot(self):
        macro = MacroEntry((("tap", "KC_A"), ("delay", 10))).with_slot(0, "KC_B")
        assert macro.actions == (("tap", "KC_B"), ("delay", 10))


class TestFeatureTables:

    def test_counts(self):
        tables = FeatureTables(combos=[ComboEntry()] * 3, leaders=[LeaderSequenceEntry()])
        assert tables.combo_count == 3
        assert tables.leader_count == 1
        assert tables.tap_dance_count == 0
        assert tables.macro_count == 0
        assert tables.key_override_count == 0

    def test_get_set(self):
        tables = FeatureTables(combos=[ComboEntry()], tap_dances=[TapDanceEntry()],
                               alt_repeat_keys=[AltRepeatKeyEntry()], macros=[MacroEntry()])
        tables.set(('combo', 0, 4), "KC_A")
        tables.set(('tap_dance', 0, 1), "KC_LCTRL")
        tables.set(('alt_repeat_key', 0, 1), "KC_B")
        tables.set(('macro', 0), MacroEntry((("text", "x"),)))
        tables.key_overrides.append(KeyOverrideEntry())
        tables.set(('key_override', 0, 1), "KC_DEL")
        assert tables.get(('key_override', 0, 1)) == "KC_DEL"
        assert tables.key_overrides[0].replacement == "KC_DEL"

        assert tables.get(('combo', 0, 4)) == "KC_A"
        assert tables.combos[0].output == "KC_A"
        assert tables.get(('tap_dance', 0, 1)) == "KC_LCTRL"
        assert tables.get(('alt_repeat_key', 0, 1)) == "KC_B"
        assert tables.get(('macro', 0)).actions == (("text", "x"),)

    def test_unknown_table(self):
        with pytest.raises(KeyError):
            FeatureTables().get(('fragment', 0, 0))
