# SPDX-License-Identifier: GPL-2.0-or-later
"""
Auxiliary feature tables referenced from the keymap.

Entry formats (little-endian):
    combo (12 bytes): input[4], output, custom_combo_term (bit 15 = enabled)
    tap dance (10 bytes): on_tap, on_hold, on_double_tap, on_tap_hold,
        custom_tapping_term (bit 15 = enabled)
    alt repeat key (6 bytes): keycode, alt_keycode, allowed_mods (uint8),
        options (uint8, bit 3 = enabled)
    leader (14 bytes): sequence[5] (0x0000 = unused/end), output,
        options (bit 15 = enabled)
    key override (10 bytes): trigger, replacement, layers (uint16 mask),
        trigger_mods, negative_mod_mask, suppressed_mods, options (uint8 each,
        options bit 7 = enabled)

Keycode slots hold wire strings, e.g. "KC_A" or "LCTL_T(KC_ESC)"; pack()
and unpack() convert them through a KeycodeCodec.
"""
import struct
from dataclasses import dataclass, replace
from typing import Any, Tuple

ENABLED = 1 << 15
TERM_MASK = 0x7FFF

ALT_REPEAT_DEFAULT_TO_ALT = 1 << 0
ALT_REPEAT_BIDIRECTIONAL = 1 << 1
ALT_REPEAT_IGNORE_MOD_HANDEDNESS = 1 << 2
ALT_REPEAT_ENABLED = 1 << 3

KEY_OVERRIDE_ACTIVATION_TRIGGER_DOWN = 1 << 0
KEY_OVERRIDE_ACTIVATION_REQUIRED_MOD_DOWN = 1 << 1
KEY_OVERRIDE_ACTIVATION_NEGATIVE_MOD_UP = 1 << 2
KEY_OVERRIDE_ONE_MOD = 1 << 3
KEY_OVERRIDE_NO_REREGISTER_TRIGGER = 1 << 4
KEY_OVERRIDE_NO_UNREGISTER_ON_OTHER_KEY_DOWN = 1 << 5
KEY_OVERRIDE_ENABLED = 1 << 7
# every layer
KEY_OVERRIDE_ALL_LAYERS = 0xFFFF

SS_QMK_PREFIX = 1
SS_TAP_CODE = 1
SS_DOWN_CODE = 2
SS_UP_CODE = 3
SS_DELAY_CODE = 4
VIAL_MACRO_EXT_TAP = 5
VIAL_MACRO_EXT_DOWN = 6
VIAL_MACRO_EXT_UP = 7

MACRO_KEY_ACTIONS = {
    "tap": (SS_TAP_CODE, VIAL_MACRO_EXT_TAP),
    "down": (SS_DOWN_CODE, VIAL_MACRO_EXT_DOWN),
    "up": (SS_UP_CODE, VIAL_MACRO_EXT_UP),
}
MACRO_ACTION_NAMES = {}
for _name, (_basic, _ext) in MACRO_KEY_ACTIONS.items():
    MACRO_ACTION_NAMES[_basic] = (_name, False)
    MACRO_ACTION_NAMES[_ext] = (_name, True)

EMPTY = "KC_NO"


def keycode_to_code(codec, value):
    form = codec.normalize(value)
    if form.code is None:
        raise ValueError("{!r} has no numeric keycode".format(value))
    return form.code


def code_to_keycode(codec, code):
    return codec.normalize(code).text


def _check_size(data, size, what):
    if len(data) < size:
        raise ValueError("{} entry needs {} bytes, got {}".format(what, size, len(data)))


@dataclass(frozen=True)
class ComboEntry:
    keys: Tuple[str, str, str, str] = (EMPTY, EMPTY, EMPTY, EMPTY)
    output: str = EMPTY
    options: int = 0

    FORMAT = "<HHHHHH"
    SIZE = 12
    SLOT_COUNT = 5

    @property
    def enabled(self):
        return bool(self.options & ENABLED)

    @property
    def term(self):
        return self.options & TERM_MASK

    def slot(self, slot):
        if slot == 4:
            return self.output
        return self.keys[slot]

    def with_slot(self, slot, value):
        if slot == 4:
            return replace(self, output=value)
        if not 0 <= slot < 4:
            raise IndexError("combo slot {} out of range".format(slot))
        keys = list(self.keys)
        keys[slot] = value
        return replace(self, keys=tuple(keys))

    def with_enabled(self, enabled):
        return replace(self, options=(self.options & TERM_MASK) | (ENABLED if enabled else 0))

    def pack(self, codec):
        codes = [keycode_to_code(codec, kc) for kc in self.keys]
        return struct.pack(self.FORMAT, *codes, keycode_to_code(codec, self.output), self.options)

    @classmethod
    def unpack(cls, data, codec):
        _check_size(data, cls.SIZE, "combo")
        entry = struct.unpack(cls.FORMAT, data[:cls.SIZE])
        return cls(tuple(code_to_keycode(codec, kc) for kc in entry[:4]), code_to_keycode(codec, entry[4]),
                   entry[5])


@dataclass(frozen=True)
class TapDanceEntry:
    on_tap: str = EMPTY
    on_hold: str = EMPTY
    on_double_tap: str = EMPTY
    on_tap_hold: str = EMPTY
    tapping_term: int = 0

    FORMAT = "<HHHHH"
    SIZE = 10
    SLOT_COUNT = 4
    SLOT_NAMES = ("on_tap", "on_hold", "on_double_tap", "on_tap_hold")

    @property
    def enabled(self):
        return bool(self.tapping_term & ENABLED)

    @property
    def term(self):
        return self.tapping_term & TERM_MASK

    def slot(self, slot):
        return getattr(self, self.SLOT_NAMES[slot])

    def with_slot(self, slot, value):
        if not 0 <= slot < self.SLOT_COUNT:
            raise IndexError("tap dance slot {} out of range".format(slot))
        return replace(self, **{self.SLOT_NAMES[slot]: value})

    def with_enabled(self, enabled):
        return replace(self, tapping_term=(self.tapping_term & TERM_MASK) | (ENABLED if enabled else 0))

    def pack(self, codec):
        codes = [keycode_to_code(codec, self.slot(x)) for x in range(self.SLOT_COUNT)]
        return struct.pack(self.FORMAT, *codes, self.tapping_term)

    @classmethod
    def unpack(cls, data, codec):
        _check_size(data, cls.SIZE, "tap dance")
        entry = struct.unpack(cls.FORMAT, data[:cls.SIZE])
        return cls(*(code_to_keycode(codec, kc) for kc in entry[:4]), entry[4])


@dataclass(frozen=True)
class AltRepeatKeyEntry:
    keycode: str = EMPTY
    alt_keycode: str = EMPTY
    allowed_mods: int = 0
    options: int = 0

    FORMAT = "<HHBB"
    SIZE = 6
    SLOT_COUNT = 2

    @property
    def enabled(self):
        return bool(self.options & ALT_REPEAT_ENABLED)

    def slot(self, slot):
        return (self.keycode, self.alt_keycode)[slot]

    def with_slot(self, slot, value):
        if slot == 0:
            return replace(self, keycode=value)
        if slot == 1:
            return replace(self, alt_keycode=value)
        raise IndexError("alt repeat key slot {} out of range".format(slot))

    def with_enabled(self, enabled):
        options = self.options & ~ALT_REPEAT_ENABLED
        return replace(self, options=options | (ALT_REPEAT_ENABLED if enabled else 0))

    def pack(self, codec):
        return struct.pack(self.FORMAT, keycode_to_code(codec, self.keycode), keycode_to_code(codec, self.alt_keycode),
                           self.allowed_mods, self.options)

    @classmethod
    def unpack(cls, data, codec):
        _check_size(data, cls.SIZE, "alt repeat key")
        keycode, alt_keycode, allowed_mods, options = struct.unpack(cls.FORMAT, data[:cls.SIZE])
        return cls(code_to_keycode(codec, keycode), code_to_keycode(codec, alt_keycode), allowed_mods, options)


@dataclass(frozen=True)
class LeaderSequenceEntry:
    sequence: Tuple[str, ...] = (EMPTY, EMPTY, EMPTY, EMPTY, EMPTY)
    output: str = EMPTY
    options: int = 0

    FORMAT = "<HHHHHHH"
    SIZE = 14
    SLOT_COUNT = 6

    @property
    def enabled(self):
        return bool(self.options & ENABLED)

    @property
    def keys(self):
        """ The sequence up to the first empty slot """
        keys = []
        for kc in self.sequence:
            if kc == EMPTY:
                break
            keys.append(kc)
        return keys

    def slot(self, slot):
        if slot == 5:
            return self.output
        return self.sequence[slot]

    def with_slot(self, slot, value):
        if slot == 5:
            return replace(self, output=value)
        if not 0 <= slot < 5:
            raise IndexError("leader slot {} out of range".format(slot))
        sequence = list(self.sequence)
        sequence[slot] = value
        return replace(self, sequence=tuple(sequence))

    def with_enabled(self, enabled):
        return replace(self, options=(self.options & TERM_MASK) | (ENABLED if enabled else 0))

    def pack(self, codec):
        codes = [keycode_to_code(codec, kc) for kc in self.sequence]
        return struct.pack(self.FORMAT, *codes, keycode_to_code(codec, self.output), self.options)

    @classmethod
    def unpack(cls, data, codec):
        _check_size(data, cls.SIZE, "leader")
        entry = struct.unpack(cls.FORMAT, data[:cls.SIZE])
        return cls(tuple(code_to_keycode(codec, kc) for kc in entry[:5]), code_to_keycode(codec, entry[5]),
                   entry[6])


@dataclass(frozen=True)
class KeyOverrideEntry:
    """Replaces trigger with replacement while trigger_mods are held.

    Slot 0 is the trigger, slot 1 the replacement; layers is a bit mask of
    the layers the override is active on.
    """
    trigger: str = EMPTY
    replacement: str = EMPTY
    layers: int = KEY_OVERRIDE_ALL_LAYERS
    trigger_mods: int = 0
    negative_mod_mask: int = 0
    suppressed_mods: int = 0
    options: int = 0

    FORMAT = "<HHHBBBB"
    SIZE = 10
    SLOT_COUNT = 2

    @property
    def enabled(self):
        return bool(self.options & KEY_OVERRIDE_ENABLED)

    def active_on(self, layer):
        return bool(self.layers & (1 << layer))

    def slot(self, slot):
        return (self.trigger, self.replacement)[slot]

    def with_slot(self, slot, value):
        if slot == 0:
            return replace(self, trigger=value)
        if slot == 1:
            return replace(self, replacement=value)
        raise IndexError("key override slot {} out of range".format(slot))

    def with_enabled(self, enabled):
        options = self.options & ~KEY_OVERRIDE_ENABLED
        return replace(self, options=options | (KEY_OVERRIDE_ENABLED if enabled else 0))

    def pack(self, codec):
        return struct.pack(self.FORMAT, keycode_to_code(codec, self.trigger),
                           keycode_to_code(codec, self.replacement), self.layers, self.trigger_mods,
                           self.negative_mod_mask, self.suppressed_mods, self.options)

    @classmethod
    def unpack(cls, data, codec):
        _check_size(data, cls.SIZE, "key override")
        entry = struct.unpack(cls.FORMAT, data[:cls.SIZE])
        return cls(code_to_keycode(codec, entry[0]), code_to_keycode(codec, entry[1]), *entry[2:])


@dataclass(frozen=True)
class MacroEntry:
    """A macro as a list of (action, value) pairs.

    Actions are "text" (a string), "tap"/"down"/"up" (a keycode) and
    "delay" (milliseconds).
    """
    actions: Tuple[Tuple[str, Any], ...] = ()

    def with_slot(self, index, value):
        if not 0 <= index < len(self.actions):
            raise IndexError("macro action {} out of range".format(index))
        actions = list(self.actions)
        actions[index] = (actions[index][0], value)
        return replace(self, actions=tuple(actions))

    def pack(self, codec):
        out = b""
        for action, value in self.actions:
            if action == "text":
                data = value.encode("utf-8")
                if b"\x00" in data or bytes([SS_QMK_PREFIX]) in data:
                    raise ValueError("macro text cannot contain control bytes 0x00 or 0x01")
                out += data
            elif action == "delay":
                ms = int(value)
                if not 0 <= ms < 255 * 255:
                    raise ValueError("macro delay {}ms out of range".format(ms))
                out += bytes([SS_QMK_PREFIX, SS_DELAY_CODE, ms % 255 + 1, ms // 255 + 1])
            elif action in MACRO_KEY_ACTIONS:
                out += self._pack_key(action, keycode_to_code(codec, value))
            else:
                raise ValueError("unknown macro action {!r}".format(action))
        return out

    @staticmethod
    def _pack_key(action, code):
        basic, ext = MACRO_KEY_ACTIONS[action]
        if code == 0:
            raise ValueError("macro cannot {} KC_NO".format(action))
        if code <= 0xFF:
            return bytes([SS_QMK_PREFIX, basic, code])
        # a zero low byte would end the macro, the firmware swaps it back
        if code & 0xFF == 0:
            code = 0xFF00 | (code >> 8)
        return bytes([SS_QMK_PREFIX, ext]) + struct.pack("<H", code)

    @classmethod
    def unpack(cls, data, codec):
        actions = []
        text = bytearray()
        pos = 0
        while pos < len(data) and data[pos] != 0:
            if data[pos] != SS_QMK_PREFIX:
                text.append(data[pos])
                pos += 1
                continue

            if text:
                actions.append(("text", text.decode("utf-8", errors="replace")))
                text = bytearray()
            if pos + 1 >= len(data):
                raise ValueError("truncated macro action at byte {}".format(pos))
            code = data[pos + 1]
            if code == SS_DELAY_CODE:
                if pos + 4 > len(data):
                    raise ValueError("truncated macro delay at byte {}".format(pos))
                actions.append(("delay", (data[pos + 2] - 1) + (data[pos + 3] - 1) * 255))
                pos += 4
            elif code in MACRO_ACTION_NAMES:
                name, ext = MACRO_ACTION_NAMES[code]
                if ext:
                    if pos + 4 > len(data):
                        raise ValueError("truncated macro keycode at byte {}".format(pos))
                    kc = data[pos + 2] | (data[pos + 3] << 8)
                    if kc > 0xFF00:
                        kc = (kc & 0xFF) << 8
                    pos += 4
                else:
                    if pos + 3 > len(data):
                        raise ValueError("truncated macro keycode at byte {}".format(pos))
                    kc = data[pos + 2]
                    pos += 3
                actions.append((name, code_to_keycode(codec, kc)))
            else:
                raise ValueError("unknown macro action code {} at byte {}".format(code, pos))

        if text:
            actions.append(("text", text.decode("utf-8", errors="replace")))
        return cls(tuple(actions))


def pack_macros(macros, codec):
    """ Serializes all macros into one buffer, each terminated by 0x00 """
    return b"".join(macro.pack(codec) + b"\x00" for macro in macros)


def unpack_macros(data, codec, count):
    chunks = data.split(b"\x00")
    macros = [MacroEntry.unpack(chunk, codec) for chunk in chunks[:count]]
    while len(macros) < count:
        macros.append(MacroEntry())
    return macros


class FeatureTables:
    """Combo, tap dance, alt repeat key, leader, key override and macro tables
    of one keyboard.

    Addresses are the tuples built by the change_manager address helpers,
    e.g. ('combo', index, slot) or ('macro', index).
    """

    TABLES = {
        'combo': 'combos',
        'tap_dance': 'tap_dances',
        'alt_repeat_key': 'alt_repeat_keys',
        'leader': 'leaders',
        'key_override': 'key_overrides',
    }

    def __init__(self, combos=(), tap_dances=(), alt_repeat_keys=(), leaders=(), macros=(), key_overrides=()):
        self.combos = list(combos)
        self.tap_dances = list(tap_dances)
        self.alt_repeat_keys = list(alt_repeat_keys)
        self.leaders = list(leaders)
        self.macros = list(macros)
        self.key_overrides = list(key_overrides)

    @property
    def combo_count(self):
        return len(self.combos)

    @property
    def tap_dance_count(self):
        return len(self.tap_dances)

    @property
    def alt_repeat_key_count(self):
        return len(self.alt_repeat_keys)

    @property
    def leader_count(self):
        return len(self.leaders)

    @property
    def macro_count(self):
        return len(self.macros)

    @property
    def key_override_count(self):
        return len(self.key_overrides)

    def _table(self, kind):
        if kind not in self.TABLES:
            raise KeyError("not a feature table address: {!r}".format(kind))
        return getattr(self, self.TABLES[kind])

    def entry(self, address):
        if address[0] == 'macro':
            return self.macros[address[1]]
        return self._table(address[0])[address[1]]

    def get(self, address):
        """ Current value at a slot address, or the whole MacroEntry for ('macro', index) """
        if address[0] == 'macro':
            return self.macros[address[1]]
        return self.entry(address).slot(address[2])

    def set(self, address, value):
        if address[0] == 'macro':
            self.macros[address[1]] = value
            return
        table = self._table(address[0])
        table[address[1]] = table[address[1]].with_slot(address[2], value)
