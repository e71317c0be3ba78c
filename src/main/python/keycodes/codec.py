# SPDX-License-Identifier: GPL-2.0-or-later
"""Translation between keybinding descriptors and QMK wire forms.

decode() is total: anything it does not understand comes back as Opaque so
that it can be written back unchanged. encode() returns None when a
descriptor has no wire form; callers then keep the previous value.
"""
import logging
import re

from keycodes.descriptors import (
    WireForm, LayerKind, Plain, Modded, ModTap, OneShotMod, LayerAction, LayerTap, ComboRef, MacroRef,
    TapDanceRef, AltRepeatEntry, LeaderEntry, Blank, Transparent, Opaque, base_of,
)
from keycodes.keycodes import (
    DEFAULT_TABLE, KC_NO, KC_TRNS, QK_BASIC_MAX, QK_MODS_MAX, QK_MOD_TAP, QK_MOD_TAP_MAX, QK_LAYER_TAP,
    QK_LAYER_TAP_MAX, QK_TO, QK_MOMENTARY, QK_DEF_LAYER, QK_TOGGLE_LAYER, QK_ONE_SHOT_LAYER,
    QK_ONE_SHOT_MOD, QK_LAYER_TAP_TOGGLE, QK_TAP_DANCE, QK_TAP_DANCE_MAX, QK_MACRO, QK_MACRO_MAX,
    QK_LEADER, QK_ALT_REPEAT_KEY,
)
from keycodes.modifiers import (
    MOD_RIGHT, MASK_ALL, WrapKind, mask_to_mods, wrapper_name, parse_wrapper, osm_string, parse_osm,
)

LAYER_ACTION_BASE = {
    LayerKind.TURN_ON: QK_TO,
    LayerKind.MOMENTARY: QK_MOMENTARY,
    LayerKind.SET_DEFAULT: QK_DEF_LAYER,
    LayerKind.TOGGLE: QK_TOGGLE_LAYER,
    LayerKind.ONE_SHOT: QK_ONE_SHOT_LAYER,
    LayerKind.TAP_TOGGLE: QK_LAYER_TAP_TOGGLE,
}
LAYER_ACTION_BY_BASE = {base: kind for kind, base in LAYER_ACTION_BASE.items()}
LAYER_ACTION_BY_TOKEN = {kind.value: kind for kind in LayerKind}

# 5 bits of layer for MO/DF/TG/TT/OSL/TO, 4 bits for LT
LAYER_ACTION_LIMIT = 32
LAYER_TAP_LIMIT = 16
MACRO_LIMIT = QK_MACRO_MAX - QK_MACRO + 1
TAP_DANCE_LIMIT = QK_TAP_DANCE_MAX - QK_TAP_DANCE + 1

LEADER_TOKENS = ("QK_LEADER", "QK_LEAD")
ALT_REPEAT_TOKENS = ("QK_ALT_REPEAT_KEY", "QK_AREP")

SENTINEL_NAMES = ("KC_NO", "KC_TRNS")

# LCTL(LSFT(LALT(LGUI(kc)))) is as deep as a real keycode nests
MAX_NESTING = 4

_LAYER_ACTION_RE = re.compile(r"^(MO|DF|TG|TT|OSL|TO)\((\d+)\)$")
_LAYER_TAP_RE = re.compile(r"^LT(\d+)\((.+)\)$")
_MACRO_RE = re.compile(r"^M(\d+)$")
_TAP_DANCE_RE = re.compile(r"^TD\((\d+)\)$")
_COMBO_RE = re.compile(r"^COMBO\((\d+)\)$")
_WRAPPER_RE = re.compile(r"^([A-Z_]+)\((.+)\)$")


def parse_number(text):
    """ Parses '0x1A04' or '6660' into an int, None if text is not a number """
    text = text.strip()
    if not text.isascii():
        return None
    try:
        if text.lower().startswith("0x"):
            return int(text, 16)
        if text.isdigit():
            return int(text)
    except ValueError:
        return None
    return None


class KeycodeCodec:

    def __init__(self, table=DEFAULT_TABLE, layer_count=LAYER_TAP_LIMIT, macro_count=None, tap_dance_count=None,
                 combo_count=None):
        self.table = table
        self.layer_count = layer_count
        self.macro_count = macro_count
        self.tap_dance_count = tap_dance_count
        self.combo_count = combo_count

    @classmethod
    def for_keyboard(cls, keymap, features=None, table=DEFAULT_TABLE):
        """ Builds a codec whose limits match a keymap snapshot and its feature tables """
        if features is None:
            return cls(table, layer_count=keymap.layer_count)
        return cls(table, layer_count=keymap.layer_count, macro_count=features.macro_count,
                   tap_dance_count=features.tap_dance_count, combo_count=features.combo_count)

    # decoding

    def decode(self, wire):
        """ Converts a numeric or string wire value into a descriptor; never raises """
        if isinstance(wire, bool):
            return Opaque(wire)
        if isinstance(wire, int):
            return self._decode_numeric(wire)
        if isinstance(wire, str):
            return self._decode_text(wire, 0)
        return Opaque(wire)

    def _decode_text(self, wire, depth):
        number = parse_number(wire)
        if number is not None:
            descriptor = self._decode_numeric(number)
            return Opaque(wire) if isinstance(descriptor, Opaque) else descriptor
        return self._decode_string(wire.strip(), depth)

    def _decode_inner(self, text, depth):
        if depth >= MAX_NESTING:
            return self._opaque(text)
        return self._decode_text(text, depth + 1)

    def _decode_numeric(self, code):
        if code < 0 or code > 0xFFFF:
            return Opaque(code)
        if code <= QK_BASIC_MAX:
            return self._decode_basic(code)
        if code <= QK_MODS_MAX:
            return self._decode_wrapped(code, Modded)
        if code <= QK_MOD_TAP_MAX:
            return self._decode_wrapped(code, ModTap)
        if code <= QK_LAYER_TAP_MAX:
            layer = (code >> 8) & 0x0F
            base = self.table.name(code & 0xFF)
            if base is None or not self._layer_valid(layer, LAYER_TAP_LIMIT):
                return self._opaque(code)
            return LayerTap(layer, base)
        if QK_TO <= code < QK_LAYER_TAP_TOGGLE + 0x20:
            return self._decode_layer_range(code)
        if QK_TAP_DANCE <= code <= QK_TAP_DANCE_MAX:
            return self._indexed(TapDanceRef, code - QK_TAP_DANCE, self.tap_dance_count, TAP_DANCE_LIMIT, code)
        if QK_MACRO <= code <= QK_MACRO_MAX:
            return self._indexed(MacroRef, code - QK_MACRO, self.macro_count, MACRO_LIMIT, code)
        if code == QK_LEADER:
            return LeaderEntry()
        if code == QK_ALT_REPEAT_KEY:
            return AltRepeatEntry()
        return Opaque(code)

    def _decode_basic(self, code):
        if code == KC_NO:
            return Blank()
        if code == KC_TRNS:
            return Transparent()
        name = self.table.name(code)
        if name is None:
            return self._opaque(code)
        return Plain(name)

    def _decode_wrapped(self, code, kind):
        mods = (code >> 8) & 0x1F
        mask = mods & MASK_ALL
        inner = code & 0xFF
        # modifiers never wrap the transparent sentinel
        if mask == 0 or inner == KC_TRNS:
            return self._opaque(code)
        if inner == KC_NO:
            base = None
        else:
            base = self.table.name(inner)
            if base is None:
                return self._opaque(code)
        return kind(mask_to_mods(mask), base, bool(mods & MOD_RIGHT))

    def _decode_layer_range(self, code):
        if QK_ONE_SHOT_MOD <= code < QK_ONE_SHOT_MOD + 0x20:
            mods = code - QK_ONE_SHOT_MOD
            if mods & MASK_ALL == 0:
                return self._opaque(code)
            return OneShotMod(mask_to_mods(mods & MASK_ALL), bool(mods & MOD_RIGHT))
        base = code & ~0x1F
        layer = code & 0x1F
        kind = LAYER_ACTION_BY_BASE.get(base)
        if kind is None or not self._layer_valid(layer, LAYER_ACTION_LIMIT):
            return self._opaque(code)
        return LayerAction(kind, layer)

    def _decode_string(self, text, depth):
        keycode = self.table.find(text)
        if keycode is not None:
            return self._decode_basic(keycode.code)
        if text in LEADER_TOKENS:
            return LeaderEntry()
        if text in ALT_REPEAT_TOKENS:
            return AltRepeatEntry()

        if text.startswith("OSM("):
            parsed = parse_osm(text)
            if parsed is None:
                return self._opaque(text)
            mask, right = parsed
            return OneShotMod(mask_to_mods(mask), right)

        m = _LAYER_ACTION_RE.match(text)
        if m:
            layer = int(m.group(2))
            if not self._layer_valid(layer, LAYER_ACTION_LIMIT):
                return self._opaque(text)
            return LayerAction(LAYER_ACTION_BY_TOKEN[m.group(1)], layer)

        m = _LAYER_TAP_RE.match(text)
        if m:
            layer = int(m.group(1))
            inner = self._decode_inner(m.group(2), depth)
            if not self._layer_valid(layer, LAYER_TAP_LIMIT):
                return self._opaque(text)
            if isinstance(inner, Plain):
                return LayerTap(layer, inner.base)
            if isinstance(inner, Blank):
                return LayerTap(layer, "KC_NO")
            if isinstance(inner, Transparent):
                return LayerTap(layer, "KC_TRNS")
            return self._opaque(text)

        m = _MACRO_RE.match(text)
        if m:
            return self._indexed(MacroRef, int(m.group(1)), self.macro_count, MACRO_LIMIT, text)

        m = _TAP_DANCE_RE.match(text)
        if m:
            return self._indexed(TapDanceRef, int(m.group(1)), self.tap_dance_count, TAP_DANCE_LIMIT, text)

        m = _COMBO_RE.match(text)
        if m:
            return self._indexed(ComboRef, int(m.group(1)), self.combo_count, None, text)

        m = _WRAPPER_RE.match(text)
        if m:
            wrapper = parse_wrapper(m.group(1))
            if wrapper is not None:
                return self._decode_wrapper_string(text, wrapper, self._decode_inner(m.group(2), depth))

        return self._opaque(text)

    def _decode_wrapper_string(self, text, wrapper, inner):
        mask, wrap_kind, right = wrapper
        kind = Modded if wrap_kind == WrapKind.PLAIN else ModTap
        if isinstance(inner, Plain):
            return kind(mask_to_mods(mask), inner.base, right)
        if isinstance(inner, Blank):
            return kind(mask_to_mods(mask), None, right)
        # LSFT(LCTL(kc)) is the same key as C_S(kc) as long as both use one hand
        if kind is Modded and isinstance(inner, Modded) and inner.right == right:
            return Modded(mask_to_mods(mask | inner.mask), inner.base, right)
        return self._opaque(text)

    def _indexed(self, kind, index, count, limit, raw):
        if index < 0:
            return self._opaque(raw)
        if limit is not None and index >= limit:
            return self._opaque(raw)
        if count is not None and index >= count:
            return self._opaque(raw)
        return kind(index)

    def _layer_valid(self, layer, limit):
        return 0 <= layer < min(limit, self.layer_count)

    @staticmethod
    def _opaque(raw):
        if isinstance(raw, int):
            logging.debug("decode: keeping 0x%04X as an opaque keycode", raw)
        else:
            logging.debug("decode: keeping %r as an opaque keycode", raw)
        return Opaque(raw)

    # encoding

    def encode(self, descriptor):
        """ Converts a descriptor into its wire form, or None if it has none """
        if isinstance(descriptor, Blank):
            return WireForm(KC_NO, "KC_NO")
        if isinstance(descriptor, Transparent):
            return WireForm(KC_TRNS, "KC_TRNS")
        if isinstance(descriptor, Plain):
            return self._encode_base(descriptor.base)
        if isinstance(descriptor, (Modded, ModTap)):
            return self._encode_wrapped(descriptor)
        if isinstance(descriptor, OneShotMod):
            text = osm_string(descriptor.mask, descriptor.right)
            if text is None:
                return None
            code = QK_ONE_SHOT_MOD | descriptor.mask | (MOD_RIGHT if descriptor.right else 0)
            return WireForm(code, text)
        if isinstance(descriptor, LayerAction):
            if not self._layer_valid(descriptor.layer, LAYER_ACTION_LIMIT):
                return self._unrepresentable(descriptor)
            code = LAYER_ACTION_BASE[descriptor.kind] + descriptor.layer
            return WireForm(code, "{}({})".format(descriptor.kind.value, descriptor.layer))
        if isinstance(descriptor, LayerTap):
            return self._encode_layer_tap(descriptor)
        if isinstance(descriptor, ComboRef):
            if isinstance(self._indexed(ComboRef, descriptor.index, self.combo_count, None, None), Opaque):
                return self._unrepresentable(descriptor)
            return WireForm(None, "COMBO({})".format(descriptor.index))
        if isinstance(descriptor, MacroRef):
            if isinstance(self._indexed(MacroRef, descriptor.index, self.macro_count, MACRO_LIMIT, None), Opaque):
                return self._unrepresentable(descriptor)
            return WireForm(QK_MACRO + descriptor.index, "M{}".format(descriptor.index))
        if isinstance(descriptor, TapDanceRef):
            if isinstance(self._indexed(TapDanceRef, descriptor.index, self.tap_dance_count, TAP_DANCE_LIMIT, None),
                          Opaque):
                return self._unrepresentable(descriptor)
            return WireForm(QK_TAP_DANCE + descriptor.index, "TD({})".format(descriptor.index))
        if isinstance(descriptor, AltRepeatEntry):
            return WireForm(QK_ALT_REPEAT_KEY, ALT_REPEAT_TOKENS[0])
        if isinstance(descriptor, LeaderEntry):
            return WireForm(QK_LEADER, LEADER_TOKENS[0])
        if isinstance(descriptor, Opaque):
            return self._encode_opaque(descriptor.raw)
        raise TypeError("not a keybinding descriptor: {!r}".format(descriptor))

    def _encode_base(self, name):
        keycode = self.table.find(name)
        if keycode is None:
            return self._unrepresentable(Plain(name))
        return WireForm(keycode.code, keycode.qmk_id)

    def _encode_wrapped(self, descriptor):
        if descriptor.base is not None:
            canonical = self.table.canonical(descriptor.base)
            # Blank and Transparent are never wrapped by modifiers
            if canonical in SENTINEL_NAMES:
                return self._encode_base(canonical)

        wrap_kind = WrapKind.PLAIN if isinstance(descriptor, Modded) else WrapKind.TAP
        name = wrapper_name(descriptor.mask, wrap_kind, descriptor.right)
        if name is None:
            return self._unrepresentable(descriptor)

        if descriptor.base is None:
            inner = WireForm(KC_NO, "KC_NO")
        else:
            inner = self._encode_base(descriptor.base)
            if inner is None:
                return WireForm(None, "{}({})".format(name, descriptor.base))

        code = ((descriptor.mask | (MOD_RIGHT if descriptor.right else 0)) << 8) | inner.code
        if wrap_kind == WrapKind.TAP:
            code |= QK_MOD_TAP
        return WireForm(code, "{}({})".format(name, inner.text))

    def _encode_layer_tap(self, descriptor):
        if not self._layer_valid(descriptor.layer, LAYER_TAP_LIMIT):
            return self._unrepresentable(descriptor)
        inner = self._encode_base(descriptor.base)
        if inner is None:
            return None
        code = QK_LAYER_TAP | (descriptor.layer << 8) | inner.code
        return WireForm(code, "LT{}({})".format(descriptor.layer, inner.text))

    @staticmethod
    def _encode_opaque(raw):
        if isinstance(raw, int) and not isinstance(raw, bool) and 0 <= raw <= 0xFFFF:
            return WireForm(raw, hex(raw))
        if isinstance(raw, str):
            number = parse_number(raw)
            if number is not None and 0 <= number <= 0xFFFF:
                return WireForm(number, raw)
            return WireForm(None, raw)
        return WireForm(None, str(raw))

    @staticmethod
    def _unrepresentable(descriptor):
        logging.warning("encode: %r has no wire form, keeping the previous value", descriptor)
        return None

    # composition

    def recompose(self, current_wire, new_mods, kind=Modded, right=False):
        """ Applies a modifier selection onto the value an address currently holds.

        The base key is taken from the current value and any modifier wrapper it
        carried is dropped, so Ctrl applied onto Shift+A gives Ctrl+A. Values
        without a base key (Blank, Transparent, layer actions, opaque values)
        take the new modifiers as-is, with no base key yet.
        """
        base = base_of(self.decode(current_wire))
        if base in SENTINEL_NAMES:
            base = None
        if not new_mods:
            if base is None:
                return None
            return self.encode(Plain(base))
        return self.encode(kind(frozenset(new_mods), base, right))

    def replace_tap_key(self, current_wire, new_base):
        """ Swaps only the tapped key of LT/mod-tap/modifier values, keeping the hold part """
        new = self.decode(new_base) if isinstance(new_base, (int, str)) else new_base
        if isinstance(new, Plain):
            base = new.base
        elif isinstance(new, Blank):
            base = "KC_NO"
        elif isinstance(new, Transparent):
            base = "KC_TRNS"
        else:
            return self._unrepresentable(new)

        current = self.decode(current_wire)
        if isinstance(current, LayerTap):
            return self.encode(LayerTap(current.layer, base))
        if isinstance(current, (Modded, ModTap)):
            return self.encode(type(current)(current.mods, base, current.right))
        return self.encode(Plain(base))

    def normalize(self, wire):
        """ Changes e.g. 'LSFT(LCTL(KC_A))' to C_S(KC_A); unknown values pass through """
        encoded = self.encode(self.decode(wire))
        if encoded is None:
            if isinstance(wire, int):
                return WireForm(wire, hex(wire))
            return WireForm(None, str(wire))
        return encoded

    def describe(self, keymap, layer, row, col):
        """ Descriptor for the value a keymap snapshot holds at one position """
        return self.decode(keymap.get(layer, row, col))
