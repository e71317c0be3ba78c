# SPDX-License-Identifier: GPL-2.0-or-later
"""Modifier masks and the named wrapper forms QMK uses for them.

A modifier set is a frozenset of Mod. On the wire it is a 4-bit mask
(Ctrl=1, Shift=2, Alt=4, Gui=8) plus a fifth bit selecting the right-hand
modifiers. Every non-empty mask has exactly one canonical wrapper name per
(kind, hand) pair; the tables below list all of them.
"""
import enum
from typing import FrozenSet, Iterable, Optional, Tuple


class Mod(enum.Enum):
    CTRL = 0x01
    SHIFT = 0x02
    ALT = 0x04
    GUI = 0x08

    @property
    def bit(self) -> int:
        return self.value


class WrapKind(enum.Enum):
    PLAIN = "plain"  # active while held together with the base key
    TAP = "tap"      # modifier on hold, base key on tap


MOD_RIGHT = 0x10
MASK_ALL = 0x0F

MEH = 0x07
HYPER = 0x0F

PLAIN_WRAPPERS_LEFT = {
    0x01: "LCTL",
    0x02: "LSFT",
    0x03: "C_S",
    0x04: "LALT",
    0x05: "LCA",
    0x06: "LSA",
    0x07: "MEH",
    0x08: "LGUI",
    0x09: "LCG",
    0x0A: "SGUI",
    0x0B: "LSCG",
    0x0C: "LAG",
    0x0D: "LCAG",
    0x0E: "LSAG",
    0x0F: "HYPR",
}

PLAIN_WRAPPERS_RIGHT = {
    0x01: "RCTL",
    0x02: "RSFT",
    0x03: "RCS",
    0x04: "RALT",
    0x05: "RCA",
    0x06: "RSA",
    0x07: "RMEH",
    0x08: "RGUI",
    0x09: "RCG",
    0x0A: "RSG",
    0x0B: "RSCG",
    0x0C: "RAG",
    0x0D: "RCAG",
    0x0E: "RSAG",
    0x0F: "RHYP",
}

TAP_WRAPPERS_LEFT = {
    0x01: "LCTL_T",
    0x02: "LSFT_T",
    0x03: "C_S_T",
    0x04: "LALT_T",
    0x05: "LCA_T",
    0x06: "LSA_T",
    0x07: "MEH_T",
    0x08: "LGUI_T",
    0x09: "LCG_T",
    0x0A: "SGUI_T",
    0x0B: "LSCG_T",
    0x0C: "LAG_T",
    0x0D: "LCAG_T",
    0x0E: "LSAG_T",
    0x0F: "HYPR_T",
}

TAP_WRAPPERS_RIGHT = {
    0x01: "RCTL_T",
    0x02: "RSFT_T",
    0x03: "RSC_T",
    0x04: "RALT_T",
    0x05: "RCA_T",
    0x06: "RSA_T",
    0x07: "RSCA_T",
    0x08: "RGUI_T",
    0x09: "RCG_T",
    0x0A: "RSG_T",
    0x0B: "RSCG_T",
    0x0C: "RAG_T",
    0x0D: "RCAG_T",
    0x0E: "RSAG_T",
    0x0F: "RSCAG_T",
}

WRAPPER_TABLES = {
    (WrapKind.PLAIN, False): PLAIN_WRAPPERS_LEFT,
    (WrapKind.PLAIN, True): PLAIN_WRAPPERS_RIGHT,
    (WrapKind.TAP, False): TAP_WRAPPERS_LEFT,
    (WrapKind.TAP, True): TAP_WRAPPERS_RIGHT,
}

# alternative spellings accepted when decoding, never emitted
WRAPPER_ALIASES = {
    "LCS": (0x03, WrapKind.PLAIN, False),
    "LSG": (0x0A, WrapKind.PLAIN, False),
    "LCS_T": (0x03, WrapKind.TAP, False),
    "LSG_T": (0x0A, WrapKind.TAP, False),
    "ALL_T": (0x0F, WrapKind.TAP, False),
    "RCS_T": (0x03, WrapKind.TAP, True),
    "RMEH_T": (0x07, WrapKind.TAP, True),
    "RHYP_T": (0x0F, WrapKind.TAP, True),
    "LCSG": (0x0B, WrapKind.PLAIN, False),
    "RCSG": (0x0B, WrapKind.PLAIN, True),
    "LCSG_T": (0x0B, WrapKind.TAP, False),
    "RCSG_T": (0x0B, WrapKind.TAP, True),
}

_WRAPPER_LOOKUP = dict(WRAPPER_ALIASES)
for (_kind, _right), _table in WRAPPER_TABLES.items():
    for _mask, _name in _table.items():
        _WRAPPER_LOOKUP[_name] = (_mask, _kind, _right)

# order in which flags are written inside OSM(...)
OSM_FLAG_ORDER = [(Mod.CTRL, "CTL"), (Mod.SHIFT, "SFT"), (Mod.ALT, "ALT"), (Mod.GUI, "GUI")]


def mods_to_mask(mods: Iterable[Mod]) -> int:
    mask = 0
    for mod in mods:
        mask |= mod.bit
    return mask


def mask_to_mods(mask: int) -> FrozenSet[Mod]:
    return frozenset(mod for mod in Mod if mask & mod.bit)


def wrapper_name(mask: int, kind: WrapKind, right: bool = False) -> Optional[str]:
    """Return the canonical wrapper for a mask, or None if there is none."""
    return WRAPPER_TABLES[(kind, bool(right))].get(mask)


def parse_wrapper(name: str) -> Optional[Tuple[int, WrapKind, bool]]:
    """Return (mask, kind, right) for a wrapper name such as 'LCTL_T'."""
    return _WRAPPER_LOOKUP.get(name)


def osm_string(mask: int, right: bool = False) -> Optional[str]:
    """Build OSM(...) for a mask; a zero mask has no one-shot form."""
    mask &= MASK_ALL
    if mask == 0:
        return None
    if not right and mask == HYPER:
        return "OSM(MOD_HYPR)"
    if not right and mask == MEH:
        return "OSM(MOD_MEH)"
    side = "R" if right else "L"
    parts = ["MOD_{}{}".format(side, flag) for mod, flag in OSM_FLAG_ORDER if mask & mod.bit]
    return "OSM({})".format("|".join(parts))


def parse_osm(text: str) -> Optional[Tuple[int, bool]]:
    """Parse OSM(MOD_A|MOD_B|...) into (mask, right).

    Flags may appear in any order. Mixing left and right hand flags, unknown
    flags and an empty flag list are all rejected.
    """
    if not (text.startswith("OSM(") and text.endswith(")")):
        return None
    inner = text[4:-1].replace(" ", "")
    if not inner:
        return None

    mask = 0
    hands = set()
    for flag in inner.split("|"):
        if flag == "MOD_MEH":
            mask |= MEH
            hands.add(False)
            continue
        if flag == "MOD_HYPR":
            mask |= HYPER
            hands.add(False)
            continue
        if not flag.startswith("MOD_") or len(flag) != 8 or flag[4] not in "LR":
            return None
        for mod, name in OSM_FLAG_ORDER:
            if flag[5:] == name:
                mask |= mod.bit
                break
        else:
            return None
        hands.add(flag[4] == "R")

    if len(hands) != 1:
        return None
    return mask, hands.pop()


def modifier_label(mods: Iterable[Mod]) -> str:
    """Short label for a modifier combination, e.g. 'C+S', 'Meh', 'Hyper'."""
    mask = mods_to_mask(mods)
    if mask == 0:
        return ""
    if mask == HYPER:
        return "Hyper"
    if mask == MEH:
        return "Meh"
    return "+".join(flag[0] for mod, flag in OSM_FLAG_ORDER if mask & mod.bit)
