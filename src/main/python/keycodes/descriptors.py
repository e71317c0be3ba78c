# SPDX-License-Identifier: GPL-2.0-or-later
"""Immutable descriptions of what a key does.

Descriptors are built on demand from keymap values by KeycodeCodec.decode and
turned back into wire forms by KeycodeCodec.encode. They own no resources.
"""
import enum
from dataclasses import dataclass
from typing import FrozenSet, NamedTuple, Optional, Union

from keycodes.modifiers import Mod, mods_to_mask


class WireForm(NamedTuple):
    """A keycode as the device protocol sees it.

    code is the 16-bit value, or None when there is no numeric form;
    text is always present.
    """
    code: Optional[int]
    text: str


class LayerKind(enum.Enum):
    MOMENTARY = "MO"
    SET_DEFAULT = "DF"
    TOGGLE = "TG"
    TAP_TOGGLE = "TT"
    ONE_SHOT = "OSL"
    TURN_ON = "TO"


def _check_mods(mods):
    mods = frozenset(mods)
    if not mods:
        raise ValueError("modifier set must not be empty")
    for mod in mods:
        if not isinstance(mod, Mod):
            raise ValueError("not a modifier: {!r}".format(mod))
    return mods


@dataclass(frozen=True)
class Plain:
    base: str


@dataclass(frozen=True)
class Modded:
    """base held together with mods; base None means no key picked yet."""
    mods: FrozenSet[Mod]
    base: Optional[str] = None
    right: bool = False

    def __post_init__(self):
        object.__setattr__(self, "mods", _check_mods(self.mods))

    @property
    def mask(self) -> int:
        return mods_to_mask(self.mods)


@dataclass(frozen=True)
class ModTap:
    """mods while held, base when tapped."""
    mods: FrozenSet[Mod]
    base: Optional[str] = None
    right: bool = False

    def __post_init__(self):
        object.__setattr__(self, "mods", _check_mods(self.mods))

    @property
    def mask(self) -> int:
        return mods_to_mask(self.mods)


@dataclass(frozen=True)
class OneShotMod:
    mods: FrozenSet[Mod]
    right: bool = False

    def __post_init__(self):
        object.__setattr__(self, "mods", _check_mods(self.mods))

    @property
    def mask(self) -> int:
        return mods_to_mask(self.mods)


@dataclass(frozen=True)
class LayerAction:
    kind: LayerKind
    layer: int


@dataclass(frozen=True)
class LayerTap:
    layer: int
    base: str


@dataclass(frozen=True)
class ComboRef:
    index: int


@dataclass(frozen=True)
class MacroRef:
    index: int


@dataclass(frozen=True)
class TapDanceRef:
    index: int


@dataclass(frozen=True)
class AltRepeatEntry:
    pass


@dataclass(frozen=True)
class LeaderEntry:
    pass


@dataclass(frozen=True)
class Blank:
    pass


@dataclass(frozen=True)
class Transparent:
    pass


@dataclass(frozen=True)
class Opaque:
    """A wire value the codec could not interpret, kept verbatim."""
    raw: Union[int, str]


Descriptor = Union[Plain, Modded, ModTap, OneShotMod, LayerAction, LayerTap, ComboRef, MacroRef,
                   TapDanceRef, AltRepeatEntry, LeaderEntry, Blank, Transparent, Opaque]

MODIFIER_KINDS = (Modded, ModTap)


def modifier_kind(descriptor):
    """Return Modded or ModTap for modifier-wrapped descriptors, else None."""
    for kind in MODIFIER_KINDS:
        if isinstance(descriptor, kind):
            return kind
    return None


def base_of(descriptor) -> Optional[str]:
    """Innermost base key of a descriptor, if it has one."""
    if isinstance(descriptor, (Plain, Modded, ModTap, LayerTap)):
        return descriptor.base
    return None
