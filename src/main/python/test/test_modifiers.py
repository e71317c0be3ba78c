# SPDX-License-Identifier: GPL-2.0-or-later
"""Tests for modifier masks and wrapper names."""
import pytest

from keycodes.modifiers import (
    Mod, WrapKind, WRAPPER_TABLES, mods_to_mask, mask_to_mods, wrapper_name, parse_wrapper, osm_string, parse_osm,
    modifier_label,
)


class TestMasks:

    def test_bits(self):
        assert mods_to_mask({Mod.CTRL}) == 0x01
        assert mods_to_mask({Mod.SHIFT, Mod.GUI}) == 0x0A
        assert mods_to_mask(set()) == 0

    def test_mask_to_mods_covers_all_masks(self):
        for mask in range(16):
            assert mods_to_mask(mask_to_mods(mask)) == mask


class TestWrapperTables:

    @pytest.mark.parametrize("kind,right", [(k, r) for k in WrapKind for r in (False, True)])
    def test_every_mask_has_a_unique_name(self, kind, right):
        table = WRAPPER_TABLES[(kind, right)]
        assert sorted(table) == list(range(1, 16))
        assert len(set(table.values())) == 15
        for mask, name in table.items():
            assert parse_wrapper(name) == (mask, kind, right)

    def test_known_names(self):
        assert wrapper_name(0x03, WrapKind.PLAIN) == "C_S"
        assert wrapper_name(0x07, WrapKind.PLAIN) == "MEH"
        assert wrapper_name(0x0F, WrapKind.TAP) == "HYPR_T"
        assert wrapper_name(0x03, WrapKind.TAP, right=True) == "RSC_T"
        assert wrapper_name(0x0F, WrapKind.TAP, right=True) == "RSCAG_T"
        assert wrapper_name(0x07, WrapKind.PLAIN, right=True) == "RMEH"

    def test_empty_mask_has_no_wrapper(self):
        assert wrapper_name(0, WrapKind.PLAIN) is None
        assert wrapper_name(0, WrapKind.TAP, right=True) is None

    def test_aliases_parse(self):
        assert parse_wrapper("ALL_T") == (0x0F, WrapKind.TAP, False)
        assert parse_wrapper("LCS") == (0x03, WrapKind.PLAIN, False)
        assert parse_wrapper("RMEH_T") == (0x07, WrapKind.TAP, True)
        assert parse_wrapper("LCSG_T") == (0x0B, WrapKind.TAP, False)
        assert parse_wrapper("RCSG_T") == (0x0B, WrapKind.TAP, True)
        assert parse_wrapper("LCSG") == (0x0B, WrapKind.PLAIN, False)
        assert parse_wrapper("RCSG") == (0x0B, WrapKind.PLAIN, True)
        assert parse_wrapper("NOPE") is None


class TestOneShot:

    def test_osm_string(self):
        assert osm_string(0x01) == "OSM(MOD_LCTL)"
        assert osm_string(0x03) == "OSM(MOD_LCTL|MOD_LSFT)"
        assert osm_string(0x07) == "OSM(MOD_MEH)"
        assert osm_string(0x0F) == "OSM(MOD_HYPR)"
        assert osm_string(0x0F, right=True) == "OSM(MOD_RCTL|MOD_RSFT|MOD_RALT|MOD_RGUI)"
        assert osm_string(0) is None

    def test_parse_osm_any_order(self):
        assert parse_osm("OSM(MOD_LSFT|MOD_LCTL)") == (0x03, False)
        assert parse_osm("OSM(MOD_RGUI)") == (0x08, True)
        assert parse_osm("OSM(MOD_MEH)") == (0x07, False)

    def test_parse_osm_rejects(self):
        assert parse_osm("OSM(MOD_LCTL|MOD_RSFT)") is None
        assert parse_osm("OSM(MOD_LXYZ)") is None
        assert parse_osm("OSM()") is None
        assert parse_osm("MO(1)") is None

    def test_round_trip(self):
        for mask in range(1, 16):
            for right in (False, True):
                assert parse_osm(osm_string(mask, right)) == (mask, right)


def test_modifier_label():
    assert modifier_label(set()) == ""
    assert modifier_label({Mod.CTRL, Mod.SHIFT}) == "C+S"
    assert modifier_label({Mod.CTRL, Mod.SHIFT, Mod.ALT}) == "Meh"
    assert modifier_label(set(Mod)) == "Hyper"
    assert modifier_label({Mod.GUI}) == "G"
