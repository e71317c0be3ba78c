import unittest

from keycodes.codec import KeycodeCodec
from keycodes.descriptors import Opaque
from keycodes.keycodes import DEFAULT_TABLE, KEYCODES


class TestKeycode(unittest.TestCase):

    def test_table_is_consistent(self):
        for kc in KEYCODES:
            self.assertEqual(DEFAULT_TABLE.name(kc.code), kc.qmk_id)
            for alias in kc.alias:
                self.assertEqual(DEFAULT_TABLE.code(alias), kc.code, alias)
                self.assertEqual(DEFAULT_TABLE.canonical(alias), kc.qmk_id)
        self.assertEqual(len(DEFAULT_TABLE), len(KEYCODES))
        self.assertEqual(list(DEFAULT_TABLE), KEYCODES)

    def test_lookup(self):
        self.assertEqual(DEFAULT_TABLE.find_by_code(0x29).qmk_id, "KC_ESCAPE")
        self.assertEqual(DEFAULT_TABLE.label("KC_ESC"), "Esc")
        self.assertEqual(DEFAULT_TABLE.label("USER00"), "USER00")
        self.assertIn("KC_TRANSPARENT", DEFAULT_TABLE)
        self.assertIsNone(DEFAULT_TABLE.name(0xFF))
        self.assertIsNone(DEFAULT_TABLE.code("KC_NOPE"))

    def test_serialize(self):
        codec = KeycodeCodec()
        covered = 0

        # everything the codec understands must encode back to the same value
        for x in range(2 ** 16):
            d = codec.decode(x)
            if isinstance(d, Opaque):
                self.assertEqual(codec.encode(d).code, x)
                continue
            covered += 1
            form = codec.encode(d)
            self.assertIsNotNone(form, "{} decoded into {} which does not encode".format(hex(x), d))
            self.assertEqual(form.code, x, "{} decoded into {} encoded into {}".format(hex(x), d, form))
            self.assertEqual(codec.decode(form.text), d, "{} did not parse back into {}".format(form.text, d))
        print("{}/{} covered keycodes, which is {:.4f}%".format(covered, 2 ** 16, 100 * covered / 2 ** 16))
