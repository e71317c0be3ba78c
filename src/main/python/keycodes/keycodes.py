# coding: utf-8

# SPDX-License-Identifier: GPL-2.0-or-later

# QMK v6 keycode ranges understood by the codec
QK_BASIC_MAX = 0x00FF
QK_MODS = 0x0100
QK_MODS_MAX = 0x1FFF
QK_MOD_TAP = 0x2000
QK_MOD_TAP_MAX = 0x3FFF
QK_LAYER_TAP = 0x4000
QK_LAYER_TAP_MAX = 0x4FFF
QK_TO = 0x5200
QK_MOMENTARY = 0x5220
QK_DEF_LAYER = 0x5240
QK_TOGGLE_LAYER = 0x5260
QK_ONE_SHOT_LAYER = 0x5280
QK_ONE_SHOT_MOD = 0x52A0
QK_LAYER_TAP_TOGGLE = 0x52C0
QK_TAP_DANCE = 0x5700
QK_TAP_DANCE_MAX = 0x57FF
QK_MACRO = 0x7700
QK_MACRO_MAX = 0x777F
QK_LEADER = 0x7C58
QK_ALT_REPEAT_KEY = 0x7C7A

KC_NO = 0x00
KC_TRNS = 0x01


class Keycode:

    def __init__(self, code, qmk_id, label, tooltip=None, printable=None, alias=None):
        self.code = code
        self.qmk_id = qmk_id
        self.label = label
        self.tooltip = tooltip

        # if this is printable keycode, what character does it normally output (i.e. non-shifted state)
        self.printable = printable

        self.alias = [self.qmk_id]
        if alias:
            self.alias += alias

    def __repr__(self):
        return "Keycode({}, 0x{:02X})".format(self.qmk_id, self.code)


class KeycodeTable:
    """Bidirectional lookup between numeric keycodes and their canonical names.

    Every alias resolves to the same entry; the first name given for an entry
    (its qmk_id) is the canonical one emitted when encoding.
    """

    def __init__(self, keycodes):
        self._by_code = dict()
        self._by_name = dict()
        for keycode in keycodes:
            if keycode.code in self._by_code:
                raise RuntimeError("Misconfigured: two keycodes claim the same code 0x{:02X}".format(keycode.code))
            self._by_code[keycode.code] = keycode
            for name in keycode.alias:
                if name in self._by_name:
                    raise RuntimeError("Misconfigured: two keycodes claim the same alias {}".format(name))
                self._by_name[name] = keycode

    def find(self, name):
        return self._by_name.get(name)

    def find_by_code(self, code):
        return self._by_code.get(code)

    def name(self, code):
        """ Converts integer keycode to its canonical name, or None if unmapped """
        keycode = self._by_code.get(code)
        return keycode.qmk_id if keycode is not None else None

    def code(self, name):
        """ Converts a keycode name or alias to integer, or None if unknown """
        keycode = self._by_name.get(name)
        return keycode.code if keycode is not None else None

    def canonical(self, name):
        keycode = self._by_name.get(name)
        return keycode.qmk_id if keycode is not None else None

    def label(self, name):
        keycode = self._by_name.get(name)
        if keycode is None:
            return name
        return keycode.label

    def __contains__(self, name):
        return name in self._by_name

    def __iter__(self):
        return iter(self._by_code.values())

    def __len__(self):
        return len(self._by_code)


K = Keycode

KEYCODES_SPECIAL = [
    K(0x00, "KC_NO", ""),
    K(0x01, "KC_TRNS", "▽", alias=["KC_TRANSPARENT"]),
]

KEYCODES_BASIC = [
    K(0x04, "KC_A", "A", printable="a"),
    K(0x05, "KC_B", "B", printable="b"),
    K(0x06, "KC_C", "C", printable="c"),
    K(0x07, "KC_D", "D", printable="d"),
    K(0x08, "KC_E", "E", printable="e"),
    K(0x09, "KC_F", "F", printable="f"),
    K(0x0A, "KC_G", "G", printable="g"),
    K(0x0B, "KC_H", "H", printable="h"),
    K(0x0C, "KC_I", "I", printable="i"),
    K(0x0D, "KC_J", "J", printable="j"),
    K(0x0E, "KC_K", "K", printable="k"),
    K(0x0F, "KC_L", "L", printable="l"),
    K(0x10, "KC_M", "M", printable="m"),
    K(0x11, "KC_N", "N", printable="n"),
    K(0x12, "KC_O", "O", printable="o"),
    K(0x13, "KC_P", "P", printable="p"),
    K(0x14, "KC_Q", "Q", printable="q"),
    K(0x15, "KC_R", "R", printable="r"),
    K(0x16, "KC_S", "S", printable="s"),
    K(0x17, "KC_T", "T", printable="t"),
    K(0x18, "KC_U", "U", printable="u"),
    K(0x19, "KC_V", "V", printable="v"),
    K(0x1A, "KC_W", "W", printable="w"),
    K(0x1B, "KC_X", "X", printable="x"),
    K(0x1C, "KC_Y", "Y", printable="y"),
    K(0x1D, "KC_Z", "Z", printable="z"),
    K(0x1E, "KC_1", "!\n1", printable="1"),
    K(0x1F, "KC_2", "@\n2", printable="2"),
    K(0x20, "KC_3", "#\n3", printable="3"),
    K(0x21, "KC_4", "$\n4", printable="4"),
    K(0x22, "KC_5", "%\n5", printable="5"),
    K(0x23, "KC_6", "^\n6", printable="6"),
    K(0x24, "KC_7", "&\n7", printable="7"),
    K(0x25, "KC_8", "*\n8", printable="8"),
    K(0x26, "KC_9", "(\n9", printable="9"),
    K(0x27, "KC_0", ")\n0", printable="0"),
    K(0x28, "KC_ENTER", "Enter", alias=["KC_ENT"]),
    K(0x29, "KC_ESCAPE", "Esc", alias=["KC_ESC"]),
    K(0x2A, "KC_BSPACE", "Bksp", alias=["KC_BSPC"]),
    K(0x2B, "KC_TAB", "Tab"),
    K(0x2C, "KC_SPACE", "Space", printable=" ", alias=["KC_SPC"]),
    K(0x2D, "KC_MINUS", "_\n-", printable="-", alias=["KC_MINS"]),
    K(0x2E, "KC_EQUAL", "+\n=", printable="=", alias=["KC_EQL"]),
    K(0x2F, "KC_LBRACKET", "{\n[", printable="[", alias=["KC_LBRC"]),
    K(0x30, "KC_RBRACKET", "}\n]", printable="]", alias=["KC_RBRC"]),
    K(0x31, "KC_BSLASH", "|\n\\", printable="\\", alias=["KC_BSLS"]),
    K(0x32, "KC_NONUS_HASH", "~\n#", "Non-US # and ~", alias=["KC_NUHS"]),
    K(0x33, "KC_SCOLON", ":\n;", printable=";", alias=["KC_SCLN"]),
    K(0x34, "KC_QUOTE", "\"\n'", printable="'", alias=["KC_QUOT"]),
    K(0x35, "KC_GRAVE", "~\n`", printable="`", alias=["KC_GRV", "KC_ZKHK"]),
    K(0x36, "KC_COMMA", "<\n,", printable=",", alias=["KC_COMM"]),
    K(0x37, "KC_DOT", ">\n.", printable="."),
    K(0x38, "KC_SLASH", "?\n/", printable="/", alias=["KC_SLSH"]),
    K(0x39, "KC_CAPSLOCK", "Caps\nLock", alias=["KC_CLCK", "KC_CAPS"]),
    K(0x3A, "KC_F1", "F1"),
    K(0x3B, "KC_F2", "F2"),
    K(0x3C, "KC_F3", "F3"),
    K(0x3D, "KC_F4", "F4"),
    K(0x3E, "KC_F5", "F5"),
    K(0x3F, "KC_F6", "F6"),
    K(0x40, "KC_F7", "F7"),
    K(0x41, "KC_F8", "F8"),
    K(0x42, "KC_F9", "F9"),
    K(0x43, "KC_F10", "F10"),
    K(0x44, "KC_F11", "F11"),
    K(0x45, "KC_F12", "F12"),
]

KEYCODES_BASIC_NAV = [
    K(0x46, "KC_PSCREEN", "Print\nScreen", alias=["KC_PSCR"]),
    K(0x47, "KC_SCROLLLOCK", "Scroll\nLock", alias=["KC_SLCK", "KC_BRMD"]),
    K(0x48, "KC_PAUSE", "Pause", alias=["KC_PAUS", "KC_BRK", "KC_BRMU"]),
    K(0x49, "KC_INSERT", "Insert", alias=["KC_INS"]),
    K(0x4A, "KC_HOME", "Home"),
    K(0x4B, "KC_PGUP", "Page\nUp"),
    K(0x4C, "KC_DELETE", "Del", alias=["KC_DEL"]),
    K(0x4D, "KC_END", "End"),
    K(0x4E, "KC_PGDOWN", "Page\nDown", alias=["KC_PGDN"]),
    K(0x4F, "KC_RIGHT", "Right", alias=["KC_RGHT"]),
    K(0x50, "KC_LEFT", "Left"),
    K(0x51, "KC_DOWN", "Down"),
    K(0x52, "KC_UP", "Up"),
]

KEYCODES_BASIC_NUMPAD = [
    K(0x53, "KC_NUMLOCK", "Num\nLock", alias=["KC_NLCK"]),
    K(0x54, "KC_KP_SLASH", "/", alias=["KC_PSLS"]),
    K(0x55, "KC_KP_ASTERISK", "*", alias=["KC_PAST"]),
    K(0x56, "KC_KP_MINUS", "-", alias=["KC_PMNS"]),
    K(0x57, "KC_KP_PLUS", "+", alias=["KC_PPLS"]),
    K(0x58, "KC_KP_ENTER", "Num\nEnter", alias=["KC_PENT"]),
    K(0x59, "KC_KP_1", "1", alias=["KC_P1"]),
    K(0x5A, "KC_KP_2", "2", alias=["KC_P2"]),
    K(0x5B, "KC_KP_3", "3", alias=["KC_P3"]),
    K(0x5C, "KC_KP_4", "4", alias=["KC_P4"]),
    K(0x5D, "KC_KP_5", "5", alias=["KC_P5"]),
    K(0x5E, "KC_KP_6", "6", alias=["KC_P6"]),
    K(0x5F, "KC_KP_7", "7", alias=["KC_P7"]),
    K(0x60, "KC_KP_8", "8", alias=["KC_P8"]),
    K(0x61, "KC_KP_9", "9", alias=["KC_P9"]),
    K(0x62, "KC_KP_0", "0", alias=["KC_P0"]),
    K(0x63, "KC_KP_DOT", ".", alias=["KC_PDOT"]),
    K(0x64, "KC_NONUS_BSLASH", "|\n\\", "Non-US \\ and |", alias=["KC_NUBS"]),
    K(0x65, "KC_APPLICATION", "Menu", alias=["KC_APP"]),
    K(0x66, "KC_KB_POWER", "Power", alias=["KC_POWER"]),
    K(0x67, "KC_KP_EQUAL", "=", alias=["KC_PEQL"]),
]

KEYCODES_BASIC_EXTRA = [
    K(0x68, "KC_F13", "F13"),
    K(0x69, "KC_F14", "F14"),
    K(0x6A, "KC_F15", "F15"),
    K(0x6B, "KC_F16", "F16"),
    K(0x6C, "KC_F17", "F17"),
    K(0x6D, "KC_F18", "F18"),
    K(0x6E, "KC_F19", "F19"),
    K(0x6F, "KC_F20", "F20"),
    K(0x70, "KC_F21", "F21"),
    K(0x71, "KC_F22", "F22"),
    K(0x72, "KC_F23", "F23"),
    K(0x73, "KC_F24", "F24"),
    K(0x74, "KC_EXECUTE", "Exec", alias=["KC_EXEC"]),
    K(0x75, "KC_HELP", "Help"),
    K(0x76, "KC_MENU", "Menu"),
    K(0x77, "KC_SELECT", "Select", alias=["KC_SLCT"]),
    K(0x78, "KC_STOP", "Stop"),
    K(0x79, "KC_AGAIN", "Again", alias=["KC_AGIN"]),
    K(0x7A, "KC_UNDO", "Undo"),
    K(0x7B, "KC_CUT", "Cut"),
    K(0x7C, "KC_COPY", "Copy"),
    K(0x7D, "KC_PASTE", "Paste", alias=["KC_PSTE"]),
    K(0x7E, "KC_FIND", "Find"),
    K(0x7F, "KC_KB_MUTE", "Mute"),
    K(0x80, "KC_KB_VOLUME_UP", "Vol +"),
    K(0x81, "KC_KB_VOLUME_DOWN", "Vol -"),
    K(0x82, "KC_LOCKING_CAPS", "Locking\nCaps", alias=["KC_LCAP"]),
    K(0x83, "KC_LOCKING_NUM", "Locking\nNum", alias=["KC_LNUM"]),
    K(0x84, "KC_LOCKING_SCROLL", "Locking\nScroll", alias=["KC_LSCR"]),
    K(0x85, "KC_KP_COMMA", ",", alias=["KC_PCMM"]),
    K(0x86, "KC_KP_EQUAL_AS400", "=", "Keypad = on AS/400 keyboards"),
    K(0x87, "KC_INT1", "JIS\n\\", alias=["KC_RO"]),
    K(0x88, "KC_INT2", "JIS\nKana", alias=["KC_KANA"]),
    K(0x89, "KC_INT3", "JIS\n¥", alias=["KC_JYEN"]),
    K(0x8A, "KC_INT4", "JIS\nHenkan", alias=["KC_HENK"]),
    K(0x8B, "KC_INT5", "JIS\nMuhenkan", alias=["KC_MHEN"]),
    K(0x8C, "KC_INT6", "JIS\nNumpad ,"),
    K(0x8D, "KC_INT7", "Int 7"),
    K(0x8E, "KC_INT8", "Int 8"),
    K(0x8F, "KC_INT9", "Int 9"),
    K(0x90, "KC_LANG1", "Lang1\nKana", alias=["KC_LNG1", "KC_HAEN"]),
    K(0x91, "KC_LANG2", "Lang2\nEisu", alias=["KC_LNG2", "KC_HANJ"]),
    K(0x92, "KC_LANG3", "Lang 3", alias=["KC_LNG3"]),
    K(0x93, "KC_LANG4", "Lang 4", alias=["KC_LNG4"]),
    K(0x94, "KC_LANG5", "Lang 5", alias=["KC_LNG5"]),
    K(0x95, "KC_LANG6", "Lang 6", alias=["KC_LNG6"]),
    K(0x96, "KC_LANG7", "Lang 7", alias=["KC_LNG7"]),
    K(0x97, "KC_LANG8", "Lang 8", alias=["KC_LNG8"]),
    K(0x98, "KC_LANG9", "Lang 9", alias=["KC_LNG9"]),
    K(0x99, "KC_ALT_ERASE", "Alt\nErase", alias=["KC_ERAS"]),
    K(0x9A, "KC_SYSREQ", "SysReq", alias=["KC_SYRQ"]),
    K(0x9B, "KC_CANCEL", "Cancel", alias=["KC_CNCL"]),
    K(0x9C, "KC_CLEAR", "Clear", alias=["KC_CLR"]),
    K(0x9D, "KC_PRIOR", "Prior", alias=["KC_PRIR"]),
    K(0x9E, "KC_RETURN", "Return", alias=["KC_RETN"]),
    K(0x9F, "KC_SEPARATOR", "Sep", alias=["KC_SEPR"]),
    K(0xA0, "KC_OUT", "Out"),
    K(0xA1, "KC_OPER", "Oper"),
    K(0xA2, "KC_CLEAR_AGAIN", "Clear\nAgain", alias=["KC_CLAG"]),
    K(0xA3, "KC_CRSEL", "CrSel", alias=["KC_CRSL"]),
    K(0xA4, "KC_EXSEL", "ExSel", alias=["KC_EXSL"]),
]

KEYCODES_MEDIA = [
    K(0xA5, "KC_PWR", "Sys\nPower", "System Power Down", alias=["KC_SYSTEM_POWER"]),
    K(0xA6, "KC_SLEP", "Sys\nSleep", "System Sleep", alias=["KC_SYSTEM_SLEEP"]),
    K(0xA7, "KC_WAKE", "Sys\nWake", "System Wake", alias=["KC_SYSTEM_WAKE"]),
    K(0xA8, "KC_MUTE", "Mute", "Audio Mute", alias=["KC_AUDIO_MUTE"]),
    K(0xA9, "KC_VOLU", "Vol +", "Audio Volume Up", alias=["KC_AUDIO_VOL_UP"]),
    K(0xAA, "KC_VOLD", "Vol -", "Audio Volume Down", alias=["KC_AUDIO_VOL_DOWN"]),
    K(0xAB, "KC_MNXT", "Media\nNext", "Media Next Track", alias=["KC_MEDIA_NEXT_TRACK"]),
    K(0xAC, "KC_MPRV", "Media\nPrev", "Media Previous Track", alias=["KC_MEDIA_PREV_TRACK"]),
    K(0xAD, "KC_MSTP", "Media\nStop", "Media Stop", alias=["KC_MEDIA_STOP"]),
    K(0xAE, "KC_MPLY", "Media\nPlay", "Media Play/Pause", alias=["KC_MEDIA_PLAY_PAUSE"]),
    K(0xAF, "KC_MSEL", "Media\nSelect", "Media Select", alias=["KC_MEDIA_SELECT"]),
    K(0xB0, "KC_EJCT", "Media\nEject", "Media Eject", alias=["KC_MEDIA_EJECT"]),
    K(0xB1, "KC_MAIL", "Mail", "Launch Mail"),
    K(0xB2, "KC_CALC", "Calc", "Launch Calculator", alias=["KC_CALCULATOR"]),
    K(0xB3, "KC_MYCM", "My\nComp", "Launch My Computer", alias=["KC_MY_COMPUTER"]),
    K(0xB4, "KC_WWW_SEARCH", "Browser\nSearch", "Browser Search", alias=["KC_WSCH"]),
    K(0xB5, "KC_WWW_HOME", "Browser\nHome", "Browser Home", alias=["KC_WHOM"]),
    K(0xB6, "KC_WWW_BACK", "Browser\nBack", "Browser Back", alias=["KC_WBAK"]),
    K(0xB7, "KC_WWW_FORWARD", "Browser\nForward", "Browser Forward", alias=["KC_WFWD"]),
    K(0xB8, "KC_WWW_STOP", "Browser\nStop", "Browser Stop", alias=["KC_WSTP"]),
    K(0xB9, "KC_WWW_REFRESH", "Browser\nRefresh", "Browser Refresh", alias=["KC_WREF"]),
    K(0xBA, "KC_WWW_FAVORITES", "Browser\nFav.", "Browser Favorites", alias=["KC_WFAV"]),
    K(0xBB, "KC_MFFD", "Fast\nForward", "Next Track", alias=["KC_MEDIA_FAST_FORWARD"]),
    K(0xBC, "KC_MRWD", "Rewind", "Previous Track", alias=["KC_MEDIA_REWIND"]),
    K(0xBD, "KC_BRIU", "Scr +", "Brightness up", alias=["KC_BRIGHTNESS_UP"]),
    K(0xBE, "KC_BRID", "Scr -", "Brightness down", alias=["KC_BRIGHTNESS_DOWN"]),
    K(0xBF, "KC_CPNL", "Control\nPanel", "Open control panel", alias=["KC_CONTROL_PANEL"]),
    K(0xC0, "KC_ASST", "Assist", "Launch context-aware assistant", alias=["KC_ASSISTANT"]),
    K(0xC1, "KC_MCTL", "Mission\nControl", "Open Mission Control", alias=["KC_MISSION_CONTROL"]),
    K(0xC2, "KC_LPAD", "Launch\npad", "Open Launchpad", alias=["KC_LAUNCHPAD"]),
]

KEYCODES_MOUSE = [
    K(0xCD, "KC_MS_UP", "Mouse\n↑", alias=["KC_MS_U"]),
    K(0xCE, "KC_MS_DOWN", "Mouse\n↓", alias=["KC_MS_D"]),
    K(0xCF, "KC_MS_LEFT", "Mouse\n←", alias=["KC_MS_L"]),
    K(0xD0, "KC_MS_RIGHT", "Mouse\n→", alias=["KC_MS_R"]),
    K(0xD1, "KC_MS_BTN1", "Mouse\n1", alias=["KC_BTN1"]),
    K(0xD2, "KC_MS_BTN2", "Mouse\n2", alias=["KC_BTN2"]),
    K(0xD3, "KC_MS_BTN3", "Mouse\n3", alias=["KC_BTN3"]),
    K(0xD4, "KC_MS_BTN4", "Mouse\n4", alias=["KC_BTN4"]),
    K(0xD5, "KC_MS_BTN5", "Mouse\n5", alias=["KC_BTN5"]),
    K(0xD6, "KC_MS_BTN6", "Mouse\n6", alias=["KC_BTN6"]),
    K(0xD7, "KC_MS_BTN7", "Mouse\n7", alias=["KC_BTN7"]),
    K(0xD8, "KC_MS_BTN8", "Mouse\n8", alias=["KC_BTN8"]),
    K(0xD9, "KC_MS_WH_UP", "Mouse\nWheel\nUp", alias=["KC_WH_U"]),
    K(0xDA, "KC_MS_WH_DOWN", "Mouse\nWheel\nDown", alias=["KC_WH_D"]),
    K(0xDB, "KC_MS_WH_LEFT", "Mouse\nWheel\nLeft", alias=["KC_WH_L"]),
    K(0xDC, "KC_MS_WH_RIGHT", "Mouse\nWheel\nRight", alias=["KC_WH_R"]),
    K(0xDD, "KC_MS_ACCEL0", "Mouse\nAccel\n0", alias=["KC_ACL0"]),
    K(0xDE, "KC_MS_ACCEL1", "Mouse\nAccel\n1", alias=["KC_ACL1"]),
    K(0xDF, "KC_MS_ACCEL2", "Mouse\nAccel\n2", alias=["KC_ACL2"]),
]

KEYCODES_MODIFIER_KEYS = [
    K(0xE0, "KC_LCTRL", "LCtrl", alias=["KC_LCTL"]),
    K(0xE1, "KC_LSHIFT", "LShift", alias=["KC_LSFT"]),
    K(0xE2, "KC_LALT", "LAlt", alias=["KC_LOPT"]),
    K(0xE3, "KC_LGUI", "LGui", alias=["KC_LCMD", "KC_LWIN"]),
    K(0xE4, "KC_RCTRL", "RCtrl", alias=["KC_RCTL"]),
    K(0xE5, "KC_RSHIFT", "RShift", alias=["KC_RSFT"]),
    K(0xE6, "KC_RALT", "RAlt", alias=["KC_ROPT", "KC_ALGR"]),
    K(0xE7, "KC_RGUI", "RGui", alias=["KC_RCMD", "KC_RWIN"]),
]

KEYCODES = (KEYCODES_SPECIAL + KEYCODES_BASIC + KEYCODES_BASIC_NAV + KEYCODES_BASIC_NUMPAD + KEYCODES_BASIC_EXTRA +
            KEYCODES_MEDIA + KEYCODES_MOUSE + KEYCODES_MODIFIER_KEYS)

K = None

DEFAULT_TABLE = KeycodeTable(KEYCODES)
