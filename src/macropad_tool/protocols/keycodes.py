"""Vendor code tables used on the wire.

Grammar names are resolved to model values in ``macropad_tool.keys``;
this module turns those values into the bytes the firmware expects.
"""

from typing import Final

from macropad_tool.models import (
    LedColor,
    MediaKey,
    Modifier,
    MouseButton,
    WheelDirection,
)

# One bit per modifier; right-hand modifiers have their own bits
MODIFIER_BITS: Final[dict[Modifier, int]] = {
    Modifier.CTRL: 0x01,
    Modifier.SHIFT: 0x02,
    Modifier.ALT: 0x04,
    Modifier.WIN: 0x08,
    Modifier.RCTRL: 0x10,
    Modifier.RSHIFT: 0x20,
    Modifier.RALT: 0x40,
    Modifier.RWIN: 0x80,
}

# HID keyboard page usages
KEYCODES: Final[dict[str, int]] = {
    "a": 0x04, "b": 0x05, "c": 0x06, "d": 0x07, "e": 0x08, "f": 0x09,
    "g": 0x0A, "h": 0x0B, "i": 0x0C, "j": 0x0D, "k": 0x0E, "l": 0x0F,
    "m": 0x10, "n": 0x11, "o": 0x12, "p": 0x13, "q": 0x14, "r": 0x15,
    "s": 0x16, "t": 0x17, "u": 0x18, "v": 0x19, "w": 0x1A, "x": 0x1B,
    "y": 0x1C, "z": 0x1D,
    "1": 0x1E, "2": 0x1F, "3": 0x20, "4": 0x21, "5": 0x22,
    "6": 0x23, "7": 0x24, "8": 0x25, "9": 0x26, "0": 0x27,
    "enter": 0x28, "escape": 0x29, "backspace": 0x2A, "tab": 0x2B,
    "space": 0x2C, "minus": 0x2D, "equal": 0x2E, "leftbracket": 0x2F,
    "rightbracket": 0x30, "backslash": 0x31, "nonushash": 0x32,
    "semicolon": 0x33, "quote": 0x34, "grave": 0x35, "comma": 0x36,
    "dot": 0x37, "slash": 0x38, "capslock": 0x39,
    "f1": 0x3A, "f2": 0x3B, "f3": 0x3C, "f4": 0x3D, "f5": 0x3E, "f6": 0x3F,
    "f7": 0x40, "f8": 0x41, "f9": 0x42, "f10": 0x43, "f11": 0x44, "f12": 0x45,
    "printscreen": 0x46, "scrolllock": 0x47, "pause": 0x48,
    "insert": 0x49, "home": 0x4A, "pageup": 0x4B,
    "delete": 0x4C, "end": 0x4D, "pagedown": 0x4E,
    "right": 0x4F, "left": 0x50, "down": 0x51, "up": 0x52,
    "numlock": 0x53, "numpadslash": 0x54, "numpadasterisk": 0x55,
    "numpadminus": 0x56, "numpadplus": 0x57, "numpadenter": 0x58,
    "numpad1": 0x59, "numpad2": 0x5A, "numpad3": 0x5B, "numpad4": 0x5C,
    "numpad5": 0x5D, "numpad6": 0x5E, "numpad7": 0x5F, "numpad8": 0x60,
    "numpad9": 0x61, "numpad0": 0x62, "numpaddot": 0x63,
    "nonusbackslash": 0x64, "application": 0x65, "power": 0x66,
    "numpadequal": 0x67,
    "f13": 0x68, "f14": 0x69, "f15": 0x6A, "f16": 0x6B,
    "f17": 0x6C, "f18": 0x6D, "f19": 0x6E, "f20": 0x6F,
    "f21": 0x70, "f22": 0x71, "f23": 0x72, "f24": 0x73,
}  # fmt: skip

# HID consumer page usages (16-bit)
MEDIA_USAGES: Final[dict[MediaKey, int]] = {
    MediaKey.NEXT: 0xB5,
    MediaKey.PREVIOUS: 0xB6,
    MediaKey.STOP: 0xB7,
    MediaKey.PLAY: 0xCD,
    MediaKey.MUTE: 0xE2,
    MediaKey.VOLUME_UP: 0xE9,
    MediaKey.VOLUME_DOWN: 0xEA,
    MediaKey.FAVORITES: 0x182,
    MediaKey.CALCULATOR: 0x192,
    MediaKey.SCREEN_LOCK: 0x19E,
}

MOUSE_BUTTON_BITS: Final[dict[MouseButton, int]] = {
    MouseButton.LEFT: 0x01,
    MouseButton.RIGHT: 0x02,
    MouseButton.MIDDLE: 0x04,
}

# Signed wheel delta as a byte
WHEEL_CODES: Final[dict[WheelDirection, int]] = {
    WheelDirection.UP: 0x01,
    WheelDirection.DOWN: 0xFF,
}

# Upper nibble of the LED byte; the lower nibble is the mode
LED_COLOR_CODES: Final[dict[LedColor, int]] = {
    LedColor.RED: 0x10,
    LedColor.ORANGE: 0x20,
    LedColor.YELLOW: 0x30,
    LedColor.GREEN: 0x40,
    LedColor.CYAN: 0x50,
    LedColor.BLUE: 0x60,
    LedColor.PURPLE: 0x70,
}


def modifier_mask(modifiers: frozenset[Modifier] | set[Modifier]) -> int:
    """Combine modifiers into a bitmask."""
    mask = 0
    for modifier in modifiers:
        mask |= MODIFIER_BITS[modifier]
    return mask


def keycode(key: str | int | None) -> int:
    """Return the keycode byte for a canonical key name or raw code."""
    if key is None:
        return 0x00
    if isinstance(key, int):
        return key & 0xFF
    return KEYCODES[key]


def button_mask(buttons: frozenset[MouseButton]) -> int:
    """Combine mouse buttons into a bitmask."""
    mask = 0
    for button in buttons:
        mask |= MOUSE_BUTTON_BITS[button]
    return mask


# Reverse tables for decoding read-back responses
KEY_NAMES_BY_CODE: Final[dict[int, str]] = {
    code: name for name, code in KEYCODES.items()
}
MEDIA_BY_USAGE: Final[dict[int, MediaKey]] = {
    usage: media for media, usage in MEDIA_USAGES.items()
}
WHEEL_BY_CODE: Final[dict[int, WheelDirection]] = {
    code: direction for direction, code in WHEEL_CODES.items()
}


def modifiers_from_mask(mask: int) -> frozenset[Modifier]:
    """Split a modifier bitmask into modifiers."""
    return frozenset(m for m, bit in MODIFIER_BITS.items() if mask & bit)


def key_from_code(code: int) -> str | int | None:
    """Return the key name for a keycode byte, or the raw code if unnamed."""
    if code == 0x00:
        return None
    return KEY_NAMES_BY_CODE.get(code, code)


def buttons_from_mask(mask: int) -> frozenset[MouseButton]:
    """Split a mouse button bitmask into buttons."""
    return frozenset(b for b, bit in MOUSE_BUTTON_BITS.items() if mask & bit)
