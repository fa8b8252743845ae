"""Names accepted by the key/chord grammar.

These tables map user-facing names to model values. Device keycodes are a
separate concern and live in ``macropad_tool.protocols.keycodes``.
"""

from typing import Final

from macropad_tool.models import MediaKey, Modifier, MouseButton, WheelDirection

MODIFIER_NAMES: Final[dict[str, Modifier]] = {
    "ctrl": Modifier.CTRL,
    "shift": Modifier.SHIFT,
    "alt": Modifier.ALT,
    "opt": Modifier.ALT,
    "win": Modifier.WIN,
    "cmd": Modifier.WIN,
    "rctrl": Modifier.RCTRL,
    "rshift": Modifier.RSHIFT,
    "ralt": Modifier.RALT,
    "ropt": Modifier.RALT,
    "rwin": Modifier.RWIN,
    "rcmd": Modifier.RWIN,
}

# Canonical key names, in HID usage order
KEY_NAMES: Final[tuple[str, ...]] = (
    *"abcdefghijklmnopqrstuvwxyz",
    *"1234567890",
    "enter",
    "escape",
    "backspace",
    "tab",
    "space",
    "minus",
    "equal",
    "leftbracket",
    "rightbracket",
    "backslash",
    "nonushash",
    "semicolon",
    "quote",
    "grave",
    "comma",
    "dot",
    "slash",
    "capslock",
    *(f"f{n}" for n in range(1, 13)),
    "printscreen",
    "scrolllock",
    "pause",
    "insert",
    "home",
    "pageup",
    "delete",
    "end",
    "pagedown",
    "right",
    "left",
    "down",
    "up",
    "numlock",
    "numpadslash",
    "numpadasterisk",
    "numpadminus",
    "numpadplus",
    "numpadenter",
    *(f"numpad{n}" for n in "1234567890"),
    "numpaddot",
    "nonusbackslash",
    "application",
    "power",
    "numpadequal",
    *(f"f{n}" for n in range(13, 25)),
)

KEY_ALIASES: Final[dict[str, str]] = {
    "esc": "escape",
    "return": "enter",
    "period": "dot",
    "del": "delete",
    "pgup": "pageup",
    "pgdn": "pagedown",
}

MOUSE_BUTTON_NAMES: Final[dict[str, MouseButton]] = {b.value: b for b in MouseButton}

WHEEL_NAMES: Final[dict[str, WheelDirection]] = {w.value: w for w in WheelDirection}

MEDIA_NAMES: Final[dict[str, MediaKey]] = {
    **{m.value: m for m in MediaKey},
    "prev": MediaKey.PREVIOUS,
}

_KEY_SET: Final[frozenset[str]] = frozenset(KEY_NAMES)

# Raw keycodes: <N> with decimal N
MAX_CUSTOM_KEYCODE: Final[int] = 0xFF


def resolve_key(name: str) -> str | int | None:
    """Resolve a base key name to its canonical form.

    Args:
        name: Lower-cased key segment, e.g. ``"a"``, ``"esc"`` or ``"<110>"``.

    Returns:
        The canonical key name, an int for a ``<N>`` raw keycode, or None
        if the name is not a key.
    """
    if name in _KEY_SET:
        return name
    if name in KEY_ALIASES:
        return KEY_ALIASES[name]
    if name.startswith("<") and name.endswith(">"):
        digits = name[1:-1]
        # isdigit() alone also accepts non-ASCII digits such as "²"
        if digits.isascii() and digits.isdigit() and int(digits) <= MAX_CUSTOM_KEYCODE:
            return int(digits)
    return None


def is_known_name(name: str) -> bool:
    """Return True if name belongs to any grammar category."""
    return (
        name in MODIFIER_NAMES
        or resolve_key(name) is not None
        or name in MOUSE_BUTTON_NAMES
        or name in WHEEL_NAMES
        or name in MEDIA_NAMES
    )


def describe_supported_keys() -> list[str]:
    """Build the help listing of every name the grammar accepts."""
    lines = ["Modifiers:"]
    for modifier in Modifier:
        aliases = [n for n, m in MODIFIER_NAMES.items() if m is modifier]
        lines.append(f" - {' / '.join(aliases)}")

    lines += ["", "Keys:"]
    lines += [f" - {name}" for name in KEY_NAMES]
    lines += ["", "Key aliases:"]
    lines += [f" - {alias} = {name}" for alias, name in KEY_ALIASES.items()]

    lines += ["", "Custom key syntax (use decimal code): <110>"]

    lines += ["", "Media keys:"]
    for media in MediaKey:
        aliases = [n for n, m in MEDIA_NAMES.items() if m is media]
        lines.append(f" - {' / '.join(aliases)}")

    lines += ["", "Mouse actions:"]
    lines += [f" - {name}" for name in WHEEL_NAMES]
    lines += [f" - {name}" for name in MOUSE_BUTTON_NAMES]
    return lines
