"""Key/chord grammar.

Parses action strings into model actions::

    "ctrl-alt-a"        -> KeySequence of one chord
    "ctrl-c,ctrl-v"     -> KeySequence of two chords
    "ctrl-click+rclick" -> MouseCombo
    "shift-wheelup"     -> WheelEvent
    "volumeup"          -> MultimediaKey

Commas chain chords, dashes join modifiers to the final segment, and ``+``
joins mouse buttons. Parsing is all-or-nothing: either the whole string
parses or the first error found is raised.
"""

from enum import Enum

from macropad_tool.constants import MAX_CHORDS
from macropad_tool.exceptions import (
    EmptyChordError,
    InvalidMouseModifierError,
    MixedCategoryError,
    TooManyChordsError,
    UnknownKeyNameError,
    UnknownModifierError,
)
from macropad_tool.keys import (
    MEDIA_NAMES,
    MODIFIER_NAMES,
    MOUSE_BUTTON_NAMES,
    WHEEL_NAMES,
    is_known_name,
    resolve_key,
)
from macropad_tool.models import (
    MOUSE_MODIFIERS,
    ButtonAction,
    Chord,
    KeySequence,
    KeyStep,
    Modifier,
    MouseButton,
    MouseCombo,
    MultimediaKey,
    WheelEvent,
)

# Result of parsing one comma-separated token
_Token = Chord | MouseCombo | WheelEvent | MultimediaKey


class ActionContext(Enum):
    """Where an action string is bound."""

    BUTTON = "button"
    KNOB = "knob"

    @property
    def max_chords(self) -> int:
        """Longest chord chain allowed in this context."""
        return MAX_CHORDS if self is ActionContext.BUTTON else 1


def parse_action(
    text: str, context: ActionContext = ActionContext.BUTTON
) -> ButtonAction:
    """Parse an action string.

    Args:
        text: The action as written in the configuration.
        context: Button actions may chain chords; knob actions may not.

    Returns:
        The parsed action.

    Raises:
        GrammarError: A subclass describing the first problem found, with
            the offending token and its 1-based chord position.
    """
    tokens = [token.strip() for token in text.strip().split(",")]

    limit = context.max_chords
    if len(tokens) > limit:
        msg = f"{len(tokens)} chords given, at most {limit} allowed"
        raise TooManyChordsError(msg, tokens[limit], limit + 1)

    parsed = [
        _parse_token(token, position)
        for position, token in enumerate(tokens, start=1)
    ]

    if len(parsed) == 1 and not isinstance(parsed[0], Chord):
        return parsed[0]

    steps: list[KeyStep] = []
    for position, (token, item) in enumerate(zip(tokens, parsed, strict=True), 1):
        if not isinstance(item, Chord):
            msg = "Mouse and media actions cannot be chained with other chords"
            raise MixedCategoryError(msg, token, position)
        steps.append(KeyStep(item))
    return KeySequence(tuple(steps))


def _parse_token(token: str, position: int) -> _Token:
    """Parse one chord token (no commas)."""
    if not token:
        msg = "Chord has no modifiers and no key"
        raise EmptyChordError(msg, token, position)

    *modifier_names, last = token.lower().split("-")
    if not last or any(not name for name in modifier_names):
        msg = "Chord has an empty segment"
        raise EmptyChordError(msg, token, position)

    modifiers: list[Modifier] = []
    for name in modifier_names:
        if name not in MODIFIER_NAMES:
            msg = f"Unknown modifier {name!r}"
            raise UnknownModifierError(msg, token, position)
        modifiers.append(MODIFIER_NAMES[name])

    if last in MODIFIER_NAMES:
        modifiers.append(MODIFIER_NAMES[last])
        return Chord(frozenset(modifiers))

    key = resolve_key(last)
    if key is not None:
        return Chord(frozenset(modifiers), key)

    if "+" in last or last in MOUSE_BUTTON_NAMES:
        buttons = _parse_buttons(last, token, position)
        return MouseCombo(buttons, _mouse_modifier(modifiers, token, position))

    if last in WHEEL_NAMES:
        modifier = _mouse_modifier(modifiers, token, position)
        return WheelEvent(WHEEL_NAMES[last], modifier)

    if last in MEDIA_NAMES:
        if modifiers:
            msg = "Media keys cannot be combined with modifiers"
            raise MixedCategoryError(msg, token, position)
        return MultimediaKey(MEDIA_NAMES[last])

    msg = f"Unknown key {last!r}"
    raise UnknownKeyNameError(msg, token, position)


def _parse_buttons(segment: str, token: str, position: int) -> frozenset[MouseButton]:
    """Parse a ``+``-joined mouse button combination."""
    buttons: set[MouseButton] = set()
    for name in segment.split("+"):
        if not name:
            msg = "Mouse combination has an empty segment"
            raise EmptyChordError(msg, token, position)
        if name in MOUSE_BUTTON_NAMES:
            buttons.add(MOUSE_BUTTON_NAMES[name])
        elif is_known_name(name):
            msg = f"Only mouse buttons can be combined with '+', got {name!r}"
            raise MixedCategoryError(msg, token, position)
        else:
            msg = f"Unknown mouse button {name!r}"
            raise UnknownKeyNameError(msg, token, position)
    return frozenset(buttons)


def _mouse_modifier(
    modifiers: list[Modifier], token: str, position: int
) -> Modifier | None:
    """Check the modifiers held during a mouse event."""
    for modifier in modifiers:
        if modifier not in MOUSE_MODIFIERS:
            msg = f"Modifier {modifier.value!r} is not allowed with mouse events"
            raise InvalidMouseModifierError(msg, token, position)
    distinct = set(modifiers)
    if len(distinct) > 1:
        msg = "Mouse events take at most one modifier"
        raise InvalidMouseModifierError(msg, token, position)
    return distinct.pop() if distinct else None


def format_chord(chord: Chord) -> str:
    """Render a chord in canonical form, e.g. ``ctrl-shift-a``."""
    parts = [m.value for m in Modifier if m in chord.modifiers]
    if isinstance(chord.key, int):
        parts.append(f"<{chord.key}>")
    elif chord.key is not None:
        parts.append(chord.key)
    return "-".join(parts)


def format_action(action: ButtonAction) -> str:
    """Render an action in canonical form.

    ``parse_action(format_action(action))`` reproduces an equal action for
    every action with zero delays.
    """
    if isinstance(action, KeySequence):
        return ",".join(format_chord(step.chord) for step in action.steps)
    if isinstance(action, MultimediaKey):
        return action.key.value

    prefix = f"{action.modifier.value}-" if action.modifier is not None else ""
    if isinstance(action, MouseCombo):
        buttons = "+".join(b.value for b in MouseButton if b in action.buttons)
        return prefix + buttons
    return prefix + action.direction.value
