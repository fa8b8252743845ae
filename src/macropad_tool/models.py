"""Data models for macropad-tool.

All models are immutable values: they are built once from the parsed
configuration and consumed by the orientation mapper and the encoder.
"""

from dataclasses import dataclass, field
from enum import Enum


class Orientation(Enum):
    """Physical rotation of the macropad relative to the authored layout."""

    NORMAL = "normal"
    UPSIDE_DOWN = "upsidedown"
    CLOCKWISE = "clockwise"
    COUNTER_CLOCKWISE = "counterclockwise"

    @property
    def is_transposed(self) -> bool:
        """True when buttons are authored as a cols x rows grid."""
        return self in (Orientation.CLOCKWISE, Orientation.COUNTER_CLOCKWISE)


class Modifier(Enum):
    """Keyboard modifiers, left-hand first."""

    CTRL = "ctrl"
    SHIFT = "shift"
    ALT = "alt"
    WIN = "win"
    RCTRL = "rctrl"
    RSHIFT = "rshift"
    RALT = "ralt"
    RWIN = "rwin"


# Only these modifiers can be held during a mouse event
MOUSE_MODIFIERS: frozenset[Modifier] = frozenset(
    {Modifier.CTRL, Modifier.SHIFT, Modifier.ALT}
)


class MouseButton(Enum):
    """Mouse buttons, in canonical order."""

    LEFT = "click"
    RIGHT = "rclick"
    MIDDLE = "mclick"


class WheelDirection(Enum):
    """Mouse wheel direction."""

    UP = "wheelup"
    DOWN = "wheeldown"


class MediaKey(Enum):
    """Consumer-control (multimedia) keys."""

    NEXT = "next"
    PREVIOUS = "previous"
    STOP = "stop"
    PLAY = "play"
    MUTE = "mute"
    VOLUME_UP = "volumeup"
    VOLUME_DOWN = "volumedown"
    FAVORITES = "favorites"
    CALCULATOR = "calculator"
    SCREEN_LOCK = "screenlock"


class LedColor(Enum):
    """Backlight colors."""

    RED = "red"
    ORANGE = "orange"
    YELLOW = "yellow"
    GREEN = "green"
    CYAN = "cyan"
    BLUE = "blue"
    PURPLE = "purple"


class ProtocolFamily(Enum):
    """Command set spoken by a device model."""

    K884X = "884x"
    K8890 = "8890"


@dataclass(frozen=True, slots=True)
class Chord:
    """Modifiers plus an optional base key, pressed together.

    The key is a canonical key name, or an int for a raw ``<N>`` keycode.
    """

    modifiers: frozenset[Modifier] = frozenset()
    key: str | int | None = None

    @property
    def is_empty(self) -> bool:
        """Return True if the chord presses nothing."""
        return not self.modifiers and self.key is None


@dataclass(frozen=True, slots=True)
class KeyStep:
    """One chord of a key sequence and the delay before the next one."""

    chord: Chord
    delay_ms: int = 0


@dataclass(frozen=True, slots=True)
class KeySequence:
    """Chained chords typed one after another."""

    steps: tuple[KeyStep, ...]

    def with_delay(self, delay_ms: int) -> "KeySequence":
        """Return a copy with every step's delay replaced."""
        return KeySequence(
            tuple(KeyStep(step.chord, delay_ms) for step in self.steps)
        )

    @property
    def delay_ms(self) -> int:
        """Largest delay among the steps."""
        return max((step.delay_ms for step in self.steps), default=0)


@dataclass(frozen=True, slots=True)
class MouseCombo:
    """One or more mouse buttons clicked together."""

    buttons: frozenset[MouseButton]
    modifier: Modifier | None = None


@dataclass(frozen=True, slots=True)
class WheelEvent:
    """A single mouse wheel notch."""

    direction: WheelDirection
    modifier: Modifier | None = None


@dataclass(frozen=True, slots=True)
class MultimediaKey:
    """A consumer-control key press."""

    key: MediaKey


ButtonAction = KeySequence | MouseCombo | WheelEvent | MultimediaKey


@dataclass(frozen=True, slots=True)
class KnobAction:
    """Actions bound to one rotary encoder."""

    ccw: ButtonAction
    press: ButtonAction
    cw: ButtonAction


@dataclass(frozen=True, slots=True)
class DeviceSettings:
    """Device section of a configuration."""

    orientation: Orientation
    rows: int
    cols: int
    knobs: int


@dataclass(frozen=True, slots=True)
class Layer:
    """Button grid (authored order) and knob actions of one layer."""

    buttons: tuple[tuple[ButtonAction, ...], ...]
    knobs: tuple[KnobAction, ...]


@dataclass(frozen=True, slots=True)
class MacropadConfig:
    """A validated configuration: device settings and three layers."""

    device: DeviceSettings
    layers: tuple[Layer, ...]


@dataclass(frozen=True, slots=True)
class PhysicalLayer:
    """Actions of one layer in the order the firmware expects them."""

    index: int
    buttons: tuple[ButtonAction, ...]
    knobs: tuple[KnobAction, ...]


@dataclass(frozen=True, slots=True)
class PhysicalLayout:
    """All layers of a configuration in transmission order."""

    layers: tuple[PhysicalLayer, ...] = field(default_factory=tuple)
