"""Custom exceptions for macropad-tool."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence


class MacropadError(Exception):
    """Base exception for macropad-tool errors."""


# === Grammar ===


class GrammarError(MacropadError):
    """Raised when an action string cannot be parsed.

    Attributes:
        token: The offending token as written by the user.
        position: 1-based index of the chord token within the action string.
    """

    kind = "GrammarError"

    def __init__(self, message: str, token: str, position: int) -> None:
        super().__init__(message)
        self.token = token
        self.position = position


class UnknownKeyNameError(GrammarError):
    """Raised when the base key of a chord is not a known name."""

    kind = "UnknownKeyName"


class UnknownModifierError(GrammarError):
    """Raised when a modifier segment is not a known modifier name."""

    kind = "UnknownModifier"


class MixedCategoryError(GrammarError):
    """Raised when key, mouse and media tokens are combined in one action."""

    kind = "MixedCategory"


class TooManyChordsError(GrammarError):
    """Raised when an action chains more chords than allowed."""

    kind = "TooManyChords"


class EmptyChordError(GrammarError):
    """Raised when a chord has neither modifiers nor a key."""

    kind = "EmptyChord"


class InvalidMouseModifierError(GrammarError):
    """Raised when a mouse event uses a modifier other than ctrl, shift or alt."""

    kind = "InvalidMouseModifier"


# === Configuration ===


class ConfigFileError(MacropadError):
    """Raised when the configuration document is structurally malformed."""


class ValidationError(MacropadError):
    """A single problem found while validating a configuration.

    Validation errors are collected rather than raised one by one; see
    ConfigValidationError.

    Attributes:
        kind: Error category, e.g. "GridShapeMismatch" or "UnknownKeyName".
        layer: 1-based layer number, or None for device-level problems.
        position: (row, col) for buttons, (knob, sub-action) for knobs.
        text: The offending action text, if any.
    """

    def __init__(
        self,
        kind: str,
        message: str,
        layer: int | None = None,
        position: tuple[int, int] | tuple[int, str] | None = None,
        text: str | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.layer = layer
        self.position = position
        self.text = text

    @property
    def location(self) -> str:
        """Human-readable coordinates of the problem."""
        if self.layer is None:
            return "device"
        if self.position is None:
            return f"layer {self.layer}"
        first, second = self.position
        if isinstance(second, str):
            return f"layer {self.layer}, knob {first}, {second}"
        return f"layer {self.layer}, row {first}, col {second}"

    def __str__(self) -> str:
        suffix = f" ({self.text!r})" if self.text is not None else ""
        return f"{self.location}: {self.kind}: {self.message}{suffix}"


class ConfigValidationError(MacropadError):
    """Raised when a configuration has one or more validation errors."""

    def __init__(self, errors: Sequence[ValidationError]) -> None:
        self.errors = list(errors)
        count = len(self.errors)
        noun = "error" if count == 1 else "errors"
        super().__init__(f"Configuration has {count} {noun}")


# === Profiles ===


class ProfileError(MacropadError):
    """Base exception for device profile problems."""


class UnknownProductError(ProfileError):
    """Raised when a product ID has no known profile."""

    def __init__(self, product_id: int) -> None:
        super().__init__(f"Unknown macropad product ID 0x{product_id:04X}")
        self.product_id = product_id


class UnsupportedFeatureError(ProfileError):
    """Raised when a command is not supported by the device model."""


class DeviceMismatchError(ProfileError):
    """Raised when the connected macropad differs from the expected geometry.

    Attributes:
        num_keys: Keys reported by the device.
        num_knobs: Rotary encoders reported by the device.
    """

    def __init__(self, message: str, num_keys: int, num_knobs: int) -> None:
        super().__init__(message)
        self.num_keys = num_keys
        self.num_knobs = num_knobs


# === Transport ===


class TransportError(MacropadError):
    """Base exception for USB HID transport failures."""


class DeviceNotFoundError(TransportError):
    """Raised when no compatible macropad is connected."""

    def __init__(self, message: str = "No compatible macropad found") -> None:
        super().__init__(message)


class DevicePermissionError(TransportError):
    """Raised when the macropad is present but cannot be opened."""


class DeviceCommunicationError(TransportError):
    """Raised when writing to or reading from the device fails."""


class UnexpectedResponseError(TransportError):
    """Raised when the device answers with a report of the wrong kind."""


class ProgrammingCancelledError(MacropadError):
    """Raised when a programming run is interrupted between packets.

    Attributes:
        sent: Number of packets written before the interrupt.
    """

    def __init__(self, sent: int, total: int) -> None:
        super().__init__(
            f"Interrupted after {sent} of {total} packets; "
            "re-run the command to reprogram the device completely"
        )
        self.sent = sent
        self.total = total
