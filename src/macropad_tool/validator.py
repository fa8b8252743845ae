"""Configuration validation.

Checks a raw configuration against a device profile and the grammar,
collecting every problem instead of stopping at the first one so a user
can fix them all in one pass.
"""

import logging
from dataclasses import dataclass

from macropad_tool.config import ActionSpec, RawConfig, RawLayer
from macropad_tool.constants import MAX_DELAY_MS, NUM_LAYERS
from macropad_tool.exceptions import (
    ConfigValidationError,
    GrammarError,
    TooManyChordsError,
    ValidationError,
)
from macropad_tool.grammar import ActionContext, parse_action
from macropad_tool.models import (
    ButtonAction,
    KeySequence,
    KnobAction,
    Layer,
    MacropadConfig,
)
from macropad_tool.profiles import DeviceProfile

logger = logging.getLogger(__name__)

Position = tuple[int, int] | tuple[int, str]


@dataclass(frozen=True, slots=True)
class Notice:
    """A non-fatal adjustment made during validation."""

    layer: int
    position: Position
    message: str

    def __str__(self) -> str:
        first, second = self.position
        if isinstance(second, str):
            where = f"layer {self.layer}, knob {first}, {second}"
        else:
            where = f"layer {self.layer}, row {first}, col {second}"
        return f"{where}: {self.message}"


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """A validated configuration and the notices raised while building it."""

    config: MacropadConfig
    notices: tuple[Notice, ...]


def validate(raw: RawConfig, profile: DeviceProfile) -> ValidationResult:
    """Validate a configuration for a device profile.

    Args:
        raw: The configuration as loaded from the document.
        profile: Profile of the target device.

    Returns:
        The validated configuration with parsed actions.

    Raises:
        ConfigValidationError: With every problem found, ordered by layer
            and position.
    """
    checker = _Checker(profile)
    config = checker.check(raw)
    if config is None:
        raise ConfigValidationError(checker.errors)
    for notice in checker.notices:
        logger.warning("%s", notice)
    return ValidationResult(config=config, notices=tuple(checker.notices))


def validate_only(raw: RawConfig, profile: DeviceProfile) -> list[ValidationError]:
    """Return every validation error for a configuration (empty if valid)."""
    checker = _Checker(profile)
    checker.check(raw)
    return checker.errors


class _Checker:
    """Accumulates errors and notices across one validation run."""

    def __init__(self, profile: DeviceProfile) -> None:
        self.profile = profile
        self.errors: list[ValidationError] = []
        self.notices: list[Notice] = []

    def check(self, raw: RawConfig) -> MacropadConfig | None:
        self._check_device(raw)

        if len(raw.layers) != NUM_LAYERS:
            self.errors.append(
                ValidationError(
                    "LayerCountMismatch",
                    f"expected {NUM_LAYERS} layers, got {len(raw.layers)}",
                )
            )

        layers = tuple(
            self._check_layer(raw, layer, number)
            for number, layer in enumerate(raw.layers, start=1)
        )
        if self.errors:
            return None
        return MacropadConfig(device=raw.device, layers=layers)

    def _check_device(self, raw: RawConfig) -> None:
        device = raw.device
        profile = self.profile
        declared = (device.rows, device.cols, device.knobs)
        expected = (profile.rows, profile.cols, profile.knobs)
        if declared != expected:
            self.errors.append(
                ValidationError(
                    "DeviceMismatch",
                    f"configuration declares {device.rows}x{device.cols} keys and "
                    f"{device.knobs} knobs, but {profile.name} has "
                    f"{profile.rows}x{profile.cols} keys and {profile.knobs} knobs",
                )
            )

    def _check_layer(self, raw: RawConfig, layer: RawLayer, number: int) -> Layer:
        profile = self.profile
        if raw.device.orientation.is_transposed:
            rows, cols = profile.cols, profile.rows
        else:
            rows, cols = profile.rows, profile.cols

        shape = [len(row) for row in layer.buttons]
        if shape != [cols] * rows:
            self.errors.append(
                ValidationError(
                    "GridShapeMismatch",
                    f"expected {rows} rows of {cols} buttons for "
                    f"{raw.device.orientation.value} orientation, got rows of {shape}",
                    layer=number,
                )
            )

        buttons = tuple(
            tuple(
                self._check_action(spec, number, (r, c), ActionContext.BUTTON)
                for c, spec in enumerate(row)
            )
            for r, row in enumerate(layer.buttons)
        )

        if len(layer.knobs) != profile.knobs:
            self.errors.append(
                ValidationError(
                    "KnobCountMismatch",
                    f"expected {profile.knobs} knobs, got {len(layer.knobs)}",
                    layer=number,
                )
            )

        knobs = tuple(
            KnobAction(
                ccw=self._check_action(knob.ccw, number, (k, "ccw"), ActionContext.KNOB),
                press=self._check_action(
                    knob.press, number, (k, "press"), ActionContext.KNOB
                ),
                cw=self._check_action(knob.cw, number, (k, "cw"), ActionContext.KNOB),
            )
            for k, knob in enumerate(layer.knobs)
        )
        return Layer(buttons=buttons, knobs=knobs)

    def _check_action(
        self,
        spec: ActionSpec,
        layer: int,
        position: Position,
        context: ActionContext,
    ) -> ButtonAction:
        try:
            action = parse_action(spec.text, context)
        except GrammarError as e:
            self.errors.append(
                ValidationError(e.kind, str(e), layer, position, spec.text)
            )
            # Placeholder; the config is discarded when errors exist
            return KeySequence(())

        limit = self.profile.max_chords
        if isinstance(action, KeySequence) and len(action.steps) > limit:
            self.errors.append(
                ValidationError(
                    TooManyChordsError.kind,
                    f"{self.profile.name} accepts at most {limit} chords per key, "
                    f"got {len(action.steps)}",
                    layer,
                    position,
                    spec.text,
                )
            )
            return action

        if not 0 <= spec.delay_ms <= MAX_DELAY_MS:
            self.errors.append(
                ValidationError(
                    "DelayOutOfRange",
                    f"delay must be between 0 and {MAX_DELAY_MS} ms, "
                    f"got {spec.delay_ms}",
                    layer,
                    position,
                    spec.text,
                )
            )
            return action

        if spec.delay_ms == 0:
            return action
        if not isinstance(action, KeySequence):
            self._notice(layer, position, "delay ignored for mouse and media actions")
            return action
        if not self.profile.supports_delay:
            self._notice(
                layer,
                position,
                f"delay of {spec.delay_ms} ms downgraded to 0; "
                f"{self.profile.name} does not support delays",
            )
            return action
        return action.with_delay(spec.delay_ms)

    def _notice(self, layer: int, position: Position, message: str) -> None:
        self.notices.append(Notice(layer, position, message))
