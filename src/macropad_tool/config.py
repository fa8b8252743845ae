"""Configuration document loading.

The document is YAML with a device section and three layers::

    orientation: normal
    rows: 2
    cols: 3
    knobs: 1
    layers:
      - buttons:
          - ["ctrl-a,ctrl-s", "b", "c"]
          - ["d", {keys: "ctrl-c,ctrl-v", delay: 100}, "f"]
        knobs:
          - {ccw: volumedown, press: mute, cw: volumeup}

The device keys may also be nested under a ``device:`` mapping. Loading
only checks the document's structure; action strings are checked later by
the validator.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from macropad_tool.exceptions import ConfigFileError
from macropad_tool.models import DeviceSettings, Orientation

KNOB_FIELDS = ("ccw", "press", "cw")


@dataclass(frozen=True, slots=True)
class ActionSpec:
    """An action string as authored, plus its optional delay."""

    text: str
    delay_ms: int = 0


@dataclass(frozen=True, slots=True)
class RawKnob:
    """Knob action strings as authored."""

    ccw: ActionSpec
    press: ActionSpec
    cw: ActionSpec


@dataclass(frozen=True, slots=True)
class RawLayer:
    """One layer as authored (unparsed)."""

    buttons: tuple[tuple[ActionSpec, ...], ...]
    knobs: tuple[RawKnob, ...]


@dataclass(frozen=True, slots=True)
class RawConfig:
    """A configuration document before validation."""

    device: DeviceSettings
    layers: tuple[RawLayer, ...]


def load_config(path: Path) -> RawConfig:
    """Load a configuration document from a YAML file.

    Args:
        path: Path to the YAML file.

    Returns:
        The unvalidated configuration.

    Raises:
        ConfigFileError: If the file cannot be read or is malformed.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        msg = f"Failed to read configuration file: {path}"
        raise ConfigFileError(msg) from e
    return loads_config(text)


def loads_config(text: str) -> RawConfig:
    """Parse a configuration document from YAML text."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        msg = f"Invalid YAML: {e}"
        raise ConfigFileError(msg) from e
    return parse_config(data)


def parse_config(data: Any) -> RawConfig:
    """Build a RawConfig from already-decoded document data.

    Raises:
        ConfigFileError: If the structure does not match the schema.
    """
    if not isinstance(data, dict):
        msg = "Configuration must be a mapping"
        raise ConfigFileError(msg)

    device_data = data.get("device", data)
    if not isinstance(device_data, dict):
        msg = "'device' must be a mapping"
        raise ConfigFileError(msg)
    device = _parse_device(device_data)

    layers_data = data.get("layers")
    if not isinstance(layers_data, list):
        msg = "'layers' must be a list"
        raise ConfigFileError(msg)

    layers = tuple(
        _parse_layer(layer_data, number)
        for number, layer_data in enumerate(layers_data, start=1)
    )
    return RawConfig(device=device, layers=layers)


def parse_orientation(value: Any) -> Orientation:
    """Parse an orientation name such as ``normal`` or ``upside_down``."""
    if not isinstance(value, str):
        msg = f"Orientation must be a string, got {value!r}"
        raise ConfigFileError(msg)
    normalized = value.lower().replace("_", "").replace("-", "").replace(" ", "")
    try:
        return Orientation(normalized)
    except ValueError as e:
        known = ", ".join(o.value for o in Orientation)
        msg = f"Unknown orientation {value!r}. Known: {known}"
        raise ConfigFileError(msg) from e


def _parse_device(data: dict[str, Any]) -> DeviceSettings:
    orientation = parse_orientation(data.get("orientation", "normal"))
    return DeviceSettings(
        orientation=orientation,
        rows=_require_count(data, "rows"),
        cols=_require_count(data, "cols"),
        knobs=_require_count(data, "knobs", default=0),
    )


def _require_count(data: dict[str, Any], key: str, default: int | None = None) -> int:
    value = data.get(key, default)
    # bool is an int subclass; reject it explicitly
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        msg = f"'{key}' must be a non-negative integer, got {value!r}"
        raise ConfigFileError(msg)
    return value


def _parse_layer(data: Any, number: int) -> RawLayer:
    if not isinstance(data, dict):
        msg = f"Layer {number} must be a mapping"
        raise ConfigFileError(msg)

    rows_data = data.get("buttons", [])
    if not isinstance(rows_data, list) or not all(
        isinstance(row, list) for row in rows_data
    ):
        msg = f"Layer {number}: 'buttons' must be a list of rows"
        raise ConfigFileError(msg)
    buttons = tuple(
        tuple(_parse_action(cell, f"layer {number} buttons") for cell in row)
        for row in rows_data
    )

    knobs_data = data.get("knobs") or []
    if not isinstance(knobs_data, list):
        msg = f"Layer {number}: 'knobs' must be a list"
        raise ConfigFileError(msg)
    knobs = tuple(
        _parse_knob(knob, f"layer {number} knob {index}")
        for index, knob in enumerate(knobs_data)
    )
    return RawLayer(buttons=buttons, knobs=knobs)


def _parse_knob(data: Any, where: str) -> RawKnob:
    if not isinstance(data, dict):
        msg = f"{where}: must be a mapping with ccw, press and cw"
        raise ConfigFileError(msg)
    values = dict(data)
    if "press" not in values and "click" in values:
        values["press"] = values.pop("click")
    missing = [name for name in KNOB_FIELDS if name not in values]
    if missing:
        msg = f"{where}: missing {', '.join(missing)}"
        raise ConfigFileError(msg)
    return RawKnob(
        *(_parse_action(values[name], f"{where} {name}") for name in KNOB_FIELDS)
    )


def _parse_action(value: Any, where: str) -> ActionSpec:
    # Unquoted digits load as ints in YAML
    if isinstance(value, int) and not isinstance(value, bool):
        return ActionSpec(str(value))
    if isinstance(value, str):
        return ActionSpec(value)
    if isinstance(value, dict):
        keys = value.get("keys")
        delay = value.get("delay", 0)
        if isinstance(keys, int) and not isinstance(keys, bool):
            keys = str(keys)
        if not isinstance(keys, str):
            msg = f"{where}: 'keys' must be a string, got {keys!r}"
            raise ConfigFileError(msg)
        if not isinstance(delay, int) or isinstance(delay, bool):
            msg = f"{where}: 'delay' must be an integer, got {delay!r}"
            raise ConfigFileError(msg)
        return ActionSpec(keys, delay)
    msg = f"{where}: expected an action string, got {value!r}"
    raise ConfigFileError(msg)
