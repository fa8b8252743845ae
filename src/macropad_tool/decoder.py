"""Decoder for read-back responses of the 884x family.

Turns the reports a macropad sends back into actions, and assembles them
into a configuration document that ``load_config`` accepts. Like the
encoder, nothing here touches the device.

Response layout (report ID first)::

    03 fa pos layer type dh dl 00 00 00 count (mod code)*   key record
    03 fb keys knobs ...                                      device type
"""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

import yaml

from macropad_tool.config import KNOB_FIELDS
from macropad_tool.exceptions import UnexpectedResponseError
from macropad_tool.grammar import format_action
from macropad_tool.models import (
    ButtonAction,
    Chord,
    KeySequence,
    KeyStep,
    Modifier,
    MouseCombo,
    MultimediaKey,
    Orientation,
    WheelEvent,
)
from macropad_tool.profiles import DeviceProfile
from macropad_tool.protocols.base import KNOB_BASE_POSITION
from macropad_tool.protocols.k884x import (
    DEVICE_TYPE_COMMAND,
    READ_COMMAND,
    TYPE_KEYS,
    TYPE_MEDIA,
    TYPE_MOUSE,
)
from macropad_tool.protocols.keycodes import (
    MEDIA_BY_USAGE,
    WHEEL_BY_CODE,
    buttons_from_mask,
    key_from_code,
    modifiers_from_mask,
)

logger = logging.getLogger(__name__)

# Offsets within a key record
_POSITION = 2
_LAYER = 3
_TYPE = 4
_DELAY = 5
_COUNT = 10
_BODY = 11
_WHEEL = 15
_RECORD_SIZE = 16


@dataclass(frozen=True, slots=True)
class DeviceInfo:
    """Geometry reported by a device-type response."""

    num_keys: int
    num_knobs: int


@dataclass(frozen=True, slots=True)
class KeyRecord:
    """One decoded key record.

    Attributes:
        layer: 1-based layer number.
        position: Firmware key position.
        action: The stored action, or None if the key is unassigned.
    """

    layer: int
    position: int
    action: ButtonAction | None


def decode_device_info(report: bytes) -> DeviceInfo:
    """Decode a device-type response.

    Raises:
        UnexpectedResponseError: If the report is not a device-type response.
    """
    if len(report) < 4 or report[1] != DEVICE_TYPE_COMMAND:
        msg = f"Expected a device type response, got {report[:4].hex(' ')!r}"
        raise UnexpectedResponseError(msg)
    return DeviceInfo(num_keys=report[2], num_knobs=report[3])


def decode_key_record(report: bytes) -> KeyRecord:
    """Decode one key record of a read-back response.

    Raises:
        UnexpectedResponseError: If the report is not a key record.
    """
    if len(report) < _RECORD_SIZE or report[1] != READ_COMMAND:
        msg = f"Expected a key record, got {report[:4].hex(' ')!r}"
        raise UnexpectedResponseError(msg)

    kind = report[_TYPE]
    if kind == TYPE_KEYS:
        action = _decode_keys(report)
    elif kind == TYPE_MEDIA:
        action = _decode_media(report)
    elif kind == TYPE_MOUSE:
        action = _decode_mouse(report)
    else:
        action = None
    return KeyRecord(layer=report[_LAYER], position=report[_POSITION], action=action)


def _decode_keys(report: bytes) -> KeySequence | None:
    delay = report[_DELAY] << 8 | report[_DELAY + 1]
    count = min(report[_COUNT], (len(report) - _BODY) // 2)
    steps = []
    for index in range(count):
        offset = _BODY + 2 * index
        chord = Chord(
            modifiers_from_mask(report[offset]), key_from_code(report[offset + 1])
        )
        if not chord.is_empty:
            steps.append(KeyStep(chord, delay))
    return KeySequence(tuple(steps)) if steps else None


def _decode_media(report: bytes) -> MultimediaKey | None:
    usage = report[_BODY] | report[_BODY + 1] << 8
    if usage not in MEDIA_BY_USAGE:
        logger.warning(
            "Unknown media usage 0x%04x at key 0x%02x", usage, report[_POSITION]
        )
        return None
    return MultimediaKey(MEDIA_BY_USAGE[usage])


def _decode_mouse(report: bytes) -> MouseCombo | WheelEvent | None:
    held = modifiers_from_mask(report[_BODY])
    # Mouse events carry one modifier; keep the first in canonical order
    modifier = next((m for m in Modifier if m in held), None)
    wheel = report[_WHEEL]
    if wheel in WHEEL_BY_CODE:
        return WheelEvent(WHEEL_BY_CODE[wheel], modifier)
    buttons = buttons_from_mask(report[_BODY + 1])
    if buttons:
        return MouseCombo(buttons, modifier)
    return None


def action_text(action: ButtonAction | None) -> str | dict[str, Any]:
    """Render an action as a configuration cell.

    Unassigned keys become an empty string; key sequences with a delay
    use the ``{keys, delay}`` form.
    """
    if action is None:
        return ""
    text = format_action(action)
    if isinstance(action, KeySequence) and action.delay_ms:
        return {"keys": text, "delay": action.delay_ms}
    return text


def assemble_document(
    records: Iterable[KeyRecord], profile: DeviceProfile, layers: Sequence[int]
) -> dict[str, Any]:
    """Place decoded records into a configuration document.

    Args:
        records: Decoded key records, in any order.
        profile: Profile of the device that sent them.
        layers: 1-based layer numbers that were read, in output order.

    Returns:
        Document data in the layout ``load_config`` reads, with normal
        orientation.
    """
    documents = {
        number: {
            "buttons": [[""] * profile.cols for _ in range(profile.rows)],
            "knobs": [dict.fromkeys(KNOB_FIELDS, "") for _ in range(profile.knobs)],
        }
        for number in layers
    }

    for record in records:
        layer = documents.get(record.layer)
        if layer is None:
            logger.debug("Ignoring record for unrequested layer %d", record.layer)
            continue
        cell = action_text(record.action)
        index = record.position - 1
        if 0 <= index < profile.num_buttons:
            row, col = divmod(index, profile.cols)
            layer["buttons"][row][col] = cell
            continue
        knob, offset = divmod(record.position - KNOB_BASE_POSITION, 3)
        if record.position >= KNOB_BASE_POSITION and knob < profile.knobs:
            # Each knob occupies cw, press, ccw in that order
            field = ("cw", "press", "ccw")[offset]
            layer["knobs"][knob][field] = cell
            continue
        logger.warning(
            "Ignoring record for unknown key 0x%02x on layer %d",
            record.position,
            record.layer,
        )

    return {
        "orientation": Orientation.NORMAL.value,
        "rows": profile.rows,
        "cols": profile.cols,
        "knobs": profile.knobs,
        "layers": [documents[number] for number in layers],
    }


def dump_document(document: dict[str, Any]) -> str:
    """Serialize a configuration document as YAML."""
    return yaml.safe_dump(
        document, sort_keys=False, default_flow_style=None, allow_unicode=True
    )
