"""Command set of the 0x8890 four-key pad.

Programming is framed by begin and end packets. A keyboard or media key
is announced with its step count and then sent one chord per packet;
mouse actions are a single packet with no announcement. The firmware has
no layer field, so only the first layer is programmable.
"""

import logging
from typing import Final

from macropad_tool.constants import REPORT_ID
from macropad_tool.models import (
    ButtonAction,
    KeySequence,
    LedColor,
    MouseCombo,
    MultimediaKey,
    WheelEvent,
)
from macropad_tool.protocols.base import Packet, WireProtocol
from macropad_tool.protocols.keycodes import (
    MEDIA_USAGES,
    WHEEL_CODES,
    button_mask,
    keycode,
    modifier_mask,
)

logger = logging.getLogger(__name__)

BEGIN_COMMAND: Final = 0xA1
END_COMMAND: Final = 0xAA
LED_COMMAND: Final = 0xB0
LED_CONFIG: Final = 0x18

TYPE_KEYS: Final = 0x11
TYPE_MOUSE: Final = 0x13


class K8890Protocol(WireProtocol):
    """Encoder for the 8890 command set."""

    def begin_program(self) -> list[Packet]:
        return [self.command(BEGIN_COMMAND, 0x01, label="begin")]

    def end_program(self) -> list[Packet]:
        return [self.command(END_COMMAND, 0xAA, label="end")]

    def encode_action(
        self, layer: int, position: int, action: ButtonAction
    ) -> list[Packet]:
        if isinstance(action, KeySequence):
            chords = [
                (modifier_mask(step.chord.modifiers), keycode(step.chord.key))
                for step in action.steps
            ]
            return self._encode_chords(layer, position, chords, "keys")
        if isinstance(action, MultimediaKey):
            # Only the low byte of the usage fits this record
            usage = MEDIA_USAGES[action.key] & 0xFF
            return self._encode_chords(layer, position, [(usage, 0x00)], "media")
        if isinstance(action, MouseCombo):
            mods = modifier_mask({action.modifier}) if action.modifier else 0
            buttons = button_mask(action.buttons)
            return [self._mouse(layer, position, buttons, mods, 0x00, "mouse")]
        if isinstance(action, WheelEvent):
            mods = modifier_mask({action.modifier}) if action.modifier else 0
            wheel = WHEEL_CODES[action.direction]
            return [self._mouse(layer, position, 0x00, mods, wheel, "wheel")]
        msg = f"Unsupported action: {action!r}"
        raise TypeError(msg)

    def encode_led(self, mode: int, layer: int, color: LedColor) -> Packet:
        # Single-color backlight; only the mode is sent
        logger.debug("Ignoring color %s and layer %d on this model", color.value, layer)
        data = self.report(REPORT_ID, LED_COMMAND, LED_CONFIG, mode)
        return Packet(data, layer=layer, label=f"led mode {mode}")

    def frame_led(self, packet: Packet) -> list[Packet]:
        end = self.command(END_COMMAND, BEGIN_COMMAND, label="end led")
        return [*self.begin_program(), packet, end]

    def _encode_chords(
        self,
        layer: int,
        position: int,
        chords: list[tuple[int, int]],
        label: str,
    ) -> list[Packet]:
        count = len(chords)
        where = f"layer {layer} key 0x{position:02x}"
        announce = Packet(
            self.report(REPORT_ID, position, TYPE_KEYS, count, 0x00, 0x01),
            layer=layer,
            position=position,
            label=f"{where} {label} announce",
        )
        packets = [announce]
        for step, (mods, code) in enumerate(chords, start=1):
            data = self.report(REPORT_ID, position, TYPE_KEYS, count, step, mods, code)
            packets.append(
                Packet(
                    data,
                    layer=layer,
                    position=position,
                    continuation=step,
                    label=f"{where} {label} step {step}",
                )
            )
        return packets

    def _mouse(
        self,
        layer: int,
        position: int,
        buttons: int,
        mods: int,
        wheel: int,
        label: str,
    ) -> Packet:
        data = self.report(
            REPORT_ID, position, TYPE_MOUSE, buttons, 0x01, mods, 0x00, wheel
        )
        return Packet(
            data,
            layer=layer,
            position=position,
            label=f"layer {layer} key 0x{position:02x} {label}",
        )
