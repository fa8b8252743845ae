"""Command set of the 0x8840/0x8842 family.

Every key is one record: a header with the position, layer, action type
and delay, followed by ``(modifier, keycode)`` pairs. Changes take effect
after a commit packet.

The same family answers read requests: a device-type query returns the
key and knob counts, and a layer read returns one record per key in the
same layout as the programming record, with command byte 0xFA.
"""

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
    LED_COLOR_CODES,
    MEDIA_USAGES,
    WHEEL_CODES,
    button_mask,
    keycode,
    modifier_mask,
)

KEY_COMMAND: Final = 0xFD
READ_COMMAND: Final = 0xFA
DEVICE_TYPE_COMMAND: Final = 0xFB
LED_COMMAND: Final = 0xFE
LED_SUBCOMMAND: Final = 0xB0
LED_CONFIG: Final = 0x08

TYPE_KEYS: Final = 0x01
TYPE_MEDIA: Final = 0x02
TYPE_MOUSE: Final = 0x03

# Fixed step-count bytes for the non-keyboard record types
MEDIA_COUNT: Final = 0x02
MOUSE_COUNT: Final = 0x01


class K884xProtocol(WireProtocol):
    """Encoder for the 884x command set."""

    def begin_program(self) -> list[Packet]:
        return []

    def end_program(self) -> list[Packet]:
        return [self.command(KEY_COMMAND, 0xFE, 0xFF, label="commit")]

    def encode_action(
        self, layer: int, position: int, action: ButtonAction
    ) -> list[Packet]:
        if isinstance(action, KeySequence):
            return self._encode_keys(layer, position, action)
        if isinstance(action, MultimediaKey):
            usage = MEDIA_USAGES[action.key]
            body = (MEDIA_COUNT, usage & 0xFF, usage >> 8)
            return [self._record(layer, position, TYPE_MEDIA, 0, 0, body, "media")]
        if isinstance(action, MouseCombo):
            mods = modifier_mask({action.modifier}) if action.modifier else 0
            body = (MOUSE_COUNT, mods, button_mask(action.buttons))
            return [self._record(layer, position, TYPE_MOUSE, 0, 0, body, "mouse")]
        if isinstance(action, WheelEvent):
            mods = modifier_mask({action.modifier}) if action.modifier else 0
            wheel = WHEEL_CODES[action.direction]
            body = (MOUSE_COUNT, mods, 0x00, 0x00, 0x00, wheel)
            return [self._record(layer, position, TYPE_MOUSE, 0, 0, body, "wheel")]
        msg = f"Unsupported action: {action!r}"
        raise TypeError(msg)

    def encode_led(self, mode: int, layer: int, color: LedColor) -> Packet:
        led = LED_COLOR_CODES[color] | mode
        data = self.report(
            REPORT_ID,
            LED_COMMAND,
            LED_SUBCOMMAND,
            layer,
            LED_CONFIG,
            0x00,
            0x00,
            0x00,
            0x00,
            0x00,
            0x01,
            0x00,
            led,
        )
        return Packet(data, layer=layer, label=f"led mode {mode} {color.value}")

    def frame_led(self, packet: Packet) -> list[Packet]:
        return [packet, *self.end_program()]

    def device_type_request(self) -> Packet:
        return self.command(
            DEVICE_TYPE_COMMAND,
            DEVICE_TYPE_COMMAND,
            DEVICE_TYPE_COMMAND,
            label="device type",
        )

    def read_request(self, num_keys: int, num_knobs: int, layer: int) -> Packet:
        data = self.report(REPORT_ID, READ_COMMAND, num_keys, num_knobs, layer)
        return Packet(data, layer=layer, label=f"read layer {layer}")

    def _encode_keys(
        self, layer: int, position: int, action: KeySequence
    ) -> list[Packet]:
        delay = action.delay_ms if self.profile.supports_delay else 0
        count = len(action.steps)
        packets = []
        for index, chunk in enumerate(self.chunk_steps(action.steps)):
            body = [count]
            for step in chunk:
                body += [modifier_mask(step.chord.modifiers), keycode(step.chord.key)]
            packets.append(
                self._record(layer, position, TYPE_KEYS, delay, index, body, "keys")
            )
        return packets

    def _record(
        self,
        layer: int,
        position: int,
        kind: int,
        delay: int,
        continuation: int,
        body: tuple[int, ...] | list[int],
        label: str,
    ) -> Packet:
        data = self.report(
            REPORT_ID,
            KEY_COMMAND,
            position,
            layer,
            kind,
            delay >> 8,
            delay & 0xFF,
            0x00,
            0x00,
            continuation,
            *body,
        )
        return Packet(
            data,
            layer=layer,
            position=position,
            continuation=continuation,
            label=f"layer {layer} key 0x{position:02x} {label}",
        )
