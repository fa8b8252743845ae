"""Protocol encoder.

Turns a physical layout, or an LED setting, into the exact packets sent to
a device. Encoding is pure: the same input always yields byte-identical
packets, and nothing here touches the device.
"""

import logging
from dataclasses import dataclass

from macropad_tool.constants import NUM_LAYERS
from macropad_tool.models import LedColor, PhysicalLayer, PhysicalLayout
from macropad_tool.profiles import DeviceProfile, require_led
from macropad_tool.protocols import Packet, WireProtocol, create_protocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ProgramLayers:
    """Program every button and knob of the layout."""


@dataclass(frozen=True, slots=True)
class SetLed:
    """Set the backlight mode and color of one layer.

    Attributes:
        mode: LED mode, 0 (off) up to the profile's mode count minus one.
        layer: 1-based layer number.
        color: Backlight color (ignored by single-color models).
    """

    mode: int
    layer: int
    color: LedColor


Command = ProgramLayers | SetLed


def encode(
    layout: PhysicalLayout, profile: DeviceProfile, command: Command
) -> list[Packet]:
    """Encode a command into packets for a device.

    Args:
        layout: Actions in physical order (unused for LED commands).
        profile: Profile of the target device.
        command: What to encode.

    Returns:
        Packets in transmission order. An LED command yields one packet;
        use frame_led() to add session framing.

    Raises:
        UnsupportedFeatureError: If an LED command targets a model without
            LED support.
        ValueError: If an LED mode or layer is out of range.
    """
    protocol = create_protocol(profile)
    if isinstance(command, SetLed):
        return [_encode_led(protocol, command)]

    layers = layout.layers
    if len(layers) > profile.programmable_layers:
        logger.info(
            "%s stores %d layer(s); layers %d-%d are not sent",
            profile.name,
            profile.programmable_layers,
            profile.programmable_layers + 1,
            len(layers),
        )
        layers = layers[: profile.programmable_layers]

    packets = protocol.begin_program()
    for layer in layers:
        packets += _encode_layer(protocol, layer)
    packets += protocol.end_program()
    return packets


def frame_led(packet: Packet, profile: DeviceProfile) -> list[Packet]:
    """Wrap an LED packet in the session framing its device expects."""
    return create_protocol(profile).frame_led(packet)


def _encode_layer(protocol: WireProtocol, layer: PhysicalLayer) -> list[Packet]:
    packets: list[Packet] = []
    for index, action in enumerate(layer.buttons):
        position = protocol.button_position(index)
        packets += protocol.encode_action(layer.index, position, action)

    for knob_index, knob in enumerate(layer.knobs):
        ccw, press, cw = protocol.knob_positions(knob_index)
        packets += protocol.encode_action(layer.index, cw, knob.cw)
        packets += protocol.encode_action(layer.index, press, knob.press)
        packets += protocol.encode_action(layer.index, ccw, knob.ccw)
    return packets


def _encode_led(protocol: WireProtocol, command: SetLed) -> Packet:
    profile = protocol.profile
    require_led(profile)
    if not 0 <= command.mode < profile.led_modes:
        msg = (
            f"LED mode must be between 0 and {profile.led_modes - 1} "
            f"on {profile.name}, got {command.mode}"
        )
        raise ValueError(msg)
    if not 1 <= command.layer <= NUM_LAYERS:
        msg = f"LED layer must be between 1 and {NUM_LAYERS}, got {command.layer}"
        raise ValueError(msg)
    return protocol.encode_led(command.mode, command.layer, command.color)


__all__ = ["Command", "Packet", "ProgramLayers", "SetLed", "encode", "frame_led"]
