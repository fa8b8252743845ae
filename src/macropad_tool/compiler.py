"""Configuration-to-packet compiler.

Runs the whole pipeline (grammar, validation, orientation mapping and
encoding) without any device I/O, so every error surfaces before the
first byte is written.
"""

import logging

from macropad_tool import validator
from macropad_tool.config import RawConfig
from macropad_tool.encoder import ProgramLayers, SetLed, encode
from macropad_tool.exceptions import ValidationError
from macropad_tool.models import LedColor, PhysicalLayout
from macropad_tool.orientation import physical_order
from macropad_tool.profiles import DeviceProfile, require_led
from macropad_tool.protocols import Packet

logger = logging.getLogger(__name__)


def compile_program(raw: RawConfig, profile: DeviceProfile) -> list[Packet]:
    """Compile a configuration into programming packets.

    Args:
        raw: The configuration as loaded from the document.
        profile: Profile of the target device.

    Returns:
        Every packet of the programming session, in order.

    Raises:
        ConfigValidationError: If the configuration has any error.
    """
    result = validator.validate(raw, profile)
    layout = physical_order(result.config)
    packets = encode(layout, profile, ProgramLayers())
    logger.debug("Compiled %d packets for %s", len(packets), profile.name)
    return packets


def compile_led(
    mode: int, layer: int, color: LedColor, profile: DeviceProfile
) -> Packet:
    """Compile an LED setting into its command packet.

    Raises:
        UnsupportedFeatureError: If the model has no LED command support.
        ValueError: If the mode or layer is out of range.
    """
    require_led(profile)
    (packet,) = encode(PhysicalLayout(), profile, SetLed(mode, layer, color))
    return packet


def validate_only(raw: RawConfig, profile: DeviceProfile) -> list[ValidationError]:
    """Check a configuration without compiling it.

    Returns:
        Every validation error found; empty when the configuration is valid.
    """
    return validator.validate_only(raw, profile)
