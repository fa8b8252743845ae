"""Programming, LED and read-back sessions against a connected macropad.

Everything is compiled before the device is opened, so a bad
configuration never leaves the pad half-programmed.
"""

import logging
from typing import Any

from macropad_tool._signal import PacketRun, cancel_on_signal
from macropad_tool.compiler import compile_led, compile_program
from macropad_tool.config import RawConfig
from macropad_tool.constants import VENDOR_ID
from macropad_tool.decoder import (
    DeviceInfo,
    assemble_document,
    decode_device_info,
    decode_key_record,
)
from macropad_tool.device import MacropadDevice, open_device
from macropad_tool.encoder import frame_led
from macropad_tool.exceptions import DeviceCommunicationError, DeviceMismatchError
from macropad_tool.models import LedColor
from macropad_tool.profiles import DeviceProfile, get_profile, require_read
from macropad_tool.protocols import WireProtocol, create_protocol

logger = logging.getLogger(__name__)


def program_macropad(
    raw: RawConfig,
    product_id: int,
    *,
    verify: bool = True,
    vendor_id: int = VENDOR_ID,
) -> int:
    """Compile a configuration and write it to the device.

    Interrupting with Ctrl+C or SIGTERM stops between packets.

    Args:
        raw: The configuration as loaded from the document.
        product_id: Product ID of the target device.
        verify: Ask the device for its key and knob counts and refuse to
            program a pad that does not match the profile. Skipped for
            models that cannot answer.
        vendor_id: USB vendor ID to enumerate.

    Returns:
        Number of packets written.

    Raises:
        UnknownProductError: If the product ID has no profile.
        ConfigValidationError: If the configuration has any error.
        DeviceMismatchError: If verification finds a different geometry.
        DeviceNotFoundError: If the device is not connected.
        DevicePermissionError: If the device cannot be opened.
        DeviceCommunicationError: If a write fails after retries.
        ProgrammingCancelledError: If interrupted before the last packet.
    """
    profile = get_profile(product_id)
    packets = compile_program(raw, profile)

    with (
        cancel_on_signal(PacketRun(len(packets))) as run,
        open_device(product_id, vendor_id) as device,
    ):
        if verify and profile.supports_read:
            protocol = create_protocol(profile)
            check_geometry(query_device_info(device, protocol), profile)
        elif verify:
            logger.debug("%s cannot report its layout, not verifying", profile.name)
        logger.info("Programming %s with %d packets", device.product_name, len(packets))
        device.send_packets(packets, run)
    return len(packets)


def set_led(
    mode: int,
    layer: int,
    color: LedColor,
    product_id: int,
    vendor_id: int = VENDOR_ID,
) -> None:
    """Set the LED mode and color of one layer.

    Raises:
        UnknownProductError: If the product ID has no profile.
        UnsupportedFeatureError: If the model has no LED command support.
        ValueError: If the mode or layer is out of range.
        TransportError: If the device cannot be reached or written.
        ProgrammingCancelledError: If interrupted before the last packet.
    """
    profile = get_profile(product_id)
    packets = frame_led(compile_led(mode, layer, color, profile), profile)

    with (
        cancel_on_signal(PacketRun(len(packets))) as run,
        open_device(product_id, vendor_id) as device,
    ):
        device.send_packets(packets, run)


def query_device_info(device: MacropadDevice, protocol: WireProtocol) -> DeviceInfo:
    """Ask an open device for its key and knob counts.

    Raises:
        UnsupportedFeatureError: If the command set has no such request.
        DeviceCommunicationError: If the device does not answer.
        UnexpectedResponseError: If the answer is not a device-type response.
    """
    device.write_packet(protocol.device_type_request())
    report = device.read_report()
    if not report:
        msg = "Device did not answer the device type request"
        raise DeviceCommunicationError(msg)
    info = decode_device_info(report)
    logger.debug("Device reports %d keys, %d knobs", info.num_keys, info.num_knobs)
    return info


def check_geometry(info: DeviceInfo, profile: DeviceProfile) -> None:
    """Compare the device's reported geometry with its profile.

    Raises:
        DeviceMismatchError: If the key or knob count differs.
    """
    if info.num_keys == profile.num_buttons and info.num_knobs == profile.knobs:
        return
    msg = (
        f"Device reports {info.num_keys} keys and {info.num_knobs} knobs, "
        f"but {profile.name} has {profile.num_buttons} keys and "
        f"{profile.knobs} knobs"
    )
    raise DeviceMismatchError(msg, info.num_keys, info.num_knobs)


def read_macropad(
    product_id: int, layer: int | None = None, vendor_id: int = VENDOR_ID
) -> dict[str, Any]:
    """Read the stored key mappings back from the device.

    Args:
        product_id: Product ID of the device.
        layer: 1-based layer to read; every stored layer when omitted.
        vendor_id: USB vendor ID to enumerate.

    Returns:
        Configuration document data with one entry per layer read.

    Raises:
        UnknownProductError: If the product ID has no profile.
        UnsupportedFeatureError: If the model cannot send back its mappings.
        ValueError: If the layer is out of range.
        DeviceMismatchError: If the device reports a different geometry.
        TransportError: If the device cannot be reached or answers wrongly.
    """
    profile = get_profile(product_id)
    require_read(profile)
    stored = range(1, profile.programmable_layers + 1)
    if layer is not None and layer not in stored:
        msg = f"Layer {layer} out of range (1-{profile.programmable_layers})"
        raise ValueError(msg)
    layers = list(stored) if layer is None else [layer]
    protocol = create_protocol(profile)

    records = []
    with open_device(product_id, vendor_id) as device:
        info = query_device_info(device, protocol)
        check_geometry(info, profile)
        for number in layers:
            device.write_packet(
                protocol.read_request(info.num_keys, info.num_knobs, number)
            )
            responses = device.read_responses()
            logger.info("Layer %d: %d records", number, len(responses))
            records.extend(decode_key_record(report) for report in responses)
    return assemble_document(records, profile, layers)
