"""Device detection and communication for CH57x macropads."""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Self

import hid

from macropad_tool._signal import PacketRun
from macropad_tool.constants import (
    INTERFACE_ORDER,
    MAX_WRITE_ATTEMPTS,
    PACKET_INTERVAL,
    READ_BUF_SIZE,
    READ_TIMEOUT_MS,
    RETRY_DELAY,
    SUPPORTED_PIDS,
    VENDOR_ID,
)
from macropad_tool.exceptions import (
    DeviceCommunicationError,
    DeviceNotFoundError,
    DevicePermissionError,
)
from macropad_tool.profiles import lookup

if TYPE_CHECKING:
    from collections.abc import Generator, Sequence

    from macropad_tool.protocols import Packet

logger = logging.getLogger(__name__)


def enumerate_macropads(vendor_id: int = VENDOR_ID) -> list[dict[str, Any]]:
    """Enumerate all HID interfaces of supported macropads.

    Args:
        vendor_id: USB vendor ID to enumerate.

    Returns:
        List of device info dictionaries from hidapi.
    """
    return [
        dev
        for dev in hid.enumerate(vendor_id, 0)
        if dev["product_id"] in SUPPORTED_PIDS
    ]


def find_device_info(
    product_id: int | None = None, vendor_id: int = VENDOR_ID
) -> dict[str, Any]:
    """Find the programming interface of a connected macropad.

    Args:
        product_id: Only match this product ID. Any supported model
            matches when omitted.
        vendor_id: USB vendor ID to enumerate.

    Returns:
        Device info dictionary from hidapi.

    Raises:
        DeviceNotFoundError: If no matching device is found.
    """
    devices = [
        dev
        for dev in enumerate_macropads(vendor_id)
        if product_id is None or dev["product_id"] == product_id
    ]
    for interface in INTERFACE_ORDER:
        for dev_info in devices:
            if dev_info.get("interface_number") == interface:
                return dev_info
    if devices:
        return devices[0]

    if product_id is None:
        raise DeviceNotFoundError
    msg = f"No macropad with ID {vendor_id:04x}:{product_id:04x} found"
    raise DeviceNotFoundError(msg)


def get_device_name(product_id: int) -> str:
    """Get the human-readable name for a device.

    Args:
        product_id: The USB product ID.

    Returns:
        The profile name or "Unknown" if not recognized.
    """
    profile = lookup(product_id)
    if profile is None:
        return f"Unknown (0x{product_id:04X})"
    return profile.name


class MacropadDevice:
    """Context manager for macropad communication.

    Holds one exclusive handle for the duration of a programming, LED or
    read run. Packets are written one at a time, in order.

    Example:
        with MacropadDevice(0x8840) as device:
            device.send_packets(packets)
    """

    def __init__(
        self, product_id: int | None = None, vendor_id: int = VENDOR_ID
    ) -> None:
        """Initialize the device wrapper.

        Args:
            product_id: Product ID to open; any supported model if omitted.
            vendor_id: USB vendor ID to enumerate.
        """
        self._device: hid.device | None = None
        self._device_info: dict[str, Any] | None = None
        self._wanted_pid = product_id
        self._vendor_id = vendor_id

    def __enter__(self) -> Self:
        """Open connection to the device."""
        self._device_info = find_device_info(self._wanted_pid, self._vendor_id)
        self._device = hid.device()
        try:
            self._device.open_path(self._device_info["path"])
        except OSError as e:
            self._device = None
            msg = f"Failed to open device: {e}"
            raise DevicePermissionError(msg) from e
        logger.debug(
            "Opened %s (interface %s)",
            self.product_name,
            self._device_info.get("interface_number"),
        )
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        """Close connection."""
        if self._device is not None:
            try:
                self._device.close()
            finally:
                self._device = None

    @property
    def product_id(self) -> int | None:
        """Get the product ID of the connected device."""
        if self._device_info is None:
            return None
        return self._device_info.get("product_id")

    @property
    def product_name(self) -> str:
        """Get the product name of the connected device."""
        if self._device_info is None:
            return "Unknown"
        return get_device_name(self._device_info.get("product_id", 0))

    def send_packets(
        self, packets: Sequence[Packet], run: PacketRun | None = None
    ) -> None:
        """Write packets in order, pausing after each one.

        Cancellation is only checked between packets, so a report is never
        cut short.

        Args:
            packets: Packets in transmission order.
            run: Progress tracker that a signal handler may cancel. A fresh
                one is used when omitted.

        Raises:
            ProgrammingCancelledError: If cancelled before the last packet.
            DeviceCommunicationError: If a packet cannot be written.
        """
        if run is None:
            run = PacketRun(len(packets))
        for packet in packets:
            run.checkpoint()
            logger.debug("%s: %s", packet.label, packet.hex())
            self.write_packet(packet)
            run.advance()
            run.pause(PACKET_INTERVAL)

    def write_packet(self, packet: Packet) -> None:
        """Write one packet, retrying transient failures.

        Raises:
            DeviceCommunicationError: If every attempt fails.
        """
        for attempt in range(1, MAX_WRITE_ATTEMPTS + 1):
            try:
                self._write_report(bytes(packet))
                return
            except DeviceCommunicationError as e:
                if attempt == MAX_WRITE_ATTEMPTS:
                    msg = f"{e} (gave up after {MAX_WRITE_ATTEMPTS} attempts)"
                    raise DeviceCommunicationError(msg) from e
                logger.debug("Write attempt %d failed: %s", attempt, e)
                time.sleep(RETRY_DELAY)

    def read_report(self, timeout_ms: int = READ_TIMEOUT_MS) -> bytes:
        """Read one input report.

        Returns:
            The report, report ID first, or b"" if none arrived in time.

        Raises:
            DeviceCommunicationError: If the device is not open or reading fails.
        """
        if self._device is None:
            msg = "Device not opened"
            raise DeviceCommunicationError(msg)
        try:
            data = self._device.read(READ_BUF_SIZE, timeout_ms)
        except OSError as e:
            msg = f"Failed to read report: {e}"
            raise DeviceCommunicationError(msg) from e
        report = bytes(data)
        if report:
            logger.debug("read: %s", report.rstrip(b"\x00").hex(" "))
        return report

    def read_responses(self, timeout_ms: int = READ_TIMEOUT_MS) -> list[bytes]:
        """Read input reports until the device stays quiet for timeout_ms."""
        responses = []
        while True:
            report = self.read_report(timeout_ms)
            if not report:
                return responses
            responses.append(report)

    def _write_report(self, data: bytes) -> None:
        """Write an output report to the device.

        Args:
            data: The report, report ID first.

        Raises:
            DeviceCommunicationError: If writing fails or is rejected.
        """
        if self._device is None:
            msg = "Device not opened"
            raise DeviceCommunicationError(msg)
        try:
            result = self._device.write(data)
        except OSError as e:
            msg = f"Failed to write report: {e}"
            raise DeviceCommunicationError(msg) from e
        if result < 0:
            msg = f"Report rejected by device (result={result})"
            raise DeviceCommunicationError(msg)


@contextmanager
def open_device(
    product_id: int | None = None, vendor_id: int = VENDOR_ID
) -> Generator[MacropadDevice]:
    """Context manager for opening a macropad.

    Args:
        product_id: Product ID to open; any supported model if omitted.
        vendor_id: USB vendor ID to enumerate.

    Yields:
        An opened MacropadDevice instance.

    Example:
        with open_device(0x8842) as device:
            device.send_packets(packets)
    """
    device = MacropadDevice(product_id, vendor_id)
    with device:
        yield device
