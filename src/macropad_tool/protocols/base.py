"""Abstract base for device command sets."""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass

from macropad_tool.constants import REPORT_ID
from macropad_tool.exceptions import UnsupportedFeatureError
from macropad_tool.models import ButtonAction, KeyStep, LedColor
from macropad_tool.profiles import DeviceProfile

# Knob k occupies three positions starting here: cw, press, ccw
KNOB_BASE_POSITION = 0x10


@dataclass(frozen=True, slots=True)
class Packet:
    """One HID output report with its provenance.

    Attributes:
        data: Report bytes, report ID first, padded to the report size.
        layer: 1-based layer the packet programs (0 for control packets).
        position: Firmware key position (0 for control packets).
        continuation: 0-based index of the packet within its key's record.
        label: Short description for logging.
    """

    data: bytes
    layer: int = 0
    position: int = 0
    continuation: int = 0
    label: str = ""

    def __bytes__(self) -> bytes:
        return self.data

    def hex(self) -> str:
        """Space-separated hex dump with trailing padding removed."""
        return self.data.rstrip(b"\x00").hex(" ")


class WireProtocol(ABC):
    """Encodes actions and control commands for one protocol family.

    A protocol only knows how to lay out bytes. Ordering, layer selection
    and validation happen in the encoder.
    """

    def __init__(self, profile: DeviceProfile) -> None:
        self.profile = profile

    @abstractmethod
    def begin_program(self) -> list[Packet]:
        """Packets sent before the first key record."""
        ...

    @abstractmethod
    def end_program(self) -> list[Packet]:
        """Packets that commit a programming session."""
        ...

    @abstractmethod
    def encode_action(
        self, layer: int, position: int, action: ButtonAction
    ) -> list[Packet]:
        """Encode one key record.

        Args:
            layer: 1-based layer number.
            position: Firmware key position.
            action: Parsed action to store at that position.

        Returns:
            The key's packets in transmission order.
        """
        ...

    @abstractmethod
    def encode_led(self, mode: int, layer: int, color: LedColor) -> Packet:
        """Encode a single LED command packet."""
        ...

    @abstractmethod
    def frame_led(self, packet: Packet) -> list[Packet]:
        """Wrap an LED packet in whatever session framing the device needs."""
        ...

    def device_type_request(self) -> Packet:
        """Packet asking the device for its key and knob counts.

        Raises:
            UnsupportedFeatureError: If the command set has no such request.
        """
        msg = f"{self.profile.name} cannot report its key layout"
        raise UnsupportedFeatureError(msg)

    def read_request(self, num_keys: int, num_knobs: int, layer: int) -> Packet:
        """Packet asking the device to send back every mapping of a layer.

        Raises:
            UnsupportedFeatureError: If the command set has no such request.
        """
        msg = f"{self.profile.name} cannot send back its key mappings"
        raise UnsupportedFeatureError(msg)

    def button_position(self, index: int) -> int:
        """Firmware position of the button at a 0-based physical index."""
        return index + 1

    def knob_positions(self, knob: int) -> tuple[int, int, int]:
        """Firmware positions of a knob as (ccw, press, cw)."""
        cw = KNOB_BASE_POSITION + 3 * knob
        return cw + 2, cw + 1, cw

    def report(self, *fields: int) -> bytes:
        """Build a zero-padded report from its leading bytes.

        Raises:
            ValueError: If the fields do not fit in one report.
        """
        size = self.profile.report_size
        if len(fields) > size:
            msg = f"Report of {len(fields)} bytes exceeds {size} bytes"
            raise ValueError(msg)
        return bytes(fields).ljust(size, b"\x00")

    def chunk_steps(self, steps: Sequence[KeyStep]) -> list[tuple[KeyStep, ...]]:
        """Split steps into groups that fit one key packet each.

        An empty sequence still yields one empty group so the key is
        overwritten.
        """
        size = self.profile.steps_per_packet
        chunks = [tuple(steps[i : i + size]) for i in range(0, len(steps), size)]
        return chunks or [()]

    def command(self, *fields: int, label: str) -> Packet:
        """Build a control packet that is not tied to a key."""
        return Packet(self.report(REPORT_ID, *fields), label=label)
