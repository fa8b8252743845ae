"""Device profile registry.

Each known product ID maps to an immutable capability record. All
per-model quirks are expressed as fields on this record; no other module
branches on product IDs.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Final

from macropad_tool.constants import MAX_CHORDS, NUM_LAYERS, REPORT_SIZE, VENDOR_ID
from macropad_tool.exceptions import UnknownProductError, UnsupportedFeatureError
from macropad_tool.models import ProtocolFamily


@dataclass(frozen=True, slots=True)
class DeviceProfile:
    """Capabilities and geometry of one macropad model.

    Attributes:
        name: Human-readable model description.
        vendor_id: USB vendor ID.
        product_id: USB product ID.
        rows: Button rows in normal orientation.
        cols: Button columns in normal orientation.
        knobs: Number of rotary encoders.
        supports_delay: Whether the firmware honors per-key delays.
        supports_led: Whether LED commands are accepted.
        led_modes: Number of LED modes (0 when LEDs are unsupported).
        supports_read: Whether the firmware answers device-type and
            read-back requests.
        max_chords: Longest chord sequence per key.
        report_size: Bytes per HID report, report ID included.
        steps_per_packet: Chords that fit in one key packet.
        programmable_layers: Layers the firmware actually stores.
        family: Command set used to encode packets.
    """

    name: str
    vendor_id: int
    product_id: int
    rows: int
    cols: int
    knobs: int
    supports_delay: bool
    supports_led: bool
    led_modes: int
    family: ProtocolFamily
    supports_read: bool = True
    max_chords: int = MAX_CHORDS
    report_size: int = REPORT_SIZE
    steps_per_packet: int = MAX_CHORDS
    programmable_layers: int = NUM_LAYERS

    @property
    def num_buttons(self) -> int:
        """Total number of buttons."""
        return self.rows * self.cols


_PROFILES: Final = MappingProxyType(
    {
        0x8840: DeviceProfile(
            name="CH57x 12 keys, 2 knobs",
            vendor_id=VENDOR_ID,
            product_id=0x8840,
            rows=3,
            cols=4,
            knobs=2,
            supports_delay=True,
            supports_led=True,
            led_modes=6,
            family=ProtocolFamily.K884X,
        ),
        0x8842: DeviceProfile(
            name="CH57x 6 keys, 1 knob",
            vendor_id=VENDOR_ID,
            product_id=0x8842,
            rows=2,
            cols=3,
            knobs=1,
            supports_delay=False,
            supports_led=False,
            led_modes=0,
            family=ProtocolFamily.K884X,
        ),
        0x8890: DeviceProfile(
            name="CH57x 4 keys",
            vendor_id=VENDOR_ID,
            product_id=0x8890,
            rows=1,
            cols=4,
            knobs=0,
            supports_delay=False,
            supports_led=True,
            led_modes=3,
            family=ProtocolFamily.K8890,
            supports_read=False,
            max_chords=5,
            steps_per_packet=1,
            programmable_layers=1,
        ),
    }
)


def lookup(product_id: int) -> DeviceProfile | None:
    """Return the profile for a product ID, or None if unknown."""
    return _PROFILES.get(product_id)


def get_profile(product_id: int) -> DeviceProfile:
    """Return the profile for a product ID.

    Raises:
        UnknownProductError: If the product ID is not in the registry.
    """
    profile = lookup(product_id)
    if profile is None:
        raise UnknownProductError(product_id)
    return profile


def known_profiles() -> tuple[DeviceProfile, ...]:
    """All registered profiles, ordered by product ID."""
    return tuple(_PROFILES[pid] for pid in sorted(_PROFILES))


def require_led(profile: DeviceProfile) -> None:
    """Ensure a profile accepts LED commands.

    Raises:
        UnsupportedFeatureError: If the model has no LED command support.
    """
    if not profile.supports_led:
        msg = (
            f"LED control is not supported on {profile.name} "
            f"(product ID 0x{profile.product_id:04X})"
        )
        raise UnsupportedFeatureError(msg)


def require_read(profile: DeviceProfile) -> None:
    """Ensure a profile answers device-type and read-back requests.

    Raises:
        UnsupportedFeatureError: If the model cannot report its mappings.
    """
    if not profile.supports_read:
        msg = (
            f"Reading the configuration is not supported on {profile.name} "
            f"(product ID 0x{profile.product_id:04X})"
        )
        raise UnsupportedFeatureError(msg)
