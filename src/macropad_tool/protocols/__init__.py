"""Wire protocols for CH57x macropads.

Two command sets exist:

- K884xProtocol: 0x8840/0x8842, one record per key with a commit packet
- K8890Protocol: 0x8890, framed sessions with one packet per chord

Usage:
    from macropad_tool.profiles import get_profile
    from macropad_tool.protocols import create_protocol

    protocol = create_protocol(get_profile(0x8842))
    packets = protocol.encode_action(1, 1, action)
"""

from macropad_tool.models import ProtocolFamily
from macropad_tool.profiles import DeviceProfile
from macropad_tool.protocols.base import Packet, WireProtocol
from macropad_tool.protocols.k884x import K884xProtocol
from macropad_tool.protocols.k8890 import K8890Protocol


def create_protocol(profile: DeviceProfile) -> WireProtocol:
    """Create the wire protocol for a device profile.

    Args:
        profile: Profile of the target device.

    Returns:
        A protocol bound to the profile.

    Raises:
        ValueError: If the profile names an unknown protocol family.
    """
    if profile.family == ProtocolFamily.K884X:
        return K884xProtocol(profile)
    if profile.family == ProtocolFamily.K8890:
        return K8890Protocol(profile)

    msg = f"Unknown protocol family: {profile.family}"
    raise ValueError(msg)


__all__ = [
    "K884xProtocol",
    "K8890Protocol",
    "Packet",
    "WireProtocol",
    "create_protocol",
]
