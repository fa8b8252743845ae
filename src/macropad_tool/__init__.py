"""macropad-tool - Program CH57x USB macropads from a YAML key map.

This package compiles a key-mapping configuration (buttons, knobs and
three layers) into the vendor command packets understood by cheap CH57x
macropads, and writes them over USB HID.

Example:
    from macropad_tool import compile_program, get_profile, load_config

    profile = get_profile(0x8842)
    packets = compile_program(load_config(path), profile)
"""

from macropad_tool.compiler import compile_led, compile_program, validate_only
from macropad_tool.config import load_config, loads_config
from macropad_tool.constants import SUPPORTED_PIDS, VENDOR_ID
from macropad_tool.device import MacropadDevice, find_device_info, open_device
from macropad_tool.exceptions import (
    ConfigFileError,
    ConfigValidationError,
    DeviceCommunicationError,
    DeviceMismatchError,
    DeviceNotFoundError,
    DevicePermissionError,
    GrammarError,
    MacropadError,
    ProfileError,
    ProgrammingCancelledError,
    TransportError,
    UnexpectedResponseError,
    UnsupportedFeatureError,
    ValidationError,
)
from macropad_tool.grammar import parse_action
from macropad_tool.profiles import DeviceProfile, get_profile, lookup
from macropad_tool.program import program_macropad, read_macropad, set_led

__version__ = "1.0.0"

__all__ = [
    "SUPPORTED_PIDS",
    "VENDOR_ID",
    "ConfigFileError",
    "ConfigValidationError",
    "DeviceCommunicationError",
    "DeviceMismatchError",
    "DeviceNotFoundError",
    "DevicePermissionError",
    "DeviceProfile",
    "GrammarError",
    "MacropadDevice",
    "MacropadError",
    "ProfileError",
    "ProgrammingCancelledError",
    "TransportError",
    "UnexpectedResponseError",
    "UnsupportedFeatureError",
    "ValidationError",
    "__version__",
    "compile_led",
    "compile_program",
    "find_device_info",
    "get_profile",
    "load_config",
    "loads_config",
    "lookup",
    "open_device",
    "parse_action",
    "program_macropad",
    "read_macropad",
    "set_led",
    "validate_only",
]
