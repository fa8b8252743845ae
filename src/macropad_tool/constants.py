"""Constants for CH57x macropad communication."""

from typing import Final

# USB Vendor ID shared by every known CH57x macropad
VENDOR_ID: Final[int] = 0x1189

# Product IDs with a known command set
SUPPORTED_PIDS: Final[tuple[int, ...]] = (
    0x8840,  # 3x4 keys, 2 knobs
    0x8842,  # 2x3 keys, 1 knob
    0x8890,  # 1x4 keys, no knobs
)

DEFAULT_PRODUCT_ID: Final[int] = 0x8840

# Every known board exposes exactly three layers
NUM_LAYERS: Final[int] = 3

# Longest chord sequence a single key can hold
MAX_CHORDS: Final[int] = 17

# Longest delay between chords (milliseconds)
MAX_DELAY_MS: Final[int] = 6000

# HID report: 1 byte report ID + 64 bytes payload
REPORT_ID: Final[int] = 0x03
REPORT_SIZE: Final[int] = 65

# Device session pacing (seconds)
PACKET_INTERVAL: Final[float] = 0.02
MAX_WRITE_ATTEMPTS: Final[int] = 3
RETRY_DELAY: Final[float] = 0.05

# Vendor HID interface that accepts programming reports; keyboard-only
# interfaces are tried last
INTERFACE_ORDER: Final[tuple[int, ...]] = (1, 0, 2)

# Responses to read requests; a read that times out ends the response stream
READ_BUF_SIZE: Final[int] = 72
READ_TIMEOUT_MS: Final[int] = 100
