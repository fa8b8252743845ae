"""Pytest configuration and fixtures."""

from collections.abc import Callable
from unittest.mock import MagicMock, patch

import pytest

from macropad_tool.config import RawConfig, loads_config

SIX_KEY_CONFIG = """\
orientation: normal
rows: 2
cols: 3
knobs: 1
layers:
  - buttons:
      - ["ctrl-a,ctrl-s", "b", "c"]
      - ["d", "e", "f"]
    knobs:
      - {ccw: volumedown, press: mute, cw: volumeup}
  - buttons:
      - ["click", "rclick", "mclick"]
      - ["wheelup", "wheeldown", "ctrl-wheelup"]
    knobs:
      - {ccw: wheeldown, press: click, cw: wheelup}
  - buttons:
      - ["play", "next", "previous"]
      - ["shift-p", "win-enter", "<110>"]
    knobs:
      - {ccw: left, press: enter, cw: right}
"""

FOUR_KEY_CONFIG = """\
rows: 1
cols: 4
layers:
  - buttons:
      - ["ctrl-a", "a", "click", "volumeup"]
  - buttons:
      - ["b", "b", "b", "b"]
  - buttons:
      - ["c", "c", "c", "c"]
"""


def grid_config(
    rows: int,
    cols: int,
    knobs: int = 0,
    orientation: str = "normal",
    cell: str = "a",
) -> str:
    """Build a YAML document where every button and knob is *cell*."""
    authored_rows, authored_cols = rows, cols
    if orientation in ("clockwise", "counterclockwise"):
        authored_rows, authored_cols = cols, rows
    row = "[" + ", ".join([f'"{cell}"'] * authored_cols) + "]"
    lines = [
        f"orientation: {orientation}",
        f"rows: {rows}",
        f"cols: {cols}",
        f"knobs: {knobs}",
        "layers:",
    ]
    for _ in range(3):
        lines.append("  - buttons:")
        lines += [f"      - {row}"] * authored_rows
        lines.append("    knobs:")
        lines += [f"      - {{ccw: {cell}, press: {cell}, cw: {cell}}}"] * knobs
    return "\n".join(lines) + "\n"


@pytest.fixture
def six_key_config() -> RawConfig:
    """A complete configuration for the 2x3, 1-knob model."""
    return loads_config(SIX_KEY_CONFIG)


@pytest.fixture
def four_key_config() -> RawConfig:
    """A complete configuration for the 1x4 model."""
    return loads_config(FOUR_KEY_CONFIG)


@pytest.fixture
def mock_device_info() -> dict:
    """Create mock device info dictionary (hidapi format)."""
    return {
        "product_id": 0x8842,
        "interface_number": 1,
        "path": b"1-2:1.1",
        "product_string": "CH57x",
    }


@pytest.fixture
def mock_hid_device() -> MagicMock:
    """Create a mock hid.device object."""
    device = MagicMock()
    device.open_path = MagicMock()
    device.close = MagicMock()
    device.write = MagicMock(return_value=65)  # Bytes written
    device.read = MagicMock(return_value=[])  # Read timed out
    return device


@pytest.fixture
def no_sleep():
    """Skip the pause between write retries."""
    with patch("macropad_tool.device.time.sleep") as sleep:
        yield sleep


@pytest.fixture
def no_pause():
    """Skip the pause after each packet of a run."""
    with patch("macropad_tool._signal.PacketRun.pause") as pause:
        yield pause


@pytest.fixture
def config_text() -> Callable[..., str]:
    """Builder for uniform YAML configurations; see grid_config."""
    return grid_config
