"""Tests for config module."""

from pathlib import Path

import pytest

from macropad_tool.config import (
    ActionSpec,
    RawConfig,
    load_config,
    loads_config,
    parse_config,
    parse_orientation,
)
from macropad_tool.exceptions import ConfigFileError
from macropad_tool.models import Orientation


class TestLoadConfig:
    """Tests for loading configuration documents."""

    def test_device_section(self, six_key_config: RawConfig) -> None:
        """Device keys at the top level should be read."""
        device = six_key_config.device
        assert device.orientation is Orientation.NORMAL
        assert (device.rows, device.cols, device.knobs) == (2, 3, 1)

    def test_layers(self, six_key_config: RawConfig) -> None:
        """Layers, buttons and knobs should be kept as authored."""
        assert len(six_key_config.layers) == 3
        layer = six_key_config.layers[0]
        assert layer.buttons[0][0] == ActionSpec("ctrl-a,ctrl-s")
        assert layer.knobs[0].ccw == ActionSpec("volumedown")
        assert layer.knobs[0].press == ActionSpec("mute")
        assert layer.knobs[0].cw == ActionSpec("volumeup")

    def test_nested_device_section(self) -> None:
        """Device keys may be nested under 'device'."""
        raw = loads_config(
            "device: {orientation: clockwise, rows: 1, cols: 4}\nlayers: []\n"
        )
        assert raw.device.orientation is Orientation.CLOCKWISE
        assert raw.device.knobs == 0

    def test_cell_with_delay(self) -> None:
        """A mapping cell should carry keys and delay."""
        raw = loads_config(
            "rows: 1\ncols: 1\nlayers:\n"
            "  - buttons: [[{keys: 'ctrl-c,ctrl-v', delay: 100}]]\n"
        )
        assert raw.layers[0].buttons[0][0] == ActionSpec("ctrl-c,ctrl-v", 100)

    def test_numeric_cell(self) -> None:
        """Unquoted digits should be read as key names."""
        raw = loads_config("rows: 1\ncols: 2\nlayers:\n  - buttons: [[1, 2]]\n")
        assert raw.layers[0].buttons[0] == (ActionSpec("1"), ActionSpec("2"))

    def test_knob_click_alias(self) -> None:
        """'click' should be accepted in place of 'press'."""
        raw = parse_config(
            {
                "rows": 1,
                "cols": 1,
                "knobs": 1,
                "layers": [
                    {"buttons": [["a"]], "knobs": [{"ccw": "a", "click": "b", "cw": "c"}]}
                ],
            }
        )
        assert raw.layers[0].knobs[0].press == ActionSpec("b")

    def test_load_from_file(self, tmp_path: Path) -> None:
        """load_config should read a YAML file."""
        path = tmp_path / "pad.yaml"
        path.write_text("rows: 1\ncols: 1\nlayers: []\n", encoding="utf-8")
        assert load_config(path).device.rows == 1

    def test_missing_file(self, tmp_path: Path) -> None:
        """A missing file should raise ConfigFileError."""
        with pytest.raises(ConfigFileError):
            load_config(tmp_path / "missing.yaml")


class TestMalformedDocuments:
    """Tests for structural errors."""

    @pytest.mark.parametrize(
        "text",
        [
            "[1, 2, 3]\n",
            "rows: 1\ncols: 1\n",
            "rows: two\ncols: 1\nlayers: []\n",
            "rows: -1\ncols: 1\nlayers: []\n",
            "rows: true\ncols: 1\nlayers: []\n",
            "rows: 1\ncols: 1\nlayers: [5]\n",
            "rows: 1\ncols: 1\nlayers:\n  - buttons: ['a']\n",
            "rows: 1\ncols: 1\nlayers:\n  - buttons: [[[a]]]\n",
            "rows: 1\ncols: 1\nknobs: 1\nlayers:\n  - {buttons: [[a]], knobs: [{ccw: a}]}\n",
            "rows: 1\ncols: 1\nlayers:\n  - buttons: [[{keys: a, delay: soon}]]\n",
            "rows: 1\ncols: 1\norientation: sideways\nlayers: []\n",
            "rows: [1\n",
        ],
    )
    def test_rejected(self, text: str) -> None:
        """Malformed documents should raise ConfigFileError."""
        with pytest.raises(ConfigFileError):
            loads_config(text)


class TestParseOrientation:
    """Tests for parse_orientation function."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("normal", Orientation.NORMAL),
            ("UpsideDown", Orientation.UPSIDE_DOWN),
            ("upside_down", Orientation.UPSIDE_DOWN),
            ("clockwise", Orientation.CLOCKWISE),
            ("counter-clockwise", Orientation.COUNTER_CLOCKWISE),
        ],
    )
    def test_spellings(self, value: str, expected: Orientation) -> None:
        """Case and separators should not matter."""
        assert parse_orientation(value) is expected

    def test_not_a_string(self) -> None:
        """Non-string orientations should be rejected."""
        with pytest.raises(ConfigFileError):
            parse_orientation(90)
