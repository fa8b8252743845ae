"""Tests for encoder and compiler modules."""

from collections.abc import Callable

import pytest

from macropad_tool.compiler import compile_led, compile_program, validate_only
from macropad_tool.config import RawConfig, loads_config
from macropad_tool.encoder import ProgramLayers, SetLed, encode, frame_led
from macropad_tool.exceptions import ConfigValidationError, UnsupportedFeatureError
from macropad_tool.models import LedColor, PhysicalLayout
from macropad_tool.orientation import physical_order
from macropad_tool.profiles import get_profile
from macropad_tool.validator import validate


class TestEncode:
    """Tests for encode function."""

    def test_program_six_keys(self, six_key_config: RawConfig) -> None:
        """Each of 9 positions on 3 layers is one packet, then a commit."""
        profile = get_profile(0x8842)
        layout = physical_order(validate(six_key_config, profile).config)
        packets = encode(layout, profile, ProgramLayers())

        assert len(packets) == 3 * 9 + 1
        assert all(len(p.data) == 65 for p in packets)
        assert packets[-1].hex() == "03 fd fe ff"

        positions = [(p.layer, p.position) for p in packets[:9]]
        assert positions == [
            (1, 1), (1, 2), (1, 3), (1, 4), (1, 5), (1, 6),
            (1, 0x10), (1, 0x11), (1, 0x12),
        ]  # fmt: skip

    def test_knob_order(self, six_key_config: RawConfig) -> None:
        """Knob actions go cw, press, ccw at consecutive positions."""
        profile = get_profile(0x8842)
        layout = physical_order(validate(six_key_config, profile).config)
        packets = encode(layout, profile, ProgramLayers())

        cw, press, ccw = packets[6:9]
        assert cw.data[11] == 0xE9  # volumeup
        assert press.data[11] == 0xE2  # mute
        assert ccw.data[11] == 0xEA  # volumedown

    def test_deterministic(self, six_key_config: RawConfig) -> None:
        """Encoding twice should produce identical bytes."""
        profile = get_profile(0x8842)
        first = [p.data for p in compile_program(six_key_config, profile)]
        second = [p.data for p in compile_program(six_key_config, profile)]
        assert first == second

    def test_8890_programs_first_layer_only(self, four_key_config: RawConfig) -> None:
        """The four-key model stores a single layer inside begin/end framing."""
        packets = compile_program(four_key_config, get_profile(0x8890))
        hexes = [p.hex() for p in packets]
        assert hexes == [
            "03 a1 01",
            "03 01 11 01 00 01",
            "03 01 11 01 01 01 04",
            "03 02 11 01 00 01",
            "03 02 11 01 01 00 04",
            "03 03 13 01 01",
            "03 04 11 01 00 01",
            "03 04 11 01 01 e9",
            "03 aa aa",
        ]
        assert {p.layer for p in packets if p.position} == {1}

    def test_led_command(self) -> None:
        """SetLed should encode a single packet."""
        (packet,) = encode(
            PhysicalLayout(), get_profile(0x8840), SetLed(3, 1, LedColor.PURPLE)
        )
        assert packet.data[12] == 0x73


class TestEndToEnd:
    """End-to-end compilation of a 2x3, 1-knob configuration."""

    def test_key_sequence(self, six_key_config: RawConfig) -> None:
        """Layer 1 [0][0] compiles to ctrl+A then ctrl+S with no delay."""
        packets = compile_program(six_key_config, get_profile(0x8842))
        first = packets[0]
        assert (first.layer, first.position) == (1, 1)
        assert list(first.data[:15]) == [
            0x03, 0xFD, 0x01, 0x01, 0x01, 0x00, 0x00, 0x00, 0x00,
            0x00, 0x02, 0x01, 0x04, 0x01, 0x16,
        ]  # fmt: skip

    def test_mouse_click(self, six_key_config: RawConfig) -> None:
        """Layer 2 [0][0] compiles to a plain left click."""
        packets = compile_program(six_key_config, get_profile(0x8842))
        click = next(p for p in packets if (p.layer, p.position) == (2, 1))
        assert list(click.data[4:13]) == [0x03, 0, 0, 0, 0, 0, 0x01, 0x00, 0x01]

    def test_rotated_layout(self, config_text: Callable[..., str]) -> None:
        """Orientation changes which action lands on which position."""
        text = config_text(2, 3, 1, orientation="clockwise")
        text = text.replace('["a", "a"]', '["b", "c"]', 1)
        packets = compile_program(loads_config(text), get_profile(0x8842))
        codes = [p.data[12] for p in packets[:6]]
        # Authored [0][0]=b and [0][1]=c end up at the ends of the two rows
        assert codes == [0x04, 0x04, 0x05, 0x04, 0x04, 0x06]

    def test_led_unsupported(self) -> None:
        """LED commands fail on the 6-key model before any I/O."""
        with pytest.raises(UnsupportedFeatureError):
            compile_led(1, 1, LedColor.RED, get_profile(0x8842))

    def test_invalid_config_raises(self, config_text: Callable[..., str]) -> None:
        """Compilation stops on validation errors."""
        raw = loads_config(config_text(2, 3, 1, cell="nope"))
        with pytest.raises(ConfigValidationError):
            compile_program(raw, get_profile(0x8842))
        assert len(validate_only(raw, get_profile(0x8842))) == 27


class TestCompileLed:
    """Tests for compile_led and LED framing."""

    def test_packet(self) -> None:
        """compile_led returns the bare LED packet."""
        packet = compile_led(2, 3, LedColor.CYAN, get_profile(0x8840))
        assert packet.hex() == "03 fe b0 03 08 00 00 00 00 00 01 00 52"

    @pytest.mark.parametrize(("mode", "layer"), [(6, 1), (-1, 1), (1, 0), (1, 4)])
    def test_out_of_range(self, mode: int, layer: int) -> None:
        """Modes and layers outside the model's range are rejected."""
        with pytest.raises(ValueError):
            compile_led(mode, layer, LedColor.RED, get_profile(0x8840))

    def test_8890_has_three_modes(self) -> None:
        """The four-key model only knows modes 0-2."""
        with pytest.raises(ValueError):
            compile_led(3, 1, LedColor.RED, get_profile(0x8890))

    def test_frame_led(self) -> None:
        """frame_led wraps the packet for the model's session."""
        profile = get_profile(0x8890)
        framed = frame_led(compile_led(1, 1, LedColor.RED, profile), profile)
        assert [p.hex() for p in framed] == ["03 a1 01", "03 b0 18 01", "03 aa a1"]
