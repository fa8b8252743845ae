"""Tests for CLI module."""

import argparse
from collections.abc import Callable
from pathlib import Path
from unittest.mock import patch

import pytest

from macropad_tool.cli import (
    cmd_led,
    cmd_program,
    cmd_read,
    cmd_validate,
    hex_or_decimal,
    main,
)
from macropad_tool.constants import VENDOR_ID
from macropad_tool.exceptions import (
    DeviceMismatchError,
    DeviceNotFoundError,
    DevicePermissionError,
    ProgrammingCancelledError,
    UnsupportedFeatureError,
)


@pytest.fixture
def config_file(tmp_path: Path, config_text: Callable[..., str]) -> Path:
    path = tmp_path / "pad.yaml"
    path.write_text(config_text(2, 3, 1), encoding="utf-8")
    return path


def program_args(config: Path) -> argparse.Namespace:
    return argparse.Namespace(
        config=config, product_id=0x8842, verify=True, vendor_id=VENDOR_ID
    )


class TestHexOrDecimal:
    """Tests for hex_or_decimal argument type."""

    def test_hex(self) -> None:
        """Hex values with a 0x prefix should parse."""
        assert hex_or_decimal("0x8842") == 0x8842

    def test_decimal(self) -> None:
        """Plain decimal values should parse."""
        assert hex_or_decimal("34882") == 0x8842

    def test_invalid(self) -> None:
        """Garbage should raise an argparse error."""
        with pytest.raises(argparse.ArgumentTypeError):
            hex_or_decimal("pad")


class TestCmdValidate:
    """Tests for cmd_validate command."""

    def test_valid(self, config_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """A valid file should report OK and return 0."""
        args = argparse.Namespace(config=config_file, product_id=0x8842)
        assert cmd_validate(args) == 0
        assert "OK (28 packets" in capsys.readouterr().out

    def test_wrong_model(
        self, config_file: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Validating for another model should list the errors."""
        args = argparse.Namespace(config=config_file, product_id=0x8840)
        assert cmd_validate(args) == 1
        assert "DeviceMismatch" in capsys.readouterr().err

    def test_unknown_product(self, config_file: Path) -> None:
        """Unknown product IDs should return 1."""
        args = argparse.Namespace(config=config_file, product_id=0x1234)
        assert cmd_validate(args) == 1

    def test_missing_file(self, tmp_path: Path) -> None:
        """A missing file should return 1."""
        args = argparse.Namespace(config=tmp_path / "nope.yaml", product_id=0x8842)
        assert cmd_validate(args) == 1


class TestCmdProgram:
    """Tests for cmd_program command."""

    def test_success(self, config_file: Path) -> None:
        """Should return 0 after programming."""
        args = program_args(config_file)
        with patch("macropad_tool.cli.program_macropad", return_value=28):
            assert cmd_program(args) == 0

    def test_not_found(
        self, config_file: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """A missing device should return 1 with a hint."""
        args = program_args(config_file)
        with patch(
            "macropad_tool.cli.program_macropad", side_effect=DeviceNotFoundError
        ):
            assert cmd_program(args) == 1
        assert "--product-id" in capsys.readouterr().err

    def test_permission(
        self, config_file: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """A permission failure should print the udev hint."""
        args = program_args(config_file)
        with patch(
            "macropad_tool.cli.program_macropad",
            side_effect=DevicePermissionError("denied"),
        ):
            assert cmd_program(args) == 1
        assert "udev" in capsys.readouterr().err

    def test_cancelled(self, config_file: Path) -> None:
        """An interrupted run should return 1."""
        args = program_args(config_file)
        with patch(
            "macropad_tool.cli.program_macropad",
            side_effect=ProgrammingCancelledError(3, 28),
        ):
            assert cmd_program(args) == 1

    def test_mismatch_suggests_no_verify(
        self, config_file: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """A geometry mismatch should point at --no-verify."""
        args = program_args(config_file)
        with patch(
            "macropad_tool.cli.program_macropad",
            side_effect=DeviceMismatchError("12 keys", 12, 2),
        ):
            assert cmd_program(args) == 1
        assert "--no-verify" in capsys.readouterr().err


class TestCmdLed:
    """Tests for cmd_led command."""

    def test_unsupported_model(self) -> None:
        """LED on the 6-key model should return 1."""
        args = argparse.Namespace(
            mode=1, layer=1, color="red", product_id=0x8842, vendor_id=VENDOR_ID
        )
        assert cmd_led(args) == 1

    def test_mode_out_of_range(self) -> None:
        """Invalid modes should return 1."""
        args = argparse.Namespace(
            mode=9, layer=1, color="red", product_id=0x8840, vendor_id=VENDOR_ID
        )
        assert cmd_led(args) == 1


class TestCmdRead:
    """Tests for cmd_read command."""

    def test_prints_yaml(self, capsys: pytest.CaptureFixture[str]) -> None:
        """The document should be printed as YAML."""
        args = argparse.Namespace(product_id=0x8842, layer=None, vendor_id=VENDOR_ID)
        document = {"orientation": "normal", "rows": 2, "cols": 3, "layers": []}
        with patch(
            "macropad_tool.cli.read_macropad", return_value=document
        ) as read_mock:
            assert cmd_read(args) == 0
        read_mock.assert_called_once_with(0x8842, None, VENDOR_ID)
        assert capsys.readouterr().out.startswith("orientation: normal\nrows: 2\n")

    def test_unsupported_model(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Models that cannot send back their mappings should return 1."""
        args = argparse.Namespace(product_id=0x8890, layer=None, vendor_id=VENDOR_ID)
        with patch(
            "macropad_tool.cli.read_macropad",
            side_effect=UnsupportedFeatureError("not supported"),
        ):
            assert cmd_read(args) == 1
        assert "not supported" in capsys.readouterr().err


class TestMain:
    """Tests for argument parsing."""

    def test_show_keys(self, capsys: pytest.CaptureFixture[str]) -> None:
        """show-keys should list names and return 0."""
        assert main(["show-keys"]) == 0
        assert "volumeup" in capsys.readouterr().out

    def test_validate_with_product_id(self, config_file: Path) -> None:
        """--product-id should accept hex."""
        assert main(["--product-id", "0x8842", "validate", str(config_file)]) == 0

    def test_version(self, capsys: pytest.CaptureFixture[str]) -> None:
        """--version should print the version and exit."""
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert "macropad" in capsys.readouterr().out

    def test_bad_color(self) -> None:
        """Unknown colors should be rejected by the parser."""
        with pytest.raises(SystemExit):
            main(["led", "1", "pink"])

    def test_read_layer(self) -> None:
        """read --layer should pass the layer through."""
        with patch("macropad_tool.cli.read_macropad", return_value={}) as read_mock:
            assert main(["--product-id", "0x8842", "read", "--layer", "2"]) == 0
        read_mock.assert_called_once_with(0x8842, 2, VENDOR_ID)

    def test_read_layer_out_of_range(self) -> None:
        """Layers beyond 3 should be rejected by the parser."""
        with pytest.raises(SystemExit):
            main(["read", "--layer", "4"])

    def test_no_verify(self, config_file: Path) -> None:
        """program --no-verify should skip the geometry check."""
        with patch("macropad_tool.cli.program_macropad", return_value=28) as prog:
            assert main(["program", "--no-verify", str(config_file)]) == 0
        assert prog.call_args.kwargs["verify"] is False

    def test_hidden_vendor_id(
        self, config_file: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """--vendor-id should be accepted but left out of the help."""
        with patch("macropad_tool.cli.program_macropad", return_value=28) as prog:
            assert main(["--vendor-id", "0x1a86", "program", str(config_file)]) == 0
        assert prog.call_args.kwargs == {"verify": True, "vendor_id": 0x1A86}

        with pytest.raises(SystemExit):
            main(["--help"])
        assert "--vendor-id" not in capsys.readouterr().out
