"""Command-line interface for CH57x macropad tools."""

import argparse
import logging
import sys
from pathlib import Path

from macropad_tool import __version__
from macropad_tool.compiler import compile_program, validate_only
from macropad_tool.config import load_config
from macropad_tool.constants import DEFAULT_PRODUCT_ID, NUM_LAYERS, VENDOR_ID
from macropad_tool.decoder import dump_document
from macropad_tool.exceptions import (
    ConfigValidationError,
    DeviceMismatchError,
    DeviceNotFoundError,
    DevicePermissionError,
    MacropadError,
    ProgrammingCancelledError,
)
from macropad_tool.keys import describe_supported_keys
from macropad_tool.models import LedColor
from macropad_tool.profiles import get_profile, known_profiles
from macropad_tool.program import program_macropad, read_macropad, set_led

logger = logging.getLogger(__name__)

PERMISSION_MSG = """\
The macropad was found but could not be opened.
On Linux, allow access with a udev rule, for example:
  SUBSYSTEMS=="usb", ATTRS{idVendor}=="1189", ATTRS{idProduct}=="8840", MODE="0666"
Save it in /etc/udev/rules.d/ and re-plug the device."""

MAIN_EPILOG = """\
examples:
  macropad validate config.yaml                  Check a configuration, no device needed
  macropad program config.yaml                   Program the default 0x8840 pad
  macropad --product-id 0x8842 program pad.yaml  Program a 6-key pad
  macropad led 1 red                             Steady red backlight on layer 1
  macropad read > backup.yaml                    Save what the pad currently stores
  macropad show-keys                             List every accepted key name

supported macropads (vendor 0x1189):
{profiles}

Use -h with any command for detailed help.
"""

VALIDATE_EPILOG = """\
examples:
  macropad validate config.yaml
  macropad -v validate config.yaml    Also dump the packets that would be sent

Every problem in the file is reported, not just the first.
"""

PROGRAM_EPILOG = """\
examples:
  macropad program config.yaml
  macropad --product-id 0x8890 program four-keys.yaml

action syntax:
  a, ctrl-c, shift-alt-f4       Single chords
  ctrl-a,ctrl-c                 Chained chords, typed in order
  click, ctrl-rclick, wheelup   Mouse actions
  volumeup, play, mute          Media keys

Press Ctrl+C to stop between packets; re-run to finish programming.
"""

LED_EPILOG = """\
examples:
  macropad led 0 red             Turn the backlight off
  macropad led 1 blue --layer 2  Steady blue on layer 2

modes (0x8840): 0 off, 1 steady, 2 on key press, 3-5 animated
modes (0x8890): 0 off, 1 steady, 2 on key press
"""

READ_EPILOG = """\
examples:
  macropad read > backup.yaml    Save every layer as a configuration file
  macropad read --layer 2        Show layer 2 only

Knob turns and presses are listed per knob. Unassigned keys are empty
strings; fill them in before passing the file to 'program'. Not
available on the 4-key 0x8890 model.
"""


def hex_or_decimal(value: str) -> int:
    """Parse an integer written as ``0x8840`` or ``34880``."""
    try:
        return int(value, 0)
    except ValueError as e:
        msg = f"invalid number: {value!r}"
        raise argparse.ArgumentTypeError(msg) from e


def _print_validation_errors(path: Path, error: ConfigValidationError) -> None:
    print(f"Error: {path}: {error}", file=sys.stderr)
    for item in error.errors:
        print(f"  {item}", file=sys.stderr)


def cmd_validate(args: argparse.Namespace) -> int:
    """Validate a configuration file without touching the device."""
    try:
        profile = get_profile(args.product_id)
        raw = load_config(args.config)
        errors = validate_only(raw, profile)
        if errors:
            _print_validation_errors(args.config, ConfigValidationError(errors))
            return 1

        packets = compile_program(raw, profile)
        for packet in packets:
            logger.debug("%s: %s", packet.label, packet.hex())
        print(f"{args.config}: OK ({len(packets)} packets for {profile.name})")
        return 0

    except MacropadError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_program(args: argparse.Namespace) -> int:
    """Program the macropad from a configuration file."""
    try:
        raw = load_config(args.config)
        count = program_macropad(
            raw, args.product_id, verify=args.verify, vendor_id=args.vendor_id
        )
        print(f"Programmed {count} packets")
        return 0

    except ConfigValidationError as e:
        _print_validation_errors(args.config, e)
        return 1
    except DeviceNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        print(
            f"Check the cable, or pass --product-id if this is not a "
            f"0x{args.product_id:04x} model.",
            file=sys.stderr,
        )
        return 1
    except DevicePermissionError as e:
        print(f"Error: {e}", file=sys.stderr)
        print(PERMISSION_MSG, file=sys.stderr)
        return 1
    except DeviceMismatchError as e:
        print(f"Error: {e}", file=sys.stderr)
        print(
            "Pass the matching --product-id, or --no-verify to program anyway.",
            file=sys.stderr,
        )
        return 1
    except ProgrammingCancelledError as e:
        print(f"Warning: {e}", file=sys.stderr)
        return 1
    except MacropadError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 0


def cmd_led(args: argparse.Namespace) -> int:
    """Set the LED mode and color."""
    try:
        set_led(
            args.mode,
            args.layer,
            LedColor(args.color),
            args.product_id,
            args.vendor_id,
        )
        print(f"LED set to mode {args.mode} ({args.color}) on layer {args.layer}")
        return 0

    except DevicePermissionError as e:
        print(f"Error: {e}", file=sys.stderr)
        print(PERMISSION_MSG, file=sys.stderr)
        return 1
    except (MacropadError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 0


def cmd_read(args: argparse.Namespace) -> int:
    """Print the mappings stored on the macropad as YAML."""
    try:
        document = read_macropad(args.product_id, args.layer, args.vendor_id)
        print(dump_document(document), end="")
        return 0

    except DevicePermissionError as e:
        print(f"Error: {e}", file=sys.stderr)
        print(PERMISSION_MSG, file=sys.stderr)
        return 1
    except DeviceMismatchError as e:
        print(f"Error: {e}", file=sys.stderr)
        print("Pass the matching --product-id.", file=sys.stderr)
        return 1
    except (MacropadError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 0


def cmd_show_keys(args: argparse.Namespace) -> int:
    """Print every name the action syntax accepts."""
    print("\n".join(describe_supported_keys()))
    return 0


def _profile_lines() -> str:
    return "\n".join(
        f"  0x{profile.product_id:04x}  {profile.name}" for profile in known_profiles()
    )


def main(argv: list[str] | None = None) -> int:
    """Main entry point with subcommands."""
    # Use RawDescriptionHelpFormatter to preserve epilog formatting
    parser = argparse.ArgumentParser(
        prog="macropad",
        description="Program CH57x USB macropads from a YAML key map.",
        epilog=MAIN_EPILOG.format(profiles=_profile_lines()),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "-p",
        "--product-id",
        type=hex_or_decimal,
        metavar="ID",
        default=DEFAULT_PRODUCT_ID,
        help=f"USB product ID of the macropad (default: 0x{DEFAULT_PRODUCT_ID:04x})",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="log every packet and device operation",
    )
    # For clones that report a different vendor ID
    parser.add_argument(
        "--vendor-id",
        type=hex_or_decimal,
        default=VENDOR_ID,
        help=argparse.SUPPRESS,
    )

    subparsers = parser.add_subparsers(
        dest="command",
        required=True,
        title="commands",
        metavar="<command>",
    )

    validate_parser = subparsers.add_parser(
        "validate",
        help="check a configuration file (no device needed)",
        description=(
            "Parse and validate a configuration file for the selected model\n"
            "and compile it, without opening the device."
        ),
        epilog=VALIDATE_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    validate_parser.add_argument(
        "config", type=Path, metavar="FILE", help="YAML configuration file"
    )
    validate_parser.set_defaults(func=cmd_validate)

    program_parser = subparsers.add_parser(
        "program",
        help="write a configuration to the macropad",
        description=(
            "Validate a configuration file, compile it, and write all three\n"
            "layers to the macropad."
        ),
        epilog=PROGRAM_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    program_parser.add_argument(
        "config", type=Path, metavar="FILE", help="YAML configuration file"
    )
    program_parser.add_argument(
        "--no-verify",
        dest="verify",
        action="store_false",
        help="do not check the key and knob counts the device reports",
    )
    program_parser.set_defaults(func=cmd_program)

    led_parser = subparsers.add_parser(
        "led",
        help="set the backlight mode and color",
        description="Set the LED mode and color of one layer.",
        epilog=LED_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    led_parser.add_argument("mode", type=int, metavar="MODE", help="LED mode number")
    led_parser.add_argument(
        "color",
        choices=[color.value for color in LedColor],
        metavar="COLOR",
        help=f"one of: {', '.join(color.value for color in LedColor)}",
    )
    led_parser.add_argument(
        "--layer",
        type=int,
        choices=range(1, NUM_LAYERS + 1),
        default=1,
        metavar="N",
        help=f"layer to change, 1-{NUM_LAYERS} (default: 1)",
    )
    led_parser.set_defaults(func=cmd_led)

    read_parser = subparsers.add_parser(
        "read",
        help="print the mappings stored on the macropad",
        description=(
            "Read the key mappings back from the macropad and print them\n"
            "as a YAML configuration."
        ),
        epilog=READ_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    read_parser.add_argument(
        "--layer",
        type=int,
        choices=range(1, NUM_LAYERS + 1),
        metavar="N",
        help=f"layer to read, 1-{NUM_LAYERS} (default: all)",
    )
    read_parser.set_defaults(func=cmd_read)

    keys_parser = subparsers.add_parser(
        "show-keys",
        help="list supported key, mouse and media names",
        description="List every name accepted in action strings.",
    )
    keys_parser.set_defaults(func=cmd_show_keys)

    args = parser.parse_args(argv)

    level = logging.DEBUG if args.verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")

    result: int = args.func(args)
    return result


if __name__ == "__main__":
    sys.exit(main())
