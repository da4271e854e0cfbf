"""Command-line entry point for the CHIP-8 interpreter."""

import argparse
import os
import sys

import jax

from chip8vm.constants import DEFAULT_FREQUENCY
from chip8vm.decode import disassemble_program
from chip8vm.emulator import load_rom
from chip8vm.errors import LoadError
from chip8vm.logging import set_log_level
from chip8vm.rendering import save_frame, save_video
from chip8vm.runner import run_headless
from chip8vm.state import create_state


def rom_file(path: str) -> str:
    """argparse type that only accepts existing files."""
    if not os.path.isfile(path):
        raise argparse.ArgumentTypeError(f"File does not exist: {path}")
    return path


def positive_frequency(value: str) -> float:
    """argparse type for a clock frequency in Hz; rejects zero and negatives."""
    frequency = float(value)
    if frequency <= 0:
        raise argparse.ArgumentTypeError(f"Frequency must be positive, got {value}")
    return frequency


def build_parser() -> argparse.ArgumentParser:
    """Build the parser for the ``chip8vm`` command."""
    parser = argparse.ArgumentParser(
        prog="chip8vm",
        description="Run a CHIP-8 ROM",
    )
    parser.add_argument("rom", type=rom_file, help="A CHIP-8 ROM to load into the interpreter")
    parser.add_argument(
        "freq",
        nargs="?",
        type=positive_frequency,
        default=DEFAULT_FREQUENCY,
        help=f"Frequency to run the interpreter at, in Hz (default: {DEFAULT_FREQUENCY})",
    )
    parser.add_argument(
        "--legacy-shift",
        action="store_true",
        help="Shift VY into VX for 8XY6/8XYE (original COSMAC VIP behaviour)",
    )
    parser.add_argument("--seed", type=int, default=0, help="Seed for the random instruction (default: 0)")
    parser.add_argument("--scale", type=int, default=10, help="Window pixel scale (default: 10)")
    parser.add_argument("--color-scheme", default="classic", help="Display colours (default: classic)")
    parser.add_argument("--headless", action="store_true", help="Run without a window")
    parser.add_argument(
        "--cycles",
        type=int,
        default=DEFAULT_FREQUENCY * 10,
        help="Instructions to execute in headless mode (default: 10 seconds worth at 700 Hz)",
    )
    parser.add_argument("--screenshot", help="Save the final headless frame to this image file")
    parser.add_argument("--video", help="Save every headless frame to this MP4 file")
    parser.add_argument("--disassemble", action="store_true", help="Print a listing of the ROM and exit")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Console log level (default: WARNING)",
    )
    return parser


def main(argv=None) -> int:
    """Run the CLI and return the process exit status.

    Exits with 1 when the ROM cannot be loaded or a headless run stops on a
    machine fault.
    """
    args = build_parser().parse_args(argv)
    logger = set_log_level(args.log_level)

    if args.disassemble:
        with open(args.rom, "rb") as f:
            print("\n".join(disassemble_program(f.read())))
        return 0

    if not args.headless:
        from chip8vm.host import run_emulator

        try:
            run_emulator(
                args.rom,
                frequency=args.freq,
                legacy_shift=args.legacy_shift,
                scale=args.scale,
                color_scheme=args.color_scheme,
                seed=args.seed,
            )
        except LoadError as e:
            logger.error(str(e))
            return 1
        return 0

    state = create_state(jax.random.PRNGKey(args.seed), frequency=args.freq, legacy_shift=args.legacy_shift)
    try:
        state = load_rom(state, args.rom)
    except LoadError as e:
        logger.error(str(e))
        return 1

    result = run_headless(state, args.cycles, record_frames=args.video is not None)
    logger.info(
        f"Executed {result.cycles} cycles, final PC 0x{int(result.state.pc):03X}, "
        f"buzzer active for {result.buzzer_cycles} cycles"
    )

    if args.screenshot:
        save_frame(result.state.display, args.screenshot, color_scheme=args.color_scheme)
        logger.info(f"Saved frame to {args.screenshot}")
    if args.video:
        written = save_video(result.frames, args.video, color_scheme=args.color_scheme)
        logger.info(f"Saved {written} frames to {args.video}")

    return 1 if result.fault is not None else 0


if __name__ == "__main__":
    sys.exit(main())
