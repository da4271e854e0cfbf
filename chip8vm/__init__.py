"""CHIP-8 virtual machine package."""

from chip8vm.state import EmulatorState, StackState, create_state, clock_period, buzzer_active
from chip8vm.emulator import execute, fetch, step, load_program, load_rom
from chip8vm.decode import DecodedInstruction, Op, decode, disassemble, disassemble_program
from chip8vm.errors import MachineFault, DecodeError, StackFault, LoadError
from chip8vm.timers import tick_timers
from chip8vm.constants import *

__all__ = [
    "EmulatorState",
    "StackState",
    "create_state",
    "clock_period",
    "buzzer_active",
    "fetch",
    "execute",
    "step",
    "load_program",
    "load_rom",
    "tick_timers",
    "DecodedInstruction",
    "Op",
    "decode",
    "disassemble",
    "disassemble_program",
    "MachineFault",
    "DecodeError",
    "StackFault",
    "LoadError",
    "PROGRAM_START",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
]
