"""Main CHIP-8 emulator execution engine."""

from typing import Optional, Sequence, Union

import jax.numpy as jnp
from chip8vm.state import EmulatorState
from chip8vm.decode import DecodedInstruction, Op, decode
from chip8vm.constants import PROGRAM_START, MAX_PROGRAM_SIZE, ADDRESS_MASK, NUM_KEYS
from chip8vm.errors import LoadError, MachineFault
from chip8vm.logging import get_logger
from chip8vm.timers import tick_timers
from chip8vm.instructions.system import execute_system_instruction
from chip8vm.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset, execute_skip_if_key
)
from chip8vm.instructions.alu import execute_alu_operation
from chip8vm.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chip8vm.instructions.display import execute_display
from chip8vm.instructions.misc import execute_misc_instruction

logger = get_logger()

# Indexed by the instruction's first nibble
_FAMILY_HANDLERS = (
    execute_system_instruction,
    execute_jump,
    execute_call,
    execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate,
    execute_skip_if_equal_register,
    execute_set,
    execute_add,
    execute_alu_operation,
    execute_skip_if_not_equal_register,
    execute_set_index,
    execute_jump_with_offset,
    execute_random,
    execute_display,
    execute_skip_if_key,
    execute_misc_instruction,
)

# Instructions whose result the host has to redraw
FRAME_OPS = frozenset({Op.CLS, Op.DRW})


def execute(state: EmulatorState, instruction: Union[int, DecodedInstruction]) -> EmulatorState:
    """Execute single CHIP-8 instruction.

    Raises:
        DecodeError: if a raw instruction word is not recognised
        StackFault: on call stack overflow or underflow
    """
    if not isinstance(instruction, DecodedInstruction):
        instruction = decode(instruction)
    return _FAMILY_HANDLERS[instruction.family](state, instruction)


def _pack_u16(high: jnp.uint8, low: jnp.uint8) -> jnp.uint16:
    """Pack two bytes into uint16."""
    return (high.astype(jnp.uint16) << 8) | low.astype(jnp.uint16)


def fetch(state: EmulatorState) -> tuple[EmulatorState, jnp.uint16]:
    """Fetch next instruction from memory."""
    instruction = _pack_u16(state.memory[state.pc], state.memory[(state.pc + 1) & ADDRESS_MASK])
    return state.replace(pc=(state.pc + 2) & ADDRESS_MASK), instruction


def keypad_snapshot(keys: Sequence[bool]) -> jnp.ndarray:
    """Convert a host key snapshot into a keypad array."""
    keypad = jnp.asarray(keys, dtype=jnp.bool_)
    if keypad.shape != (NUM_KEYS,):
        raise ValueError(f"Expected {NUM_KEYS} key states, got shape {keypad.shape}")
    return keypad


def step(state: EmulatorState, keys: Sequence[bool]) -> tuple[EmulatorState, Optional[jnp.ndarray]]:
    """Run one fetch/decode/execute cycle with the given key snapshot.

    Args:
        state: Current machine state
        keys: 16 booleans, one per hex keypad key, held for this cycle only

    Returns:
        The next state, and the display if the instruction changed it (else None)

    Raises:
        MachineFault: decode or stack fault; the caller's ``state`` is untouched
    """
    state = state.replace(keypad=keypad_snapshot(keys))
    pc = int(state.pc)
    state, instruction = fetch(state)

    try:
        decoded = decode(instruction)
        state = tick_timers(state)
        if logger.is_enabled_for("DEBUG"):
            logger.debug(f"0x{pc:03X}: {decoded}")
        state = execute(state, decoded)
    except MachineFault as fault:
        if fault.pc is None:
            fault.pc = pc
        raise

    frame = state.display if decoded.op in FRAME_OPS else None
    return state, frame


def load_program(state: EmulatorState, program: bytes) -> EmulatorState:
    """Copy a raw program image into memory at 0x200 and reset the PC.

    Raises:
        LoadError: if the image does not fit between 0x200 and 0xFFF
    """
    if len(program) > MAX_PROGRAM_SIZE:
        raise LoadError(
            f"Program image is {len(program)} bytes; at most {MAX_PROGRAM_SIZE} bytes fit in memory"
        )
    program_array = jnp.array(list(program), dtype=jnp.uint8)
    new_memory = state.memory.at[PROGRAM_START:PROGRAM_START + len(program)].set(program_array)
    return state.replace(memory=new_memory, pc=jnp.asarray(PROGRAM_START, dtype=jnp.uint16))


def load_rom(state: EmulatorState, filename: str) -> EmulatorState:
    """Load ROM data into CHIP-8 memory starting at 0x200."""
    try:
        with open(filename, 'rb') as f:
            rom_data = f.read()
    except OSError as e:
        raise LoadError(f"Cannot read ROM '{filename}': {e}") from e
    logger.info(f"Loaded {len(rom_data)} bytes from {filename}")
    return load_program(state, rom_data)
