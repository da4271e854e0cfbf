"""CHIP-8 ALU operations (8xxx)."""

from typing import Optional

import jax.numpy as jnp
from chip8vm.state import EmulatorState
from chip8vm.decode import DecodedInstruction, Op
from chip8vm.constants import FLAG_REGISTER
from chip8vm.logging import get_logger

logger = get_logger()

AluResult = tuple[jnp.ndarray, Optional[jnp.ndarray]]


def alu_set(vx: jnp.ndarray, vy: jnp.ndarray) -> AluResult:
    """8XY0 - Set: VX = VY."""
    return vy, None


def alu_or(vx: jnp.ndarray, vy: jnp.ndarray) -> AluResult:
    """8XY1 - Binary OR: VX |= VY."""
    return vx | vy, None


def alu_and(vx: jnp.ndarray, vy: jnp.ndarray) -> AluResult:
    """8XY2 - Binary AND: VX &= VY."""
    return vx & vy, None


def alu_xor(vx: jnp.ndarray, vy: jnp.ndarray) -> AluResult:
    """8XY3 - Logical XOR: VX ^= VY."""
    return vx ^ vy, None


def alu_add(vx: jnp.ndarray, vy: jnp.ndarray) -> AluResult:
    """8XY4 - Add: VX += VY, set carry flag."""
    result = vx.astype(jnp.int32) + vy.astype(jnp.int32)
    carry = (result > 255).astype(jnp.uint8)
    return (result & 0xFF).astype(jnp.uint8), carry


def alu_sub_xy(vx: jnp.ndarray, vy: jnp.ndarray) -> AluResult:
    """8XY5 - Subtract: VX -= VY, set no-borrow flag."""
    borrow_flag = (vx >= vy).astype(jnp.uint8)
    result = (vx - vy) & 0xFF
    return result, borrow_flag


def alu_shift_right(vx: jnp.ndarray, vy: jnp.ndarray) -> AluResult:
    """8XY6 - Shift right: VX >>= 1."""
    shifted_bit = vx & 1
    result = vx >> 1
    return result, shifted_bit


def alu_sub_yx(vx: jnp.ndarray, vy: jnp.ndarray) -> AluResult:
    """8XY7 - Subtract: VX = VY - VX, set no-borrow flag."""
    borrow_flag = (vy >= vx).astype(jnp.uint8)
    result = (vy - vx) & 0xFF
    return result, borrow_flag


def alu_shift_left(vx: jnp.ndarray, vy: jnp.ndarray) -> AluResult:
    """8XYE - Shift left: VX <<= 1."""
    shifted_bit = (vx & 0x80) >> 7
    result = (vx << 1) & 0xFF
    return result, shifted_bit


_ALU_FUNCTIONS = {
    Op.LD_REG: alu_set,
    Op.OR: alu_or,
    Op.AND: alu_and,
    Op.XOR: alu_xor,
    Op.ADD_REG: alu_add,
    Op.SUB: alu_sub_xy,
    Op.SHR: alu_shift_right,
    Op.SUBN: alu_sub_yx,
    Op.SHL: alu_shift_left,
}

_SHIFT_OPS = (Op.SHR, Op.SHL)


def execute_alu_operation(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """8XYN - ALU operations dispatcher.

    Arithmetic operations write VF after the result, so the flag wins when VF
    is also the destination. Shifts write VF first and then shift the source
    register as it stands, so 8FF6/8FFE shift the freshly written flag.
    """
    source = instruction.x
    if instruction.op in _SHIFT_OPS:
        if state.legacy_shift:
            source = instruction.y
        elif logger.is_enabled_for("DEBUG"):
            logger.debug(f"Shift ignores V{instruction.y:X} operand")

        _, vf = _ALU_FUNCTIONS[instruction.op](state.V[source], state.V[instruction.y])
        new_V = state.V.at[FLAG_REGISTER].set(vf.astype(jnp.uint8))
        result, _ = _ALU_FUNCTIONS[instruction.op](new_V[source], new_V[instruction.y])
        return state.replace(V=new_V.at[instruction.x].set(result.astype(jnp.uint8)))

    result, vf = _ALU_FUNCTIONS[instruction.op](state.V[instruction.x], state.V[instruction.y])

    new_V = state.V.at[instruction.x].set(result.astype(jnp.uint8))
    if vf is not None:
        new_V = new_V.at[FLAG_REGISTER].set(vf.astype(jnp.uint8))
    return state.replace(V=new_V)
