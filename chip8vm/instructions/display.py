"""CHIP-8 display operations."""

import jax.numpy as jnp
from chip8vm.state import EmulatorState
from chip8vm.decode import DecodedInstruction
from chip8vm.constants import SCREEN_WIDTH, SCREEN_HEIGHT, MEMORY_SIZE, MAX_SPRITE_HEIGHT, FLAG_REGISTER

# Pre-computed coordinate grids for display operations
xx, yy = jnp.meshgrid(jnp.arange(SCREEN_WIDTH), jnp.arange(SCREEN_HEIGHT), indexing='ij')


def sprite_mask(state: EmulatorState, instruction: DecodedInstruction) -> jnp.ndarray:
    """Boolean (64, 32) mask of the cells a DXYN sprite would toggle.

    Sprite rows come from memory starting at I, one byte per row, MSB leftmost.
    Bits past the right or bottom screen edge are clipped, and rows past the
    end of memory are not read.
    """
    sprite_x = (state.V[instruction.x] % SCREEN_WIDTH).astype(jnp.int32)
    sprite_y = (state.V[instruction.y] % SCREEN_HEIGHT).astype(jnp.int32)
    height = min(instruction.n, MAX_SPRITE_HEIGHT)

    in_sprite = (xx >= sprite_x) & (xx < sprite_x + 8) & (yy >= sprite_y) & (yy < sprite_y + height)

    row_address = state.I.astype(jnp.int32) + (yy - sprite_y)
    in_memory = row_address < MEMORY_SIZE
    sprite_bytes = state.memory[jnp.clip(row_address, 0, MEMORY_SIZE - 1)].astype(jnp.int32)

    bit_shift = jnp.clip(7 - (xx - sprite_x), 0, 7)
    bits = (sprite_bytes >> bit_shift) & 1
    return (bits == 1) & in_sprite & in_memory


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - Draw sprite at (VX, VY) with height N, VF = collision."""
    sprite = sprite_mask(state, instruction)
    collision = jnp.any(state.display & sprite)

    return state.replace(
        display=state.display ^ sprite,
        V=state.V.at[FLAG_REGISTER].set(collision.astype(jnp.uint8))
    )
