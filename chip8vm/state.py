"""CHIP-8 emulator state structures."""

import jax
import jax.numpy as jnp
from flax.struct import dataclass, PyTreeNode, field

from chip8vm.constants import (
    MEMORY_SIZE, PROGRAM_START, FONT_START, FONT_DATA, SCREEN_WIDTH, SCREEN_HEIGHT,
    STACK_SIZE, NUM_REGISTERS, NUM_KEYS, TIMER_PERIOD_NS, DEFAULT_FREQUENCY
)


@dataclass(frozen=True)
class StackState:
    """Stack state for subroutine calls.

    ``pointer`` is the current call depth, so it ranges over 0..STACK_SIZE.
    """
    data: jnp.ndarray = field(default_factory=lambda: jnp.zeros(STACK_SIZE, dtype=jnp.uint16))
    pointer: int = field(pytree_node=False, default=0)


class EmulatorState(PyTreeNode):
    """Main CHIP-8 emulator state."""
    rng: jax.random.PRNGKey
    memory: jnp.ndarray = field(default_factory=lambda: jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8))
    pc: jnp.ndarray = field(default_factory=lambda: jnp.asarray(PROGRAM_START, dtype=jnp.uint16))
    display: jnp.ndarray = field(default_factory=lambda: jnp.zeros((SCREEN_WIDTH, SCREEN_HEIGHT), dtype=jnp.bool_))
    stack: StackState = field(default_factory=StackState)
    delay_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    sound_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    keypad: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_KEYS, dtype=jnp.bool_))
    V: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_REGISTERS, dtype=jnp.uint8))
    I: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    ticker_ns: int = TIMER_PERIOD_NS
    clock_period_ns: int = field(pytree_node=False, default=round(1e9 / DEFAULT_FREQUENCY))
    legacy_shift: bool = field(pytree_node=False, default=False)


def create_state(
    rng: jax.random.PRNGKey = None,
    frequency: float = DEFAULT_FREQUENCY,
    legacy_shift: bool = False,
) -> EmulatorState:
    """Create initial emulator state with font data loaded.

    Args:
        rng: PRNG key used by the random instruction (default: PRNGKey(0))
        frequency: CPU clock frequency in Hz; fixes the per-instruction period
        legacy_shift: Shift VY into VX for 8XY6/8XYE instead of shifting VX in place

    Returns:
        Fresh state with PC at the program start and an empty stack
    """
    if frequency <= 0:
        raise ValueError(f"Clock frequency must be positive, got {frequency}")
    if rng is None:
        rng = jax.random.PRNGKey(0)

    state = EmulatorState(
        rng,
        clock_period_ns=round(1e9 / frequency),
        legacy_shift=legacy_shift,
    )
    return state.replace(memory=state.memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(FONT_DATA))


def clock_period(state: EmulatorState) -> float:
    """Duration of one instruction cycle in seconds."""
    return state.clock_period_ns / 1e9


def buzzer_active(state: EmulatorState) -> bool:
    """Whether the host should be making a sound."""
    return bool(state.sound_timer != 0)
