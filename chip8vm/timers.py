"""CHIP-8 delay and sound timer accounting.

Instructions run at the configured clock rate while both timers decay at a
fixed 60 Hz. Each cycle consumes one clock period of simulated time from the
ticker; once the ticker is exhausted the timers decrement and the ticker is
refilled with exactly one timer period.
"""

import jax.numpy as jnp
from chip8vm.constants import TIMER_PERIOD_NS
from chip8vm.state import EmulatorState


def _decrement(timer: jnp.ndarray) -> jnp.ndarray:
    """Saturating decrement of an 8-bit timer."""
    return jnp.where(timer > 0, timer - 1, timer).astype(jnp.uint8)


def tick_timers(state: EmulatorState) -> EmulatorState:
    """Advance simulated time by one clock period."""
    ticker = max(0, int(state.ticker_ns) - state.clock_period_ns)
    if ticker > 0:
        return state.replace(ticker_ns=ticker)

    return state.replace(
        delay_timer=_decrement(state.delay_timer),
        sound_timer=_decrement(state.sound_timer),
        ticker_ns=TIMER_PERIOD_NS,
    )
