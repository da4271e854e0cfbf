"""Headless CHIP-8 runner for batch execution, tracing and screenshots."""

import dataclasses
from typing import List, Optional, Sequence

import jax.numpy as jnp
from tqdm import tqdm

from chip8vm.constants import NUM_KEYS
from chip8vm.emulator import step
from chip8vm.errors import MachineFault
from chip8vm.logging import get_logger
from chip8vm.state import EmulatorState, buzzer_active

logger = get_logger()

NO_KEYS = (False,) * NUM_KEYS


@dataclasses.dataclass
class HeadlessResult:
    """Outcome of a headless run.

    Attributes:
        state: Last good machine state
        cycles: Number of instructions that completed
        frames: Emitted display frames, if recording was requested
        buzzer_cycles: Number of completed cycles with the buzzer active
        fault: The fault that stopped the run early, if any
    """
    state: EmulatorState
    cycles: int = 0
    frames: List[jnp.ndarray] = dataclasses.field(default_factory=list)
    buzzer_cycles: int = 0
    fault: Optional[MachineFault] = None


def run_headless(
    state: EmulatorState,
    num_cycles: int,
    keys: Sequence[bool] = NO_KEYS,
    record_frames: bool = False,
    show_progress: bool = True,
) -> HeadlessResult:
    """Execute up to ``num_cycles`` instructions with a fixed key snapshot.

    A machine fault stops the run; it is logged and returned rather than raised.
    """
    result = HeadlessResult(state=state)

    for _ in tqdm(range(num_cycles), desc="Executing", unit="step", disable=not show_progress):
        try:
            next_state, frame = step(result.state, keys)
        except MachineFault as fault:
            logger.error(f"Execution halted after {result.cycles} cycles: {fault}")
            result.fault = fault
            break

        result.state = next_state
        result.cycles += 1
        if buzzer_active(next_state):
            result.buzzer_cycles += 1
        if record_frames and frame is not None:
            result.frames.append(frame)

    return result
