"""Tests for the headless runner."""

from chip8vm import load_program, StackFault
from chip8vm.runner import run_headless


def test_run_headless_counts_cycles(fresh_state):
    state = load_program(fresh_state, bytes([0x70, 0x01, 0x12, 0x00]))  # V0 += 1; JP 0x200

    result = run_headless(state, 20, show_progress=False)

    assert result.cycles == 20
    assert result.fault is None
    assert result.state.V[0] == 10


def test_run_headless_records_frames(fresh_state):
    # I = '0' glyph; draw; jump back
    state = load_program(fresh_state, bytes([0xA0, 0x50, 0xD0, 0x05, 0x12, 0x02]))

    result = run_headless(state, 7, record_frames=True, show_progress=False)

    assert len(result.frames) == 3
    assert result.frames[0].shape == (64, 32)


def test_run_headless_stops_on_fault(fresh_state):
    state = load_program(fresh_state, bytes([0x60, 0x05, 0x00, 0xEE]))

    result = run_headless(state, 10, show_progress=False)

    assert result.cycles == 1
    assert isinstance(result.fault, StackFault)
    assert result.state.V[0] == 5


def test_run_headless_counts_buzzer(fresh_state):
    # V0 = 3; ST = V0; loop
    state = load_program(fresh_state, bytes([0x60, 0x03, 0xF0, 0x18, 0x12, 0x04]))

    result = run_headless(state, 5, show_progress=False)

    assert result.buzzer_cycles == 4
