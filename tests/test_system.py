"""Tests for system instructions (0xxx) and the call stack."""

import jax.numpy as jnp
import pytest
from chip8vm import execute, StackFault, STACK_SIZE


def test_execute_clear_screen(fresh_state):
    """Test 00E0 - Clear display."""
    state = fresh_state.replace(display=fresh_state.display.at[0, 0].set(True))

    state = execute(state, 0x00E0)

    assert jnp.sum(state.display) == 0


def test_sys_call_is_ignored(fresh_state):
    """Test 0NNN - Legacy machine-code call is a no-op."""
    state = execute(fresh_state, 0x0123)

    assert state.pc == fresh_state.pc
    assert jnp.array_equal(state.V, fresh_state.V)
    assert state.stack.pointer == 0


def test_execute_call_and_return(fresh_state):
    """Test 2NNN (call) and 00EE (return) together."""
    state = fresh_state
    initial_pc = state.pc

    state = execute(state, 0x2300)  # Call 0x300
    assert state.pc == 0x300
    assert state.stack.pointer == 1
    assert state.stack.data[state.stack.pointer - 1] == initial_pc

    state = execute(state, 0x00EE)  # Return
    assert state.pc == initial_pc
    assert state.stack.pointer == 0


def test_nested_calls_return_in_order(fresh_state):
    """Returns unwind nested calls last-in first-out."""
    state = execute(fresh_state, 0x2300)  # from 0x200
    state = execute(state, 0x2400)  # from 0x300
    assert state.pc == 0x400

    state = execute(state, 0x00EE)
    assert state.pc == 0x300
    state = execute(state, 0x00EE)
    assert state.pc == 0x200


class TestStackBounds:
    """Test stack overflow and underflow faults."""

    def test_sixteen_nested_calls_succeed(self, fresh_state):
        state = fresh_state
        for _ in range(STACK_SIZE):
            state = execute(state, 0x2300)
        assert state.stack.pointer == STACK_SIZE

    def test_seventeenth_call_faults(self, fresh_state):
        state = fresh_state
        for _ in range(STACK_SIZE):
            state = execute(state, 0x2300)

        with pytest.raises(StackFault):
            execute(state, 0x2300)

    def test_return_with_empty_stack_faults(self, fresh_state):
        with pytest.raises(StackFault):
            execute(fresh_state, 0x00EE)

    def test_return_after_unwinding_faults(self, fresh_state):
        state = execute(fresh_state, 0x2300)
        state = execute(state, 0x00EE)

        with pytest.raises(StackFault):
            execute(state, 0x00EE)
