"""CHIP-8 machine faults."""

from typing import Optional


class MachineFault(Exception):
    """Fault raised while executing a single cycle."""

    def __init__(self, message: str, pc: Optional[int] = None):
        super().__init__(message)
        self.pc = pc

    def __str__(self):
        message = super().__str__()
        if self.pc is None:
            return message
        return f"{message} (pc=0x{self.pc:03X})"


class DecodeError(MachineFault):
    """Opcode does not match any instruction."""

    def __init__(self, opcode: int, pc: Optional[int] = None):
        super().__init__(f"Unsupported instruction: 0x{opcode:04X}", pc)
        self.opcode = opcode


class StackFault(MachineFault):
    """Call stack overflow or underflow."""


class LoadError(Exception):
    """Program image cannot be loaded into memory."""
