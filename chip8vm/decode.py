"""CHIP-8 instruction decoding."""

from enum import IntEnum
from typing import Optional

from chex import dataclass

from chip8vm.errors import DecodeError


class Op(IntEnum):
    """Instruction tag produced by the decoder."""
    NOP = 0
    CLS = 1
    RET = 2
    JP = 3
    CALL = 4
    SE_BYTE = 5
    SNE_BYTE = 6
    SE_REG = 7
    LD_BYTE = 8
    ADD_BYTE = 9
    LD_REG = 10
    OR = 11
    AND = 12
    XOR = 13
    ADD_REG = 14
    SUB = 15
    SHR = 16
    SUBN = 17
    SHL = 18
    SNE_REG = 19
    LD_I = 20
    JP_V0 = 21
    RND = 22
    DRW = 23
    SKP = 24
    SKNP = 25
    LD_VX_DT = 26
    LD_KEY = 27
    LD_DT = 28
    LD_ST = 29
    ADD_I = 30
    LD_FONT = 31
    BCD = 32
    STORE = 33
    LOAD = 34


@dataclass(frozen=True)
class DecodedInstruction:
    """Decoded CHIP-8 instruction with extracted operands."""
    raw: int
    op: Op
    family: int  # First nibble
    x: int       # Second nibble (VX register)
    y: int       # Third nibble (VY register)
    n: int       # Fourth nibble (4-bit immediate)
    nn: int      # Last byte (8-bit immediate)
    nnn: int     # Last 12 bits (12-bit address)

    def __str__(self):
        return disassemble(self)


# Families whose operands never constrain the pattern
_FAMILY_OPS = {
    0x1: Op.JP,
    0x2: Op.CALL,
    0x3: Op.SE_BYTE,
    0x4: Op.SNE_BYTE,
    0x6: Op.LD_BYTE,
    0x7: Op.ADD_BYTE,
    0xA: Op.LD_I,
    0xB: Op.JP_V0,
    0xC: Op.RND,
    0xD: Op.DRW,
}

_ALU_OPS = {
    0x0: Op.LD_REG,
    0x1: Op.OR,
    0x2: Op.AND,
    0x3: Op.XOR,
    0x4: Op.ADD_REG,
    0x5: Op.SUB,
    0x6: Op.SHR,
    0x7: Op.SUBN,
    0xE: Op.SHL,
}

_KEY_OPS = {
    0x9E: Op.SKP,
    0xA1: Op.SKNP,
}

_MISC_OPS = {
    0x07: Op.LD_VX_DT,
    0x0A: Op.LD_KEY,
    0x15: Op.LD_DT,
    0x18: Op.LD_ST,
    0x1E: Op.ADD_I,
    0x29: Op.LD_FONT,
    0x33: Op.BCD,
    0x55: Op.STORE,
    0x65: Op.LOAD,
}

_MNEMONICS = {
    Op.NOP: "SYS 0x{nnn:03X}",
    Op.CLS: "CLS",
    Op.RET: "RET",
    Op.JP: "JP 0x{nnn:03X}",
    Op.CALL: "CALL 0x{nnn:03X}",
    Op.SE_BYTE: "SE V{x:X}, 0x{nn:02X}",
    Op.SNE_BYTE: "SNE V{x:X}, 0x{nn:02X}",
    Op.SE_REG: "SE V{x:X}, V{y:X}",
    Op.LD_BYTE: "LD V{x:X}, 0x{nn:02X}",
    Op.ADD_BYTE: "ADD V{x:X}, 0x{nn:02X}",
    Op.LD_REG: "LD V{x:X}, V{y:X}",
    Op.OR: "OR V{x:X}, V{y:X}",
    Op.AND: "AND V{x:X}, V{y:X}",
    Op.XOR: "XOR V{x:X}, V{y:X}",
    Op.ADD_REG: "ADD V{x:X}, V{y:X}",
    Op.SUB: "SUB V{x:X}, V{y:X}",
    Op.SHR: "SHR V{x:X}, V{y:X}",
    Op.SUBN: "SUBN V{x:X}, V{y:X}",
    Op.SHL: "SHL V{x:X}, V{y:X}",
    Op.SNE_REG: "SNE V{x:X}, V{y:X}",
    Op.LD_I: "LD I, 0x{nnn:03X}",
    Op.JP_V0: "JP V0, 0x{nnn:03X}",
    Op.RND: "RND V{x:X}, 0x{nn:02X}",
    Op.DRW: "DRW V{x:X}, V{y:X}, {n}",
    Op.SKP: "SKP V{x:X}",
    Op.SKNP: "SKNP V{x:X}",
    Op.LD_VX_DT: "LD V{x:X}, DT",
    Op.LD_KEY: "LD V{x:X}, K",
    Op.LD_DT: "LD DT, V{x:X}",
    Op.LD_ST: "LD ST, V{x:X}",
    Op.ADD_I: "ADD I, V{x:X}",
    Op.LD_FONT: "LD F, V{x:X}",
    Op.BCD: "LD B, V{x:X}",
    Op.STORE: "LD [I], V{x:X}",
    Op.LOAD: "LD V{x:X}, [I]",
}


def _classify(instruction: int, family: int, n: int, nn: int) -> Optional[Op]:
    """Map nibble pattern to an instruction tag, or None if unrecognised."""
    if family == 0x0:
        if instruction == 0x00E0:
            return Op.CLS
        if instruction == 0x00EE:
            return Op.RET
        return Op.NOP
    if family in _FAMILY_OPS:
        return _FAMILY_OPS[family]
    if family == 0x5 and n == 0:
        return Op.SE_REG
    if family == 0x9 and n == 0:
        return Op.SNE_REG
    if family == 0x8:
        return _ALU_OPS.get(n)
    if family == 0xE:
        return _KEY_OPS.get(nn)
    if family == 0xF:
        return _MISC_OPS.get(nn)
    return None


def decode(instruction: int) -> DecodedInstruction:
    """Decode 16-bit instruction into components.

    Raises:
        DecodeError: if the word is not a recognised CHIP-8 instruction
    """
    instruction = int(instruction)
    if not 0 <= instruction <= 0xFFFF:
        raise DecodeError(instruction)

    family = (instruction & 0xF000) >> 12
    n = instruction & 0x000F
    nn = instruction & 0x00FF

    op = _classify(instruction, family, n, nn)
    if op is None:
        raise DecodeError(instruction)

    return DecodedInstruction(
        raw=instruction,
        op=op,
        family=family,
        x=(instruction & 0x0F00) >> 8,
        y=(instruction & 0x00F0) >> 4,
        n=n,
        nn=nn,
        nnn=instruction & 0x0FFF
    )


def disassemble(instruction: DecodedInstruction) -> str:
    """Render a decoded instruction as a mnemonic, e.g. ``DRW V0, V1, 5``."""
    return _MNEMONICS[instruction.op].format(
        x=instruction.x, y=instruction.y, n=instruction.n, nn=instruction.nn, nnn=instruction.nnn
    )


def disassemble_program(program: bytes, origin: int = 0x200) -> list[str]:
    """Produce a listing of a raw program image, one line per 16-bit word.

    Words that do not decode are listed as data (``DW``); a trailing odd byte
    is listed as ``DB``.
    """
    lines = []
    for offset in range(0, len(program) - 1, 2):
        word = (program[offset] << 8) | program[offset + 1]
        try:
            text = disassemble(decode(word))
        except DecodeError:
            text = f"DW 0x{word:04X}"
        lines.append(f"0x{origin + offset:03X}  {word:04X}  {text}")
    if len(program) % 2:
        lines.append(f"0x{origin + len(program) - 1:03X}  {program[-1]:02X}    DB 0x{program[-1]:02X}")
    return lines
