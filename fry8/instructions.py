"""Decoded CHIP-8 instructions.

Each instruction is a small frozen dataclass carrying only the operands it
needs. Variants sharing an operand layout subclass the same base, so
``SkipEqualByte(x=1, byte=0x20)`` and ``LoadByte(x=1, byte=0x20)`` are still
distinct (dataclass equality compares the concrete class).
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Instruction:
    pass


@dataclass(frozen=True)
class Addr(Instruction):
    addr: int


@dataclass(frozen=True)
class Reg(Instruction):
    x: int


@dataclass(frozen=True)
class RegByte(Instruction):
    x: int
    byte: int


@dataclass(frozen=True)
class RegReg(Instruction):
    x: int
    y: int


# 0nnn - call machine code routine, ignored
class Sys(Addr):
    pass


# 00E0
class ClearScreen(Instruction):
    pass


# 00EE
class Return(Instruction):
    pass


# 1nnn
class Jump(Addr):
    pass


# 2nnn
class Call(Addr):
    pass


# 3xkk
class SkipEqualByte(RegByte):
    pass


# 4xkk
class SkipNotEqualByte(RegByte):
    pass


# 5xy0
class SkipEqualReg(RegReg):
    pass


# 6xkk
class LoadByte(RegByte):
    pass


# 7xkk
class AddByte(RegByte):
    pass


# 8xy0
class LoadReg(RegReg):
    pass


# 8xy1
class Or(RegReg):
    pass


# 8xy2
class And(RegReg):
    pass


# 8xy3
class Xor(RegReg):
    pass


# 8xy4
class AddReg(RegReg):
    pass


# 8xy5
class SubReg(RegReg):
    pass


# 8xy6
class ShiftRight(Reg):
    pass


# 8xy7
class SubN(RegReg):
    pass


# 8xyE
class ShiftLeft(Reg):
    pass


# 9xy0
class SkipNotEqualReg(RegReg):
    pass


# Annn
class LoadI(Addr):
    pass


# Bnnn
class JumpAdd(Addr):
    pass


# Cxkk
class Rand(RegByte):
    pass


@dataclass(frozen=True)
class Draw(Instruction):
    """Dxyn - draw an n byte sprite from I at (Vx, Vy)."""

    x: int
    y: int
    size: int


# Ex9E
class SkipKey(Reg):
    pass


# ExA1
class SkipNotKey(Reg):
    pass


# Fx07
class GetDelay(Reg):
    pass


# Fx0A
class WaitKey(Reg):
    pass


# Fx15
class SetDelay(Reg):
    pass


# Fx18
class SetSound(Reg):
    pass


# Fx1E
class AddI(Reg):
    pass


# Fx29
class SetISprite(Reg):
    pass


# Fx33
class StoreBCD(Reg):
    pass


# Fx55
class StoreRegI(Reg):
    pass


# Fx65
class LoadRegI(Reg):
    pass


@dataclass(frozen=True)
class Invalid(Instruction):
    """Any opcode that matches no known encoding."""

    opcode: int


# 8xyN, keyed by N
ALU_OPS = {
    0x0: LoadReg,
    0x1: Or,
    0x2: And,
    0x3: Xor,
    0x4: AddReg,
    0x5: SubReg,
    0x7: SubN,
}
SHIFT_OPS = {
    0x6: ShiftRight,
    0xE: ShiftLeft,
}

# ExKK and FxKK, keyed by KK
KEY_OPS = {
    0x9E: SkipKey,
    0xA1: SkipNotKey,
}
MISC_OPS = {
    0x07: GetDelay,
    0x0A: WaitKey,
    0x15: SetDelay,
    0x18: SetSound,
    0x1E: AddI,
    0x29: SetISprite,
    0x33: StoreBCD,
    0x55: StoreRegI,
    0x65: LoadRegI,
}

# families whose whole operand layout is fixed by the high nibble
ADDR_OPS = {0x1: Jump, 0x2: Call, 0xA: LoadI, 0xB: JumpAdd}
REG_BYTE_OPS = {
    0x3: SkipEqualByte,
    0x4: SkipNotEqualByte,
    0x6: LoadByte,
    0x7: AddByte,
    0xC: Rand,
}
REG_REG_OPS = {0x5: SkipEqualReg, 0x9: SkipNotEqualReg}


def decode(opcode: int) -> Instruction:
    """Map a 16 bit opcode to its instruction.

    Never touches interpreter state. Unknown encodings decode to `Invalid`
    rather than raising, so the executor decides how to fail.
    """
    # Extracting nibbles from opcode
    family = (opcode & 0xF000) >> 12
    nnn = opcode & 0x0FFF
    n = opcode & 0x000F
    x = (opcode & 0x0F00) >> 8
    y = (opcode & 0x00F0) >> 4
    kk = opcode & 0x00FF

    if family == 0x0:
        if opcode == 0x00E0:
            return ClearScreen()
        if opcode == 0x00EE:
            return Return()
        return Sys(nnn)
    if family in ADDR_OPS:
        return ADDR_OPS[family](nnn)
    if family in REG_BYTE_OPS:
        return REG_BYTE_OPS[family](x, kk)
    if family in REG_REG_OPS:
        return REG_REG_OPS[family](x, y)
    if family == 0x8:
        if n in ALU_OPS:
            return ALU_OPS[n](x, y)
        if n in SHIFT_OPS:
            return SHIFT_OPS[n](x)
        return Invalid(opcode)
    if family == 0xD:
        return Draw(x, y, n)
    if family == 0xE and kk in KEY_OPS:
        return KEY_OPS[kk](x)
    if family == 0xF and kk in MISC_OPS:
        return MISC_OPS[kk](x)
    return Invalid(opcode)
