"""
CHIP-8 Instruction Set Definition
=================================

This module defines the CHIP-8 mnemonic set, the operand count each
mnemonic accepts, and the base opcode of every instruction form.

All CHIP-8 instructions are 16 bits wide and stored big-endian. Operand
fields are OR'd into a base opcode:

| Field | Bits  | Meaning                         |
|-------|-------|---------------------------------|
| nnn   | 0-11  | 12-bit address                  |
| x     | 8-11  | first V register                |
| y     | 4-7   | second V register               |
| kk    | 0-7   | 8-bit immediate                 |
| n     | 0-3   | 4-bit immediate (DRW height)    |

Operand Notation
----------------
In the table below, ``r`` is a V register (V0-VF), ``v`` an immediate value
and ``addr`` an address or label.

| Mnemonic | Forms                                   |
|----------|-----------------------------------------|
| CLS, RET | (none)                                  |
| SYS      | addr                                    |
| JP       | addr / V0, addr                         |
| CALL     | addr                                    |
| SE, SNE  | r, v / r, r                             |
| LD       | r, v / r, r / I, addr / r, DT / DT, r / |
|          | r, K / F, r / B, r / [I], r / r, [I] /  |
|          | ST, r                                   |
| ADD      | r, v / r, r / I, r                      |
| OR, AND, XOR, SUB, SUBN | r, r                     |
| SHR, SHL | r [, r]                                 |
| RND      | r, v                                    |
| DRW      | r, r, v                                 |
| SKP, SKNP| r                                       |
| DW       | addr (16-bit word, number or label)     |
| DB       | addr (low byte, number or label)        |

Reference
---------
- Cowgod's Chip-8 Technical Reference: http://devernay.free.fr/hacks/chip8/C8TECH10.HTM
"""

from enum import Enum, IntEnum
from typing import Optional


# =============================================================================
# Mnemonics
# =============================================================================

class Mnemonic(Enum):
    """
    The closed set of mnemonics the assembler understands.

    The value of each member is its canonical (upper-case) spelling.
    """
    CLS = "CLS"
    RET = "RET"
    SYS = "SYS"
    JP = "JP"
    CALL = "CALL"
    SE = "SE"
    SNE = "SNE"
    LD = "LD"
    ADD = "ADD"
    OR = "OR"
    AND = "AND"
    XOR = "XOR"
    SUB = "SUB"
    SHR = "SHR"
    SUBN = "SUBN"
    SHL = "SHL"
    RND = "RND"
    DRW = "DRW"
    SKP = "SKP"
    SKNP = "SKNP"
    DW = "DW"
    DB = "DB"

    @classmethod
    def lookup(cls, token: str) -> Optional["Mnemonic"]:
        """Return the mnemonic spelled by token (any case), or None."""
        try:
            return cls(token.upper())
        except ValueError:
            return None

    @property
    def arity(self) -> tuple[int, int]:
        """Minimum and maximum number of operands."""
        return MNEMONIC_ARITY[self]

    @property
    def byte_width(self) -> int:
        """Number of bytes the instruction emits."""
        return 1 if self is Mnemonic.DB else 2


# (min, max) operand counts, mnemonic excluded
MNEMONIC_ARITY: dict[Mnemonic, tuple[int, int]] = {
    Mnemonic.CLS: (0, 0),
    Mnemonic.RET: (0, 0),
    Mnemonic.SYS: (1, 1),
    Mnemonic.JP: (1, 2),
    Mnemonic.CALL: (1, 1),
    Mnemonic.SE: (2, 2),
    Mnemonic.SNE: (2, 2),
    Mnemonic.LD: (2, 2),
    Mnemonic.ADD: (2, 2),
    Mnemonic.OR: (2, 2),
    Mnemonic.AND: (2, 2),
    Mnemonic.XOR: (2, 2),
    Mnemonic.SUB: (2, 2),
    Mnemonic.SHR: (1, 2),
    Mnemonic.SUBN: (2, 2),
    Mnemonic.SHL: (1, 2),
    Mnemonic.RND: (2, 2),
    Mnemonic.DRW: (3, 3),
    Mnemonic.SKP: (1, 1),
    Mnemonic.SKNP: (1, 1),
    Mnemonic.DW: (1, 1),
    Mnemonic.DB: (1, 1),
}


# =============================================================================
# Base Opcodes
# =============================================================================

class Opcode(IntEnum):
    """Base opcode of each instruction form, before operand fields are OR'd in."""
    SYS = 0x0000        # SYS addr
    CLS = 0x00E0
    RET = 0x00EE
    JP = 0x1000         # JP addr
    CALL = 0x2000
    SE_BYTE = 0x3000    # SE Vx, byte
    SNE_BYTE = 0x4000   # SNE Vx, byte
    SE_REG = 0x5000     # SE Vx, Vy
    LD_BYTE = 0x6000    # LD Vx, byte
    ADD_BYTE = 0x7000   # ADD Vx, byte
    LD_REG = 0x8000     # LD Vx, Vy
    OR = 0x8001
    AND = 0x8002
    XOR = 0x8003
    ADD_REG = 0x8004    # ADD Vx, Vy
    SUB = 0x8005
    SHR = 0x8006
    SUBN = 0x8007
    SHL = 0x800E
    SNE_REG = 0x9000    # SNE Vx, Vy
    LD_I = 0xA000       # LD I, addr
    JP_V0 = 0xB000      # JP V0, addr
    RND = 0xC000
    DRW = 0xD000
    SKP = 0xE09E
    SKNP = 0xE0A1
    LD_VX_DT = 0xF007   # LD Vx, DT
    LD_VX_K = 0xF00A    # LD Vx, K
    LD_DT_VX = 0xF015   # LD DT, Vx
    LD_ST_VX = 0xF018   # LD ST, Vx
    ADD_I_VX = 0xF01E   # ADD I, Vx
    LD_F_VX = 0xF029    # LD F, Vx
    LD_B_VX = 0xF033    # LD B, Vx
    LD_MEM_VX = 0xF055  # LD [I], Vx
    LD_VX_MEM = 0xF065  # LD Vx, [I]


# LD forms whose first operand is a special register, keyed by that operand
LD_TO_SPECIAL: dict[str, Opcode] = {
    "DT": Opcode.LD_DT_VX,
    "ST": Opcode.LD_ST_VX,
    "F": Opcode.LD_F_VX,
    "B": Opcode.LD_B_VX,
    "[I]": Opcode.LD_MEM_VX,
}

# LD forms whose second operand is a special register, keyed by that operand
LD_FROM_SPECIAL: dict[str, Opcode] = {
    "DT": Opcode.LD_VX_DT,
    "K": Opcode.LD_VX_K,
    "[I]": Opcode.LD_VX_MEM,
}
