"""
Operand classification for CHIP-8 assembly.

Every operand token falls in exactly one category:

| Kind      | Syntax                        | Example        |
|-----------|-------------------------------|----------------|
| NUMBER    | '#' + hex digits, or decimal  | #1F, 42        |
| LABEL     | other word characters         | LOOP, draw_1   |
| MALFORMED | anything else                 | #, #XY, $FF    |

The LABEL pattern is the same one label definitions use, so every label
that can be defined can also be referenced.

Registers and reserved operands (I, DT, ST, F, B, K, [I]) are recognized
by the compiler in the positions where they are allowed; classification
here only concerns values.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional
import re


RESERVED_OPERANDS = frozenset({"I", "DT", "ST", "F", "B", "K", "[I]"})

_HEX_NUMBER = re.compile(r"^#([0-9A-Fa-f]+)$")
_DEC_NUMBER = re.compile(r"^[0-9]+$")
_IDENTIFIER = re.compile(r"^\w+$")
_REGISTER = re.compile(r"^[Vv]([0-9A-Fa-f])$")


class OperandKind(Enum):
    NUMBER = auto()
    LABEL = auto()
    MALFORMED = auto()


@dataclass(frozen=True)
class Operand:
    """
    A classified operand token.

    Attributes:
        kind: Which category the token falls in
        text: The token as written
        value: Numeric value for NUMBER operands, otherwise None
    """
    kind: OperandKind
    text: str
    value: Optional[int] = None


def classify_operand(token: str) -> Operand:
    """Classify a value token. Never raises."""
    match = _HEX_NUMBER.match(token)
    if match:
        return Operand(OperandKind.NUMBER, token, int(match.group(1), 16))

    if _DEC_NUMBER.match(token):
        try:
            return Operand(OperandKind.NUMBER, token, int(token, 10))
        except ValueError:
            # Longer than the interpreter's int conversion limit
            return Operand(OperandKind.MALFORMED, token)

    if _IDENTIFIER.match(token):
        return Operand(OperandKind.LABEL, token)

    return Operand(OperandKind.MALFORMED, token)


def parse_register(token: str) -> Optional[int]:
    """Return the index of a V register token (V0-VF, any case), or None."""
    match = _REGISTER.match(token)
    if match is None:
        return None
    return int(match.group(1), 16)


def is_register_like(token: str) -> bool:
    """True if token starts with V, selecting the register-register form."""
    return token[:1] in ("V", "v")
