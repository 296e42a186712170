"""
chip8-asm - Assembler for the CHIP-8 Virtual Machine
====================================================

This package translates CHIP-8 assembly language into raw program images
(.ch8) that any CHIP-8 interpreter can load at address $200.

The CHIP-8 has sixteen 8-bit registers (V0-VF), a 16-bit address register
(I), delay and sound timers, and a 12-bit address space. All 35 opcodes
are 16 bits wide.

Quick Start
-----------
Assemble a program:
    >>> from chip8_asm import assemble
    >>> assemble("START: CLS\\n JP START")
    b'\\x00\\xe0\\x12\\x00'

Keep the listing and labels:
    >>> from chip8_asm import Assembler
    >>> result = Assembler().assemble_file("game.asm")
    >>> result.write_binary("game.ch8")
    >>> print(result.get_listing())

Or use the command-line tool:
    $ c8asm game.asm -o game.ch8 -l game.lst

Reference Documentation
-----------------------
- Cowgod's Chip-8 Technical Reference: http://devernay.free.fr/hacks/chip8/C8TECH10.HTM
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from chip8_asm.assembler import (
    Assembler,
    AssemblyResult,
    assemble,
    assemble_file,
    tokenize,
)
from chip8_asm.config import PROGRAM_START, AddressStep, AssemblerConfig
from chip8_asm.errors import (
    Chip8Error,
    AssemblerError,
    SourceLocation,
    UnknownMnemonicError,
    UndefinedLabelError,
    MalformedOperandError,
    DuplicateLabelError,
)

__all__ = [
    # Version info
    "__version__",
    # Assembler
    "Assembler",
    "AssemblyResult",
    "assemble",
    "assemble_file",
    "tokenize",
    # Configuration
    "PROGRAM_START",
    "AddressStep",
    "AssemblerConfig",
    # Exception hierarchy
    "Chip8Error",
    "AssemblerError",
    "SourceLocation",
    "UnknownMnemonicError",
    "UndefinedLabelError",
    "MalformedOperandError",
    "DuplicateLabelError",
]
