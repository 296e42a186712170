"""
CHIP-8 Assembler
================

This package translates CHIP-8 assembly source into a raw program image
that a CHIP-8 interpreter loads at address $200.

Main Components
---------------
- **Assembler**: Orchestrates the assembly process
- **Lexer**: Splits source into per-line token lists
- **Parser**: Assigns addresses and builds the label table
- **OpcodeCompiler**: Resolves operands and encodes opcodes
- **Emitter**: Serializes encoded instructions to bytes

Assembly Process
----------------
1. **Tokenizing (Lexer)**: strip comments, split on whitespace, drop
   blank lines
2. **Parsing (Parser)**: one Instruction per line, addresses from $200,
   labels recorded in the LabelTable
3. **Compiling (OpcodeCompiler)**: second pass over the instructions;
   forward label references resolve because the table is complete
4. **Emitting (Emitter)**: big-endian words, single bytes for DB

Example Usage
-------------
>>> from chip8_asm.assembler import assemble
>>> assemble("LOOP: JP LOOP").hex()
'1200'
"""

from chip8_asm.assembler.assembler import (
    Assembler,
    AssemblyResult,
    assemble,
    assemble_file,
)
from chip8_asm.assembler.lexer import Lexer, TokenizedLine, tokenize
from chip8_asm.assembler.parser import (
    Instruction,
    LabelTable,
    Parser,
    Program,
    parse_source,
)
from chip8_asm.assembler.opcodes import Mnemonic, Opcode, MNEMONIC_ARITY
from chip8_asm.assembler.operands import (
    Operand,
    OperandKind,
    classify_operand,
    parse_register,
)
from chip8_asm.assembler.codegen import Emitter, OpcodeCompiler, build_listing

__all__ = [
    # Main class and functions
    "Assembler",
    "AssemblyResult",
    "assemble",
    "assemble_file",
    # Lexer
    "Lexer",
    "TokenizedLine",
    "tokenize",
    # Parser
    "Instruction",
    "LabelTable",
    "Parser",
    "Program",
    "parse_source",
    # Opcodes
    "Mnemonic",
    "Opcode",
    "MNEMONIC_ARITY",
    # Operands
    "Operand",
    "OperandKind",
    "classify_operand",
    "parse_register",
    # Code generator
    "Emitter",
    "OpcodeCompiler",
    "build_listing",
]
