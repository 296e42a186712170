"""
CHIP-8 Assembler - Main Interface
=================================

This module provides the Assembler class, the primary interface for
assembling CHIP-8 source code. It coordinates the lexer, parser, opcode
compiler and emitter to produce a raw program image loaded at $200.

Example Usage
-------------
>>> from chip8_asm.assembler import Assembler
>>>
>>> asm = Assembler()
>>> result = asm.assemble_string('''
... START:  CLS
...         JP    START
... ''')
>>> result.code
b'\\x00\\xe0\\x12\\x00'
>>> result.labels
{'START': 512}
>>> result.write_binary("loop.ch8")

Each call builds a fresh Program. The Assembler itself only holds
configuration, so one instance can assemble any number of sources.

Command-Line Usage
------------------
    $ c8asm game.asm -o game.ch8 -l game.lst
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional
import logging

from chip8_asm.config import AssemblerConfig
from chip8_asm.assembler.codegen import Emitter, OpcodeCompiler, build_listing
from chip8_asm.assembler.parser import Program, parse_source


logger = logging.getLogger(__name__)


# =============================================================================
# Assembly Result
# =============================================================================

@dataclass(frozen=True)
class AssemblyResult:
    """
    Output of one assembly run.

    Attributes:
        code: The program image, to be loaded at $200
        program: Compiled instructions and their label table
    """
    code: bytes
    program: Program

    @property
    def labels(self) -> dict[str, int]:
        """Label names mapped to their addresses."""
        return self.program.labels.addresses()

    def get_listing(self) -> str:
        """
        Get the assembly listing as a string.

        Returns:
            Assembly listing with addresses, code bytes, and source
        """
        return build_listing(self.program)

    def write_binary(self, filepath: str | Path) -> None:
        """
        Write the raw program image (no header, no padding).

        Args:
            filepath: Output file path
        """
        Path(filepath).write_bytes(self.code)

    def write_listing(self, filepath: str | Path) -> None:
        """
        Write assembly listing file.

        Args:
            filepath: Output file path
        """
        Path(filepath).write_text(self.get_listing() + "\n", encoding="utf-8")


# =============================================================================
# Assembler
# =============================================================================

class Assembler:
    """
    Main CHIP-8 assembler class.

    Attributes:
        config: Assembly options (address stepping, duplicate label policy)
        verbose: If True, print progress messages
    """

    def __init__(self, config: Optional[AssemblerConfig] = None,
                 verbose: bool = False):
        """
        Initialize the assembler.

        Args:
            config: Assembly options; defaults to AssemblerConfig()
            verbose: Enable verbose output
        """
        self.config = config or AssemblerConfig()
        self.verbose = verbose

    def assemble_string(self, source: str, filename: str = "<input>") -> AssemblyResult:
        """
        Assemble source code from a string.

        The assembly pipeline is:
        1. Tokenize and parse source into addressed instructions + labels
        2. Compile each instruction to its opcode or literal value
        3. Emit the big-endian byte image

        Args:
            source: Assembly source code
            filename: Virtual filename for error messages

        Returns:
            AssemblyResult holding the bytes and the compiled program

        Raises:
            AssemblerError: If assembly fails; no partial output is produced
        """
        if self.verbose:
            print(f"Assembling {filename}...")

        program = parse_source(source, filename, self.config)

        if self.verbose:
            print(f"Parsed {len(program)} instructions, {len(program.labels)} labels")

        OpcodeCompiler(program).compile()
        code = Emitter().emit(program.instructions)

        logger.debug(f"{filename}: generated {len(code)} bytes")
        if self.verbose:
            print(f"Generated {len(code)} bytes of code")

        return AssemblyResult(code=code, program=program)

    def assemble_file(self, filepath: str | Path) -> AssemblyResult:
        """
        Assemble source code from a file.

        Args:
            filepath: Path to assembly source file

        Returns:
            AssemblyResult holding the bytes and the compiled program

        Raises:
            AssemblerError: If assembly fails
            FileNotFoundError: If source file not found
        """
        filepath = Path(filepath)
        source = filepath.read_text(encoding="utf-8")
        return self.assemble_string(source, str(filepath))


# =============================================================================
# Convenience Functions
# =============================================================================

def assemble(source: str, filename: str = "<input>",
             config: Optional[AssemblerConfig] = None) -> bytes:
    """
    Convenience function to assemble source code.

    Args:
        source: Assembly source code
        filename: Virtual filename for errors
        config: Assembly options (defaults used when None)

    Returns:
        The program image as bytes

    Raises:
        AssemblerError: If assembly fails
    """
    return Assembler(config).assemble_string(source, filename).code


def assemble_file(filepath: str | Path,
                  config: Optional[AssemblerConfig] = None) -> bytes:
    """
    Convenience function to assemble a file.

    Args:
        filepath: Path to source file
        config: Assembly options (defaults used when None)

    Returns:
        The program image as bytes

    Raises:
        AssemblerError: If assembly fails
    """
    return Assembler(config).assemble_file(filepath).code
