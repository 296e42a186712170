"""
CHIP-8 Assembler Command-Line Interface
=======================================

This package provides the command-line tool for the CHIP-8 assembler:

- **c8asm**: assemble a source file into a .ch8 program image

The tool is a Click-based CLI application with help text and
consistent error reporting.
"""

__all__ = ["c8asm"]
