"""
CHIP-8 Assembler Error Hierarchy
================================

This module defines the exception hierarchy for the CHIP-8 assembler.
All exceptions inherit from Chip8Error, allowing callers to catch every
assembler-related error with a single except clause if desired.

Exception Hierarchy
-------------------
Chip8Error (base)
└── AssemblerError (assembler-related)
    ├── UnknownMnemonicError - first token is not a known mnemonic
    ├── UndefinedLabelError - address operand is neither number nor label
    ├── MalformedOperandError - bad register token or wrong operand count
    └── DuplicateLabelError - label defined twice (strict mode only)

Error messages follow this format:
    filename:line:column: error: description
        source_line_text
                ^ (pointer to error location)
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class Chip8Error(Exception):
    """
    Base exception for all CHIP-8 assembler errors.

        try:
            assemble(source)
        except Chip8Error as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in source code for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed, 0 when unknown)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"


# =============================================================================
# Assembler Exceptions
# =============================================================================

class AssemblerError(Chip8Error):
    """
    Base exception for all assembler-related errors.

    Attributes:
        message: The error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The actual source text at the error location (optional)
        instruction_index: 0-based index of the failing instruction (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
        instruction_index: Optional[int] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        self.instruction_index = instruction_index
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            game.asm:12:15: error: undefined label 'LOPP'
                      JP    LOPP
                            ^
            hint: did you mean 'LOOP'?
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class UnknownMnemonicError(AssemblerError):
    """
    The first operand token of a line is not a recognized mnemonic.

    Also raised for a line that holds a label and nothing else, since
    every line occupies an instruction slot.
    """

    def __init__(
        self,
        mnemonic: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        instruction_index: Optional[int] = None,
    ):
        self.mnemonic = mnemonic

        if mnemonic:
            message = f"unknown mnemonic '{mnemonic}'"
            hint = None
        else:
            message = "expected a mnemonic after the label"
            hint = "every line with a label must also hold an instruction"

        super().__init__(
            message,
            location=location,
            hint=hint,
            source_line=source_line,
            instruction_index=instruction_index,
        )


class UndefinedLabelError(AssemblerError):
    """
    Reference to an undefined label.

    Raised during opcode compilation when an address operand is neither
    a numeric literal nor the name of a label in the label table. Similar
    label names are offered as a hint to help catch typos.
    """

    def __init__(
        self,
        label: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        instruction_index: Optional[int] = None,
        similar_labels: Optional[list[str]] = None,
    ):
        self.label = label
        self.similar_labels = similar_labels or []

        hint = None
        if self.similar_labels:
            suggestions = ", ".join(f"'{s}'" for s in self.similar_labels[:3])
            hint = f"did you mean {suggestions}?"

        super().__init__(
            f"undefined label '{label}'",
            location=location,
            hint=hint,
            source_line=source_line,
            instruction_index=instruction_index,
        )


class MalformedOperandError(AssemblerError):
    """
    An operand does not have the form the instruction requires.

    Examples:
        - LD VG, 5      ; VG is not a register
        - DRW V0, V1    ; DRW needs three operands
        - RND V0, FOO   ; immediate must be numeric
    """
    pass


class DuplicateLabelError(AssemblerError):
    """
    Label defined more than once.

    Only raised when strict label checking is enabled; by default a later
    definition silently replaces an earlier one.
    """

    def __init__(
        self,
        label: str,
        location: Optional[SourceLocation] = None,
        original_location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        instruction_index: Optional[int] = None,
    ):
        self.label = label
        self.original_location = original_location

        hint = None
        if original_location:
            hint = f"'{label}' was first defined at {original_location}"

        super().__init__(
            f"duplicate label '{label}'",
            location=location,
            hint=hint,
            source_line=source_line,
            instruction_index=instruction_index,
        )
