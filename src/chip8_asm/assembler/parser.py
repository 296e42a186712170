"""
CHIP-8 Assembly Language Parser
===============================

This module turns tokenized lines into Instructions, assigns each one its
memory address, and builds the label table.

Each non-blank source line becomes exactly one Instruction:

```asm
START:  LD   V0, #00     ; label 'START' bound to this instruction
        JP   START
```

Label Definitions
-----------------
A first token made of word characters followed by a colon (``LOOP:``)
defines a label. The label names the address of the instruction on the
same line. Label names match case-insensitively.

Address Assignment
------------------
Addresses start at 0x200. How the counter advances is chosen by
AddressStep (see chip8_asm.config): by each instruction's byte width
(the default) or by a fixed 2 bytes per line.

Operands are not interpreted here. A line with the wrong operands parses
fine and is rejected later by the opcode compiler.
"""

from dataclasses import dataclass, field
from typing import Iterable, Iterator, Optional
import logging
import re

from chip8_asm.config import PROGRAM_START, AddressStep, AssemblerConfig
from chip8_asm.errors import DuplicateLabelError, SourceLocation
from chip8_asm.assembler.lexer import Lexer, TokenizedLine
from chip8_asm.assembler.opcodes import Mnemonic


logger = logging.getLogger(__name__)

_LABEL_DEF = re.compile(r"^(\w+):$")


# =============================================================================
# Instruction
# =============================================================================

@dataclass
class Instruction:
    """
    One assembled line.

    Attributes:
        original_tokens: Raw tokens of the line, label included
        operand_tokens: Tokens without the label, trailing commas stripped;
                        the mnemonic is operand_tokens[0]
        address: Memory address assigned by the parser
        byte_width: Bytes emitted (2, or 1 for DB)
        encoded: Opcode or literal value, set by the opcode compiler
        label: Label defined on this line, if any
        location: Where the line starts in the source
        source_line: Raw source text of the line
        index: Position of this instruction in the program (0-based)
        columns: Source column of each operand token
    """
    original_tokens: list[str]
    operand_tokens: list[str]
    address: int
    byte_width: int = 2
    encoded: Optional[int] = None
    label: Optional[str] = None
    location: SourceLocation = field(
        default_factory=lambda: SourceLocation("<input>", 0, 0)
    )
    source_line: Optional[str] = None
    index: int = 0
    columns: list[int] = field(default_factory=list)

    @property
    def mnemonic_token(self) -> Optional[str]:
        """The mnemonic as written, or None for a label-only line."""
        return self.operand_tokens[0] if self.operand_tokens else None

    @property
    def operands(self) -> list[str]:
        """Operand tokens following the mnemonic."""
        return self.operand_tokens[1:]

    def operand_location(self, position: int) -> SourceLocation:
        """
        Location of an operand token.

        Args:
            position: 0 for the mnemonic, 1 for the first operand, ...
        """
        if 0 <= position < len(self.columns):
            return SourceLocation(
                self.location.filename, self.location.line, self.columns[position]
            )
        return self.location


# =============================================================================
# Label Table
# =============================================================================

class LabelTable:
    """
    Maps label names to the Instruction they prefix.

    Names are matched case-insensitively; the spelling of the (last)
    definition is kept for display. By default a redefinition replaces the
    earlier entry. With strict=True it raises DuplicateLabelError.
    """

    def __init__(self, strict: bool = False):
        self._strict = strict
        self._entries: dict[str, tuple[str, Instruction]] = {}

    def define(self, name: str, instruction: Instruction) -> None:
        """Bind name to instruction."""
        key = name.upper()
        existing = self._entries.get(key)

        if existing is not None:
            previous = existing[1]
            if self._strict:
                raise DuplicateLabelError(
                    name,
                    location=instruction.location,
                    original_location=previous.location,
                    source_line=instruction.source_line,
                    instruction_index=instruction.index,
                )
            logger.debug(
                f"Label '{name}' redefined at line {instruction.location.line} "
                f"(${previous.address:04X} -> ${instruction.address:04X})"
            )

        self._entries[key] = (name, instruction)

    def lookup(self, name: str) -> Optional[Instruction]:
        """Return the Instruction bound to name, or None."""
        entry = self._entries.get(name.upper())
        return entry[1] if entry else None

    def address_of(self, name: str) -> Optional[int]:
        """Return the address bound to name, or None."""
        instruction = self.lookup(name)
        return instruction.address if instruction else None

    def names(self) -> list[str]:
        """Label names as spelled at their definition."""
        return [name for name, _ in self._entries.values()]

    def addresses(self) -> dict[str, int]:
        """Mapping of label name to address, in definition order."""
        return {name: inst.address for name, inst in self._entries.values()}

    def similar_names(self, name: str) -> list[str]:
        """
        Find labels with similar names for error hints.

        Uses a simple edit distance heuristic.
        """
        name_lower = name.lower()
        similar = []

        for label in self.names():
            label_lower = label.lower()
            if (
                abs(len(label) - len(name)) <= 1 and
                _edit_distance(name_lower, label_lower) <= 2
            ):
                similar.append(label)

        return similar[:3]

    def __contains__(self, name: str) -> bool:
        return name.upper() in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())


def _edit_distance(s1: str, s2: str) -> int:
    """Calculate Levenshtein edit distance between two strings."""
    if len(s1) < len(s2):
        s1, s2 = s2, s1

    distances = range(len(s2) + 1)
    for i, c1 in enumerate(s1):
        new_distances = [i + 1]
        for j, c2 in enumerate(s2):
            if c1 == c2:
                new_distances.append(distances[j])
            else:
                new_distances.append(1 + min((
                    distances[j],
                    distances[j + 1],
                    new_distances[-1]
                )))
        distances = new_distances

    return distances[-1]


# =============================================================================
# Program
# =============================================================================

@dataclass
class Program:
    """
    Instructions of one assembly run, in source order, with their labels.
    """
    instructions: list[Instruction] = field(default_factory=list)
    labels: LabelTable = field(default_factory=LabelTable)

    def __len__(self) -> int:
        return len(self.instructions)

    def __iter__(self) -> Iterator[Instruction]:
        return iter(self.instructions)


# =============================================================================
# Parser
# =============================================================================

class Parser:
    """
    Builds a Program from tokenized lines.

    Usage:
        parser = Parser(Lexer(source, filename).tokenize(), config)
        program = parser.parse()
    """

    def __init__(self, lines: Iterable[TokenizedLine],
                 config: Optional[AssemblerConfig] = None):
        self._lines = lines
        self._config = config or AssemblerConfig()

    def parse(self) -> Program:
        """
        Create one Instruction per line and register label definitions.

        Returns:
            The populated Program

        Raises:
            DuplicateLabelError: On label redefinition, in strict mode only
        """
        program = Program(labels=LabelTable(strict=self._config.strict_labels))
        address = PROGRAM_START

        for line in self._lines:
            instruction = self._parse_line(line, address, len(program.instructions))

            if instruction.label is not None:
                program.labels.define(instruction.label, instruction)
                logger.debug(f"Label '{instruction.label}' = ${address:04X}")

            program.instructions.append(instruction)
            address += self._step(instruction)

        logger.debug(
            f"Parsed {len(program.instructions)} instructions, "
            f"{len(program.labels)} labels"
        )
        return program

    def _parse_line(self, line: TokenizedLine, address: int, index: int) -> Instruction:
        """Build the Instruction for one line."""
        tokens = list(line.tokens)
        columns = list(line.columns)
        label = None

        match = _LABEL_DEF.match(tokens[0])
        if match:
            label = match.group(1)
            tokens = tokens[1:]
            columns = columns[1:]

        operand_tokens = [_strip_comma(token) for token in tokens]

        instruction = Instruction(
            original_tokens=list(line.tokens),
            operand_tokens=operand_tokens,
            address=address,
            label=label,
            location=line.location,
            source_line=line.text,
            index=index,
            columns=columns,
        )

        if self._config.address_step is AddressStep.BYTE_WIDTH:
            mnemonic = Mnemonic.lookup(operand_tokens[0]) if operand_tokens else None
            if mnemonic is not None:
                instruction.byte_width = mnemonic.byte_width

        return instruction

    def _step(self, instruction: Instruction) -> int:
        """How far the address counter advances past an instruction."""
        if self._config.address_step is AddressStep.FIXED:
            return 2
        return instruction.byte_width


def _strip_comma(token: str) -> str:
    """Remove a single trailing comma ('V0,' -> 'V0')."""
    return token[:-1] if token.endswith(",") else token


def parse_source(source: str, filename: str = "<input>",
                 config: Optional[AssemblerConfig] = None) -> Program:
    """
    Convenience function to tokenize and parse source code.

    Args:
        source: Assembly source code
        filename: Name used in error locations
        config: Assembly options (defaults used when None)

    Returns:
        Program with addressed instructions and a populated label table
    """
    return Parser(Lexer(source, filename).tokenize(), config).parse()
