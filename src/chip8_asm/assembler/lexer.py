"""
CHIP-8 Assembly Language Lexer
==============================

This module splits CHIP-8 assembly source into per-line token lists.

CHIP-8 assembly is line oriented and has no expressions, so tokens are
simply the whitespace-separated words of a line. Interpretation of the
words (labels, mnemonics, registers, numbers) is left to later stages,
and so is case folding.

Rules
-----
For each source line:
1. Everything from the first ';' to the end of the line is a comment.
2. The remainder is split on whitespace (spaces and tabs).
3. Empty tokens are dropped.
4. A line that yields no tokens is dropped entirely, so blank and
   comment-only lines never occupy an instruction slot.

Tokenizing never fails.

Example
-------
>>> from chip8_asm.assembler.lexer import Lexer
>>> for line in Lexer("LOOP: JP LOOP ; spin", "example.asm").tokenize():
...     print(line)
TokenizedLine(1, ['LOOP:', 'JP', 'LOOP'])
"""

from dataclasses import dataclass, field
from typing import Iterator
import re

from chip8_asm.errors import SourceLocation


COMMENT_CHAR = ";"

_WORD = re.compile(r"\S+")


@dataclass
class TokenizedLine:
    """
    The tokens of one non-blank source line.

    Attributes:
        tokens: Whitespace-separated words, comment removed
        columns: 1-based column where each token starts
        line: Line number in source (1-indexed)
        text: The raw source line, for error messages and listings
        filename: Name of the source file
    """
    tokens: list[str]
    columns: list[int] = field(default_factory=list)
    line: int = 0
    text: str = ""
    filename: str = "<input>"

    def __repr__(self) -> str:
        return f"TokenizedLine({self.line}, {self.tokens!r})"

    @property
    def location(self) -> SourceLocation:
        """Location of the first token on the line."""
        column = self.columns[0] if self.columns else 0
        return SourceLocation(self.filename, self.line, column)


class Lexer:
    """
    Tokenizes CHIP-8 assembly source code.

    Usage:
        lexer = Lexer(source_text, filename)
        lines = list(lexer.tokenize())

    Attributes:
        source: The source code being tokenized
        filename: Name of the source file (for error reporting)
    """

    def __init__(self, source: str, filename: str = "<input>"):
        self.source = source
        self.filename = filename

    def tokenize(self) -> Iterator[TokenizedLine]:
        """
        Yield a TokenizedLine for each source line holding at least one token.
        """
        for line_number, raw in enumerate(self.source.split("\n"), start=1):
            text = raw.rstrip("\r")
            code = text.split(COMMENT_CHAR, 1)[0]

            tokens = []
            columns = []
            for match in _WORD.finditer(code):
                tokens.append(match.group())
                columns.append(match.start() + 1)

            if tokens:
                yield TokenizedLine(
                    tokens=tokens,
                    columns=columns,
                    line=line_number,
                    text=text,
                    filename=self.filename,
                )


def tokenize(source: str) -> list[list[str]]:
    """
    Convenience function returning the bare token lists of a source text.

    >>> tokenize("CLS\\n\\n  JP #200 ; loop")
    [['CLS'], ['JP', '#200']]
    """
    return [line.tokens for line in Lexer(source).tokenize()]
