# =============================================================================
# test_lexer.py - Lexer Unit Tests
# =============================================================================
# Tests for the CHIP-8 assembler tokenizer.
#
# Test coverage includes:
#   - Whitespace and tab trimming
#   - Comment stripping
#   - Blank and comment-only lines
#   - Token positions (line and column)
# =============================================================================

import pytest
from chip8_asm.assembler.lexer import Lexer, TokenizedLine, tokenize


# =============================================================================
# Basic Tokenizing Tests
# =============================================================================

class TestBasicTokens:
    """Test splitting lines into tokens."""

    def test_empty_source(self):
        """Empty source produces no lines."""
        assert tokenize("") == []

    def test_whitespace_only(self):
        """Lines with only whitespace produce no lines."""
        assert tokenize("   \t   ") == []

    def test_single_mnemonic(self):
        assert tokenize("CLS") == [["CLS"]]

    @pytest.mark.parametrize("source", ["  CLS  ", "\tCLS\t", "CLS", " \t CLS"])
    def test_surrounding_whitespace_is_trimmed(self, source):
        """Spaces and tabs around tokens never reach the token text."""
        assert tokenize(source) == [["CLS"]]

    def test_operands_keep_commas(self):
        """Commas are left for the parser to strip."""
        assert tokenize("LD V0, #42") == [["LD", "V0,", "#42"]]

    def test_tab_separated_tokens(self):
        assert tokenize("DRW\tV0,\tV1,\t5") == [["DRW", "V0,", "V1,", "5"]]

    def test_case_is_preserved(self):
        """Case folding happens in later stages."""
        assert tokenize("cls") == [["cls"]]

    def test_label_token(self):
        assert tokenize("MYLABEL: CLS") == [["MYLABEL:", "CLS"]]


# =============================================================================
# Comment and Blank Line Tests
# =============================================================================

class TestComments:
    """Test comment stripping and line dropping."""

    def test_trailing_comment(self):
        assert tokenize("CLS ; here is a comment") == [["CLS"]]

    def test_comment_without_space(self):
        assert tokenize("CLS;comment") == [["CLS"]]

    def test_comment_only_line_dropped(self):
        assert tokenize("; here is a comment\nCLS") == [["CLS"]]

    def test_blank_lines_dropped(self):
        assert tokenize("CLS\n\nCLS") == [["CLS"], ["CLS"]]

    def test_semicolon_truncates_at_first(self):
        assert tokenize("RET ; one ; two") == [["RET"]]

    def test_windows_line_endings(self):
        assert tokenize("CLS\r\nRET\r\n") == [["CLS"], ["RET"]]


# =============================================================================
# Position Tracking Tests
# =============================================================================

class TestPositions:
    """Test line and column tracking for error messages."""

    def test_line_numbers_skip_blank_lines(self):
        lines = list(Lexer("; header\n\nCLS\n  RET", "prog.asm").tokenize())
        assert [line.line for line in lines] == [3, 4]

    def test_columns_are_one_based(self):
        lines = list(Lexer("  LD   V0, 5").tokenize())
        assert lines[0].columns == [3, 8, 12]

    def test_text_is_raw_line(self):
        lines = list(Lexer("START: CLS ; clear").tokenize())
        assert lines[0].text == "START: CLS ; clear"

    def test_location(self):
        lines = list(Lexer("\n    JP #200", "game.asm").tokenize())
        location = lines[0].location
        assert location.filename == "game.asm"
        assert location.line == 2
        assert location.column == 5

    def test_tokenized_line_repr(self):
        line = TokenizedLine(tokens=["CLS"], line=7)
        assert repr(line) == "TokenizedLine(7, ['CLS'])"
