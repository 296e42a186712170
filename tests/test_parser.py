# =============================================================================
# test_parser.py - Parser Unit Tests
# =============================================================================
# Tests for address assignment, label detection and operand normalization.
#
# Test coverage includes:
#   - Addresses starting at $200
#   - Label definitions and the label table
#   - Trailing comma stripping
#   - Both address stepping modes (BYTE_WIDTH and FIXED)
#   - Duplicate label policy
# =============================================================================

import pytest
from chip8_asm.assembler.parser import LabelTable, Instruction, parse_source
from chip8_asm.config import AddressStep, AssemblerConfig
from chip8_asm.errors import DuplicateLabelError


FIXED = AssemblerConfig(address_step=AddressStep.FIXED)
WIDTH = AssemblerConfig(address_step=AddressStep.BYTE_WIDTH)


# =============================================================================
# Instruction Construction Tests
# =============================================================================

class TestInstructions:
    """Test one Instruction per tokenized line."""

    def test_one_instruction_per_line(self):
        program = parse_source("CLS\n\n; comment\nRET")
        assert len(program) == 2

    def test_addresses_start_at_0x200(self):
        program = parse_source("CLS\nRET\nJP #200")
        assert [inst.address for inst in program] == [0x200, 0x202, 0x204]

    def test_default_width_is_two(self):
        program = parse_source("CLS")
        assert program.instructions[0].byte_width == 2

    def test_not_yet_encoded(self):
        program = parse_source("CLS")
        assert program.instructions[0].encoded is None

    def test_trailing_commas_stripped(self):
        program = parse_source("DRW V0, V1, 5")
        assert program.instructions[0].operand_tokens == ["DRW", "V0", "V1", "5"]

    def test_only_one_comma_stripped(self):
        program = parse_source("LD V0,, V1")
        assert program.instructions[0].operand_tokens == ["LD", "V0,", "V1"]

    def test_original_tokens_untouched(self):
        program = parse_source("LOOP: LD V0, 1")
        inst = program.instructions[0]
        assert inst.original_tokens == ["LOOP:", "LD", "V0,", "1"]
        assert inst.operand_tokens == ["LD", "V0", "1"]

    def test_instruction_index_and_location(self):
        program = parse_source("CLS\n\n  RET", "prog.asm")
        inst = program.instructions[1]
        assert inst.index == 1
        assert inst.location.filename == "prog.asm"
        assert inst.location.line == 3
        assert inst.source_line == "  RET"

    def test_operand_location(self):
        program = parse_source("LOOP: JP  LOOP")
        inst = program.instructions[0]
        assert inst.operand_location(0).column == 7
        assert inst.operand_location(1).column == 11
        # Out of range falls back to the start of the line
        assert inst.operand_location(5) == inst.location

    def test_mnemonic_and_operands(self):
        inst = parse_source("ld v1, v2").instructions[0]
        assert inst.mnemonic_token == "ld"
        assert inst.operands == ["v1", "v2"]


# =============================================================================
# Label Tests
# =============================================================================

class TestLabels:
    """Test label detection and the label table."""

    def test_label_detected(self):
        program = parse_source("MYLABEL: CLS")
        inst = program.instructions[0]
        assert inst.label == "MYLABEL"
        assert inst.operand_tokens == ["CLS"]
        assert program.labels.lookup("MYLABEL") is inst

    def test_label_address(self):
        program = parse_source("CLS\nCLS\nHERE: RET")
        assert program.labels.address_of("HERE") == 0x204

    def test_label_lookup_is_case_insensitive(self):
        program = parse_source("Loop: CLS")
        assert program.labels.address_of("LOOP") == 0x200
        assert program.labels.address_of("loop") == 0x200
        assert "lOoP" in program.labels

    def test_label_spelling_kept(self):
        program = parse_source("Loop: CLS")
        assert program.labels.addresses() == {"Loop": 0x200}

    def test_label_only_line_occupies_slot(self):
        program = parse_source("ALONE:\nCLS")
        assert program.instructions[0].operand_tokens == []
        assert program.instructions[0].mnemonic_token is None
        assert program.instructions[1].address == 0x202

    def test_colon_not_on_first_token(self):
        program = parse_source("CLS LOOP:")
        assert program.instructions[0].label is None
        assert len(program.labels) == 0

    def test_label_needs_space_before_mnemonic(self):
        program = parse_source("LOOP:CLS")
        assert program.instructions[0].label is None

    def test_duplicate_label_last_wins_by_default(self):
        program = parse_source("A: CLS\nA: RET")
        assert program.labels.address_of("A") == 0x202
        assert len(program.labels) == 1

    def test_duplicate_label_strict(self):
        config = AssemblerConfig(strict_labels=True)
        with pytest.raises(DuplicateLabelError) as exc_info:
            parse_source("A: CLS\na: RET", config=config)
        assert exc_info.value.label == "a"
        assert exc_info.value.location.line == 2
        assert exc_info.value.original_location.line == 1
        assert exc_info.value.instruction_index == 1
        assert "first defined at <input>:1:1" in str(exc_info.value)


class TestLabelTable:
    """Test the LabelTable directly."""

    def _instruction(self, address: int) -> Instruction:
        return Instruction(original_tokens=["CLS"], operand_tokens=["CLS"],
                           address=address)

    def test_missing_label(self):
        table = LabelTable()
        assert table.lookup("NOPE") is None
        assert table.address_of("NOPE") is None

    def test_iteration_and_len(self):
        table = LabelTable()
        table.define("START", self._instruction(0x200))
        table.define("END", self._instruction(0x210))
        assert list(table) == ["START", "END"]
        assert len(table) == 2

    def test_similar_names(self):
        table = LabelTable()
        table.define("LOOP", self._instruction(0x200))
        table.define("DRAWCHAR", self._instruction(0x210))
        assert table.similar_names("LOPP") == ["LOOP"]
        assert table.similar_names("loop2") == ["LOOP"]
        assert table.similar_names("XYZ") == []


# =============================================================================
# Address Stepping Tests
# =============================================================================

class TestAddressStep:
    """Test both address counter policies around one-byte DB instructions."""

    SOURCE = "DB #FF\nDB #EA\nNEXT: CLS"

    def test_width_mode_is_default(self):
        assert AssemblerConfig().address_step is AddressStep.BYTE_WIDTH

    def test_width_mode_advances_by_byte_width(self):
        program = parse_source(self.SOURCE, config=WIDTH)
        assert [inst.address for inst in program] == [0x200, 0x201, 0x202]
        assert [inst.byte_width for inst in program] == [1, 1, 2]
        assert program.labels.address_of("NEXT") == 0x202

    def test_fixed_mode_advances_by_two(self):
        program = parse_source(self.SOURCE, config=FIXED)
        assert [inst.address for inst in program] == [0x200, 0x202, 0x204]
        assert program.labels.address_of("NEXT") == 0x204

    def test_fixed_mode_leaves_width_to_compiler(self):
        program = parse_source(self.SOURCE, config=FIXED)
        assert [inst.byte_width for inst in program] == [2, 2, 2]

    def test_lowercase_db_in_width_mode(self):
        program = parse_source("db 1\nCLS", config=WIDTH)
        assert program.instructions[1].address == 0x201
