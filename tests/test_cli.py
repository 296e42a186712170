# =============================================================================
# test_cli.py - c8asm Command-Line Tests
# =============================================================================
# Tests for the c8asm command using Click's CliRunner.
#
# Test coverage includes:
#   - Default and explicit output paths
#   - Listing output
#   - Address step and strict label options (flags and environment)
#   - Exit codes for assembly errors and missing files
# =============================================================================

from pathlib import Path

import pytest
from click.testing import CliRunner

from chip8_asm import __version__
from chip8_asm.cli.c8asm import main
from chip8_asm.cli.errors import ExitCode


PROGRAM = """\
START:  CLS
        JP    START
"""

DB_PROGRAM = """\
        DB    #FF
        DB    #EA
NEXT:   JP    NEXT
"""


@pytest.fixture
def runner():
    return CliRunner()


class TestOutput:
    """Test output file handling."""

    def test_default_output_name(self, runner):
        with runner.isolated_filesystem():
            Path("loop.asm").write_text(PROGRAM)
            result = runner.invoke(main, ["loop.asm"])
            assert result.exit_code == 0, result.output
            assert Path("loop.ch8").read_bytes() == b"\x00\xE0\x12\x00"

    def test_explicit_output(self, runner):
        with runner.isolated_filesystem():
            Path("loop.asm").write_text(PROGRAM)
            result = runner.invoke(main, ["loop.asm", "-o", "out.bin"])
            assert result.exit_code == 0, result.output
            assert Path("out.bin").read_bytes() == b"\x00\xE0\x12\x00"
            assert not Path("loop.ch8").exists()

    def test_listing(self, runner):
        with runner.isolated_filesystem():
            Path("loop.asm").write_text(PROGRAM)
            result = runner.invoke(main, ["loop.asm", "-l", "loop.lst"])
            assert result.exit_code == 0, result.output
            listing = Path("loop.lst").read_text()
            assert "$0202  12 00" in listing
            assert "START                = $0200" in listing

    def test_verbose(self, runner):
        with runner.isolated_filesystem():
            Path("loop.asm").write_text(PROGRAM)
            result = runner.invoke(main, ["loop.asm", "-v"])
            assert result.exit_code == 0, result.output
            assert "Wrote 4 bytes to loop.ch8" in result.output
            assert "Defined 1 labels" in result.output

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestOptions:
    """Test assembly options from flags and environment."""

    def test_address_step_default_is_width(self, runner):
        with runner.isolated_filesystem():
            Path("db.asm").write_text(DB_PROGRAM)
            result = runner.invoke(main, ["db.asm"], env={"CHIP8_ASM_ADDRESS_STEP": None})
            assert result.exit_code == 0, result.output
            assert Path("db.ch8").read_bytes() == bytes([0xFF, 0xEA, 0x12, 0x02])

    def test_address_step_fixed(self, runner):
        with runner.isolated_filesystem():
            Path("db.asm").write_text(DB_PROGRAM)
            result = runner.invoke(main, ["db.asm", "--address-step", "fixed"])
            assert result.exit_code == 0, result.output
            assert Path("db.ch8").read_bytes() == bytes([0xFF, 0xEA, 0x12, 0x04])

    def test_address_step_from_env(self, runner):
        with runner.isolated_filesystem():
            Path("db.asm").write_text(DB_PROGRAM)
            result = runner.invoke(main, ["db.asm"], env={"CHIP8_ASM_ADDRESS_STEP": "fixed"})
            assert result.exit_code == 0, result.output
            assert Path("db.ch8").read_bytes()[2:] == bytes([0x12, 0x04])

    def test_flag_overrides_env(self, runner):
        with runner.isolated_filesystem():
            Path("db.asm").write_text(DB_PROGRAM)
            result = runner.invoke(
                main, ["db.asm", "--address-step", "width"],
                env={"CHIP8_ASM_ADDRESS_STEP": "fixed"},
            )
            assert result.exit_code == 0, result.output
            assert Path("db.ch8").read_bytes()[2:] == bytes([0x12, 0x02])

    def test_strict_labels(self, runner):
        with runner.isolated_filesystem():
            Path("dup.asm").write_text("A: CLS\nA: RET\n")
            result = runner.invoke(main, ["dup.asm", "--strict-labels"])
            assert result.exit_code == ExitCode.BUILD_ERROR
            assert "duplicate label 'A'" in result.output

    def test_no_strict_labels_overrides_env(self, runner):
        with runner.isolated_filesystem():
            Path("dup.asm").write_text("A: CLS\nA: RET\n")
            result = runner.invoke(
                main, ["dup.asm", "--no-strict-labels"],
                env={"CHIP8_ASM_STRICT_LABELS": "1"},
            )
            assert result.exit_code == 0, result.output


class TestErrors:
    """Test exit codes and error output."""

    def test_assembly_error(self, runner):
        with runner.isolated_filesystem():
            Path("bad.asm").write_text("CLS\nJP NOWHERE\n")
            result = runner.invoke(main, ["bad.asm"])
            assert result.exit_code == ExitCode.BUILD_ERROR
            assert "Assembly failed:" in result.output
            assert "bad.asm:2:4: error: undefined label 'NOWHERE'" in result.output

    def test_no_output_on_error(self, runner):
        with runner.isolated_filesystem():
            Path("bad.asm").write_text("FOO\n")
            result = runner.invoke(main, ["bad.asm"])
            assert result.exit_code == ExitCode.BUILD_ERROR
            assert "unknown mnemonic 'FOO'" in result.output
            assert not Path("bad.ch8").exists()

    def test_oversized_literal_is_build_error(self, runner):
        with runner.isolated_filesystem():
            Path("big.asm").write_text("LD V0, " + "9" * 5000 + "\n")
            result = runner.invoke(main, ["big.asm"])
            assert result.exit_code == ExitCode.BUILD_ERROR
            assert "expected a numeric value" in result.output

    def test_missing_input(self, runner):
        with runner.isolated_filesystem():
            result = runner.invoke(main, ["missing.asm"])
            assert result.exit_code == ExitCode.INVALID_ARGS

    def test_bad_address_step(self, runner):
        with runner.isolated_filesystem():
            Path("loop.asm").write_text(PROGRAM)
            result = runner.invoke(main, ["loop.asm", "--address-step", "odd"])
            assert result.exit_code == ExitCode.INVALID_ARGS
