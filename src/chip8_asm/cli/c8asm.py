"""
c8asm - CHIP-8 Assembler Command-Line Interface
===============================================

This module implements the command-line interface for the CHIP-8
assembler.

Usage Examples
--------------
Basic assembly (writes game.ch8):
    $ c8asm game.asm

With output and listing files:
    $ c8asm game.asm -o build/game.ch8 -l build/game.lst

Advance 2 bytes per line even after one-byte DB data:
    $ c8asm --address-step fixed game.asm

Reject duplicate label definitions:
    $ c8asm --strict-labels game.asm

Defaults for --address-step and --strict-labels can also be set through
the CHIP8_ASM_ADDRESS_STEP and CHIP8_ASM_STRICT_LABELS environment
variables.
"""

from pathlib import Path
from typing import Optional
import logging

import click

from chip8_asm import __version__
from chip8_asm.assembler import Assembler
from chip8_asm.cli.errors import handle_cli_exception
from chip8_asm.config import PROGRAM_START, AddressStep, AssemblerConfig


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output program image (default: input.ch8)",
)
@click.option(
    "-l", "--listing",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Generate listing file",
)
@click.option(
    "--address-step",
    type=click.Choice([step.value for step in AddressStep], case_sensitive=False),
    default=None,
    help="How addresses advance: 'width' follows each instruction's size "
         "(DB is 1 byte), 'fixed' advances 2 bytes per line "
         "regardless of size. Default: width.",
)
@click.option(
    "--strict-labels/--no-strict-labels",
    default=None,
    help="Fail on duplicate label definitions instead of keeping the last one.",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="c8asm")
def main(
    input_file: Path,
    output: Optional[Path],
    listing: Optional[Path],
    address_step: Optional[str],
    strict_labels: Optional[bool],
    verbose: bool,
) -> None:
    """
    Assemble CHIP-8 source code into a program image.

    INPUT_FILE is the assembly source file to assemble.

    The output is a raw binary with no header, to be loaded at $200.

    \b
    Examples:
        c8asm pong.asm               # Outputs pong.ch8
        c8asm pong.asm -o out.ch8    # Specify output file
        c8asm pong.asm -l pong.lst   # Also write a listing
    """
    if verbose:
        logging.basicConfig(format="%(name)s: %(message)s")
        logging.getLogger("chip8_asm").setLevel(logging.DEBUG)

    config = AssemblerConfig.from_env()
    if address_step is not None:
        config.address_step = AddressStep.from_name(address_step)
    if strict_labels is not None:
        config.strict_labels = strict_labels

    output_file = output if output is not None else input_file.with_suffix(".ch8")

    if verbose:
        click.echo(f"Address step: {config.address_step.value}")
        click.echo(f"Strict labels: {'on' if config.strict_labels else 'off'}")

    try:
        asm = Assembler(config)
        result = asm.assemble_file(input_file)

        result.write_binary(output_file)
        if verbose:
            click.echo(f"Wrote {len(result.code)} bytes to {output_file}")

        if listing:
            result.write_listing(listing)
            if verbose:
                click.echo(f"Wrote listing to {listing}")

        if verbose:
            click.echo(
                f"Assembly complete: {len(result.program)} instructions, "
                f"{len(result.code)} bytes at ${PROGRAM_START:04X}"
            )
            click.echo(f"Defined {len(result.labels)} labels")

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Assembly")


if __name__ == "__main__":
    main()
