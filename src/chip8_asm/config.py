"""
CHIP-8 Assembler - Configuration
================================

Assembly options and where they come from. Configuration can come from:
- Default values (defined here)
- Environment variables (AssemblerConfig.from_env)
- Command-line flags (c8asm), which override both

Address Stepping
----------------
Every instruction is 2 bytes wide except the DB pseudo-op, which emits a
single byte. Two policies exist for advancing the address counter:

| Mode       | Counter advance            | Labels after DB          |
|------------|----------------------------|--------------------------|
| BYTE_WIDTH | instruction's byte width   | match emitted offsets    |
| FIXED      | always 2                   | ahead of emitted offsets |
"""

from dataclasses import dataclass
from enum import Enum
import os


# Programs are loaded at this address by every CHIP-8 interpreter
PROGRAM_START = 0x200


class AddressStep(Enum):
    """How the parser advances the address counter between instructions."""
    BYTE_WIDTH = "width"   # advance by each instruction's byte width
    FIXED = "fixed"        # advance by 2, regardless of width

    @classmethod
    def from_name(cls, name: str) -> "AddressStep":
        """
        Look up a mode by its command-line name ('width' or 'fixed').

        Raises:
            ValueError: If the name is not a known mode
        """
        return cls(name.strip().lower())


_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})


@dataclass
class AssemblerConfig:
    """
    Configuration for one assembler.

    Attributes:
        address_step: Address counter policy (default: BYTE_WIDTH)
        strict_labels: Raise DuplicateLabelError on label redefinition
                       instead of letting the last definition win
    """

    address_step: AddressStep = AddressStep.BYTE_WIDTH
    strict_labels: bool = False

    @classmethod
    def from_env(cls) -> "AssemblerConfig":
        """
        Create AssemblerConfig from environment variables.

        Environment variables (all optional):
            CHIP8_ASM_ADDRESS_STEP: "width" or "fixed"
            CHIP8_ASM_STRICT_LABELS: "1", "true", "yes" or "on" to enable

        Returns:
            AssemblerConfig with values from environment variables
        """
        config = cls()

        if step := os.environ.get("CHIP8_ASM_ADDRESS_STEP"):
            try:
                config.address_step = AddressStep.from_name(step)
            except ValueError:
                pass  # Ignore invalid values

        if strict := os.environ.get("CHIP8_ASM_STRICT_LABELS"):
            config.strict_labels = strict.strip().lower() in _TRUE_VALUES

        return config
