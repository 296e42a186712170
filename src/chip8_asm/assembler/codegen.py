"""
CHIP-8 Code Generator
=====================

Second pass of the assembler: turns parsed Instructions into opcodes and
serializes them to the program image.

- **OpcodeCompiler** resolves operands (registers, immediates, addresses
  and labels) and packs them into each instruction's base opcode.
- **Emitter** writes the encoded values out as big-endian bytes.
- **build_listing** renders an address/bytes/source listing.

Because the label table is complete before the compiler runs, forward
references ("JP END" before "END:") resolve like backward ones.

Operand Packing
---------------
| Strategy            | Used by                       | Encoding              |
|---------------------|-------------------------------|-----------------------|
| address             | SYS, JP, CALL, LD I           | base | (addr & 0xFFF) |
| register            | SKP, SKNP, LD F/B/DT/ST/K/[I] | base | x << 8         |
| register+immediate  | SE, SNE, LD, ADD, RND         | base | x << 8 | kk    |
| register+register   | SE, SNE, LD, ADD, 8xy_ ops    | base | x << 8 | y << 4|
| literal or label    | DW, DB                        | value & width mask    |

SE, SNE, LD and ADD pick between the register and immediate forms by
looking at the second operand: a token starting with 'V' selects the
register-register form.

Compilation stops at the first instruction that cannot be encoded.
"""

from typing import Callable, Optional
import logging

from chip8_asm.errors import (
    MalformedOperandError,
    UndefinedLabelError,
    UnknownMnemonicError,
)
from chip8_asm.assembler.opcodes import (
    LD_FROM_SPECIAL,
    LD_TO_SPECIAL,
    Mnemonic,
    Opcode,
)
from chip8_asm.assembler.operands import (
    OperandKind,
    classify_operand,
    is_register_like,
    parse_register,
)
from chip8_asm.assembler.parser import Instruction, Program


logger = logging.getLogger(__name__)

ADDRESS_MASK = 0xFFF
BYTE_MASK = 0xFF
NIBBLE_MASK = 0xF
WORD_MASK = 0xFFFF


# =============================================================================
# Opcode Compiler
# =============================================================================

class OpcodeCompiler:
    """
    Encodes every Instruction of a Program.

    Usage:
        compiler = OpcodeCompiler(program)
        compiler.compile()
        # each instruction now has .encoded and its final .byte_width
    """

    def __init__(self, program: Program):
        self._program = program
        self._labels = program.labels
        self._handlers: dict[Mnemonic, Callable[[Instruction], int]] = {
            Mnemonic.CLS: lambda inst: Opcode.CLS,
            Mnemonic.RET: lambda inst: Opcode.RET,
            Mnemonic.SYS: lambda inst: Opcode.SYS | self._address(inst, 1),
            Mnemonic.JP: self._compile_jp,
            Mnemonic.CALL: lambda inst: Opcode.CALL | self._address(inst, 1),
            Mnemonic.SE: lambda inst: self._compile_reg_or_value(
                inst, Opcode.SE_BYTE, Opcode.SE_REG),
            Mnemonic.SNE: lambda inst: self._compile_reg_or_value(
                inst, Opcode.SNE_BYTE, Opcode.SNE_REG),
            Mnemonic.LD: self._compile_ld,
            Mnemonic.ADD: self._compile_add,
            Mnemonic.OR: lambda inst: self._compile_reg_reg(inst, Opcode.OR),
            Mnemonic.AND: lambda inst: self._compile_reg_reg(inst, Opcode.AND),
            Mnemonic.XOR: lambda inst: self._compile_reg_reg(inst, Opcode.XOR),
            Mnemonic.SUB: lambda inst: self._compile_reg_reg(inst, Opcode.SUB),
            Mnemonic.SUBN: lambda inst: self._compile_reg_reg(inst, Opcode.SUBN),
            Mnemonic.SHR: lambda inst: self._compile_shift(inst, Opcode.SHR),
            Mnemonic.SHL: lambda inst: self._compile_shift(inst, Opcode.SHL),
            Mnemonic.RND: lambda inst: self._compile_reg_value(inst, Opcode.RND),
            Mnemonic.DRW: self._compile_drw,
            Mnemonic.SKP: lambda inst: Opcode.SKP | self._register(inst, 1) << 8,
            Mnemonic.SKNP: lambda inst: Opcode.SKNP | self._register(inst, 1) << 8,
            Mnemonic.DW: lambda inst: self._resolve(inst, 1) & WORD_MASK,
            Mnemonic.DB: lambda inst: self._resolve(inst, 1) & BYTE_MASK,
        }

    @property
    def handled_mnemonics(self) -> frozenset[Mnemonic]:
        """Mnemonics this compiler can encode."""
        return frozenset(self._handlers)

    def compile(self) -> None:
        """
        Encode all instructions in source order.

        Raises:
            UnknownMnemonicError: Line does not start with a known mnemonic
            UndefinedLabelError: Address operand names no label
            MalformedOperandError: Wrong operand count or operand form
        """
        for inst in self._program.instructions:
            self.compile_instruction(inst)

        logger.debug(f"Compiled {len(self._program.instructions)} instructions")

    def compile_instruction(self, inst: Instruction) -> None:
        """Set inst.encoded and inst.byte_width."""
        token = inst.mnemonic_token
        if token is None:
            raise UnknownMnemonicError(
                "",
                location=inst.location,
                source_line=inst.source_line,
                instruction_index=inst.index,
            )

        mnemonic = Mnemonic.lookup(token)
        if mnemonic is None:
            raise UnknownMnemonicError(
                token,
                location=inst.operand_location(0),
                source_line=inst.source_line,
                instruction_index=inst.index,
            )

        self._check_arity(inst, mnemonic)

        inst.encoded = int(self._handlers[mnemonic](inst)) & WORD_MASK
        inst.byte_width = mnemonic.byte_width

    # =========================================================================
    # Mnemonic Handlers
    # =========================================================================

    def _compile_jp(self, inst: Instruction) -> int:
        if len(inst.operands) == 1:
            return Opcode.JP | self._address(inst, 1)

        # JP V0, addr: the only register the CPU adds to the target is V0
        if self._register(inst, 1) != 0:
            raise self._malformed(
                inst, 1,
                f"JP with an offset register requires V0, got '{inst.operand_tokens[1]}'",
            )
        return Opcode.JP_V0 | self._address(inst, 2)

    def _compile_ld(self, inst: Instruction) -> int:
        first = inst.operand_tokens[1].upper()
        second = inst.operand_tokens[2].upper()

        if first == "I":
            return Opcode.LD_I | self._address(inst, 2)
        if first in LD_TO_SPECIAL:
            return LD_TO_SPECIAL[first] | self._register(inst, 2) << 8
        if second in LD_FROM_SPECIAL:
            return LD_FROM_SPECIAL[second] | self._register(inst, 1) << 8
        return self._compile_reg_or_value(inst, Opcode.LD_BYTE, Opcode.LD_REG)

    def _compile_add(self, inst: Instruction) -> int:
        if inst.operand_tokens[1].upper() == "I":
            return Opcode.ADD_I_VX | self._register(inst, 2) << 8
        return self._compile_reg_or_value(inst, Opcode.ADD_BYTE, Opcode.ADD_REG)

    def _compile_shift(self, inst: Instruction, base: int) -> int:
        # SHR Vx is shorthand for SHR Vx, Vx
        second = 2 if len(inst.operands) == 2 else 1
        return self._compile_reg_reg(inst, base, second=second)

    def _compile_drw(self, inst: Instruction) -> int:
        height = self._immediate(inst, 3) & NIBBLE_MASK
        return self._compile_reg_reg(inst, Opcode.DRW) | height

    # =========================================================================
    # Operand Packing
    # =========================================================================

    def _compile_reg_or_value(self, inst: Instruction, value_base: int,
                              register_base: int) -> int:
        """Pick the Vx, Vy or the Vx, byte form from the second operand."""
        if is_register_like(inst.operand_tokens[2]):
            return self._compile_reg_reg(inst, register_base)
        return self._compile_reg_value(inst, value_base)

    def _compile_reg_value(self, inst: Instruction, base: int) -> int:
        x = self._register(inst, 1)
        value = self._immediate(inst, 2) & BYTE_MASK
        return base | x << 8 | value

    def _compile_reg_reg(self, inst: Instruction, base: int, second: int = 2) -> int:
        x = self._register(inst, 1)
        y = self._register(inst, second)
        return base | x << 8 | y << 4

    # =========================================================================
    # Operand Resolution
    # =========================================================================

    def _register(self, inst: Instruction, position: int) -> int:
        """Index of the V register at operand_tokens[position]."""
        token = inst.operand_tokens[position]
        index = parse_register(token)
        if index is None:
            raise self._malformed(
                inst, position, f"expected a V register (V0-VF), got '{token}'"
            )
        return index

    def _immediate(self, inst: Instruction, position: int) -> int:
        """Value of a numeric literal; labels are not accepted."""
        operand = classify_operand(inst.operand_tokens[position])
        if operand.kind is not OperandKind.NUMBER:
            raise self._malformed(
                inst, position,
                f"expected a numeric value, got '{operand.text}'",
                hint="use '#' for hexadecimal (#1F) or plain digits for decimal (31)",
            )
        return operand.value

    def _address(self, inst: Instruction, position: int) -> int:
        """12-bit address from a numeric literal or a label."""
        return self._resolve(inst, position) & ADDRESS_MASK

    def _resolve(self, inst: Instruction, position: int) -> int:
        """Value of a numeric literal, or the address of a label."""
        operand = classify_operand(inst.operand_tokens[position])

        if operand.kind is OperandKind.NUMBER:
            return operand.value

        if operand.kind is OperandKind.LABEL:
            address = self._labels.address_of(operand.text)
            if address is None:
                raise UndefinedLabelError(
                    operand.text,
                    location=inst.operand_location(position),
                    source_line=inst.source_line,
                    instruction_index=inst.index,
                    similar_labels=self._labels.similar_names(operand.text),
                )
            return address

        raise self._malformed(
            inst, position,
            f"expected an address or label, got '{operand.text}'",
        )

    # =========================================================================
    # Validation
    # =========================================================================

    def _check_arity(self, inst: Instruction, mnemonic: Mnemonic) -> None:
        low, high = mnemonic.arity
        count = len(inst.operands)
        if low <= count <= high:
            return

        if low == high:
            expected = f"{low}"
        else:
            expected = f"{low} to {high}"
        noun = "operand" if high == 1 else "operands"

        position = min(count, high + 1)
        raise self._malformed(
            inst, position,
            f"'{mnemonic.value}' expects {expected} {noun}, got {count}",
        )

    def _malformed(self, inst: Instruction, position: int, message: str,
                   hint: Optional[str] = None) -> MalformedOperandError:
        return MalformedOperandError(
            message,
            location=inst.operand_location(position),
            hint=hint,
            source_line=inst.source_line,
            instruction_index=inst.index,
        )


# =============================================================================
# Emitter
# =============================================================================

class Emitter:
    """
    Serializes compiled instructions into the program image.

    Two-byte instructions are written big-endian (high byte first);
    one-byte instructions (DB) write only the low byte.
    """

    def __init__(self):
        self._code = bytearray()

    def emit(self, instructions: list[Instruction]) -> bytes:
        """
        Return the bytes of all instructions in order.

        Raises:
            ValueError: If an instruction has not been compiled
        """
        self._code.clear()

        for inst in instructions:
            if inst.encoded is None:
                raise ValueError(
                    f"instruction {inst.index} at line {inst.location.line} "
                    "has not been compiled"
                )
            if inst.byte_width == 2:
                self._emit_word(inst.encoded)
            else:
                self._emit_byte(inst.encoded)

        return bytes(self._code)

    def _emit_byte(self, value: int) -> None:
        """Emit a single byte to the output."""
        self._code.append(value & 0xFF)

    def _emit_word(self, value: int) -> None:
        """Emit a 16-bit word to the output (big-endian)."""
        self._code.append((value >> 8) & 0xFF)
        self._code.append(value & 0xFF)


# =============================================================================
# Listing
# =============================================================================

def build_listing(program: Program) -> str:
    """
    Render a compiled program as a listing.

    Returns:
        The listing showing addresses, generated bytes, and source lines,
        followed by the label table.
    """
    lines = []
    lines.append("CHIP-8 Assembler Listing")
    lines.append("=" * 60)
    lines.append("")
    lines.append("Addr   Code    Line  Source")
    lines.append("-" * 60)

    for inst in program.instructions:
        if inst.encoded is None:
            hex_str = ""
        elif inst.byte_width == 2:
            hex_str = f"{inst.encoded >> 8 & 0xFF:02X} {inst.encoded & 0xFF:02X}"
        else:
            hex_str = f"{inst.encoded & 0xFF:02X}"
        source = (inst.source_line or " ".join(inst.original_tokens)).strip()
        lines.append(
            f"${inst.address:04X}  {hex_str:6s}  {inst.location.line:4d}  {source}"
        )

    lines.append("")
    lines.append("Label Table")
    lines.append("-" * 30)
    for name, address in sorted(program.labels.addresses().items(),
                                key=lambda item: item[1]):
        lines.append(f"{name:20s} = ${address:04X}")

    return "\n".join(lines)
