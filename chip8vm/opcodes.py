# Instruction decoding. Every 16-bit word maps to exactly one Instruction; words
# the table doesn't know decode to Op.UNKNOWN and it is up to the CPU what to do
# with them.
from enum import Enum
from typing import Iterator, NamedTuple, Tuple

from .constants import PROGRAM_START


class Op(Enum):
    CLS = "CLS"
    RET = "RET"
    JP = "JP"
    CALL = "CALL"
    SE_VX_KK = "SE_VX_KK"
    SNE_VX_KK = "SNE_VX_KK"
    SE_VX_VY = "SE_VX_VY"
    LD_VX_KK = "LD_VX_KK"
    ADD_VX_KK = "ADD_VX_KK"
    LD_VX_VY = "LD_VX_VY"
    OR = "OR"
    AND = "AND"
    XOR = "XOR"
    ADD = "ADD"
    SUB = "SUB"
    SHR = "SHR"
    SUBN = "SUBN"
    SHL = "SHL"
    SNE_VX_VY = "SNE_VX_VY"
    LD_I = "LD_I"
    JP_V0 = "JP_V0"
    RND = "RND"
    DRW = "DRW"
    SKP = "SKP"
    SKNP = "SKNP"
    LD_VX_DT = "LD_VX_DT"
    LD_VX_K = "LD_VX_K"
    LD_DT_VX = "LD_DT_VX"
    LD_ST_VX = "LD_ST_VX"
    ADD_I_VX = "ADD_I_VX"
    LD_F_VX = "LD_F_VX"
    LD_B_VX = "LD_B_VX"
    LD_I_VX = "LD_I_VX"
    LD_VX_I = "LD_VX_I"
    UNKNOWN = "UNKNOWN"


# dispatch table: (mask, pattern, op), first match wins
OPCODES = [
    (0xFFFF, 0x00E0, Op.CLS),        # 00E0 - Clear the display
    (0xFFFF, 0x00EE, Op.RET),        # 00EE - Return from a subroutine

    (0xF000, 0x1000, Op.JP),         # 1nnn - Jump to address nnn
    (0xF000, 0x2000, Op.CALL),       # 2nnn - Call subroutine at nnn
    (0xF000, 0x3000, Op.SE_VX_KK),   # 3xkk - Skip next instruction if Vx == kk
    (0xF000, 0x4000, Op.SNE_VX_KK),  # 4xkk - Skip next instruction if Vx != kk
    (0xF00F, 0x5000, Op.SE_VX_VY),   # 5xy0 - Skip next instruction if Vx == Vy
    (0xF000, 0x6000, Op.LD_VX_KK),   # 6xkk - Set Vx = kk
    (0xF000, 0x7000, Op.ADD_VX_KK),  # 7xkk - Set Vx = Vx + kk

    (0xF00F, 0x8000, Op.LD_VX_VY),   # 8xy0 - Set Vx = Vy
    (0xF00F, 0x8001, Op.OR),         # 8xy1 - Set Vx = Vx OR Vy
    (0xF00F, 0x8002, Op.AND),        # 8xy2 - Set Vx = Vx AND Vy
    (0xF00F, 0x8003, Op.XOR),        # 8xy3 - Set Vx = Vx XOR Vy
    (0xF00F, 0x8004, Op.ADD),        # 8xy4 - Set Vx = Vx + Vy, VF = carry
    (0xF00F, 0x8005, Op.SUB),        # 8xy5 - Set Vx = Vx - Vy, VF = NOT borrow
    (0xF00F, 0x8006, Op.SHR),        # 8xy6 - Set Vx = Vx SHR 1
    (0xF00F, 0x8007, Op.SUBN),       # 8xy7 - Set Vx = Vy - Vx, VF = NOT borrow
    (0xF00F, 0x800E, Op.SHL),        # 8xyE - Set Vx = Vx SHL 1

    (0xF00F, 0x9000, Op.SNE_VX_VY),  # 9xy0 - Skip next instruction if Vx != Vy
    (0xF000, 0xA000, Op.LD_I),       # Annn - Set I = nnn
    (0xF000, 0xB000, Op.JP_V0),      # Bnnn - Jump to nnn + V0
    (0xF000, 0xC000, Op.RND),        # Cxkk - Set Vx = random byte AND kk
    (0xF000, 0xD000, Op.DRW),        # Dxyn - Draw n-byte sprite at (Vx, Vy), VF = collision

    (0xF0FF, 0xE09E, Op.SKP),        # Ex9E - Skip next instruction if key Vx is down
    (0xF0FF, 0xE0A1, Op.SKNP),       # ExA1 - Skip next instruction if key Vx is up

    (0xF0FF, 0xF007, Op.LD_VX_DT),   # Fx07 - Set Vx = delay timer
    (0xF0FF, 0xF00A, Op.LD_VX_K),    # Fx0A - Wait for a key press, store it in Vx
    (0xF0FF, 0xF015, Op.LD_DT_VX),   # Fx15 - Set delay timer = Vx
    (0xF0FF, 0xF018, Op.LD_ST_VX),   # Fx18 - Set sound timer = Vx
    (0xF0FF, 0xF01E, Op.ADD_I_VX),   # Fx1E - Set I = I + Vx, VF = overflow
    (0xF0FF, 0xF029, Op.LD_F_VX),    # Fx29 - Set I = glyph address of digit Vx
    (0xF0FF, 0xF033, Op.LD_B_VX),    # Fx33 - Store BCD of Vx at I, I+1, I+2
    (0xF0FF, 0xF055, Op.LD_I_VX),    # Fx55 - Store V0..Vx at I
    (0xF0FF, 0xF065, Op.LD_VX_I),    # Fx65 - Read V0..Vx from I
]


# how each op is written out in a listing
_FORMATS = {
    Op.CLS: "CLS",
    Op.RET: "RET",
    Op.JP: "JP 0x{nnn:03X}",
    Op.CALL: "CALL 0x{nnn:03X}",
    Op.SE_VX_KK: "SE V{x:X}, 0x{kk:02X}",
    Op.SNE_VX_KK: "SNE V{x:X}, 0x{kk:02X}",
    Op.SE_VX_VY: "SE V{x:X}, V{y:X}",
    Op.LD_VX_KK: "LD V{x:X}, 0x{kk:02X}",
    Op.ADD_VX_KK: "ADD V{x:X}, 0x{kk:02X}",
    Op.LD_VX_VY: "LD V{x:X}, V{y:X}",
    Op.OR: "OR V{x:X}, V{y:X}",
    Op.AND: "AND V{x:X}, V{y:X}",
    Op.XOR: "XOR V{x:X}, V{y:X}",
    Op.ADD: "ADD V{x:X}, V{y:X}",
    Op.SUB: "SUB V{x:X}, V{y:X}",
    Op.SHR: "SHR V{x:X}",
    Op.SUBN: "SUBN V{x:X}, V{y:X}",
    Op.SHL: "SHL V{x:X}",
    Op.SNE_VX_VY: "SNE V{x:X}, V{y:X}",
    Op.LD_I: "LD I, 0x{nnn:03X}",
    Op.JP_V0: "JP V0, 0x{nnn:03X}",
    Op.RND: "RND V{x:X}, 0x{kk:02X}",
    Op.DRW: "DRW V{x:X}, V{y:X}, {n}",
    Op.SKP: "SKP V{x:X}",
    Op.SKNP: "SKNP V{x:X}",
    Op.LD_VX_DT: "LD V{x:X}, DT",
    Op.LD_VX_K: "LD V{x:X}, K",
    Op.LD_DT_VX: "LD DT, V{x:X}",
    Op.LD_ST_VX: "LD ST, V{x:X}",
    Op.ADD_I_VX: "ADD I, V{x:X}",
    Op.LD_F_VX: "LD F, V{x:X}",
    Op.LD_B_VX: "LD B, V{x:X}",
    Op.LD_I_VX: "LD [I], V{x:X}",
    Op.LD_VX_I: "LD V{x:X}, [I]",
    Op.UNKNOWN: "DW 0x{word:04X}",
}


class Instruction(NamedTuple):
    word: int
    op: Op
    x: int
    y: int
    n: int
    kk: int
    nnn: int

    def __str__(self):
        return _FORMATS[self.op].format(**self._asdict())


def decode(word: int) -> Instruction:
    """Split a 16-bit instruction word into its fields and look up its op."""
    if not 0 <= word <= 0xFFFF:
        raise ValueError("Instruction word out of range: %r" % (word,))

    op = Op.UNKNOWN
    for mask, pattern, candidate in OPCODES:
        if (word & mask) == pattern:
            op = candidate
            break

    return Instruction(
        word=word,
        op=op,
        x=(word >> 8) & 0xF,
        y=(word >> 4) & 0xF,
        n=word & 0xF,
        kk=word & 0xFF,
        nnn=word & 0x0FFF,
    )


def disassemble(program, origin: int = PROGRAM_START) -> Iterator[Tuple[int, Instruction]]:
    """Walk a program two bytes at a time. A trailing odd byte is ignored."""
    data = bytes(program)
    for offset in range(0, len(data) - 1, 2):
        yield origin + offset, decode((data[offset] << 8) | data[offset + 1])
