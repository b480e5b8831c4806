from .cpu import Chip8
from .errors import (
    Chip8Error, ProgramTooLargeError, StackOverflowError, StackUnderflowError, UnknownOpcodeError,
)
from .opcodes import Instruction, Op, decode, disassemble

__version__ = "0.1.0"

__all__ = [
    "Chip8",
    "Chip8Error",
    "Instruction",
    "Op",
    "ProgramTooLargeError",
    "StackOverflowError",
    "StackUnderflowError",
    "UnknownOpcodeError",
    "decode",
    "disassemble",
]
