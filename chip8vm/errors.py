class Chip8Error(Exception):
    """Base class for interpreter faults."""


class UnknownOpcodeError(Chip8Error):
    def __init__(self, word, pc):
        super().__init__("Unknown opcode: %04X at 0x%03X" % (word, pc))
        self.word = word
        self.pc = pc


class StackOverflowError(Chip8Error):
    def __init__(self, pc):
        super().__init__("Stack overflow on CALL at 0x%03X" % pc)
        self.pc = pc


class StackUnderflowError(Chip8Error):
    def __init__(self, pc):
        super().__init__("Stack underflow on RET at 0x%03X" % pc)
        self.pc = pc


class ProgramTooLargeError(Chip8Error, ValueError):
    def __init__(self, size, capacity):
        super().__init__("Program is %d bytes, only %d fit in memory" % (size, capacity))
        self.size = size
        self.capacity = capacity
