# Machine constants for the CHIP-8 interpreter.
# CPU - Cowgod's CHIP8 Technical reference http://devernay.free.fr/hacks/chip8/C8TECH10.HTM#0.0

MEMORY_SIZE = 4096      # max 4096 bytes
ADDRESS_MASK = 0xFFF    # 12-bit address space
PROGRAM_START = 0x200   # programs are loaded (and PC starts) here

WIDTH, HEIGHT = 64, 32
SCREEN_SIZE = WIDTH * HEIGHT
SPRITE_WIDTH = 8

REGISTER_COUNT = 16     # V0..VF
FLAG = 0xF              # VF doubles as carry/borrow/collision flag
STACK_DEPTH = 16
KEY_COUNT = 16

# Cycles a reported key press stays visible before it expires unread
KEY_CYCLE_DURATION = 100

GLYPH_SIZE = 5

# set fonts (binary pixel patterns)
FONTSET = bytes([
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
])  # notice 80 bytes
