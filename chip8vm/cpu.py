# CHIP8 Virtual Machine Steps:
# Input - 16 keys, each press is held in a countdown latch until an opcode reads it.
# Output - 64x32 framebuffer (pixels are either on or off) & the sound timer level.
# CPU - Cowgod's CHIP8 Technical reference http://devernay.free.fr/hacks/chip8/C8TECH10.HTM#0.0
# Memory - 4096 bytes: built-in digit glyphs at 0x000, the loaded program from 0x200.
#----------------------------------------------------------------------------------------------
# One call to step() is one full cycle: fetch, decode, execute, then age the timers
# and the key latches. The machine never looks at a clock, whoever drives it decides
# how often step() runs and when to pull the framebuffer and the sound level.
#----------------------------------------------------------------------------------------------
import random

import numpy as np

from .constants import (
    ADDRESS_MASK, FLAG, FONTSET, GLYPH_SIZE, HEIGHT, KEY_COUNT, KEY_CYCLE_DURATION,
    MEMORY_SIZE, PROGRAM_START, REGISTER_COUNT, SPRITE_WIDTH, STACK_DEPTH, WIDTH,
)
from .errors import ProgramTooLargeError, StackOverflowError, StackUnderflowError, UnknownOpcodeError
from .log import error, log
from .opcodes import Op, decode


class Chip8:
    """The interpreter engine.

    strict: raise UnknownOpcodeError instead of logging and stalling on words
        that decode to nothing.
    legacy_shift: make 8xyE behave like 8xy6 (VF = low bit, shift right), which
        some programs were tuned against. Off means a real left shift.
    rng: anything with randrange(), used by Cxkk.
    """

    def __init__(self, strict=False, legacy_shift=False, rng=None):
        self.strict = strict
        self.legacy_shift = legacy_shift
        self.rng = rng if rng is not None else random.Random()
        self.cycle_count = 0
        self.frame_count = 0
        self.setup_funcmap()
        self.initialize()

    # ---- Reset / Load ----
    def initialize(self):
        self.memory = bytearray(MEMORY_SIZE)
        self.memory[:len(FONTSET)] = FONTSET
        self.V = [0] * REGISTER_COUNT
        self.I = 0
        self.pc = PROGRAM_START
        self.stack = np.zeros(STACK_DEPTH, dtype=np.uint16)
        self.sp = 0
        self.delay = 0
        self.sound = 0
        self.keys = np.zeros(KEY_COUNT, dtype=np.uint8)
        self.vram = np.zeros((HEIGHT, WIDTH), dtype=np.bool_)
        self.should_draw = True
        self._dirty = False

    def load(self, program):
        """Copy program bytes to 0x200. Call initialize() first."""
        data = bytes(program)
        capacity = MEMORY_SIZE - PROGRAM_START
        if len(data) > capacity:
            raise ProgramTooLargeError(len(data), capacity)
        self.memory[PROGRAM_START:PROGRAM_START + len(data)] = data
        log("Loaded program:", len(data), "bytes")

    # ---- Input ----
    def set_keys(self, pressed):
        """Arm the latch of every key reported down. Other keys keep aging."""
        pressed = np.asarray(pressed, dtype=np.bool_)
        if pressed.shape != (KEY_COUNT,):
            raise ValueError("Expected %d key states, got shape %s" % (KEY_COUNT, pressed.shape))
        self.keys[pressed] = KEY_CYCLE_DURATION

    # ---- Output ----
    def take_redraw(self):
        flag = self.should_draw
        self.should_draw = False
        return flag

    def framebuffer(self):
        # flatten() copies, nobody outside gets a view into vram
        return self.vram.flatten()

    def sound_level(self):
        return int(self.sound)

    # ---- Cycle ----
    def step(self):
        """Run one instruction and age timers and keys.

        Returns True when the framebuffer changed during this cycle.
        """
        self.cycle_count += 1
        self._dirty = False

        pc = self.pc & ADDRESS_MASK
        word = (self.memory[pc] << 8) | self.memory[(pc + 1) & ADDRESS_MASK]
        ins = decode(word)
        log("%03X: %04X  %s" % (pc, word, ins))
        self.funcmap[ins.op](ins)

        # timers
        if self.delay > 0:
            self.delay -= 1
        if self.sound > 0:
            self.sound -= 1

        # key latches
        self.keys[self.keys > 0] -= 1

        return self._dirty

    def _next(self):
        self.pc = (self.pc + 2) & 0xFFFF

    def _skip_if(self, condition):
        self.pc = (self.pc + (4 if condition else 2)) & 0xFFFF

    def _screen_changed(self):
        self.should_draw = True
        self._dirty = True
        self.frame_count += 1

    # ---- Opcode function map ----
    def setup_funcmap(self):
        self.funcmap = {
            Op.CLS: self.op_CLS,
            Op.RET: self.op_RET,
            Op.JP: self.op_JP,
            Op.CALL: self.op_CALL,
            Op.SE_VX_KK: self.op_SE_Vx_kk,
            Op.SNE_VX_KK: self.op_SNE_Vx_kk,
            Op.SE_VX_VY: self.op_SE_Vx_Vy,
            Op.LD_VX_KK: self.op_LD_Vx_kk,
            Op.ADD_VX_KK: self.op_ADD_Vx_kk,
            Op.LD_VX_VY: self.op_LD_Vx_Vy,
            Op.OR: self.op_OR,
            Op.AND: self.op_AND,
            Op.XOR: self.op_XOR,
            Op.ADD: self.op_ADD,
            Op.SUB: self.op_SUB,
            Op.SHR: self.op_SHR,
            Op.SUBN: self.op_SUBN,
            Op.SHL: self.op_SHL,
            Op.SNE_VX_VY: self.op_SNE_Vx_Vy,
            Op.LD_I: self.op_LD_I,
            Op.JP_V0: self.op_JP_V0,
            Op.RND: self.op_RND,
            Op.DRW: self.op_DRW,
            Op.SKP: self.op_SKP,
            Op.SKNP: self.op_SKNP,
            Op.LD_VX_DT: self.op_LD_Vx_DT,
            Op.LD_VX_K: self.op_WAITKEY,
            Op.LD_DT_VX: self.op_LD_DT_Vx,
            Op.LD_ST_VX: self.op_LD_ST_Vx,
            Op.ADD_I_VX: self.op_ADD_I_Vx,
            Op.LD_F_VX: self.op_FONT,
            Op.LD_B_VX: self.op_BCD,
            Op.LD_I_VX: self.op_STORE,
            Op.LD_VX_I: self.op_LOAD,
            Op.UNKNOWN: self.op_UNKNOWN,
        }

    # ---- Opcode Handlers ----

    def op_UNKNOWN(self, ins):
        if self.strict:
            raise UnknownOpcodeError(ins.word, self.pc)
        # PC stays put, so a stray word gets reported again next cycle
        error("Unknown opcode: %04X at 0x%03X" % (ins.word, self.pc))

    # 00E0 - CLS
    def op_CLS(self, ins):
        self.vram[:] = False
        self._screen_changed()
        self._next()

    # 00EE - RET, resume after the CALL that pushed the address
    def op_RET(self, ins):
        if self.sp == 0:
            raise StackUnderflowError(self.pc)
        self.sp -= 1
        self.pc = int(self.stack[self.sp]) + 2

    # 1nnn - JP addr
    def op_JP(self, ins):
        self.pc = ins.nnn

    # 2nnn - CALL addr
    def op_CALL(self, ins):
        if self.sp >= STACK_DEPTH:
            raise StackOverflowError(self.pc)
        self.stack[self.sp] = self.pc
        self.sp += 1
        self.pc = ins.nnn

    # 3xkk - SE Vx, byte
    def op_SE_Vx_kk(self, ins):
        self._skip_if(self.V[ins.x] == ins.kk)

    # 4xkk - SNE Vx, byte
    def op_SNE_Vx_kk(self, ins):
        self._skip_if(self.V[ins.x] != ins.kk)

    # 5xy0 - SE Vx, Vy
    def op_SE_Vx_Vy(self, ins):
        self._skip_if(self.V[ins.x] == self.V[ins.y])

    # 6xkk - LD Vx, byte
    def op_LD_Vx_kk(self, ins):
        self.V[ins.x] = ins.kk
        self._next()

    # 7xkk - ADD Vx, byte (wraps, VF untouched)
    def op_ADD_Vx_kk(self, ins):
        self.V[ins.x] = (self.V[ins.x] + ins.kk) & 0xFF
        self._next()

    # 8xy0 - LD Vx, Vy
    def op_LD_Vx_Vy(self, ins):
        self.V[ins.x] = self.V[ins.y]
        self._next()

    # 8xy1 - OR Vx, Vy
    def op_OR(self, ins):
        self.V[ins.x] |= self.V[ins.y]
        self._next()

    # 8xy2 - AND Vx, Vy
    def op_AND(self, ins):
        self.V[ins.x] &= self.V[ins.y]
        self._next()

    # 8xy3 - XOR Vx, Vy
    def op_XOR(self, ins):
        self.V[ins.x] ^= self.V[ins.y]
        self._next()

    # The flag opcodes below write VF after the result, so VF always ends up
    # holding the flag even when x is F.

    # 8xy4 - ADD Vx, Vy, VF = carry
    def op_ADD(self, ins):
        total = self.V[ins.x] + self.V[ins.y]
        self.V[ins.x] = total & 0xFF
        self.V[FLAG] = 1 if total > 0xFF else 0
        self._next()

    # 8xy5 - SUB Vx, Vy, VF = NOT borrow
    def op_SUB(self, ins):
        vx, vy = self.V[ins.x], self.V[ins.y]
        self.V[ins.x] = (vx - vy) & 0xFF
        self.V[FLAG] = 1 if vx > vy else 0
        self._next()

    # 8xy6 - SHR Vx
    def op_SHR(self, ins):
        vx = self.V[ins.x]
        self.V[ins.x] = vx >> 1
        self.V[FLAG] = vx & 1
        self._next()

    # 8xy7 - SUBN Vx, Vy, VF = NOT borrow
    def op_SUBN(self, ins):
        vx, vy = self.V[ins.x], self.V[ins.y]
        self.V[ins.x] = (vy - vx) & 0xFF
        self.V[FLAG] = 1 if vy > vx else 0
        self._next()

    # 8xyE - SHL Vx
    def op_SHL(self, ins):
        vx = self.V[ins.x]
        if self.legacy_shift:
            self.V[ins.x] = vx >> 1
            self.V[FLAG] = vx & 1
        else:
            self.V[ins.x] = (vx << 1) & 0xFF
            self.V[FLAG] = (vx >> 7) & 1
        self._next()

    # 9xy0 - SNE Vx, Vy
    def op_SNE_Vx_Vy(self, ins):
        self._skip_if(self.V[ins.x] != self.V[ins.y])

    # Annn - LD I, addr
    def op_LD_I(self, ins):
        self.I = ins.nnn
        self._next()

    # Bnnn - JP V0, addr
    def op_JP_V0(self, ins):
        self.pc = ins.nnn + self.V[0]

    # Cxkk - RND Vx, byte
    def op_RND(self, ins):
        self.V[ins.x] = self.rng.randrange(256) & ins.kk
        self._next()

    # Dxyn - DRW Vx, Vy, nibble
    def op_DRW(self, ins):
        # the origin wraps, whatever hangs off the right or bottom edge is clipped
        x = self.V[ins.x] % WIDTH
        y = self.V[ins.y] % HEIGHT
        rows = min(ins.n, HEIGHT - y)
        cols = min(SPRITE_WIDTH, WIDTH - x)

        sprite = np.array(
            [self.memory[(self.I + row) & ADDRESS_MASK] for row in range(rows)],
            dtype=np.uint8,
        )
        bits = np.unpackbits(sprite).reshape(rows, SPRITE_WIDTH)[:, :cols].astype(np.bool_)

        region = self.vram[y:y + rows, x:x + cols]
        collision = bool(np.any(region & bits))
        region ^= bits

        self.V[FLAG] = 1 if collision else 0
        self._screen_changed()
        self._next()

    # Ex9E - SKP Vx, reading a down key consumes it
    def op_SKP(self, ins):
        key = self.V[ins.x] & 0xF
        if self.keys[key] > 0:
            self.keys[key] = 0
            self._skip_if(True)
        else:
            self._skip_if(False)

    # ExA1 - SKNP Vx, only the fall-through (key down) path consumes
    def op_SKNP(self, ins):
        key = self.V[ins.x] & 0xF
        if self.keys[key] == 0:
            self._skip_if(True)
        else:
            self.keys[key] = 0
            self._skip_if(False)

    # Fx07 - LD Vx, DT
    def op_LD_Vx_DT(self, ins):
        self.V[ins.x] = self.delay
        self._next()

    # Fx0A - LD Vx, K: stall (PC will re-execute this instr) until a key is armed
    def op_WAITKEY(self, ins):
        armed = np.flatnonzero(self.keys)
        if armed.size == 0:
            return
        key = int(armed[0])
        self.keys[key] = 0
        self.V[ins.x] = key
        self._next()

    # Fx15 - LD DT, Vx
    def op_LD_DT_Vx(self, ins):
        self.delay = self.V[ins.x]
        self._next()

    # Fx18 - LD ST, Vx
    def op_LD_ST_Vx(self, ins):
        self.sound = self.V[ins.x]
        self._next()

    # Fx1E - ADD I, Vx, VF = 1 when I runs past 0xFFF
    def op_ADD_I_Vx(self, ins):
        total = self.I + self.V[ins.x]
        self.I = total & 0xFFFF
        self.V[FLAG] = 1 if total > ADDRESS_MASK else 0
        self._next()

    # Fx29 - LD F, Vx
    def op_FONT(self, ins):
        self.I = (self.V[ins.x] & 0xF) * GLYPH_SIZE
        self._next()

    # Fx33 - LD B, Vx
    def op_BCD(self, ins):
        value = self.V[ins.x]
        self.memory[self.I & ADDRESS_MASK] = value // 100
        self.memory[(self.I + 1) & ADDRESS_MASK] = (value // 10) % 10
        self.memory[(self.I + 2) & ADDRESS_MASK] = value % 10
        self._next()

    # Fx55 - LD [I], Vx
    def op_STORE(self, ins):
        for i in range(ins.x + 1):
            self.memory[(self.I + i) & ADDRESS_MASK] = self.V[i]
        self._next()

    # Fx65 - LD Vx, [I]
    def op_LOAD(self, ins):
        for i in range(ins.x + 1):
            self.V[i] = self.memory[(self.I + i) & ADDRESS_MASK]
        self._next()
