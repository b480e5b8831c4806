import numpy as np
import pytest

from chip8vm.constants import FONTSET


def glyph_bits(digit):
    rows = FONTSET[digit * 5:digit * 5 + 5]
    return np.unpackbits(np.frombuffer(rows, dtype=np.uint8)).reshape(5, 8).astype(bool)


def screen(chip8):
    return chip8.framebuffer().reshape(32, 64)


def test_draw_digit_zero_on_blank_screen(run):
    chip8 = run(0xA000, 0xD015)
    assert np.array_equal(screen(chip8)[:5, :8], glyph_bits(0))
    assert screen(chip8).sum() == glyph_bits(0).sum()
    assert chip8.V[0xF] == 0
    assert chip8.take_redraw() is True


def test_drawing_twice_erases_and_reports_collision(run):
    chip8 = run(0xA000 + 5 * 8, 0xD015, 0xD015)
    assert not screen(chip8).any()
    assert chip8.V[0xF] == 1


def test_collision_flag_is_cleared_when_nothing_collides(chip8, run):
    chip8.V[0xF] = 1
    chip8.V[0] = 20
    run(0xA000, 0xD015)
    assert chip8.V[0xF] == 0


def test_partial_overlap_collides(chip8, run):
    # digit 1 then digit 0 over it: 0x20 (row 0 of "1") overlaps 0xF0
    run(0xA005, 0xD011, 0xA000, 0xD011)
    assert chip8.V[0xF] == 1
    assert list(screen(chip8)[0, :8]) == [True, True, False, True, False, False, False, False]


def test_origin_wraps(chip8, run):
    chip8.V[0], chip8.V[1] = 64 + 2, 32 + 1
    run(0xA000, 0xD015)
    assert np.array_equal(screen(chip8)[1:6, 2:10], glyph_bits(0))


def test_right_edge_clips(chip8, run):
    chip8.V[0] = 60
    run(0xA000 + 5 * 8, 0xD011)  # "8" top row is 0xF0
    row = screen(chip8)[0]
    assert row[60:64].all()
    assert not row[:60].any()


def test_right_edge_clips_low_bits(chip8, run):
    chip8.I = 0x300
    chip8.memory[0x300] = 0xFF
    chip8.V[0] = 62
    run(0xD011)
    row = screen(chip8)[0]
    assert row[62:].all()
    assert row.sum() == 2


def test_bottom_edge_clips(chip8, run):
    chip8.V[1] = 30
    run(0xA000, 0xD015)
    s = screen(chip8)
    assert np.array_equal(s[30:32, :8], glyph_bits(0)[:2])
    assert not s[:30].any()


def test_zero_rows_still_requests_redraw(chip8, run):
    chip8.take_redraw()
    run(0xD010)
    assert not screen(chip8).any()
    assert chip8.V[0xF] == 0
    assert chip8.take_redraw() is True


def test_clear_screen(chip8, run):
    run(0xA000, 0xD015, 0x00E0)
    assert not screen(chip8).any()
    assert chip8.pc == 0x206


@pytest.mark.parametrize("digit", range(16))
def test_glyph_draws(chip8, run, digit):
    chip8.V[2] = digit
    run(0xF229, 0xD015)
    assert np.array_equal(screen(chip8)[:5, :8], glyph_bits(digit))
