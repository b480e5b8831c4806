import pytest

from chip8vm.constants import KEY_CYCLE_DURATION


def press(chip8, *keys):
    chip8.set_keys([k in keys for k in range(16)])


def test_set_keys_arms_only_pressed_keys(chip8):
    press(chip8, 3, 0xF)
    assert chip8.keys[3] == KEY_CYCLE_DURATION
    assert chip8.keys[0xF] == KEY_CYCLE_DURATION
    assert chip8.keys.sum() == 2 * KEY_CYCLE_DURATION


def test_set_keys_rejects_wrong_length(chip8):
    with pytest.raises(ValueError):
        chip8.set_keys([True] * 15)


def test_press_expires_after_duration(run, chip8):
    press(chip8, 4)
    run(*([0x6000] * (KEY_CYCLE_DURATION - 1)))
    assert chip8.keys[4] == 1
    chip8.step()
    assert chip8.keys[4] == 0
    chip8.step()
    assert chip8.keys[4] == 0


def test_new_press_rearms_and_leaves_others_aging(run, chip8):
    press(chip8, 1, 2)
    run(*([0x6000] * 10))
    press(chip8, 1)
    assert chip8.keys[1] == KEY_CYCLE_DURATION
    assert chip8.keys[2] == KEY_CYCLE_DURATION - 10


def test_skip_if_down_consumes_the_press(chip8):
    chip8.V[0] = 5
    chip8.load(bytes([0xE0, 0x9E, 0x00, 0x00, 0xE0, 0x9E]))
    press(chip8, 5)
    chip8.step()
    assert chip8.pc == 0x204
    assert chip8.keys[5] == 0
    chip8.step()
    assert chip8.pc == 0x206


def test_skip_if_down_without_press(chip8, run):
    chip8.V[0] = 5
    run(0xE09E)
    assert chip8.pc == 0x202


def test_skip_if_up_when_up_does_not_touch_keys(chip8, run):
    chip8.V[0] = 5
    press(chip8, 6)
    run(0xE0A1)
    assert chip8.pc == 0x204
    assert chip8.keys[6] == KEY_CYCLE_DURATION - 1


def test_skip_if_up_when_down_consumes(chip8, run):
    chip8.V[0] = 5
    press(chip8, 5)
    run(0xE0A1)
    assert chip8.pc == 0x202
    assert chip8.keys[5] == 0


def test_key_index_is_low_nibble(chip8, run):
    chip8.V[0] = 0x15
    press(chip8, 5)
    run(0xE09E)
    assert chip8.pc == 0x204


def test_wait_for_key_stalls_without_press(chip8, run):
    chip8.delay = 10
    run(0xF30A, steps=3)
    assert chip8.pc == 0x200
    assert chip8.delay == 7


def test_wait_for_key_takes_lowest_armed_key(chip8, run):
    run(0xF30A)
    press(chip8, 7, 2)
    chip8.step()
    assert chip8.pc == 0x202
    assert chip8.V[3] == 2
    assert chip8.keys[2] == 0
    assert chip8.keys[7] == KEY_CYCLE_DURATION - 1
