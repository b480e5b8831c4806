import random

import pytest

from chip8vm import Chip8
from chip8vm import log as chip8_log


def words_to_bytes(words):
    return b"".join(w.to_bytes(2, "big") for w in words)


@pytest.fixture
def chip8():
    machine = Chip8(rng=random.Random(0))
    machine.initialize()
    return machine


@pytest.fixture
def run(chip8):
    """Load 16-bit words at 0x200 and step once per word (or `steps` times)."""

    def _run(*words, steps=None):
        chip8.load(words_to_bytes(words))
        for _ in range(len(words) if steps is None else steps):
            chip8.step()
        return chip8

    return _run


@pytest.fixture(autouse=True)
def quiet_logs():
    yield
    chip8_log.set_verbose(False)
