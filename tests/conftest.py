import random

import pytest

from chip8emu import Engine
from chip8emu.config import PROGRAM_START
from chip8emu import debug


@pytest.fixture(autouse=True)
def quiet_logs():
    debug.set_logs(False)
    yield
    debug.set_logs(False)


@pytest.fixture
def engine():
    return Engine(rng=random.Random(1234))


@pytest.fixture
def program():
    """Load 16-bit opcodes at 0x200 and return the engine."""
    def load(engine, *words):
        engine.load(b"".join(w.to_bytes(2, "big") for w in words))
        return engine
    return load


@pytest.fixture
def run():
    """Load opcodes at 0x200, jump there and step once per opcode."""
    def execute(engine, *words):
        engine.load(b"".join(w.to_bytes(2, "big") for w in words))
        engine.registers.pc = PROGRAM_START
        result = None
        for _ in words:
            result = engine.step()
        return result
    return execute


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()
