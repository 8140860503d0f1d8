import pytest

from fry8.chip8 import Chip8


@pytest.fixture
def chip8():
    return Chip8(seed=666)


@pytest.fixture
def load_program(chip8):
    """Load the given opcodes as a ROM and return the machine."""

    def _load(*opcodes):
        rom = b"".join(op.to_bytes(2, "big") for op in opcodes)
        chip8.load_rom(rom)
        return chip8

    return _load


def run_steps(chip8, count):
    directive = None
    for _ in range(count):
        directive = chip8.step()
    return directive
