import logging

import numpy as np

from fry8.errors import AddressOutOfBoundsError, RomTooLargeError

logger = logging.getLogger(__name__)

# Constants
# one byte of slack past the nominal 4096 so a fetch at 0xFFE stays in range
MEMORY_SIZE = 4097
PROGRAM_START = 0x200
MAX_ROM_SIZE = 0xDFF
GLYPH_SIZE = 5

# Font Set for CHIP-8 (each character is 5 bytes, representing 4x5 pixels)
# fmt: off
FONT_SET = np.array(
    [
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
        0xF0, 0x80, 0xF0, 0x80, 0x80   # F
    ],
    dtype=np.uint8,
)
# fmt: on

# start address of the built-in glyph for each hex digit
DIGIT_SPRITES = {digit: digit * GLYPH_SIZE for digit in range(16)}


class Memory:
    def __init__(self):
        self.cells = np.zeros(MEMORY_SIZE, dtype=np.uint8)
        self.cells[: len(FONT_SET)] = FONT_SET

    def _check(self, address: int, length: int = 1):
        if address < 0 or address + length > MEMORY_SIZE:
            raise AddressOutOfBoundsError(address)

    def read(self, address: int) -> int:
        self._check(address)
        return int(self.cells[address])

    def write(self, address: int, value: int):
        self._check(address)
        self.cells[address] = value & 0xFF

    def read_block(self, address: int, length: int) -> bytes:
        self._check(address, length)
        return self.cells[address : address + length].tobytes()

    def read_word(self, address: int) -> int:
        # opcodes are stored big-endian
        high, low = self.read_block(address, 2)
        return high << 8 | low

    def load_rom(self, rom: bytes):
        """Copy a program to PROGRAM_START.

        Raises
        ------
        RomTooLargeError
            If the program does not fit between PROGRAM_START and 0xFFF.
            Memory is left untouched in that case.
        """
        if len(rom) > MAX_ROM_SIZE:
            raise RomTooLargeError(len(rom) - MAX_ROM_SIZE)
        program = np.frombuffer(bytes(rom), dtype=np.uint8)
        self.cells[PROGRAM_START : PROGRAM_START + len(program)] = program
        logger.info("Loaded %d byte program at 0x%03X", len(program), PROGRAM_START)
