import numpy as np

from fry8.errors import AddressOutOfBoundsError, InvalidRegisterError

REGISTER_COUNT = 16
STACK_SIZE = 16
FLAG = 0xF


class Registers:
    """V0 to VF plus the special purpose registers.

    The general purpose registers live in a private array; every access goes
    through `get_vx` / `set_vx` so a bad index is reported instead of
    silently wrapping around.
    """

    def __init__(self):
        self._v = np.zeros(REGISTER_COUNT, dtype=np.uint8)  # V0 to VF
        self.i = 0  # Index register
        self.program_counter = 0
        self.stack_pointer = 0
        self.delay_timer = 0
        self.sound_timer = 0

    def get_vx(self, reg: int) -> int:
        if not 0 <= reg < REGISTER_COUNT:
            raise InvalidRegisterError(reg)
        return int(self._v[reg])

    def set_vx(self, reg: int, value: int):
        if not 0 <= reg < REGISTER_COUNT:
            raise InvalidRegisterError(reg)
        self._v[reg] = value & 0xFF

    @property
    def vf(self) -> int:
        return self.get_vx(FLAG)

    @vf.setter
    def vf(self, value: int):
        self.set_vx(FLAG, value)

    def tick_timers(self):
        if self.delay_timer != 0:
            self.delay_timer -= 1
        if self.sound_timer != 0:
            self.sound_timer -= 1

    def __str__(self):
        v_regs = " ".join(f"V{x:X}={int(val):02X}" for x, val in enumerate(self._v))
        return (
            f"PC={self.program_counter:04X} I={self.i:04X} "
            f"SP={self.stack_pointer} DT={self.delay_timer} "
            f"ST={self.sound_timer}\n{v_regs}"
        )


class Stack:
    """Return addresses pushed by Call and popped by Return."""

    def __init__(self, size=STACK_SIZE):
        self.size = size
        self.addresses: list[int] = []

    def push(self, address: int):
        if len(self.addresses) >= self.size:
            raise AddressOutOfBoundsError(address)
        self.addresses.append(address)

    def pop(self) -> int:
        if not self.addresses:
            raise AddressOutOfBoundsError()
        return self.addresses.pop()

    def __len__(self):
        return len(self.addresses)

    def __str__(self):
        return "[" + ", ".join(f"{addr:04X}" for addr in self.addresses) + "]"
