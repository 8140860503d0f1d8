import logging
from pathlib import Path

import numpy as np

from fry8 import instructions as ins
from fry8.display import CLEAR_SCREEN, NO_OP, Directive, Output, Sprite
from fry8.errors import AddressOutOfBoundsError, InvalidInstructionError
from fry8.instructions import decode
from fry8.keyboard import Keyboard
from fry8.memory import PROGRAM_START, Memory
from fry8.registers import Registers, Stack

logger = logging.getLogger(__name__)

# last address a fetch may start from
PROGRAM_END = 0xFFF


def trailing_ones(value: int) -> int:
    count = 0
    while value & 1:
        count += 1
        value >>= 1
    return count


def leading_ones(value: int, width: int = 8) -> int:
    count = 0
    mask = 1 << (width - 1)
    while mask and value & mask:
        count += 1
        mask >>= 1
    return count


class Chip8:
    def __init__(self, seed=None):
        self.memory = Memory()
        self.display = Output()
        self.registers = Registers()
        self.stack = Stack()
        self.keyboard = Keyboard()
        self.rom_loaded = False

        self.rng = np.random.default_rng(seed)

        self.instruction_methods = {
            ins.Sys: self.op_sys,
            ins.ClearScreen: self.op_clear_screen,
            ins.Return: self.op_return,
            ins.Jump: self.op_jump,
            ins.Call: self.op_call,
            ins.SkipEqualByte: self.op_skip_equal_byte,
            ins.SkipNotEqualByte: self.op_skip_not_equal_byte,
            ins.SkipEqualReg: self.op_skip_equal_reg,
            ins.LoadByte: self.op_load_byte,
            ins.AddByte: self.op_add_byte,
            ins.LoadReg: self.op_load_reg,
            ins.Or: self.op_or,
            ins.And: self.op_and,
            ins.Xor: self.op_xor,
            ins.AddReg: self.op_add_reg,
            ins.SubReg: self.op_sub_reg,
            ins.ShiftRight: self.op_shift_right,
            ins.SubN: self.op_sub_n,
            ins.ShiftLeft: self.op_shift_left,
            ins.SkipNotEqualReg: self.op_skip_not_equal_reg,
            ins.LoadI: self.op_load_i,
            ins.JumpAdd: self.op_jump_add,
            ins.Rand: self.op_rand,
            ins.Draw: self.op_draw,
            ins.SkipKey: self.op_skip_key,
            ins.SkipNotKey: self.op_skip_not_key,
            ins.GetDelay: self.op_get_delay,
            ins.WaitKey: self.op_wait_key,
            ins.SetDelay: self.op_set_delay,
            ins.SetSound: self.op_set_sound,
            ins.AddI: self.op_add_i,
            ins.SetISprite: self.op_set_i_sprite,
            ins.StoreBCD: self.op_store_bcd,
            ins.StoreRegI: self.op_store_reg_i,
            ins.LoadRegI: self.op_load_reg_i,
            ins.Invalid: self.op_invalid,
        }

    def __str__(self):
        return f"{self.registers}\nSTACK:{self.stack}"

    def load(self, rom_path):
        # I/O errors are left for the caller to report
        self.load_rom(Path(rom_path).read_bytes())

    def load_rom(self, rom: bytes):
        self.memory.load_rom(rom)
        self.registers.program_counter = PROGRAM_START
        self.rom_loaded = True

    def fetch(self) -> int:
        pc = self.registers.program_counter
        if pc >= PROGRAM_END or pc < PROGRAM_START:
            raise AddressOutOfBoundsError(pc)
        opcode = self.memory.read_word(pc)
        self.registers.program_counter += 2
        return opcode

    def exec(self, instruction: ins.Instruction) -> Directive:
        method = self.instruction_methods[type(instruction)]
        directive = method(instruction)
        return NO_OP if directive is None else directive

    def step(self) -> Directive:
        """Fetch, decode, tick the timers and execute one instruction."""
        address = self.registers.program_counter
        instruction = decode(self.fetch())
        logger.debug("%04X: %r", address, instruction)
        self.registers.tick_timers()
        return self.exec(instruction)

    def _skip_if(self, condition: bool):
        if condition:
            self.registers.program_counter = (self.registers.program_counter + 2) & 0xFFFF

    def op_sys(self, instruction):
        # Machine code routines are ignored
        pass

    def op_clear_screen(self, instruction):
        self.display.clear()
        return CLEAR_SCREEN

    def op_return(self, instruction):
        # Return from subroutine
        self.registers.program_counter = self.stack.pop()
        self.registers.stack_pointer -= 1

    def op_jump(self, instruction):
        self.registers.program_counter = instruction.addr

    def op_call(self, instruction):
        # Call subroutine, pc already points at the next instruction
        self.stack.push(self.registers.program_counter)
        self.registers.stack_pointer += 1
        self.registers.program_counter = instruction.addr

    def op_skip_equal_byte(self, instruction):
        # Skip next instruction if Vx == kk
        self._skip_if(self.registers.get_vx(instruction.x) == instruction.byte)

    def op_skip_not_equal_byte(self, instruction):
        # Skip next instruction if Vx != kk
        self._skip_if(self.registers.get_vx(instruction.x) != instruction.byte)

    def op_skip_equal_reg(self, instruction):
        # Skip next instruction if Vx == Vy
        vx = self.registers.get_vx(instruction.x)
        vy = self.registers.get_vx(instruction.y)
        self._skip_if(vx == vy)

    def op_load_byte(self, instruction):
        self.registers.set_vx(instruction.x, instruction.byte)

    def op_add_byte(self, instruction):
        # Set Vx = Vx + kk, VF is only touched on overflow
        sum_value = self.registers.get_vx(instruction.x) + instruction.byte
        if sum_value > 0xFF:
            self.registers.vf = 1
        self.registers.set_vx(instruction.x, sum_value)

    def op_load_reg(self, instruction):
        self.registers.set_vx(instruction.x, self.registers.get_vx(instruction.y))

    def op_or(self, instruction):
        vx = self.registers.get_vx(instruction.x)
        vy = self.registers.get_vx(instruction.y)
        self.registers.set_vx(instruction.x, vx | vy)

    def op_and(self, instruction):
        vx = self.registers.get_vx(instruction.x)
        vy = self.registers.get_vx(instruction.y)
        self.registers.set_vx(instruction.x, vx & vy)

    def op_xor(self, instruction):
        vx = self.registers.get_vx(instruction.x)
        vy = self.registers.get_vx(instruction.y)
        self.registers.set_vx(instruction.x, vx ^ vy)

    def op_add_reg(self, instruction):
        # Set Vx = Vx + Vy, set VF = carry
        sum_value = self.registers.get_vx(instruction.x) + self.registers.get_vx(
            instruction.y
        )
        self.registers.vf = 1 if sum_value > 0xFF else 0
        self.registers.set_vx(instruction.x, sum_value)

    def op_sub_reg(self, instruction):
        # Set Vx = Vx - Vy, set VF = borrow
        vx = self.registers.get_vx(instruction.x)
        vy = self.registers.get_vx(instruction.y)
        self.registers.vf = 1 if vy > vx else 0
        self.registers.set_vx(instruction.x, vx - vy)

    def op_shift_right(self, instruction):
        vx = self.registers.get_vx(instruction.x)
        self.registers.vf = 1 if trailing_ones(vx) > 0 else 0
        self.registers.set_vx(instruction.x, vx >> 1)

    def op_sub_n(self, instruction):
        # Set Vx = Vy - Vx, set VF = borrow
        vx = self.registers.get_vx(instruction.x)
        vy = self.registers.get_vx(instruction.y)
        self.registers.vf = 1 if vx > vy else 0
        self.registers.set_vx(instruction.x, vy - vx)

    def op_shift_left(self, instruction):
        vx = self.registers.get_vx(instruction.x)
        self.registers.vf = 1 if leading_ones(vx) > 0 else 0
        self.registers.set_vx(instruction.x, vx << 1)

    def op_skip_not_equal_reg(self, instruction):
        # Skip next instruction if Vx != Vy
        vx = self.registers.get_vx(instruction.x)
        vy = self.registers.get_vx(instruction.y)
        self._skip_if(vx != vy)

    def op_load_i(self, instruction):
        self.registers.i = instruction.addr

    def op_jump_add(self, instruction):
        # Jump to address NNN + V0
        self.registers.program_counter = instruction.addr + self.registers.get_vx(0x0)

    def op_rand(self, instruction):
        # Set Vx = random byte AND kk
        value = int(self.rng.integers(0, 256)) & instruction.byte
        self.registers.set_vx(instruction.x, value)

    def op_draw(self, instruction):
        x = self.registers.get_vx(instruction.x)
        y = self.registers.get_vx(instruction.y)
        sprite = Sprite(
            self.memory.read_block(self.registers.i, instruction.size), x, y
        )
        return Directive.draw(self.display.place(sprite))

    def op_skip_key(self, instruction):
        key = self.registers.get_vx(instruction.x)
        held_down = self.keyboard.get_key()
        self._skip_if(held_down is not None and key == held_down)

    def op_skip_not_key(self, instruction):
        # with nothing held there is no key to compare against, so no skip
        key = self.registers.get_vx(instruction.x)
        held_down = self.keyboard.get_key()
        self._skip_if(held_down is not None and key != held_down)

    def op_get_delay(self, instruction):
        self.registers.set_vx(instruction.x, self.registers.delay_timer)

    def op_wait_key(self, instruction):
        key = self.keyboard.get_key()
        if key is None:
            # point back at this instruction so the next step runs it again
            self.registers.program_counter -= 2
            return
        self.registers.set_vx(instruction.x, key)

    def op_set_delay(self, instruction):
        self.registers.delay_timer = self.registers.get_vx(instruction.x)

    def op_set_sound(self, instruction):
        self.registers.sound_timer = self.registers.get_vx(instruction.x)

    def op_add_i(self, instruction):
        vx = self.registers.get_vx(instruction.x)
        self.registers.i = (self.registers.i + vx) & 0xFFFF

    def op_set_i_sprite(self, instruction):
        vx = self.registers.get_vx(instruction.x)
        addr = self.display.key_sprites.get(vx)
        if addr is not None:
            self.registers.i = addr

    def op_store_bcd(self, instruction):
        # Store BCD representation of Vx in memory locations I, I+1, and I+2
        vx = self.registers.get_vx(instruction.x)
        addr = self.registers.i
        self.memory.write(addr, vx // 100)
        self.memory.write(addr + 1, (vx // 10) % 10)
        self.memory.write(addr + 2, vx % 10)

    def op_store_reg_i(self, instruction):
        # Store registers V0 through Vx in memory starting at location I
        addr = self.registers.i
        for reg in range(instruction.x + 1):
            self.memory.write(addr, self.registers.get_vx(reg))
            addr += 1

    def op_load_reg_i(self, instruction):
        # Read registers V0 through Vx from memory starting at location I
        addr = self.registers.i
        for reg in range(instruction.x + 1):
            self.registers.set_vx(reg, self.memory.read(addr))
            addr += 1

    def op_invalid(self, instruction):
        raise InvalidInstructionError(instruction.opcode)
