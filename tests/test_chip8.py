import logging

import pygame
import pytest

from fry8.chip8 import Chip8, leading_ones, trailing_ones
from fry8.display import Action
from fry8.errors import AddressOutOfBoundsError, InvalidInstructionError

from conftest import run_steps


def test_step_before_load_is_out_of_bounds():
    with pytest.raises(AddressOutOfBoundsError):
        Chip8().step()


def test_fetch_advances_pc(load_program):
    chip8 = load_program(0x1234)
    assert chip8.fetch() == 0x1234
    assert chip8.registers.program_counter == 0x202


def test_fetch_at_end_of_memory_fails(load_program):
    chip8 = load_program(0x1FFF)
    chip8.step()
    with pytest.raises(AddressOutOfBoundsError):
        chip8.step()


def test_add_reg_with_carry(load_program):
    chip8 = load_program(0x60FA, 0x610A, 0x8014)
    run_steps(chip8, 3)
    assert chip8.registers.get_vx(0x0) == 4
    assert chip8.registers.vf == 1


def test_add_reg_without_carry(load_program):
    chip8 = load_program(0x6F01, 0x600A, 0x6114, 0x8014)
    run_steps(chip8, 4)
    assert chip8.registers.get_vx(0x0) == 30
    assert chip8.registers.vf == 0


def test_add_byte_only_sets_flag_on_overflow(load_program):
    chip8 = load_program(0x6F07, 0x7001, 0x60FF, 0x7002)
    run_steps(chip8, 2)
    assert chip8.registers.vf == 7
    run_steps(chip8, 2)
    assert chip8.registers.get_vx(0x0) == 1
    assert chip8.registers.vf == 1


def test_sub_reg_with_borrow(load_program):
    chip8 = load_program(0x6005, 0x610A, 0x8015)
    run_steps(chip8, 3)
    assert chip8.registers.get_vx(0x0) == 251
    assert chip8.registers.vf == 1


def test_sub_reg_without_borrow(load_program):
    chip8 = load_program(0x600A, 0x6105, 0x8015)
    run_steps(chip8, 3)
    assert chip8.registers.get_vx(0x0) == 5
    assert chip8.registers.vf == 0


def test_sub_n_subtracts_vx_from_vy(load_program):
    chip8 = load_program(0x600A, 0x6105, 0x8017)
    run_steps(chip8, 3)
    assert chip8.registers.get_vx(0x0) == 251
    assert chip8.registers.vf == 1


def test_logical_ops(load_program):
    chip8 = load_program(0x600C, 0x610A, 0x6F05, 0x8011, 0x6205, 0x8212, 0x6306, 0x8313)
    run_steps(chip8, 8)
    assert chip8.registers.get_vx(0x0) == 0x0E
    assert chip8.registers.get_vx(0x2) == 0x00
    assert chip8.registers.get_vx(0x3) == 0x0C
    assert chip8.registers.vf == 5


@pytest.mark.parametrize(
    "value, result, flag",
    [(0x03, 0x01, 1), (0x02, 0x01, 0), (0x80, 0x40, 0)],
)
def test_shift_right(load_program, value, result, flag):
    chip8 = load_program(0x6000 | value, 0x8006)
    run_steps(chip8, 2)
    assert chip8.registers.get_vx(0x0) == result
    assert chip8.registers.vf == flag


@pytest.mark.parametrize(
    "value, result, flag",
    [(0x81, 0x02, 1), (0x41, 0x82, 0), (0xFF, 0xFE, 1)],
)
def test_shift_left(load_program, value, result, flag):
    chip8 = load_program(0x6000 | value, 0x800E)
    run_steps(chip8, 2)
    assert chip8.registers.get_vx(0x0) == result
    assert chip8.registers.vf == flag


def test_bit_runs():
    assert trailing_ones(0b0111) == 3
    assert trailing_ones(0b0110) == 0
    assert leading_ones(0b11000000) == 2
    assert leading_ones(0b01111111) == 0


def test_flag_register_as_destination_keeps_result(load_program):
    chip8 = load_program(0x6FFA, 0x610A, 0x8F14)
    run_steps(chip8, 3)
    assert chip8.registers.vf == 4


def test_call_then_return(load_program):
    chip8 = load_program(0x2206, 0x0000, 0x0000, 0x00EE)
    chip8.step()
    assert chip8.registers.program_counter == 0x206
    assert chip8.registers.stack_pointer == 1
    chip8.step()
    assert chip8.registers.program_counter == 0x202
    assert chip8.registers.stack_pointer == 0


def test_return_on_empty_stack(load_program):
    chip8 = load_program(0x00EE)
    with pytest.raises(AddressOutOfBoundsError):
        chip8.step()


def test_jump_and_jump_add(load_program):
    chip8 = load_program(0x6004, 0xB300)
    run_steps(chip8, 2)
    assert chip8.registers.program_counter == 0x304

    chip8 = Chip8()
    chip8.load_rom(bytes([0x14, 0x56]))
    chip8.step()
    assert chip8.registers.program_counter == 0x456


@pytest.mark.parametrize(
    "opcodes, pc",
    [
        ((0x3000,), 0x204),
        ((0x3001,), 0x202),
        ((0x4001,), 0x204),
        ((0x4000,), 0x202),
        ((0x5010,), 0x204),
        ((0x6101, 0x5010), 0x204),
        ((0x6101, 0x9010), 0x206),
        ((0x9010,), 0x202),
    ],
)
def test_skips(load_program, opcodes, pc):
    chip8 = load_program(*opcodes)
    run_steps(chip8, len(opcodes))
    assert chip8.registers.program_counter == pc


def test_skip_key(load_program):
    chip8 = load_program(0x6005, 0xE09E)
    chip8.keyboard.set_key(pygame.K_w)
    run_steps(chip8, 2)
    assert chip8.registers.program_counter == 0x206


def test_skip_key_other_key_held(load_program):
    chip8 = load_program(0x6005, 0xE09E)
    chip8.keyboard.set_key(pygame.K_q)
    run_steps(chip8, 2)
    assert chip8.registers.program_counter == 0x204


def test_skip_not_key(load_program):
    chip8 = load_program(0x6005, 0xE0A1)
    chip8.keyboard.set_key(pygame.K_q)
    run_steps(chip8, 2)
    assert chip8.registers.program_counter == 0x206


def test_skip_not_key_without_key_held(load_program):
    chip8 = load_program(0x6005, 0xE0A1)
    run_steps(chip8, 2)
    assert chip8.registers.program_counter == 0x204


def test_draw_returns_rects_of_new_sprite(load_program):
    # I = glyph "1", drawn at (V0, V1) = (3, 2)
    chip8 = load_program(0x6003, 0x6102, 0xA005, 0xD015)
    directive = run_steps(chip8, 4)
    assert directive.action is Action.DRAW
    assert directive.rects[0] == (5, 2, 1, 1)
    assert len(directive.rects) == 1 + 2 + 1 + 1 + 3
    assert len(chip8.display.sprites) == 1
    assert chip8.display.sprites[0].y_max == 7


def test_clear_screen_then_draw(load_program):
    chip8 = load_program(0xA000, 0xD015, 0x00E0, 0xA005, 0xD011)
    run_steps(chip8, 2)
    directive = chip8.step()
    assert directive.action is Action.CLEAR
    assert chip8.display.sprites == []
    directive = run_steps(chip8, 2)
    assert directive.rects == ((2, 0, 1, 1),)
    assert len(chip8.display.sprites) == 1


def test_draw_past_end_of_memory(load_program):
    chip8 = load_program(0xAFFF, 0xD015)
    chip8.step()
    with pytest.raises(AddressOutOfBoundsError):
        chip8.step()


def test_other_instructions_return_no_op(load_program):
    chip8 = load_program(0x6001)
    assert chip8.step().action is Action.NONE


def test_wait_key_busy_waits(load_program):
    chip8 = load_program(0xF50A)
    for _ in range(3):
        assert chip8.step().action is Action.NONE
        assert chip8.registers.program_counter == 0x200

    chip8.keyboard.set_key(pygame.K_p)
    chip8.step()
    assert chip8.registers.program_counter == 0x200

    chip8.keyboard.set_key(pygame.K_v)
    chip8.step()
    assert chip8.registers.program_counter == 0x202
    assert chip8.registers.get_vx(0x5) == 0xF


def test_timers_tick_once_per_step(load_program):
    chip8 = load_program(0x6005, 0xF015, 0xF018, 0x0000, 0xF107)
    run_steps(chip8, 2)
    assert chip8.registers.delay_timer == 5
    run_steps(chip8, 1)
    assert chip8.registers.sound_timer == 5
    assert chip8.registers.delay_timer == 4
    run_steps(chip8, 2)
    assert chip8.registers.get_vx(0x1) == 2
    assert chip8.registers.sound_timer == 3


def test_add_i(load_program):
    chip8 = load_program(0xA300, 0x6010, 0xF01E)
    run_steps(chip8, 3)
    assert chip8.registers.i == 0x310


def test_set_i_sprite(load_program):
    chip8 = load_program(0x600A, 0xF029)
    run_steps(chip8, 2)
    assert chip8.registers.i == 50


def test_set_i_sprite_unknown_digit_is_ignored(load_program):
    chip8 = load_program(0xA123, 0x6042, 0xF029)
    run_steps(chip8, 3)
    assert chip8.registers.i == 0x123


def test_store_bcd(load_program):
    chip8 = load_program(0x609D, 0xA300, 0xF033)
    run_steps(chip8, 3)
    assert chip8.memory.read_block(0x300, 3) == bytes([1, 5, 7])


def test_store_reg_i(load_program):
    chip8 = load_program(0x6001, 0x6102, 0x6203, 0x6304, 0x6405, 0xA300, 0xF355)
    run_steps(chip8, 7)
    assert chip8.memory.read_block(0x300, 5) == bytes([1, 2, 3, 4, 0])
    assert chip8.registers.i == 0x300


def test_load_reg_i(load_program):
    chip8 = load_program(0x6499, 0xA300, 0xF365)
    for offset, value in enumerate([9, 8, 7, 6, 5]):
        chip8.memory.write(0x300 + offset, value)
    run_steps(chip8, 3)
    assert [chip8.registers.get_vx(x) for x in range(5)] == [9, 8, 7, 6, 0x99]
    assert chip8.registers.i == 0x300


def test_rand_is_masked(load_program):
    chip8 = load_program(0xC000, 0xC10F)
    run_steps(chip8, 2)
    assert chip8.registers.get_vx(0x0) == 0
    assert chip8.registers.get_vx(0x1) <= 0x0F


def test_rand_is_reproducible_with_seed():
    values = []
    for _ in range(2):
        chip8 = Chip8(seed=1)
        chip8.load_rom(bytes([0xC0, 0xFF]))
        chip8.step()
        values.append(chip8.registers.get_vx(0x0))
    assert values[0] == values[1]


def test_sys_is_ignored(load_program):
    chip8 = load_program(0x0123)
    chip8.step()
    assert chip8.registers.program_counter == 0x202


def test_invalid_instruction(load_program):
    chip8 = load_program(0x8008)
    with pytest.raises(InvalidInstructionError) as excinfo:
        chip8.step()
    assert excinfo.value.opcode == 0x8008


def test_step_logs_decoded_instruction(load_program, caplog):
    chip8 = load_program(0x6001)
    with caplog.at_level(logging.DEBUG, logger="fry8.chip8"):
        chip8.step()
    assert "0200: LoadByte(x=0, byte=1)" in caplog.text


def test_state_dump(load_program):
    chip8 = load_program(0x2204)
    chip8.step()
    dump = str(chip8)
    assert "PC=0204" in dump
    assert "STACK:[0202]" in dump
