import os

# must be set before the first pygame import
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

from fry8.chip8 import Chip8
from fry8.display import Action, Directive, Sprite
from fry8.errors import (
    AddressOutOfBoundsError,
    ChipError,
    InvalidInstructionError,
    InvalidRegisterError,
    InvalidSpriteSizeError,
    RomTooLargeError,
)
from fry8.instructions import decode

__all__ = [
    "Action",
    "AddressOutOfBoundsError",
    "Chip8",
    "ChipError",
    "Directive",
    "InvalidInstructionError",
    "InvalidRegisterError",
    "InvalidSpriteSizeError",
    "RomTooLargeError",
    "Sprite",
    "decode",
]
