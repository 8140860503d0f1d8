import enum
from dataclasses import dataclass, field

import numpy as np
import pygame

from fry8.errors import InvalidSpriteSizeError
from fry8.memory import DIGIT_SPRITES

SCREEN_WIDTH, SCREEN_HEIGHT = 64, 32
SPRITE_WIDTH = 8
MAX_SPRITE_SIZE = 15


@dataclass(frozen=True)
class Sprite:
    raw_bytes: bytes
    x: int
    y: int

    def __post_init__(self):
        if len(self.raw_bytes) > MAX_SPRITE_SIZE:
            raise InvalidSpriteSizeError(len(self.raw_bytes))

    @property
    def y_max(self) -> int:
        return self.y + len(self.raw_bytes)

    def to_rects(self) -> list[pygame.Rect]:
        """One 1x1 rect per set bit, row by row, most significant bit first."""
        if not self.raw_bytes:
            return []
        bits = np.unpackbits(np.frombuffer(self.raw_bytes, dtype=np.uint8))
        rows, cols = np.nonzero(bits.reshape(-1, SPRITE_WIDTH))
        return [
            pygame.Rect(self.x + int(col), self.y + int(row), 1, 1)
            for row, col in zip(rows, cols)
        ]


class Action(enum.Enum):
    NONE = "none"
    CLEAR = "clear"
    DRAW = "draw"


@dataclass(frozen=True)
class Directive:
    """What the host has to do to its surface after a step."""

    action: Action
    rects: tuple = ()

    @classmethod
    def draw(cls, rects):
        return cls(Action.DRAW, tuple(rects))


NO_OP = Directive(Action.NONE)
CLEAR_SCREEN = Directive(Action.CLEAR)


@dataclass
class Output:
    """Sprites placed since the last clear, oldest first.

    There is no pixel buffer: the picture is whatever re-drawing these
    sprites in order produces.
    """

    sprites: list[Sprite] = field(default_factory=list)
    key_sprites: dict[int, int] = field(default_factory=lambda: dict(DIGIT_SPRITES))

    def clear(self):
        self.sprites.clear()

    def place(self, sprite: Sprite) -> list[pygame.Rect]:
        self.sprites.append(sprite)
        return sprite.to_rects()

    def to_rects(self) -> list[pygame.Rect]:
        return [rect for sprite in self.sprites for rect in sprite.to_rects()]
