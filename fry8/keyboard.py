from typing import Optional

import pygame

# CHIP-8 key mapping to keyboard keys
KEY_MAP = {
    pygame.K_1: 0x1,
    pygame.K_2: 0x2,
    pygame.K_3: 0x3,
    pygame.K_4: 0xC,
    pygame.K_q: 0x4,
    pygame.K_w: 0x5,
    pygame.K_e: 0x6,
    pygame.K_r: 0xD,
    pygame.K_a: 0x7,
    pygame.K_s: 0x8,
    pygame.K_d: 0x9,
    pygame.K_f: 0xE,
    pygame.K_z: 0xA,
    pygame.K_x: 0x0,
    pygame.K_c: 0xB,
    pygame.K_v: 0xF,
}


class Keyboard:
    """Holds the last key the host reported, translated on demand."""

    def __init__(self):
        self.keycode: Optional[int] = None

    def set_key(self, key: int):
        self.keycode = key

    def release_key(self, key: int):
        # a newer press may already have replaced the key being released
        if self.keycode == key:
            self.keycode = None

    def get_key(self) -> Optional[int]:
        if self.keycode is None:
            return None
        return KEY_MAP.get(self.keycode)
