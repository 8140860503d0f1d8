import argparse
import logging
import sys

import pygame

from fry8.chip8 import Chip8
from fry8.display import SCREEN_HEIGHT, SCREEN_WIDTH, Action, Directive
from fry8.errors import ChipError

logger = logging.getLogger(__name__)

# Constants
SCALE = 10
FPS = 60
FOREGROUND = (255, 255, 255)
BACKGROUND = (0, 0, 0)


def apply_directive(screen, directive: Directive, scale=SCALE):
    """Paint a step's directive onto the window surface."""
    if directive.action is Action.CLEAR:
        screen.fill(BACKGROUND)
    elif directive.action is Action.DRAW:
        for rect in directive.rects:
            pygame.draw.rect(
                screen,
                FOREGROUND,
                (rect.x * scale, rect.y * scale, scale, scale),
            )
    else:
        return False
    return True


def run(chip8, scale=SCALE, fps=FPS):
    pygame.init()
    screen = pygame.display.set_mode((SCREEN_WIDTH * scale, SCREEN_HEIGHT * scale))
    pygame.display.set_caption("Fry-8")
    screen.fill(BACKGROUND)
    pygame.display.flip()

    clock = pygame.time.Clock()

    # Main loop
    running = True
    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                else:
                    chip8.keyboard.set_key(event.key)
            elif event.type == pygame.KEYUP:
                chip8.keyboard.release_key(event.key)

        if not running:
            break

        try:
            directive = chip8.step()
        except ChipError as err:
            print(err)
            logger.debug("Machine state at failure:\n%s", chip8)
            break

        if apply_directive(screen, directive, scale):
            pygame.display.flip()

        # one step per frame gives the timers their 60Hz meaning
        clock.tick(fps)

    pygame.quit()


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="fry8",
        description="CHIP-8 Interpreter",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("rom", help="Path to the ROM file")
    parser.add_argument("--scale", "-s", type=int, default=SCALE)
    parser.add_argument("--fps", "-f", type=int, default=FPS)
    parser.add_argument("--verbose", "-v", action="store_true")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(name)s: %(message)s",
    )

    chip8 = Chip8()
    try:
        chip8.load(args.rom)
    except (ChipError, OSError) as err:
        print(f"Could not load rom: {err}")
        return 1

    run(chip8, scale=args.scale, fps=args.fps)
    return 0


if __name__ == "__main__":
    sys.exit(main())
