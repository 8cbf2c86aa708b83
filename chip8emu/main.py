"""Command-line front end: window, keyboard input and the frame loop."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional, Sequence

import pygame

from chip8emu.constants import (
    SCALE,
    SCREEN_WIDTH,
    TICKS_PER_FRAME,
    WINDOW_HEIGHT,
    WINDOW_WIDTH,
)
from chip8emu.emu import Chip8Error, Emu

FRAMES_PER_SECOND = 60
WINDOW_TITLE = "CHIP-8 Emulator"

_KEYMAP = {
    pygame.K_1: 0x1,
    pygame.K_2: 0x2,
    pygame.K_3: 0x3,
    pygame.K_4: 0xC,
    pygame.K_q: 0x4,
    pygame.K_w: 0x5,
    pygame.K_UP: 0x5,
    pygame.K_e: 0x6,
    pygame.K_r: 0xD,
    pygame.K_a: 0x7,
    pygame.K_LEFT: 0x7,
    pygame.K_s: 0x8,
    pygame.K_DOWN: 0x8,
    pygame.K_d: 0x9,
    pygame.K_RIGHT: 0x9,
    pygame.K_f: 0xE,
    pygame.K_z: 0xA,
    pygame.K_x: 0x0,
    pygame.K_c: 0xB,
    pygame.K_v: 0xF,
}


def key_to_button(key: int) -> Optional[int]:
    """Map a pygame key code to a CHIP-8 keypad index, or None."""
    return _KEYMAP.get(key)


def create_and_load_emulator(path: str | Path) -> Emu:
    """Build a machine with the program at ``path`` loaded into memory."""
    data = Path(path).read_bytes()
    emu = Emu()
    emu.load(data)
    return emu


def draw_screen(emu: Emu, surface: pygame.Surface) -> None:
    """Paint the machine's display onto ``surface``, white on black."""
    surface.fill(pygame.Color("black"))
    white = pygame.Color("white")
    for idx, lit in enumerate(emu.display()):
        if lit:
            y, x = divmod(idx, SCREEN_WIDTH)
            surface.fill(white, pygame.Rect(x * SCALE, y * SCALE, SCALE, SCALE))


def _handle_events(emu: Emu) -> bool:
    """Apply pending input to ``emu``; return False when the user quits."""
    for event in pygame.event.get():
        if event.type == pygame.QUIT:
            return False
        if event.type == pygame.KEYDOWN:
            if event.key == pygame.K_ESCAPE:
                return False
            button = key_to_button(event.key)
            if button is not None:
                emu.keypress(button, True)
        elif event.type == pygame.KEYUP:
            button = key_to_button(event.key)
            if button is not None:
                emu.keypress(button, False)
    return True


def run(emu: Emu, surface: pygame.Surface) -> None:
    """Run the frame loop until the window is closed or Escape is pressed."""
    clock = pygame.time.Clock()
    while _handle_events(emu):
        for _ in range(TICKS_PER_FRAME):
            emu.tick()
        emu.tick_timers()
        draw_screen(emu, surface)
        if surface is pygame.display.get_surface():
            pygame.display.flip()
        clock.tick(FRAMES_PER_SECOND)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Start the emulator on the program named on the command line."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 1:
        print("Usage: chip8emu path/to/game")
        return 1

    try:
        emu = create_and_load_emulator(args[0])
    except (OSError, ValueError):
        print("Unable to load emulator file!", file=sys.stderr)
        return 1

    pygame.display.init()
    try:
        surface = pygame.display.set_mode((WINDOW_WIDTH, WINDOW_HEIGHT))
        pygame.display.set_caption(WINDOW_TITLE)
        surface.fill(pygame.Color("black"))
        pygame.display.flip()
        run(emu, surface)
    except Chip8Error as exc:
        print(f"Emulation stopped: {exc}", file=sys.stderr)
        return 1
    finally:
        pygame.display.quit()
    return 0