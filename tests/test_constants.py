from chip8emu.constants import (
    FONTSET,
    FONTSET_SIZE,
    RAM_SIZE,
    SCALE,
    SCREEN_HEIGHT,
    SCREEN_WIDTH,
    START_ADDR,
    WINDOW_HEIGHT,
    WINDOW_WIDTH,
)
from chip8emu.emu import Emu

import pytest


def _draw_glyph(digit):
    """Draw the built-in glyph for ``digit`` at (0, 0) and return the screen."""
    emu = Emu()
    ops = (0x6000 | digit, 0xF029, 0xD115)
    emu.load(b"".join(op.to_bytes(2, "big") for op in ops))
    for _ in ops:
        emu.tick()
    return emu.display()


def _glyph_rows(screen):
    return bytes(
        int("".join("1" if screen[row * SCREEN_WIDTH + col] else "0" for col in range(8)), 2)
        for row in range(5)
    )


def test_fontset_is_loaded_into_low_memory():
    emu = Emu()
    assert len(FONTSET) == FONTSET_SIZE
    assert bytes(emu.ram[:FONTSET_SIZE]) == FONTSET


def test_program_space_runs_from_start_to_end_of_memory():
    assert FONTSET_SIZE <= START_ADDR < RAM_SIZE
    emu = Emu()
    emu.load(b"\x01" * (RAM_SIZE - START_ADDR))
    assert bytes(emu.ram[:FONTSET_SIZE]) == FONTSET
    assert emu.ram[START_ADDR] == 1
    with pytest.raises(ValueError):
        Emu().load(b"\x01" * (RAM_SIZE - START_ADDR + 1))


@pytest.mark.parametrize("digit", range(16))
def test_font_rows_use_only_the_high_nibble(digit):
    screen = _draw_glyph(digit)
    assert not any(screen[row * SCREEN_WIDTH + col] for row in range(5) for col in range(4, 8))


def test_every_glyph_is_distinct():
    glyphs = [_glyph_rows(_draw_glyph(digit)) for digit in range(16)]
    assert len(set(glyphs)) == len(glyphs)


def test_glyph_for_eight_matches_the_table():
    assert _glyph_rows(_draw_glyph(8)) == bytes([0xF0, 0x90, 0xF0, 0x90, 0xF0])


def test_window_is_scaled_screen():
    assert WINDOW_WIDTH == SCREEN_WIDTH * SCALE
    assert WINDOW_HEIGHT == SCREEN_HEIGHT * SCALE
    assert len(Emu().display()) == (WINDOW_WIDTH // SCALE) * (WINDOW_HEIGHT // SCALE)