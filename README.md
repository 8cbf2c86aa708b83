# chip8emu

A CHIP-8 interpreter. It loads a ROM image at address `0x200`, runs it at
ten instructions per frame, about sixty frames per second, and draws the
64×32 monochrome display in a window scaled fifteen times.

## Installation

```
pip install .
```

## Running a game

```
chip8emu path/to/game.ch8
```

Close the window or press Escape to quit, and the command exits with
status 0.

- With no ROM path, or more than one argument, it prints
  `Usage: chip8emu path/to/game` and exits with status 1.
- If the ROM cannot be read, or is too large for memory, it prints
  `Unable to load emulator file!` to standard error and exits with status 1.
- If the program runs into an unknown opcode, a stack overflow or
  underflow, or an out-of-range memory access, emulation stops with
  `Emulation stopped: ...` on standard error and status 1.

## Keys

The sixteen-key hexadecimal keypad is mapped onto the left side of the
keyboard:

| Keyboard      | CHIP-8 key |
|---------------|------------|
| 1 2 3 4       | 1 2 3 C    |
| Q W E R       | 4 5 6 D    |
| A S D F       | 7 8 9 E    |
| Z X C V       | A 0 B F    |

The arrow keys also work: Up is 5, Left is 7, Down is 8 and Right is 9.
`chip8emu.main.key_to_button` returns the keypad index for a pygame key
code, or `None` for keys that are not mapped.

## Using the interpreter from Python

The `Emu` class in `chip8emu.emu` is independent of any display:

```python
from chip8emu.emu import Emu

emu = Emu()
emu.load(bytes([0x60, 0x2A, 0x12, 0x02]))  # V0 = 0x2A, then loop forever
emu.tick()
emu.tick()
emu.tick_timers()
pixels = emu.display()  # tuple of 64 * 32 booleans, row by row
emu.keypress(0x5, True)
```

- `load(data)` copies a program to `0x200`; it raises `ValueError` if the
  program does not fit in the 4 KB memory.
- `tick()` fetches and executes one instruction; `execute(op)` executes a
  given 16-bit opcode directly.
- `tick_timers()` counts the delay and sound timers down by one.
- `keypress(idx, pressed)` sets key `idx` (0–15); other indices raise
  `ValueError`.

The machine state is open to inspection: `pc`, `ram`, `v` (the sixteen
registers), `i`, `stack` (with `sp` its depth), `keys`, `dt` and `st`.

An opcode the interpreter does not know raises `UnknownOpcodeError`, whose
`opcode` attribute holds it; a return with an empty call stack, or a call
into a full one, raises `StackError`. Both derive from `Chip8Error`, which
is also raised for a program counter or memory access out of bounds.

`Emu` takes an optional `rng`, any object with a `getrandbits` method
(a fresh `random.Random` by default, used by `CXNN`), and an optional
`on_beep` callback, called when the sound timer runs out.

`chip8emu.main` also offers `create_and_load_emulator(path)`,
`draw_screen(emu, surface)` and `run(emu, surface)` for building a front
end on a pygame surface of your own.

## What it does not do

The window makes no sound: the `chip8emu` command does not pass an
`on_beep` callback, so the sound timer counts down silently.

## Tests

```
pip install .[test]
pytest
```