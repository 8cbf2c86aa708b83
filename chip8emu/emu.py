"""The CHIP-8 virtual machine: memory, registers, timers, display and opcodes."""

from __future__ import annotations

import random
from typing import Callable, Optional

from chip8emu.constants import (
    FONTSET,
    FONTSET_SIZE,
    NUM_KEYS,
    NUM_REGS,
    RAM_SIZE,
    SCREEN_HEIGHT,
    SCREEN_WIDTH,
    STACK_SIZE,
    START_ADDR,
)


class Chip8Error(Exception):
    """Raised when the machine reaches a state it cannot continue from."""


class UnknownOpcodeError(Chip8Error):
    """Raised for an opcode the machine does not implement."""

    def __init__(self, opcode: int) -> None:
        super().__init__(f"unknown opcode {opcode:#06x}")
        self.opcode = opcode


class StackError(Chip8Error):
    """Raised when the call stack overflows or underflows."""


class Emu:
    """A CHIP-8 machine.

    ``rng`` is any object with a ``getrandbits`` method (a ``random.Random``
    by default); ``on_beep`` is called when the sound timer runs out.
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        on_beep: Optional[Callable[[], None]] = None,
    ) -> None:
        self.pc = START_ADDR
        self.ram = bytearray(RAM_SIZE)
        self.ram[:FONTSET_SIZE] = FONTSET
        self.screen = [False] * (SCREEN_WIDTH * SCREEN_HEIGHT)
        self.v = bytearray(NUM_REGS)
        self.i = 0
        self.stack: list[int] = []
        self.keys = [False] * NUM_KEYS
        self.dt = 0
        self.st = 0
        self._rng = rng if rng is not None else random.Random()
        self._on_beep = on_beep

    @property
    def sp(self) -> int:
        """Number of return addresses on the stack."""
        return len(self.stack)

    def display(self) -> tuple[bool, ...]:
        """The screen, row by row, one flag per pixel."""
        return tuple(self.screen)

    def keypress(self, idx: int, pressed: bool) -> None:
        """Mark key ``idx`` (0-15) as pressed or released."""
        if not 0 <= idx < NUM_KEYS:
            raise ValueError(f"key index {idx} out of range 0..{NUM_KEYS - 1}")
        self.keys[idx] = pressed

    def load(self, data: bytes) -> None:
        """Copy a program into memory at the program start address."""
        data = bytes(data)
        end = START_ADDR + len(data)
        if end > RAM_SIZE:
            raise ValueError(
                f"program of {len(data)} bytes does not fit in memory "
                f"({RAM_SIZE - START_ADDR} bytes available)"
            )
        self.ram[START_ADDR:end] = data

    def tick(self) -> None:
        """Fetch and execute one instruction."""
        self.execute(self._fetch())

    def tick_timers(self) -> None:
        """Count the delay and sound timers down by one step."""
        if self.dt > 0:
            self.dt -= 1
        if self.st == 1 and self._on_beep is not None:
            self._on_beep()
        if self.st > 0:
            self.st -= 1

    def _fetch(self) -> int:
        if not 0 <= self.pc < RAM_SIZE - 1:
            raise Chip8Error(f"program counter {self.pc:#06x} out of bounds")
        op = int.from_bytes(self.ram[self.pc:self.pc + 2], "big")
        self.pc += 2
        return op

    def _push(self, value: int) -> None:
        if len(self.stack) >= STACK_SIZE:
            raise StackError("stack overflow")
        self.stack.append(value)

    def _pop(self) -> int:
        if not self.stack:
            raise StackError("stack underflow")
        return self.stack.pop()

    def _read(self, address: int) -> int:
        if not 0 <= address < RAM_SIZE:
            raise Chip8Error(f"memory address {address:#06x} out of bounds")
        return self.ram[address]

    def _span(self, start: int, length: int) -> slice:
        if start < 0 or start + length > RAM_SIZE:
            raise Chip8Error(
                f"memory range {start:#06x}+{length} out of bounds"
            )
        return slice(start, start + length)

    def _key(self, idx: int) -> bool:
        if idx >= NUM_KEYS:
            raise Chip8Error(f"key index {idx} out of range")
        return self.keys[idx]

    def execute(self, op: int) -> None:
        """Execute a single 16-bit opcode."""
        nibbles = ((op >> 12) & 0xF, (op >> 8) & 0xF, (op >> 4) & 0xF, op & 0xF)
        x, y, n = nibbles[1], nibbles[2], nibbles[3]
        nn = op & 0xFF
        nnn = op & 0xFFF
        v = self.v

        match nibbles:
            case (0, 0, 0, 0):
                return
            case (0, 0, 0xE, 0):
                self.screen = [False] * (SCREEN_WIDTH * SCREEN_HEIGHT)
            case (0, 0, 0xE, 0xE):
                self.pc = self._pop()
            case (1, _, _, _):
                self.pc = nnn
            case (2, _, _, _):
                self._push(self.pc)
                self.pc = nnn
            case (3, _, _, _):
                if v[x] == nn:
                    self.pc += 2
            case (4, _, _, _):
                if v[x] != nn:
                    self.pc += 2
            case (5, _, _, 0):
                if v[x] == v[y]:
                    self.pc += 2
            case (6, _, _, _):
                v[x] = nn
            case (7, _, _, _):
                v[x] = (v[x] + nn) & 0xFF
            case (8, _, _, 0):
                v[x] = v[y]
            case (8, _, _, 1):
                v[x] |= v[y]
            case (8, _, _, 2):
                v[x] &= v[y]
            case (8, _, _, 3):
                v[x] ^= v[y]
            case (8, _, _, 4):
                total = v[x] + v[y]
                v[x] = total & 0xFF
                v[0xF] = int(total > 0xFF)
            case (8, _, _, 5):
                no_borrow = v[x] >= v[y]
                v[x] = (v[x] - v[y]) & 0xFF
                v[0xF] = int(no_borrow)
            case (8, _, _, 6):
                lsb = v[x] & 1
                v[x] >>= 1
                v[0xF] = lsb
            case (8, _, _, 7):
                no_borrow = v[y] >= v[x]
                v[x] = (v[y] - v[x]) & 0xFF
                v[0xF] = int(no_borrow)
            case (8, _, _, 0xE):
                msb = (v[x] >> 7) & 1
                v[x] = (v[x] << 1) & 0xFF
                v[0xF] = msb
            case (9, _, _, 0):
                if v[x] != v[y]:
                    self.pc += 2
            case (0xA, _, _, _):
                self.i = nnn
            case (0xB, _, _, _):
                self.pc = v[0] + nnn
            case (0xC, _, _, _):
                v[x] = self._rng.getrandbits(8) & nn
            case (0xD, _, _, _):
                v[0xF] = int(self._draw(v[x], v[y], n))
            case (0xE, _, 9, 0xE):
                if self._key(v[x]):
                    self.pc += 2
            case (0xE, _, 0xA, 1):
                if not self._key(v[x]):
                    self.pc += 2
            case (0xF, _, 0, 7):
                v[x] = self.dt
            case (0xF, _, 0, 0xA):
                pressed = next(
                    (idx for idx, down in enumerate(self.keys) if down), None
                )
                if pressed is None:
                    self.pc -= 2
                else:
                    v[x] = pressed
            case (0xF, _, 1, 5):
                self.dt = v[x]
            case (0xF, _, 1, 8):
                self.st = v[x]
            case (0xF, _, 1, 0xE):
                self.i = (self.i + v[x]) & 0xFFFF
            case (0xF, _, 2, 9):
                self.i = v[x] * 5
            case (0xF, _, 3, 3):
                value = v[x]
                self.ram[self._span(self.i, 3)] = bytes(
                    (value // 100, (value // 10) % 10, value % 10)
                )
            case (0xF, _, 5, 5):
                self.ram[self._span(self.i, x + 1)] = v[: x + 1]
            case (0xF, _, 6, 5):
                v[: x + 1] = self.ram[self._span(self.i, x + 1)]
            case _:
                raise UnknownOpcodeError(op)

    def _draw(self, x_coord: int, y_coord: int, height: int) -> bool:
        """XOR a sprite onto the screen; report whether any pixel was erased."""
        erased = False
        for row in range(height):
            bits = self._read(self.i + row)
            screen_y = (y_coord + row) % SCREEN_HEIGHT
            for col in range(8):
                if bits & (0x80 >> col):
                    screen_x = (x_coord + col) % SCREEN_WIDTH
                    idx = SCREEN_WIDTH * screen_y + screen_x
                    erased |= self.screen[idx]
                    self.screen[idx] = not self.screen[idx]
        return erased