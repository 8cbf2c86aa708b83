"""A CHIP-8 interpreter with a pygame front end."""

__version__ = "0.1.0"
__all__ = ["constants", "emu", "main"]