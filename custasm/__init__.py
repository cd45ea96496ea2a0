"""Building blocks of a customizable assembler."""

__version__ = "0.1.0"