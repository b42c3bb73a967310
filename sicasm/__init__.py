"""A two-pass SIC assembler, an object-program loader and an interactive simulator."""

__version__ = "0.1.0"
__all__ = ["opcodes", "assembler", "loader", "machine", "simulator"]