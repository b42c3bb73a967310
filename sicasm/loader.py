"""Loading SIC object programs (H/T/E records) into a simulated memory."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

_HEX_PREFIX = re.compile(r"\s*([0-9A-Fa-f]+)")
_UNSET = "X"
_BYTES_PER_ROW = 16
_BYTES_PER_GROUP = 4


def _parse_hex(text: str, default: int = 0) -> int:
    match = _HEX_PREFIX.match(text)
    return int(match.group(1), 16) if match else default


class LoadError(Exception):
    """Raised when an object program cannot be loaded."""


class Memory:
    """Program memory kept as hexadecimal digits; unwritten cells read as 'X'."""

    def __init__(self, start: int, length: int) -> None:
        if length < 0:
            raise ValueError(f"negative program length {length}")
        self.start = start
        self.length = length
        self._cells = [_UNSET] * (2 * length)

    def _offset(self, address: int, size: int) -> int:
        offset = (address - self.start) * 2
        if offset < 0 or offset + size > len(self._cells):
            raise IndexError(f"address {address:06X} is outside the loaded program")
        return offset

    def _read(self, address: int, size: int) -> str:
        offset = self._offset(address, size)
        return "".join(self._cells[offset : offset + size])

    def _write(self, address: int, digits: str) -> None:
        offset = self._offset(address, len(digits))
        self._cells[offset : offset + len(digits)] = list(digits)

    def __getitem__(self, address: int) -> str:
        """The two hex digits stored at a byte address."""
        return self._read(address, 2)

    def read_word(self, address: int) -> int:
        """Read the three-byte word at an address; unreadable digits give 0."""
        return _parse_hex(self._read(address, 6))

    def write_word(self, address: int, value: int) -> None:
        """Store a value as a three-byte word."""
        self._write(address, f"{value & 0xFFFFFFFF:06X}"[:6])

    def read_byte(self, address: int) -> int:
        """Read one byte; unreadable digits give 0."""
        return _parse_hex(self._read(address, 2))

    def write_byte(self, address: int, value: int) -> None:
        """Store the low eight bits of a value as one byte."""
        self._write(address, f"{value & 0xFF:02X}")

    def store_hex(self, address: int, text: str) -> None:
        """Copy hexadecimal digits into memory starting at an address."""
        if text:
            self._write(address, text)

    def dump(self) -> list[str]:
        """Memory contents, sixteen bytes per row, grouped by four bytes."""
        rows = []
        for row in range(0, self.length, _BYTES_PER_ROW):
            end = min(row + _BYTES_PER_ROW, self.length)
            groups = (
                "".join(self._cells[2 * first : 2 * min(first + _BYTES_PER_GROUP, end)])
                for first in range(row, end, _BYTES_PER_GROUP)
            )
            rows.append(f"{self.start + row:06X}" + "".join(f"  {group}" for group in groups))
        return rows


@dataclass
class LoadedProgram:
    """An object program placed in memory."""

    name: str
    start: int
    length: int
    entry: int
    memory: Memory


def load_object(lines: Iterable[str]) -> LoadedProgram:
    """Build a loaded program from the records of an object file."""
    name = ""
    memory: Memory | None = None
    entry: int | None = None
    for raw in lines:
        line = raw.rstrip("\r\n")
        kind = line[:1]
        if kind == "H":
            name = line[1:7].rstrip()
            memory = Memory(_parse_hex(line[7:13]), _parse_hex(line[13:19]))
        elif kind == "T":
            if memory is None:
                raise LoadError("text record before header record")
            address = _parse_hex(line[1:7])
            size = _parse_hex(line[7:9])
            try:
                memory.store_hex(address, line[9 : 9 + 2 * size])
            except IndexError as exc:
                raise LoadError(str(exc)) from exc
        elif kind == "E":
            entry = _parse_hex(line[1:7], entry if entry is not None else 0)
    if memory is None:
        raise LoadError("missing header record")
    return LoadedProgram(
        name=name,
        start=memory.start,
        length=memory.length,
        entry=memory.start if entry is None else entry,
        memory=memory,
    )