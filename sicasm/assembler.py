"""Two-pass assembler turning SIC assembly source into an object program."""

from __future__ import annotations

import itertools
import os
import re
import sys
from dataclasses import dataclass, field
from typing import Iterable, Iterator

from .opcodes import opcode_for

_LABEL_WIDTH = 6
_TEXT_CAPACITY = 60  # hex digits in one text record (30 bytes)
_INDEX_FLAG = 0x8000
_WORD_MASK = 0xFFFFFF

_START = "START"
_END = "END"
_BYTE = "BYTE"
_WORD = "WORD"
_RESB = "RESB"
_RESW = "RESW"

_INT_RE = re.compile(r"\s*([+-]?\d+)")
_HEX_RE = re.compile(r"\s*([+-]?[0-9A-Fa-f]+)")


def _to_int(text: str) -> int:
    match = _INT_RE.match(text)
    return int(match.group(1)) if match else 0


def _to_hex(text: str, default: int) -> int:
    match = _HEX_RE.match(text)
    return int(match.group(1), 16) if match else default


@dataclass(frozen=True)
class SourceLine:
    """One statement of assembly source."""

    label: str
    op: str
    operand: str
    indexed: bool = False


def parse_line(text: str) -> SourceLine | None:
    """Split a fixed-column source line; return None for comments and blank lines."""
    body = text.rstrip("\r\n")
    if not body or body.startswith("."):
        return None
    label = body[:_LABEL_WIDTH].rstrip()
    rest = body[_LABEL_WIDTH:].lstrip(" ")
    op, _, rest = rest.partition(" ")
    operand = rest.lstrip(" ").partition(" ")[0]
    indexed = len(operand) > 2 and operand.endswith(",X")
    if indexed:
        operand = operand[:-2]
    return SourceLine(label, op, operand, indexed)


def byte_length(operand: str) -> int:
    """Number of bytes a BYTE constant occupies."""
    size = len(operand)
    if operand.startswith("C"):
        return size - 3
    if operand.startswith("X"):
        return int((size - 3) / 2)
    return size


def byte_constant_hex(operand: str) -> str:
    """Hex digits of a BYTE constant written as C'...' or X'...'."""
    length = byte_length(operand)
    if operand.startswith("X"):
        return operand[2 : 2 + 2 * length]
    if operand.startswith("C"):
        return "".join(f"{ord(ch) & 0xFF:02X}" for ch in operand[2 : 2 + length])
    raise ValueError(f"wrong operand of BYTE [{operand}]")


def _format_symbols(symbols: dict[str, int]) -> list[str]:
    return [f"[{name:<{_LABEL_WIDTH}}] = [{address:5X}]" for name, address in symbols.items()]


@dataclass
class AssemblyResult:
    """Everything produced by assembling one program."""

    program_name: str
    start_address: int
    program_length: int
    symbols: dict[str, int]
    records: list[str]
    messages: list[str] = field(default_factory=list)

    def object_program(self) -> str:
        """The object program text, one record per line."""
        return "".join(f"{record}\n" for record in self.records)

    def symbol_listing(self) -> list[str]:
        """Symbol table rows in definition order."""
        return _format_symbols(self.symbols)


class _TextRecords:
    """Accumulates object code into text records of bounded size."""

    def __init__(self, out: list[str], address: int) -> None:
        self._out = out
        self._start = address
        self._data = ""

    def begin(self, address: int) -> None:
        self._start = address
        self._data = ""

    def add(self, digits: str, address: int) -> None:
        if self._data and len(self._data) + len(digits) > _TEXT_CAPACITY:
            self.flush()
            self.begin(address)
        self._data += digits

    def flush(self) -> None:
        if self._data:
            self._out.append(f"T{self._start:06X}{len(self._data) // 2:02X}{self._data}")
            self._data = ""


class Assembler:
    """Holds the symbol table and program facts shared by both passes."""

    def __init__(self) -> None:
        self.program_name = ""
        self.start_address = 0
        self.program_length = 0
        self.symbols: dict[str, int] = {}
        self.messages: list[str] = []

    @staticmethod
    def _statements(lines: Iterable[str]) -> tuple[SourceLine | None, Iterator[SourceLine]]:
        parsed = (parse_line(text) for text in lines)
        first = next(parsed, None)
        if first is not None and first.op == _START:
            header, rest = first, parsed
        else:
            header, rest = None, itertools.chain([first], parsed)
        body = itertools.takewhile(
            lambda stmt: stmt.op != _END, (stmt for stmt in rest if stmt is not None)
        )
        return header, body

    def _size(self, stmt: SourceLine) -> int:
        if opcode_for(stmt.op) is not None or stmt.op == _WORD:
            return 3
        if stmt.op == _RESW:
            return 3 * _to_int(stmt.operand)
        if stmt.op == _RESB:
            return _to_int(stmt.operand)
        if stmt.op == _BYTE:
            return byte_length(stmt.operand)
        self.messages.append(f"Error: Invalid operation code [{stmt.op}]")
        return 0

    def pass_one(self, lines: Iterable[str]) -> None:
        """Assign addresses to labels and measure the program."""
        self.symbols = {}
        header, body = self._statements(lines)
        if header is not None:
            self.program_name = header.label
            self.start_address = _to_hex(header.operand, 0)
        else:
            self.program_name = ""
            self.start_address = 0
        location = self.start_address
        for stmt in body:
            if stmt.label:
                if stmt.label in self.symbols:
                    self.messages.append(
                        f"Error: Duplicate symbol [{stmt.label:<{_LABEL_WIDTH}}]"
                    )
                else:
                    self.symbols[stmt.label] = location
            location += self._size(stmt)
        self.program_length = location - self.start_address

    def _operand_address(self, stmt: SourceLine) -> int:
        if not stmt.operand:
            return 0
        address = self.symbols.get(stmt.operand[:_LABEL_WIDTH])
        if address is None:
            self.messages.append(f"Error: Undefined symbol [{stmt.operand}]")
            return 0
        return address + _INDEX_FLAG if stmt.indexed else address

    def pass_two(self, lines: Iterable[str]) -> list[str]:
        """Generate the header, text and end records."""
        records = [
            f"H{self.program_name:<{_LABEL_WIDTH}}"
            f"{self.start_address:06X}{self.program_length:06X}"
        ]
        _, body = self._statements(lines)
        location = self.start_address
        text = _TextRecords(records, location)
        for stmt in body:
            opcode = opcode_for(stmt.op)
            if opcode is not None:
                code = f"{opcode}{self._operand_address(stmt):04X}"
                self.messages.append(f"obj_code: {location:04X} [{code}]")
                text.add(code, location)
                location += 3
            elif stmt.op == _BYTE:
                try:
                    code = byte_constant_hex(stmt.operand)
                except ValueError as exc:
                    self.messages.append(f"Error: {exc}")
                else:
                    text.add(code, location)
                location += byte_length(stmt.operand)
            elif stmt.op == _WORD:
                text.add(f"{_to_int(stmt.operand) & _WORD_MASK:06X}", location)
                location += 3
            elif stmt.op in (_RESW, _RESB):
                text.flush()
                count = _to_int(stmt.operand)
                location += 3 * count if stmt.op == _RESW else count
                text.begin(location)
        text.flush()
        records.append(f"E{self.start_address:06X}")
        return records


def assemble(lines: Iterable[str]) -> AssemblyResult:
    """Run both passes over the source lines."""
    source = list(lines)
    assembler = Assembler()
    assembler.pass_one(source)
    records = assembler.pass_two(source)
    return AssemblyResult(
        program_name=assembler.program_name,
        start_address=assembler.start_address,
        program_length=assembler.program_length,
        symbols=dict(assembler.symbols),
        records=records,
        messages=list(assembler.messages),
    )


def object_file_name(path: str) -> str:
    """Name of the object file: the file name up to its first dot, plus '.obj'."""
    head, tail = os.path.split(path)
    stem = tail.split(".", 1)[0]
    return os.path.join(head, f"{stem}.obj")


def _drain(assembler: Assembler) -> None:
    for message in assembler.messages:
        print(message)
    assembler.messages.clear()


def main(argv: list[str] | None = None) -> int:
    """Assemble the source file named on the command line."""
    args = sys.argv[1:] if argv is None else list(argv)
    usage = "Assemble syntax: [assemble source_file_name]"
    if len(args) != 1:
        print(usage)
        return 1
    path = args[0]
    try:
        with open(path, encoding="utf-8") as handle:
            lines = handle.readlines()
    except OSError:
        print(usage)
        return 1

    print(f"... Assembling {path}!")
    assembler = Assembler()
    assembler.pass_one(lines)
    _drain(assembler)
    print(f"...... End of Pass 1; Program length = {assembler.program_length:6X}.")
    print("...... Contents in SymbTab:")
    for row in _format_symbols(assembler.symbols):
        print(row)

    target = object_file_name(path)
    print("...... Start of Pass 2.")
    records = assembler.pass_two(lines)
    _drain(assembler)
    with open(target, "w", encoding="utf-8") as out:
        out.writelines(f"{record}\n" for record in records)
    print(f"Assembling succeeded.  {target} is generated.")
    return 0