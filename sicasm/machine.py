"""Execution of a loaded SIC program."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable

from .loader import LoadedProgram
from .opcodes import mnemonic_for

_INDEX_FLAG = 0x8000
_HEX_PREFIX = re.compile(r"\s*([0-9A-Fa-f]+)")


def _leading_hex(text: str) -> int:
    match = _HEX_PREFIX.match(text)
    return int(match.group(1), 16) if match else 0


def _wrap(value: int) -> int:
    return (value + 2**31) % 2**32 - 2**31


def _divide(dividend: int, divisor: int) -> int:
    quotient = abs(dividend) // abs(divisor)
    return quotient if (dividend < 0) == (divisor < 0) else -quotient


def _compare(left: int, right: int) -> int:
    return (left > right) - (left < right)


class MachineError(Exception):
    """Raised when the program cannot continue."""


@dataclass
class Registers:
    """The SIC registers."""

    a: int = 0
    x: int = 0
    l: int = 0  # noqa: E741
    pc: int = 0
    sw: int = 0

    def describe(self) -> list[str]:
        """One line per register, as shown after a run."""
        values = (("A", self.a), ("X", self.x), ("L", self.l), ("SW", self.sw), ("PC", self.pc))
        return [f"Register {name:<2} = [{value & 0xFFFFFFFF:06X}];" for name, value in values]


class Machine:
    """Runs a loaded program from its entry point."""

    def __init__(
        self,
        program: LoadedProgram,
        read_char: Callable[[], str],
        write_char: Callable[[str], None],
    ) -> None:
        self.program = program
        self.memory = program.memory
        self._read_char = read_char
        self._write_char = write_char
        self._end = program.start + program.length
        self.registers = Registers(pc=program.entry)
        self.running = True

    def _word(self, operand: int, indexed: bool) -> int:
        return self.memory.read_word(operand + self.registers.x if indexed else operand)

    def _target(self, operand: int, indexed: bool) -> int:
        return operand + self.registers.x if indexed else operand

    def _fetch(self) -> tuple[str | None, int, bool]:
        pc = self.registers.pc
        mnemonic = mnemonic_for(self.memory[pc])
        operand = _leading_hex(self.memory[pc + 1] + self.memory[pc + 2])
        indexed = operand >= _INDEX_FLAG
        return mnemonic, operand - _INDEX_FLAG if indexed else operand, indexed

    def _execute(self, mnemonic: str | None, operand: int, indexed: bool) -> None:
        r = self.registers
        match mnemonic:
            case "ADD":
                r.a = _wrap(r.a + self._word(operand, indexed))
            case "AND":
                r.a &= self._word(operand, indexed)
            case "OR":
                r.a |= self._word(operand, indexed)
            case "SUB":
                r.a = _wrap(r.a - self._word(operand, indexed))
            case "MUL":
                r.a = _wrap(r.a * self._word(operand, indexed))
            case "DIV":
                divisor = self._word(operand, indexed)
                if divisor:
                    r.a = _wrap(_divide(r.a, divisor))
            case "COMP":
                r.sw = _compare(r.a, self._word(operand, indexed))
            case "LDA":
                r.a = self._word(operand, indexed)
            case "LDCH":
                r.a = (r.a & 0xFFFF00) | self.memory.read_byte(self._target(operand, indexed))
            case "LDL":
                r.l = self._word(operand, indexed)
            case "LDX":
                r.x = self._word(operand, indexed)
            case "STA":
                self.memory.write_word(self._target(operand, indexed), r.a)
            case "STCH":
                self.memory.write_byte(self._target(operand, indexed), r.a & 0xFF)
            case "STL":
                self.memory.write_word(self._target(operand, indexed), r.l)
            case "STX":
                self.memory.write_word(self._target(operand, indexed), r.x)
            case "J":
                r.pc = operand
            case "JEQ":
                if r.sw == 0:
                    r.pc = operand
            case "JGT":
                if r.sw > 0:
                    r.pc = operand
            case "JLT":
                if r.sw < 0:
                    r.pc = operand
            case "JSUB":
                r.l = r.pc
                r.pc = operand
            case "RSUB":
                if r.l == 0:
                    self.running = False
                else:
                    r.pc = r.l
            case "RD":
                char = self._read_char()
                if not char:
                    self.running = False
                    raise MachineError("no input for RD")
                r.a = (r.a & 0xFFFF00) | (ord(char[0]) & 0xFF)
            case "TD":
                r.sw = 1
            case "TIX":
                r.x = _wrap(r.x + 1)
                r.sw = _compare(r.x, self._word(operand, indexed))
            case "WD":
                if 32 <= r.a <= 126:
                    self._write_char(chr(r.a))
            case _:
                self.running = False
                raise MachineError("Invalid operation code!")

    def step(self) -> bool:
        """Execute one instruction; return whether the program is still running."""
        if not self.running:
            return False
        try:
            mnemonic, operand, indexed = self._fetch()
            self.registers.pc += 3
            self._execute(mnemonic, operand, indexed)
        except IndexError as exc:
            self.running = False
            raise MachineError(str(exc)) from exc
        if self.registers.pc >= self._end:
            self.running = False
        return self.running

    def run(self) -> Registers:
        """Execute until the program stops; return the final registers."""
        while self.running:
            self.step()
        return self.registers