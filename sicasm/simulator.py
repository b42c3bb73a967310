"""Interactive command shell for loading and running SIC object programs."""

from __future__ import annotations

import sys
from typing import TextIO

from .loader import LoadedProgram, LoadError, load_object
from .machine import Machine, MachineError

_NOT_LOADED = "Error: No program is loaded!"


class Simulator:
    """Reads commands (load, show, unload, run, exit) and carries them out."""

    PROMPT = "SIC Simulator> "

    def __init__(self, stdin: TextIO, stdout: TextIO) -> None:
        self.stdin = stdin
        self.stdout = stdout
        self.program: LoadedProgram | None = None
        self.file_name = ""

    def _say(self, text: str) -> None:
        self.stdout.write(f"{text}\n")

    def load(self, path: str) -> None:
        """Load an object file unless a program is already loaded."""
        self.file_name = path
        if self.program is not None:
            self._say("Error: already loaded in memory!")
            return
        try:
            with open(path, encoding="utf-8") as handle:
                program = load_object(handle)
        except OSError:
            self._say(f"Error: Cannot open file {path}!")
            return
        except LoadError as exc:
            self._say(f"Error: {exc}")
            return
        self.program = program
        self._say(
            f"{path} is loaded successfully.(Starts at {program.start:x}, "
            f"Length = {program.length:X}.)"
        )

    def show(self) -> None:
        """Print the memory contents of the loaded program."""
        if self.program is None:
            self._say(_NOT_LOADED)
            return
        self._say("\n".join(self.program.memory.dump()))

    def unload(self) -> None:
        """Discard the loaded program."""
        if self.program is None:
            self._say(_NOT_LOADED)
            return
        self.program = None
        self._say(f"{self.file_name} is unloaded successfully.")

    def _read_char(self) -> str:
        self.stdout.write("Please input a character: ")
        while True:
            char = self.stdin.read(1)
            if not char or not char.isspace():
                return char

    def _write_char(self, char: str) -> None:
        self._say(f"Output a character: [{char}]")

    def run(self) -> None:
        """Run the loaded program and report its registers."""
        if self.program is None:
            self._say(_NOT_LOADED)
            return
        self._say("Start running the program.")
        machine = Machine(self.program, self._read_char, self._write_char)
        try:
            machine.run()
        except MachineError as exc:
            self._say(f"Error: {exc}")
        for line in machine.registers.describe():
            self._say(line)
        self._say("Program execution ended!")

    def execute(self, line: str) -> bool:
        """Carry out one command line; return False when asked to exit."""
        words = line.split()
        command = words[0] if words else ""
        if command == "exit":
            return False
        if command == "load":
            self.load(words[1] if len(words) > 1 else self.file_name)
        elif command == "show":
            self.show()
        elif command == "unload":
            self.unload()
        elif command == "run":
            self.run()
        else:
            self._say("Unknown Command!")
        return True

    def _next_command(self) -> str | None:
        while True:
            line = self.stdin.readline()
            if not line:
                return None
            if line.rstrip("\r\n"):
                return line

    def loop(self) -> None:
        """Prompt for commands until exit or end of input, then unload."""
        while True:
            self.stdout.write(self.PROMPT)
            line = self._next_command()
            if line is None or not self.execute(line):
                break
        if self.program is not None:
            self.unload()


def main(argv: list[str] | None = None) -> int:
    """Start the interactive simulator on standard input and output."""
    Simulator(sys.stdin, sys.stdout).loop()
    return 0