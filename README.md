# sicasm

A two-pass assembler and an interactive simulator for the SIC
(Simplified Instructional Computer) machine.

## Installing

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Assembling

```
sicasm program.asm
```

The source uses the fixed SIC layout: columns 1–6 hold the label, and the
mnemonic and the operand follow, separated by spaces. A line that starts with
`.` is a comment and blank lines are skipped. An operand that ends in `,X`
uses indexed addressing. The directives are `START`, `END`, `BYTE`, `WORD`,
`RESB` and `RESW`; `BYTE` takes `C'...'` or `X'...'` constants.

Pass 1 prints the program length and the symbol table. Pass 2 prints the
object code of every instruction and writes the object program next to the
source: the file name up to its first dot, plus `.obj` (`program.asm` becomes
`program.obj`). The object program holds an `H` header record, `T` text
records of up to 30 bytes each, and an `E` end record. A `RESB` or `RESW`
ends the current text record.

Duplicate symbols, undefined symbols and unknown operation codes are printed
as `Error: ...` messages and assembly carries on. Without exactly one
argument, or when the file cannot be opened, the command prints its usage
line and exits with status 1.

From Python:

```python
from sicasm.assembler import assemble

with open("program.asm") as source:
    result = assemble(source)

print(result.object_program())        # records, one per line
print("\n".join(result.symbol_listing()))
print(result.messages)                # errors and object-code trace
```

`assemble` returns an `AssemblyResult` with `program_name`,
`start_address`, `program_length`, `symbols`, `records` and `messages`.
`parse_line`, `byte_length`, `byte_constant_hex` and `object_file_name` are
available on their own, and the `Assembler` class runs `pass_one` and
`pass_two` separately. `sicasm.opcodes` maps mnemonics to opcodes with
`opcode_for` and back with `mnemonic_for`.

## Simulating

```
sicsim
```

This starts a prompt, `SIC Simulator> `, that takes these commands:

| Command         | Effect                                                        |
|-----------------|---------------------------------------------------------------|
| `load <file>`   | load an object program into memory                            |
| `show`          | dump memory in hex, 16 bytes per row in groups of 4           |
| `run`           | run the loaded program from the address in its `E` record     |
| `unload`        | discard the loaded program                                    |
| `exit`          | leave the simulator                                           |

Only one program can be loaded at a time; `load` without a file name reuses
the last one given. On `exit` or at end of input a loaded program is
unloaded.

Memory that the object program never sets shows as `XX` and reads as zero.
`RD` asks for a character on the console, `WD` prints the character in
register A when it is printable, and `TD` always reports the device ready. A
run stops when `RSUB` returns with register L at zero, when the program
counter passes the end of the program, on an unknown operation code, on an
access outside the program's memory, or when `RD` finds no input. The
registers A, X, L, SW and PC are printed after every run.

From Python:

```python
import sys
from sicasm.loader import load_object
from sicasm.machine import Machine
from sicasm.simulator import Simulator

with open("program.obj") as obj:
    program = load_object(obj)
machine = Machine(program, read_char=lambda: "a", write_char=print)
registers = machine.run()
print("\n".join(registers.describe()))

Simulator(sys.stdin, sys.stdout).loop()
```

`load_object` raises `LoadError` for a missing header record, a text record
before the header, or a text record outside the program; `Machine.step` and
`Machine.run` raise `MachineError` when execution cannot continue.

## What it does not do

- Only the basic SIC instruction set: no SIC/XE formats, addressing modes,
  literals, expressions, `EQU`/`ORG`, program blocks or relocation.
- `STSW` is assembled but the simulator treats it as an unknown operation
  code and stops.
- There are no real devices: `RD`, `WD` and `TD` work on the console only.
- No breakpoints, single-step command or register editing in the shell.