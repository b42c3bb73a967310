"""SIC instruction set: mnemonics and their two-digit hexadecimal opcodes."""

from __future__ import annotations

from types import MappingProxyType

OPCODES = MappingProxyType(
    {
        "ADD": "18",
        "AND": "40",
        "COMP": "28",
        "DIV": "24",
        "J": "3C",
        "JEQ": "30",
        "JGT": "34",
        "JLT": "38",
        "JSUB": "48",
        "LDA": "00",
        "LDCH": "50",
        "LDL": "08",
        "LDX": "04",
        "MUL": "20",
        "OR": "44",
        "RD": "D8",
        "RSUB": "4C",
        "STA": "0C",
        "STCH": "54",
        "STL": "14",
        "STSW": "E8",
        "STX": "10",
        "SUB": "1C",
        "TD": "E0",
        "TIX": "2C",
        "WD": "DC",
    }
)

_MNEMONICS = {code: mnemonic for mnemonic, code in OPCODES.items()}


def opcode_for(mnemonic: str) -> str | None:
    """Return the opcode of an instruction mnemonic, or None if it is not one."""
    return OPCODES.get(mnemonic)


def mnemonic_for(code: str) -> str | None:
    """Return the mnemonic of a two-digit opcode, or None if it is unknown."""
    return _MNEMONICS.get(code)