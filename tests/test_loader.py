import pytest

from sicasm.assembler import assemble
from sicasm.loader import LoadError, Memory, load_object


def test_fresh_memory_is_unset():
    assert Memory(0x1000, 4).dump() == ["001000  XXXXXXXX"]


def test_unset_word_reads_zero():
    assert Memory(0x1000, 6).read_word(0x1000) == 0


def test_word_round_trip():
    memory = Memory(0x2000, 6)
    memory.write_word(0x2003, 0x123456)
    assert memory.read_word(0x2003) == 0x123456
    assert memory[0x2003] == "12"


def test_negative_word_keeps_low_digits():
    memory = Memory(0, 3)
    memory.write_word(0, -1)
    assert memory.read_word(0) == 0xFFFFFF


def test_byte_round_trip():
    memory = Memory(0x100, 2)
    memory.write_byte(0x101, 0x1AB)
    assert memory.read_byte(0x101) == 0xAB
    assert memory.read_byte(0x100) == 0


def test_write_shows_in_dump():
    memory = Memory(0x1000, 4)
    memory.write_word(0x1000, 0xABCDEF)
    assert memory.dump() == ["001000  ABCDEFXX"]


def test_dump_rows_and_groups():
    rows = Memory(0x1000, 20).dump()
    assert len(rows) == 2
    assert rows[0].startswith("001000")
    assert rows[0].count("  ") == 4
    assert rows[1].count("  ") == 1


@pytest.mark.parametrize("address", [0x0FFF, 0x1004, 0x1002])
def test_out_of_range_word(address):
    memory = Memory(0x1000, 4)
    with pytest.raises(IndexError):
        memory.read_word(address)


def test_negative_length_rejected():
    with pytest.raises(ValueError):
        Memory(0, -1)


def test_load_records():
    program = load_object(["HCOPY  001000000006\n", "T001000060C1234ABCDEF\n", "E001000\n"])
    assert program.name == "COPY"
    assert program.start == 0x1000
    assert program.length == 6
    assert program.entry == 0x1000
    assert program.memory.read_word(0x1000) == 0x0C1234
    assert program.memory.read_word(0x1003) == 0xABCDEF


def test_load_assembled_program_round_trip():
    source = [
        "COPY   START 1000",
        "FIRST  LDA FIVE",
        "       RSUB",
        "FIVE   WORD 5",
        "       END FIRST",
    ]
    result = assemble(source)
    program = load_object(result.records)
    assert program.start == result.start_address
    assert program.length == result.program_length
    assert program.memory.read_word(result.symbols["FIVE"]) == 5


def test_text_before_header():
    with pytest.raises(LoadError):
        load_object(["T00100003000000\n"])


def test_missing_header():
    with pytest.raises(LoadError):
        load_object(["E001000\n"])


def test_text_outside_program():
    with pytest.raises(LoadError):
        load_object(["HP     001000000003\n", "T00200003000000\n"])