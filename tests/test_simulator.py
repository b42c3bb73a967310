import io

from sicasm.assembler import assemble
from sicasm.simulator import Simulator, main


def write_program(tmp_path, *rows):
    source = [f"{label:<6} {op} {operand}".rstrip() for label, op, operand in rows]
    result = assemble(source)
    path = tmp_path / "prog.obj"
    path.write_text(result.object_program(), encoding="utf-8")
    return str(path)


def adder(tmp_path):
    return write_program(
        tmp_path,
        ("COPY", "START", "1000"),
        ("FIRST", "LDA", "FIVE"),
        ("", "ADD", "THREE"),
        ("", "STA", "RESULT"),
        ("", "RSUB", ""),
        ("FIVE", "WORD", "5"),
        ("THREE", "WORD", "3"),
        ("RESULT", "RESW", "1"),
        ("", "END", "FIRST"),
    )


def session(text):
    out = io.StringIO()
    Simulator(io.StringIO(text), out).loop()
    return out.getvalue()


def test_load_run_exit(tmp_path):
    path = adder(tmp_path)
    output = session(f"load {path}\nrun\nexit\n")
    assert f"{path} is loaded successfully." in output
    assert "Register A  = [000008];" in output
    assert "Program execution ended!" in output
    assert output.rstrip().endswith(f"{path} is unloaded successfully.")


def test_show_before_load():
    assert "Error: No program is loaded!" in session("show\nexit\n")


def test_show_after_load(tmp_path):
    path = adder(tmp_path)
    output = session(f"load {path}\nshow\nexit\n")
    assert "\n001000  " in output or "> 001000  " in output


def test_double_load(tmp_path):
    path = adder(tmp_path)
    output = session(f"load {path}\nload {path}\nexit\n")
    assert "Error: already loaded in memory!" in output


def test_missing_file(tmp_path):
    missing = str(tmp_path / "absent.obj")
    output = session(f"load {missing}\nexit\n")
    assert f"Error: Cannot open file {missing}!" in output


def test_unload_without_program():
    assert "Error: No program is loaded!" in session("unload\nexit\n")


def test_unknown_command_and_exit():
    out = io.StringIO()
    simulator = Simulator(io.StringIO(""), out)
    assert simulator.execute("jump") is True
    assert "Unknown Command!" in out.getvalue()
    assert simulator.execute("exit") is False


def test_blank_lines_are_skipped():
    output = session("\n\nexit\n")
    assert "Unknown Command!" not in output
    assert output.count(Simulator.PROMPT) == 1


def test_end_of_input_stops_loop(tmp_path):
    path = adder(tmp_path)
    output = session(f"load {path}\n")
    assert output.rstrip().endswith("is unloaded successfully.")


def test_read_and_write_device(tmp_path):
    path = write_program(
        tmp_path,
        ("ECHO", "START", "1000"),
        ("FIRST", "RD", "DEV"),
        ("", "WD", "DEV"),
        ("", "RSUB", ""),
        ("DEV", "BYTE", "X'05'"),
        ("", "END", "FIRST"),
    )
    output = session(f"load {path}\nrun\n q\nexit\n")
    assert "Please input a character: " in output
    assert "Output a character: [q]" in output
    assert "Unknown Command!" not in output


def test_invalid_opcode_reported(tmp_path):
    path = write_program(
        tmp_path,
        ("BAD", "START", "1000"),
        ("FIRST", "STSW", "SPOT"),
        ("SPOT", "WORD", "0"),
        ("", "END", "FIRST"),
    )
    output = session(f"load {path}\nrun\nexit\n")
    assert "Error: Invalid operation code!" in output
    assert "Program execution ended!" in output


def test_main_uses_standard_streams(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("exit\n"))
    assert main([]) == 0
    assert capsys.readouterr().out == Simulator.PROMPT