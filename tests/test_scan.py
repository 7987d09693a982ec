import io

import pytest
from console import BufferedConsole, StdConsole
from errors import ExecutionError
from tests.utils import program, run_text, run_with_values


def test_scan_assigns_positionally_with_types():
    src = program(
        "INT i",
        "FLOAT f",
        "BOOL b",
        "CHAR c",
        "STRING s",
        "SCAN: i, f, b, c, s",
    )
    _, values = run_with_values(src, ["12, 2.5, TRUE, q,  some text  "])
    assert values == {"i": 12, "f": 2.5, "b": True, "c": "q", "s": "some text"}


def test_each_scan_reads_one_line():
    src = program("INT a, b", "SCAN: a", "SCAN: b", "DISPLAY: a & \",\" & b")
    assert run_text(src, ["1", "2"]).lines == ["1,2"]


def test_scan_waits_for_input_before_later_statements():
    src = program("INT a", 'DISPLAY: "prompt"', "SCAN: a", "DISPLAY: a * 2")
    console = run_text(src, ["21"])
    assert console.lines == ["prompt", "42"]
    assert console.inputs == []


def test_scan_invalid_int_fails_the_run():
    with pytest.raises(ExecutionError) as exc:
        run_text(program("INT a", "SCAN: a"), ["abc"])
    assert "Invalid input for INT type" in str(exc.value)


def test_scan_invalid_bool_fails_the_run():
    with pytest.raises(ExecutionError):
        run_text(program("BOOL b", "SCAN: b"), ["yes"])


def test_scan_char_must_be_one_character():
    with pytest.raises(ExecutionError):
        run_text(program("CHAR c", "SCAN: c"), ["ab"])


def test_scan_value_count_must_match():
    with pytest.raises(ExecutionError) as exc:
        run_text(program("INT a, b", "SCAN: a, b"), ["1"])
    assert "expected 2 value(s) but received 1" in str(exc.value)


def test_scan_at_end_of_input():
    with pytest.raises(ExecutionError):
        run_text(program("INT a", "SCAN: a"), [])


def test_buffered_console_records_output():
    console = BufferedConsole(["x"])
    console.write("one")
    console.write("two")
    assert console.read_line() == "x"
    assert console.output == "one\ntwo"
    with pytest.raises(EOFError):
        console.read_line()


def test_std_console_uses_given_streams():
    stdin = io.StringIO("first line\r\nsecond\n")
    stdout = io.StringIO()
    console = StdConsole(stdin=stdin, stdout=stdout)
    console.write("hello")
    assert stdout.getvalue() == "hello\n"
    assert console.read_line() == "first line"
    assert console.read_line() == "second"
    with pytest.raises(EOFError):
        console.read_line()


def test_scan_prompts_with_target_names():
    src = program("INT a", "FLOAT b", "SCAN: a, b", "SCAN: a")
    console = run_text(src, ["1, 2", "3"])
    assert console.prompts == ["SCAN a, b:", "SCAN a:"]


def test_scan_into_float_widens_int_results():
    src = program("FLOAT f", "INT i", "SCAN: i", "f = i", "DISPLAY: f / 2")
    assert run_text(src, ["5"]).lines == ["2.5"]


def test_std_console_writes_prompt_before_reading():
    stdin = io.StringIO("7\n")
    stdout = io.StringIO()
    console = StdConsole(stdin=stdin, stdout=stdout)
    assert console.read_line("SCAN x, y:") == "7"
    assert stdout.getvalue() == "SCAN x, y:"
