import io

import pytest

from ubw.emiya import INCANTATION, wait_for_incantation


def _run(lines):
    stdin = io.StringIO("".join(line + "\n" for line in lines))
    stdout = io.StringIO()
    wait_for_incantation(stdin, stdout)
    return stdout.getvalue(), stdin


def test_full_incantation_completes():
    output, _ = _run(INCANTATION)
    assert output.startswith("Please recite the UBW incantation:\n")
    assert output.endswith("Incantation complete. Unlimited Blade Works activated!\n")
    assert output.count("Continue...") == len(INCANTATION) - 1


def test_noise_lines_are_ignored():
    lines = []
    for phrase in INCANTATION:
        lines.append("mumble")
        lines.append(f"... {phrase}!")
    output, _ = _run(lines)
    assert output.count("Continue...") == len(INCANTATION) - 1
    assert "Unlimited Blade Works activated!" in output


def test_stops_reading_after_completion():
    _, stdin = _run(list(INCANTATION) + ["left over"])
    assert stdin.read() == "left over\n"


def test_out_of_order_phrase_does_not_count():
    lines = [INCANTATION[1]] + list(INCANTATION[:1])
    stdin = io.StringIO("".join(line + "\n" for line in lines))
    stdout = io.StringIO()
    with pytest.raises(EOFError):
        wait_for_incantation(stdin, stdout)
    assert stdout.getvalue().count("Continue...") == 1


def test_out_of_order_then_correct_completes():
    output, _ = _run([INCANTATION[3]] + list(INCANTATION))
    assert output.count("Continue...") == len(INCANTATION) - 1


def test_incomplete_input_raises_eof():
    stdin = io.StringIO("".join(line + "\n" for line in INCANTATION[:-1]))
    stdout = io.StringIO()
    with pytest.raises(EOFError):
        wait_for_incantation(stdin, stdout)
    assert "activated" not in stdout.getvalue()


def test_empty_input_raises_eof():
    stdout = io.StringIO()
    with pytest.raises(EOFError):
        wait_for_incantation(io.StringIO(""), stdout)
    assert stdout.getvalue() == "Please recite the UBW incantation:\n"