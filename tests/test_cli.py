import io
import json
from pathlib import Path

import pytest
from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from lox import lox_cli

SOURCE = "var x = 1 + 2;\nprint x;"
CANONICAL = "var x = 1.0 + 2.0;\nprint x;"


def test_run_lox_string_input_prints(capsys: pytest.CaptureFixture[str]) -> None:
    status = lox_cli.run_lox(source=SOURCE, is_string=True)
    captured = capsys.readouterr()
    assert status == 0
    assert captured.out.strip() == CANONICAL
    assert captured.err == ""


def test_run_lox_file_input(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    file_path = tmp_path / "input.lox"
    file_path.write_text(SOURCE)
    assert lox_cli.run_lox(source=str(file_path)) == 0
    assert capsys.readouterr().out.strip() == CANONICAL


def test_run_lox_rejects_other_extensions(tmp_path: Path) -> None:
    file_path = tmp_path / "input.txt"
    file_path.write_text(SOURCE)
    with pytest.raises(ValueError, match="Only .lox files"):
        lox_cli.run_lox(source=str(file_path))


def test_run_lox_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        lox_cli.run_lox(source=str(tmp_path / "missing.lox"))


def test_run_lox_pretty_output(capsys: pytest.CaptureFixture[str]) -> None:
    lox_cli.run_lox(source=SOURCE, is_string=True, pretty=True)
    out = capsys.readouterr().out
    assert "Canonical Source" in out
    assert "=" * 20 in out
    assert CANONICAL in out


def test_run_lox_tokens(capsys: pytest.CaptureFixture[str]) -> None:
    lox_cli.run_lox(source="var x;", is_string=True, tokens=True)
    lines = capsys.readouterr().out.strip().splitlines()
    assert lines == [
        "1:1 VAR 'var'",
        "1:5 IDENT 'x'",
        "1:6 SEMICOLON ';'",
        "1:7 EOF 'EOF'",
    ]


def test_run_lox_json(capsys: pytest.CaptureFixture[str]) -> None:
    lox_cli.run_lox(source="print -a;", is_string=True, as_json=True)
    tree = json.loads(capsys.readouterr().out)
    assert tree == [
        {
            "kind": "print",
            "line": 1,
            "col": 1,
            "expression": {
                "kind": "unary",
                "line": 1,
                "col": 7,
                "operator": "-",
                "operand": {"kind": "variable", "line": 1, "col": 8, "name": "a"},
            },
        }
    ]


def test_run_lox_output_file(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    output_path = tmp_path / "out.lox"
    lox_cli.run_lox(source=SOURCE, is_string=True, out=str(output_path), pretty=True)
    assert output_path.read_text() == CANONICAL + "\n"
    assert f"(wrote to {output_path})" in capsys.readouterr().out


def test_run_lox_output_file_is_quiet_without_pretty(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    output_path = tmp_path / "out.lox"
    lox_cli.run_lox(source=SOURCE, is_string=True, out=str(output_path))
    assert capsys.readouterr().out == ""


def test_run_lox_reports_all_errors_to_stderr(
    capsys: pytest.CaptureFixture[str], tmp_path: Path
) -> None:
    output_path = tmp_path / "out.lox"
    status = lox_cli.run_lox(
        source="var = 1;\nprint 1 @;\nprint 2",
        is_string=True,
        out=str(output_path),
    )
    captured = capsys.readouterr()
    assert status == lox_cli.EX_DATAERR
    assert captured.out == ""
    assert captured.err.splitlines() == [
        "[line 2, col 9] Error: Unexpected character '@'.",
        "[line 1, col 5] Error at '=': Expected variable name.",
        "[line 3, col 8] Error at end: Expected ';' after value.",
    ]
    assert not output_path.exists()


def test_run_lox_out_of_range_number_is_not_printed(
    capsys: pytest.CaptureFixture[str],
) -> None:
    source = "print 1" + "0" * 400 + ";"
    status = lox_cli.run_lox(source=source, is_string=True, as_json=True)
    captured = capsys.readouterr()
    assert status == lox_cli.EX_DATAERR
    assert captured.out == ""
    assert captured.err.strip() == (
        "[line 1, col 7] Error: Number literal out of range."
    )


def test_main_exits_zero(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc_info:
        lox_cli.main(["-s", "print true;"])
    assert exc_info.value.code == 0
    assert capsys.readouterr().out.strip() == "print true;"


def test_main_exits_65_on_syntax_error(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc_info:
        lox_cli.main(["-s", "print (1;"])
    assert exc_info.value.code == 65
    assert "Expected ')' after expression." in capsys.readouterr().err


def test_main_reads_stdin(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO("{ print nil; }"))
    with pytest.raises(SystemExit) as exc_info:
        lox_cli.main([])
    assert exc_info.value.code == 0
    assert capsys.readouterr().out.strip().splitlines() == [
        "{",
        "    print nil;",
        "}",
    ]


def test_main_dash_reads_stdin(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO("print 1;"))
    with pytest.raises(SystemExit):
        lox_cli.main(["-", "--json"])
    assert json.loads(capsys.readouterr().out)[0]["kind"] == "print"


def test_main_bad_extension_is_usage_error(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc_info:
        lox_cli.main(["notes.txt"])
    assert exc_info.value.code == 2
    assert "Only .lox files are supported." in capsys.readouterr().err


def test_main_missing_file_is_usage_error(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    with pytest.raises(SystemExit) as exc_info:
        lox_cli.main([str(tmp_path / "nope.lox")])
    assert exc_info.value.code == 2
    assert "nope.lox" in capsys.readouterr().err


def test_main_tokens_and_json_are_exclusive() -> None:
    with pytest.raises(SystemExit) as exc_info:
        lox_cli.main(["-s", "print 1;", "--tokens", "--json"])
    assert exc_info.value.code == 2


@settings(
    max_examples=30,
    deadline=None,
    suppress_health_check=[HealthCheck.function_scoped_fixture],
)  # type: ignore[misc]
@given(st.text(max_size=40))  # type: ignore[misc]
def test_run_lox_status_matches_stderr(
    capsys: pytest.CaptureFixture[str], source: str
) -> None:
    capsys.readouterr()
    status = lox_cli.run_lox(source=source, is_string=True)
    err = capsys.readouterr().err
    assert status in (0, lox_cli.EX_DATAERR)
    assert (status == 0) == (err == "")
