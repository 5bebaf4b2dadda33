"""
Tests for the command-line entry point.
"""

import json

import pytest

import main as cli


def write_program(tmp_path, source: str, name: str = "prog.expr"):
    path = tmp_path / name
    path.write_text(source)
    return str(path)


def run_cli(argv):
    """Run main() and return its exit code (0 when it returns normally)."""
    try:
        cli.main(argv)
    except SystemExit as e:
        return e.code
    return 0


def test_valid_program_is_printed(tmp_path, capsys):
    path = write_program(tmp_path, "int x = (1 + 2);\nx = x * 2;\n")
    code = run_cli([path, "--quiet"])
    out = capsys.readouterr().out
    assert code == 0
    assert out == "int x = (1 + 2);\nx = x * 2;\n"


def test_check_only(tmp_path, capsys):
    path = write_program(tmp_path, "bool b = true;\n")
    code = run_cli([path, "--check"])
    err = capsys.readouterr().err
    assert code == 0
    assert "no errors in" in err


def test_fatal_error_exit_code(tmp_path, capsys):
    path = write_program(tmp_path, "y = 1;\n")
    code = run_cli([path])
    err = capsys.readouterr().err
    assert code == 1
    assert "variable 'y' not declared (1:1)" in err


def test_non_fatal_errors_are_all_listed(tmp_path, capsys):
    path = write_program(tmp_path, "int a = b;\nint a = c;\n")
    code = run_cli([path])
    err = capsys.readouterr().err
    assert code == 1
    assert "found 3 error(s)" in err
    assert "variable 'b' not declared (1:9)" in err
    assert "variable 'a' already declared (2:5)" in err
    assert "variable 'c' not declared (2:9)" in err


def test_syntax_error_skips_semantics(tmp_path, capsys):
    path = write_program(tmp_path, "y = ;\n")
    code = run_cli([path])
    err = capsys.readouterr().err
    assert code == 1
    assert err.startswith("Syntax error:")
    assert "not declared" not in err


def test_missing_file(tmp_path, capsys):
    code = run_cli([str(tmp_path / "missing.expr")])
    err = capsys.readouterr().err
    assert code == 1
    assert "file not found" in err


def test_wrong_extension_warns(tmp_path, capsys):
    path = write_program(tmp_path, "1;\n", name="prog.txt")
    code = run_cli([path, "--quiet"])
    captured = capsys.readouterr()
    assert code == 0
    assert "does not have .expr extension" in captured.err
    assert captured.out == "1;\n"


def test_ast_dump_is_json(tmp_path, capsys):
    path = write_program(tmp_path, "int x = 1;\n")
    code = run_cli([path, "--ast"])
    out = capsys.readouterr().out
    assert code == 0
    dumped = json.loads(out)
    assert dumped["statements"][0]["type"] == "int"


@pytest.mark.parametrize("flag", ["-v", "--version"])
def test_version(flag, capsys):
    code = run_cli([flag])
    assert code == 0
    assert cli.VERSION in capsys.readouterr().out


def test_invalid_log_level_is_rejected(tmp_path, capsys):
    path = write_program(tmp_path, "1;\n")
    code = run_cli([path, "--log-level=verbose"])
    assert code == 2
    assert "invalid choice" in capsys.readouterr().err


def test_log_level_is_case_insensitive(tmp_path, capsys):
    path = write_program(tmp_path, "1;\n")
    code = run_cli([path, "--log-level=debug", "--quiet"])
    assert code == 0
    assert capsys.readouterr().out == "1;\n"
