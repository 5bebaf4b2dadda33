"""
Tests for re-serializing checked programs back into source text.
"""

import pytest

from exprlang.ExprAst import Number, Parens, Program, Variable
from exprlang.ExprPrinter import to_source
from exprlang.ExprSemanticChecker import analyze_source


def round_trip(src: str) -> str:
    """Check `src` and print the resulting program."""
    result = analyze_source(src)
    assert result.ok, result.messages
    return to_source(result.program)


def test_parens_are_reproduced():
    assert round_trip("int x = (1 + 2) * 3;") == "int x = (1 + 2) * 3;"


def test_nested_parens_are_reproduced():
    assert round_trip("((1));") == "((1));"


def test_parenthesized_negation():
    assert round_trip("int x = -(-x);") == "int x = -(-x);"


def test_program_one_statement_per_line():
    src = """\
int x = 1;
float f = 2.50;
bool b = !(true || false) && true;
x = x % 2 - 1;
"""
    expected = """\
int x = 1;
float f = 2.50;
bool b = !(true || false) && true;
x = x % 2 - 1;"""
    assert round_trip(src) == expected


def test_empty_program():
    assert to_source(Program()) == ""


def test_single_node():
    assert to_source(Parens(Variable("y"))) == "(y)"
    assert to_source(Number(4.0, True)) == "4"


def test_unknown_node_raises():
    with pytest.raises(TypeError):
        to_source(object())
