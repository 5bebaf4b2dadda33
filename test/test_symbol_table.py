# test_symbol_table.py

import pytest

from exprlang.ExprSymbolTable import Symbol, SymbolTable, SymbolTableError


def test_symbol_defaults():
    s = Symbol(name="x", type_t="int")

    assert s.name == "x"
    assert s.type_t == "int"
    assert s.line is None
    assert s.col is None


def test_symbol_table_initial_state():
    st = SymbolTable()

    assert len(st) == 0
    assert st.names() == []


def test_declare_success_and_lookup():
    st = SymbolTable()

    sym = st.declare("x", "int", 1, 5)

    assert st.lookup("x") == "int"
    assert st.get_symbol("x") is sym
    assert (sym.line, sym.col) == (1, 5)
    assert "x" in st


def test_declare_duplicate_raises():
    st = SymbolTable()
    st.declare("x", "int")

    with pytest.raises(SymbolTableError, match="variable 'x' already declared"):
        st.declare("x", "float")


def test_first_declaration_stays_authoritative():
    st = SymbolTable()
    st.declare("x", "int")

    with pytest.raises(SymbolTableError):
        st.declare("x", "bool")

    assert st.lookup("x") == "int"
    assert len(st) == 1


def test_lookup_nonexistent_returns_none():
    st = SymbolTable()

    assert st.lookup("does_not_exist") is None
    assert st.get_symbol("does_not_exist") is None
    assert not st.symbol_exists("does_not_exist")


def test_names_keep_declaration_order():
    st = SymbolTable()
    for name, type_t in [("b", "bool"), ("a", "int"), ("f", "float")]:
        st.declare(name, type_t)

    assert st.names() == ["b", "a", "f"]


def test_symbols_are_immutable():
    st = SymbolTable()
    sym = st.declare("x", "int")

    with pytest.raises(AttributeError):
        sym.type_t = "float"


def test_tables_do_not_share_state():
    first = SymbolTable()
    second = SymbolTable()
    first.declare("x", "int")

    assert second.lookup("x") is None
