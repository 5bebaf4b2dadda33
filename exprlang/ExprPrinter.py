"""
Expr Printer - Re-serializes checked AST nodes back into Expr source text.
"""
from typing import Any

from exprlang.ExprAst import (
    AddSub,
    And,
    Assignment,
    Bool,
    MultDivMod,
    Not,
    Number,
    Or,
    Parens,
    Program,
    UnaryMinus,
    Variable,
    VariableDeclaration,
)
from exprlang.ExprSemanticChecker import format_bool, format_number


class ExprPrinter:
    def print_program(self, program: Program) -> str:
        return "\n".join(f"{self.print_expr(stmt)};" for stmt in program)

    def print_expr(self, node: Any) -> str:
        if isinstance(node, Number):
            return format_number(node)
        if isinstance(node, Bool):
            return format_bool(node.value)
        if isinstance(node, Variable):
            return node.name
        if isinstance(node, UnaryMinus):
            return f"-{self.print_expr(node.operand)}"
        if isinstance(node, Not):
            return f"!{self.print_expr(node.operand)}"
        if isinstance(node, (AddSub, MultDivMod)):
            return self._binary(node.left, node.op, node.right)
        if isinstance(node, And):
            return self._binary(node.left, "&&", node.right)
        if isinstance(node, Or):
            return self._binary(node.left, "||", node.right)
        if isinstance(node, Parens):
            return f"({self.print_expr(node.inner)})"
        if isinstance(node, VariableDeclaration):
            return f"{node.declared_type} {node.name} = {self.print_expr(node.initializer)}"
        if isinstance(node, Assignment):
            return f"{node.name} = {self.print_expr(node.value)}"
        raise TypeError(f"cannot print {type(node).__name__}")

    def _binary(self, left, op: str, right) -> str:
        return f"{self.print_expr(left)} {op} {self.print_expr(right)}"


def to_source(node: Any) -> str:
    """Source text for a Program or a single node."""
    printer = ExprPrinter()
    if isinstance(node, Program):
        return printer.print_program(node)
    return printer.print_expr(node)
