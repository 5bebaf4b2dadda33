"""
Expr Semantic Checker - Turns a parse tree into a typed, validated AST.

The checker walks the tree once, post-order, and:
- Declares variables in the symbol table and rejects redeclarations
- Rejects reads and assignments of undeclared variables
- Checks that literals assigned to a variable fit its declared type
- Rejects consecutive unary minus (`--x`)

Errors are either non-fatal (collected; the walk goes on) or fatal (the run
stops at once). Either way `analyze` returns an AnalysisResult and never
raises for a semantic problem.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from exprlang.ExprAst import (
    BOOL,
    FLOAT,
    INT,
    AddSub,
    And,
    Assignment,
    Bool,
    Expression,
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
from exprlang.ExprParser import ParseNode, parser
from exprlang.ExprSymbolTable import SymbolTable, SymbolTableError

log = logging.getLogger("exprlang.semantic")


# --- Error Handling ---


@dataclass
class SemanticError:
    """Represents a semantic error found during analysis."""

    message: str
    line: Optional[int] = None
    col: Optional[int] = None

    def __str__(self) -> str:
        if self.line is not None and self.col is not None:
            return f"{self.message} ({self.line}:{self.col})"
        return self.message


class ExprSemanticException(Exception):
    """Aborts the current analysis run on a fatal semantic error."""

    def __init__(self, error: SemanticError):
        self.error = error
        super().__init__(str(error))


@dataclass
class AnalysisContext:
    """State owned by one analysis run."""

    sym_table: SymbolTable = field(default_factory=SymbolTable)
    errors: list[SemanticError] = field(default_factory=list)
    # literal currently held by each variable, when it is known
    literals: dict[str, Expression] = field(default_factory=dict)

    def bind_literal(self, name: str, literal: Optional[Expression]) -> None:
        if literal is None:
            self.literals.pop(name, None)
        else:
            self.literals[name] = literal

    def report_error(self, message: str, node: ParseNode) -> None:
        """Record a non-fatal semantic error."""
        error = SemanticError(message, node.line, node.column)
        log.debug("semantic error: %s", error)
        self.errors.append(error)


@dataclass
class AnalysisResult:
    """
    Outcome of one run: a Program with no errors, a single fatal error, or
    one or more non-fatal errors and no Program.
    """

    program: Optional[Program] = None
    errors: list[SemanticError] = field(default_factory=list)
    fatal: bool = False

    @property
    def ok(self) -> bool:
        return self.program is not None

    @property
    def messages(self) -> list[str]:
        return [str(e) for e in self.errors]


# --- Helper Functions ---


def fatal(message: str, node: ParseNode) -> ExprSemanticException:
    return ExprSemanticException(SemanticError(message, node.line, node.column))


def format_number(number: Number) -> str:
    """Render a number literal the way it reads in messages and printed source."""
    if number.text is not None:
        return number.text
    if number.is_integer:
        return str(int(number.value))
    return repr(number.value)


def format_bool(value: bool) -> str:
    return "true" if value else "false"


def infer_type(expr: Any, sym_table: SymbolTable) -> Optional[str]:
    """
    Static type of an expression, or None when it cannot be known (an
    undeclared variable, or a statement node).
    """
    if isinstance(expr, Number):
        return INT if expr.is_integer else FLOAT
    if isinstance(expr, Bool):
        return BOOL
    if isinstance(expr, Variable):
        return sym_table.lookup(expr.name)
    if isinstance(expr, UnaryMinus):
        return infer_type(expr.operand, sym_table)
    if isinstance(expr, (Not, And, Or)):
        return BOOL
    if isinstance(expr, (AddSub, MultDivMod)):
        return INT
    if isinstance(expr, Parens):
        return infer_type(expr.inner, sym_table)
    return None


def resolve_literal(value: Expression, ctx: AnalysisContext) -> Optional[Expression]:
    """
    The literal an initializer stands for: the literal itself, or the literal
    a variable currently holds. None for anything else.
    """
    if isinstance(value, (Number, Bool)):
        return value
    if isinstance(value, Variable):
        return ctx.literals.get(value.name)
    return None


def check_assignable(
    target_type: str, value: Optional[Expression], target: ParseNode
) -> None:
    """
    Raise a fatal error when a literal does not fit the variable it is
    assigned to. Composite expressions are not checked.
    """
    if target_type == BOOL and isinstance(value, Number):
        raise fatal(
            f"cannot assign number '{format_number(value)}' to bool variable", target
        )
    if target_type == INT and isinstance(value, Bool):
        raise fatal(
            f"cannot assign boolean '{format_bool(value.value)}' to int variable",
            target,
        )
    if target_type == INT and isinstance(value, Number) and not value.is_integer:
        raise fatal(
            f"cannot assign float '{format_number(value)}' to int variable", target
        )


# --- Semantic Checker Class ---


class ExprSemanticChecker:
    """
    Stateless transformer from ParseNode trees to AST nodes. All run state
    lives in the AnalysisContext passed to every method.
    """

    def analyze(self, tree: ParseNode) -> AnalysisResult:
        """Entry point - analyze a whole program with a fresh context."""
        ctx = AnalysisContext()
        log.info("analyzing %d statement(s)", len(tree.children))
        try:
            program = self.program(tree, ctx)
        except ExprSemanticException as e:
            log.info("analysis aborted: %s", e.error)
            return AnalysisResult(errors=[e.error], fatal=True)

        if ctx.errors:
            log.info("analysis finished with %d error(s)", len(ctx.errors))
            return AnalysisResult(errors=list(ctx.errors))
        log.info("analysis finished without errors")
        return AnalysisResult(program=program)

    def transform(self, node: ParseNode, ctx: AnalysisContext) -> Expression:
        """Transform one statement or expression node."""
        kind = node.kind
        if kind == "declaration":
            return self.declaration(node, ctx)
        if kind == "assignment":
            return self.assignment(node, ctx)
        if kind == "variable":
            return self.variable(node, ctx)
        if kind == "number":
            return self.number(node)
        if kind == "boolean":
            return self.boolean(node)
        if kind == "unary_minus":
            return self.unary_minus(node, ctx)
        if kind == "not":
            return Not(self.transform(node.child(0), ctx))
        if kind == "add_sub":
            left, right, op = self._binary_operands(node, ctx)
            return AddSub(left, right, op)
        if kind == "mult_div_mod":
            left, right, op = self._binary_operands(node, ctx)
            return MultDivMod(left, right, op)
        if kind == "and":
            left, right, _ = self._binary_operands(node, ctx)
            return And(left, right)
        if kind == "or":
            left, right, _ = self._binary_operands(node, ctx)
            return Or(left, right)
        if kind == "parens":
            return Parens(self.transform(node.child(0), ctx))
        raise ValueError(f"unexpected node kind '{kind}' ({node.line}:{node.column})")

    # --- Statements ---

    def program(self, node: ParseNode, ctx: AnalysisContext) -> Program:
        statements = []
        for stmt in node.children:
            log.debug("statement %s at %d:%d", stmt.kind, stmt.line, stmt.column)
            statements.append(self.transform(stmt, ctx))
        return Program(tuple(statements))

    def declaration(self, node: ParseNode, ctx: AnalysisContext) -> VariableDeclaration:
        """Handle variable declaration: <type> <id> = <expr>"""
        type_node, target, value_node = node.children
        declared_type = type_node.text
        name = target.text

        try:
            ctx.sym_table.declare(name, declared_type, target.line, target.column)
            declared = True
        except SymbolTableError:
            ctx.report_error(f"variable '{name}' already declared", target)
            declared = False

        value = self.transform(value_node, ctx)
        literal = self._check_initializer(declared_type, value, target, ctx)
        if declared:
            ctx.bind_literal(name, literal)
        return VariableDeclaration(name, declared_type, value)

    def assignment(self, node: ParseNode, ctx: AnalysisContext) -> Assignment:
        """Handle assignment: <id> = <expr>"""
        target, value_node = node.children
        name = target.text

        target_type = ctx.sym_table.lookup(name)
        if target_type is None:
            raise fatal(f"variable '{name}' not declared", target)

        value = self.transform(value_node, ctx)
        literal = self._check_initializer(target_type, value, target, ctx)
        ctx.bind_literal(name, literal)
        return Assignment(name, value)

    def _check_initializer(
        self,
        target_type: str,
        value: Expression,
        target: ParseNode,
        ctx: AnalysisContext,
    ) -> Optional[Expression]:
        """Infer the value's type and check it against the target. Returns its literal."""
        inferred = infer_type(value, ctx.sym_table)
        log.debug("%s: %s <- %s", target.text, target_type, inferred or "unknown")
        literal = resolve_literal(value, ctx)
        check_assignable(target_type, literal, target)
        return literal

    # --- Expressions ---

    def variable(self, node: ParseNode, ctx: AnalysisContext) -> Variable:
        name = node.text
        if name not in ctx.sym_table:
            ctx.report_error(f"variable '{name}' not declared", node)
        return Variable(name)

    def number(self, node: ParseNode) -> Number:
        text = node.text
        return Number(float(text), "." not in text, text)

    def boolean(self, node: ParseNode) -> Bool:
        return Bool(node.text == "true")

    def unary_minus(self, node: ParseNode, ctx: AnalysisContext) -> UnaryMinus:
        operand = self.transform(node.child(0), ctx)
        if isinstance(operand, UnaryMinus) and isinstance(
            operand.operand, (Number, Variable)
        ):
            raise fatal("consecutive unary minus not allowed", node)
        return UnaryMinus(operand)

    def _binary_operands(
        self, node: ParseNode, ctx: AnalysisContext
    ) -> tuple[Expression, Expression, str]:
        left_node, op_node, right_node = node.children
        left = self.transform(left_node, ctx)
        right = self.transform(right_node, ctx)
        return left, right, op_node.text


def analyze(tree: ParseNode) -> AnalysisResult:
    return ExprSemanticChecker().analyze(tree)


def analyze_source(source: str) -> AnalysisResult:
    """Parse `source` and analyze it. Syntax errors propagate as ExprSyntaxError."""
    return analyze(parser.parse(source))
