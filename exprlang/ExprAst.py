"""
Expr AST - Typed, immutable program representation produced by the semantic checker.
"""

from dataclasses import dataclass, field
from typing import Optional, Union

# --- Type System Constants ---

INT = "int"
FLOAT = "float"
BOOL = "bool"

PRIMITIVE_TYPES = {INT, FLOAT, BOOL}

ADD_SUB_OPS = {"+", "-"}
MULT_DIV_MOD_OPS = {"*", "/", "%"}


# --- Expressions ---


@dataclass(frozen=True)
class Number:
    value: float
    is_integer: bool
    # literal as written in the source, when the node came from one
    text: Optional[str] = field(default=None, compare=False)


@dataclass(frozen=True)
class Bool:
    value: bool


@dataclass(frozen=True)
class Variable:
    name: str


@dataclass(frozen=True)
class UnaryMinus:
    operand: "Expression"


@dataclass(frozen=True)
class Not:
    operand: "Expression"


@dataclass(frozen=True)
class AddSub:
    left: "Expression"
    right: "Expression"
    op: str

    def __post_init__(self):
        if self.op not in ADD_SUB_OPS:
            raise ValueError(f"invalid additive operator: {self.op!r}")


@dataclass(frozen=True)
class MultDivMod:
    left: "Expression"
    right: "Expression"
    op: str

    def __post_init__(self):
        if self.op not in MULT_DIV_MOD_OPS:
            raise ValueError(f"invalid multiplicative operator: {self.op!r}")


@dataclass(frozen=True)
class And:
    left: "Expression"
    right: "Expression"


@dataclass(frozen=True)
class Or:
    left: "Expression"
    right: "Expression"


@dataclass(frozen=True)
class Parens:
    """Explicit grouping, kept so the program re-serializes with its parentheses."""

    inner: "Expression"


# --- Statements ---


@dataclass(frozen=True)
class VariableDeclaration:
    name: str
    declared_type: str
    initializer: "Expression"

    def __post_init__(self):
        if self.declared_type not in PRIMITIVE_TYPES:
            raise ValueError(f"unknown type: {self.declared_type!r}")


@dataclass(frozen=True)
class Assignment:
    name: str
    value: "Expression"


Expression = Union[
    Number,
    Bool,
    Variable,
    UnaryMinus,
    Not,
    AddSub,
    MultDivMod,
    And,
    Or,
    Parens,
    VariableDeclaration,
    Assignment,
]


@dataclass(frozen=True)
class Program:
    """Top-level statements in source order."""

    statements: tuple[Expression, ...] = ()

    def __len__(self) -> int:
        return len(self.statements)

    def __iter__(self):
        return iter(self.statements)
