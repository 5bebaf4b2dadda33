"""
Expr Parser - TatSu grammar for the expression language and the parse tree it
hands to the semantic checker.

TatSu gives us dict-like AST nodes tagged with parseinfo. The semantic checker
does not work on those directly: they are converted into ParseNode values that
carry a node kind, ordered children, the literal text of terminals and the
1-based line/column of the node's first token.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

import tatsu
from tatsu.exceptions import FailedParse

log = logging.getLogger("exprlang.parser")

GRAMMAR = r"""
@@grammar :: Expr
@@keyword :: int float bool true false

program = statements:{terminated}* $ ;

expression_only = @:expr $ ;

terminated = @:statement ';' ;

statement
    =
    | declaration
    | assignment
    | expr
    ;

declaration = type:('int' | 'float' | 'bool') target:target '=' value:expr ;

assignment = target:target '=' value:expr ;

target = name:identifier ;

expr = disjunction ;

disjunction = first:conjunction rest:{disjunction_tail}* ;

disjunction_tail = op:'||' operand:conjunction ;

conjunction = first:sum rest:{conjunction_tail}* ;

conjunction_tail = op:'&&' operand:sum ;

sum = first:product rest:{sum_tail}* ;

sum_tail = op:('+' | '-') operand:product ;

product = first:unary rest:{product_tail}* ;

product_tail = op:('*' | '/' | '%') operand:unary ;

unary
    =
    | unary_minus
    | negation
    | atom
    ;

unary_minus = '-' operand:unary ;

negation = '!' operand:unary ;

atom
    =
    | parens
    | boolean
    | number
    | variable
    ;

parens = '(' inner:expr ')' ;

boolean = value:('true' | 'false') ;

number = value:/\d+(?:\.\d+)?/ ;

variable = name:identifier ;

@name
identifier = /[A-Za-z_][A-Za-z0-9_]*/ ;
"""

# Binary rules are written as `first rest*` and folded left-associatively.
BINARY_RULE_KINDS = {
    "disjunction": "or",
    "conjunction": "and",
    "sum": "add_sub",
    "product": "mult_div_mod",
}


@dataclass(frozen=True)
class ParseNode:
    """A node of the parse tree consumed by the semantic checker."""

    kind: str
    children: tuple = ()
    text: Optional[str] = None
    line: int = 1
    column: int = 1

    def child(self, index: int) -> "ParseNode":
        return self.children[index]


class ExprSyntaxError(Exception):
    """Raised when the source text does not match the grammar."""

    def __init__(self, detail: str, line: int, column: int):
        self.detail = detail
        self.line = line
        self.column = column
        super().__init__(f"Syntax error: {detail} ({format_location(line, column)}).")


def format_location(line: int, column: int) -> str:
    return f"line {line}, column {column}"


def token_location(tokenizer: Any, pos: int) -> tuple[int, int]:
    """1-based line and column of offset `pos`, as reported by TatSu."""
    info = tokenizer.line_info(pos)
    return (info.line + 1, info.col + 1)


def get_node_location(node: Any) -> tuple[int, int]:
    """Extract the 1-based line and column of a TatSu AST node from its parseinfo."""
    info = getattr(node, "parseinfo", None)
    if info is None:
        return (1, 1)
    return token_location(info.tokenizer, info.pos)


class _TreeBuilder:
    """Converts a TatSu AST into a ParseNode tree."""

    def _rule(self, node: Any) -> Optional[str]:
        info = getattr(node, "parseinfo", None)
        return info.rule if info is not None else None

    def build(self, node: Any) -> ParseNode:
        rule = self._rule(node)
        line, col = get_node_location(node)

        if rule == "program":
            statements = node["statements"] or []
            return ParseNode(
                "program",
                tuple(self.build(stmt) for stmt in statements),
                line=line,
                column=col,
            )

        if rule == "declaration":
            type_node = ParseNode("type", text=str(node["type"]), line=line, column=col)
            return ParseNode(
                "declaration",
                (type_node, self.build(node["target"]), self.build(node["value"])),
                line=line,
                column=col,
            )

        if rule == "assignment":
            return ParseNode(
                "assignment",
                (self.build(node["target"]), self.build(node["value"])),
                line=line,
                column=col,
            )

        if rule == "target":
            return ParseNode("identifier", text=str(node["name"]), line=line, column=col)

        if rule == "variable":
            return ParseNode("variable", text=str(node["name"]), line=line, column=col)

        if rule == "number":
            return ParseNode("number", text=str(node["value"]), line=line, column=col)

        if rule == "boolean":
            return ParseNode("boolean", text=str(node["value"]), line=line, column=col)

        if rule == "unary_minus":
            return ParseNode(
                "unary_minus", (self.build(node["operand"]),), line=line, column=col
            )

        if rule == "negation":
            return ParseNode("not", (self.build(node["operand"]),), line=line, column=col)

        if rule == "parens":
            return ParseNode("parens", (self.build(node["inner"]),), line=line, column=col)

        if rule in BINARY_RULE_KINDS:
            return self._fold_binary(BINARY_RULE_KINDS[rule], node)

        raise ValueError(f"unexpected parse node: {rule!r}")

    def _fold_binary(self, kind: str, node: Any) -> ParseNode:
        left = self.build(node["first"])
        for tail in node["rest"] or []:
            op_line, op_col = get_node_location(tail)
            operator = ParseNode(
                "operator", text=str(tail["op"]), line=op_line, column=op_col
            )
            right = self.build(tail["operand"])
            left = ParseNode(
                kind, (left, operator, right), line=left.line, column=left.column
            )
        return left


class ExprParser:
    """Parses Expr source text into ParseNode trees."""

    def __init__(self):
        self.model = tatsu.compile(GRAMMAR, name="Expr")

    def parse_raw(self, source: str, start: str = "program") -> Any:
        """Parse and return TatSu's own AST (used for --ast dumps)."""
        try:
            return self.model.parse(source, start=start, parseinfo=True)
        except FailedParse as e:
            line, col = token_location(e.tokenizer, e.pos)
            detail = getattr(e, "message", None) or str(e).splitlines()[0]
            log.debug("syntax error at %d:%d: %s", line, col, detail)
            raise ExprSyntaxError(str(detail), line, col) from e

    def parse(self, source: str) -> ParseNode:
        """Parse a whole program: statements each terminated by ';'."""
        tree = _TreeBuilder().build(self.parse_raw(source))
        log.debug("parsed %d statement(s)", len(tree.children))
        return tree

    def parse_expression(self, source: str) -> ParseNode:
        """Parse a single expression with no trailing ';'."""
        return _TreeBuilder().build(self.parse_raw(source, "expression_only"))


parser = ExprParser()
