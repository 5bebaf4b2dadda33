"""
Expr Symbol Table - Tracks declared variables for semantic analysis.
"""

import logging
from dataclasses import dataclass
from typing import Optional

log = logging.getLogger("exprlang.semantic")


class SymbolTableError(Exception):
    """Raised when a symbol table operation fails."""

    pass


@dataclass(frozen=True)
class Symbol:
    """A declared variable: its name, declared type and where it was declared."""

    name: str
    type_t: str
    line: Optional[int] = None
    col: Optional[int] = None


class SymbolTable:
    """
    A flat, append-only symbol table.

    The language has a single program scope, so there is exactly one mapping
    of name -> Symbol. The first successful declaration of a name wins;
    there is no removal and no update in place.
    """

    def __init__(self):
        self.symbols: dict[str, Symbol] = {}

    def declare(
        self,
        name: str,
        type_t: str,
        line: Optional[int] = None,
        col: Optional[int] = None,
    ) -> Symbol:
        """
        Declare a new variable.
        Raises SymbolTableError if the name is already declared.
        """
        if name in self.symbols:
            raise SymbolTableError(f"variable '{name}' already declared")
        symbol = Symbol(name=name, type_t=type_t, line=line, col=col)
        self.symbols[name] = symbol
        log.debug("declared %s: %s", name, type_t)
        return symbol

    def get_symbol(self, name: str) -> Optional[Symbol]:
        """Look up a symbol by name. Returns None if it was never declared."""
        return self.symbols.get(name)

    def lookup(self, name: str) -> Optional[str]:
        """Return the declared type of `name`, or None."""
        sym = self.get_symbol(name)
        return sym.type_t if sym is not None else None

    def symbol_exists(self, name: str) -> bool:
        return name in self.symbols

    def names(self) -> list[str]:
        """Declared names in declaration order."""
        return list(self.symbols)

    def __contains__(self, name: str) -> bool:
        return self.symbol_exists(name)

    def __len__(self) -> int:
        return len(self.symbols)
