"""Symbol table and symbol representations.

This module defines the `SymbolType` enum for the five CODE data types, a
`Symbol` dataclass holding a variable's declared type, value and
initialization flag, and `SymbolTable`. The same table shape is used by the
semantic analyzer (values are AST nodes or `None`) and by the evaluator
(values are concrete Python values).

`type_of_value()` maps a concrete Python value back onto a `SymbolType` and
`coerce_value()` widens an INT value stored into a FLOAT variable.
Values are `int`, `float`, `str` or `bool`; CHAR and STRING are both `str`
at runtime and only differ by their declared type.
"""

from __future__ import annotations
from enum import Enum, auto
from dataclasses import dataclass
from typing import Any, Dict, Optional


class SymbolType(Enum):
    INT = auto()
    FLOAT = auto()
    CHAR = auto()
    STRING = auto()
    BOOL = auto()

    def __str__(self) -> str:
        return self.name


NUMERIC_TYPES = (SymbolType.INT, SymbolType.FLOAT)
TEXT_TYPES = (SymbolType.CHAR, SymbolType.STRING)


def zero_value(type_: SymbolType) -> int | float | str | bool:
    """Value a declared-but-uninitialized variable starts with."""
    match type_:
        case SymbolType.INT:
            return 0
        case SymbolType.FLOAT:
            return 0.0
        case SymbolType.CHAR | SymbolType.STRING:
            return ""
        case SymbolType.BOOL:
            return False


def coerce_value(type_: SymbolType, value: Any) -> Any:
    """Convert a value about to be stored in a variable of type `type_`.

    INT widens to FLOAT; every other value is stored unchanged.
    """
    if type_ == SymbolType.FLOAT and isinstance(value, int) and not isinstance(value, bool):
        return float(value)
    return value


def type_of_value(value: Any) -> SymbolType:
    """Return the type of a concrete value (bool is checked before int)."""
    match value:
        case bool():
            return SymbolType.BOOL
        case int():
            return SymbolType.INT
        case float():
            return SymbolType.FLOAT
        case str():
            return SymbolType.STRING
        case _:
            raise TypeError(f"Unsupported value: {value!r}")


@dataclass
class Symbol:
    name: str
    type: SymbolType
    value: Any = None
    initialized: bool = False

    def __repr__(self) -> str:
        return f"Symbol({self.name}, {self.type}, initialized={self.initialized})"


class SymbolTable:
    def __init__(self):
        self.symbols: Dict[str, Symbol] = {}

    def declare(
        self,
        name: str,
        type_: SymbolType,
        value: Any = None,
        initialized: bool = False,
    ) -> Symbol:
        """Declare a new variable."""
        if name in self.symbols:
            raise KeyError(f"Variable '{name}' is already declared")

        symbol = Symbol(name, type_, value, initialized)
        self.symbols[name] = symbol
        return symbol

    def lookup(self, name: str) -> Symbol:
        """Look up a declared variable."""
        if name in self.symbols:
            return self.symbols[name]
        raise KeyError(f"Undeclared variable '{name}'")

    def get(self, name: str) -> Optional[Symbol]:
        return self.symbols.get(name)

    def exists(self, name: str) -> bool:
        return name in self.symbols

    def values(self) -> Dict[str, Any]:
        """Snapshot of name -> value in declaration order."""
        return {name: sym.value for name, sym in self.symbols.items()}
