"""Runtime values of the Monkey language.

Integers, booleans and strings are immutable values (and the only values usable as hash keys). ReturnValue is not a
value a program can observe: it marks a `return` on its way out of the enclosing function's body.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from monkey.lang.ast import FunctionLiteral
from monkey.lang.token import escape


class Object:
    """Superclass for every runtime value. type_name is what error messages call the value's type."""
    type_name = "OBJECT"

    hashable = False


@dataclass(frozen=True)
class Integer(Object):
    value: int
    type_name = "INTEGER"
    hashable = True

    def __str__(self):
        return str(self.value)


@dataclass(frozen=True)
class Boolean(Object):
    value: bool
    type_name = "BOOLEAN"
    hashable = True

    def __str__(self):
        return "true" if self.value else "false"


@dataclass(frozen=True)
class String(Object):
    value: str
    type_name = "STRING"
    hashable = True

    def __str__(self):
        return self.value

    def __repr__(self):
        return f"String({self.value!r})"


class Null(Object):
    type_name = "NULL"

    def __str__(self):
        return "null"

    def __repr__(self):
        return "Null()"

    def __eq__(self, other):
        return isinstance(other, Null)

    def __hash__(self):
        return hash(Null)


@dataclass
class Array(Object):
    elements: List[Object]
    type_name = "ARRAY"

    def __str__(self):
        return "[" + ", ".join(inspect(element) for element in self.elements) + "]"


@dataclass
class Hash(Object):
    pairs: Dict[Object, Object]  # insertion ordered
    type_name = "HASH"

    def __str__(self):
        return "{" + ", ".join(f"{inspect(key)}: {inspect(value)}" for key, value in self.pairs.items()) + "}"


@dataclass
class Function(Object):
    parameters: List[str]
    body: List[Any]  # ast.Statements
    env: Any = field(repr=False, compare=False)  # captured Environment
    type_name = "FUNCTION"

    def __str__(self):
        return str(FunctionLiteral(self.parameters, self.body))


@dataclass(frozen=True)
class ReturnValue(Object):
    value: Object
    type_name = "RETURN_VALUE"

    def __str__(self):
        return str(self.value)


@dataclass(frozen=True)
class Error(Object):
    message: str
    type_name = "ERROR"

    def __str__(self):
        return f"Error: {self.message}"


NULL = Null()
TRUE = Boolean(True)
FALSE = Boolean(False)


def native_bool(value):
    return TRUE if value else FALSE


def inspect(obj):
    """Like str, but strings are quoted (used for values nested in arrays/hashes)."""
    if isinstance(obj, String):
        return f"\"{escape(obj.value)}\""
    return str(obj)
