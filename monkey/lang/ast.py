"""Abstract syntax tree for the Monkey language.

```
<program>    ::= <statement>*
<statement>  ::= "let" <ident> "=" <expression> ";"
               | "return" <expression> ";"
               | <expression> [";"]
<expression> ::= <ident> | <literal>
               | <prefix-op> <expression>                 ; "!" | "-"
               | <expression> <infix-op> <expression>     ; "+" | "-" | "*" | "/" | "<" | ">" | "==" | "!="
               | "if" "(" <expression> ")" <block> ["else" <block>]
               | "fn" "(" [<ident> ("," <ident>)*] ")" <block>
               | <expression> "(" [<expression> ("," <expression>)*] ")"
               | <expression> "[" <expression> "]"
               | "(" <expression> ")"
<literal>    ::= <int> | <string> | "true" | "false"
               | "[" [<expression> ("," <expression>)*] "]"
               | "{" [<expression> ":" <expression> ("," <expression> ":" <expression>)*] "}"
<block>      ::= "{" <statement>* "}"
```

Every node owns its children (the tree has no sharing and no cycles). str(node) renders canonical, fully parenthesized
source: parsing that rendering again gives an equal tree.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from monkey.lang.token import escape


def block(statements):
    """Renders a block of statements."""
    if not statements:
        return "{ }"
    return "{ " + " ".join(str(statement) for statement in statements) + " }"


class Node(ABC):
    """Superclass for every AST node."""

    @abstractmethod
    def __str__(self):
        """Canonical source rendering of this node."""


class Statement(Node):
    """Superclass for let, return and expression statements."""


class Expression(Node):
    """Superclass for expressions."""


class Literal(Expression):
    """Superclass for literal expressions."""


@dataclass
class Program(Node):
    statements: List[Statement] = field(default_factory=list)

    def __str__(self):
        return " ".join(str(statement) for statement in self.statements)

    def __iter__(self):
        return iter(self.statements)

    def __len__(self):
        return len(self.statements)


# statements


@dataclass
class LetStatement(Statement):
    name: str
    value: Expression

    def __str__(self):
        return f"let {self.name} = {self.value};"


@dataclass
class ReturnStatement(Statement):
    value: Expression

    def __str__(self):
        return f"return {self.value};"


@dataclass
class ExpressionStatement(Statement):
    expression: Expression

    def __str__(self):
        return str(self.expression)


# expressions


@dataclass
class Identifier(Expression):
    name: str

    def __str__(self):
        return self.name


@dataclass
class PrefixExpression(Expression):
    operator: str
    operand: Expression

    def __str__(self):
        return f"({self.operator}{self.operand})"


@dataclass
class InfixExpression(Expression):
    operator: str
    left: Expression
    right: Expression

    def __str__(self):
        return f"({self.left} {self.operator} {self.right})"


@dataclass
class PostfixExpression(Expression):
    operator: str
    operand: Expression

    def __str__(self):
        return f"({self.operand}{self.operator})"


@dataclass
class IfExpression(Expression):
    condition: Expression
    consequence: List[Statement]
    alternative: Optional[List[Statement]] = None

    def __str__(self):
        result = f"if ({self.condition}) {block(self.consequence)}"
        if self.alternative is not None:
            result += f" else {block(self.alternative)}"
        return result


@dataclass
class FunctionLiteral(Expression):
    parameters: List[str]
    body: List[Statement]

    def __str__(self):
        return f"fn({', '.join(self.parameters)}) {block(self.body)}"


@dataclass
class CallExpression(Expression):
    callee: Expression
    arguments: List[Expression]

    def __str__(self):
        return f"{self.callee}({', '.join(str(argument) for argument in self.arguments)})"


@dataclass
class IndexExpression(Expression):
    left: Expression
    index: Expression

    def __str__(self):
        return f"({self.left}[{self.index}])"


# literals


@dataclass
class IntegerLiteral(Literal):
    value: int

    def __str__(self):
        return str(self.value)


@dataclass
class StringLiteral(Literal):
    value: str

    def __str__(self):
        return f"\"{escape(self.value)}\""


@dataclass
class BooleanLiteral(Literal):
    value: bool

    def __str__(self):
        return "true" if self.value else "false"


@dataclass
class ArrayLiteral(Literal):
    elements: List[Expression]

    def __str__(self):
        return f"[{', '.join(str(element) for element in self.elements)}]"


@dataclass
class HashLiteral(Literal):
    pairs: List[Tuple[Expression, Expression]]  # source order, not a lookup table

    def __str__(self):
        return "{" + ", ".join(f"{key}: {value}" for key, value in self.pairs) + "}"
