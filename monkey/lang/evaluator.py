"""Tree-walking evaluator for the Monkey language.

evaluate(node, env) reduces an AST node to a runtime value, reading and binding names in env (a caller-owned
Environment that may be reused across calls, which is how the shell keeps `let` bindings between lines).

Evaluation is fail-fast: the first runtime error raises an EvalError and nothing else is evaluated. `return` is not an
exception: it produces a ReturnValue, which every block or statement list hands back up unchanged until a
function call (or the program) unwraps it.
"""

import operator
import sys

from monkey.lang import ast
from monkey.lang.environment import Environment
from monkey.lang.error import EvalError
from monkey.lang.objects import (
    FALSE, NULL, TRUE, Array, Boolean, Function, Hash, Integer, Null, ReturnValue, String, native_bool
)


INT_MIN = -2 ** 63
INT_MAX = 2 ** 63 - 1

# every Monkey call costs a dozen or so Python frames
RECURSION_LIMIT = 20000


def truncating_div(left, right):
    """Integer division rounding toward zero (not toward negative infinity like //)."""
    quotient = abs(left) // abs(right)
    return -quotient if (left < 0) != (right < 0) else quotient


def is_truthy(obj):
    """Null is falsy, booleans are themselves, everything else is truthy."""
    if isinstance(obj, Null):
        return False
    elif isinstance(obj, Boolean):
        return obj.value
    return True


class Evaluator:
    """Evaluates AST nodes. One visit_<NodeClass> method per node class."""
    INTEGER_OPS = {
        "+": operator.add,
        "-": operator.sub,
        "*": operator.mul,
        "/": truncating_div,
    }
    COMPARISONS = {
        "<": operator.lt,
        ">": operator.gt,
        "==": operator.eq,
        "!=": operator.ne,
    }

    def visit(self, node, env):
        method = getattr(self, f"visit_{type(node).__name__}", None)
        if method is None:
            raise EvalError(f"cannot evaluate {type(node).__name__}", internal=True)
        return method(node, env)

    def eval_block(self, statements, env):
        """Evaluates statements in order. A ReturnValue stops the block and is passed up still wrapped."""
        result = NULL
        for statement in statements:
            result = self.visit(statement, env)
            if isinstance(result, ReturnValue):
                return result
        return result

    # statements

    def visit_Program(self, node, env):
        result = NULL
        for statement in node.statements:
            result = self.visit(statement, env)
            if isinstance(result, ReturnValue):
                return result.value
        return result

    def visit_LetStatement(self, node, env):
        value = self.visit(node.value, env)
        if isinstance(value, ReturnValue):
            return value

        env.set(node.name, value)
        return NULL

    def visit_ReturnStatement(self, node, env):
        value = self.visit(node.value, env)
        if isinstance(value, ReturnValue):
            return value
        return ReturnValue(value)

    def visit_ExpressionStatement(self, node, env):
        return self.visit(node.expression, env)

    # expressions

    def visit_Identifier(self, node, env):
        value = env.get(node.name)
        if value is None:
            raise EvalError(f"identifier not found: {node.name}")
        return value

    def visit_PrefixExpression(self, node, env):
        operand = self.visit(node.operand, env)
        if isinstance(operand, ReturnValue):
            return operand

        if node.operator == "!":
            if isinstance(operand, Boolean):
                return native_bool(not operand.value)
            return TRUE if isinstance(operand, Null) else FALSE

        elif node.operator == "-" and isinstance(operand, Integer):
            return self.integer(-operand.value, f"-{operand}")

        raise EvalError(f"unknown operator: {node.operator}{operand.type_name}")

    def visit_InfixExpression(self, node, env):
        left = self.visit(node.left, env)
        if isinstance(left, ReturnValue):
            return left
        right = self.visit(node.right, env)
        if isinstance(right, ReturnValue):
            return right

        return self.infix(node.operator, left, right)

    def infix(self, op, left, right):
        """Applies binary operator op, dispatching on the types of both operands."""
        description = f"{left.type_name} {op} {right.type_name}"

        if isinstance(left, Integer) and isinstance(right, Integer):
            if op in Evaluator.COMPARISONS:
                return native_bool(Evaluator.COMPARISONS[op](left.value, right.value))
            elif op not in Evaluator.INTEGER_OPS:
                raise EvalError(f"unknown operator: {description}")
            elif op == "/" and right.value == 0:
                raise EvalError(f"division by zero: {left} / {right}")
            return self.integer(Evaluator.INTEGER_OPS[op](left.value, right.value), f"{left} {op} {right}")

        elif type(left) is not type(right):
            raise EvalError(f"type mismatch: {description}")

        elif isinstance(left, (Boolean, String)) and op in ("==", "!="):
            return native_bool(Evaluator.COMPARISONS[op](left.value, right.value))

        elif isinstance(left, String) and op == "+":
            return String(left.value + right.value)

        raise EvalError(f"unknown operator: {description}")

    @staticmethod
    def integer(value, expression):
        """Wraps value as an Integer, raising an EvalError if it overflows 64 bits."""
        if not INT_MIN <= value <= INT_MAX:
            raise EvalError(f"integer overflow: {expression}")
        return Integer(value)

    def visit_PostfixExpression(self, node, env):
        operand = self.visit(node.operand, env)
        if isinstance(operand, ReturnValue):
            return operand
        raise EvalError(f"unknown operator: {operand.type_name}{node.operator}")

    def visit_IfExpression(self, node, env):
        condition = self.visit(node.condition, env)
        if isinstance(condition, ReturnValue):
            return condition

        if is_truthy(condition):
            return self.eval_block(node.consequence, Environment.new_enclosed(env))
        elif node.alternative is not None:
            return self.eval_block(node.alternative, Environment.new_enclosed(env))
        return NULL

    def visit_FunctionLiteral(self, node, env):
        return Function(node.parameters, node.body, env)

    def visit_CallExpression(self, node, env):
        function = self.visit(node.callee, env)
        if isinstance(function, ReturnValue):
            return function
        if not isinstance(function, Function):
            raise EvalError(f"not a function: {function.type_name}")

        arguments = []
        for argument in node.arguments:
            value = self.visit(argument, env)
            if isinstance(value, ReturnValue):
                return value
            arguments.append(value)

        return self.apply(function, arguments)

    def apply(self, function, arguments):
        """Calls function: parameters are bound in a new scope enclosed by the scope the function was defined in."""
        if len(arguments) != len(function.parameters):
            raise EvalError(f"wrong number of arguments: expected {len(function.parameters)}, got {len(arguments)}")

        env = Environment.new_enclosed(function.env)
        for name, value in zip(function.parameters, arguments):
            env.set(name, value)

        result = self.eval_block(function.body, env)
        if isinstance(result, ReturnValue):
            return result.value
        return result

    def visit_IndexExpression(self, node, env):
        left = self.visit(node.left, env)
        if isinstance(left, ReturnValue):
            return left
        index = self.visit(node.index, env)
        if isinstance(index, ReturnValue):
            return index

        if isinstance(left, Array) and isinstance(index, Integer):
            if 0 <= index.value < len(left.elements):
                return left.elements[index.value]
            return NULL

        elif isinstance(left, Hash):
            if not index.hashable:
                raise EvalError(f"unusable as hash key: {index.type_name}")
            return left.pairs.get(index, NULL)

        raise EvalError(f"index operator not supported: {left.type_name}")

    # literals

    def visit_IntegerLiteral(self, node, env):
        return Integer(node.value)

    def visit_StringLiteral(self, node, env):
        return String(node.value)

    def visit_BooleanLiteral(self, node, env):
        return native_bool(node.value)

    def visit_ArrayLiteral(self, node, env):
        elements = []
        for element in node.elements:
            value = self.visit(element, env)
            if isinstance(value, ReturnValue):
                return value
            elements.append(value)
        return Array(elements)

    def visit_HashLiteral(self, node, env):
        pairs = {}
        for key_node, value_node in node.pairs:
            key = self.visit(key_node, env)
            if isinstance(key, ReturnValue):
                return key
            if not key.hashable:
                raise EvalError(f"unusable as hash key: {key.type_name}")

            value = self.visit(value_node, env)
            if isinstance(value, ReturnValue):
                return value
            pairs[key] = value
        return Hash(pairs)


def evaluate(node, env):
    """Evaluates node (a Program, Statement or Expression) in env. Raises EvalError on the first runtime error."""
    if sys.getrecursionlimit() < RECURSION_LIMIT:
        sys.setrecursionlimit(RECURSION_LIMIT)

    result = Evaluator().visit(node, env)
    if isinstance(result, ReturnValue):  # a bare return statement evaluated on its own
        return result.value
    return result
