import unittest

from monkey.lang import ast
from monkey.lang.environment import Environment
from monkey.lang.error import EvalError
from monkey.lang.evaluator import evaluate, truncating_div
from monkey.lang.objects import NULL, Array, Boolean, Error, Function, Hash, Integer, String
from monkey.lang.parser import parse


def run(source, env=None):
    return evaluate(parse(source), env if env is not None else Environment())


class EvaluatorTestCase(unittest.TestCase):

    def assertEvaluates(self, cases):
        for case, expected in cases.items():
            self.assertEqual(expected, run(case), case)

    def assertEvalError(self, cases):
        for case, expected in cases.items():
            with self.assertRaises(EvalError, msg=case) as context:
                run(case)
            self.assertEqual(expected, context.exception.msg, case)

    def test_integer_expressions(self):
        self.assertEvaluates({
            "5": Integer(5),
            "10": Integer(10),
            "-5": Integer(-5),
            "--5": Integer(5),
            "5 + 5 + 5 + 5 - 10": Integer(10),
            "2 * 2 * 2 * 2 * 2": Integer(32),
            "-50 + 100 + -50": Integer(0),
            "5 * 2 + 10": Integer(20),
            "5 + 2 * 10": Integer(25),
            "50 / 2 * 2 + 10": Integer(60),
            "2 * (5 + 10)": Integer(30),
            "3 * 3 * 3 + 10": Integer(37),
            "(5 + 10 * 2 + 15 / 3) * 2 + -10": Integer(50),
        })

    def test_division_truncates_toward_zero(self):
        self.assertEvaluates({
            "7 / 2": Integer(3),
            "-7 / 2": Integer(-3),
            "7 / -2": Integer(-3),
            "-7 / -2": Integer(3),
            "1 / 3": Integer(0),
        })
        self.assertEqual(-1, truncating_div(-3, 2))

    def test_boolean_expressions(self):
        self.assertEvaluates({
            "true": Boolean(True),
            "false": Boolean(False),
            "1 < 2": Boolean(True),
            "1 > 2": Boolean(False),
            "1 < 1": Boolean(False),
            "1 == 1": Boolean(True),
            "1 != 1": Boolean(False),
            "1 != 2": Boolean(True),
            "true == true": Boolean(True),
            "true != false": Boolean(True),
            "false == false": Boolean(True),
            "(1 < 2) == true": Boolean(True),
            "(1 > 2) == true": Boolean(False),
        })

    def test_bang_operator(self):
        self.assertEvaluates({
            "!true": Boolean(False),
            "!false": Boolean(True),
            "!5": Boolean(False),
            "!!true": Boolean(True),
            "!!5": Boolean(True),
            "!\"\"": Boolean(False),
            "!if (false) { 1 }": Boolean(True),  # !null
        })

    def test_string_expressions(self):
        self.assertEvaluates({
            "\"Hello World!\"": String("Hello World!"),
            "\"Hello\" + \" \" + \"World!\"": String("Hello World!"),
            "\"a\" == \"a\"": Boolean(True),
            "\"a\" != \"b\"": Boolean(True),
        })

    def test_if_else_expressions(self):
        self.assertEvaluates({
            "if (true) { 10 }": Integer(10),
            "if (false) { 10 }": NULL,
            "if (1) { 10 }": Integer(10),
            "if (1 < 2) { 10 }": Integer(10),
            "if (1 > 2) { 10 }": NULL,
            "if (1 > 2) { 10 } else { 20 }": Integer(20),
            "if (1 < 2) { 10 } else { 20 }": Integer(10),
            "if (if (false) { 1 }) { 10 } else { 20 }": Integer(20),
            "if (true) { }": NULL,
        })

    def test_return_statements(self):
        self.assertEvaluates({
            "return 10;": Integer(10),
            "return 10; 9;": Integer(10),
            "return 2 * 5; 9;": Integer(10),
            "9; return 2 * 5; 9;": Integer(10),
            "if (10 > 1) { if (10 > 1) { return 10; } return 1; }": Integer(10),
            "let f = fn(x) { return x; x + 10; }; f(10);": Integer(10),
            "let f = fn(x) { let result = x + 10; return result; return 10; }; f(10);": Integer(20),
        })

    def test_return_unwinds_nested_blocks(self):
        source = """
        let f = fn(x) {
            if (x > 0) {
                if (x > 5) { return 100; }
                return 10;
            };
            -1;
        };
        [f(6), f(1), f(0)];
        """
        self.assertEqual(Array([Integer(100), Integer(10), Integer(-1)]), run(source))

    def test_return_from_inner_function_does_not_leak(self):
        source = "let inner = fn() { return 1; }; let outer = fn() { inner(); 2; }; outer();"
        self.assertEqual(Integer(2), run(source))

    def test_let_statements(self):
        self.assertEvaluates({
            "let a = 5; a;": Integer(5),
            "let a = 5 * 5; a;": Integer(25),
            "let a = 5; let b = a; b;": Integer(5),
            "let a = 5; let b = a; let c = a + b + 5; c;": Integer(15),
            "let x = 5; x + 1;": Integer(6),
            "let x = 1;": NULL,
        })

    def test_empty_program(self):
        self.assertEqual(NULL, run(""))

    def test_function_object(self):
        function = run("fn(x) { x + 2; };")
        self.assertIsInstance(function, Function)
        self.assertEqual(["x"], function.parameters)
        self.assertEqual("(x + 2)", str(function.body[0]))
        self.assertEqual("fn(x) { (x + 2) }", str(function))

    def test_function_application(self):
        self.assertEvaluates({
            "let identity = fn(x) { x; }; identity(5);": Integer(5),
            "let identity = fn(x) { return x; }; identity(5);": Integer(5),
            "let double = fn(x) { x * 2; }; double(5);": Integer(10),
            "let add = fn(x, y) { x + y; }; add(5, 5);": Integer(10),
            "let add = fn(x, y) { x + y; }; add(5 + 5, add(5, 5));": Integer(20),
            "fn(x) { x; }(5)": Integer(5),
            "fn() { }()": NULL,
        })

    def test_closures(self):
        source = "let f = fn(x) { fn(y) { x + y } }; let add5 = f(5); add5(3);"
        self.assertEqual(Integer(8), run(source))

    def test_closure_uses_definition_scope(self):
        # y is looked up where the function was defined, not where it is called
        source = """
        let y = 1;
        let get = fn() { y };
        let call = fn(y) { get() };
        call(100);
        """
        self.assertEqual(Integer(1), run(source))

    def test_closures_share_scope(self):
        source = """
        let make = fn(x) { [fn() { x }, fn(y) { x + y }] };
        let pair = make(10);
        pair[0]() + pair[1](5);
        """
        self.assertEqual(Integer(25), run(source))

    def test_recursion(self):
        source = """
        let fib = fn(n) { if (n < 2) { n } else { fib(n - 1) + fib(n - 2) } };
        fib(15);
        """
        self.assertEqual(Integer(610), run(source))

    def test_deep_recursion(self):
        source = """
        let count = fn(n) { if (n == 0) { 0 } else { 1 + count(n - 1) } };
        count(500);
        """
        self.assertEqual(Integer(500), run(source))

    def test_let_in_function_does_not_leak(self):
        env = Environment()
        run("let x = 1; let f = fn() { let x = 2; x }; f();", env)
        self.assertEqual(Integer(1), env.get("x"))

    def test_let_in_if_block_does_not_leak(self):
        env = Environment()
        self.assertEqual(Integer(2), run("if (true) { let inner = 2; inner }", env))
        self.assertIsNone(env.get("inner"))

    def test_arguments_evaluated_left_to_right(self):
        source = "let f = fn(a, b) { [a, b] }; f(1, undefined_name);"
        with self.assertRaises(EvalError) as context:
            run(source)
        self.assertEqual("identifier not found: undefined_name", context.exception.msg)

    def test_array_literals(self):
        self.assertEqual(Array([Integer(1), Integer(4), Integer(6)]), run("[1, 2 * 2, 3 + 3]"))
        self.assertEqual(Array([]), run("[]"))

    def test_array_index_expressions(self):
        self.assertEvaluates({
            "[1, 2, 3][0]": Integer(1),
            "[1, 2, 3][1]": Integer(2),
            "[1, 2, 3][2]": Integer(3),
            "let i = 0; [1][i];": Integer(1),
            "[1, 2, 3][1 + 1];": Integer(3),
            "let myArray = [1, 2, 3]; myArray[2];": Integer(3),
            "let myArray = [1, 2, 3]; myArray[0] + myArray[1] + myArray[2];": Integer(6),
            "[1, 2, 3][3]": NULL,
            "[1, 2, 3][-1]": NULL,
        })

    def test_hash_literals(self):
        source = """let two = "two";
        {
            "one": 10 - 9,
            two: 1 + 1,
            "thr" + "ee": 6 / 2,
            4: 4,
            true: 5,
            false: 6
        }"""
        expected = {
            String("one"): Integer(1),
            String("two"): Integer(2),
            String("three"): Integer(3),
            Integer(4): Integer(4),
            Boolean(True): Integer(5),
            Boolean(False): Integer(6),
        }
        result = run(source)
        self.assertIsInstance(result, Hash)
        self.assertEqual(expected, result.pairs)
        self.assertEqual(list(expected), list(result.pairs))  # source order

    def test_hash_index_expressions(self):
        self.assertEvaluates({
            "{\"foo\": 5}[\"foo\"]": Integer(5),
            "{\"foo\": 5}[\"bar\"]": NULL,
            "let key = \"foo\"; {\"foo\": 5}[key]": Integer(5),
            "{}[\"foo\"]": NULL,
            "{5: 5}[5]": Integer(5),
            "{true: 5}[true]": Integer(5),
            "{false: 5}[false]": Integer(5),
            "{1: 5}[true]": NULL,
        })

    def test_error_handling(self):
        self.assertEvalError({
            "5 + true;": "type mismatch: INTEGER + BOOLEAN",
            "5 + true; 5;": "type mismatch: INTEGER + BOOLEAN",
            "1 == true": "type mismatch: INTEGER == BOOLEAN",
            "-true": "unknown operator: -BOOLEAN",
            "-\"a\"": "unknown operator: -STRING",
            "true + false;": "unknown operator: BOOLEAN + BOOLEAN",
            "true < false;": "unknown operator: BOOLEAN < BOOLEAN",
            "5; true + false; 5": "unknown operator: BOOLEAN + BOOLEAN",
            "if (10 > 1) { true + false; }": "unknown operator: BOOLEAN + BOOLEAN",
            "if (10 > 1) { if (10 > 1) { return true + false; } return 1; }": "unknown operator: BOOLEAN + BOOLEAN",
            "foobar;": "identifier not found: foobar",
            "\"Hello\" - \"World\"": "unknown operator: STRING - STRING",
            "\"a\" + 1": "type mismatch: STRING + INTEGER",
            "{\"name\": \"Monkey\"}[fn(x) { x }];": "unusable as hash key: FUNCTION",
            "{[1]: 2}": "unusable as hash key: ARRAY",
            "1[0]": "index operator not supported: INTEGER",
            "[1][true]": "index operator not supported: ARRAY",
            "5(1)": "not a function: INTEGER",
            "let x = 1; x();": "not a function: INTEGER",
            "fn(x, y) { x }(1)": "wrong number of arguments: expected 2, got 1",
            "fn() { 1 }(1, 2)": "wrong number of arguments: expected 0, got 2",
            "5 / 0": "division by zero: 5 / 0",
            "9223372036854775807 + 1": "integer overflow: 9223372036854775807 + 1",
            "-9223372036854775807 - 2": "integer overflow: -9223372036854775807 - 2",
        })

    def test_error_stops_evaluation(self):
        env = Environment()
        with self.assertRaises(EvalError):
            run("let a = 1; let b = missing; let c = 3;", env)
        self.assertEqual(Integer(1), env.get("a"))
        self.assertIsNone(env.get("c"))

    def test_error_value(self):
        with self.assertRaises(EvalError) as context:
            run("foobar")
        self.assertEqual(Error("identifier not found: foobar"), context.exception.value)
        self.assertEqual("Error: identifier not found: foobar", str(context.exception.value))

    def test_postfix_expression(self):
        node = ast.PostfixExpression("++", ast.IntegerLiteral(1))
        with self.assertRaises(EvalError) as context:
            evaluate(node, Environment())
        self.assertEqual("unknown operator: INTEGER++", context.exception.msg)

    def test_evaluate_single_nodes(self):
        env = Environment()
        env.set("x", Integer(2))

        self.assertEqual(Integer(2), evaluate(ast.Identifier("x"), env))
        self.assertEqual(Integer(3), evaluate(ast.ReturnStatement(ast.IntegerLiteral(3)), env))
        self.assertEqual(NULL, evaluate(ast.LetStatement("y", ast.IntegerLiteral(4)), env))
        self.assertEqual(Integer(4), env.get("y"))

    def test_environment_persists_between_calls(self):
        env = Environment()
        run("let counter = 41;", env)
        self.assertEqual(Integer(42), run("counter + 1", env))


if __name__ == '__main__':
    unittest.main()
