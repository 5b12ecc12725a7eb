"""Pratt (precedence-climbing) parser for the Monkey language.

Each token type may have a prefix rule (how to start an expression with it) and an infix rule (how to continue an
expression when it follows one), and each infix token binds with a precedence. parse_expression gets a left-hand side
from a prefix rule, then keeps folding it into infix rules for as long as the next token binds tighter than the caller.

Syntax errors do not stop the parse: an error abandons the current statement, the parser skips ahead to the next ";"
and carries on, so that every mistake in a program is reported at once.
"""

from enum import IntEnum

from monkey.lang import ast
from monkey.lang.error import ParseError, ParserErrors
from monkey.lang.lexer import Lexer
from monkey.lang.token import Token, TokenType


class Precedence(IntEnum):
    LOWEST = 1
    EQUALS = 2       # == or !=
    LESS_GREATER = 3  # < or >
    SUM = 4          # + or -
    PRODUCT = 5      # * or /
    PREFIX = 6       # -x or !x
    CALL = 7         # f(x)
    INDEX = 8        # xs[i]


class Parser:
    """Parses the tokens of one source string. Use parse (module level) unless the collected errors are wanted."""
    PRECEDENCES = {
        TokenType.EQ: Precedence.EQUALS,
        TokenType.NOT_EQ: Precedence.EQUALS,
        TokenType.LT: Precedence.LESS_GREATER,
        TokenType.GT: Precedence.LESS_GREATER,
        TokenType.PLUS: Precedence.SUM,
        TokenType.MINUS: Precedence.SUM,
        TokenType.ASTERISK: Precedence.PRODUCT,
        TokenType.SLASH: Precedence.PRODUCT,
        TokenType.LPAREN: Precedence.CALL,
        TokenType.LBRACKET: Precedence.INDEX,
    }

    def __init__(self, source):
        self.source = source
        self.lexer = Lexer(source)
        self.errors = []
        self.warnings = []  # list of (msg, start, end)

        self.prefix_rules = {
            TokenType.IDENT: self.parse_identifier,
            TokenType.INT: self.parse_integer,
            TokenType.STRING: self.parse_string,
            TokenType.BOOL: self.parse_boolean,
            TokenType.BANG: self.parse_prefix,
            TokenType.MINUS: self.parse_prefix,
            TokenType.LPAREN: self.parse_grouped,
            TokenType.IF: self.parse_if,
            TokenType.FUNCTION: self.parse_function,
            TokenType.LBRACKET: self.parse_array,
            TokenType.LBRACE: self.parse_hash,
        }
        self.infix_rules = {token_type: self.parse_infix for token_type in Parser.PRECEDENCES}
        self.infix_rules[TokenType.LPAREN] = self.parse_call
        self.infix_rules[TokenType.LBRACKET] = self.parse_index

        self.current = Token(TokenType.EOF)
        self.peek = Token(TokenType.EOF)
        self.next_token()
        self.next_token()

    def next_token(self):
        """Consumes one token: peek becomes current."""
        self.current = self.peek
        self.peek = self.lexer.next_token()

    def expect_peek(self, token_type):
        """Consumes peek if it is of token_type, else raises a ParseError."""
        if self.peek.type is not token_type:
            raise ParseError(f"expected next token to be {token_type}", self.peek, token_type)
        self.next_token()

    def peek_precedence(self):
        return Parser.PRECEDENCES.get(self.peek.type, Precedence.LOWEST)

    def current_precedence(self):
        return Parser.PRECEDENCES.get(self.current.type, Precedence.LOWEST)

    def synchronize(self):
        """Skips the rest of a broken statement: stops on the terminating ";" or at end of input."""
        while self.current.type not in (TokenType.SEMICOLON, TokenType.EOF):
            self.next_token()

    def parse_program(self):
        """Parses every statement in source. Errors are collected in self.errors rather than raised."""
        program = ast.Program()

        while self.current.type is not TokenType.EOF:
            try:
                self.append_statement(program.statements)
            except ParseError as error:
                self.errors.append(error)
                self.synchronize()
            self.next_token()

        return program

    def append_statement(self, statements):
        """Parses a statement onto statements. A statement following a return can never run, which is warned about (once
        per statement list).
        """
        start = self.current.start
        statement = self.parse_statement()

        returns = [isinstance(previous, ast.ReturnStatement) for previous in statements]
        if returns and returns[-1] and not any(returns[:-1]):
            self.warnings.append(("unreachable code after return statement", start, self.current.end))

        statements.append(statement)

    def parse_statement(self):
        if self.current.type is TokenType.LET:
            return self.parse_let_statement()
        elif self.current.type is TokenType.RETURN:
            return self.parse_return_statement()
        return self.parse_expression_statement()

    def parse_let_statement(self):
        if self.peek.type is not TokenType.IDENT:
            raise ParseError("expected identifier", self.peek, TokenType.IDENT)
        self.next_token()
        name = self.current.value

        self.expect_peek(TokenType.ASSIGN)
        self.next_token()

        value = self.parse_expression(Precedence.LOWEST)
        self.expect_peek(TokenType.SEMICOLON)

        return ast.LetStatement(name, value)

    def parse_return_statement(self):
        self.next_token()

        value = self.parse_expression(Precedence.LOWEST)
        self.expect_peek(TokenType.SEMICOLON)

        return ast.ReturnStatement(value)

    def parse_expression_statement(self):
        expression = self.parse_expression(Precedence.LOWEST)
        if self.peek.type is TokenType.SEMICOLON:
            self.next_token()

        return ast.ExpressionStatement(expression)

    def parse_block(self):
        """Parses statements up to the closing "}". Assumes current is the opening "{"."""
        statements = []
        self.next_token()

        while self.current.type is not TokenType.RBRACE:
            if self.current.type is TokenType.EOF:
                raise ParseError(f"expected next token to be {TokenType.RBRACE}", self.current, TokenType.RBRACE)

            self.append_statement(statements)
            self.next_token()

        return statements

    def parse_expression(self, precedence):
        """Precedence climbing: parses an expression whose operators all bind tighter than precedence."""
        if self.current.type is TokenType.ILLEGAL:
            raise ParseError(f"illegal token: {self.current.value}", self.current)

        prefix = self.prefix_rules.get(self.current.type)
        if prefix is None:
            raise ParseError(f"no prefix parse function for {self.current.type.name} found", self.current)
        left = prefix()

        while self.peek.type is not TokenType.SEMICOLON and precedence < self.peek_precedence():
            infix = self.infix_rules[self.peek.type]
            self.next_token()
            left = infix(left)

        return left

    def parse_expression_list(self, end):
        """Parses comma separated expressions up to end. Assumes current is the opening delimiter."""
        expressions = []
        if self.peek.type is end:
            self.next_token()
            return expressions

        self.next_token()
        expressions.append(self.parse_expression(Precedence.LOWEST))

        while self.peek.type is TokenType.COMMA:
            self.next_token()
            self.next_token()
            expressions.append(self.parse_expression(Precedence.LOWEST))

        self.expect_peek(end)
        return expressions

    # prefix rules

    def parse_identifier(self):
        return ast.Identifier(self.current.value)

    def parse_integer(self):
        return ast.IntegerLiteral(self.current.value)

    def parse_string(self):
        return ast.StringLiteral(self.current.value)

    def parse_boolean(self):
        return ast.BooleanLiteral(self.current.value)

    def parse_prefix(self):
        operator = self.current.type.value
        self.next_token()

        return ast.PrefixExpression(operator, self.parse_expression(Precedence.PREFIX))

    def parse_grouped(self):
        self.next_token()

        expression = self.parse_expression(Precedence.LOWEST)
        self.expect_peek(TokenType.RPAREN)

        return expression

    def parse_if(self):
        self.expect_peek(TokenType.LPAREN)
        self.next_token()
        condition = self.parse_expression(Precedence.LOWEST)

        self.expect_peek(TokenType.RPAREN)
        self.expect_peek(TokenType.LBRACE)
        consequence = self.parse_block()

        alternative = None
        if self.peek.type is TokenType.ELSE:
            self.next_token()
            self.expect_peek(TokenType.LBRACE)
            alternative = self.parse_block()

        return ast.IfExpression(condition, consequence, alternative)

    def parse_function(self):
        self.expect_peek(TokenType.LPAREN)
        parameters = self.parse_parameters()

        self.expect_peek(TokenType.LBRACE)
        return ast.FunctionLiteral(parameters, self.parse_block())

    def parse_parameters(self):
        """Parses comma separated identifiers up to ")". Assumes current is "("."""
        parameters = []
        if self.peek.type is TokenType.RPAREN:
            self.next_token()
            return parameters

        self.expect_peek(TokenType.IDENT)
        parameters.append(self.current.value)

        while self.peek.type is TokenType.COMMA:
            self.next_token()
            self.expect_peek(TokenType.IDENT)
            parameters.append(self.current.value)

        self.expect_peek(TokenType.RPAREN)
        return parameters

    def parse_array(self):
        return ast.ArrayLiteral(self.parse_expression_list(TokenType.RBRACKET))

    def parse_hash(self):
        pairs = []

        while self.peek.type is not TokenType.RBRACE:
            self.next_token()
            key = self.parse_expression(Precedence.LOWEST)

            self.expect_peek(TokenType.COLON)
            self.next_token()
            pairs.append((key, self.parse_expression(Precedence.LOWEST)))

            if self.peek.type is not TokenType.RBRACE:
                self.expect_peek(TokenType.COMMA)

        self.expect_peek(TokenType.RBRACE)
        return ast.HashLiteral(pairs)

    # infix rules

    def parse_infix(self, left):
        operator = self.current.type.value
        precedence = self.current_precedence()
        self.next_token()

        return ast.InfixExpression(operator, left, self.parse_expression(precedence))

    def parse_call(self, callee):
        return ast.CallExpression(callee, self.parse_expression_list(TokenType.RPAREN))

    def parse_index(self, left):
        self.next_token()

        index = self.parse_expression(Precedence.LOWEST)
        self.expect_peek(TokenType.RBRACKET)

        return ast.IndexExpression(left, index)


def parse(source, error_handler=None):
    """Parses source into a Program. Raises ParserErrors (holding every ParseError found) if source has any syntax
    error: a partial Program is never returned. Warnings are reported through error_handler, if given.
    """
    parser = Parser(source)
    program = parser.parse_program()

    if parser.errors:
        raise ParserErrors(parser.errors, source)

    if error_handler is not None:
        for msg, start, end in parser.warnings:
            error_handler.warn(msg, source, start, end)
    return program
