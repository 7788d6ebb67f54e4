"""
Recursive-descent parser: one method per grammar rule, single-token lookahead,
no backtracking and no error recovery.
"""

import logging
from typing import List, Optional, Tuple

from .errors import ParseError
from .nodes import *
from .tokenizer import Token

log = logging.getLogger(__name__)

COMPARE_OPS = ('<', '>', '<=', '>=', '==', '!=')
ADDITIVE_OPS = ('+', '-')
MULTIPLICATIVE_OPS = ('*', '/', '//', '%')
AUGMENTED_OPS = {'+=': '+', '-=': '-', '*=': '*', '/=': '/', '//=': '//', '%=': '%', '**=': '**'}


class Parser:
    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.pos = 0
        self.function_depth = 0
        self.loop_depth = 0

    def current(self) -> Token:
        return self.tokens[self.pos]

    def advance(self) -> Token:
        tok = self.current()
        if tok.type != 'EOF':
            self.pos += 1
        return tok

    def check(self, type: str, value=None) -> bool:
        tok = self.current()
        return tok.type == type and (value is None or tok.value == value)

    def accept(self, type: str, value=None) -> Optional[Token]:
        if self.check(type, value):
            return self.advance()
        return None

    def error(self, expected: str, tok: Optional[Token] = None) -> ParseError:
        tok = tok or self.current()
        return ParseError(f"expected {expected}, got {tok.describe()}", tok.line, tok.column)

    def expect(self, type: str, value=None, expected: Optional[str] = None) -> Token:
        if not self.check(type, value):
            raise self.error(expected or (repr(value) if value is not None else type.lower()))
        return self.advance()

    # ----------------------------------------------------------------------
    # Statements
    # ----------------------------------------------------------------------

    def parse_program(self) -> ProgramNode:
        body = []
        while not self.check('EOF'):
            body.append(self.parse_statement())
        return ProgramNode(tuple(body), line=1)

    def parse_statement(self) -> ASTNode:
        """Dispatch on the leading keyword"""
        tok = self.current()

        if tok.type == 'INDENT':
            raise ParseError("unexpected indent", tok.line, tok.column)

        if tok.type == 'KEYWORD':
            if tok.value == 'def':
                return self.parse_def()
            elif tok.value == 'if':
                return self.parse_if()
            elif tok.value == 'while':
                return self.parse_while()
            elif tok.value == 'return':
                return self.parse_return()
            elif tok.value in ('pass', 'break', 'continue'):
                return self.parse_keyword_statement()

        return self.parse_simple_statement()

    def parse_block(self) -> Tuple[ASTNode, ...]:
        """NEWLINE INDENT statement+ DEDENT"""
        self.expect('NEWLINE', expected="end of line")
        if not self.check('INDENT'):
            raise self.error("an indented block")
        self.advance()

        body = [self.parse_statement()]
        while not self.check('DEDENT'):
            body.append(self.parse_statement())
        self.advance()
        return tuple(body)

    def parse_def(self) -> FunctionNode:
        """def name(params): block"""
        start = self.advance()
        name = self.expect('NAME', expected="function name").value

        self.expect('OP', '(')
        params = []
        while not self.check('OP', ')'):
            param = self.expect('NAME', expected="parameter name")
            if param.value in params:
                raise ParseError(f"duplicate argument {param.value!r} in function definition",
                                 param.line, param.column)
            params.append(param.value)
            if not self.accept('OP', ','):
                break
        self.expect('OP', ')')
        self.expect('OP', ':')

        # a loop enclosing the def doesn't extend into its body
        outer_loop_depth = self.loop_depth
        self.function_depth += 1
        self.loop_depth = 0
        try:
            body = self.parse_block()
        finally:
            self.function_depth -= 1
            self.loop_depth = outer_loop_depth

        return FunctionNode(name, tuple(params), body, line=start.line)

    def parse_if(self) -> IfNode:
        """if test: block (elif test: block)* (else: block)?"""
        start = self.advance()
        test = self.parse_expression()
        self.expect('OP', ':')
        body = self.parse_block()

        elifs = []
        while self.accept('KEYWORD', 'elif'):
            elif_test = self.parse_expression()
            self.expect('OP', ':')
            elifs.append((elif_test, self.parse_block()))

        orelse = None
        if self.accept('KEYWORD', 'else'):
            self.expect('OP', ':')
            orelse = self.parse_block()

        return IfNode(test, body, tuple(elifs), orelse, line=start.line)

    def parse_while(self) -> WhileNode:
        start = self.advance()
        test = self.parse_expression()
        self.expect('OP', ':')

        self.loop_depth += 1
        try:
            body = self.parse_block()
        finally:
            self.loop_depth -= 1

        return WhileNode(test, body, line=start.line)

    def parse_return(self) -> ReturnNode:
        start = self.advance()
        if not self.function_depth:
            raise ParseError("'return' outside function", start.line, start.column)

        value = None
        if not self.check('NEWLINE'):
            value = self.parse_expression()
        self.expect('NEWLINE', expected="end of line")
        return ReturnNode(value, line=start.line)

    def parse_keyword_statement(self) -> ASTNode:
        """pass, break, continue"""
        tok = self.advance()
        if tok.value != 'pass' and not self.loop_depth:
            raise ParseError(f"'{tok.value}' outside loop", tok.line, tok.column)
        self.expect('NEWLINE', expected="end of line")

        if tok.value == 'pass':
            return PassNode(line=tok.line)
        elif tok.value == 'break':
            return BreakNode(line=tok.line)
        return ContinueNode(line=tok.line)

    def parse_simple_statement(self) -> ASTNode:
        """Expression statement or assignment.

        The target of an assignment is only known to be one after the '='
        has been seen, so the left-hand side is parsed as an expression first
        and then checked to be a plain name.
        """
        start = self.current()
        expr = self.parse_expression()

        tok = self.current()
        if tok.type == 'OP' and (tok.value == '=' or tok.value in AUGMENTED_OPS):
            if not isinstance(expr, VariableNode):
                raise ParseError("cannot assign to expression", start.line, start.column)
            self.advance()
            value = self.parse_expression()
            if tok.value != '=':
                value = BinaryNode(AUGMENTED_OPS[tok.value], expr, value, line=tok.line)
            self.expect('NEWLINE', expected="end of line")
            return AssignNode(expr.name, value, line=start.line)

        self.expect('NEWLINE', expected="end of line")
        return ExprStmtNode(expr, line=start.line)

    # ----------------------------------------------------------------------
    # Expressions, lowest to highest binding
    # ----------------------------------------------------------------------

    def parse_expression(self) -> ASTNode:
        return self.parse_or()

    def parse_or(self) -> ASTNode:
        start = self.current()
        values = [self.parse_and()]
        while self.accept('KEYWORD', 'or'):
            values.append(self.parse_and())
        if len(values) == 1:
            return values[0]
        return BoolOpNode('or', tuple(values), line=start.line)

    def parse_and(self) -> ASTNode:
        start = self.current()
        values = [self.parse_not()]
        while self.accept('KEYWORD', 'and'):
            values.append(self.parse_not())
        if len(values) == 1:
            return values[0]
        return BoolOpNode('and', tuple(values), line=start.line)

    def parse_not(self) -> ASTNode:
        tok = self.accept('KEYWORD', 'not')
        if tok:
            return UnaryNode('not', self.parse_not(), line=tok.line)
        return self.parse_comparison()

    def parse_comparison(self) -> ASTNode:
        """a < b < c is a single chain, not nested comparisons"""
        start = self.current()
        operands = [self.parse_additive()]
        ops = []
        while self.current().type == 'OP' and self.current().value in COMPARE_OPS:
            ops.append(self.advance().value)
            operands.append(self.parse_additive())
        if not ops:
            return operands[0]
        return CompareNode(tuple(operands), tuple(ops), line=start.line)

    def parse_additive(self) -> ASTNode:
        left = self.parse_term()
        while self.current().type == 'OP' and self.current().value in ADDITIVE_OPS:
            op = self.advance()
            left = BinaryNode(op.value, left, self.parse_term(), line=op.line)
        return left

    def parse_term(self) -> ASTNode:
        left = self.parse_unary()
        while self.current().type == 'OP' and self.current().value in MULTIPLICATIVE_OPS:
            op = self.advance()
            left = BinaryNode(op.value, left, self.parse_unary(), line=op.line)
        return left

    def parse_unary(self) -> ASTNode:
        tok = self.current()
        if tok.type == 'OP' and tok.value in ('-', '+'):
            self.advance()
            return UnaryNode(tok.value, self.parse_unary(), line=tok.line)
        return self.parse_power()

    def parse_power(self) -> ASTNode:
        """Right-associative; the exponent may carry its own sign: 2 ** -1"""
        base = self.parse_call()
        op = self.accept('OP', '**')
        if op:
            return BinaryNode('**', base, self.parse_unary(), line=op.line)
        return base

    def parse_call(self) -> ASTNode:
        expr = self.parse_atom()
        while self.check('OP', '('):
            start = self.advance()
            args = []
            while not self.check('OP', ')'):
                args.append(self.parse_expression())
                if not self.accept('OP', ','):
                    break
            self.expect('OP', ')')
            expr = CallNode(expr, tuple(args), line=start.line)
        return expr

    def parse_atom(self) -> ASTNode:
        """Literal, name, print or (expr)"""
        tok = self.current()

        if tok.type == 'NUMBER':
            self.advance()
            return NumberNode(tok.value, line=tok.line)

        elif tok.type == 'STRING':
            self.advance()
            return StringNode(tok.value, line=tok.line)

        elif tok.type == 'NAME':
            self.advance()
            return VariableNode(tok.value, line=tok.line)

        elif tok.type == 'KEYWORD':
            if tok.value == 'True':
                self.advance()
                return TrueNode(line=tok.line)
            elif tok.value == 'False':
                self.advance()
                return FalseNode(line=tok.line)
            elif tok.value == 'None':
                self.advance()
                return NoneNode(line=tok.line)
            elif tok.value == 'print':
                self.advance()
                if not self.check('OP', '('):
                    raise self.error("'(' after print")
                return VariableNode('print', line=tok.line)

        elif tok.type == 'OP' and tok.value == '(':
            self.advance()
            expr = self.parse_expression()
            self.expect('OP', ')')
            return expr

        raise self.error("an expression")


def parse(tokens: List[Token]) -> ProgramNode:
    program = Parser(tokens).parse_program()
    log.debug("parsed %d top-level statements", len(program.body))
    return program
