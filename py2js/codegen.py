"""
Code generator: syntax tree to JavaScript source text.

The program becomes a function expression taking the print capability:

    (function ($print) {
      "use strict";
      let fact;
      fact = function fact(n) { ... };
      $print(fact(5));
    })

Every name the compiler introduces starts with '$', which can't occur in a
source identifier, so generated names never collide with user names.
"""

import json
import logging
import math
from typing import List, Sequence, Tuple

from .errors import GeneratorError
from .nodes import *

log = logging.getLogger(__name__)

INDENT = '  '

PRINT = '$print'

BUILTINS = {
    'print': PRINT,
}

COMPARE_OPS = {
    '<': '<',
    '>': '>',
    '<=': '<=',
    '>=': '>=',
    '==': '===',
    '!=': '!==',
}

BINARY_OPS = {
    '+': '+',
    '-': '-',
    '*': '*',
    '**': '**',
}

# Division and modulo go through helpers: a zero divisor throws, and
# // and % floor like Python.
HELPER_OPS = {
    '/': '$div',
    '//': '$floordiv',
    '%': '$mod',
}

HELPERS = {
    '$div': [
        'function $div(a, b) {',
        '  if (b === 0 || b === false) throw new Error("ZeroDivisionError: division by zero");',
        '  return a / b;',
        '}',
    ],
    '$floordiv': [
        'function $floordiv(a, b) {',
        '  if (b === 0 || b === false) throw new Error("ZeroDivisionError: integer division or modulo by zero");',
        '  const r = a % b;',
        '  return Math.floor((a - ((r !== 0 && (r < 0) !== (b < 0)) ? r + b : r)) / b);',
        '}',
    ],
    '$mod': [
        'function $mod(a, b) {',
        '  if (b === 0 || b === false) throw new Error("ZeroDivisionError: integer division or modulo by zero");',
        '  const r = a % b;',
        '  return (r !== 0 && (r < 0) !== (b < 0)) ? r + b : r;',
        '}',
    ],
}

HELPER_ORDER = ['$div', '$floordiv', '$mod']

# User names that would be invalid or would shadow something the helpers use
JS_RESERVED = frozenset([
    'await', 'break', 'case', 'catch', 'class', 'const', 'continue', 'debugger',
    'default', 'delete', 'do', 'else', 'enum', 'export', 'extends', 'false',
    'finally', 'for', 'function', 'if', 'implements', 'import', 'in',
    'instanceof', 'interface', 'let', 'new', 'null', 'package', 'private',
    'protected', 'public', 'return', 'static', 'super', 'switch', 'this',
    'throw', 'true', 'try', 'typeof', 'var', 'void', 'while', 'with', 'yield',
    'arguments', 'eval', 'undefined', 'NaN', 'Infinity', 'Math', 'Error',
])


def var_ref(name: str) -> str:
    """Return the JavaScript identifier for a source name"""
    if name in JS_RESERVED:
        return f"${name}"
    return name


def format_number(value) -> str:
    if isinstance(value, float):
        if math.isinf(value):
            return 'Infinity'
        return repr(value)
    return str(value)


def scope_names(body: Sequence[ASTNode]) -> List[str]:
    """Names bound anywhere in a function or program body, in order of first binding.

    Conditional and loop blocks belong to the enclosing scope; nested
    function bodies don't, only the function's own name does.
    """
    names = []

    def visit(stmts):
        for stmt in stmts:
            if isinstance(stmt, (AssignNode, FunctionNode)):
                if stmt.name not in names:
                    names.append(stmt.name)
            elif isinstance(stmt, IfNode):
                visit(stmt.body)
                for _, block in stmt.elifs:
                    visit(block)
                if stmt.orelse:
                    visit(stmt.orelse)
            elif isinstance(stmt, WhileNode):
                visit(stmt.body)

    visit(body)
    return names


# ----------------------------------------------------------------------
# Code Generator
# ----------------------------------------------------------------------

class CodeGenerator:
    def __init__(self):
        self.lines = []
        self.level = 0
        self.tmp_counter = 0
        self.temps = []       # comparison temporaries of the current scope
        self.helpers = set()  # runtime helpers referenced anywhere

    def emit(self, text: str) -> None:
        self.lines.append(INDENT * self.level + text)

    def new_tmp(self) -> str:
        self.tmp_counter += 1
        name = f"$c{self.tmp_counter}"
        self.temps.append(name)
        return name

    def generate_program(self, node: ProgramNode) -> str:
        if not isinstance(node, ProgramNode):
            raise GeneratorError(f"Expected a program, got {type(node).__name__}")

        self.level = 1
        body = self.generate_scope(node.body, ())

        out = ['(function ($print) {', INDENT + '"use strict";']
        for helper in HELPER_ORDER:
            if helper in self.helpers:
                out.extend(INDENT + line for line in HELPERS[helper])
        out.extend(body)
        out.append('})')
        return '\n'.join(out)

    def generate_scope(self, body: Sequence[ASTNode], params: Tuple[str, ...]) -> List[str]:
        """Generate a function or program body, led by its 'let' declarations.

        Declarations are only known once the whole body has been generated
        (temporaries are allocated on the way), so the body is generated into
        a fresh line buffer and the declaration is put in front of it.
        """
        old_lines = self.lines
        old_temps = self.temps
        old_tmp_counter = self.tmp_counter

        self.lines = []
        self.temps = []
        self.tmp_counter = 0

        self.generate_body(body)

        declared = [var_ref(name) for name in scope_names(body) if name not in params]
        declared.extend(self.temps)
        lines = self.lines
        if declared:
            lines.insert(0, INDENT * self.level + f"let {', '.join(declared)};")

        self.lines = old_lines
        self.temps = old_temps
        self.tmp_counter = old_tmp_counter
        return lines

    def generate_body(self, body: Sequence[ASTNode]) -> None:
        for stmt in body:
            self.generate_statement(stmt)

    def generate_block(self, body: Sequence[ASTNode]) -> None:
        self.level += 1
        self.generate_body(body)
        self.level -= 1

    # ----------------------------------------------------------------------
    # Statements
    # ----------------------------------------------------------------------

    def generate_statement(self, node: ASTNode) -> None:
        if isinstance(node, FunctionNode):
            self.generate_function(node)

        elif isinstance(node, IfNode):
            self.emit(f"if ({self.generate_expr(node.test, wrap=False)}) {{")
            self.generate_block(node.body)
            for test, block in node.elifs:
                self.emit(f"}} else if ({self.generate_expr(test, wrap=False)}) {{")
                self.generate_block(block)
            if node.orelse is not None:
                self.emit("} else {")
                self.generate_block(node.orelse)
            self.emit("}")

        elif isinstance(node, WhileNode):
            self.emit(f"while ({self.generate_expr(node.test, wrap=False)}) {{")
            self.generate_block(node.body)
            self.emit("}")

        elif isinstance(node, ReturnNode):
            if node.value is None:
                self.emit("return null;")
            else:
                self.emit(f"return {self.generate_expr(node.value, wrap=False)};")

        elif isinstance(node, AssignNode):
            self.emit(f"{var_ref(node.name)} = {self.generate_expr(node.value, wrap=False)};")

        elif isinstance(node, ExprStmtNode):
            self.emit(f"{self.generate_expr(node.value, wrap=False)};")

        elif isinstance(node, PassNode):
            pass

        elif isinstance(node, BreakNode):
            self.emit("break;")

        elif isinstance(node, ContinueNode):
            self.emit("continue;")

        else:
            raise GeneratorError(f"Unknown statement type: {type(node).__name__}",
                                 getattr(node, 'line', None))

    def generate_function(self, node: FunctionNode) -> None:
        """Emit a def as an assignment of a *named* function expression.

        The name inside the expression is what makes recursion work; the
        assignment keeps Python's order of binding, so a function is only
        visible once its def has run.
        """
        if not node.body:
            raise GeneratorError(f"Function {node.name!r} has an empty body", node.line)

        name = var_ref(node.name)
        params = ', '.join(var_ref(p) for p in node.params)
        self.emit(f"{name} = function {name}({params}) {{")

        self.level += 1
        self.lines.extend(self.generate_scope(node.body, node.params))
        if not isinstance(node.body[-1], ReturnNode):
            self.emit("return null;")
        self.level -= 1

        self.emit("};")

    # ----------------------------------------------------------------------
    # Expressions
    # ----------------------------------------------------------------------

    def generate_expr(self, node: ASTNode, wrap: bool = True) -> str:
        """Return the JavaScript text of an expression.

        With wrap=True (operand position) compound expressions are
        parenthesised; statements, tests and arguments pass wrap=False.
        """
        if isinstance(node, NumberNode):
            return format_number(node.value)

        elif isinstance(node, StringNode):
            return json.dumps(node.value)

        elif isinstance(node, TrueNode):
            return 'true'

        elif isinstance(node, FalseNode):
            return 'false'

        elif isinstance(node, NoneNode):
            return 'null'

        elif isinstance(node, VariableNode):
            if node.name in BUILTINS:
                return BUILTINS[node.name]
            return var_ref(node.name)

        elif isinstance(node, CallNode):
            func = self.generate_expr(node.func)
            args = ', '.join(self.generate_expr(arg, wrap=False) for arg in node.args)
            return f"{func}({args})"

        elif isinstance(node, UnaryNode):
            if node.op == 'not':
                text = f"!{self.generate_expr(node.operand)}"
            elif node.op in ('-', '+'):
                text = f"{node.op}{self.generate_expr(node.operand)}"
            else:
                raise GeneratorError(f"Unknown unary operator: {node.op!r}", node.line)
            return f"({text})" if wrap else text

        elif isinstance(node, BinaryNode):
            return self.generate_binary(node, wrap)

        elif isinstance(node, CompareNode):
            return self.generate_compare(node, wrap)

        elif isinstance(node, BoolOpNode):
            if node.op == 'and':
                op = ' && '
            elif node.op == 'or':
                op = ' || '
            else:
                raise GeneratorError(f"Unknown boolean operator: {node.op!r}", node.line)
            text = op.join(self.generate_expr(value) for value in node.values)
            return f"({text})" if wrap else text

        else:
            raise GeneratorError(f"Unknown expression type: {type(node).__name__}",
                                 getattr(node, 'line', None))

    def generate_binary(self, node: BinaryNode, wrap: bool) -> str:
        if node.op in HELPER_OPS:
            helper = HELPER_OPS[node.op]
            self.helpers.add(helper)
            left = self.generate_expr(node.left, wrap=False)
            right = self.generate_expr(node.right, wrap=False)
            return f"{helper}({left}, {right})"

        if node.op not in BINARY_OPS:
            raise GeneratorError(f"Unknown binary operator: {node.op!r}", node.line)

        text = f"{self.generate_expr(node.left)} {BINARY_OPS[node.op]} {self.generate_expr(node.right)}"
        return f"({text})" if wrap else text

    def generate_compare(self, node: CompareNode, wrap: bool) -> str:
        """a < b < c  ->  a < ($c1 = b) && $c1 < c

        Interior operands are stored in a temporary the first time they are
        evaluated and read back for the next comparison, so each operand is
        evaluated at most once and evaluation stops at the first false
        comparison. Literals are simply repeated.
        """
        if len(node.operands) != len(node.ops) + 1:
            raise GeneratorError("Comparison chain with mismatched operands", node.line)

        parts = []
        left = self.generate_expr(node.operands[0])
        last = len(node.ops) - 1

        for i, op in enumerate(node.ops):
            if op not in COMPARE_OPS:
                raise GeneratorError(f"Unknown comparison operator: {op!r}", node.line)

            operand = node.operands[i + 1]
            right = self.generate_expr(operand)
            if i < last and not isinstance(operand, LITERAL_NODES):
                tmp = self.new_tmp()
                parts.append(f"{left} {COMPARE_OPS[op]} ({tmp} = {right})")
                left = tmp
            else:
                parts.append(f"{left} {COMPARE_OPS[op]} {right}")
                left = right

        text = ' && '.join(parts)
        return f"({text})" if wrap else text


def generate(program: ProgramNode) -> str:
    code = CodeGenerator().generate_program(program)
    log.debug("generated %d lines of JavaScript", code.count('\n') + 1)
    return code
