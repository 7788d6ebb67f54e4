"""
Tokenizer for the Python-like source language.

Block structure is resolved from leading whitespace: the tokenizer keeps a
stack of indentation widths and turns every change of width into explicit
INDENT / DEDENT tokens, so the parser never looks at whitespace.
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Union

from .errors import LexicalError

log = logging.getLogger(__name__)

# ----------------------------------------------------------------------
# Tokens
# ----------------------------------------------------------------------

KEYWORDS = frozenset([
    'def', 'if', 'elif', 'else', 'while', 'return', 'print',
    'and', 'or', 'not', 'True', 'False', 'None',
    'pass', 'break', 'continue',
])

# longest first, so that e.g. '**=' wins over '**' and '*'
OPERATORS = [
    '**=', '//=',
    '**', '//', '==', '!=', '<=', '>=', '+=', '-=', '*=', '/=', '%=',
    '+', '-', '*', '/', '%', '<', '>', '=', '(', ')', ',', ':',
]

ESCAPES = {
    'n': '\n',
    't': '\t',
    'r': '\r',
    '0': '\0',
    '\\': '\\',
    "'": "'",
    '"': '"',
}

TAB_SIZE = 8

DIGITS = '0123456789'

NUMBER_RE = re.compile(r'([0-9]+\.[0-9]*|\.[0-9]+|[0-9]+)([eE][+-]?[0-9]+)?')
NAME_RE = re.compile(r'[A-Za-z_][A-Za-z0-9_]*')
LINE_SPLIT_RE = re.compile(r'\r\n|\r|\n')


@dataclass(frozen=True)
class Token:
    type: str    # KEYWORD, NAME, NUMBER, STRING, OP, INDENT, DEDENT, NEWLINE, EOF
    value: Union[str, int, float]
    line: int = 0
    column: int = 0

    def describe(self) -> str:
        """Human-readable form, for error messages"""
        if self.type == 'NEWLINE':
            return "end of line"
        if self.type == 'EOF':
            return "end of input"
        if self.type == 'INDENT':
            return "indent"
        if self.type == 'DEDENT':
            return "dedent"
        if self.type == 'STRING':
            return "string literal"
        if self.type == 'NUMBER':
            return f"number {self.value!r}"
        return repr(self.value)


def indent_width(indent: str) -> int:
    width = 0
    for c in indent:
        if c == '\t':
            width += TAB_SIZE - width % TAB_SIZE
        else:
            width += 1
    return width


# ----------------------------------------------------------------------
# Tokenizer
# ----------------------------------------------------------------------

def tokenize(source: str) -> List[Token]:
    tokens = []
    stack = [0]
    lines = LINE_SPLIT_RE.split(source)

    for lineno, line in enumerate(lines, start=1):
        stripped = line.lstrip(' \t')

        # Blank and comment-only lines contribute nothing
        if not stripped or stripped.startswith('#'):
            continue

        width = indent_width(line[:len(line) - len(stripped)])

        if width > stack[-1]:
            stack.append(width)
            tokens.append(Token('INDENT', width, lineno, 1))
        elif width < stack[-1]:
            while width < stack[-1]:
                stack.pop()
                tokens.append(Token('DEDENT', width, lineno, 1))
            if width != stack[-1]:
                raise LexicalError("unindent does not match any outer indentation level", lineno, 1)

        tokenize_line(line, len(line) - len(stripped), lineno, tokens)
        tokens.append(Token('NEWLINE', '\n', lineno, len(line) + 1))

    # the line after the last line terminator
    end = len(lines) if lines[-1] == '' else len(lines) + 1
    while len(stack) > 1:
        stack.pop()
        tokens.append(Token('DEDENT', 0, end, 1))

    tokens.append(Token('EOF', '', end, 1))
    log.debug("tokenized %d lines into %d tokens", len(lines), len(tokens))
    return tokens


def tokenize_line(line: str, start: int, lineno: int, tokens: List[Token]) -> None:
    """Append the tokens of one logical line, starting at offset `start`"""
    i = start

    while i < len(line):
        c = line[i]
        column = i + 1

        # Skip whitespace
        if c in ' \t':
            i += 1
            continue

        # Comment runs to end of line
        if c == '#':
            break

        # Numbers (integer or decimal, optional exponent)
        if c in DIGITS or (c == '.' and i + 1 < len(line) and line[i + 1] in DIGITS):
            m = NUMBER_RE.match(line, i)
            text = m.group(0)
            j = m.end()
            if j < len(line) and (line[j].isalnum() or line[j] == '_'):
                raise LexicalError(f"invalid numeric literal {line[i:j + 1]!r}", lineno, column)
            if '.' in text or 'e' in text or 'E' in text:
                value = float(text)
            else:
                value = int(text)
            tokens.append(Token('NUMBER', value, lineno, column))
            i = j
            continue

        # Identifiers and keywords
        if c.isalpha() or c == '_':
            m = NAME_RE.match(line, i)
            if m is None:
                # a non-ASCII letter
                raise LexicalError(f"unexpected character {c!r}", lineno, column)
            name = m.group(0)
            tokens.append(Token('KEYWORD' if name in KEYWORDS else 'NAME', name, lineno, column))
            i = m.end()
            continue

        # String literals
        if c in '\'"':
            value, i = read_string(line, i, lineno)
            tokens.append(Token('STRING', value, lineno, column))
            continue

        # Operators and punctuation
        for op in OPERATORS:
            if line.startswith(op, i):
                tokens.append(Token('OP', op, lineno, column))
                i += len(op)
                break
        else:
            raise LexicalError(f"unexpected character {c!r}", lineno, column)


def read_string(line: str, i: int, lineno: int):
    """Read a quoted literal starting at line[i]; return (value, index after closing quote)"""
    quote = line[i]
    j = i + 1
    chars = []

    while j < len(line):
        c = line[j]
        if c == quote:
            return ''.join(chars), j + 1
        if c == '\\' and j + 1 < len(line):
            nxt = line[j + 1]
            if nxt in ESCAPES:
                chars.append(ESCAPES[nxt])
            else:
                # unknown escapes keep their backslash
                chars.append(c + nxt)
            j += 2
            continue
        chars.append(c)
        j += 1

    raise LexicalError("unterminated string literal", lineno, i + 1)
