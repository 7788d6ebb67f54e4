"""
The compiler entry point: source text in, JavaScript text out.
"""

from .codegen import generate
from .parser import parse
from .tokenizer import tokenize


def compile(source: str) -> str:
    """Compile a complete program to JavaScript source text.

    The result is a function expression; calling it with a print function
    runs the program. Raises LexicalError or ParseError for bad input.
    Holds no state between calls.
    """
    tokens = tokenize(source)
    program = parse(tokens)
    return generate(program)
