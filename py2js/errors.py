"""
Errors raised by the compiler pipeline.

The first error raised aborts the whole compile() call; nothing in the
pipeline catches these.
"""

from typing import Optional


class CompileError(Exception):
    """Base error of compilation"""
    kind = "CompileError"

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        self.message = message
        self.line = line
        self.column = column
        super().__init__(self.format())

    def format(self) -> str:
        if self.line is None:
            return f"{self.kind}: {self.message}"
        if self.column is None:
            return f"{self.kind} at line {self.line}: {self.message}"
        return f"{self.kind} at line {self.line}, column {self.column}: {self.message}"


class LexicalError(CompileError):
    """Raised for a character that can't be classified or an inconsistent dedent"""
    kind = "LexicalError"


class ParseError(CompileError):
    """Raised when a token is met that the grammar doesn't allow at that position"""
    kind = "SyntaxError"


class GeneratorError(CompileError):
    """Raised when the code generator meets a node it doesn't know.

    This is a bug in the compiler itself, not in the program being compiled.
    """
    kind = "InternalError"
