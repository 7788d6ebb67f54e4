"""
Compiler from a small indentation-structured, Python-like language to JavaScript.
"""

from .codegen import CodeGenerator, generate
from .compiler import compile
from .errors import CompileError, GeneratorError, LexicalError, ParseError
from .nodes import *
from .parser import Parser, parse
from .tokenizer import Token, tokenize
