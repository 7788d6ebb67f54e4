"""
Syntax tree of the source language.

Nodes are immutable: sequences are stored as tuples and every class is a
frozen dataclass. The source line is kept on each node for diagnostics but
takes no part in equality, so trees can be compared structurally.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple, Union

__all__ = [
    'ASTNode',
    'ProgramNode', 'FunctionNode', 'IfNode', 'WhileNode', 'ReturnNode',
    'AssignNode', 'ExprStmtNode', 'PassNode', 'BreakNode', 'ContinueNode',
    'BinaryNode', 'UnaryNode', 'CallNode', 'CompareNode', 'BoolOpNode',
    'VariableNode', 'NumberNode', 'StringNode', 'TrueNode', 'FalseNode', 'NoneNode',
    'LITERAL_NODES',
]


@dataclass(frozen=True)
class ASTNode:
    line: int = field(default=0, kw_only=True, compare=False)


# ----------------------------------------------------------------------
# Statements
# ----------------------------------------------------------------------

@dataclass(frozen=True)
class ProgramNode(ASTNode):
    body: Tuple[ASTNode, ...]

@dataclass(frozen=True)
class FunctionNode(ASTNode):
    name: str
    params: Tuple[str, ...]
    body: Tuple[ASTNode, ...]

@dataclass(frozen=True)
class IfNode(ASTNode):
    test: ASTNode
    body: Tuple[ASTNode, ...]
    elifs: Tuple[Tuple[ASTNode, Tuple[ASTNode, ...]], ...] = ()  # (test, body) pairs
    orelse: Optional[Tuple[ASTNode, ...]] = None

@dataclass(frozen=True)
class WhileNode(ASTNode):
    test: ASTNode
    body: Tuple[ASTNode, ...]

@dataclass(frozen=True)
class ReturnNode(ASTNode):
    value: Optional[ASTNode] = None

@dataclass(frozen=True)
class AssignNode(ASTNode):
    name: str
    value: ASTNode

@dataclass(frozen=True)
class ExprStmtNode(ASTNode):
    value: ASTNode

@dataclass(frozen=True)
class PassNode(ASTNode):
    pass

@dataclass(frozen=True)
class BreakNode(ASTNode):
    pass

@dataclass(frozen=True)
class ContinueNode(ASTNode):
    pass


# ----------------------------------------------------------------------
# Expressions
# ----------------------------------------------------------------------

@dataclass(frozen=True)
class BinaryNode(ASTNode):
    op: str  # '+', '-', '*', '/', '//', '%', '**'
    left: ASTNode
    right: ASTNode

@dataclass(frozen=True)
class UnaryNode(ASTNode):
    op: str  # '-', '+', 'not'
    operand: ASTNode

@dataclass(frozen=True)
class CallNode(ASTNode):
    func: ASTNode
    args: Tuple[ASTNode, ...]

@dataclass(frozen=True)
class CompareNode(ASTNode):
    """a < b <= c: one more operand than operators"""
    operands: Tuple[ASTNode, ...]
    ops: Tuple[str, ...]

@dataclass(frozen=True)
class BoolOpNode(ASTNode):
    op: str  # 'and' or 'or'
    values: Tuple[ASTNode, ...]

@dataclass(frozen=True)
class VariableNode(ASTNode):
    name: str

@dataclass(frozen=True)
class NumberNode(ASTNode):
    value: Union[int, float]

@dataclass(frozen=True)
class StringNode(ASTNode):
    value: str

@dataclass(frozen=True)
class TrueNode(ASTNode):
    pass

@dataclass(frozen=True)
class FalseNode(ASTNode):
    pass

@dataclass(frozen=True)
class NoneNode(ASTNode):
    pass


LITERAL_NODES = (NumberNode, StringNode, TrueNode, FalseNode, NoneNode)
