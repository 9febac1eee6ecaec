"""
Abstract Syntax Tree (AST) node types for expressions.

The AST is produced by the parser and consumed by the evaluator. Variables
and functions are referenced by name and only resolved at evaluation time.
"""

from abc import ABC
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal, Sequence, Union

if TYPE_CHECKING:
    from .operators import Operator

# ============================================================
# AST Node Types
# ============================================================


@dataclass(frozen=True)
class AstNodeBase(ABC):
    """Base class for all AST nodes."""

    position: int
    """Position in source expression (for error reporting)."""


@dataclass(frozen=True)
class NumberLiteralNode(AstNodeBase):
    """Number literal node."""

    value: float

    @property
    def type(self) -> Literal["NumberLiteral"]:
        return "NumberLiteral"


@dataclass(frozen=True)
class VariableReferenceNode(AstNodeBase):
    """Reference to a named variable."""

    name: str

    @property
    def type(self) -> Literal["VariableReference"]:
        return "VariableReference"


@dataclass(frozen=True)
class FunctionCallNode(AstNodeBase):
    """Function call node."""

    name: str
    args: Sequence["AstNode"]

    @property
    def type(self) -> Literal["FunctionCall"]:
        return "FunctionCall"


@dataclass(frozen=True)
class OperationNode(AstNodeBase):
    """Application of a prefix, postfix or infix operator to its operands."""

    operator: "Operator"
    operands: Sequence["AstNode"]

    @property
    def type(self) -> Literal["Operation"]:
        return "Operation"


# Union type for all AST nodes
AstNode = Union[
    NumberLiteralNode,
    VariableReferenceNode,
    FunctionCallNode,
    OperationNode,
]


# ============================================================
# AST Utilities
# ============================================================


def count_ast_nodes(node: AstNode) -> int:
    """Counts the total number of nodes in an AST."""
    if node.type == "FunctionCall":
        return 1 + sum(count_ast_nodes(arg) for arg in node.args)

    if node.type == "Operation":
        return 1 + sum(count_ast_nodes(operand) for operand in node.operands)

    return 1


def ast_to_string(node: AstNode, indent: int = 0) -> str:
    """Returns a human-readable representation of an AST node for debugging."""
    prefix = "  " * indent

    if node.type == "NumberLiteral":
        return f"{prefix}Number: {node.value}"

    if node.type == "VariableReference":
        return f"{prefix}Variable: {node.name}"

    if node.type == "FunctionCall":
        lines = [f"{prefix}FunctionCall: {node.name}"]
        lines.extend(ast_to_string(a, indent + 1) for a in node.args)
        return "\n".join(lines)

    if node.type == "Operation":
        lines = [f"{prefix}Operation: {node.operator.describe()}"]
        lines.extend(ast_to_string(o, indent + 1) for o in node.operands)
        return "\n".join(lines)

    return f"{prefix}Unknown: {node}"
