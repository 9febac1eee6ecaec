"""
Resource limits for expression parsing and evaluation.

These limits protect against overly complex expressions. The depth limit
keeps the recursive parser and evaluator well within the interpreter's
recursion limit; the others only bound the work done for a single build.
"""

from dataclasses import dataclass
from typing import Optional

from .errors import LimitExceededError


@dataclass(frozen=True)
class ExpressionLimits:
    """Expression limits configuration."""

    # Maximum expression string length in characters
    max_expression_length: int = 65536

    # Maximum AST depth (nesting level)
    max_ast_depth: int = 128

    # Maximum number of AST nodes
    max_ast_nodes: int = 100000

    # Maximum function call arguments
    max_function_args: int = 10000


# Default expression limits.
DEFAULT_EXPRESSION_LIMITS = ExpressionLimits()


def check_expression_length(
    expression: str, limits: Optional[ExpressionLimits] = None
) -> None:
    """Validates that expression length is within limits."""
    limits = limits or DEFAULT_EXPRESSION_LIMITS
    if len(expression) > limits.max_expression_length:
        # Points at the first character past the limit.
        raise LimitExceededError(
            "max_expression_length",
            limits.max_expression_length,
            len(expression),
            limits.max_expression_length,
            expression,
        )


def check_ast_depth(
    depth: int,
    limits: Optional[ExpressionLimits] = None,
    position: Optional[int] = None,
    expression: Optional[str] = None,
) -> None:
    """Validates AST depth during parsing."""
    limits = limits or DEFAULT_EXPRESSION_LIMITS
    if depth > limits.max_ast_depth:
        raise LimitExceededError(
            "max_ast_depth", limits.max_ast_depth, depth, position, expression
        )


def check_ast_node_count(
    count: int,
    limits: Optional[ExpressionLimits] = None,
    position: Optional[int] = None,
    expression: Optional[str] = None,
) -> None:
    """Validates AST node count after parsing."""
    limits = limits or DEFAULT_EXPRESSION_LIMITS
    if count > limits.max_ast_nodes:
        raise LimitExceededError(
            "max_ast_nodes", limits.max_ast_nodes, count, position, expression
        )


def check_function_arg_count(
    count: int,
    limits: Optional[ExpressionLimits] = None,
    position: Optional[int] = None,
    expression: Optional[str] = None,
) -> None:
    """Validates function argument count."""
    limits = limits or DEFAULT_EXPRESSION_LIMITS
    if count > limits.max_function_args:
        raise LimitExceededError(
            "max_function_args", limits.max_function_args, count, position, expression
        )
