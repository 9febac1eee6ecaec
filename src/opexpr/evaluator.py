"""
Expression evaluator.

Evaluates an AST against an environment of variables and functions and
returns a float. Names are resolved when evaluated, not when parsed, so an
environment may be changed between evaluations of the same tree.
"""

from dataclasses import dataclass
from typing import List, Mapping, Optional, cast

from .ast import (
    AstNode,
    FunctionCallNode,
    NumberLiteralNode,
    OperationNode,
    VariableReferenceNode,
)
from .builtins import ExprFunction, call_function
from .errors import ErrorCode, ExpressionError, MissingVariableError


@dataclass
class EvaluationContext:
    """Evaluation context with variable and function bindings."""

    variables: Mapping[str, float]
    """Variable bindings available to expressions."""

    functions: Mapping[str, ExprFunction]
    """Functions callable from expressions."""

    source: Optional[str] = None
    """Source expression for error reporting."""


@dataclass
class EvaluationResult:
    """Result of expression evaluation."""

    value: Optional[float]
    """The evaluated value."""

    success: bool
    """Whether evaluation succeeded."""

    error: Optional[str] = None
    """Error message if evaluation failed."""

    error_code: Optional[ErrorCode] = None
    """Kind of failure, if evaluation failed."""


class Evaluator:
    """Evaluates an AST node and returns the result."""

    def __init__(self, context: EvaluationContext):
        self._context = context
        self._source = context.source

    def evaluate(self, node: AstNode) -> float:
        """Evaluates an AST node and returns the value."""
        node_type = node.type

        if node_type == "NumberLiteral":
            return cast(NumberLiteralNode, node).value

        if node_type == "VariableReference":
            return self._evaluate_variable(cast(VariableReferenceNode, node))

        if node_type == "FunctionCall":
            return self._evaluate_function_call(cast(FunctionCallNode, node))

        if node_type == "Operation":
            return self._evaluate_operation(cast(OperationNode, node))

        raise ExpressionError(f"Unknown AST node type: {node_type}", node.position, self._source)

    def _evaluate_variable(self, node: VariableReferenceNode) -> float:
        variables = self._context.variables
        if node.name not in variables:
            raise MissingVariableError(node.name, node.position, self._source)
        return float(variables[node.name])

    def _evaluate_function_call(self, node: FunctionCallNode) -> float:
        # Arguments are all evaluated, left to right, before the call.
        args: List[float] = [self.evaluate(arg) for arg in node.args]

        try:
            return call_function(node.name, args, self._context.functions)
        except ExpressionError as error:
            if error.position is None:
                error.position = node.position
                error.expression = self._source
            raise

    def _evaluate_operation(self, node: OperationNode) -> float:
        operands = [self.evaluate(operand) for operand in node.operands]
        return float(node.operator.apply(operands))


def evaluate(ast: AstNode, context: EvaluationContext) -> EvaluationResult:
    """
    Evaluates an AST against a context and returns the result.

    Args:
        ast: The AST to evaluate
        context: The evaluation context with bindings

    Returns:
        The evaluation result with value and success status
    """
    try:
        evaluator = Evaluator(context)
        value = evaluator.evaluate(ast)
        return EvaluationResult(value=value, success=True)
    except ExpressionError as error:
        return EvaluationResult(
            value=None, success=False, error=str(error), error_code=error.code
        )
    except Exception as error:
        return EvaluationResult(
            value=None,
            success=False,
            error=str(error),
            error_code=ErrorCode.EVALUATION_ERROR,
        )
