"""
Built expressions.

An Expression owns a parsed AST and private copies of the variables and
functions that were registered when it was built. The set of names it knows
is fixed at build time: values may be replaced, but no name can be added.
"""

import logging
from types import MappingProxyType
from typing import Dict, FrozenSet, Mapping, Optional

from .ast import AstNode, ast_to_string
from .builtins import ExprFunction, with_min_args
from .evaluator import EvaluationContext, EvaluationResult, Evaluator, evaluate

logger = logging.getLogger("opexpr.expression")


class Expression:
    """A parsed expression, ready to be evaluated."""

    def __init__(
        self,
        ast: AstNode,
        variables: Mapping[str, float],
        functions: Mapping[str, ExprFunction],
        source: str,
    ):
        self._ast = ast
        self._variables: Dict[str, float] = dict(variables)
        self._functions: Dict[str, ExprFunction] = dict(functions)
        self._source = source

    @property
    def ast(self) -> AstNode:
        return self._ast

    @property
    def source(self) -> str:
        return self._source

    @property
    def variables(self) -> Mapping[str, float]:
        """Read-only view of the current variable values."""
        return MappingProxyType(self._variables)

    @property
    def function_names(self) -> FrozenSet[str]:
        return frozenset(self._functions)

    def _context(self) -> EvaluationContext:
        return EvaluationContext(
            variables=self._variables,
            functions=self._functions,
            source=self._source,
        )

    def evaluate(self) -> float:
        """
        Evaluates the expression.

        Raises:
            MissingVariableError: If a referenced variable is no longer defined
            MissingFunctionError: If a called function is no longer defined
            MissingFunctionArgumentsError: If a function is given too few arguments
        """
        return Evaluator(self._context()).evaluate(self._ast)

    def try_evaluate(self) -> EvaluationResult:
        """Evaluates the expression, reporting failure in the result rather than raising."""
        result = evaluate(self._ast, self._context())
        if not result.success:
            logger.debug(
                "expression_evaluation_failed",
                extra={
                    "source": self._source,
                    "error_code": result.error_code.value if result.error_code else None,
                },
            )
        return result

    def set_variable(self, name: str, value: float) -> bool:
        """
        Replaces the value of a variable this expression was built with.

        Returns False, changing nothing, if the expression has no such variable.
        """
        if name not in self._variables:
            return False
        self._variables[name] = value
        return True

    def redefine_function(
        self, name: str, function: ExprFunction, min_args: Optional[int] = None
    ) -> bool:
        """
        Replaces a function this expression was built with.

        Returns False, changing nothing, if the expression has no such function.
        """
        if name not in self._functions:
            return False
        self._functions[name] = with_min_args(name, function, min_args)
        return True

    def describe(self) -> str:
        """Returns a human-readable rendering of the parsed tree."""
        return ast_to_string(self._ast)

    def __repr__(self) -> str:
        return f"Expression({self._source!r})"
