"""
Error types for the expression engine.

All expression errors extend ExpressionError for consistent handling. Each
error class carries an ErrorCode tag so result objects can report the kind of
failure without exposing the exception itself.
"""

from enum import Enum
from typing import Optional


class ErrorCode(Enum):
    """Tags identifying each kind of expression failure."""

    # Generic
    EXPRESSION_ERROR = "EXPRESSION_ERROR"
    LIMIT_EXCEEDED = "LIMIT_EXCEEDED"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"

    # Parsing
    UNPARSABLE_EXPRESSION = "UNPARSABLE_EXPRESSION"
    BRACKET_MISMATCH = "BRACKET_MISMATCH"
    UNEXPECTED_CLOSE_BRACKET = "UNEXPECTED_CLOSE_BRACKET"
    UNMATCHED_OPEN_BRACKET = "UNMATCHED_OPEN_BRACKET"
    DANGLING_OPERATOR = "DANGLING_OPERATOR"
    LEADING_NON_PREFIX_OPERATOR = "LEADING_NON_PREFIX_OPERATOR"
    TRAILING_NON_POSTFIX_OPERATOR = "TRAILING_NON_POSTFIX_OPERATOR"
    DANGLING_ARGUMENT_SEPARATOR = "DANGLING_ARGUMENT_SEPARATOR"
    LEADING_ARGUMENT_SEPARATOR = "LEADING_ARGUMENT_SEPARATOR"
    TRAILING_ARGUMENT_SEPARATOR = "TRAILING_ARGUMENT_SEPARATOR"
    EMPTY_FUNCTION_ARGUMENT = "EMPTY_FUNCTION_ARGUMENT"
    UNRECOGNISED_FUNCTION = "UNRECOGNISED_FUNCTION"

    # Evaluation
    EVALUATION_ERROR = "EVALUATION_ERROR"
    MISSING_VARIABLE = "MISSING_VARIABLE"
    MISSING_FUNCTION = "MISSING_FUNCTION"
    MISSING_FUNCTION_ARGUMENTS = "MISSING_FUNCTION_ARGUMENTS"


class ExpressionError(Exception):
    """
    Base error class for all expression-related errors.
    """

    code = ErrorCode.EXPRESSION_ERROR

    def __init__(
        self,
        message: str,
        position: Optional[int] = None,
        expression: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.position = position
        self.expression = expression

    def format_with_context(self) -> str:
        """
        Returns a formatted error message with position context.
        """
        if self.expression is None or self.position is None:
            return self.message

        pointer = " " * self.position + "^"
        return f"{self.message}\n  {self.expression}\n  {pointer}"


# ============================================================
# Parse Errors
# ============================================================


class ParseError(ExpressionError):
    """
    Error thrown while parsing an expression.

    Carries the full expression text and the section of it that could not be
    parsed.
    """

    code = ErrorCode.UNPARSABLE_EXPRESSION

    def __init__(
        self,
        message: str,
        position: Optional[int] = None,
        expression: Optional[str] = None,
        section: Optional[str] = None,
    ):
        super().__init__(message, position, expression)
        self.section = section

    @property
    def full_expression(self) -> Optional[str]:
        return self.expression

    @property
    def expression_section(self) -> Optional[str]:
        """The offending part of the expression, without surrounding spaces."""
        if self.section is None:
            return None
        return self.section.strip()


class UnparsableExpressionError(ParseError):
    """
    Error thrown when no production matches part of an expression.
    """

    def __init__(
        self,
        expression: str,
        section: str,
        position: Optional[int] = None,
    ):
        message = (
            f"Expression was not parsable: {expression.strip()}\n"
            f"Specifically, this portion: {section.strip()}"
        )
        super().__init__(message, position, expression, section)


class BracketMismatchError(ParseError):
    """
    Error thrown when the brackets of an expression are not balanced.
    """

    code = ErrorCode.BRACKET_MISMATCH

    def __init__(
        self,
        expression: str,
        position: Optional[int] = None,
        message: str = "Expression contained a bracket mismatch",
    ):
        super().__init__(f"{message}: {expression.strip()}", position, expression, expression)


class UnexpectedCloseBracketError(BracketMismatchError):
    """
    Error thrown for a close bracket with no open bracket before it.
    """

    code = ErrorCode.UNEXPECTED_CLOSE_BRACKET

    def __init__(self, expression: str, position: Optional[int] = None):
        super().__init__(
            expression,
            position,
            "Expression contained a close bracket that didn't correspond to "
            "a matching open bracket",
        )


class UnmatchedOpenBracketError(BracketMismatchError):
    """
    Error thrown for an open bracket that is never closed.
    """

    code = ErrorCode.UNMATCHED_OPEN_BRACKET

    def __init__(self, expression: str, position: Optional[int] = None):
        super().__init__(
            expression,
            position,
            "Expression contained an open bracket that didn't correspond to "
            "a matching close bracket",
        )


class DanglingOperatorError(ParseError):
    """
    Error thrown when an operator has no operand on one of its sides.
    """

    code = ErrorCode.DANGLING_OPERATOR

    def __init__(
        self,
        operator_token: str,
        expression: str,
        position: Optional[int] = None,
        message: Optional[str] = None,
    ):
        message = message or f"Expression contained a dangling operator: {operator_token}"
        super().__init__(message, position, expression, operator_token)
        self.operator_token = operator_token


class LeadingNonPrefixOperatorError(DanglingOperatorError):
    """
    Error thrown when a section starts with an operator that is not a prefix operator.
    """

    code = ErrorCode.LEADING_NON_PREFIX_OPERATOR

    def __init__(self, operator_token: str, expression: str, position: Optional[int] = None):
        super().__init__(
            operator_token,
            expression,
            position,
            f"Expression started with an operator that is not a prefix operator: {operator_token}",
        )


class TrailingNonPostfixOperatorError(DanglingOperatorError):
    """
    Error thrown when a section ends with an operator that is not a postfix operator.
    """

    code = ErrorCode.TRAILING_NON_POSTFIX_OPERATOR

    def __init__(self, operator_token: str, expression: str, position: Optional[int] = None):
        super().__init__(
            operator_token,
            expression,
            position,
            f"Expression ended with an operator that is not a postfix operator: {operator_token}",
        )


class DanglingArgumentSeparatorError(ParseError):
    """
    Error thrown when a function call's argument list starts or ends with a separator.
    """

    code = ErrorCode.DANGLING_ARGUMENT_SEPARATOR

    def __init__(
        self,
        function_name: str,
        expression: str,
        section: str,
        position: Optional[int] = None,
        message: Optional[str] = None,
    ):
        message = message or (
            f"Call to function {function_name} contained a dangling argument separator"
        )
        super().__init__(message, position, expression, section)
        self.function_name = function_name


class LeadingArgumentSeparatorError(DanglingArgumentSeparatorError):
    """Argument list begins with a separator."""

    code = ErrorCode.LEADING_ARGUMENT_SEPARATOR

    def __init__(
        self,
        function_name: str,
        expression: str,
        section: str,
        position: Optional[int] = None,
    ):
        super().__init__(
            function_name,
            expression,
            section,
            position,
            f"Call to function {function_name} began its arguments with a separator",
        )


class TrailingArgumentSeparatorError(DanglingArgumentSeparatorError):
    """Argument list ends with a separator."""

    code = ErrorCode.TRAILING_ARGUMENT_SEPARATOR

    def __init__(
        self,
        function_name: str,
        expression: str,
        section: str,
        position: Optional[int] = None,
    ):
        super().__init__(
            function_name,
            expression,
            section,
            position,
            f"Call to function {function_name} ended its arguments with a separator",
        )


class EmptyFunctionArgumentError(ParseError):
    """
    Error thrown when a function call contains an empty argument slot.
    """

    code = ErrorCode.EMPTY_FUNCTION_ARGUMENT

    def __init__(
        self,
        function_name: str,
        expression: str,
        section: str,
        position: Optional[int] = None,
    ):
        super().__init__(
            f"Call to function {function_name} contained an empty argument",
            position,
            expression,
            section,
        )
        self.function_name = function_name


class UnrecognisedFunctionError(ParseError):
    """
    Error thrown when a function call names a function that isn't registered.
    """

    code = ErrorCode.UNRECOGNISED_FUNCTION

    def __init__(
        self,
        function_name: str,
        expression: str,
        section: str,
        position: Optional[int] = None,
    ):
        super().__init__(
            f"Expression contained an unrecognised function: {function_name}",
            position,
            expression,
            section,
        )
        self.function_name = function_name


# ============================================================
# Evaluation Errors
# ============================================================


class EvaluationError(ExpressionError):
    """
    Error thrown during evaluation (runtime error).
    """

    code = ErrorCode.EVALUATION_ERROR


class MissingVariableError(EvaluationError):
    """
    Error thrown when a referenced variable is absent from the environment.
    """

    code = ErrorCode.MISSING_VARIABLE

    def __init__(
        self,
        variable_name: str,
        position: Optional[int] = None,
        expression: Optional[str] = None,
    ):
        super().__init__(f"Variable was unresolved: {variable_name}", position, expression)
        self.variable_name = variable_name


class MissingFunctionError(EvaluationError):
    """
    Error thrown when a called function is absent from the environment.
    """

    code = ErrorCode.MISSING_FUNCTION

    def __init__(
        self,
        function_name: str,
        position: Optional[int] = None,
        expression: Optional[str] = None,
    ):
        super().__init__(f"Function was missing: {function_name}", position, expression)
        self.function_name = function_name


class MissingFunctionArgumentsError(EvaluationError):
    """
    Error thrown when a function is called with fewer arguments than it requires.
    """

    code = ErrorCode.MISSING_FUNCTION_ARGUMENTS

    def __init__(
        self,
        function_name: str,
        required: int,
        provided: int,
        position: Optional[int] = None,
        expression: Optional[str] = None,
    ):
        message = (
            f'The function "{function_name}" requires at least {required} arguments, '
            f"but only {provided} were provided."
        )
        super().__init__(message, position, expression)
        self.function_name = function_name
        self.required = required
        self.provided = provided


# ============================================================
# Other Errors
# ============================================================


class LimitExceededError(ExpressionError):
    """
    Error thrown when expression limits are exceeded.
    """

    code = ErrorCode.LIMIT_EXCEEDED

    def __init__(
        self,
        limit_name: str,
        limit: int,
        actual: int,
        position: Optional[int] = None,
        expression: Optional[str] = None,
    ):
        message = f"Limit exceeded: {limit_name} (limit: {limit}, actual: {actual})"
        super().__init__(message, position, expression)
        self.limit_name = limit_name
        self.limit = limit
        self.actual = actual


class ConfigurationError(ExpressionError):
    """
    Error thrown when a builder configuration document is invalid.
    """

    code = ErrorCode.CONFIGURATION_ERROR
