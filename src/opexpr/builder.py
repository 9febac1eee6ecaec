"""
Expression builder.

The builder is a mutable registry of tokens, operators, functions and
variables. Each call to ``build`` tokenizes and parses a string once and
returns an Expression owning copies of the functions and variables registered
at that moment, so later changes to the builder never reach built expressions.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, List, Mapping, Optional, Sequence, Tuple, Union

from .builtins import (
    COMPARATIVE_OPERATORS,
    DEFAULT_OPERATORS,
    DEFAULT_VARIABLES,
    ExprFunction,
    bi_function,
    default_functions,
    mono_function,
    with_min_args,
)
from .config import ExpressionBuilderConfig, normalize_builder_config
from .errors import (
    ErrorCode,
    ExpressionError,
    UnexpectedCloseBracketError,
    UnmatchedOpenBracketError,
)
from .expression import Expression
from .limits import DEFAULT_EXPRESSION_LIMITS, ExpressionLimits
from .operators import (
    DEFAULT_PRIORITY,
    Associativity,
    InfixOperator,
    OperatorAction,
    OperatorPriorityGroup,
    OperatorRegistry,
    PostfixOperator,
    PrefixOperator,
)
from .parser import Parser
from .tokenizer import Tokenizer
from .tokens import CLOSE_BRACKET, OPEN_BRACKET, Token, TokenList

logger = logging.getLogger("opexpr.builder")


@dataclass
class BuildResult:
    """Result of building an expression."""

    expression: Optional[Expression]
    """The built expression."""

    success: bool
    """Whether the build succeeded."""

    error: Optional[str] = None
    """Error message if the build failed."""

    error_code: Optional[ErrorCode] = None
    """Kind of failure, if the build failed."""


def verify_brackets(token_list: TokenList, source: str) -> None:
    """
    Checks that every bracket in the token list is matched.

    Raises:
        UnexpectedCloseBracketError: For a close bracket with no open bracket before it
        UnmatchedOpenBracketError: For an open bracket that is never closed
    """
    open_indices: List[int] = []

    for i, token in enumerate(token_list):
        if token == OPEN_BRACKET:
            open_indices.append(i)
        elif token == CLOSE_BRACKET:
            if not open_indices:
                raise UnexpectedCloseBracketError(source, token_list.token_position(i))
            open_indices.pop()

    if open_indices:
        raise UnmatchedOpenBracketError(source, token_list.token_position(open_indices[0]))


class ExpressionBuilder:
    """
    Registry of operators, functions and variables that builds expressions.

    Registration methods return the builder, so calls can be chained::

        expression = (
            ExpressionBuilder()
            .with_variable("x", 3)
            .with_operator("§", lambda a, b: a * 2 + b)
            .build("x § 4")
        )
    """

    def __init__(
        self,
        include_defaults: bool = True,
        limits: Optional[ExpressionLimits] = None,
    ):
        self._operators = OperatorRegistry()
        self._variables: dict[str, float] = {}
        self._functions: dict[str, ExprFunction] = {}
        self._limits = limits or DEFAULT_EXPRESSION_LIMITS

        if include_defaults:
            self.with_default_operators()
            self.with_default_functions()
            self.with_default_variables()

    @classmethod
    def from_config(
        cls, config: ExpressionBuilderConfig | dict[str, Any] | None = None
    ) -> "ExpressionBuilder":
        """
        Creates a builder from a configuration model or dict.

        Raises:
            ConfigurationError: If the configuration is invalid
        """
        normalized = normalize_builder_config(config)

        builder = cls(
            include_defaults=normalized.include_defaults,
            limits=normalized.to_limits(),
        )

        if normalized.comparative_operators:
            builder.with_comparative_operators()

        for token in normalized.tokens:
            builder.with_token(token)

        for name, value in normalized.variables.items():
            builder.with_variable(name, value)

        logger.debug(
            "builder_created_from_config",
            extra={
                "include_defaults": normalized.include_defaults,
                "comparative_operators": normalized.comparative_operators,
                "variable_count": len(normalized.variables),
                "token_count": len(normalized.tokens),
            },
        )
        return builder

    # ============================================================
    # Views
    # ============================================================

    @property
    def limits(self) -> ExpressionLimits:
        return self._limits

    @property
    def variables(self) -> Mapping[str, float]:
        return MappingProxyType(self._variables)

    @property
    def functions(self) -> Mapping[str, ExprFunction]:
        return MappingProxyType(self._functions)

    @property
    def tokens(self) -> Tuple[Token, ...]:
        """Every registered token, in registration order."""
        return self._operators.tokens

    @property
    def operator_groups(self) -> Tuple[OperatorPriorityGroup, ...]:
        """The operator priority groups, lowest priority first."""
        return tuple(self._operators.groups())

    # ============================================================
    # Registration
    # ============================================================

    def with_limits(self, limits: ExpressionLimits) -> "ExpressionBuilder":
        self._limits = limits
        return self

    def with_token(self, token: str) -> "ExpressionBuilder":
        """
        Registers a token to split expressions by.

        Registered tokens are treated as operator tokens, so a section of an
        expression may not start or end with one unless it's also a prefix or
        postfix operator.
        """
        if not token:
            raise ValueError("Tokens must not be empty")
        self._operators.add_token(Token(token))
        return self

    def with_variable(self, name: str, value: float) -> "ExpressionBuilder":
        self._variables[name] = value
        return self

    def with_default_variables(self) -> "ExpressionBuilder":
        self._variables.update(DEFAULT_VARIABLES)
        return self

    def with_function(
        self, name: str, function: ExprFunction, min_args: Optional[int] = None
    ) -> "ExpressionBuilder":
        """
        Registers a function taking the list of its arguments.

        Args:
            name: The name the function is called by
            function: The function, called with a sequence of argument values
            min_args: If given, calling with fewer arguments fails with
                MissingFunctionArgumentsError
        """
        self._functions[name] = with_min_args(name, function, min_args)
        return self

    def with_mono_function(
        self, name: str, function: Callable[[float], float]
    ) -> "ExpressionBuilder":
        """Registers a function of one argument."""
        self._functions[name] = mono_function(name, function)
        return self

    def with_bi_function(
        self, name: str, function: Callable[[float, float], float]
    ) -> "ExpressionBuilder":
        """Registers a function of two arguments."""
        self._functions[name] = bi_function(name, function)
        return self

    def with_default_functions(self) -> "ExpressionBuilder":
        self._functions.update(default_functions())
        return self

    def with_prefix_operator(
        self,
        token: str,
        action: Callable[[float], float],
        priority: float = DEFAULT_PRIORITY,
    ) -> "ExpressionBuilder":
        self._operators.add(PrefixOperator((self._operator_token(token),), priority, action))
        return self

    def with_postfix_operator(
        self,
        token: str,
        action: Callable[[float], float],
        priority: float = DEFAULT_PRIORITY,
    ) -> "ExpressionBuilder":
        self._operators.add(PostfixOperator((self._operator_token(token),), priority, action))
        return self

    def with_operator(
        self,
        tokens: Union[str, Sequence[str]],
        action: OperatorAction,
        priority: float = DEFAULT_PRIORITY,
        associativity: Associativity = Associativity.LEFT,
    ) -> "ExpressionBuilder":
        """
        Registers an infix operator.

        Args:
            tokens: A single token for a binary operator, or the tokens written
                between each pair of operands of an N-ary operator (two tokens
                make a ternary operator, such as ``("?", ":")``)
            action: Called with the operand values, left to right
            priority: Higher priorities bind more tightly
            associativity: How repeated operators of the same priority group
        """
        if isinstance(tokens, str):
            tokens = (tokens,)

        if not tokens:
            raise ValueError("Infix operators require at least one token")

        operator = InfixOperator(
            tuple(self._operator_token(token) for token in tokens),
            priority,
            action,
            associativity,
        )
        self._operators.add(operator)
        return self

    def with_default_operators(self) -> "ExpressionBuilder":
        for operator in DEFAULT_OPERATORS:
            self._operators.add(operator)
        return self

    def with_comparative_operators(self) -> "ExpressionBuilder":
        """Registers comparison, equality and logical operators, and the ``? :`` conditional."""
        for operator in COMPARATIVE_OPERATORS:
            self._operators.add(operator)
        return self

    @staticmethod
    def _operator_token(text: str) -> Token:
        if not text:
            raise ValueError("Operator tokens must not be empty")
        return Token(text)

    # ============================================================
    # Building
    # ============================================================

    def build(self, text: str) -> Expression:
        """
        Parses a string into an expression.

        Raises:
            ValueError: If the text is empty or blank
            ParseError: If the text can't be parsed
            LimitExceededError: If the expression exceeds the builder's limits
        """
        if not text or not text.strip():
            raise ValueError("Expression text must not be empty")

        # Later registrations are split first, so a longer token registered
        # after a shorter one it contains wins.
        tokenizer = Tokenizer(tuple(reversed(self._operators.tokens)), self._limits)
        token_list = tokenizer.tokenize(text)
        verify_brackets(token_list, text)

        parser = Parser(
            self._operators,
            self._variables.keys(),
            self._functions.keys(),
            text,
            self._limits,
        )
        ast = parser.parse(token_list)

        logger.debug(
            "expression_built",
            extra={"source": text, "token_count": len(token_list), "root_type": ast.type},
        )
        return Expression(ast, self._variables, self._functions, text)

    def try_build(self, text: str) -> BuildResult:
        """Parses a string into an expression, reporting failure in the result rather than raising."""
        try:
            return BuildResult(expression=self.build(text), success=True)
        except ExpressionError as error:
            logger.debug(
                "expression_build_failed",
                extra={"source": text, "error_code": error.code.value},
            )
            return BuildResult(
                expression=None, success=False, error=str(error), error_code=error.code
            )
        except ValueError as error:
            return BuildResult(
                expression=None,
                success=False,
                error=str(error),
                error_code=ErrorCode.EXPRESSION_ERROR,
            )


def build_expression(text: str) -> Expression:
    """Builds an expression using only the default operators, functions and variables."""
    return ExpressionBuilder().build(text)
