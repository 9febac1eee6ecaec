"""
Configurable arithmetic expression engine.

Expressions are built from user-definable prefix, postfix and infix operators
(including N-ary operators such as ``? :``), functions and variables, and
evaluate to floats.
"""

# Core types and utilities
from .ast import (
    AstNode,
    AstNodeBase,
    FunctionCallNode,
    NumberLiteralNode,
    OperationNode,
    VariableReferenceNode,
    ast_to_string,
    count_ast_nodes,
)

# Builder
from .builder import (
    BuildResult,
    ExpressionBuilder,
    build_expression,
    verify_brackets,
)

# Builtins
from .builtins import (
    COMPARATIVE_OPERATORS,
    DEFAULT_OPERATORS,
    DEFAULT_VARIABLES,
    ExprFunction,
    FunctionRegistry,
    MinArgsFunction,
    VariableRegistry,
    bi_function,
    call_function,
    default_functions,
    mono_function,
    with_min_args,
)
from .config import (
    ExpressionBuilderConfig,
    ExpressionLimitsConfig,
    load_builder_config,
    normalize_builder_config,
)
from .errors import (
    BracketMismatchError,
    ConfigurationError,
    DanglingArgumentSeparatorError,
    DanglingOperatorError,
    EmptyFunctionArgumentError,
    ErrorCode,
    EvaluationError,
    ExpressionError,
    LeadingArgumentSeparatorError,
    LeadingNonPrefixOperatorError,
    LimitExceededError,
    MissingFunctionArgumentsError,
    MissingFunctionError,
    MissingVariableError,
    ParseError,
    TrailingArgumentSeparatorError,
    TrailingNonPostfixOperatorError,
    UnexpectedCloseBracketError,
    UnmatchedOpenBracketError,
    UnparsableExpressionError,
    UnrecognisedFunctionError,
)

# Evaluator
from .evaluator import (
    EvaluationContext,
    EvaluationResult,
    Evaluator,
    evaluate,
)
from .expression import Expression
from .limits import (
    DEFAULT_EXPRESSION_LIMITS,
    ExpressionLimits,
    check_ast_depth,
    check_ast_node_count,
    check_expression_length,
    check_function_arg_count,
)

# Operators
from .operators import (
    DEFAULT_PRIORITY,
    Associativity,
    InfixOperator,
    Operator,
    OperatorPriorityGroup,
    OperatorRegistry,
    PostfixOperator,
    PrefixOperator,
    TokenTrie,
)

# Parser
from .parser import Parser

# Tokenizer
from .tokenizer import (
    Tokenizer,
    count_spaces_at_end,
    count_spaces_at_start,
    parse_number,
    tokenize,
    tokenize_numbers,
    tokenize_with_single_token,
)
from .tokens import (
    ARGUMENT_SEPARATOR,
    BUILTIN_TOKENS,
    CLOSE_BRACKET,
    OPEN_BRACKET,
    NumberToken,
    Token,
    TokenList,
    UntokenizedString,
)

__all__ = [
    # AST types
    "AstNode",
    "AstNodeBase",
    "NumberLiteralNode",
    "VariableReferenceNode",
    "FunctionCallNode",
    "OperationNode",
    "count_ast_nodes",
    "ast_to_string",
    # Builder
    "ExpressionBuilder",
    "BuildResult",
    "build_expression",
    "verify_brackets",
    "Expression",
    # Config
    "ExpressionBuilderConfig",
    "ExpressionLimitsConfig",
    "load_builder_config",
    "normalize_builder_config",
    # Errors
    "ErrorCode",
    "ExpressionError",
    "ParseError",
    "UnparsableExpressionError",
    "BracketMismatchError",
    "UnexpectedCloseBracketError",
    "UnmatchedOpenBracketError",
    "DanglingOperatorError",
    "LeadingNonPrefixOperatorError",
    "TrailingNonPostfixOperatorError",
    "DanglingArgumentSeparatorError",
    "LeadingArgumentSeparatorError",
    "TrailingArgumentSeparatorError",
    "EmptyFunctionArgumentError",
    "UnrecognisedFunctionError",
    "EvaluationError",
    "MissingVariableError",
    "MissingFunctionError",
    "MissingFunctionArgumentsError",
    "LimitExceededError",
    "ConfigurationError",
    # Limits
    "ExpressionLimits",
    "DEFAULT_EXPRESSION_LIMITS",
    "check_expression_length",
    "check_ast_depth",
    "check_ast_node_count",
    "check_function_arg_count",
    # Operators
    "DEFAULT_PRIORITY",
    "Associativity",
    "Operator",
    "PrefixOperator",
    "PostfixOperator",
    "InfixOperator",
    "TokenTrie",
    "OperatorPriorityGroup",
    "OperatorRegistry",
    # Tokens
    "Token",
    "NumberToken",
    "UntokenizedString",
    "TokenList",
    "OPEN_BRACKET",
    "CLOSE_BRACKET",
    "ARGUMENT_SEPARATOR",
    "BUILTIN_TOKENS",
    # Tokenizer
    "Tokenizer",
    "tokenize",
    "parse_number",
    "count_spaces_at_start",
    "count_spaces_at_end",
    "tokenize_with_single_token",
    "tokenize_numbers",
    # Parser
    "Parser",
    # Evaluator
    "EvaluationContext",
    "EvaluationResult",
    "Evaluator",
    "evaluate",
    # Builtins
    "ExprFunction",
    "FunctionRegistry",
    "VariableRegistry",
    "MinArgsFunction",
    "with_min_args",
    "mono_function",
    "bi_function",
    "default_functions",
    "call_function",
    "DEFAULT_OPERATORS",
    "COMPARATIVE_OPERATORS",
    "DEFAULT_VARIABLES",
]
