"""
Configuration documents describing an ExpressionBuilder.

A builder configuration may be given as a model, a dict, or a JSON or YAML
document. Keys are accepted in either camelCase or snake_case.
"""

from __future__ import annotations

import json
import logging
from dataclasses import replace
from typing import Any, Literal, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import ConfigurationError
from .limits import DEFAULT_EXPRESSION_LIMITS, ExpressionLimits

logger = logging.getLogger("opexpr.config")


class ExpressionLimitsConfig(BaseModel):
    """Overrides for the default expression limits. Unset fields keep their defaults."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    max_expression_length: Optional[int] = Field(
        default=None, alias="maxExpressionLength", gt=0
    )
    max_ast_depth: Optional[int] = Field(default=None, alias="maxAstDepth", gt=0)
    max_ast_nodes: Optional[int] = Field(default=None, alias="maxAstNodes", gt=0)
    max_function_args: Optional[int] = Field(
        default=None, alias="maxFunctionArgs", gt=0
    )

    def to_limits(self) -> ExpressionLimits:
        overrides = self.model_dump(
            by_alias=False,
            exclude_none=True,
            include={
                "max_expression_length",
                "max_ast_depth",
                "max_ast_nodes",
                "max_function_args",
            },
        )
        return replace(DEFAULT_EXPRESSION_LIMITS, **overrides)


class ExpressionBuilderConfig(BaseModel):
    """Configuration for creating an ExpressionBuilder."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    # Whether to register the default operators, functions and variables
    include_defaults: bool = Field(default=True, alias="includeDefaults")

    # Whether to register comparison, equality and logical operators
    comparative_operators: bool = Field(default=False, alias="comparativeOperators")

    # Extra variables, by name
    variables: dict[str, float] = Field(default_factory=dict)

    # Extra tokens to split expressions by, in registration order
    tokens: list[str] = Field(default_factory=list)

    expression_limits: Optional[ExpressionLimitsConfig] = Field(
        default=None, alias="expressionLimits"
    )

    def to_limits(self) -> ExpressionLimits:
        if self.expression_limits is None:
            return DEFAULT_EXPRESSION_LIMITS
        return self.expression_limits.to_limits()


def _parse_json(content: str) -> dict[str, Any]:
    """Parse JSON content as a configuration object."""
    parsed = json.loads(content)
    if not isinstance(parsed, dict):
        raise ValueError("Parsed JSON configuration must be an object")
    return parsed


def _parse_yaml(content: str) -> dict[str, Any]:
    """Parse YAML content as a configuration object."""
    parsed = yaml.safe_load(content or "")
    if parsed is None:
        return {}
    if not isinstance(parsed, dict):
        raise ValueError("Parsed YAML configuration must be an object")
    return parsed


def _detect_format(content: str) -> Literal["json", "yaml"]:
    """Sniffs whether content is JSON or YAML by its first non-whitespace character."""
    trimmed = content.lstrip()
    if trimmed.startswith("{") or trimmed.startswith("["):
        return "json"
    return "yaml"


def normalize_builder_config(
    config: ExpressionBuilderConfig | dict[str, Any] | None,
) -> ExpressionBuilderConfig:
    """
    Validates a builder configuration given as a model or a dict.

    Raises:
        ConfigurationError: If the configuration is invalid
    """
    if config is None:
        return ExpressionBuilderConfig()

    if isinstance(config, ExpressionBuilderConfig):
        return config

    if not isinstance(config, dict):
        raise ConfigurationError(
            f"Expression builder configuration must be an object, got {type(config).__name__}"
        )

    try:
        return ExpressionBuilderConfig.model_validate(config)
    except ValidationError as error:
        raise ConfigurationError(f"Invalid expression builder configuration: {error}") from error


def load_builder_config(
    content: str, format: Optional[Literal["json", "yaml"]] = None
) -> ExpressionBuilderConfig:
    """
    Loads a builder configuration from a JSON or YAML document.

    Args:
        content: The document text
        format: The document format; sniffed from the content if not given

    Returns:
        The validated configuration

    Raises:
        ConfigurationError: If the document can't be parsed or is invalid
    """
    detected_format = format or _detect_format(content)

    try:
        if detected_format == "json":
            raw = _parse_json(content)
        else:
            raw = _parse_yaml(content)
    except (ValueError, yaml.YAMLError) as error:
        logger.error(
            "builder_config_parse_failed",
            extra={"format": detected_format, "error": str(error)},
        )
        raise ConfigurationError(
            f"Failed to parse expression builder configuration: {error}"
        ) from error

    logger.debug("parsed_builder_config", extra={"format": detected_format})
    return normalize_builder_config(raw)
