"""Completion engine configuration.

Options are accepted in the camelCase spelling used by the browser widget
(``completionEnabled``, ``cacheSize`` ...) as well as in snake_case.
"""

import json
from pathlib import Path
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, PositiveFloat, PositiveInt, ValidationError
from pydantic.alias_generators import to_camel

from djangoql_completion.logger import get_logger

logger = get_logger("config")


class CompletionConfig(BaseModel):
    """Options recognized by the completion engine."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    completion_enabled: bool = Field(default=True, description="Whether suggestions are produced at all")
    values_case_sensitive: bool = Field(
        default=False, description="Match field value options case-sensitively"
    )
    cache_size: PositiveInt = Field(default=100, description="Capacity of the value-page LRU cache")
    syntax_help_url: Optional[str] = Field(default=None, description="Link shown by hosts next to the list")
    fetch_delay: float = Field(
        default=0.3, ge=0, description="Seconds to wait before fetching values, coalescing fast typing"
    )
    request_timeout: PositiveFloat = Field(default=10.0, description="HTTP timeout in seconds")


_OPTION_ERRORS = {
    "cache_size": "cache_size must be a positive integer",
    "fetch_delay": "fetch_delay must be a non-negative number",
    "request_timeout": "request_timeout must be a positive number",
}


def _option_keys(alias_or_name: Any) -> tuple[str, ...]:
    for name, info in CompletionConfig.model_fields.items():
        if alias_or_name in (name, info.alias):
            return (name, info.alias or name)
    return (str(alias_or_name),)


def load_config(options: Optional[Mapping[str, Any]] = None) -> CompletionConfig:
    """
    Build a configuration from a mapping of options.

    Invalid options are logged once and replaced by their defaults, so a
    bad option never leaves the engine without a configuration. Unknown
    keys are ignored.

    Args:
        options: Mapping of option names (camelCase or snake_case) to values

    Returns:
        CompletionConfig: The validated configuration
    """
    if options is None:
        return CompletionConfig()
    if not isinstance(options, Mapping):
        logger.error(f"Please pass a mapping with configuration options, got {type(options).__name__}")
        return CompletionConfig()

    data = dict(options)
    try:
        return CompletionConfig.model_validate(data)
    except ValidationError as e:
        for error in e.errors():
            key = error["loc"][0] if error["loc"] else None
            if key is None:
                continue
            keys = _option_keys(key)
            logger.error(_OPTION_ERRORS.get(keys[0], f"Invalid value for {key}: {error['msg']}"))
            for option_key in keys:
                data.pop(option_key, None)

    return CompletionConfig.model_validate(data)


def load_config_file(config_path: str | Path) -> CompletionConfig:
    """
    Load completion options from a JSON file.

    Args:
        config_path: Path to a JSON object with configuration options

    Returns:
        CompletionConfig: Parsed configuration object

    Raises:
        FileNotFoundError: If the configuration file doesn't exist
        json.JSONDecodeError: If the JSON file is invalid
    """
    config_path = Path(config_path)
    if not config_path.exists():
        error_msg = f"Configuration file not found: {config_path}"
        logger.error(error_msg)
        raise FileNotFoundError(error_msg)

    logger.info(f"Loading completion configuration from: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in configuration file {config_path}: {e}")
        raise

    return load_config(data)
