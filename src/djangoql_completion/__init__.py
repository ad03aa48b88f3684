"""
djangoql_completion - autocompletion engine for the DjangoQL query language.

Given a query, a cursor position and an introspected schema of models, the
engine works out what is being typed and offers the valid next tokens.
"""

from loguru import logger as _loguru_logger

from djangoql_completion.application import DjangoQLCompletion
from djangoql_completion.completion import CompletionResult, Suggestion, highlight, render_suggestion
from djangoql_completion.config import CompletionConfig, load_config, load_config_file
from djangoql_completion.core import (
    Context,
    FieldDef,
    FieldType,
    Schema,
    Scope,
    Token,
    TokenKind,
    resolve_name,
    tokenize,
)
from djangoql_completion.errors import DjangoQLCompletionError, FetchError, SchemaError
from djangoql_completion.logger import PACKAGE_NAME, get_logger, setup_logger

# Silent unless the host application calls setup_logger()
_loguru_logger.disable(PACKAGE_NAME)

__version__ = "0.1.0"

__all__ = [
    "DjangoQLCompletion",
    "CompletionConfig",
    "CompletionResult",
    "Context",
    "DjangoQLCompletionError",
    "FetchError",
    "FieldDef",
    "FieldType",
    "Schema",
    "SchemaError",
    "Scope",
    "Suggestion",
    "Token",
    "TokenKind",
    "get_logger",
    "highlight",
    "load_config",
    "load_config_file",
    "render_suggestion",
    "resolve_name",
    "setup_logger",
    "tokenize",
]
