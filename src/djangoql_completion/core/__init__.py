"""Core analysis: tokenizer, schema graph and cursor context resolution."""

from djangoql_completion.core.context import Context, ContextResolver, Scope
from djangoql_completion.core.lexer import Token, TokenKind, tokenize, tokenize_all
from djangoql_completion.core.schema import FieldDef, FieldType, ResolvedName, Schema, resolve_name

__all__ = [
    "Context",
    "ContextResolver",
    "Scope",
    "Token",
    "TokenKind",
    "tokenize",
    "tokenize_all",
    "FieldDef",
    "FieldType",
    "ResolvedName",
    "Schema",
    "resolve_name",
]
