"""
Cursor context resolution.

Given the full query text and a cursor offset, work out what the user is
typing right now: a field path, a comparison operator, a value or a
logical connector. The token stream before the cursor is usually
incomplete, so the last token touching the cursor is set aside and the
raw text after the previous token is used as the prefix instead.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from djangoql_completion.core.lexer import (
    COMPARISON_TOKENS,
    LOGICAL_TOKENS,
    VALUE_TOKENS,
    WHITESPACE_RE,
    Token,
    TokenKind,
    tokenize_all,
)
from djangoql_completion.core.schema import FieldType, Schema, resolve_name
from djangoql_completion.logger import get_logger

logger = get_logger("context")


class Scope(str, Enum):
    """Grammatical position of the cursor."""

    FIELD = "field"
    COMPARISON = "comparison"
    VALUE = "value"
    LOGICAL = "logical"


@dataclass(frozen=True, slots=True)
class Context:
    """What the user is typing at the cursor.

    Attributes:
        prefix: Text already typed in the current scope
        scope: Current scope, or None when nothing can be suggested
        model: Model whose fields/values apply (field, comparison and value scopes)
        field: Field being compared (comparison and value scopes)
        current_full_token: Full-length token under the cursor, if any
        model_stack: Models traversed to reach ``model``, starting at the current model
    """

    prefix: str
    scope: Optional[Scope]
    model: Optional[str]
    field: Optional[str]
    current_full_token: Optional[Token]
    model_stack: tuple[str, ...]


@dataclass(slots=True)
class _TokenWindow:
    """The tokens preceding the cursor plus the prefix typed after them."""

    last: Optional[Token]
    next_to_last: Optional[Token]
    prefix: str
    whitespace: bool
    current_full_token: Optional[Token]


class ContextResolver:
    """Resolves a :class:`Context` for a text and cursor position."""

    def __init__(self, schema: Schema) -> None:
        self._schema = schema

    @property
    def schema(self) -> Schema:
        return self._schema

    def get_context(self, text: str, cursor_pos: int) -> Context:
        window = self._scan(text, cursor_pos)
        last = window.last
        prefix = window.prefix
        whitespace = window.whitespace

        scope: Optional[Scope] = None
        model: Optional[str] = None
        field: Optional[str] = None
        model_stack: tuple[str, ...] = self._default_stack()

        if prefix == ")" and not whitespace:
            # nothing to suggest right after a closing paren
            pass
        elif self._starts_field(window):
            scope = Scope.FIELD
            model = self._schema.current_model
            if prefix == "." and last is not None:
                prefix = text[last.start : cursor_pos]
            name_parts = prefix.split(".")
            if len(name_parts) > 1:
                prefix = name_parts.pop()
                resolved = resolve_name(self._schema, ".".join(name_parts))
                if resolved.model and not resolved.field:
                    model = resolved.model
                    model_stack = resolved.model_stack
                else:
                    # unknown path, or a concrete field which has no properties
                    scope = None
                    model = None
        elif (
            last is not None
            and whitespace
            and window.next_to_last is not None
            and window.next_to_last.name is TokenKind.NAME
            and last.name in COMPARISON_TOKENS
        ):
            resolved = resolve_name(self._schema, window.next_to_last.value)
            if resolved.model:
                scope = Scope.VALUE
                model = resolved.model
                field = resolved.field
                model_stack = resolved.model_stack
                if prefix.startswith('"') and self._accepts_quoted_value(model, field):
                    prefix = prefix[1:]
        elif last is not None and whitespace and last.name is TokenKind.NAME:
            resolved = resolve_name(self._schema, last.value)
            if resolved.model:
                scope = Scope.COMPARISON
                model = resolved.model
                field = resolved.field
                model_stack = resolved.model_stack
        elif last is not None and whitespace and last.name in VALUE_TOKENS:
            scope = Scope.LOGICAL

        logger.debug(f"Context at {cursor_pos}: scope={scope} model={model} field={field} prefix={prefix!r}")
        return Context(
            prefix=prefix,
            scope=scope,
            model=model,
            field=field,
            current_full_token=window.current_full_token,
            model_stack=model_stack,
        )

    def _scan(self, text: str, cursor_pos: int) -> _TokenWindow:
        tokens = tokenize_all(text[:cursor_pos])
        all_tokens = tokenize_all(text)

        current_full_token: Optional[Token] = None
        if tokens and tokens[-1].end >= cursor_pos:
            # The token touching the cursor may be incomplete; keep only the
            # tokens before it and remember its full-length counterpart.
            index = len(tokens) - 1
            if index < len(all_tokens):
                current_full_token = all_tokens[index]
            tokens.pop()

        last = tokens[-1] if tokens else None
        next_to_last = tokens[-2] if len(tokens) > 1 else None

        prefix = text[last.end if last else 0 : cursor_pos]
        match = WHITESPACE_RE.match(prefix)
        if match:
            prefix = prefix[match.end() :]
        if prefix == "(":
            prefix = ""

        return _TokenWindow(
            last=last,
            next_to_last=next_to_last,
            prefix=prefix,
            whitespace=match is not None,
            current_full_token=current_full_token,
        )

    def _starts_field(self, window: _TokenWindow) -> bool:
        last = window.last
        if last is None:
            return True
        if last.name in LOGICAL_TOKENS and window.whitespace:
            return True
        if window.prefix == "." and not window.whitespace:
            return True
        if last.name is TokenKind.PAREN_L:
            before = window.next_to_last
            return before is None or before.name in LOGICAL_TOKENS
        return False

    def _accepts_quoted_value(self, model: str, field: Optional[str]) -> bool:
        field_def = self._schema.get_field(model, field)
        if field_def is None:
            return False
        return field_def.type is FieldType.STR or field_def.has_options

    def _default_stack(self) -> tuple[str, ...]:
        current = self._schema.current_model
        return (current,) if current else ()
