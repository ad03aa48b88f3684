"""
Tokenizer for the DjangoQL query language.

Rules are tried at every position; the longest match wins and ties go to
the rule declared first. Characters no rule recognizes are skipped
silently so that half-typed queries still produce a usable token stream.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterator


class TokenKind(str, Enum):
    """Token types of the query grammar."""

    DOT = "DOT"
    COMMA = "COMMA"
    OR = "OR"
    AND = "AND"
    NOT = "NOT"
    IN = "IN"
    STARTSWITH = "STARTSWITH"
    ENDSWITH = "ENDSWITH"
    TRUE = "TRUE"
    FALSE = "FALSE"
    NONE = "NONE"
    NAME = "NAME"
    STRING_VALUE = "STRING_VALUE"
    INT_VALUE = "INT_VALUE"
    FLOAT_VALUE = "FLOAT_VALUE"
    PAREN_L = "PAREN_L"
    PAREN_R = "PAREN_R"
    EQUALS = "EQUALS"
    NOT_EQUALS = "NOT_EQUALS"
    GREATER = "GREATER"
    GREATER_EQUAL = "GREATER_EQUAL"
    LESS = "LESS"
    LESS_EQUAL = "LESS_EQUAL"
    CONTAINS = "CONTAINS"
    NOT_CONTAINS = "NOT_CONTAINS"


LOGICAL_TOKENS = frozenset({TokenKind.AND, TokenKind.OR})

COMPARISON_TOKENS = frozenset(
    {
        TokenKind.EQUALS,
        TokenKind.NOT_EQUALS,
        TokenKind.CONTAINS,
        TokenKind.NOT_CONTAINS,
        TokenKind.GREATER_EQUAL,
        TokenKind.GREATER,
        TokenKind.LESS_EQUAL,
        TokenKind.LESS,
    }
)

VALUE_TOKENS = frozenset(
    {
        TokenKind.PAREN_R,
        TokenKind.INT_VALUE,
        TokenKind.FLOAT_VALUE,
        TokenKind.STRING_VALUE,
    }
)


@dataclass(frozen=True, slots=True)
class Token:
    """A single token with its offsets in the analyzed text."""

    name: TokenKind
    value: str
    start: int
    end: int


_INT = r"(?:-?0|-?[1-9][0-9]*)"
_FRACTION = r"\.[0-9]+"
_EXPONENT = r"[eE][+-]?[0-9]+"
_NOT_FOLLOWED_BY_NAME = r"(?![_0-9A-Za-z])"
_STRING_CHAR = r'(?:\\[\\"/bfnrt]|\\u[0-9A-Fa-f]{4}|[^"\\\n\r\u2028\u2029])'

WHITESPACE_RE = re.compile(r"[ \t\v\f\r\n\u00A0]+")


def _keyword(word: str) -> re.Pattern[str]:
    return re.compile(word + _NOT_FOLLOWED_BY_NAME)


# Declaration order breaks ties between equally long matches.
_RULES: tuple[tuple[TokenKind | None, re.Pattern[str]], ...] = (
    (None, WHITESPACE_RE),
    (TokenKind.DOT, re.compile(r"\.")),
    (TokenKind.COMMA, re.compile(r",")),
    (TokenKind.OR, _keyword("or")),
    (TokenKind.AND, _keyword("and")),
    (TokenKind.NOT, _keyword("not")),
    (TokenKind.IN, _keyword("in")),
    (TokenKind.STARTSWITH, _keyword("startswith")),
    (TokenKind.ENDSWITH, _keyword("endswith")),
    (TokenKind.TRUE, _keyword("True")),
    (TokenKind.FALSE, _keyword("False")),
    (TokenKind.NONE, _keyword("None")),
    (TokenKind.NAME, re.compile(r"[_A-Za-z][_0-9A-Za-z]*(?:\.[_A-Za-z][_0-9A-Za-z]*)*")),
    (TokenKind.STRING_VALUE, re.compile(r'"' + _STRING_CHAR + r'*"')),
    (TokenKind.INT_VALUE, re.compile(_INT)),
    (
        TokenKind.FLOAT_VALUE,
        re.compile(
            f"{_INT}{_FRACTION}{_EXPONENT}|{_INT}{_FRACTION}|{_INT}{_EXPONENT}"
        ),
    ),
    (TokenKind.PAREN_L, re.compile(r"\(")),
    (TokenKind.PAREN_R, re.compile(r"\)")),
    (TokenKind.EQUALS, re.compile(r"=")),
    (TokenKind.NOT_EQUALS, re.compile(r"!=")),
    (TokenKind.GREATER, re.compile(r">")),
    (TokenKind.GREATER_EQUAL, re.compile(r">=")),
    (TokenKind.LESS, re.compile(r"<")),
    (TokenKind.LESS_EQUAL, re.compile(r"<=")),
    (TokenKind.CONTAINS, re.compile(r"~")),
    (TokenKind.NOT_CONTAINS, re.compile(r"!~")),
)


def tokenize(text: str) -> Iterator[Token]:
    """Lazily split ``text`` into tokens.

    Each call starts from scratch, so the generator can be re-created for
    any string at any time. Whitespace is consumed without being emitted.
    """
    pos = 0
    length = len(text)
    while pos < length:
        best_kind: TokenKind | None = None
        best_end = pos
        for kind, pattern in _RULES:
            match = pattern.match(text, pos)
            if match and match.end() > best_end:
                best_kind = kind
                best_end = match.end()

        if best_end == pos:
            # unrecognized character
            pos += 1
            continue

        if best_kind is not None:
            value = text[pos:best_end]
            if best_kind is TokenKind.STRING_VALUE:
                value = value[1:-1]
            yield Token(name=best_kind, value=value, start=pos, end=best_end)
        pos = best_end


def tokenize_all(text: str) -> list[Token]:
    """Eagerly tokenize ``text``."""
    return list(tokenize(text))
