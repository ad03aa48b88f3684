"""
Comparison completion strategy: operators valid for the field on the left.
"""

from __future__ import annotations

from djangoql_completion.core.context import Scope
from djangoql_completion.core.schema import FieldType

from .strategy import CompletionRequest, CompletionStrategy
from .types import Candidates, Suggestion

_DATE_TYPES = (FieldType.DATE, FieldType.DATETIME)
_QUOTED_LIST_TYPES = (FieldType.STR, FieldType.DATE, FieldType.DATETIME)

_CONTAINS = [("~", "contains"), ("!~", "does not contain")]
_STRING_OPERATORS = [
    ("startswith", None),
    ("not startswith", None),
    ("endswith", None),
    ("not endswith", None),
]
_ORDERING = [(">", None), (">=", None), ("<", None), ("<=", None)]


class ComparisonCompletionStrategy(CompletionStrategy):
    """Suggests comparison operators, matched against the prefix from the start."""

    def can_handle(self, request: CompletionRequest) -> bool:
        return request.scope is Scope.COMPARISON

    def get_candidates(self, request: CompletionRequest) -> Candidates:
        field_def = request.field_def
        operators: list[tuple[str, str | None]] = [("=", None), ("!=", "is not equal to")]
        snippet_after = " "

        comparable = field_def is not None and field_def.type is not FieldType.BOOL
        if comparable:
            if field_def.type in _DATE_TYPES:
                operators.extend(_CONTAINS)
                snippet_after = ' "|"'
            elif field_def.type is FieldType.STR:
                operators.extend(_CONTAINS)
                operators.extend(_STRING_OPERATORS)
                snippet_after = ' "|"'
            elif field_def.has_options:
                snippet_after = ' "|"'
            if field_def.type is not FieldType.STR:
                operators.extend(_ORDERING)

        suggestions = [Suggestion(text, "", snippet_after, explanation) for text, explanation in operators]

        if comparable:
            if field_def.type in _QUOTED_LIST_TYPES or field_def.has_options:
                list_snippet = ' ("|")'
            else:
                list_snippet = " (|)"
            suggestions.append(Suggestion("in", "", list_snippet))
            suggestions.append(Suggestion("not in", "", list_snippet))

        return Candidates(prefix=request.prefix, suggestions=suggestions, anchored=True)
