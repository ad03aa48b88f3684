"""
Field completion strategy: names of the fields of the current model.
"""

from __future__ import annotations

from djangoql_completion.core.context import Scope
from djangoql_completion.logger import get_logger

from .strategy import CompletionRequest, CompletionStrategy
from .types import Candidates, Suggestion

logger = get_logger("completion.field")


class FieldCompletionStrategy(CompletionStrategy):
    """Suggests field names, with ``.`` after relations and a space after scalars."""

    def can_handle(self, request: CompletionRequest) -> bool:
        return request.scope is Scope.FIELD and request.context.model is not None

    def get_candidates(self, request: CompletionRequest) -> Candidates:
        model_stack = request.context.model_stack
        suggestions: list[Suggestion] = []
        for name, field_def in request.model_fields.items():
            if (
                field_def.is_relation
                and field_def.relation in model_stack
                # The model being listed may relate to itself,
                # e.g. an author with an "authors_in_genre" relation.
                and model_stack[-1] != field_def.relation
            ):
                logger.debug(f"Skipping back-reference {name} -> {field_def.relation}")
                continue
            suggestions.append(Suggestion(name, "", "." if field_def.is_relation else " "))

        return Candidates(prefix=request.prefix, suggestions=suggestions)
