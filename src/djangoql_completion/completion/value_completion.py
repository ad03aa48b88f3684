"""
Value completion strategy: literals for the field on the left of a comparison.
"""

from __future__ import annotations

from typing import Optional

from djangoql_completion.application.value_options import ValueOptionsService
from djangoql_completion.core.context import Scope
from djangoql_completion.core.schema import FieldType
from djangoql_completion.logger import get_logger

from .strategy import CompletionRequest, CompletionStrategy
from .types import Candidates, Suggestion

logger = get_logger("completion.value")


class ValueCompletionStrategy(CompletionStrategy):
    """
    Suggests None, booleans, or option values (inline or from the suggestions API).

    Option values are matched by substring and, unlike field names and
    operators, case-insensitively by default. Pass
    ``values_case_sensitive=True`` to match them exactly.
    """

    def __init__(
        self,
        value_service: Optional[ValueOptionsService] = None,
        values_case_sensitive: bool = False,
    ) -> None:
        self._value_service = value_service
        self._values_case_sensitive = values_case_sensitive

    def can_handle(self, request: CompletionRequest) -> bool:
        return request.scope is Scope.VALUE

    def get_candidates(self, request: CompletionRequest) -> Candidates:
        prefix = request.prefix
        field_def = request.field_def

        if field_def is None:
            # relation compared as a whole
            return Candidates(prefix=prefix, suggestions=[Suggestion("None", "", " ")])

        if field_def.has_options:
            return self._option_candidates(request)

        if field_def.type is FieldType.BOOL:
            suggestions = [Suggestion("True", "", " "), Suggestion("False", "", " ")]
            if field_def.nullable:
                suggestions.append(Suggestion("None", "", " "))
            return Candidates(prefix=prefix, suggestions=suggestions)

        if field_def.type is FieldType.UNKNOWN:
            return Candidates(prefix="")

        return Candidates(prefix=prefix)

    def _option_candidates(self, request: CompletionRequest) -> Candidates:
        context = request.context
        field_def = request.field_def
        loading = False

        if field_def.inline_options is not None:
            values: tuple[str, ...] = tuple(field_def.inline_options)
        elif self._value_service is None or not self._value_service.api_url:
            logger.debug(f"No suggestions API for {context.model}.{context.field}")
            values = ()
        else:
            options = self._value_service.get_options(
                context.model, context.field, context.prefix, load_more=request.load_more
            )
            values = options.items
            loading = options.loading

        return Candidates(
            prefix=context.prefix,
            suggestions=[Suggestion(value, '"', '"') for value in values],
            case_sensitive=self._values_case_sensitive,
            loading=loading,
        )
