"""
Logical completion strategy: connectors after a complete comparison.
"""

from __future__ import annotations

from djangoql_completion.core.context import Scope

from .strategy import CompletionRequest, CompletionStrategy
from .types import Candidates, Suggestion


class LogicalCompletionStrategy(CompletionStrategy):
    """Suggests ``and`` / ``or``."""

    def can_handle(self, request: CompletionRequest) -> bool:
        return request.scope is Scope.LOGICAL

    def get_candidates(self, request: CompletionRequest) -> Candidates:
        return Candidates(
            prefix=request.prefix,
            suggestions=[Suggestion("and", "", " "), Suggestion("or", "", " ")],
        )
