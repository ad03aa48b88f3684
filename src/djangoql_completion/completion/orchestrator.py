"""
Orchestrator that coordinates completion strategies.
"""

from __future__ import annotations

from collections.abc import Sequence

from djangoql_completion.logger import get_logger

from .strategy import CompletionRequest, CompletionStrategy
from .types import Candidates, CompletionResult, Suggestion

logger = get_logger("completion.orchestrator")


def matches(suggestion: Suggestion, prefix: str, anchored: bool = False, case_sensitive: bool = True) -> bool:
    """Return True if ``suggestion`` survives filtering by ``prefix``."""
    text = suggestion.text
    if not case_sensitive:
        text = text.lower()
        prefix = prefix.lower()
    if anchored:
        # every word may anchor the match, so "st" finds "not startswith"
        return text.startswith(prefix) or any(word.startswith(prefix) for word in text.split())
    return prefix in text


class CompletionOrchestrator:
    """Selects the first strategy able to serve the current request."""

    def __init__(self, strategies: Sequence[CompletionStrategy]) -> None:
        self._strategies = list(strategies)

    def get_completions(self, request: CompletionRequest) -> CompletionResult:
        for strategy in self._strategies:
            try:
                if strategy.can_handle(request):
                    logger.debug(f"Strategy {strategy.__class__.__name__} selected for completion")
                    return self._finalize(strategy.get_candidates(request))
            except Exception:
                logger.exception(f"Completion strategy {strategy.__class__.__name__} failed")
                return CompletionResult.empty()
        logger.debug("No completion strategy matched current context")
        return CompletionResult.empty()

    def _finalize(self, candidates: Candidates) -> CompletionResult:
        suggestions = tuple(
            suggestion
            for suggestion in candidates.suggestions
            if matches(suggestion, candidates.prefix, candidates.anchored, candidates.case_sensitive)
        )
        return CompletionResult(
            prefix=candidates.prefix,
            suggestions=suggestions,
            # the only remaining suggestion is pre-selected
            selected=0 if len(suggestions) == 1 else None,
            loading=candidates.loading,
            highlight_case_sensitive=candidates.case_sensitive,
        )
