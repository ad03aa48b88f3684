"""
Completion strategies for the DjangoQL completion engine.

This package provides a strategy-based decomposition of suggestion
generation, one strategy per grammatical scope, plus the helpers used to
apply and render suggestions.
"""

from .strategy import CompletionRequest, CompletionStrategy
from .orchestrator import CompletionOrchestrator, matches
from .field_completion import FieldCompletionStrategy
from .comparison_completion import ComparisonCompletionStrategy
from .value_completion import ValueCompletionStrategy
from .logical_completion import LogicalCompletionStrategy
from .applier import ApplyResult, CompletionApplier
from .highlight import highlight, render_suggestion
from .types import Candidates, CompletionResult, Suggestion

__all__ = [
    "CompletionRequest",
    "CompletionStrategy",
    "CompletionOrchestrator",
    "matches",
    "FieldCompletionStrategy",
    "ComparisonCompletionStrategy",
    "ValueCompletionStrategy",
    "LogicalCompletionStrategy",
    "ApplyResult",
    "CompletionApplier",
    "highlight",
    "render_suggestion",
    "Candidates",
    "CompletionResult",
    "Suggestion",
]
