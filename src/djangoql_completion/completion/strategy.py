"""
Strategy interfaces for query completions.

Each grammatical scope (field, comparison, value, logical) has its own
strategy, which keeps the suggestion rules focused and testable.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from djangoql_completion.core.context import Context, Scope
from djangoql_completion.core.schema import FieldDef, Schema

from .types import Candidates


@dataclass(slots=True)
class CompletionRequest:
    """Snapshot of the resolved cursor context used by completion strategies."""

    context: Context
    schema: Schema
    load_more: bool = False

    @property
    def scope(self) -> Optional[Scope]:
        return self.context.scope

    @property
    def prefix(self) -> str:
        return self.context.prefix

    @property
    def model_fields(self) -> dict[str, FieldDef]:
        """Fields of the context model, empty when the model is unknown."""
        if self.context.model is None:
            return {}
        return self.schema.models.get(self.context.model, {})

    @property
    def field_def(self) -> Optional[FieldDef]:
        """Definition of the context field, None for relation-only names."""
        return self.schema.get_field(self.context.model, self.context.field)


class CompletionStrategy(Protocol):
    """Contract implemented by all completion strategies."""

    def can_handle(self, request: CompletionRequest) -> bool:
        """Return ``True`` when this strategy should produce candidates."""

        ...

    def get_candidates(self, request: CompletionRequest) -> Candidates:
        """Return unfiltered candidates for the current context."""

        ...
