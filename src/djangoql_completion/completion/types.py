"""Value types produced by the completion strategies."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True, slots=True)
class Suggestion:
    """A single completion candidate.

    ``text`` is shown in the list and pasted on selection. ``snippet_before``
    and ``snippet_after`` are pasted around it; ``snippet_after`` may contain
    one ``|`` marking where the cursor should land.
    """

    text: str
    snippet_before: str = ""
    snippet_after: str = ""
    explanation: Optional[str] = None

    @property
    def display_text(self) -> str:
        if self.explanation:
            return f"{self.text} ({self.explanation})"
        return self.text


@dataclass(slots=True)
class Candidates:
    """Unfiltered suggestions returned by a strategy, with how to match them."""

    prefix: str
    suggestions: list[Suggestion] = field(default_factory=list)
    anchored: bool = False
    case_sensitive: bool = True
    loading: bool = False


@dataclass(frozen=True, slots=True)
class CompletionResult:
    """Final, filtered suggestion list handed to the host."""

    prefix: str = ""
    suggestions: tuple[Suggestion, ...] = ()
    selected: Optional[int] = None
    loading: bool = False
    highlight_case_sensitive: bool = True

    @classmethod
    def empty(cls, loading: bool = False) -> "CompletionResult":
        return cls(loading=loading)
