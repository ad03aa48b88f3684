"""Rich-text rendering of suggestions with the typed prefix emphasised."""

from __future__ import annotations

from rich.text import Text

from .types import Suggestion

PREFIX_STYLE = "bold"
EXPLANATION_STYLE = "italic dim"


def highlight(text: str, prefix: str, case_sensitive: bool = True) -> Text:
    """Return ``text`` with every occurrence of ``prefix`` in bold."""
    rendered = Text(text)
    if prefix and text:
        rendered.highlight_words([prefix], style=PREFIX_STYLE, case_sensitive=case_sensitive)
    return rendered


def render_suggestion(suggestion: Suggestion, prefix: str, case_sensitive: bool = True) -> Text:
    """Render a suggestion's display text, with its explanation in italics."""
    rendered = highlight(suggestion.text, prefix, case_sensitive)
    if suggestion.explanation:
        rendered.append(" ")
        rendered.append(suggestion.explanation, style=EXPLANATION_STYLE)
    return rendered
