"""
Utilities for applying a selected suggestion to the query text.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from djangoql_completion.core.context import Context
from djangoql_completion.logger import get_logger

from .types import Suggestion

logger = get_logger("completion.applier")

CURSOR_MARKER = "|"


@dataclass(slots=True)
class ApplyResult:
    """Result of applying a suggestion."""

    text: str
    cursor: int


class CompletionApplier:
    """Encapsulates the logic for splicing suggestions into the query text."""

    def __init__(self, context_provider: Callable[[str, int], Context]) -> None:
        self._context_provider = context_provider

    def apply(self, suggestion: Suggestion, text: str, cursor_pos: int) -> ApplyResult:
        logger.debug(f"apply: suggestion={suggestion.text!r} text={text!r} cursor={cursor_pos}")

        context = self._context_provider(text, cursor_pos)
        start_pos = cursor_pos - len(context.prefix)

        # cut the token under the cursor out of the text
        if context.current_full_token is not None:
            text = text[:start_pos] + text[context.current_full_token.end :]

        text_before = text[:start_pos]
        # trimming avoids double spaces after pasting the suggestion
        text_after = text[start_pos:].strip()

        snippet_before = suggestion.snippet_before
        snippet_after = suggestion.snippet_after
        snippet_after_parts = snippet_after.split(CURSOR_MARKER)
        has_cursor_marker = len(snippet_after_parts) > 1
        if has_cursor_marker:
            snippet_after = "".join(snippet_after_parts)
            if not snippet_before and not suggestion.text:
                snippet_before, snippet_after = snippet_after_parts[0], snippet_after_parts[1]

        if text_before.endswith(snippet_before):
            snippet_before = ""
        if text_after.startswith(snippet_after):
            snippet_after = ""

        text_to_paste = f"{snippet_before}{suggestion.text}{snippet_after}"
        cursor_after = len(text_before) + len(text_to_paste)
        if has_cursor_marker:
            cursor_after -= len(snippet_after_parts[1])

        return ApplyResult(text=f"{text_before}{text_to_paste}{text_after}", cursor=cursor_after)
