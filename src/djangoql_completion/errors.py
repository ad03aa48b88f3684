"""Exception types raised inside the completion engine.

None of these escape the engine boundary during routine typing; the engine
logs them and falls back to an empty result.
"""


class DjangoQLCompletionError(Exception):
    """Base class for completion engine errors."""


class SchemaError(DjangoQLCompletionError):
    """Raised when introspection data is missing or invalid."""


class FetchError(DjangoQLCompletionError):
    """Raised when a remote JSON resource cannot be fetched or decoded."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"failed to fetch from {url}: {reason}")
