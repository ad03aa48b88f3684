"""Network access for schema introspection and value suggestions."""

from djangoql_completion.infrastructure.http import RequestsJsonClient

__all__ = ["RequestsJsonClient"]
