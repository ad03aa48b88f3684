"""Engine instance and the services it owns."""

from djangoql_completion.application.value_options import (
    ValueCacheEntry,
    ValueOptions,
    ValueOptionsService,
    ValuePage,
    make_cache_key,
)
from djangoql_completion.application.engine import DjangoQLCompletion

__all__ = [
    "DjangoQLCompletion",
    "ValueCacheEntry",
    "ValueOptions",
    "ValueOptionsService",
    "ValuePage",
    "make_cache_key",
]
