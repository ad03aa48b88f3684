"""
DjangoQLCompletion - the completion engine instance.

The engine owns the schema, configuration, value cache and in-flight
requests. Hosts feed it ``(text, cursor)`` on every input change and render
the returned :class:`CompletionResult`; on accept they call
:meth:`DjangoQLCompletion.select_completion`.
"""

import asyncio
from dataclasses import replace
from typing import Any, Callable, Mapping, Optional
from urllib.parse import urljoin

from pydantic import ValidationError

from djangoql_completion.application.value_options import ValueOptionsService
from djangoql_completion.completion import (
    ApplyResult,
    ComparisonCompletionStrategy,
    CompletionApplier,
    CompletionOrchestrator,
    CompletionRequest,
    CompletionResult,
    FieldCompletionStrategy,
    LogicalCompletionStrategy,
    ValueCompletionStrategy,
)
from djangoql_completion.config import CompletionConfig, load_config
from djangoql_completion.core.context import Context, ContextResolver
from djangoql_completion.core.protocols import JsonClient
from djangoql_completion.core.schema import ResolvedName, Schema, resolve_name
from djangoql_completion.errors import FetchError, SchemaError
from djangoql_completion.infrastructure.http import RequestsJsonClient
from djangoql_completion.logger import get_logger

logger = get_logger("engine")


class DjangoQLCompletion:
    """
    Completion engine for DjangoQL queries.

    Routine calls (:meth:`get_context`, :meth:`generate_suggestions`,
    :meth:`load_more`, :meth:`select_completion`) never raise; problems are
    logged and produce an empty result.
    """

    def __init__(
        self,
        introspections: Schema | Mapping[str, Any] | str | None = None,
        config: CompletionConfig | Mapping[str, Any] | None = None,
        client: Optional[JsonClient] = None,
        on_update: Optional[Callable[[], None]] = None,
    ):
        """
        Initialize the engine.

        Args:
            introspections: Schema object, introspection mapping, or URL to fetch it from
            config: Configuration object or mapping of options
            client: JSON client for remote requests (defaults to a requests-based client)
            on_update: Called after remote values arrive, so the host can re-render
        """
        self.config = config if isinstance(config, CompletionConfig) else load_config(config)
        self.completion_enabled = self.config.completion_enabled
        self._owns_client = client is None
        self._client: JsonClient = client or RequestsJsonClient(timeout=self.config.request_timeout)
        self._on_update = on_update

        self._schema = Schema()
        self._resolver = ContextResolver(self._schema)
        self._schema_task: asyncio.Task | None = None

        self.value_service = ValueOptionsService(
            self._client,
            cache_size=self.config.cache_size,
            fetch_delay=self.config.fetch_delay,
            on_update=self._values_loaded,
        )
        self._orchestrator = CompletionOrchestrator(
            [
                FieldCompletionStrategy(),
                ComparisonCompletionStrategy(),
                ValueCompletionStrategy(self.value_service, self.config.values_case_sensitive),
                LogicalCompletionStrategy(),
            ]
        )
        self._applier = CompletionApplier(self.get_context)
        self.result = CompletionResult.empty()

        if introspections is not None:
            self.load_introspections(introspections)

    # ------------------------------------------------------------------
    # Schema
    # ------------------------------------------------------------------

    @property
    def schema(self) -> Schema:
        return self._schema

    @property
    def current_model(self) -> Optional[str]:
        return self._schema.current_model

    @property
    def syntax_help_url(self) -> Optional[str]:
        return self.config.syntax_help_url

    def load_introspections(self, introspections: Schema | Mapping[str, Any] | str) -> asyncio.Task | None:
        """
        Load the schema from an object, a mapping, or a URL.

        Objects and mappings are applied immediately. A URL is fetched in the
        background on the running event loop; the returned task completes
        once the schema is installed.
        """
        if isinstance(introspections, str):
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                logger.error("Loading introspections from a URL requires a running event loop")
                return None
            self._schema_task = loop.create_task(self.fetch_introspections(introspections))
            return self._schema_task

        try:
            self._install_schema(self._parse_schema(introspections))
        except SchemaError as e:
            logger.error(str(e))
        return None

    async def fetch_introspections(self, url: str) -> bool:
        """
        Fetch and install the schema served at ``url``.

        Returns:
            True if the schema was installed
        """
        try:
            data = await self._client.get_json(url)
            schema = self._parse_schema(data)
            if schema.suggestions_api_url:
                # the API URL is usually relative to the introspection endpoint
                schema = schema.model_copy(update={"suggestions_api_url": urljoin(url, schema.suggestions_api_url)})
            self._install_schema(schema)
        except (FetchError, SchemaError) as e:
            logger.error(str(e))
            return False
        if self._on_update is not None:
            self._on_update()
        return True

    def set_current_model(self, model: str) -> None:
        """Start name resolution from ``model`` instead of the introspected one."""
        if model not in self._schema.models:
            logger.error(f"Unknown model: {model}")
            return
        self._install_schema(self._schema.with_current_model(model))

    def _parse_schema(self, introspections: Any) -> Schema:
        if isinstance(introspections, Schema):
            return introspections
        if not isinstance(introspections, Mapping):
            raise SchemaError(
                "introspections parameter is expected to be either URL or "
                f"object with definitions, but {introspections!r} was found"
            )
        try:
            return Schema.model_validate(introspections)
        except ValidationError as e:
            raise SchemaError(f"Invalid introspection data: {e}") from e

    def _install_schema(self, schema: Schema) -> None:
        if schema.current_model is not None and schema.current_model not in schema.models:
            raise SchemaError(f"current_model {schema.current_model!r} is not among the introspected models")
        self._schema = schema
        self._resolver = ContextResolver(schema)
        self.value_service.api_url = schema.suggestions_api_url
        logger.info(f"Schema loaded: current_model={schema.current_model} models={len(schema.models)}")

    # ------------------------------------------------------------------
    # Analysis
    # ------------------------------------------------------------------

    def resolve_name(self, name: str) -> ResolvedName:
        return resolve_name(self._schema, name)

    def get_context(self, text: str, cursor_pos: int) -> Context:
        return self._resolver.get_context(text, cursor_pos)

    @property
    def loading(self) -> bool:
        if self._schema_task is not None and not self._schema_task.done():
            return True
        return self.value_service.loading

    def enable_completion(self) -> None:
        self.completion_enabled = True

    def disable_completion(self) -> None:
        self.completion_enabled = False
        self.result = CompletionResult.empty()

    def generate_suggestions(
        self,
        text: str,
        cursor_pos: int,
        selection_end: Optional[int] = None,
        load_more: bool = False,
    ) -> CompletionResult:
        """
        Compute the suggestions for the cursor position.

        Args:
            text: Full query text
            cursor_pos: Cursor offset (selection start)
            selection_end: End of the selection; suggestions are suppressed for a non-empty range
            load_more: Ask for the next page of remote values

        Returns:
            CompletionResult, also stored as ``self.result``
        """
        if not self.completion_enabled:
            self.result = CompletionResult.empty()
            return self.result

        if self._schema.current_model is None:
            # introspections are not loaded yet
            self.result = CompletionResult.empty(loading=self.loading)
            return self.result

        if selection_end is not None and selection_end != cursor_pos:
            self.result = CompletionResult.empty()
            return self.result

        try:
            context = self.get_context(text, cursor_pos)
            request = CompletionRequest(context=context, schema=self._schema, load_more=load_more)
            self.result = self._orchestrator.get_completions(request)
        except Exception:
            logger.exception(f"Failed to generate suggestions for {text!r} at {cursor_pos}")
            self.result = CompletionResult.empty()
        return self.result

    def load_more(self, text: str, cursor_pos: int) -> CompletionResult:
        """Re-generate suggestions asking for the next page of remote values."""
        return self.generate_suggestions(text, cursor_pos, load_more=True)

    def select_next(self) -> Optional[int]:
        """Move the selection down, wrapping to no selection after the last item."""
        count = len(self.result.suggestions)
        if not count:
            return None
        selected = self.result.selected
        if selected is None:
            selected = 0
        elif selected < count - 1:
            selected += 1
        else:
            selected = None
        self.result = replace(self.result, selected=selected)
        return selected

    def select_previous(self) -> Optional[int]:
        """Move the selection up, wrapping to no selection before the first item."""
        count = len(self.result.suggestions)
        if not count:
            return None
        selected = self.result.selected
        if selected is None:
            selected = count - 1
        elif selected == 0:
            selected = None
        else:
            selected -= 1
        self.result = replace(self.result, selected=selected)
        return selected

    def select_completion(self, index: int, text: str, cursor_pos: int) -> Optional[ApplyResult]:
        """
        Apply suggestion ``index`` of the last result to ``text``.

        Suggestions are regenerated for the resulting text and cursor.

        Returns:
            The new text and cursor, or None if ``index`` is out of range
        """
        if not 0 <= index < len(self.result.suggestions):
            logger.debug(f"No suggestion at index {index}")
            return None

        suggestion = self.result.suggestions[index]
        try:
            applied = self._applier.apply(suggestion, text, cursor_pos)
        except Exception:
            logger.exception(f"Failed to apply suggestion {suggestion.text!r}")
            return None

        self.generate_suggestions(applied.text, applied.cursor)
        return applied

    def _values_loaded(self, key: str) -> None:
        logger.debug(f"Values loaded for {key}")
        if self._on_update is not None:
            self._on_update()

    async def aclose(self) -> None:
        """Cancel every in-flight request."""
        if self._schema_task is not None and not self._schema_task.done():
            self._schema_task.cancel()
            try:
                await self._schema_task
            except asyncio.CancelledError:
                pass
        await self.value_service.aclose()
        if self._owns_client and isinstance(self._client, RequestsJsonClient):
            self._client.close()
        logger.info("Completion engine closed")
