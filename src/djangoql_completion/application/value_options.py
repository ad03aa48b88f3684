"""
ValueOptionsService - paginated field values fetched from the suggestions API.

Pages are cached per ``model.field|search`` in a bounded LRU cache. Fetches
are debounced so fast typing only issues the last request, at most one
request per cache key is in flight, and a page is merged only if it is the
page right after the one already cached.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Callable, Optional

from pydantic import BaseModel, Field, ValidationError

from djangoql_completion.core.cache import LRUCache
from djangoql_completion.core.protocols import JsonClient
from djangoql_completion.errors import FetchError
from djangoql_completion.logger import get_logger

logger = get_logger("value_options")


@dataclass
class ValueCacheEntry:
    """Cached state of one field/search combination."""

    items: list[str] = field(default_factory=list)
    page: Optional[int] = None
    has_next: bool = False
    loading: bool = False


class ValuePage(BaseModel):
    """One page as served by the suggestions API."""

    items: list[str] = Field(default_factory=list)
    page: int = Field(..., description="1-based page number")
    has_next: bool = Field(default=False)


@dataclass(frozen=True, slots=True)
class ValueOptions:
    """Snapshot of the values currently known for a field."""

    items: tuple[str, ...]
    loading: bool


def make_cache_key(model: str, field_name: str, search: str) -> str:
    return f"{model}.{field_name}|{search}"


class ValueOptionsService:
    """
    Serves remote field values page by page.

    This class handles:
    - LRU caching of delivered pages
    - Debouncing of fetch triggers
    - One in-flight request per cache key
    - Discarding pages that arrive out of sequence
    """

    def __init__(
        self,
        client: JsonClient,
        api_url: Optional[str] = None,
        cache_size: int = 100,
        fetch_delay: float = 0.3,
        on_update: Optional[Callable[[str], None]] = None,
    ):
        """
        Initialize the ValueOptionsService.

        Args:
            client: JSON client used to call the suggestions API
            api_url: Suggestions API endpoint; without it remote values are unavailable
            cache_size: Capacity of the LRU cache
            fetch_delay: Seconds to wait before fetching, coalescing rapid triggers
            on_update: Called with the cache key after a page has been merged
        """
        self._client = client
        self.api_url = api_url
        self._cache: LRUCache[str, ValueCacheEntry] = LRUCache(cache_size)
        self._fetch_delay = fetch_delay
        self._on_update = on_update

        self._pending: asyncio.Task | None = None
        self._in_flight: dict[str, asyncio.Task] = {}

    @property
    def cache(self) -> LRUCache[str, ValueCacheEntry]:
        return self._cache

    @property
    def loading(self) -> bool:
        """True while a debounced fetch is waiting or a request is in flight."""
        if self._pending is not None and not self._pending.done():
            return True
        return any(not task.done() for task in self._in_flight.values())

    def get_options(self, model: str, field_name: str, search: str, load_more: bool = False) -> ValueOptions:
        """
        Return the values known so far, scheduling a fetch when needed.

        A fetch is scheduled when nothing has been loaded for the key yet,
        or when ``load_more`` is set and the server reported another page.

        Args:
            model: Model id
            field_name: Field name
            search: Prefix typed by the user
            load_more: Request the next page

        Returns:
            ValueOptions with the cached items and the loading state of the key
        """
        key = make_cache_key(model, field_name, search)
        entry = self._cache.get(key) or ValueCacheEntry()
        scheduled = False
        if not entry.loading and (entry.page is None or (load_more and entry.has_next)):
            scheduled = self.schedule_load(model, field_name, search, load_more)
        return ValueOptions(items=tuple(entry.items), loading=entry.loading or scheduled)

    def schedule_load(self, model: str, field_name: str, search: str, load_more: bool = False) -> bool:
        """
        Schedule a fetch after ``fetch_delay``, replacing any fetch still waiting.

        Requests already sent are not cancelled; their pages are checked
        against the cache when they arrive.

        Returns:
            True if a fetch was scheduled
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("No running event loop, remote field values are unavailable")
            return False

        self.cancel_pending()
        self._pending = loop.create_task(self._debounced_load(model, field_name, search, load_more))
        return True

    def cancel_pending(self) -> None:
        """Cancel the debounced fetch that has not been sent yet."""
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None

    async def _debounced_load(self, model: str, field_name: str, search: str, load_more: bool) -> None:
        if self._fetch_delay > 0:
            await asyncio.sleep(self._fetch_delay)
        self.load_page(model, field_name, search, load_more)

    def load_page(
        self, model: str, field_name: str, search: str, load_more: bool = False
    ) -> asyncio.Task | None:
        """
        Send the request for the next needed page right away.

        Returns:
            The in-flight task, or None when nothing needs to be fetched
        """
        if not self.api_url:
            logger.debug("No suggestions API URL configured, skipping value fetch")
            return None

        key = make_cache_key(model, field_name, search)
        running = self._in_flight.get(key)
        if running is not None and not running.done():
            logger.debug(f"Request for {key} already in flight")
            return None

        entry = self._cache.get(key) or ValueCacheEntry()
        if load_more and entry.has_next:
            page = (entry.page or 0) + 1
        elif entry.page:
            # at least the first page is already loaded
            return None
        else:
            page = 1

        entry.loading = True
        self._cache.set(key, entry)

        task = asyncio.get_running_loop().create_task(self._fetch(key, model, field_name, search, page))
        self._in_flight[key] = task
        task.add_done_callback(lambda done, key=key: self._forget(key, done))
        return task

    def _forget(self, key: str, task: asyncio.Task) -> None:
        if self._in_flight.get(key) is task:
            del self._in_flight[key]

    async def _fetch(self, key: str, model: str, field_name: str, search: str, page: int) -> None:
        params = {"field": f"{model}.{field_name}", "search": search, "page": page}
        try:
            data = await self._client.get_json(self.api_url, params)
            value_page = ValuePage.model_validate(data)
        except FetchError as e:
            logger.error(str(e))
            self._clear_loading(key)
            return
        except ValidationError as e:
            logger.error(f"Malformed value page from {self.api_url}: {e}")
            self._clear_loading(key)
            return
        except Exception:
            logger.exception(f"Unexpected error fetching values for {key}")
            self._clear_loading(key)
            return

        self.apply_page(key, value_page)

    def apply_page(self, key: str, value_page: ValuePage) -> bool:
        """
        Merge a delivered page into the cache.

        The page is accepted only if it directly follows the cached page;
        otherwise pages arrived out of order or the entry was reset, and the
        page is dropped without touching the cached items.

        Returns:
            True if the page was merged, False if it was discarded
        """
        entry = self._cache.get(key)
        cached_page = entry.page if entry is not None and entry.page else 0
        if value_page.page - 1 != cached_page:
            logger.debug(f"Discarding stale page {value_page.page} for {key} (cached page {cached_page})")
            if entry is not None:
                entry.loading = False
            return False

        items = (entry.items if entry is not None else []) + value_page.items
        self._cache.set(
            key,
            ValueCacheEntry(items=items, page=value_page.page, has_next=value_page.has_next, loading=False),
        )
        logger.debug(f"Cached page {value_page.page} for {key} ({len(items)} items)")

        if self._on_update is not None:
            self._on_update(key)
        return True

    def _clear_loading(self, key: str) -> None:
        entry = self._cache.get(key)
        if entry is not None:
            entry.loading = False

    async def wait_idle(self) -> None:
        """Wait until no fetch is waiting or in flight."""
        while True:
            tasks = [task for task in self._in_flight.values() if not task.done()]
            if self._pending is not None and not self._pending.done():
                tasks.append(self._pending)
            if not tasks:
                return
            await asyncio.gather(*tasks, return_exceptions=True)

    async def aclose(self) -> None:
        """Cancel the pending fetch and every request in flight."""
        tasks = [task for task in self._in_flight.values() if not task.done()]
        if self._pending is not None and not self._pending.done():
            tasks.append(self._pending)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._pending = None
        self._in_flight.clear()
        logger.debug(f"Value options service closed ({len(tasks)} task(s) cancelled)")
