"""Background menu loading and restaurant search."""

from __future__ import annotations

import logging
import queue
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Iterable

from zest.models import MenuItem, Restaurant
from zest.persistence import fetch_menu_items

log = logging.getLogger(__name__)

FetchMenu = Callable[[int], list[MenuItem]]
OnLoaded = Callable[[int, list[MenuItem]], None]


class CatalogLoader:
    """
    Fetches menus on a worker thread.

    Results are never handed to callbacks from the worker. They wait in a
    queue until the owning thread (the one holding the session and cart)
    calls ``deliver_ready``.
    """

    def __init__(self, fetch: FetchMenu = fetch_menu_items, max_workers: int = 1) -> None:
        self._fetch = fetch
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="zest-catalog")
        self._ready: queue.SimpleQueue[tuple[OnLoaded, int, list[MenuItem]]] = queue.SimpleQueue()

    def request_menu(self, restaurant_id: int, on_loaded: OnLoaded) -> Future[list[MenuItem]]:
        future = self._executor.submit(self._fetch, restaurant_id)

        def _queue_result(done: Future[list[MenuItem]]) -> None:
            if done.cancelled():
                return
            error = done.exception()
            if error is not None:
                log.error("Menu fetch for restaurant %s failed: %s", restaurant_id, error)
                return
            self._ready.put((on_loaded, restaurant_id, done.result()))

        future.add_done_callback(_queue_result)
        return future

    def deliver_ready(self) -> int:
        """Run callbacks for finished fetches on the calling thread. Returns how many ran."""
        delivered = 0
        while True:
            try:
                on_loaded, restaurant_id, items = self._ready.get_nowait()
            except queue.Empty:
                return delivered
            on_loaded(restaurant_id, items)
            delivered += 1

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "CatalogLoader":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()


def search_restaurants(restaurants: Iterable[Restaurant], query: str | None) -> list[Restaurant]:
    """Case-insensitive name search; an empty query matches everything."""
    if query is None or not query.strip():
        return list(restaurants)
    needle = query.strip().lower()
    return [restaurant for restaurant in restaurants if needle in restaurant.name.lower()]
