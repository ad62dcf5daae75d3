# streamfinder/services/provider_cache.py

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable

from ..config import logger
from .tmdb_models import MediaType, WatchProvider

CatalogLoader = Callable[[MediaType], Awaitable[list[WatchProvider]]]


class ProviderCache:
    """
    Process-lifetime cache of the full watch-provider catalog per media type.

    Entries are loaded on first access and never expire. Concurrent first
    accesses for the same media type share one upstream fetch.
    """

    def __init__(self, loader: CatalogLoader) -> None:
        self._loader = loader
        self._entries: dict[MediaType, list[WatchProvider]] = {}
        self._locks: dict[MediaType, asyncio.Lock] = {}

    async def get(self, media_type: MediaType) -> list[WatchProvider]:
        media_type = MediaType(media_type)
        cached = self._entries.get(media_type)
        if cached is not None:
            return cached

        lock = self._locks.setdefault(media_type, asyncio.Lock())
        async with lock:
            # Another task may have filled the entry while we waited.
            cached = self._entries.get(media_type)
            if cached is not None:
                return cached

            catalog = await self._loader(media_type)
            self._entries[media_type] = catalog
            logger.info(
                f"[CACHE] Loaded {len(catalog)} {media_type.value} watch providers."
            )
            return catalog

    def peek(self, media_type: MediaType) -> list[WatchProvider] | None:
        """Returns the cached catalog without triggering a fetch."""
        return self._entries.get(MediaType(media_type))

    def __contains__(self, media_type: object) -> bool:
        return media_type in self._entries
