"""
Project search result cache.

Search pages are cached under ``<prefix>:<sha256 of the canonical filter
JSON>`` for a fixed TTL. Cached pages are a derived view: every project
mutation drops the whole namespace via ``invalidate()``.
"""

import asyncio
import hashlib
import logging
from typing import Any, Protocol

from pydantic import TypeAdapter

from collabhive.config import settings
from collabhive.models.pydantic_models.project import (
    ProjectSearchFilters,
    ProjectSummaryModel,
)

logger = logging.getLogger(__name__)

_summaries_adapter = TypeAdapter(list[ProjectSummaryModel])

SCAN_START_CURSOR = "0"


class CacheClient(Protocol):
    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str, ttl: int | None = None) -> Any: ...

    async def scan(
        self, cursor: str, match: str, count: int = 100
    ) -> tuple[str, list[str]]: ...

    async def delete(self, keys: list[str]) -> int: ...


class ProjectSearchCache:
    def __init__(
        self,
        cache: CacheClient | None,
        prefix: str | None = None,
        ttl_seconds: int | None = None,
    ):
        self.cache = cache
        self.prefix = prefix or settings.search_cache_prefix
        self.ttl_seconds = ttl_seconds or settings.search_cache_ttl_seconds

    @property
    def pattern(self) -> str:
        return f"{self.prefix}:*"

    def key_for(self, filters: ProjectSearchFilters) -> str:
        canonical = filters.model_dump_json(by_alias=True)
        digest = hashlib.sha256(canonical.encode("utf-8")).hexdigest()
        return f"{self.prefix}:{digest}"

    async def get(self, filters: ProjectSearchFilters) -> list[ProjectSummaryModel] | None:
        if self.cache is None:
            return None
        key = self.key_for(filters)
        try:
            cached = await self.cache.get(key)
        except Exception as e:
            logger.warning(f"Search cache read failed for {key}: {e}")
            return None
        if not cached:
            return None
        try:
            return _summaries_adapter.validate_json(cached)
        except ValueError as e:
            logger.warning(f"Discarding unreadable search cache entry {key}: {e}")
            return None

    async def set(
        self, filters: ProjectSearchFilters, summaries: list[ProjectSummaryModel]
    ) -> None:
        if self.cache is None:
            return
        key = self.key_for(filters)
        payload = _summaries_adapter.dump_json(summaries, by_alias=True).decode("utf-8")
        try:
            await self.cache.set(key, payload, ttl=self.ttl_seconds)
        except Exception as e:
            logger.warning(f"Search cache write failed for {key}: {e}")

    async def scan_keys(self) -> list[str]:
        """Collect every key in the search namespace with cursor-based SCAN."""
        keys: list[str] = []
        cursor = SCAN_START_CURSOR
        while True:
            cursor, matched = await self.cache.scan(cursor, match=self.pattern)
            keys.extend(matched)
            if cursor == SCAN_START_CURSOR:
                break
        return keys

    async def invalidate(self) -> int:
        """
        Drop every cached search page.

        Deletion is best-effort and concurrent; failures are logged, never
        raised, because the store write that triggered invalidation already
        succeeded.

        Returns:
            Number of keys deleted
        """
        if self.cache is None:
            return 0
        try:
            keys = await self.scan_keys()
        except Exception as e:
            logger.warning(f"Search cache scan failed: {e}")
            return 0
        if not keys:
            return 0

        results = await asyncio.gather(
            *(self.cache.delete([key]) for key in dict.fromkeys(keys)),
            return_exceptions=True,
        )
        deleted = 0
        for key, result in zip(dict.fromkeys(keys), results):
            if isinstance(result, Exception):
                logger.warning(f"Failed to delete search cache key {key}: {result}")
            else:
                deleted += result
        logger.info(f"Invalidated {deleted} search cache entries")
        return deleted
