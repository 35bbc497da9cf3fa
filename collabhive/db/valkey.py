from typing import Optional, List, Sequence
from glide import (
    ExpirySet,
    ExpiryType,
    GlideClient,
    GlideClientConfiguration,
    NodeAddress,
    ServerCredentials,
)
from collabhive.config import settings
import logging

logger = logging.getLogger(__name__)


_client: Optional[GlideClient] = None


async def get_valkey_client() -> GlideClient:
    """
    Get or create a Valkey client instance.
    Returns a singleton client to reuse connections.
    """
    global _client

    if _client is None:
        config = GlideClientConfiguration(
            addresses=[NodeAddress(settings.valkey_host, settings.valkey_port)],
            database_id=settings.valkey_db,
        )

        if settings.valkey_auth_token:
            config.credentials = ServerCredentials(password=settings.valkey_auth_token)
            config.use_tls = True

        _client = await GlideClient.create(config)

    return _client


def _decode(value: bytes | str) -> str:
    return value.decode("utf-8") if isinstance(value, bytes) else str(value)


class ValkeyCache:
    """
    Key-value cache backed by a Valkey client.

    Stateless apart from the client handle, so a single instance is safe to
    share between concurrent requests.
    """

    def __init__(self, client: GlideClient):
        self._client = client

    async def get(self, key: str) -> Optional[str]:
        """
        Get a value by key.

        Returns:
            The value as a string, or None if the key doesn't exist
        """
        value = await self._client.get(key)
        return _decode(value) if value else None

    async def set(self, key: str, value: str, ttl: Optional[int] = None) -> bool:
        """
        Set a key-value pair.

        Args:
            key: The key to set
            value: The value to store
            ttl: Optional time-to-live in seconds
        """
        if ttl:
            expiry_set = ExpirySet(
                expiry_type=ExpiryType.SEC,
                value=ttl,
            )
        else:
            expiry_set = None

        await self._client.set(key=key, value=value, expiry=expiry_set)

        return True

    async def scan(
        self, cursor: str, match: str, count: int = 100
    ) -> tuple[str, List[str]]:
        """
        Run a single SCAN step.

        Returns:
            (next_cursor, matched_keys); next_cursor is "0" once the iteration
            has wrapped around
        """
        result = await self._client.scan(cursor, match=match, count=count)
        next_cursor = _decode(result[0])
        keys_list = result[1]

        keys: List[str] = []
        if keys_list and isinstance(keys_list, list):
            keys = [_decode(k) for k in keys_list]

        return next_cursor, keys

    async def delete(self, keys: Sequence[str]) -> int:
        """
        Delete one or more keys in a single operation.

        Returns:
            Number of keys deleted
        """
        if not keys:
            return 0
        return await self._client.delete(list(keys))


async def get_cache() -> Optional[ValkeyCache]:
    """
    FastAPI dependency: the shared cache, or None when caching is disabled
    or Valkey cannot be reached.
    """
    if not settings.cache_enabled:
        return None
    try:
        client = await get_valkey_client()
    except Exception as e:
        logger.warning(f"Valkey unavailable, serving without cache: {e}")
        return None
    return ValkeyCache(client)


async def close_valkey_client():
    """
    Close the Valkey client connection.
    Should be called on application shutdown.
    """
    global _client

    if _client:
        await _client.close()
        _client = None
