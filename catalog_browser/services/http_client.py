import httpx
import asyncio
import logging
from typing import Optional

from catalog_browser.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


class CatalogHTTPClient:
    """Connection-pooled async HTTP client with retry on transport errors"""

    def __init__(self, config: Optional[Settings] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config or default_settings

        limits = httpx.Limits(
            max_keepalive_connections=5,
            max_connections=10,
            keepalive_expiry=30.0
        )

        timeout = httpx.Timeout(
            timeout=self.config.request_timeout,
            connect=self.config.connect_timeout,
        )

        self._client = httpx.AsyncClient(
            limits=limits,
            timeout=timeout,
            follow_redirects=True,
            headers={"Accept": "application/json"},
            transport=transport,
        )

    async def get(self, url: str, **kwargs) -> httpx.Response:
        """Single GET request on the pooled client"""
        return await self._client.get(url, **kwargs)

    async def delete(self, url: str, **kwargs) -> httpx.Response:
        return await self._client.delete(url, **kwargs)

    async def put(self, url: str, **kwargs) -> httpx.Response:
        return await self._client.put(url, **kwargs)

    async def get_with_retry(self, url: str, retries: Optional[int] = None, backoff: Optional[float] = None, **kwargs) -> httpx.Response:
        """GET with exponential backoff on transport errors.

        HTTP error statuses are returned as-is; only connection level failures
        are retried. The last ``httpx.RequestError`` is re-raised once the
        attempts are used up.
        """
        retries = max(1, retries if retries is not None else self.config.retry_attempts)
        backoff = backoff if backoff is not None else self.config.retry_backoff
        for attempt in range(retries):
            try:
                return await self.get(url, **kwargs)
            except httpx.RequestError as e:
                if attempt < retries - 1:
                    wait_time = backoff * (2 ** attempt)
                    logger.info("GET %s failed (%s), retrying in %.1fs", url, e, wait_time)
                    await asyncio.sleep(wait_time)
                    continue
                raise

    async def close(self):
        """Close the underlying client"""
        await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
