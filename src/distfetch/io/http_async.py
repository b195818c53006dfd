"""Asynchronous HTTP gateway fetcher using httpx."""

import io
import logging
from contextlib import asynccontextmanager
from typing import BinaryIO, Optional

import httpx

from ..core.context import FetchContext
from ..core.dist import IPNS_IPFS_DIST
from ..core.model import FetchError
from .base import DEFAULT_FETCH_LIMIT, DEFAULT_TIMEOUT, join_dist_path
from .http_sync import DEFAULT_GATEWAY_URL, DEFAULT_USER_AGENT, ERROR_BODY_EXCERPT, _request_timeout, _timeout_error

logger = logging.getLogger(__name__)


# Global async client
_client: Optional[httpx.AsyncClient] = None


@asynccontextmanager
async def _get_client():
    """Get or create the global httpx AsyncClient."""
    global _client
    if _client is None:
        _client = httpx.AsyncClient(timeout=DEFAULT_TIMEOUT)

    try:
        yield _client
    finally:
        # Don't close the client here - it's shared
        pass


class AsyncHTTPFetcher:
    """Asynchronous gateway fetcher; buffers at most `fetch_limit` bytes."""

    def __init__(
        self,
        dist_path: str = "",
        gateway_url: str = "",
        user_agent: str = "",
        fetch_limit: Optional[int] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.dist_path = dist_path or IPNS_IPFS_DIST
        self.gateway_url = (gateway_url or DEFAULT_GATEWAY_URL).rstrip("/")
        self.user_agent = user_agent or DEFAULT_USER_AGENT
        self.fetch_limit = DEFAULT_FETCH_LIMIT if fetch_limit is None else fetch_limit
        self.timeout = timeout

    def url_for(self, file_path: str) -> str:
        return self.gateway_url + join_dist_path(self.dist_path, file_path)

    async def _read_body(self, response: httpx.Response) -> bytes:
        if self.fetch_limit <= 0:
            return await response.aread()
        chunks = []
        remaining = self.fetch_limit
        async for chunk in response.aiter_bytes():
            chunks.append(chunk[:remaining])
            remaining -= len(chunks[-1])
            if remaining <= 0:
                break
        return b"".join(chunks)

    async def fetch(self, ctx: FetchContext, file_path: str) -> BinaryIO:
        """GET the file from the gateway and return its body as a stream."""
        ctx.check()
        url = self.url_for(file_path)
        logger.debug("GET %s", url)

        async with _get_client() as client:
            try:
                async with client.stream(
                    "GET",
                    url,
                    headers={"User-Agent": self.user_agent},
                    timeout=_request_timeout(ctx, self.timeout),
                ) as response:
                    if response.status_code >= 400:
                        body = await response.aread()
                        excerpt = body[:ERROR_BODY_EXCERPT].decode("utf-8", "replace").strip()
                        raise FetchError(
                            f"GET {url} error: {response.status_code} {response.reason_phrase}: {excerpt}"
                        )
                    data = await self._read_body(response)
            except httpx.TimeoutException as e:
                raise _timeout_error(ctx, url, e)
            except httpx.HTTPError as e:
                raise FetchError(f"GET {url} failed: {e}")

        return io.BytesIO(data)

    def set_dist_path(self, dist_path: str) -> None:
        self.dist_path = dist_path

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        # Client is shared, don't close it here
        pass


async def open_http_fetcher_async(gateway_url: str, **kwargs) -> AsyncHTTPFetcher:
    """Create an asynchronous HTTP gateway fetcher."""
    return AsyncHTTPFetcher(gateway_url=gateway_url, **kwargs)


async def close_global_client():
    """Close the global httpx client. Call this at application shutdown."""
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None
