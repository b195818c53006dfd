"""I/O layer for distfetch - backends and the fallback cascade over them."""

# Re-export these for import convenience
from .base import Fetcher, AsyncFetcher, DEFAULT_FETCH_LIMIT, DEFAULT_TIMEOUT
from .limit import LimitReadCloser, new_limit_read_closer
from .multi import MultiFetcher, AsyncMultiFetcher, new_multi_fetcher
from .local import LocalFetcher, LocalAsyncFetcher, open_local_fetcher, open_local_fetcher_async
from .http_sync import HTTPFetcher, open_http_fetcher, DEFAULT_GATEWAY_URL, DEFAULT_USER_AGENT
from .http_async import AsyncHTTPFetcher, open_http_fetcher_async


def _is_url(location) -> bool:
    return str(location).startswith(('http://', 'https://'))


def new_fetcher(location, **http_options):
    """Factory function to create the appropriate Fetcher for a location.

    `http_options` (user_agent, fetch_limit, timeout) apply to gateway backends only.
    """
    if _is_url(location):
        return open_http_fetcher(str(location), **http_options)
    else:
        return open_local_fetcher(location)


async def new_fetcher_async(location, **http_options):
    """Factory function to create the appropriate AsyncFetcher for a location."""
    if _is_url(location):
        return await open_http_fetcher_async(str(location), **http_options)
    else:
        return await open_local_fetcher_async(location)


def new_fetcher_chain(*locations, dist_path: str = "", **http_options) -> MultiFetcher:
    """Build a MultiFetcher trying `locations` in order."""
    chain = MultiFetcher(*(new_fetcher(loc, **http_options) for loc in locations))
    if dist_path:
        chain.set_dist_path(dist_path)
    return chain


async def new_fetcher_chain_async(*locations, dist_path: str = "", **http_options) -> AsyncMultiFetcher:
    """Build an AsyncMultiFetcher trying `locations` in order."""
    fetchers = [await new_fetcher_async(loc, **http_options) for loc in locations]
    chain = AsyncMultiFetcher(*fetchers)
    if dist_path:
        chain.set_dist_path(dist_path)
    return chain
