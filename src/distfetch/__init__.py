"""distfetch - fetch migration artifacts from IPFS distributions with fallback."""

from typing import BinaryIO, Optional

from .core.model import FetchError, FetchCancelledError, NoFetchersError   # re-export
from .core.context import FetchContext
from .core.dist import CURRENT_IPFS_DIST, IPNS_IPFS_DIST, ENV_IPFS_DIST_PATH, get_dist_path_env
from .io import (
    Fetcher, AsyncFetcher, MultiFetcher, AsyncMultiFetcher, LimitReadCloser,
    new_multi_fetcher, new_limit_read_closer, new_fetcher, new_fetcher_async,
    new_fetcher_chain, new_fetcher_chain_async, DEFAULT_GATEWAY_URL,
)


async def fetch(file_path: str, *sources, dist_path: str = "",
                ctx: Optional[FetchContext] = None, **http_options) -> BinaryIO:
    """Fetch `file_path` asynchronously, trying each source in order.

    The dist path goes through get_dist_path_env, so IPFS_DIST_PATH overrides it.
    """
    chain = await new_fetcher_chain_async(*(sources or (DEFAULT_GATEWAY_URL,)),
                                          dist_path=get_dist_path_env(dist_path), **http_options)
    return await chain.fetch(ctx or FetchContext.background(), file_path)


def fetch_sync(file_path: str, *sources, dist_path: str = "",
               ctx: Optional[FetchContext] = None, **http_options) -> BinaryIO:
    """Fetch `file_path` synchronously, trying each source in order."""
    chain = new_fetcher_chain(*(sources or (DEFAULT_GATEWAY_URL,)),
                              dist_path=get_dist_path_env(dist_path), **http_options)
    return chain.fetch(ctx or FetchContext.background(), file_path)


__all__ = [
    "fetch", "fetch_sync",
    "FetchError", "FetchCancelledError", "NoFetchersError", "FetchContext",
    "CURRENT_IPFS_DIST", "IPNS_IPFS_DIST", "ENV_IPFS_DIST_PATH", "get_dist_path_env",
    "Fetcher", "AsyncFetcher", "MultiFetcher", "AsyncMultiFetcher", "LimitReadCloser",
    "new_multi_fetcher", "new_limit_read_closer", "new_fetcher", "new_fetcher_async",
    "new_fetcher_chain", "new_fetcher_chain_async",
]
