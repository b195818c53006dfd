"""Base protocols and shared types for the fetch layer."""

from typing import BinaryIO, Protocol, runtime_checkable

from ..core.context import FetchContext


DEFAULT_FETCH_LIMIT = 512 * 1024 * 1024  # 512 MB
DEFAULT_TIMEOUT = 60.0  # seconds, when the context has no deadline


@runtime_checkable
class Fetcher(Protocol):
    """Protocol for synchronous fetch backends."""

    def fetch(self, ctx: FetchContext, file_path: str) -> BinaryIO:
        """Return an open stream for `file_path` under the current dist path.
        The caller owns the stream and must close it.
        On failure → raise FetchError (FetchCancelledError when ctx is done).
        """
        ...

    def set_dist_path(self, dist_path: str) -> None:
        """Set the path to the distribution site used by later fetches."""
        ...


@runtime_checkable
class AsyncFetcher(Protocol):
    """Protocol for asynchronous fetch backends."""

    async def fetch(self, ctx: FetchContext, file_path: str) -> BinaryIO:
        """Return an open stream for `file_path` under the current dist path.
        The caller owns the stream and must close it.
        On failure → raise FetchError (FetchCancelledError when ctx is done).
        """
        ...

    def set_dist_path(self, dist_path: str) -> None:
        """Set the path to the distribution site used by later fetches."""
        ...


def join_dist_path(dist_path: str, file_path: str) -> str:
    """Join dist path and resource path with exactly one separator between."""
    return dist_path.rstrip("/") + "/" + file_path.lstrip("/")
