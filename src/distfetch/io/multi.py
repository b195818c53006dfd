"""Composite fetchers that try several backends in order until one succeeds."""

import logging
from typing import BinaryIO, Optional, Tuple

from ..core.context import FetchContext
from ..core.dist import normalize_dist_path
from ..core.model import NoFetchersError
from .base import AsyncFetcher, Fetcher

logger = logging.getLogger(__name__)


class MultiFetcher:
    """Synchronous fallback cascade over an ordered list of fetchers.

    Fetchers are tried in the order they were passed in. The first success is
    returned and later fetchers are not called. If every fetcher fails, the
    last fetcher's exception is raised unchanged; earlier ones are only logged.
    """

    def __init__(self, *fetchers: Fetcher):
        # Own copy so later changes to a caller-held list do not leak in
        self._fetchers: Tuple[Fetcher, ...] = tuple(fetchers)

    @property
    def fetchers(self) -> Tuple[Fetcher, ...]:
        return self._fetchers

    def __len__(self) -> int:
        return len(self._fetchers)

    def fetch(self, ctx: FetchContext, file_path: str) -> BinaryIO:
        """Fetch `file_path` with each fetcher until one succeeds."""
        if not self._fetchers:
            raise NoFetchersError(f"no fetchers configured to fetch {file_path}")

        last_error: Optional[BaseException] = None
        for fetcher in self._fetchers:
            try:
                stream = fetcher.fetch(ctx, file_path)
            except Exception as e:
                logger.debug("%s failed to fetch %s: %s", type(fetcher).__name__, file_path, e)
                last_error = e
                continue
            logger.debug("fetched %s using %s", file_path, type(fetcher).__name__)
            return stream
        raise last_error

    def set_dist_path(self, dist_path: str) -> None:
        """Set the path to the distribution site for all fetchers."""
        dist_path = normalize_dist_path(dist_path)
        for fetcher in self._fetchers:
            fetcher.set_dist_path(dist_path)


class AsyncMultiFetcher:
    """Asynchronous fallback cascade; same ordering rules as MultiFetcher."""

    def __init__(self, *fetchers: AsyncFetcher):
        self._fetchers: Tuple[AsyncFetcher, ...] = tuple(fetchers)

    @property
    def fetchers(self) -> Tuple[AsyncFetcher, ...]:
        return self._fetchers

    def __len__(self) -> int:
        return len(self._fetchers)

    async def fetch(self, ctx: FetchContext, file_path: str) -> BinaryIO:
        """Fetch `file_path` with each fetcher until one succeeds."""
        if not self._fetchers:
            raise NoFetchersError(f"no fetchers configured to fetch {file_path}")

        last_error: Optional[BaseException] = None
        for fetcher in self._fetchers:
            try:
                stream = await fetcher.fetch(ctx, file_path)
            except Exception as e:
                logger.debug("%s failed to fetch %s: %s", type(fetcher).__name__, file_path, e)
                last_error = e
                continue
            logger.debug("fetched %s using %s", file_path, type(fetcher).__name__)
            return stream
        raise last_error

    def set_dist_path(self, dist_path: str) -> None:
        """Set the path to the distribution site for all fetchers."""
        dist_path = normalize_dist_path(dist_path)
        for fetcher in self._fetchers:
            fetcher.set_dist_path(dist_path)


def new_multi_fetcher(*fetchers: Fetcher) -> MultiFetcher:
    """Create a MultiFetcher; fetchers are tried in the order passed."""
    return MultiFetcher(*fetchers)
