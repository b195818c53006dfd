"""Fetchers reading from a local mirror of a distribution."""

import asyncio
import logging
from pathlib import Path
from typing import BinaryIO, Union

from ..core.context import FetchContext
from ..core.dist import IPNS_IPFS_DIST
from ..core.model import FetchError
from .base import join_dist_path

logger = logging.getLogger(__name__)


class LocalFetcher:
    """Synchronous fetcher over a directory that mirrors distribution paths.

    A file for dist path ``/ipns/dist.ipfs.io`` and resource ``fs-repo-migrations/versions``
    is expected at ``<root>/ipns/dist.ipfs.io/fs-repo-migrations/versions``.
    """

    def __init__(self, root: Union[Path, str], dist_path: str = ""):
        self.root = Path(root)
        self.dist_path = dist_path or IPNS_IPFS_DIST

    def path_for(self, file_path: str) -> Path:
        """Resolve `file_path` under the mirror, refusing paths that leave it."""
        root = self.root.resolve()
        relative = join_dist_path(self.dist_path, file_path).lstrip("/")
        target = (root / relative).resolve()
        if target != root and root not in target.parents:
            raise FetchError(f"{file_path} resolves outside of mirror {self.root}")
        return target

    def fetch(self, ctx: FetchContext, file_path: str) -> BinaryIO:
        """Open the mirrored file for reading."""
        ctx.check()
        path = self.path_for(file_path)
        logger.debug("open %s", path)
        try:
            return open(path, "rb")
        except FileNotFoundError:
            raise FetchError(f"{file_path} not found in mirror {self.root}")
        except OSError as e:
            raise FetchError(f"cannot open {path}: {e}")

    def set_dist_path(self, dist_path: str) -> None:
        self.dist_path = dist_path


class LocalAsyncFetcher:
    """Asynchronous local fetcher - thin wrapper around sync fetcher."""

    def __init__(self, root: Union[Path, str], dist_path: str = ""):
        self._sync_fetcher = LocalFetcher(root, dist_path)

    @property
    def root(self) -> Path:
        return self._sync_fetcher.root

    @property
    def dist_path(self) -> str:
        return self._sync_fetcher.dist_path

    async def fetch(self, ctx: FetchContext, file_path: str) -> BinaryIO:
        """Open the mirrored file for reading."""
        ctx.check()
        return await asyncio.to_thread(self._sync_fetcher.fetch, ctx, file_path)

    def set_dist_path(self, dist_path: str) -> None:
        self._sync_fetcher.set_dist_path(dist_path)


def open_local_fetcher(root: Union[Path, str], **kwargs) -> LocalFetcher:
    """Create a synchronous local mirror fetcher."""
    return LocalFetcher(root, **kwargs)


async def open_local_fetcher_async(root: Union[Path, str], **kwargs) -> LocalAsyncFetcher:
    """Create an asynchronous local mirror fetcher."""
    return LocalAsyncFetcher(root, **kwargs)
