"""Distribution root paths and the environment override."""

import os
from typing import Optional

# Current distribution to fetch migrations from
CURRENT_IPFS_DIST = "/ipfs/Qme8pJhBidEUXRdpcWLGR2fkG5kdwVnaMh3kabjfP8zz7Y"
# Distribution IPNS path, default for fetchers
IPNS_IPFS_DIST = "/ipns/dist.ipfs.io"

ENV_IPFS_DIST_PATH = "IPFS_DIST_PATH"


def get_dist_path_env(dist_path: Optional[str] = "") -> str:
    """Return the distribution root path to configure fetchers with.

    A non-empty ``IPFS_DIST_PATH`` environment variable always wins, then the
    given ``dist_path``, then ``IPNS_IPFS_DIST``. To pin the current
    distribution unless overridden: ``get_dist_path_env(CURRENT_IPFS_DIST)``.
    """
    dist = os.environ.get(ENV_IPFS_DIST_PATH)
    if dist:
        return dist
    if not dist_path:
        return IPNS_IPFS_DIST
    return dist_path


def normalize_dist_path(dist_path: str) -> str:
    """Ensure the dist path starts with a single leading separator."""
    if not dist_path.startswith("/"):
        dist_path = "/" + dist_path
    return dist_path
