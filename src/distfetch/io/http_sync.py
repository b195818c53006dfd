"""Synchronous HTTP gateway fetcher using requests."""

import logging
from typing import BinaryIO, Optional

import requests

from ..core.context import FetchContext
from ..core.dist import IPNS_IPFS_DIST
from ..core.model import FetchCancelledError, FetchError
from .base import DEFAULT_FETCH_LIMIT, DEFAULT_TIMEOUT, join_dist_path
from .limit import new_limit_read_closer

logger = logging.getLogger(__name__)

DEFAULT_GATEWAY_URL = "https://ipfs.io"
DEFAULT_USER_AGENT = "distfetch"

# Bytes of an error body quoted in the raised message
ERROR_BODY_EXCERPT = 512


# Module-level session for connection pooling
_session = None


def _get_session():
    """Get or create the global requests session."""
    global _session
    if _session is None:
        _session = requests.Session()
    return _session


def _request_timeout(ctx: FetchContext, default: float) -> float:
    """Use the context deadline when it is tighter than the fetcher's timeout."""
    remaining = ctx.remaining()
    if remaining is None:
        return default
    if remaining <= 0:
        # Deadline passed after the caller's check
        raise FetchCancelledError("context deadline exceeded")
    return min(remaining, default)


def _timeout_error(ctx: FetchContext, url: str, e: Exception) -> FetchError:
    if ctx.cancelled:
        return FetchCancelledError(f"GET {url} cancelled: {e}")
    return FetchError(f"GET {url} timed out: {e}")


class HTTPFetcher:
    """Fetches distribution files through an HTTP gateway."""

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
        self._session = _get_session()

    def url_for(self, file_path: str) -> str:
        return self.gateway_url + join_dist_path(self.dist_path, file_path)

    def fetch(self, ctx: FetchContext, file_path: str) -> BinaryIO:
        """GET the file from the gateway and return its body as a stream."""
        ctx.check()
        url = self.url_for(file_path)
        logger.debug("GET %s", url)

        try:
            response = self._session.get(
                url,
                headers={"User-Agent": self.user_agent},
                stream=True,
                timeout=_request_timeout(ctx, self.timeout),
            )
        except requests.Timeout as e:
            raise _timeout_error(ctx, url, e)
        except requests.RequestException as e:
            raise FetchError(f"GET {url} failed: {e}")

        if response.status_code >= 400:
            try:
                head = next(response.iter_content(chunk_size=ERROR_BODY_EXCERPT), b"")
                excerpt = head[:ERROR_BODY_EXCERPT].decode("utf-8", "replace").strip()
            except requests.RequestException:
                excerpt = ""
            finally:
                response.close()
            raise FetchError(f"GET {url} error: {response.status_code} {response.reason}: {excerpt}")

        # Body is decoded by urllib3 as the caller reads it
        response.raw.decode_content = True
        if self.fetch_limit > 0:
            return new_limit_read_closer(response.raw, self.fetch_limit)
        return response.raw

    def set_dist_path(self, dist_path: str) -> None:
        self.dist_path = dist_path

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        # Session is shared, don't close it here
        pass


def open_http_fetcher(gateway_url: str, **kwargs) -> HTTPFetcher:
    """Create a synchronous HTTP gateway fetcher."""
    return HTTPFetcher(gateway_url=gateway_url, **kwargs)
