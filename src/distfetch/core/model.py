from __future__ import annotations


class FetchError(RuntimeError):
    """Raised when a backend cannot deliver the requested resource."""
    pass


class FetchCancelledError(FetchError):
    """Raised when the fetch context was cancelled or its deadline passed."""
    pass


class NoFetchersError(FetchError):
    """Raised when a composite fetcher holds no backends to try."""
    pass
