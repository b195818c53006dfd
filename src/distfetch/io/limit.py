"""Stream wrapper that caps how many bytes a caller can read."""

import io
from typing import BinaryIO


class LimitReadCloser(io.RawIOBase):
    """Read at most `limit` bytes from `stream`; close delegates to `stream`."""

    def __init__(self, stream: BinaryIO, limit: int):
        super().__init__()
        self._stream = stream
        self._remaining = max(0, limit)

    @property
    def remaining(self) -> int:
        """Bytes still allowed before reads report end of data."""
        return self._remaining

    def readable(self) -> bool:
        return True

    def readinto(self, b) -> int:
        if self._remaining <= 0:
            return 0
        want = min(len(b), self._remaining)
        if want == 0:
            return 0
        data = self._stream.read(want)
        if data is None:
            return None
        # Some streams (decoding ones) hand back more than asked for
        data = data[:want]
        n = len(data)
        b[:n] = data
        self._remaining -= n
        return n

    def close(self):
        if self.closed:
            return
        try:
            self._stream.close()
        finally:
            super().close()


def new_limit_read_closer(stream: BinaryIO, limit: int) -> LimitReadCloser:
    """Wrap `stream` so no more than `limit` bytes can be read from it."""
    return LimitReadCloser(stream, limit)
