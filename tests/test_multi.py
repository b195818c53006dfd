"""Tests for the fallback cascade."""

import io

import httpx
import pytest

from distfetch.core.context import FetchContext
from distfetch.core.model import FetchCancelledError, FetchError, NoFetchersError
from distfetch.io.base import AsyncFetcher, Fetcher
from distfetch.io.multi import AsyncMultiFetcher, MultiFetcher, new_multi_fetcher


class FakeFetcher:
    """Fetcher returning canned content or raising a canned error."""

    def __init__(self, content: bytes = None, error: Exception = None):
        self.content = content
        self.error = error
        self.fetch_calls = []
        self.dist_paths = []

    def fetch(self, ctx, file_path):
        self.fetch_calls.append(file_path)
        ctx.check()
        if self.error is not None:
            raise self.error
        return io.BytesIO(self.content)

    def set_dist_path(self, dist_path):
        self.dist_paths.append(dist_path)


class FakeAsyncFetcher(FakeFetcher):
    async def fetch(self, ctx, file_path):
        return FakeFetcher.fetch(self, ctx, file_path)


class TestMultiFetcher:
    """Test synchronous MultiFetcher."""

    def test_satisfies_protocol(self):
        assert isinstance(MultiFetcher(), Fetcher)
        assert isinstance(FakeFetcher(), Fetcher)

    def test_first_success_wins(self):
        a = FakeFetcher(error=FetchError("a down"))
        b = FakeFetcher(content=b"hello")
        c = FakeFetcher(content=b"never")
        mf = MultiFetcher(a, b, c)

        with mf.fetch(FetchContext.background(), "fs-repo-migrations/versions") as stream:
            assert stream.read() == b"hello"

        assert a.fetch_calls == ["fs-repo-migrations/versions"]
        assert b.fetch_calls == ["fs-repo-migrations/versions"]
        assert len(c.fetch_calls) == 0

    def test_first_backend_success_skips_rest(self):
        a = FakeFetcher(content=b"first")
        b = FakeFetcher(content=b"second")
        mf = MultiFetcher(a, b)

        assert mf.fetch(FetchContext.background(), "x").read() == b"first"
        assert b.fetch_calls == []

    def test_returns_exact_stream(self):
        stream = io.BytesIO(b"data")

        class Fixed(FakeFetcher):
            def fetch(self, ctx, file_path):
                return stream

        assert MultiFetcher(FakeFetcher(error=FetchError("no")), Fixed()).fetch(
            FetchContext.background(), "x") is stream

    def test_all_fail_raises_last_error(self):
        first = FetchError("first")
        second = OSError("second")
        last = FetchError("last")
        mf = MultiFetcher(FakeFetcher(error=first), FakeFetcher(error=second), FakeFetcher(error=last))

        with pytest.raises(FetchError) as excinfo:
            mf.fetch(FetchContext.background(), "x")

        assert excinfo.value is last

    def test_os_error_moves_to_next_backend(self):
        mf = MultiFetcher(FakeFetcher(error=FileNotFoundError("gone")), FakeFetcher(content=b"ok"))
        assert mf.fetch(FetchContext.background(), "x").read() == b"ok"

    def test_library_error_moves_to_next_backend(self):
        a = FakeFetcher(error=httpx.ConnectError("gateway down"))
        b = FakeFetcher(content=b"ok")

        assert MultiFetcher(a, b).fetch(FetchContext.background(), "x").read() == b"ok"
        assert len(a.fetch_calls) == 1

    def test_last_library_error_is_raised(self):
        last = ValueError("bad response")
        mf = MultiFetcher(FakeFetcher(error=FetchError("first")), FakeFetcher(error=last))

        with pytest.raises(ValueError) as excinfo:
            mf.fetch(FetchContext.background(), "x")

        assert excinfo.value is last

    def test_base_exceptions_propagate(self):
        a = FakeFetcher(error=KeyboardInterrupt())
        b = FakeFetcher(content=b"ok")

        with pytest.raises(KeyboardInterrupt):
            MultiFetcher(a, b).fetch(FetchContext.background(), "x")
        assert b.fetch_calls == []

    def test_cancelled_context_tries_every_backend(self):
        a = FakeFetcher(content=b"a")
        b = FakeFetcher(content=b"b")
        ctx = FetchContext()
        ctx.cancel()

        with pytest.raises(FetchCancelledError):
            MultiFetcher(a, b).fetch(ctx, "x")

        assert len(a.fetch_calls) == 1
        assert len(b.fetch_calls) == 1

    def test_empty_raises(self):
        with pytest.raises(NoFetchersError):
            MultiFetcher().fetch(FetchContext.background(), "x")

    def test_set_dist_path_adds_separator(self):
        a, b = FakeFetcher(), FakeFetcher()
        MultiFetcher(a, b).set_dist_path("foo")

        assert a.dist_paths == ["/foo"]
        assert b.dist_paths == ["/foo"]

    def test_set_dist_path_no_double_prefix(self):
        a = FakeFetcher()
        MultiFetcher(a).set_dist_path("/already/prefixed")

        assert a.dist_paths == ["/already/prefixed"]

    def test_set_dist_path_order(self):
        calls = []

        class Recorder(FakeFetcher):
            def __init__(self, name):
                super().__init__()
                self.name = name

            def set_dist_path(self, dist_path):
                calls.append(self.name)

        MultiFetcher(Recorder("a"), Recorder("b"), Recorder("c")).set_dist_path("/d")
        assert calls == ["a", "b", "c"]

    def test_fetchers_list_is_copied(self):
        a = FakeFetcher(content=b"a")
        fetchers = [a]
        mf = new_multi_fetcher(*fetchers)

        fetchers.append(FakeFetcher(content=b"b"))
        fetchers[0] = FakeFetcher(content=b"replaced")

        assert mf.fetchers == (a,)
        assert len(mf) == 1
        assert mf.fetch(FetchContext.background(), "x").read() == b"a"

    def test_nested_multi_fetcher(self):
        inner = MultiFetcher(FakeFetcher(error=FetchError("x")), FakeFetcher(content=b"inner"))
        outer = MultiFetcher(FakeFetcher(error=FetchError("y")), inner)

        assert outer.fetch(FetchContext.background(), "x").read() == b"inner"


class TestAsyncMultiFetcher:
    """Test asynchronous AsyncMultiFetcher."""

    def test_satisfies_protocol(self):
        assert isinstance(AsyncMultiFetcher(), AsyncFetcher)

    @pytest.mark.asyncio
    async def test_first_success_wins(self):
        a = FakeAsyncFetcher(error=FetchError("a down"))
        b = FakeAsyncFetcher(content=b"hello")
        c = FakeAsyncFetcher(content=b"never")

        stream = await AsyncMultiFetcher(a, b, c).fetch(FetchContext.background(), "x")

        assert stream.read() == b"hello"
        assert c.fetch_calls == []

    @pytest.mark.asyncio
    async def test_library_error_moves_to_next_backend(self):
        a = FakeAsyncFetcher(error=httpx.ConnectError("gateway down"))
        b = FakeAsyncFetcher(content=b"ok")

        stream = await AsyncMultiFetcher(a, b).fetch(FetchContext.background(), "x")

        assert stream.read() == b"ok"

    @pytest.mark.asyncio
    async def test_all_fail_raises_last_error(self):
        last = FetchError("last")
        mf = AsyncMultiFetcher(FakeAsyncFetcher(error=FetchError("first")), FakeAsyncFetcher(error=last))

        with pytest.raises(FetchError) as excinfo:
            await mf.fetch(FetchContext.background(), "x")

        assert excinfo.value is last

    @pytest.mark.asyncio
    async def test_empty_raises(self):
        with pytest.raises(NoFetchersError):
            await AsyncMultiFetcher().fetch(FetchContext.background(), "x")

    def test_set_dist_path(self):
        a = FakeAsyncFetcher()
        AsyncMultiFetcher(a).set_dist_path("ipns/dist.ipfs.io")

        assert a.dist_paths == ["/ipns/dist.ipfs.io"]
