"""CLI implementation for distfetch."""

import logging
import shutil
import sys
from pathlib import Path
from typing import Optional

import typer

from . import fetch_sync
from .core.context import FetchContext
from .core.dist import IPNS_IPFS_DIST, get_dist_path_env
from .io import DEFAULT_FETCH_LIMIT, DEFAULT_GATEWAY_URL, LimitReadCloser, new_limit_read_closer

app = typer.Typer(add_completion=False, help="Fetch migration artifacts from an IPFS distribution.")

logger = logging.getLogger(__name__)


@app.command()
def main(
    path: str = typer.Argument(..., help="Resource path inside the distribution, e.g. fs-repo-migrations/versions"),
    dist: str = typer.Option(IPNS_IPFS_DIST, "--dist", help="Distribution root path (IPFS_DIST_PATH overrides it)"),
    sources: Optional[list[str]] = typer.Option(None, "-s", "--source",
                                                help="Gateway URL or local mirror directory; repeat to add fallbacks"),
    limit: int = typer.Option(DEFAULT_FETCH_LIMIT, "--limit", min=0, help="Read at most N bytes (0 = no limit)"),
    timeout: Optional[float] = typer.Option(None, "--timeout", min=0, help="Give up after S seconds"),
    output: Optional[Path] = typer.Option(None, "-o", "--output", help="Write to PATH instead of stdout"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Log every backend attempt"),
):
    """Fetch one resource, trying each source in order until one succeeds."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO,
                        format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr)

    locations = sources or [DEFAULT_GATEWAY_URL]
    dist_path = get_dist_path_env(dist)
    logger.debug("fetching %s from %s via %s", path, dist_path, ", ".join(locations))

    ctx = FetchContext(timeout=timeout)
    try:
        stream = fetch_sync(path, *locations, dist_path=dist_path, ctx=ctx, fetch_limit=limit)
        # Gateway backends already cap the body at fetch_limit
        if limit > 0 and not isinstance(stream, LimitReadCloser):
            stream = new_limit_read_closer(stream, limit)

        # open output sink
        with stream:
            if output:
                with open(output, "wb") as sink:
                    shutil.copyfileobj(stream, sink)
            else:
                shutil.copyfileobj(stream, sys.stdout.buffer)
                sys.stdout.buffer.flush()
    except Exception as e:
        typer.echo(f"fetch failed: {e}", err=True)
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
