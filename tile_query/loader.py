from __future__ import annotations

"""
Concurrent tile loading for a point query.

A loader is any async callable taking a TileCoordinate and returning the tile
bytes. It signals a missing tile by raising TileNotFound (or returning None);
missing tiles are recorded as empty. Any other exception aborts the whole load.
"""

import asyncio
import math
from numbers import Real
from typing import Any, Awaitable, Callable, Iterable, List, Mapping, Optional, Sequence

from common.logging_setup import get_logger
from common.types import TileCoordinate, TileQuery
from tile_query.config import QueryOptions
from tile_query.errors import InvalidQueryError, NoTileDataError, TileNotFound
from tile_query.partition import build_query
from tile_query.zoom import estimate_zoom


log = get_logger(__name__)

TileLoader = Callable[[TileCoordinate], Awaitable[Optional[bytes]]]


def validate_points(points: Iterable[Sequence[float]]) -> List[Sequence[float]]:
    """
    Check that `points` is a non-empty collection of (lat, lng) pairs and
    return it as a list. Raises InvalidQueryError otherwise.
    """
    if points is None or isinstance(points, (str, bytes)):
        raise InvalidQueryError("Invalid query points: expected at least one [lat, lng] pair")
    try:
        points = list(points)
    except TypeError as e:
        raise InvalidQueryError(f"Invalid query points: {e}") from e
    if not points:
        raise InvalidQueryError("Invalid query points: expected at least one [lat, lng] pair")
    for i, p in enumerate(points):
        if isinstance(p, (str, bytes)) or not hasattr(p, "__len__") or len(p) != 2:
            raise InvalidQueryError(f"Invalid query points: point {i} is not a [lat, lng] pair")
        for v in p:
            if isinstance(v, bool) or not isinstance(v, Real) or not math.isfinite(v):
                raise InvalidQueryError(f"Invalid query points: point {i} has non-numeric value {v!r}")
    return points


class _EmptyCounter:
    """Counts tiles that came back empty; trips once all of them have."""

    def __init__(self, total: int):
        self.total = total
        self.count = 0

    def hit(self) -> None:
        self.count += 1
        if self.count == self.total:
            raise NoTileDataError(self.total)


async def _load_one(tq: TileQuery, loader: TileLoader, empties: _EmptyCounter) -> TileQuery:
    try:
        data = await loader(tq.zxy)
    except TileNotFound:
        data = None
    if data is None:
        tq.mark_empty()
        log.debug("tile %s does not exist", tq.zxy.key)
        empties.hit()
        return tq
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError(f"loader returned {type(data).__name__} for tile {tq.zxy.key}, expected bytes")
    tq.mark_loaded(bytes(data))
    log.debug("tile %s loaded (%d bytes)", tq.zxy.key, len(tq.data or b""))
    return tq


async def _gather_fail_fast(coros: Sequence[Awaitable[TileQuery]]) -> List[TileQuery]:
    """
    Run all coroutines; on the first exception cancel the rest and re-raise it.
    """
    tasks = [asyncio.ensure_future(c) for c in coros]
    try:
        pending = set(tasks)
        while pending:
            done, pending = await asyncio.wait(pending, return_when=asyncio.FIRST_EXCEPTION)
            for t in done:
                if not t.cancelled() and t.exception() is not None:
                    raise t.exception()  # type: ignore[misc]
    finally:
        for t in tasks:
            if not t.done():
                t.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
    return [t.result() for t in tasks]


async def load_tiles(
    points: Iterable[Sequence[float]],
    options: QueryOptions | Mapping[str, Any],
    loader: TileLoader,
) -> List[TileQuery]:
    """
    Load every tile needed to answer a query for (lat, lng) `points`.

    Returns the TileQuery list from build_query() with each entry marked
    LOADED (bytes in `.data`) or EMPTY.

    Raises:
        InvalidQueryError: empty or malformed points.
        MissingZoomError: min_zoom/max_zoom not given.
        NoTileDataError: the loader reported every tile as missing.
        TypeError: the loader returned something other than bytes or None.
        Exception: whatever the loader raised, other than TileNotFound.
    """
    points = validate_points(points)
    opts = QueryOptions.coerce(options)

    zoom = opts.zoom
    if zoom is None:
        zoom = estimate_zoom(points, opts.min_zoom, opts.max_zoom, opts.tile_size)

    queries = build_query(points, zoom, opts.tile_size)
    log.debug("loading %d tiles at z%d for %d points", len(queries), zoom, len(points))

    empties = _EmptyCounter(len(queries))
    await _gather_fail_fast([_load_one(tq, loader, empties) for tq in queries])
    if empties.count:
        log.info("%d of %d tiles missing at z%d", empties.count, len(queries), zoom)
    return queries
