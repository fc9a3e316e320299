from __future__ import annotations

import asyncio
from itertools import chain
from typing import Any, Iterable, List, Mapping, Sequence

from common.logging_setup import get_logger
from common.types import PixelSample, TileQuery
from tile_query.config import DEFAULT_TILE_SIZE, QueryOptions
from tile_query.loader import TileLoader, load_tiles
from tile_query.sampler import empty_pixel_response, get_pixels


log = get_logger(__name__)


async def _sample(tq: TileQuery, tile_size: int) -> List[PixelSample]:
    if tq.empty:
        return empty_pixel_response(tq.points, tq.point_ids)
    # Decoding is CPU work; keep it off the event loop.
    return await asyncio.to_thread(get_pixels, tq.data, tq.points, tq.zxy, tile_size, tq.point_ids)


async def multi_query(tile_queries: Sequence[TileQuery], tile_size: int = DEFAULT_TILE_SIZE) -> List[PixelSample]:
    """
    Sample every loaded TileQuery and return one PixelSample per point,
    ordered by the point's original index. The first sampling error is raised.
    """
    per_tile = await asyncio.gather(*(_sample(tq, tile_size) for tq in tile_queries))
    samples = list(chain.from_iterable(per_tile))
    samples.sort(key=lambda s: s.id)
    log.debug("sampled %d points from %d tiles", len(samples), len(tile_queries))
    return samples


async def query(
    points: Iterable[Sequence[float]],
    options: QueryOptions | Mapping[str, Any],
    loader: TileLoader,
) -> List[PixelSample]:
    """load_tiles() followed by multi_query(): (lat, lng) points in, ordered samples out."""
    tile_queries = await load_tiles(points, options, loader)
    opts = QueryOptions.coerce(options)
    return await multi_query(tile_queries, opts.tile_size)
