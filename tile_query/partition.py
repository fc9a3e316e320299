from __future__ import annotations

from typing import Dict, List, Sequence

from common.geo import get_projection
from common.types import TileCoordinate, TileQuery


def build_query(points: Sequence[Sequence[float]], zoom: int, tile_size: int = 256) -> List[TileQuery]:
    """
    Group (lat, lng) `points` by the tile holding them at `zoom`.

    Tiles come back in the order their first point appeared. Each TileQuery
    stores its points as (lng, lat) together with their input positions.
    """
    sm = get_projection(tile_size)
    by_tile: Dict[TileCoordinate, TileQuery] = {}
    out: List[TileQuery] = []
    for i, p in enumerate(points):
        lat, lng = float(p[0]), float(p[1])
        x, y = sm.tile_containing(lng, lat, zoom)
        zxy = TileCoordinate(int(zoom), x, y)
        tq = by_tile.get(zxy)
        if tq is None:
            tq = TileQuery(zxy=zxy)
            by_tile[zxy] = tq
            out.append(tq)
        tq.add(lng, lat, i)
    return out
