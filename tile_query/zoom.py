from __future__ import annotations

"""
Zoom estimation for multi-point queries.

The estimate trades resolution against the number of tiles to fetch: the
query's bounding box is split into about 2*N cells along its dominant axis and
the zoom is picked so one cell is roughly one pixel. The two branches use
different degree spans (360 for longitude, 170.10225756 for mercator latitude);
the constants are kept as-is because callers depend on the zooms they produce.
"""

import math
from typing import List, Sequence, Tuple

from common.geo import get_projection
from common.logging_setup import get_logger
from common.utils import clamp


log = get_logger(__name__)

_LNG_SPAN_DEG = 360.0
_LAT_SPAN_DEG = 170.10225756

Extent = List[float]


def get_extent(points: Sequence[Sequence[float]]) -> Extent:
    """
    Bounding box of (lat, lng) points as [min_lat, min_lng, max_lat, max_lng].
    """
    first = points[0]
    bounds = [float(first[0]), float(first[1]), float(first[0]), float(first[1])]
    for p in points[1:]:
        lat, lng = float(p[0]), float(p[1])
        bounds[0] = min(bounds[0], lat)
        bounds[1] = min(bounds[1], lng)
        bounds[2] = max(bounds[2], lat)
        bounds[3] = max(bounds[3], lng)
    return bounds


def _log2_snap(span: float, scale: float) -> float:
    if span <= 0:
        return math.inf
    return math.ceil((math.log(1.0 / span) + math.log(scale)) / math.log(2))


def estimate_pixel_snap(
    extent: Extent,
    lower_left: Tuple[float, float],
    upper_right: Tuple[float, float],
    query_length: int,
    tile_size: int,
) -> float:
    """
    Unclamped zoom estimate. Returns +inf for a zero-size extent.

    `lower_left`/`upper_right` are the extent corners in projected units;
    only their ratio matters.
    """
    x_range = upper_right[0] - lower_left[0]
    y_range = upper_right[1] - lower_left[1]
    if x_range > y_range:
        return _log2_snap(extent[3] - extent[1], _LNG_SPAN_DEG)
    if x_range + y_range <= 0:
        return math.inf
    cells = math.ceil((y_range / (x_range + y_range)) * query_length * 2)
    p_ratio = (extent[2] - extent[0]) / cells * tile_size
    return _log2_snap(p_ratio, _LAT_SPAN_DEG)


def estimate_zoom(
    points: Sequence[Sequence[float]],
    min_zoom: int,
    max_zoom: int,
    tile_size: int = 256,
) -> int:
    """
    Pick a zoom in [min_zoom, max_zoom] for (lat, lng) `points`.
    A single point always samples at max_zoom.
    """
    if len(points) == 1:
        return int(max_zoom)

    sm = get_projection(tile_size)
    extent = get_extent(points)
    lower_left = sm.forward(extent[1], extent[0])
    upper_right = sm.forward(extent[3], extent[2])
    est = estimate_pixel_snap(extent, lower_left, upper_right, len(points), tile_size)
    zoom = int(clamp(est, min_zoom, max_zoom))
    log.debug("estimated zoom %s (raw %s) for %d points", zoom, est, len(points))
    return zoom
