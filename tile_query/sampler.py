from __future__ import annotations

import io
from typing import List, Sequence, Tuple

import numpy as np
from PIL import Image, UnidentifiedImageError

from common.geo import get_projection
from common.types import LatLng, PixelColor, PixelSample, TileCoordinate
from tile_query.errors import InvalidQueryError, InvalidTileError, PointOutsideTileError, TileSizeMismatchError


def get_pixel_xy(tile_x: int, tile_y: int, pixel: Tuple[int, int]) -> Tuple[int, int]:
    """Global pixel -> pixel relative to a tile origin (tile_x, tile_y in global px)."""
    return (pixel[0] - tile_x, pixel[1] - tile_y)


def _check_ids(points: Sequence[Tuple[float, float]], ids: Sequence[int]) -> None:
    if len(points) != len(ids):
        raise InvalidQueryError(f"{len(points)} points but {len(ids)} ids")


def _decode_rgba(image_bytes: bytes, zxy: TileCoordinate) -> np.ndarray:
    """Decode tile bytes to an (H, W, 4) uint8 array."""
    try:
        with Image.open(io.BytesIO(image_bytes)) as im:
            return np.asarray(im.convert("RGBA"), dtype=np.uint8)
    except (UnidentifiedImageError, OSError) as e:
        raise InvalidTileError(zxy, f"Invalid tile at {zxy.key}: cannot decode image ({e})") from e


def get_pixels(
    image_bytes: bytes,
    points: Sequence[Tuple[float, float]],
    zxy: TileCoordinate,
    tile_size: int,
    ids: Sequence[int],
) -> List[PixelSample]:
    """
    Read the pixel under each (lng, lat) point of one tile.

    Points must lie inside the tile (build_query() guarantees this); each
    id travels with its point into the returned sample.

    Raises:
        InvalidTileError: bytes are not a decodable square image.
        TileSizeMismatchError: image width differs from `tile_size`.
        PointOutsideTileError: a point projects outside this tile.
    """
    zxy = TileCoordinate(*zxy)
    _check_ids(points, ids)
    rgba = _decode_rgba(image_bytes, zxy)
    height, width = rgba.shape[:2]
    if width != height:
        raise InvalidTileError(zxy)
    if width != tile_size:
        raise TileSizeMismatchError(zxy, tile_size, (width, height))

    sm = get_projection(tile_size)
    tile_x, tile_y = sm.tile_origin(zxy.x, zxy.y)
    out: List[PixelSample] = []
    for (lng, lat), point_id in zip(points, ids):
        x, y = get_pixel_xy(tile_x, tile_y, sm.px(lng, lat, zxy.z))
        if not (0 <= x < tile_size and 0 <= y < tile_size):
            raise PointOutsideTileError(zxy, (x, y), tile_size)
        r, g, b, a = (int(v) for v in rgba[y, x])
        out.append(PixelSample(pixel=PixelColor(r, g, b, a), latlng=LatLng(lat=lat, lng=lng), id=int(point_id)))
    return out


def empty_pixel_response(points: Sequence[Tuple[float, float]], ids: Sequence[int]) -> List[PixelSample]:
    """Samples with pixel=None for every (lng, lat) point of a missing tile."""
    _check_ids(points, ids)
    return [
        PixelSample(pixel=None, latlng=LatLng(lat=lat, lng=lng), id=int(point_id))
        for (lng, lat), point_id in zip(points, ids)
    ]
