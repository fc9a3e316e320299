from __future__ import annotations

from typing import Optional, Tuple

from common.types import TileCoordinate


class TileQueryError(Exception):
    """Base exception for tile query errors."""


class InvalidQueryError(TileQueryError, ValueError):
    """Query points are empty or malformed."""


class MissingZoomError(InvalidQueryError):
    """A required zoom bound (min_zoom/max_zoom) was not supplied."""


class TileNotFound(TileQueryError):
    """
    Raised by a loader when a tile does not exist.

    Not a failure: load_tiles() records the tile as empty and moves on.
    """

    def __init__(self, zxy: Optional[TileCoordinate] = None):
        self.zxy = zxy
        where = f" at {zxy.key}" if zxy is not None else ""
        super().__init__(f"Tile does not exist{where}")


class NoTileDataError(TileQueryError):
    """Every tile in the query was missing."""

    def __init__(self, tile_count: int):
        self.tile_count = tile_count
        super().__init__(f"No tiles have any data ({tile_count} requested)")


class InvalidTileError(TileQueryError):
    """Tile bytes cannot be sampled as a square tile."""

    def __init__(self, zxy: TileCoordinate, message: Optional[str] = None):
        self.zxy = zxy
        super().__init__(message or f"Invalid tile at {zxy.key}")


class TileSizeMismatchError(InvalidTileError):
    def __init__(self, zxy: TileCoordinate, expected: int, actual: Tuple[int, int]):
        self.expected = expected
        self.actual = actual
        super().__init__(
            zxy,
            f"Tilesize {expected} does not match image dimensions {actual[0]}x{actual[1]} at {zxy.key}",
        )


class PointOutsideTileError(InvalidTileError):
    def __init__(self, zxy: TileCoordinate, xy: Tuple[int, int], tile_size: int):
        self.xy = xy
        self.tile_size = tile_size
        super().__init__(
            zxy,
            f"Coordinates are not in tile {zxy.key}: local pixel {xy} outside [0, {tile_size})",
        )
