"""
Tile Query — raster values under geographic points

- Picks a zoom for the query (or uses a pinned one)
- Groups points by the z/x/y tile holding them
- Fetches tiles concurrently through a caller-supplied async loader
- Returns one PixelSample per point, in input order
"""

from common.types import LatLng, PixelColor, PixelSample, TileCoordinate, TileQuery, TileStatus
from tile_query.assemble import multi_query, query
from tile_query.config import QueryOptions
from tile_query.errors import (
    InvalidQueryError,
    InvalidTileError,
    MissingZoomError,
    NoTileDataError,
    PointOutsideTileError,
    TileNotFound,
    TileQueryError,
    TileSizeMismatchError,
)
from tile_query.loader import load_tiles
from tile_query.partition import build_query
from tile_query.sampler import empty_pixel_response, get_pixel_xy, get_pixels
from tile_query.zoom import estimate_pixel_snap, estimate_zoom

__all__ = [
    "LatLng", "PixelColor", "PixelSample", "TileCoordinate", "TileQuery", "TileStatus",
    "QueryOptions",
    "estimate_zoom", "estimate_pixel_snap", "build_query", "load_tiles",
    "multi_query", "query", "get_pixels", "get_pixel_xy", "empty_pixel_response",
    "TileQueryError", "InvalidQueryError", "MissingZoomError", "TileNotFound",
    "NoTileDataError", "InvalidTileError", "TileSizeMismatchError", "PointOutsideTileError",
]
