from __future__ import annotations

from typing import Dict, Tuple
import math
import threading

from common.utils import clamp, round_half_up


# --- Spherical mercator constants ---
_EARTH_RADIUS_M = 6378137.0                     # EPSG:3857 sphere radius (m)
_MAX_EXTENT_M = 20037508.342789244              # half the projected world width (m)
_D2R = math.pi / 180.0
_MAX_SIN_LAT = 0.9999                           # keeps poles finite
MAX_ZOOM_LEVEL = 30


def _require_finite(*values: float) -> None:
    for v in values:
        if not math.isfinite(float(v)):
            raise ValueError(f"coordinate must be finite, got {v!r}")


class SphericalMercator:
    """
    Forward projection and tile/pixel math for one fixed tile size.

    Per-zoom scale factors are computed once in __init__ and never change,
    so an instance can be shared freely between threads and tasks.

      - forward(): lon/lat (deg) -> EPSG:3857 metres
      - px():      lon/lat (deg) -> global pixel (x,y) at a zoom
      - tile_containing(): lon/lat (deg) -> tile (x,y) at a zoom
    """

    def __init__(self, size: int = 256):
        if int(size) <= 0:
            raise ValueError("tile size must be > 0")
        self.size = int(size)
        self._bc = []  # pixels per degree of longitude
        self._cc = []  # pixels per radian
        self._zc = []  # world centre (px)
        self._ac = []  # world size (px)
        world = float(self.size)
        for _ in range(MAX_ZOOM_LEVEL + 1):
            self._bc.append(world / 360.0)
            self._cc.append(world / (2.0 * math.pi))
            self._zc.append(world / 2.0)
            self._ac.append(world)
            world *= 2.0

    def __repr__(self) -> str:
        return f"SphericalMercator(size={self.size})"

    def _check_zoom(self, zoom: int) -> int:
        z = int(zoom)
        if z != zoom or not (0 <= z <= MAX_ZOOM_LEVEL):
            raise ValueError(f"zoom must be an integer in 0..{MAX_ZOOM_LEVEL}, got {zoom!r}")
        return z

    def forward(self, lng: float, lat: float) -> Tuple[float, float]:
        """WGS84 lon/lat (deg) to EPSG:3857 (x,y) metres, clamped to the world extent."""
        _require_finite(lng, lat)
        x = _EARTH_RADIUS_M * lng * _D2R
        y = _EARTH_RADIUS_M * math.log(math.tan(math.pi * 0.25 + 0.5 * lat * _D2R))
        return (
            clamp(x, -_MAX_EXTENT_M, _MAX_EXTENT_M),
            clamp(y, -_MAX_EXTENT_M, _MAX_EXTENT_M),
        )

    def px(self, lng: float, lat: float, zoom: int) -> Tuple[int, int]:
        """
        Global pixel coordinate of lon/lat at `zoom`.

        Values are rounded half-up and capped at the world size, so a point on
        the antimeridian lands one pixel past the last tile.
        """
        _require_finite(lng, lat)
        z = self._check_zoom(zoom)
        d = self._zc[z]
        f = clamp(math.sin(_D2R * lat), -_MAX_SIN_LAT, _MAX_SIN_LAT)
        x = round_half_up(d + lng * self._bc[z])
        y = round_half_up(d + 0.5 * math.log((1.0 + f) / (1.0 - f)) * -self._cc[z])
        world = int(self._ac[z])
        return (min(x, world), min(y, world))

    def tile_containing(self, lng: float, lat: float, zoom: int) -> Tuple[int, int]:
        """Tile (x,y) index holding lon/lat at `zoom`."""
        px_x, px_y = self.px(lng, lat, zoom)
        last = (1 << int(zoom)) - 1
        tx = int(clamp(math.floor(px_x / self.size), 0, last))
        ty = int(clamp(math.floor(px_y / self.size), 0, last))
        return (tx, ty)

    def tile_origin(self, x: int, y: int) -> Tuple[int, int]:
        """Global pixel coordinate of a tile's top-left corner."""
        return (int(x) * self.size, int(y) * self.size)


# -------------------------
# Shared instances
# -------------------------
_PROJECTIONS: Dict[int, SphericalMercator] = {}
_PROJECTIONS_LOCK = threading.Lock()


def get_projection(tile_size: int = 256) -> SphericalMercator:
    """
    Process-wide projection for `tile_size`, created on first use.
    """
    size = int(tile_size)
    proj = _PROJECTIONS.get(size)
    if proj is not None:
        return proj
    with _PROJECTIONS_LOCK:
        proj = _PROJECTIONS.get(size)
        if proj is None:
            proj = SphericalMercator(size=size)
            _PROJECTIONS[size] = proj
    return proj
