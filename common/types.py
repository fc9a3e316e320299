from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, NamedTuple, Optional, Tuple


LngLat = Tuple[float, float]


class TileCoordinate(NamedTuple):
    """
    One tile of the z/x/y pyramid. Hashable; used as the grouping key.
    """
    z: int
    x: int
    y: int

    @property
    def key(self) -> str:
        return f"{self.z}/{self.x}/{self.y}"

    def to_dict(self) -> Dict[str, int]:
        return {"z": self.z, "x": self.x, "y": self.y}


class TileStatus(str, Enum):
    PENDING = "pending"
    LOADED = "loaded"
    EMPTY = "empty"


@dataclass(slots=True)
class TileQuery:
    """
    All query points that fall into one tile.

    Attributes:
        zxy: tile coordinate.
        points: (lng, lat) pairs, in first-seen order.
        point_ids: original input index of each entry in `points`.
        data: raw tile bytes once loaded (b"" for an empty tile).
        status: PENDING until the loader settles, then LOADED or EMPTY.
    """
    zxy: TileCoordinate
    points: List[LngLat] = field(default_factory=list)
    point_ids: List[int] = field(default_factory=list)
    data: Optional[bytes] = field(default=None, repr=False)
    status: TileStatus = TileStatus.PENDING

    def add(self, lng: float, lat: float, point_id: int) -> None:
        self.points.append((float(lng), float(lat)))
        self.point_ids.append(int(point_id))

    def mark_loaded(self, data: bytes) -> None:
        self.data = data
        self.status = TileStatus.LOADED

    def mark_empty(self) -> None:
        self.data = b""
        self.status = TileStatus.EMPTY

    @property
    def empty(self) -> bool:
        return self.status is TileStatus.EMPTY

    def __len__(self) -> int:
        return len(self.point_ids)


@dataclass(frozen=True, slots=True)
class PixelColor:
    r: int
    g: int
    b: int
    a: int = 255
    premultiplied: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"premultiplied": self.premultiplied, "a": self.a, "b": self.b, "g": self.g, "r": self.r}


@dataclass(frozen=True, slots=True)
class LatLng:
    lat: float
    lng: float

    def to_dict(self) -> Dict[str, float]:
        return {"lat": self.lat, "lng": self.lng}


@dataclass(frozen=True, slots=True)
class PixelSample:
    """
    Value under one query point.

    Attributes:
        pixel: colour at the point, or None when its tile does not exist.
        latlng: the point as queried.
        id: original input index.
    """
    pixel: Optional[PixelColor]
    latlng: LatLng
    id: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pixel": None if self.pixel is None else self.pixel.to_dict(),
            "latlng": self.latlng.to_dict(),
            "id": self.id,
        }
