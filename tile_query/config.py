from __future__ import annotations

"""
Configuration for tile queries.

Per-call options live in QueryOptions. Service-level settings (where tiles
come from, default zoom bounds) are read from YAML:

    tiles:
      root: data/tiles                 # {root}/{z}/{x}/{y}.{ext}
      ext: png
      url_template: ""                 # e.g. https://tiles.example.com/{z}/{x}/{y}.png
      min_zoom: 0
      max_zoom: 18
      tile_size: 256
    http:
      timeout: 10.0

Path precedence: explicit argument, env TILE_QUERY_CONFIG, config/params.yaml.
A missing file yields the defaults above.
"""

import copy
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from common.geo import MAX_ZOOM_LEVEL
from common.logging_setup import get_logger
from tile_query.errors import InvalidQueryError, MissingZoomError


log = get_logger(__name__)

DEFAULT_TILE_SIZE = 256
DEFAULT_CONFIG_PATH = "config/params.yaml"

DEFAULTS: Dict[str, Any] = {
    "tiles": {
        "root": "data/tiles",
        "ext": "png",
        "url_template": "",
        "min_zoom": 0,
        "max_zoom": 18,
        "tile_size": DEFAULT_TILE_SIZE,
    },
    "http": {"timeout": 10.0},
}

# camelCase spellings accepted from JSON callers
_ALIASES = {"minZoom": "min_zoom", "maxZoom": "max_zoom", "tileSize": "tile_size"}


@dataclass(frozen=True, slots=True)
class QueryOptions:
    """
    Attributes:
        min_zoom, max_zoom: bounds for the estimated zoom (both required).
        zoom: pin the zoom instead of estimating it.
        tile_size: tile width/height in pixels.
    """
    min_zoom: int
    max_zoom: int
    zoom: Optional[int] = None
    tile_size: int = DEFAULT_TILE_SIZE

    def __post_init__(self):
        for name in ("min_zoom", "max_zoom", "zoom"):
            value = getattr(self, name)
            if value is not None and not (0 <= value <= MAX_ZOOM_LEVEL):
                raise InvalidQueryError(f"{name} must be in 0..{MAX_ZOOM_LEVEL}, got {value!r}")
        if self.tile_size <= 0:
            raise InvalidQueryError(f"tile_size must be > 0, got {self.tile_size!r}")

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> "QueryOptions":
        opts = {_ALIASES.get(k, k): v for k, v in options.items()}
        if opts.get("max_zoom") is None:
            raise MissingZoomError("Max zoom must be specified")
        if opts.get("min_zoom") is None:
            raise MissingZoomError("Min zoom must be specified")
        zoom = opts.get("zoom")
        try:
            min_zoom = int(opts["min_zoom"])
            max_zoom = int(opts["max_zoom"])
            zoom = None if zoom is None else int(zoom)
            tile_size = int(opts.get("tile_size") or DEFAULT_TILE_SIZE)
        except (TypeError, ValueError) as e:
            raise InvalidQueryError(f"Invalid query options: {e}") from e
        return cls(min_zoom=min_zoom, max_zoom=max_zoom, zoom=zoom, tile_size=tile_size)

    @classmethod
    def coerce(cls, options: "QueryOptions | Mapping[str, Any]") -> "QueryOptions":
        if isinstance(options, QueryOptions):
            return options
        return cls.from_mapping(options)


def _deep_merge(base: Dict[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    out = copy.deepcopy(base)
    for k, v in override.items():
        if isinstance(v, Mapping) and isinstance(out.get(k), dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    cfg_path = Path(path or os.environ.get("TILE_QUERY_CONFIG") or DEFAULT_CONFIG_PATH)
    if not cfg_path.exists():
        log.debug("config %s not found, using defaults", cfg_path)
        return copy.deepcopy(DEFAULTS)
    with cfg_path.open("r") as f:
        user = yaml.safe_load(f) or {}
    if not isinstance(user, Mapping):
        raise ValueError(f"{cfg_path}: top level must be a mapping")
    return _deep_merge(DEFAULTS, user)


def default_options(cfg: Mapping[str, Any]) -> Dict[str, Any]:
    """Zoom bounds / tile size from the `tiles` section, as load_tiles() options."""
    tiles = cfg.get("tiles", {})
    return {
        "min_zoom": tiles.get("min_zoom"),
        "max_zoom": tiles.get("max_zoom"),
        "tile_size": tiles.get("tile_size", DEFAULT_TILE_SIZE),
    }
