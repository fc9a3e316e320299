from __future__ import annotations

"""
Ready-made tile loaders for load_tiles().

DirectoryTileLoader reads a TMS-like tree on disk:

    root/
      └─ {z}/
          └─ {x}/
              └─ {y}.png

HttpTileLoader fetches from an XYZ URL template such as
"https://tiles.example.com/{z}/{x}/{y}.png".

Both raise TileNotFound for tiles that do not exist and let anything else
propagate, which aborts the query.
"""

import asyncio
from pathlib import Path
from typing import Any, Mapping, Optional

import requests

from common.logging_setup import get_logger
from common.types import TileCoordinate
from tile_query.errors import TileNotFound


log = get_logger(__name__)


class DirectoryTileLoader:
    def __init__(self, root: str = "data/tiles", ext: str = "png"):
        self.root = Path(root)
        self.ext = ext.lstrip(".")

    def __repr__(self) -> str:
        return f"DirectoryTileLoader(root={str(self.root)!r}, ext={self.ext!r})"

    def path_for(self, zxy: TileCoordinate) -> Path:
        return self.root / str(zxy.z) / str(zxy.x) / f"{zxy.y}.{self.ext}"

    def read(self, zxy: TileCoordinate) -> bytes:
        path = self.path_for(zxy)
        try:
            with path.open("rb") as f:
                return f.read()
        except FileNotFoundError:
            raise TileNotFound(zxy) from None

    async def __call__(self, zxy: TileCoordinate) -> bytes:
        return await asyncio.to_thread(self.read, zxy)


class HttpTileLoader:
    # Statuses that mean "no tile here" rather than a failure
    NOT_FOUND_STATUS = (204, 404)

    def __init__(
        self,
        url_template: str,
        session: Optional[requests.Session] = None,
        timeout: float = 10.0,
    ):
        """
        Params:
            url_template: URL with {z}, {x}, {y} placeholders
            session: optional requests.Session for connection reuse
            timeout: per-request timeout in seconds
        """
        if not url_template or not all(k in url_template for k in ("{z}", "{x}", "{y}")):
            raise ValueError("url_template must contain {z}, {x} and {y} placeholders")
        self.url_template = url_template
        self.session = session or requests.Session()
        self.timeout = float(timeout)

    def __repr__(self) -> str:
        return f"HttpTileLoader(url_template={self.url_template!r})"

    def build_url(self, zxy: TileCoordinate) -> str:
        return self.url_template.format(z=zxy.z, x=zxy.x, y=zxy.y)

    def fetch(self, zxy: TileCoordinate) -> bytes:
        url = self.build_url(zxy)
        r = self.session.get(url, timeout=self.timeout)
        if r.status_code in self.NOT_FOUND_STATUS:
            raise TileNotFound(zxy)
        if r.status_code != 200:
            log.warning("tile request failed: %s %s %s", r.status_code, url, r.text[:200])
            r.raise_for_status()
            raise requests.HTTPError(f"unexpected status {r.status_code} for {url}", response=r)
        if not r.content:
            raise TileNotFound(zxy)
        return r.content

    async def __call__(self, zxy: TileCoordinate) -> bytes:
        return await asyncio.to_thread(self.fetch, zxy)


def loader_from_config(cfg: Mapping[str, Any]):
    """HttpTileLoader when tiles.url_template is set, else DirectoryTileLoader(tiles.root)."""
    tiles = cfg.get("tiles", {})
    url_template = tiles.get("url_template")
    if url_template:
        timeout = cfg.get("http", {}).get("timeout", 10.0)
        return HttpTileLoader(url_template, timeout=timeout)
    return DirectoryTileLoader(tiles.get("root", "data/tiles"), ext=tiles.get("ext", "png"))
