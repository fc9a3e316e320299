#!/usr/bin/env python3
"""
Print the raster value under each lat,lng point as JSON.

Examples:
  python scripts/query_points.py --root data/tiles --min-zoom 0 --max-zoom 16 39,-121 39.01,-121.02
  python scripts/query_points.py --url "https://tiles.example.com/{z}/{x}/{y}.png" \
      --min-zoom 0 --max-zoom 14 --zoom 12 38.87,-77.05
"""
from __future__ import annotations

import argparse
import asyncio
import json
import os
import sys
from typing import List, Tuple

# Add the project root to the path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from common.logging_setup import setup_logging
from tile_query import QueryOptions, TileQueryError, query
from tile_query.providers import DirectoryTileLoader, HttpTileLoader


def parse_point(s: str) -> Tuple[float, float]:
    try:
        lat, lng = (float(v) for v in s.split(","))
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected lat,lng but got {s!r}")
    return (lat, lng)


def main(argv: List[str] | None = None) -> int:
    ap = argparse.ArgumentParser()
    src = ap.add_mutually_exclusive_group(required=True)
    src.add_argument("--root", help="Tile directory laid out as {z}/{x}/{y}.<ext>")
    src.add_argument("--url", help="XYZ URL template with {z}, {x}, {y}")
    ap.add_argument("--ext", default="png", help="Tile file extension for --root")
    ap.add_argument("--min-zoom", type=int, required=True)
    ap.add_argument("--max-zoom", type=int, required=True)
    ap.add_argument("--zoom", type=int, default=None, help="Pin the zoom instead of estimating it")
    ap.add_argument("--tile-size", type=int, default=256)
    ap.add_argument("--log-level", default=None)
    ap.add_argument("points", nargs="+", type=parse_point, help="lat,lng pairs")
    args = ap.parse_args(argv)

    setup_logging(args.log_level)
    loader = HttpTileLoader(args.url) if args.url else DirectoryTileLoader(args.root, ext=args.ext)

    try:
        opts = QueryOptions(min_zoom=args.min_zoom, max_zoom=args.max_zoom, zoom=args.zoom, tile_size=args.tile_size)
        samples = asyncio.run(query(args.points, opts, loader))
    except TileQueryError as e:
        print(json.dumps({"error": type(e).__name__, "detail": str(e)}), file=sys.stderr)
        return 1
    print(json.dumps([s.to_dict() for s in samples], indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
