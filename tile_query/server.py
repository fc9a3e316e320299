from __future__ import annotations

"""
HTTP surface for point queries.

    POST /query   {"points": [[lat, lng], ...], "minZoom": 0, "maxZoom": 18, "zoom": null, "tileSize": 256}
    GET  /health

Zoom bounds and tile size fall back to the `tiles` section of the config.

Run:
    TILE_QUERY_CONFIG=config/params.yaml python -m tile_query.server
"""

from typing import Any, Dict, List, Optional

import uvicorn
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict, Field

from common.logging_setup import get_logger
from tile_query.assemble import multi_query
from tile_query.config import QueryOptions, default_options, load_config
from tile_query.errors import InvalidQueryError, InvalidTileError, NoTileDataError
from tile_query.loader import TileLoader, load_tiles
from tile_query.providers import loader_from_config


log = get_logger(__name__)


class QueryRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    points: List[List[float]]
    min_zoom: Optional[int] = Field(None, alias="minZoom")
    max_zoom: Optional[int] = Field(None, alias="maxZoom")
    zoom: Optional[int] = None
    tile_size: Optional[int] = Field(None, alias="tileSize")


def create_app(cfg: Optional[Dict[str, Any]] = None, loader: Optional[TileLoader] = None) -> FastAPI:
    cfg = cfg if cfg is not None else load_config()
    tile_loader = loader if loader is not None else loader_from_config(cfg)
    defaults = default_options(cfg)

    app = FastAPI(title="Tile Query API", version="1.0.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # tighten as needed
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health():
        return {"status": "ok", "source": repr(tile_loader), "defaults": defaults}

    @app.post("/query")
    async def query_points(req: QueryRequest):
        overrides = {k: v for k, v in req.model_dump(exclude={"points"}).items() if v is not None}
        try:
            opts = QueryOptions.from_mapping({**defaults, **overrides})
            tile_queries = await load_tiles(req.points, opts, tile_loader)
            samples = await multi_query(tile_queries, opts.tile_size)
        except InvalidQueryError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except NoTileDataError as e:
            raise HTTPException(status_code=404, detail=str(e))
        except InvalidTileError as e:
            raise HTTPException(status_code=422, detail=str(e))
        except Exception as e:
            log.exception("tile query failed: %s", e)
            raise HTTPException(status_code=502, detail=f"tile source error: {e}")
        zoom = tile_queries[0].zxy.z if tile_queries else opts.zoom
        return {"zoom": zoom, "results": [s.to_dict() for s in samples]}

    return app


app = create_app()


# -------- local dev entrypoint --------
if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
