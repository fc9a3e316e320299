"""
Unit tests for grouping query points by tile
"""

import random

from common.geo import get_projection
from common.types import TileCoordinate, TileStatus
from tile_query.partition import build_query


class TestBuildQuery:
    def test_two_points_same_coarse_tile(self):
        """Nearby points at z1 share one tile"""
        out = build_query([(39.0, -121.0), (39.01, -121.01)], 1)
        assert len(out) == 1
        tq = out[0]
        assert tq.zxy == TileCoordinate(1, 0, 0)
        assert tq.point_ids == [0, 1]
        assert tq.points == [(-121.0, 39.0), (-121.01, 39.01)]
        assert tq.status is TileStatus.PENDING
        assert tq.data is None

    def test_two_points_far_apart(self):
        out = build_query([(39.0, -121.0), (-39.0, 121.0)], 1)
        assert [tq.zxy for tq in out] == [TileCoordinate(1, 0, 0), TileCoordinate(1, 1, 1)]
        assert [tq.point_ids for tq in out] == [[0], [1]]

    def test_first_seen_order(self):
        pts = [(39.0, -121.0), (-39.0, 121.0), (38.0, -120.0)]
        out = build_query(pts, 1)
        assert [tq.zxy for tq in out] == [TileCoordinate(1, 0, 0), TileCoordinate(1, 1, 1)]
        assert out[0].point_ids == [0, 2]
        assert out[1].point_ids == [1]

    def test_tile_key(self):
        out = build_query([(39.0, -121.0)], 1)
        assert out[0].zxy.key == "1/0/0"

    def test_is_partition(self):
        """Every id appears once and each point's tile contains it"""
        rng = random.Random(7)
        pts = [(rng.uniform(-60, 60), rng.uniform(-170, 170)) for _ in range(300)]
        zoom = 6
        out = build_query(pts, zoom)
        sm = get_projection(256)

        ids = [i for tq in out for i in tq.point_ids]
        assert sorted(ids) == list(range(len(pts)))
        assert len({tq.zxy for tq in out}) == len(out)

        for tq in out:
            assert len(tq.points) == len(tq.point_ids)
            for (lng, lat), i in zip(tq.points, tq.point_ids):
                assert (lat, lng) == pts[i]
                px, py = sm.px(lng, lat, zoom)
                ox, oy = sm.tile_origin(tq.zxy.x, tq.zxy.y)
                assert 0 <= px - ox < 256
                assert 0 <= py - oy < 256

    def test_tile_index_independent_of_tile_size(self):
        """Tiles of any size cover the same area at a given zoom"""
        pt = [(39.0, -121.0)]
        assert build_query(pt, 10, 256)[0].zxy == build_query(pt, 10, 512)[0].zxy
