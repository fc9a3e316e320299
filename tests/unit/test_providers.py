"""
Unit tests for the directory and HTTP tile loaders
"""

import asyncio
from unittest.mock import Mock

import pytest
import requests

from common.types import TileCoordinate
from tile_query.errors import TileNotFound
from tile_query.providers import DirectoryTileLoader, HttpTileLoader, loader_from_config

ZXY = TileCoordinate(3, 2, 5)


class TestDirectoryTileLoader:
    def test_reads_zxy_layout(self, tmp_path):
        p = tmp_path / "3" / "2" / "5.png"
        p.parent.mkdir(parents=True)
        p.write_bytes(b"png-bytes")

        loader = DirectoryTileLoader(str(tmp_path))
        assert loader.path_for(ZXY) == p
        assert asyncio.run(loader(ZXY)) == b"png-bytes"

    def test_missing_tile(self, tmp_path):
        loader = DirectoryTileLoader(str(tmp_path))
        with pytest.raises(TileNotFound) as ei:
            asyncio.run(loader(ZXY))
        assert ei.value.zxy == ZXY

    def test_extension(self, tmp_path):
        loader = DirectoryTileLoader(str(tmp_path), ext=".webp")
        assert loader.path_for(ZXY).name == "5.webp"


def _session(status=200, content=b"tile", text=""):
    resp = Mock()
    resp.status_code = status
    resp.content = content
    resp.text = text
    if status >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status} error")
    session = Mock()
    session.get.return_value = resp
    return session


class TestHttpTileLoader:
    def test_build_url(self):
        loader = HttpTileLoader("https://tiles.test/{z}/{x}/{y}.png", session=Mock())
        assert loader.build_url(ZXY) == "https://tiles.test/3/2/5.png"

    def test_requires_placeholders(self):
        with pytest.raises(ValueError, match="placeholders"):
            HttpTileLoader("https://tiles.test/tile.png", session=Mock())

    def test_success(self):
        session = _session(200, b"abc")
        loader = HttpTileLoader("https://tiles.test/{z}/{x}/{y}.png", session=session, timeout=2.5)
        assert asyncio.run(loader(ZXY)) == b"abc"
        session.get.assert_called_once_with("https://tiles.test/3/2/5.png", timeout=2.5)

    @pytest.mark.parametrize("status,content", [(404, b"Not Found"), (204, b""), (200, b"")])
    def test_not_found(self, status, content):
        loader = HttpTileLoader("https://tiles.test/{z}/{x}/{y}.png", session=_session(status, content))
        with pytest.raises(TileNotFound):
            asyncio.run(loader(ZXY))

    def test_server_error_propagates(self):
        loader = HttpTileLoader("https://tiles.test/{z}/{x}/{y}.png", session=_session(503, b"", "busy"))
        with pytest.raises(requests.HTTPError, match="503"):
            asyncio.run(loader(ZXY))

    def test_unexpected_status_without_raise(self):
        """Non-error statuses other than 200 still fail"""
        loader = HttpTileLoader("https://tiles.test/{z}/{x}/{y}.png", session=_session(302, b""))
        with pytest.raises(requests.HTTPError, match="unexpected status 302"):
            asyncio.run(loader(ZXY))


class TestLoaderFromConfig:
    def test_directory_default(self):
        loader = loader_from_config({"tiles": {"root": "some/dir", "url_template": ""}})
        assert isinstance(loader, DirectoryTileLoader)
        assert str(loader.root) == "some/dir"

    def test_url_template(self):
        loader = loader_from_config({"tiles": {"url_template": "http://t/{z}/{x}/{y}.png"}, "http": {"timeout": 3}})
        assert isinstance(loader, HttpTileLoader)
        assert loader.timeout == 3.0
