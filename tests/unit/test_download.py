from pathlib import Path
from unittest.mock import MagicMock

import pytest
import requests

from envs_provisioner.engine.download import Downloader
from envs_provisioner.engine.errors import DownloadError


def _session(chunks: list[bytes] | None = None, error: Exception | None = None) -> MagicMock:
    session = MagicMock(spec=requests.Session)
    resp = MagicMock()
    resp.__enter__.return_value = resp
    if error is not None:
        resp.raise_for_status.side_effect = error
    resp.iter_content.return_value = iter(chunks or [])
    session.get.return_value = resp
    return session


def test_fetch_streams_to_file(tmp_path: Path) -> None:
    session = _session([b"abc", b"def"])
    dest = tmp_path / "sub" / "get-pip.py"

    result = Downloader(session, timeout=5).fetch("https://example.org/get-pip.py", dest)

    assert result == dest
    assert dest.read_bytes() == b"abcdef"
    session.get.assert_called_once_with("https://example.org/get-pip.py", stream=True, timeout=5)


def test_fetch_http_error_removes_partial_file(tmp_path: Path) -> None:
    session = _session(error=requests.HTTPError("404 Client Error"))
    dest = tmp_path / "python.msi"
    dest.write_bytes(b"partial")

    with pytest.raises(DownloadError, match="404"):
        Downloader(session).fetch("https://example.org/python.msi", dest)

    assert not dest.exists()


def test_fetch_connection_error(tmp_path: Path) -> None:
    session = MagicMock(spec=requests.Session)
    session.get.side_effect = requests.ConnectionError("refused")

    with pytest.raises(DownloadError) as exc_info:
        Downloader(session).fetch("https://example.org/a.zip", tmp_path / "a.zip")

    assert exc_info.value.url == "https://example.org/a.zip"


def test_fetch_cached_skips_existing(tmp_path: Path) -> None:
    session = _session([b"new"])
    dest = tmp_path / "installer.sh"
    dest.write_bytes(b"old")

    assert Downloader(session).fetch_cached("https://example.org/installer.sh", dest) == dest

    session.get.assert_not_called()
    assert dest.read_bytes() == b"old"


def test_fetch_cached_downloads_missing(tmp_path: Path) -> None:
    session = _session([b"new"])
    dest = tmp_path / "installer.sh"

    Downloader(session).fetch_cached("https://example.org/installer.sh", dest)

    assert dest.read_bytes() == b"new"
