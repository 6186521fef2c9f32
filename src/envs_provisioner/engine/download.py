"""HTTP downloads of installers and archives."""

from __future__ import annotations

import contextlib
import logging
from typing import TYPE_CHECKING

import requests

from envs_provisioner.engine.errors import DownloadError

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 1024 * 1024


class Downloader:
    """Stream URLs to local files through a shared ``requests`` session."""

    def __init__(self, session: requests.Session | None = None, *, timeout: float = 60) -> None:
        self._session = session or requests.Session()
        self._timeout = timeout

    def fetch(self, url: str, dest: Path) -> Path:
        """Download *url* to *dest*, replacing any partial file on failure."""
        dest.parent.mkdir(parents=True, exist_ok=True)
        logger.info("Downloading %s", url)
        try:
            with self._session.get(url, stream=True, timeout=self._timeout) as resp:
                resp.raise_for_status()
                with dest.open("wb") as f:
                    for chunk in resp.iter_content(chunk_size=_CHUNK_SIZE):
                        f.write(chunk)
        except requests.RequestException as exc:
            with contextlib.suppress(FileNotFoundError):
                dest.unlink()
            raise DownloadError(url, str(exc)) from exc
        return dest

    def fetch_cached(self, url: str, dest: Path) -> Path:
        """Download *url* to *dest* unless *dest* already exists."""
        if dest.exists():
            logger.debug("Using cached %s", dest)
            return dest
        return self.fetch(url, dest)
