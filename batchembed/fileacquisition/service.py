from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath
from typing import Optional, Tuple
from urllib.parse import urlparse

import httpx

from .errors import DownloadFailed, SourceNotFound

logger = logging.getLogger("fileacquisition.service")

DEFAULT_FILENAME = "downloaded_file"


def filename_from_url(url: str) -> str:
    name = PurePosixPath(urlparse(url).path).name
    return name or DEFAULT_FILENAME


class FileFetcher:
    """Resolves a file reference to bytes. Local paths win over URLs."""

    def __init__(self, *, timeout: float = 60.0, client: Optional[httpx.Client] = None) -> None:
        self._client = client or httpx.Client(timeout=timeout, follow_redirects=True)

    def fetch(self, ref: str) -> Tuple[bytes, str]:
        path = Path(ref)
        if path.is_file():
            try:
                return path.read_bytes(), path.name
            except OSError as e:
                raise DownloadFailed(f"failed to read {ref}: {e}")

        scheme = urlparse(ref).scheme.lower()
        if scheme not in ("http", "https"):
            raise SourceNotFound(f"file not found: {ref}")

        try:
            resp = self._client.get(ref)
        except httpx.HTTPError as e:
            raise DownloadFailed(f"failed to download {ref}: {e}")

        if resp.status_code != 200:
            raise DownloadFailed(f"failed to download: status {resp.status_code}", status_code=resp.status_code)

        logger.debug("download_completed url=%s bytes=%d", ref, len(resp.content))
        return resp.content, filename_from_url(ref)

    def close(self) -> None:
        self._client.close()
