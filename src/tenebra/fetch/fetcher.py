from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

import requests

from tenebra.common.io import write_bytes
from tenebra.errors import FetchError
from tenebra.fetch.unzip import extract_zip

logger = logging.getLogger(__name__)


def archive_filename(url: str) -> str:
    """Final path segment of the URL, e.g. ".../hackerone.zip" -> "hackerone.zip"."""
    name = urlparse(url).path.rsplit("/", 1)[-1]
    if not name or name in (".", ".."):
        raise FetchError(f"cannot derive a filename from {url}")
    return name


class Fetcher:
    # timeout_sec=None keeps requests' default (no timeout)
    def __init__(self, user_agent: str, timeout_sec: Optional[float] = None):
        self.ua = user_agent
        self.timeout = timeout_sec

    def get(self, url: str) -> requests.Response:
        try:
            r = requests.get(url, timeout=self.timeout, headers={"User-Agent": self.ua}, allow_redirects=True)
        except requests.RequestException as e:
            raise FetchError(f"failed to fetch {url}: {e}") from e
        if not 200 <= r.status_code < 300:
            raise FetchError(f"failed to fetch {url}: {r.status_code} {r.reason}")
        return r

    def download(self, url: str, output_dir: Path) -> Path:
        resp = self.get(url)
        return write_bytes(Path(output_dir) / archive_filename(url), resp.content)

    def fetch_and_extract(self, url: str, output_dir: Path) -> Path:
        """
        Download one archive into output_dir and unpack it there.

        The archive file is left on disk; removing it is post-processing's job.
        """
        archive = self.download(url, output_dir)
        extract_zip(archive, Path(output_dir))
        logger.info("[FETCH OK] %s", archive.name)
        return archive
