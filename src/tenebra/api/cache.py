from __future__ import annotations

import logging
import threading
from pathlib import Path

logger = logging.getLogger(__name__)


class SearchCache:
    """In-memory copy of the merged URL file, loaded once, queried by substring."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._urls: list[str] = []
        self._lock = threading.Lock()

    def load(self) -> int:
        with self._lock:
            try:
                with self.path.open("r", encoding="utf-8", errors="replace") as f:
                    self._urls = [line.rstrip("\r\n") for line in f]
            except OSError as e:
                logger.error("[CACHE] cannot read %s -> %s", self.path, e)
                self._urls = []
            n = len(self._urls)
        logger.info("[CACHE] loaded %d entries from %s", n, self.path)
        return n

    def search(self, query: str) -> list[str]:
        with self._lock:
            return [u for u in self._urls if query in u]

    def __len__(self) -> int:
        with self._lock:
            return len(self._urls)
