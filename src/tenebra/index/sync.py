from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from tenebra.common.hashing import same_content
from tenebra.common.io import replace_file
from tenebra.errors import FetchError, IndexSyncError, ManifestError
from tenebra.fetch.fetcher import Fetcher
from tenebra.index.manifest import ManifestEntry, decode_manifest, newest_update, write_manifest

logger = logging.getLogger(__name__)


@dataclass
class SyncResult:
    entries: list[ManifestEntry]
    changed: bool


def fetch_manifest(fetcher: Fetcher, index_url: str) -> list[ManifestEntry]:
    resp = fetcher.get(index_url)
    return decode_manifest(resp.content)


def synchronize(
    index_url: str,
    cache_path: Path,
    fetcher: Fetcher,
    side_path: Path | None = None,
) -> SyncResult:
    """
    Fetch the remote index and reconcile it with the local cache.

    The fresh manifest is always written to a side file first and then either
    renamed over the cache (new or changed) or discarded (unchanged), so the
    cache is never half-written. The returned entries are the freshly fetched
    ones in both cases.

    Any failure raises IndexSyncError.
    """
    cache_path = Path(cache_path)
    side_path = Path(side_path) if side_path is not None else cache_path.with_name("new.json")

    try:
        entries = fetch_manifest(fetcher, index_url)
        write_manifest(side_path, entries)

        if not cache_path.exists():
            replace_file(side_path, cache_path)
            logger.info("[SYNC] created local manifest %s entries=%d", cache_path, len(entries))
            return SyncResult(entries=entries, changed=True)

        if not same_content(cache_path, side_path):
            replace_file(side_path, cache_path)
            logger.info(
                "[SYNC] updated local manifest %s entries=%d newest=%s",
                cache_path, len(entries), newest_update(entries),
            )
            return SyncResult(entries=entries, changed=True)

        side_path.unlink()
    except (FetchError, ManifestError, OSError) as e:
        side_path.unlink(missing_ok=True)
        raise IndexSyncError(f"index synchronisation from {index_url} failed: {e}") from e

    logger.info("[SYNC] local manifest %s is up-to-date", cache_path)
    return SyncResult(entries=entries, changed=False)
