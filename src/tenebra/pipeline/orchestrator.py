from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path

from tenebra.fetch.fetcher import Fetcher
from tenebra.index.manifest import ManifestEntry

logger = logging.getLogger(__name__)


@dataclass
class FetchReport:
    succeeded: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return len(self.succeeded) + len(self.failed)


def run_fetches(
    entries: list[ManifestEntry],
    output_dir: Path,
    fetcher: Fetcher,
    max_workers: int = 8,
) -> FetchReport:
    """
    Fetch and extract every entry on a thread pool and wait for all of them.

    A failing entry is logged and recorded; it never stops the others.
    max_workers <= 0 means one worker per entry.
    """
    report = FetchReport()
    if not entries:
        return report

    workers = max_workers if max_workers > 0 else len(entries)
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = {
            executor.submit(fetcher.fetch_and_extract, e.url, output_dir): e
            for e in entries
        }
        for future in as_completed(futures):
            entry = futures[future]
            try:
                future.result()
            except Exception as ex:
                logger.error("[FETCH FAIL] name=%s url=%s -> %s", entry.name, entry.url, ex)
                report.failed[entry.url] = str(ex)
                continue
            report.succeeded.append(entry.url)

    logger.info(
        "[FETCH DONE] total=%d ok=%d failed=%d",
        report.total, len(report.succeeded), len(report.failed),
    )
    return report
