from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from tenebra.common.io import top_level_files

logger = logging.getLogger(__name__)

WILDCARD = "*"


@dataclass
class PostProcessReport:
    zips_removed: int = 0
    empty_removed: int = 0
    files_merged: int = 0
    lines_written: int = 0
    errors: list[str] = field(default_factory=list)


def remove_zip_files(directory: Path) -> int:
    """Delete *.zip files directly under directory (not recursive)."""
    removed = 0
    for p in top_level_files(directory, ".zip"):
        p.unlink()
        removed += 1
        logger.info("[CLEANUP] removed archive %s", p.name)
    return removed


def _workers(max_workers: int, n: int) -> int:
    return max_workers if max_workers > 0 else max(n, 1)


def remove_empty_txt_files(directory: Path, max_workers: int = 8) -> int:
    """Concurrently delete zero-byte *.txt files directly under directory."""
    paths = top_level_files(directory, ".txt")
    lock = threading.Lock()

    def _check(p: Path) -> bool:
        with lock:
            try:
                if p.stat().st_size != 0:
                    return False
                p.unlink()
            except OSError as e:
                logger.error("[CLEANUP FAIL] path=%s -> %s", p, e)
                return False
        logger.info("[CLEANUP] removed empty file %s", p.name)
        return True

    if not paths:
        return 0
    with ThreadPoolExecutor(max_workers=_workers(max_workers, len(paths))) as executor:
        return sum(executor.map(_check, paths))


def read_and_filter_urls(path: Path) -> list[str]:
    """Lines of path, minus those starting with the wildcard marker."""
    out: list[str] = []
    with path.open("r", encoding="utf-8", errors="replace") as f:
        for line in f:
            url = line.rstrip("\r\n")
            if not url.startswith(WILDCARD):
                out.append(url)
    return out


def merge_url_files(
    directory: Path,
    output_file: Path,
    max_workers: int = 8,
    dedup: bool = False,
) -> tuple[int, int]:
    """
    Merge every top-level *.txt under directory into output_file.

    Files are read concurrently; results are collected in sorted file order so
    the output is stable across runs. Cross-file duplicates are kept unless
    dedup=True. Returns (files_merged, lines_written).
    """
    output_file = Path(output_file)
    out_resolved = output_file.resolve()
    paths = [p for p in top_level_files(directory, ".txt") if p.resolve() != out_resolved]

    def _read(p: Path) -> Optional[list[str]]:
        try:
            return read_and_filter_urls(p)
        except OSError as e:
            logger.error("[MERGE FAIL] path=%s -> %s", p, e)
            return None

    merged: list[str] = []
    files_merged = 0
    if paths:
        with ThreadPoolExecutor(max_workers=_workers(max_workers, len(paths))) as executor:
            for urls in executor.map(_read, paths):
                if urls is None:
                    continue
                files_merged += 1
                merged.extend(urls)

    if dedup:
        # de-duplicate while preserving order
        seen: set[str] = set()
        uniq: list[str] = []
        for u in merged:
            if u not in seen:
                uniq.append(u)
                seen.add(u)
        merged = uniq

    output_file.parent.mkdir(parents=True, exist_ok=True)
    with output_file.open("w", encoding="utf-8", newline="\n") as f:
        for u in merged:
            f.write(u + "\n")

    logger.info("[MERGE] files=%d lines=%d out=%s", files_merged, len(merged), output_file)
    return files_merged, len(merged)


def finalize(
    directory: Path,
    output_file: Path,
    max_workers: int = 8,
    dedup: bool = False,
) -> PostProcessReport:
    """Remove archives, remove empty text files, merge. Each step runs even if the previous one failed."""
    report = PostProcessReport()

    try:
        report.zips_removed = remove_zip_files(directory)
    except OSError as e:
        logger.error("[POSTPROCESS FAIL] step=remove_zip -> %s", e)
        report.errors.append(f"remove_zip: {e}")

    try:
        report.empty_removed = remove_empty_txt_files(directory, max_workers=max_workers)
    except OSError as e:
        logger.error("[POSTPROCESS FAIL] step=remove_empty -> %s", e)
        report.errors.append(f"remove_empty: {e}")

    try:
        report.files_merged, report.lines_written = merge_url_files(
            directory, output_file, max_workers=max_workers, dedup=dedup
        )
    except OSError as e:
        logger.error("[POSTPROCESS FAIL] step=merge -> %s", e)
        report.errors.append(f"merge: {e}")

    return report
