# src/tenebra/pipeline/run.py
from __future__ import annotations

import logging
from typing import Optional

from tenebra.common.io import ensure_dir
from tenebra.fetch.fetcher import Fetcher
from tenebra.index.manifest import ManifestEntry
from tenebra.index.sync import SyncResult, synchronize
from tenebra.pipeline.orchestrator import FetchReport, run_fetches
from tenebra.pipeline.postprocess import PostProcessReport, finalize
from tenebra.settings import Cfg

logger = logging.getLogger(__name__)


def select_entries(entries: list[ManifestEntry], bounty_only: bool) -> list[ManifestEntry]:
    if not bounty_only:
        return list(entries)
    return [e for e in entries if e.bounty]


def sync_index(cfg: Cfg, fetcher: Optional[Fetcher] = None) -> SyncResult:
    fetcher = fetcher or Fetcher(cfg.user_agent, cfg.timeout_sec)
    return synchronize(cfg.index_url, cfg.cache_path, fetcher, side_path=cfg.side_path)


def postprocess(cfg: Cfg) -> PostProcessReport:
    return finalize(cfg.output_dir, cfg.merged_output, max_workers=cfg.max_workers, dedup=cfg.dedup)


def run_pipeline(
    cfg: Cfg,
    force: bool = False,
    fetcher: Optional[Fetcher] = None,
) -> Optional[FetchReport]:
    """
    synchronize -> fetch all -> post-process.

    Returns None when the index is unchanged (and force is False); nothing is
    downloaded in that case. IndexSyncError and output directory errors
    propagate to the caller.
    """
    ensure_dir(cfg.output_dir)
    fetcher = fetcher or Fetcher(cfg.user_agent, cfg.timeout_sec)

    result = sync_index(cfg, fetcher)
    if not result.changed and not force:
        logger.info("[RUN] index unchanged, skipping download")
        return None

    entries = select_entries(result.entries, cfg.bounty_only)
    logger.info(
        "[RUN] entries=%d selected=%d output_dir=%s",
        len(result.entries), len(entries), cfg.output_dir,
    )

    report = run_fetches(entries, cfg.output_dir, fetcher, max_workers=cfg.max_workers)
    post = postprocess(cfg)

    logger.info(
        "[RUN DONE] fetched=%d failed=%d zips_removed=%d empty_removed=%d merged_files=%d lines=%d",
        len(report.succeeded), len(report.failed),
        post.zips_removed, post.empty_removed, post.files_merged, post.lines_written,
    )
    return report
