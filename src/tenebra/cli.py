from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional

import yaml

from tenebra.api.server import run_server
from tenebra.common.logging import setup_logging
from tenebra.errors import IndexSyncError
from tenebra.pipeline.run import postprocess, run_pipeline, sync_index
from tenebra.settings import load_cfg

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="tenebra", description="Bug bounty scope index: download, merge, search")
    p.add_argument("--config", default="configs/tenebra.yaml", help="Path to config YAML (defaults apply if missing)")
    sub = p.add_subparsers(dest="cmd", required=True)
    run = sub.add_parser("run", help="sync -> fetch -> merge, then serve /search")
    run.add_argument("--force", action="store_true", help="Fetch even if the index is unchanged")
    sub.add_parser("sync", help="Sync the local index cache only")
    fetch = sub.add_parser("fetch", help="sync -> fetch -> merge, no server")
    fetch.add_argument("--force", action="store_true", help="Fetch even if the index is unchanged")
    sub.add_parser("postprocess", help="Clean the output directory and rebuild the merged file")
    sub.add_parser("serve", help="Serve /search over the existing merged file")
    return p


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        cfg = load_cfg(args.config)
        setup_logging(cfg.log_level)
    except (ValueError, yaml.YAMLError) as e:
        logger.error("[FATAL] config %s: %s", args.config, e)
        return 1

    try:
        if args.cmd == "sync":
            result = sync_index(cfg)
            print(f"[SYNC DONE] entries={len(result.entries)} changed={result.changed}")
        elif args.cmd in ("run", "fetch"):
            run_pipeline(cfg, force=args.force)
        elif args.cmd == "postprocess":
            postprocess(cfg)
    except IndexSyncError as e:
        logger.error("[FATAL] %s", e)
        return 1
    except OSError as e:
        logger.error("[FATAL] output directory %s: %s", cfg.output_dir, e)
        return 1

    if args.cmd in ("run", "serve"):
        run_server(cfg)
    return 0


if __name__ == "__main__":
    sys.exit(main())
