# src/tenebra/settings.py
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

DEFAULT_INDEX_URL = "https://chaos-data.projectdiscovery.io/index.json"
DEFAULT_PORT = 1991


@dataclass
class Cfg:
    # index
    index_url: str
    cache_path: Path           # absolute path
    side_path: Path            # absolute path

    # storage
    work_dir: Path
    output_dir: Path           # absolute path
    merged_output: Path        # absolute path

    # fetch
    user_agent: str
    timeout_sec: Optional[float]

    # pipeline
    max_workers: int
    bounty_only: bool

    # merge
    dedup: bool

    # service
    host: str
    port: int

    # logging
    log_level: str


def _as_rooted_path(root: Path, p: str | Path) -> Path:
    """Resolve a possibly-relative path under root."""
    pp = Path(p)
    return pp if pp.is_absolute() else (root / pp)


def _section(obj: Dict[str, Any], name: str) -> Dict[str, Any]:
    sec = obj.get(name, {}) or {}
    if not isinstance(sec, dict):
        raise ValueError(f"{name} must be a mapping (YAML dict)")
    return sec


def _as_int(v: Any, name: str, min_value: Optional[int] = None, max_value: Optional[int] = None) -> int:
    if isinstance(v, bool):
        raise ValueError(f"{name} must be an integer")
    try:
        iv = int(v)
    except (TypeError, ValueError) as e:
        raise ValueError(f"{name} must be an integer") from e
    if min_value is not None and iv < min_value:
        raise ValueError(f"{name} must be >= {min_value}")
    if max_value is not None and iv > max_value:
        raise ValueError(f"{name} must be <= {max_value}")
    return iv


def _as_bool(v: Any, name: str) -> bool:
    if not isinstance(v, bool):
        raise ValueError(f"{name} must be boolean")
    return v


def _require_nonempty_str(v: Any, name: str) -> str:
    if not isinstance(v, str) or not v.strip():
        raise ValueError(f"{name} must be a non-empty string")
    return v


def load_cfg(path: str | Path | None = None) -> Cfg:
    """
    Load YAML -> Cfg.

    A missing file (or path=None) yields the defaults. Relative paths are
    rooted under storage.work_dir. The PORT environment variable overrides
    service.port.
    """
    obj: Dict[str, Any] = {}
    if path is not None and Path(path).exists():
        obj = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(obj, dict):
        raise ValueError("config root must be a mapping (YAML dict)")

    index = _section(obj, "index")
    storage = _section(obj, "storage")
    fetch = _section(obj, "fetch")
    pipeline = _section(obj, "pipeline")
    merge = _section(obj, "merge")
    service = _section(obj, "service")
    logging_ = _section(obj, "logging")

    work_dir = Path(storage.get("work_dir", "."))

    timeout = fetch.get("timeout_sec")
    if timeout is not None:
        try:
            timeout = float(timeout)
        except (TypeError, ValueError) as e:
            raise ValueError("fetch.timeout_sec must be a number or null") from e
        if timeout <= 0:
            raise ValueError("fetch.timeout_sec must be > 0")

    port = os.environ.get("PORT") or service.get("port", DEFAULT_PORT)

    return Cfg(
        # index
        index_url=_require_nonempty_str(index.get("url", DEFAULT_INDEX_URL), "index.url"),
        cache_path=_as_rooted_path(work_dir, index.get("cache_path", "input.json")),
        side_path=_as_rooted_path(work_dir, index.get("side_path", "new.json")),

        # storage
        work_dir=work_dir,
        output_dir=_as_rooted_path(work_dir, storage.get("output_dir", "output")),
        merged_output=_as_rooted_path(work_dir, storage.get("merged_output", "tenebra.txt")),

        # fetch
        user_agent=_require_nonempty_str(fetch.get("user_agent", "tenebra/0.1"), "fetch.user_agent"),
        timeout_sec=timeout,

        # pipeline
        max_workers=_as_int(pipeline.get("max_workers", 8), "pipeline.max_workers", min_value=0),
        bounty_only=_as_bool(pipeline.get("bounty_only", False), "pipeline.bounty_only"),

        # merge
        dedup=_as_bool(merge.get("dedup", False), "merge.dedup"),

        # service
        host=_require_nonempty_str(service.get("host", "0.0.0.0"), "service.host"),
        port=_as_int(port, "service.port", min_value=1, max_value=65535),

        # logging
        log_level=_require_nonempty_str(logging_.get("level", "INFO"), "logging.level"),
    )
