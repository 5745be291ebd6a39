from __future__ import annotations

import os
from pathlib import Path


def ensure_dir(path: Path) -> Path:
    p = Path(path)
    p.mkdir(parents=True, exist_ok=True)
    return p


def write_bytes(path: Path, data: bytes) -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_bytes(data)
    return p


def replace_file(src: Path, dst: Path) -> None:
    # os.replace is atomic on the same filesystem: readers see old or new, never half
    os.replace(src, dst)


def top_level_files(directory: Path, suffix: str) -> list[Path]:
    """Regular files directly under `directory` with the given suffix, sorted by name."""
    return sorted(
        p for p in Path(directory).iterdir()
        if p.is_file() and p.suffix == suffix
    )
