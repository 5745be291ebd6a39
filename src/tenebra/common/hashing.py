from __future__ import annotations

import hashlib
from pathlib import Path


def sha256_hex(data: bytes) -> str:
    h = hashlib.sha256()
    h.update(data)
    return h.hexdigest()


def file_sha256(path: Path) -> str:
    return sha256_hex(Path(path).read_bytes())


def same_content(a: Path, b: Path) -> bool:
    return file_sha256(a) == file_sha256(b)
