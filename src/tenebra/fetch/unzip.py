from __future__ import annotations

import logging
import shutil
import zipfile
from pathlib import Path

from tenebra.errors import ArchiveError, UnsafeArchivePathError

logger = logging.getLogger(__name__)


def safe_member_path(dest: Path, member_name: str) -> Path:
    """
    Join an archive member name onto dest and reject anything that resolves
    outside of it ("../../evil.txt", "/etc/passwd", symlinked parents).
    """
    root = Path(dest).resolve()
    target = (root / member_name).resolve()
    if target == root or root not in target.parents:
        raise UnsafeArchivePathError(f"illegal file path: {member_name!r} escapes {root}")
    return target


def extract_zip(src: Path, dest: Path) -> list[Path]:
    """Extract every member of src under dest. Returns the files written."""
    written: list[Path] = []
    try:
        zf = zipfile.ZipFile(src)
    except zipfile.BadZipFile as e:
        raise ArchiveError(f"not a zip archive: {src}") from e

    with zf:
        for info in zf.infolist():
            target = safe_member_path(dest, info.filename)

            if info.is_dir():
                target.mkdir(parents=True, exist_ok=True)
                continue

            target.parent.mkdir(parents=True, exist_ok=True)
            try:
                with zf.open(info) as rc, target.open("wb") as out:
                    shutil.copyfileobj(rc, out)
            except (OSError, zipfile.BadZipFile, EOFError) as e:
                raise ArchiveError(f"failed to extract {info.filename!r} from {src}: {e}") from e
            written.append(target)

    logger.debug("[UNZIP] src=%s files=%d", src, len(written))
    return written
