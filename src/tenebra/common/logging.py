from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(level: str = "INFO") -> None:
    lvl = logging.getLevelName(str(level).upper())
    if not isinstance(lvl, int):
        raise ValueError(f"unknown logging level: {level!r}")
    logging.basicConfig(level=lvl, format=LOG_FORMAT)
    logging.getLogger().setLevel(lvl)
    # requests' connection pool is noisy at INFO
    logging.getLogger("urllib3").setLevel(max(lvl, logging.WARNING))
