from __future__ import annotations

import logging
import sys


_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: str = "INFO") -> None:
    resolved = logging.getLevelName(level.strip().upper()) if level else logging.INFO
    if not isinstance(resolved, int):
        resolved = logging.INFO
    logging.basicConfig(
        level=resolved,
        format=_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    logging.getLogger().setLevel(resolved)
    # httpx 在 INFO 级别记录每个请求，worker 已记录每次结果
    logging.getLogger("httpx").setLevel(max(resolved, logging.WARNING))
