from __future__ import annotations

import logging
import sys

from plugdash.core.config import Settings

LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%dT%H:%M:%S"
HANDLER_NAME = "plugdash"


def _level_from_str(level: str) -> int:
    s = str(level or "").strip().upper()
    if not s:
        return logging.INFO
    if s.isdigit():
        return int(s)
    return logging.getLevelNamesMapping().get(s, logging.INFO)


def configure_logging(settings: Settings) -> logging.Logger:
    """Install a single stdout handler on the root logger.

    Safe to call more than once: a handler installed by an earlier call is
    replaced rather than duplicated.
    """
    level = _level_from_str(settings.log_level)
    root = logging.getLogger()
    root.setLevel(level)

    for handler in list(root.handlers):
        if handler.get_name() == HANDLER_NAME:
            root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT))
    handler.set_name(HANDLER_NAME)
    root.addHandler(handler)

    # httpx logs every request at INFO.
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))
    return logging.getLogger("plugdash")
