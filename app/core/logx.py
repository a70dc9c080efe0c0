import logging
import sys

from app.core.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def _build_logger(name: str = "forumhub") -> logging.Logger:
    """全项目共用一个 logger，重复 import 不会重复挂 handler"""
    log = logging.getLogger(name)
    if not log.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        log.addHandler(handler)
    log.setLevel(settings.log_level.upper())
    log.propagate = False
    return log


logger = _build_logger()
