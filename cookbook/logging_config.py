from __future__ import annotations

import logging
import re

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

REDACTIONS = (
    (re.compile(r"Bearer\s+[A-Za-z0-9\-_.=:+/]+", re.IGNORECASE),
     "Bearer [REDACTED]"),
    (re.compile(r"(password|secret|token)\s*[:=]\s*([^\s,;]+)", re.IGNORECASE),
     r"\1=[REDACTED]"),
    (re.compile(r"[A-Za-z0-9_.+-]+@[A-Za-z0-9-]+\.[A-Za-z0-9-.]+"),
     "[REDACTED_EMAIL]"),
)


class RedactionFilter(logging.Filter):
    """Mask bearer tokens, secrets and e-mail addresses in log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        msg = redact(record.getMessage())
        record.msg = msg
        record.args = None
        return True


def redact(msg: str) -> str:
    for pattern, repl in REDACTIONS:
        msg = pattern.sub(repl, msg)
    return msg


def configure_logging(level: str = "INFO") -> None:
    lvl = logging.getLevelName(level.upper())
    if not isinstance(lvl, int):
        lvl = logging.INFO

    logger = logging.getLogger("cookbook")
    logger.setLevel(lvl)
    # configure once; uvicorn --reload re-imports the app
    if any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(RedactionFilter())
    logger.addHandler(handler)

    if lvl > logging.DEBUG:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
