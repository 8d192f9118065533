"""Process logging setup."""

from __future__ import annotations

import logging
import os

# Third-party loggers that are chatty at INFO (polling, one line per HTTP request).
_QUIET_LOGGERS: tuple[str, ...] = ("aiogram.event", "httpx", "httpcore")


def configure_logging(level: str | None = None) -> None:
    """Configure root logging once at startup.

    The level comes from the argument, then `LOG_LEVEL`, then defaults to INFO. Log lines are for
    operators only; nothing logged here is ever echoed into a chat reply.
    """

    log_level = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
