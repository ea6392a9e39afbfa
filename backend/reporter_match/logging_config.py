"""Process-wide logging setup. Modules call ``logging.getLogger(__name__)``."""

import logging

from reporter_match.config.settings import settings


def configure_logging(level: str | None = None, fmt: str | None = None) -> None:
    logging.basicConfig(
        level=(level or settings.LOG_LEVEL).upper(),
        format=fmt or settings.LOG_FORMAT,
    )
