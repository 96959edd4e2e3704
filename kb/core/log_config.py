from __future__ import annotations

import logging
import sys

from kb.core.config import settings


def configure_logging(level: str | None = None) -> None:
    """Root logging setup shared by the API process and the maintenance scripts."""
    resolved = str(level or settings.LOG_LEVEL or "INFO").strip().upper()
    logging.basicConfig(
        level=getattr(logging, resolved, logging.INFO),
        format=settings.LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
