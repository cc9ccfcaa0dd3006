"""
Logging setup for processes embedding the relay.

Library modules only create loggers; the embedding process calls
configure_logging() once on startup.
"""

import logging
import sys
from typing import Optional

from config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """Send records to stdout at the configured level."""
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format=LOG_FORMAT,
        stream=sys.stdout,
    )
