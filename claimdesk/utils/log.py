"""Logging setup shared by the CLI and the API server."""

import logging
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Libraries that log every request/connection at DEBUG
NOISY_LOGGERS = ("httpcore", "httpx", "python_multipart", "uvicorn.access")


def setup_logging(verbose: bool = False, level: Optional[str] = None) -> None:
    """Setup logging configuration."""
    if verbose:
        resolved = logging.DEBUG
    else:
        resolved = getattr(logging, (level or "INFO").upper(), logging.INFO)

    logging.basicConfig(level=resolved, format=LOG_FORMAT)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
