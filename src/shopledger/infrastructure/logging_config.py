"""Process-wide logging setup for the CLI and the HTTP server."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT, force=True)
    # requests' connection pool is chatty at INFO
    logging.getLogger("urllib3").setLevel(logging.WARNING)
