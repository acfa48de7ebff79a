"""Logging setup applied once at application start."""

import logging

_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def configure_logging(level: str = "INFO") -> None:
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=log_level, format=_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    # SQL echo is controlled by settings.DEBUG, keep the driver quiet otherwise
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
