# /teacherboard/core/logging_config.py

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """Configures root logging once for the whole application."""
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)
    # SQLAlchemy's engine logger is noisy at INFO.
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
