"""Loguru sink configuration"""

import sys
from pathlib import Path

from loguru import logger


def setup_logging(level: str = "INFO", log_dir: str | Path | None = "logs") -> None:
    """Route logs to stderr and, when ``log_dir`` is set, a rotating file

    Args:
        level: Minimum level for both sinks
        log_dir: Directory for daily log files; None disables the file sink
    """
    logger.remove()
    logger.add(sys.stderr, level=level)

    if log_dir is not None:
        logger.add(
            str(Path(log_dir) / "topstepx_{time}.log"),
            rotation="1 day",
            retention="30 days",
            compression="gz",
            level=level,
        )
