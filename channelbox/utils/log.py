"""
Loguru setup: stderr plus a rotating file under the app data dir.
"""

from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger


LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{line} | {message}"


def setup_logging(log_dir: Path, level: str = "INFO") -> Path:
    """
    Replace loguru's default handler with console + file sinks.

    Args:
        log_dir: Directory for channelbox.log (created if missing)
        level: Minimum level for both sinks (DEBUG, INFO, WARNING, ERROR)

    Returns:
        Path of the log file
    """
    logger.remove()
    logger.add(sys.stderr, level=level, format=LOG_FORMAT)

    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "channelbox.log"
    logger.add(
        log_file,
        rotation="10 MB",
        retention=5,
        level=level,
        format=LOG_FORMAT,
        enqueue=True,
    )

    logger.info(f"Logging initialized: {log_file} (level={level})")
    return log_file
