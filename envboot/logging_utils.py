from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from .lib.env import PATHS

DEFAULT_LOG_PATH = PATHS.log_default


def configure_logging(
    log_path: str = DEFAULT_LOG_PATH,
    level: int = logging.INFO,
    also_console: bool = True,
    console_level: int = logging.WARNING,
) -> str:
    """Configure logging.

    Every decision goes to the log file; the console only gets warnings by
    default since the report itself is printed to stdout.

    If the requested location is not writable we fall back to a file in the
    working directory. Returns the actual file path being used.
    """

    logger = logging.getLogger()
    logger.setLevel(min(level, console_level) if also_console else level)

    # Avoid duplicate handlers if configure_logging() is called multiple times.
    if getattr(logger, "_envboot_configured", False):
        return getattr(logger, "_envboot_log_path", log_path)

    chosen_path = log_path
    handlers: list[logging.Handler] = []

    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )

    file_handler: Optional[logging.Handler] = None
    try:
        Path(os.path.dirname(log_path) or ".").mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
    except OSError:
        chosen_path = str(Path.cwd() / "envboot.log")
        file_handler = logging.FileHandler(chosen_path, encoding="utf-8")
    file_handler.setFormatter(fmt)
    file_handler.setLevel(level)
    handlers.append(file_handler)

    if also_console:
        console = logging.StreamHandler()
        console.setFormatter(fmt)
        console.setLevel(console_level)
        handlers.append(console)

    for h in handlers:
        logger.addHandler(h)

    setattr(logger, "_envboot_configured", True)
    setattr(logger, "_envboot_log_path", chosen_path)

    logging.getLogger(__name__).info(
        "Logging initialized (requested=%s, actual=%s)", log_path, chosen_path
    )
    return chosen_path
