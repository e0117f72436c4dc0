"""Logging setup.

Logs go to stderr through rich; stdout stays reserved for command output
such as ``sunrise --format time``.
"""

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(
    level: str = "WARNING",
    verbose: bool = False,
    log_file: Path | None = None,
) -> None:
    """Configure the root logger.

    Args:
        level: Base log level name (from config)
        verbose: Force DEBUG level
        log_file: Optional file that receives a plain-text copy of the log
    """
    effective = logging.DEBUG if verbose else getattr(logging, level.upper(), logging.INFO)

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.setLevel(effective)

    console_handler = RichHandler(
        console=Console(stderr=True),
        show_path=verbose,
        rich_tracebacks=verbose,
        markup=False,
    )
    console_handler.setLevel(effective)
    root.addHandler(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        file_handler.setLevel(logging.DEBUG)
        root.addHandler(file_handler)

    # Client libraries are noisy at DEBUG
    for name in ("googleapiclient", "google_auth_oauthlib", "httpx", "httpcore"):
        logging.getLogger(name).setLevel(max(effective, logging.WARNING))
