"""Utility functions for configuring global application logging."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

BASIC_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_global_logger(
    log_level: str | int = "INFO",
    app_name: str = "Application",
    *,
    force_basic_logging: bool = False,
) -> None:
    """
    Configure the global root logger with either RichHandler or basic logging.

    This function clears existing handlers on the root logger, sets the specified
    log level, and installs a RichHandler writing to stderr unless basic logging
    is forced, in which case a plain formatted stream handler is used.

    Args:
        log_level (str | int, optional): The logging level to set for the root logger.
            Defaults to "INFO".
        app_name (str, optional): The name of the application, used in the initial
            log message. Defaults to "Application".
        force_basic_logging (bool, optional): If True, use plain formatted logging
            instead of Rich. Defaults to False.
    """
    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)
    logging.root.setLevel(log_level)

    initial_logger = logging.getLogger(app_name) if app_name else logging.root
    initial_logger.setLevel(log_level)

    if force_basic_logging:
        logging.basicConfig(level=log_level, format=BASIC_LOG_FORMAT, force=True)
        initial_logger.debug(f"Starting {app_name} (using standard logging)")
        return

    rich_handler = RichHandler(
        level=log_level,
        show_path=False,
        show_level=True,
        show_time=True,
        rich_tracebacks=True,
        tracebacks_show_locals=False,
        markup=True,
        console=Console(stderr=True),
    )
    logging.root.addHandler(rich_handler)
    initial_logger.debug(f"Starting {app_name} [bold green](using Rich logging)[/bold green]")
