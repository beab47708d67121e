"""
Logging utilities for the command engine.
Uses Rich for colored console output.

Every logger lives under the ``chatcmd`` namespace and shares one handler,
so the bot's DEBUG setting switches the whole engine at once.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

ROOT_LOGGER = "chatcmd"

# Custom theme for logging
CUSTOM_THEME = Theme({
    "logging.level.success": "green",
    "logging.level.command": "cyan",
    "logging.level.debug": "dim cyan",
})

console = Console(theme=CUSTOM_THEME)


def setup_logging(level: Optional[int] = None, debug: bool = False) -> logging.Logger:
    """
    Configure the engine's root logger with a RichHandler.

    Calling it again replaces the handler, so it is safe to call once the
    real configuration is known.

    Args:
        level: Logging level (default: INFO, or DEBUG when ``debug`` is set)
        debug: Shortcut for ``level=logging.DEBUG``

    Returns:
        The ``chatcmd`` root logger
    """
    if level is None:
        level = logging.DEBUG if debug else logging.INFO

    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(level)
    root.propagate = False
    root.handlers = []

    handler = RichHandler(
        console=console,
        show_time=True,
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter(fmt="[%(name)s] %(message)s", datefmt="%H:%M:%S"))
    root.addHandler(handler)

    return root


def get_logger(name: str) -> logging.Logger:
    """
    Get a component logger such as ``chatcmd.CommandRegistry``.

    The root logger is configured with defaults on first use.
    """
    if not logging.getLogger(ROOT_LOGGER).handlers:
        setup_logging()
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


class LoggerMixin:
    """Mixin class that provides logger functionality."""

    def __init__(self, name: str):
        self._logger = get_logger(name)

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def debug(self, message: str) -> None:
        self._logger.debug(message)

    def info(self, message: str) -> None:
        self._logger.info(message)

    def warning(self, message: str) -> None:
        self._logger.warning(message)

    def error(self, message: str) -> None:
        self._logger.error(message)

    def success(self, message: str) -> None:
        """Log success message (info level with a [SUCCESS] tag)."""
        self._logger.info(f"[SUCCESS] {message}")
