"""
Hyperion logging.

All bridge modules log through ``get_logger(__name__)``. The first call wires a
rich console handler (and optionally a rotating file) onto the ``hyperion``
logger; later calls just hand out children of it.

    >>> from hyperion.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("Valset 3 accepted")
"""

import logging
import logging.handlers
import re
import sys
import threading
from pathlib import Path
from typing import Union

from rich.console import Console
from rich.highlighter import RegexHighlighter
from rich.logging import RichHandler
from rich.theme import Theme

from .constants import (
    LOG_BACKUP_COUNT,
    LOG_CONSOLE_HIGHLIGHTING,
    LOG_DATE_FORMAT,
    LOG_FILE_NAME,
    LOG_FILE_OUTPUT,
    LOG_FORMAT,
    LOG_LEVEL,
    LOG_MAX_FILE_SIZE,
)

ROOT_LOGGER_NAME = "hyperion"

_setup_lock = threading.Lock()
_handlers_installed = False

# Control characters other than tab are stripped so a crafted memo or denom
# cannot forge extra log lines.
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0a-\x1f\x7f]")


class BridgeHighlighter(RegexHighlighter):
    """Colors addresses, 32-byte hashes and nonces in console output."""

    base_style = "bridge."
    highlights = [
        r"(?P<hash>0x[0-9a-fA-F]{64})",
        r"(?P<address>0x[0-9a-fA-F]{40})(?![0-9a-fA-F])",
        r"(?P<nonce>\b\w*nonce=\d+)",
        r"(?P<revert>\bRevert\b|\breverted\b)",
    ]


BRIDGE_THEME = Theme({
    "bridge.hash": "magenta",
    "bridge.address": "cyan",
    "bridge.nonce": "bold yellow",
    "bridge.revert": "bold red",
    "logging.level.debug": "dim",
    "logging.level.info": "green",
    "logging.level.warning": "yellow",
    "logging.level.error": "bold red",
    "logging.level.critical": "bold white on red",
})


class SanitizingFormatter(logging.Formatter):
    # tracebacks are appended after formatMessage and keep their newlines
    def formatMessage(self, record: logging.LogRecord) -> str:
        return _CONTROL_CHARS.sub("?", super().formatMessage(record))


def _level_value(level: Union[str, int]) -> int:
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.upper())
    return value if isinstance(value, int) else logging.INFO


def _console_handler() -> logging.Handler:
    console = Console(file=sys.stderr, theme=BRIDGE_THEME, soft_wrap=True)
    handler = RichHandler(
        console=console,
        highlighter=BridgeHighlighter() if LOG_CONSOLE_HIGHLIGHTING else None,
        show_path=False,
        rich_tracebacks=True,
        log_time_format=LOG_DATE_FORMAT,
    )
    handler.setFormatter(SanitizingFormatter("%(name)s - %(message)s"))
    return handler


def _file_handler() -> logging.Handler:
    path = Path(LOG_FILE_NAME)
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        path,
        maxBytes=LOG_MAX_FILE_SIZE,
        backupCount=LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setFormatter(SanitizingFormatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    return handler


def _install_handlers() -> None:
    global _handlers_installed
    with _setup_lock:
        if _handlers_installed:
            return
        root = logging.getLogger(ROOT_LOGGER_NAME)
        root.setLevel(_level_value(LOG_LEVEL))
        root.propagate = False
        root.addHandler(_console_handler())
        if LOG_FILE_OUTPUT:
            root.addHandler(_file_handler())
        _handlers_installed = True


def set_level(level: Union[str, int]) -> None:
    """Change the level of every hyperion logger at once."""
    _install_handlers()
    logging.getLogger(ROOT_LOGGER_NAME).setLevel(_level_value(level))


def get_logger(name: str) -> logging.Logger:
    """
    Return a logger under the ``hyperion`` hierarchy.

    Names outside the package (``__main__``, test modules) are nested under
    ``hyperion`` so they share its handlers.
    """
    _install_handlers()
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)
