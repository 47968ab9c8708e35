"""
SSOConfig - SSO session management for the shared credentials config file.

Logging setup and error reporting for the CLI.
"""

import logging
import time
import traceback
from pathlib import Path
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel

console = Console(stderr=True)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class _SkipDisplayed(logging.Filter):
    """Drops records that were already shown to the user as a panel."""

    def filter(self, record: logging.LogRecord) -> bool:
        return not getattr(record, "displayed", False)


def setup_logging(level: str = "WARNING", log_file: Optional[Path] = None) -> logging.Logger:
    """
    Configure the ``ssoconfig`` logger.

    Args:
        level: Console log level name
        log_file: Optional file that receives ERROR records

    Returns:
        The package logger
    """
    logger = logging.getLogger("ssoconfig")
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = RichHandler(console=console, show_path=False, rich_tracebacks=False)
    console_handler.setLevel(getattr(logging, level.upper(), logging.WARNING))
    console_handler.addFilter(_SkipDisplayed())
    logger.addHandler(console_handler)

    if log_file:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file)
            file_handler.setLevel(logging.ERROR)
            file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
            logger.addHandler(file_handler)
        except OSError as e:
            logger.warning(f"Error setting up log file {log_file}: {str(e)}")

    return logger


class ErrorHandler:
    """
    Logs failures and shows them to the user.

    Keeps a history of the errors reported during this invocation.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger("ssoconfig.error_handler")
        self.error_history: List[Dict[str, Any]] = []

    def log_error(
        self,
        error_message: str,
        error_type: str = "general",
        context: Dict[str, Any] = None,
        displayed: bool = False,
    ) -> None:
        """
        Record an error and send it to the logger.

        Args:
            error_message: The error message to log
            error_type: Type of error
            context: Additional context for the error
            displayed: Whether the user already sees this error as a panel
        """
        tb = traceback.format_exc()
        error_record = {
            "message": error_message,
            "type": error_type,
            "context": context or {},
            "timestamp": time.time(),
            "traceback": tb if tb != "NoneType: None\n" else None,
        }
        self.error_history.append(error_record)

        self.logger.error(f"{error_type} error: {error_message}", extra={"displayed": displayed})
        if context:
            self.logger.debug(f"Error context: {context}")
        if error_record["traceback"]:
            self.logger.debug(f"Traceback:\n{error_record['traceback']}")

    def display_error(self, error_message: str, error_type: str = "general") -> None:
        """Show an error panel on stderr."""
        panel = Panel(
            escape(error_message),
            title=f"{error_type.capitalize()} Error",
            title_align="left",
            border_style="red"
        )
        console.print(panel)

    def report(self, error_message: str, error_type: str = "general", context: Dict[str, Any] = None) -> None:
        self.log_error(error_message, error_type, context, displayed=True)
        self.display_error(error_message, error_type)

    def get_error_history(self, limit: int = None) -> List[Dict[str, Any]]:
        if limit is None:
            return self.error_history
        return self.error_history[-limit:]
