"""
Logging for Camcorder.

Example:
    from camcorder.logging import get_logger

    logger = get_logger(__name__)
    logger.info("Launching capture process")
    logger.warning("Capture process already exited")
    logger.error("Discovery failed", exc_info=True)
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.theme import Theme

CAMCORDER_THEME = Theme({
    "log.time": "dim cyan",
    "log.level.debug": "dim blue",
    "log.level.info": "green",
    "log.level.warning": "yellow",
    "log.level.error": "bold red",
    "log.level.critical": "bold white on red",
    "camcorder.success": "bold green",
    "camcorder.command": "bold cyan",
    "camcorder.state": "magenta",
    "camcorder.countdown": "bold yellow",
    "camcorder.dry_run": "cyan",
})

console = Console(theme=CAMCORDER_THEME, stderr=True)

_initialized = False


def setup_logging(
    level: str = "INFO",
    show_time: bool = True,
    show_path: bool = False,
    rich_tracebacks: bool = True,
) -> None:
    """
    Initialize Camcorder's logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        show_time: Show timestamps in log output
        show_path: Show file path in log output
        rich_tracebacks: Use rich formatting for tracebacks

    Note:
        Only the first call installs a handler.
    """
    global _initialized

    if _initialized:
        return

    numeric_level = getattr(logging, level.upper(), logging.INFO)

    handler = RichHandler(
        console=console,
        show_time=show_time,
        show_path=show_path,
        rich_tracebacks=rich_tracebacks,
        markup=True,
        tracebacks_show_locals=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))

    logging.basicConfig(
        level=numeric_level,
        handlers=[handler],
        force=True,
    )

    _initialized = True


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a given module.

    Args:
        name: Logger name (typically __name__)
    """
    if not _initialized:
        setup_logging()

    return logging.getLogger(name)


class CamcorderLogger:
    """
    Camcorder-specific logger.

    Wraps the standard logger with helpers for commands, session
    transitions and the start countdown.
    """

    def __init__(self, name: str):
        self.logger = get_logger(name)
        self.console = console

    def debug(self, message: str, **kwargs) -> None:
        """Log debug message."""
        self.logger.debug(message, **kwargs)

    def info(self, message: str, **kwargs) -> None:
        """Log info message."""
        self.logger.info(message, **kwargs)

    def warning(self, message: str, **kwargs) -> None:
        """Log warning message."""
        self.logger.warning(message, **kwargs)

    def error(self, message: str, **kwargs) -> None:
        """Log error message."""
        self.logger.error(message, **kwargs)

    def success(self, message: str) -> None:
        """Print a success line."""
        self.console.print(f"[camcorder.success]✓[/camcorder.success] {escape(message)}")

    def command(self, label: str, command: str) -> None:
        """
        Print a resolved shell command.

        Args:
            label: Short description ("record", "convert", ...)
            command: Command text, shown verbatim
        """
        self.console.print(
            f"[camcorder.command]$[/camcorder.command] [dim]{escape(label)}:[/dim] {escape(command)}"
        )

    def transition(self, from_state: str, to_state: str, details: Optional[str] = None) -> None:
        """Log a session state change."""
        msg = f"[camcorder.state]{escape(from_state)} → {escape(to_state)}[/camcorder.state]"
        if details:
            msg += f" [dim]({escape(details)})[/dim]"
        self.logger.info(msg)

    def countdown(self, remaining: int) -> None:
        """Announce seconds left before recording starts."""
        self.console.print(f"[camcorder.countdown]Recording in {remaining}...[/camcorder.countdown]")

    def dry_run(self, message: str) -> None:
        """Log dry-run message."""
        self.console.print(f"[camcorder.dry_run][DRY RUN][/camcorder.dry_run] {escape(message)}")


def get_camcorder_logger(name: str) -> CamcorderLogger:
    """
    Get a CamcorderLogger instance for the given module.

    Example:
        logger = get_camcorder_logger(__name__)
        logger.command("record", "recordmydesktop --windowid 0x15 -o out.ogv")
    """
    return CamcorderLogger(name)
