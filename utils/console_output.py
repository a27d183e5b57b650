# ABOUTME: Console and logging output for the forum server built on Rich
# ABOUTME: Exposes print_* helpers for operator messages and wires stdlib logging through RichHandler

import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.rule import Rule

_LOG_FORMAT = "%(name)s | %(message)s"


class ConsoleOutput:
    """Rich console wrapper shared by the server, CLI and database layer."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console(stderr=True, highlight=False)
        self._logging_configured = False

    def setup_logging(self, level: str = "INFO") -> None:
        """Route stdlib logging through RichHandler (idempotent)."""
        root = logging.getLogger()
        root.setLevel(level.upper())
        if self._logging_configured:
            return
        handler = RichHandler(console=self.console, rich_tracebacks=True, show_path=False)
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        root.addHandler(handler)
        self._logging_configured = True

    def _render(self, style: str, symbol: str, message: str, indent: int) -> None:
        prefix = "  " * indent
        self.console.print(f"{prefix}[{style}]{symbol}[/{style}] {message}")

    def info(self, message: str, indent: int = 0) -> None:
        self._render("cyan", "i", message, indent)

    def success(self, message: str, indent: int = 0) -> None:
        self._render("green", "✓", message, indent)

    def warning(self, message: str, indent: int = 0) -> None:
        self._render("yellow", "!", message, indent)

    def error(self, message: str, indent: int = 0) -> None:
        self._render("bold red", "✗", message, indent)

    def section(self, title: str) -> None:
        self.console.print(Rule(title, style="blue"))

    @staticmethod
    def format_number(value: int | float) -> str:
        return f"{value:,}"


console = ConsoleOutput()


def print_info(message: str, indent: int = 0) -> None:
    console.info(message, indent)


def print_success(message: str, indent: int = 0) -> None:
    console.success(message, indent)


def print_warning(message: str, indent: int = 0) -> None:
    console.warning(message, indent)


def print_error(message: str, indent: int = 0) -> None:
    console.error(message, indent)


def print_section(title: str) -> None:
    console.section(title)
