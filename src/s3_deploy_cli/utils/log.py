# src/s3_deploy_cli/utils/log.py
"""
Console log sink shared by the CLI and the orchestrator.
"""

from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.theme import Theme


# Custom theme for brand alignment
custom_theme = Theme({
    "info": "cyan",
    "warning": "yellow",
    "error": "bold red",
    "success": "bold green",
    "debug": "dim white",
    "prefix": "bold blue",
})

console = Console(theme=custom_theme)


class ConsoleLog:
    """
    Prints prefixed, themed lines to a rich Console.

    Messages are escaped before printing; AWS output often contains square
    brackets that rich would otherwise read as markup.
    """

    def __init__(self, out: Optional[Console] = None, verbose: bool = False, prefix: str = "S3 Deploy"):
        self.console = out or console
        self.verbose = verbose
        self.prefix = prefix

    def _print(self, message: str, style: str) -> None:
        text = message.rstrip("\n")
        self.console.print(f"[prefix]{escape(self.prefix)}:[/] [{style}]{escape(text)}[/]")

    def info(self, message: str) -> None:
        self._print(message, "info")

    def success(self, message: str) -> None:
        self._print(message, "success")

    def warning(self, message: str) -> None:
        self._print(message, "warning")

    def error(self, message: str) -> None:
        self._print(message, "error")

    def debug(self, message: str) -> None:
        if self.verbose:
            self._print(message, "debug")
