"""Rich output formatting helpers for the antigravity-detect CLI."""

from __future__ import annotations

import json
import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from antigravity_detect.discovery import Credentials
from antigravity_detect.platforms import PlatformDetector

console = Console()

# Placeholder pid used when showing the port-list command.
_EXAMPLE_PID = 1234


def configure_logging(verbose: bool) -> None:
    """Route library diagnostics to stderr through Rich.

    Args:
        verbose: Show DEBUG records (per-port probe detail) as well.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def print_credentials(creds: Credentials, show_token: bool = False) -> None:
    """Print the detection result as a table.

    Args:
        creds: Successful detection result.
        show_token: Print the full CSRF token instead of a preview.
    """
    header = Text.assemble(("Status: ", "bold"), ("FOUND", "bold green"))
    console.print(Panel(header, title="Antigravity Language Server"))

    table = Table(show_header=True, header_style="bold")
    table.add_column("Field", style="bold")
    table.add_column("Value")
    ext = str(creds.extension_port) if creds.extension_port is not None else "-"
    table.add_row("Extension port", ext)
    table.add_row("Connect port (HTTPS)", str(creds.connect_port))
    table.add_row("CSRF token", creds.csrf_token if show_token else creds.token_preview)
    console.print(table)


def print_not_found() -> None:
    console.print("[bold red]Antigravity language server not found.[/bold red]")


def print_platform_info(detector: PlatformDetector) -> None:
    """Print which strategy and commands this host would use."""
    strategy = detector.select_strategy()
    process_name = detector.canonical_process_name()

    table = Table(title="Platform", show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Platform", detector.platform_label())
    table.add_row("Strategy", strategy.name)
    table.add_row("Process name", process_name)
    table.add_row("Process list", strategy.build_process_list_command(process_name))
    table.add_row(
        f"Port list (pid {_EXAMPLE_PID})",
        strategy.build_port_list_command(_EXAMPLE_PID),
    )
    console.print(table)


def credentials_to_json(creds: Credentials | None) -> str:
    """Serialize a detection result for ``--format json``."""
    if creds is None:
        return json.dumps({"found": False})
    return json.dumps({"found": True, **creds.as_dict()}, indent=2)
