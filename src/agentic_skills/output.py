"""Console helpers shared by every command."""

import os

from rich.console import Console

console = Console()
err_console = Console(stderr=True)


def configure_console(no_color: bool = False):
    """Rebuild the shared consoles, honouring --no-color and NO_COLOR."""
    global console, err_console
    plain = no_color or bool(os.environ.get("NO_COLOR"))
    console = Console(no_color=plain, highlight=not plain)
    err_console = Console(stderr=True, no_color=plain, highlight=not plain)


def info(message: str):
    console.print(f"  [green]✓[/green] {message}")


def warn(message: str):
    console.print(f"  [yellow]⚠[/yellow] {message}")


def error(message: str):
    err_console.print(f"  [red]✗[/red] {message}")


def header(message: str):
    console.print(f"  [bold]{message}[/bold]")


def banner():
    console.print("")
    console.print("  [cyan]╭──────────────────────────────────────╮[/cyan]")
    console.print("  [cyan]│[/cyan]  [bold]Agentic Skills[/bold]                      [cyan]│[/cyan]")
    console.print("  [cyan]│[/cyan]  skills · agents · hooks             [cyan]│[/cyan]")
    console.print("  [cyan]╰──────────────────────────────────────╯[/cyan]")
    console.print("")
