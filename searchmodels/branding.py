"""
SearchModels Branding and Display Utilities

Progress output goes to stderr so results printed on stdout stay clean.
"""

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from searchmodels import __version__


console = Console(stderr=True)

LOGO_ASCII = "SearchModels"


def _fmt(value) -> str:
    if value is None:
        return "-"
    try:
        return f"{value:.6g}"
    except (TypeError, ValueError):
        return str(value)


def print_banner():
    """Print the SearchModels startup banner."""
    logo_text = Text(LOGO_ASCII, style="bold cyan")

    info_text = Text()
    info_text.append(f"\n  Version: ", style="dim")
    info_text.append(f"{__version__}", style="bold green")
    info_text.append(f"\n  Stochastic Model Search", style="dim")

    panel = Panel(
        logo_text + info_text,
        border_style="cyan",
        padding=(0, 2),
    )
    console.print(panel)


def print_search_header(params, initial_population, mode: str):
    """Print the parameters a search starts with."""
    console.print(
        f"[bold blue]SearchModels>[/bold blue] search params "
        f"initialpopulation={initial_population}, maxpopulation={params.maxpopulation}, "
        f"bsize={params.bsize}, mutbsize={params.mutbsize}, crossbsize={params.crossbsize}, "
        f"maxiters={params.maxiters}, tol={params.tol}, parallel={mode}"
    )


def print_round(stats, params):
    """Print a one-line summary of a finished round."""
    failures = f", [red]failed: {stats.failures}[/red]" if stats.failures else ""
    console.print(
        f"[bold blue]SearchModels iteration {stats.iteration}>[/bold blue] "
        f"population: {stats.population_size}, bsize: {params.bsize}, "
        f"queue: {stats.queue_size}, observed: {stats.observed}, "
        f"best-error: {_fmt(stats.best_error)} worst-error: {_fmt(stats.worst_error)}"
        f"{failures}"
    )


def print_population(population, top: int = 10):
    """Print the best entries of a population as a table."""
    table = Table(title=f"Top {min(top, len(population))} of {len(population)}")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Error", justify="right", style="green")
    table.add_column("Configuration")

    for i, entry in enumerate(population[:top], 1):
        table.add_row(str(i), _fmt(entry.error), Text(repr(entry.config)))

    console.print(table)


def print_summary(stats: dict):
    """Print search summary statistics."""
    console.print("\n[bold]Search Summary[/bold]")
    for key, value in stats.items():
        console.print(f"  • {key}: {value}")


def print_substep(msg: str):
    """Print a sub-step indicator."""
    console.print(f"[dim]  ├ {msg}[/dim]")


def print_error(msg: str):
    """Print an error message."""
    console.print(f"[bold red]✗ {escape(msg)}[/bold red]")
