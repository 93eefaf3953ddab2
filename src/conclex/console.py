"""
Rich-based console output for pipeline runs.

StageDisplay shows a live panel of per-stage counts while resources load;
the render_* helpers print finished results as tables.
"""

import time
from typing import Any, Dict, Iterable, Optional

from rich import box
from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text


console = Console()


class StageDisplay:
    """
    Context manager for a live panel of named counts.

    Usage:
        with StageDisplay("Loading resources") as display:
            for name in names:
                table = load(name)
                display.update(**{name: len(table)})
    """

    def __init__(self, title: str = "Progress", refresh_per_second: int = 4):
        self.title = title
        self.refresh_per_second = refresh_per_second
        self.metrics: Dict[str, Any] = {}
        self.live: Optional[Live] = None
        self.start_time: float = 0

    def __enter__(self):
        self.start_time = time.time()
        self.live = Live(
            self._make_panel(),
            console=console,
            refresh_per_second=self.refresh_per_second,
            transient=False,
        )
        self.live.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.live:
            self.metrics["Elapsed"] = time.time() - self.start_time
            self.live.update(self._make_panel())
            self.live.__exit__(exc_type, exc_val, exc_tb)
        return False

    def update(self, **metrics):
        self.metrics.update(metrics)
        if self.live:
            self.live.update(self._make_panel())

    def _make_panel(self) -> Panel:
        grid = Table.grid(padding=(0, 2))
        grid.add_column(justify="left", no_wrap=True)
        grid.add_column(justify="right", no_wrap=True)

        for key, value in self.metrics.items():
            grid.add_row(
                Text(f"{key}:", style="bold grey50"),
                Text(format_value(key, value), style="bright_cyan"),
            )

        return Panel(grid, title=self.title, box=box.SIMPLE, border_style="bright_black")


def format_value(key: str, value: Any) -> str:
    """Format a metric or statistic for display."""
    if value is None:
        return "-"
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, float):
        if key == "Elapsed":
            minutes = int(value // 60)
            seconds = int(value % 60)
            return f"{minutes:02d}:{seconds:02d}"
        if value != value:  # NaN
            return "-"
        if abs(value) < 0.001 and value != 0:
            return f"{value:.2e}"
        return f"{value:,.3f}"
    if isinstance(value, int):
        return f"{value:,}"
    return str(value)


def render_group_summaries(title: str, rows: Iterable[Dict[str, Any]]):
    """Print per-level mean/SD/n rows as a table."""
    table = Table(title=title, box=box.SIMPLE_HEAD)
    table.add_column("Dataset")
    table.add_column("Analysis")
    table.add_column("Level")
    table.add_column("Mean", justify="right")
    table.add_column("SD", justify="right")
    table.add_column("n", justify="right")

    for row in rows:
        table.add_row(
            row['dataset'],
            row['analysis'],
            str(row['level']),
            format_value('mean', row['mean']),
            format_value('sd', row['sd']),
            format_value('n', row['n']),
        )

    console.print(table)


def render_statistics(title: str, rows: Iterable[Dict[str, Any]]):
    """Print one line per analysis outcome (test statistic, p, effect size)."""
    table = Table(title=title, box=box.SIMPLE_HEAD)
    table.add_column("Dataset")
    table.add_column("Analysis")
    table.add_column("Test")
    table.add_column("Statistic", justify="right")
    table.add_column("p", justify="right")
    table.add_column("Effect", justify="right")
    table.add_column("Status")

    for row in rows:
        status = Text("ok", style="green") if row['ok'] else Text(row['error'], style="red")
        table.add_row(
            row['dataset'],
            row['analysis'],
            row.get('test') or "-",
            format_value('statistic', row.get('statistic')),
            format_value('p', row.get('p_value')),
            format_value('effect', row.get('effect')),
            status,
        )

    console.print(table)


def render_partition(title: str, partition):
    """Print a variance partition DataFrame (predictors x datasets)."""
    table = Table(title=title, box=box.SIMPLE_HEAD)
    table.add_column("Predictor")
    for column in partition.columns:
        table.add_column(str(column), justify="right")

    for predictor, values in partition.iterrows():
        table.add_row(str(predictor), *(format_value('r2', float(v)) for v in values))

    console.print(table)
