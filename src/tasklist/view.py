"""Render instructions for the task list and their Rich table rendering."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from rich.table import Table
from rich.text import Text

from tasklist.ordering import project_for_display
from tasklist.tasks.model import TaskCollection

EMPTY_MESSAGE = "No tasks yet. Add your first task above!"
SHORT_ID_LEN = 8


def format_due(value: date) -> str:
    """``March 5, 2026`` style."""
    return f"{value.strftime('%B')} {value.day}, {value.year}"


@dataclass(frozen=True)
class TaskRow:
    position: int
    id: str
    name: str
    due: str
    completed: bool


def render_rows(collection: TaskCollection) -> list[TaskRow]:
    """Rows in display order; ``position`` is 1-based and matches ``move``."""
    rows: list[TaskRow] = []
    for pos, task in enumerate(project_for_display(collection), start=1):
        rows.append(
            TaskRow(
                position=pos,
                id=task.id,
                name=task.name,
                due=f"Due: {format_due(task.due_date)}" if task.due_date else "",
                completed=task.completed,
            )
        )
    return rows


def render_table(rows: list[TaskRow]) -> Table | Text:
    if not rows:
        return Text(EMPTY_MESSAGE, style="dim")
    table = Table(show_header=True, header_style="bold blue", expand=False)
    table.add_column("#", justify="right", no_wrap=True)
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Task")
    table.add_column("Due", no_wrap=True)
    for row in rows:
        mark = "[green]✓[/green] " if row.completed else "  "
        name = Text(row.name, style="strike dim" if row.completed else "")
        table.add_row(f"{mark}{row.position}", Text(row.id[:SHORT_ID_LEN]), name, row.due)
    return table
