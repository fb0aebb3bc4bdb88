"""tasklist CLI: add, complete, reorder, date and import/export tasks.

Installed as ``tasklist`` console_script via pipx / pip.
"""

from __future__ import annotations

import sys
from datetime import datetime
from pathlib import Path

import click

from tasklist import __version__
from tasklist import log
from tasklist.config import Config
from tasklist.controller import TaskListController
from tasklist.errors import EmptyCollectionError, TaskListError
from tasklist.ordering import move_in_order
from tasklist.store import FileSlotStore, PersistenceStore
from tasklist.view import render_rows, render_table


CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])

DATE_TYPE = click.DateTime(formats=["%Y-%m-%d"])


def _build_controller(cfg: Config) -> TaskListController:
    store = PersistenceStore(FileSlotStore(cfg.home), cfg.storage_key)
    return TaskListController(store)


def _show(ctl: TaskListController) -> None:
    log.console.print(render_table(render_rows(ctl.collection)))


def _resolve_id(ctl: TaskListController, raw: str) -> str:
    """Accept a full id or a unique prefix of one (as shown in the table)."""
    ids = ctl.collection.ids()
    if raw in ids:
        return raw
    matches = [i for i in ids if i.startswith(raw)]
    if len(matches) == 1:
        return matches[0]
    if len(matches) > 1:
        raise click.BadParameter(f"Ambiguous id prefix: {raw}", param_hint="ID")
    return raw


def _fail(exc: TaskListError) -> None:
    if isinstance(exc, EmptyCollectionError):
        log.warn(str(exc))
    else:
        log.error(str(exc))
    sys.exit(1)


@click.group(invoke_without_command=True, context_settings=CONTEXT_SETTINGS)
@click.option("--home", default="", help="Directory holding saved tasks (env: TASKLIST_HOME)")
@click.option("--key", "storage_key", default="", help="Storage slot name (env: TASKLIST_STORAGE_KEY)")
@click.option("-v", "--verbose", is_flag=True, help="Show debug output")
@click.version_option(__version__, prog_name="tasklist")
@click.pass_context
def main(ctx: click.Context, home: str, storage_key: str, verbose: bool) -> None:
    """TASKLIST — an ordered, persisted task list.

    Incomplete tasks are listed first in your own order; completed tasks
    follow, most recently completed first.

    \b
    EXAMPLES:
      tasklist add "Buy milk" --due 2026-03-05
      tasklist toggle 3f2a            # complete / reopen (id or prefix)
      tasklist move 3f2a 1            # drag a task to the top
      tasklist export -o backups/
      tasklist import tasks-2026-03-05.json
    """
    log.set_verbose(verbose)
    cfg = Config(home=home, storage_key=storage_key, verbose=verbose)
    log.debug(f"Using slot '{cfg.storage_key}' in {cfg.home}")
    ctl = _build_controller(cfg)
    ctl.subscribe(lambda _shown: _show(ctl))
    ctx.obj = ctl

    if ctx.invoked_subcommand is None:
        _show(ctl)


@main.command(name="list")
@click.pass_obj
def list_cmd(ctl: TaskListController) -> None:
    """Show tasks in display order."""
    _show(ctl)


@main.command()
@click.argument("name")
@click.option("--due", type=DATE_TYPE, default=None, help="Due date (YYYY-MM-DD)")
@click.pass_obj
def add(ctl: TaskListController, name: str, due: datetime | None) -> None:
    """Add a task at the top of the list."""
    task = ctl.create(name, due.date() if due else None)
    if task is None:
        log.warn("Task name cannot be empty.")
        sys.exit(1)


@main.command()
@click.argument("task_id", metavar="ID")
@click.pass_obj
def rm(ctl: TaskListController, task_id: str) -> None:
    """Delete a task."""
    if not ctl.delete(_resolve_id(ctl, task_id)):
        log.warn(f"No task with id {task_id}.")


@main.command()
@click.argument("task_id", metavar="ID")
@click.pass_obj
def toggle(ctl: TaskListController, task_id: str) -> None:
    """Mark a task completed, or reopen a completed one."""
    if ctl.toggle_completion(_resolve_id(ctl, task_id)) is None:
        log.warn(f"No task with id {task_id}.")


@main.command()
@click.argument("task_id", metavar="ID")
@click.argument("due", type=DATE_TYPE, required=False)
@click.pass_obj
def due(ctl: TaskListController, task_id: str, due: datetime | None) -> None:
    """Set a task's due date (YYYY-MM-DD); omit the date to clear it."""
    if ctl.set_due_date(_resolve_id(ctl, task_id), due.date() if due else None) is None:
        log.warn(f"No task with id {task_id}.")


@main.command()
@click.argument("task_id", metavar="ID")
@click.argument("position", type=click.IntRange(min=1))
@click.pass_obj
def move(ctl: TaskListController, task_id: str, position: int) -> None:
    """Drag a task to POSITION (1 = top) of the displayed list."""
    resolved = _resolve_id(ctl, task_id)
    shown = [t.id for t in ctl.display_order()]
    if resolved not in shown:
        log.warn(f"No task with id {task_id}.")
        return
    ctl.apply_manual_reorder(move_in_order(shown, resolved, position - 1))
    _show(ctl)


@main.command()
@click.argument("task_ids", metavar="ID...", nargs=-1, required=True)
@click.pass_obj
def reorder(ctl: TaskListController, task_ids: tuple[str, ...]) -> None:
    """Set the full task order, as left after a drag."""
    ctl.apply_manual_reorder([_resolve_id(ctl, t) for t in task_ids])
    _show(ctl)


@main.command()
@click.option(
    "--output", "-o", default=".",
    help="Output file, or directory (trailing / or no suffix) for tasks-<date>.json (default: current directory)",
)
@click.pass_obj
def export(ctl: TaskListController, output: str) -> None:
    """Export all tasks to a JSON file."""
    try:
        path = ctl.export_to(output)
    except TaskListError as exc:
        _fail(exc)
        return
    log.success(f"Exported {len(ctl.collection)} task(s) to {path}")


@main.command(name="import")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_obj
def import_cmd(ctl: TaskListController, path: Path) -> None:
    """Replace all tasks with the tasks in a JSON file."""
    log.info(f"Importing {path} (replaces the current list)")
    try:
        count = ctl.import_file(path)
    except TaskListError as exc:
        _fail(exc)
        return
    log.success(f"Imported {count} task(s).")
