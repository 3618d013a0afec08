"""Implementation commands: pick the next task, run the agent on it, check it off."""

import os
import time
from dataclasses import replace
from datetime import datetime
from typing import Annotated

import typer

from spec_agents.prompts import IMPLEMENTATION_PROMPT
from spec_agents.store import (
    DocumentNotFoundError,
    PersistenceError,
    UnreadableDocumentError,
    load_tasks,
    save_tasks,
)
from spec_agents.tasks import (
    TaskDocument,
    TaskRecord,
    UnknownTaskError,
    format_task_line,
    mark_completed,
    select_next,
    summarize,
)
from spec_agents.utils import console, find_project_root, log, run_agent
from spec_agents.workspace import load_spec_context, spec_paths

_AGENT_NAME = "implementation-agent"


def register(app: typer.Typer) -> None:
    """Register implementation commands on the shared app."""
    app.command(name="next")(next_task)
    app.command()(complete)
    app.command()(execute)


# ============================================
# Pure helpers
# ============================================

def format_task_metadata(task: TaskRecord) -> str:
    """Render a task's metadata as indented 'key: value' lines (empty if none)."""
    return "\n".join(f"  {key}: {value}" for key, value in task.metadata.items())


def build_implementation_prompt(feature: str, task: TaskRecord, context: dict[str, str]) -> str:
    """Fill IMPLEMENTATION_PROMPT for one task. *context* holds requirements and design text."""
    return IMPLEMENTATION_PROMPT.format(
        feature=feature,
        task_number=task.sequence_number,
        task_description=task.description,
        task_metadata=format_task_metadata(task),
        requirements=context.get("requirements", ""),
        design=context.get("design", ""),
    )


def complete_task(document: TaskDocument, task_number: int, now: datetime | None = None) -> TaskDocument:
    """Return a new document with task *task_number* marked completed.

    Raises UnknownTaskError if no task has that sequence number.
    """
    matches = [t for t in document.tasks if t.sequence_number == task_number]
    if not matches:
        raise UnknownTaskError(f"Task {task_number} is not in this task list")
    tasks = mark_completed(list(document.tasks), matches[0], now)
    return replace(document, tasks=tuple(tasks))


def format_progress(tasks: list[TaskRecord]) -> str:
    counts = summarize(tasks)
    return f"{counts['done']}/{counts['total']} tasks done, {counts['pending']} pending"


# ============================================
# I/O wrappers
# ============================================

def _tasks_path(feature: str) -> str:
    try:
        return spec_paths(find_project_root(os.getcwd()), feature)["tasks"]
    except ValueError as e:
        console.print(f"ERROR: {e}", style="bold red")
        raise typer.Exit(1)


def _load_or_exit(path: str) -> TaskDocument:
    try:
        return load_tasks(path)
    except (DocumentNotFoundError, UnreadableDocumentError) as e:
        console.print(f"ERROR: {e}", style="bold red")
        raise typer.Exit(1)


def save_with_retry(path: str, document: TaskDocument, max_attempts: int = 3, backoff: float = 1.0) -> bool:
    """Write the task list, retrying on PersistenceError.

    The in-memory document is unchanged between attempts, so nothing has to
    be recomputed. Returns True once a write succeeds, False after the last
    failed attempt.
    """
    for attempt in range(1, max_attempts + 1):
        try:
            save_tasks(path, document)
            return True
        except PersistenceError as e:
            log(_AGENT_NAME, f"{e} (attempt {attempt}/{max_attempts})", style="yellow")
            if attempt < max_attempts:
                time.sleep(backoff)
    log(_AGENT_NAME, f"Giving up writing {path}. Completed tasks were not saved.", style="bold red")
    return False


def _print_task(task: TaskRecord) -> None:
    console.print(f"{task.sequence_number}: {format_task_line(task)}", markup=False, highlight=False)
    metadata = format_task_metadata(task)
    if metadata:
        console.print(metadata, style="dim", markup=False, highlight=False)


# ============================================
# Commands
# ============================================

def next_task(
    feature: Annotated[str, typer.Argument(help="Feature name")],
    hint: Annotated[str, typer.Argument(help="What to do, e.g. 'task 3' or 'all remaining'")] = "",
) -> None:
    """Show which task(s) should be executed next."""
    document = _load_or_exit(_tasks_path(feature))
    selection = select_next(list(document.tasks), hint)
    if not selection:
        console.print("Nothing to do: no matching pending task.", style="yellow")
        return
    for task in selection:
        _print_task(task)


def complete(
    feature: Annotated[str, typer.Argument(help="Feature name")],
    task_number: Annotated[int, typer.Argument(help="Task sequence number")],
) -> None:
    """Mark a task completed and save the task list."""
    path = _tasks_path(feature)
    document = _load_or_exit(path)
    try:
        updated = complete_task(document, task_number)
    except UnknownTaskError as e:
        console.print(f"ERROR: {e}", style="bold red")
        raise typer.Exit(1)
    if updated == document:
        console.print(f"Task {task_number} was already completed.", style="yellow")
        return
    if not save_with_retry(path, updated):
        raise typer.Exit(2)
    log(_AGENT_NAME, f"[Task {task_number}] Marked completed. {format_progress(list(updated.tasks))}", style="green")


def execute(
    feature: Annotated[str, typer.Argument(help="Feature name")],
    hint: Annotated[str, typer.Argument(help="What to do, e.g. 'task 3' or 'all remaining'")] = "",
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Print the prompts without running the agent")] = False,
    agent_cmd: Annotated[str, typer.Option(help="Agent command line (overrides SPEC_AGENTS_AGENT_CMD)")] = "",
) -> None:
    """Run the implementation agent on the selected task(s), checking each off on success."""
    path = _tasks_path(feature)
    document = _load_or_exit(path)
    selection = select_next(list(document.tasks), hint)
    if not selection:
        console.print("Nothing to do: no matching pending task.", style="yellow")
        return

    try:
        context = load_spec_context(find_project_root(os.getcwd()), feature, "implementation")
    except (DocumentNotFoundError, UnreadableDocumentError) as e:
        console.print(f"ERROR: {e}", style="bold red")
        raise typer.Exit(1)

    for task in selection:
        text = build_implementation_prompt(feature, task, context)
        if dry_run:
            console.print(f"=== Task {task.sequence_number} ===", style="bold cyan")
            console.print(text, markup=False, highlight=False)
            continue

        log(_AGENT_NAME, "")
        log(_AGENT_NAME, f"[Task {task.sequence_number}] {task.description}", style="bold magenta")
        exit_code = run_agent(_AGENT_NAME, text, agent_cmd)
        if exit_code != 0:
            log(_AGENT_NAME, f"[Task {task.sequence_number}] Agent failed (exit {exit_code}). Stopping.", style="bold red")
            raise typer.Exit(exit_code if exit_code > 0 else 1)

        # Save after every task so progress survives an interrupted run
        document = complete_task(document, task.sequence_number)
        if not save_with_retry(path, document):
            raise typer.Exit(2)
        log(_AGENT_NAME, f"[Task {task.sequence_number}] Completed. {format_progress(list(document.tasks))}", style="green")
