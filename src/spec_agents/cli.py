"""CLI app definition and command registration."""

import os
from typing import Annotated

import typer

from spec_agents.store import DocumentNotFoundError, UnreadableDocumentError, load_tasks
from spec_agents.tasks import summarize
from spec_agents.utils import console, find_project_root
from spec_agents.version import get_version
from spec_agents.workspace import feature_progress, list_features, spec_paths, specs_root


def _version_callback(value: bool):
    if value:
        console.print(get_version())
        raise typer.Exit()


app = typer.Typer(
    help="Spec-driven development workflow: requirements, design, and task agents.",
    no_args_is_help=True,
)


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-v", help="Show version and exit.", callback=_version_callback, is_eager=True),
    ] = False,
) -> None:
    """Spec-driven development workflow."""

# Register commands from submodules
from spec_agents import agents as _agents_mod
from spec_agents import executor as _executor_mod
from spec_agents import templates as _templates_mod

_agents_mod.register(app)
_executor_mod.register(app)
_templates_mod.register(app)


# ============================================
# Commands
# ============================================


def _feature_status_line(root: str, feature: str) -> str:
    """One line per feature: which documents exist and task progress."""
    docs = feature_progress(root, feature)
    marks = " ".join(f"[{'x' if present else ' '}] {doc}" for doc, present in docs.items())
    if not docs["tasks"]:
        return f"{feature}: {marks}"
    try:
        counts = summarize(list(load_tasks(spec_paths(root, feature)["tasks"]).tasks))
    except DocumentNotFoundError:
        return f"{feature}: {marks}"
    except UnreadableDocumentError:
        return f"{feature}: {marks}  (tasks.md is not valid UTF-8)"
    return f"{feature}: {marks}  ({counts['done']}/{counts['total']} tasks done)"


@app.command()
def features() -> None:
    """List the features that have a spec directory."""
    root = find_project_root(os.getcwd())
    names = list_features(root)
    if not names:
        console.print(f"No features yet under {specs_root(root)}. Run 'new <feature>' to start one.", style="yellow")
        return
    for name in names:
        console.print(name)


@app.command()
def status(
    feature: Annotated[str, typer.Argument(help="Show only this feature")] = "",
) -> None:
    """Quick view of where each feature stands: documents written and tasks done."""
    root = find_project_root(os.getcwd())
    names = [feature] if feature else list_features(root)
    if not names:
        console.print("No features yet. Run 'new <feature>' to start one.", style="yellow")
        return

    console.print()
    console.print("=== SPECS ===", style="bold magenta")
    for name in names:
        try:
            line = _feature_status_line(root, name)
        except ValueError as e:
            console.print(f"ERROR: {e}", style="bold red")
            raise typer.Exit(1)
        console.print(line, markup=False, highlight=False)
    console.print()
