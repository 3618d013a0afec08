"""Code skeletons keyed by ecosystem and capability tag.

The skeletons themselves are data in config.SKELETON_TEMPLATES; this module
only looks them up and fills in the placeholders.
"""

import os
import re
from string import Template
from typing import Annotated

import typer

from spec_agents.config import SKELETON_TEMPLATES
from spec_agents.store import PersistenceError, write_document
from spec_agents.utils import console, log


def register(app: typer.Typer) -> None:
    """Register the scaffold command on the shared app."""
    app.command()(scaffold)


def to_module_name(name: str) -> str:
    """Convert a class-style name to a module name: 'AuthService' -> 'auth_service'."""
    snake = re.sub(r"(?<=[a-z0-9])(?=[A-Z])", "_", name)
    return re.sub(r"[^a-zA-Z0-9]+", "_", snake).strip("_").lower()


def render_skeleton(ecosystem: str, capability: str, name: str, description: str = "") -> tuple[str, str]:
    """Return (filename, body) for a skeleton.

    Raises KeyError naming the valid choices when the ecosystem or
    capability is unknown.
    """
    if ecosystem not in SKELETON_TEMPLATES:
        raise KeyError(f"Unknown ecosystem '{ecosystem}'. Valid: {', '.join(sorted(SKELETON_TEMPLATES))}")
    skeletons = SKELETON_TEMPLATES[ecosystem]
    if capability not in skeletons:
        raise KeyError(f"Unknown capability '{capability}'. Valid: {', '.join(sorted(skeletons))}")

    values = {
        "name": name,
        "module": to_module_name(name),
        "description": description or f"{name} {capability}.",
    }
    entry = skeletons[capability]
    return Template(entry["filename"]).substitute(values), Template(entry["body"]).substitute(values)


def scaffold(
    capability: Annotated[str, typer.Argument(help="Capability tag: interface, service, or test")],
    name: Annotated[str, typer.Argument(help="Component name, e.g. AuthService")],
    ecosystem: Annotated[str, typer.Option(help="Target ecosystem: python or typescript")] = "python",
    description: Annotated[str, typer.Option(help="One-line description for the docstring")] = "",
    output_dir: Annotated[str, typer.Option(help="Write the file here instead of printing it")] = "",
) -> None:
    """Generate a code skeleton for a component."""
    try:
        filename, body = render_skeleton(ecosystem, capability, name, description)
    except KeyError as e:
        console.print(f"ERROR: {e.args[0]}", style="bold red")
        raise typer.Exit(1)

    if not output_dir:
        console.print(body, markup=False, highlight=False)
        return

    path = os.path.join(output_dir, filename)
    if os.path.exists(path):
        console.print(f"ERROR: {path} already exists.", style="bold red")
        raise typer.Exit(1)
    try:
        write_document(path, body)
    except PersistenceError as e:
        console.print(f"ERROR: {e}", style="bold red")
        raise typer.Exit(2)
    log("scaffold", f"Wrote {path}", style="green")
