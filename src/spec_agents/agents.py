"""Agent commands: create a feature spec and render or run the per-step prompts."""

import os
from typing import Annotated

import typer

from spec_agents.prompts import DESIGN_PROMPT, REQUIREMENTS_PROMPT, TASKS_PROMPT
from spec_agents.store import DocumentNotFoundError
from spec_agents.utils import console, find_project_root, log, run_agent
from spec_agents.workspace import feature_dir, load_spec_context, load_steering, spec_paths

PROMPT_STEPS = ("requirements", "design", "tasks")


def register(app: typer.Typer) -> None:
    """Register agent commands on the shared app."""
    app.command()(new)
    app.command()(prompt)


def build_step_prompt(project_root: str, feature: str, step: str, description: str = "") -> str:
    """Render the prompt for one workflow step of a feature.

    Reads the upstream documents the step depends on, so it raises
    DocumentNotFoundError when an earlier step has not been run yet.
    """
    paths = spec_paths(project_root, feature)
    context = load_spec_context(project_root, feature, step)
    steering = load_steering(project_root) or "(none)"

    if step == "requirements":
        return REQUIREMENTS_PROMPT.format(
            feature=feature,
            description=description or "(see the feature name)",
            steering=steering,
            requirements_path=paths["requirements"],
        )
    if step == "design":
        return DESIGN_PROMPT.format(
            feature=feature,
            requirements=context["requirements"],
            steering=steering,
            design_path=paths["design"],
        )
    if step == "tasks":
        return TASKS_PROMPT.format(
            feature=feature,
            requirements=context["requirements"],
            design=context["design"],
            tasks_path=paths["tasks"],
        )
    raise ValueError(f"Unknown step '{step}'. Valid: {', '.join(PROMPT_STEPS)}")


def new(
    feature: Annotated[str, typer.Argument(help="Feature name in kebab-case, e.g. 'user-auth'")],
) -> None:
    """Create the spec directory for a new feature."""
    root = find_project_root(os.getcwd())
    try:
        path = feature_dir(root, feature)
    except ValueError as e:
        console.print(f"ERROR: {e}", style="bold red")
        raise typer.Exit(1)
    if os.path.isdir(path):
        console.print(f"Feature '{feature}' already exists at {path}", style="yellow")
        return
    os.makedirs(path)
    log("workflow", f"Created spec directory for '{feature}': {path}", style="green")
    console.print(f"Next: spec-agents prompt requirements {feature} --description \"...\"", style="cyan")


def prompt(
    step: Annotated[str, typer.Argument(help="Workflow step: requirements, design, or tasks")],
    feature: Annotated[str, typer.Argument(help="Feature name")],
    description: Annotated[str, typer.Option(help="Feature request text (requirements step only)")] = "",
    run: Annotated[bool, typer.Option("--run", help="Send the prompt to the agent CLI instead of printing it")] = False,
    agent_cmd: Annotated[str, typer.Option(help="Agent command line (overrides SPEC_AGENTS_AGENT_CMD)")] = "",
) -> None:
    """Render the prompt for a workflow step, or run it through the agent CLI."""
    if step not in PROMPT_STEPS:
        console.print(f"ERROR: Unknown step '{step}'. Valid: {', '.join(PROMPT_STEPS)}", style="bold red")
        raise typer.Exit(1)

    root = find_project_root(os.getcwd())
    try:
        text = build_step_prompt(root, feature, step, description)
    except (ValueError, DocumentNotFoundError) as e:
        console.print(f"ERROR: {e}", style="bold red")
        raise typer.Exit(1)

    if not run:
        console.print(text, markup=False, highlight=False)
        return

    agent_name = f"{step}-agent"
    log(agent_name, f"[{step.capitalize()}] Running agent for '{feature}'...", style="magenta")
    exit_code = run_agent(agent_name, text, agent_cmd)
    if exit_code != 0:
        log(agent_name, f"[{step.capitalize()}] Agent failed (exit {exit_code}).", style="bold red")
        raise typer.Exit(exit_code if exit_code > 0 else 1)
    log(agent_name, f"[{step.capitalize()}] Done.", style="green")
