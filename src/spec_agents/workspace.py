"""Spec workspace layout: feature directories, spec documents, steering docs.

Each feature lives in its own directory under the specs root:

    .claude/specs/<feature>/requirements.md
    .claude/specs/<feature>/design.md
    .claude/specs/<feature>/tasks.md

Steering documents in .claude/steering/ give every agent shared project
context and are optional.
"""

import os
import re

from spec_agents.config import (
    DESIGN_FILE,
    REQUIREMENTS_FILE,
    SPECS_DIR,
    SPECS_DIR_ENV,
    STEERING_DIR,
    STEERING_FILES,
    TASKS_FILE,
)
from spec_agents.store import read_document

_FEATURE_NAME_RE = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")

# Documents each workflow step needs as input, in order.
STEP_INPUTS = {
    "requirements": (),
    "design": ("requirements",),
    "tasks": ("requirements", "design"),
    "implementation": ("requirements", "design"),
}

_DOCUMENT_FILES = {
    "requirements": REQUIREMENTS_FILE,
    "design": DESIGN_FILE,
    "tasks": TASKS_FILE,
}


def validate_feature_name(name: str) -> str:
    """Return *name* if it is kebab-case (e.g. 'user-auth'), else raise ValueError."""
    if not _FEATURE_NAME_RE.match(name):
        raise ValueError(
            f"Invalid feature name '{name}'. Use lowercase kebab-case, e.g. 'user-auth'."
        )
    return name


def specs_root(project_root: str) -> str:
    """Return the specs directory, honoring SPEC_AGENTS_SPECS_DIR."""
    configured = os.environ.get(SPECS_DIR_ENV, "") or SPECS_DIR
    return os.path.join(project_root, os.path.expanduser(configured))


def feature_dir(project_root: str, feature: str) -> str:
    return os.path.join(specs_root(project_root), validate_feature_name(feature))


def spec_paths(project_root: str, feature: str) -> dict[str, str]:
    """Return {"requirements": path, "design": path, "tasks": path} for a feature."""
    base = feature_dir(project_root, feature)
    return {doc: os.path.join(base, filename) for doc, filename in _DOCUMENT_FILES.items()}


def list_features(project_root: str) -> list[str]:
    """Return the sorted names of feature directories under the specs root."""
    root = specs_root(project_root)
    if not os.path.isdir(root):
        return []
    return sorted(
        name for name in os.listdir(root)
        if os.path.isdir(os.path.join(root, name)) and _FEATURE_NAME_RE.match(name)
    )


def feature_progress(project_root: str, feature: str) -> dict[str, bool]:
    """Return which spec documents exist for a feature, e.g. {"requirements": True, ...}."""
    return {doc: os.path.isfile(path) for doc, path in spec_paths(project_root, feature).items()}


def load_spec_context(project_root: str, feature: str, step: str) -> dict[str, str]:
    """Read the upstream documents a workflow step needs.

    Returns {"requirements": text, "design": text} (whichever the step uses).
    Raises DocumentNotFoundError when a required document is missing, so the
    caller can point the user at the step that creates it.
    """
    if step not in STEP_INPUTS:
        raise ValueError(f"Unknown workflow step '{step}'. Valid: {', '.join(STEP_INPUTS)}")
    paths = spec_paths(project_root, feature)
    return {doc: read_document(paths[doc]) for doc in STEP_INPUTS[step]}


def load_steering(project_root: str) -> str:
    """Concatenate the steering documents that exist. Missing ones are skipped."""
    base = os.path.join(project_root, STEERING_DIR)
    sections = []
    for filename in STEERING_FILES:
        path = os.path.join(base, filename)
        if not os.path.isfile(path):
            continue
        content = read_document(path).strip()
        if content:
            sections.append(f"## {filename}\n\n{content}")
    return "\n\n".join(sections)
