"""Regression tests for prompt templates.

Every prompt template must survive a .format() call with its expected
placeholders. This catches unescaped curly braces that would cause a
KeyError at runtime.
"""

import os

import pytest

from spec_agents.agents import build_step_prompt
from spec_agents.prompts import (
    DESIGN_PROMPT,
    IMPLEMENTATION_PROMPT,
    REQUIREMENTS_PROMPT,
    TASKS_PROMPT,
)
from spec_agents.store import DocumentNotFoundError
from spec_agents.tasks import parse
from spec_agents.workspace import spec_paths


# Each entry: (template, kwargs needed by .format())
PROMPT_FORMAT_CASES = [
    ("REQUIREMENTS_PROMPT", REQUIREMENTS_PROMPT, {"feature": "user-auth", "description": "Login", "steering": "", "requirements_path": "r.md"}),
    ("DESIGN_PROMPT", DESIGN_PROMPT, {"feature": "user-auth", "requirements": "# R", "steering": "", "design_path": "d.md"}),
    ("TASKS_PROMPT", TASKS_PROMPT, {"feature": "user-auth", "requirements": "# R", "design": "# D", "tasks_path": "t.md"}),
    ("IMPLEMENTATION_PROMPT", IMPLEMENTATION_PROMPT, {"feature": "user-auth", "task_number": 1, "task_description": "Write form", "task_metadata": "", "requirements": "# R", "design": "# D"}),
]


@pytest.mark.parametrize("name,template,kwargs", PROMPT_FORMAT_CASES, ids=[c[0] for c in PROMPT_FORMAT_CASES])
def test_prompt_format_does_not_raise(name, template, kwargs):
    result = template.format(**kwargs)
    assert isinstance(result, str)
    assert len(result) > 0


def test_tasks_prompt_example_is_parseable_by_tracker():
    """The checklist format shown to the agent must parse into a task with metadata."""
    result = TASKS_PROMPT.format(feature="f", requirements="", design="", tasks_path="t.md")
    example = result[result.index("# Implementation Plan"):result.index("Rules:")]
    tasks = parse(example)
    assert len(tasks) == 1
    assert set(tasks[0].metadata) == {"leverage", "requirements"}


def test_build_step_prompt_design_embeds_requirements(tmp_path, monkeypatch):
    monkeypatch.delenv("SPEC_AGENTS_SPECS_DIR", raising=False)
    paths = spec_paths(str(tmp_path), "user-auth")
    os.makedirs(os.path.dirname(paths["requirements"]))
    with open(paths["requirements"], "w", encoding="utf-8") as f:
        f.write("WHEN a user logs in THEN the system SHALL create a session")

    result = build_step_prompt(str(tmp_path), "user-auth", "design")
    assert "THEN the system SHALL create a session" in result
    assert paths["design"] in result


def test_build_step_prompt_tasks_without_design_raises(tmp_path, monkeypatch):
    monkeypatch.delenv("SPEC_AGENTS_SPECS_DIR", raising=False)
    with pytest.raises(DocumentNotFoundError):
        build_step_prompt(str(tmp_path), "user-auth", "tasks")


def test_build_step_prompt_requirements_uses_description(tmp_path, monkeypatch):
    monkeypatch.delenv("SPEC_AGENTS_SPECS_DIR", raising=False)
    result = build_step_prompt(str(tmp_path), "user-auth", "requirements", "Passwordless email login")
    assert "Passwordless email login" in result
    assert "(none)" in result
