"""Tests for the top-level CLI commands: status, features, new, prompt, --version."""

import pytest
from typer.testing import CliRunner

from spec_agents.cli import app

runner = CliRunner()


@pytest.fixture
def project(tmp_path, monkeypatch):
    monkeypatch.delenv("SPEC_AGENTS_SPECS_DIR", raising=False)
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".claude").mkdir()
    return tmp_path


def _spec_dir(project, feature):
    return project / ".claude" / "specs" / feature


# --- new ---

def test_new_creates_feature_directory(project):
    result = runner.invoke(app, ["new", "user-auth"])
    assert result.exit_code == 0
    assert _spec_dir(project, "user-auth").is_dir()


def test_new_rejects_invalid_name(project):
    result = runner.invoke(app, ["new", "User Auth"])
    assert result.exit_code == 1
    assert not (project / ".claude" / "specs").exists()


def test_new_existing_feature_is_not_an_error(project):
    _spec_dir(project, "user-auth").mkdir(parents=True)
    result = runner.invoke(app, ["new", "user-auth"])
    assert result.exit_code == 0
    assert "already exists" in result.output


# --- features / status ---

def test_features_lists_spec_directories(project):
    for name in ("payments", "user-auth"):
        _spec_dir(project, name).mkdir(parents=True)
    result = runner.invoke(app, ["features"])
    assert result.exit_code == 0
    assert result.output.split() == ["payments", "user-auth"]


def test_features_when_none(project):
    result = runner.invoke(app, ["features"])
    assert result.exit_code == 0
    assert "No features yet" in result.output


def test_status_shows_documents_and_progress(project):
    spec = _spec_dir(project, "user-auth")
    spec.mkdir(parents=True)
    (spec / "requirements.md").write_text("# Requirements\n", encoding="utf-8")
    (spec / "design.md").write_text("# Design\n", encoding="utf-8")
    (spec / "tasks.md").write_text("- [x] 1. One\n- [ ] 2. Two\n", encoding="utf-8")
    result = runner.invoke(app, ["status"])
    assert result.exit_code == 0
    assert "[x] requirements" in result.output
    assert "[x] tasks" in result.output
    assert "1/2 tasks done" in result.output


def test_status_feature_without_tasks(project):
    _spec_dir(project, "payments").mkdir(parents=True)
    result = runner.invoke(app, ["status", "payments"])
    assert result.exit_code == 0
    assert "[ ] requirements" in result.output
    assert "tasks done" not in result.output


# --- prompt ---

def test_prompt_requirements_prints_template(project):
    _spec_dir(project, "user-auth").mkdir(parents=True)
    result = runner.invoke(app, ["prompt", "requirements", "user-auth", "--description", "Email login"])
    assert result.exit_code == 0
    assert "REQUIREMENTS agent" in result.output
    assert "Email login" in result.output


def test_prompt_design_without_requirements_fails(project):
    result = runner.invoke(app, ["prompt", "design", "user-auth"])
    assert result.exit_code == 1
    assert "Document not found" in result.output


def test_prompt_unknown_step_fails(project):
    result = runner.invoke(app, ["prompt", "deploy", "user-auth"])
    assert result.exit_code == 1


def test_prompt_run_passes_prompt_to_agent(project, monkeypatch):
    calls = []

    def fake_run_agent(agent_name, prompt, agent_cmd=""):
        calls.append((agent_name, agent_cmd))
        return 0

    monkeypatch.setattr("spec_agents.agents.run_agent", fake_run_agent)
    result = runner.invoke(app, ["prompt", "requirements", "user-auth", "--run", "--agent-cmd", "my-agent -p"])
    assert result.exit_code == 0
    assert calls == [("requirements-agent", "my-agent -p")]


def test_prompt_run_agent_failure_propagates_exit_code(project, monkeypatch):
    monkeypatch.setattr("spec_agents.agents.run_agent", lambda *args, **kwargs: 3)
    result = runner.invoke(app, ["prompt", "requirements", "user-auth", "--run"])
    assert result.exit_code == 3


# --- version ---

def test_version_flag(monkeypatch):
    monkeypatch.setattr("spec_agents.cli.get_version", lambda: "9.9.9")
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert "9.9.9" in result.output


def test_status_reports_undecodable_tasks_document(project):
    spec = _spec_dir(project, "user-auth")
    spec.mkdir(parents=True)
    (spec / "tasks.md").write_bytes(b"- [ ] 1. Caf\xe9 menu\n")
    result = runner.invoke(app, ["status", "user-auth"])
    assert result.exit_code == 0
    assert "UTF-8" in result.output
