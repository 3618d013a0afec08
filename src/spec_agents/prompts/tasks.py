"""Task list prompt template.

The generated checklist is parsed by spec_agents.tasks, so the format rules
here must stay in sync with that parser.
"""

TASKS_PROMPT = """\
You are the TASK PLANNING agent for the feature '{feature}'. Turn the approved \
requirements and design into an implementation checklist and write it to \
{tasks_path}.

Approved requirements:
{requirements}

Approved design:
{design}

Format every task exactly like this:

# Implementation Plan

- [ ] 1. Short imperative task statement
  leverage: existing module or component to reuse
  requirements: 1.1, 2.3

Rules:
- One checkbox line per task, all unchecked ([ ]). The tracker owns the checkboxes.
- Number tasks in the order they must be done. Each task is small enough for one \
focused coding session and leaves the project building and tested.
- Metadata lines are indented two spaces and use 'key: value'. Always include \
'requirements:'. Include 'leverage:' when the task reuses existing code.
- Only coding tasks: writing, modifying, or testing code. No deployment, user \
testing, or documentation-only tasks.
"""
