"""Agent prompt templates.

Each constant is a format string. Use .format() to interpolate variables
before passing the result to run_agent().

Prompts are organized by agent, one module per agent. This __init__
re-exports every constant so callers can write
``from spec_agents.prompts import X``.
"""

from spec_agents.prompts.design import DESIGN_PROMPT
from spec_agents.prompts.implementation import IMPLEMENTATION_PROMPT
from spec_agents.prompts.requirements import REQUIREMENTS_PROMPT
from spec_agents.prompts.tasks import TASKS_PROMPT

__all__ = [
    "DESIGN_PROMPT",
    "IMPLEMENTATION_PROMPT",
    "REQUIREMENTS_PROMPT",
    "TASKS_PROMPT",
]
