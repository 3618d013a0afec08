"""Configuration constants for the spec-driven agent workflow.

Paths are relative to the project root. Environment variables are read at
call time by the modules that need them, so tests and CLI options can
override them without reloading anything.
"""

# ---------------------------------------------------------------------------
# Spec workspace layout
# ---------------------------------------------------------------------------

SPECS_DIR = ".claude/specs"
STEERING_DIR = ".claude/steering"
LOGS_DIR = "logs"

REQUIREMENTS_FILE = "requirements.md"
DESIGN_FILE = "design.md"
TASKS_FILE = "tasks.md"

STEERING_FILES = ("product.md", "tech.md", "structure.md")

SPECS_DIR_ENV = "SPEC_AGENTS_SPECS_DIR"
AGENT_CMD_ENV = "SPEC_AGENTS_AGENT_CMD"

DEFAULT_AGENT_CMD = "copilot --allow-all-tools -p"

# Which workflow step produces each document, used in "not found" guidance.
DOCUMENT_PRODUCERS = {
    REQUIREMENTS_FILE: "spec-agents prompt requirements",
    DESIGN_FILE: "spec-agents prompt design",
    TASKS_FILE: "spec-agents prompt tasks",
}


# ---------------------------------------------------------------------------
# Task selection
# ---------------------------------------------------------------------------

# Words in a hint that ask for every pending task instead of just one.
ALL_INTENT_WORDS = {"all", "remaining", "rest", "every"}

# Reserved metadata key that carries a task's completion timestamp.
COMPLETED_AT_KEY = "completed_at"


# ---------------------------------------------------------------------------
# Agent execution
# ---------------------------------------------------------------------------

# Kill an agent process after this many seconds without output.
AGENT_IDLE_TIMEOUT = 300


# ---------------------------------------------------------------------------
# Code skeletons: (ecosystem, capability) -> template settings
# ---------------------------------------------------------------------------

PYTHON_SKELETONS = {
    "interface": {
        "filename": "${module}.py",
        "body": (
            "from typing import Protocol\n"
            "\n"
            "\n"
            "class ${name}(Protocol):\n"
            "    \"\"\"${description}\"\"\"\n"
            "\n"
            "    def execute(self, request: dict) -> dict:\n"
            "        ...\n"
        ),
    },
    "service": {
        "filename": "${module}.py",
        "body": (
            "class ${name}:\n"
            "    \"\"\"${description}\"\"\"\n"
            "\n"
            "    def execute(self, request: dict) -> dict:\n"
            "        raise NotImplementedError\n"
        ),
    },
    "test": {
        "filename": "test_${module}.py",
        "body": (
            "from ${module} import ${name}\n"
            "\n"
            "\n"
            "def test_${module}_executes():\n"
            "    service = ${name}()\n"
            "    assert service.execute({}) is not None\n"
        ),
    },
}

TYPESCRIPT_SKELETONS = {
    "interface": {
        "filename": "${module}.ts",
        "body": (
            "// ${description}\n"
            "export interface ${name} {\n"
            "  execute(request: Record<string, unknown>): Promise<Record<string, unknown>>;\n"
            "}\n"
        ),
    },
    "service": {
        "filename": "${module}.ts",
        "body": (
            "// ${description}\n"
            "export class ${name} {\n"
            "  async execute(request: Record<string, unknown>): Promise<Record<string, unknown>> {\n"
            "    throw new Error(\"not implemented\");\n"
            "  }\n"
            "}\n"
        ),
    },
    "test": {
        "filename": "${module}.test.ts",
        "body": (
            "import { ${name} } from \"./${module}\";\n"
            "\n"
            "describe(\"${name}\", () => {\n"
            "  it(\"executes\", async () => {\n"
            "    const service = new ${name}();\n"
            "    await expect(service.execute({})).resolves.toBeDefined();\n"
            "  });\n"
            "});\n"
        ),
    },
}


# ---------------------------------------------------------------------------
# Combined lookup: ecosystem name -> skeleton dict
# ---------------------------------------------------------------------------

SKELETON_TEMPLATES = {
    "python": PYTHON_SKELETONS,
    "typescript": TYPESCRIPT_SKELETONS,
}
