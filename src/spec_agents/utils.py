"""Core utility functions: logging, project root discovery, agent execution."""

import os
import shlex
import subprocess
import sys
import threading
import time
from datetime import datetime

from rich.console import Console

from spec_agents.config import AGENT_CMD_ENV, AGENT_IDLE_TIMEOUT, DEFAULT_AGENT_CMD, LOGS_DIR

console = Console()

_ROOT_MARKERS = (".claude", ".git")


def find_project_root(cwd: str) -> str:
    """Return the nearest directory at or above *cwd* holding .claude/ or .git/.

    Falls back to *cwd* itself when no marker is found, so a fresh directory
    can be used as a project root before anything is created in it.
    """
    current = os.path.abspath(cwd)
    while True:
        if any(os.path.isdir(os.path.join(current, marker)) for marker in _ROOT_MARKERS):
            return current
        parent = os.path.dirname(current)
        if parent == current:
            return os.path.abspath(cwd)
        current = parent


def resolve_logs_dir() -> str:
    """Find the project root logs directory, creating it if needed."""
    project_root = find_project_root(os.getcwd())
    logs_dir = os.path.join(project_root, LOGS_DIR)
    os.makedirs(logs_dir, exist_ok=True)
    return logs_dir


def log(agent_name: str, message: str, style: str = "") -> None:
    """Write a message to both the console (with optional style) and the agent log file."""
    if style:
        console.print(message, style=style)
    else:
        console.print(message)

    try:
        logs_dir = resolve_logs_dir()
        log_file = os.path.join(logs_dir, f"{agent_name}.log")
        with open(log_file, "a", encoding="utf-8") as f:
            f.write(message + "\n")
    except Exception:
        pass  # Never break the workflow over logging


def _write_log_entry(log_file: str, text: str) -> None:
    """Append text to a log file. Never raises."""
    try:
        with open(log_file, "a", encoding="utf-8") as f:
            f.write(text)
    except Exception:
        pass


def _write_line_to_log(f, line: str) -> None:
    """Write a single line to a log file handle, silently ignoring errors."""
    try:
        f.write(line)
        f.flush()
    except Exception:
        pass


def resolve_agent_command(agent_cmd: str = "") -> list[str]:
    """Split the agent command line into argv.

    Precedence: explicit *agent_cmd*, then the SPEC_AGENTS_AGENT_CMD
    environment variable, then the default. The prompt is appended by the
    caller as the final argument.
    """
    command = agent_cmd or os.environ.get(AGENT_CMD_ENV, "") or DEFAULT_AGENT_CMD
    parts = shlex.split(command, posix=sys.platform != "win32")
    if not parts:
        raise SystemExit(f"Agent command is empty. Set {AGENT_CMD_ENV} or pass --agent-cmd.")
    return parts


# Exit code returned when an agent call is killed due to idle timeout.
_TIMEOUT_EXIT_CODE = -99


def _stream_with_idle_timeout(
    proc: subprocess.Popen, log_file: str, idle_timeout: int,
) -> int:
    """Stream subprocess output with an idle timeout.

    Reads stdout in a background thread while the main thread monitors
    for idle periods. If no output arrives for *idle_timeout* seconds,
    the process is killed.

    Returns the process exit code (_TIMEOUT_EXIT_CODE on timeout).
    """
    last_output_time = time.monotonic()
    lock = threading.Lock()
    finished = threading.Event()

    def _reader() -> None:
        nonlocal last_output_time
        try:
            with open(log_file, "a", encoding="utf-8") as f:
                for line in proc.stdout:
                    with lock:
                        last_output_time = time.monotonic()
                    sys.stdout.write(line)
                    sys.stdout.flush()
                    _write_line_to_log(f, line)
        except Exception:
            pass
        finally:
            finished.set()

    reader_thread = threading.Thread(target=_reader, daemon=True)
    reader_thread.start()

    while not finished.wait(timeout=10):
        with lock:
            idle_seconds = time.monotonic() - last_output_time
        if idle_seconds >= idle_timeout:
            try:
                proc.kill()
            except Exception:
                pass
            finished.set()
            return _TIMEOUT_EXIT_CODE

    proc.wait()
    return proc.returncode


def run_agent(agent_name: str, prompt: str, agent_cmd: str = "") -> int:
    """Run the external agent CLI with *prompt*, streaming output to console and log.

    Returns the process exit code, or _TIMEOUT_EXIT_CODE if the agent went
    silent for longer than AGENT_IDLE_TIMEOUT. A missing executable is
    reported as exit code 127.
    """
    cmd = resolve_agent_command(agent_cmd) + [prompt]
    logs_dir = resolve_logs_dir()
    log_file = os.path.join(logs_dir, f"{agent_name}.log")

    timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    header = (
        f"\n========== [{timestamp}] {agent_name} ==========\n"
        f"Command: {cmd[0]}\n"
        f"Prompt: {prompt[:100]}...\n"
        f"--- output ---\n"
    )
    _write_log_entry(log_file, header)

    try:
        proc = subprocess.Popen(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            bufsize=1,
        )
    except FileNotFoundError:
        log(agent_name, f"Agent command not found: {cmd[0]}", style="bold red")
        return 127

    exit_code = _stream_with_idle_timeout(proc, log_file, AGENT_IDLE_TIMEOUT)

    if exit_code == _TIMEOUT_EXIT_CODE:
        _write_log_entry(log_file, f"--- TIMEOUT (no output for {AGENT_IDLE_TIMEOUT}s) ---\n")
    else:
        _write_log_entry(log_file, f"--- end (exit: {exit_code}) ---\n")
    return exit_code
