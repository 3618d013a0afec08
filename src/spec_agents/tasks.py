"""Task list parsing, selection, completion, and serialization.

A task list is a checklist document such as::

    # Implementation Plan

    - [ ] 1. Write login form
      leverage: AuthService
      requirements: 1.1, 1.2
    - [x] 2. Write tests

Parsing runs in two passes. The first pass tokenizes every line as TASK,
METADATA, BLANK or OTHER; the second assembles TaskRecords from the token
stream. Every function here is pure: it takes a snapshot and returns a new
one, and the caller decides when to persist it.
"""

import re
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone

from spec_agents.config import ALL_INTENT_WORDS, COMPLETED_AT_KEY

PENDING = "pending"
COMPLETED = "completed"


class UnknownTaskError(LookupError):
    """Raised when a record does not belong to the task list it is applied to."""


# ============================================
# Data types
# ============================================

@dataclass(frozen=True)
class TaskRecord:
    """A single checklist item from a task list."""
    sequence_number: int       # 1-based position in the document
    description: str
    status: str = PENDING      # PENDING or COMPLETED
    metadata: dict[str, str] = field(default_factory=dict)
    completed_at: datetime | None = None
    ordinal: str | None = None  # label written in the line, e.g. "2.1"
    notes: tuple[str, ...] = ()  # headings and prose that follow the task, verbatim

    @property
    def is_pending(self) -> bool:
        return self.status != COMPLETED


@dataclass(frozen=True)
class TaskDocument:
    """Snapshot of a whole task list: the lines before the first task plus the tasks."""
    preamble: tuple[str, ...] = ()
    tasks: tuple[TaskRecord, ...] = ()


# ============================================
# Pass 1: tokenizer
# ============================================

TASK = "task"
METADATA = "metadata"
BLANK = "blank"
OTHER = "other"

_TASK_LINE_RE = re.compile(
    r"^\s*"
    r"(?:(?P<lead>\d+(?:\.\d+)*)\.\s+)?"
    r"(?:[-*+]\s+)?"
    r"\[(?P<marker>[^\]])\]\s+"
    r"(?:(?:(?P<dotted>\d+(?:\.\d+)+)\.?|(?P<number>\d+)\.)\s+)?"
    r"(?P<description>\S.*?)\s*$"
)

# "  - _Requirements: 1.1_": emphasis wraps the whole entry and must close
# with the same marker it opened with.
_EMPHASIZED_METADATA_LINE_RE = re.compile(
    r"^\s+(?:[-*+]\s+)?(?P<em>[_*]{1,2})"
    r"(?P<key>[A-Za-z][\w \-]*?)\s*:\s*"
    r"(?P<value>.*?)(?P=em)\s*$"
)

_METADATA_LINE_RE = re.compile(
    r"^\s+(?:[-*+]\s+)?"
    r"(?P<key>[A-Za-z][\w \-]*?)\s*:\s*"
    r"(?P<value>.*?)\s*$"
)


@dataclass(frozen=True)
class Token:
    """One classified line of a task list."""
    kind: str
    line_number: int
    text: str
    groups: dict[str, str] = field(default_factory=dict)


def classify_line(line: str) -> tuple[str, dict[str, str]]:
    """Classify a single line and return (kind, captured groups).

    Pure function. Task lines win over metadata lines; metadata lines must be
    indented so headings and prose at column 0 are never mistaken for them.
    """
    if not line.strip():
        return BLANK, {}
    m = _TASK_LINE_RE.match(line)
    if m:
        ordinal = m.group("dotted") or m.group("number") or m.group("lead")
        return TASK, {
            "marker": m.group("marker"),
            "ordinal": ordinal or "",
            "description": m.group("description"),
        }
    m = _EMPHASIZED_METADATA_LINE_RE.match(line) or _METADATA_LINE_RE.match(line)
    if m:
        return METADATA, {"key": m.group("key").strip(), "value": m.group("value").strip()}
    return OTHER, {}


def tokenize(text: str) -> list[Token]:
    """Split task list text into classified tokens, one per line."""
    tokens = []
    for number, line in enumerate(text.splitlines(), start=1):
        kind, groups = classify_line(line)
        tokens.append(Token(kind=kind, line_number=number, text=line, groups=groups))
    return tokens


# ============================================
# Pass 2: assembly
# ============================================

def _status_from_marker(marker: str) -> str:
    """Map a checkbox marker to a status.

    [x] and [X] are completed. Every other marker, including unknown ones
    like [-] or [~], counts as pending.
    """
    return COMPLETED if marker.lower() == "x" else PENDING


def _parse_timestamp(value: str) -> datetime | None:
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


def _build_record(
    sequence_number: int, groups: dict[str, str], metadata_tokens: list[Token], notes: list[str],
) -> TaskRecord:
    notes = list(notes)
    while notes and not notes[-1]:
        notes.pop()
    metadata: dict[str, str] = {}
    completed_at = None
    for token in metadata_tokens:
        key = token.groups["key"]
        value = token.groups["value"]
        if key == COMPLETED_AT_KEY:
            stamp = _parse_timestamp(value)
            if stamp is not None:
                completed_at = stamp
                continue
        metadata[key] = value
    return TaskRecord(
        sequence_number=sequence_number,
        description=groups["description"],
        status=_status_from_marker(groups["marker"]),
        metadata=metadata,
        completed_at=completed_at,
        ordinal=groups["ordinal"] or None,
        notes=tuple(notes),
    )


def assemble(tokens: list[Token]) -> TaskDocument:
    """Build a TaskDocument from a token stream.

    TASK tokens open a new record. METADATA tokens attach to the open record
    and are dropped when no record is open yet. BLANK and OTHER tokens before
    the first task form the preamble; after it they become the open record's
    notes, minus trailing blank lines.
    """
    preamble: list[str] = []
    records: list[TaskRecord] = []
    open_groups: dict[str, str] | None = None
    open_metadata: list[Token] = []
    open_notes: list[str] = []

    for token in tokens:
        if token.kind == TASK:
            if open_groups is not None:
                records.append(_build_record(len(records) + 1, open_groups, open_metadata, open_notes))
            open_groups = token.groups
            open_metadata = []
            open_notes = []
        elif token.kind == METADATA:
            if open_groups is not None:
                open_metadata.append(token)
        elif open_groups is None:
            preamble.append(token.text.rstrip())
        else:
            open_notes.append(token.text.rstrip())

    if open_groups is not None:
        records.append(_build_record(len(records) + 1, open_groups, open_metadata, open_notes))

    while preamble and not preamble[-1]:
        preamble.pop()
    while preamble and not preamble[0]:
        preamble.pop(0)
    return TaskDocument(preamble=tuple(preamble), tasks=tuple(records))


def parse_document(text: str) -> TaskDocument:
    """Parse task list text into a TaskDocument (preamble plus tasks)."""
    return assemble(tokenize(text))


def parse(text: str) -> list[TaskRecord]:
    """Parse task list text into TaskRecords in document order.

    Lines that are neither tasks nor metadata are kept as the preceding
    task's notes. A document with no task lines yields an empty list, never
    an error.
    """
    return list(parse_document(text).tasks)


# ============================================
# Selection
# ============================================

# First standalone number in a hint: "task 3", "#3", "2.1". Digits glued to
# letters ("v2") do not count.
_HINT_ORDINAL_RE = re.compile(r"(?<![\w.])(\d+(?:\.\d+)*)(?!\.?\d)")


def _hint_ordinal(hint: str) -> str | None:
    m = _HINT_ORDINAL_RE.search(hint)
    return m.group(1) if m else None


def _has_all_intent(hint: str) -> bool:
    words = set(re.findall(r"[a-z]+", hint.lower()))
    return bool(words & ALL_INTENT_WORDS)


def select_next(tasks: list[TaskRecord], hint: str | None = None) -> list[TaskRecord]:
    """Return the task(s) a caller should act on next.

    Priority:
      1. The hint names a task ("execute task 3"): that task if it exists and
         is pending, else an empty list. A plain number matches the sequence
         number; a dotted label ("2.1") matches the ordinal written in the line.
      2. The hint asks for everything ("all remaining"): every pending task
         in sequence order.
      3. Otherwise: the first pending task, or an empty list.

    Never changes any status.
    """
    hint = hint or ""
    ordinal = _hint_ordinal(hint)
    if ordinal is not None:
        if "." in ordinal:
            matches = [t for t in tasks if t.ordinal == ordinal]
        else:
            matches = [t for t in tasks if t.sequence_number == int(ordinal)]
        return [t for t in matches[:1] if t.is_pending]

    pending = sorted((t for t in tasks if t.is_pending), key=lambda t: t.sequence_number)
    if _has_all_intent(hint):
        return pending
    return pending[:1]


# ============================================
# Completion
# ============================================

def mark_completed(
    tasks: list[TaskRecord], record: TaskRecord, now: datetime | None = None,
) -> list[TaskRecord]:
    """Return a new task list with *record* completed and stamped.

    Records are matched by sequence number. Every other record is returned
    as the same object. An already-completed record is left as is, keeping
    its original completed_at.
    """
    target = record.sequence_number
    if not any(t.sequence_number == target for t in tasks):
        raise UnknownTaskError(f"Task {target} is not in this task list")

    stamp = now or datetime.now(timezone.utc)
    updated = []
    for task in tasks:
        if task.sequence_number == target and task.is_pending:
            task = replace(task, status=COMPLETED, completed_at=stamp)
        updated.append(task)
    return updated


def summarize(tasks: list[TaskRecord]) -> dict:
    """Return progress counts: {"total": int, "done": int, "pending": int}."""
    done = sum(1 for t in tasks if not t.is_pending)
    return {"total": len(tasks), "done": done, "pending": len(tasks) - done}


# ============================================
# Serialization
# ============================================

def format_task_line(task: TaskRecord) -> str:
    """Render the checkbox line for one task, e.g. '- [x] 2. Write tests'."""
    box = "[ ]" if task.is_pending else "[x]"
    if not task.ordinal:
        label = ""
    elif "." in task.ordinal:
        label = f"{task.ordinal} "
    else:
        label = f"{task.ordinal}. "
    return f"- {box} {label}{task.description}"


def serialize(tasks: list[TaskRecord], preamble: tuple[str, ...] = ()) -> str:
    """Render tasks back to checklist text.

    Each task becomes one checkbox line followed by its metadata as indented
    'key: value' lines in insertion order, then its completion stamp if any,
    then its notes.
    """
    lines = list(preamble)
    if lines and tasks:
        lines.append("")
    for task in tasks:
        lines.append(format_task_line(task))
        for key, value in task.metadata.items():
            lines.append(f"  {key}: {value}".rstrip())
        if task.completed_at is not None:
            lines.append(f"  {COMPLETED_AT_KEY}: {task.completed_at.isoformat()}")
        lines.extend(task.notes)
    if not lines:
        return ""
    return "\n".join(lines) + "\n"


def render_document(document: TaskDocument) -> str:
    """Serialize a whole TaskDocument, preamble included."""
    return serialize(list(document.tasks), document.preamble)
