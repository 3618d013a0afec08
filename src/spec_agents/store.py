"""Reading and writing spec documents, with distinct failure kinds.

A missing document is a different problem for the user than a failed write
(run an earlier workflow step vs. fix permissions), so each gets its own
exception instead of an empty result. A document that is not UTF-8 text
gets a third one.
"""

import os
import stat
import tempfile

from spec_agents.config import DOCUMENT_PRODUCERS
from spec_agents.tasks import TaskDocument, parse_document, render_document

_NEW_FILE_MODE = 0o644


class DocumentNotFoundError(FileNotFoundError):
    """A spec document does not exist yet."""

    def __init__(self, path: str):
        self.path = path
        producer = DOCUMENT_PRODUCERS.get(os.path.basename(path))
        message = f"Document not found: {path}"
        if producer:
            message += f". Create it first with '{producer}'."
        super().__init__(message)


class PersistenceError(OSError):
    """A spec document could not be written."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Could not write {path}: {reason}")


class UnreadableDocumentError(ValueError):
    """A spec document exists but is not valid UTF-8 text."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Could not read {path}: {reason}")


def read_document(path: str) -> str:
    """Return the text of a document.

    Raises DocumentNotFoundError if absent and UnreadableDocumentError if the
    bytes do not decode as UTF-8.
    """
    if not os.path.isfile(path):
        raise DocumentNotFoundError(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()
    except UnicodeDecodeError as e:
        raise UnreadableDocumentError(path, f"not valid UTF-8 ({e.reason} at byte {e.start})") from e


def write_document(path: str, text: str) -> None:
    """Write text to a document, creating parent directories as needed.

    The text goes to a temporary file in the same directory which then
    replaces *path*, so a failed write leaves the previous document intact.
    Any OSError is re-raised as PersistenceError. The caller still holds the
    text it tried to write, so the write can simply be retried.
    """
    parent = os.path.dirname(path) or "."
    tmp_path = None
    try:
        os.makedirs(parent, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(prefix=".tmp-", suffix=".md", dir=parent)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        # mkstemp creates 0600 files
        mode = stat.S_IMODE(os.stat(path).st_mode) if os.path.exists(path) else _NEW_FILE_MODE
        os.chmod(tmp_path, mode)
        os.replace(tmp_path, path)
    except OSError as e:
        if tmp_path is not None and os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise PersistenceError(path, e.strerror or str(e)) from e


def load_tasks(path: str) -> TaskDocument:
    """Read and parse a tasks.md file into a TaskDocument."""
    return parse_document(read_document(path))


def save_tasks(path: str, document: TaskDocument) -> None:
    """Serialize a TaskDocument and write it back to *path*."""
    write_document(path, render_document(document))
