"""Repository protocol interfaces for note access."""

from pathlib import Path
from typing import Protocol


class NoteNotFoundError(LookupError):
    """A note id or session number matches no document."""

    def __init__(self, identifier: str | int) -> None:
        self.identifier = identifier
        super().__init__(f"missing document: {identifier}")


class NoteDecodeError(ValueError):
    """A note file is not valid UTF-8."""

    def __init__(self, note_id: str, path: str, reason: str) -> None:
        self.note_id = note_id
        self.path = path
        self.reason = reason
        super().__init__(f"cannot decode {path}: {reason}")


class NotesRootError(FileNotFoundError):
    """The configured notes root is not a directory."""

    def __init__(self, root: Path) -> None:
        self.root = root
        super().__init__(f"notes root is not a directory: {root}")


class NoteRepository(Protocol):
    """Read-only access to a set of Markdown notes.

    Notes are keyed by note_id: the path relative to the notes root,
    POSIX separators, without the file suffix.
    """

    session_pattern: str

    def list_notes(self) -> list[str]:
        """List all note ids, sorted.

        Raises:
            NotesRootError: the store has no readable root
        """
        ...

    def note_path(self, note_id: str) -> str:
        """Path of the note relative to the notes root, POSIX separators.

        Raises:
            NoteNotFoundError: unknown note id
        """
        ...

    def read_text(self, note_id: str) -> str:
        """Raw note text.

        Raises:
            NoteNotFoundError: unknown note id
            NoteDecodeError: content is not UTF-8
        """
        ...

    def asset_exists(self, rel_path: str) -> bool:
        """Check that a root-relative asset path names an existing file."""
        ...
