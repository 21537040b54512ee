"""Filesystem implementation of NoteRepository."""

import logging
from collections.abc import Iterable
from pathlib import Path

from labnotes.config import DEFAULT_SESSION_PATTERN, Settings
from labnotes.store.repositories import NoteDecodeError, NoteNotFoundError, NotesRootError

logger = logging.getLogger(__name__)


class FileSystemNoteRepository:
    """Notes read directly from a directory tree.

    Every call rescans the tree; nothing is cached and nothing is written.
    """

    def __init__(
        self,
        root: Path,
        *,
        pattern: str = "*.md",
        recursive: bool = True,
        exclude: Iterable[str] = (),
        session_pattern: str = DEFAULT_SESSION_PATTERN,
    ) -> None:
        self.root = Path(root)
        self.pattern = pattern
        self.recursive = recursive
        self.exclude = frozenset(exclude)
        self.session_pattern = session_pattern

    @classmethod
    def from_settings(cls, settings: Settings) -> "FileSystemNoteRepository":
        """Build a repository from application settings."""
        return cls(
            settings.notes_root,
            pattern=settings.note_glob,
            recursive=settings.recursive,
            exclude=settings.exclude,
            session_pattern=settings.session_pattern,
        )

    def ensure_root(self) -> None:
        """Raise NotesRootError unless the root is a directory."""
        if not self.root.is_dir():
            raise NotesRootError(self.root)

    def _scan(self) -> dict[str, Path]:
        """Map note ids to absolute file paths."""
        self.ensure_root()
        candidates = self.root.rglob(self.pattern) if self.recursive else self.root.glob(self.pattern)

        notes: dict[str, Path] = {}
        for path in candidates:
            rel = path.relative_to(self.root)
            parents = rel.parts[:-1]
            if any(part.startswith(".") or part in self.exclude for part in parents):
                continue
            if rel.name.startswith(".") or not path.is_file():
                continue
            notes[rel.with_suffix("").as_posix()] = path
        return notes

    def list_notes(self) -> list[str]:
        """List all note ids, sorted."""
        return sorted(self._scan())

    def _resolve(self, note_id: str) -> Path:
        path = self._scan().get(note_id)
        if path is None:
            raise NoteNotFoundError(note_id)
        return path

    def note_path(self, note_id: str) -> str:
        """Path of the note relative to the notes root."""
        return self._resolve(note_id).relative_to(self.root).as_posix()

    def read_text(self, note_id: str) -> str:
        """Raw note text, UTF-8 with optional BOM."""
        path = self._resolve(note_id)
        try:
            return path.read_bytes().decode("utf-8-sig")
        except UnicodeDecodeError as e:
            rel = path.relative_to(self.root).as_posix()
            logger.warning("Undecodable note: %s", rel)
            raise NoteDecodeError(note_id, rel, str(e)) from e

    def asset_exists(self, rel_path: str) -> bool:
        """Check that a root-relative path names an existing file."""
        return (self.root / rel_path).is_file()
