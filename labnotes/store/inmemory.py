"""In-memory implementation of NoteRepository."""

from collections.abc import Iterable, Mapping
from pathlib import PurePosixPath

from labnotes.config import DEFAULT_SESSION_PATTERN
from labnotes.store.repositories import NoteNotFoundError


class InMemoryNoteRepository:
    """Notes held as text, keyed by root-relative path.

    Args:
        notes: Mapping of root-relative path (e.g. "day1/Day1.md") to text
        assets: Root-relative paths of asset files that exist
    """

    def __init__(
        self,
        notes: Mapping[str, str] | None = None,
        *,
        assets: Iterable[str] = (),
        session_pattern: str = DEFAULT_SESSION_PATTERN,
    ) -> None:
        self._paths: dict[str, str] = {}
        self._texts: dict[str, str] = {}
        for path, text in (notes or {}).items():
            note_id = str(PurePosixPath(path).with_suffix(""))
            self._paths[note_id] = path
            self._texts[note_id] = text
        self._assets = frozenset(assets)
        self.session_pattern = session_pattern

    def list_notes(self) -> list[str]:
        """List all note ids, sorted."""
        return sorted(self._texts)

    def note_path(self, note_id: str) -> str:
        """Path of the note relative to the notes root."""
        if note_id not in self._paths:
            raise NoteNotFoundError(note_id)
        return self._paths[note_id]

    def read_text(self, note_id: str) -> str:
        """Raw note text."""
        if note_id not in self._texts:
            raise NoteNotFoundError(note_id)
        return self._texts[note_id]

    def asset_exists(self, rel_path: str) -> bool:
        """Check that the path is one of the known assets."""
        return rel_path in self._assets
