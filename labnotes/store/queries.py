"""Note lookups built on the repository primitives."""

import logging
import posixpath
from urllib.parse import unquote

from labnotes.docs.parser import parse_document
from labnotes.index.builder import index_sort_key
from labnotes.models.notes import NoteDocument
from labnotes.store.repositories import NoteDecodeError, NoteNotFoundError, NoteRepository

logger = logging.getLogger(__name__)


def load_note(store: NoteRepository, note_id: str) -> NoteDocument:
    """Read and parse one note.

    Raises:
        NoteNotFoundError: unknown note id
        NoteDecodeError: content is not UTF-8
    """
    text = store.read_text(note_id)
    return parse_document(
        text,
        path=store.note_path(note_id),
        note_id=note_id,
        session_pattern=store.session_pattern,
    )


def load_notes(store: NoteRepository) -> list[NoteDocument]:
    """Parse every decodable note, in index order."""
    notes: list[NoteDocument] = []
    for note_id in store.list_notes():
        try:
            notes.append(load_note(store, note_id))
        except NoteDecodeError as e:
            logger.warning("Skipping note %s: %s", note_id, e.reason)
    notes.sort(key=index_sort_key)
    return notes


def get_session_text(store: NoteRepository, session: int) -> str:
    """Raw text of the note for a session number.

    When several notes claim the session the first in index order wins.

    Raises:
        NoteNotFoundError: no note has this session number
    """
    candidates = [note for note in load_notes(store) if note.session == session]
    if not candidates:
        raise NoteNotFoundError(f"session {session}")

    if len(candidates) > 1:
        logger.warning(
            "Session %d claimed by %d notes, returning %s",
            session,
            len(candidates),
            candidates[0].path,
        )
    return store.read_text(candidates[0].note_id)


def resolve_asset(note_path: str, target: str) -> str | None:
    """Resolve an asset target to a path relative to the notes root.

    Query strings and fragments are dropped and percent-escapes decoded.
    Relative targets resolve against the note's directory, targets starting
    with "/" against the notes root.

    Returns:
        Normalized root-relative POSIX path, or None when the target
        escapes the notes root
    """
    cleaned = target.split("#", 1)[0].split("?", 1)[0]
    cleaned = unquote(cleaned).replace("\\", "/")

    if cleaned.startswith("/"):
        joined = cleaned.lstrip("/")
    else:
        joined = posixpath.join(posixpath.dirname(note_path), cleaned)

    normalized = posixpath.normpath(joined) if joined else "."
    if normalized == ".." or normalized.startswith("../"):
        return None
    return normalized
