"""Index builder - order notes by session and render a table of contents."""

import logging
from collections import defaultdict
from collections.abc import Collection, Sequence
from pathlib import Path, PurePosixPath
from urllib.parse import quote

from labnotes.models.findings import FindingKind, FindingSeverity, note_finding
from labnotes.models.index import IndexEntry, NoteIndex
from labnotes.models.notes import NoteSummary

logger = logging.getLogger(__name__)


def index_sort_key(note: NoteSummary) -> tuple[bool, int, str, str]:
    """Numbered sessions first, ascending; ties and unnumbered notes by filename."""
    return (
        note.session is None,
        note.session if note.session is not None else 0,
        PurePosixPath(note.path).name,
        note.path,
    )


def build_index(notes: Sequence[NoteSummary], *, index_exclude: Collection[str] = ()) -> NoteIndex:
    """Order notes by session number and collect ordering warnings.

    Args:
        notes: Parsed notes (or summaries)
        index_exclude: File names left out of the index entirely (README.md)

    Returns:
        NoteIndex whose warnings are:
        - DUPLICATE_SESSION: one per session number claimed by several notes
        - MISSING_SESSION: one per note with no session number

    Duplicates never drop an entry; every note keeps its place.
    """
    excluded = set(index_exclude)
    included = [n for n in notes if PurePosixPath(n.path).name not in excluded]
    ordered = sorted(included, key=index_sort_key)

    entries = [
        IndexEntry(
            position=position,
            note_id=note.note_id,
            path=note.path,
            session=note.session,
            session_label=note.session_label,
            title=note.title,
        )
        for position, note in enumerate(ordered, start=1)
    ]

    by_session: dict[int, list[NoteSummary]] = defaultdict(list)
    for note in ordered:
        if note.session is not None:
            by_session[note.session].append(note)

    warnings = []
    for session, claimants in sorted(by_session.items()):
        if len(claimants) < 2:
            continue
        paths = [n.path for n in claimants]
        logger.warning("Duplicate session %d claimed by %s", session, ", ".join(paths))
        warnings.append(
            note_finding(
                claimants[1],
                kind=FindingKind.SESSION,
                code="DUPLICATE_SESSION",
                message=f"Session {session} is claimed by {len(paths)} notes: {', '.join(paths)}.",
                severity=FindingSeverity.WARNING,
                details={"session": session, "paths": paths},
            )
        )

    for note in ordered:
        if note.session is None:
            warnings.append(
                note_finding(
                    note,
                    kind=FindingKind.SESSION,
                    code="MISSING_SESSION",
                    message="No session number in front matter, file name or title.",
                    severity=FindingSeverity.WARNING,
                )
            )

    return NoteIndex(entries=entries, warnings=warnings)


def entry_label(entry: IndexEntry) -> str:
    """Link text for an entry, e.g. "Day 1: Introduction"."""
    if not entry.session_label:
        return entry.title
    if entry.title.lower().startswith(entry.session_label.lower()):
        return entry.title
    return f"{entry.session_label}: {entry.title}"


def render_index(index: NoteIndex, *, title: str = "Workshop Notes") -> str:
    """Render the index as a Markdown table of contents."""
    lines = [f"# {title}", ""]
    for entry in index.entries:
        text = entry_label(entry).replace("[", "\\[").replace("]", "\\]")
        lines.append(f"- [{text}]({quote(entry.path)})")
    return "\n".join(lines) + "\n"


def write_index(index: NoteIndex, *, root: Path, index_file: str, title: str) -> Path:
    """Write the rendered table of contents into the notes root."""
    target = root / index_file
    target.write_text(render_index(index, title=title), encoding="utf-8")
    logger.info("Wrote index with %d entries to %s", len(index.entries), target)
    return target
