"""Note retriever - search note sections by query."""

from collections.abc import Sequence

from pydantic import BaseModel

from labnotes.index.builder import index_sort_key
from labnotes.models.notes import NoteDocument


class SectionMatch(BaseModel):
    """Note section with relevance score."""

    note_id: str
    path: str
    session: int | None = None
    section_title: str
    line: int
    text: str
    score: float


def search_notes(
    notes: Sequence[NoteDocument],
    query: str,
    *,
    limit: int = 5,
) -> list[SectionMatch]:
    """Search note sections by query with simple token matching.

    Scoring strategy:
    - Tokenize query on spaces (lowercase)
    - For each section, count how many query tokens appear as substrings
      of its title or text
    - Filter out sections with score = 0
    - Sort by score descending, then by session order, then by section
      order (for determinism)
    - Apply limit

    Args:
        notes: Parsed notes
        query: Search query string
        limit: Maximum number of results to return

    Returns:
        List of SectionMatch sorted by relevance (descending score)
    """
    query_tokens = [token.strip() for token in query.lower().split() if token.strip()]
    if not query_tokens:
        return []

    scored: list[tuple[float, int, int, SectionMatch]] = []

    for rank, note in enumerate(sorted(notes, key=index_sort_key)):
        for order, section in enumerate(note.sections):
            haystack = f"{section.title}\n{section.text}".lower()
            match_count = sum(1 for token in query_tokens if token in haystack)
            if match_count == 0:
                continue

            match = SectionMatch(
                note_id=note.note_id,
                path=note.path,
                session=note.session,
                section_title=section.title or note.title,
                line=section.line,
                text=section.text,
                score=float(match_count),
            )
            scored.append((float(match_count), rank, order, match))

    scored.sort(key=lambda x: (-x[0], x[1], x[2]))

    return [match for _, _, _, match in scored[:limit]]
