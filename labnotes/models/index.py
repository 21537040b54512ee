"""Index models - ordered table of contents."""

from pydantic import BaseModel, Field

from labnotes.models.findings import Finding


class IndexEntry(BaseModel):
    """One note's position in the index."""

    position: int  # 1-based
    note_id: str
    path: str
    session: int | None = None
    session_label: str | None = None
    title: str


class NoteIndex(BaseModel):
    """Notes ordered by session number, with ordering warnings."""

    entries: list[IndexEntry] = Field(default_factory=list)
    warnings: list[Finding] = Field(default_factory=list)
