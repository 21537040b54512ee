"""Note endpoints - GET /notes, GET /notes/search, GET /notes/{session}."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from labnotes.api.deps import get_store
from labnotes.config import Settings, get_settings
from labnotes.docs.retriever import SectionMatch, search_notes
from labnotes.models.notes import NoteSummary
from labnotes.store.queries import get_session_text, load_notes
from labnotes.store.repositories import NoteNotFoundError, NoteRepository

router = APIRouter(prefix="/notes", tags=["notes"])


class NoteListResponse(BaseModel):
    """Response for GET /notes."""

    notes: list[NoteSummary]


class NoteSearchResponse(BaseModel):
    """Response for GET /notes/search."""

    matches: list[SectionMatch]
    query: str


@router.get("", response_model=NoteListResponse)
def list_notes(
    store: Annotated[NoteRepository, Depends(get_store)],
) -> NoteListResponse:
    """List note summaries in index order (session, then filename)."""
    notes = load_notes(store)
    return NoteListResponse(notes=[note.summary() for note in notes])


@router.get("/search", response_model=NoteSearchResponse)
def search_notes_endpoint(
    store: Annotated[NoteRepository, Depends(get_store)],
    settings: Annotated[Settings, Depends(get_settings)],
    query: Annotated[str, Query(min_length=1, max_length=200)],
    limit: Annotated[int | None, Query(ge=1, le=50)] = None,
) -> NoteSearchResponse:
    """Search note sections by query string.

    Args:
        store: Note repository
        settings: Application settings (default limit)
        query: Search query string
        limit: Maximum number of results (default from settings)

    Returns:
        Ranked list of matching sections with scores
    """
    matches = search_notes(load_notes(store), query, limit=limit or settings.search_limit)
    return NoteSearchResponse(matches=matches, query=query)


@router.get("/{session}", response_class=PlainTextResponse)
def get_note(
    session: int,
    store: Annotated[NoteRepository, Depends(get_store)],
) -> PlainTextResponse:
    """Raw Markdown of the note for a session number.

    Raises:
        HTTPException: 404 "missing document" when no note has the session
    """
    try:
        text = get_session_text(store, session)
    except NoteNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e

    return PlainTextResponse(content=text, media_type="text/markdown")
