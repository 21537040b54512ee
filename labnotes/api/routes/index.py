"""Index endpoints - GET /index, GET /index.md."""

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from labnotes.api.deps import get_store
from labnotes.config import Settings, get_settings
from labnotes.index.builder import build_index, render_index
from labnotes.models.index import NoteIndex
from labnotes.store.queries import load_notes
from labnotes.store.repositories import NoteRepository

router = APIRouter(tags=["index"])


@router.get("/index", response_model=NoteIndex)
def get_index(
    store: Annotated[NoteRepository, Depends(get_store)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> NoteIndex:
    """Notes ordered by session number, with duplicate/missing session warnings."""
    return build_index(load_notes(store), index_exclude=settings.index_exclude)


@router.get("/index.md", response_class=PlainTextResponse)
def get_index_markdown(
    store: Annotated[NoteRepository, Depends(get_store)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> PlainTextResponse:
    """Rendered Markdown table of contents."""
    index = build_index(load_notes(store), index_exclude=settings.index_exclude)
    return PlainTextResponse(
        content=render_index(index, title=settings.index_title),
        media_type="text/markdown",
    )
