"""Route dependencies."""

from typing import Annotated

from fastapi import Depends

from labnotes.config import Settings, get_settings
from labnotes.store.filesystem import FileSystemNoteRepository
from labnotes.store.repositories import NoteRepository


def get_store(settings: Annotated[Settings, Depends(get_settings)]) -> NoteRepository:
    """Filesystem note repository for the configured notes root."""
    return FileSystemNoteRepository.from_settings(settings)
