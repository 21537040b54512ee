"""Integrity check endpoint - GET /check."""

from typing import Annotated

from fastapi import APIRouter, Depends

from labnotes.api.deps import get_store
from labnotes.checks.runner import check_notes
from labnotes.config import Settings, get_settings
from labnotes.models.findings import CheckReport
from labnotes.store.repositories import NoteRepository

router = APIRouter(tags=["check"])


@router.get("/check", response_model=CheckReport)
def run_check(
    store: Annotated[NoteRepository, Depends(get_store)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> CheckReport:
    """Run every integrity check over the notes.

    The report is returned with 200 whether or not it passes; `ok` tells.
    """
    return check_notes(store, settings)
