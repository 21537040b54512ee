"""Health check endpoints."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from labnotes.config import Settings, get_settings
from labnotes.store.filesystem import FileSystemNoteRepository
from labnotes.store.repositories import NotesRootError

router = APIRouter()


def check_notes_root(settings: Settings) -> tuple[bool, str, int]:
    """Check that the notes root is a readable directory.

    Returns:
        (is_ok, status_message, document_count)
    """
    store = FileSystemNoteRepository.from_settings(settings)
    try:
        count = len(store.list_notes())
    except NotesRootError:
        return (False, "missing", 0)
    except OSError as e:
        return (False, f"error: {type(e).__name__}", 0)
    return (True, "ok", count)


@router.get("/health")
async def health() -> dict[str, str]:
    """Simple health check.

    Returns:
        200 OK always (application is running)
    """
    return {"status": "ok"}


@router.get("/healthz", response_model=None)
def healthz(
    settings: Annotated[Settings, Depends(get_settings)],
) -> dict[str, Any] | JSONResponse:
    """Health check with notes root status.

    Returns:
        200 with component status if the notes root is readable
        503 otherwise
    """
    root_ok, root_status, documents = check_notes_root(settings)

    response_body = {
        "status": "ok" if root_ok else "degraded",
        "components": {
            "notes_root": root_status,
            "documents": documents,
        },
    }

    if not root_ok:
        return JSONResponse(content=response_body, status_code=503)

    return response_body
