"""FastAPI application - read-only notes API."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from labnotes.api.routes.check import router as check_router
from labnotes.api.routes.health import router as health_router
from labnotes.api.routes.index import router as index_router
from labnotes.api.routes.metrics import router as metrics_router
from labnotes.api.routes.notes import router as notes_router
from labnotes.store.repositories import NotesRootError

app = FastAPI(title="Workshop Notes API", version="0.1.0")

# Register routes
app.include_router(health_router, tags=["health"])
app.include_router(metrics_router, tags=["metrics"])
app.include_router(notes_router, tags=["notes"])
app.include_router(index_router, tags=["index"])
app.include_router(check_router, tags=["check"])


@app.exception_handler(NotesRootError)
async def notes_root_error_handler(request: Request, exc: NotesRootError) -> JSONResponse:
    """Missing notes root means the service cannot answer anything."""
    return JSONResponse(status_code=503, content={"detail": str(exc)})


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {"message": "Workshop Notes API", "version": "0.1.0"}
