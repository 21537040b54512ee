"""Models package - re-exports for convenience."""

from labnotes.models.findings import (
    CheckReport,
    Finding,
    FindingKind,
    FindingSeverity,
    note_finding,
)
from labnotes.models.index import IndexEntry, NoteIndex
from labnotes.models.notes import (
    AssetKind,
    AssetReference,
    CodeBlock,
    NoteDocument,
    NoteSummary,
    Section,
    TableBlock,
    TableRow,
)

__all__ = [
    # Notes
    "NoteSummary",
    "NoteDocument",
    "Section",
    "AssetKind",
    "AssetReference",
    "CodeBlock",
    "TableBlock",
    "TableRow",
    # Findings
    "Finding",
    "FindingKind",
    "FindingSeverity",
    "CheckReport",
    "note_finding",
    # Index
    "IndexEntry",
    "NoteIndex",
]
