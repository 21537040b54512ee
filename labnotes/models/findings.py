"""Finding models - integrity problems found while checking notes."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from labnotes.models.notes import NoteSummary

# JSON-serializable value types for finding details
JsonValue = str | int | float | bool | None | dict[str, Any] | list[Any]


class FindingSeverity(str, Enum):
    """Severity levels for findings."""

    WARNING = "warning"
    ERROR = "error"


class FindingKind(str, Enum):
    """Categories of integrity checks."""

    REFERENCE = "reference"
    SESSION = "session"
    MARKDOWN = "markdown"
    COMMAND = "command"
    STORE = "store"


class Finding(BaseModel):
    """A problem detected in a note.

    Errors make a check fail; warnings are reported but never fatal.
    """

    kind: FindingKind
    code: str  # Machine-usable short code, e.g., "BROKEN_REFERENCE"
    message: str  # Human-readable description
    severity: FindingSeverity
    note_id: str
    path: str
    line: int | None = None
    details: dict[str, JsonValue] = Field(default_factory=dict)


def note_finding(
    note: NoteSummary,
    *,
    kind: FindingKind,
    code: str,
    message: str,
    severity: FindingSeverity = FindingSeverity.ERROR,
    line: int | None = None,
    details: dict[str, JsonValue] | None = None,
) -> Finding:
    """Build a finding located in the given note."""
    return Finding(
        kind=kind,
        code=code,
        message=message,
        severity=severity,
        note_id=note.note_id,
        path=note.path,
        line=line,
        details=details or {},
    )


def finding_sort_key(finding: Finding) -> tuple[str, int, str]:
    """Order findings by path, then line, then code."""
    return (finding.path, finding.line or 0, finding.code)


class CheckReport(BaseModel):
    """Result of checking every note in a store."""

    documents_scanned: int
    references_checked: int = 0
    references_skipped: int = 0
    findings: list[Finding] = Field(default_factory=list)
    error_count: int = 0
    warning_count: int = 0
    ok: bool = True

    @classmethod
    def from_findings(
        cls,
        findings: list[Finding],
        *,
        documents_scanned: int,
        references_checked: int = 0,
        references_skipped: int = 0,
    ) -> "CheckReport":
        """Build a report with ordered findings and derived counts."""
        ordered = sorted(findings, key=finding_sort_key)
        errors = sum(1 for f in ordered if f.severity == FindingSeverity.ERROR)
        return cls(
            documents_scanned=documents_scanned,
            references_checked=references_checked,
            references_skipped=references_skipped,
            findings=ordered,
            error_count=errors,
            warning_count=len(ordered) - errors,
            ok=errors == 0,
        )
