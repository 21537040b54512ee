"""Reference resolver - confirm embedded assets exist."""

from pydantic import BaseModel, Field

from labnotes.models.findings import Finding, FindingKind, FindingSeverity, note_finding
from labnotes.models.notes import AssetReference, NoteDocument
from labnotes.store.queries import resolve_asset
from labnotes.store.repositories import NoteRepository

REMOTE_PREFIXES = ("http:", "https:", "ftp:", "data:", "mailto:", "//")


class ReferenceReport(BaseModel):
    """Outcome of resolving one note's asset references."""

    checked: int = 0
    skipped: list[str] = Field(default_factory=list)  # remote targets, not checked
    findings: list[Finding] = Field(default_factory=list)


def is_remote(target: str) -> bool:
    """Check whether a target points off the local filesystem."""
    return target.strip().lower().startswith(REMOTE_PREFIXES)


def verify_reference(note: NoteDocument, asset: AssetReference, store: NoteRepository) -> Finding | None:
    """Resolve a single local asset reference.

    Returns:
        A finding when the reference is broken, else None
    """
    if asset.target is None:
        return note_finding(
            note,
            kind=FindingKind.REFERENCE,
            code="UNDEFINED_REFERENCE_LABEL",
            message=f"Image reference label [{asset.label}] has no definition.",
            line=asset.line,
            details={"label": asset.label},
        )

    if not asset.target.strip():
        return note_finding(
            note,
            kind=FindingKind.REFERENCE,
            code="EMPTY_REFERENCE",
            message="Image reference has an empty target.",
            line=asset.line,
            details={"alt": asset.alt},
        )

    resolved = resolve_asset(note.path, asset.target)
    if resolved is None:
        return note_finding(
            note,
            kind=FindingKind.REFERENCE,
            code="REFERENCE_OUTSIDE_ROOT",
            message=f"Reference {asset.target} points outside the notes root.",
            severity=FindingSeverity.WARNING,
            line=asset.line,
            details={"target": asset.target},
        )

    if not store.asset_exists(resolved):
        return note_finding(
            note,
            kind=FindingKind.REFERENCE,
            code="BROKEN_REFERENCE",
            message=f"Broken reference: {asset.target}",
            line=asset.line,
            details={"target": asset.target, "resolved": resolved},
        )

    return None


def verify_references(note: NoteDocument, store: NoteRepository) -> ReferenceReport:
    """Enumerate a note's asset references and confirm each resolves to a file.

    Remote targets are skipped, never fetched. Each broken local reference
    yields one finding; nothing is retried or rewritten.
    """
    report = ReferenceReport()

    for asset in note.assets:
        if asset.target is not None and is_remote(asset.target):
            report.skipped.append(asset.target)
            continue

        report.checked += 1
        finding = verify_reference(note, asset, store)
        if finding is not None:
            report.findings.append(finding)

    return report
