"""Check runner - every integrity check over every note."""

import time

from labnotes.config import Settings, get_settings
from labnotes.index.builder import build_index
from labnotes.models.findings import CheckReport, Finding, FindingKind, FindingSeverity
from labnotes.models.notes import NoteDocument
from labnotes.store.queries import load_note
from labnotes.store.repositories import NoteDecodeError, NoteRepository
from labnotes.utils.logging import StructuredCheckLogger
from labnotes.utils.metrics import PrometheusCheckMetrics
from labnotes.verification.commands import verify_command_blocks
from labnotes.verification.markdown import verify_markdown
from labnotes.verification.references import verify_references


def check_notes(
    store: NoteRepository,
    settings: Settings | None = None,
    *,
    check_logger: StructuredCheckLogger | None = None,
    metrics: PrometheusCheckMetrics | None = None,
) -> CheckReport:
    """Check every note in the store.

    Runs, per note: Markdown structure checks, command block lexical checks
    and asset reference resolution; then the index warnings across notes
    (duplicate and missing session numbers). An undecodable file becomes a
    STORE finding and the run continues.

    Args:
        store: Note repository
        settings: Application settings (default: cached settings)
        check_logger: Structured logger (default: new instance)
        metrics: Metrics sink (default: Prometheus)

    Returns:
        CheckReport with findings ordered by path, line, code
    """
    settings = settings or get_settings()
    check_logger = check_logger or StructuredCheckLogger()
    metrics = metrics or PrometheusCheckMetrics()
    started = time.perf_counter()

    findings: list[Finding] = []
    notes: list[NoteDocument] = []
    references_checked = 0
    references_skipped = 0

    note_ids = store.list_notes()
    for note_id in note_ids:
        try:
            note = load_note(store, note_id)
        except NoteDecodeError as e:
            findings.append(
                Finding(
                    kind=FindingKind.STORE,
                    code="UNDECODABLE_NOTE",
                    message=f"Note is not valid UTF-8: {e.reason}",
                    severity=FindingSeverity.ERROR,
                    note_id=e.note_id,
                    path=e.path,
                )
            )
            continue

        notes.append(note)
        findings.extend(verify_markdown(note))
        findings.extend(verify_command_blocks(note))

        references = verify_references(note, store)
        references_checked += references.checked
        references_skipped += len(references.skipped)
        findings.extend(references.findings)

    findings.extend(build_index(notes, index_exclude=settings.index_exclude).warnings)

    report = CheckReport.from_findings(
        findings,
        documents_scanned=len(note_ids),
        references_checked=references_checked,
        references_skipped=references_skipped,
    )

    duration_ms = (time.perf_counter() - started) * 1000
    metrics.inc_scanned(len(note_ids))
    metrics.record_duration(duration_ms)
    for finding in report.findings:
        metrics.inc_finding(finding.code, finding.severity.value)
        check_logger.log_finding(finding)
    check_logger.log_check(report, duration_ms)

    return report
