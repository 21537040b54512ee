"""Structured logging for note checks."""

import logging
from typing import Any

from labnotes.models.findings import CheckReport, Finding, FindingSeverity

logger = logging.getLogger(__name__)


class StructuredCheckLogger:
    """Structured logger for findings and check runs."""

    def log_finding(self, finding: Finding) -> None:
        """Log one finding with structured data."""
        log_data: dict[str, Any] = {
            "code": finding.code,
            "kind": finding.kind.value,
            "severity": finding.severity.value,
            "note_id": finding.note_id,
            "path": finding.path,
            "line": finding.line,
        }

        log_msg = f"Finding: {finding.path} - {finding.code}"

        if finding.severity == FindingSeverity.ERROR:
            logger.warning(log_msg, extra={"structured": log_data})
        else:
            logger.info(log_msg, extra={"structured": log_data})

    def log_check(self, report: CheckReport, duration_ms: float) -> None:
        """Log a completed check run."""
        log_data: dict[str, Any] = {
            "documents_scanned": report.documents_scanned,
            "references_checked": report.references_checked,
            "references_skipped": report.references_skipped,
            "errors": report.error_count,
            "warnings": report.warning_count,
            "duration_ms": round(duration_ms, 2),
        }

        outcome = "ok" if report.ok else "failed"
        logger.info(f"Note check: {outcome}", extra={"structured": log_data})
