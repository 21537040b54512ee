"""Markdown structure checks - fences, tables, title, front matter."""

from labnotes.models.findings import Finding, FindingKind, FindingSeverity, note_finding
from labnotes.models.notes import NoteDocument, TableBlock


def verify_fences(note: NoteDocument) -> list[Finding]:
    """Report code fences that are never closed."""
    return [
        note_finding(
            note,
            kind=FindingKind.MARKDOWN,
            code="UNTERMINATED_FENCE",
            message="Code fence is never closed; the rest of the note renders as code.",
            line=block.line,
            details={"info": block.info},
        )
        for block in note.code_blocks
        if not block.terminated
    ]


def verify_table(note: NoteDocument, table: TableBlock) -> list[Finding]:
    """Check one pipe table's shape against its header.

    Checks:
    1. Header must be followed by a delimiter row (ERROR)
    2. Delimiter row must have as many cells as the header (ERROR)
    3. Body rows should have as many cells as the header (WARNING)
    """
    columns = len(table.header.cells)

    if table.delimiter is None:
        return [
            note_finding(
                note,
                kind=FindingKind.MARKDOWN,
                code="TABLE_MISSING_DELIMITER",
                message="Table header is not followed by a delimiter row (| --- |).",
                line=table.line,
                details={"columns": columns},
            )
        ]

    findings: list[Finding] = []
    if len(table.delimiter.cells) != columns:
        findings.append(
            note_finding(
                note,
                kind=FindingKind.MARKDOWN,
                code="TABLE_DELIMITER_MISMATCH",
                message=(
                    f"Table delimiter row has {len(table.delimiter.cells)} columns, "
                    f"header has {columns}."
                ),
                line=table.delimiter.line,
                details={"columns": columns, "delimiter_columns": len(table.delimiter.cells)},
            )
        )

    for row in table.rows:
        if len(row.cells) != columns:
            findings.append(
                note_finding(
                    note,
                    kind=FindingKind.MARKDOWN,
                    code="TABLE_ROW_MISMATCH",
                    message=f"Table row has {len(row.cells)} columns, header has {columns}.",
                    severity=FindingSeverity.WARNING,
                    line=row.line,
                    details={"columns": columns, "row_columns": len(row.cells)},
                )
            )

    return findings


def verify_tables(note: NoteDocument) -> list[Finding]:
    """Check every pipe table in the note."""
    findings: list[Finding] = []
    for table in note.tables:
        findings.extend(verify_table(note, table))
    return findings


def verify_structure(note: NoteDocument) -> list[Finding]:
    """Check front matter and the title heading."""
    findings: list[Finding] = []

    if note.front_matter_error:
        findings.append(
            note_finding(
                note,
                kind=FindingKind.MARKDOWN,
                code="INVALID_FRONT_MATTER",
                message=f"Front matter is not usable: {note.front_matter_error}",
                line=1,
            )
        )

    if not note.has_title_heading:
        findings.append(
            note_finding(
                note,
                kind=FindingKind.MARKDOWN,
                code="MISSING_TITLE",
                message="Note has no level-1 heading.",
                severity=FindingSeverity.WARNING,
            )
        )

    return findings


def verify_markdown(note: NoteDocument) -> list[Finding]:
    """Run all Markdown structure checks on a note."""
    return verify_structure(note) + verify_fences(note) + verify_tables(note)
