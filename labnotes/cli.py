"""Command-line runner - check notes and optionally write the index."""

import argparse
import logging
import sys
from collections import defaultdict
from pathlib import Path

from labnotes.checks.runner import check_notes
from labnotes.config import get_settings
from labnotes.index.builder import build_index, write_index
from labnotes.models.findings import CheckReport, Finding, FindingSeverity
from labnotes.store.filesystem import FileSystemNoteRepository
from labnotes.store.queries import load_notes
from labnotes.store.repositories import NotesRootError

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_NO_ROOT = 2


def build_parser() -> argparse.ArgumentParser:
    """Argument parser for the check runner."""
    parser = argparse.ArgumentParser(
        prog="labnotes-check",
        description="Check workshop notes for broken references and malformed Markdown.",
    )
    parser.add_argument("--root", type=Path, default=None, help="Notes root (default: NOTES_ROOT or .)")
    parser.add_argument("--write-index", action="store_true", help="Write the table of contents file")
    parser.add_argument("--strict", action="store_true", help="Fail on warnings too")
    parser.add_argument("--json", action="store_true", help="Print the report as JSON")
    return parser


def format_finding(finding: Finding) -> str:
    """One report line for a finding."""
    where = f"line {finding.line}" if finding.line else "note"
    return f"      {finding.severity.value} {finding.code} ({where}): {finding.message}"


def print_report(report: CheckReport, note_paths: list[str]) -> None:
    """Print a per-document pass/fail report and a summary."""
    by_path: dict[str, list[Finding]] = defaultdict(list)
    for finding in report.findings:
        by_path[finding.path].append(finding)

    for path in note_paths:
        findings = by_path.get(path, [])
        failed = any(f.severity == FindingSeverity.ERROR for f in findings)
        print(f"  {'✗ FAIL' if failed else '✓ PASS'}: {path}")
        for finding in findings:
            print(format_finding(finding))

    print("\n=== Summary ===")
    print(f"Documents: {report.documents_scanned}")
    print(f"References: {report.references_checked} checked, {report.references_skipped} remote skipped")
    print(f"Errors: {report.error_count}, warnings: {report.warning_count}")


def main(argv: list[str] | None = None) -> int:
    """Run the checks; return the process exit code."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    settings = get_settings()
    if args.root is not None:
        settings = settings.model_copy(update={"notes_root": args.root})

    store = FileSystemNoteRepository.from_settings(settings)
    try:
        store.ensure_root()
    except NotesRootError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_NO_ROOT

    report = check_notes(store, settings)

    if args.json:
        print(report.model_dump_json(indent=2))
    else:
        print(f"=== Checking notes in {settings.notes_root} ===")
        note_paths = sorted(store.note_path(note_id) for note_id in store.list_notes())
        print_report(report, note_paths)

    if args.write_index:
        index = build_index(load_notes(store), index_exclude=settings.index_exclude)
        target = write_index(
            index,
            root=settings.notes_root,
            index_file=settings.index_file,
            title=settings.index_title,
        )
        if not args.json:
            print(f"Wrote index to {target}")

    if not report.ok or (args.strict and report.warning_count):
        return EXIT_FAILED
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
