"""Unit tests for asset reference resolution."""

from labnotes.docs.parser import parse_document
from labnotes.models.findings import FindingKind, FindingSeverity
from labnotes.store.inmemory import InMemoryNoteRepository
from labnotes.store.queries import resolve_asset
from labnotes.verification.references import is_remote, verify_references


def make_store(assets: list[str]) -> InMemoryNoteRepository:
    """Helper to create an empty store that knows some asset files."""
    return InMemoryNoteRepository({}, assets=assets)


def test_resolve_relative_to_note_directory() -> None:
    """Test that relative targets resolve against the note's folder."""
    assert resolve_asset("day3/Day3.md", "img/a.png") == "day3/img/a.png"
    assert resolve_asset("day3/Day3.md", "../images/a.png") == "images/a.png"
    assert resolve_asset("Day1.md", "./images/a.png") == "images/a.png"


def test_resolve_root_relative_target() -> None:
    """Test that a leading slash resolves against the notes root."""
    assert resolve_asset("day3/Day3.md", "/images/a.png") == "images/a.png"


def test_resolve_strips_query_fragment_and_decodes() -> None:
    """Test query/fragment removal and percent-decoding."""
    assert resolve_asset("Day1.md", "images/my%20flow.png?raw=true#top") == "images/my flow.png"


def test_resolve_backslashes_as_separators() -> None:
    """Test that Windows-style separators are accepted."""
    assert resolve_asset("Day1.md", "images\\a.png") == "images/a.png"


def test_resolve_outside_root_returns_none() -> None:
    """Test that escaping the notes root is detected."""
    assert resolve_asset("Day1.md", "../outside.png") is None
    assert resolve_asset("day3/Day3.md", "../../x.png") is None


def test_is_remote() -> None:
    """Test remote target detection."""
    assert is_remote("https://img.shields.io/badge.svg")
    assert is_remote("HTTP://example.com/a.png")
    assert is_remote("//cdn.example.com/a.png")
    assert is_remote("data:image/png;base64,AAAA")
    assert not is_remote("images/a.png")


def test_all_references_resolve() -> None:
    """Test that a note whose assets exist has no findings."""
    note = parse_document("# Day 1\n![a](images/a.png)\n<img src='images/b.png'>\n", path="Day1.md")

    report = verify_references(note, make_store(["images/a.png", "images/b.png"]))

    assert report.checked == 2
    assert report.findings == []


def test_broken_reference_reported_per_path() -> None:
    """Test that each missing file yields one BROKEN_REFERENCE error."""
    note = parse_document(
        "# Day 1\n![a](images/a.png)\n![b](images/missing.png)\n![c](images/gone.png)\n",
        path="Day1.md",
    )

    report = verify_references(note, make_store(["images/a.png"]))

    assert [f.code for f in report.findings] == ["BROKEN_REFERENCE", "BROKEN_REFERENCE"]
    assert [f.line for f in report.findings] == [3, 4]
    first = report.findings[0]
    assert first.kind == FindingKind.REFERENCE
    assert first.severity == FindingSeverity.ERROR
    assert first.details["resolved"] == "images/missing.png"
    assert "broken reference" in first.message.lower()


def test_remote_references_skipped() -> None:
    """Test that remote targets are counted as skipped, not checked."""
    note = parse_document("# Day 1\n![badge](https://img.shields.io/x.svg)\n", path="Day1.md")

    report = verify_references(note, make_store([]))

    assert report.checked == 0
    assert report.skipped == ["https://img.shields.io/x.svg"]
    assert report.findings == []


def test_outside_root_is_warning() -> None:
    """Test that references escaping the root are warnings."""
    note = parse_document("# Day 1\n![a](../elsewhere/a.png)\n", path="Day1.md")

    report = verify_references(note, make_store([]))

    assert len(report.findings) == 1
    assert report.findings[0].code == "REFERENCE_OUTSIDE_ROOT"
    assert report.findings[0].severity == FindingSeverity.WARNING


def test_undefined_label_and_empty_target() -> None:
    """Test undefined reference labels and empty targets."""
    note = parse_document("# Day 1\n![a][nolabel]\n![b]()\n", path="Day1.md")

    report = verify_references(note, make_store([]))

    codes = sorted(f.code for f in report.findings)
    assert codes == ["EMPTY_REFERENCE", "UNDEFINED_REFERENCE_LABEL"]
