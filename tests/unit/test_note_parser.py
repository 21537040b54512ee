"""Unit tests for the Markdown note parser."""

import datetime

from labnotes.docs.parser import (
    is_delimiter_row,
    match_session,
    parse_document,
    split_front_matter,
    split_table_cells,
)
from labnotes.models.notes import AssetKind


def test_title_from_first_h1() -> None:
    """Test that the first level-1 heading becomes the title."""
    note = parse_document("# Day 1 - Intro\n\n## Objectives\n\n# Second", path="Day1.md")

    assert note.title == "Day 1 - Intro"
    assert note.has_title_heading is True
    assert note.note_id == "Day1"


def test_title_falls_back_to_front_matter_then_stem() -> None:
    """Test title fallbacks when there is no level-1 heading."""
    with_fm = parse_document("---\ntitle: From front matter\n---\n## Only h2\n", path="x.md")
    bare = parse_document("Just text.\n", path="notes/misc.md")

    assert with_fm.title == "From front matter"
    assert with_fm.has_title_heading is False
    assert bare.title == "misc"
    assert bare.note_id == "notes/misc"


def test_front_matter_parsed_and_date_coerced() -> None:
    """Test that YAML front matter is parsed and the date extracted."""
    text = "---\ntitle: Synthesis\ndate: 2024-05-07\ntags: [yosys, abc]\n---\n# Day 2\n"

    note = parse_document(text, path="Day2.md")

    assert note.front_matter["tags"] == ["yosys", "abc"]
    assert note.date == datetime.date(2024, 5, 7)
    assert note.front_matter_error is None


def test_invalid_front_matter_reports_error() -> None:
    """Test that broken YAML and non-mapping front matter are reported."""
    broken = parse_document("---\ntitle: [unclosed\n---\n# T\n", path="a.md")
    listed = parse_document("---\n- a\n- b\n---\n# T\n", path="b.md")

    assert broken.front_matter_error is not None
    assert broken.front_matter == {}
    assert listed.front_matter_error is not None
    assert "mapping" in listed.front_matter_error


def test_unconstructible_front_matter_values_report_error() -> None:
    """Test that impossible dates and bad tags become front matter errors."""
    bad_date = parse_document("---\ndate: 2024-02-30\n---\n# Day 1\n", path="Day1.md")
    bad_tag = parse_document("---\nsession: !!int three\n---\n# Day 1\n", path="Day1.md")

    assert bad_date.front_matter_error is not None
    assert bad_date.front_matter_error.startswith("invalid YAML:")
    assert bad_date.front_matter == {}
    assert bad_date.date is None
    assert bad_date.session == 1
    assert bad_tag.front_matter_error is not None
    assert bad_tag.session == 1


def test_unterminated_front_matter_is_body() -> None:
    """Test that an opening --- without a closing one is not front matter."""
    front_matter, error, body_start = split_front_matter("---\ntitle: x\n# Heading\n")

    assert front_matter == {}
    assert error is None
    assert body_start == 0


def test_session_from_file_stem() -> None:
    """Test session derivation from common file name styles."""
    assert parse_document("# x", path="Day1.md").session == 1
    assert parse_document("# x", path="day_02.md").session == 2
    assert parse_document("# x", path="Session-3.md").session == 3
    assert parse_document("# x", path="lab 4 notes.md").session_label == "Lab 4"


def test_session_from_heading_when_stem_has_none() -> None:
    """Test that the first H1 is used when the file name has no number."""
    note = parse_document("# Day 4 - Optimisations\n", path="optimisations.md")

    assert note.session == 4
    assert note.session_label == "Day 4"


def test_front_matter_session_wins() -> None:
    """Test that front matter session overrides the file name."""
    note = parse_document("---\nsession: 7\n---\n# Day 2\n", path="Day2.md")

    assert note.session == 7
    assert note.session_label == "Session 7"


def test_front_matter_day_key_keeps_stem_label() -> None:
    """Test that a matching front matter day keeps the stem's label."""
    note = parse_document("---\nday: 5\n---\n# Notes\n", path="Day5.md")

    assert note.session == 5
    assert note.session_label == "Day 5"


def test_no_session_found() -> None:
    """Test that notes without any number have no session."""
    note = parse_document("# Workshop overview\n", path="README.md")

    assert note.session is None
    assert note.session_label is None


def test_session_pattern_does_not_match_inside_words() -> None:
    """Test that "today1" is not read as a day number."""
    assert match_session("today1", r"(?i)(?<![a-z])(?P<kind>day)(?P<number>\d+)") is None


def test_fenced_blocks_collected_with_language() -> None:
    """Test that fenced code blocks keep info, language, body and line."""
    text = "# T\n\n```bash\niverilog a.v\n./a.out\n```\n\n~~~ {.verilog}\nmodule m; endmodule\n~~~\n"

    note = parse_document(text, path="a.md")

    assert len(note.code_blocks) == 2
    first, second = note.code_blocks
    assert first.language == "bash"
    assert first.text == "iverilog a.v\n./a.out"
    assert first.line == 3
    assert first.terminated is True
    assert second.language == "verilog"


def test_unterminated_fence_swallows_rest() -> None:
    """Test that a fence with no closing marker runs to end of document."""
    text = "# T\n\n```bash\nls\n\n# Not a heading\n"

    note = parse_document(text, path="a.md")

    assert len(note.code_blocks) == 1
    assert note.code_blocks[0].terminated is False
    assert [s.title for s in note.sections] == ["T"]


def test_shorter_closing_fence_does_not_close() -> None:
    """Test that a closing fence must be at least as long as the opening one."""
    text = "````\n```\nstill code\n````\n"

    note = parse_document(text, path="a.md")

    assert note.code_blocks[0].terminated is True
    assert note.code_blocks[0].text == "```\nstill code"


def test_inline_and_angle_bracket_images() -> None:
    """Test inline image targets, with titles and angle brackets."""
    text = '# T\n\n![flow](images/flow.png "Flow")\n\n![x](<images/with space.png>)\n'

    note = parse_document(text, path="a.md")

    assert [a.target for a in note.assets] == ["images/flow.png", "images/with space.png"]
    assert note.assets[0].alt == "flow"
    assert note.assets[0].line == 3
    assert note.assets[0].kind == AssetKind.inline


def test_reference_style_images_resolve_definitions() -> None:
    """Test full, collapsed and shortcut reference images."""
    text = (
        "# T\n"
        "![Synth][synth] ![Flow][] ![Gls]\n"
        "![Missing][nope]\n"
        "![not a ref]\n"
        "\n"
        "[synth]: images/synth.png\n"
        "[FLOW]: <images/flow.png>\n"
        "[gls]: images/gls.png 'GLS'\n"
    )

    note = parse_document(text, path="a.md")
    targets = {a.label: a.target for a in note.assets}

    assert targets["synth"] == "images/synth.png"
    assert targets["Flow"] == "images/flow.png"
    assert targets["Gls"] == "images/gls.png"
    assert targets["nope"] is None
    assert "not a ref" not in targets
    assert all(a.kind == AssetKind.reference for a in note.assets)


def test_html_img_tags() -> None:
    """Test <img> src extraction with quoted and unquoted values."""
    text = '<img src="img/a.png" alt="A">\n<IMG width=3 src=img/b.png>\n'

    note = parse_document(text, path="a.md")

    assert [(a.target, a.alt, a.kind) for a in note.assets] == [
        ("img/a.png", "A", AssetKind.html),
        ("img/b.png", "", AssetKind.html),
    ]


def test_images_in_code_are_ignored() -> None:
    """Test that references inside fences and inline code are not assets."""
    text = "# T\n\n`![x](inline.png)`\n\n```markdown\n![y](fenced.png)\n```\n"

    note = parse_document(text, path="a.md")

    assert note.assets == []


def test_tables_collected() -> None:
    """Test pipe table header, delimiter and rows."""
    text = "# T\n\n| Tool | Use |\n| --- | :-: |\n| yosys | synth |\n| abc | map |\n\nAfter.\n"

    note = parse_document(text, path="a.md")

    assert len(note.tables) == 1
    table = note.tables[0]
    assert table.line == 3
    assert table.header.cells == ["Tool", "Use"]
    assert table.delimiter is not None
    assert [r.cells for r in table.rows] == [["yosys", "synth"], ["abc", "map"]]


def test_table_without_delimiter() -> None:
    """Test that a header with no delimiter row keeps delimiter None."""
    note = parse_document("| a | b |\n| c | d |\n", path="a.md")

    assert note.tables[0].delimiter is None
    assert len(note.tables[0].rows) == 1


def test_split_table_cells_respects_escapes_and_code() -> None:
    """Test that escaped pipes and pipes in code do not split cells."""
    assert split_table_cells("| a \\| b | `x | y` | c |") == ["a | b", "`x | y`", "c"]
    assert split_table_cells("a | b") == ["a", "b"]


def test_is_delimiter_row() -> None:
    """Test delimiter cell recognition."""
    assert is_delimiter_row(["---", ":--", "--:", ":-:"])
    assert not is_delimiter_row(["---", "abc"])
    assert not is_delimiter_row([])


def test_sections_split_on_headings() -> None:
    """Test that sections hold the text up to the next heading."""
    text = "Intro line.\n# Day 1\nBody one.\n## Part\nBody two.\n"

    note = parse_document(text, path="Day1.md")

    assert [(s.level, s.title, s.line) for s in note.sections] == [
        (0, "", 1),
        (1, "Day 1", 2),
        (2, "Part", 4),
    ]
    assert note.sections[1].text == "Body one."
    assert note.sections[2].text == "Body two."


def test_line_numbers_count_front_matter() -> None:
    """Test that line numbers refer to the original text."""
    text = "---\ntitle: x\n---\n# Day 1\n![a](a.png)\n"

    note = parse_document(text, path="Day1.md")

    assert note.sections[0].line == 4
    assert note.assets[0].line == 5


def test_crlf_and_bom_normalized() -> None:
    """Test that Windows line endings and a BOM do not affect parsing."""
    note = parse_document("\ufeff# Day 1\r\n\r\n![a](a.png)\r\n", path="Day1.md")

    assert note.title == "Day 1"
    assert note.assets[0].target == "a.png"
    assert note.assets[0].line == 3


def test_deterministic_same_input_same_output() -> None:
    """Test that parsing is deterministic."""
    text = "# Day 1\n\n![a](a.png)\n\n| a |\n| - |\n"

    assert parse_document(text, path="Day1.md") == parse_document(text, path="Day1.md")
