"""Markdown note parser - deterministic line scanning.

Pure functions with no I/O. A note is scanned once, line by line, to collect
its front matter, headings, fenced code blocks, pipe tables and embedded
asset references. Line numbers are 1-based and refer to the original text,
front matter included.
"""

import datetime
import re
from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Any

import yaml

from labnotes.config import DEFAULT_SESSION_PATTERN
from labnotes.models.notes import (
    AssetKind,
    AssetReference,
    CodeBlock,
    NoteDocument,
    Section,
    TableBlock,
    TableRow,
)

FENCE_OPEN_RE = re.compile(r"^( {0,3})(`{3,}|~{3,})(.*)$")
HEADING_RE = re.compile(r"^ {0,3}(#{1,6})(?:[ \t]+(.*?))?[ \t]*$")
LINK_DEFINITION_RE = re.compile(
    r"""^ {0,3}\[([^\]]+)\]:[ \t]*(<[^>]*>|\S+)(?:[ \t]+(?:"[^"]*"|'[^']*'|\([^)]*\)))?[ \t]*$"""
)
INLINE_IMAGE_RE = re.compile(
    r"""!\[([^\]]*)\]\([ \t]*(<[^>]*>|[^\s)]*)(?:[ \t]+(?:"[^"]*"|'[^']*'|\([^)]*\)))?[ \t]*\)"""
)
REFERENCE_IMAGE_RE = re.compile(r"!\[([^\]]*)\]\[([^\]]*)\]")
SHORTCUT_IMAGE_RE = re.compile(r"!\[([^\]]+)\](?![\[(])")
HTML_IMAGE_RE = re.compile(
    r"""<img\b[^>]*?\bsrc\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s"'>]+))""", re.IGNORECASE
)
HTML_ALT_RE = re.compile(r"""\balt\s*=\s*(?:"([^"]*)"|'([^']*)')""", re.IGNORECASE)
CODE_SPAN_RE = re.compile(r"(`+)(.+?)\1")
DELIMITER_CELL_RE = re.compile(r"^:?-+:?$")


def normalize_label(label: str) -> str:
    """Case-fold and collapse whitespace, as Markdown does for reference labels."""
    return " ".join(label.split()).casefold()


def split_front_matter(text: str) -> tuple[dict[str, Any], str | None, int]:
    """Split a leading YAML front matter block off the text.

    Returns:
        (front_matter, error, body_start) where body_start is the 0-based
        index of the first body line. An unterminated block is not front
        matter at all.
    """
    lines = text.split("\n")
    if not lines or lines[0].rstrip() != "---":
        return {}, None, 0

    for idx in range(1, len(lines)):
        if lines[idx].rstrip() in ("---", "..."):
            raw = "\n".join(lines[1:idx])
            try:
                data = yaml.safe_load(raw)
            # Constructors raise ValueError for impossible dates and bad tags
            except (yaml.YAMLError, ValueError) as e:
                return {}, f"invalid YAML: {e}", idx + 1
            if data is None:
                return {}, None, idx + 1
            if not isinstance(data, dict):
                return {}, f"front matter must be a mapping, got {type(data).__name__}", idx + 1
            return {str(k): v for k, v in data.items()}, None, idx + 1

    return {}, None, 0


def match_session(text: str, pattern: str | re.Pattern[str]) -> tuple[int, str] | None:
    """Find a session number in a file stem or heading.

    Returns:
        (number, label) such as (3, "Day 3"), or None
    """
    regex = re.compile(pattern) if isinstance(pattern, str) else pattern
    match = regex.search(text)
    if not match:
        return None
    number = int(match.group("number"))
    kind = match.groupdict().get("kind")
    label = f"{kind.capitalize()} {number}" if kind else f"Session {number}"
    return number, label


def split_table_cells(line: str) -> list[str]:
    """Split a pipe-table row into stripped cells.

    Escaped pipes and pipes inside inline code do not split cells.
    """
    row = line.strip()
    if row.startswith("|"):
        row = row[1:]
    if row.endswith("|") and not row.endswith("\\|"):
        row = row[:-1]

    cells: list[str] = []
    current: list[str] = []
    in_code = False
    idx = 0
    while idx < len(row):
        char = row[idx]
        if char == "\\" and idx + 1 < len(row) and row[idx + 1] == "|":
            current.append("|")
            idx += 2
            continue
        if char == "`":
            in_code = not in_code
        if char == "|" and not in_code:
            cells.append("".join(current).strip())
            current = []
        else:
            current.append(char)
        idx += 1
    cells.append("".join(current).strip())
    return cells


def is_delimiter_row(cells: list[str]) -> bool:
    """Check whether cells form a table delimiter row (| --- | :-: |)."""
    return bool(cells) and all(DELIMITER_CELL_RE.match(cell) for cell in cells)


def _fence_language(info: str) -> str | None:
    """First word of the info string, e.g. "bash" for "{.bash title=x}"."""
    words = info.strip().lstrip("{").split()
    if not words:
        return None
    language = words[0].lstrip(".").rstrip("}").lower()
    return language or None


def _strip_code_spans(line: str) -> str:
    """Blank out inline code so references inside it are ignored."""
    return CODE_SPAN_RE.sub(lambda m: " " * len(m.group(0)), line)


def _coerce_date(value: Any) -> datetime.date | None:
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    if isinstance(value, str):
        try:
            return datetime.date.fromisoformat(value.strip())
        except ValueError:
            return None
    return None


def _coerce_session(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


@dataclass
class _OpenFence:
    char: str
    length: int
    info: str
    line: int
    body: list[str] = field(default_factory=list)


@dataclass
class _ScanState:
    headings: list[tuple[int, str, int]] = field(default_factory=list)  # (level, title, line)
    code_blocks: list[CodeBlock] = field(default_factory=list)
    tables: list[TableBlock] = field(default_factory=list)
    inline_assets: list[AssetReference] = field(default_factory=list)
    pending_refs: list[tuple[str, str, int, bool]] = field(default_factory=list)
    definitions: dict[str, str] = field(default_factory=dict)
    table_lines: list[tuple[int, str]] = field(default_factory=list)


def _flush_table(state: _ScanState) -> None:
    """Turn accumulated pipe lines into a table block."""
    if not state.table_lines:
        return

    rows = [TableRow(line=line_no, cells=split_table_cells(text)) for line_no, text in state.table_lines]
    state.table_lines = []

    header = rows[0]
    if len(rows) > 1 and is_delimiter_row(rows[1].cells):
        state.tables.append(TableBlock(line=header.line, header=header, delimiter=rows[1], rows=rows[2:]))
    else:
        state.tables.append(TableBlock(line=header.line, header=header, delimiter=None, rows=rows[1:]))


def _scan_assets(line: str, line_no: int, state: _ScanState) -> None:
    """Collect image references from one line outside code."""
    text = _strip_code_spans(line)

    for match in INLINE_IMAGE_RE.finditer(text):
        target = match.group(2)
        if target.startswith("<") and target.endswith(">"):
            target = target[1:-1]
        state.inline_assets.append(
            AssetReference(target=target.strip(), alt=match.group(1), line=line_no, kind=AssetKind.inline)
        )
    text = INLINE_IMAGE_RE.sub(lambda m: " " * len(m.group(0)), text)

    for match in REFERENCE_IMAGE_RE.finditer(text):
        alt, label = match.group(1), match.group(2)
        # Collapsed form ![alt][] uses the alt text as label
        state.pending_refs.append((alt, label or alt, line_no, True))
    text = REFERENCE_IMAGE_RE.sub(lambda m: " " * len(m.group(0)), text)

    for match in SHORTCUT_IMAGE_RE.finditer(text):
        # Shortcut form ![label] only counts when the label is defined
        state.pending_refs.append((match.group(1), match.group(1), line_no, False))

    for match in HTML_IMAGE_RE.finditer(text):
        target = next(g for g in match.groups() if g is not None)
        tag_end = text.find(">", match.end())
        tag = text[match.start() : tag_end + 1 if tag_end != -1 else len(text)]
        alt_match = HTML_ALT_RE.search(tag)
        alt = ""
        if alt_match:
            alt = alt_match.group(1) if alt_match.group(1) is not None else alt_match.group(2)
        state.inline_assets.append(
            AssetReference(target=target.strip(), alt=alt, line=line_no, kind=AssetKind.html)
        )


def _build_sections(lines: list[str], headings: list[tuple[int, str, int]], body_start: int) -> list[Section]:
    """Split the body into heading sections."""
    sections: list[Section] = []
    first_heading_line = headings[0][2] if headings else len(lines) + 1

    preamble = "\n".join(lines[body_start : first_heading_line - 1]).strip()
    if preamble:
        sections.append(Section(level=0, title="", line=body_start + 1, text=preamble))

    for idx, (level, title, line_no) in enumerate(headings):
        end = headings[idx + 1][2] - 1 if idx + 1 < len(headings) else len(lines)
        body = "\n".join(lines[line_no:end]).strip()
        sections.append(Section(level=level, title=title, line=line_no, text=body))

    return sections


def parse_document(
    text: str,
    *,
    path: str,
    note_id: str | None = None,
    session_pattern: str | re.Pattern[str] = DEFAULT_SESSION_PATTERN,
) -> NoteDocument:
    """Parse Markdown note text into a NoteDocument.

    Args:
        text: Raw note text
        path: Path relative to the notes root, POSIX separators
        note_id: Store identifier (default: path without suffix)
        session_pattern: Regex with a `number` group (and optional `kind`)

    Returns:
        NoteDocument with sections, assets, code blocks and tables

    Strategy:
        1. Normalize line endings and strip a UTF-8 BOM
        2. Split off YAML front matter
        3. Scan lines: fenced blocks swallow everything until their closing
           fence; outside fences collect headings, pipe tables, reference
           definitions and image references
        4. Resolve reference-style images against all definitions
        5. Derive session: front matter, then file stem, then first H1
    """
    normalized = text.lstrip("\ufeff").replace("\r\n", "\n").replace("\r", "\n")
    lines = normalized.split("\n")
    pure_path = PurePosixPath(path)
    if note_id is None:
        note_id = str(pure_path.with_suffix(""))

    front_matter, front_matter_error, body_start = split_front_matter(normalized)

    state = _ScanState()
    fence: _OpenFence | None = None

    for idx in range(body_start, len(lines)):
        line = lines[idx]
        line_no = idx + 1

        if fence is not None:
            close = re.match(r"^ {0,3}(`{3,}|~{3,})[ \t]*$", line)
            if close and close.group(1)[0] == fence.char and len(close.group(1)) >= fence.length:
                state.code_blocks.append(
                    CodeBlock(
                        info=fence.info,
                        language=_fence_language(fence.info),
                        text="\n".join(fence.body),
                        line=fence.line,
                        terminated=True,
                    )
                )
                fence = None
            else:
                fence.body.append(line)
            continue

        opening = FENCE_OPEN_RE.match(line)
        if opening and not (opening.group(2)[0] == "`" and "`" in opening.group(3)):
            _flush_table(state)
            marker = opening.group(2)
            fence = _OpenFence(char=marker[0], length=len(marker), info=opening.group(3).strip(), line=line_no)
            continue

        if line.lstrip().startswith("|"):
            state.table_lines.append((line_no, line))
            _scan_assets(line, line_no, state)
            continue
        _flush_table(state)

        heading = HEADING_RE.match(line)
        if heading:
            title = re.sub(r"[ \t]+#+$", "", heading.group(2) or "").strip()
            if title.strip("#") == "":
                title = ""
            state.headings.append((len(heading.group(1)), title, line_no))
            _scan_assets(line, line_no, state)
            continue

        definition = LINK_DEFINITION_RE.match(line)
        if definition:
            target = definition.group(2)
            if target.startswith("<") and target.endswith(">"):
                target = target[1:-1]
            state.definitions.setdefault(normalize_label(definition.group(1)), target.strip())
            continue

        _scan_assets(line, line_no, state)

    _flush_table(state)

    if fence is not None:
        state.code_blocks.append(
            CodeBlock(
                info=fence.info,
                language=_fence_language(fence.info),
                text="\n".join(fence.body),
                line=fence.line,
                terminated=False,
            )
        )

    assets = list(state.inline_assets)
    for alt, label, line_no, explicit in state.pending_refs:
        target = state.definitions.get(normalize_label(label))
        if target is None and not explicit:
            continue
        assets.append(
            AssetReference(target=target, alt=alt, line=line_no, kind=AssetKind.reference, label=label)
        )
    assets.sort(key=lambda a: a.line)

    h1_titles = [title for level, title, _ in state.headings if level == 1 and title]
    fm_title = front_matter.get("title")
    if h1_titles:
        title = h1_titles[0]
    elif isinstance(fm_title, str) and fm_title.strip():
        title = fm_title.strip()
    else:
        title = pure_path.stem

    session: int | None = None
    session_label: str | None = None
    fm_key = next((k for k in ("session", "day") if _coerce_session(front_matter.get(k)) is not None), None)
    if fm_key is not None:
        session = _coerce_session(front_matter[fm_key])
        session_label = f"{fm_key.capitalize()} {session}"
        stem_match = match_session(pure_path.stem, session_pattern)
        if stem_match and stem_match[0] == session:
            session_label = stem_match[1]
    else:
        for candidate in (pure_path.stem, h1_titles[0] if h1_titles else ""):
            found = match_session(candidate, session_pattern)
            if found:
                session, session_label = found
                break

    return NoteDocument(
        note_id=note_id,
        path=path,
        session=session,
        session_label=session_label,
        title=title,
        date=_coerce_date(front_matter.get("date")),
        front_matter=front_matter,
        front_matter_error=front_matter_error,
        has_title_heading=bool(h1_titles),
        sections=_build_sections(lines, state.headings, body_start),
        assets=assets,
        code_blocks=state.code_blocks,
        tables=state.tables,
    )
