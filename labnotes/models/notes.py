"""Note document models."""

import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class AssetKind(str, Enum):
    """How an asset reference is written in Markdown."""

    inline = "inline"  # ![alt](target)
    reference = "reference"  # ![alt][label] + [label]: target
    html = "html"  # <img src="target">


class AssetReference(BaseModel):
    """An embedded asset (image) reference."""

    target: str | None  # None when a reference label has no definition
    alt: str = ""
    line: int  # 1-based
    kind: AssetKind
    label: str | None = None


class Section(BaseModel):
    """A heading and the body text that follows it, up to the next heading."""

    level: int  # 0 for text before the first heading
    title: str
    line: int
    text: str


class CodeBlock(BaseModel):
    """Fenced code block. The body is opaque text, never executed."""

    info: str
    language: str | None
    text: str
    line: int  # line of the opening fence
    terminated: bool


class TableRow(BaseModel):
    """One pipe-table row."""

    line: int
    cells: list[str]


class TableBlock(BaseModel):
    """A pipe table: header, optional delimiter row, body rows."""

    line: int
    header: TableRow
    delimiter: TableRow | None = None
    rows: list[TableRow] = Field(default_factory=list)


class NoteSummary(BaseModel):
    """Note metadata without body content."""

    note_id: str
    path: str
    session: int | None = None
    session_label: str | None = None
    title: str
    date: datetime.date | None = None


class NoteDocument(NoteSummary):
    """A parsed workshop note."""

    front_matter: dict[str, Any] = Field(default_factory=dict)
    front_matter_error: str | None = None
    has_title_heading: bool = False
    sections: list[Section] = Field(default_factory=list)
    assets: list[AssetReference] = Field(default_factory=list)
    code_blocks: list[CodeBlock] = Field(default_factory=list)
    tables: list[TableBlock] = Field(default_factory=list)

    def summary(self) -> NoteSummary:
        """Strip body content."""
        return NoteSummary(
            note_id=self.note_id,
            path=self.path,
            session=self.session,
            session_label=self.session_label,
            title=self.title,
            date=self.date,
        )
