from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

Severity = Literal["warning", "error"]
SpanKind = Literal["comment", "doc_comment", "block_comment", "doc_block_comment", "string", "code"]

SEVERITY_ORDER: dict[Severity, int] = {
    "warning": 1,
    "error": 2,
}


@dataclass(frozen=True, slots=True)
class LexicalSpan:
    kind: SpanKind
    offset: int
    length: int

    @property
    def end(self) -> int:
        return self.offset + self.length


@dataclass(frozen=True, slots=True)
class PatternMatch:
    """Byte range matched at the start of a span's text.

    ``offending_width`` is the encoded width of the last matched character, so
    ``offending_offset`` points at the character that caused the match.
    """

    start: int
    end: int
    offending_width: int = 1

    @property
    def offending_offset(self) -> int:
        return self.end - self.offending_width


@dataclass(slots=True)
class Location:
    file_path: str
    byte_offset: int
    line: int
    column: int


@dataclass(slots=True)
class Violation:
    rule_id: str
    title: str
    severity: Severity
    message: str
    location: Location


@dataclass(slots=True)
class ScanResult:
    violations: list[Violation]
    files_scanned: int
