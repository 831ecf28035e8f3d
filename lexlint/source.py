from __future__ import annotations

from bisect import bisect_right
from pathlib import Path

from lexlint.models import LexicalSpan, Location
from lexlint.tokenizer import Dialect, dialect_for_path, tokenize


class SourceFile:
    """Read-only view over one file's bytes and its classified spans.

    Spans may be handed in by an external tokenizer; otherwise they are
    computed on first access with :func:`lexlint.tokenizer.tokenize`, using
    the dialect implied by the file suffix unless one is given.
    """

    def __init__(
        self,
        data: bytes,
        path: str = "<memory>",
        spans: list[LexicalSpan] | None = None,
        dialect: Dialect | None = None,
    ) -> None:
        self.path = path
        self.data = data
        self.dialect = dialect if dialect is not None else dialect_for_path(path)
        self._spans = spans
        self._line_starts: list[int] | None = None

    @classmethod
    def from_path(cls, path: Path) -> SourceFile:
        return cls(path.read_bytes(), path=str(path))

    @classmethod
    def from_text(cls, text: str, path: str = "<memory>") -> SourceFile:
        return cls(text.encode("utf-8"), path=path)

    @property
    def spans(self) -> list[LexicalSpan]:
        if self._spans is None:
            self._spans = tokenize(self.data, self.dialect)
        return self._spans

    def substring_with_byte_range(self, offset: int, length: int) -> str | None:
        if offset < 0 or length < 0 or offset + length > len(self.data):
            return None
        try:
            return self.data[offset : offset + length].decode("utf-8")
        except UnicodeDecodeError:
            return None

    def span_text(self, span: LexicalSpan) -> str | None:
        return self.substring_with_byte_range(span.offset, span.length)

    def location(self, byte_offset: int) -> Location:
        line_starts = self._get_line_starts()
        line_index = bisect_right(line_starts, byte_offset) - 1
        line_start = line_starts[line_index]
        prefix = self.data[line_start:byte_offset].decode("utf-8", errors="replace")
        return Location(
            file_path=self.path,
            byte_offset=byte_offset,
            line=line_index + 1,
            column=len(prefix) + 1,
        )

    def _get_line_starts(self) -> list[int]:
        if self._line_starts is None:
            starts = [0]
            idx = self.data.find(b"\n")
            while idx != -1:
                starts.append(idx + 1)
                idx = self.data.find(b"\n", idx + 1)
            self._line_starts = starts
        return self._line_starts
