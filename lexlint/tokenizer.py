"""Comment and string classification for slash-comment languages.

This is the default span source used when a caller does not supply spans of
its own. It only knows comment and string delimiters (Swift, C, C++, Java,
Kotlin, Go, JavaScript, Rust, ...), so everything else is reported as ``code``.
It works on raw UTF-8 bytes: every delimiter is ASCII and multi-byte sequences
never contain ASCII bytes, so offsets are exact even for invalid input.

Languages differ in whether block comments nest and in what a single quote or
a backtick opens; :func:`dialect_for_path` picks those settings by suffix.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePath
from typing import Literal

from lexlint.models import LexicalSpan, SpanKind

WHITESPACE_BYTES = frozenset(b" \t\r\n\f\v")
NEWLINE = 0x0A
CARRIAGE_RETURN = 0x0D
QUOTE = 0x22
APOSTROPHE = 0x27
BACKTICK = 0x60
BACKSLASH = 0x5C
MAX_CHAR_ESCAPE_BYTES = 12

# "string": '...' behaves like "..." (JavaScript, Dart).
# "char": only a complete character literal such as 'a' or '\n' (C, Java, Rust);
#         anything else, e.g. a Rust lifetime, stays code.
# "none": the apostrophe has no lexical meaning (Swift).
SingleQuoteMode = Literal["string", "char", "none"]
# "escaped": JavaScript template literals; "raw": Go raw strings.
BacktickMode = Literal["escaped", "raw", "none"]


@dataclass(frozen=True, slots=True)
class Dialect:
    nested_block_comments: bool = True
    single_quote: SingleQuoteMode = "none"
    backtick: BacktickMode = "none"


SWIFT = Dialect(nested_block_comments=True, single_quote="none")
C_FAMILY = Dialect(nested_block_comments=False, single_quote="char")
JAVASCRIPT = Dialect(nested_block_comments=False, single_quote="string", backtick="escaped")
GO = Dialect(nested_block_comments=False, single_quote="char", backtick="raw")
NESTING_CHAR = Dialect(nested_block_comments=True, single_quote="char")
DART = Dialect(nested_block_comments=True, single_quote="string")

DIALECTS_BY_SUFFIX: dict[str, Dialect] = {
    ".swift": SWIFT,
    ".c": C_FAMILY,
    ".h": C_FAMILY,
    ".m": C_FAMILY,
    ".mm": C_FAMILY,
    ".cpp": C_FAMILY,
    ".hpp": C_FAMILY,
    ".cc": C_FAMILY,
    ".cs": C_FAMILY,
    ".java": C_FAMILY,
    ".go": GO,
    ".js": JAVASCRIPT,
    ".jsx": JAVASCRIPT,
    ".ts": JAVASCRIPT,
    ".tsx": JAVASCRIPT,
    # Rust, Kotlin and Scala nest block comments and have character literals.
    ".rs": NESTING_CHAR,
    ".kt": NESTING_CHAR,
    ".kts": NESTING_CHAR,
    ".scala": NESTING_CHAR,
    ".dart": DART,
}


def dialect_for_path(path: str) -> Dialect:
    return DIALECTS_BY_SUFFIX.get(PurePath(path).suffix.lower(), SWIFT)


def tokenize(data: bytes, dialect: Dialect = SWIFT) -> list[LexicalSpan]:
    spans: list[LexicalSpan] = []
    size = len(data)
    pos = 0
    code_start: int | None = None

    while pos < size:
        byte = data[pos]
        end: int | None = None
        kind: SpanKind | None = None
        if data.startswith(b"//", pos):
            end = _line_comment_end(data, pos)
            kind = _line_comment_kind(data, pos)
        elif data.startswith(b"/*", pos):
            end = _block_comment_end(data, pos, dialect.nested_block_comments)
            kind = "doc_block_comment" if _is_doc_block_opener(data, pos) else "block_comment"
        elif data.startswith(b'"""', pos):
            closing = data.find(b'"""', pos + 3)
            end = size if closing == -1 else closing + 3
            kind = "string"
        elif byte == QUOTE:
            end = _quoted_end(data, pos, QUOTE)
            kind = "string"
        elif byte == APOSTROPHE and dialect.single_quote == "string":
            end = _quoted_end(data, pos, APOSTROPHE)
            kind = "string"
        elif byte == APOSTROPHE and dialect.single_quote == "char":
            end = _char_literal_end(data, pos)
            kind = "string" if end is not None else None
        elif byte == BACKTICK and dialect.backtick != "none":
            end = _quoted_end(data, pos, BACKTICK, escapes=dialect.backtick == "escaped", multiline=True)
            kind = "string"

        if kind is not None and end is not None:
            _flush_code(spans, code_start, pos)
            code_start = None
            spans.append(LexicalSpan(kind=kind, offset=pos, length=end - pos))
            pos = end
            continue

        if byte in WHITESPACE_BYTES:
            _flush_code(spans, code_start, pos)
            code_start = None
        elif code_start is None:
            code_start = pos
        pos += 1

    _flush_code(spans, code_start, size)
    return spans


def _flush_code(spans: list[LexicalSpan], start: int | None, end: int) -> None:
    if start is not None and end > start:
        spans.append(LexicalSpan(kind="code", offset=start, length=end - start))


def _line_comment_kind(data: bytes, start: int) -> SpanKind:
    if data.startswith(b"///", start) and not data.startswith(b"////", start):
        return "doc_comment"
    return "comment"


def _line_comment_end(data: bytes, start: int) -> int:
    end = data.find(b"\n", start)
    if end == -1:
        end = len(data)
    if end > start and data[end - 1] == CARRIAGE_RETURN:
        end -= 1
    return end


def _is_doc_block_opener(data: bytes, start: int) -> bool:
    return data.startswith(b"/**", start) and not data.startswith(b"/**/", start)


def _block_comment_end(data: bytes, start: int, nested: bool) -> int:
    if not nested:
        closing = data.find(b"*/", start + 2)
        return len(data) if closing == -1 else closing + 2

    depth = 0
    pos = start
    size = len(data)
    while pos < size:
        if data.startswith(b"/*", pos):
            depth += 1
            pos += 2
            continue
        if data.startswith(b"*/", pos):
            depth -= 1
            pos += 2
            if depth == 0:
                return pos
            continue
        pos += 1
    return size


def _quoted_end(data: bytes, start: int, quote: int, escapes: bool = True, multiline: bool = False) -> int:
    pos = start + 1
    size = len(data)
    while pos < size:
        byte = data[pos]
        if escapes and byte == BACKSLASH:
            pos += 2
            continue
        if byte == quote:
            return pos + 1
        if byte == NEWLINE and not multiline:
            return pos
        pos += 1
    return size


def _char_literal_end(data: bytes, start: int) -> int | None:
    pos = start + 1
    size = len(data)
    if pos >= size or data[pos] in (NEWLINE, APOSTROPHE):
        return None
    if data[pos] == BACKSLASH:
        # '\n', '\'', '\x41', '\u{1F600}'
        limit = min(size, pos + MAX_CHAR_ESCAPE_BYTES)
        pos += 2
        while pos < limit:
            if data[pos] == APOSTROPHE:
                return pos + 1
            if data[pos] == NEWLINE:
                return None
            pos += 1
        return None
    pos += _utf8_width(data[pos])
    if pos < size and data[pos] == APOSTROPHE:
        return pos + 1
    return None


def _utf8_width(lead: int) -> int:
    if lead >= 0xF0:
        return 4
    if lead >= 0xE0:
        return 3
    if lead >= 0xC0:
        return 2
    return 1
