from __future__ import annotations

from collections.abc import Iterable
import logging
from typing import ClassVar

from lexlint.models import LexicalSpan, PatternMatch, Severity, Violation
from lexlint.rules.base import RuleDescription, SeverityConfiguration
from lexlint.source import SourceFile

logger = logging.getLogger(__name__)

COMMENT_KINDS = frozenset({"comment", "doc_comment"})
MIN_SLASHES = 2
MAX_SLASHES = 3
# Information separators pass str.isspace() but do not count as spacing.
NON_SPACE_SEPARATORS = frozenset("\x1c\x1d\x1e\x1f")


def select_comment_spans(spans: Iterable[LexicalSpan]) -> list[LexicalSpan]:
    return [span for span in spans if span.kind in COMMENT_KINDS]


def match_comment_spacing(text: str) -> PatternMatch | None:
    """Test ``text`` for a 2-3 slash run glued to its first character.

    Only position 0 is considered. With four or more leading slashes every
    candidate run is followed by another slash, so nothing matches.
    """
    slashes = len(text) - len(text.lstrip("/"))
    if slashes < MIN_SLASHES or slashes > MAX_SLASHES or slashes == len(text):
        return None
    offending = text[slashes]
    if offending.isspace() and offending not in NON_SPACE_SEPARATORS:
        return None
    width = len(offending.encode("utf-8"))
    return PatternMatch(start=0, end=slashes + width, offending_width=width)


class CommentSpacingRule:
    description: ClassVar[RuleDescription] = RuleDescription(
        identifier="comment_spacing",
        name="Comment Spacing",
        description="Prefer at least one space after slashes for comments.",
        kind="lint",
        non_triggering_examples=(
            "// This is a comment",
            "/// Triple slash comment",
            "// Multiline double-slash\n// comment",
            "/// Multiline triple-slash\n/// comment",
            "/// Multiline triple-slash\n///   - This is indented",
            "// - MARK: Mark comment",
            "/* Asterisk comment */",
            "/*\n    Multiline asterisk comment\n*/",
            "//// Four slashes are left alone",
            "////Even without a space",
            "//",
            'let url = "http://example.com"',
        ),
        triggering_examples=(
            "//↓Something",
            "//↓MARK",
            "//↓👨‍👨‍👦‍👦Something",
            "func a() {\n"
            "    //↓This needs refactoring\n"
            "    print(\"Something\")\n"
            "}\n"
            "//↓We should improve above function",
            "///↓This is a comment",
            "/// Multiline triple-slash\n///↓This line is incorrect, though",
            "//↓- MARK: Mark comment",
        ),
    )

    def __init__(self, severity: Severity = "warning") -> None:
        self.configuration = SeverityConfiguration(severity)

    def validate(self, file: SourceFile) -> list[Violation]:
        violations: list[Violation] = []
        for span in select_comment_spans(file.spans):
            text = file.span_text(span)
            if text is None:
                logger.debug(
                    "Skipping span %d+%d in %s: byte range does not resolve", span.offset, span.length, file.path
                )
                continue
            match = match_comment_spacing(text)
            if match is None:
                continue
            violations.append(self._make_violation(file, span.offset + match.offending_offset))
        return violations

    def _make_violation(self, file: SourceFile, byte_offset: int) -> Violation:
        return Violation(
            rule_id=self.description.identifier,
            title=self.description.name,
            severity=self.configuration.severity,
            message=self.description.description,
            location=file.location(byte_offset),
        )
