from __future__ import annotations

import unittest

from lexlint.models import LexicalSpan
from lexlint.rules.comment_spacing import CommentSpacingRule, match_comment_spacing, select_comment_spans
from lexlint.source import SourceFile


def _single_span_file(text: str, kind: str = "comment", prefix: bytes = b"") -> tuple[SourceFile, LexicalSpan]:
    body = text.encode("utf-8")
    span = LexicalSpan(kind=kind, offset=len(prefix), length=len(body))
    return SourceFile(prefix + body, path="sample.swift", spans=[span]), span


def _offsets(file: SourceFile, rule: CommentSpacingRule | None = None) -> list[int]:
    rule = rule or CommentSpacingRule()
    return [violation.location.byte_offset for violation in rule.validate(file)]


class SpanSelectorTests(unittest.TestCase):
    def test_keeps_line_and_doc_comments_in_source_order(self) -> None:
        spans = [
            LexicalSpan("code", 0, 3),
            LexicalSpan("doc_comment", 4, 10),
            LexicalSpan("block_comment", 15, 8),
            LexicalSpan("string", 24, 5),
            LexicalSpan("comment", 30, 6),
            LexicalSpan("doc_block_comment", 37, 9),
            LexicalSpan("comment", 47, 4),
        ]

        selected = select_comment_spans(spans)

        self.assertEqual(selected, [spans[1], spans[4], spans[6]])

    def test_empty_input(self) -> None:
        self.assertEqual(select_comment_spans([]), [])


class PatternTests(unittest.TestCase):
    def test_two_or_three_slashes_glued_to_text_match(self) -> None:
        for slashes in (2, 3):
            for follower in ("a", "-", "*", "1", "é", "👨"):
                with self.subTest(slashes=slashes, follower=follower):
                    match = match_comment_spacing("/" * slashes + follower + " rest")
                    self.assertIsNotNone(match)
                    assert match is not None
                    self.assertEqual(match.start, 0)
                    self.assertEqual(match.offending_offset, slashes)

    def test_four_or_more_slashes_never_match(self) -> None:
        for slashes in range(4, 9):
            for follower in ("a", " ", "-", ""):
                with self.subTest(slashes=slashes, follower=follower):
                    self.assertIsNone(match_comment_spacing("/" * slashes + follower))

    def test_whitespace_or_end_of_text_after_slashes_is_fine(self) -> None:
        for slashes in (2, 3):
            for follower in (" ", "\t", "\u00a0", "\u3000", ""):
                with self.subTest(slashes=slashes, follower=repr(follower)):
                    self.assertIsNone(match_comment_spacing("/" * slashes + follower))

    def test_match_is_anchored_at_start(self) -> None:
        self.assertIsNone(match_comment_spacing(" //x"))
        self.assertIsNone(match_comment_spacing("a//x"))
        self.assertIsNone(match_comment_spacing("/x"))
        self.assertIsNone(match_comment_spacing("/* //x */"))

    def test_match_range_covers_multibyte_character(self) -> None:
        match = match_comment_spacing("//👨x")

        assert match is not None
        self.assertEqual(match.end, 6)
        self.assertEqual(match.offending_width, 4)
        self.assertEqual(match.offending_offset, 2)

    def test_information_separators_are_not_spacing(self) -> None:
        for separator in ("\x1c", "\x1d", "\x1e", "\x1f"):
            with self.subTest(separator=repr(separator)):
                match = match_comment_spacing("//" + separator + "x")

                assert match is not None
                self.assertEqual(match.offending_offset, 2)
                self.assertEqual(match.offending_width, 1)


class CommentSpacingRuleTests(unittest.TestCase):
    def test_double_slash_without_space(self) -> None:
        file, span = _single_span_file("//Something", prefix=b"let a = 1\n")
        self.assertEqual(_offsets(file), [span.offset + 2])

    def test_triple_slash_with_space(self) -> None:
        file, _ = _single_span_file("/// This is fine", kind="doc_comment")
        self.assertEqual(_offsets(file), [])

    def test_triple_slash_without_space(self) -> None:
        file, span = _single_span_file("///This is wrong", kind="doc_comment", prefix=b"   ")
        self.assertEqual(_offsets(file), [span.offset + 3])

    def test_mark_comment_with_space(self) -> None:
        file, _ = _single_span_file("// - MARK: Mark comment")
        self.assertEqual(_offsets(file), [])

    def test_mark_comment_without_space(self) -> None:
        file, span = _single_span_file("//- MARK: Mark comment")
        self.assertEqual(_offsets(file), [span.offset + 2])

    def test_two_spans_report_in_source_order(self) -> None:
        data = b"//A" + b" " * 7 + b"x" * 10 + b"//B" + b" " * 7
        spans = [LexicalSpan("comment", 0, 10), LexicalSpan("code", 10, 10), LexicalSpan("comment", 20, 10)]
        file = SourceFile(data, path="two.swift", spans=spans)

        self.assertEqual(_offsets(file), [2, 22])

    def test_block_comment_kind_is_never_checked(self) -> None:
        file, _ = _single_span_file("//looks like a line comment", kind="block_comment")
        self.assertEqual(_offsets(file), [])

    def test_unresolvable_spans_are_skipped(self) -> None:
        data = "//é".encode("utf-8")
        spans = [
            LexicalSpan("comment", 100, 4),
            LexicalSpan("comment", 0, 3),
        ]
        file = SourceFile(data, path="broken.swift", spans=spans)

        self.assertEqual(CommentSpacingRule().validate(file), [])

    def test_bad_span_does_not_hide_later_violations(self) -> None:
        data = b"//ok //x"
        spans = [LexicalSpan("comment", 6, 50), LexicalSpan("comment", 5, 3)]
        file = SourceFile(data, path="mixed.swift", spans=spans)

        self.assertEqual(_offsets(file), [7])

    def test_offset_points_at_multibyte_character_start(self) -> None:
        file, span = _single_span_file("//👨‍👨‍👦‍👦Something", prefix="é\n".encode("utf-8"))
        self.assertEqual(_offsets(file), [span.offset + 2])

    def test_violation_carries_metadata_and_location(self) -> None:
        file = SourceFile.from_text("let a = 1\n    //x\n", path="Sources/App.swift")

        violations = CommentSpacingRule(severity="error").validate(file)

        self.assertEqual(len(violations), 1)
        violation = violations[0]
        self.assertEqual(violation.rule_id, "comment_spacing")
        self.assertEqual(violation.title, "Comment Spacing")
        self.assertEqual(violation.message, "Prefer at least one space after slashes for comments.")
        self.assertEqual(violation.severity, "error")
        self.assertEqual(violation.location.file_path, "Sources/App.swift")
        self.assertEqual(violation.location.byte_offset, 16)
        self.assertEqual(violation.location.line, 2)
        self.assertEqual(violation.location.column, 7)

    def test_default_severity_is_warning(self) -> None:
        self.assertEqual(CommentSpacingRule().configuration.severity, "warning")

    def test_invalid_severity_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            CommentSpacingRule(severity="fatal")  # type: ignore[arg-type]

    def test_tokenized_file_end_to_end(self) -> None:
        code = (
            "func a() {\n"
            "    //This needs refactoring\n"
            "    print(\"//not a comment\")\n"
            "}\n"
            "/* //inside */\n"
            "//We should improve\n"
        )
        file = SourceFile.from_text(code, path="a.swift")

        violations = CommentSpacingRule().validate(file)

        self.assertEqual([(v.location.line, v.location.column) for v in violations], [(2, 7), (6, 3)])


if __name__ == "__main__":
    unittest.main()
