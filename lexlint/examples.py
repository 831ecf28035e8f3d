"""Checks a rule against the examples embedded in its description.

Triggering examples mark every expected violation with ``↓`` placed directly
before the offending character.
"""

from __future__ import annotations

from lexlint.rules.base import Rule
from lexlint.source import SourceFile

VIOLATION_MARKER = "↓"


def parse_example(example: str) -> tuple[str, list[int]]:
    """Strip markers from ``example`` and return the byte offsets they marked."""
    pieces = example.split(VIOLATION_MARKER)
    offsets: list[int] = []
    cursor = 0
    for piece in pieces[:-1]:
        cursor += len(piece.encode("utf-8"))
        offsets.append(cursor)
    return "".join(pieces), offsets


def violation_offsets(rule: Rule, text: str) -> list[int]:
    source = SourceFile.from_text(text, path="<example>")
    return [violation.location.byte_offset for violation in rule.validate(source)]


def verify_rule_examples(rule: Rule) -> list[str]:
    failures: list[str] = []
    identifier = rule.description.identifier
    for example in rule.description.non_triggering_examples:
        text, _ = parse_example(example)
        found = violation_offsets(rule, text)
        if found:
            failures.append(f"{identifier}: non-triggering example {text!r} produced violations at {found}")
    for example in rule.description.triggering_examples:
        text, expected = parse_example(example)
        if not expected:
            failures.append(f"{identifier}: triggering example {text!r} has no {VIOLATION_MARKER} marker")
            continue
        found = violation_offsets(rule, text)
        if found != expected:
            failures.append(f"{identifier}: triggering example {text!r} expected {expected}, got {found}")
    return failures
