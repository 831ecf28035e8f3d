from __future__ import annotations

from lexlint.models import Severity
from lexlint.rules.base import Rule
from lexlint.rules.comment_spacing import CommentSpacingRule

RULE_TYPES: tuple[type[Rule], ...] = (CommentSpacingRule,)


def rule_identifiers() -> list[str]:
    return [rule_type.description.identifier for rule_type in RULE_TYPES]


def build_rules(
    severities: dict[str, Severity] | None = None,
    enabled_rules: list[str] | None = None,
    disabled_rules: list[str] | None = None,
) -> list[Rule]:
    """Instantiate every registered rule that survives the enable/disable filters.

    Raises ``ValueError`` for an unknown rule id in ``severities`` or an
    invalid severity value.
    """
    severities = severities or {}
    known = set(rule_identifiers())
    unknown = sorted(set(severities) - known)
    if unknown:
        raise ValueError(f"Unknown rule identifier(s): {', '.join(unknown)}")

    enabled = set(enabled_rules) if enabled_rules is not None else None
    disabled = set(disabled_rules or [])
    rules: list[Rule] = []
    for rule_type in RULE_TYPES:
        identifier = rule_type.description.identifier
        if identifier in disabled:
            continue
        if enabled is not None and identifier not in enabled:
            continue
        severity = severities.get(identifier)
        rules.append(rule_type(severity) if severity is not None else rule_type())
    return rules
