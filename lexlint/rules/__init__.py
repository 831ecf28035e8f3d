from lexlint.rules.base import Rule, RuleDescription, SeverityConfiguration
from lexlint.rules.comment_spacing import CommentSpacingRule
from lexlint.rules.registry import RULE_TYPES, build_rules, rule_identifiers

__all__ = [
    "Rule",
    "RuleDescription",
    "SeverityConfiguration",
    "CommentSpacingRule",
    "RULE_TYPES",
    "build_rules",
    "rule_identifiers",
]
