from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Protocol, runtime_checkable

from lexlint.models import SEVERITY_ORDER, Severity, Violation
from lexlint.source import SourceFile


@dataclass(frozen=True, slots=True)
class RuleDescription:
    identifier: str
    name: str
    description: str
    kind: str = "lint"
    non_triggering_examples: tuple[str, ...] = field(default_factory=tuple)
    triggering_examples: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class SeverityConfiguration:
    severity: Severity = "warning"

    def __post_init__(self) -> None:
        if self.severity not in SEVERITY_ORDER:
            allowed = ", ".join(SEVERITY_ORDER)
            raise ValueError(f"Invalid severity '{self.severity}'; expected one of: {allowed}")


@runtime_checkable
class Rule(Protocol):
    description: ClassVar[RuleDescription]
    configuration: SeverityConfiguration

    def validate(self, file: SourceFile) -> list[Violation]: ...
