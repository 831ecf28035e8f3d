from __future__ import annotations

from collections import Counter

from lexlint.models import SEVERITY_ORDER, ScanResult, Severity


def evaluate_gate(
    result: ScanResult,
    fail_on: Severity | None = None,
    max_violations: int | None = None,
    max_warning: int | None = None,
    max_error: int | None = None,
) -> tuple[bool, list[str]]:
    failed_reasons: list[str] = []
    severity_counts = Counter(violation.severity for violation in result.violations)

    if fail_on is not None:
        threshold = SEVERITY_ORDER[fail_on]
        if any(SEVERITY_ORDER[violation.severity] >= threshold for violation in result.violations):
            failed_reasons.append(f"Detected violation severity >= '{fail_on}'")

    if max_violations is not None and len(result.violations) > max_violations:
        failed_reasons.append(f"Violation count {len(result.violations)} exceeds max_violations={max_violations}")

    per_severity_limits: dict[Severity, int | None] = {
        "warning": max_warning,
        "error": max_error,
    }
    for severity, limit in per_severity_limits.items():
        if limit is not None and severity_counts.get(severity, 0) > limit:
            failed_reasons.append(
                f"{severity} violation count {severity_counts[severity]} exceeds max_{severity}={limit}"
            )

    return (len(failed_reasons) == 0, failed_reasons)
