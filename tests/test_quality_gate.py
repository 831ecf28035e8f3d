from __future__ import annotations

import unittest

from lexlint.models import Location, ScanResult, Violation
from lexlint.quality_gate import evaluate_gate


def _violation(severity: str, offset: int = 2) -> Violation:
    return Violation(
        rule_id="comment_spacing",
        title="Comment Spacing",
        severity=severity,  # type: ignore[arg-type]
        message="m",
        location=Location("a.swift", offset, 1, offset + 1),
    )


class QualityGateTests(unittest.TestCase):
    def test_passes_without_limits(self) -> None:
        result = ScanResult(violations=[_violation("error")], files_scanned=1)
        self.assertEqual(evaluate_gate(result), (True, []))

    def test_fail_on_threshold(self) -> None:
        warnings_only = ScanResult(violations=[_violation("warning")], files_scanned=1)

        passed, _ = evaluate_gate(warnings_only, fail_on="error")
        self.assertTrue(passed)

        passed, reasons = evaluate_gate(warnings_only, fail_on="warning")
        self.assertFalse(passed)
        self.assertIn("Detected violation severity >= 'warning'", reasons)

    def test_count_limits(self) -> None:
        result = ScanResult(
            violations=[_violation("warning", 2), _violation("warning", 9), _violation("error", 20)],
            files_scanned=1,
        )

        passed, reasons = evaluate_gate(result, max_violations=2, max_warning=1, max_error=1)

        self.assertFalse(passed)
        self.assertEqual(len(reasons), 2)
        self.assertTrue(any("max_violations=2" in reason for reason in reasons))
        self.assertTrue(any("max_warning=1" in reason for reason in reasons))


if __name__ == "__main__":
    unittest.main()
