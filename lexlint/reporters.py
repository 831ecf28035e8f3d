from __future__ import annotations

from collections import Counter
import json
from pathlib import Path
from typing import Any

from lexlint import __version__
from lexlint.models import ScanResult, Violation


def _violation_to_dict(violation: Violation) -> dict[str, Any]:
    return {
        "rule_id": violation.rule_id,
        "title": violation.title,
        "severity": violation.severity,
        "message": violation.message,
        "file_path": violation.location.file_path,
        "byte_offset": violation.location.byte_offset,
        "line": violation.location.line,
        "column": violation.location.column,
    }


def to_text_report(result: ScanResult) -> str:
    lines = [
        f"{v.location.file_path}:{v.location.line}:{v.location.column}: "
        f"{v.severity}: {v.title} Violation: {v.message} ({v.rule_id})"
        for v in result.violations
    ]
    return "\n".join(lines)


def to_json_report(result: ScanResult) -> dict[str, Any]:
    counts = Counter(violation.severity for violation in result.violations)
    rule_counts = Counter(violation.rule_id for violation in result.violations)
    files_with_violations = len({violation.location.file_path for violation in result.violations})
    return {
        "files_scanned": result.files_scanned,
        "files_with_violations": files_with_violations,
        "violations_total": len(result.violations),
        "severity_counts": {
            "warning": counts.get("warning", 0),
            "error": counts.get("error", 0),
        },
        "rule_counts": dict(sorted(rule_counts.items())),
        "violations": [_violation_to_dict(violation) for violation in result.violations],
    }


def to_sarif_report(result: ScanResult) -> dict[str, Any]:
    sarif_results: list[dict[str, Any]] = []
    for violation in result.violations:
        sarif_results.append(
            {
                "ruleId": violation.rule_id,
                "level": violation.severity,
                "message": {"text": f"{violation.title}: {violation.message}"},
                "locations": [
                    {
                        "physicalLocation": {
                            "artifactLocation": {"uri": violation.location.file_path},
                            "region": {
                                "startLine": violation.location.line,
                                "startColumn": violation.location.column,
                                "byteOffset": violation.location.byte_offset,
                            },
                        }
                    }
                ],
            }
        )

    return {
        "$schema": "https://json.schemastore.org/sarif-2.1.0.json",
        "version": "2.1.0",
        "runs": [
            {
                "tool": {"driver": {"name": "lexlint", "version": __version__}},
                "results": sarif_results,
            }
        ],
    }


def render_report(result: ScanResult, output_format: str) -> str:
    if output_format == "text":
        return to_text_report(result)
    if output_format == "json":
        return json.dumps(to_json_report(result), indent=2)
    if output_format == "sarif":
        return json.dumps(to_sarif_report(result), indent=2)
    raise ValueError(f"Unsupported report format: {output_format}")


def write_report(rendered: str, out: str | None) -> None:
    if out is None:
        if rendered:
            print(rendered)
        return
    output_path = Path(out)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(rendered + "\n" if rendered else "", encoding="utf-8")
