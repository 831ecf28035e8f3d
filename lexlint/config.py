from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
try:
    import tomllib
except ModuleNotFoundError:  # pragma: no cover
    import tomli as tomllib

from lexlint.models import SEVERITY_ORDER, Severity
from lexlint.rules import rule_identifiers


DEFAULT_EXCLUDES = [".git", ".build", "build", "DerivedData", "Pods", "Carthage", "node_modules"]
DEFAULT_INCLUDE_EXTENSIONS = [
    ".swift",
    ".c",
    ".h",
    ".m",
    ".mm",
    ".cpp",
    ".hpp",
    ".cc",
    ".cs",
    ".java",
    ".kt",
    ".kts",
    ".go",
    ".rs",
    ".js",
    ".jsx",
    ".ts",
    ".tsx",
    ".scala",
    ".dart",
]
DEFAULT_CONFIG_NAME = "lexlint.toml"
REPORT_FORMATS = ("text", "json", "sarif")


@dataclass(slots=True)
class ScanConfig:
    exclude: list[str] = field(default_factory=lambda: DEFAULT_EXCLUDES.copy())
    include_extensions: list[str] = field(default_factory=lambda: DEFAULT_INCLUDE_EXTENSIONS.copy())
    max_file_size_kb: int = 1024
    enabled_rules: list[str] | None = None
    disabled_rules: list[str] = field(default_factory=list)
    inline_ignore: bool = True
    jobs: int = 1


@dataclass(slots=True)
class QualityGateConfig:
    fail_on: Severity | None = None
    max_violations: int | None = None
    max_warning: int | None = None
    max_error: int | None = None


@dataclass(slots=True)
class ReportConfig:
    output_format: str = "text"
    out: str | None = None


@dataclass(slots=True)
class Config:
    scan: ScanConfig = field(default_factory=ScanConfig)
    rule_severities: dict[str, Severity] = field(default_factory=dict)
    quality_gate: QualityGateConfig = field(default_factory=QualityGateConfig)
    report: ReportConfig = field(default_factory=ReportConfig)


def load_config(path: str | None) -> Config:
    if path is None:
        default = Path(DEFAULT_CONFIG_NAME)
        if not default.exists():
            return Config()
        path = str(default)

    cfg_path = Path(path)
    if not cfg_path.exists():
        raise FileNotFoundError(f"Config file not found: {cfg_path}")

    with cfg_path.open("rb") as fh:
        payload = tomllib.load(fh)
    return config_from_dict(payload)


def config_from_dict(payload: dict) -> Config:
    scan = payload.get("scan", {})
    rules = payload.get("rules", {})
    quality_gate = payload.get("quality_gate", {})
    report = payload.get("report", {})

    config = Config()
    config.scan.exclude = list(scan.get("exclude", config.scan.exclude))
    config.scan.include_extensions = list(scan.get("include_extensions", config.scan.include_extensions))
    config.scan.max_file_size_kb = int(scan.get("max_file_size_kb", config.scan.max_file_size_kb))
    enabled_rules = scan.get("enabled_rules")
    config.scan.enabled_rules = [str(rule).lower() for rule in enabled_rules] if enabled_rules is not None else None
    config.scan.disabled_rules = [str(rule).lower() for rule in scan.get("disabled_rules", config.scan.disabled_rules)]
    config.scan.inline_ignore = bool(scan.get("inline_ignore", config.scan.inline_ignore))
    config.scan.jobs = int(scan.get("jobs", config.scan.jobs))
    for rule_id, value in rules.items():
        # Accept both `rule = "error"` and `[rules.rule] severity = "error"`.
        severity = value.get("severity") if isinstance(value, dict) else value
        if severity is not None:
            config.rule_severities[str(rule_id).lower()] = str(severity).lower()
    config.quality_gate.fail_on = quality_gate.get("fail_on")
    config.quality_gate.max_violations = quality_gate.get("max_violations")
    config.quality_gate.max_warning = quality_gate.get("max_warning")
    config.quality_gate.max_error = quality_gate.get("max_error")
    config.report.output_format = report.get("format", config.report.output_format)
    config.report.out = report.get("out")
    return config


def validate_config(config: Config) -> list[str]:
    errors: list[str] = []
    known_rules = set(rule_identifiers())
    severities = ", ".join(SEVERITY_ORDER)

    for rule_id, severity in sorted(config.rule_severities.items()):
        if rule_id not in known_rules:
            errors.append(f"unknown rule '{rule_id}' in rules table")
        if severity not in SEVERITY_ORDER:
            errors.append(f"severity for '{rule_id}' must be one of: {severities}")

    for rule_id in [*(config.scan.enabled_rules or []), *config.scan.disabled_rules]:
        if rule_id not in known_rules:
            errors.append(f"unknown rule '{rule_id}' in enabled_rules/disabled_rules")
    if config.scan.enabled_rules is not None and len(config.scan.enabled_rules) == 0:
        errors.append("enabled_rules must be non-empty when set")
    if config.scan.jobs < 1:
        errors.append("jobs must be >= 1")

    if config.quality_gate.fail_on is not None and config.quality_gate.fail_on not in SEVERITY_ORDER:
        errors.append(f"fail_on must be one of: {severities}")
    numeric_gate_values: list[tuple[str, int | None]] = [
        ("max_violations", config.quality_gate.max_violations),
        ("max_warning", config.quality_gate.max_warning),
        ("max_error", config.quality_gate.max_error),
    ]
    for gate_name, value in numeric_gate_values:
        if value is not None and value < 0:
            errors.append(f"{gate_name} must be >= 0")

    if config.report.output_format not in REPORT_FORMATS:
        errors.append(f"report format must be one of: {', '.join(REPORT_FORMATS)}")
    return errors
