from __future__ import annotations

import argparse
from collections import Counter
import logging
import sys

from lexlint import __version__
from lexlint.config import REPORT_FORMATS, Config, load_config, validate_config
from lexlint.models import SEVERITY_ORDER, ScanResult
from lexlint.quality_gate import evaluate_gate
from lexlint.reporters import render_report, write_report
from lexlint.rules import build_rules
from lexlint.scanner import scan_path


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="lexlint", description="Lexical style checks for slash-comment languages.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging on stderr.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    scan = subparsers.add_parser("scan", help="Lint files under a path.")
    scan.add_argument("path", nargs="?", default=".", help="File or directory to lint.")
    scan.add_argument("--config", help="Path to lexlint TOML config.")
    scan.add_argument("--exclude", action="append", default=[], help="Extra exclude directory names.")
    scan.add_argument("--include-ext", action="append", default=[], help="Extension to include (repeatable).")
    scan.add_argument("--enable-rule", action="append", default=[], help="Only run specific rule identifiers.")
    scan.add_argument("--disable-rule", action="append", default=[], help="Disable specific rule identifiers.")
    scan.add_argument(
        "--severity",
        action="append",
        default=[],
        metavar="RULE=LEVEL",
        help="Override a rule's severity, e.g. comment_spacing=error (repeatable).",
    )
    scan.add_argument("--no-inline-ignore", action="store_true", help="Disable lexlint:ignore comments.")
    scan.add_argument("--max-file-size-kb", type=int, help="Skip files larger than this size in KB.")
    scan.add_argument("--jobs", type=int, help="Number of files linted in parallel.")
    scan.add_argument("--format", choices=list(REPORT_FORMATS), help="Report output format.")
    scan.add_argument("--out", help="Write report to file. Defaults to stdout.")
    scan.add_argument("--fail-on", choices=list(SEVERITY_ORDER), help="Fail on severity level.")
    scan.add_argument("--max-violations", type=int, help="Fail if violation count exceeds this number.")
    scan.add_argument("--max-warning", type=int, help="Maximum allowed warnings.")
    scan.add_argument("--max-error", type=int, help="Maximum allowed errors.")

    rules = subparsers.add_parser("rules", help="List available rules.")
    rules.add_argument("--config", help="Path to lexlint TOML config.")

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    if args.command == "scan":
        raise SystemExit(run_scan(args))
    if args.command == "rules":
        raise SystemExit(run_rules(args))


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def run_scan(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    try:
        merged = merge_cli_with_config(args, config)
    except ValueError as exc:
        print(f"[config] {exc}", file=sys.stderr)
        return 2
    errors = validate_config(merged)
    if errors:
        for error in errors:
            print(f"[config] {error}", file=sys.stderr)
        return 2

    rules = build_rules(
        merged.rule_severities,
        enabled_rules=merged.scan.enabled_rules,
        disabled_rules=merged.scan.disabled_rules,
    )
    result = scan_path(
        args.path,
        rules=rules,
        excludes=merged.scan.exclude,
        include_extensions=merged.scan.include_extensions,
        max_file_size_kb=merged.scan.max_file_size_kb,
        inline_ignore=merged.scan.inline_ignore,
        jobs=merged.scan.jobs,
    )
    write_report(render_report(result, merged.report.output_format), merged.report.out)
    print_summary(result)

    passed, reasons = evaluate_gate(
        result,
        fail_on=merged.quality_gate.fail_on,
        max_violations=merged.quality_gate.max_violations,
        max_warning=merged.quality_gate.max_warning,
        max_error=merged.quality_gate.max_error,
    )
    if not passed:
        for reason in reasons:
            print(f"[gate] {reason}", file=sys.stderr)
        return 2
    return 0


def run_rules(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    errors = validate_config(config)
    if errors:
        for error in errors:
            print(f"[config] {error}", file=sys.stderr)
        return 2
    for rule in build_rules(config.rule_severities):
        description = rule.description
        print(
            f"{description.identifier}\t{description.name}\t{description.kind}\t"
            f"{rule.configuration.severity}\t{description.description}"
        )
    return 0


def merge_cli_with_config(args: argparse.Namespace, config: Config) -> Config:
    merged = config
    if args.exclude:
        merged.scan.exclude = list(dict.fromkeys([*merged.scan.exclude, *args.exclude]))
    if args.include_ext:
        merged.scan.include_extensions = list(dict.fromkeys([*merged.scan.include_extensions, *args.include_ext]))
    if args.enable_rule:
        merged.scan.enabled_rules = list(
            dict.fromkeys([*(merged.scan.enabled_rules or []), *(rule.lower() for rule in args.enable_rule)])
        )
    if args.disable_rule:
        merged.scan.disabled_rules = list(
            dict.fromkeys([*merged.scan.disabled_rules, *(rule.lower() for rule in args.disable_rule)])
        )
    for override in args.severity:
        rule_id, sep, level = override.partition("=")
        if not sep or not rule_id.strip() or not level.strip():
            raise ValueError(f"--severity expects RULE=LEVEL, got '{override}'")
        merged.rule_severities[rule_id.strip().lower()] = level.strip().lower()
    if args.no_inline_ignore:
        merged.scan.inline_ignore = False
    if args.max_file_size_kb is not None:
        merged.scan.max_file_size_kb = args.max_file_size_kb
    if args.jobs is not None:
        merged.scan.jobs = args.jobs
    if args.format:
        merged.report.output_format = args.format
    if args.out:
        merged.report.out = args.out
    if args.fail_on:
        merged.quality_gate.fail_on = args.fail_on
    if args.max_violations is not None:
        merged.quality_gate.max_violations = args.max_violations
    if args.max_warning is not None:
        merged.quality_gate.max_warning = args.max_warning
    if args.max_error is not None:
        merged.quality_gate.max_error = args.max_error
    return merged


def print_summary(result: ScanResult) -> None:
    counts = Counter(violation.severity for violation in result.violations)
    print(
        f"[summary] files={result.files_scanned} violations={len(result.violations)} "
        f"warning={counts.get('warning', 0)} error={counts.get('error', 0)}",
        file=sys.stderr,
    )


if __name__ == "__main__":
    main()
